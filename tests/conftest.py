from typing import Any, Dict

import pytest

from medlearn.core.entities.exercise import Exercise, Question
from medlearn.core.entities.result import ExerciseResult
from medlearn.core.entities.user import CurrentUser
from medlearn.core.enums import ExerciseType, UserRole
from medlearn.core.services.grading import build_result


@pytest.fixture
def exercise() -> Exercise:
    return Exercise(
        exercise_id=1,
        title='Cardiology basics',
        description='Heart anatomy and physiology',
        exercise_type=ExerciseType.MULTIPLE_CHOICE,
        lesson_id=5,
        questions=[
            Question(
                prompt='How many chambers does the heart have?',
                options=['Four', 'Three', 'Two'],
                correct_answer=0,
                commentary='Two atria and two ventricles.',
                source='Guyton, Textbook of Medical Physiology',
            ),
            Question(
                prompt='Which valve separates the left atrium and ventricle?',
                options=['Tricuspid', 'Mitral', 'Aortic'],
                correct_answer=1,
                commentary='The mitral (bicuspid) valve.',
            ),
            Question(
                prompt='Where is the sinoatrial node located?',
                image='https://cdn.example.com/heart.png',
                options=['Left ventricle', 'Septum', 'Right atrium'],
                correct_answer=2,
            ),
        ],
        allowed_roles=[UserRole.STUDENT, UserRole.ADMIN],
        allowed_attempts=3,
    )


@pytest.fixture
def student() -> CurrentUser:
    return CurrentUser(user_id=7, role=UserRole.STUDENT)


@pytest.fixture
def admin() -> CurrentUser:
    return CurrentUser(user_id=1, role=UserRole.ADMIN)


@pytest.fixture
def visitor() -> CurrentUser:
    return CurrentUser(user_id=9, role=UserRole.VISITOR)


@pytest.fixture
def exercise_result(exercise) -> ExerciseResult:
    """Graded result of answering [0, None, 2] on the first attempt."""
    return build_result(exercise, [0, None, 2], score=67, attempt_number=1)


@pytest.fixture
def exercise_payload(exercise) -> Dict[str, Any]:
    """The exercise as a non-admin receives it from the API."""
    return exercise.without_answers().model_dump(
        mode='json', by_alias=True, exclude_none=True
    )


@pytest.fixture
def result_payload(exercise_result) -> Dict[str, Any]:
    return exercise_result.model_dump(mode='json', by_alias=True)

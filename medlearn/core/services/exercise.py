import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from medlearn.config import settings
from medlearn.core.entities.exercise import AnswerValue, Exercise
from medlearn.core.entities.exercise_answer import ExerciseAnswer
from medlearn.core.entities.result import ExerciseResult
from medlearn.core.entities.user import CurrentUser
from medlearn.core.enums import ExerciseType
from medlearn.core.exceptions import (
    AttemptsExhaustedError,
    ExerciseAccessDeniedError,
    ExerciseNotFoundError,
    InvalidExerciseError,
)
from medlearn.core.repositories.exercise import ExerciseRepository
from medlearn.core.repositories.exercise_answer import (
    ExerciseAnswerRepository,
)
from medlearn.core.services.grading import build_result, calculate_score
from medlearn.metrics import BACKEND_EXERCISE_METRICS

logger = logging.getLogger(__name__)


@dataclass
class ExercisePage:
    exercises: List[Exercise]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class ExerciseService:
    def __init__(
        self,
        exercise_repository: ExerciseRepository,
        exercise_answer_repository: ExerciseAnswerRepository,
    ):
        self.exercise_repository = exercise_repository
        self.exercise_answer_repository = exercise_answer_repository

    @staticmethod
    def _visible_to(exercise: Exercise, user: CurrentUser) -> Exercise:
        return exercise if user.is_admin else exercise.without_answers()

    async def _get_existing(self, exercise_id: int) -> Exercise:
        exercise = await self.exercise_repository.get_by_id(exercise_id)
        if not exercise:
            raise ExerciseNotFoundError(exercise_id)
        return exercise

    async def _get_accessible(
        self, exercise_id: int, user: CurrentUser
    ) -> Exercise:
        exercise = await self._get_existing(exercise_id)
        if not exercise.is_accessible_by(user.role):
            raise ExerciseAccessDeniedError(
                f'Role {user.role.value} may not access '
                f'exercise {exercise_id}'
            )
        return exercise

    async def get_exercise(
        self, exercise_id: int, user: CurrentUser
    ) -> Exercise:
        exercise = await self._get_accessible(exercise_id, user)
        return self._visible_to(exercise, user)

    async def list_exercises(
        self,
        user: CurrentUser,
        page: int = 1,
        limit: int = settings.default_page_limit,
        lesson_id: Optional[int] = None,
        exercise_type: Optional[ExerciseType] = None,
        include_all: bool = False,
    ) -> ExercisePage:
        """
        Lists exercises newest first. Unless `include_all` is set (admin
        listing) non-admin callers only see exercises open to their role,
        and never see correct answers.
        """
        role_filter = None if include_all or user.is_admin else user.role
        exercises, total = await self.exercise_repository.get_page(
            offset=(page - 1) * limit,
            limit=limit,
            lesson_id=lesson_id,
            exercise_type=exercise_type,
            role=role_filter,
        )
        return ExercisePage(
            exercises=[self._visible_to(e, user) for e in exercises],
            total=total,
            page=page,
            limit=limit,
        )

    async def list_lesson_exercises(
        self, lesson_id: int, user: CurrentUser
    ) -> List[Exercise]:
        exercises = await self.exercise_repository.get_by_lesson(lesson_id)
        return [
            self._visible_to(e, user)
            for e in exercises
            if e.is_accessible_by(user.role)
        ]

    async def answer_exercise(
        self,
        exercise_id: int,
        user: CurrentUser,
        answers: Sequence[Optional[AnswerValue]],
    ) -> ExerciseResult:
        exercise = await self._get_accessible(exercise_id, user)
        metric_labels = {'exercise_type': exercise.exercise_type.value}
        started_at = time.monotonic()

        previous_attempts = (
            await self.exercise_answer_repository.count_by_user_and_exercise(
                user_id=user.user_id, exercise_id=exercise_id
            )
        )
        is_unlimited = (
            exercise.allowed_attempts >= settings.unlimited_attempts_threshold
        )
        if not is_unlimited and previous_attempts >= exercise.allowed_attempts:
            BACKEND_EXERCISE_METRICS['attempts_exhausted'].labels(
                **metric_labels
            ).inc()
            logger.info(
                f'User {user.user_id} has no attempts left '
                f'for exercise {exercise_id}'
            )
            raise AttemptsExhaustedError(exercise.allowed_attempts)

        score = calculate_score(exercise, answers)
        attempt_number = previous_attempts + 1

        await self.exercise_answer_repository.create(
            ExerciseAnswer(
                exercise_id=exercise_id,
                user_id=user.user_id,
                answers=list(answers),
                score=score,
                attempt_number=attempt_number,
            )
        )

        BACKEND_EXERCISE_METRICS['graded'].labels(**metric_labels).inc()
        BACKEND_EXERCISE_METRICS['score'].labels(**metric_labels).observe(
            score
        )
        BACKEND_EXERCISE_METRICS['grading_time'].labels(
            **metric_labels
        ).observe(time.monotonic() - started_at)
        logger.info(
            f'Graded attempt {attempt_number} of user {user.user_id} '
            f'for exercise {exercise_id}: {score}%'
        )

        return build_result(exercise, answers, score, attempt_number)

    async def get_user_answers(
        self, exercise_id: int, user: CurrentUser
    ) -> List[ExerciseAnswer]:
        repository = self.exercise_answer_repository
        answers = await repository.get_by_user_and_exercise(
            user_id=user.user_id, exercise_id=exercise_id
        )
        return sorted(answers, key=lambda a: a.attempt_number, reverse=True)

    async def get_exercise_answers(
        self, exercise_id: int
    ) -> List[ExerciseAnswer]:
        return await self.exercise_answer_repository.get_by_exercise_id(
            exercise_id
        )

    async def create_exercise(self, exercise: Exercise) -> Exercise:
        if not exercise.questions:
            raise InvalidExerciseError(
                'Title, type and questions are required'
            )
        fields_set = exercise.model_fields_set
        defaults: Dict[str, Any] = {}
        if 'allowed_roles' not in fields_set or not exercise.allowed_roles:
            defaults['allowed_roles'] = list(settings.default_allowed_roles)
        if 'allowed_attempts' not in fields_set:
            defaults['allowed_attempts'] = settings.default_allowed_attempts

        created = await self.exercise_repository.create(
            exercise.model_copy(update=defaults)
        )
        logger.info(f'Created {created}')
        return created

    async def update_exercise(
        self, exercise_id: int, changes: Dict[str, Any]
    ) -> Exercise:
        """
        Applies a partial update. Empty values are ignored except for
        `lesson_id`, where an explicit None detaches the exercise.
        """
        exercise = await self._get_existing(exercise_id)
        update: Dict[str, Any] = {
            key: value
            for key, value in changes.items()
            if key != 'lesson_id' and value
        }
        if 'lesson_id' in changes:
            update['lesson_id'] = changes['lesson_id']

        try:
            updated = Exercise.model_validate(
                exercise.model_copy(update=update).model_dump()
            )
        except ValidationError as e:
            raise InvalidExerciseError(str(e)) from e
        return await self.exercise_repository.update(updated)

    async def delete_exercise(self, exercise_id: int) -> None:
        await self._get_existing(exercise_id)
        await self.exercise_answer_repository.delete_by_exercise_id(
            exercise_id
        )
        await self.exercise_repository.delete(exercise_id)
        logger.info(f'Deleted exercise {exercise_id} and its answers')


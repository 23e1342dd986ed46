import pytest
from pydantic import ValidationError

from medlearn.core.entities.exercise import Exercise
from medlearn.core.entities.exercise_answer import ExerciseAnswer
from medlearn.core.entities.result import ExerciseResult
from medlearn.core.entities.user import CurrentUser
from medlearn.core.enums import ExerciseType, UserRole


def test_exercise_parses_wire_format():
    exercise = Exercise.model_validate(
        {
            '_id': 12,
            'titulo': 'Renal physiology',
            'tipo': 'verdadeiro_falso',
            'aulaId': 3,
            'questoes': [
                {
                    'pergunta': 'The kidney filters blood.',
                    'opcoes': ['Verdadeiro', 'Falso'],
                    'respostaCorreta': 0,
                },
                {'pergunta': 'Describe the nephron.'},
            ],
            'cargosPermitidos': ['Aluno'],
            'tentativasPermitidas': 999999,
        }
    )

    assert exercise.exercise_id == 12
    assert exercise.exercise_type == ExerciseType.TRUE_FALSE
    assert exercise.lesson_id == 3
    assert exercise.question_count == 2
    assert exercise.questions[0].correct_answer == 0
    assert exercise.questions[1].options == []
    assert exercise.questions[1].points == 1
    assert exercise.allowed_roles == [UserRole.STUDENT]
    assert exercise.allowed_attempts == 999999


def test_exercise_dumps_wire_aliases(exercise):
    data = exercise.model_dump(by_alias=True, mode='json')

    assert data['_id'] == 1
    assert data['titulo'] == 'Cardiology basics'
    assert data['tipo'] == 'multipla_escolha'
    assert data['questoes'][1]['respostaCorreta'] == 1
    assert data['cargosPermitidos'] == ['Aluno', 'Administrador']


def test_string_correct_answer_is_kept_as_string():
    exercise = Exercise(
        title='Essay',
        exercise_type=ExerciseType.ESSAY,
        questions=[{'pergunta': 'Define shock.', 'respostaCorreta': '1'}],
    )

    assert exercise.questions[0].correct_answer == '1'


def test_exercise_requires_title():
    with pytest.raises(ValidationError):
        Exercise(title='', exercise_type=ExerciseType.MULTIPLE_CHOICE)


def test_without_answers_hides_grading_fields(exercise):
    stripped = exercise.without_answers()

    for question in stripped.questions:
        assert question.correct_answer is None
        assert question.commentary is None
        assert question.source is None
    assert stripped.questions[0].options == ['Four', 'Three', 'Two']
    assert stripped.questions[2].image == exercise.questions[2].image
    # the source exercise is left untouched
    assert exercise.questions[0].correct_answer == 0


@pytest.mark.parametrize(
    'role, expected',
    [
        (UserRole.ADMIN, True),
        (UserRole.STUDENT, True),
        (UserRole.INSTRUCTOR, False),
        (UserRole.VISITOR, False),
    ],
)
def test_is_accessible_by(exercise, role, expected):
    assert exercise.is_accessible_by(role) is expected


def test_admin_can_access_exercise_without_roles(exercise):
    closed = exercise.model_copy(update={'allowed_roles': []})

    assert closed.is_accessible_by(UserRole.ADMIN)
    assert not closed.is_accessible_by(UserRole.STUDENT)


def test_exercise_str(exercise):
    assert str(exercise) == (
        'Exercise(exercise_id=1, title=Cardiology basics, '
        'exercise_type=multipla_escolha, questions=3, allowed_attempts=3)'
    )


def test_result_correct_count(exercise_result):
    assert isinstance(exercise_result, ExerciseResult)
    assert exercise_result.correct_count == 2


def test_result_parses_wire_format():
    result = ExerciseResult.model_validate(
        {
            'nota': 50,
            'tentativa': 2,
            'tentativasRestantes': 1,
            'questoes': [
                {
                    'pergunta': 'Q1',
                    'suaResposta': 1,
                    'respostaCorreta': 1,
                    'correto': True,
                },
                {
                    'pergunta': 'Q2',
                    'suaResposta': None,
                    'respostaCorreta': 0,
                    'correto': False,
                    'respostaComentada': 'See chapter 3.',
                },
            ],
        }
    )

    assert result.score == 50
    assert result.attempt_number == 2
    assert result.attempts_remaining == 1
    assert result.questions[1].user_answer is None
    assert result.questions[1].commentary == 'See chapter 3.'
    assert result.correct_count == 1


def test_exercise_answer_keeps_unanswered_slots():
    answer = ExerciseAnswer.model_validate(
        {
            'exercicioId': 1,
            'usuarioId': 7,
            'respostas': [0, None, 'texto'],
            'nota': 33,
            'tentativa': 1,
        }
    )

    assert answer.answers == [0, None, 'texto']


def test_current_user_is_admin():
    assert CurrentUser(user_id=1, role=UserRole.ADMIN).is_admin
    assert not CurrentUser(user_id=1).is_admin

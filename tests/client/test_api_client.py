import json

import httpx
import pytest

from medlearn.client.api_client import ExerciseApiClient
from medlearn.client.errors import ExerciseApiError
from medlearn.core.enums import ExerciseType, UserRole

pytestmark = pytest.mark.asyncio


async def test_get_exercise(make_api_client, sent_requests, exercise_payload):
    api_client = make_api_client(
        lambda request: httpx.Response(200, json=exercise_payload),
        token='secret',
    )

    exercise = await api_client.get_exercise(1)

    assert exercise.exercise_id == 1
    assert exercise.question_count == 3
    assert exercise.questions[0].correct_answer is None
    request = sent_requests[0]
    assert request.method == 'GET'
    assert str(request.url) == 'http://test/api/v1/exercises/1'
    assert request.headers['Authorization'] == 'Bearer secret'
    assert request.headers['X-User-Id'] == '7'
    assert request.headers['X-User-Role'] == 'Aluno'


async def test_anonymous_client_sends_no_identity(
    make_api_client, sent_requests, exercise_payload
):
    api_client = make_api_client(
        lambda request: httpx.Response(200, json=exercise_payload),
        user_id=0,
    )

    await api_client.get_exercise(1)

    assert 'X-User-Id' not in sent_requests[0].headers
    assert 'Authorization' not in sent_requests[0].headers


async def test_submit_answers_sends_every_slot(
    make_api_client, sent_requests, result_payload
):
    api_client = make_api_client(
        lambda request: httpx.Response(200, json=result_payload)
    )

    result = await api_client.submit_answers(1, [0, None, 2])

    request = sent_requests[0]
    assert request.method == 'POST'
    assert request.url.path == '/api/v1/exercises/1/answer'
    assert json.loads(request.content) == {'respostas': [0, None, 2]}
    assert result.score == 67
    assert result.attempts_remaining == 2
    assert result.correct_count == 2


async def test_submit_answers_server_rejection(make_api_client):
    api_client = make_api_client(
        lambda request: httpx.Response(
            400, json={'detail': 'Maximum number of attempts reached (3)'}
        )
    )

    with pytest.raises(ExerciseApiError) as exc_info:
        await api_client.submit_answers(1, [0, 1, 2])

    assert exc_info.value.message == 'Maximum number of attempts reached (3)'
    assert exc_info.value.status_code == 400


async def test_error_message_from_message_field(make_api_client):
    api_client = make_api_client(
        lambda request: httpx.Response(
            404, json={'message': 'Exercise not found'}
        )
    )

    with pytest.raises(ExerciseApiError, match='Exercise not found'):
        await api_client.get_exercise(5)


async def test_error_without_body_uses_fallback(make_api_client):
    api_client = make_api_client(lambda request: httpx.Response(500))

    with pytest.raises(ExerciseApiError) as exc_info:
        await api_client.get_exercise(5)

    assert exc_info.value.message == 'Error loading exercise'
    assert exc_info.value.status_code == 500


async def test_validation_error_detail_list(make_api_client):
    api_client = make_api_client(
        lambda request: httpx.Response(
            422,
            json={'detail': [{'loc': ['body'], 'msg': 'Field required'}]},
        )
    )

    with pytest.raises(ExerciseApiError, match='Field required'):
        await api_client.submit_answers(1, [])


async def test_transport_error(make_api_client):
    def handler(request):
        raise httpx.ConnectError('Connection refused', request=request)

    api_client = make_api_client(handler)

    with pytest.raises(ExerciseApiError) as exc_info:
        await api_client.submit_answers(1, [0, 1, 2])

    assert exc_info.value.message == 'Error submitting answers'
    assert exc_info.value.status_code is None


async def test_invalid_json(make_api_client):
    api_client = make_api_client(
        lambda request: httpx.Response(200, text='<html>oops</html>')
    )

    with pytest.raises(ExerciseApiError, match='Error loading exercise'):
        await api_client.get_exercise(1)


async def test_unexpected_payload(make_api_client):
    api_client = make_api_client(
        lambda request: httpx.Response(200, json={'_id': 1})
    )

    with pytest.raises(ExerciseApiError, match='Unexpected Exercise payload'):
        await api_client.get_exercise(1)


async def test_list_exercises(
    make_api_client, sent_requests, exercise_payload
):
    api_client = make_api_client(
        lambda request: httpx.Response(
            200,
            json={
                'exercises': [exercise_payload],
                'pagination': {'total': 21, 'page': 1, 'pages': 2},
            },
        )
    )

    page = await api_client.list_exercises(
        lesson_id=5, exercise_type=ExerciseType.MULTIPLE_CHOICE
    )

    params = sent_requests[0].url.params
    assert sent_requests[0].url.path == '/api/v1/exercises/'
    assert params['aulaId'] == '5'
    assert params['tipo'] == 'multipla_escolha'
    assert params['page'] == '1'
    assert params['limit'] == '20'
    assert [e.exercise_id for e in page.exercises] == [1]
    assert page.total == 21
    assert page.pages == 2


async def test_list_exercises_rejects_non_page_body(make_api_client):
    api_client = make_api_client(lambda request: httpx.Response(200, json=[]))

    with pytest.raises(ExerciseApiError):
        await api_client.list_exercises()


async def test_get_my_answers(make_api_client, sent_requests):
    api_client = make_api_client(
        lambda request: httpx.Response(
            200,
            json=[
                {
                    '_id': 3,
                    'exercicioId': 1,
                    'usuarioId': 7,
                    'respostas': [0, None, 2],
                    'nota': 67,
                    'tentativa': 1,
                }
            ],
        ),
        user_role=UserRole.INSTRUCTOR,
    )

    answers = await api_client.get_my_answers(1)

    assert sent_requests[0].url.path == '/api/v1/exercises/1/my-answers'
    assert sent_requests[0].headers['X-User-Role'] == 'Instrutor'
    assert answers[0].answers == [0, None, 2]
    assert answers[0].attempt_number == 1


async def test_list_lesson_exercises(
    make_api_client, sent_requests, exercise_payload
):
    api_client = make_api_client(
        lambda request: httpx.Response(200, json=[exercise_payload])
    )

    exercises = await api_client.list_lesson_exercises(5)

    assert sent_requests[0].url.path == '/api/v1/exercises/lesson/5'
    assert exercises[0].title == 'Cardiology basics'


async def test_client_closes_owned_http_client():
    async with ExerciseApiClient(base_url='http://test') as api_client:
        http_client = api_client.http_client

    assert http_client.is_closed

import asyncio
import json

import httpx
import pytest

from medlearn.client.attempt import AttemptAnswers
from medlearn.client.errors import AttemptStateError, ExerciseApiError
from medlearn.client.submitter import (
    AttemptSubmitter,
    SubmissionPhase,
    SubmitStatus,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture
def graded_api_client(make_api_client, result_payload):
    return make_api_client(
        lambda request: httpx.Response(200, json=result_payload)
    )


def _answers(*values) -> AttemptAnswers:
    answers = AttemptAnswers(len(values))
    for index, value in enumerate(values):
        if value is not None:
            answers.set_answer(index, value)
    return answers


async def test_complete_attempt_is_dispatched_immediately(
    graded_api_client, sent_requests
):
    submitter = AttemptSubmitter(graded_api_client, 1, _answers(0, 1, 2))

    outcome = await submitter.submit()

    assert outcome.status == SubmitStatus.GRADED
    assert outcome.result.score == 67
    assert submitter.phase == SubmissionPhase.GRADED
    assert submitter.is_graded
    assert len(sent_requests) == 1
    assert json.loads(sent_requests[0].content) == {'respostas': [0, 1, 2]}


async def test_unanswered_question_needs_one_confirmation(
    graded_api_client, sent_requests
):
    submitter = AttemptSubmitter(graded_api_client, 1, _answers(0, None, 2))

    outcome = await submitter.submit()

    assert outcome.status == SubmitStatus.CONFIRMATION_REQUIRED
    assert outcome.unanswered_count == 1
    assert submitter.phase == SubmissionPhase.AWAITING_CONFIRMATION
    assert sent_requests == []

    submitter.confirm()
    outcome = await submitter.submit()

    assert outcome.status == SubmitStatus.GRADED
    assert submitter.phase == SubmissionPhase.GRADED
    assert len(sent_requests) == 1
    assert sent_requests[0].url.path == '/api/v1/exercises/1/answer'
    assert json.loads(sent_requests[0].content) == {
        'respostas': [0, None, 2]
    }


async def test_repeated_submit_without_confirm_sends_nothing(
    graded_api_client, sent_requests
):
    submitter = AttemptSubmitter(graded_api_client, 1, _answers(None, None))

    first = await submitter.submit()
    second = await submitter.submit()

    assert first.status == SubmitStatus.CONFIRMATION_REQUIRED
    assert second.status == SubmitStatus.CONFIRMATION_REQUIRED
    assert second.unanswered_count == 2
    assert sent_requests == []


async def test_filling_gaps_after_warning_dispatches(
    graded_api_client, sent_requests
):
    answers = _answers(0, None, 2)
    submitter = AttemptSubmitter(graded_api_client, 1, answers)
    await submitter.submit()

    answers.set_answer(1, 1)
    outcome = await submitter.submit()

    assert outcome.status == SubmitStatus.GRADED
    assert json.loads(sent_requests[0].content) == {'respostas': [0, 1, 2]}


async def test_cancel_confirmation(graded_api_client):
    submitter = AttemptSubmitter(graded_api_client, 1, _answers(0, None))
    await submitter.submit()

    submitter.cancel_confirmation()

    assert submitter.phase == SubmissionPhase.ANSWERING
    with pytest.raises(AttemptStateError):
        submitter.confirm()


async def test_confirm_outside_warning_is_rejected(graded_api_client):
    submitter = AttemptSubmitter(graded_api_client, 1, _answers(0, None))

    with pytest.raises(AttemptStateError):
        submitter.confirm()


async def test_submit_while_in_flight_sends_nothing(
    make_api_client, sent_requests, result_payload
):
    started = asyncio.Event()
    release = asyncio.Event()

    async def slow_handler(request):
        started.set()
        await release.wait()
        return httpx.Response(200, json=result_payload)

    api_client = make_api_client(slow_handler)
    submitter = AttemptSubmitter(api_client, 1, _answers(0, 1, 2))

    first = asyncio.create_task(submitter.submit())
    await started.wait()

    assert submitter.is_submitting
    duplicate = await submitter.submit()
    assert duplicate.status == SubmitStatus.IN_FLIGHT

    release.set()
    outcome = await first

    assert outcome.status == SubmitStatus.GRADED
    assert len(sent_requests) == 1


async def test_failed_submission_returns_to_answering(
    make_api_client, sent_requests
):
    api_client = make_api_client(
        lambda request: httpx.Response(
            400, json={'detail': 'Maximum number of attempts reached (3)'}
        )
    )
    submitter = AttemptSubmitter(api_client, 1, _answers(0, None, 2))
    await submitter.submit()
    submitter.confirm()

    with pytest.raises(ExerciseApiError) as exc_info:
        await submitter.submit()

    assert exc_info.value.status_code == 400
    assert submitter.phase == SubmissionPhase.ANSWERING
    assert len(sent_requests) == 1

    # gaps have to be confirmed again, nothing is retried
    outcome = await submitter.submit()
    assert outcome.status == SubmitStatus.CONFIRMATION_REQUIRED
    assert len(sent_requests) == 1


async def test_cancelled_submission_returns_to_answering(make_api_client):
    started = asyncio.Event()

    async def hanging_handler(request):
        started.set()
        await asyncio.Event().wait()

    api_client = make_api_client(hanging_handler)
    submitter = AttemptSubmitter(api_client, 1, _answers(0, 1, 2))

    task = asyncio.create_task(submitter.submit())
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert submitter.phase == SubmissionPhase.ANSWERING


async def test_graded_attempt_cannot_be_resubmitted(graded_api_client):
    submitter = AttemptSubmitter(graded_api_client, 1, _answers(0, 1, 2))
    await submitter.submit()

    with pytest.raises(AttemptStateError):
        await submitter.submit()

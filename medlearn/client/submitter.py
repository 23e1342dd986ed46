import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from medlearn.client.api_client import ExerciseApiClient, ExerciseKey
from medlearn.client.attempt import AttemptAnswers
from medlearn.client.errors import AttemptStateError, ExerciseApiError
from medlearn.core.entities.result import ExerciseResult
from medlearn.metrics import CLIENT_SUBMISSION_METRICS

logger = logging.getLogger(__name__)


class SubmissionPhase(str, Enum):
    ANSWERING = 'answering'
    AWAITING_CONFIRMATION = 'awaiting_confirmation'
    CONFIRMED = 'confirmed'
    SUBMITTING = 'submitting'
    GRADED = 'graded'


class SubmitStatus(str, Enum):
    CONFIRMATION_REQUIRED = 'confirmation_required'
    IN_FLIGHT = 'in_flight'
    GRADED = 'graded'


@dataclass
class SubmitOutcome:
    status: SubmitStatus
    unanswered_count: int = 0
    result: Optional[ExerciseResult] = None


class AttemptSubmitter:
    """
    Sends the answers of one attempt to the server, at most once at a time.

    Phases::

        answering -> awaiting_confirmation -> confirmed -> submitting
        answering -------------------------------------> submitting
        submitting -> graded            (terminal)
        submitting -> answering         (request failed)

    Leaving questions unanswered requires one explicit `confirm()` before
    the request is dispatched. A failed request puts the attempt back into
    `answering`, so gaps have to be confirmed again.
    """

    def __init__(
        self,
        api_client: ExerciseApiClient,
        exercise_id: ExerciseKey,
        answers: AttemptAnswers,
    ):
        self.api_client = api_client
        self.exercise_id = exercise_id
        self.answers = answers
        self._phase = SubmissionPhase.ANSWERING

    @property
    def phase(self) -> SubmissionPhase:
        return self._phase

    @property
    def is_submitting(self) -> bool:
        return self._phase == SubmissionPhase.SUBMITTING

    @property
    def is_graded(self) -> bool:
        return self._phase == SubmissionPhase.GRADED

    def _transition(self, to_phase: SubmissionPhase, reason: str) -> None:
        logger.info(
            f'Exercise {self.exercise_id} submission: '
            f'{self._phase.value} -> {to_phase.value} ({reason})'
        )
        self._phase = to_phase

    def confirm(self) -> None:
        """Acknowledges that unanswered questions may be submitted."""
        if self._phase != SubmissionPhase.AWAITING_CONFIRMATION:
            raise AttemptStateError(
                f'Nothing to confirm while {self._phase.value}'
            )
        self._transition(SubmissionPhase.CONFIRMED, 'user confirmed')

    def cancel_confirmation(self) -> None:
        if self._phase in (
            SubmissionPhase.AWAITING_CONFIRMATION,
            SubmissionPhase.CONFIRMED,
        ):
            self._transition(
                SubmissionPhase.ANSWERING, 'confirmation withdrawn'
            )

    async def submit(self) -> SubmitOutcome:
        if self._phase == SubmissionPhase.GRADED:
            raise AttemptStateError(
                'This attempt was already graded, start a new one'
            )
        if self._phase == SubmissionPhase.SUBMITTING:
            CLIENT_SUBMISSION_METRICS['duplicates_blocked'].inc()
            logger.warning(
                f'Exercise {self.exercise_id}: submission already in '
                f'flight, ignoring duplicate submit'
            )
            return SubmitOutcome(status=SubmitStatus.IN_FLIGHT)

        unanswered = self.answers.unanswered_count
        if unanswered and self._phase != SubmissionPhase.CONFIRMED:
            if self._phase == SubmissionPhase.ANSWERING:
                CLIENT_SUBMISSION_METRICS['confirmations_requested'].inc()
                self._transition(
                    SubmissionPhase.AWAITING_CONFIRMATION,
                    f'{unanswered} unanswered',
                )
            return SubmitOutcome(
                status=SubmitStatus.CONFIRMATION_REQUIRED,
                unanswered_count=unanswered,
            )

        return await self._dispatch()

    async def _dispatch(self) -> SubmitOutcome:
        # the phase flips before the first await so a concurrent submit()
        # sees SUBMITTING
        self._transition(SubmissionPhase.SUBMITTING, 'dispatching')
        CLIENT_SUBMISSION_METRICS['dispatched'].inc()
        started_at = time.monotonic()
        try:
            result = await self.api_client.submit_answers(
                self.exercise_id, self.answers.to_list()
            )
        except ExerciseApiError as e:
            CLIENT_SUBMISSION_METRICS['failed'].inc()
            self._transition(SubmissionPhase.ANSWERING, f'failed: {e}')
            raise
        except BaseException:
            self._transition(SubmissionPhase.ANSWERING, 'interrupted')
            raise
        finally:
            CLIENT_SUBMISSION_METRICS['request_time'].observe(
                time.monotonic() - started_at
            )

        self._transition(SubmissionPhase.GRADED, f'score {result.score}%')
        return SubmitOutcome(status=SubmitStatus.GRADED, result=result)

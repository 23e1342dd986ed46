import logging
from enum import Enum
from typing import Callable, Optional

from medlearn.client.api_client import ExerciseApiClient, ExerciseKey
from medlearn.client.attempt import AttemptAnswers
from medlearn.client.errors import AttemptStateError, ExerciseApiError
from medlearn.client.navigator import QuestionNavigator
from medlearn.client.notifier import LoggingNotifier, Notifier
from medlearn.client.result_renderer import ResultView, build_result_view
from medlearn.client.submitter import (
    AttemptSubmitter,
    SubmissionPhase,
    SubmitOutcome,
    SubmitStatus,
)
from medlearn.core.entities.exercise import AnswerValue, Exercise, Question
from medlearn.core.entities.result import ExerciseResult

logger = logging.getLogger(__name__)

DISCARD_ANSWERS_PROMPT = (
    'Are you sure you want to leave? Your answers will be lost.'
)
SUBMITTED_MESSAGE = 'Exercise submitted successfully!'

ConfirmCallback = Callable[[str], bool]


class SessionState(str, Enum):
    IDLE = 'idle'
    ANSWERING = 'answering'
    GRADED = 'graded'


class ExerciseSession:
    """
    One user taking one exercise: load it, answer, move between questions,
    submit, look at the graded result, and start over or leave.
    """

    def __init__(
        self,
        api_client: ExerciseApiClient,
        notifier: Optional[Notifier] = None,
    ):
        self.api_client = api_client
        self.notifier = notifier or LoggingNotifier()
        self.exercise: Optional[Exercise] = None
        self.answers: Optional[AttemptAnswers] = None
        self.navigator: Optional[QuestionNavigator] = None
        self.submitter: Optional[AttemptSubmitter] = None
        self.result: Optional[ExerciseResult] = None

    @property
    def state(self) -> SessionState:
        if self.exercise is None:
            return SessionState.IDLE
        if self.result is not None:
            return SessionState.GRADED
        return SessionState.ANSWERING

    @property
    def is_submitting(self) -> bool:
        return bool(self.submitter and self.submitter.is_submitting)

    @property
    def awaiting_confirmation(self) -> bool:
        return bool(
            self.submitter
            and self.submitter.phase == SubmissionPhase.AWAITING_CONFIRMATION
        )

    @property
    def current_question(self) -> Optional[Question]:
        if not self.exercise or not self.navigator:
            return None
        if not self.exercise.questions:
            return None
        return self.exercise.questions[self.navigator.current_index]

    def _require_answering(self) -> None:
        if self.state != SessionState.ANSWERING:
            raise AttemptStateError(
                f'No attempt in progress (session is {self.state.value})'
            )

    async def start(self, exercise_id: ExerciseKey) -> Exercise:
        """
        Fetches the exercise (without its answers) and opens a fresh
        attempt. On failure the previous state is left as it was.
        """
        try:
            exercise = await self.api_client.get_exercise(exercise_id)
        except ExerciseApiError as e:
            self.notifier.error(e.message)
            raise

        self.exercise = exercise
        self.answers = AttemptAnswers.for_exercise(exercise)
        self.navigator = QuestionNavigator(exercise.question_count)
        self.submitter = AttemptSubmitter(
            self.api_client,
            exercise.exercise_id
            if exercise.exercise_id is not None
            else exercise_id,
            self.answers,
        )
        self.result = None
        logger.info(f'Started attempt for {exercise}')
        return exercise

    async def restart(self) -> Exercise:
        if self.exercise is None:
            raise AttemptStateError('No exercise to restart')
        exercise_id = self.submitter.exercise_id
        return await self.start(exercise_id)

    def select_answer(self, question_index: int, value: AnswerValue) -> bool:
        self._require_answering()
        return self.answers.set_answer(question_index, value)

    def go_to(self, index: int) -> bool:
        self._require_answering()
        return self.navigator.go_to(index)

    def next_question(self) -> bool:
        self._require_answering()
        return self.navigator.next()

    def previous_question(self) -> bool:
        self._require_answering()
        return self.navigator.previous()

    async def submit(self) -> SubmitOutcome:
        self._require_answering()
        submitter = self.submitter
        try:
            outcome = await submitter.submit()
        except ExerciseApiError as e:
            self.notifier.error(e.message)
            raise

        if self.submitter is not submitter:
            # the attempt was restarted or closed while the request ran
            logger.info(
                f'Ignoring {outcome.status.value} outcome of a replaced '
                f'attempt for exercise {submitter.exercise_id}'
            )
            return outcome
        if outcome.status == SubmitStatus.GRADED:
            self.result = outcome.result
            self.notifier.success(SUBMITTED_MESSAGE)
        return outcome

    async def confirm_and_submit(self) -> SubmitOutcome:
        """Submits, accepting whatever questions are still unanswered."""
        self._require_answering()
        if not self.awaiting_confirmation:
            outcome = await self.submit()
            if outcome.status != SubmitStatus.CONFIRMATION_REQUIRED:
                return outcome
        self.submitter.confirm()
        return await self.submit()

    def cancel_submit(self) -> None:
        if self.submitter:
            self.submitter.cancel_confirmation()

    def result_view(self) -> ResultView:
        if self.result is None:
            raise AttemptStateError('The attempt has not been graded yet')
        return build_result_view(self.result, self.exercise)

    def close(self, confirm: Optional[ConfirmCallback] = None) -> bool:
        """
        Leaves the exercise. Given answers that were never graded are only
        discarded when `confirm` agrees; returns whether the session closed.
        """
        if self.state == SessionState.ANSWERING and self.answers.has_answers:
            if confirm is None or not confirm(DISCARD_ANSWERS_PROMPT):
                logger.info('Close cancelled, keeping the answers')
                return False

        self.exercise = None
        self.answers = None
        self.navigator = None
        self.submitter = None
        self.result = None
        return True

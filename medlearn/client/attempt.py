import logging
from typing import List, Optional

from medlearn.core.entities.exercise import AnswerValue, Exercise

logger = logging.getLogger(__name__)


class AttemptAnswers:
    """
    In-memory answers of one attempt: exactly one slot per question,
    each unset (None) until the user picks something.

    Values are stored as given; correctness is only ever decided by the
    server.
    """

    def __init__(self, question_count: int):
        if question_count < 0:
            raise ValueError('question_count must not be negative')
        self._answers: List[Optional[AnswerValue]] = [None] * question_count

    @classmethod
    def for_exercise(cls, exercise: Exercise) -> 'AttemptAnswers':
        return cls(exercise.question_count)

    def __len__(self) -> int:
        return len(self._answers)

    def __getitem__(self, index: int) -> Optional[AnswerValue]:
        return self._answers[index]

    def set_answer(self, question_index: int, value: AnswerValue) -> bool:
        """
        Overwrites the slot at `question_index`. Out of range indices leave
        the answers untouched and return False.
        """
        if not 0 <= question_index < len(self._answers):
            logger.debug(
                f'Ignoring answer for question {question_index}, '
                f'attempt has {len(self._answers)} questions'
            )
            return False
        self._answers[question_index] = value
        return True

    def is_answered(self, question_index: int) -> bool:
        return self._answers[question_index] is not None

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self._answers if answer is not None)

    @property
    def unanswered_count(self) -> int:
        return len(self._answers) - self.answered_count

    @property
    def has_answers(self) -> bool:
        return self.answered_count > 0

    @property
    def progress_percent(self) -> float:
        if not self._answers:
            return 0.0
        return self.answered_count / len(self._answers) * 100

    def to_list(self) -> List[Optional[AnswerValue]]:
        return list(self._answers)

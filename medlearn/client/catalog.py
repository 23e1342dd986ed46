import asyncio
import logging
from typing import List, Optional, Set

from medlearn.client.api_client import ExerciseApiClient
from medlearn.client.errors import ExerciseApiError
from medlearn.client.notifier import LoggingNotifier, Notifier
from medlearn.core.entities.exercise import Exercise
from medlearn.core.enums import CompletionFilter, ExerciseType

logger = logging.getLogger(__name__)


class ExerciseCatalog:
    """
    The list of exercises the user can take, with the completion status
    of each one.
    """

    def __init__(
        self,
        api_client: ExerciseApiClient,
        notifier: Optional[Notifier] = None,
    ):
        self.api_client = api_client
        self.notifier = notifier or LoggingNotifier()
        self.exercises: List[Exercise] = []
        self.answered_ids: Set[int] = set()
        self.is_loading = False

    async def load(
        self,
        lesson_id: Optional[int] = None,
        exercise_type: Optional[ExerciseType] = None,
    ) -> List[Exercise]:
        self.is_loading = True
        try:
            page = await self.api_client.list_exercises(
                lesson_id=lesson_id, exercise_type=exercise_type
            )
            answered_ids = await self._fetch_answered_ids(page.exercises)
        except ExerciseApiError as e:
            self.notifier.error(e.message)
            raise
        finally:
            self.is_loading = False

        self.exercises = page.exercises
        self.answered_ids = answered_ids
        logger.info(
            f'Loaded {len(self.exercises)} exercises, '
            f'{len(self.answered_ids)} already answered'
        )
        return self.exercises

    async def _fetch_answered_ids(
        self, exercises: List[Exercise]
    ) -> Set[int]:
        """
        Ids of the exercises the user already answered. A lookup that
        fails counts as not answered.
        """
        ids = [e.exercise_id for e in exercises if e.exercise_id]
        answers = await asyncio.gather(
            *(self.api_client.get_my_answers(i) for i in ids),
            return_exceptions=True,
        )
        answered_ids = set()
        for exercise_id, previous in zip(ids, answers):
            if isinstance(previous, ExerciseApiError):
                logger.warning(
                    f'Could not load answers of exercise {exercise_id}, '
                    f'showing it as pending: {previous}'
                )
                continue
            if isinstance(previous, BaseException):
                raise previous
            if previous:
                answered_ids.add(exercise_id)
        return answered_ids

    def find(self, exercise_id: int) -> Optional[Exercise]:
        return next(
            (e for e in self.exercises if e.exercise_id == exercise_id),
            None,
        )

    def has_answered(self, exercise_id: Optional[int]) -> bool:
        return exercise_id in self.answered_ids

    @property
    def total_count(self) -> int:
        return len(self.exercises)

    @property
    def completed_count(self) -> int:
        return sum(
            1 for e in self.exercises if self.has_answered(e.exercise_id)
        )

    def filter(
        self,
        search: str = '',
        completion: CompletionFilter = CompletionFilter.ALL,
    ) -> List[Exercise]:
        term = search.strip().lower()
        filtered = []
        for exercise in self.exercises:
            if term and term not in exercise.title.lower():
                continue
            answered = self.has_answered(exercise.exercise_id)
            if completion == CompletionFilter.COMPLETED and not answered:
                continue
            if completion == CompletionFilter.PENDING and answered:
                continue
            filtered.append(exercise)
        return filtered

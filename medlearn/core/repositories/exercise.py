from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from medlearn.core.entities.exercise import Exercise
from medlearn.core.enums import ExerciseType, UserRole


class ExerciseRepository(ABC):
    @abstractmethod
    async def get_by_id(self, exercise_id: int) -> Optional[Exercise]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_lesson(self, lesson_id: int) -> List[Exercise]:
        raise NotImplementedError

    @abstractmethod
    async def get_page(
        self,
        offset: int,
        limit: int,
        lesson_id: Optional[int] = None,
        exercise_type: Optional[ExerciseType] = None,
        role: Optional[UserRole] = None,
    ) -> Tuple[List[Exercise], int]:
        """
        Returns one page of exercises, newest first, and the total number
        of exercises matching the filters. When `role` is given only
        exercises allowing that role are returned.
        """

    @abstractmethod
    async def create(self, exercise: Exercise) -> Exercise:
        raise NotImplementedError

    @abstractmethod
    async def update(self, exercise: Exercise) -> Exercise:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, exercise_id: int) -> None:
        raise NotImplementedError

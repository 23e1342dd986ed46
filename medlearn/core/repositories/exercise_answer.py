from abc import ABC, abstractmethod
from typing import List

from medlearn.core.entities.exercise_answer import ExerciseAnswer


class ExerciseAnswerRepository(ABC):
    @abstractmethod
    async def count_by_user_and_exercise(
        self, user_id: int, exercise_id: int
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    async def get_by_user_and_exercise(
        self, user_id: int, exercise_id: int
    ) -> List[ExerciseAnswer]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_exercise_id(
        self, exercise_id: int
    ) -> List[ExerciseAnswer]:
        raise NotImplementedError

    @abstractmethod
    async def create(self, exercise_answer: ExerciseAnswer) -> ExerciseAnswer:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_exercise_id(self, exercise_id: int) -> None:
        raise NotImplementedError

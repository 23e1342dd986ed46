from typing import List
from typing_extensions import override

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medlearn.core.entities.exercise_answer import (
    ExerciseAnswer as ExerciseAnswerEntity,
)
from medlearn.core.repositories.exercise_answer import (
    ExerciseAnswerRepository,
)
from medlearn.db.models import ExerciseAnswer as ExerciseAnswerModel


class SQLAlchemyExerciseAnswerRepository(ExerciseAnswerRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    @override
    async def count_by_user_and_exercise(
        self, user_id: int, exercise_id: int
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(ExerciseAnswerModel)
            .where(
                ExerciseAnswerModel.user_id == user_id,
                ExerciseAnswerModel.exercise_id == exercise_id,
            )
        )
        count = await self.session.scalar(stmt)
        return count or 0

    @override
    async def get_by_user_and_exercise(
        self, user_id: int, exercise_id: int
    ) -> List[ExerciseAnswerEntity]:
        stmt = (
            select(ExerciseAnswerModel)
            .where(
                ExerciseAnswerModel.user_id == user_id,
                ExerciseAnswerModel.exercise_id == exercise_id,
            )
            .order_by(ExerciseAnswerModel.attempt_number.desc())
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(a) for a in result.scalars().all()]

    @override
    async def get_by_exercise_id(
        self, exercise_id: int
    ) -> List[ExerciseAnswerEntity]:
        stmt = (
            select(ExerciseAnswerModel)
            .where(ExerciseAnswerModel.exercise_id == exercise_id)
            .order_by(ExerciseAnswerModel.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(a) for a in result.scalars().all()]

    @override
    async def create(
        self, exercise_answer: ExerciseAnswerEntity
    ) -> ExerciseAnswerEntity:
        db_answer = ExerciseAnswerModel(
            exercise_id=exercise_answer.exercise_id,
            user_id=exercise_answer.user_id,
            answers=list(exercise_answer.answers),
            score=exercise_answer.score,
            attempt_number=exercise_answer.attempt_number,
        )
        self.session.add(db_answer)
        await self.session.flush()
        await self.session.refresh(db_answer)
        return self._to_entity(db_answer)

    @override
    async def delete_by_exercise_id(self, exercise_id: int) -> None:
        await self.session.execute(
            delete(ExerciseAnswerModel).where(
                ExerciseAnswerModel.exercise_id == exercise_id
            )
        )
        await self.session.flush()

    def _to_entity(
        self, db_answer: ExerciseAnswerModel
    ) -> ExerciseAnswerEntity:
        return ExerciseAnswerEntity(
            answer_id=db_answer.answer_id,
            exercise_id=db_answer.exercise_id,
            user_id=db_answer.user_id,
            answers=db_answer.answers,
            score=db_answer.score,
            attempt_number=db_answer.attempt_number,
            created_at=db_answer.created_at,
        )

from typing import List, Optional, Tuple
from typing_extensions import override

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medlearn.core.entities.exercise import Exercise as ExerciseEntity
from medlearn.core.entities.exercise import Question
from medlearn.core.enums import ExerciseType, UserRole
from medlearn.core.repositories.exercise import ExerciseRepository
from medlearn.db.models import Exercise as ExerciseModel


class SQLAlchemyExerciseRepository(ExerciseRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    @override
    async def get_by_id(self, exercise_id: int) -> Optional[ExerciseEntity]:
        result = await self.session.get(ExerciseModel, exercise_id)
        if not result:
            return None
        return self._to_entity(result)

    @override
    async def get_by_lesson(self, lesson_id: int) -> List[ExerciseEntity]:
        stmt = select(ExerciseModel).where(
            ExerciseModel.lesson_id == lesson_id
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(e) for e in result.scalars().all()]

    @override
    async def get_page(
        self,
        offset: int,
        limit: int,
        lesson_id: Optional[int] = None,
        exercise_type: Optional[ExerciseType] = None,
        role: Optional[UserRole] = None,
    ) -> Tuple[List[ExerciseEntity], int]:
        conditions = []
        if lesson_id is not None:
            conditions.append(ExerciseModel.lesson_id == lesson_id)
        if exercise_type is not None:
            conditions.append(
                ExerciseModel.exercise_type == exercise_type.value
            )
        if role is not None:
            conditions.append(
                ExerciseModel.allowed_roles.contains([role.value])
            )

        stmt = (
            select(ExerciseModel)
            .where(*conditions)
            .order_by(ExerciseModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        count_stmt = (
            select(func.count()).select_from(ExerciseModel).where(*conditions)
        )

        result = await self.session.execute(stmt)
        total = await self.session.scalar(count_stmt)
        exercises = [self._to_entity(e) for e in result.scalars().all()]
        return exercises, total or 0

    @override
    async def create(self, exercise: ExerciseEntity) -> ExerciseEntity:
        db_exercise = ExerciseModel(
            title=exercise.title,
            description=exercise.description,
            exercise_type=exercise.exercise_type.value,
            lesson_id=exercise.lesson_id,
            questions=self._dump_questions(exercise.questions),
            allowed_roles=[role.value for role in exercise.allowed_roles],
            allowed_attempts=exercise.allowed_attempts,
        )
        self.session.add(db_exercise)
        await self.session.flush()
        await self.session.refresh(db_exercise)
        return self._to_entity(db_exercise)

    @override
    async def update(self, exercise: ExerciseEntity) -> ExerciseEntity:
        db_exercise = await self.session.get(
            ExerciseModel, exercise.exercise_id
        )
        if not db_exercise:
            raise ValueError('Exercise does not exist')
        db_exercise.title = exercise.title
        db_exercise.description = exercise.description
        db_exercise.exercise_type = exercise.exercise_type.value
        db_exercise.lesson_id = exercise.lesson_id
        db_exercise.questions = self._dump_questions(exercise.questions)
        db_exercise.allowed_roles = [
            role.value for role in exercise.allowed_roles
        ]
        db_exercise.allowed_attempts = exercise.allowed_attempts
        await self.session.flush()
        await self.session.refresh(db_exercise)
        return self._to_entity(db_exercise)

    @override
    async def delete(self, exercise_id: int) -> None:
        await self.session.execute(
            delete(ExerciseModel).where(
                ExerciseModel.exercise_id == exercise_id
            )
        )
        await self.session.flush()

    @staticmethod
    def _dump_questions(questions: List[Question]) -> list:
        return [q.model_dump(mode='json') for q in questions]

    def _to_entity(self, db_exercise: ExerciseModel) -> ExerciseEntity:
        return ExerciseEntity(
            exercise_id=db_exercise.exercise_id,
            title=db_exercise.title,
            description=db_exercise.description,
            exercise_type=ExerciseType(db_exercise.exercise_type),
            lesson_id=db_exercise.lesson_id,
            questions=[
                Question.model_validate(q) for q in db_exercise.questions
            ],
            allowed_roles=[UserRole(r) for r in db_exercise.allowed_roles],
            allowed_attempts=db_exercise.allowed_attempts,
            created_at=db_exercise.created_at,
        )

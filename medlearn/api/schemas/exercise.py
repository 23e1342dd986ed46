from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medlearn.core.entities.exercise import Exercise, Question
from medlearn.core.enums import ExerciseType, UserRole


class PaginationSchema(BaseModel):
    total: int = Field(description='Exercises matching the filters')
    page: int = Field(description='Current page, starting at 1')
    pages: int = Field(description='Number of pages')


class ExerciseListSchema(BaseModel):
    exercises: List[Exercise] = Field(description='Exercises of the page')
    pagination: PaginationSchema


class ExerciseCreateSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, alias='titulo')
    description: Optional[str] = Field(default=None, alias='descricao')
    exercise_type: Optional[ExerciseType] = Field(default=None, alias='tipo')
    lesson_id: Optional[int] = Field(default=None, alias='aulaId')
    questions: Optional[List[Question]] = Field(
        default=None, alias='questoes'
    )
    allowed_roles: Optional[List[UserRole]] = Field(
        default=None, alias='cargosPermitidos'
    )
    allowed_attempts: Optional[int] = Field(
        default=None, alias='tentativasPermitidas', ge=1
    )


class ExerciseUpdateSchema(ExerciseCreateSchema):
    pass


class MessageSchema(BaseModel):
    message: str

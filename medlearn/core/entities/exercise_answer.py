from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medlearn.core.entities.exercise import AnswerValue


class ExerciseAnswer(BaseModel):
    """A stored, graded submission of one attempt."""

    model_config = ConfigDict(populate_by_name=True)

    answer_id: Optional[int] = Field(default=None, alias='_id')
    exercise_id: int = Field(alias='exercicioId')
    user_id: int = Field(alias='usuarioId')
    answers: List[Optional[AnswerValue]] = Field(alias='respostas')
    score: int = Field(alias='nota', ge=0, le=100)
    attempt_number: int = Field(alias='tentativa', ge=1)
    created_at: Optional[datetime] = Field(default=None, alias='createdAt')

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medlearn.core.entities.exercise import AnswerValue


class QuestionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(alias='pergunta')
    user_answer: Optional[AnswerValue] = Field(
        default=None, alias='suaResposta'
    )
    correct_answer: Optional[AnswerValue] = Field(
        default=None, alias='respostaCorreta'
    )
    is_correct: bool = Field(alias='correto')
    image: Optional[str] = Field(default=None, alias='imagem')
    commentary: Optional[str] = Field(
        default=None, alias='respostaComentada'
    )
    source: Optional[str] = Field(default=None, alias='fonteBibliografica')


class ExerciseResult(BaseModel):
    """Graded outcome of a submitted attempt, as computed by the server."""

    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(alias='nota', ge=0, le=100)
    attempt_number: int = Field(alias='tentativa', ge=1)
    attempts_remaining: int = Field(alias='tentativasRestantes')
    questions: List[QuestionResult] = Field(
        default_factory=list, alias='questoes'
    )

    @property
    def correct_count(self) -> int:
        return sum(1 for q in self.questions if q.is_correct)

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from medlearn.core.enums import ExerciseType, UserRole

AnswerValue = Union[int, str]


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(alias='pergunta', description='Question text')
    image: Optional[str] = Field(
        default=None, alias='imagem', description='Image URL'
    )
    options: List[str] = Field(
        default_factory=list,
        alias='opcoes',
        description='Options for choice questions',
    )
    correct_answer: Optional[AnswerValue] = Field(
        default=None,
        alias='respostaCorreta',
        description='Option index or expected text, hidden before grading',
    )
    commentary: Optional[str] = Field(
        default=None,
        alias='respostaComentada',
        description='Explanation shown after grading',
    )
    source: Optional[str] = Field(
        default=None,
        alias='fonteBibliografica',
        description='Bibliographic source shown after grading',
    )
    points: int = Field(default=1, alias='pontos', ge=0)

    def without_answer(self) -> 'Question':
        return self.model_copy(
            update={
                'correct_answer': None,
                'commentary': None,
                'source': None,
            }
        )


class Exercise(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exercise_id: Optional[int] = Field(
        default=None, alias='_id', description='Exercise ID'
    )
    title: str = Field(alias='titulo', min_length=1)
    description: Optional[str] = Field(default=None, alias='descricao')
    exercise_type: ExerciseType = Field(alias='tipo')
    lesson_id: Optional[int] = Field(default=None, alias='aulaId')
    questions: List[Question] = Field(
        default_factory=list, alias='questoes'
    )
    allowed_roles: List[UserRole] = Field(
        default_factory=list, alias='cargosPermitidos'
    )
    allowed_attempts: int = Field(
        default=3, alias='tentativasPermitidas', ge=1
    )
    created_at: Optional[datetime] = Field(default=None, alias='createdAt')

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def is_accessible_by(self, role: UserRole) -> bool:
        return role == UserRole.ADMIN or role in self.allowed_roles

    def without_answers(self) -> 'Exercise':
        """
        Returns a copy safe to show before grading: correct answers,
        commentary and sources are removed from every question.
        """
        return self.model_copy(
            update={
                'questions': [q.without_answer() for q in self.questions]
            }
        )

    def __str__(self):
        return (
            f'Exercise(exercise_id={self.exercise_id}, '
            f'title={self.title}, '
            f'exercise_type={self.exercise_type.value}, '
            f'questions={self.question_count}, '
            f'allowed_attempts={self.allowed_attempts})'
        )

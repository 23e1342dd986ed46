from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medlearn.core.entities.exercise import AnswerValue


class AnswerSubmissionSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    answers: List[Optional[AnswerValue]] = Field(
        alias='respostas',
        description='One slot per question, null when unanswered',
    )

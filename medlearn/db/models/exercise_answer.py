from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medlearn.db.base import Base

if TYPE_CHECKING:
    from medlearn.db.models.exercise import Exercise


class ExerciseAnswer(Base):
    __tablename__ = 'exercise_answers'
    __table_args__ = (
        Index('ix_exercise_answers_exercise_user', 'exercise_id', 'user_id'),
    )

    answer_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey('exercises.exercise_id', ondelete='CASCADE'),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    answers: Mapped[list] = mapped_column(JSONB, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attempt_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.now, nullable=False
    )

    exercise: Mapped['Exercise'] = relationship(
        back_populates='exercise_answers'
    )

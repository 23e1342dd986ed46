from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medlearn.db.base import Base

if TYPE_CHECKING:
    from medlearn.db.models.exercise_answer import ExerciseAnswer


class Exercise(Base):
    __tablename__ = 'exercises'

    exercise_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    exercise_type: Mapped[str] = mapped_column(String, nullable=False)
    lesson_id: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, index=True
    )
    questions: Mapped[list] = mapped_column(JSONB, nullable=False)
    allowed_roles: Mapped[list] = mapped_column(JSONB, nullable=False)
    allowed_attempts: Mapped[int] = mapped_column(
        Integer, nullable=False, default=3
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    exercise_answers: Mapped[list['ExerciseAnswer']] = relationship(
        back_populates='exercise', cascade='all, delete-orphan'
    )

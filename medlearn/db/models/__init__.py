from medlearn.db.base import Base
from medlearn.db.models.exercise import Exercise
from medlearn.db.models.exercise_answer import ExerciseAnswer

__all__ = [
    'Base',
    'Exercise',
    'ExerciseAnswer',
]

class ExerciseError(Exception):
    """Base class for exercise domain errors."""


class ExerciseNotFoundError(ExerciseError):
    def __init__(self, exercise_id: int):
        self.exercise_id = exercise_id
        super().__init__(f'Exercise with ID {exercise_id} not found')


class ExerciseAccessDeniedError(ExerciseError):
    pass


class AttemptsExhaustedError(ExerciseError):
    def __init__(self, allowed_attempts: int):
        self.allowed_attempts = allowed_attempts
        super().__init__(
            f'Maximum number of attempts reached ({allowed_attempts})'
        )


class InvalidExerciseError(ExerciseError):
    pass

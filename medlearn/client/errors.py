from typing import Optional


class ExerciseClientError(Exception):
    pass


class ExerciseApiError(ExerciseClientError):
    """A request to the exercise API failed in transport or was rejected."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AttemptStateError(ExerciseClientError):
    pass

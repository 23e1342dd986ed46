class QuestionNavigator:
    """Tracks which question of a fixed sequence has focus."""

    def __init__(self, question_count: int):
        self.question_count = question_count
        self._current = 0

    @property
    def current_index(self) -> int:
        return self._current

    @property
    def has_previous(self) -> bool:
        return self._current > 0

    @property
    def has_next(self) -> bool:
        return self._current < self.question_count - 1

    @property
    def is_last(self) -> bool:
        return not self.has_next

    def go_to(self, index: int) -> bool:
        if not 0 <= index < self.question_count:
            return False
        self._current = index
        return True

    def next(self) -> bool:
        return self.go_to(self._current + 1)

    def previous(self) -> bool:
        return self.go_to(self._current - 1)

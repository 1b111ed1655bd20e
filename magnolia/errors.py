"""Exception types shared across the portal."""


class MagnoliaError(Exception):
    """Base class for portal errors."""


class InvalidInputError(MagnoliaError, ValueError):
    """Input rejected before any mutation. The message is user-facing."""


class AttemptLimitError(MagnoliaError):
    """Raised when a user has used up the attempts allowed for an exam."""

    def __init__(self, exam_id: str, attempts_allowed: int):
        self.exam_id = exam_id
        self.attempts_allowed = attempts_allowed
        super().__init__(
            f"You have used all {attempts_allowed} attempt(s) allowed for this exam"
        )


class StoreUnavailableError(MagnoliaError):
    """The key-value store could not be read or written."""


class SchedulerError(MagnoliaError):
    """The external scheduler could not supply data."""

    def __init__(self, message: str, attempted: list[str]):
        self.attempted = list(attempted)
        super().__init__(message)

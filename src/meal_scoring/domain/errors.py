"""Error types shared across services and adapters."""

from datetime import date


class InvalidInputError(ValueError):
    """Raised when input reaching a service does not have the expected shape."""


class IngestParseError(ValueError):
    """Raised when the meal extraction oracle returns an unusable payload."""


class PersistenceError(RuntimeError):
    """Raised when a storage read or write fails.

    ``written`` lists the days already committed before the failure, so
    callers recalculating a range can see which days succeeded.
    """

    def __init__(self, message: str, written: list[date] | None = None) -> None:
        super().__init__(message)
        self.written = written or []

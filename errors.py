from typing import List, Optional


class EntryValidationError(ValueError):
    """Raised when a workout entry breaks one or more field rules."""

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None) -> None:
        super().__init__(", ".join(errors))
        self.errors = list(errors)
        self.warnings = list(warnings or [])


class StorageError(RuntimeError):
    """Base class for failures of the key-value store."""


class StorageReadError(StorageError):
    """Persisted entry data could not be parsed."""


class StorageWriteError(StorageError):
    """Persisting entry data failed. Previously stored data is untouched."""


class QuotaExceededError(StorageError):
    """The key-value store has no room left for the value being written."""

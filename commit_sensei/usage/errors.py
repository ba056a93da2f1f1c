"""Usage Tracking Errors"""


class UsageError(Exception):
    """Base class for usage tracking failures."""
    pass


class StorageReadError(UsageError):
    """Raised when the usage file exists but cannot be read or parsed."""
    pass


class StorageWriteError(UsageError):
    """Raised when the usage file cannot be written."""
    pass


class QuotaExceeded(UsageError):
    """Raised when admission is denied by one of the quota limits."""

    def __init__(self, reason: str):
        super().__init__(f"Rate limit exceeded: {reason}")
        self.reason = reason


class StorageLockError(UsageError):
    """Raised when the usage file lock cannot be acquired."""
    pass

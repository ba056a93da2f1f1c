"""Usage Tracking and Quota Enforcement Package"""

from commit_sensei.usage.errors import (
    UsageError, StorageReadError, StorageWriteError, StorageLockError, QuotaExceeded,
)
from commit_sensei.usage.record import (
    RPM, TPM, RPD, MINUTE_MS, WINDOW_MS,
    Admission, QuotaLimits, RecentEvent, UsageRecord,
    check_admission, minute_usage, record_success, reset_if_window_expired,
)
from commit_sensei.usage.tracker import USAGE_FILENAME, UsageTracker, now_ms

__all__ = [
    "UsageError",
    "StorageReadError",
    "StorageWriteError",
    "StorageLockError",
    "QuotaExceeded",
    "RPM",
    "TPM",
    "RPD",
    "MINUTE_MS",
    "WINDOW_MS",
    "Admission",
    "QuotaLimits",
    "RecentEvent",
    "UsageRecord",
    "check_admission",
    "minute_usage",
    "record_success",
    "reset_if_window_expired",
    "USAGE_FILENAME",
    "UsageTracker",
    "now_ms",
]

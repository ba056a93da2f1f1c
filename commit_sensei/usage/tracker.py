"""Usage Tracker - Persist quota state and gate generation requests.

The usage file lives in the working directory (`.genai-usage.json` by default):

{
    "requests": 12,
    "tokens": 3400,
    "timestamp": 1718000000000,
    "recent": [{"timestamp": 1718000050000, "tokens": 280}]
}

Writes go to a temp file in the same directory and are moved into place with
os.replace, so readers never see a half-written file. A FileLock next to the
usage file serializes read-modify-write cycles across concurrent invocations.
"""

import json
import os
import stat
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable

from filelock import FileLock, Timeout

from commit_sensei.output import print_warning
from commit_sensei.usage.errors import QuotaExceeded, StorageLockError, StorageReadError, StorageWriteError
from commit_sensei.usage.record import (
    QuotaLimits, UsageRecord, check_admission, record_success, reset_if_window_expired,
)

USAGE_FILENAME = ".genai-usage.json"
LOCK_TIMEOUT = 10.0
# Mode for a usage file created from scratch; an existing file keeps its own
NEW_FILE_MODE = 0o644


def now_ms() -> int:
    return int(time.time() * 1000)


class UsageTracker:
    """Loads, checks and records usage against a single usage file."""

    def __init__(
        self,
        path: str | Path | None = None,
        limits: QuotaLimits | None = None,
        clock: Callable[[], int] = now_ms,
        lock_timeout: float = LOCK_TIMEOUT,
    ):
        self.path = Path(path) if path else Path.cwd() / USAGE_FILENAME
        self.limits = limits or QuotaLimits()
        self.clock = clock
        self._lock = FileLock(f"{self.path}.lock", timeout=lock_timeout)

    @contextmanager
    def locked(self):
        """Hold the usage file lock for a read-modify-write cycle."""
        try:
            self._lock.acquire()
        except Timeout:
            raise StorageLockError(f"Timed out waiting for lock on {self.path}")
        except OSError as e:
            raise StorageLockError(f"Could not lock {self.path}: {e}")
        try:
            yield
        finally:
            self._lock.release()

    def load(self) -> UsageRecord:
        """Read the usage file, or start a fresh record if there is none.

        A fresh record is not written until the next save().

        Raises:
            StorageReadError: the file exists but is unreadable or malformed
        """
        if not self.path.exists():
            return UsageRecord.fresh(self.clock())

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read usage file {self.path}: {e}")
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and oversized integer literals
            raise StorageReadError(f"Corrupt usage file {self.path}: {e}")

        return UsageRecord.from_dict(data)

    def save(self, record: UsageRecord) -> None:
        """Atomically replace the usage file with `record`.

        Raises:
            StorageWriteError: the directory or disk is not writable
        """
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=self.path.parent,
                prefix=f"{self.path.name}.", suffix='.tmp', delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(record.to_dict(), tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise StorageWriteError(f"Could not save usage file {self.path}: {e}")

    def _file_mode(self) -> int:
        # NamedTemporaryFile creates 0600 files
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            return NEW_FILE_MODE

    def snapshot(self, now: int | None = None) -> UsageRecord:
        """Current usage with any expired window already reset. Nothing is written."""
        now = self.clock() if now is None else now
        return reset_if_window_expired(self.load(), now)

    def admit(self, now: int | None = None) -> UsageRecord:
        """Gate one generation request.

        Resets an expired window and checks all quota limits. The record is
        written back either way, which fixes the window start of a fresh
        record before the request goes out.

        Returns:
            The current record when the request is allowed

        Raises:
            StorageReadError: quota state is unknown; the caller must abort
            StorageLockError: another invocation holds the lock too long
            QuotaExceeded: one of the limits is reached
        """
        now = self.clock() if now is None else now
        with self.locked():
            record = reset_if_window_expired(self.load(), now)
            self._save_or_warn(record)

        admission = check_admission(record, self.limits, now)
        if not admission:
            raise QuotaExceeded(admission.reason)
        return record

    def record(self, tokens_used: int | None, now: int | None = None) -> UsageRecord | None:
        """Count one successful generation and persist it.

        The file is re-read under the lock so increments from concurrent
        invocations are not lost. Storage failures are reported and
        swallowed: the message has already been generated.
        """
        now = self.clock() if now is None else now
        try:
            with self.locked():
                current = reset_if_window_expired(self.load(), now)
                updated = record_success(current, tokens_used, now)
                self.save(updated)
                return updated
        except (StorageReadError, StorageWriteError, StorageLockError) as e:
            print_warning(f"Usage not recorded: {e}")
            return None

    def _save_or_warn(self, record: UsageRecord) -> None:
        try:
            self.save(record)
        except StorageWriteError as e:
            print_warning(str(e))

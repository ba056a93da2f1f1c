"""Usage Record - Quota state and the pure functions that move it forward.

Everything here is side-effect free. Timestamps are integer milliseconds since
the epoch so the on-disk layout stays {"requests", "tokens", "timestamp"}.
"""

from dataclasses import dataclass, field, replace

from commit_sensei.usage.errors import StorageReadError

# Free-tier limits of the generation service
RPM = 15
TPM = 1_000_000
RPD = 1_500

MINUTE_MS = 60 * 1000
WINDOW_MS = 24 * 60 * 60 * 1000

# Latest timestamp a usage file may hold (3000-01-01T00:00:00Z); anything past
# it cannot be rendered as a local datetime
MAX_TIMESTAMP_MS = 32_503_680_000_000

# Hard cap on the per-minute event log, independent of age pruning
MAX_RECENT_EVENTS = 256

DAILY_LIMIT_REASON = "daily request limit exceeded"
MINUTE_REQUEST_REASON = "per-minute request limit exceeded"
MINUTE_TOKEN_REASON = "per-minute token limit exceeded"


@dataclass(frozen=True)
class RecentEvent:
    """A single successful request inside the per-minute window."""
    timestamp: int
    tokens: int = 0


@dataclass(frozen=True)
class QuotaLimits:
    """Limits checked before every generation request."""
    rpm: int = RPM
    tpm: int = TPM
    rpd: int = RPD
    enforce_per_minute: bool = True


@dataclass(frozen=True)
class Admission:
    """Outcome of an admission check. `reason` is set only when denied."""
    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = Admission(allowed=True)


@dataclass(frozen=True)
class UsageRecord:
    """Requests and tokens counted inside the current daily window."""
    request_count: int
    token_count: int
    window_start: int
    recent: tuple[RecentEvent, ...] = field(default=())

    @classmethod
    def fresh(cls, now: int) -> 'UsageRecord':
        return cls(request_count=0, token_count=0, window_start=now)

    def to_dict(self) -> dict:
        return {
            "requests": self.request_count,
            "tokens": self.token_count,
            "timestamp": self.window_start,
            "recent": [{"timestamp": e.timestamp, "tokens": e.tokens} for e in self.recent],
        }

    @classmethod
    def from_dict(cls, data) -> 'UsageRecord':
        """Build a record from its JSON form, rejecting anything malformed.

        A null `tokens` is read as 0: older writers stored an undefined token
        count that serialized to null.
        """
        if not isinstance(data, dict):
            raise StorageReadError(f"Usage data must be a JSON object, got {type(data).__name__}")

        tokens = data.get("tokens")
        if tokens is None:
            tokens = 0

        request_count = _non_negative_int("requests", data.get("requests"))
        token_count = _non_negative_int("tokens", tokens)
        window_start = _timestamp("timestamp", data.get("timestamp"))

        raw_recent = data.get("recent", [])
        if not isinstance(raw_recent, list):
            raise StorageReadError("Usage field 'recent' must be a list")
        recent = []
        for item in raw_recent:
            if not isinstance(item, dict):
                raise StorageReadError("Usage field 'recent' must contain objects")
            recent.append(RecentEvent(
                timestamp=_timestamp("recent.timestamp", item.get("timestamp")),
                tokens=_non_negative_int("recent.tokens", item.get("tokens", 0)),
            ))

        return cls(
            request_count=request_count,
            token_count=token_count,
            window_start=window_start,
            recent=tuple(recent),
        )


def _non_negative_int(name: str, value) -> int:
    # bool is an int subclass; a stray true/false is still corrupt data
    if isinstance(value, bool) or not isinstance(value, int):
        raise StorageReadError(f"Usage field '{name}' must be an integer, got {value!r}")
    if value < 0:
        raise StorageReadError(f"Usage field '{name}' must not be negative, got {value}")
    return value


def _timestamp(name: str, value) -> int:
    value = _non_negative_int(name, value)
    if value > MAX_TIMESTAMP_MS:
        raise StorageReadError(f"Usage field '{name}' is not a plausible timestamp, got {value}")
    return value


def is_window_expired(record: UsageRecord, now: int) -> bool:
    return now - record.window_start > WINDOW_MS


def reset_if_window_expired(record: UsageRecord, now: int) -> UsageRecord:
    """Start a new daily window when the current one is older than 24 hours.

    Both counters are zeroed and the window restarts at `now`. An unexpired
    record is returned as-is, so applying this twice with the same `now` is
    the same as applying it once.
    """
    if not is_window_expired(record, now):
        return record
    return replace(record, request_count=0, token_count=0, window_start=now)


def prune_recent(events, now: int) -> tuple[RecentEvent, ...]:
    """Keep events younger than one minute, newest MAX_RECENT_EVENTS only."""
    kept = [e for e in events if now - e.timestamp < MINUTE_MS]
    return tuple(kept[-MAX_RECENT_EVENTS:])


def minute_usage(record: UsageRecord, now: int) -> tuple[int, int]:
    """Return (requests, tokens) seen in the last 60 seconds."""
    recent = prune_recent(record.recent, now)
    return len(recent), sum(e.tokens for e in recent)


def check_admission(record: UsageRecord, limits: QuotaLimits, now: int) -> Admission:
    """Decide whether one more request may go out.

    The daily window is reset first if it has expired. The daily cap is
    checked before the per-minute limits, which only apply when
    `limits.enforce_per_minute` is set.
    """
    record = reset_if_window_expired(record, now)

    if record.request_count >= limits.rpd:
        return Admission(allowed=False, reason=DAILY_LIMIT_REASON)

    if limits.enforce_per_minute:
        requests, tokens = minute_usage(record, now)
        if requests >= limits.rpm:
            return Admission(allowed=False, reason=MINUTE_REQUEST_REASON)
        if tokens >= limits.tpm:
            return Admission(allowed=False, reason=MINUTE_TOKEN_REASON)

    return ALLOWED


def record_success(record: UsageRecord, tokens_used: int | None, now: int) -> UsageRecord:
    """Count one successful generation. Missing or negative usage counts as 0."""
    tokens = tokens_used if isinstance(tokens_used, int) and tokens_used > 0 else 0
    recent = prune_recent(record.recent + (RecentEvent(timestamp=now, tokens=tokens),), now)
    return replace(
        record,
        request_count=record.request_count + 1,
        token_count=record.token_count + tokens,
        recent=recent,
    )

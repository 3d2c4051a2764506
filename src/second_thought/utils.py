"""Shared utilities for the purchase reflection service."""

from datetime import datetime, timezone

DECIMALS = 2


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round-trip)."""
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def round2(x: float | None) -> float | None:
    """Round a value to 2 decimal places; preserve None."""
    if x is None:
        return None
    return round(float(x), DECIMALS)


def clamp01(value: float) -> float:
    """Clamp a score into [0, 1]."""
    return max(0.0, min(1.0, value))


def format_number(x: float) -> str:
    """Plain number for prompts and messages: 50.0 -> "50", 49.990 -> "49.99"."""
    return f"{x:.2f}".rstrip("0").rstrip(".")

# =============================================================================
# taskhub_core/data/timestamps.py
# Timestamp normalization and the task date variant
# =============================================================================
"""
Supabase returns timestamps as ISO-8601 strings; older rows (and rows written
by other clients) may carry epoch numbers or exported ``{"seconds": ...}``
objects. Everything is resolved here, once, into timezone-aware datetimes.

The task ``date`` column is caller-formatted text (``DD/MM/YYYY``). Raw values
are parsed into a tagged variant:

    FormattedDate("25/12/2024")      text as entered by the user
    InstantDate(datetime(...))       a concrete instant

and repositories store the canonical text form on the entity.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Union

TASK_DATE_FORMAT = "%d/%m/%Y"
_TASK_DATE_RE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")

MONTH_NAMES = {
    "id": [
        "Januari", "Februari", "Maret", "April", "Mei", "Juni",
        "Juli", "Agustus", "September", "Oktober", "November", "Desember",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}


@dataclass(frozen=True)
class FormattedDate:
    """A date kept as the text the user entered."""
    text: str

    def to_instant(self) -> Optional[datetime]:
        match = _TASK_DATE_RE.match(self.text)
        if not match:
            return None
        day, month, year = (int(g) for g in match.groups())
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            return None

    def to_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class InstantDate:
    """A date that arrived as a concrete instant."""
    value: datetime

    def to_instant(self) -> Optional[datetime]:
        return self.value

    def to_text(self) -> str:
        return self.value.strftime(TASK_DATE_FORMAT)


DateValue = Union[FormattedDate, InstantDate]


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_instant(raw: Any) -> Optional[datetime]:
    """Best-effort conversion of a raw store value to an aware datetime."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return _ensure_aware(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if isinstance(raw, bool):
        return None
    try:
        if isinstance(raw, (int, float)):
            # Epoch milliseconds
            return datetime.fromtimestamp(raw / 1000.0, tz=timezone.utc)
        if isinstance(raw, dict) and "seconds" in raw:
            seconds = raw.get("seconds") or 0
            nanos = raw.get("nanoseconds") or 0
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError):
        # Out-of-range or non-numeric epoch values
        return None
    if isinstance(raw, str):
        try:
            return _ensure_aware(datetime.fromisoformat(raw.strip()))
        except ValueError:
            return None
    return None


def to_instant(raw: Any, default_now: bool = True) -> Optional[datetime]:
    """
    Normalize a stored timestamp field.

    Args:
        raw: Value as returned by the store
        default_now: Substitute the current time when the value is absent
            or unreadable

    Returns:
        Timezone-aware datetime (or None when default_now is False)
    """
    value = _parse_instant(raw)
    if value is None and default_now:
        return datetime.now(timezone.utc)
    return value


def parse_date_value(raw: Any) -> Optional[DateValue]:
    """Resolve a raw task ``date`` value into the tagged variant."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        if _TASK_DATE_RE.match(raw) or _parse_instant(raw) is None:
            return FormattedDate(raw.strip())
        return InstantDate(_parse_instant(raw))
    instant = _parse_instant(raw)
    if instant is None:
        return FormattedDate(str(raw))
    return InstantDate(instant)


def format_task_date(value: Union[datetime, date]) -> str:
    """Format a date the way task forms submit it (DD/MM/YYYY)."""
    return value.strftime(TASK_DATE_FORMAT)


def format_display_date(value: Optional[datetime], locale: str = "id", with_time: bool = True) -> str:
    """
    Render a timestamp for detail screens, e.g. "5 Januari 2025 pukul 09:30".
    """
    if value is None:
        return "Tanggal tidak tersedia" if locale == "id" else "Date not available"
    months = MONTH_NAMES.get(locale, MONTH_NAMES["en"])
    text = f"{value.day} {months[value.month - 1]} {value.year}"
    if with_time:
        joiner = "pukul" if locale == "id" else "at"
        text += f" {joiner} {value.hour:02d}:{value.minute:02d}"
    return text


def isoformat(value: datetime) -> str:
    """Serialize a datetime for a timestamptz column."""
    return _ensure_aware(value).isoformat()


class MonotonicClock:
    """
    UTC clock whose readings never repeat or go backwards within a process.

    Postgres stores microseconds, so two writes in the same microsecond are
    separated by bumping the second reading by one microsecond.
    """

    def __init__(self):
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current


_clock = MonotonicClock()


def utc_now() -> datetime:
    """Read the process-wide monotonic clock."""
    return _clock.now()

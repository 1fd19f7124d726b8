"""Reset-time resolution.

APIs report the reset of a rate-limit window in several incompatible units:
an absolute epoch timestamp, seconds from now, milliseconds from now, or a
calendar date string. `resolve_reset` converts the raw header text into a UTC
datetime, either using an explicit mode or by guessing from the value's shape.

Auto-detection rules (kept exactly as they are; clients depend on them):
- any letter -> date string
- an integer above 1_000_000_000 (September 2001) -> unix timestamp
- anything else -> delta seconds

Auto-detection never picks milliseconds. A millisecond timestamp such as
"1684260733000" is read as unix seconds, lands past year 9999 and resolves to
None. Callers with millisecond deltas must ask for "milliseconds" explicitly.

Nothing in this module raises on bad input; unparseable values yield None.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from .models import ResetMode

logger = logging.getLogger(__name__)

UNIX_TIMESTAMP_THRESHOLD = 1_000_000_000

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")
_LETTERS_RE = re.compile(r"[a-z]", re.IGNORECASE)

# "GMT+05:30", "UTC-0800", "GMT+5" are real UTC offsets here, not POSIX zones.
_GMT_OFFSET_RE = re.compile(r"\b(?:GMT|UTC)\s*([+-])(\d{1,2}):?(\d{2})?\b", re.IGNORECASE)
_BARE_GMT_RE = re.compile(r"\s+(?:GMT|UTC)$", re.IGNORECASE)
# Trailing zone comment, e.g. "(India Standard Time)"
_ZONE_COMMENT_RE = re.compile(r"\s*\([^)]*\)\s*$")

_DATE_FORMATS = (
    "%A, %B %d, %Y %I:%M:%S %p %z",
    "%A, %B %d, %Y %I:%M:%S %p",
    "%a %b %d %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S %z",
    "%A, %d %B %Y %H:%M:%S %z",
    "%B %d, %Y %H:%M:%S %z",
    "%B %d, %Y %H:%M:%S",
    "%d %B %Y %H:%M:%S %z",
    "%m/%d/%Y, %I:%M:%S %p %z",
    "%m/%d/%Y, %I:%M:%S %p",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y/%m/%d %H:%M:%S",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_int(value: str | int | None) -> Optional[int]:
    """Parse a leading base-10 integer ("42", " -7", "10s"), else None."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    m = _INT_RE.match(str(value))
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # digit run past the interpreter's int conversion limit
        return None


def _as_utc(dt: datetime) -> datetime:
    # Naive values are taken to be UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _normalize_now(now: datetime | None) -> datetime:
    return utc_now() if now is None else _as_utc(now)


def _normalize_date_text(raw: str) -> str:
    def _offset(m: re.Match[str]) -> str:
        sign, hours, minutes = m.group(1), int(m.group(2)), m.group(3) or "00"
        return f"{sign}{hours:02d}:{minutes}"

    text = _ZONE_COMMENT_RE.sub("", raw.strip())
    text = _GMT_OFFSET_RE.sub(_offset, text)
    text = _BARE_GMT_RE.sub(" +00:00", text)
    return " ".join(text.split())


def parse_reset_date(raw: str) -> Optional[datetime]:
    """Parse a calendar date string (long-form, ISO-8601 or HTTP-date)."""

    text = _normalize_date_text(raw)
    for fmt in _DATE_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except (ValueError, OverflowError):
            continue

    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _as_utc(datetime.fromisoformat(iso))
    except (ValueError, OverflowError):
        pass

    try:
        return _as_utc(parsedate_to_datetime(raw.strip()))
    except (TypeError, ValueError, IndexError, OverflowError):
        pass

    logger.debug("unparseable reset date: %r", raw)
    return None


def parse_reset_unix(raw: str | int | None) -> Optional[datetime]:
    """Treat the value as seconds since the UNIX epoch."""
    seconds = to_int(raw)
    if seconds is None:
        return None
    try:
        return _EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        return None


def parse_reset_seconds(raw: str | int | None, *, now: datetime | None = None) -> Optional[datetime]:
    """Treat the value as a number of seconds from now."""
    seconds = to_int(raw)
    if seconds is None:
        return None
    try:
        return _normalize_now(now) + timedelta(seconds=seconds)
    except OverflowError:
        return None


def parse_reset_milliseconds(
    raw: str | int | None, *, now: datetime | None = None
) -> Optional[datetime]:
    """Treat the value as a number of milliseconds from now."""
    millis = to_int(raw)
    if millis is None:
        return None
    try:
        return _normalize_now(now) + timedelta(milliseconds=millis)
    except OverflowError:
        return None


def parse_reset_auto(raw: str, *, now: datetime | None = None) -> Optional[datetime]:
    """Guess the unit of `raw` from its shape and parse it."""

    if _LETTERS_RE.search(raw):
        return parse_reset_date(raw)

    value = to_int(raw)
    if value is not None and value > UNIX_TIMESTAMP_THRESHOLD:
        return parse_reset_unix(value)

    # Could be seconds or milliseconds; seconds is the common case.
    return parse_reset_seconds(value, now=now)


def resolve_reset(
    raw: str | None, mode: ResetMode | None = None, *, now: datetime | None = None
) -> Optional[datetime]:
    """Resolve a raw reset value into a UTC datetime.

    Returns None when `raw` is empty; fallbacks (e.g. Retry-After) are the
    caller's business.
    """

    if not raw:
        return None

    if mode == "date":
        return parse_reset_date(raw)
    if mode == "unix":
        return parse_reset_unix(raw)
    if mode == "seconds":
        return parse_reset_seconds(raw, now=now)
    if mode == "milliseconds":
        return parse_reset_milliseconds(raw, now=now)
    return parse_reset_auto(raw, now=now)

"""Rate limit header parsing.

This module normalizes vendor-specific rate limit headers to `RateLimitInfo`.

Flow:
- the combined draft-7 `RateLimit` header, when present, is parsed on its own
- every detected convention (see `conventions.py`) is normalized separately
- results are sorted so the tightest quota (lowest `remaining`) comes first

Missing or unparseable fields become None; nothing here raises on bad input.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional

from .conventions import (
    COMBINED_HEADER,
    KNOWN_CONVENTIONS,
    Convention,
    FieldName,
    detect_conventions,
    has_combined_header,
)
from .headers import HeaderSource, resolve_headers
from .models import ParserOptions, RateLimitInfo
from .reset import parse_reset_seconds, parse_reset_unix, resolve_reset, to_int

logger = logging.getLogger(__name__)

DRAFT7_SOURCE = "draft-7"

_RE_LIMIT = re.compile(r"limit\s*=\s*([0-9]+)", re.IGNORECASE)
_RE_REMAINING = re.compile(r"remaining\s*=\s*([0-9]+)", re.IGNORECASE)
_RE_RESET = re.compile(r"reset\s*=\s*([0-9]+)", re.IGNORECASE)

Options = ParserOptions | Mapping[str, Any] | None


def _add(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None or b is None:
        return None
    return a + b


def _sub(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None or b is None:
        return None
    return a - b


def _pick(lookup: HeaderSource, candidates: Iterable[str]) -> Optional[str]:
    """First non-empty header among `candidates`."""
    for name in candidates:
        value = lookup.get(name)
        if value:
            return value
    return None


def _search_int(pattern: re.Pattern[str], text: str) -> Optional[int]:
    m = pattern.search(text)
    return to_int(m.group(1)) if m else None


def parse_draft7_header(header: str, *, now: datetime | None = None) -> RateLimitInfo:
    """Parse a combined `RateLimit` header (IETF draft 7).

    Example: "limit=100, remaining=25, reset=5". Fields may come in any order;
    unknown fields are ignored. `reset` is always delta seconds.
    """

    limit = _search_int(_RE_LIMIT, header)
    remaining = _search_int(_RE_REMAINING, header)
    reset_seconds = _search_int(_RE_RESET, header)

    return RateLimitInfo(
        limit=limit,
        used=_sub(limit, remaining),
        remaining=remaining,
        reset=parse_reset_seconds(reset_seconds, now=now),
        source=DRAFT7_SOURCE,
    )


def normalize(
    lookup: HeaderSource,
    convention: Convention,
    options: Options = None,
    *,
    now: datetime | None = None,
) -> RateLimitInfo:
    """Read limit/used/remaining/reset for one convention."""

    opts = ParserOptions.coerce(options)

    def field(name: FieldName) -> Optional[str]:
        return _pick(lookup, convention.field_names(name))

    limit = to_int(field("limit"))
    used = to_int(field("used"))
    remaining = to_int(field("remaining"))

    reset_raw = field("reset")
    reset = resolve_reset(reset_raw, opts.reset, now=now)
    if not reset_raw:
        retry_after = lookup.get("retry-after")
        if retry_after:
            logger.debug("%s: no reset header, falling back to retry-after", convention.name)
            reset = parse_reset_unix(retry_after)

    return RateLimitInfo(
        # Reddit omits the limit; most APIs omit used.
        limit=limit if limit is not None else _add(used, remaining),
        used=used if used is not None else _sub(limit, remaining),
        remaining=remaining,
        reset=reset,
        source=convention.name,
    )


def sort_by_remaining(infos: Iterable[RateLimitInfo]) -> list[RateLimitInfo]:
    """Lowest `remaining` first; unknown `remaining` last (stable)."""
    return sorted(infos, key=lambda i: (i.remaining is None, i.remaining or 0))


def collect_all(
    lookup: HeaderSource,
    options: Options = None,
    *,
    conventions: Iterable[Convention] = KNOWN_CONVENTIONS,
    now: datetime | None = None,
) -> list[RateLimitInfo]:
    """Every rate limit found in `lookup`, in detection order (unsorted)."""

    opts = ParserOptions.coerce(options)
    out: list[RateLimitInfo] = []

    if has_combined_header(lookup):
        out.append(parse_draft7_header(lookup.get(COMBINED_HEADER) or "", now=now))

    for convention in detect_conventions(lookup, conventions):
        out.append(normalize(lookup, convention, opts, now=now))

    return out


def get_rate_limits(
    source: Any, options: Options = None, *, now: datetime | None = None
) -> list[RateLimitInfo]:
    """Parse every rate limit on a response/headers object.

    Returns an empty list when no known headers are present.
    """

    lookup = resolve_headers(source)
    return sort_by_remaining(collect_all(lookup, options, now=now))


def get_rate_limit(
    source: Any, options: Options = None, *, now: datetime | None = None
) -> RateLimitInfo | None:
    """The tightest rate limit on a response/headers object, or None."""

    infos = get_rate_limits(source, options, now=now)
    return infos[0] if infos else None

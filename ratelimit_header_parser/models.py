"""Models for ratelimit-header-parser.

We keep the library lightweight (no mandatory pydantic dependency).
`RateLimitInfo` is the stable output contract; every field is optional because
partial information is both valid and common.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional, get_args

ResetMode = Literal["date", "unix", "seconds", "milliseconds"]

RESET_MODES: tuple[str, ...] = get_args(ResetMode)


@dataclass(frozen=True)
class RateLimitInfo:
    # Max number of requests allowed in the current window.
    limit: Optional[int] = None
    # Requests already made in the current window.
    used: Optional[int] = None
    # Requests left before the limit is hit.
    remaining: Optional[int] = None
    # When the window resets (UTC).
    reset: Optional[datetime] = None

    # Convention that produced this value, e.g. "x-ratelimit" or "draft-7".
    source: str = field(default="", compare=False)

    def to_public_dict(self) -> dict[str, Any]:
        # JSON-safe representation (datetime -> ISO-8601 string)
        return {
            "limit": self.limit,
            "used": self.used,
            "remaining": self.remaining,
            "reset": self.reset.isoformat() if self.reset else None,
            "source": self.source,
        }


@dataclass(frozen=True)
class ParserOptions:
    """How to interpret the reset field.

    reset:
    - "date": a calendar date string
    - "unix": seconds since the epoch
    - "seconds": seconds from now
    - "milliseconds": milliseconds from now
    - None: guess from the shape of the value
    """

    reset: Optional[ResetMode] = None

    def __post_init__(self) -> None:
        if self.reset is not None and self.reset not in RESET_MODES:
            raise ValueError(
                f"invalid reset mode {self.reset!r}; expected one of {', '.join(RESET_MODES)}"
            )

    @classmethod
    def coerce(cls, value: ParserOptions | Mapping[str, Any] | None) -> ParserOptions:
        if value is None:
            return cls()
        if isinstance(value, ParserOptions):
            return value
        return cls(reset=value.get("reset"))

"""Known rate-limit header conventions.

A convention is one vendor's naming scheme for rate-limit headers: a shared
prefix plus per-field suffixes. A convention is present on a response when its
probe header (the "remaining" field) is non-empty.

Notes:
- Order matters: detection reports matches in table order.
- The combined draft-7 `RateLimit` header is not in this table; see
  `has_combined_header`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from .headers import HeaderSource

logger = logging.getLogger(__name__)

FieldName = Literal["limit", "used", "remaining", "reset"]

COMBINED_HEADER = "ratelimit"

DEFAULT_ALIASES: Mapping[FieldName, tuple[str, ...]] = MappingProxyType(
    {
        # max: Amazon MWS
        "limit": ("limit", "dailylimit", "max"),
        # observed: GitLab
        "used": ("used", "observed"),
        "remaining": ("remaining",),
        # resetson: Amazon MWS
        "reset": ("reset", "resettime", "resetson", "next"),
    }
)


@dataclass(frozen=True)
class Convention:
    name: str
    probe: str
    prefix: str
    aliases: Mapping[FieldName, tuple[str, ...]] = field(default_factory=lambda: DEFAULT_ALIASES)

    def field_names(self, name: FieldName) -> list[str]:
        """Full header names for a field, in fallback order."""
        return [f"{self.prefix}{suffix}" for suffix in self.aliases.get(name, ())]


KNOWN_CONVENTIONS: tuple[Convention, ...] = (
    # IETF draft-6 and the common unofficial form
    Convention(name="ratelimit", probe="ratelimit-remaining", prefix="ratelimit-"),
    Convention(name="x-ratelimit", probe="x-ratelimit-remaining", prefix="x-ratelimit-"),
    # Twitter
    Convention(name="x-rate-limit", probe="x-rate-limit-remaining", prefix="x-rate-limit-"),
    Convention(
        name="x-ratelimit-requests",
        probe="x-ratelimit-requests-remaining",
        prefix="x-ratelimit-requests-",
    ),
    # GraphQL cost based limits
    Convention(
        name="x-ratelimit-complexity",
        probe="x-ratelimit-complexity-remaining",
        prefix="x-ratelimit-complexity-",
    ),
    # Imgur: per-user and per-client quotas on the same response
    Convention(name="x-ratelimit-user", probe="x-ratelimit-userremaining", prefix="x-ratelimit-user"),
    Convention(
        name="x-ratelimit-client", probe="x-ratelimit-clientremaining", prefix="x-ratelimit-client"
    ),
    Convention(
        name="x-post-rate-limit", probe="x-post-rate-limit-remaining", prefix="x-post-rate-limit-"
    ),
    Convention(name="x-mws-quota", probe="x-mws-quota-remaining", prefix="x-mws-quota-"),
)


def has_combined_header(lookup: HeaderSource) -> bool:
    return bool(lookup.get(COMBINED_HEADER))


def detect_conventions(
    lookup: HeaderSource, conventions: Iterable[Convention] = KNOWN_CONVENTIONS
) -> list[Convention]:
    """Return every convention whose probe header is present, in table order."""

    found = [c for c in conventions if lookup.get(c.probe)]
    if found:
        logger.debug("detected conventions: %s", ", ".join(c.name for c in found))
    return found

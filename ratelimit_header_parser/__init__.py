"""ratelimit-header-parser - normalize rate-limit headers across vendor conventions."""

__version__ = "0.1.0"

from .models import ParserOptions, RateLimitInfo, ResetMode  # noqa: E402
from .parser import get_rate_limit, get_rate_limits, parse_draft7_header  # noqa: E402

__all__ = [
    "get_rate_limit",
    "get_rate_limits",
    "parse_draft7_header",
    "ParserOptions",
    "RateLimitInfo",
    "ResetMode",
]

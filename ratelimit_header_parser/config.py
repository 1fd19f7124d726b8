"""Environment configuration for the CLI and web service.

The parsing library itself is configured per call (`ParserOptions`); only the
outer surfaces read the environment.

Variables:
- RATELIMIT_RESET_MODE: default reset mode (date, unix, seconds, milliseconds)
- RATELIMIT_HTTP_TIMEOUT: CLI fetch timeout in seconds (default: 30)
- RATELIMIT_LOG_LEVEL: CLI log level (default: WARNING)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, cast

from dotenv import load_dotenv

from .models import RESET_MODES, ResetMode

DEFAULT_TIMEOUT = 30
DEFAULT_LOG_LEVEL = "WARNING"


def env_paths() -> list[Path]:
    return [Path(".env"), Path.home() / ".env", Path.home() / ".ratelimit-headers.env"]


def load_env() -> Optional[Path]:
    """Load the first .env file found (current dir, then home dir)."""
    for env_path in env_paths():
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def default_reset_mode() -> Optional[ResetMode]:
    raw = os.getenv("RATELIMIT_RESET_MODE", "").strip().lower()
    if not raw:
        return None
    if raw not in RESET_MODES:
        raise ValueError(
            f"RATELIMIT_RESET_MODE={raw!r} is invalid; expected one of {', '.join(RESET_MODES)}"
        )
    return cast(ResetMode, raw)


def default_timeout() -> int:
    raw = os.getenv("RATELIMIT_HTTP_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return max(1, int(raw))
    except ValueError:
        raise ValueError(f"RATELIMIT_HTTP_TIMEOUT={raw!r} is not an integer") from None


def log_level() -> int:
    name = os.getenv("RATELIMIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING

#!/usr/bin/env python3
"""
ratelimit-headers - CLI entry point

Reads HTTP response headers (a `curl -sI` dump, -H flags, or a live --url
request) and prints the rate limits they carry.
"""

from __future__ import annotations

import argparse
import http.client
import json
import logging
import sys
import urllib.error
import urllib.request
from collections.abc import Iterable
from typing import Any, Optional, TextIO

from . import __version__
from .config import default_reset_mode, default_timeout, load_env, log_level
from .models import RESET_MODES, ParserOptions, RateLimitInfo
from .parser import get_rate_limits

logger = logging.getLogger(__name__)

USER_AGENT = f"ratelimit-headers/{__version__}"


def parse_header_block(text: str) -> dict[str, str]:
    """Parse a raw header dump into a dict.

    - Status lines ("HTTP/1.1 200 OK") are skipped; each one starts a new
      response, so the last response of a redirect chain wins.
    - Parsing stops at the blank line that ends the headers (body follows).
    - Lines without a colon are ignored.
    """

    headers: dict[str, str] = {}
    in_headers = False
    for line in text.splitlines():
        line = line.rstrip("\r")
        if line.upper().startswith("HTTP/"):
            headers = {}
            in_headers = True
            continue
        if not line.strip():
            if in_headers and headers:
                in_headers = False
            continue
        if headers and not in_headers:
            # Body of the previous response.
            continue
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            continue
        in_headers = True
        headers[name.strip()] = value.strip()
    return headers


def parse_header_flags(values: Iterable[str]) -> dict[str, str]:
    """Parse repeated `-H "Name: value"` flags."""
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"invalid header {raw!r}; expected 'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def fetch_headers(url: str, timeout: int = 30, method: str = "GET") -> dict[str, str]:
    """Request `url` and return the response headers.

    Error responses (429, 503, ...) still carry rate-limit headers, so their
    headers are returned instead of raising.
    """

    req = urllib.request.Request(url, method=method)
    req.add_header("User-Agent", USER_AGENT)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            status, headers = response.status, response.headers
    except urllib.error.HTTPError as e:
        status, headers = e.code, e.headers

    logger.debug("%s %s -> %s", method, url, status)
    return {str(k): str(v) for k, v in headers.items()} if headers is not None else {}


def _read_source(path: str, stdin: TextIO) -> str:
    if path == "-":
        return stdin.read()
    with open(path) as f:
        return f.read()


def _fmt(value: Any) -> str:
    return "?" if value is None else str(value)


def print_human_readable(infos: list[RateLimitInfo]) -> None:
    """Print rate limits in human-readable format."""
    if not infos:
        print("No rate limit headers found.")
        return

    print("\nRate limits (tightest first)")
    print(f"{'=' * 50}")
    for info in infos:
        reset = info.reset.isoformat() if info.reset else "unknown"
        print(f"\n[{info.source or 'unknown'}]")
        print(f"  Limit:     {_fmt(info.limit)}")
        print(f"  Used:      {_fmt(info.used)}")
        print(f"  Remaining: {_fmt(info.remaining)}")
        print(f"  Reset:     {reset}")


def main(argv: Optional[list[str]] = None) -> None:
    load_env()

    parser = argparse.ArgumentParser(
        description="Extract rate-limit metadata from HTTP response headers"
    )
    parser.add_argument(
        "file", nargs="?", help="File with a raw header dump, e.g. `curl -sI` output ('-' for stdin)"
    )
    parser.add_argument("--url", "-u", help="Request this URL and parse its response headers")
    parser.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        help="Header as 'Name: value' (repeatable)",
    )
    parser.add_argument(
        "--reset",
        choices=list(RESET_MODES),
        default=None,
        help="How to read the reset field (default: auto-detect, or RATELIMIT_RESET_MODE)",
    )
    parser.add_argument(
        "--all", "-a", action="store_true", help="Show every rate limit, not just the tightest"
    )
    parser.add_argument(
        "--format",
        choices=["pretty", "json", "ndjson"],
        default="pretty",
        help="Output format (default: pretty)",
    )
    parser.add_argument(
        "--method", default="GET", help="HTTP method used with --url (default: GET)"
    )
    parser.add_argument(
        "--timeout",
        "-t",
        type=int,
        default=None,
        help="Timeout for --url in seconds (default: 30, or RATELIMIT_HTTP_TIMEOUT)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file and not args.url and not args.header:
        parser.error("Provide a header FILE, --url or at least one --header")

    try:
        reset_mode = args.reset or default_reset_mode()
        options = ParserOptions(reset=reset_mode)
        timeout = args.timeout if args.timeout is not None else default_timeout()

        headers: dict[str, str] = {}
        if args.file:
            headers.update(parse_header_block(_read_source(args.file, sys.stdin)))
        if args.url:
            headers.update(fetch_headers(args.url, timeout=timeout, method=args.method.upper()))
        headers.update(parse_header_flags(args.header))
    except (ValueError, OSError, http.client.HTTPException) as e:
        # urllib.error.URLError is an OSError
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2) from None

    infos = get_rate_limits(headers, options)
    if not args.all:
        infos = infos[:1]

    if args.format == "json":
        payload: Any = [i.to_public_dict() for i in infos]
        if not args.all:
            payload = payload[0] if payload else None
        print(json.dumps(payload, indent=2))
    elif args.format == "ndjson":
        for info in infos:
            print(json.dumps(info.to_public_dict()))
    else:
        print_human_readable(infos)

    raise SystemExit(0 if infos else 1)


if __name__ == "__main__":
    main()

"""Header access adapters.

Callers hand us whatever their HTTP stack produced: a plain dict or other
Mapping (requests' CaseInsensitiveDict, httpx.Headers, ...), a native header
container such as email.message.Message, or a whole response object.
`resolve_headers` turns all of those into a `HeaderSource` with a single
case-insensitive `get`.

Values that are not strings (lists, ints, bytes) resolve to None rather than
being coerced.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Zero-argument methods that return a header mapping (or a list of pairs).
_HEADER_GETTERS = ("getHeaders", "getheaders")

# Methods that only native header containers carry.
_NATIVE_MARKERS = ("getSetCookie", "get_all")

# Wrappers nested deeper than this are treated as the headers themselves.
_MAX_DEPTH = 4


class HeaderSource:
    """Base interface for header lookups."""

    def get(self, name: str) -> Optional[str]:
        """Return the header value for a lower-case `name`, or None."""
        raise NotImplementedError


class PlainMapping(HeaderSource):
    """Plain dict of header name to value, keys in any letter case."""

    def __init__(self, headers: Mapping[Any, Any] | None = None) -> None:
        self._headers: dict[str, Any] = {}
        if not headers:
            return
        for k, v in headers.items():
            if k is None:
                continue
            self._headers[str(k).lower()] = v

    def get(self, name: str) -> Optional[str]:
        value = self._headers.get(name.lower())
        return value if isinstance(value, str) else None

    def __repr__(self) -> str:
        return f"PlainMapping({sorted(self._headers)!r})"


class NativeLookup(HeaderSource):
    """Delegates to a container that already does case-insensitive `get`."""

    def __init__(self, headers: Any) -> None:
        self._headers = headers

    def get(self, name: str) -> Optional[str]:
        try:
            value = self._headers.get(name)
        except Exception:  # noqa: BLE001
            logger.debug("header container %r failed on get(%r)", type(self._headers), name)
            return None
        return value if isinstance(value, str) else None

    def __repr__(self) -> str:
        return f"NativeLookup({type(self._headers).__name__})"


class ResponseWrapper(HeaderSource):
    """A response-like object; lookups go to the headers it carries."""

    def __init__(self, response: Any, inner: HeaderSource) -> None:
        self.response = response
        self.inner = inner

    def get(self, name: str) -> Optional[str]:
        return self.inner.get(name)

    def __repr__(self) -> str:
        return f"ResponseWrapper({type(self.response).__name__}, {self.inner!r})"


def _nested_headers(obj: Any) -> Any:
    try:
        if isinstance(obj, Mapping):
            nested = obj.get("headers")
        else:
            nested = getattr(obj, "headers", None)
    except Exception:  # noqa: BLE001
        # e.g. a closed or streamed response
        logger.debug("%s.headers failed", type(obj).__name__)
        return None
    if nested is None or isinstance(nested, (list, tuple, str, bytes)):
        return None
    return nested


def _call_getter(obj: Any) -> tuple[bool, Any]:
    for attr in _HEADER_GETTERS:
        fn = getattr(obj, attr, None)
        if not callable(fn):
            continue
        try:
            got = fn()
        except Exception:  # noqa: BLE001
            logger.debug("%s.%s() failed", type(obj).__name__, attr)
            return True, None
        if isinstance(got, (list, tuple)):
            # http.client style: list of (name, value) pairs
            pairs = [p for p in got if isinstance(p, (list, tuple)) and len(p) == 2]
            return True, {str(k): v for k, v in pairs}
        return True, got
    return False, None


def _has_native_marker(obj: Any) -> bool:
    return any(callable(getattr(obj, attr, None)) for attr in _NATIVE_MARKERS)


def _as_lookup(headers: Any) -> HeaderSource:
    # Any Mapping is snapshotted with lower-cased keys: MappingProxyType,
    # ChainMap and friends have a case-sensitive `get`.
    if isinstance(headers, Mapping):
        try:
            return PlainMapping(headers)
        except Exception:  # noqa: BLE001
            logger.debug("could not read %s as a mapping", type(headers).__name__)
            return PlainMapping()
    if callable(getattr(headers, "get", None)):
        return NativeLookup(headers)
    return PlainMapping()


def resolve_headers(source: Any, _depth: int = 0) -> HeaderSource:
    """Resolve a response/headers object into a `HeaderSource`.

    Order (first match wins):
    1. a `headers` attribute or key holding an object: use that
    2. a zero-arg `getHeaders()`/`getheaders()`: use what it returns
    3. a native header container (`getSetCookie`/`get_all`): use it as-is
    4. anything else is treated as the headers themselves
    """

    if isinstance(source, HeaderSource):
        return source

    nested = _nested_headers(source) if _depth < _MAX_DEPTH else None
    if nested is not None and nested is not source:
        return ResponseWrapper(source, resolve_headers(nested, _depth + 1))

    found, got = _call_getter(source)
    if found:
        return ResponseWrapper(source, _as_lookup(got))

    if _has_native_marker(source) and callable(getattr(source, "get", None)):
        return NativeLookup(source)

    return _as_lookup(source)

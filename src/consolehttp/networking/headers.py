"""Outbound header policy applied to every request."""

from __future__ import annotations

from typing import MutableMapping

from .config import BrowserIdentity

ACCEPT_ENCODING = "Accept-Encoding"
CACHE_CONTROL = "Cache-Control"
PRAGMA = "Pragma"

ENCODING_GZIP = "gzip"
NO_CACHE = "no-cache"


def _contains(headers: MutableMapping[str, str], name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)


def _replace(headers: MutableMapping[str, str], name: str, value: str) -> None:
    lowered = name.lower()
    for key in [key for key in headers if key.lower() == lowered]:
        del headers[key]
    headers[name] = value


def apply_common_headers(
    headers: MutableMapping[str, str], identity: BrowserIdentity
) -> None:
    """Inject the fixed browser-like header set into ``headers`` in place.

    Accept-Encoding, Cache-Control and Pragma keep any value the caller
    already set. Accept, Accept-Language, Accept-Charset and Keep-Alive are
    always overwritten with the identity's values.
    """
    if not _contains(headers, ACCEPT_ENCODING):
        headers[ACCEPT_ENCODING] = ENCODING_GZIP
    if not _contains(headers, CACHE_CONTROL):
        headers[CACHE_CONTROL] = NO_CACHE
    if not _contains(headers, PRAGMA):
        headers[PRAGMA] = NO_CACHE

    # Caller-set values are replaced for these four.
    _replace(headers, "Accept", identity.accept)
    _replace(headers, "Accept-Language", identity.accept_language)
    _replace(headers, "Accept-Charset", identity.accept_charset)
    _replace(headers, "Keep-Alive", identity.keep_alive)

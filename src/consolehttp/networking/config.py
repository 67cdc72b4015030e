"""Configuration models for the HttpClient interface."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field


@dataclass(frozen=True)
class BrowserIdentity:
    """Fixed browser-like identity sent with every request.

    The defaults mimic a common desktop browser so the backend serves the
    same response variant it would serve to an interactive user.
    """

    user_agent: str = (
        "Mozilla/5.0 (Windows NT 6.1; WOW64; rv:15.0) "
        "Gecko/20100101 Firefox/15.0"
    )
    accept: str = (
        "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    )
    accept_language: str = "en-us,en;q=0.5"
    accept_charset: str = "ISO-8859-1,utf-8;q=0.7,*;q=0.7"
    keep_alive: str = "115"

    def __post_init__(self) -> None:
        for name in (
            "user_agent",
            "accept",
            "accept_language",
            "accept_charset",
            "keep_alive",
        ):
            if not getattr(self, name):
                raise ValueError(f"{name} must be a non-empty string")


DEFAULT_IDENTITY = BrowserIdentity()


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HttpClient behavior.

    A single timeout in milliseconds drives both the connect and the read
    timeout of the transport.
    """

    timeout_millis: int
    identity: BrowserIdentity = field(default=DEFAULT_IDENTITY)
    follow_redirects: bool = True
    verify_tls: bool = True
    content_charset: str = "utf-8"
    default_charset: str = "ISO-8859-1"
    pool_connections: int = 10
    pool_maxsize: int = 10

    def __post_init__(self) -> None:
        if isinstance(self.timeout_millis, bool) or not isinstance(
            self.timeout_millis, int
        ):
            raise ValueError("timeout_millis must be an integer")
        if self.timeout_millis <= 0:
            raise ValueError("timeout_millis must be > 0")
        if self.pool_connections <= 0:
            raise ValueError("pool_connections must be > 0")
        if self.pool_maxsize <= 0:
            raise ValueError("pool_maxsize must be > 0")

        for name in ("content_charset", "default_charset"):
            try:
                codecs.lookup(getattr(self, name))
            except LookupError as exc:
                raise ValueError(
                    f"{name} is not a known charset: {getattr(self, name)!r}"
                ) from exc

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_millis / 1000.0

    @property
    def timeout(self) -> tuple[float, float]:
        """Return the (connect, read) timeout pair understood by requests."""
        return (self.timeout_seconds, self.timeout_seconds)

"""Error types raised by the networking layer.

Transport failures (timeouts, refused connections, TLS errors) are not
wrapped here; they surface as the ``requests`` exceptions that caused them.
"""

from __future__ import annotations


class HttpClientError(Exception):
    """Base class for errors raised by this package."""


class HttpStatusError(HttpClientError):
    """A response came back with a status other than 200 OK.

    This is the default error kind used by the response handler; callers may
    supply any other exception factory instead.
    """


class ErrorFactoryError(RuntimeError):
    """The caller-supplied error factory could not build an exception.

    Signals a bug in the caller's configuration, not a server or network
    condition. Not an HttpClientError.
    """

"""Response handling policy shared by every call site.

A completed response is classified once: 200 OK yields the decoded body text
(or None when the response carries no body at all), anything else raises the
error chosen by the caller with the response's status line.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Callable, Dict

import requests

from .body import ResponseBody
from .errors import ErrorFactoryError, HttpStatusError
from .types import Err, Ok, Result

logger = logging.getLogger(__name__)

ErrorFactory = Callable[[str], BaseException]

DEFAULT_CHARSET = "ISO-8859-1"
SERVER_ERROR_PREFIX = "Server error: "

_DRAIN_CHUNK_SIZE = 8192
_HTTP_VERSIONS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


def _protocol(response: requests.Response) -> str:
    raw = response.raw
    if isinstance(raw, ResponseBody):
        raw = raw.source
    version = getattr(raw, "version", None)
    return _HTTP_VERSIONS.get(version, "HTTP/1.1")


def status_line(response: requests.Response) -> str:
    """Render the response status line, e.g. ``HTTP/1.1 404 Not Found``."""
    reason = response.reason
    if not reason:
        try:
            reason = HTTPStatus(response.status_code).phrase
        except ValueError:
            reason = ""
    line = f"{_protocol(response)} {response.status_code}"
    return f"{line} {reason}" if reason else line


def has_body(response: requests.Response) -> bool:
    """Return False when the response carries no body at all.

    A zero-length body still counts as a body.
    """
    request = response.request
    if request is not None and (request.method or "").upper() == "HEAD":
        return False
    code = response.status_code
    if 100 <= code < 200:
        return False
    return code not in (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED)


def _drain(response: requests.Response) -> None:
    """Read and discard the body so the connection can return to the pool."""
    try:
        for _ in response.iter_content(chunk_size=_DRAIN_CHUNK_SIZE):
            pass
    finally:
        response.close()


def _decode(response: requests.Response, default_charset: str) -> str:
    content = response.content
    charset = response.encoding or default_charset
    try:
        return str(content, charset, errors="replace")
    except LookupError:
        logger.debug("Unknown charset %r, decoding as utf-8", charset)
        return str(content, "utf-8", errors="replace")


def _build_meta(response: requests.Response) -> Dict[str, Any]:
    meta: Dict[str, Any] = {
        "status_code": response.status_code,
        "reason": response.reason,
        "url": response.url,
    }
    try:
        meta["elapsed_s"] = response.elapsed.total_seconds()
    except AttributeError:
        pass  # mocked responses may lack elapsed
    return meta


def evaluate(
    response: requests.Response, default_charset: str = DEFAULT_CHARSET
) -> Result[str | None, str]:
    """Turn a completed response into its outcome without raising.

    Returns:
        ``Ok(text)`` or ``Ok(None)`` for 200 OK, ``Err(status_line)``
        otherwise. A failed response's body is drained.
    """
    meta = _build_meta(response)
    if response.status_code != HTTPStatus.OK:
        _drain(response)
        return Err(status_line(response), meta=meta)
    if not has_body(response):
        return Ok(None, meta=meta)
    return Ok(_decode(response, default_charset), meta=meta)


def _build_error(error_factory: ErrorFactory, message: str) -> BaseException:
    try:
        error = error_factory(message)
    except Exception as exc:
        logger.debug("Error factory %r failed: %s", error_factory, exc)
        raise ErrorFactoryError(
            f"could not build error with {error_factory!r}: {exc}"
        ) from exc
    if not isinstance(error, BaseException):
        raise ErrorFactoryError(
            f"error factory {error_factory!r} returned "
            f"{type(error).__name__}, not an exception"
        )
    return error


def classify(
    response: requests.Response,
    error_factory: ErrorFactory = HttpStatusError,
    default_charset: str = DEFAULT_CHARSET,
) -> str | None:
    """Return the decoded body of a 200 OK response or raise.

    Args:
        response: Completed response.
        error_factory: Callable building the exception for non-200 responses
            from a single message; exception classes work directly.
        default_charset: Charset used when the response declares none.

    Returns:
        Body text, or None when the response has no body.

    Raises:
        The exception built by ``error_factory`` with message
        ``"Server error: <status line>"``, or ErrorFactoryError when the
        factory cannot build one.
    """
    outcome = evaluate(response, default_charset)
    if isinstance(outcome, Ok):
        return outcome.value

    message = SERVER_ERROR_PREFIX + outcome.error
    logger.debug("Non-success response from %s: %s", response.url, message)
    raise _build_error(error_factory, message)


def create_response_handler(
    error_factory: ErrorFactory = HttpStatusError,
    default_charset: str = DEFAULT_CHARSET,
) -> Callable[[requests.Response], str | None]:
    """Bind ``classify`` to an error factory, for HttpClient.execute."""

    def handle(response: requests.Response) -> str | None:
        return classify(response, error_factory, default_charset)

    return handle

"""Synchronous HTTP client for the console networking layer.

This module builds the shared client used to talk to a web console-style
backend. The client fixes timeouts, TLS verification, connection pooling and
a browser-like identity; response handling is left to the handler callable
passed to each request (see :mod:`consolehttp.networking.handler`).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, TypeVar

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

from .body import decompress_response
from .config import DEFAULT_IDENTITY, BrowserIdentity, HttpClientConfig
from .errors import HttpStatusError
from .handler import ErrorFactory, create_response_handler
from .headers import apply_common_headers

logger = logging.getLogger(__name__)

HandlerValue = TypeVar("HandlerValue")


class ConsoleAdapter(HTTPAdapter):
    """Pooled transport applying the outbound request policy.

    One adapter instance is mounted for both ``http://`` and ``https://``;
    urllib3 keeps a thread-safe pool per host behind it.
    """

    def __init__(self, config: HttpClientConfig) -> None:
        self._config = config
        super().__init__(
            pool_connections=config.pool_connections,
            pool_maxsize=config.pool_maxsize,
            max_retries=0,
        )

    def add_headers(
        self, request: requests.PreparedRequest, **kwargs: Any
    ) -> None:
        apply_common_headers(request.headers, self._config.identity)

    def _encode_body(self, request: requests.PreparedRequest) -> None:
        if isinstance(request.body, str):
            request.body = request.body.encode(self._config.content_charset)
            request.prepare_content_length(request.body)

    def send(
        self,
        request: requests.PreparedRequest,
        stream: bool = False,
        timeout: Any = None,
        verify: bool | str = True,
        cert: Any = None,
        proxies: Mapping[str, str] | None = None,
    ) -> requests.Response:
        if timeout is None:
            timeout = self._config.timeout
        self._encode_body(request)
        return super().send(
            request,
            stream=stream,
            timeout=timeout,
            verify=verify,
            cert=cert,
            proxies=proxies,
        )


class HttpClient:
    """Core HTTP client (sync).

    The client is safe to share between threads. It owns a connection pool
    that is only released by :meth:`close` (or leaving a ``with`` block).
    """

    def __init__(self, config: HttpClientConfig) -> None:
        """Create a new HttpClient.

        Args:
            config: Configuration for timeouts, identity, TLS and pooling.
        """
        self._config = config
        self._session = requests.Session()
        self._session.headers = CaseInsensitiveDict(
            {
                "User-Agent": config.identity.user_agent,
                "Connection": "keep-alive",
            }
        )
        self._session.verify = config.verify_tls
        self._session.hooks["response"].append(decompress_response)

        adapter = ConsoleAdapter(config)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        logger.debug(
            "Built HttpClient timeout_ms=%d pool_maxsize=%d verify_tls=%s",
            config.timeout_millis,
            config.pool_maxsize,
            config.verify_tls,
        )

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    @property
    def session(self) -> requests.Session:
        """Underlying session, for callers issuing requests directly."""
        return self._session

    def response_handler(
        self, error_factory: ErrorFactory = HttpStatusError
    ) -> Callable[[requests.Response], str | None]:
        """Return a classifying handler bound to the configured charset."""
        return create_response_handler(
            error_factory, self._config.default_charset
        )

    def execute(
        self,
        method: str,
        url: str,
        handler: Callable[[requests.Response], HandlerValue],
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        data: Any | None = None,
        json: Any | None = None,
        timeout: float | tuple[float, float] | None = None,
        allow_redirects: bool | None = None,
    ) -> HandlerValue:
        """Issue a request and hand the completed response to ``handler``.

        Transport errors from requests propagate unchanged.

        Args:
            method: HTTP method.
            url: Absolute URL to request.
            handler: Consumer turning the response into the return value.
            headers: Optional per-request headers merged with defaults.
            params: Optional query parameters.
            data: Optional form/body payload.
            json: Optional JSON payload (mutually exclusive with data).
            timeout: Override the configured timeout, in seconds.
            allow_redirects: Override ``config.follow_redirects``.

        Returns:
            Whatever ``handler`` returns.
        """
        if allow_redirects is None:
            allow_redirects = self._config.follow_redirects
        response = self._session.request(
            method,
            url,
            headers=headers,
            params=params,
            data=data,
            json=json,
            timeout=timeout if timeout is not None else self._config.timeout,
            allow_redirects=allow_redirects,
        )
        try:
            return handler(response)
        finally:
            response.close()

    def get(
        self,
        url: str,
        handler: Callable[[requests.Response], HandlerValue],
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        timeout: float | tuple[float, float] | None = None,
        allow_redirects: bool | None = None,
    ) -> HandlerValue:
        """Perform an HTTP GET request; see :meth:`execute`."""
        return self.execute(
            "GET",
            url,
            handler,
            headers=headers,
            params=params,
            timeout=timeout,
            allow_redirects=allow_redirects,
        )

    def post(
        self,
        url: str,
        handler: Callable[[requests.Response], HandlerValue],
        *,
        headers: Mapping[str, str] | None = None,
        data: Any | None = None,
        json: Any | None = None,
        timeout: float | tuple[float, float] | None = None,
        allow_redirects: bool | None = None,
    ) -> HandlerValue:
        """Perform an HTTP POST request; see :meth:`execute`."""
        return self.execute(
            "POST",
            url,
            handler,
            headers=headers,
            data=data,
            json=json,
            timeout=timeout,
            allow_redirects=allow_redirects,
        )

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def build_client(
    timeout_millis: int,
    *,
    identity: BrowserIdentity = DEFAULT_IDENTITY,
    **overrides: Any,
) -> HttpClient:
    """Build a client with the console policy applied.

    Args:
        timeout_millis: Connect and read timeout, in milliseconds.
        identity: Browser-like identity to present.
        **overrides: Further HttpClientConfig fields.

    Returns:
        A ready-to-use HttpClient. The caller owns its connection pool.
    """
    config = HttpClientConfig(
        timeout_millis=timeout_millis, identity=identity, **overrides
    )
    return HttpClient(config)

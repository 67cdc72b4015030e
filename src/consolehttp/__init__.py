"""HTTP client toolkit for web console-style backends."""

from .networking import (
    DEFAULT_IDENTITY,
    BrowserIdentity,
    ErrorFactoryError,
    HttpClient,
    HttpClientConfig,
    HttpClientError,
    HttpStatusError,
    build_client,
    classify,
    create_response_handler,
)

__all__ = [
    "DEFAULT_IDENTITY",
    "BrowserIdentity",
    "ErrorFactoryError",
    "HttpClient",
    "HttpClientConfig",
    "HttpClientError",
    "HttpStatusError",
    "build_client",
    "classify",
    "create_response_handler",
]

__version__ = "0.1.0"

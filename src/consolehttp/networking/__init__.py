"""Networking layer: client builder, header policy and response handling."""

from .body import BodyEncoding, ResponseBody, decompress_response
from .client import ConsoleAdapter, HttpClient, build_client
from .config import DEFAULT_IDENTITY, BrowserIdentity, HttpClientConfig
from .errors import ErrorFactoryError, HttpClientError, HttpStatusError
from .handler import (
    classify,
    create_response_handler,
    evaluate,
    has_body,
    status_line,
)
from .headers import apply_common_headers
from .types import Err, Ok, Result

__all__ = [
    "DEFAULT_IDENTITY",
    "BodyEncoding",
    "BrowserIdentity",
    "ConsoleAdapter",
    "Err",
    "ErrorFactoryError",
    "HttpClient",
    "HttpClientConfig",
    "HttpClientError",
    "HttpStatusError",
    "Ok",
    "ResponseBody",
    "Result",
    "apply_common_headers",
    "build_client",
    "classify",
    "create_response_handler",
    "decompress_response",
    "evaluate",
    "has_body",
    "status_line",
]

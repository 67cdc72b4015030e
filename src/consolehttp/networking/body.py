"""Response body abstraction and the inbound gzip decompression hook.

``requests`` reads a response body through ``response.raw``. The hook in this
module swaps that stream for a :class:`ResponseBody` when the server declares
a gzip content-encoding, so the caller always reads plaintext.
"""

from __future__ import annotations

import gzip
import logging
from enum import Enum
from typing import Any, List, Mapping

import requests
from requests.exceptions import ChunkedEncodingError
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import ContentDecodingError
from requests.exceptions import SSLError as RequestsSSLError
from urllib3.exceptions import (
    DecodeError,
    ProtocolError,
    ReadTimeoutError,
    SSLError,
)
from urllib3.response import HTTPResponse

from .headers import ENCODING_GZIP

logger = logging.getLogger(__name__)


class BodyEncoding(Enum):
    PLAIN = "identity"
    GZIP = "gzip"


class _TransportReader:
    """File-like view over the raw transport stream.

    ``decode_content`` controls whether urllib3 applies its own content
    decoding; gzip bodies are read undecoded and inflated by ResponseBody.
    """

    def __init__(self, source: Any, decode_content: bool) -> None:
        self._source = source
        self._decode_content = decode_content

    def read(self, size: int | None = -1) -> bytes:
        amt = None if size is None or size < 0 else size
        if isinstance(self._source, HTTPResponse):
            return self._source.read(amt, decode_content=self._decode_content)
        if amt is None:
            return self._source.read()
        return self._source.read(amt)


class ResponseBody:
    """A response body tagged with how it must be decoded on read.

    Plain bodies are handed through as the transport delivers them. Gzip
    bodies are inflated on read, and their length is unknown until fully
    read.
    """

    def __init__(
        self,
        source: Any,
        encoding: BodyEncoding = BodyEncoding.PLAIN,
        content_length: int | None = None,
    ) -> None:
        self.source = source
        self.encoding = encoding
        self._declared_length = content_length
        if encoding is BodyEncoding.GZIP:
            self._reader = _TransportReader(source, decode_content=False)
            self._inflater: gzip.GzipFile | None = gzip.GzipFile(
                fileobj=self._reader, mode="rb"
            )
        else:
            self._reader = _TransportReader(source, decode_content=True)
            self._inflater = None

    @classmethod
    def plain(
        cls, source: Any, content_length: int | None = None
    ) -> "ResponseBody":
        """Wrap an unencoded stream for callers reading it directly.

        decompress_response never installs plain bodies on a response; the
        transport's own stream already serves them.
        """
        return cls(source, BodyEncoding.PLAIN, content_length)

    @classmethod
    def gzipped(cls, source: Any) -> "ResponseBody":
        return cls(source, BodyEncoding.GZIP)

    @property
    def content_length(self) -> int | None:
        """Declared body length, or None when it cannot be known upfront."""
        if self.encoding is BodyEncoding.GZIP:
            return None
        return self._declared_length

    @property
    def closed(self) -> bool:
        return bool(getattr(self.source, "closed", False))

    def read(
        self, amt: int | None = None, decode_content: bool | None = None
    ) -> bytes:
        """Read up to ``amt`` bytes of the body.

        ``decode_content=False`` reads the undecoded transport bytes, which
        requests does to discard a broken redirect body. Transport failures
        are raised as the requests exceptions ``iter_content`` would raise.
        """
        try:
            if self._inflater is None:
                return self._reader.read(amt)
            if decode_content is False:
                return _TransportReader(self.source, False).read(amt)
            return self._inflater.read(-1 if amt is None else amt)
        except EOFError as exc:
            # Truncated gzip stream.
            raise OSError(str(exc)) from exc
        except ProtocolError as exc:
            raise ChunkedEncodingError(exc) from exc
        except DecodeError as exc:
            raise ContentDecodingError(exc) from exc
        except ReadTimeoutError as exc:
            raise RequestsConnectionError(exc) from exc
        except SSLError as exc:
            raise RequestsSSLError(exc) from exc

    def read_text(self, charset: str, errors: str = "replace") -> str:
        return self.read().decode(charset, errors)

    def close(self) -> None:
        if self._inflater is not None:
            self._inflater.close()
        close = getattr(self.source, "close", None)
        if close is not None:
            close()

    def release_conn(self) -> None:
        release = getattr(self.source, "release_conn", None)
        if release is not None:
            release()


def content_encodings(headers: Mapping[str, str]) -> List[str]:
    """Return the lower-cased Content-Encoding tokens of ``headers``."""
    value = headers.get("Content-Encoding")
    if not value:
        return []
    return [
        token.strip().lower() for token in value.split(",") if token.strip()
    ]


def decompress_response(
    response: requests.Response, *args: Any, **kwargs: Any
) -> requests.Response:
    """Response hook inflating gzip bodies transparently.

    Responses without a gzip content-encoding are returned untouched.
    """
    if ENCODING_GZIP not in content_encodings(response.headers):
        return response
    if isinstance(response.raw, ResponseBody):
        return response

    logger.debug("Inflating gzip body for %s", response.url)
    response.raw = ResponseBody.gzipped(response.raw)
    return response

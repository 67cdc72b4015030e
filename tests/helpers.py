import io

import requests
from requests.adapters import HTTPAdapter
from urllib3.response import HTTPResponse


def make_response(
    *,
    status: int = 200,
    reason: str | None = "OK",
    body: bytes = b"",
    headers: dict[str, str] | None = None,
    method: str = "GET",
    url: str = "http://example.com/",
    version: int = 11,
) -> requests.Response:
    """Build a requests.Response over an unread urllib3 body."""
    raw = HTTPResponse(
        body=io.BytesIO(body),
        headers=headers or {},
        status=status,
        reason=reason,
        version=version,
        preload_content=False,
        decode_content=False,
    )
    request = requests.Request(method, url).prepare()
    return HTTPAdapter().build_response(request, raw)

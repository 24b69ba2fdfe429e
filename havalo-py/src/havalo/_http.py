"""
HTTP client utilities for Havalo SDK
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, Optional, Union

import httpx

SUPPORTED_METHODS = frozenset({"GET", "PUT", "POST", "HEAD", "DELETE"})

READ_CHUNK_SIZE = 64 * 1024


def _iter_stream(stream: BinaryIO, length: int) -> Iterator[bytes]:
    """Yield at most length bytes from stream."""
    remaining = length
    while remaining > 0:
        chunk = stream.read(min(READ_CHUNK_SIZE, remaining))
        if not chunk:
            break
        remaining -= len(chunk)
        yield chunk


@dataclass
class RequestDescriptor:
    """
    A pending outbound request.

    Headers and body may be changed until the request is handed to the
    transport; the URL is fixed at construction.
    """
    method: str
    url: httpx.URL
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: Optional[Union[bytes, BinaryIO]] = None
    content_length: Optional[int] = None

    def __post_init__(self):
        self.method = self.method.upper()
        if self.method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not isinstance(self.url, httpx.URL):
            self.url = httpx.URL(self.url)

    @property
    def raw_path(self) -> str:
        """Path component as sent on the wire, without the query string."""
        return self.url.raw_path.split(b"?", 1)[0].decode("ascii")

    def set_body(self, content: Union[bytes, BinaryIO], content_length: Optional[int] = None) -> None:
        if isinstance(content, (bytes, bytearray)):
            content = bytes(content)
            content_length = len(content)
        elif content_length is None or content_length < 0:
            raise ValueError("A streamed request body requires a known content length.")
        self.content = content
        self.content_length = content_length
        self.headers["Content-Length"] = str(content_length)

    def body(self) -> Optional[Union[bytes, Iterator[bytes]]]:
        if self.content is None or isinstance(self.content, bytes):
            return self.content
        return _iter_stream(self.content, self.content_length)


class HttpClient:
    """
    HTTP client wrapper around a single httpx.Client.

    Requests are sent exactly once; there is no retry logic at this layer.
    """

    def __init__(self, timeout: float = 30, transport: Optional[httpx.BaseTransport] = None):
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def send(self, request: RequestDescriptor) -> httpx.Response:
        """Send the request and return a streaming response the caller must close."""
        outbound = self._client.build_request(
            request.method,
            request.url,
            headers=request.headers,
            content=request.body(),
        )
        return self._client.send(outbound, stream=True)

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

"""
HavaloClient - Python client for the Havalo object store
"""

import logging
import uuid
from http import HTTPStatus
from typing import BinaryIO, Callable, Mapping, Optional, Sequence, Tuple, TypeVar, Union
from urllib.parse import urlencode, urlsplit

import httpx

from ._http import HttpClient, RequestDescriptor
from ._path import (
    API_ACTION_AUTHENTICATE,
    API_ACTION_OBJECT,
    API_ACTION_REPOSITORY,
    API_PARAM_STARTSWITH,
    build_path,
    encode_prefix,
)
from ._pipeline import RequestPipeline, all_headers, json_entity, status_code
from ._signer import HavaloSigner
from .models import Credentials, FileObject, KeyPair, ObjectList
from .outcome import HeaderList, Outcome
from .settings import Settings

T = TypeVar("T")

Headers = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


class HavaloClient:
    """
    Client for the Havalo API.

    Every call returns an Outcome: Success with the converted value when the
    response carries the expected status code, Failure otherwise.

    Example:
        client = HavaloClient(
            "https://havalo.example.com/havalo/api",
            key="6fe8a3ad-5b39-4b56-9c34-2e0a2e5f4b65",
            secret="Zm9vYmFy..."
        )

        outcome = client.put_object(b'{"dog":"cat"}', "test", "object.json",
                                    headers={"Content-Type": "application/json"})
        match outcome:
            case Success(value=file_object):
                print(file_object.get_first_header("ETag"))
            case Failure(status_code=status):
                print("PUT failed", status)
    """

    def __init__(
        self,
        api_endpoint: str,
        key: Optional[Union[str, uuid.UUID]] = None,
        secret: Optional[str] = None,
        credentials: Optional[Credentials] = None,
        http_client: Optional[HttpClient] = None,
        request_timeout: float = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize HavaloClient.

        Args:
            api_endpoint: Havalo API URL, e.g. "http://localhost:8080/havalo/api"
            key: Access key, used when credentials is not given
            secret: Shared secret, used when credentials is not given
            credentials: Pre-built Credentials
            http_client: Existing HttpClient to send requests with
            request_timeout: Request timeout in seconds for a new HttpClient
            transport: Optional httpx transport for a new HttpClient
        """
        if api_endpoint is None:
            raise ValueError("The service client API endpoint cannot be None!")
        if credentials is None:
            credentials = Credentials(key, secret)

        endpoint = urlsplit(api_endpoint)
        self.api_endpoint = api_endpoint
        self._base_url = f"{endpoint.scheme}://{endpoint.netloc}{endpoint.path.rstrip('/')}"

        self._signer = HavaloSigner(credentials)
        self._owns_http = http_client is None
        self._http = http_client or HttpClient(timeout=request_timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "HavaloClient":
        return cls(
            settings.api_url,
            key=settings.access_key,
            secret=settings.secret,
            request_timeout=settings.request_timeout_s,
            **kwargs,
        )

    def _final_endpoint(self, path: str, query: Optional[str] = None) -> str:
        # Complete URLs are used as given.
        if path.startswith("https://") or path.startswith("http://"):
            url = path
        else:
            url = self._base_url + path
        if query:
            url += "?" + query
        return url

    def _pipeline(
        self,
        method: str,
        path: str,
        expect: int,
        converter: Callable[[httpx.Response], T],
        before: Optional[Callable[[RequestDescriptor], None]] = None,
        query: Optional[str] = None,
    ) -> RequestPipeline[T]:
        url = self._final_endpoint(path, query)
        self._logger.debug("Building %s %s (expecting %s)", method, url, expect)
        return RequestPipeline(
            self._http,
            self._signer,
            method,
            url,
            expect=expect,
            converter=converter,
            before=before,
        )

    @staticmethod
    def _with_headers(headers: Optional[Headers]) -> Callable[[RequestDescriptor], None]:
        def before(request: RequestDescriptor) -> None:
            if headers:
                request.headers.update(headers)
        return before

    # Repository operations

    def authenticate(self) -> Outcome[KeyPair]:
        """Authenticate with the configured credentials. 200 OK on success."""
        return self._pipeline(
            "POST",
            build_path(API_ACTION_AUTHENTICATE),
            HTTPStatus.OK,
            json_entity(KeyPair.from_dict),
        ).execute()

    def create_repository(self) -> Outcome[KeyPair]:
        """Create a new repository. 201 Created on success."""
        return self._pipeline(
            "POST",
            build_path(API_ACTION_REPOSITORY),
            HTTPStatus.CREATED,
            json_entity(KeyPair.from_dict),
        ).execute()

    def delete_repository(self, repo_id: Union[str, uuid.UUID]) -> Outcome[int]:
        """Delete a repository. 204 No Content on success."""
        return self._pipeline(
            "DELETE",
            build_path(API_ACTION_REPOSITORY, [str(repo_id)]),
            HTTPStatus.NO_CONTENT,
            status_code,
        ).execute()

    def list_objects(self, *path: str) -> Outcome[ObjectList]:
        """
        List objects in the repository.

        When path segments are given, only objects under that prefix are
        returned.
        """
        query = None
        if path:
            query = urlencode({API_PARAM_STARTSWITH: encode_prefix(path)})
        return self._pipeline(
            "GET",
            build_path(API_ACTION_REPOSITORY),
            HTTPStatus.OK,
            json_entity(ObjectList.from_dict),
            query=query,
        ).execute()

    # Object operations

    def get_object(self, destination: BinaryIO, *path: str) -> Outcome[int]:
        """Download an object into destination, returning the bytes copied."""
        def copy(response: httpx.Response) -> int:
            copied = 0
            for chunk in response.iter_bytes():
                destination.write(chunk)
                copied += len(chunk)
            return copied

        return self.get_object_with(copy, *path)

    def get_object_with(self, converter: Callable[[httpx.Response], T], *path: str) -> Outcome[T]:
        """Download an object, handing the streamed response to converter."""
        return self._pipeline(
            "GET",
            build_path(API_ACTION_OBJECT, path),
            HTTPStatus.OK,
            converter,
        ).execute()

    def get_object_metadata(self, *path: str) -> Outcome[HeaderList]:
        """HEAD an object and return its response headers."""
        return self._pipeline(
            "HEAD",
            build_path(API_ACTION_OBJECT, path),
            HTTPStatus.OK,
            all_headers,
        ).execute()

    def put_object(
        self,
        data: Union[bytes, BinaryIO],
        *path: str,
        content_length: Optional[int] = None,
        headers: Optional[Headers] = None,
    ) -> Outcome[FileObject]:
        """
        Upload an object.

        data is either bytes or a binary stream; streams need content_length
        and are read exactly once. headers (Content-Type, If-Match, ...) are
        added before the request is signed.
        """
        apply_headers = self._with_headers(headers)

        def before(request: RequestDescriptor) -> None:
            apply_headers(request)
            request.set_body(data, content_length)

        return self._pipeline(
            "PUT",
            build_path(API_ACTION_OBJECT, path),
            HTTPStatus.OK,
            json_entity(FileObject.from_dict),
            before=before,
        ).execute()

    def delete_object(self, *path: str, headers: Optional[Headers] = None) -> Outcome[int]:
        """Delete an object. 204 No Content on success."""
        return self._pipeline(
            "DELETE",
            build_path(API_ACTION_OBJECT, path),
            HTTPStatus.NO_CONTENT,
            status_code,
            before=self._with_headers(headers),
        ).execute()

    def close(self) -> None:
        """Close the client and cleanup resources."""
        if self._owns_http:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

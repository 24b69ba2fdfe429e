"""
Single-shot request pipeline: sign, send, classify
"""

import enum
import logging
from typing import Callable, Generic, Optional, TypeVar, Union

import httpx

from ._http import HttpClient, RequestDescriptor
from ._signer import HavaloSigner
from .error import EncodingError, PipelineStateError, SigningError
from .outcome import Failure, Outcome, Success

T = TypeVar("T")

StatusPredicate = Callable[[int], bool]
BeforeHook = Callable[[RequestDescriptor], None]
Converter = Callable[[httpx.Response], T]

# Faults that mean the client itself is unusable. These are raised, never
# folded into a Failure.
FATAL_ERRORS = (EncodingError, SigningError)

_logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    BUILT = "built"
    SENT = "sent"
    CLASSIFIED = "classified"


def expect_status(expected: Union[int, StatusPredicate]) -> StatusPredicate:
    """Turn an exact status code into a predicate; predicates pass through."""
    if callable(expected):
        return expected
    return lambda status: status == expected


def status_code(response: httpx.Response) -> int:
    """Converter that yields the response status code."""
    return response.status_code


def json_entity(factory: Callable[[dict], T]) -> Converter:
    """Converter that parses the JSON body with factory."""
    def convert(response: httpx.Response) -> T:
        response.read()
        return factory(response.json())
    return convert


def all_headers(response: httpx.Response):
    """Converter that returns every response header as (name, value) pairs."""
    return list(response.headers.multi_items())


class RequestPipeline(Generic[T]):
    """
    One API call, configured with a status predicate, a converter and an
    optional before hook.

    The before hook runs first and may attach a body or extra headers; the
    request is signed after it, so anything it sets is covered by the
    signature. Once signed the request is sent as-is. A pipeline can be
    executed once; construct a new one to try again.
    """

    def __init__(
        self,
        http: HttpClient,
        signer: HavaloSigner,
        method: str,
        url: Union[str, httpx.URL],
        expect: Union[int, StatusPredicate],
        converter: Converter,
        before: Optional[BeforeHook] = None,
    ):
        self._http = http
        self._signer = signer
        self._check = expect_status(expect)
        self._converter = converter
        self._before = before
        self.request = RequestDescriptor(method=method, url=url)
        self.state = PipelineState.BUILT

    def execute(self) -> Outcome[T]:
        if self.state is not PipelineState.BUILT:
            raise PipelineStateError(self.state.value)
        self.state = PipelineState.SENT

        try:
            return self._execute()
        finally:
            self.state = PipelineState.CLASSIFIED

    def _execute(self) -> Outcome[T]:
        request = self.request
        try:
            if self._before is not None:
                self._before(request)
            self._signer.sign(request)
        except FATAL_ERRORS:
            raise
        except Exception as ex:
            _logger.warning("Failed to prepare %s %s: %s", request.method, request.url, ex)
            return Failure(cause=ex)

        _logger.debug("Sending %s %s", request.method, request.url)
        try:
            response = self._http.send(request)
        except Exception as ex:
            _logger.warning("Transport failure on %s %s: %s", request.method, request.url, ex)
            return Failure(cause=ex)

        try:
            return self._classify(response)
        finally:
            response.close()

    def _classify(self, response: httpx.Response) -> Outcome[T]:
        request = self.request
        headers = list(response.headers.multi_items())
        _logger.debug("%s %s returned %s", request.method, request.url, response.status_code)

        if not self._check(response.status_code):
            try:
                body = response.read()
            except httpx.HTTPError as ex:
                return Failure(status_code=response.status_code, headers=headers, cause=ex)
            return Failure(status_code=response.status_code, body=body, headers=headers)

        try:
            return Success(self._converter(response))
        except FATAL_ERRORS:
            raise
        except Exception as ex:
            _logger.warning(
                "Failed to convert %s response from %s %s: %s",
                response.status_code, request.method, request.url, ex,
            )
            return Failure(status_code=response.status_code, headers=headers, cause=ex)

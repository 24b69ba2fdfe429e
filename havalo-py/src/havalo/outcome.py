"""
Typed success/failure results returned by every Havalo API call
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Tuple, TypeVar, Union

T = TypeVar("T")

HeaderList = List[Tuple[str, str]]


@dataclass(frozen=True)
class Success(Generic[T]):
    """The response matched the expected status and was converted."""
    value: T


@dataclass(frozen=True)
class Failure:
    """
    Any call that did not produce a converted value.

    status_code is None when no response was received at all (connection,
    timeout or other transport errors). Otherwise the raw status, headers
    and body of the response are kept for inspection. cause holds the
    exception raised by the transport, the before-hook or the converter.
    """
    status_code: Optional[int] = None
    body: bytes = b""
    headers: HeaderList = field(default_factory=list)
    cause: Optional[BaseException] = None

    @property
    def is_transport_failure(self) -> bool:
        return self.status_code is None

    def get_header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


Outcome = Union[Success[T], Failure]

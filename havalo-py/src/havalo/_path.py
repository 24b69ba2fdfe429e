"""
Path and prefix encoding for Havalo object keys
"""

from typing import List, Optional, Sequence
from urllib.parse import quote_plus, unquote_plus

from .error import EncodingError

API_ACTION_AUTHENTICATE = "authenticate"
API_ACTION_REPOSITORY = "repository"
API_ACTION_OBJECT = "object"

API_PARAM_STARTSWITH = "startsWith"

SLASH_STRING = "/"
EMPTY_STRING = ""


def _url_encode(value: str) -> str:
    try:
        return quote_plus(value, safe=EMPTY_STRING, encoding="utf-8", errors="strict")
    except UnicodeEncodeError as ex:
        raise EncodingError(value) from ex


def encode_prefix(segments: Sequence[str]) -> str:
    """
    Join path segments into a single canonical prefix string.

    Each non-empty segment is form-encoded on its own, so slashes and other
    special characters inside a segment cannot be confused with the
    separator. Empty segments are dropped.

    Example:
        encode_prefix(["accounts", "", "silly/path+dog"])
        # "accounts/silly%2Fpath%2Bdog"
    """
    if segments is None:
        raise ValueError("The prefix list cannot be None!")
    return SLASH_STRING.join(
        _url_encode(segment) for segment in segments if segment != EMPTY_STRING
    )


def decode_prefix(prefix: str) -> List[str]:
    """
    Split a canonical prefix string back into fully decoded path segments.

    Empty components are not returned, so segment lists that contained
    empty strings do not survive an encode/decode round trip.
    """
    if prefix is None:
        raise ValueError("The prefix string cannot be None!")
    return [
        unquote_plus(part, encoding="utf-8")
        for part in prefix.split(SLASH_STRING)
        if part != EMPTY_STRING
    ]


def append_key(key: str, segments: Sequence[str]) -> List[str]:
    """Return a new segment list with key as its last element."""
    if key is None:
        raise ValueError("The key to append cannot be None!")
    if segments is None:
        raise ValueError("The prefix list cannot be None!")
    return [*segments, key]


def build_path(action: str, segments: Optional[Sequence[str]] = None) -> str:
    """
    Build the request path for an API action.

    The canonical prefix is escaped again as a whole and sent as a single
    path component, e.g. ["test", "object.json"] under "object" becomes
    "/object/test%2Fobject.json".
    """
    path = SLASH_STRING + action
    if segments is not None:
        path += SLASH_STRING + _url_encode(encode_prefix(segments))
    return path

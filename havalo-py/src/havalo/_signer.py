"""
Havalo HMAC-SHA256 request signer
"""

import base64
import hashlib
import hmac
from datetime import datetime, UTC
from email.utils import format_datetime
from typing import Optional

from ._http import RequestDescriptor
from .error import SigningError
from .models import Credentials

AUTHORIZATION = "Authorization"
CONTENT_TYPE = "Content-Type"
DATE = "Date"

LINE_SEPARATOR = "\n"


def rfc822_date(timestamp: datetime) -> str:
    """Format a timestamp like 'Sun, 06 Nov 1994 08:49:37 GMT'."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return format_datetime(timestamp.astimezone(UTC), usegmt=True)


def hmac_sha256(secret: str, message: str) -> str:
    """Return the Base64 encoded HMAC-SHA256 of message keyed by secret."""
    try:
        digest = hmac.new(
            secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        ).digest()
    except (UnicodeEncodeError, TypeError, AttributeError) as ex:
        raise SigningError("Failed to HMAC-SHA256 sign request.") from ex
    return base64.b64encode(digest).decode("ascii")


def string_to_sign(request: RequestDescriptor) -> str:
    """
    Build the canonical string the server reconstructs to verify a request.

    Format:
        HTTP-Verb + "\\n" +
        RFC822 Date (from the 'Date' header) + "\\n" +
        Content-Type (optional, empty line when absent) + "\\n" +
        Path component of the request URL, without the query string
    """
    date = request.headers.get(DATE)
    if date is None:
        raise SigningError("Request has no Date header to sign.")
    return LINE_SEPARATOR.join([
        request.method.upper(),
        date,
        request.headers.get(CONTENT_TYPE, ""),
        request.raw_path,
    ])


class HavaloSigner:
    """
    Signs requests with the Havalo authorization scheme.

    Expected header format is:
        Authorization: Havalo AccessKey:Signature
    where Signature is Base64(HMAC-SHA256(secret, StringToSign)).
    """

    SCHEME = "Havalo"

    def __init__(self, credentials: Credentials):
        if credentials is None:
            raise ValueError("Credentials cannot be None!")
        self._credentials = credentials

    @property
    def access_key(self) -> str:
        return self._credentials.access_key

    def sign(self, request: RequestDescriptor, timestamp: Optional[datetime] = None) -> None:
        """Set the Date and Authorization headers on request."""
        if timestamp is None:
            timestamp = datetime.now(UTC)

        # The Date header is part of the signature; it must not change after this.
        request.headers[DATE] = rfc822_date(timestamp)
        signature = hmac_sha256(self._credentials.secret, string_to_sign(request))
        request.headers[AUTHORIZATION] = f"{self.SCHEME} {self.access_key}:{signature}"

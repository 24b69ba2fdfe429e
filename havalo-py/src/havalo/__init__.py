"""
Havalo Python SDK - signed HTTP client for the Havalo object store
"""

__version__ = "1.0.0"

from ._path import append_key, decode_prefix, encode_prefix
from ._signer import HavaloSigner
from .client import HavaloClient
from .models import (
    Credentials,
    KeyPair,
    FileObject,
    ObjectList,
)
from .outcome import Success, Failure, Outcome
from .settings import Settings, create_settings_from_env
from .error import (
    HavaloException,
    EncodingError,
    SigningError,
    PipelineStateError,
)

__all__ = [
    "HavaloClient",
    "HavaloSigner",
    "Credentials",
    "KeyPair",
    "FileObject",
    "ObjectList",
    "Success",
    "Failure",
    "Outcome",
    "Settings",
    "create_settings_from_env",
    "encode_prefix",
    "decode_prefix",
    "append_key",
    "HavaloException",
    "EncodingError",
    "SigningError",
    "PipelineStateError",
]

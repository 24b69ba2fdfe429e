"""
Data models for Havalo SDK
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Credentials:
    """Access key and shared secret used to sign requests."""
    access_key: str
    secret: str = field(repr=False)

    def __post_init__(self):
        if self.access_key is None:
            raise ValueError("API access key cannot be None!")
        if self.secret is None:
            raise ValueError("API secret cannot be None!")
        if isinstance(self.access_key, uuid.UUID):
            object.__setattr__(self, "access_key", str(self.access_key))


@dataclass(frozen=True)
class KeyPair:
    """Represents a key and secret issued by Havalo."""
    key: uuid.UUID
    secret: str = field(repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeyPair":
        key: Union[str, uuid.UUID] = data["key"]
        return cls(
            key=key if isinstance(key, uuid.UUID) else uuid.UUID(key),
            secret=data.get("secret"),
        )

    def to_credentials(self) -> Credentials:
        return Credentials(str(self.key), self.secret)


@dataclass(frozen=True)
class FileObject:
    """Represents an object stored in a repository."""
    name: str
    headers: Dict[str, List[str]] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileObject":
        return cls(name=data.get("name"), headers=dict(data.get("headers") or {}))

    def get_headers(self, name: str) -> Optional[List[str]]:
        return self.headers.get(name)

    def get_first_header(self, name: str) -> Optional[str]:
        values = self.get_headers(name)
        if values:
            return values[0]
        return None


@dataclass(frozen=True)
class ObjectList:
    """Represents the result of a list objects operation."""
    objects: List[FileObject] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObjectList":
        # Havalo returns a set; keep a stable order by name.
        objects = {FileObject.from_dict(obj) for obj in data.get("objects") or []}
        return cls(objects=sorted(objects, key=lambda o: o.name or ""))

    def __len__(self) -> int:
        return len(self.objects)

    @property
    def names(self) -> List[str]:
        return [obj.name for obj in self.objects]

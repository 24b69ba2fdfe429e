"""
In-memory Havalo service for tests.

Verifies request signatures independently of the SDK, stores objects per
access key and mimics the status codes of the real service.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import unquote_plus

import httpx

BASE_PATH = "/havalo/api"
API_URL = f"http://havalo.test{BASE_PATH}"

ADMIN_KEY = "00000000-0000-0000-0000-000000000000"


@dataclass
class StoredObject:
    body: bytes
    content_type: Optional[str]
    etag: str


@dataclass
class FakeHavalo:
    secrets: Dict[str, str] = field(default_factory=dict)
    objects: Dict[str, Dict[str, StoredObject]] = field(default_factory=dict)
    requests: List[httpx.Request] = field(default_factory=list)

    def __post_init__(self):
        self.secrets.setdefault(ADMIN_KEY, "admin-secret")

    def register(self, key: Optional[str] = None, secret: Optional[str] = None) -> tuple[str, str]:
        key = key or str(uuid.uuid4())
        secret = secret or base64.b64encode(uuid.uuid4().bytes).decode("ascii")
        self.secrets[key] = secret
        self.objects.setdefault(key, {})
        return key, secret

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # Request handling

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        request.read()

        key = self._authenticate(request)
        if key is None:
            return httpx.Response(401)

        raw_path = request.url.raw_path.split(b"?", 1)[0].decode("ascii")
        if not raw_path.startswith(BASE_PATH + "/"):
            return httpx.Response(404)
        action, _, resource = raw_path[len(BASE_PATH) + 1:].partition("/")

        if action == "authenticate" and request.method == "POST":
            return httpx.Response(200, json={"key": key, "secret": self.secrets[key]})
        if action == "repository":
            return self._repository(request, key, resource)
        if action == "object":
            return self._object(request, key, unquote_plus(resource))
        return httpx.Response(404)

    def _authenticate(self, request: httpx.Request) -> Optional[str]:
        header = request.headers.get("Authorization", "")
        scheme, _, credentials = header.partition(" ")
        key, _, signature = credentials.partition(":")
        date = request.headers.get("Date")
        if scheme != "Havalo" or key not in self.secrets or not date:
            return None

        raw_path = request.url.raw_path.split(b"?", 1)[0].decode("ascii")
        to_sign = "\n".join([
            request.method.upper(),
            date,
            request.headers.get("Content-Type", ""),
            raw_path,
        ])
        expected = base64.b64encode(
            hmac.new(self.secrets[key].encode("utf-8"), to_sign.encode("utf-8"), hashlib.sha256).digest()
        ).decode("ascii")
        if not hmac.compare_digest(expected, signature):
            return None
        return key

    def _repository(self, request: httpx.Request, key: str, resource: str) -> httpx.Response:
        if request.method == "POST" and not resource:
            new_key, new_secret = self.register()
            return httpx.Response(201, json={"key": new_key, "secret": new_secret})

        if request.method == "GET" and not resource:
            starts_with = request.url.params.get("startsWith")
            names = sorted(self.objects.get(key, {}))
            if starts_with:
                names = [n for n in names if n == starts_with or n.startswith(starts_with + "/")]
            return httpx.Response(200, json={"objects": [self._entity(key, n) for n in names]})

        if request.method == "DELETE" and resource:
            repo_id = unquote_plus(unquote_plus(resource))
            if repo_id == ADMIN_KEY:
                return httpx.Response(403)
            if repo_id not in self.secrets:
                return httpx.Response(404)
            del self.secrets[repo_id]
            self.objects.pop(repo_id, None)
            return httpx.Response(204)

        return httpx.Response(405)

    def _object(self, request: httpx.Request, key: str, name: str) -> httpx.Response:
        store = self.objects.setdefault(key, {})
        if not name:
            return httpx.Response(405)

        current = store.get(name)
        if_match = request.headers.get("If-Match")

        if request.method == "PUT":
            if if_match is not None and (current is None or current.etag != if_match):
                return httpx.Response(409)
            body = request.content
            etag = '"' + hashlib.md5(body).hexdigest() + '"'
            store[name] = StoredObject(body, request.headers.get("Content-Type"), etag)
            return httpx.Response(200, headers={"ETag": etag}, json=self._entity(key, name))

        if current is None:
            return httpx.Response(404)

        if request.method in ("GET", "HEAD"):
            headers = {"ETag": current.etag, "Content-Length": str(len(current.body))}
            if current.content_type:
                headers["Content-Type"] = current.content_type
            content = current.body if request.method == "GET" else b""
            return httpx.Response(200, headers=headers, content=content)

        if request.method == "DELETE":
            if if_match is not None and current.etag != if_match:
                return httpx.Response(409)
            del store[name]
            return httpx.Response(204)

        return httpx.Response(405)

    def _entity(self, key: str, name: str) -> dict:
        stored = self.objects[key][name]
        headers = {"ETag": [stored.etag]}
        if stored.content_type:
            headers["Content-Type"] = [stored.content_type]
        return {"name": name, "headers": headers}

    def stored(self, key: str, name: str) -> Optional[StoredObject]:
        return self.objects.get(key, {}).get(name)

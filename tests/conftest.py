# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeBackend: in-memory Branch REST API behind httpx.MockTransport
# - FakeBucket: in-memory stand-in for a Supabase storage bucket
# =============================================================================

from __future__ import annotations

import json
import os
from types import SimpleNamespace
from unittest.mock import patch
from urllib.parse import parse_qs, unquote

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("API_URL", "http://api.test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import httpx
import pytest

from core.session import MemoryTokenStore, Session
from lib.api_client import BranchApiClient

API_BASE_URL = "http://api.test"
PUBLIC_URL_PREFIX = "https://test-project.supabase.co/storage/v1/object/public/user-content/"


# =============================================================================
# Fake REST backend
# =============================================================================

class FakeBackend:
    """
    In-memory Branch REST API.

    Links are stored with "_id" keys (like the Mongo-backed API) so the id
    normalization is exercised on every read.

    Attributes:
        requests: Every httpx.Request received, in order
        failures: (method, path) -> status code to force an error response
        canned: (method, path) -> (status code, httpx.Response kwargs) to answer with
    """

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.tokens: dict[str, str] = {}
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], int] = {}
        self.canned: dict[tuple[str, str], tuple[int, dict]] = {}
        self._next_id = 1

    def _new_id(self) -> str:
        value = str(self._next_id)
        self._next_id += 1
        return value

    # -------------------------------------------------------------------------
    # Seeding helpers
    # -------------------------------------------------------------------------

    def add_user(self, username: str, password: str = "secret", **fields) -> dict:
        user = {
            "id": self._new_id(),
            "username": username,
            "email": fields.pop("email", f"{username}@example.com"),
            "password": password,
            "name": None,
            "bio": None,
            "avatar": None,
            "links": [],
            "theme": None,
        }
        user.update(fields)
        self.users[username] = user
        return user

    def add_link(self, username: str, title: str, url: str) -> dict:
        link = {"_id": self._new_id(), "title": title, "url": url}
        self.users[username]["links"].append(link)
        return link

    def issue_token(self, username: str) -> str:
        token = f"token-{username}-{len(self.tokens) + 1}"
        self.tokens[token] = username
        return token

    def fail(self, method: str, path: str, status_code: int) -> None:
        """Force the next calls to METHOD path (without /api/v1) to fail."""
        self.failures[(method, path)] = status_code

    def respond(self, method: str, path: str, status_code: int = 200, **kwargs) -> None:
        """Answer METHOD path (without /api/v1) with a fixed response."""
        self.canned[(method, path)] = (status_code, kwargs)

    def client(self, **kwargs) -> BranchApiClient:
        return BranchApiClient(API_BASE_URL, transport=httpx.MockTransport(self.handler), **kwargs)

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == f"/api/v1{path}"
        ]

    # -------------------------------------------------------------------------
    # Request handling
    # -------------------------------------------------------------------------

    @staticmethod
    def _public(user: dict, include_email: bool = False) -> dict:
        data = {k: v for k, v in user.items() if k not in ("password", "email")}
        if include_email:
            data["email"] = user["email"]
        return data

    def _current_user(self, request: httpx.Request) -> dict | None:
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return None
        username = self.tokens.get(header[len("Bearer "):])
        return self.users.get(username) if username else None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method = request.method
        path = request.url.path

        if path == "/health":
            return httpx.Response(200, json={"status": "ok"})

        path = path.removeprefix("/api/v1")

        forced = self.failures.get((method, path))
        if forced:
            return httpx.Response(forced, json={"detail": "Forced failure"})
        if (method, path) in self.canned:
            status_code, kwargs = self.canned[(method, path)]
            return httpx.Response(status_code, **kwargs)

        if method == "POST" and path == "/auth/token":
            form = parse_qs(request.content.decode())
            username = form.get("username", [""])[0]
            password = form.get("password", [""])[0]
            user = self.users.get(username)
            if user is None or user["password"] != password:
                return httpx.Response(401, json={"detail": "Incorrect username or password"})
            return httpx.Response(200, json={"access_token": self.issue_token(username), "token_type": "bearer"})

        if method == "POST" and path == "/users/":
            body = json.loads(request.content)
            if body["username"] in self.users:
                return httpx.Response(400, json={"detail": "Username already registered"})
            user = self.add_user(body["username"], body["password"], email=body["email"])
            return httpx.Response(201, json=self._public(user, include_email=True))

        if method == "GET" and path.startswith("/users/"):
            user = self.users.get(unquote(path[len("/users/"):]))
            if user is None:
                return httpx.Response(404, json={"detail": "User not found"})
            return httpx.Response(200, json=self._public(user))

        if not path.startswith("/me/"):
            return httpx.Response(404, json={"detail": "Not Found"})

        user = self._current_user(request)
        if user is None:
            return httpx.Response(401, json={"detail": "Could not validate credentials"})

        if path == "/me/":
            if method == "PUT":
                body = json.loads(request.content)
                for key in ("name", "bio", "avatar", "theme"):
                    if key in body:
                        user[key] = body[key]
            return httpx.Response(200, json=self._public(user, include_email=True))

        if method == "POST" and path == "/me/links/":
            body = json.loads(request.content)
            link = self.add_link(user["username"], body["title"], body["url"])
            return httpx.Response(201, json=link)

        link_id = unquote(path[len("/me/links/"):])
        link = next((l for l in user["links"] if l["_id"] == link_id), None)
        if link is None:
            return httpx.Response(404, json={"detail": "Link not found"})

        if method == "PUT":
            link.update(json.loads(request.content))
            return httpx.Response(200, json=link)
        if method == "DELETE":
            user["links"].remove(link)
            return httpx.Response(200, json={"message": "Link deleted"})

        return httpx.Response(405, json={"detail": "Method Not Allowed"})


# =============================================================================
# Fake storage bucket
# =============================================================================

class FakeBucket:
    """
    In-memory storage bucket with the list/remove/upload/get_public_url API.

    fail_remove / fail_upload make the matching call raise.
    """

    def __init__(self, fail_remove: bool = False, fail_upload: bool = False):
        self.objects: dict[str, bytes] = {}
        self.uploads: list[dict] = []
        self.fail_remove = fail_remove
        self.fail_upload = fail_upload

    def objects_under(self, prefix: str) -> list[str]:
        return sorted(p for p in self.objects if p.startswith(f"{prefix}/"))

    def list(self, prefix: str) -> list[dict]:
        return [{"name": p[len(prefix) + 1:]} for p in self.objects_under(prefix)]

    def remove(self, paths: list[str]) -> list[dict]:
        if self.fail_remove:
            raise RuntimeError("remove failed")
        for path in paths:
            self.objects.pop(path, None)
        return [{"name": p} for p in paths]

    def upload(self, path: str, file: bytes, file_options: dict | None = None):
        if self.fail_upload:
            raise RuntimeError("bucket not found")
        self.objects[path] = file
        self.uploads.append({"path": path, "file_options": file_options})
        return SimpleNamespace(path=path, full_path=f"user-content/{path}")

    def get_public_url(self, path: str) -> str:
        return f"{PUBLIC_URL_PREFIX}{path}"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def backend():
    """Fake REST backend seeded with one user, alice (password "secret")."""
    fake = FakeBackend()
    fake.add_user("alice", name="Alice", bio="Hello there")
    return fake


@pytest.fixture
def api(backend):
    client = backend.client()
    yield client
    client.close()


@pytest.fixture
def session(api):
    """Session over the fake backend with an in-memory token store."""
    return Session(api, MemoryTokenStore())


@pytest.fixture
def fake_bucket():
    """Route every SupabaseClient.bucket() call in the storage service to a FakeBucket."""
    bucket = FakeBucket()
    with patch("core.services.storage_service.SupabaseClient") as mock_client:
        mock_client.bucket.return_value = bucket
        yield bucket


@pytest.fixture
def png_bytes():
    """A tiny payload standing in for image content."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

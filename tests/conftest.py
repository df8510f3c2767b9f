"""Pytest shared fixtures for the Okta client tests."""
import json
import pathlib
import sys
from types import SimpleNamespace
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from okta_client import Authorizer, AuthorizationError, OktaClient

BASE_URL = "https://example.okta.com"


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_real_http(monkeypatch, request):
    """
    Prevent unit tests from hitting a live Okta org.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _refuse(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests.Session, "request", _refuse)


# ─────────────────────────────────────────────────────────────────────────────
# Fake transport
# ─────────────────────────────────────────────────────────────────────────────
def make_response(
    payload=None,
    status_code: int = 200,
    headers: Optional[dict] = None,
    content: Optional[bytes] = None,
) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    if content is None:
        content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    resp._content = content
    resp.headers = CaseInsensitiveDict(headers or {})
    if payload is not None:
        resp.headers.setdefault("Content-Type", "application/json")
    return resp


def next_link(url: str) -> dict:
    """Link header pointing at a next page (plus the self relation Okta sends)."""
    return {"Link": f'<{BASE_URL}/api/v1/self>; rel="self", <{url}>; rel="next"'}


class FakeSession:
    """Stand-in for requests.Session that replays queued responses and records calls."""

    def __init__(self):
        self.calls = []
        self.closed = False
        self._responses = []

    def queue(self, *responses):
        self._responses.extend(responses)
        return self

    def request(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        # Same URL validation a real Session performs (MissingSchema, InvalidURL)
        requests.Request(method, url).prepare()
        if not self._responses:
            raise AssertionError(f"Unexpected HTTP {method} {url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(method, url, **kwargs)
        return item

    def close(self):
        self.closed = True


class RecordingAuthorizer(Authorizer):
    """Authorizer that records every call and can be told to fail."""

    def __init__(self, token: str = "test-token", fail_on_call: Optional[int] = None):
        self.token = token
        self.fail_on_call = fail_on_call
        self.calls = []

    def authorize(self, ctx, request):
        self.calls.append(request.url)
        if self.fail_on_call is not None and len(self.calls) >= self.fail_on_call:
            raise AuthorizationError("token unavailable")
        request.headers["Authorization"] = f"SSWS {self.token}"


@pytest.fixture()
def session():
    return FakeSession()


@pytest.fixture()
def authorizer():
    return RecordingAuthorizer()


@pytest.fixture()
def okta(session, authorizer):
    """OktaClient wired to the fake session and recording authorizer."""
    return OktaClient(BASE_URL, authorizer, session=session)


# ─────────────────────────────────────────────────────────────────────────────
# Payload builders
# ─────────────────────────────────────────────────────────────────────────────
def user_payload(user_id: str, **profile) -> dict:
    return {
        "id": user_id,
        "status": "ACTIVE",
        "created": "2023-01-01T00:00:00.000Z",
        "lastLogin": "2023-02-01T00:00:00.000Z",
        "lastUpdated": "2023-03-01T00:00:00.000Z",
        "passwordChanged": "2023-01-02T00:00:00.000Z",
        "profile": {"login": f"{user_id}@example.com", **profile},
    }


def group_payload(group_id: str, name: str, group_type: str = "OKTA_GROUP") -> dict:
    return {
        "id": group_id,
        "created": "2023-01-01T00:00:00.000Z",
        "lastUpdated": "2023-01-01T00:00:00.000Z",
        "lastMembershipUpdated": "2023-01-01T00:00:00.000Z",
        "objectClass": ["okta:user_group"],
        "type": group_type,
        "profile": {"name": name, "description": f"{name} group"},
        "_links": {
            "logo": [{"name": "medium", "href": "https://example.okta.com/logo.png", "type": "image/png"}],
            "users": {"href": f"{BASE_URL}/api/v1/groups/{group_id}/users"},
            "apps": {"href": f"{BASE_URL}/api/v1/groups/{group_id}/apps"},
        },
    }


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires a live Okta org)"
    )

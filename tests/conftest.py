"""Pytest shared fixtures for the Partner Center client tests."""
import json
import pathlib
import sys
from typing import Any, Dict, List, Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from partnercenter.core.api import PartnerCenter


# ─────────────────────────────────────────────────────────────────────────────
# Stub responses and a recording session
# ─────────────────────────────────────────────────────────────────────────────
def make_response(
    payload: Any = None,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
    text: Optional[str] = None,
) -> requests.Response:
    """Build a real ``requests.Response`` carrying a JSON (or raw text) body."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = {200: "OK", 201: "Created", 204: "No Content"}.get(status_code, "Error")
    if text is not None:
        resp._content = text.encode("utf-8")
    elif payload is not None:
        resp._content = json.dumps(payload).encode("utf-8")
    else:
        resp._content = b""
    resp.headers = CaseInsensitiveDict(headers or {})
    if payload is not None and text is None:
        resp.headers.setdefault("Content-Type", "application/json")
    return resp


class FakeSession(requests.Session):
    """Session that records prepared requests and replays queued responses."""

    def __init__(self, responses: Optional[List[requests.Response]] = None):
        super().__init__()
        self.responses: List[requests.Response] = list(responses or [])
        self.sent: List[requests.PreparedRequest] = []
        self.send_kwargs: List[Dict[str, Any]] = []

    def add(self, payload: Any = None, status_code: int = 200, headers: Optional[Dict[str, str]] = None, text: Optional[str] = None):
        self.responses.append(make_response(payload, status_code, headers, text))
        return self

    def send(self, request, **kwargs):
        self.sent.append(request)
        self.send_kwargs.append(kwargs)
        if not self.responses:
            raise AssertionError(f"No queued response for {request.method} {request.url}")
        resp = self.responses.pop(0)
        resp.url = request.url
        resp.request = request
        return resp

    @property
    def last(self) -> requests.PreparedRequest:
        return self.sent[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.body)


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from hitting live Partner Center or Azure AD endpoints.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _no_network(self, prepared, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {prepared.method} in unit test: {prepared.url}")

    monkeypatch.setattr(requests.Session, "send", _no_network)


@pytest.fixture()
def fake_session():
    return FakeSession()


@pytest.fixture()
def api(fake_session):
    """Authorized API binding wired to the fake session."""
    return PartnerCenter(token_provider=lambda: "test-token", session=fake_session)


@pytest.fixture()
def unauthorized_api(fake_session):
    return PartnerCenter(session=fake_session)


BASE = "https://api.partnercenter.microsoft.com/v1/customers"

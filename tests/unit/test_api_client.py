"""Tests for partnercenter/core/api/client.py"""
import threading
from unittest.mock import MagicMock

import pytest
import requests

from conftest import FakeSession
from partnercenter.core.api.client import PartnerCenterClient
from partnercenter.core.api.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    PartnerCenterAPIError,
    RateLimitError,
    ResourceNotFoundError,
    ServerError,
    ServiceUnavailableError,
    UnauthorizedError,
)
from partnercenter.core.api.retry import RetryPolicy


@pytest.fixture
def client(fake_session):
    return PartnerCenterClient(token_provider=lambda: "tok-123", session=fake_session, locale="fr-FR")


def test_request_carries_bearer_and_partner_center_headers(client, fake_session):
    fake_session.add({"id": "c1"})

    client.resource("customers").request().path_segment("c1").get()

    sent = fake_session.last
    assert sent.method == "GET"
    assert sent.url == "https://api.partnercenter.microsoft.com/v1/customers/c1"
    assert sent.headers["Authorization"] == "Bearer tok-123"
    assert sent.headers["Accept"] == "application/json"
    assert sent.headers["MS-Contract-Version"] == "v1"
    assert sent.headers["X-Locale"] == "fr-FR"
    assert sent.headers["MS-CorrelationId"] == client.correlation_id
    assert sent.headers["MS-RequestId"]
    assert fake_session.send_kwargs[-1]["timeout"] == client.timeout


def test_request_id_is_fresh_per_request(client, fake_session):
    fake_session.add({}).add({})

    client.resource("customers").request().get()
    client.resource("customers").request().get()

    first, second = fake_session.sent
    assert first.headers["MS-RequestId"] != second.headers["MS-RequestId"]
    assert first.headers["MS-CorrelationId"] == second.headers["MS-CorrelationId"]


def test_token_provider_called_for_every_request(fake_session):
    tokens = iter(["first", "second"])
    client = PartnerCenterClient(token_provider=lambda: next(tokens), session=fake_session)
    fake_session.add({}).add({})

    client.resource("customers").request().get()
    client.resource("customers").request().get()

    assert [req.headers["Authorization"] for req in fake_session.sent] == ["Bearer first", "Bearer second"]


def test_no_authorization_header_without_token_provider(fake_session):
    client = PartnerCenterClient(session=fake_session)
    fake_session.add({})

    client.resource("customers").request().get()

    assert "Authorization" not in fake_session.last.headers


def test_path_segments_are_quoted(client, fake_session):
    fake_session.add({})

    client.resource("customers").request().path_segment("a b", "orders").get()

    assert fake_session.last.url.endswith("/v1/customers/a%20b/orders")


@pytest.mark.parametrize("segment", ["", "  ", None])
def test_empty_path_segments_are_rejected(client, fake_session, segment):
    with pytest.raises(ValueError):
        client.resource("customers").request().path_segment(segment)
    assert fake_session.sent == []


def test_body_is_serialized_as_json(client, fake_session):
    fake_session.add({"ok": True}, status_code=201)

    response = client.resource("customers").request().post({"companyProfile": {"domain": "x.com"}})

    assert fake_session.last.headers["Content-Type"] == "application/json"
    assert fake_session.last_json() == {"companyProfile": {"domain": "x.com"}}
    assert response.status_code == 201
    assert response.ok
    assert response.body == {"ok": True}


def test_empty_body_decodes_to_none(client, fake_session):
    fake_session.add(status_code=204)

    response = client.resource("customers").request().path_segment("c1").delete()

    assert response.status_code == 204
    assert response.body is None


def test_query_params_skip_none(client, fake_session):
    fake_session.add({})

    client.resource("customers").request().query_param("size", 10).query_param("filter", None).get()

    assert fake_session.last.url.endswith("/v1/customers?size=10")


@pytest.mark.parametrize(
    "status, exc_class",
    [
        (400, BadRequestError),
        (401, UnauthorizedError),
        (403, ForbiddenError),
        (404, ResourceNotFoundError),
        (409, ConflictError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServiceUnavailableError),
        (418, PartnerCenterAPIError),
    ],
)
def test_error_statuses_map_to_typed_exceptions(client, fake_session, status, exc_class):
    fake_session.add({"code": 600, "description": "Something went wrong"}, status_code=status)

    with pytest.raises(exc_class) as excinfo:
        client.resource("customers").request().path_segment("c1").get()

    err = excinfo.value
    assert type(err) is exc_class
    assert err.status_code == status
    assert err.message == "Something went wrong"
    assert err.error_code == 600
    assert err.endpoint.endswith("/v1/customers/c1")


def test_error_with_non_json_body_keeps_text(client, fake_session):
    fake_session.add(status_code=502, text="<html>Bad Gateway</html>")

    with pytest.raises(ServerError) as excinfo:
        client.resource("customers").request().get()

    assert excinfo.value.message == "<html>Bad Gateway</html>"
    assert excinfo.value.error_code is None


def test_rate_limit_exposes_retry_after(client, fake_session):
    fake_session.add({"code": 429, "description": "Throttled"}, status_code=429, headers={"Retry-After": "7"})

    with pytest.raises(RateLimitError) as excinfo:
        client.resource("customers").request().get()

    assert excinfo.value.retry_after == 7


def test_interceptors_see_prepared_request(fake_session):
    seen = []

    def add_header(prepared):
        seen.append(prepared.url)
        prepared.headers["X-Trace"] = "abc"

    client = PartnerCenterClient(token_provider=lambda: "t", interceptors=[add_header], session=fake_session)
    fake_session.add({})

    client.resource("customers").request().get()

    assert seen == ["https://api.partnercenter.microsoft.com/v1/customers"]
    assert fake_session.last.headers["X-Trace"] == "abc"


def test_retry_policy_wraps_each_call(fake_session):
    sleeps = []
    policy = RetryPolicy(max_attempts=3, base_delay=0.5, sleep=sleeps.append)
    client = PartnerCenterClient(token_provider=lambda: "t", retry_policy=policy, session=fake_session)
    fake_session.add({"description": "busy"}, status_code=503).add({"id": "c1"})

    response = client.resource("customers").request().path_segment("c1").get()

    assert response.body == {"id": "c1"}
    assert len(fake_session.sent) == 2
    assert sleeps == [0.5]


def test_resolve_uri_variants():
    client = PartnerCenterClient()

    assert client.resolve_uri("/customers?size=5") == "https://api.partnercenter.microsoft.com/v1/customers?size=5"
    assert client.resolve_uri("v1/customers") == "https://api.partnercenter.microsoft.com/v1/customers"
    assert client.resolve_uri("https://other.example/x") == "https://other.example/x"


def test_api_version_must_not_be_empty():
    with pytest.raises(ValueError):
        PartnerCenterClient(api_version="")


def test_session_is_created_lazily_once(monkeypatch):
    created = []

    def fake_create(self):
        created.append(1)
        return FakeSession()

    monkeypatch.setattr(PartnerCenterClient, "create_session", fake_create)
    client = PartnerCenterClient()
    assert created == []

    first = client._get_session()
    second = client._get_session()

    assert first is second
    assert created == [1]


def test_concurrent_first_use_creates_single_session(monkeypatch):
    created = []
    barrier = threading.Barrier(8)

    def fake_create(self):
        created.append(1)
        return FakeSession()

    monkeypatch.setattr(PartnerCenterClient, "create_session", fake_create)
    client = PartnerCenterClient()
    sessions = []

    def worker():
        barrier.wait()
        sessions.append(client._get_session())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(created) == 1
    assert all(session is sessions[0] for session in sessions)


def test_close_releases_session():
    session = MagicMock(spec=requests.Session)
    client = PartnerCenterClient(session=session)

    client.close()

    session.close.assert_called_once()
    assert client._session is None


def test_unexpected_network_is_blocked():
    client = PartnerCenterClient(token_provider=lambda: "t")

    with pytest.raises(RuntimeError, match="Unexpected HTTP GET"):
        client.resource("customers").request().get()


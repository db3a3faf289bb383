"""Tests for partnercenter/cli.py"""
import json
from unittest.mock import MagicMock

import pytest

from partnercenter import cli
from partnercenter.config.settings import PartnerCenterConfig
from partnercenter.core.api.auth import AzureADAuthTemplate
from partnercenter.core.api.connection import PartnerCenterConnectionFactory
from partnercenter.core.api.exceptions import AuthenticationError
from partnercenter.core.api.models import AccessGrant


CONFIG = PartnerCenterConfig(
    application_id="app-id",
    application_secret="secret",
    tenant="contoso.onmicrosoft.com",
    admin_username="admin@contoso.onmicrosoft.com",
    admin_password="admin-pw",
)


@pytest.fixture
def auth_template():
    template = MagicMock(spec=AzureADAuthTemplate)
    template.exchange_for_access.return_value = AccessGrant.from_expires_in("pc-token", expires_in=3600)
    template.exchange_credentials_for_access.return_value = AccessGrant.from_expires_in("user-token", expires_in=3600)
    return template


@pytest.fixture
def wired(monkeypatch, auth_template, fake_session):
    """Route the CLI to a factory backed by the fake session."""
    factory = PartnerCenterConnectionFactory(
        "app-id", "secret", "app-id", "contoso.onmicrosoft.com",
        auth_template=auth_template,
        session=fake_session,
    )
    monkeypatch.setattr(cli, "load_settings", lambda: CONFIG)
    monkeypatch.setattr(cli.PartnerCenterConnectionFactory, "from_settings", staticmethod(lambda config: factory))
    return fake_session


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage: partnercenter" in capsys.readouterr().out


def test_missing_action_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["customers"])
    assert excinfo.value.code == 2


def test_customers_list_prints_items(wired, capsys):
    wired.add({"totalCount": 1, "items": [{"id": "cust-1", "companyProfile": {"companyName": "Contoso"}}]})

    assert cli.main(["customers", "list", "--size", "5"]) == 0

    assert wired.last.url.endswith("/v1/customers?size=5")
    assert wired.last.headers["Authorization"] == "Bearer pc-token"
    assert json.loads(capsys.readouterr().out) == [{"id": "cust-1", "companyProfile": {"companyName": "Contoso"}}]


def test_customers_list_with_domain_prefix_searches(wired, capsys):
    wired.add({"totalCount": 0, "items": []})

    assert cli.main(["customers", "list", "--domain-prefix", "contoso"]) == 0

    assert "filter=" in wired.last.url
    assert json.loads(capsys.readouterr().out) == []


def test_orders_create_reads_payload_file(wired, tmp_path, capsys):
    order_file = tmp_path / "order.json"
    order_file.write_text(json.dumps({
        "referenceCustomerId": "cust-1",
        "billingCycle": "monthly",
        "lineItems": [{"lineItemNumber": 0, "offerId": "offer-1", "quantity": 1}],
    }))
    wired.add({"id": "order-1", "referenceCustomerId": "cust-1"}, status_code=201)

    assert cli.main(["orders", "create", "--customer-id", "cust-1", "--file", str(order_file)]) == 0

    assert wired.last.method == "POST"
    assert wired.last_json()["lineItems"][0]["offerId"] == "offer-1"
    assert json.loads(capsys.readouterr().out)["id"] == "order-1"


def test_admin_flag_uses_password_grant(wired, auth_template, capsys):
    wired.add({"totalCount": 0, "items": []})

    assert cli.main(["--admin", "users", "roles", "--customer-id", "cust-1"]) == 0

    auth_template.exchange_credentials_for_access.assert_called_once_with("admin@contoso.onmicrosoft.com", "admin-pw")
    assert wired.last.url.endswith("/v1/customers/cust-1/users/directoryroles")
    assert wired.last.headers["Authorization"] == "Bearer user-token"


def test_token_hides_access_token_by_default(wired, capsys):
    assert cli.main(["token"]) == 0
    output = json.loads(capsys.readouterr().out)
    assert "access_token" not in output
    assert output["expire_time"]

    assert cli.main(["token", "--show-token"]) == 0
    assert json.loads(capsys.readouterr().out)["access_token"] == "pc-token"


def test_api_error_exits_with_status_1(wired, capsys):
    wired.add({"code": 600, "description": "Customer not found"}, status_code=404)

    assert cli.main(["customers", "get", "--customer-id", "missing"]) == 1

    assert "[error]" in capsys.readouterr().err


def test_authentication_failure_exits_with_status_1(wired, auth_template, capsys):
    auth_template.exchange_for_access.side_effect = AuthenticationError(
        401, "Invalid client secret", "https://login.windows.net/x/oauth2/token",
    )

    assert cli.main(["customers", "list"]) == 1

    assert "Invalid client secret" in capsys.readouterr().err


def test_missing_credentials_exit_with_status_1(monkeypatch, capsys):
    monkeypatch.setattr(cli, "load_settings", lambda: PartnerCenterConfig())

    assert cli.main(["customers", "list"]) == 1

    assert "Missing Partner Center credentials" in capsys.readouterr().err

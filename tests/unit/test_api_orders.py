"""Tests for partnercenter/core/api/orders.py"""
import pytest

from conftest import BASE
from partnercenter.core.api.exceptions import MissingAuthorizationError, ResourceNotFoundError
from partnercenter.core.api.models import CreateOrderRequest, Order, OrderLineItem, PartnerCenterResponse


ORDER = {
    "id": "order-1",
    "referenceCustomerId": "cust-1",
    "billingCycle": "monthly",
    "lineItems": [
        {"lineItemNumber": 0, "offerId": "offer-1", "subscriptionId": "sub-1", "quantity": 5},
    ],
    "creationDate": "2017-01-09T18:55:05.553Z",
    "status": "completed",
    "attributes": {"objectType": "Order"},
}


def _order_request():
    return CreateOrderRequest(
        reference_customer_id="cust-1",
        billing_cycle="monthly",
        line_items=[OrderLineItem(line_item_number=0, offer_id="offer-1", quantity=5)],
    )


def test_get_customer_orders(api, fake_session):
    fake_session.add({"totalCount": 1, "items": [ORDER], "attributes": {"objectType": "Collection"}})

    response = api.orders.get_customer_orders("cust-1")

    assert fake_session.last.method == "GET"
    assert fake_session.last.url == f"{BASE}/cust-1/orders"
    page = response.body
    assert isinstance(page, PartnerCenterResponse)
    assert page.total_count == 1
    assert page.items[0].line_items[0].subscription_id == "sub-1"


def test_get_by_id(api, fake_session):
    fake_session.add(ORDER)

    order = api.orders.get_by_id("cust-1", "order-1").body

    assert fake_session.last.url == f"{BASE}/cust-1/orders/order-1"
    assert isinstance(order, Order)
    assert order.status == "completed"


def test_get_by_id_not_found(api, fake_session):
    fake_session.add({"code": 600, "description": "Order not found"}, status_code=404)

    with pytest.raises(ResourceNotFoundError, match="Order not found"):
        api.orders.get_by_id("cust-1", "missing")


def test_create_order_posts_camel_case_body(api, fake_session):
    fake_session.add(ORDER, status_code=201)

    response = api.orders.create_order("cust-1", _order_request())

    assert fake_session.last.method == "POST"
    assert fake_session.last.url == f"{BASE}/cust-1/orders"
    assert fake_session.last_json() == {
        "referenceCustomerId": "cust-1",
        "billingCycle": "monthly",
        "lineItems": [{"lineItemNumber": 0, "offerId": "offer-1", "quantity": 5}],
    }
    assert response.status_code == 201
    assert response.body.id == "order-1"


def test_create_add_on_order_uses_patch(api, fake_session):
    fake_session.add(ORDER)
    request = CreateOrderRequest(
        reference_customer_id="cust-1",
        line_items=[OrderLineItem(line_item_number=1, offer_id="addon-1", parent_subscription_id="sub-1", quantity=1)],
    )

    api.orders.create_add_on_order("cust-1", "order-1", request)

    assert fake_session.last.method == "PATCH"
    assert fake_session.last.url == f"{BASE}/cust-1/orders/order-1"
    assert fake_session.last_json()["lineItems"][0]["parentSubscriptionId"] == "sub-1"


@pytest.mark.parametrize("customer_id, order_id", [("", "order-1"), ("cust-1", ""), (None, "order-1")])
def test_empty_identifiers_are_rejected_before_sending(api, fake_session, customer_id, order_id):
    with pytest.raises(ValueError):
        api.orders.get_by_id(customer_id, order_id)
    assert fake_session.sent == []


def test_create_order_requires_request(api, fake_session):
    with pytest.raises(ValueError, match="request cannot be None"):
        api.orders.create_order("cust-1", None)
    assert fake_session.sent == []


def test_unauthorized_binding_refuses_calls(unauthorized_api, fake_session):
    with pytest.raises(MissingAuthorizationError):
        unauthorized_api.orders.get_customer_orders("cust-1")
    assert fake_session.sent == []

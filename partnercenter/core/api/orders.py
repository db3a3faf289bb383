"""Partner Center order operations."""
from __future__ import annotations
import logging

from ..validators import require_identifier, require_value
from .models import ApiResponse, CreateOrderRequest, Order
from .paging import PagingResourceTemplate

logger = logging.getLogger(__name__)


class OrderTemplate(PagingResourceTemplate[Order]):
    """Orders placed for a customer (``/customers/{id}/orders``)."""

    item_type = Order

    def get_customer_orders(self, customer_id: str) -> ApiResponse:
        """List a customer's orders.

        Args:
            customer_id: Customer tenant ID

        Returns:
            ApiResponse whose body is a ``PartnerCenterResponse[Order]``
        """
        customer_id = require_identifier(customer_id, "customer_id")
        return self.get_page(self.request().path_segment(customer_id, "orders"))

    def get_by_id(self, customer_id: str, order_id: str) -> ApiResponse:
        """Get a single order.

        Args:
            customer_id: Customer tenant ID
            order_id: Order ID

        Returns:
            ApiResponse whose body is an ``Order``
        """
        customer_id = require_identifier(customer_id, "customer_id")
        order_id = require_identifier(order_id, "order_id")
        return self.request().path_segment(customer_id, "orders", order_id).get(Order)

    def create_add_on_order(self, customer_id: str, order_id: str, request: CreateOrderRequest) -> ApiResponse:
        """Add line items (add-ons) to an existing order with PATCH."""
        customer_id = require_identifier(customer_id, "customer_id")
        order_id = require_identifier(order_id, "order_id")
        require_value(request, "request")
        response = self.request().path_segment(customer_id, "orders", order_id).patch(request, Order)
        logger.info("[orders] Add-on order placed on '%s' for customer '%s'", order_id, customer_id)
        return response

    def create_order(self, customer_id: str, request: CreateOrderRequest) -> ApiResponse:
        """Place a new order for a customer.

        Args:
            customer_id: Customer tenant ID
            request: Order with billing cycle and line items

        Returns:
            ApiResponse whose body is the created ``Order``
        """
        customer_id = require_identifier(customer_id, "customer_id")
        require_value(request, "request")
        response = self.request().path_segment(customer_id, "orders").post(request, Order)
        order = response.body
        logger.info(
            "[orders] Order created for customer '%s' (id=%s)",
            customer_id, order.id if order is not None else None,
        )
        return response

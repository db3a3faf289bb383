"""Partner Center subscription operations."""
from __future__ import annotations
import logging

from ..validators import require_identifier, require_value
from .models import ApiResponse, Subscription, UpdateSubscriptionRequest
from .paging import PagingResourceTemplate

logger = logging.getLogger(__name__)


class SubscriptionTemplate(PagingResourceTemplate[Subscription]):
    """Subscriptions of a customer (``/customers/{id}/subscriptions``)."""

    item_type = Subscription

    def get_customer_subscriptions(self, customer_id: str) -> ApiResponse:
        customer_id = require_identifier(customer_id, "customer_id")
        return self.get_page(self.request().path_segment(customer_id, "subscriptions"))

    def get_by_id(self, customer_id: str, subscription_id: str) -> ApiResponse:
        customer_id = require_identifier(customer_id, "customer_id")
        subscription_id = require_identifier(subscription_id, "subscription_id")
        return self.request().path_segment(customer_id, "subscriptions", subscription_id).get(Subscription)

    def get_add_ons(self, customer_id: str, subscription_id: str) -> ApiResponse:
        """Add-on subscriptions purchased on top of ``subscription_id``."""
        customer_id = require_identifier(customer_id, "customer_id")
        subscription_id = require_identifier(subscription_id, "subscription_id")
        return self.get_page(
            self.request().path_segment(customer_id, "subscriptions", subscription_id, "addons")
        )

    def get_subscriptions_by_order(self, customer_id: str, order_id: str) -> ApiResponse:
        customer_id = require_identifier(customer_id, "customer_id")
        order_id = require_identifier(order_id, "order_id")
        return self.get_page(
            self.request().path_segment(customer_id, "subscriptions").query_param("order_id", order_id)
        )

    def update_subscription(
        self,
        customer_id: str,
        subscription_id: str,
        request: UpdateSubscriptionRequest,
    ) -> ApiResponse:
        """Change quantity, friendly name, status or auto-renewal with PATCH.

        Args:
            customer_id: Customer tenant ID
            subscription_id: Subscription ID
            request: Fields to change (``None`` fields are not sent)

        Returns:
            ApiResponse whose body is the updated ``Subscription``
        """
        customer_id = require_identifier(customer_id, "customer_id")
        subscription_id = require_identifier(subscription_id, "subscription_id")
        require_value(request, "request")
        if request.quantity is not None and request.quantity < 1:
            raise ValueError("Subscription quantity must be at least 1")
        response = (
            self.request()
            .path_segment(customer_id, "subscriptions", subscription_id)
            .patch(request, Subscription)
        )
        logger.info("[subscriptions] Subscription '%s' updated for customer '%s'", subscription_id, customer_id)
        return response

"""Partner Center customer operations."""
from __future__ import annotations
import json
import logging
from dataclasses import replace
from typing import Optional

from ..validators import require_identifier, require_value, validate_domain
from .models import ApiResponse, CompanyProfile, CreateCustomerRequest, Customer
from .paging import PagingResourceTemplate

logger = logging.getLogger(__name__)


class CustomerTemplate(PagingResourceTemplate[Customer]):
    """Customers of the partner (``/customers``)."""

    item_type = Customer

    def get_customer_by_id(self, customer_id: str) -> ApiResponse:
        customer_id = require_identifier(customer_id, "customer_id")
        return self.request().path_segment(customer_id).get(Customer)

    def get_company_profile(self, customer_id: str) -> ApiResponse:
        customer_id = require_identifier(customer_id, "customer_id")
        return self.request().path_segment(customer_id, "profiles", "company").get(CompanyProfile)

    def get_customer_list(self, size: Optional[int] = None) -> ApiResponse:
        """First page of the partner's customers."""
        return self.get_page(self.request(), size)

    def search_customers(self, domain_prefix: str, size: Optional[int] = None) -> ApiResponse:
        """Find customers whose primary domain starts with ``domain_prefix``.

        Args:
            domain_prefix: Beginning of the customer's domain (e.g. "contoso")
            size: Optional page size

        Returns:
            ApiResponse whose body is a ``PartnerCenterResponse[Customer]``
        """
        domain_prefix = require_identifier(domain_prefix, "domain_prefix")
        search_filter = json.dumps(
            {"Field": "Domain", "Value": domain_prefix, "Operator": "starts_with"},
            separators=(",", ":"),
        )
        return self.get_page(self.request().query_param("filter", search_filter), size)

    def create_customer(self, request: CreateCustomerRequest) -> ApiResponse:
        """Create a customer account (and its Azure AD tenant).

        Raises:
            ValueError: If the requested domain is malformed
        """
        require_value(request, "request")
        profile = request.company_profile
        if profile is not None and profile.domain is not None:
            request = replace(request, company_profile=replace(profile, domain=validate_domain(profile.domain)))
        response = self.request().post(request, Customer)
        customer = response.body
        logger.info("[customers] Customer created (id=%s)", customer.id if customer is not None else None)
        return response

    def delete_customer(self, customer_id: str) -> ApiResponse:
        """Delete a customer. Only supported for integration sandbox accounts."""
        customer_id = require_identifier(customer_id, "customer_id")
        response = self.request().path_segment(customer_id).delete()
        logger.info("[customers] Customer '%s' deleted", customer_id)
        return response

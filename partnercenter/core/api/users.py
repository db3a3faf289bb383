"""Partner Center customer user and directory role operations."""
from __future__ import annotations
import logging
from dataclasses import replace
from typing import Optional

from ..validators import require_identifier, require_value, validate_user_principal_name
from .models import ApiResponse, CreateUserRequest, GetRoleListResponse, UpdateUserPasswordRequest, User
from .paging import PagingResourceTemplate

logger = logging.getLogger(__name__)


class UserTemplate(PagingResourceTemplate[User]):
    """Users of a customer tenant (``/customers/{tenantId}/users``)."""

    item_type = User

    def get_customer_users(self, customer_tenant_id: str, size: Optional[int] = None) -> ApiResponse:
        """List the users of a customer tenant (first page)."""
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        return self.get_page(self.request().path_segment(customer_tenant_id, "users"), size)

    def create_user(
        self,
        customer_tenant_id: str,
        request: CreateUserRequest,
        user_id: Optional[str] = None,
    ) -> ApiResponse:
        """Create a user account in the customer tenant.

        When ``user_id`` is given the request is posted to that user's
        resource instead, which updates the existing account.

        Args:
            customer_tenant_id: Customer tenant ID
            request: User to create
            user_id: Optional existing user ID

        Returns:
            ApiResponse whose body is the created ``User``
        """
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        require_value(request, "request")
        if request.user_principal_name is not None:
            request = replace(
                request, user_principal_name=validate_user_principal_name(request.user_principal_name),
            )

        req = self.request().path_segment(customer_tenant_id, "users")
        if user_id is not None:
            req.path_segment(require_identifier(user_id, "user_id"))
        response = req.post(request, User)
        logger.info("[users] User '%s' posted to tenant '%s'", request.user_principal_name, customer_tenant_id)
        return response

    def delete_user(self, customer_tenant_id: str, user_id: str) -> ApiResponse:
        """Delete a user account; Partner Center answers 204 with no body."""
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        user_id = require_identifier(user_id, "user_id")
        response = self.request().path_segment(customer_tenant_id, "users", user_id).delete()
        logger.info("[users] User '%s' deleted from tenant '%s'", user_id, customer_tenant_id)
        return response

    def get_user(self, customer_tenant_id: str, user_id: str) -> ApiResponse:
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        user_id = require_identifier(user_id, "user_id")
        return self.request().path_segment(customer_tenant_id, "users", user_id).get(User)

    def update_user_password(
        self,
        customer_tenant_id: str,
        user_id: str,
        request: UpdateUserPasswordRequest,
    ) -> ApiResponse:
        """Reset a user's password (the password itself is never logged)."""
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        user_id = require_identifier(user_id, "user_id")
        require_value(request, "request")
        response = self.request().path_segment(customer_tenant_id, "users", user_id).post(request, User)
        logger.info("[users] Password reset for user '%s'", user_id)
        return response

    def get_user_roles(self, customer_tenant_id: str, user_id: str) -> ApiResponse:
        """Directory roles assigned to a user."""
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        user_id = require_identifier(user_id, "user_id")
        return (
            self.request()
            .path_segment(customer_tenant_id, "users", user_id, "directoryroles")
            .get(GetRoleListResponse)
        )

    def get_all_roles(self, customer_tenant_id: str) -> ApiResponse:
        """Every directory role available in the customer tenant."""
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        return (
            self.request()
            .path_segment(customer_tenant_id, "users", "directoryroles")
            .get(GetRoleListResponse)
        )

    def get_roles_by_role_id(self, customer_tenant_id: str, role_id: str) -> ApiResponse:
        customer_tenant_id = require_identifier(customer_tenant_id, "customer_tenant_id")
        role_id = require_identifier(role_id, "role_id")
        return (
            self.request()
            .path_segment(customer_tenant_id, "users", role_id, "directoryroles")
            .get(GetRoleListResponse)
        )

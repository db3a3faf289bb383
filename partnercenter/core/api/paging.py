"""Base templates shared by every Partner Center resource template."""
from __future__ import annotations
import logging
from typing import Any, Generic, Iterator, Optional, Type, TypeVar

from ..validators import validate_page_size
from .client import RestResource, RestRequest
from .exceptions import MissingAuthorizationError
from .models import ApiResponse, PartnerCenterResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROVIDER_ID = "partnercenter"


class AbstractTemplate:
    """Guard that every operation runs against an authorized connection."""

    def __init__(self, is_authorized: bool):
        self.is_authorized = is_authorized

    def get_provider_id(self) -> str:
        return PROVIDER_ID

    def require_authorization(self) -> None:
        """Raise when the template was built without an access grant.

        Raises:
            MissingAuthorizationError: If not authorized
        """
        if not self.is_authorized:
            raise MissingAuthorizationError(
                f"Authorization is required for the operation, but the API binding "
                f"was created without authorization ({self.get_provider_id()})"
            )


class PagingResourceTemplate(AbstractTemplate, Generic[T]):
    """Adds list-with-continuation semantics to collection-returning templates.

    Partner Center pages large collections: every page carries a ``links.next``
    entry with the URI, verb and continuation headers of the following page.
    """

    item_type: Type[Any] = dict

    def __init__(self, rest_resource: RestResource, is_authorized: bool):
        """Initialize paging template.

        Args:
            rest_resource: Resource rooted at ``/{api_version}/customers``
            is_authorized: Whether the binding holds an access grant
        """
        super().__init__(is_authorized)
        self.rest_resource = rest_resource

    def request(self) -> RestRequest:
        """Start a request below the resource root after the authorization check."""
        self.require_authorization()
        return self.rest_resource.request()

    def page_type(self) -> Any:
        return PartnerCenterResponse[self.item_type]

    def get_page(self, request: RestRequest, size: Optional[int] = None) -> ApiResponse:
        """Execute a list request, optionally limiting the page size."""
        if size is not None:
            request.query_param("size", validate_page_size(size))
        return request.get(self.page_type())

    @staticmethod
    def has_next_page(page: Optional[PartnerCenterResponse]) -> bool:
        """Return True when the page links to a following page."""
        return bool(page and page.links and page.links.next and page.links.next.uri)

    def get_next_page(self, page: PartnerCenterResponse) -> ApiResponse:
        """Fetch the page following ``page``.

        The request replays the verb and every header (continuation token)
        advertised in ``page.links.next``.

        Raises:
            ValueError: If the page has no next link
        """
        self.require_authorization()
        if not self.has_next_page(page):
            raise ValueError("Page has no next link")

        link = page.links.next
        request = self.rest_resource.request_uri(link.uri)
        for pair in link.headers or []:
            if pair.key:
                request.header(pair.key, pair.value or "")
        method = (link.method or "GET").upper()
        logger.debug("[paging] Following next link %s %s", method, link.uri)
        return request.execute(method, response_type=self.page_type())

    def iterate_items(self, first_page: PartnerCenterResponse) -> Iterator[T]:
        """Yield items of ``first_page`` and every following page."""
        page: Optional[PartnerCenterResponse] = first_page
        while page is not None:
            yield from page.items
            if not self.has_next_page(page):
                return
            page = self.get_next_page(page).body

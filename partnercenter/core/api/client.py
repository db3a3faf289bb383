"""Low-level HTTP client for the Partner Center REST API.

Handles the shared HTTP session, bearer-token headers, request building and
error mapping. Resource templates never talk to ``requests`` directly; they
build requests through ``RestResource``.
"""
from __future__ import annotations
import logging
import threading
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote

import requests

from ..transformer import PayloadTransformer
from ..validators import require_identifier
from .exceptions import error_for_status
from .models import ApiResponse
from .retry import RetryPolicy
from .uri import DEFAULT_API_VERSION, PARTNER_CENTER_URL

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30

Interceptor = Callable[[requests.PreparedRequest], None]


class LazySessionMixin:
    """Create a ``requests.Session`` on first use, exactly once."""

    _session: Optional[requests.Session] = None

    def _init_session(self, session: Optional[requests.Session] = None) -> None:
        self._session = session
        self._session_lock = threading.Lock()

    def create_session(self) -> requests.Session:
        """Build the HTTP session. Override to customize adapters or proxies."""
        return requests.Session()

    def _get_session(self) -> requests.Session:
        # Double-checked so concurrent first calls still build a single session
        if self._session is None:
            with self._session_lock:
                if self._session is None:
                    self._session = self.create_session()
        return self._session

    def close(self) -> None:
        """Close the HTTP session if one was created."""
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None


class PartnerCenterClient(LazySessionMixin):
    """HTTP client for the Partner Center REST API.

    Features:
    - Bearer token pulled from a token provider on every request
    - Partner Center tracing headers (MS-RequestId, MS-CorrelationId)
    - Request interceptors and an optional injected retry policy
    - Centralized error handling (typed exceptions per status)

    Usage:
        client = PartnerCenterClient(token_provider=lambda: token)
        customers = client.resource("customers")
        response = customers.request().path_segment(customer_id, "orders").get()
    """

    def __init__(
        self,
        base_url: str = PARTNER_CENTER_URL,
        api_version: str = DEFAULT_API_VERSION,
        token_provider: Optional[Callable[[], str]] = None,
        locale: str = "en-US",
        interceptors: Optional[Iterable[Interceptor]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize Partner Center client.

        Args:
            base_url: Partner Center API root
            api_version: Contract version (path prefix and MS-Contract-Version)
            token_provider: Callable returning the current access token
            locale: Value for the X-Locale header
            interceptors: Callables invoked with each prepared request
            retry_policy: Optional retry policy wrapping every call
            timeout: Per-request timeout in seconds
            session: Pre-built session (created lazily otherwise)
        """
        self.base_url = base_url.rstrip("/")
        self.api_version = require_identifier(api_version, "api_version")
        self.token_provider = token_provider
        self.locale = locale
        self.interceptors: List[Interceptor] = list(interceptors or [])
        self.retry_policy = retry_policy
        self.timeout = timeout
        self.correlation_id = str(uuid.uuid4())
        self._init_session(session)

    def build_url(self, *segments: str) -> str:
        """Join the versioned API root with already validated segments."""
        parts = [self.base_url, self.api_version]
        parts.extend(quote(segment, safe="") for segment in segments)
        return "/".join(parts)

    def resolve_uri(self, uri: str) -> str:
        """Resolve a link URI returned by Partner Center.

        Absolute URIs are used verbatim; relative ones are resolved against
        the versioned API root.
        """
        if uri.startswith(("http://", "https://")):
            return uri
        path = uri.lstrip("/")
        if path.startswith(f"{self.api_version}/"):
            return f"{self.base_url}/{path}"
        return f"{self.base_url}/{self.api_version}/{path}"

    def resource(self, *root_segments: str) -> "RestResource":
        """Return a resource rooted at ``/{api_version}/{root_segments}``."""
        return RestResource(self, root_segments)

    def default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "MS-RequestId": str(uuid.uuid4()),
            "MS-CorrelationId": self.correlation_id,
            "MS-Contract-Version": self.api_version,
            "X-Locale": self.locale,
        }
        if self.token_provider is not None:
            headers["Authorization"] = f"Bearer {self.token_provider()}"
        return headers

    def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Execute a request, applying the retry policy when configured.

        Raises:
            PartnerCenterAPIError: On HTTP error (typed per status)
        """
        def _call() -> requests.Response:
            return self._send(method, url, json=json, params=params, headers=headers)

        if self.retry_policy is not None:
            return self.retry_policy.execute(_call)
        return _call()

    def _send(
        self,
        method: str,
        url: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        session = self._get_session()
        merged = self.default_headers()
        merged.update(headers or {})

        prepared = session.prepare_request(
            requests.Request(method, url, json=json, params=params, headers=merged)
        )
        for interceptor in self.interceptors:
            interceptor(prepared)

        logger.debug("[http] %s %s (request id %s)", method, prepared.url, merged["MS-RequestId"])
        settings = session.merge_environment_settings(prepared.url, {}, None, None, None)
        resp = session.send(prepared, timeout=self.timeout, **settings)
        logger.debug("[http] %s %s -> %s", method, prepared.url, resp.status_code)
        self._handle_error(resp)
        return resp

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Args:
            resp: Response object to check

        Raises:
            PartnerCenterAPIError: If response status indicates error
        """
        if resp.status_code < 400:
            return

        message = resp.text or resp.reason or ""
        error_code = None
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            nested = payload.get("error") if isinstance(payload.get("error"), dict) else payload
            message = nested.get("description") or nested.get("message") or message
            error_code = nested.get("code")

        logger.warning("[http] %s failed with %s: %s", resp.url, resp.status_code, message)
        raise error_for_status(
            resp.status_code,
            message,
            resp.url,
            error_code=error_code,
            body=resp.text or "",
            retry_after=resp.headers.get("Retry-After"),
        )


class RestResource:
    """Root of a family of Partner Center endpoints (e.g. ``/v1/customers``)."""

    def __init__(self, client: PartnerCenterClient, root_segments: Sequence[str] = ()):
        self.client = client
        self.root_segments = tuple(require_identifier(seg, "path segment") for seg in root_segments)

    def request(self) -> "RestRequest":
        """Start a request below the resource root."""
        return RestRequest(self.client, list(self.root_segments))

    def request_uri(self, uri: str) -> "RestRequest":
        """Start a request against a link URI returned by the API."""
        return RestRequest(self.client, [], url=self.client.resolve_uri(_require_uri(uri)))


def _require_uri(uri: Any) -> str:
    if not isinstance(uri, str) or not uri.strip():
        raise ValueError("Link URI must be a non-empty string")
    return uri.strip()


class RestRequest:
    """Fluent builder for a single Partner Center call.

    Usage:
        resource.request().path_segment(customer_id, "orders", order_id).get(Order)
    """

    def __init__(self, client: PartnerCenterClient, segments: List[str], url: Optional[str] = None):
        self.client = client
        self._segments = segments
        self._url = url
        self._params: Dict[str, Any] = {}
        self._headers: Dict[str, str] = {}

    def path_segment(self, *segments: str) -> "RestRequest":
        """Append path segments; each must be a non-empty string."""
        for segment in segments:
            self._segments.append(require_identifier(segment, "path segment"))
        return self

    def query_param(self, name: str, value: Any) -> "RestRequest":
        """Add a query parameter (``None`` values are skipped)."""
        if value is not None:
            self._params[name] = value
        return self

    def header(self, name: str, value: str) -> "RestRequest":
        self._headers[name] = value
        return self

    @property
    def url(self) -> str:
        if self._url is None:
            return self.client.build_url(*self._segments)
        if self._segments:
            tail = "/".join(quote(seg, safe="") for seg in self._segments)
            return f"{self._url.rstrip('/')}/{tail}"
        return self._url

    def get(self, response_type: Any = None) -> ApiResponse:
        return self.execute("GET", response_type=response_type)

    def post(self, body: Any = None, response_type: Any = None) -> ApiResponse:
        return self.execute("POST", body=body, response_type=response_type)

    def patch(self, body: Any = None, response_type: Any = None) -> ApiResponse:
        return self.execute("PATCH", body=body, response_type=response_type)

    def put(self, body: Any = None, response_type: Any = None) -> ApiResponse:
        return self.execute("PUT", body=body, response_type=response_type)

    def delete(self) -> ApiResponse:
        return self.execute("DELETE")

    def execute(self, method: str, body: Any = None, response_type: Any = None) -> ApiResponse:
        """Send the request and deserialize the response body.

        Args:
            method: HTTP verb
            body: DTO or plain data serialized as JSON
            response_type: DTO type for the body (raw JSON when None)

        Returns:
            ApiResponse with status, headers and deserialized body
        """
        payload = PayloadTransformer.to_payload(body) if body is not None else None
        resp = self.client.request(
            method,
            self.url,
            json=payload,
            params=self._params or None,
            headers=self._headers or None,
        )
        return ApiResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=_decode_body(resp, response_type),
        )


def _decode_body(resp: requests.Response, response_type: Any) -> Any:
    if resp.status_code == 204 or not resp.content:
        return None
    data = resp.json()
    if response_type is None:
        return data
    return PayloadTransformer.from_payload(response_type, data)

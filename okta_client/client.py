"""Low-level HTTP client for the Okta management API.

Builds request descriptors, delegates authorization to an ``Authorizer`` and
executes each request exactly once. No retries are performed.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional
from urllib.parse import urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from .authorizers import Authorizer, authorizer_from_settings
from .config.settings import DEFAULT_TIMEOUT as REQUEST_TIMEOUT
from .config.settings import DEFAULT_USER_AGENT as USER_AGENT
from .context import Context, ensure_context
from .exceptions import APIStatusError, DecodeError, InvalidRequestError, TransportError
from .request import Request

logger = logging.getLogger(__name__)


@dataclass
class Response:
    """Response metadata and decoded body of one API call."""
    status_code: int
    headers: CaseInsensitiveDict
    body: bytes = b""
    url: str = ""
    data: Any = None

    def header_values(self, name: str) -> List[str]:
        return list(self.headers.get(name, []))


class OktaClient:
    """HTTP client for the Okta API.

    Features:
    - Per-request authorization through a pluggable ``Authorizer``
    - Typed errors for transport, status and decoding failures
    - Context-aware timeouts

    Usage:
        client = OktaClient("https://example.okta.com", APITokenAuthorizer("00a..."))
        req = client.new_request("GET", "/api/v1/users/me")
        client.add_authorization(ctx, req)
        resp = client.do(ctx, req, User.from_dict)
    """

    def __init__(
        self,
        base_url: str,
        authorizer: Authorizer,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        user_agent: str = USER_AGENT,
    ):
        """Initialize Okta client.

        Args:
            base_url: Okta org URL (e.g. https://example.okta.com)
            authorizer: Attaches credentials to every request
            session: requests session to use (a new one is created by default)
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header value
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.authorizer = authorizer
        self.session = session or requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent

    @classmethod
    def from_settings(cls, config, session: Optional[requests.Session] = None) -> "OktaClient":
        """Build a client and its authorizer from an ``OktaConfig``."""
        return cls(
            config.org_url,
            authorizer_from_settings(config),
            session=session,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )

    def __enter__(self) -> "OktaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def new_request(self, method: str, path: str, body: Any = None) -> Request:
        """Build a request descriptor.

        Args:
            method: HTTP method
            path: API path relative to the org URL, or an absolute URL (pagination cursors)
            body: JSON-serializable payload

        Raises:
            InvalidRequestError: If the path is empty or the body cannot be encoded
        """
        if not path:
            raise InvalidRequestError("request path is empty")

        headers = {"Accept": "application/json", "User-Agent": self.user_agent}
        data = None
        if body is not None:
            try:
                data = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise InvalidRequestError(f"cannot encode request body: {exc}") from exc
            headers["Content-Type"] = "application/json"

        return Request(method.upper(), self.resolve_url(path), data, headers)

    def add_authorization(self, ctx: Optional[Context], request: Request) -> None:
        """Attach credentials to ``request``.

        Raises:
            ContextCancelledError: If ``ctx`` is already done
            AuthorizationError: If the authorizer cannot produce a credential
        """
        ctx = ensure_context(ctx)
        ctx.check()
        self.authorizer.authorize(ctx, request)

    def do(
        self,
        ctx: Optional[Context],
        request: Request,
        decoder: Optional[Callable[[Any], Any]] = None,
    ) -> Response:
        """Execute an authorized request once and decode its body.

        Args:
            ctx: Cancellation context
            request: Request built by ``new_request`` and authorized
            decoder: Callable turning the JSON payload into a typed value
                (None skips decoding). An empty body is passed as None.

        Returns:
            Response with ``data`` set to the decoded value

        Raises:
            ContextCancelledError: If the context is already done
            TransportError: On network-level failure
            APIStatusError: On non-2xx status
            DecodeError: If the body is not JSON or does not match the decoder's shape
        """
        ctx = ensure_context(ctx)
        ctx.check()

        logger.debug(f"{request.method} {request.url}")
        try:
            resp = self.session.request(
                request.method,
                request.url,
                data=request.body,
                headers=request.headers,
                timeout=self._timeout_for(ctx),
            )
        except requests.RequestException as exc:
            raise TransportError(f"{request.method} {request.url}: {exc}") from exc

        response = Response(
            status_code=resp.status_code,
            headers=CaseInsensitiveDict({name: [value] for name, value in resp.headers.items()}),
            body=resp.content or b"",
            url=request.url,
        )
        self._check_status(request, response)

        if decoder is not None:
            response.data = self._decode(response, decoder)
        return response

    def resolve_url(self, path: str) -> str:
        """Return ``path`` as an absolute URL, resolving relative references against the org URL."""
        if urlsplit(path).scheme:
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _timeout_for(self, ctx: Context) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.timeout
        return max(0.001, min(self.timeout, remaining))

    def _check_status(self, request: Request, response: Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            APIStatusError: If response status is not 2xx
        """
        if 200 <= response.status_code < 300:
            return
        text = response.body.decode("utf-8", errors="replace")
        logger.warning(f"{request.method} {request.url} returned {response.status_code}")
        raise APIStatusError(response.status_code, text, request.url)

    @staticmethod
    def _decode(response: Response, decoder: Callable[[Any], Any]) -> Any:
        payload = None
        if response.body.strip():
            try:
                payload = json.loads(response.body)
            except ValueError as exc:
                raise DecodeError(f"invalid JSON from {response.url}: {exc}", response) from exc
        try:
            return decoder(payload)
        except DecodeError as exc:
            exc.response = response
            raise

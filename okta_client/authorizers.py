"""Authorization attachment for Okta API requests.

Every request, including every page of a paginated listing, goes through
``Authorizer.authorize`` right before it is sent. Authorizers that hold an
access token refresh it themselves; callers never cache credentials.
"""
from __future__ import annotations
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

import requests
from authlib.integrations.base_client import OAuthError
from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2.rfc7523 import PrivateKeyJWT

from .config.settings import DEFAULT_SCOPES
from .context import Context
from .exceptions import AuthorizationError
from .request import Request

logger = logging.getLogger(__name__)


TOKEN_REFRESH_LEEWAY = 10


class Authorizer(ABC):
    """Attaches a credential to a request descriptor."""

    @abstractmethod
    def authorize(self, ctx: Context, request: Request) -> None:
        """Set the Authorization header on ``request``.

        Raises:
            AuthorizationError: If no valid credential can be produced for ``ctx``
        """

    @staticmethod
    def _ensure_active(ctx: Context) -> None:
        if ctx.cancelled:
            raise AuthorizationError("cannot authorize request: context done")


class APITokenAuthorizer(Authorizer):
    """Okta API token (``Authorization: SSWS <token>``)."""

    scheme = "SSWS"

    def __init__(self, token: str):
        self.token = token

    def authorize(self, ctx: Context, request: Request) -> None:
        self._ensure_active(ctx)
        if not self.token:
            raise AuthorizationError(f"{self.scheme} token is empty")
        request.headers["Authorization"] = f"{self.scheme} {self.token}"


class BearerTokenAuthorizer(APITokenAuthorizer):
    """Pre-obtained OAuth 2.0 access token (``Authorization: Bearer <token>``)."""

    scheme = "Bearer"


class ClientCredentialsAuthorizer(Authorizer):
    """OAuth 2.0 client-credentials authorizer with automatic token refresh.

    Supports ``client_secret_basic`` (client_secret) and ``private_key_jwt``
    (private_key, PEM) client authentication, the latter being what Okta
    requires for service applications on the org authorization server.

    Usage:
        authorizer = ClientCredentialsAuthorizer(
            "https://example.okta.com/oauth2/v1/token",
            "0oa...",
            private_key=Path("key.pem").read_text(),
        )
    """

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: Optional[str] = None,
        private_key: Optional[str] = None,
        scopes: Iterable[str] = DEFAULT_SCOPES,
        session: Optional[OAuth2Session] = None,
    ):
        """Initialize the authorizer.

        Args:
            token_url: Authorization server token endpoint
            client_id: OAuth client ID
            client_secret: Client secret (client_secret_basic)
            private_key: PEM private key (private_key_jwt), takes precedence over client_secret
            scopes: Scopes requested for the access token
            session: Pre-built OAuth2Session (mostly for tests)
        """
        if not client_secret and not private_key:
            raise ValueError("client_secret or private_key is required")

        self.token_url = token_url
        self.client_id = client_id
        self.scopes = list(scopes)
        self._session = session or self._create_session(client_secret, private_key)
        self._token: Optional[str] = None
        self._token_expires_at: Optional[float] = None
        self._lock = threading.Lock()

    def _create_session(self, client_secret: Optional[str], private_key: Optional[str]) -> OAuth2Session:
        scope = " ".join(self.scopes)
        if private_key:
            session = OAuth2Session(
                self.client_id,
                private_key,
                scope=scope,
                token_endpoint_auth_method="private_key_jwt",
            )
            session.register_client_auth_method(PrivateKeyJWT(self.token_url))
            return session
        return OAuth2Session(self.client_id, client_secret, scope=scope)

    def authorize(self, ctx: Context, request: Request) -> None:
        self._ensure_active(ctx)
        request.headers["Authorization"] = f"Bearer {self._access_token(ctx)}"

    def _access_token(self, ctx: Context) -> str:
        with self._lock:
            if self._token and self._token_expires_at and time.time() < self._token_expires_at - TOKEN_REFRESH_LEEWAY:
                return self._token
            token = self._fetch_token(ctx)
            self._token = token["access_token"]
            self._token_expires_at = self._expiry_of(token)
            return self._token

    def _fetch_token(self, ctx: Context) -> Dict[str, Any]:
        """Request a new access token from the token endpoint."""
        kwargs: Dict[str, Any] = {"grant_type": "client_credentials"}
        remaining = ctx.remaining()
        if remaining is not None:
            kwargs["timeout"] = remaining
        try:
            token = self._session.fetch_token(self.token_url, **kwargs)
        except (OAuthError, requests.RequestException, ValueError) as exc:
            logger.warning(f"Token request to {self.token_url} failed: {exc}")
            raise AuthorizationError(f"failed to obtain access token: {exc}") from exc

        if not token or not token.get("access_token"):
            raise AuthorizationError("token endpoint returned no access_token")
        logger.info(f"Obtained access token for client {self.client_id} (scopes: {' '.join(self.scopes)})")
        return token

    @staticmethod
    def _expiry_of(token: Dict[str, Any]) -> float:
        if token.get("expires_at"):
            return float(token["expires_at"])
        if token.get("expires_in"):
            return time.time() + float(token["expires_in"])
        # Conservative expiry when the server does not say
        return time.time() + 60


def authorizer_from_settings(config) -> Authorizer:
    """Build the authorizer selected by ``config.auth_mode``.

    Raises:
        ValueError: If the mode is unknown or its credentials are missing
    """
    mode = config.auth_mode
    if mode == "ssws":
        if not config.api_token:
            raise ValueError("OKTA_API_TOKEN is required for auth mode 'ssws'")
        return APITokenAuthorizer(config.api_token)
    if mode == "bearer":
        if not config.access_token:
            raise ValueError("OKTA_ACCESS_TOKEN is required for auth mode 'bearer'")
        return BearerTokenAuthorizer(config.access_token)
    if mode == "client_credentials":
        if not config.client_id:
            raise ValueError("OKTA_CLIENT_ID is required for auth mode 'client_credentials'")
        return ClientCredentialsAuthorizer(
            config.token_url_resolved,
            config.client_id,
            client_secret=config.client_secret or None,
            private_key=config.private_key or None,
            scopes=config.scope_list,
        )
    raise ValueError(f"Unknown OKTA_AUTH_MODE '{mode}' (expected ssws, bearer or client_credentials)")

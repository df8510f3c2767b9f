"""Okta user operations."""
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from .client import OktaClient
from .context import Context, ensure_context
from .exceptions import AuthenticationFailedError
from .models import GetUsersOptions, User, _AuthenticationResult, _UsersQuery, decode_users
from .pagination import paginate
from .request import add_options

logger = logging.getLogger(__name__)

AUTHN_SUCCESS = "SUCCESS"


class UserService:
    """Service for reading, authenticating and updating Okta users."""

    def __init__(self, client: OktaClient):
        """Initialize user service.

        Args:
            client: Okta client shared by all services
        """
        self.client = client

    def get_user(self, user_id: str, ctx: Optional[Context] = None) -> User:
        """Return a user by ID (or login).

        Args:
            user_id: Okta user ID or login
            ctx: Cancellation context
        """
        ctx = ensure_context(ctx)
        req = self.client.new_request("GET", f"/api/v1/users/{user_id}")
        self.client.add_authorization(ctx, req)
        return self.client.do(ctx, req, User.from_dict).data

    def get_users(self, options: Optional[GetUsersOptions] = None, ctx: Optional[Context] = None) -> List[User]:
        """Return all users, following the pagination cursor.

        Args:
            options: Page size, page budget and search/filter expressions
            ctx: Cancellation context

        Returns:
            Users of every fetched page, in server order
        """
        options = options or GetUsersOptions()
        query = _UsersQuery(limit=options.page_size, search=options.search, filter=options.filter)
        path = add_options("/api/v1/users", query)

        req = self.client.new_request("GET", path)
        return paginate(self.client, ctx, req, decode_users, max_pages=options.pages)

    def authenticate(
        self,
        username: str,
        password: str,
        relay_state: str = "",
        ctx: Optional[Context] = None,
    ) -> User:
        """Authenticate a user with username and password.

        relay_state can be used to add additional information.

        Returns:
            The authenticated user, fetched by the ID Okta returned

        Raises:
            AuthenticationFailedError: If Okta does not answer with status SUCCESS
        """
        ctx = ensure_context(ctx)
        body = {
            "username": username,
            "password": password,
            "relayState": relay_state,
            "options": {
                "warnBeforePasswordExpired": False,
                "multiOptionalFactorEnroll": False,
            },
        }
        req = self.client.new_request("POST", "/api/v1/authn", body)
        self.client.add_authorization(ctx, req)
        result: _AuthenticationResult = self.client.do(ctx, req, _AuthenticationResult.from_dict).data

        if result.status != AUTHN_SUCCESS:
            logger.warning(f"Authentication for '{username}' returned status {result.status or '<empty>'}")
            raise AuthenticationFailedError(result.status)

        return self.get_user(result.user_id, ctx)

    def update_custom_attributes(
        self,
        user_id: str,
        attributes: Dict[str, str],
        ctx: Optional[Context] = None,
    ) -> None:
        """Partially update a user's profile with the given attributes.

        Args:
            user_id: Okta user ID
            attributes: Profile attribute name to value
            ctx: Cancellation context
        """
        ctx = ensure_context(ctx)
        req = self.client.new_request("POST", f"/api/v1/users/{user_id}", {"profile": attributes})
        self.client.add_authorization(ctx, req)
        self.client.do(ctx, req)
        logger.debug(f"Updated profile attributes {sorted(attributes)} of user {user_id}")

"""Okta management API client library.

Architecture:
- client.py: HTTP client, request building and response decoding
- authorizers.py: SSWS API token, bearer token and OAuth client-credentials authorization
- pagination.py: Link-header cursor pagination with a page budget
- context.py: Cooperative cancellation and deadlines
- users.py: User lookup, listing, authentication and profile updates
- groups.py: Group listing and memberships
- models.py: Value objects and wire shapes
- exceptions.py: Typed exceptions for error handling

Usage:
    from okta_client import APITokenAuthorizer, GetUsersOptions, GroupService, OktaClient, UserService

    client = OktaClient("https://example.okta.com", APITokenAuthorizer("00a..."))
    users = UserService(client).get_users(GetUsersOptions(per_page=100, pages=2))
    groups = GroupService(client).get_user_groups(users[0].id)

    # From environment / Docker secrets
    from okta_client.config import load_settings
    client = OktaClient.from_settings(load_settings())
"""
from .authorizers import (
    Authorizer,
    APITokenAuthorizer,
    BearerTokenAuthorizer,
    ClientCredentialsAuthorizer,
    authorizer_from_settings,
)
from .client import OktaClient, Response, REQUEST_TIMEOUT
from .context import Context
from .exceptions import (
    OktaError,
    InvalidRequestError,
    InvalidOptionsError,
    AuthorizationError,
    TransportError,
    DecodeError,
    APIStatusError,
    AuthenticationFailedError,
    ContextCancelledError,
)
from .groups import GroupService
from .models import GetUsersOptions, Group, User
from .pagination import next_page_url, paginate
from .request import Request, add_options
from .users import UserService

__all__ = [
    # Client
    "OktaClient",
    "Response",
    "Request",
    "Context",
    "REQUEST_TIMEOUT",
    "add_options",
    "paginate",
    "next_page_url",

    # Authorizers
    "Authorizer",
    "APITokenAuthorizer",
    "BearerTokenAuthorizer",
    "ClientCredentialsAuthorizer",
    "authorizer_from_settings",

    # Exceptions
    "OktaError",
    "InvalidRequestError",
    "InvalidOptionsError",
    "AuthorizationError",
    "TransportError",
    "DecodeError",
    "APIStatusError",
    "AuthenticationFailedError",
    "ContextCancelledError",

    # Services
    "UserService",
    "GroupService",

    # Models
    "User",
    "Group",
    "GetUsersOptions",
]

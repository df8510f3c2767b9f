"""Okta group operations."""
from __future__ import annotations
from typing import List, Optional

from .client import OktaClient
from .context import Context
from .models import MAX_PAGE_SIZE, Group, User, _GroupsQuery, _UsersQuery, decode_group_records, decode_users
from .pagination import paginate
from .request import add_options


class GroupService:
    """Service for reading Okta groups and memberships.

    Only native Okta groups (type OKTA_GROUP) are returned; application
    groups and built-in groups are skipped.
    """

    def __init__(self, client: OktaClient):
        """Initialize group service.

        Args:
            client: Okta client shared by all services
        """
        self.client = client

    def get_groups(self, ctx: Optional[Context] = None) -> List[Group]:
        """Return all Okta groups."""
        return self._list_groups("/api/v1/groups", ctx)

    def get_group_membership(self, group_id: str, ctx: Optional[Context] = None) -> List[User]:
        """Return all users of a group.

        Args:
            group_id: Okta group ID
            ctx: Cancellation context
        """
        path = add_options(f"/api/v1/groups/{group_id}/users", _UsersQuery(limit=MAX_PAGE_SIZE))
        req = self.client.new_request("GET", path)
        return paginate(self.client, ctx, req, decode_users)

    def get_user_groups(self, user_id: str, ctx: Optional[Context] = None) -> List[Group]:
        """Return the Okta groups a user belongs to.

        Args:
            user_id: Okta user ID
            ctx: Cancellation context
        """
        return self._list_groups(f"/api/v1/users/{user_id}/groups", ctx)

    def _list_groups(self, path: str, ctx: Optional[Context]) -> List[Group]:
        path = add_options(path, _GroupsQuery(limit=MAX_PAGE_SIZE))
        req = self.client.new_request("GET", path)
        return paginate(self.client, ctx, req, decode_group_records)

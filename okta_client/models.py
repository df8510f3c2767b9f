"""Okta value objects and the wire shapes they are decoded from.

Listing endpoints decode each record into a private wire shape first and then
project it onto the small public value object callers receive.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .exceptions import DecodeError
from .request import query_field

STANDARD_GROUP_TYPE = "OKTA_GROUP"
MAX_PAGE_SIZE = 200


def _expect_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"{what}: expected JSON object, got {type(data).__name__}")
    return data


def _string(data: Mapping[str, Any], *keys: str, what: str) -> str:
    """Return the first present key as a string ("" when absent or null)."""
    for key in keys:
        if key not in data or data[key] is None:
            continue
        value = data[key]
        if not isinstance(value, str):
            raise DecodeError(f"{what}.{key}: expected string, got {type(value).__name__}")
        return value
    return ""


def _string_map(data: Any, what: str) -> Dict[str, str]:
    if data is None:
        return {}
    mapping = _expect_mapping(data, what)
    result = {}
    for key, value in mapping.items():
        if value is None:
            result[key] = ""
        elif isinstance(value, str):
            result[key] = value
        else:
            raise DecodeError(f"{what}.{key}: expected string, got {type(value).__name__}")
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Public value objects
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class User:
    """Okta user.

    Timestamps are kept as the date-time strings the API returns. ``profile``
    may be edited by callers before passing it to
    ``UserService.update_custom_attributes``.
    """
    id: str
    status: str = ""
    last_login: str = ""
    created: str = ""
    last_updated: str = ""
    password_changed: str = ""
    profile: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        """Decode a user JSON object.

        Raises:
            DecodeError: If the payload does not have the user shape
        """
        data = _expect_mapping(data, "user")
        return cls(
            id=_string(data, "id", what="user"),
            status=_string(data, "status", what="user"),
            last_login=_string(data, "last_login", "lastLogin", what="user"),
            created=_string(data, "created", what="user"),
            last_updated=_string(data, "last_updated", "lastUpdated", what="user"),
            password_changed=_string(data, "password_changed", "passwordChanged", what="user"),
            profile=_string_map(data.get("profile"), "user.profile"),
        )


@dataclass(frozen=True)
class Group:
    """Okta group as exposed to callers."""
    id: str
    name: str


@dataclass
class GetUsersOptions:
    """Options for ``UserService.get_users``.

    Attributes:
        per_page: Max number of results in a page, Okta allows at most 200.
            Values below 1 or above 200 are reset to 200.
        pages: Max number of pages to retrieve. 0 pages until there are no more results.
        search: Okta search expression (``search`` query parameter)
        filter: Okta filter expression (``filter`` query parameter)
    """
    per_page: int = MAX_PAGE_SIZE
    pages: int = 0
    search: str = ""
    filter: str = ""

    @property
    def page_size(self) -> int:
        if self.per_page < 1 or self.per_page > MAX_PAGE_SIZE:
            return MAX_PAGE_SIZE
        return self.per_page


# ─────────────────────────────────────────────────────────────────────────────
# Wire shapes (not exported)
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class _UsersQuery:
    limit: int = query_field("limit")
    search: str = query_field("search", default="")
    filter: str = query_field("filter", default="")


@dataclass
class _GroupsQuery:
    limit: int = query_field("limit")


@dataclass
class _GroupRecord:
    id: str
    type: str
    name: str
    description: str = ""
    created: str = ""
    last_updated: str = ""
    last_membership_updated: str = ""
    object_class: List[str] = field(default_factory=list)
    links: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "_GroupRecord":
        data = _expect_mapping(data, "group")
        profile = _expect_mapping(data.get("profile") or {}, "group.profile")
        object_class = data.get("objectClass") or []
        if not isinstance(object_class, list):
            raise DecodeError("group.objectClass: expected array")
        links = _expect_mapping(data.get("_links") or {}, "group._links")
        return cls(
            id=_string(data, "id", what="group"),
            type=_string(data, "type", what="group"),
            name=_string(profile, "name", what="group.profile"),
            description=_string(profile, "description", what="group.profile"),
            created=_string(data, "created", what="group"),
            last_updated=_string(data, "lastUpdated", what="group"),
            last_membership_updated=_string(data, "lastMembershipUpdated", what="group"),
            object_class=list(object_class),
            links=dict(links),
        )

    @property
    def is_standard(self) -> bool:
        return self.type == STANDARD_GROUP_TYPE

    def to_group(self) -> Group:
        return Group(id=self.id, name=self.name)


@dataclass
class _AuthenticationResult:
    status: str
    user_id: str
    session_token: str = ""
    relay_state: str = ""
    expires_at: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "_AuthenticationResult":
        data = _expect_mapping(data, "authn")
        embedded = _expect_mapping(data.get("_embedded") or {}, "authn._embedded")
        user = _expect_mapping(embedded.get("user") or {}, "authn._embedded.user")
        return cls(
            status=_string(data, "status", what="authn"),
            user_id=_string(user, "id", what="authn._embedded.user"),
            session_token=_string(data, "sessionToken", what="authn"),
            relay_state=_string(data, "relayState", what="authn"),
            expires_at=_string(data, "expiresAt", what="authn"),
        )


def decode_group_records(data: Any) -> List[Group]:
    """Decode group records and keep only standard Okta groups, in order."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"groups: expected JSON array, got {type(data).__name__}")
    records = [_GroupRecord.from_dict(item) for item in data]
    return [record.to_group() for record in records if record.is_standard]


def decode_users(data: Any) -> List[User]:
    """Decode a JSON array of users."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"users: expected JSON array, got {type(data).__name__}")
    return [User.from_dict(item) for item in data]

"""Request descriptors and query-option serialization."""
from __future__ import annotations
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .exceptions import InvalidOptionsError

_SCALARS = (str, int, float, bool)


@dataclass
class Request:
    """HTTP request descriptor passed through authorization and transport."""
    method: str
    url: str
    body: Optional[bytes] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def copy(self, url: Optional[str] = None) -> "Request":
        """Return an unauthorized copy, optionally retargeted at ``url``."""
        return dataclasses.replace(self, url=url or self.url, headers=dict(self.headers))


def query_field(name: str, default: Any = 0) -> Any:
    """Declare a dataclass field serialized as the ``name`` query parameter."""
    return field(default=default, metadata={"query": name})


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple)) and len(value) == 0:
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def _encode_value(name: str, value: Any) -> List[str]:
    if isinstance(value, bool):
        return ["true" if value else "false"]
    if isinstance(value, _SCALARS):
        return [str(value)]
    if isinstance(value, (list, tuple)):
        encoded = []
        for item in value:
            if isinstance(item, bool) or not isinstance(item, _SCALARS):
                raise InvalidOptionsError(f"Query option '{name}' contains unsupported item {item!r}")
            encoded.append(str(item))
        return encoded
    raise InvalidOptionsError(f"Query option '{name}' has unsupported type {type(value).__name__}")


def options_to_params(options: Any) -> List[Tuple[str, str]]:
    """Return the (name, value) query pairs of a dataclass options value.

    Fields without ``query`` metadata are ignored; fields at their zero value
    are omitted.

    Raises:
        InvalidOptionsError: If options is not a dataclass instance or a value is not serializable
    """
    if not dataclasses.is_dataclass(options) or isinstance(options, type):
        raise InvalidOptionsError(f"Query options must be a dataclass instance, got {type(options).__name__}")

    params: List[Tuple[str, str]] = []
    for f in dataclasses.fields(options):
        name = f.metadata.get("query")
        if not name:
            continue
        value = getattr(options, f.name)
        if _is_empty(value):
            continue
        params.extend((name, item) for item in _encode_value(name, value))
    return params


def add_options(path: str, options: Any) -> str:
    """Append the query parameters of ``options`` to ``path``.

    Args:
        path: Base path, may already carry a query string
        options: Dataclass options value, or None

    Returns:
        Path with URL-encoded query parameters

    Raises:
        InvalidOptionsError: If the options cannot be serialized
    """
    if options is None:
        return path

    params = options_to_params(options)
    if not params:
        return path

    parts = urlsplit(path)
    query = parse_qsl(parts.query, keep_blank_values=True) + params
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))

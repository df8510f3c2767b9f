"""Link-header cursor pagination.

Okta returns the URL of the next page in the ``Link`` response header, see
https://developer.okta.com/docs/reference/core-okta-api/#link-header.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Optional

from requests.utils import parse_header_links

from .context import Context, ensure_context
from .request import Request

if TYPE_CHECKING:
    from .client import OktaClient

logger = logging.getLogger(__name__)


def next_page_url(headers: Mapping[str, List[str]]) -> str:
    """Return the ``rel="next"`` URL of the Link header, or "" when there is none."""
    values = headers.get("Link") or []
    if isinstance(values, str):
        values = [values]
    raw = ",".join(values)
    if not raw.strip():
        return ""

    next_url = ""
    for link in parse_header_links(raw):
        rels = (link.get("rel") or "").split()
        if "next" in rels and link.get("url"):
            next_url = link["url"]
    return next_url


def paginate(
    client: "OktaClient",
    ctx: Optional[Context],
    request: Request,
    decoder: Callable[[Any], List[Any]],
    max_pages: int = 0,
) -> List[Any]:
    """Fetch pages until the cursor runs out or ``max_pages`` pages were read.

    Args:
        client: Client used to authorize and execute each page request
        ctx: Cancellation context, checked before every page
        request: Unauthorized request for the first page (page size already applied)
        decoder: Turns one page's JSON payload into a list of items
        max_pages: Page budget, 0 (or negative) means no limit

    Returns:
        Items of all fetched pages, in page order then in-page order

    Raises:
        ContextCancelledError: If the context is done before a page is fetched;
            items already fetched are discarded
    """
    ctx = ensure_context(ctx)
    items: List[Any] = []
    pages = 0
    url = request.url

    while True:
        ctx.check()

        page_request = request.copy(client.resolve_url(url))
        client.add_authorization(ctx, page_request)
        resp = client.do(ctx, page_request, decoder)

        batch = resp.data or []
        items.extend(batch)
        pages += 1
        logger.debug(f"Fetched page {pages} of {request.url} ({len(batch)} items)")

        url = next_page_url(resp.headers)
        # Stop when there are no more results or the page budget is spent
        if not url or (max_pages > 0 and pages >= max_pages):
            break

    return items

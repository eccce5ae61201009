"""Search Turbonomic for pod groups."""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from .client import TurboClient, TurboError
from .pagination import paginate, parse_next_cursor, parse_total

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/v3/search"


def exclude_groups(excluded: Sequence[str], group: Dict[str, Any]) -> bool:
    """Return True if the group should be kept.

    A group is dropped when its display name contains any excluded substring.
    """
    display_name = group.get("displayName") or ""
    return not any(name in display_name for name in excluded)


async def search(
    client: TurboClient,
    params: Dict[str, Any],
    filter_fn: Optional[Callable[[Dict[str, Any]], bool]] = None,
) -> List[Dict[str, Any]]:
    """Search for entities with the Turbonomic API

    All pages are retrieved first; filter_fn is then applied once to the
    merged results.

    Args:
        client: Authenticated Turbonomic client
        params: Query parameters for the search
        filter_fn: Keep only results for which this returns True (optional)

    Raises:
        TurboError: If any page cannot be retrieved
    """
    async def fetch_page(cursor: int) -> List[Dict[str, Any]]:
        page = await client.get(SEARCH_PATH, params={**params, "cursor": cursor})
        return page.json()

    try:
        response = await client.get(SEARCH_PATH, params=params)
        total = parse_total(response.headers)
        logger.debug(f"Total search record count: {total}")
        results = await paginate(fetch_page, response.json(), total, parse_next_cursor(response.headers))
    except (httpx.HTTPError, ValueError) as e:
        raise TurboError(f"Error retrieving search results from Turbonomic: {e}") from e

    if filter_fn is not None:
        results = [r for r in results if filter_fn(r)]
        logger.debug(f"Received {len(results)} filtered search results")
    else:
        logger.debug(f"Received {len(results)} search results")
    return results

"""Retrieve pending actions from the Turbonomic "Market" market."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from .client import TurboClient, TurboError
from .pagination import paginate, parse_next_cursor, parse_total

logger = logging.getLogger(__name__)

ACTIONS_PATH = "/api/v3/markets/Market/actions"

# By default only actions related to container specs are requested
DEFAULT_ACTIONS_BODY: Dict[str, Any] = {"relatedEntityTypes": ["ContainerSpec"]}


async def get_actions(client: TurboClient, body: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """Get all actions for the Market market

    Args:
        client: Authenticated Turbonomic client
        body: Action filter sent as the request body

    Returns:
        Every action across all pages, unfiltered and unordered

    Raises:
        TurboError: If any page cannot be retrieved
    """
    if body is None:
        body = DEFAULT_ACTIONS_BODY

    async def fetch_page(cursor: int) -> List[Dict[str, Any]]:
        page = await client.post(ACTIONS_PATH, json=body, params={"cursor": cursor})
        return page.json()

    try:
        response = await client.post(ACTIONS_PATH, json=body)
        total = parse_total(response.headers)
        logger.debug(f"Total action record count: {total}")
        actions = await paginate(fetch_page, response.json(), total, parse_next_cursor(response.headers))
    except (httpx.HTTPError, ValueError) as e:
        raise TurboError(f"Error retrieving actions from Turbonomic: {e}") from e

    logger.debug(f"Actions received: {len(actions)}")
    return actions

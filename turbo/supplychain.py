"""Resolve the containers of a pod group through the supply chain endpoint."""
import logging
from typing import Any, Dict, List, Sequence

import httpx

from normalize.models import Container
from .client import TurboClient, TurboError

logger = logging.getLogger(__name__)

SUPPLYCHAIN_PATH = "/api/v3/supplychains"
CONTAINER_ENTITY_TYPE = "ContainerSpec"


def parse_containers(supplychain: Dict[str, Any]) -> List[Container]:
    """Extract ContainerSpec instances from a supply chain response.

    A response without seMap.ContainerSpec.instances means "no containers"
    and yields an empty list instead of an error.
    """
    if not isinstance(supplychain, dict):
        return []
    se_map = supplychain.get("seMap")
    if not isinstance(se_map, dict):
        return []
    entity = se_map.get(CONTAINER_ENTITY_TYPE)
    if not isinstance(entity, dict):
        return []
    instances = entity.get("instances")
    if not isinstance(instances, dict):
        return []

    return [
        Container(uuid=key, display_name=value.get("displayName") if isinstance(value, dict) else None)
        for key, value in instances.items()
    ]


async def get_containers(client: TurboClient, uuids: Sequence[str]) -> List[Container]:
    """Get the containers for a pod group

    Args:
        client: Authenticated Turbonomic client
        uuids: Member UUIDs of the pod group

    Raises:
        TurboError: If the supply chain request fails
    """
    if not uuids:
        return []

    params = [
        ("types", CONTAINER_ENTITY_TYPE),
        ("detail_type", "entity"),
        ("health", "false"),
    ]
    params.extend(("uuids", uuid) for uuid in uuids)

    try:
        response = await client.get(SUPPLYCHAIN_PATH, params=params)
        supplychain = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise TurboError(f"Error getting containers from pod from Turbonomic: {e}") from e

    containers = parse_containers(supplychain)
    if not containers:
        logger.debug(f"No {CONTAINER_ENTITY_TYPE} instances found for {len(uuids)} member(s)")
    return containers

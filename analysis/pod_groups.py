"""
Pod group expansion - translate Turbonomic groups to Kubernetes terms
and resolve their member containers
"""
import logging
from typing import Any, Dict, List, Optional

from config import GROUP_REQUEST_LIMIT
from normalize.display_name import DisplayNameError, parse_pod_group_name
from normalize.models import PodGroup
from turbo.client import TurboClient
from turbo.pool import bounded_gather
from turbo.supplychain import get_containers

logger = logging.getLogger(__name__)


async def expand_group(client: TurboClient, group: Dict[str, Any]) -> PodGroup:
    """Convert one pod group, fetching its containers along the way

    Raises:
        DisplayNameError: If the group display name cannot be decoded
        TurboError: If the container lookup fails
    """
    resource_type, resource_namespace, resource_name = parse_pod_group_name(group.get('displayName'))
    cluster = (group.get('source') or {}).get('displayName')

    containers = await get_containers(client, group.get('memberUuidList') or [])
    return PodGroup(
        group_uuid=group.get('uuid'),
        resource_type=resource_type,
        resource_name=resource_name,
        resource_namespace=resource_namespace,
        cluster=cluster,
        container_members=containers,
    )


async def expand_groups(
    client: TurboClient,
    groups: List[Dict[str, Any]],
    limit: int = GROUP_REQUEST_LIMIT,
) -> List[PodGroup]:
    """Expand every pod group with at most `limit` lookups in flight

    Groups with undecodable display names are skipped with a warning.
    """
    async def expand_or_skip(group: Dict[str, Any]) -> Optional[PodGroup]:
        try:
            return await expand_group(client, group)
        except DisplayNameError as e:
            logger.warning(f"Skipping pod group {group.get('uuid')}: {e}")
            return None

    expanded = await bounded_gather(limit, groups, expand_or_skip)
    pod_groups = [g for g in expanded if g is not None]
    logger.info(f"Expanded {len(pod_groups)} of {len(groups)} pod group(s)")
    return pod_groups

"""Orchestrator: login -> actions + pod groups -> expand -> correlate -> atomic write.
Output is written once, only after the whole pipeline succeeded.
"""
import asyncio
import logging
from functools import partial
import json
import os
import tempfile
from typing import List, Dict, Any, Optional

import httpx

from config import setup_logging, load_settings, ConfigValidationError, Settings
from turbo.client import TurboClient, TurboError, login, open_http_client
from turbo.actions import get_actions
from turbo.search import search, exclude_groups
from turbo.pool import gather_or_cancel
from analysis.pod_groups import expand_groups
from analysis.correlation import correlate_all

logger = logging.getLogger(__name__)


def _atomic_write(path: str, data: str) -> None:
    dirp = os.path.dirname(path) or '.'
    fd, tmp = tempfile.mkstemp(prefix='.tmp_container_actions_', dir=dirp)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(data)
        # Atomic replace
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)


async def get_containers_and_actions(
    settings: Settings,
    http: Optional[httpx.AsyncClient] = None,
) -> List[Dict[str, Any]]:
    """Get all pod groups with pending container actions from Turbonomic

    Args:
        settings: Validated run settings
        http: HTTP client to use (a new one is opened and closed when omitted)

    Returns:
        Serialized correlated records, one per pod group with actions

    Raises:
        TurboError: If any request fails
    """
    if http is None:
        async with open_http_client(settings.timeout_seconds, settings.verify_ssl) as own_http:
            return await get_containers_and_actions(settings, own_http)

    session = await login(http, settings.turbo_url, settings.username, settings.password)
    client = TurboClient(http, session)
    logger.info(f"Authenticated to {settings.turbo_url}")

    actions, groups = await gather_or_cancel(
        get_actions(client),
        search(client, settings.pod_search_query, partial(exclude_groups, settings.excluded_groups)),
    )
    logger.info(f"Retrieved {len(actions)} action(s) and {len(groups)} pod group(s)")

    pod_groups = await expand_groups(client, groups, limit=settings.group_request_limit)
    records = correlate_all(pod_groups, actions)
    logger.info(f"{len(records)} pod group(s) have pending actions")
    return [r.to_dict() for r in records]


def run(settings: Settings) -> str:
    """Run the pipeline and write the output file

    Returns:
        Path of the written file
    """
    results = asyncio.run(get_containers_and_actions(settings))
    _atomic_write(settings.output_filename, json.dumps(results, indent=2, ensure_ascii=False))
    logger.info(f"Wrote {len(results)} record(s) to {settings.output_filename}")
    return settings.output_filename


def main() -> int:
    # Setup logging first
    setup_logging()

    # Validate configuration before any request is made
    try:
        settings = load_settings()
    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        run(settings)
    except TurboError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Failed to write {settings.output_filename}: {e}")
        return 1

    return 0


if __name__ == '__main__':
    raise SystemExit(main())

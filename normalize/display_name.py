"""Decode pod group display names of the form `<Type>/<namespace>/<name> Pods`."""
from typing import Tuple

POD_GROUP_SUFFIX = ' Pods'
SEPARATOR = '/'


class DisplayNameError(ValueError):
    """Raised when a pod group display name does not have three segments"""
    pass


def parse_pod_group_name(display_name: str) -> Tuple[str, str, str]:
    """Split a pod group display name into (resource_type, namespace, name)

    >>> parse_pod_group_name('Deployment/ns1/app Pods')
    ('Deployment', 'ns1', 'app')

    Raises:
        DisplayNameError: If the name does not decode to exactly three
            non-empty segments
    """
    if not isinstance(display_name, str):
        raise DisplayNameError(f"display name must be a string, got {type(display_name).__name__}")

    name = display_name
    if name.endswith(POD_GROUP_SUFFIX):
        name = name[:-len(POD_GROUP_SUFFIX)]

    parts = name.split(SEPARATOR)
    if len(parts) != 3 or not all(parts):
        raise DisplayNameError(
            f"expected '<type>/<namespace>/<name>{POD_GROUP_SUFFIX}', got '{display_name}'"
        )
    resource_type, resource_namespace, resource_name = parts
    return resource_type, resource_namespace, resource_name

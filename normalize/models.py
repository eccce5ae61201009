"""
Pod and container model built from Turbonomic groups.
Serialized field names match the container-actions.json output.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Container:
    uuid: str
    display_name: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {'uuid': self.uuid, 'displayName': self.display_name}


@dataclass
class PodGroup:
    """A Turbonomic pod group translated to Kubernetes terms"""
    group_uuid: str
    resource_type: str
    resource_name: str
    resource_namespace: str
    cluster: Optional[str]
    container_members: List[Container] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'group_uuid': self.group_uuid,
            'resource_type': self.resource_type,
            'resource_name': self.resource_name,
            'resource_namespace': self.resource_namespace,
            'cluster': self.cluster,
            'container_members': [c.to_dict() for c in self.container_members],
        }


@dataclass(frozen=True)
class ActionDetail:
    """One compound action applied to one container"""
    container_name: Optional[str]
    action_type: Optional[str]
    commodity: Optional[str]
    current_value: Any = None
    resize_to_value: Any = None
    value_units: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'container_name': self.container_name,
            'action_type': self.action_type,
            'commodity': self.commodity,
            'current_value': self.current_value,
            'resizeToValue': self.resize_to_value,
            'valueUnits': self.value_units,
        }


@dataclass
class CorrelatedRecord:
    pod_group: PodGroup
    actions_description: str = ''
    actions: List[ActionDetail] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out = self.pod_group.to_dict()
        out['actionsDescription'] = self.actions_description
        out['actions'] = [a.to_dict() for a in self.actions]
        return out

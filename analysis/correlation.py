"""
Action correlation - join Turbonomic actions to pod groups through
the containers each group contains
"""
from collections import defaultdict
from typing import Any, Dict, List, Optional

from normalize.models import ActionDetail, CorrelatedRecord, PodGroup

ActionIndex = Dict[str, List[Dict[str, Any]]]


def index_actions_by_target(actions: List[Dict[str, Any]]) -> ActionIndex:
    """Group actions by target UUID, keeping their original order"""
    index: ActionIndex = defaultdict(list)
    for action in actions:
        target_uuid = (action.get('target') or {}).get('uuid')
        if target_uuid is not None:
            index[target_uuid].append(action)
    return index


def _describe(action: Dict[str, Any]) -> str:
    risk = action.get('risk') or {}
    return f"{risk.get('subCategory', '')}: {risk.get('description', '')}"


def _action_detail(compound_action: Dict[str, Any]) -> ActionDetail:
    return ActionDetail(
        container_name=(compound_action.get('target') or {}).get('displayName'),
        action_type=compound_action.get('actionType'),
        commodity=(compound_action.get('risk') or {}).get('reasonCommodity'),
        current_value=compound_action.get('current_value'),
        resize_to_value=compound_action.get('resizeToValue'),
        value_units=compound_action.get('valueUnits'),
    )


def correlate_actions(
    pod_group: PodGroup,
    actions: List[Dict[str, Any]],
    index: Optional[ActionIndex] = None,
) -> CorrelatedRecord:
    """Correlate actions with a pod group

    Details follow member order, then compound action order. The
    description is taken from the last matching action that produced a
    detail.

    Args:
        pod_group: Expanded pod group
        actions: List of all available actions
        index: Precomputed index_actions_by_target(actions) (optional)
    """
    if index is None:
        index = index_actions_by_target(actions)

    record = CorrelatedRecord(pod_group=pod_group)
    for container in pod_group.container_members:
        for action in index.get(container.uuid, []):
            for compound_action in action.get('compoundActions') or []:
                record.actions.append(_action_detail(compound_action))
                record.actions_description = _describe(action)
    return record


def correlate_all(pod_groups: List[PodGroup], actions: List[Dict[str, Any]]) -> List[CorrelatedRecord]:
    """Correlate every pod group and drop the ones without actions"""
    index = index_actions_by_target(actions)
    records = [correlate_actions(group, actions, index) for group in pod_groups]
    return [r for r in records if r.actions]

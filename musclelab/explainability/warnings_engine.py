from typing import Any, Dict, List, Optional, Sequence

from musclelab.models.input_model import MotionType
from musclelab.utils.config import WarningRule, load_warning_rules


def build_warnings(
    metrics: Dict[str, Any],
    motion_type: MotionType,
    is_side_view: bool,
    rules: Optional[Sequence[WarningRule]] = None,
) -> List[str]:
    """
    Messages of every rule whose metric crosses its threshold, in rule order.
    Rules naming a metric that is not in the dict are skipped.
    """
    if rules is None:
        rules = load_warning_rules()

    triggered = []
    for rule in rules:
        if rule.motion_types and motion_type not in rule.motion_types:
            continue
        if rule.require_front_view and is_side_view:
            continue

        value = metrics.get(rule.metric)
        if value is None:
            continue
        if rule.triggered(float(value)):
            triggered.append(rule.message)

    return triggered


def stability_warning(messages: Sequence[str]) -> str:
    return " ".join(messages)

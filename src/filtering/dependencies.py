"""Dependency resolution: which fields are visible and enabled.

Everything here is a pure function of the field descriptors and the current
filter values; nothing is cached between calls.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from config.logging_config import get_logger

from .fields import Condition, Dependency, FieldDescriptor
from .values import is_empty_value, is_number, strict_contains, strict_equals

logger = get_logger("dependencies")


@dataclass(frozen=True)
class FieldState:
    """Resolved state of a single field."""

    visible: bool
    enabled: bool

    @property
    def accepts_input(self) -> bool:
        return self.visible and self.enabled


def evaluate_condition(condition: Condition, current: Any, comparison: Any) -> bool:
    """
    Evaluate a dependency condition against the referenced field's value.

    Args:
        condition: Condition to apply.
        current: Current value of the referenced field (None when absent).
        comparison: Value declared on the dependency.

    Returns:
        True if the condition holds.
    """
    if condition is Condition.EQUALS:
        return strict_equals(current, comparison)
    if condition is Condition.NOT_EQUALS:
        return not strict_equals(current, comparison)
    if condition is Condition.CONTAINS:
        # List membership only; text values never "contain" anything
        return isinstance(current, list) and strict_contains(current, comparison)
    if condition is Condition.GREATER_THAN:
        return is_number(current) and is_number(comparison) and current > comparison
    if condition is Condition.LESS_THAN:
        return is_number(current) and is_number(comparison) and current < comparison
    if condition is Condition.EXISTS:
        return not is_empty_value(current)
    return True


def _dependency_holds(dependency: Dependency, values: Mapping[str, Any]) -> bool:
    met = evaluate_condition(
        dependency.condition,
        values.get(dependency.on_field_id),
        dependency.comparison_value,
    )
    return not met if dependency.effect.inverts else met


def compute_field_states(
    fields: Sequence[FieldDescriptor],
    values: Mapping[str, Any],
) -> Dict[str, FieldState]:
    """
    Resolve visibility and enablement for every field.

    show/hide dependencies drive ``visible``; enable/disable dependencies
    drive ``enabled``. Within each group all dependencies must hold.
    Dependencies on fields the module does not declare are ignored.
    """
    known = {f.id for f in fields}
    states: Dict[str, FieldState] = {}

    for field in fields:
        visible = not field.hidden
        enabled = True

        for dependency in field.dependencies:
            if dependency.on_field_id not in known:
                logger.warning(
                    "Field %s depends on undeclared field %s; ignoring dependency",
                    field.id,
                    dependency.on_field_id,
                )
                continue
            holds = _dependency_holds(dependency, values)
            if dependency.effect.controls_visibility:
                visible = visible and holds
            else:
                enabled = enabled and holds

        states[field.id] = FieldState(visible=visible, enabled=enabled)

    return states


def compute_visibility(
    fields: Sequence[FieldDescriptor],
    values: Mapping[str, Any],
) -> Set[str]:
    """
    Compute the ids of fields currently eligible to render and accept input.

    A field is eligible when it is not statically hidden and every one of its
    dependencies holds.
    """
    states = compute_field_states(fields, values)
    return {field_id for field_id, state in states.items() if state.accepts_input}


def ordered_fields(
    fields: Sequence[FieldDescriptor],
    include: Optional[Iterable[str]] = None,
) -> List[FieldDescriptor]:
    """
    Sort fields by ``sort_order``; ties keep declaration order.

    Args:
        fields: Field descriptors in declaration order.
        include: Optional ids to keep (e.g. the result of compute_visibility).
    """
    selected = list(fields)
    if include is not None:
        wanted = set(include)
        selected = [f for f in selected if f.id in wanted]
    return sorted(selected, key=lambda f: f.sort_order)


def partition_by_category(
    fields: Iterable[FieldDescriptor],
) -> Tuple[List[FieldDescriptor], List[FieldDescriptor]]:
    """Split fields into (primary, advanced), preserving order."""
    fields = list(fields)
    primary = [f for f in fields if not f.is_advanced]
    advanced = [f for f in fields if f.is_advanced]
    return primary, advanced

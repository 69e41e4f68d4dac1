"""Helpers for working with filter value sets.

A filter value set is a plain ``dict`` mapping field id to the field's
current value. A key is absent when the filter is inactive.
"""

import copy
from typing import Any, Dict, Iterable, List, Mapping

FilterValueSet = Dict[str, Any]

NO_FILTERS_SUMMARY = "All data (no filters)"


def is_empty_value(value: Any) -> bool:
    """
    Check whether a value represents an inactive filter.

    Lists (and tuples) are empty when they have no items; scalars are empty
    when they are ``None`` or the empty string.
    """
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return value is None or value == ""


def count_active(values: Mapping[str, Any]) -> int:
    """Count the filters in ``values`` that hold a non-empty value."""
    return sum(1 for value in values.values() if not is_empty_value(value))


def copy_values(values: Mapping[str, Any]) -> FilterValueSet:
    """Deep copy a value set so the caller can never alias stored state."""
    return copy.deepcopy(dict(values))


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """
    Type-sensitive equality.

    ``1 == True`` and ``"1" == 1`` are both false here, while ``1 == 1.0``
    holds. Lists and mappings are compared element by element.
    """
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(
            strict_equals(left[k], right[k]) for k in left
        )
    if type(left) is not type(right):
        return False
    return left == right


def strict_contains(items: Iterable[Any], value: Any) -> bool:
    """Membership test using :func:`strict_equals`."""
    return any(strict_equals(item, value) for item in items)


def _format_value(field: Any, value: Any) -> str:
    labels = {}
    for option in getattr(field, "options", ()) or ():
        labels[repr(option.value)] = option.label

    def label_for(item: Any) -> str:
        return labels.get(repr(item), str(item))

    if isinstance(value, (list, tuple)):
        if getattr(field, "type", None) is not None and field.type.is_range:
            start = "..." if value[0] is None else label_for(value[0])
            end = "..." if len(value) < 2 or value[1] is None else label_for(value[1])
            return f"{start} to {end}"
        if len(value) <= 3:
            return ", ".join(label_for(item) for item in value)
        return f"{len(value)} selected"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return label_for(value)


def summarize_filters(fields: Iterable[Any], values: Mapping[str, Any]) -> str:
    """
    Get a human-readable summary of active filters.

    Args:
        fields: Field descriptors of the module, used for labels and order.
        values: Current filter values.

    Returns:
        Summary such as ``"Status: Active, Pending | Search: alpha"``.
    """
    parts: List[str] = []
    known = set()

    for field in fields:
        known.add(field.id)
        value = values.get(field.id)
        if is_empty_value(value):
            continue
        parts.append(f"{field.label or field.id}: {_format_value(field, value)}")

    # Values without a descriptor are still reported, keyed by id
    for key in sorted(values):
        if key not in known and not is_empty_value(values[key]):
            parts.append(f"{key}: {_format_value(None, values[key])}")

    return " | ".join(parts) if parts else NO_FILTERS_SUMMARY

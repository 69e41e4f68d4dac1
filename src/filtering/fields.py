"""Field descriptors for filterable inputs.

Each filterable field is described by an immutable descriptor. Descriptors
form a tagged union over :class:`FieldType`; every variant carries only the
data it needs (select fields carry options, range fields carry bounds) and
knows how to validate a candidate value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import Field, Strict, StrictBool, StrictStr, TypeAdapter, ValidationError

from .exceptions import FilterValidationError, SchemaDefinitionError
from .values import is_empty_value, strict_contains


class FieldType(str, Enum):
    """Supported field kinds."""

    TEXT_SEARCH = "text-search"
    SINGLE_SELECT = "single-select"
    MULTI_SELECT = "multi-select"
    BOOLEAN = "boolean"
    NUMERIC_RANGE = "numeric-range"
    DATE_RANGE = "date-range"
    RATING = "rating"

    @property
    def is_range(self) -> bool:
        return self in (FieldType.NUMERIC_RANGE, FieldType.DATE_RANGE)


class Condition(str, Enum):
    """Dependency conditions evaluated against another field's value."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EXISTS = "exists"


class Effect(str, Enum):
    """What a satisfied dependency does to the dependent field."""

    SHOW = "show"
    HIDE = "hide"
    ENABLE = "enable"
    DISABLE = "disable"

    @property
    def inverts(self) -> bool:
        return self in (Effect.HIDE, Effect.DISABLE)

    @property
    def controls_visibility(self) -> bool:
        return self in (Effect.SHOW, Effect.HIDE)


CATEGORIES = ("primary", "advanced")


# Shared pydantic adapters
_TEXT = TypeAdapter(StrictStr)
_BOOL = TypeAdapter(StrictBool)
_LIST = TypeAdapter(List[Any])
_DATE = TypeAdapter(date)


@lru_cache(maxsize=None)
def _rating_adapter(max_rating: int) -> TypeAdapter:
    return TypeAdapter(Annotated[int, Strict(), Field(ge=0, le=max_rating)])


def _run_adapter(adapter: TypeAdapter, field_id: str, value: Any) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        errors = e.errors()
        reason = errors[0]["msg"] if errors else str(e)
        raise FilterValidationError(field_id, reason, value) from e


@dataclass(frozen=True)
class FilterOption:
    """A selectable option of a select or multi-select field."""

    value: Any
    label: str
    count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterOption":
        if "value" not in data:
            raise SchemaDefinitionError(f"Option is missing 'value': {dict(data)}")
        return cls(
            value=data["value"],
            label=str(data.get("label", data["value"])),
            count=data.get("count"),
        )


@dataclass(frozen=True)
class Dependency:
    """Rule making a field's visibility or enablement depend on another field."""

    on_field_id: str
    condition: Condition
    comparison_value: Any = None
    effect: Effect = Effect.SHOW

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Dependency":
        # The front-end config spells these field/value/action
        on_field_id = data.get("on_field_id", data.get("field"))
        if not on_field_id:
            raise SchemaDefinitionError(f"Dependency is missing 'on_field_id': {dict(data)}")
        try:
            condition = Condition(data["condition"])
            effect = Effect(data.get("effect", data.get("action", Effect.SHOW.value)))
        except (KeyError, ValueError) as e:
            raise SchemaDefinitionError(f"Invalid dependency {dict(data)}: {e}") from e
        return cls(
            on_field_id=str(on_field_id),
            condition=condition,
            comparison_value=data.get("comparison_value", data.get("value")),
            effect=effect,
        )


@dataclass(frozen=True)
class FieldDescriptor:
    """Base descriptor shared by every field type."""

    id: str
    label: str = ""
    description: Optional[str] = None
    category: str = "primary"
    sort_order: int = 0
    hidden: bool = False
    dependencies: Tuple[Dependency, ...] = ()
    column: Optional[str] = None

    type: ClassVar[FieldType]

    @property
    def record_column(self) -> str:
        """Column of a record set this field filters on."""
        return self.column or self.id

    @property
    def is_advanced(self) -> bool:
        return self.category == "advanced"

    def is_empty(self, value: Any) -> bool:
        """Check whether ``value`` is this field's inactive representation."""
        return is_empty_value(value)

    def validate(self, value: Any) -> Any:
        """
        Validate a non-empty value for this field.

        Returns:
            The value normalised to its JSON-compatible form.

        Raises:
            FilterValidationError: If the value does not fit the field.
        """
        raise NotImplementedError


@dataclass(frozen=True)
class TextSearchField(FieldDescriptor):
    """Free-text search box."""

    placeholder: Optional[str] = None

    type: ClassVar[FieldType] = FieldType.TEXT_SEARCH

    def validate(self, value: Any) -> Any:
        return _run_adapter(_TEXT, self.id, value)


@dataclass(frozen=True)
class SingleSelectField(FieldDescriptor):
    """Pick one value from a fixed option list."""

    options: Tuple[FilterOption, ...] = ()

    type: ClassVar[FieldType] = FieldType.SINGLE_SELECT

    @property
    def option_values(self) -> List[Any]:
        return [option.value for option in self.options]

    def validate(self, value: Any) -> Any:
        if not strict_contains(self.option_values, value):
            raise FilterValidationError(self.id, "not one of the declared options", value)
        return value


@dataclass(frozen=True)
class MultiSelectField(FieldDescriptor):
    """Pick any number of values from a fixed option list."""

    options: Tuple[FilterOption, ...] = ()

    type: ClassVar[FieldType] = FieldType.MULTI_SELECT

    @property
    def option_values(self) -> List[Any]:
        return [option.value for option in self.options]

    def validate(self, value: Any) -> Any:
        if isinstance(value, (str, bytes, Mapping)):
            raise FilterValidationError(self.id, "expected a list of options", value)
        items = _run_adapter(_LIST, self.id, value)
        allowed = self.option_values
        seen: List[Any] = []
        for item in items:
            if not strict_contains(allowed, item):
                raise FilterValidationError(self.id, f"unknown option {item!r}", value)
            if strict_contains(seen, item):
                raise FilterValidationError(self.id, f"duplicate option {item!r}", value)
            seen.append(item)
        return seen


@dataclass(frozen=True)
class BooleanField(FieldDescriptor):
    """On/off toggle."""

    type: ClassVar[FieldType] = FieldType.BOOLEAN

    def validate(self, value: Any) -> Any:
        return _run_adapter(_BOOL, self.id, value)


def _as_pair(field_id: str, value: Any) -> List[Any]:
    if isinstance(value, (str, bytes, Mapping)):
        raise FilterValidationError(field_id, "expected a [start, end] pair", value)
    items = _run_adapter(_LIST, field_id, value)
    if len(items) != 2:
        raise FilterValidationError(field_id, "expected a [start, end] pair", value)
    return items


@dataclass(frozen=True)
class NumericRangeField(FieldDescriptor):
    """Inclusive ``[low, high]`` numeric range."""

    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None

    type: ClassVar[FieldType] = FieldType.NUMERIC_RANGE

    def validate(self, value: Any) -> Any:
        low, high = _as_pair(self.id, value)
        for bound in (low, high):
            if isinstance(bound, bool) or not isinstance(bound, (int, float)):
                raise FilterValidationError(self.id, "range bounds must be numbers", value)
            if not math.isfinite(bound):
                raise FilterValidationError(self.id, "range bounds must be finite", value)
        if low > high:
            raise FilterValidationError(self.id, "range start is after range end", value)
        if self.min is not None and low < self.min:
            raise FilterValidationError(self.id, f"range start below {self.min}", value)
        if self.max is not None and high > self.max:
            raise FilterValidationError(self.id, f"range end above {self.max}", value)
        return [low, high]


@dataclass(frozen=True)
class DateRangeField(FieldDescriptor):
    """Inclusive ``[start, end]`` range of ISO dates; either end may be open."""

    type: ClassVar[FieldType] = FieldType.DATE_RANGE

    def is_empty(self, value: Any) -> bool:
        if isinstance(value, (list, tuple)) and value and all(v is None for v in value):
            return True
        return super().is_empty(value)

    def validate(self, value: Any) -> Any:
        start, end = _as_pair(self.id, value)
        parsed = []
        for bound in (start, end):
            if bound is None:
                parsed.append(None)
                continue
            if not isinstance(bound, str):
                raise FilterValidationError(self.id, "dates must be ISO strings", value)
            day = _run_adapter(_DATE, self.id, bound)
            if day.isoformat() != bound:
                raise FilterValidationError(self.id, "dates must be YYYY-MM-DD", value)
            parsed.append(day)
        if parsed[0] is not None and parsed[1] is not None and parsed[0] > parsed[1]:
            raise FilterValidationError(self.id, "range start is after range end", value)
        return [start, end]


@dataclass(frozen=True)
class RatingField(FieldDescriptor):
    """Minimum star rating; ``0`` means no minimum."""

    max_rating: int = 5

    type: ClassVar[FieldType] = FieldType.RATING

    def is_empty(self, value: Any) -> bool:
        if isinstance(value, int) and not isinstance(value, bool) and value == 0:
            return True
        return super().is_empty(value)

    def validate(self, value: Any) -> Any:
        return _run_adapter(_rating_adapter(self.max_rating), self.id, value)


FIELD_CLASSES: Dict[FieldType, Type[FieldDescriptor]] = {
    FieldType.TEXT_SEARCH: TextSearchField,
    FieldType.SINGLE_SELECT: SingleSelectField,
    FieldType.MULTI_SELECT: MultiSelectField,
    FieldType.BOOLEAN: BooleanField,
    FieldType.NUMERIC_RANGE: NumericRangeField,
    FieldType.DATE_RANGE: DateRangeField,
    FieldType.RATING: RatingField,
}


def field_from_dict(data: Mapping[str, Any]) -> FieldDescriptor:
    """
    Build a field descriptor from its declarative (YAML/dict) form.

    Args:
        data: Mapping with at least ``id`` and ``type``.

    Returns:
        The matching FieldDescriptor subclass instance.

    Raises:
        SchemaDefinitionError: If the definition is malformed.
    """
    field_id = data.get("id")
    if not isinstance(field_id, str) or not field_id:
        raise SchemaDefinitionError(f"Field is missing a string 'id': {dict(data)}")

    try:
        field_type = FieldType(data.get("type"))
    except ValueError:
        raise SchemaDefinitionError(f"Field {field_id!r} has unknown type {data.get('type')!r}")

    category = data.get("category", "primary")
    if category not in CATEGORIES:
        raise SchemaDefinitionError(f"Field {field_id!r} has unknown category {category!r}")

    kwargs: Dict[str, Any] = {
        "id": field_id,
        "label": str(data.get("label", field_id)),
        "description": data.get("description"),
        "category": category,
        "sort_order": int(data.get("sort_order", data.get("order", 0)) or 0),
        "hidden": bool(data.get("hidden", False)),
        "dependencies": tuple(Dependency.from_dict(d) for d in data.get("dependencies", []) or []),
        "column": data.get("column"),
    }

    if field_type is FieldType.TEXT_SEARCH:
        kwargs["placeholder"] = data.get("placeholder")
    elif field_type in (FieldType.SINGLE_SELECT, FieldType.MULTI_SELECT):
        options = tuple(FilterOption.from_dict(o) for o in data.get("options", []) or [])
        if not options:
            raise SchemaDefinitionError(f"Select field {field_id!r} declares no options")
        kwargs["options"] = options
    elif field_type is FieldType.NUMERIC_RANGE:
        kwargs["min"] = data.get("min")
        kwargs["max"] = data.get("max")
        kwargs["step"] = data.get("step")
        if kwargs["min"] is not None and kwargs["max"] is not None and kwargs["min"] > kwargs["max"]:
            raise SchemaDefinitionError(f"Range field {field_id!r} has min > max")
    elif field_type is FieldType.RATING:
        kwargs["max_rating"] = int(data.get("max_rating", 5))
        if kwargs["max_rating"] < 1:
            raise SchemaDefinitionError(f"Rating field {field_id!r} needs max_rating >= 1")

    return FIELD_CLASSES[field_type](**kwargs)

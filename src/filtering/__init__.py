"""Generic filter engine for the Buckingham Vault portal modules.

Keeps a module's filter selection, its shareable URL, dependent-field
visibility, presets and change notifications consistent.

Usage:
    from src.filtering import FilterManager, InMemoryLocation

    manager = FilterManager("deals", location=InMemoryLocation())
    manager.store.set_value("status", ["active", "pending"])
    manager.store.encode()  # 'status=%5B%22active%22%2C%22pending%22%5D'
"""

from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from .exceptions import (
    FilterError,
    SchemaDefinitionError,
    UnknownModuleError,
    FilterValidationError,
    InvalidPresetError,
)
from .fields import (
    FieldType,
    Condition,
    Effect,
    FilterOption,
    Dependency,
    FieldDescriptor,
    TextSearchField,
    SingleSelectField,
    MultiSelectField,
    BooleanField,
    NumericRangeField,
    DateRangeField,
    RatingField,
    field_from_dict,
)
from .values import (
    FilterValueSet,
    is_empty_value,
    count_active,
    copy_values,
    summarize_filters,
)
from .url_codec import LocationPort, InMemoryLocation, encode, decode
from .dependencies import (
    FieldState,
    evaluate_condition,
    compute_field_states,
    compute_visibility,
    ordered_fields,
    partition_by_category,
)
from .registry import FieldSchemaRegistry, get_registry
from .notifier import ChangeNotifier
from .presets import Preset, PresetManager, built_in_presets
from .preset_store import JsonPresetStore
from .store import FilterValueStore
from .matching import apply_filters, filter_records
from .export import FilterExporter
from .manager import FilterManager

__all__ = [
    # Errors
    "FilterError",
    "SchemaDefinitionError",
    "UnknownModuleError",
    "FilterValidationError",
    "InvalidPresetError",
    # Field schema
    "FieldType",
    "Condition",
    "Effect",
    "FilterOption",
    "Dependency",
    "FieldDescriptor",
    "TextSearchField",
    "SingleSelectField",
    "MultiSelectField",
    "BooleanField",
    "NumericRangeField",
    "DateRangeField",
    "RatingField",
    "field_from_dict",
    "FieldSchemaRegistry",
    "get_registry",
    # Values
    "FilterValueSet",
    "is_empty_value",
    "count_active",
    "copy_values",
    "summarize_filters",
    # URL codec
    "LocationPort",
    "InMemoryLocation",
    "encode",
    "decode",
    # Dependencies
    "FieldState",
    "evaluate_condition",
    "compute_field_states",
    "compute_visibility",
    "ordered_fields",
    "partition_by_category",
    # State
    "ChangeNotifier",
    "FilterValueStore",
    "Preset",
    "PresetManager",
    "built_in_presets",
    "JsonPresetStore",
    # Consumers
    "apply_filters",
    "filter_records",
    "FilterExporter",
    "FilterManager",
]

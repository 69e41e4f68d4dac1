"""Filter value store: the current filter selection of one module.

Every committed mutation is followed, synchronously and in this order, by a
write of the encoded values to the location port (when URL sync is on) and a
notification of all subscribers.
"""

import copy
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from config.logging_config import get_logger

from .dependencies import FieldState, compute_field_states, compute_visibility
from .exceptions import FilterValidationError, InvalidPresetError
from .fields import FieldDescriptor
from .notifier import ChangeNotifier, FilterChangeCallback
from .presets import Preset
from .url_codec import LocationPort, decode, encode
from .values import FilterValueSet, copy_values, count_active, is_empty_value

logger = get_logger("store")

# Marker for "this edit clears the field"
_CLEAR = object()


class FilterValueStore:
    """
    Holds the active filter values for one module.

    Args:
        fields: Field descriptors of the module.
        location: Optional location port kept in sync with the values.
        notifier: Change notifier; a private one is created if omitted.
        url_sync: Write the encoded values to ``location`` on every commit.
        max_active_filters: Reject edits that would exceed this many active
            filters (0 = unlimited).
        module: Module name, used in log messages.
    """

    def __init__(
        self,
        fields: Sequence[FieldDescriptor],
        location: Optional[LocationPort] = None,
        notifier: Optional[ChangeNotifier] = None,
        url_sync: bool = True,
        max_active_filters: int = 0,
        module: Optional[str] = None,
    ):
        self._fields: Dict[str, FieldDescriptor] = {f.id: f for f in fields}
        self.location = location
        self.notifier = notifier or ChangeNotifier()
        self.url_sync = url_sync
        self.max_active_filters = max_active_filters
        self.module = module or "default"

        self._values: FilterValueSet = {}
        self._active_preset: Optional[Preset] = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def fields(self) -> List[FieldDescriptor]:
        return list(self._fields.values())

    def get_snapshot(self) -> FilterValueSet:
        """Independent copy of the current values."""
        return copy_values(self._values)

    def get_value(self, field_id: str, default: Any = None) -> Any:
        if field_id not in self._values:
            return default
        return copy.deepcopy(self._values[field_id])

    @property
    def active_count(self) -> int:
        return count_active(self._values)

    @property
    def has_active_filters(self) -> bool:
        return self.active_count > 0

    @property
    def active_preset(self) -> Optional[Preset]:
        return self._active_preset

    def visible_fields(self) -> Set[str]:
        return compute_visibility(self.fields, self._values)

    def field_states(self) -> Dict[str, FieldState]:
        return compute_field_states(self.fields, self._values)

    def encode(self) -> str:
        """Query string for the current values."""
        return encode(self._values)

    def subscribe(self, callback: FilterChangeCallback) -> Callable[[], None]:
        return self.notifier.subscribe(callback)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _resolve(self, field_id: str, value: Any) -> Any:
        descriptor = self._fields.get(field_id)
        if descriptor is None:
            raise FilterValidationError(field_id, "unknown field", value)
        if is_empty_value(value) or descriptor.is_empty(value):
            return _CLEAR
        return copy.deepcopy(descriptor.validate(value))

    def validate_value(self, field_id: str, value: Any) -> Any:
        """
        Validate ``value`` for ``field_id`` without applying it.

        Returns:
            The normalised value, or None if the value clears the field.

        Raises:
            FilterValidationError: If the field is unknown or the value invalid.
        """
        resolved = self._resolve(field_id, value)
        return None if resolved is _CLEAR else resolved

    def _within_limit(self, candidate: Mapping[str, Any]) -> bool:
        if self.max_active_filters <= 0:
            return True
        new_count = count_active(candidate)
        return new_count <= self.max_active_filters or new_count <= self.active_count

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_value(self, field_id: str, value: Any) -> bool:
        """
        Set one filter. Empty values clear the filter.

        Returns:
            True if applied, False if rejected (prior value kept).
        """
        return self.set_values({field_id: value})

    def set_values(self, updates: Mapping[str, Any]) -> bool:
        """
        Apply several edits at once. Either every edit applies or none does.

        Returns:
            True if applied, False if any edit was rejected.
        """
        resolved = {}
        for field_id, value in updates.items():
            try:
                resolved[field_id] = self._resolve(field_id, value)
            except FilterValidationError as e:
                logger.warning("[%s] Rejected filter %s: %s", self.module, field_id, e.reason)
                return False

        candidate = dict(self._values)
        for field_id, value in resolved.items():
            if value is _CLEAR:
                candidate.pop(field_id, None)
            else:
                candidate[field_id] = value

        if not self._within_limit(candidate):
            logger.warning(
                "[%s] Rejected edit of %s: more than %d active filters",
                self.module,
                ", ".join(updates),
                self.max_active_filters,
            )
            return False

        self._values = candidate
        self._commit()
        return True

    def clear_value(self, field_id: str) -> None:
        """Remove one filter."""
        self._values.pop(field_id, None)
        self._commit()

    def clear_all(self) -> None:
        """Remove every filter and forget the loaded preset."""
        self._values = {}
        self._active_preset = None
        self._commit()

    def _sanitize(
        self, values: Mapping[str, Any], source: str
    ) -> Tuple[FilterValueSet, List[str]]:
        kept: FilterValueSet = {}
        dropped: List[str] = []
        for field_id, value in values.items():
            if field_id not in self._fields:
                logger.warning("[%s] Ignoring unknown filter %s from %s", self.module, field_id, source)
                dropped.append(field_id)
                continue
            try:
                resolved = self._resolve(field_id, value)
            except FilterValidationError as e:
                logger.debug("[%s] Dropping invalid %s from %s: %s", self.module, field_id, source, e.reason)
                dropped.append(field_id)
                continue
            if resolved is not _CLEAR:
                kept[field_id] = resolved
        return kept, dropped

    def load_preset(self, preset: Preset) -> List[str]:
        """
        Replace the current values with a copy of a preset's filters.

        Entries that are unknown or no longer valid for the module are
        dropped.

        Returns:
            Ids of the dropped entries.

        Raises:
            InvalidPresetError: If ``preset`` is not a Preset.
        """
        if not isinstance(preset, Preset):
            raise InvalidPresetError(f"Expected a Preset, got {type(preset).__name__}")

        kept, dropped = self._sanitize(preset.to_filter_values(), f"preset {preset.id}")
        self._values = kept
        self._active_preset = preset
        logger.info("[%s] Loaded preset %s (%s)", self.module, preset.id, preset.name)
        self._commit()
        return dropped

    def hydrate_from_location(self) -> List[str]:
        """
        Replace the current values with those encoded in the location.

        Unknown ids and invalid values are dropped, and the cleaned query
        string is written back so location and store agree.

        Returns:
            Ids of the dropped parameters.
        """
        if self.location is None or not self.url_sync:
            return []

        kept, dropped = self._sanitize(decode(self.location.read()), "location")
        self._values = kept
        self._commit()
        return dropped

    def _commit(self) -> None:
        logger.debug("[%s] Filters now %s", self.module, self._values)

        if self.url_sync and self.location is not None:
            try:
                self.location.write(encode(self._values))
            except Exception:
                logger.exception("[%s] Failed to write filters to location", self.module)

        self.notifier.notify(self._values)

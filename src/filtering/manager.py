"""Filter manager: wires store, presets and notifier for one module."""

from pathlib import Path
from typing import Callable, List, Optional

import pandas as pd

from config import FilterConfig, config, get_builtin_presets
from config.logging_config import get_logger

from .dependencies import ordered_fields, partition_by_category
from .export import FilterExporter
from .fields import FieldDescriptor
from .matching import apply_filters
from .notifier import ChangeNotifier, FilterChangeCallback
from .presets import Preset, PresetManager, built_in_presets
from .registry import FieldSchemaRegistry, get_registry
from .store import FilterValueStore
from .url_codec import LocationPort
from .values import summarize_filters

logger = get_logger("manager")


class FilterManager:
    """
    Filter system of a single module.

    Usage:
        manager = FilterManager("deals", location=InMemoryLocation("status=%5B%22active%22%5D"))
        manager.store.get_snapshot()  # {"status": ["active"]}, read from the URL
        manager.on_change(lambda filters: refresh(filters))
        manager.store.set_value("search", "alpha")
        matching = manager.apply(deals_df)
    """

    def __init__(
        self,
        module: Optional[str] = None,
        registry: Optional[FieldSchemaRegistry] = None,
        location: Optional[LocationPort] = None,
        settings: Optional[FilterConfig] = None,
        presets: Optional[PresetManager] = None,
    ):
        settings = settings or config.filters
        registry = registry or get_registry()

        self.module = module or settings.default_module
        self.fields: List[FieldDescriptor] = list(registry.fields(self.module))
        self.notifier = ChangeNotifier()
        self.store = FilterValueStore(
            self.fields,
            location=location,
            notifier=self.notifier,
            url_sync=settings.url_sync,
            max_active_filters=settings.max_active_filters,
            module=self.module,
        )
        # Ids of URL parameters dropped while hydrating (empty without URL sync)
        self.dropped_params: List[str] = self.store.hydrate_from_location()
        self.presets = presets or PresetManager(
            self.module,
            built_ins=built_in_presets(self.module, get_builtin_presets(self.module)),
        )

    def on_change(self, callback: FilterChangeCallback) -> Callable[[], None]:
        return self.notifier.subscribe(callback)

    def visible_fields(self) -> List[FieldDescriptor]:
        """Fields eligible for input, in display order."""
        return ordered_fields(self.fields, self.store.visible_fields())

    def primary_fields(self) -> List[FieldDescriptor]:
        return partition_by_category(self.visible_fields())[0]

    def advanced_fields(self) -> List[FieldDescriptor]:
        return partition_by_category(self.visible_fields())[1]

    def summary(self) -> str:
        return summarize_filters(ordered_fields(self.fields), self.store.get_snapshot())

    def save_preset(self, name: str, description: Optional[str] = None) -> Preset:
        """Save the current filters as a user preset."""
        return self.presets.save(name, self.store.get_snapshot(), description=description)

    def load_preset(self, preset_id: str) -> Optional[List[str]]:
        """
        Replace the current filters with a stored preset.

        Returns:
            Ids of dropped entries, or None if no preset has ``preset_id``.
        """
        preset = self.presets.get(preset_id)
        if preset is None:
            logger.warning("[%s] Preset %s not found", self.module, preset_id)
            return None
        return self.store.load_preset(preset)

    def apply(self, df: pd.DataFrame) -> pd.DataFrame:
        """Rows of ``df`` matching the current filters."""
        return apply_filters(df, self.fields, self.store.get_snapshot())

    def export(
        self,
        df: pd.DataFrame,
        exporter: Optional[FilterExporter] = None,
        fmt: str = "json",
    ) -> Path:
        """
        Export the rows matching the current filters.

        Args:
            df: Unfiltered records.
            exporter: Exporter to use (one writing to the configured exports
                directory if omitted).
            fmt: "json", "csv" or "xlsx".
        """
        exporter = exporter or FilterExporter()
        values = self.store.get_snapshot()
        matched = apply_filters(df, self.fields, values)

        if fmt == "json":
            return exporter.export_json(self.module, values, matched)
        if fmt == "csv":
            return exporter.export_csv(self.module, matched)
        if fmt == "xlsx":
            return exporter.export_excel(self.module, self.fields, values, matched)
        raise ValueError(f"Unsupported export format: {fmt}")

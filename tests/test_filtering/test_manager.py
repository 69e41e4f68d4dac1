"""Tests for the FilterManager facade."""

import json

import pytest

from config import FilterConfig
from src.filtering.exceptions import UnknownModuleError
from src.filtering.export import FilterExporter
from src.filtering.manager import FilterManager
from src.filtering.url_codec import InMemoryLocation, decode
from src.filtering.values import NO_FILTERS_SUMMARY


@pytest.fixture
def settings():
    return FilterConfig(url_sync=True, max_active_filters=0, default_module="deals")


@pytest.fixture
def manager(registry, location, settings):
    return FilterManager("deals", registry=registry, location=location, settings=settings)


class TestFilterManager:
    """Tests for FilterManager."""

    def test_default_module_from_settings(self, registry, settings):
        manager = FilterManager(registry=registry, settings=settings)

        assert manager.module == "deals"

    def test_unknown_module(self, registry, settings):
        with pytest.raises(UnknownModuleError):
            FilterManager("crm", registry=registry, settings=settings)

    def test_url_round_trip_between_managers(self, manager, location, registry, settings):
        """Test that a shared link restores the same filters elsewhere."""
        manager.store.set_values({"status": ["active"], "valueRange": [0, 300000000]})

        other = FilterManager(
            "deals",
            registry=registry,
            location=InMemoryLocation(location.read()),
            settings=settings,
        )

        assert other.store.get_snapshot() == manager.store.get_snapshot()

    def test_hydrates_from_location_on_creation(self, registry, settings):
        """Test that a shared link survives the first edit."""
        location = InMemoryLocation('status=["active"]&utm="mail"')

        manager = FilterManager("deals", registry=registry, location=location, settings=settings)
        manager.store.set_value("search", "alpha")

        assert manager.dropped_params == ["utm"]
        assert decode(location.read()) == {"status": ["active"], "search": "alpha"}

    def test_no_hydration_without_url_sync(self, registry):
        settings = FilterConfig(url_sync=False, max_active_filters=0, default_module="deals")
        location = InMemoryLocation('status=["active"]')

        manager = FilterManager("deals", registry=registry, location=location, settings=settings)

        assert manager.dropped_params == []
        assert manager.store.get_snapshot() == {}
        assert location.writes == 0

    def test_on_change(self, manager):
        received = []
        unsubscribe = manager.on_change(received.append)

        manager.store.set_value("search", "alpha")
        unsubscribe()
        manager.store.set_value("search", "beta")

        assert received == [{"search": "alpha"}]

    def test_field_groups(self, manager):
        assert [f.id for f in manager.primary_fields()] == ["search", "status", "type"]
        assert [f.id for f in manager.advanced_fields()] == [
            "valueRange",
            "dateRange",
            "forensicRating",
            "verified",
        ]

    def test_summary(self, manager):
        assert manager.summary() == NO_FILTERS_SUMMARY

        manager.store.set_values({"search": "alpha", "valueRange": [10, 20]})

        assert manager.summary() == "Search Deals: alpha | Deal Value Range: 10 to 20"

    def test_save_and_load_preset(self, manager, location):
        manager.store.set_value("type", "ipo")
        preset = manager.save_preset("IPOs")
        manager.store.clear_all()

        dropped = manager.load_preset(preset.id)

        assert dropped == []
        assert manager.store.get_snapshot() == {"type": "ipo"}
        assert manager.store.active_preset == preset
        assert decode(location.read()) == {"type": "ipo"}

    def test_load_missing_preset(self, manager):
        manager.store.set_value("type", "ipo")

        assert manager.load_preset("preset-0404") is None
        assert manager.store.get_snapshot() == {"type": "ipo"}

    def test_builtin_presets_loaded_from_config(self, registry, settings):
        manager = FilterManager("deals", registry=registry, settings=settings)

        preset = manager.presets.get("active-pipeline")

        assert preset is not None and preset.is_built_in
        manager.load_preset("active-pipeline")
        assert manager.store.get_snapshot() == {"status": ["pending", "active"]}

    def test_max_active_from_settings(self, registry):
        settings = FilterConfig(url_sync=False, max_active_filters=1, default_module="deals")
        manager = FilterManager("deals", registry=registry, settings=settings)

        assert manager.store.set_value("search", "alpha")
        assert not manager.store.set_value("type", "ipo")

    def test_apply(self, manager, sample_deals):
        manager.store.set_value("type", "ipo")

        assert list(manager.apply(sample_deals)["dealNumber"]) == ["BV-2024-002"]

    def test_export_json(self, manager, sample_deals, tmp_path):
        manager.store.set_value("status", ["active"])

        path = manager.export(sample_deals, exporter=FilterExporter(tmp_path))

        document = json.loads(path.read_text())
        assert document["module"] == "deals"
        assert document["total_records"] == 1

    def test_export_other_formats(self, manager, sample_deals, tmp_path):
        exporter = FilterExporter(tmp_path)

        assert manager.export(sample_deals, exporter=exporter, fmt="csv").suffix == ".csv"
        assert manager.export(sample_deals, exporter=exporter, fmt="xlsx").suffix == ".xlsx"
        with pytest.raises(ValueError):
            manager.export(sample_deals, exporter=exporter, fmt="pdf")

"""Tests for JSON persistence of user presets."""

import json

from src.filtering.presets import Preset, PresetManager, built_in_presets
from src.filtering.preset_store import JsonPresetStore


class TestJsonPresetStore:
    """Tests for JsonPresetStore."""

    def test_missing_file_loads_nothing(self, tmp_path):
        store = JsonPresetStore(tmp_path / "presets.json")

        assert store.load_all("deals") == []

    def test_save_and_load(self, tmp_path):
        store = JsonPresetStore(tmp_path / "nested" / "presets.json")
        manager = PresetManager("deals")
        manager.save("Mine", {"status": ["active"], "valueRange": [0, 10]})

        assert store.save_all("deals", manager.list())

        loaded = store.load_all("deals")
        assert loaded == manager.user_presets()

    def test_built_ins_not_written(self, tmp_path):
        path = tmp_path / "presets.json"
        store = JsonPresetStore(path)
        manager = PresetManager("deals", built_ins=built_in_presets("deals", [{"id": "b", "filters": {}}]))
        manager.save("Mine", {})

        store.save_all("deals", manager.list())

        saved = json.loads(path.read_text())
        assert [p["id"] for p in saved["deals"]] == ["preset-0001"]

    def test_modules_kept_apart(self, tmp_path):
        store = JsonPresetStore(tmp_path / "presets.json")
        store.save_all("deals", [Preset(id="preset-0001", name="D", filters={})])
        store.save_all("knowledge", [Preset(id="preset-0001", name="K", filters={})])

        assert [p.name for p in store.load_all("deals")] == ["D"]
        assert [p.name for p in store.load_all("knowledge")] == ["K"]

    def test_corrupt_file_loads_nothing(self, tmp_path):
        path = tmp_path / "presets.json"
        path.write_text("{not json")

        assert JsonPresetStore(path).load_all("deals") == []

    def test_bad_entries_skipped(self, tmp_path):
        path = tmp_path / "presets.json"
        path.write_text(json.dumps({"deals": [
            {"id": "preset-0001", "name": "Ok", "filters": {"type": "ipo"}},
            {"name": "missing id"},
        ]}))

        loaded = JsonPresetStore(path).load_all("deals")

        assert [p.id for p in loaded] == ["preset-0001"]

    def test_restore_into_manager(self, tmp_path):
        """Test that persisted ids are not handed out again after restart."""
        store = JsonPresetStore(tmp_path / "presets.json")
        before = PresetManager("deals")
        before.save("One", {})
        before.save("Two", {})
        store.save_all("deals", before.list())

        after = PresetManager("deals")
        after.restore(store.load_all("deals"))

        assert after.save("Three", {}).id == "preset-0003"

"""Optional JSON-file persistence for user presets.

Persistence sits outside :class:`PresetManager`: callers decide when to read
and write, the manager itself never touches disk.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from config import config
from config.logging_config import get_logger

from .exceptions import InvalidPresetError
from .presets import Preset

logger = get_logger("preset_store")


class JsonPresetStore:
    """Store user presets of every module in a single JSON file."""

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize store.

        Args:
            path: JSON file location (defaults to the configured presets path).
        """
        self.path = Path(path) if path is not None else config.data.presets_path

    def _read_raw(self) -> Dict[str, List[dict]]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("presets file must contain an object keyed by module")
        return data

    def load_all(self, module: str) -> List[Preset]:
        """
        Load the saved user presets of ``module``.

        Returns:
            Presets in saved order; empty if the file is missing or unreadable.
        """
        try:
            raw = self._read_raw()
        except (OSError, ValueError):
            logger.exception("Failed to read presets from %s", self.path)
            return []

        presets = []
        for entry in raw.get(module, []):
            try:
                presets.append(Preset.from_dict(entry))
            except InvalidPresetError as e:
                logger.warning("Skipping stored preset in %s: %s", self.path, e)
        return presets

    def save_all(self, module: str, presets: Iterable[Preset]) -> bool:
        """
        Replace the saved user presets of ``module``.

        Built-in presets are never written.

        Returns:
            True on success, False if the file could not be written.
        """
        try:
            raw = self._read_raw()
        except (OSError, ValueError):
            logger.warning("Presets file %s unreadable; rewriting it", self.path)
            raw = {}

        raw[module] = [p.to_dict() for p in presets if not p.is_built_in]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(raw, indent=2), encoding="utf-8")
        except (OSError, TypeError):
            logger.exception("Failed to write presets to %s", self.path)
            return False

        logger.debug("Saved %d presets for %s to %s", len(raw[module]), module, self.path)
        return True

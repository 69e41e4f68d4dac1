"""Filter presets: named, saved snapshots of a filter value set."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from config.logging_config import get_logger

from .exceptions import InvalidPresetError
from .values import FilterValueSet

logger = get_logger("presets")

ID_PREFIX = "preset"


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Preset:
    """
    A saved filter configuration.

    ``filters`` is frozen on construction (lists become tuples, mappings
    become read-only proxies); use :meth:`to_filter_values` for an editable
    copy.
    """

    id: str
    name: str
    filters: Mapping[str, Any]
    created_at: datetime = field(default_factory=_utcnow)
    module: Optional[str] = None
    description: Optional[str] = None
    is_built_in: bool = False

    def __post_init__(self):
        if not isinstance(self.filters, Mapping):
            raise InvalidPresetError(f"Preset {self.id!r} filters must be a mapping")
        object.__setattr__(self, "filters", _freeze(self.filters))

    def to_filter_values(self) -> FilterValueSet:
        """Return an independent, editable copy of the saved filters."""
        return _thaw(self.filters)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "filters": self.to_filter_values(),
            "created_at": self.created_at.isoformat(),
            "module": self.module,
            "description": self.description,
            "is_built_in": self.is_built_in,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Preset":
        """Create from dictionary."""
        try:
            created_at = data.get("created_at")
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                filters=data["filters"],
                created_at=datetime.fromisoformat(created_at) if created_at else _utcnow(),
                module=data.get("module"),
                description=data.get("description"),
                is_built_in=bool(data.get("is_built_in", False)),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise InvalidPresetError(f"Malformed preset data: {e}") from e


def _id_number(preset_id: str) -> Optional[int]:
    prefix = f"{ID_PREFIX}-"
    if preset_id.startswith(prefix) and preset_id[len(prefix):].isdigit():
        return int(preset_id[len(prefix):])
    return None


class PresetManager:
    """
    Keeps the presets of one module.

    Built-in presets are read-only. User preset ids come from a monotonic
    counter and are never handed out twice, even after deletion.
    """

    def __init__(self, module: Optional[str] = None, built_ins: Iterable[Preset] = ()):
        self.module = module
        self._presets: Dict[str, Preset] = {}
        self._last_id = 0
        # Ids removed by delete() or a same-name save; restore() never revives them
        self._retired: Set[str] = set()

        for preset in built_ins:
            self._presets[preset.id] = preset

    def _next_id(self) -> str:
        self._last_id += 1
        return f"{ID_PREFIX}-{self._last_id:04d}"

    def save(
        self,
        name: str,
        current_values: Mapping[str, Any],
        description: Optional[str] = None,
    ) -> Preset:
        """
        Save a snapshot of ``current_values`` under ``name``.

        A user preset with the same name is replaced by the new one, which
        gets a fresh id.

        Returns:
            The stored Preset.
        """
        clean_name = (name or "").strip()
        if not clean_name:
            raise InvalidPresetError("Preset name must not be empty")

        for existing in list(self._presets.values()):
            if existing.name == clean_name and not existing.is_built_in:
                del self._presets[existing.id]
                self._retired.add(existing.id)

        preset = Preset(
            id=self._next_id(),
            name=clean_name,
            filters=current_values,
            module=self.module,
            description=description,
        )
        self._presets[preset.id] = preset
        logger.info("Saved preset %s (%s)", preset.id, preset.name)
        return preset

    def load(self, preset: Union[Preset, str]) -> Optional[FilterValueSet]:
        """
        Get an editable copy of a preset's filters.

        Args:
            preset: A Preset, or the id of a stored preset.

        Returns:
            Copy of the filters, or None if no preset has that id.

        Raises:
            InvalidPresetError: If ``preset`` is neither a Preset nor an id.
        """
        if isinstance(preset, str):
            found = self._presets.get(preset)
            if found is None:
                logger.warning("Preset %s not found", preset)
                return None
            return found.to_filter_values()
        if isinstance(preset, Preset):
            return preset.to_filter_values()
        raise InvalidPresetError(f"Expected a Preset or preset id, got {type(preset).__name__}")

    def get(self, preset_id: str) -> Optional[Preset]:
        return self._presets.get(preset_id)

    def list(self) -> List[Preset]:
        """All presets, built-ins first, then user presets in save order."""
        presets = list(self._presets.values())
        return [p for p in presets if p.is_built_in] + [p for p in presets if not p.is_built_in]

    def user_presets(self) -> List[Preset]:
        return [p for p in self._presets.values() if not p.is_built_in]

    def delete(self, preset_id: str) -> bool:
        """
        Delete a user preset.

        Returns:
            True if deleted, False if missing or built-in.
        """
        preset = self._presets.get(preset_id)
        if preset is None or preset.is_built_in:
            return False
        del self._presets[preset_id]
        self._retired.add(preset_id)
        return True

    def restore(self, presets: Iterable[Preset]) -> int:
        """
        Add previously persisted user presets, keeping their ids.

        Presets whose id is already taken, or was deleted from this manager,
        are skipped.

        Returns:
            Number of presets added.
        """
        added = 0
        for preset in presets:
            if preset.id in self._presets:
                logger.warning("Skipping restored preset %s: id already in use", preset.id)
                continue
            if preset.id in self._retired:
                logger.warning("Skipping restored preset %s: id was deleted", preset.id)
                continue
            self._presets[preset.id] = preset
            number = _id_number(preset.id)
            if number is not None:
                self._last_id = max(self._last_id, number)
            added += 1
        return added


def built_in_presets(module: str, definitions: Iterable[Mapping[str, Any]]) -> List[Preset]:
    """
    Build read-only presets from their declarative form.

    Malformed definitions are logged and skipped.
    """
    presets = []
    for definition in definitions:
        try:
            presets.append(
                Preset(
                    id=str(definition["id"]),
                    name=str(definition.get("name", definition["id"])),
                    filters=definition.get("filters", {}),
                    created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                    module=module,
                    description=definition.get("description"),
                    is_built_in=True,
                )
            )
        except (KeyError, InvalidPresetError) as e:
            logger.warning("Skipping malformed built-in preset for %s: %s", module, e)
    return presets

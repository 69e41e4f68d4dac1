"""Field schema registry: the declared fields of every filter module."""

from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from config.config_loader import get_module_definitions
from config.logging_config import get_logger

from .dependencies import ordered_fields
from .exceptions import SchemaDefinitionError, UnknownModuleError
from .fields import FieldDescriptor, field_from_dict

logger = get_logger("registry")

FieldDefinition = Union[FieldDescriptor, Mapping[str, Any]]


class FieldSchemaRegistry:
    """
    Holds the immutable field descriptors of each module.

    Fields are kept in declaration order; use :meth:`sorted_fields` for
    display order.
    """

    def __init__(self):
        self._modules: Dict[str, Tuple[FieldDescriptor, ...]] = {}

    def register_module(
        self,
        module: str,
        fields: Iterable[FieldDefinition],
        replace: bool = False,
    ) -> Tuple[FieldDescriptor, ...]:
        """
        Register the fields of a module.

        Args:
            module: Module name (e.g. "deals").
            fields: Descriptors or their dict form, in declaration order.
            replace: Allow overwriting an already registered module.

        Returns:
            The registered descriptors.

        Raises:
            SchemaDefinitionError: On duplicate ids or malformed definitions.
        """
        if module in self._modules and not replace:
            raise SchemaDefinitionError(f"Module {module!r} is already registered")

        descriptors: List[FieldDescriptor] = []
        seen: Set[str] = set()
        for definition in fields:
            descriptor = (
                definition
                if isinstance(definition, FieldDescriptor)
                else field_from_dict(definition)
            )
            if descriptor.id in seen:
                raise SchemaDefinitionError(
                    f"Module {module!r} declares field {descriptor.id!r} twice"
                )
            seen.add(descriptor.id)
            descriptors.append(descriptor)

        for descriptor in descriptors:
            for dependency in descriptor.dependencies:
                if dependency.on_field_id not in seen:
                    logger.warning(
                        "Module %s: field %s depends on undeclared field %s",
                        module,
                        descriptor.id,
                        dependency.on_field_id,
                    )

        self._modules[module] = tuple(descriptors)
        logger.debug("Registered module %s with %d fields", module, len(descriptors))
        return self._modules[module]

    @property
    def modules(self) -> List[str]:
        return list(self._modules)

    def has_module(self, module: str) -> bool:
        return module in self._modules

    def fields(self, module: str) -> Tuple[FieldDescriptor, ...]:
        """Fields of ``module`` in declaration order."""
        try:
            return self._modules[module]
        except KeyError:
            raise UnknownModuleError(module) from None

    def field(self, module: str, field_id: str) -> Optional[FieldDescriptor]:
        for descriptor in self.fields(module):
            if descriptor.id == field_id:
                return descriptor
        return None

    def field_ids(self, module: str) -> Set[str]:
        return {f.id for f in self.fields(module)}

    def sorted_fields(self, module: str) -> List[FieldDescriptor]:
        """Fields of ``module`` by sort order, ties in declaration order."""
        return ordered_fields(self.fields(module))

    @classmethod
    def from_definitions(cls, definitions: Mapping[str, Mapping[str, Any]]) -> "FieldSchemaRegistry":
        """
        Build a registry from ``{module: {"fields": [...]}}`` definitions.
        """
        registry = cls()
        for module, body in definitions.items():
            registry.register_module(module, (body or {}).get("fields", []) or [])
        return registry


@lru_cache(maxsize=1)
def get_registry() -> FieldSchemaRegistry:
    """Get the registry built from ``config/filter_modules.yaml``."""
    return FieldSchemaRegistry.from_definitions(get_module_definitions())

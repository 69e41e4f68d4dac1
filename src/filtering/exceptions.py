"""Exceptions raised by the filter engine."""

from typing import Any, Optional


class FilterError(Exception):
    """Base exception for all filter engine errors."""

    pass


class SchemaDefinitionError(FilterError):
    """A field descriptor or module schema is malformed."""

    pass


class UnknownModuleError(FilterError):
    """No schema is registered for the requested module."""

    def __init__(self, module: str):
        self.module = module
        super().__init__(f"Unknown filter module: {module}")


class FilterValidationError(FilterError):
    """A value does not satisfy its field's schema."""

    def __init__(self, field_id: str, reason: str, value: Optional[Any] = None):
        self.field_id = field_id
        self.reason = reason
        self.value = value
        super().__init__(f"{field_id}: {reason}")


class InvalidPresetError(FilterError):
    """A preset object does not have the expected shape."""

    pass

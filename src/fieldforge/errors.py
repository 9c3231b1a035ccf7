"""Exceptions raised by FieldForge."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fieldforge.validation.types import FieldError


class FieldForgeError(Exception):
    """Base class for FieldForge errors."""
    pass


class CustomFieldValidationError(FieldForgeError):
    """One or more custom field values failed validation.

    Attributes:
        errors: The individual field errors, in schema order
    """

    def __init__(self, errors: "list[FieldError]"):
        self.errors = list(errors)
        super().__init__(
            "Validation failed: " + "; ".join(e.message for e in self.errors)
        )


class SchemaConfigurationError(FieldForgeError, ValueError):
    """A field or filter schema is malformed (bad pattern, duplicate key, unknown type)."""
    pass

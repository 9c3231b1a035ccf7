"""Result types for custom field validation.

A validation run produces an ordered list of field errors rather than a
single joined message, so callers can render errors next to the field
they belong to. The joined form is only built where an exception is raised.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FieldError:
    """A single validation error.

    Attributes:
        field: Key of the field this error relates to
        message: Human-readable message
        code: Machine-readable error code (e.g., "REQUIRED", "MIN_LENGTH")
    """

    field: str
    message: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code,
        }


@dataclass
class FieldValidationResult:
    """Outcome of processing a bag of raw values against a field schema.

    Attributes:
        record: Field key -> final typed value; empty when any field failed
        errors: Field errors in schema order
    """

    record: dict[str, Any] = field(default_factory=dict)
    errors: list[FieldError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        """All error messages joined with '; '."""
        return "; ".join(e.message for e in self.errors)

    def errors_by_field(self) -> dict[str, str]:
        return {e.field: e.message for e in self.errors}

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
        }
        if self.valid:
            result["record"] = self.record
        return result

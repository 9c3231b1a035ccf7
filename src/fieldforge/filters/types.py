"""Filter condition types."""

import uuid
from dataclasses import dataclass
from typing import Any

from fieldforge.core.types import FilterOperator


def generate_short_id() -> str:
    """Generate a short opaque id for conditions and views."""
    return uuid.uuid4().hex[:8]


def operator_name(operator: FilterOperator | str) -> str:
    """The wire name of an operator; unknown operators are kept as given."""
    if isinstance(operator, FilterOperator):
        return operator.value
    return str(operator)


def _resolve_operator(operator: Any) -> FilterOperator | str:
    try:
        return FilterOperator(operator)
    except ValueError:
        return str(operator)


@dataclass(frozen=True)
class FilterCondition:
    """One field/operator/value row of a user-built filter.

    Attributes:
        id: Opaque, caller-generated identifier
        field: Key of the filter field this condition targets
        operator: A FilterOperator, or any other string passed through as-is
        value: Scalar, list for in/nin, bool for exists
    """

    id: str
    field: str
    operator: FilterOperator | str = FilterOperator.EQUALS
    value: Any = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterCondition":
        """Create a FilterCondition from a JSON/YAML dict."""
        return cls(
            id=str(data.get("id") or generate_short_id()),
            field=data["field"],
            operator=_resolve_operator(data.get("operator", "equals")),
            value=data.get("value"),
        )

    @classmethod
    def coerce(cls, condition: "FilterCondition | dict[str, Any]") -> "FilterCondition":
        if isinstance(condition, FilterCondition):
            return condition
        return cls.from_dict(condition)

    @property
    def operator_name(self) -> str:
        return operator_name(self.operator)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "field": self.field,
            "operator": self.operator_name,
            "value": list(self.value) if isinstance(self.value, tuple) else self.value,
        }

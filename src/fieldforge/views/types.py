"""Saved filter view types."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from fieldforge.filters.types import FilterCondition, generate_short_id


class ViewSource(str, Enum):
    YAML = "yaml"
    SESSION = "session"


@dataclass(frozen=True)
class FilterView:
    """A named snapshot of filter conditions."""

    id: str
    name: str
    conditions: tuple[FilterCondition, ...] = ()
    description: str | None = None
    source: ViewSource = ViewSource.SESSION

    @classmethod
    def create(
        cls,
        name: str,
        conditions: Iterable[FilterCondition | dict[str, Any]],
        description: str | None = None,
    ) -> "FilterView":
        """Snapshot the current conditions under a new id.

        Raises:
            ValueError: If the name is blank.
        """
        name = name.strip()
        if not name:
            raise ValueError("View name is required")
        description = description.strip() if description else None
        return cls(
            id=generate_short_id(),
            name=name,
            description=description or None,
            conditions=tuple(FilterCondition.coerce(c) for c in conditions),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterView":
        return cls(
            id=str(data.get("id") or generate_short_id()),
            name=data["name"],
            description=data.get("description"),
            conditions=tuple(
                FilterCondition.from_dict(c) for c in data.get("conditions", [])
            ),
            source=ViewSource(data.get("source", "session")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to API response dict."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "conditions": [c.to_dict() for c in self.conditions],
            "source": self.source.value,
        }


@dataclass(frozen=True)
class FilterViewCollection:
    """The views available during a session.

    Never mutated in place: save and delete return a new collection.
    """

    views: tuple[FilterView, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, views: Sequence[FilterView]) -> "FilterViewCollection":
        return cls(views=tuple(views))

    def save(self, view: FilterView) -> "FilterViewCollection":
        """Add a view, replacing any existing view with the same id in place."""
        if self.get(view.id) is None:
            return replace(self, views=self.views + (view,))
        return replace(
            self,
            views=tuple(view if v.id == view.id else v for v in self.views),
        )

    def delete(self, view_id: str) -> "FilterViewCollection":
        return replace(self, views=tuple(v for v in self.views if v.id != view_id))

    def get(self, view_id: str) -> FilterView | None:
        for view in self.views:
            if view.id == view_id:
                return view
        return None

    def __iter__(self) -> Iterator[FilterView]:
        return iter(self.views)

    def __len__(self) -> int:
        return len(self.views)

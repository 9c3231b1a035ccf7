"""Load filter views from YAML files."""

import logging
from pathlib import Path

import yaml

from fieldforge.filters.types import FilterCondition
from fieldforge.views.types import FilterView, FilterViewCollection, ViewSource

logger = logging.getLogger(__name__)


class ViewConfigLoader:
    """Loads predefined filter views from metadata/views/*.yaml files."""

    def __init__(self, views_path: Path):
        self.views_path = views_path
        self.views: dict[str, FilterView] = {}

    def load_all(self) -> None:
        """Load all filter views from YAML files."""
        if not self.views_path.exists():
            return

        for yaml_file in sorted(self.views_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if data and "view" in data:
                view = self._parse_view(data["view"], yaml_file.stem)
                self.views[view.id] = view
            else:
                logger.warning("Skipping %s: no 'view' key", yaml_file)

    def _parse_view(self, data: dict, file_stem: str) -> FilterView:
        """Parse a view YAML into a FilterView."""
        return FilterView(
            id=f"yaml:{file_stem}",
            name=data["name"],
            description=data.get("description"),
            conditions=tuple(
                FilterCondition.from_dict(c) for c in data.get("conditions", [])
            ),
            source=ViewSource.YAML,
        )

    def get_view(self, view_id: str) -> FilterView | None:
        """Get a view by ID."""
        return self.views.get(view_id)

    def list_views(self) -> list[FilterView]:
        """List all loaded views."""
        return list(self.views.values())

    def collection(self) -> FilterViewCollection:
        """Loaded views as a session collection to save/delete against."""
        return FilterViewCollection.of(self.list_views())

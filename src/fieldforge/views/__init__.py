"""Filter views: named snapshots of filter conditions and their YAML loader."""

from fieldforge.views.types import FilterView, FilterViewCollection, ViewSource
from fieldforge.views.loader import ViewConfigLoader

__all__ = [
    "FilterView",
    "FilterViewCollection",
    "ViewSource",
    "ViewConfigLoader",
]

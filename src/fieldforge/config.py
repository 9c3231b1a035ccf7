"""Runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class QueryParsingConfig:
    """How flat query parameters are read back into a structured query.

    Attributes:
        default_sort: Sort applied when the query has no usable sort
        allowed_filters: Field names that may be filtered on; empty allows any
        max_limit: Largest page size honoured
        default_limit: Page size when none is given
    """

    default_sort: dict[str, int] = field(default_factory=lambda: {"createdAt": -1})
    allowed_filters: list[str] = field(default_factory=list)
    max_limit: int = 100
    default_limit: int = 10


@dataclass
class FieldForgeConfig:
    """Process-wide settings, normally taken from the environment."""

    metadata_path: Path
    default_limit: int = 10
    max_limit: int = 100
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> FieldForgeConfig:
        """Create config from environment variables.

        Resolution order for the metadata directory:
        1. FIELDFORGE_METADATA_PATH env var
        2. {base_path}/metadata
        3. ./metadata

        Raises:
            ValueError: If a numeric setting is not an integer.
        """
        metadata_path = os.environ.get("FIELDFORGE_METADATA_PATH")
        if metadata_path:
            path = Path(metadata_path)
        elif base_path:
            path = base_path / "metadata"
        else:
            path = Path.cwd() / "metadata"

        return cls(
            metadata_path=path,
            default_limit=_int_env("FIELDFORGE_DEFAULT_LIMIT", 10),
            max_limit=_int_env("FIELDFORGE_MAX_LIMIT", 100),
            log_level=os.environ.get("FIELDFORGE_LOG_LEVEL", "WARNING").upper(),
        )

    def query_parsing(self, allowed_filters: list[str] | None = None) -> QueryParsingConfig:
        """Build a QueryParsingConfig from these settings."""
        return QueryParsingConfig(
            allowed_filters=list(allowed_filters or []),
            max_limit=self.max_limit,
            default_limit=self.default_limit,
        )


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None

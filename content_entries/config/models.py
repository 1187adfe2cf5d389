"""Typed dataclasses describing an entry build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from content_entries._constants import MARKDOWN_BASE_URL_PLACEHOLDER

COLLECTION_KINDS = ("blog", "material")


class BuildConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class CollectionConfig:
    """One source folder of entries and how it is published.

    Attributes
    ----------
    key : str
        Collection name; used as the output folder and as the first segment
        of every entry URL (``/blog/<slug>``).
    source_dir : Path
        Folder containing one sub-folder per entry.
    kind : str
        ``"blog"`` applies blog defaults and the blog list projection;
        ``"material"`` keeps full metadata in the list.
    optional : bool
        Skip the collection when ``source_dir`` does not exist.
    """

    key: str
    source_dir: Path
    kind: str = "material"
    optional: bool = False


@dc.dataclass(slots=True)
class BuildConfig:
    """Top-level settings for one build."""

    output_dir: Path = dc.field(default_factory=lambda: Path("dist"))
    base_url: str = MARKDOWN_BASE_URL_PLACEHOLDER
    pygments_style: str = "default"
    collections: list[CollectionConfig] = dc.field(default_factory=list)

    def get_collection(self, key: str) -> CollectionConfig:
        """Return the collection named ``key``."""
        for collection in self.collections:
            if collection.key == key:
                return collection
        msg = f"Unknown collection '{key}'."
        raise BuildConfigError(msg)


def default_collections() -> list[CollectionConfig]:
    """Return the collections used when no configuration file is present."""
    return [
        CollectionConfig(key="blog", source_dir=Path("../blog"), kind="blog"),
        CollectionConfig(
            key="material",
            source_dir=Path("../material"),
            kind="material",
            optional=True,
        ),
    ]


__all__ = [
    "COLLECTION_KINDS",
    "BuildConfig",
    "BuildConfigError",
    "CollectionConfig",
    "default_collections",
]

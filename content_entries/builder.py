"""Drive a full build: compile every collection and write the JSON output tree.

The output tree mirrors the source collections::

    dist/
      blog/
        list.json             light, sorted entry list
        my-post/
          entry.json          full entry
          header.jpg          copied assets (README.md is not copied)

Entries are compiled one at a time and the first error aborts the build.
Anchor links are only checked once every collection has been compiled, and
broken links are reported without failing the build.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import json
import logging
import shutil
import typing as typ

from ._constants import ENTRY_FILE, LIST_FILE, README_FILE
from .compiler import HtmlContentRenderer
from .entries import apply_blog_defaults, load_entry, read_folders, sort_entries
from .front_matter import normalize_date
from .link_validator import LinkValidator, ValidationResult
from .lists import make_light_blog_list, make_light_list

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import BuildConfig, CollectionConfig
    from .entries import Entry

logger = logging.getLogger(__name__)


def _json_default(value: object) -> str:
    """Serialise YAML date values that were not normalised explicitly."""
    if isinstance(value, dt.date):
        return normalize_date(value, field="meta")
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def write_json(path: Path, payload: object) -> Path:
    """Write ``payload`` as UTF-8 JSON to ``path`` and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(payload, ensure_ascii=False, default=_json_default),
        encoding="utf-8",
    )
    return path


def copy_entries_to_dist(
    entries: cabc.Iterable[Entry], source_dir: Path, dist_dir: Path
) -> list[Path]:
    """Copy each entry folder to ``dist_dir`` and write its ``entry.json``.

    The copied ``README.md`` is removed so that only assets and the compiled
    JSON are published. Entries are handled in order and the first
    filesystem error propagates.

    Returns
    -------
    list[Path]
        Paths of the written ``entry.json`` files.
    """
    written: list[Path] = []
    for entry in entries:
        entry_dist = dist_dir / entry.slug
        shutil.copytree(source_dir / entry.slug, entry_dist, dirs_exist_ok=True)
        (entry_dist / README_FILE).unlink(missing_ok=True)
        written.append(write_json(entry_dist / ENTRY_FILE, entry.to_dict()))
        logger.info("generated entry file %s", entry_dist / ENTRY_FILE)
    return written


class CollectionBuilder:
    """Compile and publish one collection of entries."""

    def __init__(
        self,
        collection: CollectionConfig,
        *,
        base_url: str,
        validator: LinkValidator,
        renderer: HtmlContentRenderer,
        emojify: cabc.Callable[[str], str] | None = None,
    ) -> None:
        self.collection = collection
        self.base_url = base_url
        self.validator = validator
        self.renderer = renderer
        self.emojify = emojify

    def load_entries(self) -> list[Entry]:
        """Compile every entry folder and return them in list order."""
        source_dir = self.collection.source_dir
        entries = [
            load_entry(
                source_dir,
                slug,
                collection=self.collection.key,
                base_url=self.base_url,
                validator=self.validator,
                renderer=self.renderer,
                emojify=self.emojify,
            )
            for slug in read_folders(source_dir)
        ]
        if self.collection.kind == "blog":
            entries = [apply_blog_defaults(entry) for entry in entries]
        return sort_entries(entries)

    def light_list(self, entries: cabc.Sequence[Entry]) -> list[Entry]:
        """Return the projection written to ``list.json``."""
        if self.collection.kind == "blog":
            return make_light_blog_list(entries)
        return make_light_list(entries)

    def write(self, entries: cabc.Sequence[Entry], output_dir: Path) -> list[Path]:
        """Write ``list.json`` and the per-entry folders under ``output_dir``."""
        collection_dist = output_dir / self.collection.key
        collection_dist.mkdir(parents=True, exist_ok=True)
        list_path = write_json(
            collection_dist / LIST_FILE,
            [entry.to_dict() for entry in self.light_list(entries)],
        )
        written = [list_path]
        written.extend(
            copy_entries_to_dist(entries, self.collection.source_dir, collection_dist)
        )
        return written


@dc.dataclass(slots=True)
class BuildReport:
    """Summary of a completed build."""

    written: list[Path] = dc.field(default_factory=list)
    entry_counts: dict[str, int] = dc.field(default_factory=dict)
    skipped: list[str] = dc.field(default_factory=list)
    validation: ValidationResult | None = None
    report_lines: list[str] = dc.field(default_factory=list)


class SiteBuilder:
    """Build every configured collection into a fresh output folder."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        output_dir: Path | None = None,
        emojify: cabc.Callable[[str], str] | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : BuildConfig
            Collections and output settings.
        output_dir : Path or None, optional
            Override for ``config.output_dir``.
        emojify : Callable[[str], str] or None, optional
            Shortcode substitution applied to each entry's HTML.
        """
        self.config = config
        self.output_dir = output_dir or config.output_dir
        self.emojify = emojify
        self.validator = LinkValidator()
        self.renderer = HtmlContentRenderer(pygments_style=config.pygments_style)

    def run(self, *, write: bool = True) -> BuildReport:
        """Compile all collections and, when ``write`` is set, publish them.

        The output folder is removed and recreated before anything is
        written, so stale entries never survive a rebuild.
        """
        self.validator.reset()
        report = BuildReport()

        if write:
            if self.output_dir.exists():
                shutil.rmtree(self.output_dir)
            self.output_dir.mkdir(parents=True, exist_ok=True)

        for collection in self.config.collections:
            if not collection.source_dir.is_dir():
                if collection.optional:
                    logger.info(
                        "no %s folder found at %s, skipping",
                        collection.key,
                        collection.source_dir,
                    )
                    report.skipped.append(collection.key)
                    continue
                msg = f"Collection folder '{collection.source_dir}' not found."
                raise FileNotFoundError(msg)

            builder = CollectionBuilder(
                collection,
                base_url=self.config.base_url,
                validator=self.validator,
                renderer=self.renderer,
                emojify=self.emojify,
            )
            entries = builder.load_entries()
            report.entry_counts[collection.key] = len(entries)
            logger.info("%s: %d entries processed", collection.key, len(entries))
            if write:
                report.written.extend(builder.write(entries, self.output_dir))

        report.validation = self.validator.validate()
        report.report_lines = self.validator.format_report(report.validation)
        return report


__all__ = [
    "BuildReport",
    "CollectionBuilder",
    "SiteBuilder",
    "copy_entries_to_dist",
    "write_json",
]

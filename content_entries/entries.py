r"""Assemble compiled Markdown documents into blog and material entries.

An entry is one source folder: its ``README.md`` is separated into front
matter and body, the body is compiled with the entry's image base URL and
canonical path, and the front matter becomes ``meta`` after dates are
normalised, defaults applied, and any header image probed for its size.

Example
-------
>>> from pathlib import Path
>>> entry = markdown_to_entry(
...     "---\ntitle: Hi\npublished: 2024-01-15\n---\n# Hi\n",
...     slug="hi",
...     collection="blog",
...     source_root=Path("blog"),
... )
>>> entry.meta["published"], entry.meta["sticky"]
('2024-01-15T00:00:00.000Z', False)
"""

from __future__ import annotations

import dataclasses as dc
import functools
import logging
import typing as typ

from PIL import Image

from ._constants import (
    IMAGE_BASE_TEMPLATE,
    LINK_BASE_TEMPLATE,
    MARKDOWN_BASE_URL_PLACEHOLDER,
    README_FILE,
)
from .compiler import HtmlContentRenderer, MarkdownCompiler
from .errors import FrontmatterError, HeaderImageError, MissingEntryFileError
from .front_matter import parse_front_matter, separate, validate_required_fields

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .link_validator import LinkValidator

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class Entry:
    """A compiled blog post or material entry.

    Attributes
    ----------
    slug : str
        Folder name, unique within its collection.
    html : str
        Fully rendered and URL-rewritten body.
    meta : dict[str, Any]
        Front matter with normalised and derived fields.
    """

    slug: str
    html: str
    meta: dict[str, typ.Any]

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the JSON-ready mapping written to ``entry.json``."""
        return {"slug": self.slug, "html": self.html, "meta": dict(self.meta)}


@dc.dataclass(slots=True, frozen=True)
class ImageDimensions:
    """Pixel size of an image."""

    width: int
    height: int


def read_folders(base_path: Path) -> list[str]:
    """Return entry folder names under ``base_path``, skipping ``_`` drafts."""
    return sorted(
        child.name
        for child in base_path.iterdir()
        if child.is_dir() and not child.name.startswith("_")
    )


def read_markdown_file(path: Path) -> str:
    """Read an entry's Markdown source as UTF-8."""
    if not path.is_file():
        msg = f"Entry file '{path}' not found."
        raise MissingEntryFileError(msg)
    return path.read_text(encoding="utf-8")


def get_image_dimensions(image_path: Path) -> ImageDimensions:
    """Return the pixel size of ``image_path``.

    Raises
    ------
    HeaderImageError
        If the file is missing or Pillow cannot determine its size.
    """
    try:
        with Image.open(image_path) as image:
            width, height = image.size
    except OSError as exc:
        msg = f"Could not determine dimensions for image: {image_path}"
        raise HeaderImageError(msg) from exc
    return ImageDimensions(width=int(width), height=int(height))


def markdown_to_entry(
    document: str,
    *,
    slug: str,
    collection: str,
    source_root: Path,
    base_url: str = MARKDOWN_BASE_URL_PLACEHOLDER,
    validator: LinkValidator | None = None,
    renderer: HtmlContentRenderer | None = None,
    emojify: cabc.Callable[[str], str] | None = None,
) -> Entry:
    """Turn one ``README.md`` into an :class:`Entry`.

    Parameters
    ----------
    document : str
        Raw Markdown including front matter.
    slug : str
        Folder name of the entry.
    collection : str
        Collection the entry belongs to (``"blog"`` or ``"material"``); it
        names the first segment of the entry's URL.
    source_root : Path
        Collection folder containing the entry folder; header images are
        resolved relative to ``source_root / slug``.
    base_url : str, optional
        Image origin; defaults to the ``%%MARKDOWN_BASE_URL%%`` placeholder.
    validator : LinkValidator, optional
        When given, the entry's heading ids and anchor links are registered.
    renderer : HtmlContentRenderer, optional
        Shared renderer carrying the Pygments style.
    emojify : Callable[[str], str], optional
        Shortcode substitution applied to the final HTML.

    Returns
    -------
    Entry
        The assembled entry.

    Raises
    ------
    FrontmatterError
        If the front matter is missing, malformed, or lacks required fields.
    HeaderImageError
        If ``header`` names an image whose size cannot be determined.
    """
    link_base_path = LINK_BASE_TEMPLATE.format(collection=collection, slug=slug)
    image_base_url = IMAGE_BASE_TEMPLATE.format(
        base_url=base_url, collection=collection, slug=slug
    )

    split = separate(document)
    try:
        meta = parse_front_matter(split.yaml)
    except FrontmatterError as exc:
        msg = f"{link_base_path}: {exc}"
        raise FrontmatterError(msg) from exc
    validate_required_fields(meta, source=link_base_path)

    compiler = MarkdownCompiler(image_base_url, link_base_path, renderer=renderer)
    compiled = compiler.compile(split.markdown)
    if validator is not None:
        validator.register_anchors(link_base_path, compiled.heading_ids)
        validator.register_links(link_base_path, compiled.html)

    for flag in ("hidden", "sticky"):
        if meta.get(flag) is None:
            meta[flag] = False

    header = meta.get("header")
    if isinstance(header, str):
        dimensions = get_image_dimensions(source_root / slug / header)
        meta["header"] = {
            "url": header,
            "width": dimensions.width,
            "height": dimensions.height,
        }

    html = emojify(compiled.html) if emojify else compiled.html
    logger.debug("compiled %s (%d headings)", link_base_path, len(compiled.headings))
    return Entry(slug=slug, html=html, meta=meta)


def load_entry(
    source_root: Path,
    slug: str,
    *,
    collection: str,
    **options: typ.Any,
) -> Entry:
    """Read ``source_root/slug/README.md`` and assemble it into an entry."""
    document = read_markdown_file(source_root / slug / README_FILE)
    return markdown_to_entry(
        document, slug=slug, collection=collection, source_root=source_root, **options
    )


def apply_blog_defaults(entry: Entry) -> Entry:
    """Return ``entry`` with the blog-only ``darkenHeader`` flag normalised.

    The YAML key is spelled ``darken-header`` in older posts; it is folded
    into ``darkenHeader`` so the JSON stays camelCase.
    """
    meta = dict(entry.meta)
    dashed = meta.pop("darken-header", None)
    darken = meta.get("darkenHeader")
    if darken is None:
        darken = dashed
    meta["darkenHeader"] = False if darken is None else darken
    return dc.replace(entry, meta=meta)


def compare_entries(a: Entry, b: Entry) -> int:
    """Order entries sticky first, then newest first, then by slug descending."""
    sticky_a = bool(a.meta.get("sticky"))
    sticky_b = bool(b.meta.get("sticky"))
    if sticky_a != sticky_b:
        return -1 if sticky_a else 1

    published_a = str(a.meta.get("published", ""))
    published_b = str(b.meta.get("published", ""))
    if published_a != published_b:
        return -1 if published_a > published_b else 1

    if a.slug != b.slug:
        return -1 if a.slug > b.slug else 1
    return 0


def sort_entries(entries: cabc.Iterable[Entry]) -> list[Entry]:
    """Return ``entries`` ordered by :func:`compare_entries`."""
    return sorted(entries, key=functools.cmp_to_key(compare_entries))


__all__ = [
    "Entry",
    "ImageDimensions",
    "apply_blog_defaults",
    "compare_entries",
    "get_image_dimensions",
    "load_entry",
    "markdown_to_entry",
    "read_folders",
    "read_markdown_file",
    "sort_entries",
]

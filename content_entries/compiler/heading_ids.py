r"""Assign GitHub-style ``id`` attributes to rendered headings.

Each render pass gets its own :class:`HeadingCollector`, which owns the
slugger and the ordered list of :class:`HeadingRecord` values. Nothing here
is module-level state, so documents never leak collision counters into one
another.

Example
-------
>>> collector = HeadingCollector()
>>> [collector.add(1, "foo") for _ in range(3)]
['foo', 'foo-1', 'foo-2']
>>> collector.headings[1].raw
'foo'
"""

from __future__ import annotations

import re
import typing as typ
import unicodedata

from markdown.extensions import Extension
from markdown.extensions.toc import render_inner_html
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor

from content_entries._constants import TOC_MARKER
from content_entries.html_utils import decode_html_entities, strip_html_tags

from .models import HeadingRecord

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

HEADING_TAG_PATTERN = re.compile(r"h([1-6])")
_KEPT_CATEGORIES = ("L", "M", "N")


def github_slug(value: str) -> str:
    """Slugify ``value`` the way GitHub renders heading anchors.

    Letters keep their diacritics, punctuation and symbols are dropped, and
    every space becomes a hyphen without collapsing runs.

    Examples
    --------
    >>> github_slug("Über uns")
    'über-uns'
    >>> github_slug("FAQ & Hilfe")
    'faq--hilfe'
    """
    kept = [
        char
        for char in value.lower()
        if char in "- "
        or unicodedata.category(char).startswith(_KEPT_CATEGORIES)
        or unicodedata.category(char) == "Pc"
    ]
    return "".join(kept).replace(" ", "-")


class HeadingSlugger:
    """Hand out unique slugs, suffixing ``-1``, ``-2`` on collisions.

    Counters are keyed by the base slug that was requested, so a heading
    whose own text slugifies to ``foo-1`` does not advance the counter for
    ``foo``; it only marks ``foo-1`` as taken.
    """

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, value: str) -> str:
        """Return a unique slug for ``value`` and reserve it."""
        base = github_slug(value)
        candidate = base
        while candidate in self._occurrences:
            self._occurrences[base] += 1
            candidate = f"{base}-{self._occurrences[base]}"
        self._occurrences[candidate] = 0
        return candidate

    def reset(self) -> None:
        """Forget every slug handed out so far."""
        self._occurrences.clear()


class HeadingCollector:
    """Per-document heading state: a slugger plus the records it produced.

    ``marker_index`` is the number of headings recorded before the first
    rendered ``[[toc]]`` marker, or ``None`` when no marker reached the tree.
    Markers inside code blocks and raw HTML are stashed by the parser and
    are therefore never seen.
    """

    def __init__(self) -> None:
        self.slugger = HeadingSlugger()
        self.headings: list[HeadingRecord] = []
        self.marker_index: int | None = None

    def add(self, level: int, text: str) -> str:
        """Record a heading rendered as ``text`` and return its id."""
        raw = strip_html_tags(decode_html_entities(text)).strip()
        heading_id = self.slugger.slug(raw)
        self.headings.append(HeadingRecord(level=level, text=text, raw=raw, id=heading_id))
        return heading_id

    def reset(self) -> None:
        """Clear recorded headings and slug counters."""
        self.slugger.reset()
        self.headings = []
        self.marker_index = None


class HeadingIdExtension(Extension):
    """Register :class:`HeadingIdTreeprocessor` against a collector."""

    def __init__(self, collector: HeadingCollector) -> None:
        super().__init__()
        self.collector = collector

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the heading-id treeprocessor on the Markdown instance."""
        md.preprocessors.register(
            _ResetHeadingsPreprocessor(md, self.collector), "content_heading_reset", 100
        )
        md.treeprocessors.register(
            HeadingIdTreeprocessor(md, self.collector), "content_heading_ids", 5
        )


class _ResetHeadingsPreprocessor(Preprocessor):
    """Reset the collector before a document is parsed."""

    def __init__(self, md: Markdown, collector: HeadingCollector) -> None:
        super().__init__(md)
        self.collector = collector

    def run(self, lines: list[str]) -> list[str]:
        self.collector.reset()
        return lines


class HeadingIdTreeprocessor(Treeprocessor):
    """Set an ``id`` on every heading element and record it."""

    def __init__(self, md: Markdown, collector: HeadingCollector) -> None:
        super().__init__(md)
        self.collector = collector

    def run(self, root: Element) -> Element:
        """Walk the tree in document order, assigning ids to ``h1``-``h6``.

        The position of the first ``[[toc]]`` marker among the headings is
        recorded on the collector. A heading that contains the marker counts
        as preceding it.
        """
        for element in root.iter():
            if not isinstance(element.tag, str):
                continue
            match = HEADING_TAG_PATTERN.fullmatch(element.tag)
            if match is not None:
                text = render_inner_html(element, self.md)
                element.set("id", self.collector.add(int(match.group(1)), text))
            if self.collector.marker_index is None and _holds_marker(element):
                self.collector.marker_index = len(self.collector.headings)
        return root


def _holds_marker(element: Element) -> bool:
    return any(TOC_MARKER in (chunk or "") for chunk in (element.text, element.tail))


__all__ = [
    "HeadingCollector",
    "HeadingIdExtension",
    "HeadingIdTreeprocessor",
    "HeadingSlugger",
    "github_slug",
]

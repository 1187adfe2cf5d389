"""Shared dataclasses produced by the Markdown compilation pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True, frozen=True)
class HeadingRecord:
    """One heading encountered while rendering a document.

    Attributes
    ----------
    level : int
        Heading depth from 1 to 6.
    text : str
        Rendered inline HTML of the heading (``Hello <strong>world</strong>``).
    raw : str
        Plain text with entities decoded and tags stripped.
    id : str
        Slug assigned to the heading's ``id`` attribute.
    """

    level: int
    text: str
    raw: str
    id: str


@dc.dataclass(slots=True)
class CompiledDocument:
    """Final HTML for a document together with the headings it declares.

    Attributes
    ----------
    html : str
        Rendered HTML with image and link URLs rewritten.
    headings : list[HeadingRecord]
        Headings in document order, as emitted by the final render pass.
    toc_start : int or None
        Number of headings rendered before the first ``[[toc]]`` marker, or
        ``None`` when the rendered document holds no marker.
    """

    html: str
    headings: list[HeadingRecord]
    toc_start: int | None = None

    @property
    def heading_ids(self) -> list[str]:
        """Return the ``id`` of every heading in document order."""
        return [heading.id for heading in self.headings]


__all__ = ["CompiledDocument", "HeadingRecord"]

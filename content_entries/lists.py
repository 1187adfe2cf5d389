"""Derive the abbreviated entry lists written to ``list.json``.

List pages only need a teaser and a handful of metadata fields, so the light
projection drops hidden entries, reduces the body to one representative
paragraph, and trims ``meta`` to the fields each collection publishes.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from .html_utils import strip_html_tags

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .entries import Entry

IMG_TAG_PATTERN = re.compile(r"<img[^>]*>")
PARAGRAPH_PATTERN = re.compile(r"<p(?:\s[^>]*)?>.*?</p>", re.DOTALL)
ANCHOR_PATTERN = re.compile(r"<a\s.*?>(.*?)</a>", re.DOTALL)
BIG_PARAGRAPH_LENGTH = 100

BLOG_LIGHT_FIELDS = ("title", "author", "mail", "published", "language", "header")
BLOG_OPTIONAL_FIELDS = ("author2", "mail2", "isUpdatePost")


def extract_first_big_paragraph(html: str) -> str:
    """Return the first paragraph with more than 100 characters of text.

    Image tags are removed before searching. When no paragraph is long
    enough the first paragraph is used; without any paragraph the result is
    empty. Links are unwrapped so list views keep only their text.
    """
    if not html:
        return ""

    paragraphs = PARAGRAPH_PATTERN.findall(IMG_TAG_PATTERN.sub("", html))
    if not paragraphs:
        return ""

    chosen = next(
        (
            paragraph
            for paragraph in paragraphs
            if len(strip_html_tags(paragraph)) > BIG_PARAGRAPH_LENGTH
        ),
        paragraphs[0],
    )
    return ANCHOR_PATTERN.sub(r"\1", chosen)


def make_light_list(
    entries: cabc.Iterable[Entry], fields: cabc.Sequence[str] | None = None
) -> list[Entry]:
    """Drop hidden entries and shorten the rest for list pages.

    Parameters
    ----------
    entries : Iterable[Entry]
        Full entries, already sorted.
    fields : Sequence[str], optional
        Meta keys to keep. ``None`` keeps the whole ``meta`` mapping.
    """
    light: list[Entry] = []
    for entry in entries:
        if entry.meta.get("hidden") is True:
            continue
        meta = dict(entry.meta)
        if fields is not None:
            meta = {key: meta[key] for key in fields if meta.get(key) is not None}
        light.append(
            dc.replace(entry, html=extract_first_big_paragraph(entry.html), meta=meta)
        )
    return light


def make_light_blog_list(entries: cabc.Iterable[Entry]) -> list[Entry]:
    """Project blog entries onto the fields published in the blog list.

    Co-author and update-post markers are only emitted when set on the
    source entry.
    """
    full = list(entries)
    light = make_light_list(full, BLOG_LIGHT_FIELDS)
    by_slug = {entry.slug: entry for entry in full}
    for item in light:
        source = by_slug[item.slug].meta
        for key in BLOG_OPTIONAL_FIELDS:
            if source.get(key):
                item.meta[key] = source[key]
    return light


__all__ = [
    "BLOG_LIGHT_FIELDS",
    "extract_first_big_paragraph",
    "make_light_blog_list",
    "make_light_list",
]

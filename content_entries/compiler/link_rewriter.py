"""Rewrite relative image and link URLs in rendered entry HTML.

Images and links follow two different policies. Image URLs are prefixed with
an image base URL that usually starts with the ``%%MARKDOWN_BASE_URL%%``
placeholder, so the front end can pick the asset origin at runtime. Link URLs
are resolved eagerly against the entry's own canonical path (for example
``/blog/my-slug``) because the site serves every entry from a path that
mirrors the source folder layout.
"""

from __future__ import annotations

import html
import posixpath
import re
import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from content_entries._constants import ASSETS_PREFIX, MARKDOWN_BASE_URL_PLACEHOLDER

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

SCHEME_PATTERN = re.compile(r"^\w+:")
IMG_SRC_PATTERN = re.compile(r"""<img([^>]*)\ssrc=(["'])([^"']+)\2""")
A_HREF_PATTERN = re.compile(r"""<a([^>]*)\shref=(["'])([^"']+)\2""")


def is_absolute_url(url: str) -> bool:
    """Return ``True`` when ``url`` must be left untouched.

    Any scheme (``https:``, ``mailto:``, ``tel:``, ``data:``), protocol-relative
    and root-relative URLs, local ``assets/`` paths, and URLs that already carry
    the image placeholder all count as absolute.
    """
    if SCHEME_PATTERN.match(url):
        return True
    return url.startswith(("//", "/", ASSETS_PREFIX, MARKDOWN_BASE_URL_PLACEHOLDER))


def normalize_relative_url(url: str) -> str:
    """Strip a leading ``./`` from a relative URL."""
    return url[2:] if url.startswith("./") else url


def resolve_image_url(url: str, image_base_url: str) -> str:
    """Prefix a relative image URL with ``image_base_url``."""
    if is_absolute_url(url):
        return url
    return f"{image_base_url}{normalize_relative_url(url)}"


def resolve_link(href: str, link_base_path: str) -> str:
    """Resolve a relative ``href`` against the document's canonical path.

    Examples
    --------
    >>> resolve_link("#setup", "/blog/a")
    '/blog/a#setup'
    >>> resolve_link("../b#intro", "/blog/a")
    '/blog/b#intro'
    """
    path_part, has_fragment, fragment = href.partition("#")
    if path_part:
        resolved = posixpath.normpath(posixpath.join(f"{link_base_path}/", path_part))
    else:
        resolved = link_base_path
    return f"{resolved}#{fragment}" if has_fragment else resolved


def rewrite_image_sources(markup: str, image_base_url: str) -> str:
    """Rewrite relative ``src`` attributes of raw ``<img>`` tags in ``markup``."""

    def _repl(match: re.Match[str]) -> str:
        attrs, quote, src = match.groups()
        if is_absolute_url(src):
            return match.group(0)
        return f"<img{attrs} src={quote}{resolve_image_url(src, image_base_url)}{quote}"

    return IMG_SRC_PATTERN.sub(_repl, markup)


def rewrite_links(markup: str, link_base_path: str) -> str:
    """Resolve every relative ``<a href>`` in ``markup`` to an absolute path."""

    def _repl(match: re.Match[str]) -> str:
        attrs, quote, href = match.groups()
        # Autolinked addresses arrive entity-encoded (``&#109;&#97;...``).
        if is_absolute_url(html.unescape(href)):
            return match.group(0)
        return f"<a{attrs} href={quote}{resolve_link(href, link_base_path)}{quote}"

    return A_HREF_PATTERN.sub(_repl, markup)


class ImageBaseUrlExtension(Extension):
    """Point relative image URLs at the entry's image base URL.

    Insert this extension into a ``markdown.Markdown`` instance so that both
    Markdown images (``![alt](pic.png)``) and raw HTML ``<img>`` tags resolve
    against ``image_base_url``. Attribute escaping of ``alt`` and ``title`` is
    left to the serializer, which escapes ``& " < >``.
    """

    def __init__(self, image_base_url: str) -> None:
        super().__init__()
        self.image_base_url = image_base_url

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the image treeprocessor after inline parsing has run."""
        processor = ImageBaseUrlTreeprocessor(md, self.image_base_url)
        md.treeprocessors.register(processor, "content_image_urls", 6)


class ImageBaseUrlTreeprocessor(Treeprocessor):
    """Rewrite ``img`` elements and stashed raw HTML exactly once per document."""

    def __init__(self, md: Markdown, image_base_url: str) -> None:
        super().__init__(md)
        self.image_base_url = image_base_url

    def run(self, root: Element) -> Element:
        """Rewrite image sources in the tree and in the raw HTML stash."""
        for element in root.iter("img"):
            src = element.get("src")
            if src:
                element.set("src", resolve_image_url(src, self.image_base_url))

        stash = self.md.htmlStash.rawHtmlBlocks
        for index, block in enumerate(stash):
            if isinstance(block, str) and "<img" in block:
                stash[index] = rewrite_image_sources(block, self.image_base_url)
        return root


__all__ = [
    "ImageBaseUrlExtension",
    "ImageBaseUrlTreeprocessor",
    "is_absolute_url",
    "normalize_relative_url",
    "resolve_image_url",
    "resolve_link",
    "rewrite_image_sources",
    "rewrite_links",
]

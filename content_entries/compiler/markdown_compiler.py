r"""Compile an entry's Markdown body into final, URL-rewritten HTML.

The compiler ties together the renderer, the heading-id assigner, the table
of contents builder, and both URL rewriting policies. It is constructed per
entry with that entry's image base URL and canonical link path, and returns
a :class:`CompiledDocument` carrying the HTML and the headings declared by
the final render pass.

Example
-------
>>> compiler = MarkdownCompiler("BASE/", "/blog/a")
>>> document = compiler.compile("## Setup\n\nSee [below](#setup).")
>>> document.heading_ids
['setup']
>>> 'href="/blog/a#setup"' in document.html
True
"""

from __future__ import annotations

import logging

from content_entries._constants import TOC_MARKER

from .heading_ids import HeadingCollector, HeadingIdExtension
from .link_rewriter import ImageBaseUrlExtension, rewrite_links
from .models import CompiledDocument, HeadingRecord
from .renderer import HtmlContentRenderer
from .toc import build_toc_markdown

logger = logging.getLogger(__name__)


class MarkdownCompiler:
    """Render Markdown bodies for one entry."""

    def __init__(
        self,
        image_base_url: str,
        link_base_path: str,
        *,
        renderer: HtmlContentRenderer | None = None,
    ) -> None:
        """Initialize the compiler for a single entry.

        Parameters
        ----------
        image_base_url : str
            Prefix for relative image URLs, for example
            ``"%%MARKDOWN_BASE_URL%%/blog/my-slug/"``.
        link_base_path : str
            Canonical path of the entry, for example ``"/blog/my-slug"``.
        renderer : HtmlContentRenderer, optional
            Shared renderer; a default-styled renderer is created when omitted.
        """
        self.image_base_url = image_base_url
        self.link_base_path = link_base_path
        self.renderer = renderer or HtmlContentRenderer()

    def compile(self, markdown: str) -> CompiledDocument:
        """Render ``markdown`` to HTML, expanding ``[[toc]]`` when present."""
        source = markdown
        if TOC_MARKER in source:
            toc = build_toc_markdown(self._toc_headings(source))
            logger.debug("expanding table of contents for %s", self.link_base_path)
            source = source.replace(TOC_MARKER, toc)

        document = self.render(source)
        document.html = rewrite_links(document.html, self.link_base_path)
        return document

    def render(self, markdown: str) -> CompiledDocument:
        """Run one render pass with fresh heading state.

        Image URLs are rewritten here; link URLs are left as written so that
        callers can inspect the raw render.
        """
        collector = HeadingCollector()
        html = self.renderer.markdown(
            markdown,
            [HeadingIdExtension(collector), ImageBaseUrlExtension(self.image_base_url)],
        )
        return CompiledDocument(
            html=html,
            headings=list(collector.headings),
            toc_start=collector.marker_index,
        )

    def _toc_headings(self, markdown: str) -> list[HeadingRecord]:
        """Return headings that follow the first ``[[toc]]`` marker.

        Ids come from a render of the whole document so they match the final
        pass, including collisions with headings above the marker. The
        split is taken from the same render, so a marker shown inside a code
        block is not a split point. When only such markers exist every
        heading is listed.
        """
        document = self.render(markdown)
        return document.headings[document.toc_start or 0 :]


__all__ = ["MarkdownCompiler"]

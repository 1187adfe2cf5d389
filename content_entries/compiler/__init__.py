"""Markdown compilation pipeline: rendering, heading ids, TOC, and URL rewriting."""

from .heading_ids import HeadingCollector, HeadingIdExtension, HeadingSlugger
from .link_rewriter import ImageBaseUrlExtension, is_absolute_url
from .markdown_compiler import MarkdownCompiler
from .models import CompiledDocument, HeadingRecord
from .renderer import HtmlContentRenderer

__all__ = [
    "CompiledDocument",
    "HeadingCollector",
    "HeadingIdExtension",
    "HeadingRecord",
    "HeadingSlugger",
    "HtmlContentRenderer",
    "ImageBaseUrlExtension",
    "MarkdownCompiler",
    "is_absolute_url",
]

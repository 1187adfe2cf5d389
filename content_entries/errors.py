"""Exception types raised while turning Markdown entries into JSON documents."""

from __future__ import annotations


class ContentError(ValueError):
    """Raised when an entry's source content breaks the authoring contract."""


class FrontmatterError(ContentError):
    """Raised when YAML front matter is missing, malformed, or incomplete."""


class HeaderImageError(ContentError):
    """Raised when a declared header image is missing or has no dimensions."""


class MissingEntryFileError(ContentError):
    """Raised when an entry folder has no ``README.md`` to compile."""


__all__ = [
    "ContentError",
    "FrontmatterError",
    "HeaderImageError",
    "MissingEntryFileError",
]

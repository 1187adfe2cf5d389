"""Check that internal anchor links across a build resolve to real headings.

A :class:`LinkValidator` is owned by the build driver for the lifetime of one
build. Every compiled entry registers the heading ids it declares and the
anchor links it emits; once all entries are compiled, :meth:`validate`
reports links whose target entry or heading does not exist. Validation is a
diagnostic only: it never stops a build.

Example
-------
>>> validator = LinkValidator()
>>> validator.register_anchors("/blog/p1", ["intro", "fazit"])
>>> validator.register_links("/blog/p1", '<a href="/blog/p1#fazt">x</a>')
>>> result = validator.validate()
>>> result.valid, [link.anchor for link in result.broken_links]
(False, ['fazt'])
>>> validator.suggestions(result.broken_links[0])
['fazit']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
from urllib.parse import unquote

from .similarity import find_similar

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

ANCHOR_LINK_PATTERN = re.compile(r"""<a[^>]*\shref=(["'])([^"']*#[^"']+)\1""")
EXTERNAL_PREFIXES = ("http://", "https://", "//", "mailto:", "tel:")


@dc.dataclass(slots=True, frozen=True)
class AnchorLink:
    """An internal link that points at a heading.

    Attributes
    ----------
    from_path : str
        Entry path the link was found in, such as ``/blog/my-post``.
    to_path : str
        Entry path the link targets; equals ``from_path`` for bare fragments.
    anchor : str
        Decoded fragment without the leading ``#``.
    full_link : str
        The ``href`` value as it appeared in the HTML.
    """

    from_path: str
    to_path: str
    anchor: str
    full_link: str


@dc.dataclass(slots=True)
class ValidationResult:
    """Outcome of :meth:`LinkValidator.validate`."""

    valid: bool
    total_links: int
    broken_links: list[AnchorLink]


class LinkValidator:
    """Collect anchors and links for one build and cross-check them."""

    def __init__(self) -> None:
        self._anchors: dict[str, set[str]] = {}
        self._links: list[AnchorLink] = []

    def register_anchors(self, entry_path: str, heading_ids: cabc.Iterable[str]) -> None:
        """Add ``heading_ids`` to the anchors known for ``entry_path``."""
        self._anchors.setdefault(entry_path, set()).update(heading_ids)

    def register_links(self, from_path: str, html: str) -> None:
        """Record every internal ``<a href>`` with a fragment found in ``html``."""
        for match in ANCHOR_LINK_PATTERN.finditer(html):
            full_link = match.group(2)
            if full_link.lower().startswith(EXTERNAL_PREFIXES):
                continue
            path_part, _, fragment = full_link.partition("#")
            self._links.append(
                AnchorLink(
                    from_path=from_path,
                    to_path=path_part or from_path,
                    anchor=unquote(fragment),
                    full_link=full_link,
                )
            )

    def validate(self) -> ValidationResult:
        """Return every registered link whose target path or anchor is missing."""
        broken = [link for link in self._links if not self._resolves(link)]
        logger.debug(
            "validated %d anchor links, %d broken", len(self._links), len(broken)
        )
        return ValidationResult(
            valid=not broken, total_links=len(self._links), broken_links=broken
        )

    def suggestions(
        self, link: AnchorLink, *, max_distance: int = 3, limit: int = 3
    ) -> list[str]:
        """Return up to ``limit`` known anchors close to ``link.anchor``."""
        targets = self._anchors.get(link.to_path)
        if not targets:
            return []
        return find_similar(link.anchor, sorted(targets), max_distance)[:limit]

    def anchors_for(self, entry_path: str) -> set[str] | None:
        """Return the anchors registered for ``entry_path``, if any."""
        return self._anchors.get(entry_path)

    @property
    def links(self) -> list[AnchorLink]:
        """Return a copy of the registered links in encounter order."""
        return list(self._links)

    def reset(self) -> None:
        """Forget all anchors and links."""
        self._anchors.clear()
        self._links.clear()

    def format_report(self, result: ValidationResult) -> list[str]:
        """Render ``result`` as human-readable report lines."""
        if result.valid:
            return [f"✓ All {result.total_links} anchor links are valid"]

        lines = [f"⚠ Found {len(result.broken_links)} broken anchor link(s):", ""]
        for link in result.broken_links:
            lines.append(f"  {link.from_path}")
            lines.append(f"    → {link.full_link}")
            if link.to_path not in self._anchors:
                lines.append(f'    ✗ Target path "{link.to_path}" does not exist')
            else:
                lines.append(f'    ✗ Anchor "#{link.anchor}" not found')
                similar = self.suggestions(link)
                if similar:
                    hints = ", ".join(f"#{anchor}" for anchor in similar)
                    lines.append(f"    ? Did you mean: {hints}")
            lines.append("")
        return lines

    def _resolves(self, link: AnchorLink) -> bool:
        targets = self._anchors.get(link.to_path)
        return targets is not None and link.anchor in targets


__all__ = ["AnchorLink", "LinkValidator", "ValidationResult"]

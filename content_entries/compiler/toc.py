"""Build the Markdown table of contents substituted for ``[[toc]]``."""

from __future__ import annotations

import re
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import HeadingRecord

TOC_LEVELS = (2, 3)
# Python-Markdown nests list items at the tab length, not two spaces.
NESTED_INDENT = " " * 4
LINK_TEXT_ESCAPE = re.compile(r"([\\`*_\[\]])")


def build_toc_markdown(headings: cabc.Iterable[HeadingRecord]) -> str:
    """Return a bullet list linking to every level-2 and level-3 heading.

    Level-3 headings are nested under the closest preceding level-2 heading;
    a level-3 heading with no level-2 heading before it stays at the top
    level. Returns an empty string when no heading qualifies.
    """
    lines: list[str] = []
    seen_parent = False
    for heading in headings:
        if heading.level not in TOC_LEVELS:
            continue
        if heading.level == 2:
            seen_parent = True
            indent = ""
        else:
            indent = NESTED_INDENT if seen_parent else ""
        text = LINK_TEXT_ESCAPE.sub(r"\\\1", heading.raw)
        lines.append(f"{indent}* [{text}](#{heading.id})")
    return "\n".join(lines)


__all__ = ["TOC_LEVELS", "build_toc_markdown"]

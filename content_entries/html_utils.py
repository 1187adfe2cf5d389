r"""String helpers for the small slice of HTML the compiler has to reason about.

The compiler, heading-id assigner, and list projection all need to move
between rendered HTML and plain text. These helpers cover exactly the
entities Python-Markdown and hand-written content produce; they are not a
general HTML parser.

Example
-------
>>> from content_entries.html_utils import decode_html_entities, escape_html
>>> escape_html('Tom & "Jerry"')
'Tom &amp; &quot;Jerry&quot;'
>>> decode_html_entities("&lt;b&gt; &amp;lt;")
'<b> &lt;'
"""

from __future__ import annotations

import re

TAG_PATTERN = re.compile(r"<[^>]*>")
ENTITY_PATTERN = re.compile(r"&(amp|lt|gt|quot|#39|#x27|#x2F);")

_ENTITY_MAP = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
    "#x27": "'",
    "#x2F": "/",
}
_ESCAPE_MAP = str.maketrans(
    {"&": "&amp;", '"': "&quot;", "'": "&#39;", "<": "&lt;", ">": "&gt;"}
)


def strip_html_tags(html: str) -> str:
    """Remove every tag from ``html``, leaving only text content."""
    return TAG_PATTERN.sub("", html)


def decode_html_entities(html: str) -> str:
    """Decode the limited entity set emitted by the Markdown renderer.

    Decoding happens in a single pass so an escaped entity such as
    ``&amp;lt;`` becomes ``&lt;`` rather than ``<``.
    """
    return ENTITY_PATTERN.sub(lambda match: _ENTITY_MAP[match.group(1)], html)


def escape_html(text: str) -> str:
    """Escape ``& " ' < >`` so ``text`` is safe inside an attribute value."""
    return text.translate(_ESCAPE_MAP)


__all__ = ["decode_html_entities", "escape_html", "strip_html_tags"]

"""Unit tests for the small HTML string helpers."""

from __future__ import annotations

import pytest

from content_entries.html_utils import decode_html_entities, escape_html, strip_html_tags


def test_strip_html_tags_keeps_text() -> None:
    """Tags vanish while the text between them survives."""
    assert strip_html_tags("Hello <strong>world</strong>!") == "Hello world!"


def test_decode_handles_the_renderer_entity_set() -> None:
    """Every entity the renderer emits should decode to its character."""
    encoded = "&amp; &lt; &gt; &quot; &#39; &#x27; &#x2F;"
    assert decode_html_entities(encoded) == "& < > \" ' ' /"


def test_decode_leaves_other_entities_alone() -> None:
    """Entities outside the supported set pass through unchanged."""
    assert decode_html_entities("&nbsp;&copy;") == "&nbsp;&copy;"


def test_escape_then_decode_round_trips_ampersand_sequences() -> None:
    """Escaped entity text must not be decoded twice."""
    text = "Use &lt; for <"
    escaped = escape_html(text)
    assert escaped == "Use &amp;lt; for &lt;", f"unexpected escape {escaped!r}"
    assert decode_html_entities(escaped) == text


@pytest.mark.parametrize(
    "text",
    [
        "a < b > c & \"d\" 'e'",
        "&#39; and &quot; written out, plus <, > and &",
        "'quoted' \"twice\" &amp;lt; <br>",
        "<a href=\"x\">it's &gt; that</a>",
        "&&&'\"<<>>\"'",
        "&#x27;&#x2F; stays & 'literal'",
    ],
)
def test_escape_then_decode_round_trips_special_characters(text: str) -> None:
    """Decoding escaped text restores it, including literal entity text."""
    escaped = escape_html(text)
    for char in "<>\"'":
        assert char not in escaped, f"{char!r} left unescaped in {escaped!r}"
    assert decode_html_entities(escaped) == text, f"round trip failed for {text!r}"

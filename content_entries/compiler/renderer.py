"""Render Markdown to HTML with Pygments-highlighted code blocks.

Highlighted blocks are tagged with ``data-language`` so the front end can
label them. Fenced blocks without a language are highlighted with a guessed
lexer but labelled ``text``, as are indented code blocks.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from markdown.preprocessors import Preprocessor
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown.extensions import Extension
    from pygments.lexer import Lexer
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any
    Lexer = typ.Any

FENCE_OPEN_PATTERN = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ \t]*(?P<lang>[A-Za-z0-9_+#.-]+)?[^\n]*\n"
    r"(?:.*?\n)??(?P=fence)[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
# Up to three spaces of indentation is still a fence; extra labels after a
# comma (```rust,ignore) are not understood by fenced_code.
FENCE_CLEANUP_PATTERN = re.compile(
    r"^[ ]{0,3}(?P<fence>`{3,}|~{3,})(?P<lang>[A-Za-z0-9_+#.-]+)?,[^\r\n]*$"
    r"|^[ ]{1,3}(?=`{3,}|~{3,})",
    re.MULTILINE,
)
CODEHILITE_DIV = '<div class="codehilite">'
PLAIN_LANGUAGE = "text"


def _tag_languages(html: str, languages: cabc.Iterable[str]) -> str:
    """Add ``data-language`` to successive codehilite wrappers in ``html``."""
    parts = html.split(CODEHILITE_DIV)
    tagged = [parts[0]]
    names = iter(languages)
    for part in parts[1:]:
        language = escape(next(names, PLAIN_LANGUAGE), quote=True)
        tagged.append(f'<div class="codehilite" data-language="{language}">{part}')
    return "".join(tagged)


class _FenceLanguagePreprocessor(Preprocessor):
    """Label fenced blocks while they are still in the raw HTML stash.

    Runs right after ``fenced_code``, when the stash holds only highlighted
    fences. Indented code blocks are highlighted later by a treeprocessor
    and so never consume a fence label.
    """

    def __init__(self, md: Markdown, languages: cabc.Sequence[str]) -> None:
        super().__init__(md)
        self.languages = languages

    def run(self, lines: list[str]) -> list[str]:
        stash = self.md.htmlStash.rawHtmlBlocks
        names = iter(self.languages)
        for index, block in enumerate(stash):
            if isinstance(block, str) and block.startswith(CODEHILITE_DIV):
                stash[index] = _tag_languages(block, [next(names, PLAIN_LANGUAGE)])
        return lines


class HtmlContentRenderer:
    """Render entry Markdown and code snippets with consistent styling."""

    def __init__(self, pygments_style: str = "default") -> None:
        """Initialize a renderer with the Pygments style used for code blocks.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"default"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    def markdown(self, text: str, extensions: cabc.Sequence[Extension] = ()) -> str:
        """Render Markdown into HTML with the base and per-call extensions.

        A fresh ``Markdown`` instance is created per call, so extensions that
        carry per-document state (heading ids, image base URLs) never see
        another document.
        """
        source = self._clean_fences(text)
        if not source.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists", *extensions],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": True,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        languages = [
            match.group("lang") or PLAIN_LANGUAGE
            for match in FENCE_OPEN_PATTERN.finditer(source)
        ]
        # fenced_code_block is registered at 25 and html_block at 20.
        md.preprocessors.register(
            _FenceLanguagePreprocessor(md, languages), "content_fence_languages", 24
        )
        # Anything still untagged is an indented block.
        return _tag_languages(md.convert(source), ())

    def code_block(self, code: str, language: str | None = None) -> str:
        """Highlight a standalone snippet.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name. When omitted the lexer is guessed from the
            code; unknown names fall back to plain text.

        Returns
        -------
        str
            Highlighted HTML whose wrapper carries ``data-language``.
        """
        html = highlight(code, self._lexer(code, language), self._formatter)
        return _tag_languages(html, [language or PLAIN_LANGUAGE])

    @staticmethod
    def _lexer(code: str, language: str | None) -> Lexer:
        try:
            return get_lexer_by_name(language) if language else guess_lexer(code)
        except ClassNotFound:
            return get_lexer_by_name(PLAIN_LANGUAGE)

    @staticmethod
    def _clean_fences(text: str) -> str:
        def _repl(match: re.Match[str]) -> str:
            if match.group("fence") is None:
                return ""
            return f"{match.group('fence')}{match.group('lang') or ''}"

        return FENCE_CLEANUP_PATTERN.sub(_repl, text)


__all__ = ["HtmlContentRenderer"]

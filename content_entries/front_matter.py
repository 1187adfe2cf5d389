r"""Split Jekyll-style Markdown documents into YAML front matter and body.

Every entry's ``README.md`` starts with a YAML block fenced by ``---`` lines.
This module separates that block from the Markdown body, parses it with
ruamel.yaml, and normalises date values to ISO-8601 strings so entries sort
and serialise consistently.

Example
-------
>>> from content_entries.front_matter import separate
>>> split = separate("---\ntitle: Hello\n---\n\nBody text\n")
>>> split.yaml
'title: Hello\n'
>>> split.markdown
'\nBody text\n'
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import FrontmatterError

# Space/tab only: a generic ``\s*`` would swallow the blank line that often
# follows the closing separator and shift the split point.
SEPARATOR_PATTERN = re.compile(r"^---[ \t]*\r?\n", re.MULTILINE)
DATE_FIELDS = ("published", "lastModified")
REQUIRED_FIELDS = ("title", "published")


@dc.dataclass(slots=True)
class FrontMatterSplit:
    """Raw halves of a source document.

    Attributes
    ----------
    yaml : str
        Text between the first and second separator lines; empty when the
        document has no complete front matter block.
    markdown : str
        Everything after the second separator, or the whole document when
        no front matter was found.
    """

    yaml: str
    markdown: str


def separate(document: str) -> FrontMatterSplit:
    """Split ``document`` at its first two ``---`` separator lines."""
    first = SEPARATOR_PATTERN.search(document)
    if first is None:
        return FrontMatterSplit(yaml="", markdown=document)

    rest = document[first.end() :]
    second = SEPARATOR_PATTERN.search(rest)
    if second is None:
        return FrontMatterSplit(yaml="", markdown=document)

    return FrontMatterSplit(yaml=rest[: second.start()], markdown=rest[second.end() :])


def parse_front_matter(yaml_text: str) -> dict[str, typ.Any]:
    """Parse a front matter block into a mapping with normalised dates.

    Parameters
    ----------
    yaml_text : str
        YAML extracted by :func:`separate`.

    Returns
    -------
    dict[str, Any]
        Parsed metadata. ``published`` and ``lastModified`` are ISO-8601
        strings regardless of whether YAML produced dates or strings.

    Raises
    ------
    FrontmatterError
        If the block is empty, cannot be parsed, or is not a mapping.
    """
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(yaml_text)
    except YAMLError as exc:
        msg = f"YAML front matter could not be parsed: {exc}"
        raise FrontmatterError(msg) from exc

    if not loaded:
        msg = "YAML front matter is required but was empty or invalid."
        raise FrontmatterError(msg)
    if not isinstance(loaded, dict):
        msg = "YAML front matter must be a mapping."
        raise FrontmatterError(msg)

    meta: dict[str, typ.Any] = dict(loaded)
    for key in DATE_FIELDS:
        if key in meta and meta[key] is not None:
            meta[key] = normalize_date(meta[key], field=key)
    return meta


def validate_required_fields(meta: typ.Mapping[str, typ.Any], *, source: str) -> None:
    """Raise :class:`FrontmatterError` when ``title`` or ``published`` is absent."""
    missing = [key for key in REQUIRED_FIELDS if meta.get(key) in (None, "")]
    if missing:
        names = ", ".join(missing)
        msg = f"Front matter in '{source}' is missing required field(s): {names}."
        raise FrontmatterError(msg)


def normalize_date(value: object, *, field: str = "date") -> str:
    """Return ``value`` as an ISO-8601 string.

    Dates become midnight UTC and datetimes are converted to UTC with
    millisecond precision, matching what the front end already stores.
    Strings are trusted as written.

    Examples
    --------
    >>> normalize_date(dt.date(2024, 1, 15))
    '2024-01-15T00:00:00.000Z'
    >>> normalize_date("2024-01-15")
    '2024-01-15'
    """
    match value:
        case dt.datetime():
            if value.tzinfo is None:
                value = value.replace(tzinfo=dt.UTC)
            utc = value.astimezone(dt.UTC)
            millis = utc.microsecond // 1000
            return f"{utc:%Y-%m-%dT%H:%M:%S}.{millis:03d}Z"
        case dt.date():
            return f"{value.isoformat()}T00:00:00.000Z"
        case str():
            return value
        case _:
            msg = f"Front matter field '{field}' must be a date or string, got {value!r}."
            raise FrontmatterError(msg)


__all__ = [
    "FrontMatterSplit",
    "normalize_date",
    "parse_front_matter",
    "separate",
    "validate_required_fields",
]

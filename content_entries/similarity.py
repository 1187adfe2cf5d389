"""Edit-distance helpers used to suggest fixes for mistyped anchors."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def levenshtein(a: str, b: str) -> int:
    """Return the Levenshtein distance between ``a`` and ``b``.

    The distance counts single code-point insertions, deletions, and
    substitutions, so characters with diacritics count as one edit each.

    Examples
    --------
    >>> levenshtein("kitten", "sitting")
    3
    >>> levenshtein("", "abc")
    3
    """
    if len(a) > len(b):
        a, b = b, a
    if not a:
        return len(b)

    row = list(range(len(a) + 1))
    for j, char_b in enumerate(b, start=1):
        diagonal = row[0]
        row[0] = j
        for i, char_a in enumerate(a, start=1):
            above = row[i]
            if char_a == char_b:
                row[i] = diagonal
            else:
                row[i] = 1 + min(diagonal, above, row[i - 1])
            diagonal = above
    return row[-1]


def find_similar(
    query: str, candidates: cabc.Iterable[str], max_distance: int = 3
) -> list[str]:
    """Return candidates within ``max_distance`` edits of ``query``.

    Exact matches are skipped since they make poor suggestions. Results are
    ordered by ascending distance; candidates at the same distance keep their
    input order.
    """
    scored: list[tuple[int, str]] = []
    for candidate in candidates:
        if candidate == query:
            continue
        distance = levenshtein(query, candidate)
        if distance <= max_distance:
            scored.append((distance, candidate))
    scored.sort(key=lambda item: item[0])
    return [candidate for _distance, candidate in scored]


__all__ = ["find_similar", "levenshtein"]

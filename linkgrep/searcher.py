# linkgrep/searcher.py
"""
Literal full-text search reporting 1-based line/column positions.

The scanner walks the content once, left to right, keeping running line and
column counters. ``str.find`` only locates the next occurrence; positions
always come from the counters, so columns count characters (code points),
never bytes. ``\\n``, ``\\r`` and ``\\r\\n`` each end a line.
"""
from __future__ import annotations

from typing import Iterator

from linkgrep.models import MatchPosition

__all__ = ["TextSearcher", "search"]


class TextSearcher:
    """Iterable over the non-overlapping occurrences of *term* in *content*.

    Every ``iter()`` starts a fresh scan. An empty term or empty content
    yields nothing.
    """

    def __init__(self, content: str, term: str) -> None:
        self.content = content
        self.term = term

    def __iter__(self) -> Iterator[MatchPosition]:
        return self._scan()

    def _scan(self) -> Iterator[MatchPosition]:
        content, term = self.content, self.term
        if not content or not term:
            return

        line = column = 1
        previous = ""
        cursor = 0
        start = content.find(term)
        while start != -1:
            for index in range(cursor, start):
                char = content[index]
                if char == "\n":
                    # second half of \r\n: the line was already counted
                    if previous != "\r":
                        line += 1
                        column = 1
                elif char == "\r":
                    line += 1
                    column = 1
                else:
                    column += 1
                previous = char
            cursor = start
            yield MatchPosition(line, column)
            start = content.find(term, start + len(term))


def search(content: str, term: str) -> Iterator[MatchPosition]:
    """Lazily yield the position of each non-overlapping *term* occurrence."""
    return iter(TextSearcher(content, term))

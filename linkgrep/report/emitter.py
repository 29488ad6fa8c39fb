# linkgrep/report/emitter.py
"""Line-oriented match output: one line per match, documents in order."""
from __future__ import annotations

from typing import Callable, Iterable

import click

from linkgrep.models import Address, Document, MatchPosition
from linkgrep.searcher import search


def format_match(address: Address, position: MatchPosition) -> str:
    return f"{address}: {position}"


class ReportEmitter:
    """Writes matches of a term across documents to *sink* (``click.echo`` by default)."""

    def __init__(self, sink: Callable[[str], object] = click.echo) -> None:
        self.sink = sink

    def emit(self, documents: Iterable[Document], term: str) -> int:
        """Write a line per match and return how many lines were written."""
        count = 0
        for document in documents:
            for position in search(document.content, term):
                self.sink(format_match(document.address, position))
                count += 1
        return count

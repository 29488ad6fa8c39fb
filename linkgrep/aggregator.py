# File: linkgrep/aggregator.py
"""linkgrep.aggregator: collects a finished run into a serialisable report."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, List, TypedDict

from linkgrep.engine import SearchRun


class MatchInfo(TypedDict):
    """One occurrence of the term."""

    url: str
    line: int
    column: int


@dataclass(slots=True)
class SearchReport:
    """Run summary: term, extracted and retrieved addresses, and every match."""

    term: str
    addresses: List[str] = field(default_factory=list)
    retrieved: List[str] = field(default_factory=list)
    matches: List[MatchInfo] = field(default_factory=list)

    @property
    def failed(self) -> List[str]:
        retrieved = set(self.retrieved)
        return [url for url in self.addresses if url not in retrieved]

    def as_dict(self) -> dict[str, Any]:
        output = asdict(self)
        output["failed"] = self.failed
        return output

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(run: SearchRun) -> SearchReport:
    """Search every document of *run* and gather the results into a SearchReport."""
    report = SearchReport(term=run.term)
    report.addresses = [str(a) for a in run.addresses]
    report.retrieved = [str(d.address) for d in run.documents]
    report.matches = [
        {"url": str(document.address), "line": position.line, "column": position.column}
        for document, position in run.matches()
    ]
    return report

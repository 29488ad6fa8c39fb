# File: tests/test_report.py
import json

import pytest

from linkgrep.aggregator import SearchReport, aggregate_results
from linkgrep.engine import SearchRun
from linkgrep.models import Address, Document, MatchPosition
from linkgrep.report import ReportEmitter, format_match, render_html, render_json


@pytest.fixture()
def search_run() -> SearchRun:
    addresses = (
        Address("https://a.example/notes"),
        Address("https://down.example/"),
        Address("https://b.example/<x>"),
    )
    documents = (
        Document(addresses[0], "line one\nfile here\nanother file"),
        Document(addresses[2], "no match"),
    )
    return SearchRun(term="file", addresses=addresses, documents=documents)


def test_format_match():
    line = format_match(Address("https://a.example/"), MatchPosition(3, 9))
    assert line == "https://a.example/: line 3 column 9"


def test_emitter_writes_one_line_per_match(search_run):
    lines = []
    count = ReportEmitter(lines.append).emit(search_run.documents, search_run.term)
    assert count == 2
    assert lines == [
        "https://a.example/notes: line 2 column 1",
        "https://a.example/notes: line 3 column 9",
    ]


def test_emitter_without_matches(search_run):
    lines = []
    assert ReportEmitter(lines.append).emit(search_run.documents, "absent") == 0
    assert lines == []


def test_aggregate_results(search_run):
    report = aggregate_results(search_run)
    assert isinstance(report, SearchReport)
    assert report.addresses == [
        "https://a.example/notes",
        "https://down.example/",
        "https://b.example/<x>",
    ]
    assert report.retrieved == ["https://a.example/notes", "https://b.example/<x>"]
    assert report.failed == ["https://down.example/"]
    assert report.matches == [
        {"url": "https://a.example/notes", "line": 2, "column": 1},
        {"url": "https://a.example/notes", "line": 3, "column": 9},
    ]


def test_report_json_fields(search_run):
    data = json.loads(aggregate_results(search_run).json(pretty=True))
    assert set(data) == {"term", "addresses", "retrieved", "failed", "matches"}
    assert data["term"] == "file"


def test_render_json(tmp_path, search_run):
    out = render_json(aggregate_results(search_run), tmp_path / "nested" / "matches.json")
    assert out.exists()
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["matches"][1] == {"url": "https://a.example/notes", "line": 3, "column": 9}


def test_render_html_bundled_template(tmp_path, search_run):
    out = render_html(aggregate_results(search_run), None, tmp_path / "report.html")
    html = out.read_text(encoding="utf-8")
    assert "https://a.example/notes" in html
    assert "https://down.example/" in html
    # addresses are escaped
    assert "https://b.example/&lt;x&gt;" in html
    assert "<x>" not in html


def test_render_html_custom_template(tmp_path, search_run):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "report.html.j2").write_text(
        "{{ term }}:{{ matches | length }}", encoding="utf-8"
    )
    out = render_html(aggregate_results(search_run), templates, tmp_path / "r.html")
    assert out.read_text(encoding="utf-8") == "file:2"

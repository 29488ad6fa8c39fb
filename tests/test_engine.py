# File: tests/test_engine.py
from __future__ import annotations

import logging

import pytest
from aiohttp import web

from linkgrep.config import SearchConfig
from linkgrep.engine import Engine, NoAddressesError, SearchRun, start_search
from linkgrep.models import Address, Document, Failed, FailureKind, MatchPosition, Retrieved


@pytest.mark.asyncio()
async def test_end_to_end_against_local_server(basic_config, serve, unused_tcp_port: int):
    app = web.Application()

    async def handle_notes(_):
        return web.Response(text="line one\nfile here\nanother file", content_type="text/plain")

    async def handle_other(_):
        return web.Response(text="<p>no match</p>", content_type="text/html")

    async def handle_gone(_):
        return web.Response(status=404)

    app.router.add_get("/notes", handle_notes)
    app.router.add_get("/other", handle_other)
    app.router.add_get("/gone", handle_gone)

    async for base in serve(app, unused_tcp_port):
        text = (
            f"- [notes]({base}/notes)\n"
            f"- gone: {base}/gone.\n"
            f"- other <{base}/other> and again {base}/notes\n"
        )
        run = await start_search(basic_config, text, "file", source="digest.md")

    assert [a.url for a in run.addresses] == [f"{base}/notes", f"{base}/gone", f"{base}/other"]
    assert [d.address.url for d in run.documents] == [f"{base}/notes", f"{base}/other"]
    assert [(d.address.url, p) for d, p in run.matches()] == [
        (f"{base}/notes", MatchPosition(2, 1)),
        (f"{base}/notes", MatchPosition(3, 9)),
    ]


@pytest.mark.asyncio()
async def test_engine_logs_counts(basic_config, fake_fetcher, caplog):
    url = "https://example.com/page"
    engine = Engine(basic_config, fetcher=fake_fetcher({url: Retrieved("x")}))
    lg = logging.getLogger("linkgrep")
    caplog.set_level(logging.INFO, logger="linkgrep")
    previous, lg.propagate = lg.propagate, True
    try:
        await engine.run(f"see {url}) and https://down.example/", "x", source="links.txt")
    finally:
        lg.propagate = previous
    messages = [r.getMessage() for r in caplog.records]
    assert "Extracted 2 URLs from links.txt" in messages
    assert "Retrieved 1 webpages" in messages


@pytest.mark.asyncio()
async def test_no_addresses_is_fatal(basic_config, fake_fetcher):
    engine = Engine(basic_config, fetcher=fake_fetcher({}))
    with pytest.raises(NoAddressesError):
        await engine.run("plain text without links", "term")


@pytest.mark.asyncio()
async def test_zero_pages_retrieved_is_not_fatal(basic_config, fake_fetcher):
    engine = Engine(basic_config, fetcher=fake_fetcher({}))
    run = await engine.run("https://a.example/ https://b.example/", "term")
    assert len(run.addresses) == 2
    assert run.documents == ()
    assert list(run.matches()) == []


@pytest.mark.asyncio()
async def test_engine_uses_configured_trim_chars(fake_fetcher):
    config = SearchConfig(trim_chars=".")
    engine = Engine(config, fetcher=fake_fetcher({}))
    assert [a.url for a in engine.extract("https://example.com/a)")] == ["https://example.com/a)"]


def test_search_run_matches_document_then_match_order():
    docs = (
        Document(Address("https://b.example/"), "x.x"),
        Document(Address("https://a.example/"), "\nx"),
    )
    run = SearchRun(term="x", addresses=tuple(d.address for d in docs), documents=docs)
    assert [(d.address.url, (p.line, p.column)) for d, p in run.matches()] == [
        ("https://b.example/", (1, 1)),
        ("https://b.example/", (1, 3)),
        ("https://a.example/", (2, 1)),
    ]


def test_failed_outcome_str():
    assert str(Failed(FailureKind.STATUS, "HTTP 500", status=500)) == "status: HTTP 500"
    assert str(Failed(FailureKind.TIMEOUT)) == "timeout"

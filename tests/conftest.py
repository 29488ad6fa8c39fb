# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Dict, List

import pytest
from aiohttp import web

from linkgrep.config import SearchConfig
from linkgrep.models import Address, Failed, FailureKind, RetrievalOutcome


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


class FakeFetcher:
    """ContentFetcher stand-in: canned outcomes with per-URL delays, tracks concurrency."""

    def __init__(
        self,
        outcomes: Dict[str, RetrievalOutcome],
        delays: Dict[str, float] | None = None,
    ) -> None:
        self.outcomes = outcomes
        self.delays = delays or {}
        self.calls: List[str] = []
        self.completed: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, address: Address, timeout: float | None = None) -> RetrievalOutcome:
        self.calls.append(address.url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(address.url, 0))
        finally:
            self.in_flight -= 1
        self.completed.append(address.url)
        return self.outcomes.get(address.url, Failed(FailureKind.TRANSPORT, "unknown host"))


@pytest.fixture()
def basic_config() -> SearchConfig:
    """
    Return a SearchConfig with short timeouts for network tests.
    """
    return SearchConfig(
        concurrency=4,
        timeout=2.0,
        user_agent="TestAgent/1.0",
        retry_backoff=0.0,
    )


@pytest.fixture()
def haystack_file(tmp_path) -> Path:
    """
    Markdown digest with duplicate and decorated links.
    """
    path = tmp_path / "digest.md"
    path.write_text(
        "# Weekly links\n"
        "- [asyncio intro](https://example.com/asyncio).\n"
        "- see https://example.org/page) and https://example.com/asyncio again\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def fake_fetcher():
    """The FakeFetcher class, for building canned fetchers inside tests."""
    return FakeFetcher


@pytest.fixture()
def serve():
    """The serve_app helper: ``async for base in serve(app, port): ...``."""
    return serve_app

# === FILE: linkgrep/fetcher/coordinator.py ===
"""
Concurrent retrieval of an AddressSet with per-address failure isolation.

Each fetch task is tagged with the index of its address and writes its
outcome into a fixed slot, so the result order is the address order no
matter which request finishes first.
"""
from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from aiohttp import ClientSession, ClientTimeout

from linkgrep.config import SearchConfig
from linkgrep.fetcher.fetcher import ContentFetcher
from linkgrep.logger import logger
from linkgrep.models import Address, Document, Failed, FailureKind, Retrieved, RetrievalOutcome

__all__ = ("NoAddressesError", "RetrievalCoordinator")


class NoAddressesError(ValueError):
    """Raised when there is nothing to retrieve."""


@dataclass(slots=True)
class _Progress:
    total: int
    every: int
    started: float = field(default_factory=time.monotonic)
    done: int = 0
    ok: int = 0
    timeout_err: int = 0
    other_err: int = 0

    @property
    def err(self) -> int:
        return self.timeout_err + self.other_err

    def record(self, address: Address, outcome: RetrievalOutcome) -> None:
        self.done += 1
        if isinstance(outcome, Retrieved):
            self.ok += 1
        else:
            if outcome.kind is FailureKind.TIMEOUT:
                self.timeout_err += 1
            else:
                self.other_err += 1
            logger.debug("fetch failed: %s err=%s", address.brief, outcome)
        if self.done % self.every == 0 or self.done == self.total:
            self.log("progress")

    def log(self, stage: str) -> None:
        logger.debug(
            "bulk fetch %s: done=%d/%d ok=%d err=%d timeout_err=%d other_err=%d elapsed_s=%.1f",
            stage,
            self.done,
            self.total,
            self.ok,
            self.err,
            self.timeout_err,
            self.other_err,
            time.monotonic() - self.started,
        )


class RetrievalCoordinator:
    """Runs ContentFetcher over many addresses with bounded concurrency."""
    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: SearchConfig, fetcher: Optional[ContentFetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> RetrievalCoordinator:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self.fetcher = ContentFetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def retrieve_all(
        self, addresses: Sequence[Address], concurrency_limit: Optional[int] = None
    ) -> List[Document]:
        """
        Fetch every address and return the successful Documents in address order.

        Raises ValueError for a non-positive *concurrency_limit* and
        NoAddressesError when *addresses* is empty.
        """
        limit = self.config.concurrency if concurrency_limit is None else concurrency_limit
        if limit <= 0:
            raise ValueError(f"concurrency limit must be > 0, got {limit}")
        if not addresses:
            raise NoAddressesError("no addresses to retrieve")
        fetcher = self.fetcher
        if fetcher is None:
            raise RuntimeError("Session not initialized")

        total = len(addresses)
        logger.debug("bulk fetch start: total_urls=%d concurrency=%d", total, limit)
        semaphore = asyncio.Semaphore(limit)
        slots: List[Optional[RetrievalOutcome]] = [None] * total
        progress = _Progress(total=total, every=self.config.progress_every)

        async def _run(index: int, address: Address) -> None:
            outcome = await self._fetch_with_retry(fetcher, address, semaphore)
            slots[index] = outcome
            progress.record(address, outcome)

        await asyncio.gather(*(_run(i, a) for i, a in enumerate(addresses)))
        progress.log("complete")

        return [
            Document(address, outcome.content)
            for address, outcome in zip(addresses, slots)
            if isinstance(outcome, Retrieved)
        ]

    async def _fetch_with_retry(
        self, fetcher: ContentFetcher, address: Address, semaphore: asyncio.Semaphore
    ) -> RetrievalOutcome:
        attempts = 0
        while True:
            async with semaphore:
                outcome = await fetcher.fetch(address)
            if not self._is_retryable(outcome) or attempts >= self.config.retry_times:
                return outcome
            attempts += 1
            backoff = self.backoff_delay(attempts)
            logger.debug(
                "Retry %d/%d for %s after %.2f s (%s)",
                attempts,
                self.config.retry_times,
                address.brief,
                backoff,
                outcome,
            )
            # the concurrency slot is released while sleeping
            await asyncio.sleep(backoff)

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to sleep before retry *attempt*: base * (2**attempt + jitter), capped at 60."""
        return min(60.0, self.config.retry_backoff * (2**attempt + random.random()))

    def _is_retryable(self, outcome: RetrievalOutcome) -> bool:
        if not isinstance(outcome, Failed):
            return False
        if outcome.kind in (FailureKind.TRANSPORT, FailureKind.TIMEOUT):
            return True
        return outcome.kind is FailureKind.STATUS and outcome.status in self._RETRY_STATUS

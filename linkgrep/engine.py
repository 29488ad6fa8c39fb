# File: linkgrep/engine.py
"""linkgrep.engine: orchestration of extraction, retrieval and search for one run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from linkgrep.config import SearchConfig
from linkgrep.extractor import AddressExtractor
from linkgrep.fetcher import ContentFetcher, NoAddressesError, RetrievalCoordinator
from linkgrep.logger import logger
from linkgrep.models import AddressSet, Document, MatchPosition
from linkgrep.searcher import search

__all__ = ["Engine", "NoAddressesError", "SearchRun", "start_search"]


@dataclass(frozen=True, slots=True)
class SearchRun:
    """Everything a run produced: the term, extracted addresses and retrieved documents."""

    term: str
    addresses: AddressSet
    documents: Tuple[Document, ...]

    def matches(self) -> Iterator[Tuple[Document, MatchPosition]]:
        """Lazily yield (document, position) in document order, then match order."""
        for document in self.documents:
            for position in search(document.content, self.term):
                yield document, position


class Engine:
    """Facade for the CLI and tests: extract addresses, retrieve pages, search them."""

    def __init__(self, config: SearchConfig, fetcher: Optional[ContentFetcher] = None) -> None:
        self.config = config
        self.extractor = AddressExtractor(config.trim_chars)
        self._fetcher = fetcher

    def extract(self, text: str, source: str = "input") -> AddressSet:
        addresses = self.extractor.extract(text)
        logger.info("Extracted %d URLs from %s", len(addresses), source)
        return addresses

    async def retrieve(self, addresses: AddressSet) -> List[Document]:
        """Fetch *addresses*; raises NoAddressesError when there are none."""
        logger.info("Retrieving pages...")
        async with RetrievalCoordinator(self.config, fetcher=self._fetcher) as coordinator:
            documents = await coordinator.retrieve_all(addresses, self.config.concurrency)
        logger.info("Retrieved %d webpages", len(documents))
        return documents

    async def run(self, text: str, term: str, source: str = "input") -> SearchRun:
        addresses = self.extract(text, source)
        documents = await self.retrieve(addresses)
        return SearchRun(term=term, addresses=addresses, documents=tuple(documents))


async def start_search(config: SearchConfig, text: str, term: str, source: str = "input") -> SearchRun:
    """
    Run extraction and retrieval for *text* and return the SearchRun.

    Parameters
    ----------
    config : SearchConfig
        Run configuration.
    text : str
        Whole input document.
    term : str
        Literal search term.
    source : str
        Label of the input used in log messages.
    """
    return await Engine(config).run(text, term, source)

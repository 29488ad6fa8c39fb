# File: linkgrep/fetcher/__init__.py
"""linkgrep.fetcher: network retrieval of extracted addresses."""

from .coordinator import NoAddressesError, RetrievalCoordinator
from .fetcher import ContentFetcher, is_text_mime

__all__ = ["ContentFetcher", "NoAddressesError", "RetrievalCoordinator", "is_text_mime"]

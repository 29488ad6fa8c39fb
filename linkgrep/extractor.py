# linkgrep/extractor.py
"""
Address extraction for linkgrep: find http(s) URLs in free-form text.

Extraction is best effort. Candidates are found with a permissive regex,
trailing prose/markdown delimiters are trimmed, and whatever fails URL
parsing afterwards is dropped without an error.
"""
from __future__ import annotations

import re
from typing import Iterator, Optional
from urllib.parse import urlsplit

from linkgrep.config import DEFAULT_TRIM_CHARS
from linkgrep.logger import logger
from linkgrep.models import Address, AddressSet
from linkgrep.utils import remove_duplicates

#: Scheme followed by RFC 3986 unreserved, reserved and percent characters.
URL_PATTERN = re.compile(r"https?://[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+")

_CLOSERS = {")": "(", "]": "[", "}": "{"}


def trim_candidate(candidate: str, trim_chars: str = DEFAULT_TRIM_CHARS) -> str:
    """
    Strip trailing delimiter characters from a greedy URL match.

    A closing bracket is kept when the candidate opens at least as many of
    the same kind, e.g. ``https://en.wikipedia.org/wiki/Foo_(bar)``.
    """
    end = len(candidate)
    while end:
        last = candidate[end - 1]
        if last not in trim_chars:
            break
        opener = _CLOSERS.get(last)
        if opener is not None:
            head = candidate[:end]
            if head.count(opener) >= head.count(last):
                break
        end -= 1
    return candidate[:end]


def parse_address(candidate: str) -> Optional[Address]:
    """Return an Address if *candidate* is an absolute http(s) URL with a host, else None."""
    try:
        parts = urlsplit(candidate)
        # .port raises ValueError on a non-numeric or out-of-range port
        parts.port
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return None
    try:
        # empty or over-long labels such as "a..b" cannot be resolved
        parts.hostname.encode("idna")
    except UnicodeError:
        return None
    return Address(candidate)


class AddressExtractor:
    """Finds unique web addresses in text, preserving first-seen order."""

    def __init__(self, trim_chars: str = DEFAULT_TRIM_CHARS) -> None:
        self.trim_chars = trim_chars

    def candidates(self, text: str) -> Iterator[str]:
        """Yield trimmed regex candidates in order of appearance."""
        for match in URL_PATTERN.finditer(text):
            trimmed = trim_candidate(match.group(0), self.trim_chars)
            if trimmed:
                yield trimmed

    def extract(self, text: str) -> AddressSet:
        addresses = []
        for candidate in self.candidates(text):
            address = parse_address(candidate)
            if address is None:
                logger.debug("Dropped malformed address candidate: %r", candidate)
                continue
            addresses.append(address)
        return tuple(remove_duplicates(addresses))


def extract_addresses(text: str, trim_chars: str = DEFAULT_TRIM_CHARS) -> AddressSet:
    """Return the ordered set of unique http(s) addresses found in *text*."""
    return AddressExtractor(trim_chars).extract(text)


__all__ = [
    "AddressExtractor",
    "URL_PATTERN",
    "extract_addresses",
    "parse_address",
    "trim_candidate",
]

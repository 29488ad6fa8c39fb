# linkgrep/models.py
"""
Data models shared by the linkgrep pipeline stages.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit


@dataclass(frozen=True, slots=True)
class Address:
    """Validated absolute http(s) URL, compared by its exact extracted text."""

    url: str

    def __str__(self) -> str:
        return self.url

    @property
    def brief(self) -> str:
        """``scheme://host/path`` without query or fragment, safe for logs."""
        parts = urlsplit(self.url)
        return f"{parts.scheme}://{parts.hostname or '<no-host>'}{parts.path}"


#: Unique addresses in first-seen order.
AddressSet = Tuple[Address, ...]


class FailureKind(str, enum.Enum):
    """Why a single retrieval did not produce text."""

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    STATUS = "status"
    REDIRECTS = "redirects"
    CONTENT_TYPE = "content_type"
    DECODE = "decode"


@dataclass(frozen=True, slots=True)
class Retrieved:
    content: str


@dataclass(frozen=True, slots=True)
class Failed:
    kind: FailureKind
    detail: str = ""
    status: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}" if self.detail else self.kind.value


RetrievalOutcome = Union[Retrieved, Failed]


@dataclass(frozen=True, slots=True)
class Document:
    """Text content of one successfully retrieved address."""

    address: Address
    content: str


@dataclass(frozen=True, slots=True)
class MatchPosition:
    """1-based line and column of the first character of a match."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"line {self.line} column {self.column}"

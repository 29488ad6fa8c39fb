# File: linkgrep/utils.py
"""linkgrep.utils: helpers for reading the input document and de-duplicating sequences."""

from __future__ import annotations

from pathlib import Path
from typing import Hashable, Iterable, List, Sequence, TypeVar, Union

from linkgrep.logger import logger

__all__: Sequence[str] = (
    "read_haystack",
    "remove_duplicates",
)

_T = TypeVar("_T", bound=Hashable)


def read_haystack(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """Read the whole input document as text.

    Raises FileNotFoundError when missing and UnicodeDecodeError when the file
    is not valid in *encoding*.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        logger.error("Input file not found: %s", p)
        raise FileNotFoundError(f"Input file not found: {p}")
    text = p.read_text(encoding=encoding)
    logger.debug("Read %d characters from %s", len(text), p)
    return text


def remove_duplicates(items: Iterable[_T]) -> List[_T]:
    """Drop repeated items, keeping the first occurrence of each in order."""
    items = list(items)
    unique = list(dict.fromkeys(items))
    removed = len(items) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate entries", removed)
    return unique

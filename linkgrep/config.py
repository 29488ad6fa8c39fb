# === FILE: linkgrep/config.py ===
"""
Loading and validation of the linkgrep runtime configuration.
The schema is described and checked with Pydantic.
"""
from __future__ import annotations

import codecs
import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from linkgrep import __version__

#: Trailing characters stripped from extracted addresses (markdown and prose delimiters).
DEFAULT_TRIM_CHARS = ")]}.,;:\"'>"

#: MIME types accepted as text besides ``text/*`` and ``+xml``/``+json`` suffixes.
DEFAULT_TEXT_MIME_TYPES: Tuple[str, ...] = (
    "application/json",
    "application/xml",
    "application/xhtml+xml",
    "application/javascript",
    "application/ecmascript",
    "application/x-javascript",
    "application/rss+xml",
    "application/atom+xml",
)


class SearchConfig(BaseModel):
    """Configuration for a single search run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    concurrency: int = Field(32, ge=1, description="Max simultaneous requests in flight.")
    timeout: float = Field(45.0, gt=0, description="Timeout for one request (seconds).")
    max_redirects: int = Field(10, ge=0, description="Max redirects followed per request.")
    user_agent: str = Field(
        f"linkgrep/{__version__}", min_length=1, description="User-Agent header."
    )
    retry_times: int = Field(0, ge=0, description="Retries for transient failures (5xx, 429, network).")
    retry_backoff: float = Field(1.0, ge=0, description="Base of the exponential retry backoff (seconds).")
    trim_chars: str = Field(DEFAULT_TRIM_CHARS, description="Trailing delimiters trimmed from addresses.")
    default_encoding: str = Field("utf-8", min_length=1, description="Charset used when none is declared.")
    text_mime_types: Tuple[str, ...] = Field(
        DEFAULT_TEXT_MIME_TYPES, description="Non text/* content types treated as text."
    )
    run_timeout: Optional[float] = Field(None, gt=0, description="Deadline for the whole run (seconds).")
    progress_every: int = Field(100, ge=1, description="Log retrieval progress every N completions.")

    @field_validator("default_encoding")
    def _known_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {v}") from exc
        return v

    @field_validator("text_mime_types", mode="before")
    def _lower_mime_types(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return tuple(str(item).strip().lower() for item in v)
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> SearchConfig:
    """
    Read YAML or JSON and return a validated SearchConfig.

    Without an explicit *path* the default ``configs/default.yaml`` is used when
    present, otherwise built-in defaults apply. An explicit path that does not
    exist raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return SearchConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return SearchConfig(**data)


def apply_overrides(config: SearchConfig, **overrides: Any) -> SearchConfig:
    """Return a re-validated copy of *config* with the non-None *overrides* applied."""
    values = {k: v for k, v in overrides.items() if v is not None}
    if not values:
        return config
    return SearchConfig(**{**config.model_dump(), **values})


__all__ = [
    "DEFAULT_TEXT_MIME_TYPES",
    "DEFAULT_TRIM_CHARS",
    "SearchConfig",
    "ValidationError",
    "apply_overrides",
    "load_config",
]

# linkgrep/fetcher/fetcher.py
"""
Fetcher module: one HTTP GET per address, turned into a RetrievalOutcome.
"""
from __future__ import annotations

import asyncio
import time
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, TooManyRedirects

from linkgrep.config import SearchConfig
from linkgrep.logger import logger
from linkgrep.models import Address, Failed, FailureKind, Retrieved, RetrievalOutcome


def is_text_mime(mime: str, extra_types: tuple[str, ...] = ()) -> bool:
    """True for ``text/*``, ``+xml``/``+json`` suffixes and the configured *extra_types*."""
    mime = mime.lower()
    return (
        mime.startswith("text/")
        or mime.endswith(("+xml", "+json"))
        or mime in extra_types
    )


class ContentFetcher:
    """Retrieves the decoded text of a single address. Never raises for network trouble."""

    def __init__(self, session: ClientSession, config: SearchConfig) -> None:
        self.session = session
        self.config = config

    async def fetch(self, address: Address, timeout: Optional[float] = None) -> RetrievalOutcome:
        """
        GET *address*, following up to ``max_redirects`` redirects.

        Returns Retrieved with the decoded body for a 2xx text response and
        Failed otherwise. *timeout* overrides the session timeout for this call.
        """
        started = time.monotonic()
        logger.debug("fetch start: %s", address.brief)
        options: dict = {"allow_redirects": True, "max_redirects": self.config.max_redirects}
        if timeout is not None:
            options["timeout"] = ClientTimeout(total=timeout)
        try:
            async with self.session.get(address.url, **options) as resp:
                if not 200 <= resp.status < 300:
                    return Failed(FailureKind.STATUS, f"HTTP {resp.status}", status=resp.status)
                ctype = resp.headers.get("Content-Type", "")
                mime = ctype.split(";", 1)[0].strip()
                if mime and not is_text_mime(mime, self.config.text_mime_types):
                    return Failed(FailureKind.CONTENT_TYPE, mime, status=resp.status)
                encoding = resp.charset or self.config.default_encoding
                body = await resp.read()
        except asyncio.TimeoutError:
            return Failed(FailureKind.TIMEOUT, f"no response within {timeout or self.config.timeout}s")
        except TooManyRedirects as exc:
            return Failed(FailureKind.REDIRECTS, f"more than {self.config.max_redirects} redirects: {exc}")
        except ClientError as exc:
            return Failed(FailureKind.TRANSPORT, f"{type(exc).__name__}: {exc}")
        except ValueError as exc:
            # UnicodeError included: hosts that fail IDNA encoding in the resolver
            return Failed(FailureKind.TRANSPORT, f"invalid address: {type(exc).__name__}: {exc}")

        try:
            text = body.decode(encoding)
        except (LookupError, UnicodeDecodeError) as exc:
            return Failed(FailureKind.DECODE, f"{encoding}: {exc}")

        logger.debug(
            "fetch ok: %s chars=%d elapsed_ms=%d",
            address.brief,
            len(text),
            (time.monotonic() - started) * 1000,
        )
        return Retrieved(text)

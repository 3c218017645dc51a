# === FILE: canon_scout/prober/probe.py ===
"""
Probe module: one GET per URL variant, no redirect following, then classification.

Every HTTP status is a normal, inspectable response. Only transport-level
problems (DNS, refused connection, TLS, timeout, unusable URL) count as a
failed fetch, and those are reported in the record rather than raised.
"""
from __future__ import annotations

import asyncio
import time
from typing import Callable, List, Optional, Union

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout, TCPConnector
from bs4 import BeautifulSoup, ParserRejectedMarkup
from multidict import CIMultiDictProxy
from yarl import URL

from canon_scout.config import ProbeConfig
from canon_scout.diff import highlight_difference
from canon_scout.prober.classifier import classify
from canon_scout.prober.models import FetchResult, ProbeResult
from canon_scout.variants import TokenFactory, generate_variants, normalize_original

__all__ = ("UrlProber", "extract_canonical", "fetch_variant", "probe")

Clock = Callable[[], float]

_DEFAULT_BODY_LIMIT = 2 * 1024 * 1024
_CHUNK = 64 * 1024


def _request_url(variant: str) -> Union[URL, str]:
    # yarl re-quotes by default, which would undo the case and encoding variants
    if variant.isascii() and not any(ch.isspace() for ch in variant):
        return URL(variant, encoded=True)
    return variant


def _elapsed_ms(start: float, clock: Clock) -> int:
    return int(round((clock() - start) * 1000))


def _header(headers: CIMultiDictProxy[str], name: str) -> Optional[str]:
    values = headers.getall(name, [])
    return ", ".join(values) if values else None


async def _read_capped(resp: ClientResponse, limit: int) -> bytes:
    chunks: List[bytes] = []
    size = 0
    async for chunk in resp.content.iter_chunked(_CHUNK):
        chunks.append(chunk)
        size += len(chunk)
        if size >= limit:
            break
    return b"".join(chunks)[:limit]


def extract_canonical(body: Union[bytes, str], encoding: Optional[str] = None) -> Optional[str]:
    """Return ``href`` of the first ``link[rel="canonical"]`` or ``None``.

    Markup the parser rejects is treated as a page without a canonical tag.
    """
    try:
        from_encoding = encoding if isinstance(body, bytes) else None
        soup = BeautifulSoup(body, "html.parser", from_encoding=from_encoding)
    except (ParserRejectedMarkup, LookupError, AssertionError):
        return None
    tag = soup.select_one('link[rel="canonical"]')
    if tag is None:
        return None
    href = tag.get("href")
    return href if isinstance(href, str) else None


async def fetch_variant(
    session: ClientSession,
    variant: str,
    *,
    max_body_bytes: int = _DEFAULT_BODY_LIMIT,
    clock: Clock = time.perf_counter,
) -> FetchResult:
    """Issue exactly one GET for *variant* and capture the canonical signals."""
    start = clock()
    status: Optional[int] = None
    try:
        async with session.get(_request_url(variant), allow_redirects=False) as resp:
            status = resp.status
            canonical: Optional[str] = None
            if "text/html" in resp.headers.get("Content-Type", "").lower():
                body = await _read_capped(resp, max_body_bytes)
                canonical = extract_canonical(body, resp.charset)
            return FetchResult(
                successful=True,
                duration_ms=_elapsed_ms(start, clock),
                status=status,
                robots_header=_header(resp.headers, "X-Robots-Tag"),
                link_header=_header(resp.headers, "Link"),
                location=_header(resp.headers, "Location"),
                html_canonical=canonical,
            )
    except (ClientError, asyncio.TimeoutError, ValueError):
        # status stays set when the failure happened while reading the body
        return FetchResult(successful=False, duration_ms=_elapsed_ms(start, clock), status=status)


async def probe(
    session: ClientSession,
    variant: str,
    original: str,
    *,
    max_body_bytes: int = _DEFAULT_BODY_LIMIT,
    clock: Clock = time.perf_counter,
) -> ProbeResult:
    """Fetch *variant*, diff what it reports against *original* and classify it."""
    fetch = await fetch_variant(session, variant, max_body_bytes=max_body_bytes, clock=clock)
    difference = "".join(
        (
            highlight_difference(original, fetch.html_canonical, "HTML Canonical Tag"),
            highlight_difference(original, fetch.link_header, "Link Canonical HTTP Header"),
            highlight_difference(original, fetch.location, "Redirect"),
        )
    )
    return ProbeResult(
        original_url=original,
        url_variation=variant,
        outcome=classify(variant, original, fetch),
        fetch=fetch,
        url_difference=highlight_difference(original, variant),
        difference=difference,
    )


class UrlProber:
    """Проверка всех вариантов URL через общую сессию с ограничением параллелизма."""

    def __init__(
        self,
        config: ProbeConfig,
        session: Optional[ClientSession] = None,
        *,
        token_factory: Optional[TokenFactory] = None,
    ) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._token_factory = token_factory
        self._semaphore = asyncio.Semaphore(config.concurrency)

    async def __aenter__(self) -> UrlProber:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                connector=TCPConnector(ssl=self.config.verify_ssl),
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def probe_variant(self, variant: str, original: str) -> ProbeResult:
        if not self.session:
            raise RuntimeError("Session not initialized")
        async with self._semaphore:
            return await probe(
                self.session, variant, original, max_body_bytes=self.config.max_body_bytes
            )

    async def probe_url(self, url: str) -> List[ProbeResult]:
        """Все варианты *url* в порядке генерации, по одной записи на вариант."""
        original = normalize_original(url)
        variants = generate_variants(original, token_factory=self._token_factory)
        return list(await asyncio.gather(*(self.probe_variant(v, original) for v in variants)))

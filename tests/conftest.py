# File: tests/conftest.py
import socket
from typing import AsyncIterator, List

import pytest
import pytest_asyncio
from aiohttp import ClientSession, ClientTimeout, TCPConnector, web
from aiohttp.abc import AbstractResolver

from canon_scout.aggregator import AuditReport, UrlAudit
from canon_scout.config import ProbeConfig
from canon_scout.logger import configure
from canon_scout.prober.models import FetchResult, Outcome, ProbeResult

ORIGINAL = "https://example.com/page"


class StaticResolver(AbstractResolver):
    """Resolves every host name to 127.0.0.1 so tests can use example.com-style URLs."""

    async def resolve(self, host, port=0, family=socket.AF_INET):
        return [
            {
                "hostname": host,
                "host": "127.0.0.1",
                "port": port,
                "family": socket.AF_INET,
                "proto": 0,
                "flags": socket.AI_NUMERICHOST,
            }
        ]

    async def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def reset_logging():
    """CliRunner swaps stderr; rebuild the handlers so later tests log to a live stream."""
    yield
    configure(level="INFO")


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[int]:
    """Start *app* on *port*, yield the port, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield port
    finally:
        await runner.cleanup()


@pytest.fixture()
def serve_app():
    """``async for _ in serve_app(app, port):`` runs *app* on 127.0.0.1 for the loop body."""
    return _serve_app


@pytest_asyncio.fixture
async def local_session() -> AsyncIterator[ClientSession]:
    """ClientSession whose DNS always points at the local test server."""
    connector = TCPConnector(resolver=StaticResolver(), use_dns_cache=False)
    async with ClientSession(connector=connector, timeout=ClientTimeout(total=5)) as session:
        yield session


@pytest.fixture()
def probe_config() -> ProbeConfig:
    return ProbeConfig(timeout=5.0, user_agent="TestAgent/1.0", concurrency=4)


def make_result(
    variant: str,
    outcome: Outcome,
    *,
    status=200,
    successful=True,
    canonical=None,
    location=None,
    original: str = ORIGINAL,
) -> ProbeResult:
    return ProbeResult(
        original_url=original,
        url_variation=variant,
        outcome=outcome,
        fetch=FetchResult(
            successful=successful,
            duration_ms=12,
            status=status if successful else None,
            html_canonical=canonical,
            location=location,
        ),
        url_difference="" if variant == original else f"{variant} ",
        difference="",
    )


@pytest.fixture()
def sample_results() -> List[ProbeResult]:
    return [
        make_result(ORIGINAL, Outcome.INFO, canonical=ORIGINAL),
        make_result(f"{ORIGINAL}/", Outcome.ISSUE, canonical=f"{ORIGINAL}/"),
        make_result("https://example.com/abcdefgh", Outcome.ERROR_HANDLING, status=404),
        make_result("http://example.com/page", Outcome.WARNINGS, status=500),
        make_result("https://staging.example.com/page", Outcome.INFO, successful=False),
    ]


@pytest.fixture()
def sample_report(sample_results) -> AuditReport:
    report = AuditReport()
    report.add(UrlAudit(url=ORIGINAL, results=sample_results))
    report.add(UrlAudit(url="https://broken.example/", error="RuntimeError: boom"))
    return report


@pytest.fixture()
def result_factory():
    """Factory for ProbeResult records without any network access."""
    return make_result

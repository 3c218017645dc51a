# File: tests/test_probe.py
# End-to-end probes against a local aiohttp server; every host name resolves to 127.0.0.1
from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientSession, ClientTimeout, web

from canon_scout.prober.models import Outcome
from canon_scout.prober.probe import UrlProber, extract_canonical, probe
from canon_scout.variants import generate_variants


def _html(canonical: str | None = None) -> str:
    head = f'<link rel="canonical" href="{canonical}">' if canonical else ""
    return f"<html><head>{head}<title>Page</title></head><body>Page</body></html>"


def _flags(record: dict) -> list[str]:
    return [flag.value for flag in Outcome if record[flag.value]]


# --------------------------------------------------------------------------- #
#                                   Tests                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_original_with_foreign_canonical_is_issue(
    serve_app, local_session, unused_tcp_port: int
):
    original = f"http://example.com:{unused_tcp_port}/page"
    app = web.Application()

    async def page(_):
        return web.Response(text=_html(f"{original}/"), content_type="text/html")

    app.router.add_get("/page", page)

    async for _ in serve_app(app, unused_tcp_port):
        result = await probe(local_session, original, original)

    record = result.to_dict()
    assert record["statusCode"] == 200
    assert record["htmlCanonicalTag"] == f"{original}/"
    assert record["successfulFetch"] is True
    assert _flags(record) == ["issue"]
    assert record["url_difference"] == ""
    assert record["difference"].startswith("HTML Canonical Tag Difference: ")


@pytest.mark.asyncio()
async def test_random_segment_404_is_error_handling(serve_app, local_session, unused_tcp_port: int):
    original = f"http://example.com:{unused_tcp_port}/page"
    app = web.Application()

    async def page(_):
        return web.Response(text=_html(original), content_type="text/html")

    app.router.add_get("/page", page)

    async for _ in serve_app(app, unused_tcp_port):
        result = await probe(local_session, f"{original}/randomtoken", original)

    record = result.to_dict()
    assert record["statusCode"] == 404
    assert record["successfulFetch"] is True
    assert _flags(record) == ["errorHandling"]
    assert 'color: green;">/randomtoken</span>' in record["url_difference"]


@pytest.mark.asyncio()
async def test_www_variant_redirecting_to_original_is_info(
    serve_app, local_session, unused_tcp_port: int
):
    original = f"http://example.com:{unused_tcp_port}/page"
    variant = f"http://www.example.com:{unused_tcp_port}/page"
    app = web.Application()

    async def page(request: web.Request):
        if request.host.startswith("www."):
            raise web.HTTPMovedPermanently(location=original)
        return web.Response(text=_html(original), content_type="text/html")

    app.router.add_get("/page", page)

    async for _ in serve_app(app, unused_tcp_port):
        result = await probe(local_session, variant, original)

    record = result.to_dict()
    # the redirect is reported, not followed
    assert record["statusCode"] == 301
    assert record["redirectLocation"] == original
    assert record["htmlCanonicalTag"] is None
    assert _flags(record) == ["info"]


@pytest.mark.asyncio()
async def test_http_variant_with_temporary_redirect_elsewhere_is_issue(
    serve_app, local_session, unused_tcp_port: int
):
    original = f"https://example.com:{unused_tcp_port}/page"
    variant = f"http://example.com:{unused_tcp_port}/page"
    elsewhere = f"http://example.com:{unused_tcp_port}/landing"
    app = web.Application()

    async def page(_):
        raise web.HTTPFound(location=elsewhere)

    app.router.add_get("/page", page)

    async for _ in serve_app(app, unused_tcp_port):
        result = await probe(local_session, variant, original)

    record = result.to_dict()
    assert record["statusCode"] == 302
    assert record["redirectLocation"] == elsewhere
    assert _flags(record) == ["issue"]
    assert record["difference"].startswith("Redirect Difference: ")


@pytest.mark.asyncio()
async def test_connection_refused_is_failed_fetch_info(local_session, unused_tcp_port_factory):
    port = unused_tcp_port_factory()
    original = f"http://example.com:{port}/page"

    result = await probe(local_session, original, original)

    record = result.to_dict()
    assert record["successfulFetch"] is False
    assert record["statusCode"] is None
    assert record["fetchDuration"] >= 0
    assert _flags(record) == ["info"]


@pytest.mark.asyncio()
async def test_truncated_body_keeps_status_but_fails_fetch(
    serve_app, local_session, unused_tcp_port: int
):
    original = f"http://example.com:{unused_tcp_port}/page"
    app = web.Application()

    async def truncated(request: web.Request):
        # promises far more bytes than it sends, then drops the connection
        resp = web.StreamResponse(status=200)
        resp.content_type = "text/html"
        resp.content_length = 100_000
        await resp.prepare(request)
        await resp.write(b"<html><head>")
        request.transport.close()
        return resp

    app.router.add_get("/page", truncated)

    async for _ in serve_app(app, unused_tcp_port):
        result = await probe(local_session, original, original)

    record = result.to_dict()
    assert record["successfulFetch"] is False
    assert record["statusCode"] == 200
    assert record["htmlCanonicalTag"] is None
    assert _flags(record) == ["info"]


@pytest.mark.asyncio()
async def test_request_timeout_is_failed_fetch_info(serve_app, unused_tcp_port: int):
    original = f"http://127.0.0.1:{unused_tcp_port}/slow"
    app = web.Application()

    async def slow(_):
        await asyncio.sleep(1)
        return web.Response(text=_html(), content_type="text/html")

    app.router.add_get("/slow", slow)

    async for _ in serve_app(app, unused_tcp_port):
        async with ClientSession(timeout=ClientTimeout(total=0.2)) as session:
            result = await probe(session, original, original)

    record = result.to_dict()
    assert record["successfulFetch"] is False
    assert record["statusCode"] is None
    assert 150 <= record["fetchDuration"] < 1000
    assert _flags(record) == ["info"]


@pytest.mark.asyncio()
async def test_headers_are_captured(serve_app, local_session, unused_tcp_port: int):
    original = f"http://example.com:{unused_tcp_port}/page"
    app = web.Application()

    async def page(_):
        return web.Response(
            text=_html(original),
            content_type="text/html",
            headers={
                "X-Robots-Tag": "noindex",
                "Link": f'<{original}/>; rel="canonical"',
            },
        )

    app.router.add_get("/page", page)

    async for _ in serve_app(app, unused_tcp_port):
        result = await probe(local_session, original, original)

    record = result.to_dict()
    assert record["robotsHeader"] == "noindex"
    assert record["linkRelCanonicalHeader"] == f'<{original}/>; rel="canonical"'
    assert record["htmlCanonicalTag"] == original
    assert record["redirectLocation"] is None
    assert "Link Canonical HTTP Header Difference: " in record["difference"]
    assert _flags(record) == ["info"]


@pytest.mark.asyncio()
async def test_non_html_body_is_not_parsed(serve_app, local_session, unused_tcp_port: int):
    original = f"http://example.com:{unused_tcp_port}/feed"
    app = web.Application()

    async def feed(_):
        return web.Response(text=_html("http://elsewhere.example/"), content_type="text/plain")

    app.router.add_get("/feed", feed)

    async for _ in serve_app(app, unused_tcp_port):
        result = await probe(local_session, original, original)

    assert result.fetch.html_canonical is None
    assert result.outcome is Outcome.INFO


@pytest.mark.asyncio()
async def test_probe_url_returns_one_record_per_variant(
    serve_app, local_session, probe_config, unused_tcp_port: int
):
    original = f"http://example.com:{unused_tcp_port}/page"
    app = web.Application()

    async def anything(request: web.Request):
        if request.path == "/page":
            return web.Response(text=_html(original), content_type="text/html")
        if request.path == "/page/":
            raise web.HTTPMovedPermanently(location=original)
        raise web.HTTPNotFound()

    app.router.add_route("GET", "/{tail:.*}", anything)
    token = lambda: "randomtoken"  # noqa: E731

    async for _ in serve_app(app, unused_tcp_port):
        async with UrlProber(probe_config, session=local_session, token_factory=token) as prober:
            results = await prober.probe_url(original)
        # the injected session stays open
        assert not local_session.closed

    expected = generate_variants(original, token_factory=token)
    assert [r.url_variation for r in results] == expected
    for result in results:
        assert len(_flags(result.to_dict())) == 1

    by_variant = {r.url_variation: r for r in results}
    assert by_variant[original].outcome is Outcome.INFO
    assert by_variant[f"{original}/"].outcome is Outcome.INFO
    assert by_variant[f"http://example.com:{unused_tcp_port}/randomtoken"].outcome is Outcome.ERROR_HANDLING


@pytest.mark.asyncio()
async def test_probe_url_normalizes_bare_root(
    serve_app, local_session, probe_config, unused_tcp_port: int
):
    root = f"http://example.com:{unused_tcp_port}"
    app = web.Application()

    async def index(_):
        return web.Response(text=_html(f"{root}/"), content_type="text/html")

    app.router.add_get("/", index)

    async for _ in serve_app(app, unused_tcp_port):
        async with UrlProber(probe_config, session=local_session) as prober:
            results = await prober.probe_url(root)

    assert results[0].original_url == f"{root}/"
    assert results[0].url_variation == f"{root}/"
    assert results[0].outcome is Outcome.INFO


def test_extract_canonical_first_match_only():
    html = (
        '<html><head><link rel="stylesheet" href="/s.css">'
        '<link rel="canonical" href="https://example.com/a">'
        '<link rel="canonical" href="https://example.com/b"></head></html>'
    )
    assert extract_canonical(html.encode("utf-8"), "utf-8") == "https://example.com/a"


def test_extract_canonical_missing_or_broken():
    assert extract_canonical(b"<html><head></head></html>") is None
    assert extract_canonical(b"<link rel='canonical'>") is None
    assert extract_canonical(b"\x00\xff<<<>>>not html at all") is None

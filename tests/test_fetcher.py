"""
Test the resource fetcher against a local aiohttp server
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from compliance_probe.core.config import FetcherConfig
from compliance_probe.scanner.fetcher import ResourceFetcher


async def _page(request):
    return web.Response(
        text="<html><body>Bonjour</body></html>",
        content_type="text/html",
        headers={"Link": '</api/v1/>; rel="api"'},
    )


async def _missing(request):
    return web.Response(status=404, text="not here")


async def _large(request):
    return web.Response(body=b"x" * 5000, content_type="application/octet-stream")


async def _slow(request):
    await asyncio.sleep(1)
    return web.Response(text="late")


async def _headers(request):
    return web.json_response({
        "accept": request.headers.get("Accept"),
        "language": request.headers.get("Accept-Language"),
    })


async def _redirect(request):
    raise web.HTTPFound("/page")


async def _latin1(request):
    page = '<html><head><meta charset="iso-8859-1"></head><body>Hébergeur : OVH, durée de conservation</body></html>'
    return web.Response(body=page.encode("latin-1"), content_type="text/html")


@pytest.fixture
async def server():
    app = web.Application()
    app.router.add_get("/page", _page)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/large", _large)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/headers", _headers)
    app.router.add_get("/redirect", _redirect)
    app.router.add_get("/latin1", _latin1)

    test_server = TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


async def test_successful_fetch(server):
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        result = await fetcher.fetch(str(server.make_url("/page")))

    assert result.ok, f"Fetch should succeed, got {result.error}"
    assert result.status_code == 200
    assert "Bonjour" in result.content
    assert result.headers["link"] == '</api/v1/>; rel="api"', "Header names are lower-cased"
    assert result.content_type.startswith("text/html")
    assert not result.truncated


async def test_error_status_is_data_not_exception(server):
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        result = await fetcher.fetch(str(server.make_url("/missing")))
        kept = await fetcher.fetch(str(server.make_url("/missing")), treat_error_status_as_data=True)

    assert result.error == "Request failed with status 404"
    assert result.status_code == 404
    assert kept.ok, "Error statuses can be kept as data"
    assert kept.content == "not here"


async def test_body_is_truncated_at_cap(server):
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        result = await fetcher.fetch(str(server.make_url("/large")), max_bytes=1000)

    assert result.ok
    assert len(result.content) == 1000, "Body should be cut at max_bytes"
    assert result.truncated


async def test_timeout_is_reported(server):
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        result = await fetcher.fetch(str(server.make_url("/slow")), timeout_ms=100)

    assert not result.ok
    assert result.error.startswith("Timeout"), f"Unexpected error: {result.error}"


async def test_request_headers(server):
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        result = await fetcher.fetch(str(server.make_url("/headers")), accept="application/xml")

    assert '"accept": "application/xml"' in result.content, "Per-call Accept header is sent"
    assert "fr-FR" in result.content, "French Accept-Language is sent by default"


async def test_redirects_are_followed(server):
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        result = await fetcher.fetch(str(server.make_url("/redirect")))

    assert result.ok
    assert "Bonjour" in result.content


async def test_unreachable_and_malformed_urls():
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        refused = await fetcher.fetch("http://127.0.0.1:1/", timeout_ms=2000)
        malformed = await fetcher.fetch("not a url")

    assert refused.error, "Connection failure should be reported"
    assert malformed.error, "Malformed URL should be reported"
    assert refused.status_code is None


async def test_meta_charset_is_honoured(server):
    """No charset in Content-Type, the page declares iso-8859-1 itself"""
    async with ResourceFetcher(FetcherConfig()) as fetcher:
        result = await fetcher.fetch(str(server.make_url("/latin1")))

    assert result.ok
    assert "Hébergeur" in result.content, "Accented text must survive decoding"
    assert "durée" in result.content
    assert "\ufffd" not in result.content

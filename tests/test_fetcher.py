"""Tests for resource resolution, discovery and fetching."""

import asyncio

import httpx
import pytest
import respx
from httpx import Response

from keyguard.core.exceptions import FetchError, ParseError, UrlError
from keyguard.models import ResourceKind
from keyguard.scanners.fetcher import ContentFetcher, extract_references, parse, resolve

BASE = "https://a.com/b/"


class TestResolve:
    """Test reference resolution rules."""

    def test_root_relative_drops_base_path(self):
        assert resolve(BASE, "/x") == "https://a.com/x"

    def test_protocol_relative_takes_base_scheme(self):
        assert resolve(BASE, "//cdn.a.com/y.js") == "https://cdn.a.com/y.js"
        assert resolve("http://a.com/", "//cdn.a.com/y.js") == "http://cdn.a.com/y.js"

    def test_absolute_is_unchanged(self):
        assert resolve(BASE, "http://other.com/z") == "http://other.com/z"

    def test_relative_appended_with_one_separator(self):
        assert resolve(BASE, "rel.js") == "https://a.com/b/rel.js"
        assert resolve("https://a.com/b", "rel.js") == "https://a.com/b/rel.js"
        assert resolve("https://a.com", "js/app.js") == "https://a.com/js/app.js"

    def test_root_relative_drops_userinfo(self):
        assert resolve("https://user:pw@a.com/p", "/x.js") == "https://a.com/x.js"

    @pytest.mark.parametrize("base", ["not a url", "/relative/only", "https://"])
    def test_malformed_base(self, base: str):
        with pytest.raises(UrlError):
            resolve(base, "app.js")

    @pytest.mark.parametrize("reference", ["", "   "])
    def test_empty_reference(self, reference: str):
        with pytest.raises(UrlError):
            resolve(BASE, reference)

    @pytest.mark.parametrize(
        "reference",
        ["javascript:void(0)", "data:text/javascript,alert(1)", "ftp://a.com/x.js"],
    )
    def test_non_http_scheme(self, reference: str):
        with pytest.raises(UrlError):
            resolve(BASE, reference)

    @pytest.mark.parametrize("reference", ["http://[::1/app.js", "https://a.com:port/x.js"])
    def test_invalid_absolute_url(self, reference: str):
        with pytest.raises(UrlError, match="Invalid resource URL"):
            resolve(BASE, reference)


class TestExtractReferences:
    """Test resource discovery in documents."""

    def test_document_order_and_kinds(self, page_with_resources: str):
        references = extract_references(page_with_resources)

        assert [r.kind for r in references] == [
            ResourceKind.SCRIPT_SRC,
            ResourceKind.STYLESHEET_HREF,
            ResourceKind.SCRIPT_INLINE,
        ]
        assert references[0].value == "/static/app.js"
        assert references[1].value == "css/site.css"
        assert "greeting" in references[2].value

    def test_locations(self, page_with_resources: str):
        locations = [r.location for r in extract_references(page_with_resources)]
        assert locations == [
            "JavaScript: /static/app.js",
            "CSS: css/site.css",
            "Inline JavaScript",
        ]

    def test_duplicates_are_kept(self):
        html = '<script src="a.js"></script><script src="a.js"></script>'
        assert [r.value for r in extract_references(html)] == ["a.js", "a.js"]

    def test_skips_empty_and_non_stylesheet(self):
        html = (
            '<script src=""></script>'
            "<script>   </script>"
            '<link rel="icon" href="favicon.ico">'
            '<link rel="preload" href="font.woff2">'
            '<link rel="Stylesheet" href="main.css">'
        )
        references = extract_references(html)

        assert len(references) == 1
        assert references[0].kind == ResourceKind.STYLESHEET_HREF
        assert references[0].value == "main.css"

    def test_empty_document(self):
        assert extract_references("") == []


class TestParse:
    """Test primary document parsing."""

    def test_parses_markup(self):
        soup = parse("<html><body><p>hi</p></body></html>")
        assert soup.find("p").get_text() == "hi"

    def test_binary_document(self):
        with pytest.raises(ParseError, match="not text"):
            parse("GIF89a\x01\x00\x01\x00\x00\x00;")

    def test_non_string_document(self):
        with pytest.raises(ParseError):
            parse(b"<html></html>")


class TestContentFetcher:
    """Test HTTP fetching through the fetcher."""

    @respx.mock
    async def test_fetch_text(self):
        respx.get("https://a.com/app.js").mock(return_value=Response(200, text="var x = 1;"))

        async with ContentFetcher() as fetcher:
            body = await fetcher.fetch("https://a.com/app.js")

        assert body == "var x = 1;"

    @respx.mock
    async def test_follows_redirects(self):
        respx.get("https://a.com/old.js").mock(
            return_value=Response(301, headers={"Location": "https://a.com/new.js"})
        )
        respx.get("https://a.com/new.js").mock(return_value=Response(200, text="moved"))

        async with ContentFetcher() as fetcher:
            assert await fetcher.fetch("https://a.com/old.js") == "moved"

    @respx.mock
    async def test_not_found(self):
        respx.get("https://a.com/missing.js").mock(return_value=Response(404))

        async with ContentFetcher() as fetcher:
            with pytest.raises(FetchError) as exc_info:
                await fetcher.fetch("https://a.com/missing.js")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "https://a.com/missing.js"

    @respx.mock
    async def test_timeout(self):
        respx.get("https://a.com/slow").mock(side_effect=httpx.ReadTimeout)

        async with ContentFetcher(timeout=1) as fetcher:
            with pytest.raises(FetchError, match="Timed out"):
                await fetcher.fetch("https://a.com/slow")

    @respx.mock
    async def test_connection_error(self):
        respx.get("https://down.example/").mock(side_effect=httpx.ConnectError)

        async with ContentFetcher() as fetcher:
            with pytest.raises(FetchError):
                await fetcher.fetch("https://down.example/")

    @respx.mock
    async def test_undecodable_body(self):
        respx.get("https://a.com/bin").mock(
            return_value=Response(
                200,
                content=b"\xff\xfe\xfa",
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
        )

        async with ContentFetcher() as fetcher:
            with pytest.raises(FetchError, match="Undecodable"):
                await fetcher.fetch("https://a.com/bin")

    async def test_requires_context_manager(self):
        fetcher = ContentFetcher()
        with pytest.raises(RuntimeError):
            await fetcher.fetch("https://a.com/")

    @respx.mock
    async def test_oversized_body(self):
        respx.get("https://a.com/huge.js").mock(return_value=Response(200, content=b"x" * 4096))

        async with ContentFetcher(max_bytes=1024) as fetcher:
            with pytest.raises(FetchError, match="exceeds 1024 bytes"):
                await fetcher.fetch("https://a.com/huge.js")

    @respx.mock
    async def test_body_at_size_cap(self):
        respx.get("https://a.com/exact.js").mock(return_value=Response(200, content=b"x" * 1024))

        async with ContentFetcher(max_bytes=1024) as fetcher:
            assert len(await fetcher.fetch("https://a.com/exact.js")) == 1024

    async def test_invalid_url(self):
        async with ContentFetcher() as fetcher:
            with pytest.raises(FetchError, match="Failed to fetch"):
                await fetcher.fetch("http://[::1/app.js")

    async def test_slow_body_hits_deadline(self, monkeypatch: pytest.MonkeyPatch):
        for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY"):
            monkeypatch.delenv(name.lower(), raising=False)
            monkeypatch.delenv(name, raising=False)

        async def trickle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 8\r\n\r\n")
            try:
                await writer.drain()
                for _ in range(8):
                    await asyncio.sleep(0.4)
                    writer.write(b"x")
                    await writer.drain()
            except ConnectionError:
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(trickle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        loop = asyncio.get_running_loop()

        try:
            async with ContentFetcher(timeout=1) as fetcher:
                started = loop.time()
                with pytest.raises(FetchError, match="Timed out"):
                    await fetcher.fetch(f"http://127.0.0.1:{port}/slow.txt")
                elapsed = loop.time() - started
        finally:
            server.close()

        assert elapsed < 2

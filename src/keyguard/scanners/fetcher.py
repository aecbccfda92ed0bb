"""Resource discovery and fetching for scan targets."""

import re
from typing import Any
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from keyguard.core.exceptions import FetchError, ParseError, UrlError
from keyguard.core.logging import get_logger
from keyguard.infrastructure.http import HTTPClient
from keyguard.models import ResourceKind, ResourceReference

HTTP_SCHEMES = ("http://", "https://")
SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")


def resolve(base: str, reference: str) -> str:
    """Resolve a resource reference against the page URL.

    Rules, in order: ``http(s)://`` references are returned unchanged,
    ``//host/path`` takes the base scheme, ``/path`` takes the base scheme
    and host, anything else is appended to the base with a single ``/``.
    """
    parsed = urlparse(base)
    if not parsed.scheme or not parsed.netloc:
        raise UrlError(f"Malformed base URL: {base!r}", base=base, reference=reference)

    reference = reference.strip()
    if not reference:
        raise UrlError("Empty resource reference", base=base, reference=reference)

    if reference.lower().startswith(HTTP_SCHEMES):
        resolved = reference
    elif reference.startswith("//"):
        resolved = f"{parsed.scheme}:{reference}"
    elif reference.startswith("/"):
        # Drop any userinfo from the authority
        host = parsed.netloc.rpartition("@")[2]
        resolved = f"{parsed.scheme}://{host}{reference}"
    elif SCHEME_RE.match(reference):
        raise UrlError(
            f"Unsupported reference scheme: {reference[:40]!r}",
            base=base,
            reference=reference,
        )
    else:
        resolved = f"{base.rstrip('/')}/{reference}"

    try:
        httpx.URL(resolved)
    except httpx.InvalidURL as e:
        raise UrlError(
            f"Invalid resource URL {resolved!r}: {e}",
            base=base,
            reference=reference,
        ) from e

    return resolved


def parse(document: str) -> BeautifulSoup:
    """Parse an HTML document."""
    if not isinstance(document, str):
        raise ParseError(f"Document is not text: {type(document).__name__}")
    if "\x00" in document:
        raise ParseError("Document is not text: contains NUL characters")

    try:
        return BeautifulSoup(document, "html.parser")
    except Exception as e:
        raise ParseError(f"Failed to parse document: {e}") from e


def extract_references(document: str | BeautifulSoup) -> list[ResourceReference]:
    """List external scripts, inline scripts and stylesheets in document order.

    Repeated references are kept; each occurrence is scanned on its own.
    """
    soup = document if isinstance(document, BeautifulSoup) else parse(document)
    references: list[ResourceReference] = []

    for element in soup.select("script, link[href]"):
        if element.name == "script":
            src = element.get("src")
            if src is not None:
                if src.strip():
                    references.append(
                        ResourceReference(kind=ResourceKind.SCRIPT_SRC, value=src.strip())
                    )
                continue

            body = element.get_text()
            if body.strip():
                references.append(
                    ResourceReference(kind=ResourceKind.SCRIPT_INLINE, value=body)
                )
            continue

        rel = element.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if "stylesheet" in (token.lower() for token in rel):
            href = element["href"].strip()
            if href:
                references.append(
                    ResourceReference(kind=ResourceKind.STYLESHEET_HREF, value=href)
                )

    return references


def decode_body(response: httpx.Response, content: bytes) -> str:
    """Decode a response body strictly, using the declared charset or UTF-8."""
    encoding = response.charset_encoding or "utf-8"
    try:
        return content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise FetchError(
            f"Undecodable response body ({encoding})",
            url=str(response.request.url),
            status_code=response.status_code,
        ) from e


class ContentFetcher:
    """Fetches page and sub-resource text within a deadline and a size cap."""

    def __init__(
        self,
        timeout: float | None = None,
        requests_per_second: float | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.logger = get_logger("fetcher")
        self._http = HTTPClient(
            timeout=timeout,
            requests_per_second=requests_per_second,
            max_bytes=max_bytes,
        )

    async def __aenter__(self) -> "ContentFetcher":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._http.__aexit__(*args)

    async def fetch(self, url: str) -> str:
        """GET a resource and return its decoded text."""
        try:
            response, content = await self._http.get(url)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise FetchError(f"Timed out fetching {url}", url=url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e

        if not response.is_success:
            raise FetchError(
                f"HTTP {response.status_code} fetching {url}",
                url=url,
                status_code=response.status_code,
            )

        text = decode_body(response, content)
        self.logger.debug("resource_fetched", url=url, size=len(text))
        return text

"""HTTP client wrapper."""

import asyncio
from typing import Any

import httpx
from aiolimiter import AsyncLimiter

from keyguard.core.config import get_settings
from keyguard.core.exceptions import FetchError


class HTTPClient:
    """Async HTTP client wrapper with a request deadline, a body cap and pacing."""

    def __init__(
        self,
        timeout: float | None = None,
        requests_per_second: float | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.settings = get_settings()
        self.timeout = timeout if timeout is not None else self.settings.http_timeout
        self.max_bytes = max_bytes or self.settings.max_response_bytes
        self._rate = requests_per_second or self.settings.fetch_requests_per_second
        self._limiter: AsyncLimiter | None = None
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPClient":
        self._limiter = AsyncLimiter(self._rate, 1.0)
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.settings.user_agent},
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str, **kwargs: Any) -> tuple[httpx.Response, bytes]:
        """Make GET request and read its body.

        The whole exchange, redirects and body included, must finish within
        ``timeout`` seconds or ``TimeoutError`` is raised. Bodies larger than
        ``max_bytes`` raise ``FetchError``. The body of a non-2xx response is
        not read.
        """
        if not self._client or not self._limiter:
            raise RuntimeError("Client not initialized. Use async with.")

        async with self._limiter:
            async with asyncio.timeout(self.timeout):
                async with self._client.stream("GET", url, **kwargs) as response:
                    if not response.is_success:
                        return response, b""

                    body = bytearray()
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
                        if len(body) > self.max_bytes:
                            raise FetchError(
                                f"Response from {url} exceeds {self.max_bytes} bytes",
                                url=url,
                                status_code=response.status_code,
                            )
                    return response, bytes(body)

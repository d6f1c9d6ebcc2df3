"""Outbound HTTP transport shared by the reCAPTCHA verifier."""

from typing import Any, Optional, Protocol

import httpx


class HttpTransport(Protocol):
    """What the verifier needs from a network client: a single async POST."""

    async def post(self, url: str, **kwargs: Any) -> httpx.Response: ...


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient with a configurable timeout.

    One instance per application; the timeout is the only timeout applied to
    verification calls.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.post(url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

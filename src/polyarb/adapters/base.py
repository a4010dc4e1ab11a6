"""Shared read-only JSON client for the fetch adapters."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Optional

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from polyarb.errors import AdapterError

logger = structlog.get_logger()


def _is_transient(exc: BaseException) -> bool:
    """Connect failures, 429 and 5xx are worth another attempt; other 4xx are not."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


class JSONAPIClient:
    """
    Rate-limited GET client over ``httpx.AsyncClient``.

    Subclasses add fixed query parameters and inspect responses through
    ``_default_params`` and ``_on_response``. Use as an async context manager.
    """

    name = "api"

    def __init__(
        self,
        base_url: str,
        requests_per_second: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._min_interval = 1.0 / requests_per_second
        self._next_slot = 0.0
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(30.0, connect=10.0),
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _wait_for_slot(self) -> None:
        wait = self._next_slot - time.monotonic()
        if wait > 0:
            await asyncio.sleep(wait)
        self._next_slot = time.monotonic() + self._min_interval

    def _default_params(self) -> dict[str, Any]:
        return {}

    def _on_response(self, resp: httpx.Response) -> None:
        pass

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        """GET ``path`` as JSON; an HTTP failure left after retries becomes ``AdapterError``."""
        if self._client is None:
            raise RuntimeError(f"{self.name} client used outside 'async with'")
        try:
            return await self._fetch(path, params)
        except httpx.HTTPError as e:
            raise AdapterError(self.name, f"GET {path} failed: {e}") from e

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def _fetch(self, path: str, params: Optional[dict]) -> Any:
        await self._wait_for_slot()

        query = {**self._default_params(), **(params or {})}
        resp = await self._client.get(path, params=query)
        if resp.is_error:
            logger.warning("http_error", adapter=self.name, path=path, status=resp.status_code)
        resp.raise_for_status()
        self._on_response(resp)
        return resp.json()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

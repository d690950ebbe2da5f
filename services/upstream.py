"""HTTP fetching utilities for upstream requests."""

import asyncio
import json

import httpx

from core.exceptions import (
    UpstreamConnectionError,
    UpstreamPayloadError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)
from core.request_types import UpstreamPayload


class UpstreamClient:
    """Fetch upstream resources over a shared keep-alive client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        headers: dict[str, str],
        timeout: float,
    ) -> None:
        self._client = client
        self._headers = headers
        self._timeout = timeout

    async def fetch(self, url: str) -> UpstreamPayload:
        """Perform one GET (following redirects) and return the verbatim JSON body.

        The configured timeout caps the whole call, body included. Raises an
        ``UpstreamError`` subclass on timeout, connection failure, non-2xx
        status, or a body that is not valid JSON.
        """
        try:
            async with asyncio.timeout(self._timeout):
                response = await self._client.get(
                    url,
                    headers=self._headers,
                    timeout=self._timeout,
                    follow_redirects=True,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTimeoutError(f"Upstream timeout: {e!r}", url=url) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(f"Upstream connection error: {e!r}", url=url) from e

        if not response.is_success:
            raise UpstreamStatusError(
                f"Upstream returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
                url=url,
            )

        content = response.content
        try:
            json.loads(content)
        except ValueError as e:
            raise UpstreamPayloadError(
                f"Upstream body is not JSON: {e}",
                status_code=response.status_code,
                url=url,
            ) from e

        return UpstreamPayload(
            content=content,
            media_type=response.headers.get("content-type", "application/json"),
        )

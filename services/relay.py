"""Relay orchestration: one upstream fetch per inbound call."""

import time

from fastapi import Response
from fastapi.responses import PlainTextResponse

from core.exceptions import UpstreamError
from core.protocols import RequestLogger
from core.request_types import RouteEntry
from services.upstream import UpstreamClient

FAILURE_MESSAGE = "Error fetching data"


class RelayRouter:
    """Forward a matched route to its upstream URL and relay the result."""

    def __init__(self, upstream: UpstreamClient, logger: RequestLogger) -> None:
        self._upstream = upstream
        self._logger = logger

    async def relay(self, entry: RouteEntry) -> Response:
        """Relay ``entry`` and return the response for the caller.

        Upstream failures are logged with their details and collapsed into a
        generic 500; nothing about the upstream reaches the caller.
        """
        self._logger.log_relay(entry.local_path, entry.upstream_url)
        started = time.perf_counter()
        try:
            payload = await self._upstream.fetch(entry.upstream_url)
        except UpstreamError as e:
            self._logger.log_error(entry.local_path, e.status_code, str(e))
            return PlainTextResponse(FAILURE_MESSAGE, status_code=500)

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._logger.log_success(entry.local_path, 200, elapsed_ms)
        return Response(
            content=payload.content,
            status_code=200,
            media_type=payload.media_type,
        )

"""FastAPI route handlers."""

import anyio
from fastapi import Request, Response

from core.request_types import RouteEntry

CLIENT_CLOSED_REQUEST = 499


async def handle_relay(request: Request, entry: RouteEntry) -> Response:
    """Relay a configured route, cancelling the upstream fetch if the caller leaves.

    Same shape as Starlette's ``StreamingResponse``: whichever of the relay and
    the disconnect listener finishes first cancels the other.
    """
    relay_service = request.app.state.relay_service
    response: Response | None = None

    async with anyio.create_task_group() as task_group:

        async def run_relay() -> None:
            nonlocal response
            response = await relay_service.relay(entry)
            task_group.cancel_scope.cancel()

        async def listen_for_disconnect() -> None:
            await _wait_for_disconnect(request)
            task_group.cancel_scope.cancel()

        task_group.start_soon(run_relay)
        await listen_for_disconnect()

    if response is None:
        # Caller is gone, nobody will read this response
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    return response


async def _wait_for_disconnect(request: Request) -> None:
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return

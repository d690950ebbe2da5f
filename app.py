"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.handlers import handle_relay
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import RouteEntry
from core.router import RouteMapping
from services.relay import RelayRouter
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the outbound client.
    """
    routes = RouteMapping.from_config(config)
    header_builder = HeaderBuilder(config.cors.allow_origin)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        upstream_client = httpx.AsyncClient(
            timeout=config.upstream.timeout_seconds,
            limits=limits,
            follow_redirects=True,
            transport=transport,
        )
        app.state.relay_service = RelayRouter(
            UpstreamClient(
                upstream_client,
                header_builder.build_upstream_headers(),
                config.upstream.timeout_seconds,
            ),
            logger,
        )
        try:
            yield
        finally:
            await upstream_client.aclose()

    # Exact path matching only: no trailing-slash redirects
    app = FastAPI(title="Berg Relay", version="0.1.0", lifespan=lifespan, redirect_slashes=False)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors.allow_origin],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        # CORSMiddleware skips requests without an Origin header
        response = await call_next(request)
        for key, value in header_builder.build_cors_headers().items():
            response.headers.setdefault(key, value)
        return response

    for entry in routes:
        app.add_api_route(entry.local_path, _relay_endpoint(entry), methods=["GET"])

    return app


def _relay_endpoint(entry: RouteEntry):
    async def relay(request: Request):
        return await handle_relay(request, entry)

    relay.__name__ = f"relay_{entry.local_path.strip('/').replace('/', '_')}"
    return relay

from contextlib import asynccontextmanager

import httpx
import pytest

from app import create_app
from core.config import Config, UpstreamSettings

UPSTREAM_BASE = "http://upstream.test"


class RecordingLogger:
    """In-memory RequestLogger."""

    def __init__(self):
        self.relays: list[tuple[str, str]] = []
        self.successes: list[tuple[str, int]] = []
        self.errors: list[tuple[str, int | None, str]] = []

    def log_relay(self, route, upstream_url):
        self.relays.append((route, upstream_url))

    def log_success(self, route, status, elapsed_ms):
        self.successes.append((route, status))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class FakeUpstream:
    """Records outbound requests and answers them with a handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.handler(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def config() -> Config:
    return Config(upstream=UpstreamSettings(base_url=UPSTREAM_BASE, request_timeout_ms=2000))


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def relay_client(config, logger):
    """Factory yielding an httpx client bound to a relay app with a fake upstream."""

    @asynccontextmanager
    async def _make(upstream: FakeUpstream):
        app = create_app(config, logger, transport=upstream.transport)
        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://relay.test") as client:
                yield client

    return _make

"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_relay(self, route: str, upstream_url: str) -> None: ...
    def log_success(self, route: str, status: int, elapsed_ms: float) -> None: ...
    def log_error(self, route: str, status: int | None, message: str) -> None: ...

"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RouteEntry:
    """A local path and the absolute upstream URL it relays to."""

    local_path: str
    upstream_url: str


@dataclass(frozen=True)
class UpstreamPayload:
    """Verbatim upstream body and its content type."""

    content: bytes
    media_type: str

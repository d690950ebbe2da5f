"""Route mapping - which local path relays to which upstream URL."""

from collections.abc import Iterable, Iterator
from urllib.parse import urlsplit

from core.config import Config
from core.exceptions import ConfigurationError
from core.request_types import RouteEntry


class RouteMapping:
    """Ordered, immutable table of relay routes with unique local paths."""

    def __init__(self, entries: Iterable[RouteEntry]):
        self._entries: tuple[RouteEntry, ...] = tuple(entries)
        seen: set[str] = set()
        for entry in self._entries:
            self._validate(entry)
            if entry.local_path in seen:
                raise ConfigurationError(f"Duplicate local path: {entry.local_path}")
            seen.add(entry.local_path)

    @classmethod
    def from_config(cls, config: Config) -> "RouteMapping":
        """Build the mapping by joining each route's path onto the upstream base."""
        base = config.upstream.base_url
        return cls(
            RouteEntry(route.local_path, f"{base}/{route.upstream_path.lstrip('/')}")
            for route in config.routes
        )

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _validate(entry: RouteEntry) -> None:
        if not entry.local_path.startswith("/"):
            raise ConfigurationError(f"Local path must start with '/': {entry.local_path}")
        parts = urlsplit(entry.upstream_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(f"Upstream URL must be absolute: {entry.upstream_url}")

"""Header construction for upstream requests and relayed responses."""

from importlib.metadata import PackageNotFoundError, version


def _user_agent() -> str:
    try:
        return f"berg-relay/{version('berg-relay')}"
    except PackageNotFoundError:
        return "berg-relay/0.1.0"


class HeaderBuilder:
    """Build outbound and CORS headers."""

    def __init__(self, allow_origin: str = "*"):
        self.allow_origin = allow_origin

    def build_upstream_headers(self) -> dict[str, str]:
        """Headers for every outbound fetch. Nothing from the caller is forwarded."""
        return {
            "Accept": "application/json",
            "User-Agent": _user_agent(),
        }

    def build_cors_headers(self) -> dict[str, str]:
        """Headers added to every relayed response."""
        return {"Access-Control-Allow-Origin": self.allow_origin}

"""Custom exception hierarchy for the berg relay."""


class RelayError(Exception):
    """Base exception for all relay errors."""


class ConfigurationError(RelayError):
    """Raised when configuration or the route mapping is invalid."""


class UpstreamError(RelayError):
    """Raised when a relayed call to the upstream fails.

    Attributes:
        message: Error message (internal only, never sent to callers)
        status_code: HTTP status code from upstream (optional)
        url: Upstream URL that was requested (optional)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream request exceeds the configured timeout."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, status_code=None, url=url)


class UpstreamConnectionError(UpstreamError):
    """Raised when unable to connect to the upstream."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, status_code=None, url=url)


class UpstreamStatusError(UpstreamError):
    """Upstream answered with a non-success status."""


class UpstreamPayloadError(UpstreamError):
    """Upstream body is not valid JSON."""

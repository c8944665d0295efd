from __future__ import annotations

from ..models import Provider


class AdapterError(Exception):
    """Base class for failures raised by a chat adapter."""

    def __init__(self, provider: Provider, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class UpstreamHTTPError(AdapterError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, provider: Provider, status_code: int, detail: str = "") -> None:
        super().__init__(provider, f"{provider.value} HTTP {status_code}")
        self.status_code = status_code
        self.detail = detail


class UpstreamResponseError(AdapterError):
    """The provider answered 2xx but the body could not be understood."""

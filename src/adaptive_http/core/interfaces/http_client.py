from abc import ABC, abstractmethod

from adaptive_http.core.models.request import HttpResponse, OutboundRequest

class HttpClientPort(ABC):
    @abstractmethod
    async def __aenter__(self) -> "HttpClientPort":
        """Async context manager entry method"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit method"""
        pass

    @abstractmethod
    async def send(self, request: OutboundRequest) -> HttpResponse:
        """Perform one round trip and return the raw response.

        Redirects are not followed. Implementations translate transport
        failures into `InvalidRequestUrlError`, `UpstreamTimeoutError` or
        `UpstreamConnectionError`; any HTTP status is returned, not raised.
        Must be safe to call from many concurrent invocations.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the HTTP client session"""
        pass

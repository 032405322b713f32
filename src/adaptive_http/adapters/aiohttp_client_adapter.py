# adaptive_http/adapters/aiohttp_client_adapter.py
import asyncio
import aiohttp
from typing import Optional

from adaptive_http.core.config import TimeoutConfig
from adaptive_http.core.exceptions import (
    InvalidRequestUrlError,
    ResponseParseError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
)
from adaptive_http.core.interfaces.http_client import HttpClientPort
from adaptive_http.core.models.request import HttpResponse, OutboundRequest
from adaptive_http.core.settings import logger


class AioHttpClientAdapter(HttpClientPort):
    """Shared aiohttp transport for all invocations.

    One ClientSession (and therefore one connection pool) is opened on
    `__aenter__` and reused until `close()`. Timeouts are fixed at
    construction:
    - connection_request_timeout -> ClientTimeout.connect (pool wait + connect)
    - connect_timeout            -> ClientTimeout.sock_connect
    - read_timeout               -> ClientTimeout.sock_read
    """

    def __init__(self, timeouts: Optional[TimeoutConfig] = None, connection_limit: int = 100):
        self._session: Optional[aiohttp.ClientSession] = None
        self._timeouts = timeouts or TimeoutConfig()
        self._connection_limit = connection_limit
        self._client_timeout = aiohttp.ClientTimeout(
            total=None,
            connect=self._timeouts.connection_request_seconds,
            sock_connect=self._timeouts.connect_seconds,
            sock_read=self._timeouts.read_seconds,
        )

    async def __aenter__(self):
        """Async context manager entry"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._client_timeout,
                connector=aiohttp.TCPConnector(limit=self._connection_limit),
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
        return False

    async def send(self, request: OutboundRequest) -> HttpResponse:
        if self._session is None:
            raise RuntimeError("HTTP client not initialized. Use 'async with' context manager.")

        url = request.uri
        try:
            async with self._session.request(
                request.method,
                url,
                headers=request.headers,
                data=request.body,
                allow_redirects=False,
            ) as response:
                # Only 2xx bodies are ever classified, others are left unread
                text = await response.text() if 200 <= response.status < 300 else None
                return HttpResponse(
                    status=response.status,
                    content_type=response.headers.get("Content-Type"),
                    text=text,
                    headers={k: v for k, v in response.headers.items()},
                )

        except aiohttp.InvalidURL as invalid_url:
            raise InvalidRequestUrlError(
                f"Invalid url: {url}", url=url, diagnostic=str(invalid_url)
            ) from invalid_url

        except (asyncio.TimeoutError, aiohttp.ServerTimeoutError) as timeout_error:
            logger.debug("Timeout when requesting remote service. URL: %s", url)
            raise UpstreamTimeoutError(
                f"Request to {url} timed out", url=url, diagnostic=repr(timeout_error)
            ) from timeout_error

        except (aiohttp.ClientError, OSError) as client_error:
            logger.debug(
                "Connection error when requesting remote service. URL: %s, Error: %s",
                url,
                str(client_error),
            )
            raise UpstreamConnectionError(
                f"Connection error calling {url}", url=url, diagnostic=str(client_error)
            ) from client_error

        except UnicodeDecodeError as decode_error:
            raise ResponseParseError(
                f"Response body from {url} could not be decoded: {decode_error}"
            ) from decode_error

        except ValueError as value_error:
            # yarl and aiohttp reject some malformed URLs with a plain ValueError
            raise InvalidRequestUrlError(
                f"Invalid url: {url}", url=url, diagnostic=str(value_error)
            ) from value_error

    async def close(self) -> None:
        """Close the session"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

"""
Transport - Pluggable HTTP exchange layer.

The engine only needs "send a request, get a response or an error".
AiohttpTransport is the default; tests and embedders can supply any
other Transport implementation.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Mapping, Optional

import aiohttp

from dexpaprika.exceptions import TransportError
from dexpaprika.request import OutboundRequest


logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class TransportResponse(ABC):
    """A response whose body has not been read yet."""

    @property
    @abstractmethod
    def status(self) -> int:
        """HTTP status code."""
        pass

    @property
    @abstractmethod
    def headers(self) -> Mapping[str, str]:
        """Response headers."""
        pass

    @property
    @abstractmethod
    def url(self) -> str:
        """Final response URL."""
        pass

    @abstractmethod
    async def read(self) -> bytes:
        """Read the full body."""
        pass

    @abstractmethod
    def release(self) -> None:
        """Return the connection. Safe to call more than once."""
        pass


class Transport(ABC):
    """Sends one request and returns one response."""

    @abstractmethod
    async def send(self, request: OutboundRequest) -> TransportResponse:
        """
        Dispatch a request.

        Raises:
            TransportError: If no HTTP response was obtained
        """
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None


# ============================================================
# AIOHTTP TRANSPORT
# ============================================================

class AiohttpResponse(TransportResponse):
    """TransportResponse over aiohttp.ClientResponse."""

    def __init__(self, response: aiohttp.ClientResponse) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    @property
    def url(self) -> str:
        return str(self._response.url)

    async def read(self) -> bytes:
        buf = bytearray()
        try:
            async for chunk in self._response.content.iter_chunked(READ_CHUNK_SIZE):
                buf.extend(chunk)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(
                f"reading body from {self.url} failed after {len(buf)} bytes: {e!r}",
                request_url=self.url,
                original_error=e,
                partial_body=bytes(buf),
            ) from e
        return bytes(buf)

    def release(self) -> None:
        self._response.release()


class AiohttpTransport(Transport):
    """
    Default transport backed by aiohttp.

    Owns its ClientSession unless one is supplied. The session timeout
    bounds a single attempt; overall call deadlines belong to the engine.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._timeout_seconds = timeout_seconds

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout_seconds),
            )
            self._owns_session = True
        return self._session

    async def send(self, request: OutboundRequest) -> TransportResponse:
        session = await self._get_session()
        try:
            response = await session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(
                f"{request.method} {request.url} failed: {e!r}",
                request_url=request.url,
                original_error=e,
            ) from e
        return AiohttpResponse(response)

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            logger.debug("[transport] Closed owned aiohttp session")

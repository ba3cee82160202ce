"""
DexPaprika Client - Entry point for the API.

Wires the request builder, the optional rate gate, the execution engine
and the endpoint services together. Safe to share between tasks.
"""

import logging
from typing import Any, Mapping, Optional

import aiohttp

from dexpaprika.config import ClientConfig
from dexpaprika.engine import Decoder, ExecutionEngine, Response
from dexpaprika.exceptions import ClientClosedError, ConfigurationError
from dexpaprika.rate_limit import RateGate
from dexpaprika.request import OutboundRequest, RequestBuilder
from dexpaprika.services import (
    NetworksService,
    PoolsService,
    SearchService,
    TokensService,
    UtilsService,
)
from dexpaprika.transport import AiohttpTransport, Transport


logger = logging.getLogger(__name__)


class DexPaprikaClient:
    """
    Async client for the DexPaprika API.

    Usage:
        async with DexPaprikaClient() as client:
            networks = await client.networks.list()
            pools = await client.pools.list_by_network("ethereum", ListOptions(limit=10))
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[Transport] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """
        Args:
            config: Client configuration, defaults when None
            transport: Custom transport; takes precedence over session
            session: Existing aiohttp session for the default transport,
                left open by close()

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self._config = config or ClientConfig()

        problems = self._config.validate()
        if problems:
            raise ConfigurationError(
                f"Invalid client configuration: {'; '.join(problems)}",
                problems=problems,
            )

        if transport is not None:
            self._transport = transport
            self._owns_transport = False
        else:
            self._transport = AiohttpTransport(
                session=session,
                timeout_seconds=self._config.timeout_seconds,
            )
            self._owns_transport = True

        self._builder = RequestBuilder(self._config.base_url, self._config.user_agent)

        self._rate_gate: Optional[RateGate] = None
        if self._config.rate_limit_per_second is not None:
            self._rate_gate = RateGate(self._config.rate_limit_per_second)

        self._engine = ExecutionEngine(
            self._transport,
            retry=self._config.retry,
            rate_gate=self._rate_gate,
        )
        self._closed = False

        # Endpoint services
        self.networks = NetworksService(self)
        self.pools = PoolsService(self)
        self.tokens = TokensService(self)
        self.search = SearchService(self)
        self.utils = UtilsService(self)

        logger.info(
            f"[client] Initialized: base_url={self._config.base_url}, "
            f"max_retries={self._config.retry.max_retries}, "
            f"rate_limit={self._config.rate_limit_per_second}"
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def engine(self) -> ExecutionEngine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> OutboundRequest:
        """Build a request against the configured base address."""
        return self._builder.build(method, path, body=body, params=params)

    async def execute(
        self,
        request: OutboundRequest,
        decoder: Optional[Decoder] = None,
        timeout: Optional[float] = None,
    ) -> Response:
        """
        Execute a built request with gating, retries and classification.

        Raises:
            ClientClosedError: If the client was closed
            APIError: Typed error for any failed call
        """
        self._check_open()
        return await self._engine.execute(request, decoder=decoder, timeout=timeout)

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        decoder: Optional[Decoder] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        GET a path and return the decoded value.

        Without a decoder the parsed JSON is returned.
        """
        self._check_open()
        request = self.build_request("GET", path, params=params)
        response = await self.execute(
            request,
            decoder=decoder or _identity,
            timeout=timeout,
        )
        return response.data

    def _check_open(self) -> None:
        if self._closed:
            raise ClientClosedError("Client is closed")

    async def close(self) -> None:
        """Stop the rate gate and release the owned transport."""
        if self._closed:
            return
        self._closed = True
        if self._rate_gate is not None:
            self._rate_gate.stop()
        if self._owns_transport:
            await self._transport.close()
        logger.info(f"[client] Closed: {self._engine.get_stats()}")

    async def __aenter__(self) -> "DexPaprikaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<DexPaprikaClient(base_url={self._config.base_url}, closed={self._closed})>"


def _identity(value: Any) -> Any:
    return value

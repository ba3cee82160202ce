"""
DexPaprika Package - Async client for the DexPaprika DEX data API.

Features:
- Request building against a configurable base address
- Client-wide outbound rate limiting
- Bounded retries with exponential backoff for transient failures
- Typed errors with a stable failure kind
- Endpoint services, paginators and an optional TTL cache

Quick Start:
    from dexpaprika import ClientConfig, DexPaprikaClient, ListOptions

    async def main():
        config = ClientConfig(rate_limit_per_second=5)
        async with DexPaprikaClient(config) as client:
            networks = await client.networks.list()
            pools = await client.pools.list_by_network(
                "ethereum",
                ListOptions(limit=10, order_by="volume_usd", sort="desc"),
            )
            for pool in pools.pools:
                print(f"{pool.dex_name}: {pool.id} ${pool.volume_usd:,.0f}")

Error Handling:
    try:
        details = await client.pools.get_details("ethereum", "0x...")
    except APIError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            ...
"""

from dexpaprika.cache import Cache, CachedClient, InMemoryCache
from dexpaprika.client import DexPaprikaClient
from dexpaprika.config import ClientConfig, RetryConfig, compute_backoff
from dexpaprika.engine import ExecutionEngine, Response
from dexpaprika.errors import classify_response, is_retryable
from dexpaprika.exceptions import (
    APIError,
    ClientClosedError,
    ConfigurationError,
    DexPaprikaError,
    ErrorKind,
    NoMorePagesError,
    TransportError,
)
from dexpaprika.models import (
    Dex,
    DexesResponse,
    DexInfo,
    ListOptions,
    Network,
    OHLCVOptions,
    OHLCVRecord,
    PageInfo,
    Pool,
    PoolDetails,
    PoolsResponse,
    SearchResult,
    Stats,
    TimeIntervalMetrics,
    Token,
    TokenDetails,
    TokenSummary,
    Transaction,
    TransactionsResponse,
)
from dexpaprika.pagination import DexesPaginator, PoolsPaginator, TransactionsPaginator
from dexpaprika.rate_limit import RateGate
from dexpaprika.request import OutboundRequest, RequestBuilder
from dexpaprika.transport import AiohttpTransport, Transport, TransportResponse

__all__ = [
    # Client
    "DexPaprikaClient",
    "ClientConfig",
    "RetryConfig",
    "compute_backoff",
    # Engine
    "ExecutionEngine",
    "Response",
    "RequestBuilder",
    "OutboundRequest",
    "RateGate",
    "Transport",
    "TransportResponse",
    "AiohttpTransport",
    # Errors
    "DexPaprikaError",
    "APIError",
    "ErrorKind",
    "ConfigurationError",
    "TransportError",
    "ClientClosedError",
    "NoMorePagesError",
    "classify_response",
    "is_retryable",
    # Models
    "Network",
    "Dex",
    "DexesResponse",
    "DexInfo",
    "PageInfo",
    "Token",
    "Pool",
    "PoolsResponse",
    "PoolDetails",
    "TimeIntervalMetrics",
    "OHLCVRecord",
    "Transaction",
    "TransactionsResponse",
    "TokenSummary",
    "TokenDetails",
    "SearchResult",
    "Stats",
    "ListOptions",
    "OHLCVOptions",
    # Pagination
    "PoolsPaginator",
    "DexesPaginator",
    "TransactionsPaginator",
    # Cache
    "Cache",
    "InMemoryCache",
    "CachedClient",
]

__version__ = "1.0.0"

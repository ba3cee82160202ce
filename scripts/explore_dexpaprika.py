"""
Live walkthrough of the DexPaprika client.

Demonstrates:
- Configuration from environment / .env
- Networks, pools and token lookups
- Pagination and caching
- Typed error handling

Usage:
    python scripts/explore_dexpaprika.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dexpaprika import (
    APIError,
    CachedClient,
    ClientConfig,
    DexPaprikaClient,
    ErrorKind,
    ListOptions,
    PoolsPaginator,
)


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-5s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def print_banner(text: str) -> None:
    """Print a banner."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


async def show_networks(client: DexPaprikaClient) -> None:
    print_banner("Networks")
    networks = await client.networks.list()
    for network in networks[:10]:
        print(f"  {network.id:<20} {network.display_name}")
    print(f"  ... {len(networks)} networks total")


async def show_top_pools(client: DexPaprikaClient) -> None:
    print_banner("Top Ethereum pools by volume")
    opts = ListOptions(limit=5, order_by="volume_usd", sort="desc")
    paginator = PoolsPaginator(client, opts).for_network("ethereum")
    await paginator.get_next_page()
    for pool in paginator.current_page:
        pair = "/".join(t.symbol for t in pool.tokens)
        print(f"  {pool.dex_name:<16} {pair:<16} ${pool.volume_usd:>16,.0f}")


async def show_cached_stats(client: DexPaprikaClient) -> None:
    print_banner("Stats (cached)")
    cached = CachedClient(client, ttl=60)
    stats = await cached.get_stats()
    await cached.get_stats()
    print("  " + " ".join(f"{name}={value}" for name, value in stats.to_dict().items()))
    print(f"  cache: {cached.cache.stats()}")


async def show_error_handling(client: DexPaprikaClient) -> None:
    print_banner("Error handling")
    try:
        await client.tokens.get_details("ethereum", "0x0000000000000000000000000000000000000000")
    except APIError as e:
        level = "expected" if e.kind is ErrorKind.NOT_FOUND else "unexpected"
        print(f"  {level}: {e}")


async def main():
    """Run the walkthrough."""
    config = ClientConfig.from_env()
    if config.rate_limit_per_second is None:
        config = config.with_overrides(rate_limit_per_second=5)

    try:
        async with DexPaprikaClient(config) as client:
            await show_networks(client)
            await show_top_pools(client)
            await show_cached_stats(client)
            await show_error_handling(client)
            print(f"\n  engine: {client.engine.get_stats()}\n")
    except Exception as e:
        logger.error(f"Walkthrough failed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    asyncio.run(main())

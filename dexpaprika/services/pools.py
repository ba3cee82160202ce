"""
Pools service - pool listings, details, OHLCV and transactions.
"""

from typing import Any, List, Optional

from dexpaprika.models import (
    ListOptions,
    OHLCVOptions,
    OHLCVRecord,
    PoolDetails,
    PoolsResponse,
    TransactionsResponse,
)
from dexpaprika.services.base import BaseService, page_params, segment


def _list_params(opts: Optional[ListOptions]) -> dict[str, Any]:
    return opts.to_params() if opts is not None else {}


class PoolsService(BaseService):
    """Endpoints under /pools and /networks/{network}/pools."""

    async def list(
        self,
        opts: Optional[ListOptions] = None,
        timeout: Optional[float] = None,
    ) -> PoolsResponse:
        """Retrieve top pools across all networks."""
        return await self._get(
            "/pools",
            PoolsResponse.from_dict,
            params=_list_params(opts),
            timeout=timeout,
        )

    async def list_by_network(
        self,
        network_id: str,
        opts: Optional[ListOptions] = None,
        timeout: Optional[float] = None,
    ) -> PoolsResponse:
        """Retrieve pools on a specific network."""
        return await self._get(
            f"/networks/{segment(network_id)}/pools",
            PoolsResponse.from_dict,
            params=_list_params(opts),
            timeout=timeout,
        )

    async def list_by_dex(
        self,
        network_id: str,
        dex_id: str,
        opts: Optional[ListOptions] = None,
        timeout: Optional[float] = None,
    ) -> PoolsResponse:
        """Retrieve pools of one DEX on a network."""
        return await self._get(
            f"/networks/{segment(network_id)}/dexes/{segment(dex_id)}/pools",
            PoolsResponse.from_dict,
            params=_list_params(opts),
            timeout=timeout,
        )

    async def get_details(
        self,
        network_id: str,
        pool_address: str,
        inversed: bool = False,
        timeout: Optional[float] = None,
    ) -> PoolDetails:
        """
        Retrieve details for one pool.

        Args:
            inversed: Quote prices as token1/token0
        """
        params = {"inversed": "true"} if inversed else None
        return await self._get(
            f"/networks/{segment(network_id)}/pools/{segment(pool_address)}",
            PoolDetails.from_dict,
            params=params,
            timeout=timeout,
        )

    async def get_ohlcv(
        self,
        network_id: str,
        pool_address: str,
        opts: Optional[OHLCVOptions] = None,
        timeout: Optional[float] = None,
    ) -> List[OHLCVRecord]:
        """Retrieve OHLCV candles for a pool."""
        params = opts.to_params() if opts is not None else {}
        return await self._get(
            f"/networks/{segment(network_id)}/pools/{segment(pool_address)}/ohlcv",
            OHLCVRecord.list_from,
            params=params,
            timeout=timeout,
        )

    async def get_transactions(
        self,
        network_id: str,
        pool_address: str,
        page: int = 0,
        limit: int = 0,
        cursor: str = "",
        timeout: Optional[float] = None,
    ) -> TransactionsResponse:
        """Retrieve transactions for a pool, by page or by cursor."""
        params = page_params(page, limit)
        if cursor:
            params["cursor"] = cursor
        return await self._get(
            f"/networks/{segment(network_id)}/pools/{segment(pool_address)}/transactions",
            TransactionsResponse.from_dict,
            params=params,
            timeout=timeout,
        )

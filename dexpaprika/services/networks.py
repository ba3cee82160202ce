"""
Networks service - supported chains and their DEXes.
"""

from typing import Any, List, Optional

from dexpaprika.models import DexesResponse, Network
from dexpaprika.services.base import BaseService, page_params, segment


def _networks_from(data: Any) -> List[Network]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list of networks, got {type(data).__name__}")
    return [Network.from_dict(item) for item in data]


class NetworksService(BaseService):
    """GET /networks and /networks/{id}/dexes."""

    async def list(self, timeout: Optional[float] = None) -> List[Network]:
        """Retrieve all supported blockchain networks."""
        return await self._get("/networks", _networks_from, timeout=timeout)

    async def list_dexes(
        self,
        network_id: str,
        page: int = 0,
        limit: int = 0,
        timeout: Optional[float] = None,
    ) -> DexesResponse:
        """Retrieve the DEXes available on a network."""
        return await self._get(
            f"/networks/{segment(network_id)}/dexes",
            DexesResponse.from_dict,
            params=page_params(page, limit),
            timeout=timeout,
        )

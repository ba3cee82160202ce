"""
Tokens service - token details and the pools that hold a token.
"""

from typing import Optional

from dexpaprika.models import ListOptions, PoolsResponse, TokenDetails
from dexpaprika.services.base import BaseService, segment


class TokensService(BaseService):
    """Endpoints under /networks/{network}/tokens."""

    async def get_details(
        self,
        network_id: str,
        token_address: str,
        timeout: Optional[float] = None,
    ) -> TokenDetails:
        """Retrieve details for one token."""
        return await self._get(
            f"/networks/{segment(network_id)}/tokens/{segment(token_address)}",
            TokenDetails.from_dict,
            timeout=timeout,
        )

    async def get_pools(
        self,
        network_id: str,
        token_address: str,
        opts: Optional[ListOptions] = None,
        additional_token_address: str = "",
        timeout: Optional[float] = None,
    ) -> PoolsResponse:
        """
        Retrieve pools containing a token.

        Args:
            additional_token_address: Only pools that also hold this token
        """
        params = opts.to_params() if opts is not None else {}
        if additional_token_address:
            params["address"] = additional_token_address
        return await self._get(
            f"/networks/{segment(network_id)}/tokens/{segment(token_address)}/pools",
            PoolsResponse.from_dict,
            params=params,
            timeout=timeout,
        )

"""
Search service.
"""

from typing import Optional

from dexpaprika.models import SearchResult
from dexpaprika.services.base import BaseService


class SearchService(BaseService):
    """GET /search."""

    async def search(self, query: str, timeout: Optional[float] = None) -> SearchResult:
        """Search tokens, pools and DEXes. The query is encoded exactly once."""
        return await self._get(
            "/search",
            SearchResult.from_dict,
            params={"query": query},
            timeout=timeout,
        )

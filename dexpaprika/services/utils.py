"""
Utils service - ecosystem statistics.
"""

from typing import Optional

from dexpaprika.models import Stats
from dexpaprika.services.base import BaseService


class UtilsService(BaseService):
    """GET /stats."""

    async def get_stats(self, timeout: Optional[float] = None) -> Stats:
        return await self._get("/stats", Stats.from_dict, timeout=timeout)

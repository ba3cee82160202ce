"""
Endpoint services exposed on DexPaprikaClient.
"""

from dexpaprika.services.base import BaseService
from dexpaprika.services.networks import NetworksService
from dexpaprika.services.pools import PoolsService
from dexpaprika.services.search import SearchService
from dexpaprika.services.tokens import TokensService
from dexpaprika.services.utils import UtilsService

__all__ = [
    "BaseService",
    "NetworksService",
    "PoolsService",
    "SearchService",
    "TokensService",
    "UtilsService",
]

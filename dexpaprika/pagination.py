"""
Pagination - Walk paged list endpoints page by page.

Usage:
    paginator = PoolsPaginator(client, ListOptions(limit=100)).for_network("ethereum")
    while paginator.has_next_page():
        await paginator.get_next_page()
        for pool in paginator.current_page:
            ...

    # or simply
    async for pool in PoolsPaginator(client).for_network("ethereum"):
        ...
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING, AsyncIterator, Generic, List, Optional, TypeVar

from dexpaprika.exceptions import NoMorePagesError
from dexpaprika.models import (
    Dex,
    DexesResponse,
    ListOptions,
    PageInfo,
    Pool,
    PoolsResponse,
    Transaction,
    TransactionsResponse,
)

if TYPE_CHECKING:
    from dexpaprika.client import DexPaprikaClient


logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 50

T = TypeVar("T")


class Paginator(ABC, Generic[T]):
    """
    Base paginator.

    A page is the last one when it holds fewer items than the limit, or
    when page_info says no page follows it. A failed fetch is recorded
    and ends the walk.
    """

    def __init__(self, client: "DexPaprikaClient", limit: int, page: int = 0) -> None:
        self._client = client
        self._limit = limit if limit > 0 else DEFAULT_PAGE_LIMIT
        self._page = page
        self._fetched = False
        self._items: List[T] = []
        self._page_info = PageInfo()
        self._error: Optional[BaseException] = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def current_page(self) -> List[T]:
        """Items of the most recently fetched page."""
        return self._items

    @property
    def page_info(self) -> PageInfo:
        return self._page_info

    @property
    def error(self) -> Optional[BaseException]:
        """The error that stopped pagination, if any."""
        return self._error

    def has_next_page(self) -> bool:
        if self._error is not None:
            return False
        if not self._fetched:
            return True
        if len(self._items) < self._limit:
            return False
        if self._page_info.page + 1 >= self._page_info.total_pages:
            return False
        return True

    async def get_next_page(self) -> List[T]:
        """
        Fetch the next page and make it current.

        Raises:
            NoMorePagesError: If the last page was already fetched
            APIError: If the fetch fails (also kept on .error)
        """
        if not self.has_next_page():
            raise NoMorePagesError("no more pages")

        page = self._page + 1 if self._fetched else self._page
        try:
            items, page_info = await self._fetch(page)
        except Exception as e:
            self._error = e
            logger.warning(f"[paginator] {self.__class__.__name__} stopped at page {page}: {e}")
            raise

        self._page = page
        self._fetched = True
        self._items = items
        self._page_info = page_info
        self._after_fetch()
        return items

    @abstractmethod
    async def _fetch(self, page: int) -> tuple[List[T], PageInfo]:
        """Fetch one page."""
        pass

    def _after_fetch(self) -> None:
        pass

    async def __aiter__(self) -> AsyncIterator[T]:
        while self.has_next_page():
            for item in await self.get_next_page():
                yield item


class PoolsPaginator(Paginator[Pool]):
    """Pages through pools: all, per network, per DEX or per token."""

    def __init__(self, client: "DexPaprikaClient", opts: Optional[ListOptions] = None) -> None:
        opts = opts or ListOptions()
        super().__init__(client, opts.limit, opts.page)
        self._options = replace(opts, limit=self._limit)
        self._network_id = ""
        self._dex_id = ""
        self._token_id = ""
        self._second_token = ""

    def for_network(self, network_id: str) -> "PoolsPaginator":
        self._network_id = network_id
        return self

    def for_dex(self, network_id: str, dex_id: str) -> "PoolsPaginator":
        self._network_id = network_id
        self._dex_id = dex_id
        return self

    def for_token(
        self,
        network_id: str,
        token_id: str,
        second_token: str = "",
    ) -> "PoolsPaginator":
        self._network_id = network_id
        self._token_id = token_id
        self._second_token = second_token
        return self

    async def _fetch(self, page: int) -> tuple[List[Pool], PageInfo]:
        opts = replace(self._options, page=page)
        resp: PoolsResponse
        if self._token_id:
            resp = await self._client.tokens.get_pools(
                self._network_id, self._token_id, opts, self._second_token
            )
        elif self._dex_id:
            resp = await self._client.pools.list_by_dex(self._network_id, self._dex_id, opts)
        elif self._network_id:
            resp = await self._client.pools.list_by_network(self._network_id, opts)
        else:
            resp = await self._client.pools.list(opts)
        return resp.pools, resp.page_info


class DexesPaginator(Paginator[Dex]):
    """Pages through the DEXes of one network."""

    def __init__(self, client: "DexPaprikaClient", network_id: str, limit: int = 0) -> None:
        super().__init__(client, limit)
        self._network_id = network_id

    async def _fetch(self, page: int) -> tuple[List[Dex], PageInfo]:
        resp: DexesResponse = await self._client.networks.list_dexes(
            self._network_id, page, self._limit
        )
        return resp.dexes, resp.page_info


class TransactionsPaginator(Paginator[Transaction]):
    """
    Pages through a pool's transactions.

    The id of the last transaction seen is sent as the cursor for the
    following page.
    """

    def __init__(
        self,
        client: "DexPaprikaClient",
        network_id: str,
        pool_address: str,
        limit: int = 0,
    ) -> None:
        super().__init__(client, limit)
        self._network_id = network_id
        self._pool_address = pool_address
        self._cursor = ""

    @property
    def cursor(self) -> str:
        return self._cursor

    async def _fetch(self, page: int) -> tuple[List[Transaction], PageInfo]:
        resp: TransactionsResponse = await self._client.pools.get_transactions(
            self._network_id,
            self._pool_address,
            page=page,
            limit=self._limit,
            cursor=self._cursor,
        )
        return resp.transactions, resp.page_info

    def _after_fetch(self) -> None:
        if self._items:
            self._cursor = self._items[-1].id

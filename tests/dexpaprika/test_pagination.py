"""
Pagination Tests.
"""

import pytest

from dexpaprika import (
    APIError,
    DexesPaginator,
    ListOptions,
    NoMorePagesError,
    PoolsPaginator,
    TransactionsPaginator,
)


def pools_page(ids, page, total_pages, limit):
    return {
        "pools": [{"id": pool_id} for pool_id in ids],
        "page_info": {"limit": limit, "page": page, "total_items": 0, "total_pages": total_pages},
    }


class TestPoolsPaginator:
    """Tests for PoolsPaginator."""

    @pytest.mark.asyncio
    async def test_walks_all_pages(self, make_client):
        client, transport = make_client(
            (200, pools_page(["a", "b"], 0, 3, 2)),
            (200, pools_page(["c", "d"], 1, 3, 2)),
            (200, pools_page(["e"], 2, 3, 2)),
        )
        paginator = PoolsPaginator(client, ListOptions(limit=2)).for_network("ethereum")

        seen = []
        while paginator.has_next_page():
            await paginator.get_next_page()
            seen.extend(p.id for p in paginator.current_page)

        assert seen == ["a", "b", "c", "d", "e"]
        assert transport.dispatches == 3
        assert [r.query.get("page") for r in transport.requests] == [None, "1", "2"]
        assert all(r.path == "/networks/ethereum/pools" for r in transport.requests)

    @pytest.mark.asyncio
    async def test_full_last_page_stops_on_page_info(self, make_client):
        client, transport = make_client((200, pools_page(["a", "b"], 0, 1, 2)))
        paginator = PoolsPaginator(client, ListOptions(limit=2))

        await paginator.get_next_page()

        assert not paginator.has_next_page()
        with pytest.raises(NoMorePagesError):
            await paginator.get_next_page()
        assert transport.dispatches == 1

    @pytest.mark.asyncio
    async def test_default_limit(self, make_client):
        client, transport = make_client((200, pools_page([], 0, 0, 50)))
        paginator = PoolsPaginator(client)

        await paginator.get_next_page()

        assert paginator.limit == 50
        assert transport.requests[0].query == {"limit": "50"}
        assert transport.requests[0].path == "/pools"

    @pytest.mark.asyncio
    async def test_scopes(self, make_client):
        client, transport = make_client((200, pools_page([], 0, 0, 50)))

        await PoolsPaginator(client).for_dex("ethereum", "uniswap").get_next_page()
        await PoolsPaginator(client).for_token("ethereum", "0xa", "0xb").get_next_page()

        assert transport.requests[0].path == "/networks/ethereum/dexes/uniswap/pools"
        assert transport.requests[1].path == "/networks/ethereum/tokens/0xa/pools"
        assert transport.requests[1].query["address"] == "0xb"

    @pytest.mark.asyncio
    async def test_error_is_recorded(self, make_client):
        client, _ = make_client((404, {"error": "unknown network"}))
        paginator = PoolsPaginator(client).for_network("nowhere")

        with pytest.raises(APIError):
            await paginator.get_next_page()

        assert isinstance(paginator.error, APIError)
        assert not paginator.has_next_page()

    @pytest.mark.asyncio
    async def test_async_iteration(self, make_client):
        client, _ = make_client(
            (200, pools_page(["a", "b"], 0, 2, 2)),
            (200, pools_page(["c"], 1, 2, 2)),
        )

        ids = [pool.id async for pool in PoolsPaginator(client, ListOptions(limit=2))]

        assert ids == ["a", "b", "c"]


class TestDexesPaginator:
    """Tests for DexesPaginator."""

    @pytest.mark.asyncio
    async def test_short_page_is_last(self, make_client):
        client, transport = make_client((200, {
            "dexes": [{"dex_id": "d1"}],
            "page_info": {"limit": 10, "page": 0, "total_items": 1, "total_pages": 5},
        }))
        paginator = DexesPaginator(client, "ethereum", limit=10)

        dexes = await paginator.get_next_page()

        assert dexes[0].id == "d1"
        assert not paginator.has_next_page()
        assert transport.requests[0].path == "/networks/ethereum/dexes"


class TestTransactionsPaginator:
    """Tests for TransactionsPaginator."""

    @pytest.mark.asyncio
    async def test_cursor_follows_last_transaction(self, make_client):
        def page(ids, number):
            return {
                "transactions": [{"id": tx_id} for tx_id in ids],
                "page_info": {"limit": 2, "page": number, "total_items": 4, "total_pages": 3},
            }

        client, transport = make_client((200, page(["t1", "t2"], 0)), (200, page(["t3"], 1)))
        paginator = TransactionsPaginator(client, "ethereum", "0xpool", limit=2)

        await paginator.get_next_page()
        assert paginator.cursor == "t2"
        await paginator.get_next_page()

        assert paginator.cursor == "t3"
        assert not paginator.has_next_page()
        assert "cursor" not in transport.requests[0].query
        assert transport.requests[1].query == {"page": "1", "limit": "2", "cursor": "t2"}

"""
Client Tests.

============================================================
PURPOSE
============================================================
DexPaprikaClient wiring and lifecycle, plus end-to-end calls through
the default aiohttp transport against a local aiohttp.web server.

============================================================
"""

import contextlib

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from dexpaprika import (
    APIError,
    ClientClosedError,
    ClientConfig,
    ConfigurationError,
    DexPaprikaClient,
    ErrorKind,
    RetryConfig,
    Stats,
)
from dexpaprika.transport import AiohttpTransport


FAST_RETRY = RetryConfig(max_retries=2, retry_wait_min_seconds=0.01, retry_wait_max_seconds=0.02)


@contextlib.asynccontextmanager
async def running_server(app: web.Application):
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


def config_for(server: test_utils.TestServer, **overrides) -> ClientConfig:
    return ClientConfig(base_url=str(server.make_url("/")), retry=FAST_RETRY, **overrides)


# ============================================================
# WIRING TESTS
# ============================================================

class TestClientWiring:
    """Tests for construction and lifecycle."""

    def test_invalid_config_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DexPaprikaClient(ClientConfig(base_url="not a url"))

        assert exc_info.value.problems

    def test_default_transport(self):
        client = DexPaprikaClient()

        assert isinstance(client._transport, AiohttpTransport)
        assert client.engine.rate_gate is None

    def test_build_request_uses_config(self, make_client):
        client, _ = make_client(user_agent="custom-agent")

        request = client.build_request("GET", "/networks", params={"limit": 5})

        assert request.url == "https://api.test/networks?limit=5"
        assert request.headers["User-Agent"] == "custom-agent"

    @pytest.mark.asyncio
    async def test_get_returns_parsed_json(self, make_client):
        client, transport = make_client((200, {"chains": 4}))

        data = await client.get("/stats")

        assert data == {"chains": 4}
        assert transport.requests[0].url == "https://api.test/stats"

    @pytest.mark.asyncio
    async def test_get_with_decoder(self, make_client):
        client, _ = make_client((200, {"chains": 4}))

        stats = await client.get("/stats", decoder=Stats.from_dict)

        assert stats == Stats(chains=4)

    @pytest.mark.asyncio
    async def test_closed_client_rejects_calls(self, make_client):
        client, transport = make_client((200, b"{}"))
        request = client.build_request("GET", "/stats")
        await client.close()

        with pytest.raises(ClientClosedError):
            await client.execute(request)
        with pytest.raises(ClientClosedError):
            await client.get("/stats")
        assert transport.dispatches == 0
        assert client.closed

    @pytest.mark.asyncio
    async def test_supplied_transport_not_closed(self, make_client):
        client, transport = make_client()

        await client.close()

        assert not transport.closed

    @pytest.mark.asyncio
    async def test_close_stops_rate_gate(self, make_client):
        client, _ = make_client(rate_limit_per_second=5)
        gate = client.engine.rate_gate

        async with client:
            assert not gate.stopped

        assert gate.stopped

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, make_client):
        client, _ = make_client()

        await client.close()
        await client.close()

        assert client.closed


# ============================================================
# END-TO-END TESTS
# ============================================================

class TestEndToEnd:
    """Calls through AiohttpTransport against a real server."""

    @pytest.mark.asyncio
    async def test_success_and_headers(self):
        seen = {}

        async def stats(request: web.Request) -> web.Response:
            seen["user_agent"] = request.headers.get("User-Agent")
            seen["accept"] = request.headers.get("Accept")
            return web.json_response({"chains": 20, "factories": 3, "pools": 100, "tokens": 50})

        app = web.Application()
        app.router.add_get("/stats", stats)

        async with running_server(app) as server:
            async with DexPaprikaClient(config_for(server, user_agent="e2e/1.0")) as client:
                result = await client.utils.get_stats()

        assert result == Stats(chains=20, factories=3, pools=100, tokens=50)
        assert seen == {"user_agent": "e2e/1.0", "accept": "application/json"}

    @pytest.mark.asyncio
    async def test_retry_after_503(self):
        calls = []

        async def flaky(request: web.Request) -> web.Response:
            calls.append(request.path)
            if len(calls) == 1:
                return web.json_response({"error": "try later"}, status=503)
            return web.json_response([{"id": "ethereum", "display_name": "Ethereum"}])

        app = web.Application()
        app.router.add_get("/networks", flaky)

        async with running_server(app) as server:
            async with DexPaprikaClient(config_for(server)) as client:
                networks = await client.networks.list()

        assert len(calls) == 2
        assert networks[0].id == "ethereum"
        assert networks[0].display_name == "Ethereum"

    @pytest.mark.asyncio
    async def test_not_found(self):
        async def missing(request: web.Request) -> web.Response:
            return web.json_response({"error": "Resource not found"}, status=404)

        app = web.Application()
        app.router.add_get("/networks/{network}/pools/{address}", missing)

        async with running_server(app) as server:
            async with DexPaprikaClient(config_for(server)) as client:
                with pytest.raises(APIError) as exc_info:
                    await client.pools.get_details("ethereum", "0xdead")

        error = exc_info.value
        assert error.kind is ErrorKind.NOT_FOUND
        assert error.message == "Resource not found"
        assert str(error) == "not found: Resource not found (status code: 404)"

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        app = web.Application()
        async with running_server(app) as server:
            config = config_for(server)
        # Server is gone, the port now refuses connections

        async with DexPaprikaClient(config) as client:
            with pytest.raises(APIError) as exc_info:
                await client.get("/stats")

        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR
        assert exc_info.value.retries == FAST_RETRY.max_retries

    @pytest.mark.asyncio
    async def test_supplied_session_left_open(self):
        async def stats(request: web.Request) -> web.Response:
            return web.json_response({})

        app = web.Application()
        app.router.add_get("/stats", stats)

        async with running_server(app) as server:
            async with aiohttp.ClientSession() as session:
                async with DexPaprikaClient(config_for(server), session=session) as client:
                    await client.utils.get_stats()
                assert not session.closed

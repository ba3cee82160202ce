"""
Shared test fixtures.

FakeTransport replays a script of outcomes, one per dispatch, and records
what it was sent. After the script runs out the last outcome repeats.
"""

import asyncio
import json
from typing import Any, Mapping, Optional, Union

import pytest

from dexpaprika import ClientConfig, DexPaprikaClient, RetryConfig
from dexpaprika.exceptions import TransportError
from dexpaprika.request import OutboundRequest
from dexpaprika.transport import Transport, TransportResponse


class FakeResponse(TransportResponse):
    """Scripted response."""

    def __init__(
        self,
        status: int = 200,
        body: Union[bytes, str, Any] = b"{}",
        headers: Optional[Mapping[str, str]] = None,
        read_error: Optional[BaseException] = None,
        url: str = "",
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        elif not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self._status = status
        self._body = body
        self._headers = dict(headers or {"Content-Type": "application/json"})
        self._read_error = read_error
        self._url = url
        self.released = 0

    @property
    def status(self) -> int:
        return self._status

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    @property
    def url(self) -> str:
        return self._url

    async def read(self) -> bytes:
        if self._read_error is not None:
            raise self._read_error
        return self._body

    def release(self) -> None:
        self.released += 1


class FakeTransport(Transport):
    """
    Scripted transport.

    Each script step is a FakeResponse, an (status, body) tuple, or an
    exception instance to raise from send().
    """

    def __init__(self, *script: Any, delay: float = 0.0) -> None:
        self.script = list(script) or [FakeResponse()]
        self.delay = delay
        self.requests: list[OutboundRequest] = []
        self.responses: list[FakeResponse] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    @property
    def dispatches(self) -> int:
        return len(self.requests)

    async def send(self, request: OutboundRequest) -> TransportResponse:
        self.requests.append(request)
        index = min(len(self.requests), len(self.script)) - 1
        step = self.script[index]

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        if isinstance(step, BaseException):
            raise step
        if isinstance(step, tuple):
            step = FakeResponse(*step)
        # Fresh copy per dispatch so release counts stay per attempt
        response = FakeResponse(
            status=step.status,
            body=step._body,
            headers=step.headers,
            read_error=step._read_error,
            url=request.url,
        )
        self.responses.append(response)
        return response

    async def close(self) -> None:
        self.closed = True


def network_error(message: str = "connection refused") -> TransportError:
    return TransportError(message, original_error=ConnectionRefusedError(message))


@pytest.fixture
def fast_retry() -> RetryConfig:
    """Retry policy with millisecond waits."""
    return RetryConfig(
        max_retries=3,
        retry_wait_min_seconds=0.01,
        retry_wait_max_seconds=0.05,
    )


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_network_error():
    return network_error


@pytest.fixture
def make_client(fast_retry):
    """Factory for a client over a FakeTransport."""

    def _make(*script: Any, **config_overrides: Any) -> tuple[DexPaprikaClient, FakeTransport]:
        transport = FakeTransport(*script)
        config = ClientConfig(base_url="https://api.test", retry=fast_retry)
        if config_overrides:
            config = config.with_overrides(**config_overrides)
        return DexPaprikaClient(config, transport=transport), transport

    return _make

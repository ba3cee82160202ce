"""
Execution Engine - Runs one logical API call.

============================================================
PURPOSE
============================================================
Gate -> attempt -> classify -> retry or return.

STATES:
    Idle -> Gating -> Attempting -> Success
                          |
                          +-> Retrying -> Attempting
                          +-> Failed

RULES:
- Attempts are bounded by RetryConfig.max_retries (+1 initial)
- Backoff is min(wait_min * 2**(k-1), wait_max), no jitter
- Only retryable kinds are retried; everything else fails at once
- A decode failure on a 2xx body is never retried
- One in-flight exchange per call; every response is released
- The caller's timeout covers gating, all attempts and all backoffs

============================================================
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from dexpaprika.config import RetryConfig
from dexpaprika.errors import (
    classify_response,
    create_cancelled_error,
    create_decode_error,
    create_network_error,
    create_read_error,
)
from dexpaprika.exceptions import TransportError
from dexpaprika.rate_limit import RateGate
from dexpaprika.request import OutboundRequest
from dexpaprika.transport import Transport


logger = logging.getLogger(__name__)

Decoder = Callable[[Any], Any]

# Failures that mean "no usable HTTP exchange happened"
TRANSPORT_FAILURES = (TransportError, OSError, asyncio.TimeoutError)


class Response:
    """
    Outcome of a successful call (also attached to typed errors).

    The body is fully read before the handle is returned, so the
    underlying connection is already released.
    """

    def __init__(
        self,
        status: int,
        headers: Mapping[str, str],
        url: str,
        body: bytes,
        attempts: int,
    ) -> None:
        self.status = status
        self.headers = headers
        self.url = url
        self.body = body
        self.attempts = attempts
        self.data: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)

    def __repr__(self) -> str:
        return f"<Response(status={self.status}, attempts={self.attempts}, url={self.url})>"


@dataclass
class _CallState:
    """Progress of one call, read when a deadline fires."""
    stage: str = "starting"
    attempts: int = 0


class ExecutionEngine:
    """
    Retrying executor for OutboundRequest objects.

    Usage:
        engine = ExecutionEngine(AiohttpTransport(), RetryConfig(max_retries=2))
        response = await engine.execute(request, decoder=Stats.from_dict, timeout=10)
        stats = response.data
    """

    def __init__(
        self,
        transport: Transport,
        retry: Optional[RetryConfig] = None,
        rate_gate: Optional[RateGate] = None,
    ) -> None:
        self._transport = transport
        self._retry = retry or RetryConfig()
        self._rate_gate = rate_gate

        if self._retry.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        # Counters
        self._call_count = 0
        self._attempt_count = 0
        self._retry_count = 0
        self._success_count = 0
        self._error_count = 0

    @property
    def retry(self) -> RetryConfig:
        return self._retry

    @property
    def rate_gate(self) -> Optional[RateGate]:
        return self._rate_gate

    async def execute(
        self,
        request: OutboundRequest,
        decoder: Optional[Decoder] = None,
        timeout: Optional[float] = None,
    ) -> Response:
        """
        Execute a request under the retry policy.

        Args:
            request: Request template, cloned for every attempt
            decoder: Optional callable applied to the parsed JSON body;
                its result is stored on Response.data
            timeout: Deadline in seconds for the whole call, None for none

        Returns:
            Response

        Raises:
            APIError: Typed error for any failed call
            asyncio.CancelledError: If the calling task is cancelled
        """
        self._call_count += 1
        state = _CallState()

        if timeout is not None and timeout <= 0:
            self._error_count += 1
            raise create_cancelled_error("starting", 0)

        start_time = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._run(request, decoder, state),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            self._error_count += 1
            logger.warning(
                f"[engine] {request.method} {request.url} cancelled while "
                f"{state.stage} after {state.attempts} attempt(s)"
            )
            raise create_cancelled_error(state.stage, state.attempts, e) from e
        except Exception:
            self._error_count += 1
            raise

        self._success_count += 1
        latency_ms = (time.monotonic() - start_time) * 1000
        logger.debug(
            f"[engine] {request.method} {request.url} -> {response.status} "
            f"in {latency_ms:.1f}ms ({response.attempts} attempt(s))"
        )
        return response

    async def _run(
        self,
        request: OutboundRequest,
        decoder: Optional[Decoder],
        state: _CallState,
    ) -> Response:
        if self._rate_gate is not None:
            state.stage = "waiting for rate permit"
            await self._rate_gate.acquire()

        max_retries = self._retry.max_retries

        for attempt in range(max_retries + 1):
            if attempt > 0:
                backoff = self._retry.backoff_for(attempt)
                state.stage = "backing off"
                self._retry_count += 1
                logger.debug(
                    f"[engine] Retry {attempt}/{max_retries} for {request.url} in {backoff:.2f}s"
                )
                await asyncio.sleep(backoff)

            state.stage = "dispatching"
            state.attempts = attempt + 1
            self._attempt_count += 1

            try:
                raw = await self._transport.send(request.clone())
            except TRANSPORT_FAILURES as e:
                if attempt == max_retries:
                    logger.error(
                        f"[engine] Network error after {max_retries} retries for "
                        f"{request.method} {request.url}: {e}"
                    )
                    raise create_network_error(max_retries, e) from e
                logger.warning(
                    f"[engine] Network error on attempt {attempt + 1}/{max_retries + 1} "
                    f"for {request.url}: {e}"
                )
                continue

            state.stage = "reading response"
            status = raw.status
            try:
                body = await raw.read()
            except TRANSPORT_FAILURES as e:
                if attempt == max_retries:
                    partial = e.partial_body if isinstance(e, TransportError) else b""
                    raise create_read_error(
                        status, max_retries, raw_response=partial, original_error=e
                    ) from e
                logger.warning(
                    f"[engine] Failed reading body (status {status}) on attempt "
                    f"{attempt + 1}/{max_retries + 1} for {request.url}: {e}"
                )
                continue
            finally:
                raw.release()

            response = Response(
                status=status,
                headers=raw.headers,
                url=raw.url,
                body=body,
                attempts=attempt + 1,
            )

            if not response.ok:
                error = classify_response(status, body, response)
                error.retries = attempt
                if error.retryable and attempt < max_retries:
                    logger.warning(
                        f"[engine] {error.kind.value} (status {status}) on attempt "
                        f"{attempt + 1}/{max_retries + 1} for {request.url}"
                    )
                    continue
                raise error

            if decoder is not None:
                state.stage = "decoding response"
                try:
                    response.data = decoder(json.loads(body))
                except (ValueError, TypeError, KeyError, AttributeError) as e:
                    raise create_decode_error(status, body, response, e) from e

            return response

        # max_retries >= 0 guarantees the loop returns or raises
        raise AssertionError("retry loop exhausted without an outcome")

    def get_stats(self) -> dict[str, Any]:
        """Get call statistics."""
        return {
            "calls": self._call_count,
            "attempts": self._attempt_count,
            "retries": self._retry_count,
            "successes": self._success_count,
            "errors": self._error_count,
        }

from __future__ import annotations

import asyncio
import functools
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional

import httpx
from prometheus_client import Counter
from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception_type, stop_after_attempt, wait_incrementing

from .errors import (
    ConfigurationError,
    ExhaustedRetriesError,
    FetchCancelledError,
    RedirectLimitError,
    ResponseDecodingError,
    TransportError,
)
from .utils import DEFAULT_USER_AGENT, browser_headers, is_absolute_http_url

logger = logging.getLogger("kleinanzeigen-fetcher")

FETCH_ATTEMPTS = Counter("fetch_attempts_total", "Outbound fetch attempts", ["outcome"])
FETCH_EXHAUSTED = Counter("fetch_exhausted_total", "Fetches that ran out of attempts")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class FetchRequest:
    target: str
    max_attempts: int
    timeout: float

    def validate(self) -> None:
        if not is_absolute_http_url(self.target):
            raise ConfigurationError(f"target must be an absolute http(s) URL, got {self.target!r}")
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int) or self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be an integer >= 1, got {self.max_attempts!r}")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or not self.timeout > 0:
            raise ConfigurationError(f"timeout must be > 0 seconds, got {self.timeout!r}")


@dataclass(frozen=True)
class FetchResponse:
    url: str
    final_url: str
    status_code: int
    content: bytes
    attempts: int
    headers: Dict[str, str] = field(default_factory=dict)
    encoding: Optional[str] = None

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8", errors="replace")


class ResilientFetcher:
    """GET a URL, retrying transport failures with linear backoff.

    Any HTTP response counts as success, whatever its status. Only transport
    failures (timeouts, connect/DNS errors, resets) are retried; the delay
    before attempt ``i + 1`` is ``base_delay * i``. Redirects are followed
    inside a single attempt.
    """

    def __init__(
        self,
        base_delay: float = 1.0,
        max_redirects: int = 5,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        if base_delay < 0:
            raise ConfigurationError("base_delay must be >= 0")
        if max_redirects < 0:
            raise ConfigurationError("max_redirects must be >= 0")
        self.base_delay = float(base_delay)
        self.max_redirects = max_redirects
        self.headers = browser_headers(user_agent)
        self.transport = transport
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "ResilientFetcher":
        return cls(
            base_delay=settings.fetch_base_delay_seconds,
            max_redirects=settings.fetch_max_redirects,
            user_agent=settings.user_agent,
            **kwargs,
        )

    async def fetch(
        self,
        target: str,
        max_attempts: int,
        timeout: float,
        *,
        cancel: asyncio.Event | None = None,
    ) -> FetchResponse:
        request = FetchRequest(target=target, max_attempts=max_attempts, timeout=timeout)
        request.validate()
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError(f"fetch of {target} cancelled before the first attempt")

        retrying = AsyncRetrying(
            stop=stop_after_attempt(request.max_attempts),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=retry_if_exception_type(TransportError),
            sleep=functools.partial(self._backoff, cancel=cancel),
            before_sleep=self._log_backoff,
        )
        result: FetchResponse | None = None
        async with httpx.AsyncClient(
            headers=self.headers,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            transport=self.transport,
        ) as client:
            try:
                async for attempt in retrying:
                    with attempt:
                        result = await self._attempt(client, request, attempt.retry_state.attempt_number, cancel)
            except RetryError as exc:
                last = exc.last_attempt.exception()
                FETCH_EXHAUSTED.inc()
                logger.error("Giving up on %s after %d attempt(s)", request.target, request.max_attempts)
                raise ExhaustedRetriesError(request.target, request.max_attempts, last) from last
        return result

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        request: FetchRequest,
        number: int,
        cancel: asyncio.Event | None,
    ) -> FetchResponse:
        logger.info("Request to: %s (attempt %d/%d)", request.target, number, request.max_attempts)
        started = time.perf_counter()
        try:
            response = await self._until_cancelled(client.get(request.target, timeout=request.timeout), cancel)
        except httpx.TooManyRedirects as exc:
            FETCH_ATTEMPTS.labels(outcome="redirect_limit").inc()
            raise RedirectLimitError(f"more than {self.max_redirects} redirects for {request.target}") from exc
        except httpx.DecodingError as exc:
            # the server answered, so this is not retried
            FETCH_ATTEMPTS.labels(outcome="decoding_error").inc()
            raise ResponseDecodingError(f"undecodable response body from {request.target}: {exc}") from exc
        except httpx.TransportError as exc:
            FETCH_ATTEMPTS.labels(outcome="transport_error").inc()
            logger.warning("Request failed (attempt %d): %s: %s", number, type(exc).__name__, exc)
            raise TransportError(request.target, number, exc) from exc

        FETCH_ATTEMPTS.labels(outcome="response").inc()
        logger.info(
            "Got %d from %s in %.0f ms",
            response.status_code,
            response.url,
            (time.perf_counter() - started) * 1000,
        )
        return FetchResponse(
            url=request.target,
            final_url=str(response.url),
            status_code=response.status_code,
            content=response.content,
            attempts=number,
            headers=dict(response.headers),
            encoding=response.encoding,
        )

    async def _backoff(self, seconds: float, cancel: asyncio.Event | None) -> None:
        await self._until_cancelled(self._sleep(seconds), cancel)

    @staticmethod
    async def _until_cancelled(aw: Awaitable, cancel: asyncio.Event | None):
        """Await ``aw`` unless ``cancel`` gets set first, in which case ``aw`` is cancelled."""
        if cancel is None:
            return await aw
        work = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (work, waiter):
                if not task.done():
                    task.cancel()
            await asyncio.gather(work, waiter, return_exceptions=True)
        if not work.cancelled() and work.done() and waiter.cancelled():
            return work.result()
        raise FetchCancelledError("fetch cancelled")

    @staticmethod
    def _log_backoff(state: RetryCallState) -> None:
        logger.info(
            "Waiting %.1fs before attempt %d",
            state.next_action.sleep if state.next_action else 0.0,
            state.attempt_number + 1,
        )


async def fetch(
    target: str,
    max_attempts: int = 2,
    timeout: float = 10.0,
    *,
    cancel: asyncio.Event | None = None,
    **options,
) -> FetchResponse:
    """One-off fetch; ``options`` go to :class:`ResilientFetcher` (base_delay, transport...)."""
    return await ResilientFetcher(**options).fetch(target, max_attempts, timeout, cancel=cancel)

"""In-memory query cache for the admin client.

Queries are keyed by tuples; ``invalidate_queries`` matches by prefix, so
invalidating ``("galleries",)`` also marks every ``("galleries", ...)`` entry
stale. Concurrent fetches for one key share a single task.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from blogcms.client.api import ApiError

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]

DEFAULT_RETRY = 3
MAX_RETRY_DELAY = 30.0
_UNSET: Any = object()


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        # Los filtros sin valor no forman parte de la clave.
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items() if v is not None))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def query_key(key: Any) -> tuple:
    """Normalise a key (tuple, list or scalar) into a hashable tuple."""
    if isinstance(key, (list, tuple)):
        return tuple(_freeze(part) for part in key)
    return (_freeze(key),)


def default_retry_delay(failure_count: int) -> float:
    return min(2.0 ** (failure_count - 1), MAX_RETRY_DELAY)


def should_retry(error: BaseException) -> bool:
    # 4xx no cambia al reintentar; una cancelación tampoco se reintenta.
    if not isinstance(error, Exception):
        return False
    return not (isinstance(error, ApiError) and error.is_client_error)


@dataclass
class QueryState:
    data: Any = None
    error: BaseException | None = None
    status: str = "pending"
    updated_at: float | None = None
    is_invalidated: bool = False
    fetch_task: asyncio.Task | None = None

    @property
    def is_fetching(self) -> bool:
        return self.fetch_task is not None and not self.fetch_task.done()

    def is_stale(self, stale_time: float | None) -> bool:
        if self.status != "success" or self.is_invalidated:
            return True
        if stale_time is None:
            return False
        return time.monotonic() - (self.updated_at or 0.0) >= stale_time


class QueryClient:
    def __init__(
        self,
        *,
        retry: bool | int = DEFAULT_RETRY,
        retry_delay: Callable[[int], float] = default_retry_delay,
        stale_time: float | None = None,
    ) -> None:
        self.retry = retry
        self.retry_delay = retry_delay
        self.stale_time = stale_time
        self._queries: dict[tuple, QueryState] = {}

    # ---------------- Lectura de la caché ----------------
    def get_query_state(self, key: Any) -> QueryState | None:
        return self._queries.get(query_key(key))

    def get_query_data(self, key: Any) -> Any:
        state = self.get_query_state(key)
        return state.data if state else None

    def is_fetching(self, key: Any) -> bool:
        state = self.get_query_state(key)
        return bool(state and state.is_fetching)

    def keys(self) -> list[tuple]:
        return list(self._queries)

    # ---------------- Fetch ----------------
    async def fetch_query(
        self,
        key: Any,
        fn: Fetcher,
        *,
        retry: bool | int | None = None,
        enabled: bool = True,
        stale_time: float | None = _UNSET,
    ) -> Any:
        """Return cached data while fresh, otherwise fetch (sharing any in-flight fetch)."""
        normalized = query_key(key)
        state = self._queries.setdefault(normalized, QueryState())
        if not enabled:
            return state.data

        window = self.stale_time if stale_time is _UNSET else stale_time
        if not state.is_fetching and not state.is_stale(window):
            return state.data

        task = state.fetch_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._run(normalized, state, fn, self._retries(retry)))
            state.fetch_task = task

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            # set_query_data() o clear() reemplazaron el fetch en curso.
            return self.get_query_data(normalized)

    def _retries(self, retry: bool | int | None) -> int:
        value = self.retry if retry is None else retry
        if value is True:
            return DEFAULT_RETRY
        if value is False:
            return 0
        return max(int(value), 0)

    def _wait(self, retry_state: RetryCallState) -> float:
        return self.retry_delay(retry_state.attempt_number)

    async def _run(self, key: tuple, state: QueryState, fn: Fetcher, retries: int) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(retries + 1),
            wait=self._wait,
            retry=retry_if_exception(should_retry),
            reraise=True,
        )
        try:
            data = await retrying(fn)
        except Exception as exc:
            if self._queries.get(key) is state:
                state.error = exc
                state.status = "error"
            logger.debug("Query failed", extra={"key": key, "attempts": retrying.statistics.get("attempt_number")})
            raise

        if self._queries.get(key) is state:
            state.data = data
            state.error = None
            state.status = "success"
            state.updated_at = time.monotonic()
            state.is_invalidated = False
        return data

    # ---------------- Escritura / invalidación ----------------
    def set_query_data(self, key: Any, data: Any) -> Any:
        """Overwrite a cached value in place. The entry is fresh and nothing is left in flight."""
        state = self._queries.setdefault(query_key(key), QueryState())
        self._cancel(state)
        state.data = data
        state.error = None
        state.status = "success"
        state.updated_at = time.monotonic()
        state.is_invalidated = False
        return data

    def invalidate_queries(self, prefix: Any = (), *, exact: bool = False) -> int:
        """Mark stale every key starting with ``prefix`` (or equal to it when ``exact``)."""
        target = query_key(prefix)
        count = 0
        for key, state in self._queries.items():
            matches = key == target if exact else key[: len(target)] == target
            if matches:
                state.is_invalidated = True
                count += 1
        return count

    def clear(self) -> None:
        for state in self._queries.values():
            self._cancel(state)
        self._queries.clear()

    @staticmethod
    def _cancel(state: QueryState) -> None:
        if state.fetch_task is not None and not state.fetch_task.done():
            state.fetch_task.cancel()
        state.fetch_task = None


class Query:
    """A bound query: cache key, fetcher and options, fetched on demand."""

    def __init__(
        self,
        client: QueryClient,
        key: Any,
        fn: Fetcher,
        *,
        retry: bool | int | None = None,
        enabled: bool = True,
        stale_time: float | None = _UNSET,
    ) -> None:
        self.client = client
        self.key = query_key(key)
        self.fn = fn
        self.retry = retry
        self.enabled = enabled
        self.stale_time = stale_time

    async def fetch(self) -> Any:
        return await self.client.fetch_query(
            self.key, self.fn, retry=self.retry, enabled=self.enabled, stale_time=self.stale_time
        )

    async def refetch(self) -> Any:
        self.client.invalidate_queries(self.key, exact=True)
        return await self.fetch()

    @property
    def state(self) -> QueryState | None:
        return self.client.get_query_state(self.key)

    @property
    def data(self) -> Any:
        return self.client.get_query_data(self.key)

    @property
    def error(self) -> BaseException | None:
        state = self.state
        return state.error if state else None

    @property
    def is_fetching(self) -> bool:
        return self.client.is_fetching(self.key)


class Mutation:
    """A write; ``on_success(result, *args, **kwargs)`` runs after it succeeds."""

    def __init__(
        self,
        fn: Callable[..., Awaitable[Any]],
        *,
        on_success: Callable[..., None] | None = None,
    ) -> None:
        self.fn = fn
        self.on_success = on_success
        self.status = "idle"
        self.data: Any = None
        self.error: BaseException | None = None

    async def mutate(self, *args: Any, **kwargs: Any) -> Any:
        self.status = "pending"
        try:
            result = await self.fn(*args, **kwargs)
        except Exception as exc:
            self.status = "error"
            self.error = exc
            raise
        self.status = "success"
        self.data = result
        self.error = None
        if self.on_success is not None:
            self.on_success(result, *args, **kwargs)
        return result

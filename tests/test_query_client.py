# tests/test_query_client.py
import asyncio

import pytest

from blogcms.client.api import ApiError
from blogcms.client.query import Mutation, QueryClient, default_retry_delay, query_key


def _no_wait(_: int) -> float:
    return 0


class Counter:
    def __init__(self, *results):
        self.calls = 0
        self.results = list(results)

    async def __call__(self):
        self.calls += 1
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


def test_query_key_normalisation():
    assert query_key(["galleries", {"status": "draft", "category_id": None}]) == query_key(
        ("galleries", {"status": "draft"})
    )
    assert query_key("home") == ("home",)
    assert hash(query_key(("posts", {"ids": ["a", "b"]})))


def test_default_retry_delay_is_capped():
    assert [default_retry_delay(n) for n in (1, 2, 3)] == [1, 2, 4]
    assert default_retry_delay(10) == 30


@pytest.mark.asyncio
async def test_fresh_data_is_served_from_cache():
    qc = QueryClient()
    fetch = Counter(["a"])
    assert await qc.fetch_query(("categories",), fetch) == ["a"]
    assert await qc.fetch_query(("categories",), fetch) == ["a"]
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_concurrent_fetches_are_deduplicated():
    qc = QueryClient()
    gate = asyncio.Event()
    calls = 0

    async def slow():
        nonlocal calls
        calls += 1
        await gate.wait()
        return "done"

    first = asyncio.create_task(qc.fetch_query(("home",), slow))
    second = asyncio.create_task(qc.fetch_query(("home",), slow))
    await asyncio.sleep(0)
    assert qc.is_fetching(("home",))
    gate.set()
    assert await asyncio.gather(first, second) == ["done", "done"]
    assert calls == 1


@pytest.mark.asyncio
async def test_invalidate_by_prefix():
    qc = QueryClient()
    await qc.fetch_query(("galleries", {"status": "draft"}), Counter([1]))
    await qc.fetch_query(("galleries", "g1"), Counter({"id": "g1"}))
    await qc.fetch_query(("posts", None), Counter([2]))

    assert qc.invalidate_queries(("galleries",)) == 2
    assert qc.get_query_state(("galleries", "g1")).is_stale(None)
    assert not qc.get_query_state(("posts", None)).is_stale(None)

    refetch = Counter({"id": "g1", "title": "new"})
    assert await qc.fetch_query(("galleries", "g1"), refetch) == {"id": "g1", "title": "new"}
    assert refetch.calls == 1


@pytest.mark.asyncio
async def test_exact_invalidation_leaves_children():
    qc = QueryClient()
    await qc.fetch_query(("categories",), Counter([]))
    await qc.fetch_query(("categories", "c1"), Counter({}))
    assert qc.invalidate_queries(("categories",), exact=True) == 1
    assert not qc.get_query_state(("categories", "c1")).is_stale(None)


@pytest.mark.asyncio
async def test_transient_errors_are_retried():
    qc = QueryClient(retry_delay=_no_wait)
    fetch = Counter(ConnectionError("boom"), ConnectionError("boom"), "ok")
    assert await qc.fetch_query(("media",), fetch) == "ok"
    assert fetch.calls == 3


@pytest.mark.asyncio
async def test_retry_delay_receives_failure_count():
    delays: list[int] = []

    def record(failures: int) -> float:
        delays.append(failures)
        return 0

    qc = QueryClient(retry_delay=record)
    fetch = Counter(ConnectionError("down"))
    with pytest.raises(ConnectionError):
        await qc.fetch_query(("media",), fetch)
    assert fetch.calls == 4
    assert delays == [1, 2, 3]


@pytest.mark.asyncio
async def test_retries_are_bounded():
    qc = QueryClient(retry=2, retry_delay=_no_wait)
    fetch = Counter(ConnectionError("down"))
    with pytest.raises(ConnectionError):
        await qc.fetch_query(("media",), fetch)
    assert fetch.calls == 3
    assert qc.get_query_state(("media",)).status == "error"


@pytest.mark.asyncio
async def test_client_errors_are_not_retried():
    qc = QueryClient(retry_delay=_no_wait)
    fetch = Counter(ApiError(401, "Not authenticated"))
    with pytest.raises(ApiError):
        await qc.fetch_query(("auth", "me"), fetch)
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_retry_false_fails_fast():
    qc = QueryClient(retry_delay=_no_wait)
    fetch = Counter(ApiError(503, "Storage down"))
    with pytest.raises(ApiError):
        await qc.fetch_query(("media",), fetch, retry=False)
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_disabled_query_never_fetches():
    qc = QueryClient()
    fetch = Counter("x")
    assert await qc.fetch_query(("galleries", "new"), fetch, enabled=False) is None
    assert fetch.calls == 0


@pytest.mark.asyncio
async def test_set_query_data_replaces_in_flight_fetch():
    qc = QueryClient()
    gate = asyncio.Event()

    async def never_finishes():
        await gate.wait()
        return {"id": "stale"}

    pending = asyncio.create_task(qc.fetch_query(("auth", "me"), never_finishes))
    await asyncio.sleep(0)
    assert qc.is_fetching(("auth", "me"))

    qc.set_query_data(("auth", "me"), None)
    assert not qc.is_fetching(("auth", "me"))
    assert await pending is None
    assert qc.get_query_data(("auth", "me")) is None
    assert not qc.get_query_state(("auth", "me")).is_stale(None)


@pytest.mark.asyncio
async def test_stale_time_window():
    qc = QueryClient(stale_time=0)
    fetch = Counter("v")
    await qc.fetch_query(("home",), fetch)
    await qc.fetch_query(("home",), fetch)
    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_mutation_runs_on_success_with_arguments():
    seen = []

    async def update(item_id, data):
        return {"id": item_id, **data}

    mutation = Mutation(update, on_success=lambda result, item_id, data: seen.append((result["id"], item_id)))
    assert await mutation.mutate("g1", {"title": "x"}) == {"id": "g1", "title": "x"}
    assert seen == [("g1", "g1")]
    assert mutation.status == "success"


@pytest.mark.asyncio
async def test_failed_mutation_skips_on_success():
    seen = []

    async def broken():
        raise ApiError(409, "conflict")

    mutation = Mutation(broken, on_success=lambda *_: seen.append("called"))
    with pytest.raises(ApiError):
        await mutation.mutate()
    assert seen == []
    assert mutation.status == "error"

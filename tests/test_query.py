"""Tests for the query cache."""

import asyncio

import pytest

from schoolhub.query import QueryCache


def counting_loader(value="rows"):
	calls = []

	async def loader():
		calls.append(1)
		return f"{value}-{len(calls)}"

	return loader, calls


async def test_fresh_value_served_from_cache(cache):
	loader, calls = counting_loader()

	assert await cache.fetch(("departments",), loader) == "rows-1"
	assert await cache.fetch(("departments",), loader) == "rows-1"
	assert len(calls) == 1


async def test_force_reloads(cache):
	loader, calls = counting_loader()
	await cache.fetch(("departments",), loader)

	assert await cache.fetch(("departments",), loader, force=True) == "rows-2"


async def test_stale_value_reloaded():
	cache = QueryCache(stale_time=0)
	loader, calls = counting_loader()

	await cache.fetch(("departments",), loader)
	await cache.fetch(("departments",), loader)

	assert len(calls) == 2


async def test_concurrent_fetches_share_one_request(cache):
	release = asyncio.Event()
	calls = []

	async def loader():
		calls.append(1)
		await release.wait()
		return ["a"]

	first = asyncio.ensure_future(cache.fetch(("classes",), loader))
	second = asyncio.ensure_future(cache.fetch(("classes",), loader))
	await asyncio.sleep(0)
	release.set()

	assert await first == ["a"]
	assert await second == ["a"]
	assert len(calls) == 1


async def test_invalidate_by_prefix(cache):
	cache.set(("assignments", None), [1])
	cache.set(("assignments", "class-1"), [2])
	cache.set(("materials", None), [3])

	assert cache.invalidate("assignments") == 2
	assert ("assignments", "class-1") not in cache
	assert cache.peek(("materials", None)) == [3]


async def test_invalidate_exact_key_only_drops_longer_keys_with_that_prefix(cache):
	cache.set(("class-subjects", "c1"), [1])
	cache.set(("class-subjects", "c2"), [2])

	cache.invalidate("class-subjects", "c1")

	assert ("class-subjects", "c1") not in cache
	assert ("class-subjects", "c2") in cache


async def test_result_loaded_before_invalidation_not_stored(cache):
	release = asyncio.Event()

	async def loader():
		await release.wait()
		return "old"

	task = asyncio.ensure_future(cache.fetch(("teachers",), loader))
	await asyncio.sleep(0)
	cache.invalidate("teachers")
	release.set()

	assert await task == "old"
	assert ("teachers",) not in cache


async def test_invalidation_leaves_other_loads_alone(cache):
	release = asyncio.Event()

	async def loader():
		await release.wait()
		return "rows"

	task = asyncio.ensure_future(cache.fetch(("departments",), loader))
	await asyncio.sleep(0)
	cache.invalidate("schools")
	release.set()

	assert await task == "rows"
	assert cache.peek(("departments",)) == "rows"


async def test_failed_load_not_cached(cache):
	async def failing():
		raise RuntimeError("down")

	with pytest.raises(RuntimeError):
		await cache.fetch(("schools",), failing)

	assert ("schools",) not in cache
	loader, _ = counting_loader()
	assert await cache.fetch(("schools",), loader) == "rows-1"


async def test_clear(cache):
	cache.set(("a",), 1)
	cache.clear()

	assert not cache.is_fresh(("a",))

"""Cache of list queries shared by the screens of one session."""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

from .const import DEFAULT_QUERY_STALE_SECONDS

_LOGGER = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]


class QueryCache:
	"""Short-lived cache of list queries keyed by tuples.

	- A value younger than ``stale_time`` is served without calling the loader.
	- Concurrent fetches of one key share a single in-flight task.
	- ``invalidate(prefix)`` drops every key starting with ``prefix``, so
	  invalidating ``("assignments",)`` also drops ``("assignments", class_id)``.
	  Loads of those keys still in flight are not stored when they finish.
	"""

	def __init__(self, stale_time: float = DEFAULT_QUERY_STALE_SECONDS) -> None:
		self.stale_time = stale_time
		self._entries: Dict[QueryKey, Tuple[float, Any]] = {}
		self._inflight: Dict[QueryKey, asyncio.Task] = {}

	def __contains__(self, key: QueryKey) -> bool:
		return key in self._entries

	def peek(self, key: QueryKey) -> Optional[Any]:
		entry = self._entries.get(key)
		return entry[1] if entry else None

	def is_fresh(self, key: QueryKey) -> bool:
		entry = self._entries.get(key)
		return entry is not None and (time.monotonic() - entry[0]) < self.stale_time

	async def fetch(self, key: QueryKey, loader: Callable[[], Awaitable[Any]], force: bool = False) -> Any:
		"""Return the cached value for ``key`` or load it.

		Args:
			key: Query key, e.g. ``("departments",)``.
			loader: Coroutine function producing the value.
			force: Ignore a fresh cached value.
		"""
		if not force and self.is_fresh(key):
			return self._entries[key][1]

		task = self._inflight.get(key)
		if task is None or task.done():
			task = asyncio.ensure_future(self._load(key, loader))
			self._inflight[key] = task
		try:
			return await asyncio.shield(task)
		finally:
			if task.done() and self._inflight.get(key) is task:
				del self._inflight[key]

	async def _load(self, key: QueryKey, loader: Callable[[], Awaitable[Any]]) -> Any:
		value = await loader()
		# Invalidation forgets the task, so only a load still registered may store its value
		if self._inflight.get(key) is asyncio.current_task():
			self._entries[key] = (time.monotonic(), value)
		else:
			_LOGGER.debug(f"Discarding result for {key!r} loaded before invalidation")
		return value

	def set(self, key: QueryKey, value: Any) -> None:
		self._entries[key] = (time.monotonic(), value)

	def invalidate(self, *prefix: Hashable) -> int:
		"""Drop cached entries whose key starts with ``prefix``.

		Returns:
			Number of entries removed.
		"""
		matching = [key for key in self._entries if key[:len(prefix)] == prefix]
		for key in matching:
			del self._entries[key]
		for key in [key for key in self._inflight if key[:len(prefix)] == prefix]:
			del self._inflight[key]
		_LOGGER.debug(f"Invalidated {len(matching)} queries for prefix {prefix!r}")
		return len(matching)

	def clear(self) -> None:
		self._entries.clear()
		self._inflight.clear()

"""Session state (tokens and the signed-in user) kept in a JSON file."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .const import SESSION_KEYS

_LOGGER = logging.getLogger(__name__)


class SessionStorage:
	"""Client-held session state persisted as a small JSON document.

	- Loads once and caches in memory; reads are served from the cache.
	- Writes go through an asyncio.Lock and run the file IO in a thread.
	- With ``path=None`` nothing touches disk (tests, one-shot scripts).
	"""

	def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
		self._path: Optional[Path] = Path(path).expanduser() if path else None
		self._lock: asyncio.Lock = asyncio.Lock()
		self._cache: Dict[str, Any] = {}
		self._loaded = self._path is None

	@property
	def path(self) -> Optional[Path]:
		return self._path

	@property
	def loaded(self) -> bool:
		return self._loaded

	async def async_load(self) -> Dict[str, Any]:
		"""Load stored data once and cache it; returns a shallow copy."""
		async with self._lock:
			if not self._loaded:
				self._cache = await asyncio.to_thread(self._read)
				self._loaded = True
			return dict(self._cache)

	def _read(self) -> Dict[str, Any]:
		if self._path is None or not self._path.exists():
			return {}
		try:
			with open(self._path, "r", encoding="utf-8") as f:
				data = json.load(f)
		except (OSError, ValueError) as e:
			_LOGGER.warning(f"Session file {self._path} unreadable, starting empty: {e}")
			return {}
		if not isinstance(data, dict):
			_LOGGER.warning(f"Session file {self._path} has unexpected content, starting empty")
			return {}
		return data

	def _write(self, data: Dict[str, Any]) -> None:
		if self._path is None:
			return
		self._path.parent.mkdir(parents=True, exist_ok=True)
		tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
		with open(tmp_path, "w", encoding="utf-8") as f:
			json.dump(data, f, indent=2)
		os.replace(tmp_path, self._path)

	async def _persist(self) -> None:
		await asyncio.to_thread(self._write, dict(self._cache))

	def get(self, key: str, default: Any = None) -> Any:
		return self._cache.get(key, default)

	def get_json(self, key: str) -> Optional[Dict[str, Any]]:
		"""Read a value stored as an object; JSON strings are decoded."""
		value = self._cache.get(key)
		if isinstance(value, str):
			try:
				value = json.loads(value)
			except ValueError:
				_LOGGER.warning(f"Stored {key} is not valid JSON")
				return None
		return value if isinstance(value, dict) else None

	async def async_set(self, key: str, value: Any) -> None:
		await self.async_update({key: value})

	async def async_update(self, values: Mapping[str, Any]) -> None:
		async with self._lock:
			self._cache.update(values)
			await self._persist()

	async def async_remove(self, *keys: str) -> None:
		async with self._lock:
			for key in keys:
				self._cache.pop(key, None)
			await self._persist()

	async def async_clear(self) -> None:
		"""Forget the whole session (tokens and cached user)."""
		await self.async_remove(*SESSION_KEYS)

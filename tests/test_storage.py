"""Tests for the persisted session storage."""

import json

from schoolhub.storage import SessionStorage


async def test_persists_and_reloads(tmp_path):
	path = tmp_path / "nested" / "session.json"
	storage = SessionStorage(path)
	await storage.async_load()

	await storage.async_update({"access_token": "a", "user": {"id": "u1"}})

	assert json.loads(path.read_text()) == {"access_token": "a", "user": {"id": "u1"}}
	reloaded = SessionStorage(path)
	assert await reloaded.async_load() == {"access_token": "a", "user": {"id": "u1"}}
	assert reloaded.get("access_token") == "a"


async def test_corrupt_file_starts_empty(tmp_path):
	path = tmp_path / "session.json"
	path.write_text("{not json")

	storage = SessionStorage(path)

	assert await storage.async_load() == {}


async def test_non_object_file_starts_empty(tmp_path):
	path = tmp_path / "session.json"
	path.write_text("[1, 2]")

	assert await SessionStorage(path).async_load() == {}


async def test_clear_removes_only_session_keys():
	storage = SessionStorage()
	await storage.async_update({"access_token": "a", "refresh_token": "r", "user": {}, "theme": "dark"})

	await storage.async_clear()

	assert storage.get("access_token") is None
	assert storage.get("refresh_token") is None
	assert storage.get("user") is None
	assert storage.get("theme") == "dark"


async def test_get_json_decodes_strings():
	storage = SessionStorage()
	await storage.async_set("user", '{"id": "u1"}')
	assert storage.get_json("user") == {"id": "u1"}

	await storage.async_set("user", "{broken")
	assert storage.get_json("user") is None


def test_in_memory_storage_is_loaded():
	storage = SessionStorage()

	assert storage.loaded
	assert storage.path is None

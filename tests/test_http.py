"""Tests for the HTTP client: bearer tokens, refresh-and-replay and error mapping."""

from aiohttp import web
import pytest

from schoolhub.const import MSG_NETWORK_ERROR
from schoolhub.exceptions import (
	SchoolHubAuthError,
	SchoolHubConnectionError,
	SchoolHubNotFoundError,
	SchoolHubServerError,
	SchoolHubValidationError,
)
from schoolhub.http import ApiClient


async def _seed(storage, access="old", refresh="refresh-1"):
	values = {"access_token": access, "user": {"id": "u1", "email": "t@school.test"}}
	if refresh:
		values["refresh_token"] = refresh
	await storage.async_update(values)


def _json(body, status=200):
	async def handler(request):
		return web.json_response(body, status=status)
	return handler


async def _empty(request):
	return web.Response(status=204)


def _protected(valid_token):
	async def handler(request):
		if request.headers.get("Authorization") != f"Bearer {valid_token}":
			return web.json_response({"message": "Unauthorized"}, status=401)
		return web.json_response({"data": [{"id": "1"}]})
	return handler


def _refresh(status=200, body=None):
	async def handler(request):
		return web.json_response(body if body is not None else {"access_token": "new", "refresh_token": "refresh-2"}, status=status)
	return handler


class TestRequests:

	async def test_sends_bearer_token(self, backend, make_client, storage):
		server = await backend([web.get("/api/ping", _json({"ok": True}))])
		await _seed(storage, access="abc")

		body = await make_client(server).get("/ping")

		assert body == {"ok": True}
		assert server.calls[0]["authorization"] == "Bearer abc"

	async def test_no_token_no_header(self, backend, make_client):
		server = await backend([web.get("/api/ping", _json({"ok": True}))])

		await make_client(server).get("/ping")

		assert server.calls[0]["authorization"] is None

	async def test_empty_body_is_none(self, backend, make_client):
		server = await backend([web.delete("/api/things/1", _empty)])

		assert await make_client(server).delete("/things/1") is None

	async def test_query_params_skip_none(self, backend, make_client):
		server = await backend([web.get("/api/things", _json([]))])

		await make_client(server).get("/things", params={"class_id": 5, "subject_id": None})

		assert server.calls[0]["query"] == {"class_id": "5"}


class TestTokenRefresh:

	async def test_refreshes_once_and_replays(self, backend, make_client, storage):
		server = await backend([
			web.get("/api/things", _protected("new")),
			web.post("/api/auth/refresh", _refresh()),
		])
		await _seed(storage)

		body = await make_client(server).get("/things")

		assert body == {"data": [{"id": "1"}]}
		assert server.paths() == ["/api/things", "/api/auth/refresh", "/api/things"]
		assert server.calls[1]["json"] == {"refresh_token": "refresh-1"}
		assert server.calls[2]["authorization"] == "Bearer new"
		assert storage.get("access_token") == "new"
		assert storage.get("refresh_token") == "refresh-2"

	async def test_second_401_clears_session(self, backend, make_client, storage):
		server = await backend([
			web.get("/api/things", _protected("never")),
			web.post("/api/auth/refresh", _refresh()),
		])
		await _seed(storage)
		expired = []

		with pytest.raises(SchoolHubAuthError):
			await make_client(server, on_session_expired=expired.append).get("/things")

		assert server.paths("POST") == ["/api/auth/refresh"]
		assert len(server.paths("GET")) == 2
		assert storage.get("access_token") is None
		assert storage.get("user") is None
		assert expired == ["/login"]

	async def test_failed_refresh_clears_session(self, backend, make_client, storage):
		server = await backend([
			web.get("/api/things", _protected("new")),
			web.post("/api/auth/refresh", _refresh(status=401, body={"message": "Refresh token expired"})),
		])
		await _seed(storage)
		expired = []

		async def on_expired(path):
			expired.append(path)

		with pytest.raises(SchoolHubAuthError) as err:
			await make_client(server, on_session_expired=on_expired).get("/things")

		assert err.value.detail == "Refresh token expired"
		assert server.paths("GET") == ["/api/things"]
		assert storage.get("refresh_token") is None
		assert expired == ["/login"]

	async def test_refresh_without_access_token_clears_session(self, backend, make_client, storage):
		server = await backend([
			web.get("/api/things", _protected("new")),
			web.post("/api/auth/refresh", _refresh(body={"ok": True})),
		])
		await _seed(storage)

		with pytest.raises(SchoolHubAuthError):
			await make_client(server).get("/things")

		assert storage.get("access_token") is None

	async def test_no_refresh_token_passes_401_through(self, backend, make_client, storage):
		server = await backend([
			web.get("/api/things", _protected("new")),
			web.post("/api/auth/refresh", _refresh()),
		])
		await _seed(storage, refresh=None)
		expired = []

		with pytest.raises(SchoolHubAuthError) as err:
			await make_client(server, on_session_expired=expired.append).get("/things")

		assert err.value.status == 401
		assert err.value.message == "Unauthorized"
		assert server.paths() == ["/api/things"]
		assert storage.get("access_token") == "old"
		assert expired == []


class TestErrors:

	async def test_message_list_joined(self, backend, make_client):
		async def handler(request):
			return web.json_response({"statusCode": 400, "message": ["name is required", "email is invalid"]}, status=400)

		server = await backend([web.post("/api/things", handler)])

		with pytest.raises(SchoolHubValidationError) as err:
			await make_client(server).post("/things", {})

		assert err.value.message == "name is required, email is invalid"
		assert err.value.status == 400

	async def test_status_classes(self, backend, make_client):
		server = await backend([
			web.get("/api/missing", _json({"error": {"message": "Gone"}}, status=404)),
			web.get("/api/broken", _json(None, status=500)),
		])
		client = make_client(server)

		with pytest.raises(SchoolHubNotFoundError) as err:
			await client.get("/missing")
		assert err.value.message == "Gone"

		with pytest.raises(SchoolHubServerError) as err:
			await client.get("/broken")
		assert err.value.detail is None
		assert err.value.message == "An error occurred. Please try again."

	async def test_no_response_is_network_error(self, storage):
		client = ApiClient(storage, base_url="http://127.0.0.1:1/api", timeout=2)
		try:
			with pytest.raises(SchoolHubConnectionError) as err:
				await client.get("/things")
		finally:
			await client.close()

		assert err.value.status == 0
		assert err.value.message == MSG_NETWORK_ERROR


class TestUpload:

	async def test_multipart_upload(self, backend, make_client, storage, tmp_path):
		received = {}

		async def handler(request):
			form = await request.post()
			received["content_type"] = request.content_type
			received["bucket"] = form["bucket"]
			received["folder"] = form["folder"]
			received["file"] = form["file"].file.read()
			received["filename"] = form["file"].filename
			return web.json_response({"publicUrl": "https://files.test/notes.pdf"})

		server = await backend([web.post("/api/teacher/upload-file", handler)])
		await _seed(storage, access="abc")
		document = tmp_path / "notes.pdf"
		document.write_bytes(b"%PDF-1.4 test")

		body = await make_client(server).upload("/teacher/upload-file", document, {"bucket": "syllabi", "folder": "course-outlines"})

		assert body == {"publicUrl": "https://files.test/notes.pdf"}
		assert received == {
			"content_type": "multipart/form-data",
			"bucket": "syllabi",
			"folder": "course-outlines",
			"file": b"%PDF-1.4 test",
			"filename": "notes.pdf",
		}
		assert server.calls[0]["authorization"] == "Bearer abc"

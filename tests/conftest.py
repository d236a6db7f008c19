"""Shared fixtures: an in-memory session and a throwaway aiohttp backend."""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from schoolhub.http import ApiClient
from schoolhub.notifications import Notifier
from schoolhub.query import QueryCache
from schoolhub.storage import SessionStorage


class Backend:
	"""Records every request the client makes against the test server."""

	def __init__(self, server: TestServer) -> None:
		self.server = server
		self.calls: List[Dict[str, Any]] = []

	@property
	def api_url(self) -> str:
		return str(self.server.make_url("/api"))

	def paths(self, method: Optional[str] = None) -> List[str]:
		return [call["path"] for call in self.calls if method is None or call["method"] == method]


@pytest.fixture
async def backend():
	"""Start a server from a list of aiohttp routes; ``await backend(routes)``."""
	started: List[Backend] = []

	async def _start(routes) -> Backend:
		holder: Dict[str, Backend] = {}

		@web.middleware
		async def record(request: web.Request, handler):
			body = None
			if request.content_type == "application/json" and request.can_read_body:
				body = await request.json()
			holder["backend"].calls.append({
				"method": request.method,
				"path": request.path,
				"query": dict(request.query),
				"json": body,
				"authorization": request.headers.get("Authorization"),
			})
			return await handler(request)

		app = web.Application(middlewares=[record])
		app.add_routes(routes)
		server = TestServer(app)
		await server.start_server()
		holder["backend"] = Backend(server)
		started.append(holder["backend"])
		return holder["backend"]

	yield _start

	for item in started:
		await item.server.close()


@pytest.fixture
def storage():
	return SessionStorage()


@pytest.fixture
def notifier():
	return Notifier()


@pytest.fixture
def messages(notifier):
	"""Every notification as ``"[level] message"``, in order."""
	received: List[str] = []
	notifier.subscribe(lambda n: received.append(str(n)))
	return received


@pytest.fixture
async def make_client(storage):
	clients: List[ApiClient] = []

	def _make(backend: Backend, **kwargs) -> ApiClient:
		client = ApiClient(storage, base_url=backend.api_url, **kwargs)
		clients.append(client)
		return client

	yield _make

	for client in clients:
		await client.close()


@pytest.fixture
def api():
	"""API wrappers with every call mocked; set return values per test."""
	mock = MagicMock()
	for resource in (
		"users", "schools", "departments", "academic_levels", "subjects", "classes",
		"teachers", "students", "parents", "assignments", "resources", "syllabi",
		"grades", "attendance",
	):
		setattr(mock, resource, AsyncMock())
	return mock


@pytest.fixture
def cache():
	return QueryCache(stale_time=30)

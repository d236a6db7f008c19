"""End-to-end tests for the SchoolHub facade against a local test server."""

from aiohttp import web
import pytest

from schoolhub.client import SchoolHub
from schoolhub.config import Settings
from schoolhub.exceptions import SchoolHubAccessDenied
from schoolhub.pages.dashboard import DashboardPage
from schoolhub.pages.school_admin import DepartmentsPage
from schoolhub.pages.teacher import ClassRosterPage
from schoolhub.router import REASON_LOGIN_REQUIRED

TEACHER_LOGIN = {
	"success": True,
	"token": "access-1",
	"refresh_token": "refresh-1",
	"user": {"id": "u1", "email": "tom@school.test", "first_name": "Tom", "last_name": "Banda", "account_type": "teacher"},
}


def _json(body, status=200):
	async def handler(request):
		return web.json_response(body, status=status)
	return handler


@pytest.fixture
async def hub_for(storage, notifier):
	hubs = []

	async def _make(server):
		hub = SchoolHub(Settings(api_url=server.api_url), storage=storage, notifier=notifier)
		await hub.__aenter__()
		hubs.append(hub)
		return hub

	yield _make

	for hub in hubs:
		await hub.__aexit__(None, None, None)


async def test_signed_out_navigation(backend, hub_for):
	hub = await hub_for(await backend([]))

	assert hub.user is None
	assert hub.session_roles is None
	assert hub.resolve("/classes").reason == REASON_LOGIN_REQUIRED
	assert hub.navigate("/classes").screen == "auth"
	assert hub.navigate("/login").screen == "auth"
	with pytest.raises(SchoolHubAccessDenied):
		hub.open("/dashboard")


async def test_teacher_session(backend, hub_for, storage):
	server = await backend([
		web.post("/api/auth/login", _json(TEACHER_LOGIN)),
		web.get("/api/teacher/classes/{class_id}/students", _json({"students": [{"id": "s1", "student_number": "S001", "email": "a@school.test"}]})),
	])
	hub = await hub_for(server)

	user = await hub.login("teacher", "tom@school.test", "secret")

	assert user.name == "Tom Banda"
	assert hub.current.screen == "dashboard"
	assert hub.session_roles == ["teacher"]
	assert [item.href for item in hub.navigation()][:2] == ["/dashboard", "/classes"]
	assert hub.resolve("/classes").screen == "my_classes"

	page = await hub.open_page("/my-classes/k1")
	assert isinstance(page, ClassRosterPage)
	assert page.class_id == "k1"
	assert page.items[0].student_number == "S001"

	with pytest.raises(SchoolHubAccessDenied):
		hub.open("/departments")


async def test_root_redirect(backend, hub_for):
	server = await backend([web.post("/api/auth/login", _json(TEACHER_LOGIN))])
	hub = await hub_for(server)
	await hub.login("teacher", "tom@school.test", "secret")

	resolution = hub.open("/")

	assert resolution.screen == "dashboard"
	assert isinstance(hub.page(resolution), DashboardPage)


async def test_restores_stored_session(backend, storage, hub_for):
	await storage.async_update({"access_token": "a", "user": {"id": "u9", "email": "adm@school.test", "account_type": "school_admin"}})
	hub = await hub_for(await backend([]))

	assert hub.user.email == "adm@school.test"
	assert hub.page(hub.open("/departments")).__class__ is DepartmentsPage


async def test_session_expiry_signs_out(backend, hub_for, storage, notifier):
	async def rejected(request):
		return web.json_response({"message": "Unauthorized"}, status=401)

	server = await backend([
		web.post("/api/auth/login", _json(TEACHER_LOGIN)),
		web.get("/api/teacher/classes", rejected),
		web.post("/api/auth/refresh", _json({"message": "expired"}, status=401)),
	])
	hub = await hub_for(server)
	await hub.login("teacher", "tom@school.test", "secret")
	hub.cache.set(("teacher-classes", "old"), [])

	page = await hub.open_page("/my-classes")

	assert page.items == []
	assert hub.user is None
	assert storage.get("access_token") is None
	assert ("teacher-classes", "old") not in hub.cache
	assert hub.current.screen == "auth"
	assert "[warning] Your session has expired. Please log in again." in [str(n) for n in notifier.history]


async def test_logout_clears_cache(backend, hub_for):
	server = await backend([web.post("/api/auth/login", _json(TEACHER_LOGIN))])
	hub = await hub_for(server)
	await hub.login("teacher", "tom@school.test", "secret")
	hub.cache.set(("teacher-classes",), [])

	await hub.logout()

	assert ("teacher-classes",) not in hub.cache
	assert hub.user is None
	assert hub.current.screen == "auth"

"""Role-gated routing of paths to screens."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .const import (
	ADMIN_ROLES,
	PATH_AUTH,
	PATH_DASHBOARD,
	PATH_LOGIN,
	ROLE_PARENT,
	ROLE_SCHOOL_ADMIN,
	ROLE_STUDENT,
	ROLE_SUPER_ADMIN,
	ROLE_TEACHER,
)
from .exceptions import SchoolHubAccessDenied

_LOGGER = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_REDIRECT = "redirect"
STATUS_NOT_FOUND = "not_found"

REASON_LOGIN_REQUIRED = "login_required"
REASON_UNAUTHORIZED = "unauthorized"

SCREEN_NOT_FOUND = "not_found"


def split_path(path: str) -> Tuple[str, ...]:
	path = (path or "/").split("?", 1)[0].split("#", 1)[0]
	return tuple(segment for segment in path.strip("/").split("/") if segment)


def normalise_path(path: str) -> str:
	return "/" + "/".join(split_path(path))


@dataclass(frozen=True)
class Route:
	"""A path served by a screen, optionally limited to some roles.

	``allowed_roles=None`` admits any signed-in user. Segments starting
	with ``:`` capture a parameter.
	"""
	path: str
	screen: str
	allowed_roles: Optional[Tuple[str, ...]] = None
	public: bool = False

	@property
	def segments(self) -> Tuple[str, ...]:
		return split_path(self.path)

	def match(self, path: str) -> Optional[Dict[str, str]]:
		parts = split_path(path)
		pattern = self.segments
		if len(parts) != len(pattern):
			return None
		params: Dict[str, str] = {}
		for expected, actual in zip(pattern, parts):
			if expected.startswith(":"):
				params[expected[1:]] = actual
			elif expected != actual:
				return None
		return params

	def permits(self, roles: Iterable[str]) -> bool:
		if self.public or self.allowed_roles is None:
			return True
		return bool(set(self.allowed_roles) & set(roles))


@dataclass
class Resolution:
	status: str
	path: str
	screen: Optional[str] = None
	params: Dict[str, str] = field(default_factory=dict)
	redirect_to: Optional[str] = None
	reason: Optional[str] = None

	@property
	def allowed(self) -> bool:
		return self.status == STATUS_OK


@dataclass(frozen=True)
class NavItem:
	label: str
	href: str


def _roles(*roles: str) -> Tuple[str, ...]:
	return tuple(roles)


ADMINS = _roles(*ADMIN_ROLES)

# Order matters: for a path declared more than once the first route whose
# roles match the session wins.
DEFAULT_ROUTES: Tuple[Route, ...] = (
	Route("/auth", "auth", public=True),
	Route("/dashboard", "dashboard"),

	Route("/schools", "schools", _roles(ROLE_SUPER_ADMIN)),
	Route("/administrators", "administrators", _roles(ROLE_SUPER_ADMIN)),

	Route("/departments", "departments", ADMINS),
	Route("/academic-levels", "academic_levels", _roles(ROLE_SCHOOL_ADMIN)),
	Route("/admin-subjects", "subjects", ADMINS),
	Route("/subjects", "subjects", ADMINS),
	Route("/teachers", "teachers", ADMINS),
	Route("/students", "students", _roles(*ADMIN_ROLES, ROLE_TEACHER)),
	Route("/parents", "parents", ADMINS),
	Route("/classes", "classes", ADMINS),
	Route("/teacher-assignments", "teacher_assignments", _roles(ROLE_SCHOOL_ADMIN)),

	Route("/classes", "my_classes", _roles(ROLE_TEACHER)),
	Route("/my-classes", "my_classes", _roles(ROLE_TEACHER)),
	Route("/my-classes/:class_id", "class_roster", _roles(ROLE_TEACHER)),
	Route("/subjects", "teacher_subjects", _roles(ROLE_TEACHER)),
	Route("/syllabi", "syllabi", _roles(ROLE_TEACHER)),
	Route("/assignments", "assignments", _roles(ROLE_TEACHER)),
	Route("/assignments/:assignment_id/submissions", "submissions", _roles(ROLE_TEACHER)),
	Route("/resources", "resources", _roles(ROLE_TEACHER)),

	Route("/student-classes", "student_classes", _roles(ROLE_STUDENT)),
	Route("/my-classes", "student_classes", _roles(ROLE_STUDENT)),
	Route("/student-assignments", "student_assignments", _roles(ROLE_STUDENT)),
	Route("/my-assignments", "student_assignments", _roles(ROLE_STUDENT)),
	Route("/student-subjects", "student_subjects", _roles(ROLE_STUDENT)),
	Route("/my-subjects", "student_subjects", _roles(ROLE_STUDENT)),
	Route("/student-grades", "student_grades", _roles(ROLE_STUDENT)),
	Route("/my-grades", "student_grades", _roles(ROLE_STUDENT)),
	Route("/grades", "student_grades", _roles(ROLE_STUDENT)),

	Route("/children", "my_children", _roles(ROLE_PARENT)),
	Route("/children/:child_id", "child_detail", _roles(ROLE_PARENT)),
	Route("/performance", "performance", _roles(ROLE_PARENT)),
)

DEFAULT_REDIRECTS: Dict[str, str] = {
	"/": PATH_DASHBOARD,
	PATH_LOGIN: PATH_AUTH,
}

# (roles that see the entry, label, href); duplicates by href are dropped
NAVIGATION: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
	(_roles(ROLE_SUPER_ADMIN), "Schools", "/schools"),
	(_roles(ROLE_SUPER_ADMIN), "Administrators", "/administrators"),
	(ADMINS, "Departments", "/departments"),
	(_roles(ROLE_SCHOOL_ADMIN), "Academic Levels", "/academic-levels"),
	(ADMINS, "Subjects", "/subjects"),
	(ADMINS, "Teachers", "/teachers"),
	(ADMINS, "Students", "/students"),
	(ADMINS, "Parents", "/parents"),
	(ADMINS, "Classes", "/classes"),
	(_roles(ROLE_SCHOOL_ADMIN), "Teacher Assignments", "/teacher-assignments"),
	(_roles(ROLE_TEACHER), "My Classes", "/classes"),
	(_roles(ROLE_TEACHER), "Subjects", "/subjects"),
	(_roles(ROLE_TEACHER), "Assignments", "/assignments"),
	(_roles(ROLE_TEACHER), "Resources", "/resources"),
	(_roles(ROLE_TEACHER), "Syllabi", "/syllabi"),
	(_roles(ROLE_STUDENT), "My Classes", "/my-classes"),
	(_roles(ROLE_STUDENT), "Subjects", "/my-subjects"),
	(_roles(ROLE_STUDENT), "Assignments", "/my-assignments"),
	(_roles(ROLE_STUDENT), "Grades", "/grades"),
	(_roles(ROLE_PARENT), "My Children", "/children"),
	(_roles(ROLE_PARENT), "Performance", "/performance"),
)


class Router:
	"""Maps paths to screens and enforces each route's role allow-list."""

	def __init__(
		self,
		routes: Sequence[Route] = DEFAULT_ROUTES,
		redirects: Optional[Dict[str, str]] = None,
		default_path: str = PATH_DASHBOARD,
		login_path: str = PATH_AUTH,
	) -> None:
		self.routes: List[Route] = list(routes)
		self.redirects = dict(DEFAULT_REDIRECTS if redirects is None else redirects)
		self.default_path = default_path
		self.login_path = login_path

	def add(self, route: Route) -> None:
		self.routes.append(route)

	def matching(self, path: str) -> List[Tuple[Route, Dict[str, str]]]:
		found = []
		for route in self.routes:
			params = route.match(path)
			if params is not None:
				found.append((route, params))
		return found

	def resolve(self, path: str, roles: Optional[Iterable[str]] = None) -> Resolution:
		"""Decide what to show for ``path``.

		Args:
			path: Requested path.
			roles: Roles of the current session; None when signed out.
		"""
		path = normalise_path(path)
		if path in self.redirects:
			return Resolution(STATUS_REDIRECT, path, redirect_to=self.redirects[path])

		candidates = self.matching(path)
		if not candidates:
			return Resolution(STATUS_NOT_FOUND, path, screen=SCREEN_NOT_FOUND)

		for route, params in candidates:
			if route.public:
				return Resolution(STATUS_OK, path, screen=route.screen, params=params)

		if roles is None:
			return Resolution(STATUS_REDIRECT, path, redirect_to=self.login_path, reason=REASON_LOGIN_REQUIRED)

		roles = list(roles)
		for route, params in candidates:
			if route.permits(roles):
				return Resolution(STATUS_OK, path, screen=route.screen, params=params)

		_LOGGER.info(f"Access to {path} refused for roles {roles}")
		return Resolution(STATUS_REDIRECT, path, redirect_to=self.default_path, reason=REASON_UNAUTHORIZED)

	def guard(self, path: str, roles: Optional[Iterable[str]]) -> Resolution:
		"""Like ``resolve`` but raises when the session may not open ``path``."""
		resolution = self.resolve(path, roles)
		if resolution.reason == REASON_UNAUTHORIZED:
			raise SchoolHubAccessDenied(f"You do not have access to {resolution.path}")
		if resolution.reason == REASON_LOGIN_REQUIRED:
			raise SchoolHubAccessDenied("Please log in first")
		return resolution

	def follow(self, path: str, roles: Optional[Iterable[str]] = None, max_hops: int = 5) -> Resolution:
		"""Resolve, following plain redirects (``/`` and ``/login``)."""
		resolution = self.resolve(path, roles)
		hops = 0
		while resolution.status == STATUS_REDIRECT and resolution.reason is None and hops < max_hops:
			resolution = self.resolve(resolution.redirect_to, roles)
			hops += 1
		return resolution


def navigation_items(roles: Iterable[str]) -> List[NavItem]:
	"""Sidebar entries for ``roles``: the dashboard first, unique by href."""
	roles = set(roles)
	items = [NavItem("Dashboard", PATH_DASHBOARD)]
	seen = {PATH_DASHBOARD}
	for allowed, label, href in NAVIGATION:
		if href in seen or not (roles & set(allowed)):
			continue
		seen.add(href)
		items.append(NavItem(label, href))
	return items

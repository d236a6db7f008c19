"""Landing screen with stat cards for the signed-in role."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from ..const import ROLE_PARENT, ROLE_SCHOOL_ADMIN, ROLE_STUDENT, ROLE_SUPER_ADMIN, ROLE_TEACHER
from ..exceptions import SchoolHubError
from .base import PLACEHOLDER, Page
from .parent import PerformancePage
from .student import grade_stats, split_assignments

_LOGGER = logging.getLogger(__name__)

StatCard = Tuple[str, str]

WELCOME = {
	ROLE_SUPER_ADMIN: "Manage schools and administrators across the platform.",
	ROLE_SCHOOL_ADMIN: "Manage your school's departments, staff and students.",
	ROLE_TEACHER: "Manage your classes, assignments and learning resources.",
	ROLE_STUDENT: "Keep track of your classes, assignments and grades.",
	ROLE_PARENT: "Follow your children's academic progress.",
}


async def _stat(label: str, loader: Callable[[], Awaitable[Any]], fmt: Callable[[Any], Any] = len) -> StatCard:
	"""One card; a failing request shows a placeholder instead of failing the page."""
	try:
		return label, str(fmt(await loader()))
	except SchoolHubError as e:
		_LOGGER.warning(f"Dashboard stat {label!r} unavailable: {e}")
		return label, PLACEHOLDER


class DashboardPage(Page):
	title = "Dashboard"

	def __init__(self, *args: Any, **kwargs: Any) -> None:
		super().__init__(*args, **kwargs)
		self.stats: List[StatCard] = []

	@property
	def role(self) -> Optional[str]:
		if self.user is None:
			return None
		return self.user.account_type or (self.user.roles[0] if self.user.roles else None)

	def _cached(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Callable[[], Awaitable[Any]]:
		return lambda: self.cache.fetch((key,), loader)

	async def load(self, force: bool = False) -> None:
		api = self.api
		role = self.role
		if role == ROLE_SUPER_ADMIN:
			cards = [
				_stat("Total Schools", self._cached("schools", api.schools.list)),
				_stat("Administrators", self._cached("administrators", lambda: api.users.list(account_type="administrator"))),
			]
		elif role == ROLE_SCHOOL_ADMIN:
			cards = [
				_stat("Departments", self._cached("departments", api.departments.list)),
				_stat("Teachers", self._cached("teachers", api.teachers.list)),
				_stat("Students", self._cached("students", api.students.list)),
				_stat("Classes", self._cached("classes", api.classes.list)),
			]
		elif role == ROLE_TEACHER:
			classes = self._cached("teacher-classes", api.classes.list_for_teacher)
			cards = [
				_stat("My Classes", classes),
				_stat("Students", classes, lambda items: sum(c.student_count for c in items)),
				_stat("Assignments", lambda: self.cache.fetch(("assignments", None), api.assignments.list_for_teacher)),
				_stat("Resources", lambda: self.cache.fetch(("materials", None), api.resources.list_for_teacher)),
			]
		elif role == ROLE_STUDENT:
			assignments = self._cached("student-assignments", api.assignments.list_for_student)
			cards = [
				_stat("My Classes", self._cached("student-classes", api.classes.list_for_student)),
				_stat("Assignments Due", assignments, lambda items: len(split_assignments(items)[0])),
				_stat("Completed", assignments, lambda items: len(split_assignments(items)[1])),
				_stat(
					"Average Grade",
					self._cached("student-grades", api.grades.list_for_student),
					lambda grades: f"{grade_stats(grades).average_percentage:.0f}%" if grades else PLACEHOLDER,
				),
			]
		elif role == ROLE_PARENT:
			cards = [
				_stat("Children", self._cached("parent-children", api.parents.list_children)),
				_stat("Avg Performance", self._parent_overview, lambda s: s.average_score),
				_stat("Assignments", self._parent_overview, lambda s: s.total_assignments),
			]
		else:
			cards = []
		self.stats = list(await asyncio.gather(*cards))

	async def _parent_overview(self):
		page = PerformancePage(self.api, self.cache, self.notifier, self.user)
		await page.load()
		return page.summary

	def render(self) -> str:
		name = self.user.name if self.user else "User"
		lines = [f"Welcome back, {name}!", WELCOME.get(self.role, "")]
		lines.extend(f"{label}: {value}" for label, value in self.stats)
		return "\n".join(line for line in lines if line)

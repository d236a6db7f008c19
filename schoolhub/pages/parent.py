"""Parent screens: linked children and their progress."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..errors import handle_error
from ..exceptions import SchoolHubError
from ..models import AttendanceSummary, Child, ChildPerformance, Submission, format_date
from .base import Column, ListPage, Page, attr, render_table

_LOGGER = logging.getLogger(__name__)


@dataclass
class ChildSummary:
	child: Child
	average: str = "N/A"
	grades: int = 0
	assignments: int = 0
	completed: int = 0


@dataclass
class PerformanceSummary:
	total_children: int = 0
	average_score: str = "0"
	total_grades: int = 0
	total_assignments: int = 0
	completed_assignments: int = 0
	children: List[ChildSummary] = field(default_factory=list)


def _one_decimal(value: float) -> str:
	return f"{value:.1f}"


def summarize_children(
	children: Sequence[Child],
	performances: Sequence[ChildPerformance],
	assignments: Sequence[Sequence[Submission]],
) -> PerformanceSummary:
	"""Aggregate per-child results; the three sequences are index-aligned."""
	all_grades = [grade for performance in performances for grade in performance.grades]
	summary = PerformanceSummary(
		total_children=len(children),
		total_grades=len(all_grades),
		total_assignments=sum(len(items) for items in assignments),
		completed_assignments=sum(1 for items in assignments for s in items if s.is_completed),
	)
	if all_grades:
		summary.average_score = _one_decimal(sum(grade.score or 0 for grade in all_grades) / len(all_grades))

	for child, performance, items in zip(children, performances, assignments):
		average = performance.average_score
		summary.children.append(ChildSummary(
			child=child,
			average=_one_decimal(average) if average is not None else "N/A",
			grades=len(performance.grades),
			assignments=len(items),
			completed=sum(1 for s in items if s.is_completed),
		))
	return summary


class ChildDataMixin:
	"""Per-child fetches that fall back to empty data instead of failing."""

	async def _performance(self, child_id: str) -> ChildPerformance:
		try:
			return await self.api.parents.child_performance(child_id)
		except SchoolHubError as e:
			_LOGGER.warning(f"Performance for child {child_id} unavailable: {e}")
			return ChildPerformance(grades=[])

	async def _assignments(self, child_id: str) -> List[Submission]:
		try:
			return await self.api.parents.child_assignments(child_id)
		except SchoolHubError as e:
			_LOGGER.warning(f"Assignments for child {child_id} unavailable: {e}")
			return []

	async def _attendance(self, child_id: str) -> AttendanceSummary:
		try:
			return await self.api.parents.child_attendance(child_id)
		except SchoolHubError as e:
			_LOGGER.warning(f"Attendance for child {child_id} unavailable: {e}")
			return AttendanceSummary()

	async def _children(self) -> List[Child]:
		return await self.cache.fetch(("parent-children",), self.api.parents.list_children)


class MyChildrenPage(ListPage):
	title = "My Children"
	entity = "child"
	entity_plural = "children"
	query_key = ("parent-children",)
	empty_message = "You don't have any children registered in the system yet."
	columns = (
		Column("Name", attr("name")),
		Column("Student no.", attr("student_number")),
		Column("Class", attr("class_name")),
		Column("Level", attr("class_level")),
		Column("Email", attr("email")),
	)

	async def fetch_items(self) -> List[Child]:
		return await self.api.parents.list_children()


class ChildDetailPage(ChildDataMixin, Page):
	"""Grades, assignments and attendance of one child."""

	title = "Child Details"

	def __init__(self, *args, **kwargs) -> None:
		super().__init__(*args, **kwargs)
		self.child: Optional[Child] = None
		self.performance = ChildPerformance()
		self.assignments: List[Submission] = []
		self.attendance = AttendanceSummary()

	@property
	def child_id(self) -> Optional[str]:
		return self.params.get("child_id")

	async def load(self, force: bool = False) -> None:
		try:
			children = await self._children()
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to load children")
			children = []
		self.child = next((c for c in children if c.id == self.child_id), None)
		if self.child is None:
			return
		self.performance, self.assignments, self.attendance = await asyncio.gather(
			self._performance(self.child_id),
			self._assignments(self.child_id),
			self._attendance(self.child_id),
		)

	def render(self) -> str:
		if self.child is None:
			return f"{self.title}\n\nChild not found"
		average = self.performance.average_score
		parts = [
			f"{self.child.name} ({self.child.class_name or 'No class'})",
			f"Average score: {_one_decimal(average) if average is not None else 'N/A'}",
			f"Attendance: {self.attendance.present_days}/{self.attendance.total_days} days ({self.attendance.percentage}%)",
			"Grades",
			render_table(
				(
					Column("Subject", attr("subject_label")),
					Column("Assessment", attr("assessment_name")),
					Column("Score", attr("score")),
					Column("Grade", attr("grade_letter")),
				),
				self.performance.grades,
				"No grades yet",
			),
			"Assignments",
			render_table(
				(
					Column("Assignment", lambda s: s.assignment.name if s.assignment else None),
					Column("Status", attr("status")),
					Column("Due", lambda s: format_date(s.assignment.due_date) if s.assignment else None),
					Column("Score", attr("score")),
				),
				self.assignments,
				"No assignments yet",
			),
		]
		return "\n\n".join(parts)


class PerformancePage(ChildDataMixin, Page):
	"""Progress across every linked child.

	Each child's performance and assignments are fetched concurrently; a
	child whose request fails contributes no grades or assignments rather
	than failing the page.
	"""

	title = "Performance Overview"

	def __init__(self, *args, **kwargs) -> None:
		super().__init__(*args, **kwargs)
		self.summary = PerformanceSummary()

	async def load(self, force: bool = False) -> None:
		try:
			children = await self._children()
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to load children")
			children = []

		ids = tuple(child.id for child in children)
		performances: List[ChildPerformance] = []
		assignments: List[List[Submission]] = []
		if ids:
			performances, assignments = await asyncio.gather(
				self.cache.fetch(
					("parent-all-performance", ids),
					lambda: asyncio.gather(*(self._performance(i) for i in ids)),
					force=force,
				),
				self.cache.fetch(
					("parent-all-assignments", ids),
					lambda: asyncio.gather(*(self._assignments(i) for i in ids)),
					force=force,
				),
			)
		self.summary = summarize_children(children, list(performances), list(assignments))

	def render(self) -> str:
		summary = self.summary
		if not summary.total_children:
			return f"{self.title}\n\nYou don't have any children registered in the system yet."
		overview: Dict[str, object] = {
			"Total children": summary.total_children,
			"Average performance": summary.average_score,
			"Total grades": summary.total_grades,
			"Assignments": f"{summary.completed_assignments}/{summary.total_assignments} completed",
		}
		lines = [f"{label}: {value}" for label, value in overview.items()]
		table = render_table(
			(
				Column("Child", lambda c: c.child.name),
				Column("Class", lambda c: c.child.class_name),
				Column("Average", attr("average")),
				Column("Grades", attr("grades")),
				Column("Completed", lambda c: f"{c.completed}/{c.assignments}"),
			),
			summary.children,
		)
		return "\n\n".join([self.title, "\n".join(lines), table])

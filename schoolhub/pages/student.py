"""Student screens: classes, subjects, coursework and grades."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import handle_error, handle_success
from ..exceptions import SchoolHubError, SchoolHubFormError
from ..models import Assignment, Grade, Material, SchoolClass, Subject, Syllabus, format_date
from .base import Column, ListPage, attr, optional_text, render_table

_LOGGER = logging.getLogger(__name__)

MSG_SUBMISSION_URL = "Please provide a submission URL"
MSG_NO_ASSIGNMENT = "No assignment selected"


def _is_upcoming(due: Optional[datetime], now: Optional[datetime] = None) -> bool:
	if due is None:
		return False
	now = now or datetime.now(timezone.utc)
	# Naive timestamps are local time
	if due.tzinfo is None:
		due = due.astimezone()
	if now.tzinfo is None:
		now = now.astimezone()
	return due > now


def split_assignments(
	assignments: Iterable[Assignment],
	now: Optional[datetime] = None,
) -> Tuple[List[Assignment], List[Assignment]]:
	"""Split into (pending, completed).

	Pending means a parseable due date still in the future; everything
	else, including a missing or unparseable due date, counts as completed.
	"""
	pending: List[Assignment] = []
	completed: List[Assignment] = []
	for assignment in assignments:
		(pending if _is_upcoming(assignment.due_date, now) else completed).append(assignment)
	return pending, completed


@dataclass
class GradeStats:
	total: int = 0
	average_percentage: float = 0.0
	highest_percentage: float = 0.0
	passed: int = 0

	def summary(self) -> str:
		return (
			f"Average: {self.average_percentage:.1f}%  "
			f"Highest: {self.highest_percentage:.1f}%  "
			f"Passed: {self.passed}/{self.total}"
		)


def grade_stats(grades: Sequence[Grade]) -> GradeStats:
	if not grades:
		return GradeStats()
	percentages = [grade.percentage for grade in grades]
	return GradeStats(
		total=len(grades),
		average_percentage=sum(percentages) / len(percentages),
		highest_percentage=max(percentages),
		passed=sum(1 for grade in grades if grade.passed),
	)


class StudentClassesPage(ListPage):
	title = "My Classes"
	entity = "class"
	entity_plural = "classes"
	query_key = ("student-classes",)
	empty_message = "You are not enrolled in any classes yet"
	columns = (
		Column("Class", attr("label")),
		Column("Level", attr("academic_level")),
		Column("Subject", attr("subject_name")),
	)

	async def fetch_items(self) -> List[SchoolClass]:
		return await self.api.classes.list_for_student()


class StudentSubjectsPage(ListPage):
	"""Enrolled subjects; each opens its learning materials and syllabi."""

	title = "My Subjects"
	entity = "subject"
	query_key = ("student-subjects",)
	empty_message = "No subjects found"
	columns = (
		Column("Subject", attr("label")),
		Column("Level", attr("academic_level")),
	)

	async def materials(self, subject_id: str) -> List[Material]:
		try:
			return await self.cache.fetch(
				("student-materials", subject_id),
				lambda: self.api.resources.list_for_student(subject_id),
			)
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to load learning materials")
			return []

	async def syllabi(self, subject_id: str) -> List[Syllabus]:
		try:
			return await self.cache.fetch(
				("student-syllabi", subject_id),
				lambda: self.api.syllabi.list_for_student(subject_id),
			)
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to load syllabi")
			return []

	async def fetch_items(self) -> List[Subject]:
		return await self.api.subjects.list_for_student()

	async def render_subject(self, subject_id: str) -> str:
		materials = await self.materials(subject_id)
		syllabi = await self.syllabi(subject_id)
		return "\n\n".join([
			"Learning materials",
			render_table(
				(Column("Title", attr("title")), Column("Type", attr("material_type")), Column("Link", attr("file_url"))),
				materials,
				"No materials for this subject",
			),
			"Syllabi",
			render_table(
				(Column("Title", attr("title")), Column("Year", attr("academic_year")), Column("Link", attr("file_url"))),
				syllabi,
				"No syllabus for this subject",
			),
		])


class StudentAssignmentsPage(ListPage):
	title = "My Assignments"
	entity = "assignment"
	query_key = ("student-assignments",)
	empty_message = "No assignments"
	columns = (
		Column("Title", attr("name")),
		Column("Subject", attr("subject_name")),
		Column("Assigned", attr("date_assigned")),
		Column("Due", lambda a: format_date(a.due_date, "No due date")),
	)

	@property
	def pending(self) -> List[Assignment]:
		return split_assignments(self.items)[0]

	@property
	def completed(self) -> List[Assignment]:
		return split_assignments(self.items)[1]

	async def fetch_items(self) -> List[Assignment]:
		return await self.api.assignments.list_for_student()

	async def submit(self, assignment: Optional[Assignment], file_url: str, submission_text: Optional[str] = None) -> bool:
		try:
			if assignment is None:
				raise SchoolHubFormError(MSG_NO_ASSIGNMENT)
			file_url = optional_text(file_url)
			if not file_url:
				raise SchoolHubFormError(MSG_SUBMISSION_URL)
			await self.api.assignments.submit(assignment.id, file_url, optional_text(submission_text))
		except SchoolHubFormError as e:
			handle_error(self.notifier, e)
			return False
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to submit assignment")
			return False
		await self.refresh()
		handle_success(self.notifier, "Assignment submitted successfully!")
		return True

	def render(self) -> str:
		pending, completed = split_assignments(self.items)
		return "\n\n".join([
			self.title,
			f"Pending ({len(pending)})",
			render_table(self.columns, pending, "No pending assignments"),
			f"Completed ({len(completed)})",
			render_table(self.columns, completed, "No completed assignments"),
		])


class StudentGradesPage(ListPage):
	title = "My Grades"
	entity = "grade"
	query_key = ("student-grades",)
	empty_message = "No grades recorded yet"
	columns = (
		Column("Subject", attr("subject_label")),
		Column("Assessment", attr("assessment_name")),
		Column("Type", attr("assessment_type")),
		Column("Marks", lambda g: f"{g.marks_obtained:g}/{g.total_marks:g}"),
		Column("Percentage", lambda g: f"{g.percentage:.1f}%"),
		Column("Grade", attr("grade_letter")),
	)

	@property
	def stats(self) -> GradeStats:
		return grade_stats(self.items)

	async def fetch_items(self) -> List[Grade]:
		return await self.api.grades.list_for_student()

	def render(self) -> str:
		return f"{super().render()}\n\n{self.stats.summary()}"

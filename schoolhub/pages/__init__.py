"""Screens, keyed by the screen names used in the route table."""

from typing import Dict, Type

from .admin import AdministratorsPage, SchoolsPage
from .base import Column, CrudPage, ListPage, Page, render_table
from .dashboard import DashboardPage
from .parent import ChildDetailPage, MyChildrenPage, PerformancePage, summarize_children
from .school_admin import (
	AcademicLevelsPage,
	ClassesPage,
	DepartmentsPage,
	ParentsPage,
	StudentsPage,
	SubjectsPage,
	TeacherAssignmentsPage,
	TeachersPage,
)
from .student import (
	StudentAssignmentsPage,
	StudentClassesPage,
	StudentGradesPage,
	StudentSubjectsPage,
	grade_stats,
	split_assignments,
)
from .teacher import (
	AssignmentsPage,
	ClassRosterPage,
	MyClassesPage,
	ResourcesPage,
	SubmissionsPage,
	SyllabiPage,
	TeacherSubjectsPage,
)

PAGES: Dict[str, Type[Page]] = {
	"dashboard": DashboardPage,
	"schools": SchoolsPage,
	"administrators": AdministratorsPage,
	"departments": DepartmentsPage,
	"academic_levels": AcademicLevelsPage,
	"subjects": SubjectsPage,
	"teachers": TeachersPage,
	"students": StudentsPage,
	"parents": ParentsPage,
	"classes": ClassesPage,
	"teacher_assignments": TeacherAssignmentsPage,
	"my_classes": MyClassesPage,
	"class_roster": ClassRosterPage,
	"teacher_subjects": TeacherSubjectsPage,
	"syllabi": SyllabiPage,
	"assignments": AssignmentsPage,
	"submissions": SubmissionsPage,
	"resources": ResourcesPage,
	"student_classes": StudentClassesPage,
	"student_assignments": StudentAssignmentsPage,
	"student_subjects": StudentSubjectsPage,
	"student_grades": StudentGradesPage,
	"my_children": MyChildrenPage,
	"child_detail": ChildDetailPage,
	"performance": PerformancePage,
}

__all__ = [
	"PAGES",
	"Column",
	"CrudPage",
	"ListPage",
	"Page",
	"render_table",
	"grade_stats",
	"split_assignments",
	"summarize_children",
]

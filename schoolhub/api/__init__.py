"""Per-resource REST wrappers.

Each wrapper maps one user action to one REST call and unwraps that
route's response envelope.
"""

from ..http import ApiClient
from .academic_levels import AcademicLevelsApi
from .assignments import AssignmentsApi
from .attendance import AttendanceApi
from .classes import ClassesApi
from .departments import DepartmentsApi
from .grades import GradesApi
from .parents import ParentsApi
from .resources import ResourcesApi
from .schools import SchoolsApi
from .students import StudentsApi
from .subjects import SubjectsApi
from .syllabi import SyllabiApi
from .teachers import TeachersApi
from .users import UsersApi


class SchoolHubApi:
	"""All wrappers bound to one HTTP client."""

	def __init__(self, client: ApiClient) -> None:
		self.client = client
		self.users = UsersApi(client)
		self.schools = SchoolsApi(client)
		self.departments = DepartmentsApi(client)
		self.academic_levels = AcademicLevelsApi(client)
		self.subjects = SubjectsApi(client)
		self.classes = ClassesApi(client)
		self.teachers = TeachersApi(client)
		self.students = StudentsApi(client)
		self.parents = ParentsApi(client)
		self.assignments = AssignmentsApi(client)
		self.resources = ResourcesApi(client)
		self.syllabi = SyllabiApi(client)
		self.grades = GradesApi(client)
		self.attendance = AttendanceApi(client)


__all__ = [
	"SchoolHubApi",
	"AcademicLevelsApi",
	"AssignmentsApi",
	"AttendanceApi",
	"ClassesApi",
	"DepartmentsApi",
	"GradesApi",
	"ParentsApi",
	"ResourcesApi",
	"SchoolsApi",
	"StudentsApi",
	"SubjectsApi",
	"SyllabiApi",
	"TeachersApi",
	"UsersApi",
]

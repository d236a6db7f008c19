"""School administration screens."""

import logging
from typing import Any, Dict, Iterable, List, Optional

import voluptuous as vol

from ..errors import handle_error, handle_success
from ..exceptions import SchoolHubError, SchoolHubFormError
from ..models import (
	AcademicLevel,
	ClassSubject,
	Department,
	Parent,
	SchoolClass,
	Student,
	Subject,
	Teacher,
)
from .base import Column, CrudPage, attr, id_list, optional_text, required_text

_LOGGER = logging.getLogger(__name__)

MSG_SELECT_CLASS = "Please select a class first"
MSG_SELECT_TEACHER_AND_SUBJECT = "Please select both teacher and subject"


def _person_fields(password_required: bool, extra: Optional[Dict[Any, Any]] = None) -> Dict[Any, Any]:
	fields = {
		vol.Required("first_name"): required_text,
		vol.Required("last_name"): required_text,
		vol.Required("email"): required_text,
		vol.Optional("phone"): optional_text,
	}
	if password_required:
		fields[vol.Required("password")] = required_text
	else:
		fields[vol.Optional("password")] = optional_text
	fields.update(extra or {})
	return fields


class DepartmentsPage(CrudPage):
	title = "Departments"
	entity = "department"
	query_key = ("departments",)
	empty_message = "No departments found"
	columns = (
		Column("Name", attr("name")),
		Column("Code", attr("code")),
		Column("Head", attr("head_of_department")),
		Column("Email", attr("email")),
		Column("Levels", lambda d: ", ".join(d.academic_levels)),
	)
	form_schema = vol.Schema({
		vol.Required("name"): required_text,
		vol.Optional("code"): optional_text,
		vol.Optional("description"): optional_text,
		vol.Optional("phone"): optional_text,
		vol.Optional("email"): optional_text,
		vol.Optional("head_of_department"): optional_text,
		vol.Optional("academic_levels", default=list): id_list,
	})
	empty_form = {
		"name": "", "code": "", "description": "", "phone": "", "email": "",
		"head_of_department": "", "academic_levels": [],
	}

	async def fetch_items(self) -> List[Department]:
		return await self.api.departments.list()

	async def create_item(self, data: Dict[str, Any]) -> Department:
		return await self.api.departments.create(data)

	async def update_item(self, item: Department, data: Dict[str, Any]) -> Department:
		return await self.api.departments.update(item.id, data)

	async def delete_item(self, item: Department) -> None:
		await self.api.departments.delete(item.id)


class AcademicLevelsPage(CrudPage):
	title = "Academic Levels"
	entity = "academic level"
	query_key = ("academic-levels",)
	empty_message = "No academic levels found"
	columns = (
		Column("Order", attr("display_order")),
		Column("Name", attr("name")),
		Column("Description", attr("description")),
	)
	form_schema = vol.Schema({
		vol.Required("name"): required_text,
		vol.Optional("description"): optional_text,
		vol.Optional("display_order", default=0): vol.Coerce(int),
	})
	empty_form = {"name": "", "description": "", "display_order": 0}

	async def fetch_items(self) -> List[AcademicLevel]:
		return await self.api.academic_levels.list()

	async def create_item(self, data: Dict[str, Any]) -> AcademicLevel:
		return await self.api.academic_levels.create(data)

	async def update_item(self, item: AcademicLevel, data: Dict[str, Any]) -> AcademicLevel:
		return await self.api.academic_levels.update(item.id, data)

	async def delete_item(self, item: AcademicLevel) -> None:
		await self.api.academic_levels.delete(item.id)


class SubjectsPage(CrudPage):
	title = "Subjects"
	entity = "subject"
	query_key = ("subjects",)
	empty_message = "No subjects found"
	columns = (
		Column("Name", attr("name")),
		Column("Code", attr("code")),
		Column("Level", attr("academic_level")),
		Column("Teacher in charge", attr("teacher_in_charge")),
	)
	form_schema = vol.Schema({
		vol.Required("name"): required_text,
		vol.Optional("code"): optional_text,
		vol.Optional("academic_level"): optional_text,
		vol.Optional("department_id"): optional_text,
		vol.Optional("teacher_in_charge"): optional_text,
		vol.Optional("course_content"): optional_text,
	})
	empty_form = {
		"name": "", "code": "", "academic_level": "", "department_id": "",
		"teacher_in_charge": "", "course_content": "",
	}

	async def fetch_items(self) -> List[Subject]:
		return await self.api.subjects.list()

	async def create_item(self, data: Dict[str, Any]) -> Subject:
		return await self.api.subjects.create(data)

	async def update_item(self, item: Subject, data: Dict[str, Any]) -> Subject:
		return await self.api.subjects.update(item.id, data)

	async def delete_item(self, item: Subject) -> None:
		await self.api.subjects.delete(item.id)


class ClassesPage(CrudPage):
	title = "Classes"
	entity = "class"
	entity_plural = "classes"
	query_key = ("classes",)
	related_keys = (("class-subjects",),)
	empty_message = "No classes found"
	columns = (
		Column("Name", attr("label")),
		Column("Level", attr("academic_level")),
		Column("Teacher in charge", attr("teacher_in_charge")),
		Column("Subject", attr("subject_name")),
		Column("Students", attr("student_count")),
	)
	form_schema = vol.Schema({
		vol.Optional("name"): optional_text,
		vol.Required("academic_level"): required_text,
		vol.Optional("teacher_in_charge"): optional_text,
		vol.Optional("subject_id"): optional_text,
	})
	empty_form = {"name": "", "academic_level": "", "teacher_in_charge": "", "subject_id": ""}

	async def fetch_items(self) -> List[SchoolClass]:
		return await self.api.classes.list()

	async def create_item(self, data: Dict[str, Any]) -> SchoolClass:
		return await self.api.classes.create(data)

	async def update_item(self, item: SchoolClass, data: Dict[str, Any]) -> SchoolClass:
		return await self.api.classes.update(item.id, data)

	async def delete_item(self, item: SchoolClass) -> None:
		await self.api.classes.delete(item.id)


class TeacherAssignmentsPage(CrudPage):
	"""Which teacher teaches which subject in the selected class."""

	title = "Teacher Assignments"
	entity = "teacher assignment"
	empty_message = "No teachers assigned to this class yet"
	columns = (
		Column("Subject", attr("subject_name")),
		Column("Teacher", attr("teacher_name")),
	)
	empty_form = {"teacher_id": "", "subject_id": ""}

	@property
	def class_id(self) -> Optional[str]:
		return self.params.get("class_id")

	@property
	def key(self):
		return ("class-subjects", self.class_id)

	async def select_class(self, class_id: str) -> None:
		self.params["class_id"] = class_id
		await self.load()

	async def load(self, force: bool = False) -> None:
		if not self.class_id:
			self.items = []
			return
		await super().load(force)

	async def fetch_items(self) -> List[ClassSubject]:
		return await self.api.classes.list_subject_teachers(self.class_id)

	def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
		if not self.class_id:
			raise SchoolHubFormError(MSG_SELECT_CLASS)
		teacher_id = optional_text(data.get("teacher_id"))
		subject_id = optional_text(data.get("subject_id"))
		if not teacher_id or not subject_id:
			raise SchoolHubFormError(MSG_SELECT_TEACHER_AND_SUBJECT)
		return {"teacher_id": teacher_id, "subject_id": subject_id}

	async def create_item(self, data: Dict[str, Any]) -> ClassSubject:
		return await self.api.classes.assign_teacher(self.class_id, data["subject_id"], data["teacher_id"])

	async def update_item(self, item: ClassSubject, data: Dict[str, Any]) -> ClassSubject:
		# Links are replaced rather than edited in place; the old one goes only once the new one exists
		link = await self.create_item(data)
		await self.api.classes.remove_teacher_assignment(item.id)
		return link

	async def delete_item(self, item: ClassSubject) -> None:
		await self.api.classes.remove_teacher_assignment(item.id)

	def render(self) -> str:
		if not self.class_id:
			return f"{self.title}\n\n{MSG_SELECT_CLASS}"
		return super().render()


class TeachersPage(CrudPage):
	title = "Teachers"
	entity = "teacher"
	query_key = ("teachers",)
	related_keys = (("class-subjects",),)
	empty_message = "No teachers found"
	columns = (
		Column("Name", attr("name")),
		Column("Email", attr("email")),
		Column("Phone", attr("phone")),
		Column("Employee no.", attr("code")),
	)
	form_schema = vol.Schema(_person_fields(True, {vol.Optional("employee_number"): optional_text}))
	edit_schema = vol.Schema(_person_fields(False, {vol.Optional("employee_number"): optional_text}))
	empty_form = {"first_name": "", "last_name": "", "email": "", "password": "", "phone": "", "employee_number": ""}

	def form_from_item(self, item: Teacher) -> Dict[str, Any]:
		data = super().form_from_item(item)
		data.update(password="", employee_number=item.code)
		return data

	async def fetch_items(self) -> List[Teacher]:
		return await self.api.teachers.list()

	async def create_item(self, data: Dict[str, Any]) -> Teacher:
		return await self.api.teachers.create(data)

	async def update_item(self, item: Teacher, data: Dict[str, Any]) -> Teacher:
		return await self.api.teachers.update(item.id, data)

	async def delete_item(self, item: Teacher) -> None:
		await self.api.teachers.delete(item.id)


class StudentsPage(CrudPage):
	title = "Students"
	entity = "student"
	query_key = ("students",)
	empty_message = "No students found"
	columns = (
		Column("Student no.", attr("student_number")),
		Column("Name", attr("name")),
		Column("Email", attr("email")),
		Column("Class", attr("class_name")),
		Column("Enrolled", attr("enrollment_date")),
	)
	_student_fields = {
		vol.Optional("student_number"): optional_text,
		vol.Optional("class_id"): optional_text,
		vol.Optional("gender"): optional_text,
		vol.Optional("date_of_birth"): optional_text,
	}
	form_schema = vol.Schema(_person_fields(True, _student_fields))
	edit_schema = vol.Schema(_person_fields(False, _student_fields))
	empty_form = {
		"first_name": "", "last_name": "", "email": "", "password": "", "phone": "",
		"student_number": "", "class_id": "", "gender": "", "date_of_birth": "",
	}

	def form_from_item(self, item: Student) -> Dict[str, Any]:
		data = super().form_from_item(item)
		data["password"] = ""
		return data

	async def fetch_items(self) -> List[Student]:
		return await self.api.students.list()

	async def create_item(self, data: Dict[str, Any]) -> Student:
		return await self.api.students.create(data)

	async def update_item(self, item: Student, data: Dict[str, Any]) -> Student:
		return await self.api.students.update(item.id, data)

	async def delete_item(self, item: Student) -> None:
		await self.api.students.delete(item.id)


class ParentsPage(CrudPage):
	"""Parent accounts; new parents can be linked to students straight away."""

	title = "Parents"
	entity = "parent"
	query_key = ("parents",)
	empty_message = "No parents found"
	columns = (
		Column("Name", attr("name")),
		Column("Email", attr("email")),
		Column("Phone", attr("phone")),
	)
	form_schema = vol.Schema(_person_fields(True, {vol.Optional("student_ids", default=list): id_list}))
	edit_schema = vol.Schema(_person_fields(False))
	empty_form = {"first_name": "", "last_name": "", "email": "", "password": "", "phone": "", "student_ids": []}

	def form_from_item(self, item: Parent) -> Dict[str, Any]:
		return {
			"first_name": item.first_name,
			"last_name": item.last_name,
			"email": item.email,
			"password": "",
			"phone": item.phone,
		}

	async def fetch_items(self) -> List[Parent]:
		return await self.api.parents.list()

	async def create_item(self, data: Dict[str, Any]) -> Parent:
		student_ids = data.pop("student_ids", [])
		parent = await self.api.parents.create(data)
		if student_ids:
			await self.api.parents.link_students(parent.id, student_ids)
		return parent

	async def update_item(self, item: Parent, data: Dict[str, Any]) -> Parent:
		return await self.api.parents.update(item.id, data)

	async def delete_item(self, item: Parent) -> None:
		await self.api.parents.delete(item.id)

	async def link_students(self, parent: Parent, student_ids: Iterable[str]) -> bool:
		student_ids = id_list(list(student_ids))
		if not student_ids:
			handle_error(self.notifier, SchoolHubFormError("Please select at least one student"))
			return False
		try:
			await self.api.parents.link_students(parent.id, student_ids)
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to link students")
			return False
		await self.refresh()
		handle_success(self.notifier, f"Linked {len(student_ids)} student(s) to {parent.name}")
		return True

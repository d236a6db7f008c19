"""Teacher screens: classes, coursework, resources and syllabi."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import voluptuous as vol

from ..const import (
	MATERIAL_TYPE_MAP,
	SYLLABUS_MAX_BYTES,
	UPLOAD_BUCKET,
	UPLOAD_FOLDER_RESOURCES,
	UPLOAD_FOLDER_SYLLABI,
)
from ..errors import handle_error, handle_info, handle_success
from ..exceptions import SchoolHubError, SchoolHubFormError
from ..models import Assignment, AttendanceRecord, Material, SchoolClass, Student, Subject, Submission, Syllabus
from .base import (
	Column,
	CrudPage,
	ListPage,
	attr,
	iso_date,
	optional_number,
	optional_text,
	render_table,
	required_text,
)

_LOGGER = logging.getLogger(__name__)

MSG_REQUIRED_FIELDS = "Please fill in all required fields"
MSG_UPLOAD_FILE = "Please upload a file"
MSG_UPLOAD_PDF = "Please upload a PDF file"
MSG_PDF_TOO_LARGE = "File size must be less than 10MB"
MSG_FILE_UPLOADED = "File uploaded successfully!"

ATTENDANCE_STATUSES = ("present", "absent", "late", "excused")
SYLLABUS_STATUSES = ("draft", "published", "archived")
CURRENT_ACADEMIC_YEAR = "2024/2025"


class MyClassesPage(ListPage):
	title = "My Classes"
	entity = "class"
	entity_plural = "classes"
	query_key = ("teacher-classes",)
	empty_message = "You have not been assigned to any classes yet"
	columns = (
		Column("Class", attr("label")),
		Column("Level", attr("academic_level")),
		Column("Subject", attr("subject_name")),
		Column("Students", attr("student_count")),
	)

	async def fetch_items(self) -> List[SchoolClass]:
		return await self.api.classes.list_for_teacher()


class ClassRosterPage(ListPage):
	"""Students of one of the teacher's classes, with attendance and announcements."""

	title = "Class Students"
	entity = "student"
	empty_message = "No students in this class"
	columns = (
		Column("Student no.", attr("student_number")),
		Column("Name", attr("name")),
		Column("Email", attr("email")),
	)

	def __init__(self, *args: Any, **kwargs: Any) -> None:
		super().__init__(*args, **kwargs)
		# None until the register has been requested
		self.register: Optional[List[AttendanceRecord]] = None

	@property
	def class_id(self) -> Optional[str]:
		return self.params.get("class_id")

	@property
	def key(self):
		return ("teacher-class-students", self.class_id)

	@property
	def register_key(self):
		return ("attendance", self.class_id)

	async def fetch_items(self) -> List[Student]:
		return await self.api.classes.list_students(self.class_id)

	async def load_register(self, force: bool = False) -> None:
		"""Fetch the attendance recorded so far for this class."""
		try:
			self.register = await self.cache.fetch(
				self.register_key, lambda: self.api.attendance.list_for_class(self.class_id), force=force
			)
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to load attendance")
			self.register = []

	def _student_name(self, record: AttendanceRecord) -> Optional[str]:
		student = self.find(record.student_id) if record.student_id else None
		return student.name if student else record.student_id

	async def mark_attendance(self, date: str, statuses: Mapping[str, str]) -> bool:
		"""Record one day's register; ``statuses`` maps student id to status."""
		try:
			date = iso_date(date)
			records = []
			for student_id, status in statuses.items():
				if status not in ATTENDANCE_STATUSES:
					raise SchoolHubFormError(f"Unknown attendance status: {status}")
				records.append({"student_id": student_id, "status": status})
			if not records:
				raise SchoolHubFormError("No attendance to record")
			await self.api.attendance.mark({"class_id": self.class_id, "date": date, "records": records})
		except vol.Invalid as e:
			handle_error(self.notifier, SchoolHubFormError(f"Date {e.msg}"))
			return False
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to record attendance")
			return False
		self.cache.invalidate(*self.register_key)
		if self.register is not None:
			await self.load_register(force=True)
		handle_success(self.notifier, "Attendance recorded successfully")
		return True

	async def announce(self, title: str, content: str) -> bool:
		if not optional_text(title) or not optional_text(content):
			handle_error(self.notifier, SchoolHubFormError(MSG_REQUIRED_FIELDS))
			return False
		try:
			await self.api.attendance.announce({"class_id": self.class_id, "title": title, "content": content})
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to post announcement")
			return False
		handle_success(self.notifier, "Announcement posted successfully")
		return True

	def render(self) -> str:
		text = super().render()
		if self.register is None:
			return text
		columns = (
			Column("Date", attr("date")),
			Column("Student", self._student_name),
			Column("Status", attr("status")),
		)
		register = render_table(columns, self.register, "No attendance recorded yet")
		return f"{text}\n\nAttendance\n\n{register}"


class TeacherSubjectsPage(ListPage):
	title = "My Subjects"
	entity = "subject"
	query_key = ("my-subjects",)
	empty_message = "No subjects assigned to you yet"
	columns = (
		Column("Subject", attr("name")),
		Column("Code", attr("code")),
		Column("Level", attr("academic_level")),
	)

	async def fetch_items(self) -> List[Subject]:
		return await self.api.subjects.list_for_teacher()


class AssignmentsPage(CrudPage):
	"""Coursework set by the teacher, optionally filtered by class."""

	title = "Assignments"
	entity = "assignment"
	related_keys = (("assignments",),)
	empty_message = "No assignments yet"
	required_message = MSG_REQUIRED_FIELDS
	columns = (
		Column("Title", attr("name")),
		Column("Subject", attr("subject_name")),
		Column("Due", attr("due_date")),
		Column("Marks", attr("total_marks")),
		Column("Status", attr("publication")),
	)
	form_schema = vol.Schema({
		vol.Required("subject_id"): required_text,
		vol.Required("class_id"): required_text,
		vol.Required("title"): required_text,
		vol.Required("due_date"): iso_date,
		vol.Optional("description"): optional_text,
		vol.Optional("instructions"): optional_text,
		vol.Optional("attachment_url"): optional_text,
		vol.Optional("total_marks", default=100): vol.All(vol.Coerce(float), vol.Range(min=0)),
		vol.Optional("is_published", default=False): vol.Boolean(),
	})
	empty_form = {
		"subject_id": "", "class_id": "", "title": "", "description": "", "instructions": "",
		"attachment_url": "", "due_date": "", "total_marks": 100, "is_published": False,
	}

	@property
	def class_id(self) -> Optional[str]:
		return self.params.get("class_id")

	@property
	def key(self):
		return ("assignments", self.class_id)

	async def filter_by_class(self, class_id: Optional[str]) -> None:
		self.params["class_id"] = class_id
		await self.load()

	def open_create(self) -> None:
		super().open_create()
		if self.class_id:
			self.form.data["class_id"] = self.class_id

	def form_from_item(self, item: Assignment) -> Dict[str, Any]:
		return {
			"subject_id": item.subject_id,
			"class_id": item.class_id,
			"title": item.name,
			"description": item.description,
			"instructions": item.instructions,
			"attachment_url": item.attachment_url or "",
			"due_date": item.due_date.date().isoformat() if item.due_date else "",
			"total_marks": item.total_marks if item.total_marks is not None else 100,
			"is_published": item.is_published,
		}

	async def fetch_items(self) -> List[Assignment]:
		return await self.api.assignments.list_for_teacher(self.class_id)

	async def create_item(self, data: Dict[str, Any]) -> Assignment:
		return await self.api.assignments.create(data)

	async def update_item(self, item: Assignment, data: Dict[str, Any]) -> Assignment:
		return await self.api.assignments.update(item.id, data)

	async def delete_item(self, item: Assignment) -> None:
		await self.api.assignments.delete(item.id)


class SubmissionsPage(ListPage):
	"""Submissions for one assignment, graded by the teacher."""

	title = "Submissions"
	entity = "submission"
	empty_message = "No submissions yet"
	columns = (
		Column("Student", attr("student_name")),
		Column("Status", attr("status")),
		Column("Submitted", attr("submitted_at")),
		Column("Score", attr("score")),
		Column("Link", attr("file_url")),
	)

	@property
	def assignment_id(self) -> Optional[str]:
		return self.params.get("assignment_id")

	@property
	def key(self):
		return ("submissions", self.assignment_id)

	async def fetch_items(self) -> List[Submission]:
		return await self.api.assignments.list_submissions(self.assignment_id)

	async def grade(self, submission: Submission, score: Any, feedback: Optional[str] = None) -> bool:
		try:
			value = optional_number(score)
		except vol.Invalid:
			value = None
		if value is None or value < 0:
			handle_error(self.notifier, SchoolHubFormError("Please enter a valid score"))
			return False
		try:
			await self.api.assignments.grade_submission(submission.id, value, optional_text(feedback))
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to grade submission")
			return False
		await self.refresh()
		handle_success(self.notifier, "Submission graded successfully")
		return True


class _UploadMixin:
	"""Uploads a local file and puts its public URL into the open form."""

	upload_folder = UPLOAD_FOLDER_RESOURCES
	url_field = "file_url"

	def check_upload(self, path: Path) -> None:
		if not path.is_file():
			raise SchoolHubFormError(f"File not found: {path}")

	def after_upload(self, path: Path, url: str) -> None:
		self.form.data[self.url_field] = url

	async def upload(self, file_path: Union[str, Path]) -> Optional[str]:
		path = Path(file_path).expanduser()
		try:
			self.check_upload(path)
			handle_info(self.notifier, "Uploading file...")
			url = await self.api.resources.upload_file(path, UPLOAD_BUCKET, self.upload_folder)
			if not url:
				raise SchoolHubError("Upload did not return a file URL")
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to upload file")
			return None
		self.after_upload(path, url)
		handle_success(self.notifier, MSG_FILE_UPLOADED)
		return url


class ResourcesPage(_UploadMixin, CrudPage):
	"""Learning resources per subject."""

	title = "Learning Resources"
	entity = "resource"
	related_keys = (("materials",),)
	url_field = "publish_url"
	required_message = MSG_REQUIRED_FIELDS
	empty_message = "No resources yet"
	columns = (
		Column("Title", attr("title")),
		Column("Type", attr("material_type")),
		Column("Subject", attr("subject_name")),
		Column("Size (MB)", attr("size_mb")),
		Column("Link", attr("file_url")),
	)
	form_schema = vol.Schema({
		vol.Required("subject_id"): required_text,
		vol.Required("name"): required_text,
		vol.Required("description"): required_text,
		vol.Optional("class_id"): optional_text,
		vol.Optional("type", default="PDF"): vol.In(tuple(MATERIAL_TYPE_MAP)),
		vol.Optional("publish_url"): optional_text,
		vol.Optional("size_mb"): optional_number,
	})
	empty_form = {"subject_id": "", "class_id": "", "name": "", "description": "", "publish_url": "", "size_mb": 0, "type": "PDF"}

	@property
	def subject_id(self) -> Optional[str]:
		return self.params.get("subject_id")

	@property
	def key(self):
		return ("materials", self.subject_id)

	def after_upload(self, path: Path, url: str) -> None:
		super().after_upload(path, url)
		self.form.data["size_mb"] = round(path.stat().st_size / (1024 * 1024), 2)
		if not optional_text(self.form.data.get("name")):
			self.form.data["name"] = path.stem

	def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
		payload = super().validate(data)
		if not payload.get("publish_url"):
			raise SchoolHubFormError(MSG_UPLOAD_FILE)
		return payload

	def form_from_item(self, item: Material) -> Dict[str, Any]:
		label = next((k for k, v in MATERIAL_TYPE_MAP.items() if v == item.material_type), "Other")
		return {
			"subject_id": item.subject_id,
			"class_id": item.class_id,
			"name": item.title,
			"description": item.description,
			"publish_url": item.file_url,
			"size_mb": item.size_mb,
			"type": label,
		}

	async def fetch_items(self) -> List[Material]:
		return await self.api.resources.list_for_teacher(self.subject_id)

	async def create_item(self, data: Dict[str, Any]) -> Material:
		return await self.api.resources.create(data)

	async def update_item(self, item: Material, data: Dict[str, Any]) -> Material:
		return await self.api.resources.update(item.id, data)

	async def delete_item(self, item: Material) -> None:
		await self.api.resources.delete(item.id)


class SyllabiPage(_UploadMixin, CrudPage):
	"""Syllabus PDFs per subject."""

	title = "Syllabi"
	entity = "syllabus"
	entity_plural = "syllabi"
	query_key = ("syllabi",)
	upload_folder = UPLOAD_FOLDER_SYLLABI
	required_message = MSG_REQUIRED_FIELDS
	empty_message = "No syllabi uploaded yet"
	columns = (
		Column("Title", attr("title")),
		Column("Subject", attr("subject_name")),
		Column("Year", attr("academic_year")),
		Column("Term", attr("term")),
		Column("Status", attr("status")),
	)
	form_schema = vol.Schema({
		vol.Required("subject_id"): required_text,
		vol.Required("name"): required_text,
		vol.Required("description"): required_text,
		vol.Optional("class_id"): optional_text,
		vol.Optional("file_url"): optional_text,
		vol.Optional("file_size_mb"): optional_number,
		vol.Optional("academic_year", default=CURRENT_ACADEMIC_YEAR): required_text,
		vol.Optional("term"): optional_text,
		vol.Optional("status", default="published"): vol.In(SYLLABUS_STATUSES),
	})
	empty_form = {
		"subject_id": "", "name": "", "description": "", "file_url": "", "file_size_mb": 0,
		"academic_year": CURRENT_ACADEMIC_YEAR, "status": "published",
	}

	def check_upload(self, path: Path) -> None:
		super().check_upload(path)
		if path.suffix.lower() != ".pdf":
			raise SchoolHubFormError(MSG_UPLOAD_PDF)
		if path.stat().st_size > SYLLABUS_MAX_BYTES:
			raise SchoolHubFormError(MSG_PDF_TOO_LARGE)

	def after_upload(self, path: Path, url: str) -> None:
		super().after_upload(path, url)
		self.form.data["file_size_mb"] = round(path.stat().st_size / (1024 * 1024), 2)
		if not optional_text(self.form.data.get("name")):
			self.form.data["name"] = path.stem

	def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
		payload = super().validate(data)
		if not payload.get("file_url"):
			raise SchoolHubFormError(MSG_UPLOAD_PDF)
		return payload

	def form_from_item(self, item: Syllabus) -> Dict[str, Any]:
		return {
			"subject_id": item.subject_id,
			"class_id": item.class_id,
			"name": item.title,
			"description": item.description,
			"file_url": item.file_url,
			"file_size_mb": round(item.file_size / (1024 * 1024), 2) if item.file_size else None,
			"academic_year": item.academic_year or CURRENT_ACADEMIC_YEAR,
			"term": item.term,
			"status": item.status,
		}

	async def fetch_items(self) -> List[Syllabus]:
		return await self.api.syllabi.list_for_teacher()

	async def create_item(self, data: Dict[str, Any]) -> Syllabus:
		return await self.api.syllabi.create(data)

	async def update_item(self, item: Syllabus, data: Dict[str, Any]) -> Syllabus:
		return await self.api.syllabi.update(item.id, data)

	async def delete_item(self, item: Syllabus) -> None:
		await self.api.syllabi.delete(item.id)

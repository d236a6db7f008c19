"""Data models for SchoolHub entities.

Backend payloads are not always complete; every ``from_dict`` tolerates
missing keys and falls back to empty values instead of raising.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .const import COMPLETED_SUBMISSION_STATUSES, PASS_PERCENTAGE


def parse_datetime(value: Any) -> Optional[datetime]:
	"""Parse ISO-8601 timestamps (``Z`` suffix allowed); None when unparseable."""
	if isinstance(value, datetime):
		return value
	if not isinstance(value, str) or not value.strip():
		return None
	text = value.strip()
	if text.endswith("Z"):
		text = text[:-1] + "+00:00"
	try:
		return datetime.fromisoformat(text)
	except ValueError:
		return None


def format_date(value: Optional[datetime], placeholder: str = "-") -> str:
	return value.strftime("%Y-%m-%d") if value else placeholder


def _str(data: Dict[str, Any], key: str, default: str = "") -> str:
	value = data.get(key)
	return str(value) if value is not None else default


def _opt(data: Dict[str, Any], key: str) -> Optional[str]:
	value = data.get(key)
	return str(value) if value not in (None, "") else None


def _num(value: Any, default: float = 0.0) -> float:
	try:
		return float(value)
	except (TypeError, ValueError):
		return default


def _first(value: Any) -> Dict[str, Any]:
	"""Joined relations arrive as an object or a one-element list."""
	if isinstance(value, list):
		value = value[0] if value else None
	return value if isinstance(value, dict) else {}


def full_name(first_name: Optional[str], last_name: Optional[str], placeholder: str = "Unknown") -> str:
	name = f"{first_name or ''} {last_name or ''}".strip()
	return name or placeholder


@dataclass
class User:
	"""Profile of the signed-in account."""
	id: str
	email: str
	first_name: str = ""
	last_name: str = ""
	account_type: str = ""
	school_id: Optional[str] = None
	roles: List[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if not self.roles and self.account_type:
			self.roles = [self.account_type]

	@property
	def name(self) -> str:
		return full_name(self.first_name, self.last_name, placeholder="User")

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "User":
		roles = data.get("roles") or []
		if isinstance(roles, str):
			roles = [roles]
		return cls(
			id=_str(data, "id"),
			email=_str(data, "email"),
			first_name=_str(data, "first_name"),
			last_name=_str(data, "last_name"),
			account_type=_str(data, "account_type"),
			school_id=_opt(data, "school_id"),
			roles=[str(role) for role in roles],
		)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"email": self.email,
			"first_name": self.first_name,
			"last_name": self.last_name,
			"account_type": self.account_type,
			"school_id": self.school_id,
			"roles": list(self.roles),
		}


@dataclass
class Person:
	"""Administrator, teacher, student or parent account as listed by admins."""
	id: str
	email: str
	first_name: str = ""
	last_name: str = ""
	phone: Optional[str] = None
	code: Optional[str] = None
	school_id: Optional[str] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	@property
	def name(self) -> str:
		return full_name(self.first_name, self.last_name)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Person":
		# Some listings nest the account under "user"
		user = _first(data.get("user"))
		merged = {**user, **{k: v for k, v in data.items() if v is not None}}
		return cls(
			id=_str(merged, "id"),
			email=_str(merged, "email"),
			first_name=_str(merged, "first_name"),
			last_name=_str(merged, "last_name"),
			phone=_opt(merged, "phone"),
			code=_opt(merged, "code") or _opt(merged, "employee_number"),
			school_id=_opt(merged, "school_id"),
			created_at=parse_datetime(merged.get("created_at")),
			updated_at=parse_datetime(merged.get("updated_at")),
		)


@dataclass
class Administrator(Person):
	"""School administrator account."""
	pass


@dataclass
class Teacher(Person):
	"""Teacher account."""
	pass


@dataclass
class Parent(Person):
	"""Parent or guardian account."""
	pass


@dataclass
class Student(Person):
	"""Student enrolled in a school."""
	student_number: Optional[str] = None
	class_id: Optional[str] = None
	class_name: Optional[str] = None
	gender: Optional[str] = None
	date_of_birth: Optional[str] = None
	enrollment_date: Optional[datetime] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Student":
		base = Person.from_dict(data)
		klass = _first(data.get("class"))
		return cls(
			**base.__dict__,
			student_number=_opt(data, "student_number"),
			class_id=_opt(data, "class_id") or _opt(klass, "id"),
			class_name=_opt(data, "class_name") or _opt(klass, "name"),
			gender=_opt(data, "gender"),
			date_of_birth=_opt(data, "date_of_birth"),
			enrollment_date=parse_datetime(data.get("enrollment_date")),
		)


@dataclass
class School:
	"""A school managed by the platform."""
	id: str
	name: str
	address: Optional[str] = None
	phone: Optional[str] = None
	email: Optional[str] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "School":
		return cls(
			id=_str(data, "id"),
			name=_str(data, "name", "Unnamed school"),
			address=_opt(data, "address"),
			phone=_opt(data, "phone"),
			email=_opt(data, "email"),
			created_at=parse_datetime(data.get("created_at")),
			updated_at=parse_datetime(data.get("updated_at")),
		)


@dataclass
class Department:
	id: str
	name: str
	school_id: str = ""
	code: Optional[str] = None
	description: Optional[str] = None
	phone: Optional[str] = None
	email: Optional[str] = None
	head_of_department: Optional[str] = None
	academic_levels: List[str] = field(default_factory=list)
	created_at: Optional[datetime] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Department":
		return cls(
			id=_str(data, "id"),
			name=_str(data, "name"),
			school_id=_str(data, "school_id"),
			code=_opt(data, "code"),
			description=_opt(data, "description"),
			phone=_opt(data, "phone"),
			email=_opt(data, "email"),
			head_of_department=_opt(data, "head_of_department"),
			academic_levels=[str(level) for level in data.get("academic_levels") or []],
			created_at=parse_datetime(data.get("created_at")),
		)


@dataclass
class AcademicLevel:
	id: str
	name: str
	description: Optional[str] = None
	display_order: int = 0
	created_at: Optional[datetime] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "AcademicLevel":
		return cls(
			id=_str(data, "id"),
			name=_str(data, "name"),
			description=_opt(data, "description"),
			display_order=int(_num(data.get("display_order"))),
			created_at=parse_datetime(data.get("created_at")),
		)


@dataclass
class Subject:
	id: str
	name: str
	code: Optional[str] = None
	academic_level: Optional[str] = None
	department_id: Optional[str] = None
	teacher_in_charge: Optional[str] = None
	course_content: Optional[str] = None
	school_id: Optional[str] = None
	created_at: Optional[datetime] = None

	@property
	def label(self) -> str:
		return f"{self.name} ({self.code})" if self.code else self.name

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Subject":
		# Teacher and student listings may nest the subject row
		nested = _first(data.get("subject"))
		source = nested if nested and not data.get("name") else data
		return cls(
			id=_str(source, "id"),
			name=_str(source, "name", "Unknown Subject"),
			code=_opt(source, "code"),
			academic_level=_opt(source, "academic_level"),
			department_id=_opt(source, "department_id"),
			teacher_in_charge=_opt(source, "teacher_in_charge"),
			course_content=_opt(source, "course_content"),
			school_id=_opt(source, "school_id"),
			created_at=parse_datetime(source.get("created_at")),
		)


@dataclass
class SchoolClass:
	id: str
	name: str = ""
	academic_level: Optional[str] = None
	teacher_in_charge: Optional[str] = None
	subject_id: Optional[str] = None
	subject_name: Optional[str] = None
	school_id: Optional[str] = None
	student_count: int = 0
	created_at: Optional[datetime] = None

	@property
	def label(self) -> str:
		return self.name or self.academic_level or self.id

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "SchoolClass":
		subject = _first(data.get("subject"))
		students = data.get("students")
		count = data.get("student_count")
		if count is None and isinstance(students, list):
			count = len(students)
		return cls(
			id=_str(data, "id"),
			name=_str(data, "name"),
			academic_level=_opt(data, "academic_level") or _opt(data, "level"),
			teacher_in_charge=_opt(data, "teacher_in_charge"),
			subject_id=_opt(data, "subject_id") or _opt(subject, "id"),
			subject_name=_opt(subject, "name"),
			school_id=_opt(data, "school_id"),
			student_count=int(_num(count)),
			created_at=parse_datetime(data.get("created_at")),
		)


@dataclass
class ClassSubject:
	"""Link of a subject to a class, taught by one teacher."""
	id: str
	class_id: str
	subject_id: str
	teacher_id: str
	subject_name: str = "Unknown Subject"
	teacher_name: str = "Unassigned"

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "ClassSubject":
		subject = _first(data.get("subject"))
		teacher = _first(data.get("teacher"))
		teacher_user = _first(teacher.get("user")) or teacher
		return cls(
			id=_str(data, "id"),
			class_id=_str(data, "class_id"),
			subject_id=_str(data, "subject_id") or _str(subject, "id"),
			teacher_id=_str(data, "teacher_id") or _str(teacher, "id"),
			subject_name=_str(subject, "name", "Unknown Subject"),
			teacher_name=full_name(teacher_user.get("first_name"), teacher_user.get("last_name"), "Unassigned"),
		)


@dataclass
class Assignment:
	id: str
	name: str
	description: str = ""
	subject_id: Optional[str] = None
	class_id: Optional[str] = None
	publish_url: Optional[str] = None
	submission_url: Optional[str] = None
	date_assigned: Optional[datetime] = None
	due_date: Optional[datetime] = None
	percentage_of_coursework: float = 0.0
	total_marks: Optional[float] = None
	subject_name: Optional[str] = None
	status: Optional[str] = None
	instructions: str = ""
	attachment_url: Optional[str] = None
	is_published: bool = False

	@property
	def publication(self) -> str:
		return "Published" if self.is_published else "Draft"

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Assignment":
		subject = _first(data.get("subject"))
		total = data.get("total_marks")
		return cls(
			id=_str(data, "id"),
			name=_str(data, "name") or _str(data, "title", "Untitled"),
			description=_str(data, "description"),
			subject_id=_opt(data, "subject_id") or _opt(subject, "id"),
			class_id=_opt(data, "class_id"),
			publish_url=_opt(data, "publish_url"),
			submission_url=_opt(data, "submission_url"),
			date_assigned=parse_datetime(data.get("date_assigned")),
			due_date=parse_datetime(data.get("due_date")),
			percentage_of_coursework=_num(data.get("percentage_of_coursework")),
			total_marks=_num(total) if total is not None else None,
			subject_name=_opt(subject, "name"),
			status=_opt(data, "status"),
			instructions=_str(data, "instructions"),
			attachment_url=_opt(data, "attachment_url"),
			is_published=bool(data.get("is_published")),
		)


@dataclass
class Submission:
	"""A student's submission for an assignment."""
	id: str
	assignment_id: Optional[str] = None
	student_id: Optional[str] = None
	status: str = "pending"
	file_url: Optional[str] = None
	submission_text: Optional[str] = None
	score: Optional[float] = None
	feedback: Optional[str] = None
	submitted_at: Optional[datetime] = None
	assignment: Optional[Assignment] = None
	student_name: Optional[str] = None

	@property
	def is_completed(self) -> bool:
		return self.status in COMPLETED_SUBMISSION_STATUSES

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Submission":
		assignment = _first(data.get("assignment"))
		student = _first(data.get("student"))
		student_user = _first(student.get("user")) or student
		score = data.get("score", data.get("marks_obtained"))
		return cls(
			id=_str(data, "id"),
			assignment_id=_opt(data, "assignment_id") or _opt(assignment, "id"),
			student_id=_opt(data, "student_id") or _opt(student, "id"),
			status=_str(data, "status", "pending") or "pending",
			file_url=_opt(data, "file_url"),
			submission_text=_opt(data, "submission_text"),
			score=_num(score) if score is not None else None,
			feedback=_opt(data, "feedback"),
			submitted_at=parse_datetime(data.get("submitted_at")),
			assignment=Assignment.from_dict(assignment) if assignment else None,
			student_name=full_name(student_user.get("first_name"), student_user.get("last_name")) if student_user else None,
		)


@dataclass
class Material:
	"""Learning resource uploaded by a teacher."""
	id: str
	title: str
	description: str = ""
	subject_id: Optional[str] = None
	class_id: Optional[str] = None
	file_url: Optional[str] = None
	file_size: Optional[int] = None
	material_type: str = "other"
	is_approved: Optional[bool] = None
	subject_name: Optional[str] = None
	created_at: Optional[datetime] = None

	@property
	def size_mb(self) -> Optional[float]:
		if self.file_size is None:
			return None
		return round(self.file_size / (1024 * 1024), 2)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Material":
		subject = _first(data.get("subject"))
		size = data.get("file_size")
		return cls(
			id=_str(data, "id"),
			title=_str(data, "title") or _str(data, "name", "Untitled"),
			description=_str(data, "description"),
			subject_id=_opt(data, "subject_id") or _opt(subject, "id"),
			class_id=_opt(data, "class_id"),
			file_url=_opt(data, "file_url"),
			file_size=int(_num(size)) if size is not None else None,
			material_type=_str(data, "material_type", "other") or "other",
			is_approved=data.get("is_approved"),
			subject_name=_opt(subject, "name"),
			created_at=parse_datetime(data.get("created_at")),
		)


@dataclass
class Syllabus:
	id: str
	title: str
	description: str = ""
	subject_id: Optional[str] = None
	class_id: Optional[str] = None
	file_url: Optional[str] = None
	file_size: Optional[int] = None
	academic_year: str = ""
	term: Optional[str] = None
	status: str = "draft"
	subject_name: Optional[str] = None
	created_at: Optional[datetime] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Syllabus":
		subject = _first(data.get("subject"))
		size = data.get("file_size")
		return cls(
			id=_str(data, "id"),
			title=_str(data, "title") or _str(data, "name", "Untitled"),
			description=_str(data, "description"),
			subject_id=_opt(data, "subject_id") or _opt(subject, "id"),
			class_id=_opt(data, "class_id"),
			file_url=_opt(data, "file_url"),
			file_size=int(_num(size)) if size is not None else None,
			academic_year=_str(data, "academic_year"),
			term=_opt(data, "term"),
			status=_str(data, "status", "draft") or "draft",
			subject_name=_opt(subject, "name"),
			created_at=parse_datetime(data.get("created_at")),
		)


@dataclass
class Grade:
	id: str
	subject_id: Optional[str] = None
	assessment_type: str = ""
	assessment_name: str = ""
	marks_obtained: float = 0.0
	total_marks: float = 0.0
	grade_letter: Optional[str] = None
	remarks: Optional[str] = None
	score: Optional[float] = None
	subject_name: str = "Unknown Subject"
	subject_code: Optional[str] = None
	created_at: Optional[datetime] = None

	@property
	def subject_label(self) -> str:
		return f"{self.subject_name} ({self.subject_code})" if self.subject_code else self.subject_name

	@property
	def percentage(self) -> float:
		if self.total_marks <= 0:
			return 0.0
		return self.marks_obtained / self.total_marks * 100

	@property
	def passed(self) -> bool:
		return self.percentage >= PASS_PERCENTAGE

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Grade":
		subject = _first(data.get("subject"))
		score = data.get("score")
		return cls(
			id=_str(data, "id"),
			subject_id=_opt(data, "subject_id") or _opt(subject, "id"),
			assessment_type=_str(data, "assessment_type"),
			assessment_name=_str(data, "assessment_name"),
			marks_obtained=_num(data.get("marks_obtained")),
			total_marks=_num(data.get("total_marks")),
			grade_letter=_opt(data, "grade_letter"),
			remarks=_opt(data, "remarks"),
			score=_num(score) if score is not None else None,
			subject_name=_str(subject, "name", "Unknown Subject") or "Unknown Subject",
			subject_code=_opt(subject, "code"),
			created_at=parse_datetime(data.get("created_at")),
		)


@dataclass
class Child:
	"""A student linked to the signed-in parent."""
	id: str
	student_number: str = ""
	first_name: str = ""
	last_name: str = ""
	email: Optional[str] = None
	class_id: Optional[str] = None
	class_name: Optional[str] = None
	class_level: Optional[str] = None

	@property
	def name(self) -> str:
		return full_name(self.first_name, self.last_name)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Child":
		user = _first(data.get("user"))
		klass = _first(data.get("class"))
		return cls(
			id=_str(data, "id"),
			student_number=_str(data, "student_number"),
			first_name=_str(user, "first_name"),
			last_name=_str(user, "last_name"),
			email=_opt(user, "email"),
			class_id=_opt(klass, "id"),
			class_name=_opt(klass, "name"),
			class_level=_opt(klass, "level"),
		)


@dataclass
class AttendanceRecord:
	date: Optional[datetime]
	status: str
	student_id: Optional[str] = None
	class_id: Optional[str] = None
	remarks: Optional[str] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "AttendanceRecord":
		return cls(
			date=parse_datetime(data.get("date")),
			status=_str(data, "status", "unknown") or "unknown",
			student_id=_opt(data, "student_id"),
			class_id=_opt(data, "class_id"),
			remarks=_opt(data, "remarks"),
		)


@dataclass
class AttendanceSummary:
	records: List[AttendanceRecord] = field(default_factory=list)
	total_days: int = 0
	present_days: int = 0
	percentage: str = "0"

	@classmethod
	def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AttendanceSummary":
		data = data or {}
		summary = data.get("summary") or {}
		return cls(
			records=[AttendanceRecord.from_dict(r) for r in data.get("records") or [] if isinstance(r, dict)],
			total_days=int(_num(summary.get("totalDays"))),
			present_days=int(_num(summary.get("presentDays"))),
			percentage=str(summary.get("percentage", "0")),
		)


@dataclass
class ChildPerformance:
	grades: List[Grade] = field(default_factory=list)

	@property
	def average_score(self) -> Optional[float]:
		"""Mean of grade scores, missing scores counted as 0."""
		if not self.grades:
			return None
		return sum(grade.score or 0 for grade in self.grades) / len(self.grades)

	@classmethod
	def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ChildPerformance":
		data = data or {}
		return cls(grades=[Grade.from_dict(g) for g in data.get("grades") or [] if isinstance(g, dict)])

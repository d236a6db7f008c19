"""Tests for parsing backend rows into models."""

from datetime import datetime, timezone

from schoolhub.models import (
	Assignment,
	AttendanceSummary,
	ClassSubject,
	Grade,
	Material,
	Person,
	SchoolClass,
	Student,
	Subject,
	Submission,
	User,
	format_date,
	parse_datetime,
)


def test_parse_datetime():
	assert parse_datetime("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
	assert parse_datetime("2024-05-01") == datetime(2024, 5, 1)
	assert parse_datetime("next week") is None
	assert parse_datetime(None) is None


def test_format_date():
	assert format_date(datetime(2024, 5, 1, 10, 0)) == "2024-05-01"
	assert format_date(None) == "-"
	assert format_date(None, "No due date") == "No due date"


def test_user_roles_default_to_account_type():
	user = User.from_dict({"id": 1, "email": "t@school.test", "account_type": "teacher"})

	assert user.id == "1"
	assert user.roles == ["teacher"]
	assert user.name == "User"
	assert User.from_dict(user.to_dict()) == user


def test_person_nested_user():
	person = Person.from_dict({
		"id": "t1",
		"employee_number": "E-7",
		"user": {"email": "tom@school.test", "first_name": "Tom", "last_name": "Banda"},
	})

	assert (person.name, person.email, person.code) == ("Tom Banda", "tom@school.test", "E-7")


def test_student_class():
	student = Student.from_dict({
		"id": "s1",
		"email": "s@school.test",
		"student_number": "S001",
		"class": {"id": "k1", "name": "7A"},
	})

	assert (student.class_id, student.class_name) == ("k1", "7A")
	assert Student.from_dict({"id": "s2"}).name == "Unknown"


def test_subject_nested_row():
	subject = Subject.from_dict({"id": "link-1", "subject": {"id": "s1", "name": "Maths", "code": "MAT"}})

	assert subject.id == "s1"
	assert subject.label == "Maths (MAT)"
	assert Subject.from_dict({}).name == "Unknown Subject"


def test_class_student_count():
	klass = SchoolClass.from_dict({"id": "c1", "level": "Form 1", "students": [{}, {}], "subject": [{"id": "s1", "name": "Maths"}]})

	assert klass.student_count == 2
	assert klass.academic_level == "Form 1"
	assert klass.label == "Form 1"
	assert klass.subject_name == "Maths"


def test_class_subject_defaults():
	link = ClassSubject.from_dict({"id": "cs1", "class_id": "c1", "subject_id": "s1", "teacher_id": "t1"})

	assert link.subject_name == "Unknown Subject"
	assert link.teacher_name == "Unassigned"


def test_assignment_title_alias():
	assignment = Assignment.from_dict({"id": "a1", "title": "Essay", "due_date": "2024-06-01T00:00:00Z", "total_marks": "50"})

	assert assignment.name == "Essay"
	assert assignment.total_marks == 50.0
	assert assignment.due_date.year == 2024


def test_submission():
	submission = Submission.from_dict({
		"id": "sub1",
		"status": "submitted",
		"marks_obtained": 12,
		"assignment": {"id": "a1", "name": "Essay"},
		"student": {"id": "s1", "user": {"first_name": "Alice", "last_name": "Moyo"}},
	})

	assert submission.is_completed
	assert submission.score == 12.0
	assert submission.assignment.name == "Essay"
	assert submission.student_name == "Alice Moyo"
	assert not Submission.from_dict({"id": "sub2"}).is_completed


def test_material_size():
	assert Material.from_dict({"id": "m1", "name": "Notes", "file_size": 2621440}).size_mb == 2.5
	assert Material.from_dict({"id": "m2"}).size_mb is None


def test_grade_percentage():
	grade = Grade.from_dict({"id": "g1", "marks_obtained": "45", "total_marks": 60, "subject": {"name": "Physics", "code": "PHY"}})

	assert grade.percentage == 75.0
	assert grade.passed
	assert grade.subject_label == "Physics (PHY)"
	assert Grade(id="g2").percentage == 0.0


def test_attendance_summary():
	summary = AttendanceSummary.from_dict({
		"records": [{"date": "2024-03-01", "status": "present"}, "junk"],
		"summary": {"totalDays": 3, "presentDays": 2, "percentage": "66.7"},
	})

	assert len(summary.records) == 1
	assert (summary.total_days, summary.present_days, summary.percentage) == (3, 2, "66.7")
	assert AttendanceSummary.from_dict(None).percentage == "0"

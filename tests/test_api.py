"""Tests for the REST wrappers against a local test server."""

from aiohttp import web
import pytest

from schoolhub.api import SchoolHubApi
from schoolhub.api.base import clean_payload, parse_list, unwrap_data
from schoolhub.api.resources import material_payload, material_type_for
from schoolhub.exceptions import SchoolHubDataError
from schoolhub.models import Department


def _json(body, status=200):
	async def handler(request):
		return web.json_response(body, status=status)
	return handler


@pytest.fixture
def make_api(make_client):
	def _make(server):
		return SchoolHubApi(make_client(server))
	return _make


def test_unwrap_data():
	assert unwrap_data({"statusCode": 200, "data": [1]}) == [1]
	assert unwrap_data({"data": None}, []) == []
	assert unwrap_data([1, 2], "default") == "default"


def test_parse_list_skips_non_objects():
	rows = parse_list([{"id": "1", "name": "Science"}, "junk", None], Department.from_dict)

	assert [row.name for row in rows] == ["Science"]
	assert parse_list({"unexpected": True}, Department.from_dict) == []


def test_clean_payload():
	assert clean_payload({"a": 1, "b": None, "c": ""}) == {"a": 1, "c": ""}


def test_material_payload():
	payload = material_payload({
		"name": "Week 1 notes",
		"description": "",
		"type": "Document",
		"publish_url": "https://files.test/w1.docx",
		"size_mb": 1.5,
		"subject_id": "s1",
		"class_id": "",
	})

	assert payload == {
		"title": "Week 1 notes",
		"description": "",
		"material_type": "doc",
		"file_url": "https://files.test/w1.docx",
		"file_size": 1572864,
		"subject_id": "s1",
		"class_id": None,
	}
	assert material_type_for(None) == "other"
	assert material_type_for("Audio") == "audio"


class TestSchoolAdminWrappers:

	async def test_departments_envelope(self, backend, make_api):
		server = await backend([
			web.get("/api/school-admin/departments", _json({"statusCode": 200, "data": [{"id": "d1", "name": "Science", "academic_levels": ["Form 1"]}]})),
			web.post("/api/school-admin/departments", _json({"statusCode": 201, "data": {"id": "d2", "name": "Arts"}})),
		])
		api = make_api(server)

		departments = await api.departments.list()
		created = await api.departments.create({"name": "Arts", "code": None})

		assert departments[0].academic_levels == ["Form 1"]
		assert created.id == "d2"
		assert server.calls[1]["json"] == {"name": "Arts"}

	async def test_create_without_object_raises(self, backend, make_api):
		server = await backend([web.post("/api/school-admin/subjects", _json({"statusCode": 201, "data": "ok"}))])

		with pytest.raises(SchoolHubDataError):
			await make_api(server).subjects.create({"name": "Maths"})

	async def test_academic_levels_sorted(self, backend, make_api):
		server = await backend([web.get("/api/school-admin/academic-levels", _json({"data": [
			{"id": "2", "name": "Form 2", "display_order": 2},
			{"id": "1", "name": "Form 1", "display_order": 1},
		]}))])

		levels = await make_api(server).academic_levels.list()

		assert [level.name for level in levels] == ["Form 1", "Form 2"]

	async def test_update_drops_password(self, backend, make_api):
		server = await backend([web.patch("/api/school-admin/teachers/t1", _json({"data": {"id": "t1", "email": "t@school.test"}}))])

		await make_api(server).teachers.update("t1", {"first_name": "Tom", "password": "secret"})

		assert server.calls[0]["json"] == {"first_name": "Tom"}

	async def test_link_students_posts_per_student(self, backend, make_api):
		server = await backend([web.post("/api/school-admin/parents/{parent_id}/students", _json({"success": True}))])

		await make_api(server).parents.link_students("p1", ["s1", "s2"])

		assert sorted(call["json"]["student_id"] for call in server.calls) == ["s1", "s2"]
		assert set(server.paths()) == {"/api/school-admin/parents/p1/students"}

	async def test_class_subjects_filtered_by_class(self, backend, make_api):
		server = await backend([web.get("/api/school-admin/class-subjects", _json({"data": [{
			"id": "cs1",
			"class_id": "c1",
			"subject": {"id": "s1", "name": "Maths"},
			"teacher": {"id": "t1", "user": {"first_name": "Tom", "last_name": "Banda"}},
		}]}))])

		links = await make_api(server).classes.list_subject_teachers("c1")

		assert server.calls[0]["query"] == {"class_id": "c1"}
		assert (links[0].subject_name, links[0].teacher_name, links[0].teacher_id) == ("Maths", "Tom Banda", "t1")


class TestTeacherWrappers:

	async def test_assignments_filtered_by_class(self, backend, make_api):
		server = await backend([web.get("/api/teacher/assignments", _json({"success": True, "assignments": [
			{"id": "a1", "title": "Essay", "class_id": "c1"},
			{"id": "a2", "title": "Quiz", "class_id": "c2"},
		]}))])

		assignments = await make_api(server).assignments.list_for_teacher("c1")

		assert [a.name for a in assignments] == ["Essay"]

	async def test_create_material(self, backend, make_api):
		server = await backend([web.post("/api/teacher/materials", _json({"success": True, "material": {"id": "m1", "title": "Notes", "file_size": 1048576}}))])

		material = await make_api(server).resources.create({
			"name": "Notes", "description": "Week 1", "type": "PDF",
			"publish_url": "https://files.test/n.pdf", "size_mb": 1, "subject_id": "s1",
		})

		assert material.size_mb == 1.0
		assert server.calls[0]["json"] == {
			"title": "Notes",
			"description": "Week 1",
			"material_type": "pdf",
			"file_url": "https://files.test/n.pdf",
			"file_size": 1048576,
			"subject_id": "s1",
		}

	async def test_upload_returns_public_url(self, backend, make_api, tmp_path):
		async def handler(request):
			await request.post()
			return web.json_response({"publicUrl": "https://files.test/x.pdf"})

		server = await backend([web.post("/api/teacher/upload-file", handler)])
		document = tmp_path / "x.pdf"
		document.write_bytes(b"%PDF")

		assert await make_api(server).resources.upload_file(document, "syllabi", "course-outlines") == "https://files.test/x.pdf"

	async def test_grade_submission(self, backend, make_api):
		server = await backend([web.put("/api/teacher/submissions/sub1/grade", _json({"submission": {"id": "sub1", "status": "graded", "score": 18}}))])

		submission = await make_api(server).assignments.grade_submission("sub1", 18, None)

		assert submission.is_completed
		assert server.calls[0]["json"] == {"score": 18}


class TestStudentAndParentWrappers:

	async def test_student_dashboard(self, backend, make_api):
		server = await backend([web.get("/api/student/dashboard", _json({"success": True, "stats": {"classes": 4, "pendingAssignments": 2}}))])

		assert await make_api(server).students.dashboard() == {"classes": 4, "pendingAssignments": 2}

	async def test_student_dashboard_failure(self, backend, make_api):
		server = await backend([web.get("/api/student/dashboard", _json({"success": False}))])

		assert await make_api(server).students.dashboard() == {}

	async def test_student_materials_by_subject(self, backend, make_api):
		server = await backend([web.get("/api/student/materials", _json({"materials": [{"id": "m1", "title": "Notes"}]}))])

		materials = await make_api(server).resources.list_for_student("s1")

		assert server.calls[0]["query"] == {"subject_id": "s1"}
		assert materials[0].title == "Notes"

	async def test_children_and_performance(self, backend, make_api):
		server = await backend([
			web.get("/api/parent/children", _json({"children": [{
				"id": "c1",
				"student_number": "S001",
				"user": {"first_name": "Alice", "last_name": "Moyo", "email": "a@school.test"},
				"class": [{"id": "k1", "name": "7A", "level": "Form 1"}],
			}]})),
			web.get("/api/parent/children/c1/performance", _json({"grades": [{"id": "g1", "score": 88, "subject": {"name": "Maths"}}]})),
			web.get("/api/parent/children/c1/attendance", _json({"attendance": {"records": [], "summary": {"totalDays": 5, "presentDays": 4, "percentage": "80.0"}}})),
		])
		api = make_api(server)

		children = await api.parents.list_children()
		performance = await api.parents.child_performance("c1")
		attendance = await api.parents.child_attendance("c1")

		assert (children[0].name, children[0].class_name, children[0].class_level) == ("Alice Moyo", "7A", "Form 1")
		assert performance.average_score == 88
		assert performance.grades[0].subject_name == "Maths"
		assert (attendance.total_days, attendance.present_days, attendance.percentage) == (5, 4, "80.0")

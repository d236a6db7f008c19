"""Classes, their subject/teacher links and rosters."""

from typing import Any, Dict, List

from ..models import ClassSubject, SchoolClass, Student
from .base import BaseApi, parse_list, unwrap_key

CLASSES_PATH = "/school-admin/classes"
CLASS_SUBJECTS_PATH = "/school-admin/class-subjects"


class ClassesApi(BaseApi):
	"""Class management for admins and class listings for teachers/students."""

	async def list(self) -> List[SchoolClass]:
		return await self._list(CLASSES_PATH, SchoolClass.from_dict)

	async def get(self, class_id: str) -> SchoolClass:
		return await self._get(f"{CLASSES_PATH}/{class_id}", SchoolClass.from_dict)

	async def create(self, data: Dict[str, Any]) -> SchoolClass:
		return await self._create(CLASSES_PATH, data, SchoolClass.from_dict)

	async def update(self, class_id: str, data: Dict[str, Any]) -> SchoolClass:
		payload = {
			"teacher_in_charge": data.get("teacher_in_charge") or "",
			"academic_level": data.get("academic_level") or "",
			"subject_id": data.get("subject_id") or "",
		}
		if data.get("name"):
			payload["name"] = data["name"]
		return await self._update(f"{CLASSES_PATH}/{class_id}", payload, SchoolClass.from_dict)

	async def delete(self, class_id: str) -> None:
		await self.client.delete(f"{CLASSES_PATH}/{class_id}")

	async def list_subject_teachers(self, class_id: str) -> List[ClassSubject]:
		"""Subjects taught in a class and the teacher assigned to each."""
		return await self._list(CLASS_SUBJECTS_PATH, ClassSubject.from_dict, params={"class_id": class_id})

	async def assign_teacher(self, class_id: str, subject_id: str, teacher_id: str) -> ClassSubject:
		return await self._create(
			CLASS_SUBJECTS_PATH,
			{"class_id": class_id, "subject_id": subject_id, "teacher_id": teacher_id},
			ClassSubject.from_dict,
		)

	async def remove_teacher_assignment(self, assignment_id: str) -> None:
		await self.client.delete(f"{CLASS_SUBJECTS_PATH}/{assignment_id}")

	async def list_for_teacher(self) -> List[SchoolClass]:
		body = await self.client.get("/teacher/classes")
		return parse_list(unwrap_key(body, "classes", []), SchoolClass.from_dict)

	async def list_students(self, class_id: str) -> List[Student]:
		body = await self.client.get(f"/teacher/classes/{class_id}/students")
		return parse_list(unwrap_key(body, "students", []), Student.from_dict)

	async def list_for_student(self) -> List[SchoolClass]:
		body = await self.client.get("/student/classes")
		return parse_list(unwrap_key(body, "classes", []), SchoolClass.from_dict)

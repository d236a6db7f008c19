from typing import Any, Dict, List

from ..models import Subject
from .base import BaseApi, parse_list, unwrap_key

SUBJECTS_PATH = "/school-admin/subjects"


class SubjectsApi(BaseApi):
	"""Subjects: administered by the school admin, read by teachers and students."""

	async def list(self) -> List[Subject]:
		return await self._list(SUBJECTS_PATH, Subject.from_dict)

	async def get(self, subject_id: str) -> Subject:
		return await self._get(f"{SUBJECTS_PATH}/{subject_id}", Subject.from_dict)

	async def create(self, data: Dict[str, Any]) -> Subject:
		return await self._create(SUBJECTS_PATH, data, Subject.from_dict)

	async def update(self, subject_id: str, data: Dict[str, Any]) -> Subject:
		return await self._update(f"{SUBJECTS_PATH}/{subject_id}", data, Subject.from_dict)

	async def delete(self, subject_id: str) -> None:
		await self.client.delete(f"{SUBJECTS_PATH}/{subject_id}")

	async def list_for_teacher(self) -> List[Subject]:
		"""Subjects assigned to the signed-in teacher (read only)."""
		body = await self.client.get("/teacher/subjects")
		return parse_list(unwrap_key(body, "subjects", []), Subject.from_dict)

	async def list_for_student(self) -> List[Subject]:
		body = await self.client.get("/student/subjects")
		return parse_list(unwrap_key(body, "subjects", []), Subject.from_dict)

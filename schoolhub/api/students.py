from typing import Any, Dict, List

from ..models import Student
from .base import BaseApi

STUDENTS_PATH = "/school-admin/students"


class StudentsApi(BaseApi):
	"""Student accounts of a school, plus the student's own dashboard."""

	async def list(self) -> List[Student]:
		return await self._list(STUDENTS_PATH, Student.from_dict)

	async def create(self, data: Dict[str, Any]) -> Student:
		return await self._create(STUDENTS_PATH, data, Student.from_dict)

	async def update(self, student_id: str, data: Dict[str, Any]) -> Student:
		payload = {k: v for k, v in data.items() if k != "password"}
		return await self._update(f"{STUDENTS_PATH}/{student_id}", payload, Student.from_dict)

	async def delete(self, student_id: str) -> None:
		await self.client.delete(f"{STUDENTS_PATH}/{student_id}")

	async def dashboard(self) -> Dict[str, Any]:
		"""Counters for the student dashboard (``{success, ...}`` envelope)."""
		body = await self.client.get("/student/dashboard")
		if not isinstance(body, dict) or body.get("success") is False:
			return {}
		stats = body.get("stats") if isinstance(body.get("stats"), dict) else body
		return {k: v for k, v in stats.items() if k != "success"}

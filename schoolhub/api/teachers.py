from typing import Any, Dict, List

from ..models import Teacher
from .base import BaseApi

TEACHERS_PATH = "/school-admin/teachers"


class TeachersApi(BaseApi):
	"""Teacher accounts of a school."""

	async def list(self) -> List[Teacher]:
		return await self._list(TEACHERS_PATH, Teacher.from_dict)

	async def create(self, data: Dict[str, Any]) -> Teacher:
		return await self._create(TEACHERS_PATH, data, Teacher.from_dict)

	async def update(self, teacher_id: str, data: Dict[str, Any]) -> Teacher:
		payload = {k: v for k, v in data.items() if k != "password"}
		return await self._update(f"{TEACHERS_PATH}/{teacher_id}", payload, Teacher.from_dict)

	async def delete(self, teacher_id: str) -> None:
		await self.client.delete(f"{TEACHERS_PATH}/{teacher_id}")

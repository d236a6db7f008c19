from typing import Any, Dict, List

from ..models import Department
from .base import BaseApi

DEPARTMENTS_PATH = "/school-admin/departments"


class DepartmentsApi(BaseApi):
	"""Departments of the signed-in administrator's school."""

	async def list(self) -> List[Department]:
		return await self._list(DEPARTMENTS_PATH, Department.from_dict)

	async def get(self, department_id: str) -> Department:
		return await self._get(f"{DEPARTMENTS_PATH}/{department_id}", Department.from_dict)

	async def create(self, data: Dict[str, Any]) -> Department:
		return await self._create(DEPARTMENTS_PATH, data, Department.from_dict)

	async def update(self, department_id: str, data: Dict[str, Any]) -> Department:
		return await self._update(f"{DEPARTMENTS_PATH}/{department_id}", data, Department.from_dict)

	async def delete(self, department_id: str) -> None:
		await self.client.delete(f"{DEPARTMENTS_PATH}/{department_id}")

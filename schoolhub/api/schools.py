"""Schools, managed by the super admin."""

from typing import Any, Dict, List

from ..models import School
from .base import BaseApi, unwrap_data

SCHOOLS_PATH = "/admin/school"


class SchoolsApi(BaseApi):
	"""Wrappers for ``/admin/school`` (``{statusCode, message, data}`` envelopes)."""

	async def list(self) -> List[School]:
		return await self._list(SCHOOLS_PATH, School.from_dict)

	async def get(self, school_id: str) -> School:
		return await self._get(f"{SCHOOLS_PATH}/{school_id}", School.from_dict)

	async def create(self, data: Dict[str, Any]) -> School:
		return await self._create(SCHOOLS_PATH, data, School.from_dict)

	async def update(self, school_id: str, data: Dict[str, Any]) -> School:
		payload = {"name": data.get("name") or "", **data}
		return await self._update(f"{SCHOOLS_PATH}/{school_id}", payload, School.from_dict)

	async def delete(self, school_id: str) -> None:
		await self.client.delete(f"{SCHOOLS_PATH}/{school_id}")

	async def assign_administrator(self, school_id: str, administrator_id: str) -> Any:
		body = await self.client.post(
			f"{SCHOOLS_PATH}/{school_id}/administrators",
			{"administrator_id": administrator_id},
		)
		return unwrap_data(body, {})

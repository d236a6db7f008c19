"""Parents and guardians: admin management and the parent's own view."""

import asyncio
import logging
from typing import Any, Dict, Iterable, List

from ..models import AttendanceSummary, Child, ChildPerformance, Parent, Submission
from .base import BaseApi, parse_list, unwrap_key

_LOGGER = logging.getLogger(__name__)

PARENTS_PATH = "/school-admin/parents"
CHILDREN_PATH = "/parent/children"


class ParentsApi(BaseApi):

	async def list(self) -> List[Parent]:
		return await self._list(PARENTS_PATH, Parent.from_dict)

	async def create(self, data: Dict[str, Any]) -> Parent:
		return await self._create(PARENTS_PATH, data, Parent.from_dict)

	async def update(self, parent_id: str, data: Dict[str, Any]) -> Parent:
		payload = {k: v for k, v in data.items() if k != "password"}
		return await self._update(f"{PARENTS_PATH}/{parent_id}", payload, Parent.from_dict)

	async def delete(self, parent_id: str) -> None:
		await self.client.delete(f"{PARENTS_PATH}/{parent_id}")

	async def link_students(self, parent_id: str, student_ids: Iterable[str]) -> None:
		"""Link a parent to several students, one request per student."""
		await asyncio.gather(*(
			self.client.post(f"{PARENTS_PATH}/{parent_id}/students", {"student_id": student_id})
			for student_id in student_ids
		))

	async def list_children(self) -> List[Child]:
		body = await self.client.get(CHILDREN_PATH)
		return parse_list(unwrap_key(body, "children", []), Child.from_dict)

	async def child_performance(self, student_id: str) -> ChildPerformance:
		body = await self.client.get(f"{CHILDREN_PATH}/{student_id}/performance")
		return ChildPerformance.from_dict(body if isinstance(body, dict) else None)

	async def child_assignments(self, student_id: str) -> List[Submission]:
		body = await self.client.get(f"{CHILDREN_PATH}/{student_id}/assignments")
		return parse_list(unwrap_key(body, "submissions", []), Submission.from_dict)

	async def child_attendance(self, student_id: str) -> AttendanceSummary:
		body = await self.client.get(f"{CHILDREN_PATH}/{student_id}/attendance")
		return AttendanceSummary.from_dict(unwrap_key(body, "attendance"))

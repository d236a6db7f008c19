from typing import List

from ..models import Grade
from .base import BaseApi, parse_list, unwrap_key


class GradesApi(BaseApi):
	"""Grades of the signed-in student."""

	async def list_for_student(self) -> List[Grade]:
		body = await self.client.get("/student/grades")
		return parse_list(unwrap_key(body, "grades", []), Grade.from_dict)

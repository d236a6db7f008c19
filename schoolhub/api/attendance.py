"""Attendance registers and class announcements."""

from typing import Any, Dict, List

from ..models import AttendanceRecord
from .base import BaseApi, clean_payload, parse_list, unwrap_item, unwrap_key


class AttendanceApi(BaseApi):

	async def mark(self, data: Dict[str, Any]) -> Any:
		"""Record attendance, e.g. ``{class_id, date, records: [{student_id, status}]}``."""
		return await self.client.post("/teacher/attendance", clean_payload(data))

	async def list_for_class(self, class_id: str) -> List[AttendanceRecord]:
		body = await self.client.get(f"/teacher/attendance/class/{class_id}")
		return parse_list(unwrap_key(body, "attendance", []), AttendanceRecord.from_dict)

	async def announce(self, data: Dict[str, Any]) -> Dict[str, Any]:
		body = await self.client.post("/teacher/announcements", clean_payload(data))
		announcement = unwrap_item(body, "announcement")
		return announcement if isinstance(announcement, dict) else {}

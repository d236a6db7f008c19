from typing import Any, Dict, List, Optional

from ..models import Syllabus
from .base import BaseApi, clean_payload, parse_item, parse_list, unwrap_item, unwrap_key

SYLLABI_PATH = "/teacher/syllabi"


def syllabus_payload(data: Dict[str, Any]) -> Dict[str, Any]:
	size_mb = data.get("file_size_mb")
	return {
		"subject_id": data.get("subject_id"),
		"class_id": data.get("class_id") or None,
		"title": data.get("name") or data.get("title"),
		"description": data.get("description") or "",
		"file_url": data.get("file_url"),
		"file_size": round(float(size_mb) * 1024 * 1024) if size_mb else None,
		"academic_year": data.get("academic_year"),
		"term": data.get("term") or None,
		"status": data.get("status") or None,
	}


class SyllabiApi(BaseApi):
	"""Syllabus documents: written by teachers, read by students."""

	async def list_for_teacher(self) -> List[Syllabus]:
		body = await self.client.get(SYLLABI_PATH)
		return parse_list(unwrap_key(body, "syllabi", []), Syllabus.from_dict)

	async def create(self, data: Dict[str, Any]) -> Syllabus:
		body = await self.client.post(SYLLABI_PATH, clean_payload(syllabus_payload(data)))
		return parse_item(unwrap_item(body, "syllabus"), Syllabus.from_dict)

	async def update(self, syllabus_id: str, data: Dict[str, Any]) -> Syllabus:
		body = await self.client.put(f"{SYLLABI_PATH}/{syllabus_id}", clean_payload(syllabus_payload(data)))
		return parse_item(unwrap_item(body, "syllabus"), Syllabus.from_dict)

	async def delete(self, syllabus_id: str) -> None:
		await self.client.delete(f"{SYLLABI_PATH}/{syllabus_id}")

	async def list_for_student(self, subject_id: Optional[str] = None) -> List[Syllabus]:
		body = await self.client.get("/student/syllabi", params={"subject_id": subject_id})
		return parse_list(unwrap_key(body, "syllabi", []), Syllabus.from_dict)

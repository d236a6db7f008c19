"""Learning resources (the backend calls them materials)."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..const import MATERIAL_TYPE_MAP
from ..models import Material
from .base import BaseApi, clean_payload, parse_item, parse_list, unwrap_item, unwrap_key

MATERIALS_PATH = "/teacher/materials"
UPLOAD_PATH = "/teacher/upload-file"


def material_type_for(label: Optional[str]) -> str:
	"""Map a form type label (``PDF``, ``Video``...) to the backend value."""
	if not label:
		return "other"
	return MATERIAL_TYPE_MAP.get(label, label.lower())


def megabytes_to_bytes(size_mb: Any) -> Optional[int]:
	if size_mb in (None, "", 0):
		return None
	return round(float(size_mb) * 1024 * 1024)


def material_payload(data: Dict[str, Any]) -> Dict[str, Any]:
	"""Translate resource form fields into a material payload."""
	return {
		"title": data.get("name") or data.get("title"),
		"description": data.get("description") or "",
		"material_type": material_type_for(data.get("type")),
		"file_url": data.get("publish_url") or data.get("file_url"),
		"file_size": megabytes_to_bytes(data.get("size_mb")),
		"subject_id": data.get("subject_id"),
		"class_id": data.get("class_id") or None,
	}


class ResourcesApi(BaseApi):

	async def list_for_teacher(self, subject_id: Optional[str] = None) -> List[Material]:
		body = await self.client.get(MATERIALS_PATH)
		materials = parse_list(unwrap_key(body, "materials", []), Material.from_dict)
		if subject_id:
			return [m for m in materials if m.subject_id == subject_id]
		return materials

	async def create(self, data: Dict[str, Any]) -> Material:
		body = await self.client.post(MATERIALS_PATH, clean_payload(material_payload(data)))
		return parse_item(unwrap_item(body, "material"), Material.from_dict)

	async def update(self, material_id: str, data: Dict[str, Any]) -> Material:
		body = await self.client.put(f"{MATERIALS_PATH}/{material_id}", clean_payload(material_payload(data)))
		return parse_item(unwrap_item(body, "material"), Material.from_dict)

	async def delete(self, material_id: str) -> None:
		await self.client.delete(f"{MATERIALS_PATH}/{material_id}")

	async def upload_file(self, file_path: Union[str, Path], bucket: str, folder: str) -> str:
		"""Upload a file to storage and return its public URL ('' when none came back)."""
		body = await self.client.upload(UPLOAD_PATH, file_path, {"bucket": bucket, "folder": folder})
		if not isinstance(body, dict):
			return ""
		return body.get("publicUrl") or body.get("url") or ""

	async def list_for_student(self, subject_id: Optional[str] = None) -> List[Material]:
		body = await self.client.get("/student/materials", params={"subject_id": subject_id})
		return parse_list(unwrap_key(body, "materials", []), Material.from_dict)

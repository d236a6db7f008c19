from typing import Any, Dict, List

from ..models import AcademicLevel
from .base import BaseApi

ACADEMIC_LEVELS_PATH = "/school-admin/academic-levels"


class AcademicLevelsApi(BaseApi):
	"""Academic levels (forms/grades) of a school."""

	async def list(self) -> List[AcademicLevel]:
		levels = await self._list(ACADEMIC_LEVELS_PATH, AcademicLevel.from_dict)
		return sorted(levels, key=lambda level: level.display_order)

	async def create(self, data: Dict[str, Any]) -> AcademicLevel:
		return await self._create(ACADEMIC_LEVELS_PATH, data, AcademicLevel.from_dict)

	async def update(self, level_id: str, data: Dict[str, Any]) -> AcademicLevel:
		return await self._update(f"{ACADEMIC_LEVELS_PATH}/{level_id}", data, AcademicLevel.from_dict)

	async def delete(self, level_id: str) -> None:
		await self.client.delete(f"{ACADEMIC_LEVELS_PATH}/{level_id}")

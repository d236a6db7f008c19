"""Platform user accounts managed by the super admin."""

from typing import Any, Dict, List, Optional

from ..models import Administrator
from .base import BaseApi, clean_payload, parse_item, parse_list, unwrap_data, unwrap_key

USERS_PATH = "/admin/users"


class UsersApi(BaseApi):
	"""Wrappers for ``/admin/users``."""

	async def list(self, account_type: Optional[str] = None) -> List[Administrator]:
		body = await self.client.get(USERS_PATH, params={"account_type": account_type})
		return parse_list(unwrap_key(body, "users", []), Administrator.from_dict)

	async def create(self, data: Dict[str, Any]) -> Administrator:
		body = await self.client.post(USERS_PATH, clean_payload(data))
		return parse_item(unwrap_data(body, {}), Administrator.from_dict)

	async def update(self, user_id: str, data: Dict[str, Any]) -> Administrator:
		# Passwords are never changed through the edit form
		payload = {k: v for k, v in data.items() if k != "password"}
		return await self._update(f"{USERS_PATH}/{user_id}", payload, Administrator.from_dict)

	async def delete(self, user_id: str) -> None:
		await self.client.delete(f"{USERS_PATH}/{user_id}")

"""Super admin screens: schools and their administrators."""

from typing import Any, Dict, List

import voluptuous as vol

from ..errors import handle_error, handle_success
from ..exceptions import SchoolHubError
from ..models import Administrator, School
from .base import Column, CrudPage, attr, optional_text, required_text

ADMINISTRATOR_ACCOUNT_TYPE = "administrator"


class SchoolsPage(CrudPage):
	title = "Schools"
	entity = "school"
	query_key = ("schools",)
	empty_message = "No schools found"
	columns = (
		Column("Name", attr("name")),
		Column("Address", attr("address")),
		Column("Phone", attr("phone")),
		Column("Email", attr("email")),
		Column("Created", attr("created_at")),
	)
	form_schema = vol.Schema({
		vol.Required("name"): required_text,
		vol.Optional("address"): optional_text,
		vol.Optional("phone"): optional_text,
		vol.Optional("email"): optional_text,
	})
	empty_form = {"name": "", "address": "", "phone": "", "email": ""}

	async def fetch_items(self) -> List[School]:
		return await self.api.schools.list()

	async def create_item(self, data: Dict[str, Any]) -> School:
		return await self.api.schools.create(data)

	async def update_item(self, item: School, data: Dict[str, Any]) -> School:
		return await self.api.schools.update(item.id, data)

	async def delete_item(self, item: School) -> None:
		await self.api.schools.delete(item.id)

	async def assign_administrator(self, school: School, administrator_id: str) -> bool:
		try:
			await self.api.schools.assign_administrator(school.id, administrator_id)
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to assign administrator")
			return False
		self.cache.invalidate("administrators")
		handle_success(self.notifier, f"Administrator assigned to {school.name}")
		return True


class AdministratorsPage(CrudPage):
	"""Administrator accounts; the school is chosen from the school list."""

	title = "Administrators"
	entity = "administrator"
	query_key = ("administrators",)
	empty_message = "No administrators found"
	columns = (
		Column("Name", attr("name")),
		Column("Email", attr("email")),
		Column("Phone", attr("phone")),
		Column("School", attr("school_id")),
	)
	form_schema = vol.Schema({
		vol.Required("first_name"): required_text,
		vol.Required("last_name"): required_text,
		vol.Required("email"): required_text,
		vol.Required("password"): required_text,
		vol.Optional("phone"): optional_text,
		vol.Optional("school_id"): optional_text,
	})
	edit_schema = vol.Schema({
		vol.Required("first_name"): required_text,
		vol.Required("last_name"): required_text,
		vol.Required("email"): required_text,
		vol.Optional("password"): optional_text,
		vol.Optional("phone"): optional_text,
		vol.Optional("school_id"): optional_text,
	})
	empty_form = {"first_name": "", "last_name": "", "email": "", "password": "", "phone": "", "school_id": ""}

	def form_from_item(self, item: Administrator) -> Dict[str, Any]:
		data = super().form_from_item(item)
		data["password"] = ""
		return data

	async def fetch_items(self) -> List[Administrator]:
		return await self.api.users.list(account_type=ADMINISTRATOR_ACCOUNT_TYPE)

	async def create_item(self, data: Dict[str, Any]) -> Administrator:
		return await self.api.users.create({**data, "account_type": ADMINISTRATOR_ACCOUNT_TYPE})

	async def update_item(self, item: Administrator, data: Dict[str, Any]) -> Administrator:
		return await self.api.users.update(item.id, data)

	async def delete_item(self, item: Administrator) -> None:
		await self.api.users.delete(item.id)

	async def schools(self) -> List[School]:
		"""Options for the school picker."""
		try:
			return await self.cache.fetch(("schools",), self.api.schools.list)
		except SchoolHubError as e:
			handle_error(self.notifier, e, "Failed to load schools")
			return []

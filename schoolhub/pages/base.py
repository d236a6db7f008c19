"""Shared list + dialog behaviour for the management screens."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple

import voluptuous as vol

from ..api import SchoolHubApi
from ..errors import handle_error, handle_success
from ..exceptions import SchoolHubError, SchoolHubFormError
from ..models import User, format_date, parse_datetime
from ..notifications import Notifier
from ..query import QueryCache

_LOGGER = logging.getLogger(__name__)

PLACEHOLDER = "-"


def optional_text(value: Any) -> Optional[str]:
	"""Blank form fields become None so they are left out of payloads."""
	if value is None:
		return None
	value = str(value).strip()
	return value or None


def required_text(value: Any) -> str:
	value = optional_text(value)
	if value is None:
		raise vol.Invalid("is required")
	return value


def optional_number(value: Any) -> Optional[float]:
	if value is None or (isinstance(value, str) and not value.strip()):
		return None
	try:
		return float(value)
	except (TypeError, ValueError) as e:
		raise vol.Invalid("must be a number") from e


def iso_date(value: Any) -> str:
	value = required_text(value)
	if parse_datetime(value) is None:
		raise vol.Invalid("must be a date (YYYY-MM-DD)")
	return value


def id_list(value: Any) -> List[str]:
	"""Comma-separated ids (or a list of them)."""
	if value is None or value == "":
		return []
	if isinstance(value, str):
		value = value.split(",")
	return [str(v).strip() for v in value if str(v).strip()]


def form_error_message(error: vol.Invalid, required_message: Optional[str] = None) -> str:
	if isinstance(error, vol.MultipleInvalid):
		error = error.errors[0]
	label = str(error.path[-1]).replace("_", " ").capitalize() if error.path else "Form"
	if error.msg in ("required key not provided", "is required"):
		return required_message or f"{label} is required"
	return f"{label}: {error.msg}"


@dataclass
class Column:
	"""Table column; ``render`` turns a row into cell text."""
	label: str
	render: Callable[[Any], Any]

	def cell(self, item: Any) -> str:
		value = self.render(item)
		if value is None or value == "":
			return PLACEHOLDER
		if hasattr(value, "strftime"):
			return format_date(value)
		return str(value)


def attr(name: str) -> Callable[[Any], Any]:
	return lambda item: getattr(item, name, None)


def render_table(columns: Sequence[Column], rows: Sequence[Any], empty_message: str = "Nothing to show") -> str:
	if not rows:
		return empty_message
	header = [column.label for column in columns]
	body = [[column.cell(row) for column in columns] for row in rows]
	widths = [max(len(line[i]) for line in [header] + body) for i in range(len(header))]

	def _line(cells: List[str]) -> str:
		return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

	lines = [_line(header), _line(["-" * width for width in widths])]
	lines.extend(_line(cells) for cells in body)
	return "\n".join(lines)


@dataclass
class FormDialog:
	is_open: bool = False
	editing: Optional[Any] = None
	data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ConfirmDialog:
	is_open: bool = False
	target: Optional[Any] = None


class Page:
	"""A screen bound to the API wrappers, the query cache and the notifier."""

	title = ""

	def __init__(
		self,
		api: SchoolHubApi,
		cache: QueryCache,
		notifier: Notifier,
		user: Optional[User] = None,
		params: Optional[Dict[str, str]] = None,
	) -> None:
		self.api = api
		self.cache = cache
		self.notifier = notifier
		self.user = user
		self.params = dict(params or {})

	async def load(self, force: bool = False) -> None:
		"""Fetch whatever the screen shows."""

	def render(self) -> str:
		return self.title


class ListPage(Page):
	"""A table of one entity, loaded through the query cache."""

	entity = "item"
	entity_plural: Optional[str] = None
	query_key: Tuple[Hashable, ...] = ()
	columns: Sequence[Column] = ()
	empty_message = "No items found"
	# Extra query keys to drop after a mutation
	related_keys: Sequence[Tuple[Hashable, ...]] = ()

	def __init__(self, *args: Any, **kwargs: Any) -> None:
		super().__init__(*args, **kwargs)
		self.items: List[Any] = []
		self.loading = False

	@property
	def key(self) -> Tuple[Hashable, ...]:
		return self.query_key

	@property
	def plural(self) -> str:
		return self.entity_plural or f"{self.entity}s"

	async def fetch_items(self) -> List[Any]:
		raise NotImplementedError

	async def load(self, force: bool = False) -> None:
		self.loading = True
		try:
			self.items = await self.cache.fetch(self.key, self.fetch_items, force=force)
		except SchoolHubError as e:
			handle_error(self.notifier, e, f"Failed to load {self.plural}")
			self.items = []
		finally:
			self.loading = False

	async def refresh(self) -> None:
		"""Invalidate this page's queries and load them again."""
		self.cache.invalidate(*self.key)
		for key in self.related_keys:
			self.cache.invalidate(*key)
		await self.load(force=True)

	def find(self, item_id: str) -> Optional[Any]:
		for item in self.items:
			if str(getattr(item, "id", "")) == str(item_id):
				return item
		return None

	def render(self) -> str:
		table = render_table(self.columns, self.items, self.empty_message)
		return f"{self.title}\n\n{table}" if self.title else table


class CrudPage(ListPage):
	"""List of one entity with a create/edit dialog and a delete confirmation.

	Subclasses name the entity, the query key, the table columns and the
	form schema, and implement the ``fetch_items``/``create_item``/
	``update_item``/``delete_item`` calls.
	"""

	form_schema: Optional[vol.Schema] = None
	# Used instead of form_schema when editing, if set
	edit_schema: Optional[vol.Schema] = None
	empty_form: Dict[str, Any] = {}
	# Shown instead of "<Field> is required" when set
	required_message: Optional[str] = None

	def __init__(self, *args: Any, **kwargs: Any) -> None:
		super().__init__(*args, **kwargs)
		self.form = FormDialog()
		self.confirm = ConfirmDialog()

	async def create_item(self, data: Dict[str, Any]) -> Any:
		raise NotImplementedError

	async def update_item(self, item: Any, data: Dict[str, Any]) -> Any:
		raise NotImplementedError

	async def delete_item(self, item: Any) -> None:
		raise NotImplementedError

	def form_from_item(self, item: Any) -> Dict[str, Any]:
		"""Pre-fill the edit dialog from a row."""
		return {name: getattr(item, name, None) for name in self.empty_form}

	def open_create(self) -> None:
		self.form = FormDialog(is_open=True, data=dict(self.empty_form))

	def open_edit(self, item: Any) -> None:
		self.form = FormDialog(is_open=True, editing=item, data=self.form_from_item(item))

	def close_form(self) -> None:
		self.form = FormDialog()

	def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
		schema = self.edit_schema if self.form.editing is not None and self.edit_schema else self.form_schema
		if schema is None:
			return dict(data)
		try:
			return schema(data)
		except vol.Invalid as e:
			raise SchoolHubFormError(form_error_message(e, self.required_message)) from e

	async def submit(self, data: Optional[Dict[str, Any]] = None) -> bool:
		"""Save the dialog: create when opened with ``open_create``, else update.

		Returns:
			True when saved (dialog closed), False when it stays open.
		"""
		if not self.form.is_open:
			self.open_create()
		if data:
			self.form.data.update(data)

		editing = self.form.editing
		action = "update" if editing is not None else "create"
		try:
			payload = self.validate(self.form.data)
			if editing is not None:
				await self.update_item(editing, payload)
			else:
				await self.create_item(payload)
		except SchoolHubError as e:
			handle_error(self.notifier, e, f"Failed to {action} {self.entity}")
			return False

		await self.refresh()
		handle_success(self.notifier, f"{self.entity.capitalize()} {action}d successfully")
		self.close_form()
		return True

	def request_delete(self, item: Any) -> None:
		self.confirm = ConfirmDialog(is_open=True, target=item)

	def cancel_delete(self) -> None:
		self.confirm = ConfirmDialog()

	async def confirm_delete(self) -> bool:
		target = self.confirm.target
		if not self.confirm.is_open or target is None:
			return False
		try:
			await self.delete_item(target)
		except SchoolHubError as e:
			handle_error(self.notifier, e, f"Failed to delete {self.entity}")
			return False

		await self.refresh()
		handle_success(self.notifier, f"{self.entity.capitalize()} deleted successfully")
		self.cancel_delete()
		return True

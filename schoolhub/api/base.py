"""Shared helpers for the per-resource API wrappers."""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ..exceptions import SchoolHubDataError
from ..http import ApiClient

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def unwrap_data(body: Any, default: Any = None) -> Any:
	"""Unwrap ``{statusCode, message, data}`` envelopes."""
	if isinstance(body, dict) and "data" in body:
		data = body.get("data")
		return default if data is None else data
	return default


def unwrap_key(body: Any, key: str, default: Any = None) -> Any:
	"""Unwrap envelopes that name the resource, e.g. ``{"classes": [...]}``."""
	if isinstance(body, dict):
		value = body.get(key)
		if value is not None:
			return value
	return default


def unwrap_item(body: Any, key: str) -> Any:
	"""Single resource under ``key``, else the whole body."""
	if isinstance(body, dict) and isinstance(body.get(key), dict):
		return body[key]
	return body


def parse_list(items: Any, parser: Callable[[Dict[str, Any]], T]) -> List[T]:
	"""Parse a list of rows, skipping anything that is not an object."""
	if not isinstance(items, list):
		if items not in (None, "", {}):
			_LOGGER.warning(f"Expected a list from the backend, got {type(items).__name__}")
		return []
	return [parser(item) for item in items if isinstance(item, dict)]


def parse_item(item: Any, parser: Callable[[Dict[str, Any]], T]) -> T:
	if not isinstance(item, dict):
		raise SchoolHubDataError(f"Expected an object from the backend, got {type(item).__name__}")
	return parser(item)


def clean_payload(data: Dict[str, Any]) -> Dict[str, Any]:
	"""Drop keys whose value is None so optional fields are not sent."""
	return {key: value for key, value in data.items() if value is not None}


class BaseApi:
	"""Base for wrappers; holds the shared HTTP client."""

	def __init__(self, client: ApiClient) -> None:
		self.client = client

	async def _list(self, path: str, parser: Callable[[Dict[str, Any]], T], params: Optional[Dict[str, Any]] = None) -> List[T]:
		body = await self.client.get(path, params=params)
		return parse_list(unwrap_data(body, []), parser)

	async def _get(self, path: str, parser: Callable[[Dict[str, Any]], T]) -> T:
		body = await self.client.get(path)
		return parse_item(unwrap_data(body), parser)

	async def _create(self, path: str, data: Dict[str, Any], parser: Callable[[Dict[str, Any]], T]) -> T:
		body = await self.client.post(path, clean_payload(data))
		return parse_item(unwrap_data(body, {}), parser)

	async def _update(self, path: str, data: Dict[str, Any], parser: Callable[[Dict[str, Any]], T]) -> T:
		body = await self.client.patch(path, clean_payload(data))
		return parse_item(unwrap_data(body, {}), parser)

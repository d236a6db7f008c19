"""HTTP layer shared by every API wrapper."""

import asyncio
import inspect
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union

import aiohttp

from .const import (
	AUTH_REFRESH_PATH,
	DEFAULT_API_URL,
	DEFAULT_REQUEST_TIMEOUT,
	MSG_SESSION_EXPIRED,
	PATH_LOGIN,
	STORAGE_ACCESS_TOKEN,
	STORAGE_REFRESH_TOKEN,
)
from .errors import build_api_error, network_error
from .exceptions import SchoolHubAuthError
from .storage import SessionStorage

_LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS = {
	"Content-Type": "application/json",
	"Accept": "application/json",
}

# Form field values are plain strings or (filename, content, content_type) tuples
FormValue = Union[str, Tuple[str, bytes, Optional[str]]]
SessionExpiredCallback = Callable[[str], Union[None, Awaitable[None]]]


class ApiClient:
	"""Thin REST client for the SchoolHub backend.

	Every request carries the stored bearer token. A 401 triggers one
	exchange of the stored refresh token followed by a single replay of the
	original request; when the exchange fails, or the replay is rejected
	again, the stored session is wiped and ``on_session_expired`` is called
	with the login path. Failures surface as SchoolHubError subclasses whose
	``message`` is ready to show to the user.
	"""

	def __init__(
		self,
		storage: SessionStorage,
		base_url: str = DEFAULT_API_URL,
		session: Optional[aiohttp.ClientSession] = None,
		timeout: float = DEFAULT_REQUEST_TIMEOUT,
		on_session_expired: Optional[SessionExpiredCallback] = None,
	) -> None:
		"""Initialise the client.

		Args:
			storage: Session storage holding the access/refresh tokens.
			base_url: API root, e.g. ``http://localhost:4003/api``.
			session: Optional aiohttp session. If None, one is created on enter.
			timeout: Total request timeout in seconds.
			on_session_expired: Called with the login path after the session is wiped.
		"""
		self.storage = storage
		self.base_url = base_url.rstrip("/")
		self._session = session
		self._own_session = session is None
		self._timeout = aiohttp.ClientTimeout(total=timeout)
		self.on_session_expired = on_session_expired

	async def __aenter__(self):
		if self._session is None:
			self._session = aiohttp.ClientSession()
			self._own_session = True
		return self

	async def __aexit__(self, exc_type, exc_val, exc_tb):
		await self.close()

	async def close(self) -> None:
		if self._own_session and self._session and not self._session.closed:
			await self._session.close()
		if self._own_session:
			self._session = None

	def url(self, path: str) -> str:
		if path.startswith("http://") or path.startswith("https://"):
			return path
		return f"{self.base_url}/{path.lstrip('/')}"

	def _ensure_session(self) -> aiohttp.ClientSession:
		if self._session is None or self._session.closed:
			self._session = aiohttp.ClientSession()
			self._own_session = True
		return self._session

	def _headers(self, extra: Optional[Dict[str, str]], multipart: bool) -> Dict[str, str]:
		headers = DEFAULT_HEADERS.copy()
		if multipart:
			# aiohttp sets the multipart boundary itself
			headers.pop("Content-Type")
		token = self.storage.get(STORAGE_ACCESS_TOKEN)
		if token:
			headers["Authorization"] = f"Bearer {token}"
		if extra:
			headers.update(extra)
		return headers

	@staticmethod
	def _build_form(form: Dict[str, FormValue]) -> aiohttp.FormData:
		data = aiohttp.FormData()
		for name, value in form.items():
			if isinstance(value, tuple):
				filename, content, content_type = value
				data.add_field(name, content, filename=filename, content_type=content_type)
			else:
				data.add_field(name, str(value))
		return data

	@staticmethod
	async def _read_body(resp: aiohttp.ClientResponse) -> Any:
		text = await resp.text()
		if not text.strip():
			return None
		try:
			return json.loads(text)
		except ValueError:
			return text

	async def _send(
		self,
		method: str,
		path: str,
		params: Optional[Dict[str, Any]],
		json_body: Any,
		form: Optional[Dict[str, FormValue]],
		headers: Optional[Dict[str, str]],
	) -> Tuple[int, Any]:
		session = self._ensure_session()
		url = self.url(path)
		kwargs: Dict[str, Any] = {
			"headers": self._headers(headers, multipart=form is not None),
			"timeout": self._timeout,
		}
		if params:
			kwargs["params"] = {k: str(v) for k, v in params.items() if v is not None}
		if form is not None:
			# FormData is single use, so it is rebuilt for a replay
			kwargs["data"] = self._build_form(form)
		elif json_body is not None:
			kwargs["json"] = json_body

		_LOGGER.debug(f"{method} {url}")
		try:
			async with session.request(method, url, **kwargs) as resp:
				body = await self._read_body(resp)
				_LOGGER.debug(f"{method} {url} -> HTTP {resp.status}")
				return resp.status, body
		except asyncio.TimeoutError as e:
			raise network_error(e) from e
		except aiohttp.ClientError as e:
			raise network_error(e) from e

	async def request(
		self,
		method: str,
		path: str,
		*,
		params: Optional[Dict[str, Any]] = None,
		json: Any = None,
		form: Optional[Dict[str, FormValue]] = None,
		headers: Optional[Dict[str, str]] = None,
	) -> Any:
		"""Send a request and return the parsed response body.

		Returns:
			Decoded JSON, raw text for non-JSON bodies, or None for empty bodies.

		Raises:
			SchoolHubConnectionError: No response was received.
			SchoolHubAPIError: The backend answered with a non-2xx status.
		"""
		status, body = await self._send(method, path, params, json, form, headers)
		if status < 200 or status >= 300:
			if status == 401 and await self._try_refresh():
				status, body = await self._send(method, path, params, json, form, headers)
				if status == 401:
					_LOGGER.warning(f"{method} {path} rejected again after token refresh")
					await self._expire_session()
			if status < 200 or status >= 300:
				raise build_api_error(status, body)
		return body

	async def _try_refresh(self) -> bool:
		"""Exchange the stored refresh token for a new access token.

		Returns:
			True when a new access token is stored, False when no refresh
			token is available.

		Raises:
			SchoolHubError: The exchange failed; the session has been wiped.
		"""
		refresh_token = self.storage.get(STORAGE_REFRESH_TOKEN)
		if not refresh_token:
			return False

		_LOGGER.debug("Access token rejected, attempting refresh")
		session = self._ensure_session()
		try:
			# Plain session call so a failing refresh never re-enters this path
			async with session.post(
				self.url(AUTH_REFRESH_PATH),
				json={"refresh_token": refresh_token},
				headers=DEFAULT_HEADERS.copy(),
				timeout=self._timeout,
			) as resp:
				status = resp.status
				body = await self._read_body(resp)
		except (asyncio.TimeoutError, aiohttp.ClientError) as e:
			_LOGGER.warning(f"Token refresh failed: {e!r}")
			await self._expire_session()
			raise network_error(e) from e

		if status < 200 or status >= 300:
			_LOGGER.warning(f"Token refresh rejected: HTTP {status}")
			await self._expire_session()
			raise build_api_error(status, body)

		access_token = body.get("access_token") if isinstance(body, dict) else None
		if not access_token:
			_LOGGER.warning("Token refresh response carried no access token")
			await self._expire_session()
			raise SchoolHubAuthError(MSG_SESSION_EXPIRED, status=401, data=body)

		updates = {STORAGE_ACCESS_TOKEN: access_token}
		if body.get("refresh_token"):
			updates[STORAGE_REFRESH_TOKEN] = body["refresh_token"]
		await self.storage.async_update(updates)
		_LOGGER.debug("Access token refreshed")
		return True

	async def _expire_session(self) -> None:
		await self.storage.async_clear()
		if self.on_session_expired is None:
			return
		result = self.on_session_expired(PATH_LOGIN)
		if inspect.isawaitable(result):
			await result

	async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
		return await self.request("GET", path, params=params)

	async def post(self, path: str, json: Any = None, params: Optional[Dict[str, Any]] = None) -> Any:
		return await self.request("POST", path, json=json, params=params)

	async def put(self, path: str, json: Any = None) -> Any:
		return await self.request("PUT", path, json=json)

	async def patch(self, path: str, json: Any = None) -> Any:
		return await self.request("PATCH", path, json=json)

	async def delete(self, path: str) -> Any:
		return await self.request("DELETE", path)

	async def upload(self, path: str, file_path: Union[str, Path], fields: Optional[Dict[str, str]] = None) -> Any:
		"""POST a local file as multipart/form-data under the ``file`` field."""
		file_path = Path(file_path)
		content = await asyncio.to_thread(file_path.read_bytes)
		form: Dict[str, FormValue] = {"file": (file_path.name, content, None)}
		for name, value in (fields or {}).items():
			form[name] = value
		return await self.request("POST", path, form=form)

"""Session holder: login, logout and role queries for the rest of the app."""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from .const import (
	ALL_ROLES,
	AUTH_LOGIN_PATH,
	AUTH_REGISTER_PATH,
	BACKEND_ACCOUNT_TYPES,
	MSG_INVALID_CREDENTIALS,
	MSG_INVALID_LOGIN_RESPONSE,
	MSG_LOGIN_FAILED,
	MSG_LOGIN_SUCCESS,
	MSG_LOGOUT_SUCCESS,
	PATH_DASHBOARD,
	PATH_LOGIN,
	STORAGE_ACCESS_TOKEN,
	STORAGE_REFRESH_TOKEN,
	STORAGE_USER,
)
from .errors import handle_error, handle_success
from .exceptions import SchoolHubAuthError, SchoolHubFormError
from .http import ApiClient
from .models import User
from .notifications import Notifier
from .storage import SessionStorage

_LOGGER = logging.getLogger(__name__)

Navigator = Callable[[str], Union[None, Awaitable[None]]]


def backend_account_type(account_type: str) -> str:
	"""Both admin roles sign in against the backend's administrator accounts."""
	return BACKEND_ACCOUNT_TYPES.get(account_type, account_type)


def login_failure_message(body: Any) -> Optional[str]:
	"""Return an error message when a 2xx login body still signals failure."""
	if not isinstance(body, dict):
		return MSG_INVALID_CREDENTIALS
	error = body.get("error")
	failed = (
		body.get("statusCode") == 401
		or body.get("status") == "failed"
		or bool(error)
		or not body.get("success")
		or not body.get("token")
	)
	if not failed:
		return None
	message = body.get("message")
	if not message and isinstance(error, dict):
		message = error.get("message")
	if isinstance(message, list):
		message = ", ".join(str(m) for m in message)
	return message or MSG_INVALID_CREDENTIALS


class AuthManager:
	"""Holds the signed-in user and the tokens behind it."""

	def __init__(
		self,
		client: ApiClient,
		storage: SessionStorage,
		notifier: Notifier,
		navigate: Optional[Navigator] = None,
	) -> None:
		self.client = client
		self.storage = storage
		self.notifier = notifier
		self._navigate = navigate
		self.user: Optional[User] = None

	async def restore(self) -> Optional[User]:
		"""Pick up an existing session; needs both a stored user and a token."""
		await self.storage.async_load()
		stored_user = self.storage.get_json(STORAGE_USER)
		token = self.storage.get(STORAGE_ACCESS_TOKEN)
		if stored_user and token:
			self.user = User.from_dict(stored_user)
			_LOGGER.debug(f"Restored session for {self.user.email}")
		else:
			self.user = None
		return self.user

	@property
	def is_authenticated(self) -> bool:
		return self.user is not None

	@property
	def roles(self) -> List[str]:
		return list(self.user.roles) if self.user else []

	def has_role(self, role: str) -> bool:
		return role in self.roles

	def has_any_role(self, roles: Iterable[str]) -> bool:
		return bool(set(roles) & set(self.roles))

	@property
	def primary_role(self) -> Optional[str]:
		if not self.user:
			return None
		return self.user.account_type or (self.user.roles[0] if self.user.roles else None)

	@property
	def display_name(self) -> str:
		return self.user.name if self.user else "User"

	async def _go(self, path: str) -> None:
		if self._navigate is None:
			return
		result = self._navigate(path)
		if inspect.isawaitable(result):
			await result

	async def _clear(self) -> None:
		await self.storage.async_clear()
		self.user = None

	async def login(self, account_type: str, email: str, password: str) -> User:
		"""Sign in and persist the session.

		Args:
			account_type: Frontend role (super_admin, school_admin, teacher, student, parent).
			email: Account email.
			password: Account password.

		Returns:
			The signed-in user, carrying the frontend account type.
		"""
		try:
			if account_type not in ALL_ROLES:
				raise SchoolHubFormError(f"Unknown account type: {account_type}")

			body = await self.client.post(AUTH_LOGIN_PATH, {
				"account_type": backend_account_type(account_type),
				"email": email,
				"password": password,
			})

			failure = login_failure_message(body)
			if failure:
				raise SchoolHubAuthError(failure, status=401, data=body, detail=failure)

			user_data = body.get("user")
			if not isinstance(user_data, dict):
				raise SchoolHubAuthError(MSG_INVALID_LOGIN_RESPONSE, status=200, data=body, detail=MSG_INVALID_LOGIN_RESPONSE)

			# Keep the frontend account type (super_admin vs school_admin)
			user = User.from_dict({**user_data, "account_type": account_type})
			if account_type not in user.roles:
				user.roles.insert(0, account_type)

			await self.storage.async_update({
				STORAGE_ACCESS_TOKEN: body["token"],
				STORAGE_REFRESH_TOKEN: body.get("refresh_token") or "",
				STORAGE_USER: user.to_dict(),
			})
		except Exception as e:
			await self._clear()
			handle_error(self.notifier, e, MSG_LOGIN_FAILED)
			raise

		self.user = user
		_LOGGER.info(f"Signed in as {user.email} ({account_type})")
		handle_success(self.notifier, MSG_LOGIN_SUCCESS)
		await self._go(PATH_DASHBOARD)
		return user

	async def register(
		self,
		account_type: str,
		email: str,
		password: str,
		first_name: str,
		last_name: str,
		**extra: Any,
	) -> Dict[str, Any]:
		"""Create an account; the caller signs in afterwards."""
		body = await self.client.post(AUTH_REGISTER_PATH, {
			"account_type": backend_account_type(account_type),
			"email": email,
			"password": password,
			"first_name": first_name,
			"last_name": last_name,
			**extra,
		})
		if isinstance(body, dict) and isinstance(body.get("data"), dict):
			return body["data"]
		return body if isinstance(body, dict) else {}

	async def logout(self) -> None:
		await self._clear()
		handle_success(self.notifier, MSG_LOGOUT_SUCCESS)
		await self._go(PATH_LOGIN)

	async def session_expired(self, path: str) -> None:
		"""Called by the HTTP client once it has wiped the stored session."""
		_LOGGER.info("Session expired, signing out")
		self.user = None
		await self._go(path)

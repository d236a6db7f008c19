"""Main entry point tying the session, HTTP client, router and pages together."""

import logging
from typing import List, Optional

import aiohttp

from .api import SchoolHubApi
from .auth import AuthManager
from .config import Settings
from .const import MSG_SESSION_EXPIRED, PATH_AUTH
from .exceptions import SchoolHubAccessDenied
from .http import ApiClient
from .models import User
from .notifications import Notifier
from .pages import PAGES, Page
from .query import QueryCache
from .router import NavItem, Resolution, Router, STATUS_NOT_FOUND, navigation_items
from .storage import SessionStorage

_LOGGER = logging.getLogger(__name__)


class SchoolHub:
	"""One signed-in (or signed-out) SchoolHub session."""

	def __init__(
		self,
		settings: Optional[Settings] = None,
		session: Optional[aiohttp.ClientSession] = None,
		storage: Optional[SessionStorage] = None,
		notifier: Optional[Notifier] = None,
	):
		"""Initialise the session.

		Args:
			settings: Backend URL, timeouts and session file. Defaults apply if None.
			session: Optional aiohttp session. If None, one is created on enter.
			storage: Session storage; defaults to the configured session file.
			notifier: Receives user-facing messages.
		"""
		self.settings = settings or Settings()
		self.storage = storage or SessionStorage(self.settings.session_file)
		self.notifier = notifier or Notifier()
		self.cache = QueryCache(self.settings.query_stale_seconds)
		self.router = Router()
		self.client = ApiClient(
			self.storage,
			base_url=self.settings.api_url,
			session=session,
			timeout=self.settings.request_timeout,
			on_session_expired=self._on_session_expired,
		)
		self.api = SchoolHubApi(self.client)
		self.auth = AuthManager(self.client, self.storage, self.notifier, navigate=self.navigate)
		self.current: Optional[Resolution] = None

	async def __aenter__(self):
		await self.client.__aenter__()
		await self.auth.restore()
		return self

	async def __aexit__(self, exc_type, exc_val, exc_tb):
		await self.client.close()

	@property
	def user(self) -> Optional[User]:
		return self.auth.user

	@property
	def session_roles(self) -> Optional[List[str]]:
		"""Roles for routing; None while signed out."""
		return self.auth.roles if self.auth.is_authenticated else None

	def resolve(self, path: str) -> Resolution:
		return self.router.follow(path, self.session_roles)

	def navigate(self, path: str) -> Resolution:
		"""Move to ``path``, following redirects the way the browser build did."""
		resolution = self.resolve(path)
		if resolution.redirect_to:
			resolution = self.router.follow(resolution.redirect_to, self.session_roles)
		self.current = resolution
		_LOGGER.debug(f"Navigated to {path} -> {resolution.screen or resolution.redirect_to}")
		return resolution

	def open(self, path: str) -> Resolution:
		"""Resolve ``path`` for a screen that must be shown as-is.

		Raises:
			SchoolHubAccessDenied: Signed out, or no role may open the path.
		"""
		resolution = self.router.guard(path, self.session_roles)
		if resolution.redirect_to:
			resolution = self.router.guard(resolution.redirect_to, self.session_roles)
		if resolution.status == STATUS_NOT_FOUND:
			raise SchoolHubAccessDenied(f"No page at {resolution.path}")
		self.current = resolution
		return resolution

	def navigation(self) -> List[NavItem]:
		return navigation_items(self.auth.roles)

	async def login(self, account_type: str, email: str, password: str) -> User:
		self.cache.clear()
		return await self.auth.login(account_type, email, password)

	async def logout(self) -> None:
		self.cache.clear()
		await self.auth.logout()

	async def _on_session_expired(self, path: str) -> None:
		self.cache.clear()
		self.notifier.warning(MSG_SESSION_EXPIRED)
		await self.auth.session_expired(path or PATH_AUTH)

	def page(self, resolution: Resolution) -> Page:
		"""Instantiate the screen behind an allowed resolution."""
		page_cls = PAGES.get(resolution.screen or "")
		if page_cls is None:
			raise SchoolHubAccessDenied(f"No page at {resolution.path}")
		return page_cls(self.api, self.cache, self.notifier, user=self.user, params=resolution.params)

	async def open_page(self, path: str) -> Page:
		"""Guard ``path``, then build and load its screen."""
		page = self.page(self.open(path))
		await page.load()
		return page

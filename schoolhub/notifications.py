"""User-facing notifications (the terminal counterpart of toast messages)."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, List

from .const import NOTIFICATION_HISTORY

_LOGGER = logging.getLogger(__name__)

LEVEL_ERROR = "error"
LEVEL_SUCCESS = "success"
LEVEL_WARNING = "warning"
LEVEL_INFO = "info"

_LOG_LEVELS = {
	LEVEL_ERROR: logging.ERROR,
	LEVEL_SUCCESS: logging.INFO,
	LEVEL_WARNING: logging.WARNING,
	LEVEL_INFO: logging.INFO,
}


@dataclass
class Notification:
	"""A single message shown to the user."""
	level: str
	message: str
	created_at: datetime = field(default_factory=datetime.now)

	def __str__(self) -> str:
		return f"[{self.level}] {self.message}"


Listener = Callable[[Notification], None]


class Notifier:
	"""Collects notifications and fans them out to listeners.

	Listener failures are logged and never interrupt the caller.
	"""

	def __init__(self, history: int = NOTIFICATION_HISTORY) -> None:
		self._history: Deque[Notification] = deque(maxlen=history)
		self._listeners: List[Listener] = []

	def subscribe(self, listener: Listener) -> Callable[[], None]:
		"""Register a listener; returns a callable that unsubscribes it."""
		self._listeners.append(listener)

		def _unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return _unsubscribe

	@property
	def history(self) -> List[Notification]:
		return list(self._history)

	@property
	def last(self):
		return self._history[-1] if self._history else None

	def notify(self, level: str, message: str) -> Notification:
		notification = Notification(level, message)
		self._history.append(notification)
		_LOGGER.log(_LOG_LEVELS.get(level, logging.INFO), "%s", message)
		for listener in list(self._listeners):
			try:
				listener(notification)
			except Exception as e:
				_LOGGER.warning(f"Notification listener failed: {e}")
		return notification

	def error(self, message: str) -> Notification:
		return self.notify(LEVEL_ERROR, message)

	def success(self, message: str) -> Notification:
		return self.notify(LEVEL_SUCCESS, message)

	def warning(self, message: str) -> Notification:
		return self.notify(LEVEL_WARNING, message)

	def info(self, message: str) -> Notification:
		return self.notify(LEVEL_INFO, message)

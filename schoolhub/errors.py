"""Normalisation of backend error bodies into one user-facing message."""

import logging
from typing import Any, Optional, Type

from .const import (
	ERROR_CODE_MESSAGES,
	MSG_GENERIC_ERROR,
	MSG_NETWORK_ERROR,
	STATUS_MESSAGES,
)
from .exceptions import (
	SchoolHubAPIError,
	SchoolHubAuthError,
	SchoolHubConnectionError,
	SchoolHubError,
	SchoolHubNotFoundError,
	SchoolHubPermissionError,
	SchoolHubServerError,
	SchoolHubValidationError,
)
from .notifications import Notifier

_LOGGER = logging.getLogger(__name__)


def _join_messages(value: Any) -> Optional[str]:
	if isinstance(value, str):
		return value or None
	if isinstance(value, (list, tuple)):
		parts = [str(item) for item in value if item not in (None, "")]
		return ", ".join(parts) or None
	return None


def extract_error_message(data: Any) -> Optional[str]:
	"""Pull the backend's message out of an error body.

	Recognised shapes, first match wins:
	  {"message": "text"} and {"statusCode": 400, "message": "text"}
	  {"message": ["A", "B"]}            -> "A, B"
	  {"error": {"message": "text"}}
	  {"error": "text"}
	A known ``code`` (top level or inside ``error``) replaces the message
	with a friendlier text.

	Returns:
		The message, or None when the body matches no known shape.
	"""
	if isinstance(data, str):
		return data.strip() or None
	if not isinstance(data, dict):
		return None

	message = _join_messages(data.get("message"))
	error = data.get("error")
	if message is None and isinstance(error, dict):
		message = _join_messages(error.get("message"))
	if message is None and isinstance(error, str):
		message = error or None

	code = data.get("code")
	if not code and isinstance(error, dict):
		code = error.get("code")
	if isinstance(code, str) and code in ERROR_CODE_MESSAGES:
		message = ERROR_CODE_MESSAGES[code]

	return message


def format_error(status: int, data: Any) -> str:
	"""Return one human-readable message for a failed response."""
	if status == 0:
		return MSG_NETWORK_ERROR
	return extract_error_message(data) or MSG_GENERIC_ERROR


def get_status_message(status: int, default_message: Optional[str] = None) -> str:
	"""Map an HTTP status code to a user-friendly message."""
	return STATUS_MESSAGES.get(status) or default_message or "An error occurred."


def exception_class_for_status(status: int) -> Type[SchoolHubAPIError]:
	if status == 401:
		return SchoolHubAuthError
	if status == 403:
		return SchoolHubPermissionError
	if status == 404:
		return SchoolHubNotFoundError
	if status in (400, 422):
		return SchoolHubValidationError
	if status >= 500:
		return SchoolHubServerError
	return SchoolHubAPIError


def build_api_error(status: int, data: Any) -> SchoolHubAPIError:
	"""Create the exception matching ``status`` with a formatted message."""
	detail = extract_error_message(data)
	error_cls = exception_class_for_status(status)
	return error_cls(detail or MSG_GENERIC_ERROR, status=status, data=data, detail=detail)


def network_error(cause: Optional[BaseException] = None) -> SchoolHubConnectionError:
	if cause is not None:
		_LOGGER.debug(f"Network failure: {cause!r}")
	return SchoolHubConnectionError(MSG_NETWORK_ERROR, status=0, data=None)


def resolve_message(error: Optional[BaseException], default_message: Optional[str] = None) -> str:
	"""Best message for ``error``: backend detail, formatted message, then the default.

	The formatted message of a library exception always wins, so a network
	failure reads as one even where the caller passed its own fallback.
	"""
	message = default_message or MSG_GENERIC_ERROR
	if error is None:
		return message
	if isinstance(error, SchoolHubAPIError) and error.detail:
		return error.detail
	if isinstance(error, SchoolHubError):
		return error.message or message
	text = str(error)
	return text or message


def handle_error(notifier: Notifier, error: Optional[BaseException], default_message: Optional[str] = None) -> str:
	"""Show ``error`` as an error notification.

	Returns:
		The message that was displayed.
	"""
	message = resolve_message(error, default_message)
	notifier.error(message)
	return message


def handle_success(notifier: Notifier, message: str) -> None:
	notifier.success(message)


def handle_warning(notifier: Notifier, message: str) -> None:
	notifier.warning(message)


def handle_info(notifier: Notifier, message: str) -> None:
	notifier.info(message)

"""Custom exceptions for SchoolHub."""

from typing import Any, Optional


class SchoolHubError(Exception):
	"""Base exception for SchoolHub errors."""

	def __init__(self, message: str = "", status: int = 0, data: Any = None) -> None:
		super().__init__(message)
		self.message = message
		self.status = status
		self.data = data


class SchoolHubConnectionError(SchoolHubError):
	"""No response was received from the backend."""
	pass


class SchoolHubAPIError(SchoolHubError):
	"""Backend answered with a non-success status."""

	def __init__(self, message: str = "", status: int = 0, data: Any = None, detail: Optional[str] = None) -> None:
		super().__init__(message, status, data)
		# Message the backend actually sent, None when the generic fallback was used
		self.detail = detail


class SchoolHubAuthError(SchoolHubAPIError):
	"""Authentication failed or the session expired."""
	pass


class SchoolHubPermissionError(SchoolHubAPIError):
	"""Authenticated, but not allowed to perform the action."""
	pass


class SchoolHubNotFoundError(SchoolHubAPIError):
	"""Requested resource does not exist."""
	pass


class SchoolHubValidationError(SchoolHubAPIError):
	"""Backend rejected the submitted data."""
	pass


class SchoolHubServerError(SchoolHubAPIError):
	"""Backend failed while handling the request."""
	pass


class SchoolHubDataError(SchoolHubError):
	"""Data parsing or validation error."""
	pass


class SchoolHubFormError(SchoolHubError):
	"""Form input rejected before any request was sent."""
	pass


class SchoolHubAccessDenied(SchoolHubError):
	"""Current session may not open the requested screen."""
	pass

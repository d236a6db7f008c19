"""Tests for error message extraction and the notification helpers."""

import pytest

from schoolhub.const import MSG_GENERIC_ERROR, MSG_NETWORK_ERROR
from schoolhub.errors import (
	build_api_error,
	extract_error_message,
	format_error,
	get_status_message,
	handle_error,
	handle_success,
	resolve_message,
)
from schoolhub.exceptions import (
	SchoolHubAPIError,
	SchoolHubConnectionError,
	SchoolHubFormError,
	SchoolHubPermissionError,
)


@pytest.mark.parametrize("body, expected", [
	({"message": "Email taken"}, "Email taken"),
	({"statusCode": 400, "message": "Bad input"}, "Bad input"),
	({"message": ["A", "B"]}, "A, B"),
	({"error": {"message": "Nested"}}, "Nested"),
	({"error": "Flat"}, "Flat"),
	({"code": "email_exists", "message": "dup key"}, "An account with this email already exists."),
	({"error": {"code": "forbidden"}}, "Access forbidden. You do not have permission."),
	("plain text", "plain text"),
	({"foo": "bar"}, None),
	(None, None),
])
def test_extract_error_message(body, expected):
	assert extract_error_message(body) == expected


def test_format_error():
	assert format_error(0, None) == MSG_NETWORK_ERROR
	assert format_error(400, {"foo": 1}) == MSG_GENERIC_ERROR
	assert format_error(400, {"message": "Nope"}) == "Nope"


def test_get_status_message():
	assert get_status_message(403) == "You do not have permission to perform this action."
	assert get_status_message(418, "Teapot") == "Teapot"
	assert get_status_message(418) == "An error occurred."


def test_build_api_error_picks_class():
	error = build_api_error(403, {"message": "No"})

	assert isinstance(error, SchoolHubPermissionError)
	assert error.detail == "No"
	assert error.status == 403


class TestResolveMessage:

	def test_backend_detail_wins(self):
		error = SchoolHubAPIError("Email taken", status=409, detail="Email taken")
		assert resolve_message(error, "Failed to create teacher") == "Email taken"

	def test_formatted_message_without_detail(self):
		error = SchoolHubAPIError(MSG_GENERIC_ERROR, status=500)
		assert resolve_message(error, "Failed to create teacher") == MSG_GENERIC_ERROR
		assert resolve_message(error) == MSG_GENERIC_ERROR

	def test_fallback_for_empty_message(self):
		error = SchoolHubAPIError(status=500)
		assert resolve_message(error, "Failed to create teacher") == "Failed to create teacher"
		assert resolve_message(error) == MSG_GENERIC_ERROR

	def test_network_error(self):
		error = SchoolHubConnectionError(MSG_NETWORK_ERROR)
		assert resolve_message(error) == MSG_NETWORK_ERROR
		assert resolve_message(error, "Failed to load classes") == MSG_NETWORK_ERROR

	def test_form_error_uses_own_message(self):
		assert resolve_message(SchoolHubFormError("Name is required"), "Failed") == "Name is required"

	def test_other_exceptions(self):
		assert resolve_message(ValueError("boom")) == "boom"
		assert resolve_message(None) == MSG_GENERIC_ERROR


def test_handle_error_notifies(notifier, messages):
	shown = handle_error(notifier, SchoolHubFormError("Please upload a file"))
	handle_success(notifier, "Saved")

	assert shown == "Please upload a file"
	assert messages == ["[error] Please upload a file", "[success] Saved"]
	assert notifier.last.level == "success"

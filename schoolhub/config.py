"""Settings read from the environment (and a ``.env`` file when present)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import voluptuous as vol
from dotenv import load_dotenv

from .const import (
	CONF_API_URL,
	CONF_EMAIL,
	CONF_LOG_LEVEL,
	CONF_PASSWORD,
	CONF_QUERY_STALE_SECONDS,
	CONF_REQUEST_TIMEOUT,
	CONF_SESSION_FILE,
	DEFAULT_API_URL,
	DEFAULT_QUERY_STALE_SECONDS,
	DEFAULT_REQUEST_TIMEOUT,
	DEFAULT_SESSION_FILE,
)
from .exceptions import SchoolHubError

_LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _url(value) -> str:
	value = str(value).strip().rstrip("/")
	if not value.startswith(("http://", "https://")):
		raise vol.Invalid("must be an http(s) URL")
	return value


SETTINGS_SCHEMA = vol.Schema(
	{
		vol.Optional(CONF_API_URL, default=DEFAULT_API_URL): _url,
		vol.Optional(CONF_SESSION_FILE, default=DEFAULT_SESSION_FILE): str,
		vol.Optional(CONF_LOG_LEVEL, default="WARNING"): vol.All(str, vol.Upper, vol.In(LOG_LEVELS)),
		vol.Optional(CONF_REQUEST_TIMEOUT, default=DEFAULT_REQUEST_TIMEOUT): vol.All(
			vol.Coerce(float), vol.Range(min=1)
		),
		vol.Optional(CONF_QUERY_STALE_SECONDS, default=DEFAULT_QUERY_STALE_SECONDS): vol.All(
			vol.Coerce(float), vol.Range(min=0)
		),
		vol.Optional(CONF_EMAIL): str,
		vol.Optional(CONF_PASSWORD): str,
	},
	extra=vol.REMOVE_EXTRA,
)


@dataclass
class Settings:
	api_url: str = DEFAULT_API_URL
	session_file: Optional[Path] = None
	log_level: str = "WARNING"
	request_timeout: float = float(DEFAULT_REQUEST_TIMEOUT)
	query_stale_seconds: float = DEFAULT_QUERY_STALE_SECONDS
	email: Optional[str] = None
	password: Optional[str] = None


def load_settings(environ: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None) -> Settings:
	"""Build settings from ``environ`` (defaults to ``os.environ``).

	A ``.env`` file is only loaded when reading the real environment.
	"""
	if environ is None:
		load_dotenv(dotenv_path)
		environ = os.environ

	raw = {key: value for key, value in environ.items() if key.startswith("SCHOOLHUB_") and value != ""}
	try:
		conf = SETTINGS_SCHEMA(raw)
	except vol.Invalid as e:
		raise SchoolHubError(f"Invalid configuration: {e}") from e

	session_file = conf[CONF_SESSION_FILE]
	settings = Settings(
		api_url=conf[CONF_API_URL],
		session_file=Path(session_file).expanduser() if session_file else None,
		log_level=conf[CONF_LOG_LEVEL],
		request_timeout=conf[CONF_REQUEST_TIMEOUT],
		query_stale_seconds=conf[CONF_QUERY_STALE_SECONDS],
		email=conf.get(CONF_EMAIL),
		password=conf.get(CONF_PASSWORD),
	)
	_LOGGER.debug(f"Using backend {settings.api_url}")
	return settings

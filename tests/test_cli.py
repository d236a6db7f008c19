"""Tests for the command line front end."""

import json

from aiohttp import web
import pytest

from schoolhub import cli
from schoolhub.config import Settings
from schoolhub.exceptions import SchoolHubError


def test_pairs():
	assert cli._pairs(["name=Science", "description=a=b", " code =SCI"]) == {"name": "Science", "description": "a=b", "code": "SCI"}
	assert cli._pairs(None) == {}
	with pytest.raises(SchoolHubError):
		cli._pairs(["novalue"])


def test_parser():
	args = cli.build_parser().parse_args(["create", "/resources", "--set", "name=Notes", "--file", "notes.pdf", "--param", "subject_id=s1"])

	assert args.command == "create"
	assert args.fields == ["name=Notes"]
	assert args.file == "notes.pdf"
	assert args.param == ["subject_id=s1"]


def test_parser_requires_role_for_login():
	with pytest.raises(SystemExit):
		cli.build_parser().parse_args(["login"])


async def test_whoami_signed_out(capsys):
	args = cli.build_parser().parse_args(["whoami"])

	assert await cli.run(args, Settings()) == cli.EXIT_FAILED
	assert "Not signed in" in capsys.readouterr().out


async def test_nav_signed_out_is_denied(capsys):
	args = cli.build_parser().parse_args(["nav"])

	assert await cli.run(args, Settings()) == cli.EXIT_DENIED
	assert "Please sign in first" in capsys.readouterr().err


async def test_open_signed_out_is_denied():
	args = cli.build_parser().parse_args(["open", "/departments"])

	assert await cli.run(args, Settings()) == cli.EXIT_DENIED


async def test_missing_record_reported_after_failed_load(backend, tmp_path, capsys):
	async def broken(request):
		return web.json_response({}, status=500)

	server = await backend([web.get("/api/school-admin/departments", broken)])
	session_file = tmp_path / "session.json"
	session_file.write_text(json.dumps({
		"access_token": "access-1",
		"user": {"id": "u1", "email": "adm@school.test", "account_type": "school_admin"},
	}))
	args = cli.build_parser().parse_args(["delete", "/departments", "3", "--yes"])

	assert await cli.run(args, Settings(api_url=server.api_url, session_file=session_file)) == cli.EXIT_FAILED

	err = capsys.readouterr().err
	assert "[error] An error occurred. Please try again." in err
	assert "❌ No department with id 3" in err


async def test_notified_failure_not_repeated(backend, capsys):
	async def rejected(request):
		return web.json_response({"message": "Account locked"}, status=401)

	server = await backend([web.post("/api/auth/login", rejected)])
	settings = Settings(api_url=server.api_url, email="t@school.test", password="secret")
	args = cli.build_parser().parse_args(["login", "--role", "teacher"])

	assert await cli.run(args, settings) == cli.EXIT_FAILED

	err = capsys.readouterr().err
	assert err.count("Account locked") == 1

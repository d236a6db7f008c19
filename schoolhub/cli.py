"""Command line front end.

Usage:
	schoolhub login --role teacher --email jane@school.test
	schoolhub nav
	schoolhub open /assignments --param class_id=42
	schoolhub create /resources --set subject_id=7 --set name=Notes --set description=Week 1 --file notes.pdf
	schoolhub edit /departments 3 --set name=Sciences
	schoolhub delete /departments 3 --yes
	schoolhub logout

Settings come from SCHOOLHUB_* environment variables or a .env file.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Dict, List, Optional, Sequence

from . import __version__
from .client import SchoolHub
from .config import Settings, load_settings
from .const import ALL_ROLES
from .errors import resolve_message
from .exceptions import SchoolHubAccessDenied, SchoolHubError
from .notifications import LEVEL_ERROR, Notification
from .pages import CrudPage, ListPage, Page

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_DENIED = 2


def _pairs(values: Optional[Sequence[str]]) -> Dict[str, str]:
	"""Turn ``key=value`` arguments into a dict."""
	result: Dict[str, str] = {}
	for value in values or ():
		key, sep, rest = value.partition("=")
		if not sep or not key.strip():
			raise SchoolHubError(f"Expected key=value, got {value!r}")
		result[key.strip()] = rest
	return result


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="schoolhub", description="SchoolHub school management client")
	parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
	parser.add_argument("--debug", action="store_true", help="Enable debug logging")
	commands = parser.add_subparsers(dest="command", required=True)

	login = commands.add_parser("login", help="Sign in and store the session")
	login.add_argument("--role", choices=ALL_ROLES, required=True, help="Account type to sign in as")
	login.add_argument("--email", help="Account email (default: SCHOOLHUB_EMAIL)")

	commands.add_parser("logout", help="Forget the stored session")
	commands.add_parser("whoami", help="Show the signed-in user")
	commands.add_parser("nav", help="List the screens available to the signed-in user")

	open_ = commands.add_parser("open", help="Load and print a screen")
	open_.add_argument("path")
	open_.add_argument("--param", action="append", metavar="KEY=VALUE", help="Screen filter, e.g. class_id=42")

	create = commands.add_parser("create", help="Create a record on a management screen")
	create.add_argument("path")
	create.add_argument("--param", action="append", metavar="KEY=VALUE", help="Screen filter, e.g. class_id=42")
	create.add_argument("--set", action="append", metavar="KEY=VALUE", dest="fields", help="Form field")
	create.add_argument("--file", help="Upload a file first (resources and syllabi)")

	edit = commands.add_parser("edit", help="Update a record on a management screen")
	edit.add_argument("path")
	edit.add_argument("id")
	edit.add_argument("--param", action="append", metavar="KEY=VALUE", help="Screen filter")
	edit.add_argument("--set", action="append", metavar="KEY=VALUE", dest="fields", help="Form field")
	edit.add_argument("--file", help="Replace the uploaded file (resources and syllabi)")

	delete = commands.add_parser("delete", help="Delete a record on a management screen")
	delete.add_argument("path")
	delete.add_argument("id")
	delete.add_argument("--param", action="append", metavar="KEY=VALUE", help="Screen filter")
	delete.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
	return parser


def setup_logging(level: str) -> None:
	logging.basicConfig(
		level=getattr(logging, level, logging.WARNING),
		format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
	)
	if level != "DEBUG":
		logging.getLogger("aiohttp").setLevel(logging.WARNING)


def _print_notification(notification: Notification) -> None:
	print(str(notification), file=sys.stderr)


async def _load_page(hub: SchoolHub, path: str, params: Optional[Sequence[str]]) -> Page:
	"""Build the screen behind ``path`` with extra filters, then load it."""
	page = hub.page(hub.open(path))
	page.params.update(_pairs(params))
	await page.load()
	return page


async def _crud_page(hub: SchoolHub, args: argparse.Namespace) -> CrudPage:
	page = await _load_page(hub, args.path, args.param)
	if not isinstance(page, CrudPage):
		raise SchoolHubError(f"{page.title or args.path} is read-only")
	return page


def _find(page: ListPage, item_id: str):
	item = page.find(item_id)
	if item is None:
		raise SchoolHubError(f"No {page.entity} with id {item_id}")
	return item


async def _upload(page: CrudPage, file_path: Optional[str]) -> bool:
	if not file_path:
		return True
	if not hasattr(page, "upload"):
		raise SchoolHubError(f"{page.title} does not take file uploads")
	return await page.upload(file_path) is not None


async def cmd_login(hub: SchoolHub, args: argparse.Namespace) -> int:
	email = args.email or hub.settings.email or input("Email: ").strip()
	password = hub.settings.password or getpass.getpass("Password: ")
	user = await hub.login(args.role, email, password)
	print(f"✅ Signed in as {user.name} <{user.email}> ({args.role})")
	return EXIT_OK


async def cmd_logout(hub: SchoolHub, args: argparse.Namespace) -> int:
	await hub.logout()
	return EXIT_OK


async def cmd_whoami(hub: SchoolHub, args: argparse.Namespace) -> int:
	user = hub.user
	if user is None:
		print("Not signed in")
		return EXIT_FAILED
	print(f"{user.name} <{user.email}>")
	print(f"Roles: {', '.join(user.roles) or '-'}")
	return EXIT_OK


async def cmd_nav(hub: SchoolHub, args: argparse.Namespace) -> int:
	if hub.user is None:
		raise SchoolHubAccessDenied("Please sign in first")
	for item in hub.navigation():
		print(f"{item.label:<24} {item.href}")
	return EXIT_OK


async def cmd_open(hub: SchoolHub, args: argparse.Namespace) -> int:
	page = await _load_page(hub, args.path, args.param)
	print(page.render())
	return EXIT_OK


async def cmd_create(hub: SchoolHub, args: argparse.Namespace) -> int:
	page = await _crud_page(hub, args)
	page.open_create()
	if not await _upload(page, args.file):
		return EXIT_FAILED
	return EXIT_OK if await page.submit(_pairs(args.fields)) else EXIT_FAILED


async def cmd_edit(hub: SchoolHub, args: argparse.Namespace) -> int:
	page = await _crud_page(hub, args)
	page.open_edit(_find(page, args.id))
	if not await _upload(page, args.file):
		return EXIT_FAILED
	return EXIT_OK if await page.submit(_pairs(args.fields)) else EXIT_FAILED


async def cmd_delete(hub: SchoolHub, args: argparse.Namespace) -> int:
	page = await _crud_page(hub, args)
	item = _find(page, args.id)
	page.request_delete(item)
	if not args.yes:
		answer = input(f"Delete {page.entity} {args.id}? This cannot be undone. [y/N] ")
		if answer.strip().lower() not in ("y", "yes"):
			page.cancel_delete()
			print("Cancelled")
			return EXIT_FAILED
	return EXIT_OK if await page.confirm_delete() else EXIT_FAILED


COMMANDS = {
	"login": cmd_login,
	"logout": cmd_logout,
	"whoami": cmd_whoami,
	"nav": cmd_nav,
	"open": cmd_open,
	"create": cmd_create,
	"edit": cmd_edit,
	"delete": cmd_delete,
}


async def run(args: argparse.Namespace, settings: Settings) -> int:
	async with SchoolHub(settings) as hub:
		hub.notifier.subscribe(_print_notification)
		try:
			return await COMMANDS[args.command](hub, args)
		except SchoolHubAccessDenied as e:
			print(f"❌ {e}", file=sys.stderr)
			return EXIT_DENIED
		except SchoolHubError as e:
			_LOGGER.debug(f"Command {args.command} failed", exc_info=True)
			# Failures already printed as an error notification are not repeated
			message = resolve_message(e)
			if message not in {n.message for n in hub.notifier.history if n.level == LEVEL_ERROR}:
				print(f"❌ {message}", file=sys.stderr)
			return EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	try:
		settings = load_settings()
	except SchoolHubError as e:
		print(f"❌ {e}", file=sys.stderr)
		return EXIT_FAILED
	setup_logging("DEBUG" if args.debug else settings.log_level)
	try:
		return asyncio.run(run(args, settings))
	except KeyboardInterrupt:
		return EXIT_FAILED


if __name__ == "__main__":
	sys.exit(main())

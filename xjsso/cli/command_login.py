import argparse

from ..logging import log
from ..sso import AuthenticatedSession
from .parser import SUBPARSERS

SUBPARSER = SUBPARSERS.add_parser(
    "login",
    help="log in to a service and report which cookies were obtained",
)


async def run(session: AuthenticatedSession, args: argparse.Namespace) -> None:
    names = sorted({cookie.name for cookie in session.cookies.jar})
    log.status("[bold bright_cyan]", "Cookies", ", ".join(names) or "none")


SUBPARSER.set_defaults(command=run, command_service=None)

import argparse
import configparser
from argparse import ArgumentTypeError
from pathlib import Path
from typing import Any, Callable

from ..sso import SERVICES
from ..version import NAME, VERSION


def show_value_error(inner: Callable[[str], Any]) -> Callable[[str], Any]:
    """
    Some validation functions (like the from_string in our enums) raise a ValueError.
    Argparse only pretty-prints ArgumentTypeErrors though, so we need to wrap our ValueErrors.
    """
    def wrapper(input: str) -> Any:
        try:
            return inner(input)
        except ValueError as e:
            raise ArgumentTypeError(e)
    return wrapper


PARSER = argparse.ArgumentParser(prog=NAME)
PARSER.set_defaults(command=None)
PARSER.add_argument(
    "--version",
    action="version",
    version=f"{NAME} {VERSION}",
)
PARSER.add_argument(
    "--config", "-c",
    type=Path,
    metavar="PATH",
    help="custom config file"
)
PARSER.add_argument(
    "--working-dir",
    type=Path,
    metavar="PATH",
    help="custom working directory"
)
PARSER.add_argument(
    "--service", "-s",
    choices=sorted(SERVICES),
    help="service to log in to (commands that only work with one service ignore this)"
)
PARSER.add_argument(
    "--auth", "-a",
    type=str,
    metavar="NAME",
    help="authenticator to take the credentials from, without the 'auth:' prefix"
)
PARSER.add_argument(
    "--public-key",
    type=Path,
    metavar="PATH",
    help="PEM file with the identity provider's public key"
)
PARSER.add_argument(
    "--http-timeout",
    type=float,
    metavar="SECONDS",
    help="timeout for each HTTP request"
)
PARSER.add_argument(
    "--explain",
    action=argparse.BooleanOptionalAction,
    help="log and explain in detail what xjsso is doing"
)
PARSER.add_argument(
    "--status",
    action=argparse.BooleanOptionalAction,
    help="print status updates"
)


def load_default_section(
        args: argparse.Namespace,
        parser: configparser.ConfigParser,
) -> None:
    section = parser[parser.default_section]

    if args.working_dir is not None:
        section["working_dir"] = str(args.working_dir)
    if args.service is not None:
        section["service"] = args.service
    if args.auth is not None:
        section["auth"] = f"auth:{args.auth}"
    if args.public_key is not None:
        section["public_key"] = str(args.public_key)
    if args.http_timeout is not None:
        section["http_timeout"] = str(args.http_timeout)
    if args.explain is not None:
        section["explain"] = "yes" if args.explain else "no"
    if args.status is not None:
        section["status"] = "yes" if args.status else "no"


SUBPARSERS = PARSER.add_subparsers(title="commands")

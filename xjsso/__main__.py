import argparse
import asyncio
import configparser
import sys

from .auth import AuthError, AuthLoadError
from .cli import PARSER, load_default_section
from .config import Config, ConfigLoadError, ConfigOptionError
from .course import CourseError
from .logging import log
from .sso import LoginError
from .xjsso import Xjsso, XjssoLoadError


def load_config_parser(args: argparse.Namespace) -> configparser.ConfigParser:
    log.explain_topic("Loading config")
    parser = configparser.ConfigParser(interpolation=None)
    Config.load_parser(parser, path=args.config)
    load_default_section(args, parser)
    return parser


def load_config(args: argparse.Namespace) -> Config:
    try:
        return Config(load_config_parser(args))
    except ConfigLoadError as e:
        log.error(str(e), e.reason)
        sys.exit(1)


def configure_logging_from_args(args: argparse.Namespace) -> None:
    if args.explain is not None:
        log.output_explain = args.explain
    if args.status is not None:
        log.output_status = args.status


def configure_logging_from_config(args: argparse.Namespace, config: Config) -> None:
    try:
        if args.explain is None:
            log.output_explain = config.default_section.explain()
        if args.status is None:
            log.output_status = config.default_section.status()
    except ConfigOptionError as e:
        log.error(str(e))
        sys.exit(1)


def main() -> None:
    args = PARSER.parse_args()
    if args.command is None:
        PARSER.print_help()
        sys.exit(1)

    # Configuring logging happens in two stages because CLI args have
    # precedence over config file options and loading the config already
    # produces some kinds of log messages (usually only explain()-s).
    configure_logging_from_args(args)

    config = load_config(args)

    configure_logging_from_config(args, config)

    try:
        xjsso = Xjsso(config, args.command_service)
    except (XjssoLoadError, ConfigOptionError) as e:
        log.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(xjsso.run(args.command, args))
    except LoginError as e:
        log.unlock()
        log.error("Login failed", str(e))
        sys.exit(1)
    except (ConfigOptionError, XjssoLoadError, AuthLoadError, AuthError, CourseError) as e:
        log.unlock()
        log.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        log.unlock()
        log.explain_topic("Interrupted, exiting immediately")
        sys.exit(1)
    except Exception:
        log.unexpected_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()

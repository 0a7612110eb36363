import configparser
import os
from configparser import ConfigParser, SectionProxy
from pathlib import Path
from typing import Any, NoReturn, Optional

from .logging import log
from .utils import fmt_real_path

DEFAULT_PATHS = {
    "posix": "~/.config/xjsso/xjsso.cfg",
    "nt": "~/AppData/Roaming/xjsso/xjsso.cfg",
}
FALLBACK_PATH = "~/.xjsso.cfg"


class ConfigLoadError(Exception):
    """
    The config file exists (or was asked for explicitly) but can't be used.
    """

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to load config from {fmt_real_path(path)}")
        self.path = path
        self.reason = reason


class ConfigOptionError(Exception):
    def __init__(self, section: str, key: str, desc: str):
        super().__init__(f"[{section}] {key}: {desc}")
        self.section = section
        self.key = key
        self.desc = desc


class Section:
    """
    Typed access to one section. Every getter either returns a usable value
    or raises a ConfigOptionError naming the section and key.
    """

    def __init__(self, section: SectionProxy):
        self.s = section

    def error(self, key: str, desc: str) -> NoReturn:
        raise ConfigOptionError(self.s.name, key, desc)

    def invalid_value(self, key: str, value: Any, reason: Optional[str] = None) -> NoReturn:
        desc = f"Invalid value {value!r}"
        self.error(key, desc if reason is None else f"{desc}: {reason}")

    def missing_value(self, key: str) -> NoReturn:
        self.error(key, "Missing value")

    def required(self, key: str) -> str:
        value = self.s.get(key)
        if not value:
            self.missing_value(key)
        return value

    def boolean(self, key: str, default: bool) -> bool:
        try:
            return self.s.getboolean(key, fallback=default)
        except ValueError:
            self.invalid_value(key, self.s.get(key), "Must be yes or no")

    def number(self, key: str, default: float) -> float:
        try:
            return self.s.getfloat(key, fallback=default)
        except ValueError:
            self.invalid_value(key, self.s.get(key), "Must be a number")


class DefaultSection(Section):
    def working_dir(self) -> Path:
        return Path(self.s.get("working_dir", ".")).expanduser()

    def explain(self) -> bool:
        return self.boolean("explain", False)

    def status(self) -> bool:
        return self.boolean("status", True)

    def service(self) -> str:
        return self.s.get("service", "course-selection")

    def auth(self) -> Optional[str]:
        """
        Name of the auth section to take credentials from, if any.
        """

        value = self.s.get("auth")
        if value is not None and not value.startswith("auth:"):
            self.invalid_value("auth", value, "Must start with 'auth:'")
        return value

    def public_key(self) -> Path:
        """
        PEM file with the RSA key of the CAS login page, relative to
        working_dir. There is no default: xjsso doesn't ship the key.
        """

        return self.working_dir() / Path(self.required("public_key")).expanduser()

    def http_timeout(self) -> float:
        value = self.number("http_timeout", 30)
        if value <= 0:
            self.invalid_value("http_timeout", value, "Must be greater than 0")
        return value

    def trust_env(self) -> bool:
        """
        Whether httpx may pick up proxies and certificates from the environment.
        """

        return self.boolean("trust_env", False)


class Config:
    def __init__(self, parser: ConfigParser):
        self._parser = parser
        self._default_section = DefaultSection(parser[parser.default_section])

    @property
    def default_section(self) -> DefaultSection:
        return self._default_section

    def auth_section(self, name: str) -> Optional[SectionProxy]:
        if not self._parser.has_section(name):
            return None
        return self._parser[name]

    @staticmethod
    def default_path() -> Path:
        return Path(DEFAULT_PATHS.get(os.name, FALLBACK_PATH)).expanduser()

    @staticmethod
    def load_parser(parser: ConfigParser, path: Optional[Path] = None) -> None:
        """
        Read the config file into parser. May throw a ConfigLoadError.

        Only an explicitly given file has to exist. Without a config file,
        everything falls back to defaults and credentials are prompted for.
        """

        if path is None:
            path = Config.default_path()
            if not path.exists():
                log.explain(f"No config file at {fmt_real_path(path)}, using defaults")
                return
        log.explain(f"Loading {fmt_real_path(path)}")

        try:
            with open(path, encoding="utf-8") as f:
                parser.read_file(f, source=str(path))
        except FileNotFoundError:
            raise ConfigLoadError(path, "File does not exist")
        except IsADirectoryError:
            raise ConfigLoadError(path, "That's a directory, not a file")
        except PermissionError:
            raise ConfigLoadError(path, "Insufficient permissions")
        except UnicodeDecodeError:
            raise ConfigLoadError(path, "File is not encoded using UTF-8")
        except configparser.Error as e:
            raise ConfigLoadError(path, f"Syntax error: {e.message}")

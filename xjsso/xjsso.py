import argparse
from typing import Any, Callable, Coroutine, Optional

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from rich.markup import escape

from .auth import AUTHENTICATORS, Authenticator, AuthSection, SimpleAuthenticator, SimpleAuthSection
from .config import Config, ConfigOptionError
from .logging import log
from .sso import AuthenticatedSession, EncryptionError, Service, load_public_key_file, login, service_from_string

Command = Callable[[AuthenticatedSession, argparse.Namespace], Coroutine[Any, Any, None]]


class XjssoLoadError(Exception):
    pass


class Xjsso:
    def __init__(self, config: Config, command_service: Optional[str] = None):
        """
        May throw XjssoLoadError or ConfigOptionError.

        command_service overrides the configured service for commands that
        only make sense with one particular service.
        """

        self._config = config
        self._service = self._load_service(command_service)

    def _load_service(self, command_service: Optional[str]) -> Service:
        name = command_service or self._config.default_section.service()
        try:
            return service_from_string(name)
        except ValueError as e:
            self._config.default_section.invalid_value("service", name, str(e))

    def _load_authenticator(self) -> Authenticator:
        auth_name = self._config.default_section.auth()
        if auth_name is None:
            log.explain("No authenticator configured, using the [DEFAULT] section")
            section = self._config.default_section.s
            return SimpleAuthenticator(section.name, SimpleAuthSection(section))

        section = self._config.auth_section(auth_name)
        if section is None:
            raise XjssoLoadError(f"There is no authenticator section named {auth_name!r}")

        auth_type = AuthSection(section).type()
        constructor = AUTHENTICATORS.get(auth_type)
        if constructor is None:
            raise ConfigOptionError(auth_name, "type", f"Unknown authenticator type: {auth_type!r}")
        log.explain(f"Using {auth_type} authenticator {auth_name!r}")
        return constructor(auth_name, section, self._config)

    def _load_public_key(self) -> RSAPublicKey:
        path = self._config.default_section.public_key()
        log.explain(f"Loading public key from {str(path)!r}")
        try:
            return load_public_key_file(path)
        except EncryptionError as e:
            self._config.default_section.invalid_value("public_key", str(path), str(e))

    async def run(self, command: Command, args: argparse.Namespace) -> None:
        """
        Log in once and hand the session to the command.

        May throw ConfigOptionError, AuthLoadError, AuthError, LoginError or
        any error the command raises. A failed login is not retried.
        """

        # The key is checked first so a broken setup fails before anyone is
        # asked for a password
        public_key = self._load_public_key()
        # Authenticators may prompt, which needs the running event loop
        authenticator = self._load_authenticator()
        section = self._config.default_section

        netid, password = await authenticator.credentials()
        log.print(f"[bold bright_cyan]Logging in[/] to {escape(str(self._service))} as {escape(netid)}")

        session = await login(
            self._service,
            netid,
            password,
            public_key=public_key,
            timeout=section.http_timeout(),
            trust_env=section.trust_env(),
        )
        async with session:
            log.status("[bold bright_green]", "Logged in", str(self._service))
            await command(session, args)

import keyring
from keyring.errors import KeyringError

from ..logging import log
from ..version import NAME
from .authenticator import Authenticator, AuthError, AuthSection, Credentials, prompt_netid, prompt_password


class KeyringAuthSection(AuthSection):
    def keyring_name(self) -> str:
        return self.s.get("keyring_name", NAME)


class KeyringAuthenticator(Authenticator):
    """
    Passwords live in the system keyring, stored under the NetID. The first
    run for a NetID asks for the password and stores it.
    """

    def __init__(self, name: str, section: KeyringAuthSection) -> None:
        super().__init__(name)

        self._netid = section.netid()
        self._keyring_name = section.keyring_name()

    async def credentials(self) -> Credentials:
        netid = self._netid or await prompt_netid()

        try:
            password = keyring.get_password(self._keyring_name, netid)
        except KeyringError as e:
            raise AuthError(f"Could not read from keyring {self._keyring_name!r}: {e}")
        if password is not None:
            log.explain(f"Password for {netid!r} found in keyring {self._keyring_name!r}")
            return Credentials(netid, password)

        password = await prompt_password(netid)
        try:
            keyring.set_password(self._keyring_name, netid, password)
        except KeyringError as e:
            raise AuthError(f"Could not store password in keyring {self._keyring_name!r}: {e}")
        log.explain(f"Stored password for {netid!r} in keyring {self._keyring_name!r}")
        return Credentials(netid, password)

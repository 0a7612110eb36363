from abc import ABC, abstractmethod
from typing import NamedTuple, Optional

from ..config import Section
from ..logging import log
from ..utils import agetpass, ainput


class AuthLoadError(Exception):
    pass


class AuthError(Exception):
    pass


class Credentials(NamedTuple):
    netid: str
    password: str


class AuthSection(Section):
    def type(self) -> str:
        return self.required("type")

    def netid(self) -> Optional[str]:
        return self.s.get("netid")


async def prompt_netid() -> str:
    """
    Ask for a NetID. Raises an AuthError when there is nobody to ask, e. g.
    because stdin is closed.
    """

    async with log.exclusive_output():
        try:
            netid = await ainput("NetID: ")
        except EOFError:
            raise AuthError("No NetID configured and none could be read from stdin")
    if not netid.strip():
        raise AuthError("No NetID given")
    return netid.strip()


async def prompt_password(netid: str) -> str:
    async with log.exclusive_output():
        try:
            password = await agetpass(f"Password for {netid}: ")
        except EOFError:
            raise AuthError(f"No password for {netid} could be read from stdin")
    if not password:
        raise AuthError("No password given")
    return password


class Authenticator(ABC):
    """
    A source of credentials, configured by an [auth:NAME] section.

    Constructors read their section and may throw an AuthLoadError.
    credentials() is called once per run, right before logging in.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    async def credentials(self) -> Credentials:
        pass

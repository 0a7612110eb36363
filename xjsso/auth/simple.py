from typing import Optional

from .authenticator import Authenticator, AuthSection, Credentials, prompt_netid, prompt_password


class SimpleAuthSection(AuthSection):
    def password(self) -> Optional[str]:
        return self.s.get("password")


class SimpleAuthenticator(Authenticator):
    """
    NetID and password from the config file. Whatever is missing is asked
    for. This is also what runs when no authenticator is configured at all.
    """

    def __init__(self, name: str, section: SimpleAuthSection) -> None:
        super().__init__(name)

        self._netid = section.netid()
        self._password = section.password()

    async def credentials(self) -> Credentials:
        netid = self._netid or await prompt_netid()
        password = self._password or await prompt_password(netid)
        return Credentials(netid, password)

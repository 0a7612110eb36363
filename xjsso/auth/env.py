import os

from ..logging import log
from .authenticator import Authenticator, AuthError, AuthSection, Credentials


class EnvAuthSection(AuthSection):
    def netid_var(self) -> str:
        return self.s.get("netid_var", "XJSSO_USERNAME")

    def password_var(self) -> str:
        return self.s.get("password_var", "XJSSO_PASSWORD")


class EnvAuthenticator(Authenticator):
    """
    Credentials from environment variables, for cron jobs and CI where
    nobody can be prompted.
    """

    def __init__(self, name: str, section: EnvAuthSection) -> None:
        super().__init__(name)

        self._netid_var = section.netid_var()
        self._password_var = section.password_var()

    def _lookup(self, var: str) -> str:
        value = os.environ.get(var)
        if not value:
            raise AuthError(f"Environment variable {var} is not set")
        return value

    async def credentials(self) -> Credentials:
        netid = self._lookup(self._netid_var)
        password = self._lookup(self._password_var)
        log.explain(f"NetID {netid!r} taken from {self._netid_var}")
        return Credentials(netid, password)

from pathlib import Path

from dotenv import dotenv_values

from ..config import Config
from ..utils import fmt_real_path
from .authenticator import Authenticator, AuthLoadError, AuthSection, Credentials


class CredentialFileAuthSection(AuthSection):
    def path(self) -> Path:
        return Path(self.required("path")).expanduser()


class CredentialFileAuthenticator(Authenticator):
    """
    Reads a .env file, the same one other tools around the CAS login use:

        USERNAME=2200000000
        PASSWORD="correct horse battery staple"

    Values are taken literally, "$" in a password is not expanded.
    """

    def __init__(self, name: str, section: CredentialFileAuthSection, config: Config) -> None:
        super().__init__(name)

        path = config.default_section.working_dir() / section.path()
        if not path.is_file():
            raise AuthLoadError(f"No credential file at {fmt_real_path(path)}")
        try:
            values = dotenv_values(path, interpolate=False, encoding="utf-8")
        except UnicodeDecodeError:
            raise AuthLoadError(f"Credential file at {fmt_real_path(path)} is not encoded using UTF-8")
        except OSError as e:
            raise AuthLoadError(f"Could not read credential file at {fmt_real_path(path)}: {e}") from e

        netid = values.get("USERNAME")
        password = values.get("PASSWORD")
        if not netid:
            raise AuthLoadError(f"Credential file at {fmt_real_path(path)} sets no USERNAME")
        if not password:
            raise AuthLoadError(f"Credential file at {fmt_real_path(path)} sets no PASSWORD")
        self._credentials = Credentials(netid, password)

    async def credentials(self) -> Credentials:
        return self._credentials

from configparser import SectionProxy
from typing import Callable, Dict

from ..config import Config
from .authenticator import Authenticator, AuthError, AuthLoadError, AuthSection, Credentials  # noqa: F401
from .credential_file import CredentialFileAuthenticator, CredentialFileAuthSection
from .env import EnvAuthenticator, EnvAuthSection
from .keyring import KeyringAuthenticator, KeyringAuthSection
from .simple import SimpleAuthenticator, SimpleAuthSection

AuthConstructor = Callable[[
    str,                # Section name, e. g. "auth:xjtu"
    SectionProxy,       # Authenticator's section of global config
    Config,             # Global config
], Authenticator]

AUTHENTICATORS: Dict[str, AuthConstructor] = {
    "credential-file": lambda n, s, c:
        CredentialFileAuthenticator(n, CredentialFileAuthSection(s), c),
    "env": lambda n, s, c:
        EnvAuthenticator(n, EnvAuthSection(s)),
    "keyring": lambda n, s, c:
        KeyringAuthenticator(n, KeyringAuthSection(s)),
    "simple": lambda n, s, c:
        SimpleAuthenticator(n, SimpleAuthSection(s)),
}

import asyncio
from configparser import ConfigParser
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import keyring
import keyring.backend
import pytest
from keyring.errors import KeyringError, PasswordDeleteError

import xjsso.auth.authenticator
from xjsso.auth import (AuthError, AuthLoadError, CredentialFileAuthenticator, Credentials, EnvAuthenticator,
                        KeyringAuthenticator, SimpleAuthenticator)
from xjsso.config import Config, ConfigOptionError
from xjsso.xjsso import Xjsso, XjssoLoadError


class MemoryKeyring(keyring.backend.KeyringBackend):
    priority = 1  # type: ignore

    def __init__(self) -> None:
        super().__init__()
        self.passwords: Dict[Tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> Optional[str]:
        return self.passwords.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.passwords[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        if self.passwords.pop((service, username), None) is None:
            raise PasswordDeleteError(username)


class BrokenKeyring(MemoryKeyring):
    def get_password(self, service: str, username: str) -> Optional[str]:
        raise KeyringError("locked")


@pytest.fixture
def memory_keyring() -> Iterator[MemoryKeyring]:
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


class Prompts:
    """
    Answers the NetID and password prompts from a script instead of stdin.
    """

    def __init__(self, monkeypatch: pytest.MonkeyPatch, *answers: str) -> None:
        self.answers = list(answers)
        self.asked: List[str] = []
        monkeypatch.setattr(xjsso.auth.authenticator, "ainput", self.answer)
        monkeypatch.setattr(xjsso.auth.authenticator, "agetpass", self.answer)

    async def answer(self, prompt: str) -> str:
        self.asked.append(prompt)
        if not self.answers:
            raise EOFError()
        return self.answers.pop(0)


def make_config(text: str) -> Config:
    parser = ConfigParser(interpolation=None)
    parser.read_string(text)
    return Config(parser)


def load(text: str):
    return Xjsso(make_config(text))._load_authenticator()


def credentials(authenticator) -> Credentials:
    return asyncio.run(authenticator.credentials())


def test_default_section_without_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    prompts = Prompts(monkeypatch)
    authenticator = load("[DEFAULT]\nnetid = 2200000000\npassword = hunter2\n")
    assert isinstance(authenticator, SimpleAuthenticator)
    assert credentials(authenticator) == ("2200000000", "hunter2")
    assert prompts.asked == []


def test_simple_prompts_for_missing_password(monkeypatch: pytest.MonkeyPatch) -> None:
    prompts = Prompts(monkeypatch, "hunter2")
    authenticator = load("[DEFAULT]\nauth = auth:x\n[auth:x]\ntype = simple\nnetid = 2200000000\n")
    assert credentials(authenticator) == Credentials("2200000000", "hunter2")
    assert prompts.asked == ["Password for 2200000000: "]


def test_simple_prompts_for_everything(monkeypatch: pytest.MonkeyPatch) -> None:
    prompts = Prompts(monkeypatch, " 2200000000 ", "hunter2")
    assert credentials(load("")) == ("2200000000", "hunter2")
    assert prompts.asked == ["NetID: ", "Password for 2200000000: "]


def test_closed_stdin_is_an_auth_error(monkeypatch: pytest.MonkeyPatch) -> None:
    Prompts(monkeypatch)
    with pytest.raises(AuthError, match="stdin"):
        credentials(load(""))


def test_empty_answers_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    Prompts(monkeypatch, "  ")
    with pytest.raises(AuthError, match="No NetID"):
        credentials(load(""))

    Prompts(monkeypatch, "")
    with pytest.raises(AuthError, match="No password"):
        credentials(load("[DEFAULT]\nnetid = 2200000000\n"))


def test_missing_auth_section() -> None:
    with pytest.raises(XjssoLoadError):
        load("[DEFAULT]\nauth = auth:nope\n")


def test_unknown_auth_type() -> None:
    with pytest.raises(ConfigOptionError, match="carrier-pigeon"):
        load("[DEFAULT]\nauth = auth:x\n[auth:x]\ntype = carrier-pigeon\n")


def test_auth_section_without_type() -> None:
    with pytest.raises(ConfigOptionError, match="type"):
        load("[DEFAULT]\nauth = auth:x\n[auth:x]\nnetid = 2200000000\n")


KEYRING_CONFIG = "[DEFAULT]\nauth = auth:xjtu\n[auth:xjtu]\ntype = keyring\nnetid = 2200000000\n"


def test_keyring_stored_password(monkeypatch: pytest.MonkeyPatch, memory_keyring: MemoryKeyring) -> None:
    prompts = Prompts(monkeypatch)
    memory_keyring.set_password("xjsso", "2200000000", "hunter2")

    authenticator = load(KEYRING_CONFIG)
    assert isinstance(authenticator, KeyringAuthenticator)
    assert credentials(authenticator) == ("2200000000", "hunter2")
    assert prompts.asked == []


def test_keyring_stores_prompted_password(monkeypatch: pytest.MonkeyPatch, memory_keyring: MemoryKeyring) -> None:
    prompts = Prompts(monkeypatch, "hunter2")

    assert credentials(load(KEYRING_CONFIG)) == ("2200000000", "hunter2")
    assert prompts.asked == ["Password for 2200000000: "]
    assert memory_keyring.passwords == {("xjsso", "2200000000"): "hunter2"}

    # The next run finds it
    prompts = Prompts(monkeypatch)
    assert credentials(load(KEYRING_CONFIG)) == ("2200000000", "hunter2")
    assert prompts.asked == []


def test_keyring_name_and_prompted_netid(monkeypatch: pytest.MonkeyPatch, memory_keyring: MemoryKeyring) -> None:
    Prompts(monkeypatch, "2200000001")
    memory_keyring.set_password("campus", "2200000001", "swordfish")

    authenticator = load("[DEFAULT]\nauth = auth:k\n[auth:k]\ntype = keyring\nkeyring_name = campus\n")
    assert credentials(authenticator) == ("2200000001", "swordfish")


def test_keyring_failure_is_an_auth_error() -> None:
    previous = keyring.get_keyring()
    keyring.set_keyring(BrokenKeyring())
    try:
        with pytest.raises(AuthError, match="locked"):
            credentials(load(KEYRING_CONFIG))
    finally:
        keyring.set_keyring(previous)


def credential_file_config(tmp_path: Path) -> str:
    return (
        f"[DEFAULT]\nworking_dir = {tmp_path}\nauth = auth:file\n"
        "[auth:file]\ntype = credential-file\npath = .env\n"
    )


def test_credential_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "# XJTU login\nUSERNAME=2200000000\nPASSWORD='pa$$word=1'\n",
        encoding="utf-8",
    )
    authenticator = load(credential_file_config(tmp_path))
    assert isinstance(authenticator, CredentialFileAuthenticator)
    assert credentials(authenticator) == ("2200000000", "pa$$word=1")


@pytest.mark.parametrize("content", [
    "USERNAME=2200000000\n",
    "PASSWORD=hunter2\n",
    "username=2200000000\npassword=hunter2\n",
    "USERNAME=\nPASSWORD=hunter2\n",
])
def test_incomplete_credential_file(tmp_path: Path, content: str) -> None:
    (tmp_path / ".env").write_text(content, encoding="utf-8")
    with pytest.raises(AuthLoadError):
        load(credential_file_config(tmp_path))


def test_missing_credential_file(tmp_path: Path) -> None:
    with pytest.raises(AuthLoadError, match="No credential file"):
        load(credential_file_config(tmp_path))


def test_env_authenticator(monkeypatch: pytest.MonkeyPatch) -> None:
    authenticator = load("[DEFAULT]\nauth = auth:env\n[auth:env]\ntype = env\n")
    assert isinstance(authenticator, EnvAuthenticator)

    monkeypatch.delenv("XJSSO_USERNAME", raising=False)
    monkeypatch.delenv("XJSSO_PASSWORD", raising=False)
    with pytest.raises(AuthError, match="XJSSO_USERNAME"):
        credentials(authenticator)

    monkeypatch.setenv("XJSSO_USERNAME", "2200000000")
    monkeypatch.setenv("XJSSO_PASSWORD", "hunter2")
    assert credentials(authenticator) == ("2200000000", "hunter2")


def test_env_variable_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CI_NETID", "2200000000")
    monkeypatch.setenv("CI_PASSWORD", "hunter2")
    authenticator = load(
        "[DEFAULT]\nauth = auth:ci\n[auth:ci]\ntype = env\nnetid_var = CI_NETID\npassword_var = CI_PASSWORD\n"
    )
    assert credentials(authenticator) == ("2200000000", "hunter2")

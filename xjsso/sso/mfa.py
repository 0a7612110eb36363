import json
from dataclasses import dataclass
from typing import Any

import httpx

from ..logging import log
from .errors import MfaDetectError, UnsupportedMfaError
from .http import request

MFA_DETECT_URL = "https://login.xjtu.edu.cn/cas/mfa/detect"


@dataclass(frozen=True)
class MfaDetection:
    """
    The part of the detection response the login needs.

    state is echoed back as "mfaState" when submitting the login form. need
    tells whether the provider wants an interactive second factor.
    """

    state: str
    need: bool

    @staticmethod
    def from_json(value: Any) -> "MfaDetection":
        """
        Validate {"data": {"state": "...", "need": ...}}. May throw an
        MfaDetectError carrying the raw value.
        """

        if not isinstance(value, dict):
            raise MfaDetectError(value)
        data = value.get("data")
        if not isinstance(data, dict):
            raise MfaDetectError(value)
        state = data.get("state")
        if not isinstance(state, str):
            raise MfaDetectError(value)
        return MfaDetection(state=state, need=bool(data.get("need", False)))


async def detect_mfa(
        client: httpx.AsyncClient,
        username: str,
        encrypted_password: str,
        fingerprint: str,
) -> str:
    """
    Ask the provider whether this login needs a second factor and return the
    MFA state token that has to accompany the login form.

    This has to happen on every attempt, the login form is rejected without
    the state token.

    Whether a challenge is pending is decided by "need" alone. The state is
    opaque and passed on whatever it says, and a truthy "need" raises
    UnsupportedMfaError since there is no way to answer a challenge.
    """

    response = await request(client, "POST", MFA_DETECT_URL, data={
        "username": username,
        "password": encrypted_password,
        "fpVisitorId": fingerprint,
    })
    log.explain(f"Detecting MFA, status: {response.status_code}")

    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise MfaDetectError(None)

    detection = MfaDetection.from_json(body)
    if detection.need:
        raise UnsupportedMfaError(detection.state)

    log.explain(f"MFA state: {detection.state}")
    return detection.state

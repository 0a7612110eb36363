from typing import Optional, Union

import httpx
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from ..logging import log
from ..utils import truncate
from .crypto import encrypt_password, require_public_key
from .errors import UnexpectedStatusError
from .http import create_client, request
from .mfa import detect_mfa
from .redirects import follow_redirects, location_of
from .services import Service, service_from_string
from .session import AuthenticatedSession
from .tokens import extract_tokens

EXECUTION_LOG_LENGTH = 32


class CasLogin:
    """
    Login via XJTU's CAS system.

    Each call to login() is one attempt. Nothing it scrapes or computes
    (execution token, encrypted password, MFA state) survives the attempt,
    and nothing is retried: if any step fails, the whole attempt fails.
    """

    def __init__(self, service: Service, public_key: RSAPublicKey) -> None:
        self._service = service
        self._public_key = public_key

    async def login(self, client: httpx.AsyncClient, username: str, password: str) -> None:
        """
        Performs the CAS authentication dance. On success, the client's cookie
        jar holds the login cookies for the service.
        """

        log.explain_topic(f"Logging in to service: {self._service}")

        # Equivalent: Opening the service and getting sent to the CAS
        entry_url = await self._service.resolve_entry_url(client)
        log.explain(f"Entry URL: {entry_url}")

        # The form posts back to the session-specific URL the redirects
        # ended at, not to the entry URL
        log.explain_topic("Fetching login page")
        response = await follow_redirects(client, entry_url)
        post_endpoint = str(response.url)
        log.explain(f"Login POST endpoint: {post_endpoint}")

        tokens = extract_tokens(response.content)
        log.explain(
            f"execution: {truncate(tokens.execution, EXECUTION_LOG_LENGTH)}, "
            f"submit: {tokens.submit}, fpVisitorId: {tokens.visitor_fingerprint}"
        )

        encrypted_password = encrypt_password(password, self._public_key)

        log.explain_topic("Detecting MFA")
        mfa_state = await detect_mfa(client, username, encrypted_password, tokens.visitor_fingerprint)

        # Equivalent: Clicking the login button
        log.explain_topic("Submitting credentials")
        response = await request(client, "POST", post_endpoint, data={
            "username": username,
            "password": encrypted_password,
            "execution": tokens.execution,
            "submit1": "Login1",
            "_eventId": "submit",
            "geolocation": "",
            "trustAgent": "",
            "fpVisitorId": tokens.visitor_fingerprint,
            "captcha": "",
            "currentMenu": "1",
            "failN": "0",
            "mfaState": mfa_state,
        })
        # CAS answers a successful login with a redirect to the service,
        # a failed one with the login page again
        if response.status_code != 302:
            raise UnexpectedStatusError(str(response.url), response.status_code)
        location = location_of(response)
        log.explain(f"Redirect to {location}")

        log.explain_topic("Following redirects back to the service")
        stop = self._service.stop_condition()
        if stop is None or not stop(response):
            response = await follow_redirects(client, location, stop)
        self._service.check_final(response)

        log.explain("Login successful")


async def login(
        service: Union[str, Service],
        username: str,
        password: str,
        *,
        public_key: Optional[RSAPublicKey] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        trust_env: bool = False,
) -> AuthenticatedSession:
    """
    Run one login attempt in a fresh client. service is a Service or the name
    of one.

    public_key is the RSA key of the CAS login page. Without it, an
    EncryptionError is raised before anything is sent.

    Returns the authenticated session, or raises a LoginError describing the
    phase that failed. The client is closed if the attempt fails.
    """

    if isinstance(service, str):
        service = service_from_string(service)
    cas_login = CasLogin(service, require_public_key(public_key))

    client = create_client(timeout=timeout, transport=transport, trust_env=trust_env)
    try:
        await cas_login.login(client, username, password)
    except BaseException:
        await client.aclose()
        raise
    return AuthenticatedSession(client, service)

from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from xjsso.sso import create_client

LOGIN_HOST = "login.xjtu.edu.cn"
CAS_LOGIN_URL = "https://login.xjtu.edu.cn/cas/login?service=https%3A%2F%2Fai.xjtu.edu.cn%2Fcallback"
EXECUTION = "ABCD1234" * 12


def login_page(execution: str = EXECUTION, submit: str = "Login1", fingerprint: Optional[str] = "fp-001") -> str:
    fingerprint_input = ""
    if fingerprint is not None:
        fingerprint_input = f'<input type="hidden" name="fpVisitorId" value="{fingerprint}">'
    return f"""
<!DOCTYPE html>
<html>
<head><title>统一身份认证</title></head>
<body>
<div class="login-box">
  <form id="fm1" method="post" action="">
    <input id="username" name="username" type="text">
    <input id="password" name="password" type="password">
    <input type="hidden" name="execution" value="{execution}">
    <input type="hidden" name="_eventId" value="submit">
    {fingerprint_input}
    <input class="btn-submit" name="submit" type="submit" value="{submit}">
  </form>
</div>
</body>
</html>
"""


def form_of(request: httpx.Request) -> Dict[str, List[str]]:
    return parse_qs(request.content.decode(), keep_blank_values=True)


class StubIdentityProvider:
    """
    Plays the AI platform and the CAS login server for one login attempt.

    Every step sets its own cookie so tests can check that the session ends
    up with all of them.
    """

    def __init__(self, success_location: str = "/login-success/home") -> None:
        self.success_location = success_location
        self.mfa_body: object = {"data": {"state": "NONE"}}
        self.submit_status = 302
        self.requests: List[httpx.Request] = []
        self.login_form: Optional[Dict[str, List[str]]] = None
        self.mfa_form: Optional[Dict[str, List[str]]] = None

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host, path, method = request.url.host, request.url.path, request.method

        if host == "ai.xjtu.edu.cn" and path == "/api/auth/login" and method == "POST":
            return httpx.Response(
                200,
                json={"redirect_uri": "https://login.xjtu.edu.cn/cas/oauth2.0/authorize?client_id=ai"},
                headers=[("Set-Cookie", "ai_start=1; Path=/")],
            )

        if host == LOGIN_HOST and path == "/cas/oauth2.0/authorize":
            return httpx.Response(302, headers=[
                ("Location", CAS_LOGIN_URL),
                ("Set-Cookie", "route=r1; Path=/"),
            ])

        if host == LOGIN_HOST and path == "/cas/login" and method == "GET":
            return httpx.Response(200, html=login_page(), headers=[("Set-Cookie", "SESSION=s1; Path=/")])

        if host == LOGIN_HOST and path == "/cas/mfa/detect":
            self.mfa_form = form_of(request)
            return httpx.Response(200, json=self.mfa_body, headers=[("Set-Cookie", "MFA=m1; Path=/")])

        if host == LOGIN_HOST and path == "/cas/login" and method == "POST":
            self.login_form = form_of(request)
            if self.submit_status != 302:
                return httpx.Response(self.submit_status, html=login_page())
            return httpx.Response(302, headers=[
                ("Location", self.success_location),
                ("Set-Cookie", "CASTGC=TGT-1; Path=/cas"),
            ])

        if host == LOGIN_HOST and path == "/login-failure":
            return httpx.Response(200, html="<p>Login failed</p>")

        return httpx.Response(404)


@pytest.fixture(scope="session")
def keypair() -> Tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return private_key, private_key.public_key()


@pytest.fixture
def idp() -> StubIdentityProvider:
    return StubIdentityProvider()


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return create_client(transport=httpx.MockTransport(handler))

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

import httpx

from ..logging import log
from .errors import LoginError, UnexpectedStatusError
from .http import request
from .redirects import StopCondition, follow_redirects, location_path


class Service(ABC):
    """
    An application behind the CAS login.

    A service knows where its login starts and how to tell that the redirects
    after submitting the credentials ended up in a logged-in state.
    """

    NAME: str
    TITLE: str

    @abstractmethod
    async def resolve_entry_url(self, client: httpx.AsyncClient) -> str:
        """
        Find the URL that leads to the CAS login page for this service.
        """

    def stop_condition(self) -> Optional[StopCondition]:
        """
        Where to stop following the redirects after the login form was
        submitted. None means following them to their end.
        """

        return None

    @abstractmethod
    def check_final(self, response: httpx.Response) -> None:
        """
        Verify the last response of the post-login redirects. May throw an
        UnexpectedStatusError.
        """

    def __str__(self) -> str:
        return self.TITLE


class AiPlatformService(Service):
    NAME = "ai-platform"
    TITLE = "AI 平台"

    LOGIN_START_URL = "https://ai.xjtu.edu.cn/api/auth/login"
    SUCCESS_PATH = "/login-success"

    async def resolve_entry_url(self, client: httpx.AsyncClient) -> str:
        response = await request(client, "POST", self.LOGIN_START_URL, json={
            "SSO": "Oauth",
            "IdpID": "1",
            "RedirectUrl": "/",
        })
        try:
            body = response.json()
        except ValueError:
            raise LoginError(f"Login start response is not JSON (status {response.status_code})")

        if not isinstance(body, dict):
            raise LoginError(f"Unexpected login start response: {body!r}")
        redirect_uri = body.get("redirect_uri")
        if not isinstance(redirect_uri, str):
            raise LoginError(f"No url found in login start response: {body!r}")
        return redirect_uri

    def _is_success_redirect(self, response: httpx.Response) -> bool:
        return location_path(response).startswith(self.SUCCESS_PATH)

    def stop_condition(self) -> Optional[StopCondition]:
        return lambda r: r.status_code != 302 or self._is_success_redirect(r)

    def check_final(self, response: httpx.Response) -> None:
        # The platform signals success by redirecting to its success page,
        # anything that stops somewhere else means we are not logged in
        if response.status_code != 302 or not self._is_success_redirect(response):
            raise UnexpectedStatusError(str(response.url), response.status_code)
        log.explain(f"Redirected to success page {location_path(response)}")


class CourseSelectionService(Service):
    NAME = "course-selection"
    TITLE = "选课系统"

    ENTRY_URL = "https://xkfw.xjtu.edu.cn/xsxkapp/sys/xsxkapp/*default/index.do"

    async def resolve_entry_url(self, client: httpx.AsyncClient) -> str:
        response = await follow_redirects(client, self.ENTRY_URL)
        return str(response.url)

    def check_final(self, response: httpx.Response) -> None:
        if response.status_code != 200:
            raise UnexpectedStatusError(str(response.url), response.status_code, expected="status 200")


SERVICES: Dict[str, Callable[[], Service]] = {
    AiPlatformService.NAME: AiPlatformService,
    CourseSelectionService.NAME: CourseSelectionService,
}


def service_from_string(name: str) -> Service:
    constructor = SERVICES.get(name)
    if constructor is None:
        names = ", ".join(repr(name) for name in SERVICES)
        raise ValueError(f"must be one of {names}")
    return constructor()


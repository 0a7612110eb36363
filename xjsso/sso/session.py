from types import TracebackType
from typing import Optional, Type

import httpx

from .services import Service


class AuthenticatedSession:
    """
    The result of a successful login: a client whose cookie jar carries the
    login.

    The login flow does not touch it again. Downstream code keeps sending
    requests through client, which attaches the accumulated cookies.
    """

    def __init__(self, client: httpx.AsyncClient, service: Service) -> None:
        self._client = client
        self._service = service

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    @property
    def service(self) -> Service:
        return self._service

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AuthenticatedSession":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_value: Optional[BaseException],
            traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()

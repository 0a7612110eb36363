from typing import Any, Optional

import httpx

from ..logging import log
from .errors import TransportError

BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "User-Agent": BROWSER_UA,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
}


def create_client(
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        trust_env: bool = False,
) -> httpx.AsyncClient:
    """
    Create the client a login attempt runs through.

    Redirects are never followed automatically, the login flow needs to look
    at individual hops. Environment proxies are ignored unless trust_env is
    set: the campus network is reached directly, off-campus users go through
    the webvpn instead.
    """

    return httpx.AsyncClient(
        headers=BROWSER_HEADERS,
        follow_redirects=False,
        timeout=timeout,
        transport=transport,
        trust_env=trust_env,
    )


async def request(client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """
    Send a single request. Network and TLS failures become TransportErrors,
    nothing is retried.
    """

    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TransportError as e:
        raise TransportError(url, e) from e
    log.explain(f"{method} {url} -> {response.status_code}")
    return response

from typing import Callable, Optional
from urllib.parse import urlsplit

import httpx

from ..logging import log
from .errors import MalformedRedirectError, TooManyRedirectsError
from .http import request

MAX_REDIRECTS = 10
REDIRECT_STATUSES = (301, 302)

StopCondition = Callable[[httpx.Response], bool]


def is_redirect(response: httpx.Response) -> bool:
    return response.status_code in REDIRECT_STATUSES


def location_of(response: httpx.Response) -> str:
    """
    The absolute target of a redirect response.

    Raises a MalformedRedirectError if there is no usable Location header.
    """

    location = response.headers.get("Location", "").strip()
    if not location:
        raise MalformedRedirectError(str(response.url), response.status_code)
    return str(response.url.join(location))


def location_path(response: httpx.Response) -> str:
    """
    The path of the Location header, or "" if there is none.
    """

    return urlsplit(response.headers.get("Location", "").strip()).path


async def follow_redirects(
        client: httpx.AsyncClient,
        url: str,
        stop: Optional[StopCondition] = None,
) -> httpx.Response:
    """
    GET url and keep following 301/302 responses by hand.

    If a stop condition is given, it is checked on every response before
    anything else. The first response it accepts is returned as-is, even if
    it is a redirect itself. Otherwise the first non-redirect response is
    returned.

    At most MAX_REDIRECTS requests are made before giving up.
    """

    start_url = url
    for _ in range(MAX_REDIRECTS):
        response = await request(client, "GET", url)

        if stop is not None and stop(response):
            return response

        if not is_redirect(response):
            return response

        url = location_of(response)
        log.explain(f"Redirect to {url}")

    raise TooManyRedirectsError(start_url, MAX_REDIRECTS)

import asyncio
import getpass
import threading
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

import bs4

T = TypeVar("T")


async def in_daemon_thread(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = asyncio.Future()

    def settle(result: Any, error: Optional[BaseException]) -> None:
        if future.cancelled():
            return
        if error is None:
            future.set_result(result)
        else:
            future.set_exception(error)

    def thread_func() -> None:
        try:
            result = func(*args, **kwargs)
        except BaseException as e:  # e. g. EOFError from input() on a closed stdin
            loop.call_soon_threadsafe(settle, None, e)
        else:
            loop.call_soon_threadsafe(settle, result, None)

    threading.Thread(target=thread_func, daemon=True).start()

    return await future


async def ainput(prompt: str) -> str:
    return await in_daemon_thread(input, prompt)


async def agetpass(prompt: str) -> str:
    return await in_daemon_thread(getpass.getpass, prompt)


def soupify(data: Union[str, bytes]) -> bs4.BeautifulSoup:
    """
    Parses HTML to a beautifulsoup object.
    """

    return bs4.BeautifulSoup(data, "html.parser")


def truncate(text: str, max_len: int) -> str:
    """
    Shorten text to max_len characters, telling the reader how many were cut.

    >>> truncate("abcdef", 4)
    'abcd... (2 truncated)'
    """

    if len(text) <= max_len:
        return text
    return f"{text[:max_len]}... ({len(text) - max_len} truncated)"


def fmt_real_path(path: Path) -> str:
    return repr(str(path.absolute()))

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel


class Log:
    """
    Everything xjsso prints goes through here.

    Explanations walk through the login step by step and are off unless
    --explain is given. Status lines report what was done and can be turned
    off with --no-status. Errors are always printed.
    """

    STATUS_WIDTH = 11

    def __init__(self) -> None:
        self.console = Console(highlight=False)

        self.output_explain = False
        self.output_status = True

        # Not None while the user is typing a NetID or password
        self._held: Optional[List[str]] = None
        self._prompt_lock = asyncio.Lock()

    @asynccontextmanager
    async def exclusive_output(self) -> AsyncIterator[None]:
        """
        Keep other output from interleaving with a prompt. Lines logged in the
        meantime are printed once the prompt is done.
        """

        async with self._prompt_lock:
            self._held = []
            try:
                yield
            finally:
                self.unlock()

    def unlock(self) -> None:
        """
        Print the lines held back by exclusive_output and stop holding lines
        back. Also called by __main__ when the event loop was torn down in the
        middle of a prompt.
        """

        held, self._held = self._held or [], None
        for line in held:
            self.console.print(line)

    def print(self, text: str) -> None:
        """
        Print a normal message. Allows markup.
        """

        if self._held is None:
            self.console.print(text)
        else:
            self._held.append(text)

    def error(self, text: str, *details: str) -> None:
        """
        Print an error message with optional indented detail lines. Allows no
        markup.
        """

        self.print(f"[bold bright_red]Error[/] [red]{escape(text)}")
        for detail in details:
            self.print(f"  [red]{escape(detail)}")

    def unexpected_exception(self) -> None:
        """
        Call this in an "except" clause for exceptions xjsso has no message for.
        """

        self.unlock()
        self.error("An unexpected exception occurred")
        self.console.print_exception()
        self.console.print(Panel.fit(
            "The login flow may have changed on the provider's side. Please run\n"
            "again with --explain and include the output when reporting the problem."
        ))

    def explain_topic(self, text: str) -> None:
        """
        Print the heading of a login step. Allows no markup.
        """

        if self.output_explain:
            self.print(f"[yellow]{escape(text)}")

    def explain(self, text: str) -> None:
        """
        Print a detail of the current login step, indented. Allows no markup.
        """

        if self.output_explain:
            self.print(f"  {escape(text)}")

    def status(self, style: str, action: str, text: str, suffix: str = "") -> None:
        """
        Print a status line like "Logged in  选课系统". The "style" markup is
        applied to the action, the suffix may contain markup as well.
        """

        if self.output_status:
            padded = escape(action.ljust(self.STATUS_WIDTH))
            self.print(f"{style}{padded}[/] {escape(text)} {suffix}".rstrip())


log = Log()

from dataclasses import dataclass
from typing import Union

from bs4 import Tag

from ..utils import soupify
from .errors import LoginPageError


@dataclass(frozen=True)
class LoginFormTokens:
    """
    The one-time values of a single render of the CAS login form.
    """

    execution: str
    submit: str
    visitor_fingerprint: str


def _input_value(tag: Tag, name: str) -> str:
    value = tag.get("value")
    if not isinstance(value, str):
        raise LoginPageError(f"Login form input {name!r} has no value")
    return value


def extract_tokens(html: Union[str, bytes]) -> LoginFormTokens:
    """
    Scrape the execution token, the submit button value and the visitor
    fingerprint from the CAS login page.

    All three are required, a page lacking any of them is an error. The
    fingerprint is looked up among the inputs next to the submit button.
    """

    soup = soupify(html)

    execution_input = soup.find("input", {"name": "execution"})
    if not isinstance(execution_input, Tag):
        raise LoginPageError("Login page has no 'execution' input")
    execution = _input_value(execution_input, "execution")

    submit_input = soup.find("input", {"name": "submit"})
    if not isinstance(submit_input, Tag):
        raise LoginPageError("Login page has no 'submit' input")
    submit = _input_value(submit_input, "submit")

    form = submit_input.parent
    if form is None:
        raise LoginPageError("Submit input has no enclosing element")
    fingerprint_input = form.find("input", {"name": "fpVisitorId"}, recursive=False)
    if not isinstance(fingerprint_input, Tag):
        raise LoginPageError("Login form has no 'fpVisitorId' input")
    # Filled in by the page's scripts in a browser, so an empty value is fine
    fingerprint = fingerprint_input.get("value", "")
    if not isinstance(fingerprint, str):
        raise LoginPageError("Login form input 'fpVisitorId' has an invalid value")

    return LoginFormTokens(
        execution=execution,
        submit=submit,
        visitor_fingerprint=fingerprint,
    )

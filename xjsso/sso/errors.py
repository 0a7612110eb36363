from typing import Any, Optional


class LoginError(Exception):
    """
    A login attempt failed. The attempt is over; nothing from it may be reused.

    Raised as-is for provider responses that have an unexpected shape and
    subclassed for the other phases.
    """


class TransportError(LoginError):
    def __init__(self, url: str, reason: BaseException):
        super().__init__(f"HTTP request to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class MalformedRedirectError(LoginError):
    """
    A 301 or 302 response without a usable Location header.
    """

    def __init__(self, url: str, status: int):
        super().__init__(f"Redirect expected on {url} but no usable Location header (status {status})")
        self.url = url
        self.status = status


class TooManyRedirectsError(LoginError):
    def __init__(self, url: str, limit: int):
        super().__init__(f"Too many redirects starting from {url} (limit {limit})")
        self.url = url
        self.limit = limit


class UnexpectedStatusError(LoginError):
    """
    A step required a redirect (or a plain 200) and got something else.
    """

    def __init__(self, url: str, status: int, expected: str = "redirect"):
        super().__init__(f"Expected {expected} on {url} but got status code {status}")
        self.url = url
        self.status = status
        self.expected = expected


class MfaDetectError(LoginError):
    """
    The MFA detection endpoint answered with something other than
    {"data": {"state": "..."}}. The raw parsed body is kept for diagnostics;
    it is None if the body was not JSON at all.
    """

    def __init__(self, value: Optional[Any]):
        super().__init__(f"MFA detect failure: {value!r}")
        self.value = value


class UnsupportedMfaError(LoginError):
    def __init__(self, state: str):
        super().__init__("The provider requires an interactive second factor, which is not supported")
        self.state = state


class LoginPageError(LoginError):
    """
    The login page lacks one of the form values needed to submit it.
    """


class EncryptionError(LoginError):
    pass

# errors.py
"""
Errors raised at the API boundary.

    GatewayError (base)
    ├── TransportError      network unreachable, timeouts
    ├── ValidationError     4xx with a message body
    ├── NotFoundError       referenced id missing (404)
    ├── UnexpectedError     anything else
    └── SessionClosedError  call attempted after logout

Controllers and the mutation coordinator catch GatewayError; nothing below
the dashboard lets one escape to the UI.
"""

from typing import Optional


class GatewayError(Exception):
    """Base error for every failed API call.

    Attributes:
        message: human readable text, safe to show next to a form
        context: extra details (kind, status code, url...) for logging
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class TransportError(GatewayError):
    """The API could not be reached."""


class ValidationError(GatewayError):
    """The API rejected the request (4xx other than 404)."""

    def __init__(self, message: str, status_code: Optional[int] = None, **context: object) -> None:
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code


class NotFoundError(GatewayError):
    """The referenced record does not exist."""


class UnexpectedError(GatewayError):
    pass


class SessionClosedError(GatewayError):
    pass

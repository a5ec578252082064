"""
Exceptions raised by the vBulletin API client.

Every failure of a request is terminal for that call and surfaces as one of
the ``ApiError`` subclasses below. The caller decides whether to abort or
carry on.

Example:
    try:
        client = ApiClient(config)
    except MissingFieldError as e:
        print(f"Forum did not send {e.field_name}")
    except ApiError as e:
        print(f"API initialization failed: {e}")
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ApiError(Exception):
    """
    Base exception for all API client failures.

    Attributes:
        message: Human-readable error message.
        detail: Additional detail, e.g. the underlying library error.
    """

    message: str
    detail: str = ""

    def __str__(self) -> str:
        """Return a formatted error message."""
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class TransportError(ApiError):
    """The request could not be sent or no response arrived (DNS, TLS, timeout...)."""


class ResponseReadError(ApiError):
    """The response arrived but its body could not be read."""


@dataclass
class HTTPStatusError(ApiError):
    """
    The forum answered with a status code other than 200.

    The message contains the status code, the response headers and the body
    verbatim to aid diagnosis.

    Attributes:
        status_code: HTTP status code from the response.
        headers: Response headers.
        body: Leniently decoded response body.
    """

    status_code: int = 0
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


class InvalidJSONError(ApiError):
    """The initialization response is not valid JSON."""


@dataclass
class MissingFieldError(ApiError):
    """
    A required field is absent from the initialization response.

    Attributes:
        field_name: Name of the missing JSON field.
        body: Leniently decoded response body.
    """

    field_name: str = ""
    body: str = ""


@dataclass
class FieldTypeError(ApiError):
    """
    A required field of the initialization response has the wrong JSON type.

    Attributes:
        field_name: Name of the offending JSON field.
        expected: Expected type, e.g. "an integer" or "a string".
        body: Leniently decoded response body.
    """

    field_name: str = ""
    expected: str = ""
    body: str = ""


class LoginFailedError(ApiError):
    """
    The forum did not accept the login.

    The login endpoint returns no structured error, so a wrong password and
    any other rejection look the same.
    """

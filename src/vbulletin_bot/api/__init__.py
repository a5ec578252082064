"""
API client for vBulletin forums.

This package contains the HTTP client that initializes the vBulletin API and
logs in to a forum, the session identity it obtains, and the exceptions it
raises.

Example:
    from vbulletin_bot.api import ApiClient, ApiError
    from vbulletin_bot.config import ClientConfig

    try:
        client = ApiClient(ClientConfig("https://forum.example.com/vb4"))
        client.login("alice", "password")
    except ApiError as e:
        print(e)
"""

from vbulletin_bot.api.client import ApiClient, decode_body
from vbulletin_bot.api.errors import (
    ApiError,
    FieldTypeError,
    HTTPStatusError,
    InvalidJSONError,
    LoginFailedError,
    MissingFieldError,
    ResponseReadError,
    TransportError,
)
from vbulletin_bot.api.models import SessionIdentity

__all__ = [
    "ApiClient",
    "ApiError",
    "FieldTypeError",
    "HTTPStatusError",
    "InvalidJSONError",
    "LoginFailedError",
    "MissingFieldError",
    "ResponseReadError",
    "SessionIdentity",
    "TransportError",
    "decode_body",
]

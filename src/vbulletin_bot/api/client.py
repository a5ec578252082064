"""
HTTP API client for vBulletin forums.

This module talks to a vBulletin installation in two steps:

1. API initialization (``api.php?api_m=api_init``), which exchanges the
   client identity for a session identity (API version, client id, access
   token and secret). This happens while the client is constructed, so there
   is never a half-initialized client.
2. Login (``login.php?do=login``), the forum's classic form-based login.

Both calls are plain blocking requests made with ``requests``. Every call
opens its own connection; no cookies or tokens are carried from the
initialization into the login.

    config = ClientConfig("https://forum.example.com/vb4")
    client = ApiClient(config)          # raises ApiError on failure
    client.login("alice", "password")   # raises ApiError on failure

Responses are not guaranteed to be UTF-8 (older boards often answer in
ISO-8859-1), so bodies are always decoded with ``decode_body``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests
from requests.auth import HTTPBasicAuth

from vbulletin_bot import __version__
from vbulletin_bot.api.errors import (
    FieldTypeError,
    HTTPStatusError,
    InvalidJSONError,
    LoginFailedError,
    MissingFieldError,
    ResponseReadError,
    TransportError,
)
from vbulletin_bot.api.models import SessionIdentity
from vbulletin_bot.config import ClientConfig

logger = logging.getLogger(__name__)

# =============================================================================
# CLIENT IDENTITY
# =============================================================================

# Reported as both client name and platform name during initialization.
CLIENT_NAME = "vbulletin-bot"
CLIENT_VERSION = f"corona, version {__version__}"

# Fixed device identifier sent as "uniqueid".
UNIQUE_ID = "555logs"

# Largest API version the forum may report (unsigned 32-bit).
MAX_API_VERSION = 2**32 - 1

# Only present in the client-side redirect script of a successful login.
LOGIN_MARKER = "exec_refresh"

LOGIN_FORM_FIELDS = {
    "do": "login",
    "securitytoken": "guest",
    "s": "",
    "cookieuser": "1",
}


def decode_body(raw: bytes) -> str:
    """Decode a response body as UTF-8, replacing invalid byte sequences."""
    return raw.decode("utf-8", errors="replace")


def _format_headers(headers: dict[str, str]) -> str:
    return "\n".join(f"    {name}: {value}" for name, value in headers.items())


class ApiClient:
    """
    Client for the vBulletin API and login form.

    Constructing the client performs the API initialization. The resulting
    ``session`` never changes afterwards; ``login`` may be called any number
    of times and leaves the client untouched.

    Attributes:
        config: Connection settings (base URL, Basic-Auth, timeout).
        session: Session identity returned by the API initialization.

    Raises:
        ApiError: A subclass describing why the initialization failed.

    Example:
        client = ApiClient(ClientConfig("https://forum.example.com/vb4"))
        print(client.session.api_version)
    """

    def __init__(self, config: ClientConfig):
        self.config = config
        if config.has_partial_basic_auth:
            logger.warning("Only one of the Basic-Auth user and password is set, ignoring both")
        self.session = self._api_init()

    # -------------------------------------------------------------------------
    # Request plumbing
    # -------------------------------------------------------------------------

    def _auth(self) -> HTTPBasicAuth | None:
        credentials = self.config.basic_auth
        if credentials is None:
            return None
        return HTTPBasicAuth(*credentials)

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        params: dict[str, str] | None = None,
        files: dict[str, tuple[None, str]] | None = None,
    ) -> str:
        """
        Send one request and return the decoded body of a 200 response.

        Args:
            method: HTTP method.
            path: Path below the base URL, may include a query string.
            action: Name of the operation used in error messages ("API", "Login").
            params: Optional query parameters.
            files: Optional multipart form fields.

        Returns:
            The response body, decoded with ``decode_body``.

        Raises:
            TransportError: If no response was received.
            ResponseReadError: If the body could not be read.
            HTTPStatusError: If the status code is not 200.
        """
        url = f"{self.config.base_url}/{path}"
        logger.debug("%s %s", method, url)

        try:
            response = requests.request(
                method=method,
                url=url,
                params=params,
                files=files,
                auth=self._auth(),
                timeout=self.config.timeout,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{action} request failed", detail=str(e)) from e

        try:
            raw = response.content
        except requests.exceptions.RequestException as e:
            raise ResponseReadError("Failed to read API response", detail=str(e)) from e
        finally:
            response.close()

        body = decode_body(raw)

        if response.status_code != 200:
            headers = dict(response.headers)
            status = f"{response.status_code} {response.reason or ''}".rstrip()
            raise HTTPStatusError(
                message=(
                    f"HTTP request failed with unexpected status code: {status}\n"
                    f"Headers:\n{_format_headers(headers)}\n"
                    f"Body:\n{body}"
                ),
                status_code=response.status_code,
                headers=headers,
                body=body,
            )

        return body

    # -------------------------------------------------------------------------
    # API initialization
    # -------------------------------------------------------------------------

    def _api_init(self) -> SessionIdentity:
        """
        Initialize the API and return the session identity.

        Raises:
            ApiError: A subclass for transport, status, JSON or field errors.
        """
        body = self._request(
            "GET",
            "api.php",
            "API",
            params={
                "api_m": "api_init",
                "clientname": CLIENT_NAME,
                "clientversion": CLIENT_VERSION,
                "platformname": CLIENT_NAME,
                "platformversion": CLIENT_VERSION,
                "uniqueid": UNIQUE_ID,
            },
        )

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidJSONError("Failed to deserialize JSON from API", detail=str(e)) from e

        # Anything but an object carries none of the fields.
        if not isinstance(payload, dict):
            payload = {}

        api_version = _require(payload, "apiversion", body)
        if (
            isinstance(api_version, bool)
            or not isinstance(api_version, int)
            or not 0 <= api_version <= MAX_API_VERSION
        ):
            raise _wrong_type("apiversion", "an unsigned integer", body)

        identity = SessionIdentity(
            api_version=api_version,
            client_id=_require_str(payload, "apiclientid", body),
            access_token=_require_str(payload, "apiaccesstoken", body),
            secret=_require_str(payload, "secret", body),
        )
        logger.info(
            "API initialized at %s (version %d, client id %s)",
            self.config.base_url,
            identity.api_version,
            identity.client_id,
        )
        return identity

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    def login(self, username: str, password: str) -> None:
        """
        Log in to the forum with a user account.

        Credentials are sent as-is; the forum decides whether they are valid.

        Args:
            username: User name of the forum account.
            password: Password of the forum account.

        Raises:
            LoginFailedError: If the forum did not confirm the login.
            ApiError: Another subclass for transport or status errors.
        """
        fields = dict(LOGIN_FORM_FIELDS)
        fields["vb_login_username"] = username
        fields["vb_login_password"] = password

        body = self._request(
            "POST",
            "login.php?do=login&s=",
            "Login",
            files={name: (None, value) for name, value in fields.items()},
        )

        if LOGIN_MARKER not in body:
            logger.warning("Login as %s was rejected by %s", username, self.config.base_url)
            raise LoginFailedError("Login has failed.")

        logger.info("Logged in as %s", username)


# =============================================================================
# RESPONSE FIELD VALIDATION
# =============================================================================


def _require(payload: dict[str, Any], name: str, body: str) -> Any:
    if name not in payload:
        raise MissingFieldError(
            message=f"Response contains no '{name}'!\nResponse is:\n{body}",
            field_name=name,
            body=body,
        )
    return payload[name]


def _require_str(payload: dict[str, Any], name: str, body: str) -> str:
    value = _require(payload, name, body)
    if not isinstance(value, str):
        raise _wrong_type(name, "a string", body)
    return value


def _wrong_type(name: str, expected: str, body: str) -> FieldTypeError:
    return FieldTypeError(
        message=f"Response contains '{name}', but it's not {expected}!\nResponse is:\n{body}",
        field_name=name,
        expected=expected,
        body=body,
    )

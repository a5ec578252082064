"""
Shared pytest fixtures for the vBulletin bot test suite.

This module provides fixtures that are automatically available to all test files:
- A clean environment (no VB_* variables leaking in from the shell)
- A patched ``requests.request`` so no test touches the network
- A factory for fake HTTP responses
- A ready, initialized ApiClient for login tests
"""

import json
from collections.abc import Callable, Generator
from unittest.mock import Mock, patch

import pytest

from tests.constants import INIT_PAYLOAD, TEST_BASE_URL
from vbulletin_bot.api import ApiClient
from vbulletin_bot.config import (
    ENV_LOG_LEVEL,
    ENV_LOGIN_FAILURE_EXIT_CODE,
    ENV_TIMEOUT,
    ClientConfig,
)

# ============================================================================
# ENVIRONMENT FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove configuration environment variables for every test."""
    for name in (ENV_TIMEOUT, ENV_LOG_LEVEL, ENV_LOGIN_FAILURE_EXIT_CODE):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# HTTP FIXTURES
# ============================================================================


def build_response(
    status_code: int = 200,
    body: bytes = b"",
    headers: dict[str, str] | None = None,
    reason: str = "OK",
) -> Mock:
    """
    Build a fake ``requests.Response``.

    Args:
        status_code: HTTP status code.
        body: Raw response body.
        headers: Response headers (defaults to a text/html content type).
        reason: HTTP reason phrase.

    Returns:
        Mock with the attributes the client reads.
    """
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.headers = headers if headers is not None else {"Content-Type": "text/html"}
    response.content = body
    return response


@pytest.fixture
def make_response() -> Callable[..., Mock]:
    """Factory fixture for fake responses (see build_response)."""
    return build_response


@pytest.fixture
def init_response() -> Mock:
    """A successful api_init response."""
    return build_response(
        body=json.dumps(INIT_PAYLOAD).encode(),
        headers={"Content-Type": "application/json"},
    )


@pytest.fixture
def mock_request() -> Generator[Mock, None, None]:
    """Patch ``requests.request`` as used by the API client."""
    with patch("vbulletin_bot.api.client.requests.request") as mocked:
        yield mocked


# ============================================================================
# CLIENT FIXTURES
# ============================================================================


@pytest.fixture
def client_config() -> ClientConfig:
    """Client configuration without Basic-Auth."""
    return ClientConfig(base_url=TEST_BASE_URL)


@pytest.fixture
def api_client(mock_request: Mock, init_response: Mock, client_config: ClientConfig) -> ApiClient:
    """
    An initialized ApiClient.

    The initialization request is already done; ``mock_request`` is reset so
    tests only see the calls they make themselves.
    """
    mock_request.return_value = init_response
    client = ApiClient(client_config)
    mock_request.reset_mock()
    return client

"""
Command-line interface for the vBulletin bot.

Initializes the API of a forum and logs in with the given account. Further
moderation features are not implemented yet.

Usage:
    vbulletin-bot <base_url> <username> <password> [basic_auth_user basic_auth_pass]
    vbulletin-bot --timeout 10 --log-level INFO https://forum.example.com/vb4 alice secret

Exit Codes:
    0: Login succeeded (or was rejected, see --login-failure-exit-code)
    1: Usage error or API initialization failure

Environment Variables:
    VB_REQUEST_TIMEOUT: Request timeout in seconds (default: 30, 0 disables it)
    VB_LOG_LEVEL: Log level (default: WARNING)
    VB_LOGIN_FAILURE_EXIT_CODE: Exit status for a rejected login (default: 0)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from vbulletin_bot.api import ApiClient, ApiError
from vbulletin_bot.config import USAGE, ClientConfig, RunConfig, UsageError

# Timestamp, logger name and level in front of every message.
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Outcome(Enum):
    """Result category of one run."""

    SUCCESS = "success"
    USAGE_ERROR = "usage_error"
    INIT_FAILED = "init_failed"
    LOGIN_FAILED = "login_failed"


@dataclass(frozen=True)
class RunResult:
    """Outcome of a run together with the text to report."""

    outcome: Outcome
    message: str


def run(
    config: RunConfig,
    api_factory: Callable[[ClientConfig], ApiClient] = ApiClient,
) -> RunResult:
    """
    Initialize the API and log in, without printing or exiting.

    Args:
        config: Parsed run configuration.
        api_factory: Callable building an initialized client from a
            ClientConfig. Defaults to ApiClient.

    Returns:
        RunResult: INIT_FAILED or LOGIN_FAILED with the error detail, or
        SUCCESS.
    """
    try:
        api = api_factory(config.client)
    except ApiError as e:
        return RunResult(Outcome.INIT_FAILED, str(e))

    try:
        api.login(config.username, config.password)
    except ApiError as e:
        return RunResult(Outcome.LOGIN_FAILED, str(e))

    return RunResult(Outcome.SUCCESS, f"Login as {config.username} was successful!")


def exit_code_for(result: RunResult, login_failure_exit_code: int = 0) -> int:
    """
    Map a run result to a process exit status.

    Usage errors and initialization failures always exit with 1. A rejected
    login exits with ``login_failure_exit_code``.
    """
    if result.outcome is Outcome.SUCCESS:
        return 0
    if result.outcome is Outcome.LOGIN_FAILED:
        return login_failure_exit_code
    return 1


def configure_logging(level: str) -> None:
    """Configure the root logger for a command-line run."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    print("This is still a proof of concept!")

    try:
        config = RunConfig.from_args(argv)
    except UsageError as e:
        result = RunResult(Outcome.USAGE_ERROR, str(e))
        print(result.message, file=sys.stderr)
        print("", file=sys.stderr)
        print("Usage:", file=sys.stderr)
        print("", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return exit_code_for(result)

    configure_logging(config.log_level)

    result = run(config)

    if result.outcome is Outcome.INIT_FAILED:
        print("API initialization failed!", file=sys.stderr)
        print(result.message, file=sys.stderr)
        return exit_code_for(result)

    if result.outcome is Outcome.LOGIN_FAILED:
        print(f"Login as {config.username} failed!", file=sys.stderr)
        print(f"Error: {result.message}", file=sys.stderr)
    else:
        print(result.message)

    print("The show ends here, since more stuff is not implemented yet.")
    return exit_code_for(result, config.login_failure_exit_code)


if __name__ == "__main__":
    sys.exit(main())

"""
Configuration management for the vBulletin bot.

This module holds two immutable configuration objects:

- ``ClientConfig``: what the API client needs to talk to a forum (base URL,
  optional HTTP Basic-Auth credentials, request timeout).
- ``RunConfig``: everything the command-line entry point needs, i.e. a
  ``ClientConfig`` plus the forum credentials and process-level settings.

Settings for the command line are resolved with the following precedence
(highest to lowest):

1. Command-line arguments (--timeout, --log-level, --login-failure-exit-code)
2. Environment variables (VB_REQUEST_TIMEOUT, VB_LOG_LEVEL,
   VB_LOGIN_FAILURE_EXIT_CODE)
3. Default values

The API client itself never reads the environment; only ``RunConfig.from_args``
does.

Example:
    config = RunConfig.from_args(["https://forum.example.com/vb4", "alice", "secret"])
    print(config.client.base_url)  # "https://forum.example.com/vb4"
    print(config.client.timeout)   # 30.0 (default)
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# DEFAULT CONFIGURATION VALUES
# =============================================================================

# Default HTTP request timeout in seconds. The forum is contacted twice per
# run, so a stalled server should not block the bot forever.
DEFAULT_TIMEOUT = 30.0

# Login failures are reported but do not fail the process unless configured.
DEFAULT_LOGIN_FAILURE_EXIT_CODE = 0

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_TIMEOUT = "VB_REQUEST_TIMEOUT"
ENV_LOG_LEVEL = "VB_LOG_LEVEL"
ENV_LOGIN_FAILURE_EXIT_CODE = "VB_LOGIN_FAILURE_EXIT_CODE"

# Option spellings accepted on the command line, mapped to their long name.
OPTION_ALIASES = {
    "--timeout": "--timeout",
    "-t": "--timeout",
    "--log-level": "--log-level",
    "--login-failure-exit-code": "--login-failure-exit-code",
}

USAGE = (
    "program https://forum.example.com/vb4/ Username SecretPassword "
    "[BasicAuthUser BasicAuthPass]"
)


class UsageError(ValueError):
    """Raised when the command line cannot be turned into a RunConfig."""


# =============================================================================
# CLIENT CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable connection settings for the API client.

    Attributes:
        base_url: Root URL of the forum installation, e.g.
                  "https://forum.example.com/vb4". Request paths are appended
                  with a "/" separator; trailing slash handling is up to the
                  caller.
        basic_auth_user: User name for HTTP Basic-Auth, empty if not used.
        basic_auth_pass: Password for HTTP Basic-Auth, empty if not used.
        timeout: Request timeout in seconds applied to every request. None
                 waits indefinitely.

    Example:
        config = ClientConfig("https://forum.example.com/vb4", "guard", "s3cret")
        config.basic_auth  # ("guard", "s3cret")
    """

    base_url: str
    basic_auth_user: str = ""
    basic_auth_pass: str = ""
    timeout: float | None = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """
        Validate configuration values after initialization.

        Raises:
            ValueError: If base_url is empty or timeout is not positive.
        """
        if not self.base_url:
            raise ValueError("base_url cannot be empty")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be a positive number")

    @property
    def basic_auth(self) -> tuple[str, str] | None:
        """
        Basic-Auth credentials as a (user, password) pair.

        Returns None unless both values are non-empty; a half-configured pair
        is treated the same as no Basic-Auth at all.
        """
        if self.basic_auth_user and self.basic_auth_pass:
            return self.basic_auth_user, self.basic_auth_pass
        return None

    @property
    def has_partial_basic_auth(self) -> bool:
        """True if exactly one of the two Basic-Auth values is set."""
        return bool(self.basic_auth_user) != bool(self.basic_auth_pass)


# =============================================================================
# COMMAND-LINE RUN CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class RunConfig:
    """
    Immutable configuration for one run of the command-line tool.

    Attributes:
        client: Connection settings handed to the API client.
        username: Forum account name used for the login.
        password: Forum account password used for the login.
        login_failure_exit_code: Process exit status when the login is
            rejected. Defaults to 0, i.e. a failed login is reported but is
            not treated as a fatal error.
        log_level: Name of the root log level.
    """

    client: ClientConfig
    username: str
    password: str
    login_failure_exit_code: int = DEFAULT_LOGIN_FAILURE_EXIT_CODE
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """
        Validate configuration values after initialization.

        Raises:
            ValueError: If the log level is unknown or the exit code is out
                of the 0-255 range.
        """
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        if not 0 <= self.login_failure_exit_code <= 255:
            raise ValueError("login_failure_exit_code must be between 0 and 255")

    @classmethod
    def from_args(cls, args: Sequence[str] | None = None) -> RunConfig:
        """
        Create a RunConfig from command-line arguments.

        Positional arguments are ``<base_url> <username> <password>
        [basic_auth_user] [basic_auth_pass]``. Options fall back to
        environment variables and then to default values.

        Args:
            args: Command-line arguments to parse. If None, uses sys.argv[1:].

        Returns:
            RunConfig: A fully populated configuration object.

        Raises:
            UsageError: If the positional arguments are incomplete or a
                setting has an invalid value.
        """
        if args is None:
            args = sys.argv[1:]

        parser = _build_parser()
        if list(args) in (["-h"], ["--help"]):
            parser.parse_args(args)

        options, positional = _split_args(args)
        try:
            parsed = parser.parse_args(options)
        except argparse.ArgumentError as e:
            raise UsageError(str(e)) from e

        if len(positional) < 3:
            raise UsageError("Not enough command line parameters!")
        if len(positional) > 5:
            raise UsageError("Too many command line parameters!")

        base_url, username, password = positional[:3]
        basic_auth_user = positional[3] if len(positional) > 3 else ""
        basic_auth_pass = positional[4] if len(positional) > 4 else ""

        # Resolve timeout with precedence: CLI > ENV > DEFAULT
        if parsed.timeout is not None:
            timeout = parsed.timeout
        elif ENV_TIMEOUT in os.environ:
            timeout = _parse_number(os.environ[ENV_TIMEOUT], float, ENV_TIMEOUT)
        else:
            timeout = DEFAULT_TIMEOUT

        # Resolve log level with precedence: CLI > ENV > DEFAULT
        log_level = parsed.log_level or os.environ.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL
        log_level = log_level.upper()

        # Resolve login failure exit code with precedence: CLI > ENV > DEFAULT
        if parsed.login_failure_exit_code is not None:
            exit_code = parsed.login_failure_exit_code
        elif ENV_LOGIN_FAILURE_EXIT_CODE in os.environ:
            exit_code = _parse_number(
                os.environ[ENV_LOGIN_FAILURE_EXIT_CODE], int, ENV_LOGIN_FAILURE_EXIT_CODE
            )
        else:
            exit_code = DEFAULT_LOGIN_FAILURE_EXIT_CODE

        try:
            return cls(
                client=ClientConfig(
                    base_url=base_url,
                    basic_auth_user=basic_auth_user,
                    basic_auth_pass=basic_auth_pass,
                    # A timeout of 0 disables it entirely.
                    timeout=timeout or None,
                ),
                username=username,
                password=password,
                login_failure_exit_code=exit_code,
                log_level=log_level,
            )
        except ValueError as e:
            raise UsageError(str(e)) from e


def _split_args(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """
    Separate the known options from the positional arguments.

    Only exact option names (and ``--name=value``) count as options; any
    other token, including credentials starting with "-", stays positional.
    Everything after "--" is positional.

    Returns:
        Options normalized to ``--name=value`` and the positional arguments.

    Raises:
        UsageError: If an option is missing its value.
    """
    options: list[str] = []
    positional: list[str] = []
    tokens = iter(args)
    for token in tokens:
        if token == "--":
            positional.extend(tokens)
            break

        name, sep, value = token.partition("=")
        if sep and name.startswith("--") and name in OPTION_ALIASES:
            options.append(f"{OPTION_ALIASES[name]}={value}")
        elif token in OPTION_ALIASES:
            value = next(tokens, None)
            if value is None:
                raise UsageError(f"argument {token}: expected one argument")
            options.append(f"{OPTION_ALIASES[token]}={value}")
        else:
            positional.append(token)

    return options, positional


def _parse_number(value: str, kind: type, name: str):
    """Convert an environment variable value, reporting bad input as UsageError."""
    try:
        return kind(value)
    except ValueError as e:
        raise UsageError(f"{name} has an invalid value: {value!r}") from e


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the command-line tool."""
    parser = argparse.ArgumentParser(
        prog="vbulletin-bot",
        description="Initialize the vBulletin API and log in to a forum.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        exit_on_error=False,
        epilog=f"""
Usage:
  {USAGE}

Environment Variables:
  {ENV_TIMEOUT}          Request timeout in seconds (default: {DEFAULT_TIMEOUT:g}, 0 disables it)
  {ENV_LOG_LEVEL}                Log level (default: {DEFAULT_LOG_LEVEL})
  {ENV_LOGIN_FAILURE_EXIT_CODE}  Exit status for a failed login (default: {DEFAULT_LOGIN_FAILURE_EXIT_CODE})
        """,
    )

    parser.add_argument(
        "arguments",
        nargs="*",
        metavar="ARG",
        help="base_url username password [basic_auth_user basic_auth_pass]",
    )

    parser.add_argument(
        "--timeout",
        "-t",
        type=float,
        default=None,  # None means "check env var, then use default"
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g}, 0 disables it)",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help=f"Log level (default: {DEFAULT_LOG_LEVEL})",
    )

    parser.add_argument(
        "--login-failure-exit-code",
        type=int,
        default=None,
        help=(
            "Exit status used when the login is rejected "
            f"(default: {DEFAULT_LOGIN_FAILURE_EXIT_CODE})"
        ),
    )

    return parser

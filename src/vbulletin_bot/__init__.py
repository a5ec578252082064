"""vBulletin moderation bot.

A small client for the remote API of a vBulletin forum. It performs the API
initialization handshake and a form-based login; moderation features are not
implemented yet.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
The version is also reported to the forum as part of the client identity
(see ``vbulletin_bot.api.client``).
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ---------------------------------------------------------------------------
# Package version. Falls back to the pyproject.toml value when the package is
# imported from a source checkout without being installed.
# ---------------------------------------------------------------------------
try:
    __version__: str = version("vbulletin-bot")
except PackageNotFoundError:
    __version__ = "0.1.0"

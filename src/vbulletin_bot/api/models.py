"""Data returned by the vBulletin API."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SessionIdentity:
    """
    Session identity handed out by the API initialization call.

    Only ever built from a well-formed ``api_init`` response and held for the
    lifetime of the owning client.

    Attributes:
        api_version: Version of the API reported by the forum, usually 1 or higher.
        client_id: Client id the forum assigned to this client.
        access_token: Token for further API requests.
        secret: Secret used in request signature generation.
    """

    api_version: int
    client_id: str
    access_token: str = field(repr=False)
    secret: str = field(repr=False)

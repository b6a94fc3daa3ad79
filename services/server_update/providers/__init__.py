"""Update provider implementations."""

from __future__ import annotations

from services.server_update.providers.base import UpdateProvider
from services.server_update.providers.jenkins import BungeeCordProvider, JenkinsProvider, PufferfishProvider
from services.server_update.providers.papermc import PaperProvider
from services.server_update.providers.purpur import PurpurProvider

__all__ = [
    "BungeeCordProvider",
    "JenkinsProvider",
    "PaperProvider",
    "PufferfishProvider",
    "PurpurProvider",
    "UpdateProvider",
]

"""Default set of providers offered by the updater."""

from __future__ import annotations

import logging
from functools import partial

from services.server_update.providers.jenkins import BungeeCordProvider, PufferfishProvider
from services.server_update.providers.papermc import PaperProvider
from services.server_update.providers.purpur import PurpurProvider
from services.server_update.registry import ProviderRegistry


_LOGGER = logging.getLogger(__name__)


def register_default_providers(registry: ProviderRegistry) -> ProviderRegistry:
    """Bind the built-in providers and their aliases on ``registry``.

    Call once at startup, before the registry is shared between runs.
    """

    registry.register(("paper", "papermc", "paperspigot"), partial(PaperProvider, project="paper"))
    registry.register("travertine", partial(PaperProvider, project="travertine"))
    registry.register("waterfall", partial(PaperProvider, project="waterfall"))
    registry.register("velocity", partial(PaperProvider, project="velocity"))
    registry.register(("purpur", "purpurmc"), PurpurProvider)
    registry.register(("bungeecord", "bungee"), BungeeCordProvider)
    registry.register("pufferfish", PufferfishProvider)
    _LOGGER.debug("Registered %d provider names", len(registry))
    return registry


def create_default_registry() -> ProviderRegistry:
    return register_default_providers(ProviderRegistry())


__all__ = ["create_default_registry", "register_default_providers"]

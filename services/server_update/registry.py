"""Case-insensitive mapping from project names to provider constructors."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from services.server_update.models import VersionQuery
from services.server_update.providers.base import UpdateProvider


_LOGGER = logging.getLogger(__name__)

ProviderFactory = Callable[[VersionQuery], UpdateProvider]


class ProviderRegistry:
    """Hold the providers an update run may be pointed at.

    Populate once at startup (see
    :func:`services.server_update.providers.catalog.register_default_providers`);
    lookups afterwards only read the mapping and need no locking.
    """

    def __init__(self) -> None:
        self._factories: dict[str, ProviderFactory] = {}

    def register(self, names: str | Iterable[str], factory: ProviderFactory) -> None:
        """Bind every name in ``names`` to ``factory``, replacing old bindings."""

        if isinstance(names, str):
            names = (names,)
        for name in names:
            key = _normalise(name)
            if not key:
                raise ValueError("Provider names must not be empty")
            if key in self._factories:
                _LOGGER.debug("Replacing provider registered as %s", key)
            self._factories[key] = factory

    def resolve(self, name: str) -> ProviderFactory | None:
        return self._factories.get(_normalise(name))

    def names(self) -> set[str]:
        return set(self._factories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _normalise(name) in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def _normalise(name: str) -> str:
    return name.strip().casefold()


__all__ = ["ProviderFactory", "ProviderRegistry"]

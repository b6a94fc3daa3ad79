"""Contract shared by every update provider."""

from __future__ import annotations

from typing import BinaryIO, Protocol

from services.server_update.checksum import ChecksumCapability


class UpdateProvider(Protocol):
    """One upstream distribution channel, bound to a resolved version.

    Providers resolve whatever they need when constructed; a provider instance
    serves a single update run.
    """

    @property
    def checksum(self) -> ChecksumCapability | None:
        """Return the checksum capability, or ``None`` when unsupported."""

    def open_artifact(self) -> BinaryIO | None:
        """Return a stream of the artifact bytes, or ``None`` on failure."""


__all__ = ["UpdateProvider"]

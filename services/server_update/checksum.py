"""Change-token storage and the checksum capability of providers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol

from services.server_update.hashing import calculate_digest


_LOGGER = logging.getLogger(__name__)


class ChecksumStore(Protocol):
    """Where the last installed change token lives."""

    def load(self) -> str:
        """Return the stored token, or ``""`` when nothing was recorded."""

    def save(self, token: str) -> None:
        """Replace the stored token with ``token``."""


class NullChecksumStore:
    """Store that never remembers anything."""

    def load(self) -> str:
        return ""

    def save(self, token: str) -> None:
        return None


class MemoryChecksumStore:
    """Keep the token in memory; handy when embedding the updater."""

    def __init__(self, token: str = "") -> None:
        self.token = token

    def load(self) -> str:
        return self.token

    def save(self, token: str) -> None:
        self.token = token


class CallbackChecksumStore:
    """Adapt a pair of caller supplied functions to :class:`ChecksumStore`."""

    def __init__(
        self,
        loader: Callable[[], str] | None = None,
        saver: Callable[[str], None] | None = None,
    ) -> None:
        self._loader = loader
        self._saver = saver

    def load(self) -> str:
        if self._loader is None:
            return ""
        return self._loader() or ""

    def save(self, token: str) -> None:
        if self._saver is not None:
            self._saver(token)


class FileChecksumStore:
    """Persist the raw token text in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> str:
        if not self.path.exists():
            return ""
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.warning("Unable to read checksum file %s: %s", self.path, exc)
            return ""

    def save(self, token: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(token, encoding="utf-8")
        except OSError as exc:
            _LOGGER.warning("Unable to write checksum file %s: %s", self.path, exc)


class ChecksumCapability(Protocol):
    """Optional provider capability used to skip redundant downloads."""

    def current_checksum(self) -> str:
        """Return the token describing what the provider would install now."""

    def stored_checksum(self, target: Path, store: ChecksumStore) -> str:
        """Return the token describing what is installed at ``target``."""

    def save_checksum(self, target: Path, store: ChecksumStore) -> None:
        """Record that ``target`` now holds :meth:`current_checksum`."""


class StoredTokenChecksum:
    """Compare an opaque provider token with the one kept in the store."""

    def __init__(self, token: Callable[[], str]) -> None:
        self._token = token

    def current_checksum(self) -> str:
        return self._token()

    def stored_checksum(self, target: Path, store: ChecksumStore) -> str:
        return store.load()

    def save_checksum(self, target: Path, store: ChecksumStore) -> None:
        store.save(self.current_checksum())


class FileDigestChecksum:
    """Compare the digest of the installed file with the advertised one."""

    def __init__(self, expected: str, algorithm: str = "sha256") -> None:
        self._expected = expected.strip().lower()
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def current_checksum(self) -> str:
        return self._expected

    def stored_checksum(self, target: Path, store: ChecksumStore) -> str:
        if not target.exists():
            return ""
        return calculate_digest(target, self._algorithm)

    def save_checksum(self, target: Path, store: ChecksumStore) -> None:
        # The file itself is the record.
        return None


__all__ = [
    "CallbackChecksumStore",
    "ChecksumCapability",
    "ChecksumStore",
    "FileChecksumStore",
    "FileDigestChecksum",
    "MemoryChecksumStore",
    "NullChecksumStore",
    "StoredTokenChecksum",
]

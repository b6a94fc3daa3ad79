"""Helpers for configuring and scheduling server updates."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from app.config import get_app_config
from services.server_update.checksum import (
    CallbackChecksumStore,
    ChecksumStore,
    FileChecksumStore,
    NullChecksumStore,
)
from services.server_update.constants import DEFAULT_OUTPUT_FILE, LATEST_VERSION
from services.server_update.models import ConfigurationError, UpdateOutcome
from services.server_update.providers.catalog import create_default_registry
from services.server_update.registry import ProviderRegistry
from services.server_update.service import UpdateService


_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateConfig:
    """Everything one update run needs, fixed before the run starts."""

    project: str
    version: str = LATEST_VERSION
    output_file: Path = Path(DEFAULT_OUTPUT_FILE)
    working_directory: Path = Path(".")
    checksum_store: ChecksumStore = field(default_factory=NullChecksumStore)
    check_only: bool = False
    diagnostics: Callable[[str], None] | None = field(default=None, compare=False, repr=False)


class UpdateConfigBuilder:
    """Accumulate update options and produce an :class:`UpdateConfig`."""

    def __init__(self, project: str) -> None:
        self._project = project
        self._version = LATEST_VERSION
        self._output_file = Path(get_app_config().output.file_name)
        self._working_directory = Path(".")
        self._checksum_loader: Callable[[], str] | None = None
        self._checksum_saver: Callable[[str], None] | None = None
        self._checksum_store: ChecksumStore | None = None
        self._check_only = False
        self._diagnostics: Callable[[str], None] | None = None

    def version(self, version: str) -> "UpdateConfigBuilder":
        self._version = version
        return self

    def output_file(self, path: str | Path) -> "UpdateConfigBuilder":
        self._output_file = Path(path)
        return self

    def working_directory(self, path: str | Path) -> "UpdateConfigBuilder":
        self._working_directory = Path(path)
        return self

    def checksum_supplier(self, loader: Callable[[], str]) -> "UpdateConfigBuilder":
        self._checksum_loader = loader
        self._checksum_store = None
        return self

    def checksum_consumer(self, saver: Callable[[str], None]) -> "UpdateConfigBuilder":
        self._checksum_saver = saver
        self._checksum_store = None
        return self

    def checksum_store(self, store: ChecksumStore) -> "UpdateConfigBuilder":
        self._checksum_store = store
        return self

    def checksum_file(self, path: str | Path | None = None) -> "UpdateConfigBuilder":
        """Keep the token in ``path``, relative to the working directory set so far."""

        name = Path(path) if path is not None else Path(get_app_config().output.checksum_file)
        return self.checksum_store(FileChecksumStore(self._working_directory / name))

    def check_only(self, check_only: bool = True) -> "UpdateConfigBuilder":
        self._check_only = bool(check_only)
        return self

    def diagnostics(self, sink: Callable[[str], None] | None) -> "UpdateConfigBuilder":
        self._diagnostics = sink
        return self

    def build(self) -> UpdateConfig:
        project = (self._project or "").strip()
        if not project:
            raise ConfigurationError("A project name is required")
        version = (self._version or "").strip()
        if not version:
            raise ConfigurationError("The requested version must not be empty")

        store = self._checksum_store
        if store is None:
            if self._checksum_loader is None and self._checksum_saver is None:
                store = NullChecksumStore()
            else:
                store = CallbackChecksumStore(self._checksum_loader, self._checksum_saver)

        return UpdateConfig(
            project=project,
            version=version,
            output_file=self._output_file,
            working_directory=self._working_directory,
            checksum_store=store,
            check_only=self._check_only,
            diagnostics=self._diagnostics,
        )


def update_project(project: str) -> UpdateConfigBuilder:
    """Start configuring an update of ``project``."""

    return UpdateConfigBuilder(project)


def build_update_service(
    config: UpdateConfig, registry: ProviderRegistry | None = None
) -> UpdateService:
    """Construct an :class:`UpdateService`, using the built-in providers by default."""

    if registry is None:
        registry = create_default_registry()
    return UpdateService(config, registry)


def run_update(config: UpdateConfig, registry: ProviderRegistry | None = None) -> UpdateOutcome:
    return build_update_service(config, registry).run()


def schedule_update(
    config: UpdateConfig,
    registry: ProviderRegistry | None = None,
    *,
    on_complete: Callable[[UpdateOutcome], None] | None = None,
) -> threading.Thread:
    """Run the update on a daemon thread and report the outcome to ``on_complete``."""

    service = build_update_service(config, registry)

    def _worker() -> None:
        outcome = service.run()
        if on_complete is None:
            return
        try:
            on_complete(outcome)
        except Exception:  # pragma: no cover - callback failures are the caller's
            _LOGGER.exception("Update completion callback failed")

    thread = threading.Thread(target=_worker, name="server-update", daemon=True)
    thread.start()
    return thread


__all__ = [
    "UpdateConfig",
    "UpdateConfigBuilder",
    "build_update_service",
    "run_update",
    "schedule_update",
    "update_project",
]

"""Service that drives one update of a server file."""

from __future__ import annotations

import http.client
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from services.server_update.diagnostics import DiagnosticSink
from services.server_update.download import can_create, ensure_file, replace_with_stream
from services.server_update.models import UpdateOutcome, UpdateStatus, VersionQuery
from services.server_update.registry import ProviderRegistry

if TYPE_CHECKING:
    from services.server_update.builder import UpdateConfig


_LOGGER = logging.getLogger(__name__)


class UpdateService:
    """Resolve, compare and (when needed) replace the configured server file.

    :meth:`run` maps every outcome, including unexpected exceptions, to an
    :class:`UpdateOutcome`; it never raises.
    """

    def __init__(self, config: "UpdateConfig", registry: ProviderRegistry) -> None:
        self._config = config
        self._registry = registry
        self._debug = DiagnosticSink(config.diagnostics)

    @property
    def config(self) -> "UpdateConfig":
        return self._config

    def run(self) -> UpdateOutcome:
        try:
            outcome = self._run()
        except Exception as exc:
            _LOGGER.exception("Unexpected error while updating %s", self._config.project)
            self._debug.exception(exc)
            outcome = UpdateOutcome.unknown_error(exc)
        _LOGGER.info("Update of %s finished: %s", self._config.project, outcome.status.name)
        return outcome

    def run_async(self, executor: Executor | None = None) -> "Future[UpdateOutcome]":
        """Schedule :meth:`run` on ``executor`` or a private worker thread.

        Cancelling the future only helps before the run starts; requests that
        are already in flight finish on their own.
        """

        if executor is not None:
            return executor.submit(self.run)
        private = ThreadPoolExecutor(max_workers=1, thread_name_prefix="server-update")
        try:
            return private.submit(self.run)
        finally:
            private.shutdown(wait=False)

    def _run(self) -> UpdateOutcome:
        config = self._config
        factory = self._registry.resolve(config.project)
        if factory is None:
            _LOGGER.warning("No provider registered for %s", config.project)
            return UpdateOutcome.of(UpdateStatus.NO_PROVIDER)

        config.working_directory.mkdir(parents=True, exist_ok=True)
        target = config.output_file
        existed = target.exists()
        if not existed:
            if config.check_only:
                if not can_create(target):
                    return UpdateOutcome.of(UpdateStatus.FILE_CREATE_FAILED)
                self._debug(f"{target} does not exist yet")
                return UpdateOutcome.of(UpdateStatus.OUT_OF_DATE)
            if not ensure_file(target):
                return UpdateOutcome.of(UpdateStatus.FILE_CREATE_FAILED)

        self._debug(f"Resolving {config.project} version {config.version}")
        provider = factory(VersionQuery(config.version, self._debug))
        checksum = provider.checksum

        if existed:
            if checksum is not None:
                current = checksum.current_checksum()
                stored = checksum.stored_checksum(target, config.checksum_store)
                self._debug(f"Current checksum: {current}")
                self._debug(f"Stored checksum: {stored}")
                if stored and stored == current:
                    return UpdateOutcome.of(UpdateStatus.UP_TO_DATE)
                if config.check_only:
                    return UpdateOutcome.of(UpdateStatus.OUT_OF_DATE)
            elif config.check_only:
                self._debug(f"{config.project} cannot report a checksum; assuming out of date")
                return UpdateOutcome.of(UpdateStatus.OUT_OF_DATE)

        stream = provider.open_artifact()
        if stream is None:
            self._debug("Failed to get the artifact stream")
            return UpdateOutcome.of(UpdateStatus.FAILED)
        try:
            with stream:
                size = replace_with_stream(stream, target)
        except (OSError, http.client.HTTPException) as exc:
            _LOGGER.warning("Failed to write %s: %s", target, exc)
            self._debug(f"Failed to write {target}: {exc}")
            return UpdateOutcome.of(UpdateStatus.FAILED)
        self._debug(f"Downloaded {size} bytes to {target}")

        if checksum is not None:
            checksum.save_checksum(target, config.checksum_store)
        return UpdateOutcome.of(UpdateStatus.SUCCESS)


__all__ = ["UpdateService"]

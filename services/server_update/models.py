"""Data models used by the server update service."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable

from services.server_update.constants import INVALID_ARTIFACT, LATEST_VERSION


class UpdateError(RuntimeError):
    """Raised when release metadata cannot be fetched or understood."""


class ConfigurationError(ValueError):
    """Raised when an update configuration is incomplete or invalid."""


def _discard(_message: str) -> None:
    return None


@dataclass(frozen=True)
class VersionQuery:
    """The version a caller asked for, plus the sink for progress lines."""

    version: str = LATEST_VERSION
    diagnostics: Callable[[str], None] = field(default=_discard, compare=False, repr=False)

    @property
    def is_latest(self) -> bool:
        return self.version == LATEST_VERSION


@dataclass(frozen=True)
class ArtifactLocator:
    """Where a resolved build output lives relative to its build."""

    file_name: str
    relative_path: str

    @classmethod
    def invalid(cls) -> "ArtifactLocator":
        return cls(file_name=INVALID_ARTIFACT, relative_path=INVALID_ARTIFACT)

    @property
    def is_valid(self) -> bool:
        return self.relative_path != INVALID_ARTIFACT


class UpdateStatus(enum.Enum):
    """Terminal states of one update run."""

    NO_PROVIDER = "no_provider"
    UP_TO_DATE = "up_to_date"
    OUT_OF_DATE = "out_of_date"
    FILE_CREATE_FAILED = "file_create_failed"
    SUCCESS = "success"
    FAILED = "failed"
    UNKNOWN_ERROR = "unknown_error"


_STATUS_MESSAGES: dict[UpdateStatus, str] = {
    UpdateStatus.NO_PROVIDER: "No provider is registered for the requested project",
    UpdateStatus.UP_TO_DATE: "The server file is already up to date",
    UpdateStatus.OUT_OF_DATE: "The server file is out of date",
    UpdateStatus.FILE_CREATE_FAILED: "Could not create the output file",
    UpdateStatus.SUCCESS: "Successfully updated the server file",
    UpdateStatus.FAILED: "Failed to download the server file",
    UpdateStatus.UNKNOWN_ERROR: "An unexpected error occurred",
}

_SUCCESS_STATUSES = frozenset({UpdateStatus.UP_TO_DATE, UpdateStatus.SUCCESS})


@dataclass(frozen=True)
class UpdateOutcome:
    """Result of a single update run."""

    status: UpdateStatus
    error: BaseException | None = field(default=None, compare=False)

    @classmethod
    def of(cls, status: UpdateStatus) -> "UpdateOutcome":
        return cls(status=status)

    @classmethod
    def unknown_error(cls, error: BaseException) -> "UpdateOutcome":
        return cls(status=UpdateStatus.UNKNOWN_ERROR, error=error)

    @property
    def is_success(self) -> bool:
        return self.status in _SUCCESS_STATUSES

    @property
    def message(self) -> str:
        text = _STATUS_MESSAGES[self.status]
        if self.error is not None:
            return f"{text}: {type(self.error).__name__}: {self.error}"
        return text


__all__ = [
    "ArtifactLocator",
    "ConfigurationError",
    "UpdateError",
    "UpdateOutcome",
    "UpdateStatus",
    "VersionQuery",
]

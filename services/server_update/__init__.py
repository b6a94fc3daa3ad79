"""Public API for the server update package."""

from __future__ import annotations

from services.server_update.builder import (
    UpdateConfig,
    UpdateConfigBuilder,
    build_update_service,
    run_update,
    schedule_update,
    update_project,
)
from services.server_update.checksum import (
    CallbackChecksumStore,
    ChecksumCapability,
    ChecksumStore,
    FileChecksumStore,
    FileDigestChecksum,
    MemoryChecksumStore,
    NullChecksumStore,
    StoredTokenChecksum,
)
from services.server_update.constants import DEFAULT_CHECKSUM_FILE, DEFAULT_OUTPUT_FILE, LATEST_VERSION
from services.server_update.models import (
    ArtifactLocator,
    ConfigurationError,
    UpdateError,
    UpdateOutcome,
    UpdateStatus,
    VersionQuery,
)
from services.server_update.providers import (
    BungeeCordProvider,
    JenkinsProvider,
    PaperProvider,
    PufferfishProvider,
    PurpurProvider,
    UpdateProvider,
)
from services.server_update.providers.catalog import create_default_registry, register_default_providers
from services.server_update.registry import ProviderFactory, ProviderRegistry
from services.server_update.service import UpdateService

__all__ = [
    "DEFAULT_CHECKSUM_FILE",
    "DEFAULT_OUTPUT_FILE",
    "LATEST_VERSION",
    "ArtifactLocator",
    "BungeeCordProvider",
    "CallbackChecksumStore",
    "ChecksumCapability",
    "ChecksumStore",
    "ConfigurationError",
    "FileChecksumStore",
    "FileDigestChecksum",
    "JenkinsProvider",
    "MemoryChecksumStore",
    "NullChecksumStore",
    "PaperProvider",
    "ProviderFactory",
    "ProviderRegistry",
    "PufferfishProvider",
    "PurpurProvider",
    "StoredTokenChecksum",
    "UpdateConfig",
    "UpdateConfigBuilder",
    "UpdateError",
    "UpdateOutcome",
    "UpdateProvider",
    "UpdateService",
    "UpdateStatus",
    "VersionQuery",
    "build_update_service",
    "create_default_registry",
    "register_default_providers",
    "run_update",
    "schedule_update",
    "update_project",
]

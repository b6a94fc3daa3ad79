"""Provider for the Purpur downloads API."""

from __future__ import annotations

import logging
from typing import BinaryIO

from services.server_update import http
from services.server_update.checksum import ChecksumCapability, FileDigestChecksum
from services.server_update.constants import PURPUR_API_URL
from services.server_update.hashing import normalise_digest
from services.server_update.models import UpdateError, VersionQuery
from services.server_update.versioning import latest_version


_LOGGER = logging.getLogger(__name__)


class PurpurProvider:
    def __init__(self, query: VersionQuery, *, api_url: str = PURPUR_API_URL) -> None:
        self._debug = query.diagnostics
        self._api_url = api_url.rstrip("/")
        self.version = self._resolve_version() if query.is_latest else query.version
        self.build = self._resolve_build()
        self.md5 = self._resolve_md5()

    @property
    def checksum(self) -> ChecksumCapability | None:
        if not self.md5:
            return None
        return FileDigestChecksum(self.md5, "md5")

    @property
    def download_url(self) -> str:
        return f"{self._api_url}/{self.version}/{self.build}/download"

    def open_artifact(self) -> BinaryIO | None:
        url = self.download_url
        self._debug(f"Downloading {url}")
        try:
            return http.open_url(url)
        except OSError as exc:
            self._debug(f"Download failed: {exc}")
            _LOGGER.warning("Failed to open %s: %s", url, exc)
            return None

    def _resolve_version(self) -> str:
        self._debug(f"Getting latest version from {self._api_url}")
        payload = http.request_json(self._api_url)
        versions = payload.get("versions") if isinstance(payload, dict) else None
        version = latest_version(versions or [])
        if version is None:
            raise UpdateError("Purpur API listed no versions")
        self._debug(f"Latest version: {version}")
        return version

    def _resolve_build(self) -> str:
        version_url = f"{self._api_url}/{self.version}"
        self._debug(f"Getting latest build from {version_url}")
        payload = http.request_json(version_url)
        builds = payload.get("builds") if isinstance(payload, dict) else None
        latest = builds.get("latest") if isinstance(builds, dict) else None
        if latest is None or isinstance(latest, bool) or not str(latest).strip():
            raise UpdateError(f"Purpur API listed no builds for {self.version}")
        build = str(latest).strip()
        self._debug(f"Latest build: {build}")
        return build

    def _resolve_md5(self) -> str:
        build_url = f"{self._api_url}/{self.version}/{self.build}"
        try:
            payload = http.request_json(build_url)
        except UpdateError as exc:
            # Without a digest every run downloads; the build itself is known.
            _LOGGER.warning("Purpur build details unavailable: %s", exc)
            return ""
        return normalise_digest(payload.get("md5") if isinstance(payload, dict) else None)


__all__ = ["PurpurProvider"]

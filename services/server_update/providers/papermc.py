"""Providers for projects published through the PaperMC downloads API."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

from services.server_update import http
from services.server_update.checksum import ChecksumCapability, FileDigestChecksum
from services.server_update.constants import PAPER_API_URL
from services.server_update.hashing import normalise_digest
from services.server_update.models import UpdateError, VersionQuery
from services.server_update.versioning import latest_version


_LOGGER = logging.getLogger(__name__)


class PaperProvider:
    """Download the newest build of a PaperMC project (paper, velocity, ...)."""

    def __init__(self, query: VersionQuery, project: str, *, api_url: str = PAPER_API_URL) -> None:
        self._debug = query.diagnostics
        self.project = project
        self._project_url = f"{api_url.rstrip('/')}/{project}"
        self.version = self._resolve_version() if query.is_latest else query.version
        build = self._resolve_build()
        self.build = str(build["build"])
        self.file_name, self.sha256 = _extract_application(build)

    @property
    def checksum(self) -> ChecksumCapability | None:
        if not self.sha256:
            return None
        return FileDigestChecksum(self.sha256, "sha256")

    @property
    def download_url(self) -> str:
        return (
            f"{self._project_url}/versions/{self.version}/builds/{self.build}"
            f"/downloads/{self.file_name}"
        )

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
        self._debug(f"Getting latest version from {self._project_url}")
        payload = http.request_json(self._project_url)
        versions = payload.get("versions") if isinstance(payload, dict) else None
        version = latest_version(versions or [])
        if version is None:
            raise UpdateError(f"No versions listed for {self.project}")
        self._debug(f"Latest version: {version}")
        return version

    def _resolve_build(self) -> dict[str, Any]:
        builds_url = f"{self._project_url}/versions/{self.version}/builds"
        self._debug(f"Getting latest build from {builds_url}")
        payload = http.request_json(builds_url)
        builds = payload.get("builds") if isinstance(payload, dict) else None
        if not isinstance(builds, list) or not builds or not isinstance(builds[-1], dict):
            raise UpdateError(f"No builds listed for {self.project} {self.version}")
        build = builds[-1]
        if "build" not in build:
            raise UpdateError(f"Build record for {self.project} {self.version} has no number")
        self._debug(f"Latest build: {build['build']}")
        return build


def _extract_application(build: dict[str, Any]) -> tuple[str, str]:
    downloads = build.get("downloads")
    application = downloads.get("application") if isinstance(downloads, dict) else None
    if not isinstance(application, dict):
        raise UpdateError(f"Build {build.get('build')} has no application download")
    name = application.get("name")
    if not isinstance(name, str) or not name.strip():
        raise UpdateError(f"Build {build.get('build')} has no application file name")
    return name.strip(), normalise_digest(application.get("sha256"))


__all__ = ["PaperProvider"]

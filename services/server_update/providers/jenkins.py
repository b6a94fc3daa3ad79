"""Providers backed by a Jenkins continuous integration server."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import BinaryIO, Sequence
from urllib.parse import quote

from services.server_update import http
from services.server_update.checksum import ChecksumCapability, StoredTokenChecksum
from services.server_update.constants import (
    BUNGEECORD_JENKINS_URL,
    CHECKSUM_SEPARATOR,
    JOB_SEPARATOR,
    PUFFERFISH_JENKINS_URL,
)
from services.server_update.models import ArtifactLocator, UpdateError, VersionQuery
from shared.result import Result


_LOGGER = logging.getLogger(__name__)


class JenkinsProvider(ABC):
    """Resolve the last successful build of a job and download one artifact.

    Subclasses describe the job through :attr:`jenkins_url`,
    :attr:`default_version`, :attr:`artifact_pattern` and :meth:`job`. The
    version and build number are resolved once, when the provider is built;
    failing to find a build raises :class:`UpdateError` because nothing can be
    downloaded without one.
    """

    jenkins_url: str = ""
    default_version: str = ""
    artifact_pattern: re.Pattern[str] = re.compile(r".+\.jar")

    def __init__(self, query: VersionQuery) -> None:
        self._debug = query.diagnostics
        base = self.jenkins_url
        self._base_url = base if base.endswith("/") else base + "/"
        self.version = self.default_version if query.is_latest else query.version
        self.build = self._resolve_build()
        self._artifact: ArtifactLocator | None = None

    @abstractmethod
    def job(self, version: str) -> Sequence[str]:
        """Return the job path segments for ``version``."""

    @property
    def job_url(self) -> str:
        segments = "".join(f"job/{quote(segment, safe='')}/" for segment in self.job(self.version))
        return self._base_url + segments

    @property
    def checksum(self) -> ChecksumCapability | None:
        return StoredTokenChecksum(self.checksum_token)

    def checksum_token(self) -> str:
        job = JOB_SEPARATOR.join(self.job(self.version))
        return CHECKSUM_SEPARATOR.join((self.version, self.build, job, self._base_url))

    def resolve_artifact(self) -> ArtifactLocator:
        """Return the first artifact of the build whose name matches."""

        if self._artifact is None:
            result = self._lookup_artifact()
            if result.is_err():
                self._debug(f"Artifact lookup failed: {result.error}")
                _LOGGER.warning("Artifact lookup for %s failed: %s", self.job_url, result.error)
            self._artifact = result.unwrap_or(ArtifactLocator.invalid())
        return self._artifact

    def artifact_url(self) -> str:
        artifact = self.resolve_artifact()
        url = f"{self.job_url}{self.build}/artifact/{artifact.relative_path}"
        self._debug(f"Artifact URL: {url}")
        return url

    def open_artifact(self) -> BinaryIO | None:
        url = self.artifact_url()
        self._debug(f"Downloading {url}")
        try:
            return http.open_url(url)
        except OSError as exc:
            self._debug(f"Download failed: {exc}")
            _LOGGER.warning("Failed to open artifact stream %s: %s", url, exc)
            return None

    def _resolve_build(self) -> str:
        tree_url = f"{self.job_url}api/json?tree=lastSuccessfulBuild[number]"
        self._debug(f"Getting latest build from {tree_url}")
        payload = http.request_json(tree_url)
        try:
            number = payload["lastSuccessfulBuild"]["number"]
        except (KeyError, TypeError) as exc:
            raise UpdateError(f"No successful build listed at {tree_url}") from exc
        if isinstance(number, bool) or not isinstance(number, int):
            raise UpdateError(f"Unexpected build number {number!r} at {tree_url}")
        build = str(number)
        self._debug(f"Latest build: {build}")
        return build

    def _lookup_artifact(self) -> Result[ArtifactLocator, str]:
        listing_url = f"{self.job_url}{self.build}/api/json?tree=artifacts[fileName,relativePath]"
        self._debug(f"Getting artifact from {listing_url}")
        try:
            payload = http.request_json(listing_url)
        except UpdateError as exc:
            return Result.err(str(exc))

        artifacts = payload.get("artifacts") if isinstance(payload, dict) else None
        if not isinstance(artifacts, list):
            return Result.err(f"No artifact list at {listing_url}")

        for entry in artifacts:
            if not isinstance(entry, dict):
                continue
            file_name = entry.get("fileName")
            relative_path = entry.get("relativePath")
            if not isinstance(file_name, str) or not isinstance(relative_path, str):
                continue
            if self.artifact_pattern.fullmatch(file_name):
                self._debug(f"Matched artifact {file_name}")
                return Result.ok(ArtifactLocator(file_name=file_name, relative_path=relative_path))
        return Result.err(f"No artifact matching {self.artifact_pattern.pattern} in build {self.build}")


class BungeeCordProvider(JenkinsProvider):
    jenkins_url = BUNGEECORD_JENKINS_URL
    default_version = "latest"
    artifact_pattern = re.compile(r"BungeeCord\.jar")

    def job(self, version: str) -> Sequence[str]:
        return ("BungeeCord",)


class PufferfishProvider(JenkinsProvider):
    jenkins_url = PUFFERFISH_JENKINS_URL
    default_version = "1.20"
    artifact_pattern = re.compile(r"pufferfish-paperclip-.*\.jar")

    def job(self, version: str) -> Sequence[str]:
        return (f"Pufferfish-{version}",)


__all__ = ["BungeeCordProvider", "JenkinsProvider", "PufferfishProvider"]

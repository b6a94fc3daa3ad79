"""Version reported by ``server-updater --app-version``."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata, resources

DISTRIBUTION_NAME = "server-updater"
_UNKNOWN_VERSION = "0.0.0"


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return the installed distribution's version.

    A source tree that was never installed reads the bundled ``VERSION`` file,
    the same file ``pyproject.toml`` takes its version from.
    """

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        pass
    try:
        text = resources.files(__package__).joinpath("VERSION").read_text(encoding="utf-8")
    except FileNotFoundError:
        return _UNKNOWN_VERSION
    return text.strip() or _UNKNOWN_VERSION


__all__ = ["DISTRIBUTION_NAME", "get_app_version"]

"""Hashing helpers for comparing installed files with upstream digests."""

from __future__ import annotations

import hashlib
from pathlib import Path

from services.server_update.models import UpdateError


def calculate_digest(path: Path, algorithm: str = "sha256") -> str:
    try:
        digest = hashlib.new(algorithm)
    except ValueError as exc:
        raise UpdateError(f"Unsupported digest algorithm: {algorithm}") from exc
    with path.open("rb") as source:
        for chunk in iter(lambda: source.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def normalise_digest(value: object) -> str:
    """Return ``value`` as a lower-case hex string, or ``""`` when unusable."""

    if not isinstance(value, str):
        return ""
    return value.strip().lower()

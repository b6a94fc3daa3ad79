"""Helpers for ordering the version labels published by upstream APIs."""

from __future__ import annotations

from typing import Iterable

from packaging.version import InvalidVersion, Version


__all__ = ["compare_versions", "latest_version"]


def compare_versions(current_version: str, candidate: str) -> int:
    """Compare ``candidate`` against ``current_version``.

    Returns ``1`` when ``candidate`` is newer, ``-1`` when it is older and ``0``
    when the versions are equivalent. Labels that ``packaging`` rejects (for
    example ``"23w45a"`` snapshots) are compared token by token.
    """

    if candidate == current_version:
        return 0

    try:
        candidate_version = Version(candidate)
        current_version_parsed = Version(current_version)
    except InvalidVersion:
        return _fallback_compare(current_version, candidate)

    if candidate_version == current_version_parsed:
        return 0
    if candidate_version > current_version_parsed:
        return 1
    return -1


def latest_version(candidates: Iterable[object]) -> str | None:
    """Return the newest label in ``candidates``.

    Ties keep the entry listed last, so a list already sorted oldest-first
    resolves to its final element.
    """

    best: str | None = None
    for raw in candidates:
        label = str(raw).strip()
        if not label:
            continue
        if best is None or compare_versions(best, label) >= 0:
            best = label
    return best


def _fallback_compare(current_version: str, candidate: str) -> int:
    def tokenize(version: str) -> list[tuple[int, object]]:
        tokens: list[tuple[int, object]] = []
        for raw in version.replace("-", ".").replace("+", ".").split("."):
            if not raw:
                continue
            if raw.isdigit():
                tokens.append((2, int(raw)))
            else:
                tokens.append((0, raw.lower()))
        return tokens

    current_tokens = tokenize(current_version)
    candidate_tokens = tokenize(candidate)
    length = max(len(current_tokens), len(candidate_tokens))
    for index in range(length):
        current_token = current_tokens[index] if index < len(current_tokens) else (1, "")
        candidate_token = candidate_tokens[index] if index < len(candidate_tokens) else (1, "")
        if candidate_token != current_token:
            return 1 if candidate_token > current_token else -1
    return 0

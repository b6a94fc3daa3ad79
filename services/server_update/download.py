"""Write downloaded artifacts over the target file."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO


_LOGGER = logging.getLogger(__name__)

__all__ = ["can_create", "ensure_file", "replace_with_stream"]


def can_create(path: Path) -> bool:
    """Tell whether :func:`ensure_file` could create ``path``, without writing.

    The nearest existing ancestor must be a writable directory.
    """

    if path.exists():
        return path.is_file()
    ancestor = path.parent
    while not ancestor.exists():
        if ancestor.parent == ancestor:
            return False
        ancestor = ancestor.parent
    if not ancestor.is_dir():
        _LOGGER.warning("Cannot create %s: %s is not a directory", path, ancestor)
        return False
    return os.access(ancestor, os.W_OK | os.X_OK)


def ensure_file(path: Path) -> bool:
    """Create an empty file at ``path`` (and its parents) when missing."""

    if path.exists():
        return True
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
    except OSError as exc:
        _LOGGER.warning("Unable to create %s: %s", path, exc)
        return False
    return True


def replace_with_stream(stream: BinaryIO, target: Path) -> int:
    """Copy ``stream`` into ``target`` atomically and return the byte count.

    The bytes land in a temporary file next to ``target`` first, which is then
    renamed over it. On failure the temporary file is removed and ``target`` is
    left untouched; the :class:`OSError` propagates.
    """

    target.parent.mkdir(parents=True, exist_ok=True)
    handle, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=target.parent)
    temp_path = Path(temp_name)
    try:
        with os.fdopen(handle, "wb") as destination:
            shutil.copyfileobj(stream, destination)
            destination.flush()
            os.fsync(destination.fileno())
        size = temp_path.stat().st_size
        os.replace(temp_path, target)
    except BaseException:
        try:
            temp_path.unlink()
        except FileNotFoundError:
            pass
        raise
    _LOGGER.debug("Wrote %d bytes to %s", size, target)
    return size

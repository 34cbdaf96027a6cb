# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Filesystem-backed descriptor cache keyed by source fingerprint.

One blob is stored per class as ``<directory>/<fingerprint>.json``. Since
the fingerprint is a hash of the class's defining source, any edit to that
source produces a new key and the stale entry is simply never read again.
No locking is performed: concurrent writers of the same key write the same
content.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from declmeta.errors import CacheConfigError, CacheKeyError, CacheReadError, CacheScanError, CacheWriteError
from declmeta.logging import get_logger
from declmeta.reflection import source_fingerprint

# ###############
# Public Interface
# ###############

CACHE_SUFFIX = ".json"

logger = get_logger(__name__)


class DescriptorCache:
    """A blob store rooted at an existing directory.

    Args:
        directory: Directory holding the cache blobs. Must already exist.
        fingerprint: Callable computing the cache key of a class.

    Raises:
        CacheConfigError: If *directory* does not exist or is not a directory.
    """

    def __init__(self, directory: Path | str, fingerprint: Callable[[type], str] = source_fingerprint) -> None:
        path = Path(directory)
        try:
            resolved = path.resolve(strict=True)
        except (OSError, RuntimeError):
            raise CacheConfigError(f"Path {path} is not valid") from None
        if not resolved.is_dir():
            raise CacheConfigError(f"Path {resolved} is not a directory")
        self._directory = resolved
        self._fingerprint = fingerprint

    @property
    def directory(self) -> Path:
        return self._directory

    def key(self, cls: type) -> str:
        """Return the cache key of *cls*.

        Raises:
            CacheKeyError: If the class has no resolvable source fingerprint.
        """
        return self._fingerprint(cls)

    def file_name(self, cls: type) -> Path:
        """Return the full path of the blob for *cls*."""
        return self._directory / (self.key(cls) + CACHE_SUFFIX)

    def exists(self, cls: type) -> bool:
        """Return True if a blob exists for *cls*; lookup failures count as a miss."""
        try:
            return self.file_name(cls).is_file()
        except (OSError, CacheKeyError) as exc:
            logger.debug("cache_exists_failed", directory=str(self._directory), type=cls.__qualname__, error=str(exc))
            return False

    def get(self, cls: type) -> str | None:
        """Return the blob stored for *cls*, or None when there is none.

        Raises:
            CacheReadError: If the blob exists but cannot be read.
        """
        path = self.file_name(cls)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheReadError(f"Error reading cache file '{path}': {exc}") from exc

    def put(self, cls: type, blob: str) -> None:
        """Store *blob* for *cls*.

        Raises:
            CacheWriteError: If the blob cannot be written.
        """
        path = self.file_name(cls)
        try:
            path.write_text(blob, encoding="utf-8")
        except OSError as exc:
            raise CacheWriteError(f"Error writing cache file '{path}': {exc}") from exc
        logger.debug("cache_put", directory=str(self._directory), type=cls.__qualname__, key=path.stem)

    def remove(self, cls: type) -> None:
        """Remove the blob stored for *cls*, if any."""
        path = self.file_name(cls)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheWriteError(f"Error removing cache file '{path}': {exc}") from exc

    def clear(self) -> None:
        """Remove every blob from the cache directory.

        Raises:
            CacheScanError: If the directory cannot be enumerated.
            CacheWriteError: If a blob cannot be removed.
        """
        try:
            entries = list(self._directory.iterdir())
        except OSError as exc:
            raise CacheScanError(f"Error scanning cache directory '{self._directory}': {exc}") from exc
        removed = 0
        for entry in entries:
            if entry.suffix != CACHE_SUFFIX or not entry.is_file():
                continue
            try:
                entry.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise CacheWriteError(f"Error removing cache file '{entry}': {exc}") from exc
            removed += 1
        logger.debug("cache_cleared", directory=str(self._directory), count=removed)

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration object and YAML loader for the descriptor caches.

A :class:`Config` is built once at startup and passed to every parse entry
point. When no config is passed, :func:`get_config` supplies a process-wide
default, created on first use from the file named by ``DECLMETA_CONFIG``.

Example configuration file::

    cache-directory: .declmeta-cache
    namespaces: [table, filter, form]
    create-directories: true
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

import yaml

from declmeta.cache import DescriptorCache
from declmeta.errors import CacheConfigError, ConfigFileError

# ###############
# Public Interface
# ###############

CONFIG_ENV_VAR = "DECLMETA_CONFIG"


class Namespace(Enum):
    """The independent metadata namespaces, each with its own cache directory."""

    TABLE = "table"
    FILTER = "filter"
    FORM = "form"


@dataclass
class Config:
    """Caches used by the parsers.

    Attributes:
        table_cache: Cache for parsed columns, or None to disable caching.
        filter_cache: Cache for parsed filters, or None to disable caching.
        form_cache: Cache for serialized forms, or None to disable caching.
    """

    table_cache: DescriptorCache | None = None
    filter_cache: DescriptorCache | None = None
    form_cache: DescriptorCache | None = None

    @classmethod
    def from_directory(
        cls,
        root: Path | str,
        *,
        namespaces: list[Namespace] | None = None,
        create: bool = True,
    ) -> Config:
        """Build a config with one cache per namespace under *root*.

        Args:
            root: Directory holding one sub-directory per namespace.
            namespaces: Namespaces to enable; all of them by default.
            create: Create missing namespace directories.

        Raises:
            CacheConfigError: If a cache directory is missing or cannot be created.
        """
        enabled = list(Namespace) if namespaces is None else namespaces
        caches: dict[Namespace, DescriptorCache] = {}
        for namespace in enabled:
            directory = Path(root) / namespace.value
            if create:
                try:
                    directory.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    raise CacheConfigError(f"Cannot create cache directory '{directory}': {exc}") from exc
            caches[namespace] = DescriptorCache(directory)
        return cls(
            table_cache=caches.get(Namespace.TABLE),
            filter_cache=caches.get(Namespace.FILTER),
            form_cache=caches.get(Namespace.FORM),
        )

    def caches(self) -> list[DescriptorCache]:
        """Return the configured caches."""
        return [c for c in (self.table_cache, self.filter_cache, self.form_cache) if c is not None]

    def clear_caches(self) -> None:
        """Clear every configured cache."""
        for cache in self.caches():
            cache.clear()


def load_config(path: Path) -> Config:
    """Load a configuration file and build its caches.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A Config whose cache directories are resolved relative to the file.

    Raises:
        ConfigFileError: If the file cannot be read or the configuration is invalid.
        CacheConfigError: If a cache directory is unusable.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigFileError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigFileError(f"Cannot read config file: {exc}") from exc

    return _parse_config(text, base_dir=path.parent, source_label=str(path))


@lru_cache
def get_config() -> Config:
    """Provide the process-wide default config, created on first use."""
    path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return Config()
    return load_config(Path(path))


# ################
# Implementation
# ################


def _parse_config(text: str, base_dir: Path, source_label: str = "<string>") -> Config:
    """Parse configuration YAML text into a Config."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigFileError(f"{source_label}: config must be a YAML mapping")

    if "cache-directory" not in data:
        raise ConfigFileError(f"{source_label}: missing required field 'cache-directory'")
    cache_directory = data["cache-directory"]
    if not isinstance(cache_directory, str) or not cache_directory.strip():
        raise ConfigFileError(f"{source_label}: 'cache-directory' must be a non-empty string")

    namespaces = _parse_namespaces(data.get("namespaces"), source_label)

    create = data.get("create-directories", True)
    if not isinstance(create, bool):
        raise ConfigFileError(f"{source_label}: 'create-directories' must be a boolean")

    root = Path(cache_directory)
    if not root.is_absolute():
        root = base_dir / root
    return Config.from_directory(root, namespaces=namespaces, create=create)


def _parse_namespaces(raw: object, source_label: str) -> list[Namespace] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise ConfigFileError(f"{source_label}: 'namespaces' must be a list")
    namespaces: list[Namespace] = []
    for index, entry in enumerate(raw):
        try:
            namespaces.append(Namespace(entry))
        except ValueError:
            valid = ", ".join(n.value for n in Namespace)
            raise ConfigFileError(
                f"{source_label}: namespaces[{index}] must be one of {valid}, got {entry!r}"
            ) from None
    return namespaces

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures: isolated cache directories and a clean default config."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from declmeta.config import CONFIG_ENV_VAR, Config, get_config


@pytest.fixture(autouse=True)
def _clean_default_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the process-wide default config cache-less and unshared between tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """A config with all three caches under a temporary directory."""
    return Config.from_directory(tmp_path / "cache")


@pytest.fixture
def no_cache() -> Config:
    """A config with caching disabled."""
    return Config()

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the configuration object and its YAML loader."""

from pathlib import Path

import pytest
from sample_models import Product

from declmeta.config import CONFIG_ENV_VAR, Config, Namespace, get_config, load_config
from declmeta.errors import CacheConfigError, ConfigFileError

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a config file and return its path."""
    config_file = tmp_path / "declmeta.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Config Object
# ###############


def test_default_config_has_no_caches() -> None:
    config = Config()

    assert config.table_cache is None
    assert config.filter_cache is None
    assert config.form_cache is None
    assert config.caches() == []


def test_from_directory_creates_namespace_directories(tmp_path: Path) -> None:
    config = Config.from_directory(tmp_path / "cache")

    assert config.table_cache is not None and config.filter_cache is not None and config.form_cache is not None
    assert config.table_cache.directory == (tmp_path / "cache" / "table").resolve()
    assert config.filter_cache.directory == (tmp_path / "cache" / "filter").resolve()
    assert config.form_cache.directory == (tmp_path / "cache" / "form").resolve()


def test_from_directory_with_selected_namespaces(tmp_path: Path) -> None:
    config = Config.from_directory(tmp_path, namespaces=[Namespace.FORM])

    assert config.table_cache is None
    assert config.filter_cache is None
    assert config.form_cache is not None
    assert not (tmp_path / "table").exists()


def test_from_directory_without_create(tmp_path: Path) -> None:
    with pytest.raises(CacheConfigError):
        Config.from_directory(tmp_path, create=False)


def test_clear_caches(tmp_path: Path) -> None:
    config = Config.from_directory(tmp_path)
    for cache in config.caches():
        cache.put(Product, "x")

    config.clear_caches()

    assert all(not cache.exists(Product) for cache in config.caches())


# ###############
# Loading
# ###############


def test_minimal_config(tmp_path: Path) -> None:
    """A relative cache directory is resolved against the config file."""
    config = load_config(_write_config(tmp_path, "cache-directory: .cache\n"))

    assert config.table_cache is not None
    assert config.table_cache.directory == (tmp_path / ".cache" / "table").resolve()
    assert len(config.caches()) == 3


def test_config_with_namespaces(tmp_path: Path) -> None:
    content = """\
cache-directory: .cache
namespaces: [table, filter]
"""
    config = load_config(_write_config(tmp_path, content))

    assert config.table_cache is not None
    assert config.filter_cache is not None
    assert config.form_cache is None


def test_absolute_cache_directory(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    config = load_config(_write_config(tmp_path, f"cache-directory: {target}\n"))

    assert config.form_cache is not None
    assert config.form_cache.directory == (target / "form").resolve()


def test_create_directories_false(tmp_path: Path) -> None:
    content = "cache-directory: .cache\ncreate-directories: false\n"

    with pytest.raises(CacheConfigError):
        load_config(_write_config(tmp_path, content))


@pytest.mark.parametrize(
    "content, message",
    [
        ("cache-directory: [unclosed\n", "Invalid YAML"),
        ("- a\n- b\n", "must be a YAML mapping"),
        ("namespaces: [table]\n", "missing required field 'cache-directory'"),
        ("cache-directory: ''\n", "non-empty string"),
        ("cache-directory: .c\nnamespaces: table\n", "'namespaces' must be a list"),
        ("cache-directory: .c\nnamespaces: [table, views]\n", "namespaces\\[1\\]"),
        ("cache-directory: .c\ncreate-directories: maybe\n", "'create-directories' must be a boolean"),
    ],
)
def test_invalid_config(tmp_path: Path, content: str, message: str) -> None:
    with pytest.raises(ConfigFileError, match=message):
        load_config(_write_config(tmp_path, content))


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigFileError, match="not found"):
        load_config(tmp_path / "missing.yaml")


# ###############
# Default Config
# ###############


def test_get_config_without_environment() -> None:
    config = get_config()

    assert config.caches() == []
    assert get_config() is config


def test_get_config_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = _write_config(tmp_path, "cache-directory: .cache\nnamespaces: [form]\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
    get_config.cache_clear()

    config = get_config()

    assert config.form_cache is not None
    assert config.table_cache is None

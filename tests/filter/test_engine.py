# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the built-in filter engine stages."""

import pytest

from declmeta.errors import UnknownFilterIdError
from declmeta.filter import BuiltinFilterEngine, FilterFlag, FilterId, default_engine
from declmeta.filter.engine import split_options

NULL = FilterFlag.NULL_ON_FAILURE.value


@pytest.fixture
def engine() -> BuiltinFilterEngine:
    return BuiltinFilterEngine()


# ###############
# Validation Stages
# ###############


@pytest.mark.parametrize(
    "value, expected",
    [("42", 42), (" -7 ", -7), (42, 42), ("4.2", None), ("042", None), ("", None)],
)
def test_validate_int(engine: BuiltinFilterEngine, value: object, expected: object) -> None:
    assert engine.apply_stage(value, FilterId.VALIDATE_INT, NULL) == expected


def test_rejection_without_null_on_failure_returns_false(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("abc", FilterId.VALIDATE_INT, 0) is False


@pytest.mark.parametrize(
    "value, expected",
    [("yes", True), ("On", True), ("1", True), ("off", False), ("0", False), ("maybe", None)],
)
def test_validate_bool(engine: BuiltinFilterEngine, value: str, expected: bool | None) -> None:
    assert engine.apply_stage(value, FilterId.VALIDATE_BOOL, NULL) is expected


def test_validate_float(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("1.5e3", FilterId.VALIDATE_FLOAT, NULL) == 1500.0
    assert engine.apply_stage("1,000.5", FilterId.VALIDATE_FLOAT, NULL) is None
    assert engine.apply_stage("1,000.5", FilterId.VALIDATE_FLOAT, NULL | FilterFlag.ALLOW_THOUSAND) == 1000.5


def test_validate_float_range(engine: BuiltinFilterEngine) -> None:
    options = {"flags": NULL, "options": {"min_range": 0, "max_range": 1}}

    assert engine.apply_stage("0.5", FilterId.VALIDATE_FLOAT, options) == 0.5
    assert engine.apply_stage("1.5", FilterId.VALIDATE_FLOAT, options) is None


def test_validate_regexp(engine: BuiltinFilterEngine) -> None:
    options = {"flags": NULL, "options": {"regexp": r"^\d+$"}}

    assert engine.apply_stage("123", FilterId.VALIDATE_REGEXP, options) == "123"
    assert engine.apply_stage("12a", FilterId.VALIDATE_REGEXP, options) is None


def test_validate_url(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("https://example.com/a?b=1", FilterId.VALIDATE_URL, NULL) == "https://example.com/a?b=1"
    assert engine.apply_stage("example.com", FilterId.VALIDATE_URL, NULL) is None
    assert engine.apply_stage("http://exa mple.com", FilterId.VALIDATE_URL, NULL) is None


def test_validate_email(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("a.b-c@example.org", FilterId.VALIDATE_EMAIL, NULL) == "a.b-c@example.org"
    assert engine.apply_stage("a@b", FilterId.VALIDATE_EMAIL, NULL) is None


# ###############
# Sanitizing Stages
# ###############


def test_unsafe_raw_returns_text(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage(5, FilterId.UNSAFE_RAW, NULL) == "5"


def test_sanitize_special_chars(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("<a href='x'>", FilterId.SANITIZE_SPECIAL_CHARS, NULL) == "&#60;a href=&#39;x&#39;&#62;"


def test_sanitize_full_special_chars(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage('<b>"x"</b>', FilterId.SANITIZE_FULL_SPECIAL_CHARS, NULL) == (
        "&lt;b&gt;&quot;x&quot;&lt;/b&gt;"
    )


def test_sanitize_email(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("(a b)@c.d", FilterId.SANITIZE_EMAIL, NULL) == "ab@c.d"


def test_sanitize_url(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("http://ex ample.com/é", FilterId.SANITIZE_URL, NULL) == "http://example.com/"


def test_sanitize_numbers(engine: BuiltinFilterEngine) -> None:
    assert engine.apply_stage("a1-2b3", FilterId.SANITIZE_NUMBER_INT, NULL) == "1-23"
    assert engine.apply_stage("1,234.5e2", FilterId.SANITIZE_NUMBER_FLOAT, NULL) == "123452"
    flags = NULL | FilterFlag.ALLOW_FRACTION | FilterFlag.ALLOW_THOUSAND | FilterFlag.ALLOW_SCIENTIFIC
    assert engine.apply_stage("1,234.5e2", FilterId.SANITIZE_NUMBER_FLOAT, flags) == "1,234.5e2"


# ###############
# Registry
# ###############


def test_unknown_filter_id(engine: BuiltinFilterEngine) -> None:
    with pytest.raises(UnknownFilterIdError):
        engine.apply_stage("x", 1, NULL)


def test_register(engine: BuiltinFilterEngine) -> None:
    assert 9000 not in engine.known_filter_ids()

    engine.register(9000, lambda text, flags, options: text[::-1])

    assert 9000 in engine.known_filter_ids()
    assert engine.apply_stage("abc", 9000, NULL) == "cba"
    assert 9000 not in BuiltinFilterEngine().known_filter_ids()


def test_known_filter_ids_cover_builtins(engine: BuiltinFilterEngine) -> None:
    assert {int(f) for f in FilterId} <= engine.known_filter_ids()


def test_default_engine_is_shared() -> None:
    assert default_engine() is default_engine()


def test_split_options() -> None:
    assert split_options(7) == (7, {})
    assert split_options({"flags": 3, "options": {"default": 1}}) == (3, {"default": 1})
    assert split_options({}) == (0, {})

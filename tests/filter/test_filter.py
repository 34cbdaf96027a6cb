# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Filter marker and filter parsing."""

import pytest
from sample_models import DuplicateFilterName, Signup, UnknownFilterId, UnnamedClassFilter

from declmeta.config import Config
from declmeta.errors import (
    BlankNameError,
    DuplicateNameError,
    FilterFailedError,
    UnknownFilterIdError,
    ValidationCode,
)
from declmeta.filter import BuiltinFilterEngine, Filter, FilterFlag, FilterId, parse_filters

NULL_ON_FAILURE = FilterFlag.NULL_ON_FAILURE.value

# ###############
# Marker
# ###############


def test_default_instance() -> None:
    """A new filter trims, has no name and always carries NULL_ON_FAILURE."""
    f = Filter(filter_ids=[FilterId.DEFAULT])

    assert f.filter_ids == [FilterId.DEFAULT]
    assert f.options == NULL_ON_FAILURE
    assert f.trim is True
    assert f.name is None


def test_null_on_failure_is_merged_into_mapping_options() -> None:
    f = Filter(filter_ids=[FilterId.DEFAULT], options={}, trim=False, name="prop")

    assert f.options == {"flags": NULL_ON_FAILURE}
    assert f.name == "prop"
    assert f.trim is False


def test_null_on_failure_is_merged_on_assignment() -> None:
    """Assigned options keep their own flags and gain NULL_ON_FAILURE."""
    f = Filter(filter_ids=[FilterId.DEFAULT])

    f.options = FilterFlag.ALLOW_FRACTION
    assert isinstance(f.options, int)
    assert f.options & FilterFlag.ALLOW_FRACTION
    assert f.options & NULL_ON_FAILURE

    f.options = {"flags": FilterFlag.ALLOW_THOUSAND, "options": {"default": 4}}
    assert isinstance(f.options, dict)
    assert f.options["options"]["default"] == 4
    assert f.options["flags"] & FilterFlag.ALLOW_THOUSAND
    assert f.options["flags"] & NULL_ON_FAILURE


def test_trim() -> None:
    f = Filter(filter_ids=[FilterId.DEFAULT])
    assert f.filter("AAA ") == "AAA"

    f.trim = False
    assert f.filter("AAA ") == "AAA "


def test_none_and_booleans_pass_through() -> None:
    f = Filter(filter_ids=[FilterId.VALIDATE_EMAIL])

    assert f.filter(None) is None
    assert f.filter(True) is True
    assert f.filter(False) is False


def test_sanitize() -> None:
    f = Filter(filter_ids=[FilterId.SANITIZE_EMAIL])
    assert f.filter("rebelo\t.han-joo@koryo.kr") == "rebelo.han-joo@koryo.kr"


def test_failing_stage_raises() -> None:
    f = Filter(filter_ids=[FilterId.VALIDATE_EMAIL])

    with pytest.raises(FilterFailedError) as exc_info:
        f.filter("rebelo\t.han-joo@koryo.kr")
    assert exc_info.value.code is ValidationCode.FILTER_FAILED


def test_stages_run_in_declared_order() -> None:
    """Sanitizing first makes the following validation succeed."""
    f = Filter(filter_ids=[FilterId.SANITIZE_EMAIL, FilterId.VALIDATE_EMAIL])
    assert f.filter("rebelo\t.han-joo@koryo.kr") == "rebelo.han-joo@koryo.kr"


def test_sanitizing_is_idempotent() -> None:
    f = Filter(filter_ids=[FilterId.SANITIZE_EMAIL, FilterId.VALIDATE_EMAIL])
    once = f.filter(" rebelo\t.han-joo@koryo.kr ")
    assert f.filter(once) == once


def test_range_options() -> None:
    f = Filter(filter_ids=[FilterId.VALIDATE_INT], options={"options": {"min_range": 18}})

    assert f.filter("21") == 21
    with pytest.raises(FilterFailedError):
        f.filter("17")


def test_default_option_replaces_rejected_value() -> None:
    f = Filter(filter_ids=[FilterId.VALIDATE_INT], options={"options": {"default": 0}})
    assert f.filter("abc") == 0


def test_custom_engine_stage() -> None:
    engine = BuiltinFilterEngine()
    engine.register(9000, lambda text, flags, options: text.upper())

    f = Filter(filter_ids=[9000, FilterId.SANITIZE_SPECIAL_CHARS])
    assert f.filter(" a<b ", engine) == "A&#60;B"


# ###############
# Parsing
# ###############


def test_parse_signup(config: Config) -> None:
    """Class-level filters come first; field filters are named after their field."""
    filters = parse_filters(Signup, config=config)

    assert list(filters) == ["email", "username", "age", "score"]
    assert filters["email"].filter_ids == [FilterId.SANITIZE_EMAIL, FilterId.VALIDATE_EMAIL]
    assert filters["username"].name == "username"
    assert filters["age"].options == {"options": {"min_range": 18}, "flags": NULL_ON_FAILURE}
    assert filters["score"].filter("12.5kg") == "12.5"


def test_parse_uses_the_filter_cache(config: Config) -> None:
    filters = parse_filters(Signup, config=config)

    assert config.filter_cache is not None and config.table_cache is not None
    assert config.filter_cache.exists(Signup)
    assert not config.table_cache.exists(Signup)
    assert parse_filters(Signup, config=config) == filters


def test_parse_without_cache(no_cache: Config) -> None:
    assert list(parse_filters(Signup, config=no_cache)) == ["email", "username", "age", "score"]


def test_duplicate_name_across_scopes(no_cache: Config) -> None:
    with pytest.raises(DuplicateNameError, match="username"):
        parse_filters(DuplicateFilterName, config=no_cache)


def test_class_filter_requires_name(no_cache: Config) -> None:
    with pytest.raises(BlankNameError):
        parse_filters(UnnamedClassFilter, config=no_cache)


def test_unknown_filter_id(no_cache: Config) -> None:
    with pytest.raises(UnknownFilterIdError, match="99999"):
        parse_filters(UnknownFilterId, config=no_cache)


def test_engine_registered_ids_are_known(no_cache: Config) -> None:
    engine = BuiltinFilterEngine()
    engine.register(99999, lambda text, flags, options: text)

    filters = parse_filters(UnknownFilterId, engine=engine, config=no_cache)
    assert filters["code"].filter(" x ", engine) == "x"

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Column marker: storage constraints of a field, parsing and value validation."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any

from pydantic import model_validator

from declmeta.base import Marker
from declmeta.config import Config, get_config
from declmeta.db.types import StorageType, TypeRegistry
from declmeta.errors import (
    AboveMaximumError,
    AttributesError,
    BelowMinimumError,
    BelowMinLengthError,
    DecimalPrecisionError,
    DecimalScaleError,
    ExceedsMaxLengthError,
    ExceedsPrecisionError,
    ExceedsScaleError,
    InvalidValueTypeError,
    MaximumLengthError,
    MinimumLengthError,
    NullNotAllowedError,
    PropertyNotFoundError,
    RegexMismatchError,
)
from declmeta.logging import get_logger
from declmeta.reflection import DEFAULT_PROVIDER, MetadataProvider
from declmeta.serialization import decode_descriptors, encode_descriptors

# ###############
# Public Interface
# ###############

BLOB_KIND = "columns"

logger = get_logger(__name__)


class Column(Marker):
    """Storage constraints of one field.

    Attributes:
        name: The database column name; defaults to the field name when parsed.
        storage_type: The column storage type; inferred from the declared
            field type through a :class:`TypeRegistry` when parsed.
        max_length: Maximum string length, greater than zero.
        min_length: Minimum string length, zero or more.
        maximum: Maximum numeric value.
        minimum: Minimum numeric value.
        decimal_precision: Maximum number of digits, one or more.
        decimal_scale: Maximum number of fractional digits, zero or more.
        regex: Pattern that string values must match (``re.search``).
        is_primary_key: Whether the column is the table primary key.
        is_auto_increment: Defaults to True for primary keys.
        allow_null: Whether null is accepted; inferred from the field's
            optionality when parsed.
        property_name: The field the column was declared on.
        property_type: The declared type name of that field.
    """

    name: str | None = None
    storage_type: StorageType | None = None
    max_length: int | None = None
    min_length: int | None = None
    maximum: int | float | None = None
    minimum: int | float | None = None
    decimal_precision: int | None = None
    decimal_scale: int | None = None
    regex: str | None = None
    is_primary_key: bool = False
    is_auto_increment: bool | None = None
    allow_null: bool | None = None
    property_name: str | None = None
    property_type: str | None = None

    @model_validator(mode="after")
    def _check_definition(self) -> Column:
        if self.is_primary_key and self.is_auto_increment is None:
            self.is_auto_increment = True
        _verify_lengths(self.max_length, self.min_length)
        if self.decimal_scale is not None and self.decimal_scale < 0:
            raise DecimalScaleError("decimal scale cannot be less than zero")
        if self.decimal_precision is not None and self.decimal_precision < 1:
            raise DecimalPrecisionError("decimal precision cannot be less than one")
        return self

    def validate(self, value: Any) -> None:  # type: ignore[override]
        """Validate a value, or the value of this column's property on an instance.

        Checks run in a fixed order and the first failure is raised: value
        type, null, then length and regex for strings, or range, precision
        and scale for numbers.

        Raises:
            PropertyNotFoundError: If an instance lacks the column's property.
            ValidationFailure: The specific failure of the first failing check.
        """
        raw = self._resolve_value(value)

        if raw is not None and not isinstance(raw, _SCALAR_TYPES):
            raise InvalidValueTypeError("Value to validate must be of type str | bool | int | float | Decimal")

        if raw is None:
            if not self.allow_null:
                raise NullNotAllowedError(f"Null is not allowed for column {self.name}")
            return

        if isinstance(raw, bool):
            return

        if isinstance(raw, float) and not math.isfinite(raw) or isinstance(raw, Decimal) and not raw.is_finite():
            raise InvalidValueTypeError(f"Column {self.name} cannot validate non-finite number {raw}")

        if isinstance(raw, str):
            self._validate_string(raw)
            return

        self._validate_number(raw)

    def _resolve_value(self, value: Any) -> Any:
        if value is None or isinstance(value, _SCALAR_TYPES + _CONTAINER_TYPES):
            return value
        if self.property_name is None:
            raise PropertyNotFoundError(
                f"Column {self.name} has no property name to read from {type(value).__qualname__}"
            )
        raw = getattr(value, self.property_name, _MISSING)
        if raw is _MISSING:
            raise PropertyNotFoundError(
                f"Property {self.property_name} not exist in class {type(value).__qualname__}"
            )
        return raw

    def _validate_string(self, raw: str) -> None:
        if self.max_length is not None and len(raw) > self.max_length:
            raise ExceedsMaxLengthError(
                f"Column {self.name} maximum length is {self.max_length} but has {len(raw)}"
            )
        if self.min_length is not None and len(raw) < self.min_length:
            raise BelowMinLengthError(
                f"Column {self.name} minimum length is {self.min_length} but has {len(raw)}"
            )
        if self.regex is not None and re.search(self.regex, raw) is None:
            raise RegexMismatchError(f"Column {self.name} fail regexp")

    def _validate_number(self, raw: int | float | Decimal) -> None:
        if self.maximum is not None and raw > self.maximum:
            raise AboveMaximumError(f"Column {self.name} maximum is {self.maximum} but has {raw}")
        if self.minimum is not None and raw < self.minimum:
            raise BelowMinimumError(f"Column {self.name} minimum is {self.minimum} but has {raw}")

        whole, fraction = _digits(raw)
        if self.decimal_precision is not None and len(whole) + len(fraction) > self.decimal_precision:
            raise ExceedsPrecisionError(f"Column {self.name} exceeds maximum decimal precision")
        if self.decimal_scale is not None and fraction and len(fraction) > self.decimal_scale:
            raise ExceedsScaleError(f"Column {self.name} exceeds maximum decimal scale")


def parse_columns(
    cls: type,
    registry: TypeRegistry | None = None,
    *,
    config: Config | None = None,
    provider: MetadataProvider | None = None,
) -> dict[str, Column]:
    """Parse the Column markers declared on the fields of *cls*.

    When the table cache holds an entry for *cls* it is decoded and
    returned without walking the fields. Otherwise each field's first
    Column marker is completed from the field (name, property name, and,
    when unset, nullability and storage type) and the result is cached.

    Args:
        cls: The annotated class.
        registry: Maps declared field types to storage types; the base
            :class:`TypeRegistry` when omitted.
        config: Caches to use; :func:`~declmeta.config.get_config` when omitted.
        provider: Reflection capability; annotation-based when omitted.

    Returns:
        A mapping from column name to :class:`Column`, in field order.

    Raises:
        AttributesError: If a cache entry exists but cannot be fetched or decoded.
    """
    config = config if config is not None else get_config()
    provider = provider if provider is not None else DEFAULT_PROVIDER
    registry = registry if registry is not None else TypeRegistry()
    cache = config.table_cache

    if cache is not None and cache.exists(cls):
        blob = cache.get(cls)
        if blob is None:
            raise AttributesError("Error fetching Columns from cache")
        logger.debug("cache_hit", namespace=BLOB_KIND, type=cls.__qualname__)
        return decode_descriptors(BLOB_KIND, blob, Column)

    columns: dict[str, Column] = {}
    for field_info in provider.fields_of(cls):
        found = field_info.markers_of(Column)
        if not found:
            continue
        column: Column = found[0]
        if column.name is None:
            column.name = field_info.name
        column.property_name = field_info.name
        columns[column.name] = column

        declared = field_info.declared_type
        if declared is None:
            continue
        column.property_type = declared.name
        if column.allow_null is None:
            column.allow_null = declared.nullable
        if column.storage_type is None:
            column.storage_type = registry.resolve(declared.name)

    logger.debug("parsed", namespace=BLOB_KIND, type=cls.__qualname__, count=len(columns))
    if cache is not None:
        cache.put(cls, encode_descriptors(BLOB_KIND, columns))
    return columns


# ################
# Implementation
# ################

_SCALAR_TYPES: tuple[type, ...] = (str, int, float, Decimal)
_CONTAINER_TYPES: tuple[type, ...] = (list, tuple, dict, set, frozenset, bytes, bytearray)
_MISSING = object()


def _verify_lengths(max_length: int | None, min_length: int | None) -> None:
    if max_length is not None and max_length <= 0:
        raise MaximumLengthError("maximum length cannot be negative or zero")
    if min_length is not None and min_length < 0:
        raise MinimumLengthError("minimum length cannot be negative")
    if max_length is not None and min_length is not None and max_length < min_length:
        raise MaximumLengthError("maximum cannot be less than minimum")


def _digits(value: int | float | Decimal) -> tuple[str, str]:
    """Split a number's plain textual form into whole and fractional digits.

    Floats are rendered through their shortest repr, so ``99.999`` yields
    ``("99", "999")`` and ``100.0`` yields ``("100", "")``.
    """
    if isinstance(value, int):
        return str(abs(value)), ""
    number = Decimal(repr(value)) if isinstance(value, float) else value
    whole, _, fraction = format(abs(number), "f").partition(".")
    if isinstance(value, float):
        fraction = fraction.rstrip("0")
    return "".join(c for c in whole if c.isdigit()), "".join(c for c in fraction if c.isdigit())

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exception taxonomy shared by the table, filter and form namespaces.

Every error raised by declmeta derives from :class:`DeclmetaError`. The
second level groups errors by kind so callers can catch broadly
(``except StructuralViolation``) or precisely (``except DuplicateIdError``).
"""

from __future__ import annotations

from enum import IntEnum

# ###############
# Public Interface
# ###############


class DeclmetaError(Exception):
    """Base class for all declmeta errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


# Kinds


class ConfigurationError(DeclmetaError):
    """Raised when the library is configured with unusable settings."""


class CacheIOError(DeclmetaError):
    """Raised when the descriptor cache cannot be read, written or scanned."""


class StructuralViolation(DeclmetaError):
    """Raised when a marker or descriptor breaks a structural invariant."""


class ValidationFailure(DeclmetaError):
    """Raised when a runtime value fails a declared constraint.

    Attributes:
        code: Machine-readable reason, see :class:`ValidationCode`.
    """

    code: ValidationCode

    def __init__(self, message: str, code: ValidationCode | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class SerializationFailure(DeclmetaError):
    """Raised when a descriptor or cache blob cannot be converted."""


class LookupFailure(DeclmetaError):
    """Raised when a named field or a type's source cannot be located."""


class ValidationCode(IntEnum):
    """Sub-codes carried by column validation failures."""

    PROPERTY_NAME_NOT_EXIST = 900001
    VALUE_TYPE_NOT_VALID = 900002
    NULL_NOT_ALLOWED = 900003
    EXCEEDS_MAXIMUM_LENGTH = 900004
    LESS_THAN_MINIMUM_LENGTH = 900005
    VALUE_GREATER_THAN = 900007
    VALUE_LESS_THAN = 900008
    EXCEEDS_MAXIMUM_PRECISION = 900009
    EXCEEDS_MAXIMUM_SCALE = 900010
    FAIL_REGEXP = 900011
    FILTER_FAILED = 900012


# Configuration


class CacheConfigError(ConfigurationError):
    """Raised when a cache directory does not exist or is not a directory."""


class ConfigFileError(ConfigurationError):
    """Raised when a configuration file cannot be read or is invalid."""


# Cache I/O


class CacheReadError(CacheIOError):
    """Raised when an existing cache blob cannot be read."""


class CacheWriteError(CacheIOError):
    """Raised when a cache blob cannot be written."""


class CacheScanError(CacheIOError):
    """Raised when the cache directory cannot be enumerated."""


# Lookup


class CacheKeyError(LookupFailure):
    """Raised when a type has no resolvable source fingerprint."""


class PropertyNotFoundError(LookupFailure, ValidationFailure):
    """Raised when a column's property is absent on the validated instance."""

    code = ValidationCode.PROPERTY_NAME_NOT_EXIST


# Serialization


class AttributesError(SerializationFailure):
    """Raised when cached descriptors cannot be fetched or decoded."""


class CacheMissError(SerializationFailure):
    """Raised when a cached form has no backing cache entry."""


class UnsupportedBlobVersionError(AttributesError):
    """Raised when a cache blob carries an unknown format version."""


# Structural: column definitions


class ColumnDefinitionError(StructuralViolation):
    """Raised when a column marker carries inconsistent constraints."""


class MaximumLengthError(ColumnDefinitionError):
    """Raised for a non-positive maximum length or one below the minimum."""


class MinimumLengthError(ColumnDefinitionError):
    """Raised for a negative minimum length."""


class DecimalPrecisionError(ColumnDefinitionError):
    """Raised for a decimal precision below one."""


class DecimalScaleError(ColumnDefinitionError):
    """Raised for a negative decimal scale."""


class NoTableMarkerError(StructuralViolation):
    """Raised when a class carries no Table marker."""


# Structural: filters


class BlankNameError(StructuralViolation):
    """Raised when a descriptor that must be named has a blank name."""


class DuplicateNameError(StructuralViolation):
    """Raised when two filters of one class share the same name."""


class UnknownFilterIdError(StructuralViolation):
    """Raised when a filter references an id the engine does not know."""


# Structural: forms


class NoFormMarkerError(StructuralViolation):
    """Raised when a class carries no Form marker."""


class MisplacedOptionError(StructuralViolation):
    """Raised when an Option marker does not follow a select Element."""


class OptionsNotAllowedError(StructuralViolation):
    """Raised when options are attached to an element that is not a select."""


class InvalidPositionError(StructuralViolation):
    """Raised for an element position below one."""


class DuplicateIdError(StructuralViolation):
    """Raised when an element id appears more than once in a form."""


class MissingTagError(StructuralViolation):
    """Raised when an element is serialized without a tag."""


class MissingInputTypeError(StructuralViolation):
    """Raised when an input element is serialized without a type."""


# Validation


class InvalidValueTypeError(ValidationFailure):
    """Raised when the validated value is not a scalar."""

    code = ValidationCode.VALUE_TYPE_NOT_VALID


class NullNotAllowedError(ValidationFailure):
    """Raised when null is validated against a non-nullable column."""

    code = ValidationCode.NULL_NOT_ALLOWED


class ExceedsMaxLengthError(ValidationFailure):
    """Raised when a string is longer than the column maximum length."""

    code = ValidationCode.EXCEEDS_MAXIMUM_LENGTH


class BelowMinLengthError(ValidationFailure):
    """Raised when a string is shorter than the column minimum length."""

    code = ValidationCode.LESS_THAN_MINIMUM_LENGTH


class RegexMismatchError(ValidationFailure):
    """Raised when a string does not match the column regex."""

    code = ValidationCode.FAIL_REGEXP


class AboveMaximumError(ValidationFailure):
    """Raised when a number is greater than the column maximum."""

    code = ValidationCode.VALUE_GREATER_THAN


class BelowMinimumError(ValidationFailure):
    """Raised when a number is less than the column minimum."""

    code = ValidationCode.VALUE_LESS_THAN


class ExceedsPrecisionError(ValidationFailure):
    """Raised when a number has more digits than the column precision."""

    code = ValidationCode.EXCEEDS_MAXIMUM_PRECISION


class ExceedsScaleError(ValidationFailure):
    """Raised when a number has more fractional digits than the column scale."""

    code = ValidationCode.EXCEEDS_MAXIMUM_SCALE


class FilterFailedError(ValidationFailure):
    """Raised when a filter stage rejects the value."""

    code = ValidationCode.FILTER_FAILED

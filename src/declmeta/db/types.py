# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Column storage types and the registry mapping declared Python types to them."""

from __future__ import annotations

from enum import IntEnum

# ###############
# Public Interface
# ###############


class StorageType(IntEnum):
    """Database column storage types."""

    STRING = 1
    INT = 2
    DATE = 4
    DATETIME = 5
    BOOLEAN = 6
    BLOB = 7
    DECIMAL = 8
    TIME = 9
    TIMESTAMP = 10


class TypeRegistry:
    """Maps a declared type name to a column storage type.

    Names are the bare name for builtins (``"str"``) and ``module.qualname``
    otherwise (``"decimal.Decimal"``). Applications add mappings for their
    own value types by subclassing and delegating unknown names to the base
    implementation::

        class AppTypeRegistry(TypeRegistry):
            def resolve(self, type_name: str) -> StorageType | None:
                if type_name == "datetime.date":
                    return StorageType.DATE
                return super().resolve(type_name)
    """

    def resolve(self, type_name: str) -> StorageType | None:
        """Return the storage type for *type_name*, or None when unknown."""
        return _BASE_MAPPING.get(type_name)


# ################
# Implementation
# ################

_BASE_MAPPING: dict[str, StorageType] = {
    "str": StorageType.STRING,
    "float": StorageType.DECIMAL,
    "int": StorageType.INT,
    "bool": StorageType.BOOLEAN,
}

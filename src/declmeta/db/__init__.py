# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Table/column namespace: storage constraints and value validation."""

from declmeta.db.column import Column, parse_columns
from declmeta.db.table import Table, parse_table
from declmeta.db.types import StorageType, TypeRegistry

__all__ = [
    "Column",
    "StorageType",
    "Table",
    "TypeRegistry",
    "parse_columns",
    "parse_table",
]

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Table marker: the table or view a class is stored in."""

from __future__ import annotations

from declmeta.base import Marker
from declmeta.errors import NoTableMarkerError
from declmeta.reflection import DEFAULT_PROVIDER, MetadataProvider

# ###############
# Public Interface
# ###############


class Table(Marker):
    """Class-level marker naming the backing table or view."""

    name: str | None = None
    is_view: bool = False


def parse_table(cls: type, *, provider: MetadataProvider | None = None) -> Table:
    """Return the Table marker of *cls* with its name defaulted to the class name.

    Raises:
        NoTableMarkerError: If *cls* has no Table marker.
    """
    provider = provider if provider is not None else DEFAULT_PROVIDER
    tables = [m for m in provider.class_markers(cls) if isinstance(m, Table)]
    if not tables:
        raise NoTableMarkerError(f"Class '{cls.__qualname__}' does not have any Table marker")
    table = tables[0]
    if table.name is None or not table.name.strip():
        table.name = cls.__name__
    return table

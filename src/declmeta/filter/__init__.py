# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Filter namespace: value sanitization pipelines and the filter engine."""

from declmeta.filter.engine import BuiltinFilterEngine, FilterEngine, FilterFlag, FilterId, default_engine
from declmeta.filter.filter import Filter, parse_filters

__all__ = [
    "BuiltinFilterEngine",
    "Filter",
    "FilterEngine",
    "FilterFlag",
    "FilterId",
    "default_engine",
    "parse_filters",
]

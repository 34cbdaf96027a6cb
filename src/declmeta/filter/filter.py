# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Filter marker: an ordered sanitization pipeline for one field or name."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from declmeta.base import Marker
from declmeta.config import Config, get_config
from declmeta.errors import AttributesError, BlankNameError, DuplicateNameError, FilterFailedError, UnknownFilterIdError
from declmeta.filter.engine import FilterEngine, FilterFlag, default_engine
from declmeta.logging import get_logger
from declmeta.reflection import DEFAULT_PROVIDER, MetadataProvider
from declmeta.serialization import decode_descriptors, encode_descriptors

# ###############
# Public Interface
# ###############

BLOB_KIND = "filters"

logger = get_logger(__name__)


class Filter(Marker):
    """A value-sanitization pipeline.

    Attributes:
        filter_ids: Engine filter ids, applied in order.
        options: Flags integer, or a mapping with ``flags`` and ``options``
            keys. ``NULL_ON_FAILURE`` is always merged into the flags.
        trim: Strip surrounding whitespace from strings before filtering.
        name: The property the filter applies to. Required on class-level
            markers; defaults to the field name on field-level markers.
    """

    filter_ids: list[int]
    options: int | dict[str, Any] = Field(default=0, validate_default=True)
    trim: bool = True
    name: str | None = None

    @field_validator("options")
    @classmethod
    def _merge_null_on_failure(cls, options: int | dict[str, Any]) -> int | dict[str, Any]:
        if isinstance(options, int):
            return int(options) | FilterFlag.NULL_ON_FAILURE.value
        merged = dict(options)
        merged["flags"] = int(merged.get("flags") or 0) | FilterFlag.NULL_ON_FAILURE.value
        return merged

    def filter(self, value: Any, engine: FilterEngine | None = None) -> Any:
        """Run *value* through the pipeline.

        None and booleans pass through unchanged.

        Raises:
            FilterFailedError: As soon as one stage rejects the value.
        """
        if value is None or isinstance(value, bool):
            return value
        engine = engine if engine is not None else default_engine()

        if self.trim and isinstance(value, str):
            value = value.strip()

        for filter_id in self.filter_ids:
            value = engine.apply_stage(value, filter_id, self.options)
            if value is None:
                raise FilterFailedError(f"filter {filter_id} failed for {self.name or 'value'}")
        return value


def parse_filters(
    cls: type,
    *,
    engine: FilterEngine | None = None,
    config: Config | None = None,
    provider: MetadataProvider | None = None,
) -> dict[str, Filter]:
    """Parse the Filter markers of *cls*, class-level markers first.

    Args:
        cls: The annotated class.
        engine: Engine whose filter ids are accepted; the built-in one when omitted.
        config: Caches to use; :func:`~declmeta.config.get_config` when omitted.
        provider: Reflection capability; annotation-based when omitted.

    Returns:
        A mapping from filter name to :class:`Filter`.

    Raises:
        BlankNameError: If a class-level filter has no name.
        DuplicateNameError: If two filters resolve to the same name.
        UnknownFilterIdError: If a filter id is unknown to *engine*.
        AttributesError: If a cache entry exists but cannot be fetched or decoded.
    """
    config = config if config is not None else get_config()
    provider = provider if provider is not None else DEFAULT_PROVIDER
    engine = engine if engine is not None else default_engine()
    cache = config.filter_cache

    if cache is not None and cache.exists(cls):
        blob = cache.get(cls)
        if blob is None:
            raise AttributesError("Error fetching Filters from cache")
        logger.debug("cache_hit", namespace=BLOB_KIND, type=cls.__qualname__)
        return decode_descriptors(BLOB_KIND, blob, Filter)

    known_ids = engine.known_filter_ids()
    filters: dict[str, Filter] = {}

    for marker in provider.class_markers(cls):
        if not isinstance(marker, Filter):
            continue
        if marker.name is None or not marker.name.strip():
            raise BlankNameError("Filters applied to a class must have a name")
        _add_filter(filters, marker, known_ids)

    for field_info in provider.fields_of(cls):
        found = field_info.markers_of(Filter)
        if not found:
            continue
        marker = found[0]
        if marker.name is None or not marker.name.strip():
            marker.name = field_info.name
        _add_filter(filters, marker, known_ids)

    logger.debug("parsed", namespace=BLOB_KIND, type=cls.__qualname__, count=len(filters))
    if cache is not None:
        cache.put(cls, encode_descriptors(BLOB_KIND, filters))
    return filters


# ################
# Implementation
# ################


def _add_filter(filters: dict[str, Filter], marker: Filter, known_ids: frozenset[int]) -> None:
    for filter_id in marker.filter_ids:
        if filter_id not in known_ids:
            raise UnknownFilterIdError(f"Filter ID {filter_id} not exist")
    assert marker.name is not None
    if marker.name in filters:
        raise DuplicateNameError(
            f"Filter name '{marker.name}' is used more than once; "
            "only one filter can be applied to each property"
        )
    filters[marker.name] = marker

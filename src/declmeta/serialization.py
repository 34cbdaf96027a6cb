# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of cached descriptor blobs.

Blobs are stored as compact JSON objects. The format is versioned so that
future schema changes can be detected, and each blob names the namespace it
belongs to::

    {"v": "1", "kind": "columns", "items": {"<name>": {...}}}
    {"v": "1", "kind": "form", "stack": {"form": {...}, "class": {...}, "properties": {...}}}
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from declmeta.errors import AttributesError, UnsupportedBlobVersionError

# ###############
# Public Interface
# ###############

BLOB_FORMAT_VERSION = "1"

M = TypeVar("M", bound=BaseModel)


def encode_descriptors(kind: str, descriptors: Mapping[str, BaseModel]) -> str:
    """Encode a name-keyed mapping of descriptors as a blob."""
    items = {name: d.model_dump(mode="json") for name, d in descriptors.items()}
    return _dumps({"v": BLOB_FORMAT_VERSION, "kind": kind, "items": items})


def decode_descriptors(kind: str, blob: str, model: type[M]) -> dict[str, M]:
    """Decode a blob produced by :func:`encode_descriptors`.

    Raises:
        AttributesError: If the blob is malformed or belongs to another kind.
        UnsupportedBlobVersionError: If the format version is not recognised.
    """
    obj = _loads(kind, blob)
    items = obj.get("items")
    if not isinstance(items, dict):
        raise AttributesError(f"Cached {kind} blob has no items")
    try:
        return {name: model.model_validate(data) for name, data in items.items()}
    except ValidationError as exc:
        raise AttributesError(f"Cached {kind} blob does not match {model.__name__}: {exc}") from exc


def encode_stack(stack: Mapping[str, Any]) -> str:
    """Encode a form stack array as a blob."""
    return _dumps({"v": BLOB_FORMAT_VERSION, "kind": "form", "stack": stack})


def decode_stack(blob: str) -> dict[str, Any]:
    """Decode a blob produced by :func:`encode_stack`."""
    obj = _loads("form", blob)
    stack = obj.get("stack")
    if not isinstance(stack, dict):
        raise AttributesError("Cached form blob has no stack")
    return stack


# ################
# Implementation
# ################


def _dumps(obj: dict[str, Any]) -> str:
    return json.dumps(obj, separators=(",", ":"))


def _loads(kind: str, blob: str) -> dict[str, Any]:
    try:
        obj = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise AttributesError(f"Cached {kind} blob is not valid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise AttributesError(f"Cached {kind} blob must be a JSON object")
    version = obj.get("v")
    if version != BLOB_FORMAT_VERSION:
        raise UnsupportedBlobVersionError(f"Unsupported blob format version: {version!r}")
    if obj.get("kind") != kind:
        raise AttributesError(f"Cached blob holds {obj.get('kind')!r}, expected {kind!r}")
    return obj

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Marker discovery on annotated Python classes.

Field-level markers live in ``typing.Annotated`` metadata::

    class Customer:
        name: Annotated[str, Column(max_length=60), Element(tag=Tag.INPUT, type=InputType.TEXT)]

Class-level markers are attached with the :func:`markers` decorator, which
preserves declaration order::

    @markers(Table(), Form(), Element(tag=Tag.INPUT, type=InputType.HIDDEN, name="token"))
    class Customer: ...

Parsers never touch classes directly; they go through a
:class:`MetadataProvider`, so alternative discovery schemes (explicit
registration tables, generated code) can be injected.
"""

from __future__ import annotations

import copy
import hashlib
import inspect
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

from declmeta.errors import CacheKeyError

# ###############
# Public Interface
# ###############

MARKERS_ATTRIBUTE = "__declmeta_markers__"

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class DeclaredType:
    """The nameable type declared for a field.

    Attributes:
        name: Bare name for builtins (``"str"``), ``module.qualname`` otherwise.
        nullable: True when the annotation admits ``None``.
    """

    name: str
    nullable: bool


@dataclass(frozen=True)
class FieldInfo:
    """A declared field of a class with its attached markers in declaration order."""

    name: str
    declared_type: DeclaredType | None
    markers: tuple[Any, ...] = field(default_factory=tuple)

    def markers_of(self, kind: type[Any]) -> list[Any]:
        """Return the markers that are instances of *kind*."""
        return [m for m in self.markers if isinstance(m, kind)]


class MetadataProvider(Protocol):
    """Reflection capability consumed by the parsers."""

    def fields_of(self, cls: type) -> list[FieldInfo]: ...

    def class_markers(self, cls: type) -> list[Any]: ...

    def source_fingerprint(self, cls: type) -> str: ...


def markers(*items: Any) -> Callable[[T], T]:
    """Attach class-level markers to the decorated class, in the given order."""

    def decorate(cls: T) -> T:
        setattr(cls, MARKERS_ATTRIBUTE, tuple(items))
        return cls

    return decorate


def source_fingerprint(cls: type) -> str:
    """Return a content hash of the source file defining *cls*.

    The class qualified name is mixed into the hash so that several classes
    defined in one module get distinct keys.

    Raises:
        CacheKeyError: If the class has no source file or it cannot be read.
    """
    try:
        path = inspect.getsourcefile(cls)
    except TypeError:
        path = None
    if path is None:
        raise CacheKeyError(f"Class '{cls.__qualname__}' does not exist in filesystem")
    try:
        with open(path, "rb") as handle:
            content = handle.read()
    except OSError as exc:
        raise CacheKeyError(f"Error getting fingerprint of '{path}': {exc}") from exc
    digest = hashlib.sha256(content)
    digest.update(b"\0")
    digest.update(f"{cls.__module__}.{cls.__qualname__}".encode())
    return digest.hexdigest()


def declared_type_of(annotation: Any) -> DeclaredType | None:
    """Describe an annotation as a nameable type, or None when it is not nameable.

    ``Optional[X]`` and ``X | None`` resolve to ``X`` with ``nullable=True``.
    Other unions, generics and special forms are not nameable.
    """
    annotation = _strip_annotated(annotation)
    nullable = False
    if _is_union(annotation):
        members = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(members) != 1:
            return None
        nullable = True
        annotation = _strip_annotated(members[0])
    if annotation is None or annotation is type(None):
        return None
    if not isinstance(annotation, type) or typing.get_origin(annotation) is not None:
        return None
    return DeclaredType(name=type_name(annotation), nullable=nullable)


def type_name(cls: type) -> str:
    """Return the registry name of a class."""
    if cls.__module__ == "builtins":
        return cls.__name__
    return f"{cls.__module__}.{cls.__qualname__}"


class AnnotationProvider:
    """Default provider reading ``Annotated`` field metadata and :func:`markers`.

    Markers are deep-copied on every call so that parsers can mutate them
    (e.g. default a name) without touching the class definition.
    """

    def fields_of(self, cls: type) -> list[FieldInfo]:
        hints = typing.get_type_hints(cls, include_extras=True)
        fields: list[FieldInfo] = []
        for name, hint in hints.items():
            if typing.get_origin(hint) is typing.ClassVar:
                continue
            metadata: tuple[Any, ...] = ()
            if typing.get_origin(hint) is typing.Annotated:
                metadata = tuple(copy.deepcopy(m) for m in hint.__metadata__)
            fields.append(FieldInfo(name=name, declared_type=declared_type_of(hint), markers=metadata))
        return fields

    def class_markers(self, cls: type) -> list[Any]:
        declared = cls.__dict__.get(MARKERS_ATTRIBUTE, ())
        return [copy.deepcopy(m) for m in declared]

    def source_fingerprint(self, cls: type) -> str:
        return source_fingerprint(cls)


DEFAULT_PROVIDER = AnnotationProvider()


# ################
# Implementation
# ################


def _strip_annotated(annotation: Any) -> Any:
    if typing.get_origin(annotation) is typing.Annotated:
        return typing.get_args(annotation)[0]
    return annotation


def _is_union(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    return origin is typing.Union or origin is types.UnionType

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Form marker, form parsing and the cached form stand-in.

Parsing a class collects two element lists: elements declared on the class
itself and elements declared on its fields. Each list is ordered by the
elements' positions and serialized by :meth:`Form.to_stack_array`, whose
result is stored in the form cache. A later parse of the same, unchanged
class returns a :class:`CachedForm` that reads the stored stack back.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, PrivateAttr

from declmeta.base import Marker, Translator, render_attributes
from declmeta.config import Config, get_config
from declmeta.errors import (
    BlankNameError,
    CacheMissError,
    DuplicateIdError,
    MisplacedOptionError,
    NoFormMarkerError,
)
from declmeta.html.element import Element
from declmeta.html.enums import Enctype, Method, OnOff, Relationship, Tag, Target
from declmeta.html.option import Option
from declmeta.logging import get_logger
from declmeta.reflection import DEFAULT_PROVIDER, MetadataProvider
from declmeta.serialization import decode_stack, encode_stack

# ###############
# Public Interface
# ###############

logger = get_logger(__name__)


class CachedForm:
    """Stand-in for a form whose serialized stack lives in the form cache."""

    def __init__(self, attached_type: type, config: Config | None = None) -> None:
        self.attached_type = attached_type
        self.config = config if config is not None else get_config()

    def to_stack_array(self) -> dict[str, Any]:
        """Return the cached stack of the attached class.

        Raises:
            CacheMissError: If the cache entry no longer exists.
        """
        cache = self.config.form_cache
        blob = cache.get(self.attached_type) if cache is not None else None
        if blob is None:
            raise CacheMissError(f"The form stack of {self.attached_type.__qualname__} is not in cache")
        logger.debug("cache_hit", namespace="form", type=self.attached_type.__qualname__)
        return decode_stack(blob)


class Form(Marker):
    """Class-level marker describing an HTML form.

    Attributes:
        id: Form id; defaults to the class short name when parsed.
        accept_charset: Character encodings used on submission.
        action: Where the form data is sent.
        relationship: Rendered as the ``rel`` attribute.
        class_elements: Elements declared on the class, in display order.
        property_elements: Elements declared on fields, in display order.
    """

    id: str | None = None
    accept_charset: str | None = Field(default="utf-8", serialization_alias="accept-charset")
    action: str | None = "/"
    autocomplete: OnOff | None = OnOff.OFF
    enctype: Enctype | None = Enctype.MULTIPART
    method: Method | None = Method.POST
    name: str | None = None
    novalidate: bool = False
    relationship: Relationship | None = Field(default=None, serialization_alias="rel")
    target: Target | None = None
    class_elements: list[Element] = Field(default_factory=list, exclude=True)
    property_elements: list[Element] = Field(default_factory=list, exclude=True)

    _attached_type: type | None = PrivateAttr(default=None)
    _config: Config | None = PrivateAttr(default=None)

    @property
    def attached_type(self) -> type | None:
        return self._attached_type

    def attach(self, attached_type: type | None, config: Config | None = None) -> Form:
        """Bind the form to the class it was parsed from and the config whose cache it fills."""
        self._attached_type = attached_type
        self._config = config
        return self

    def set_translator(self, translator: Translator | None) -> None:
        """Attach *translator* to the form, its elements and their options."""
        super().set_translator(translator)
        for element in [*self.class_elements, *self.property_elements]:
            element.set_translator(translator)
            for option in element.options:
                option.set_translator(translator)

    def order_elements(self) -> None:
        """Reorder both element lists by their positions."""
        self.class_elements = order_elements(self.class_elements)
        self.property_elements = order_elements(self.property_elements)

    def to_array(self) -> dict[str, Any]:
        """Serialize the form's own attributes, leaving out None and False values."""
        dumped = self.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in dumped.items() if value is not None and value is not False}

    def to_string(self) -> str:
        return f"<form{render_attributes(self.to_array())}>"

    def __str__(self) -> str:
        return self.to_string()

    def to_stack_array(self) -> dict[str, Any]:
        """Serialize the form with all of its elements.

        Class elements are keyed by id; property elements are grouped by
        name, then keyed by id. Elements without an id get positional keys.
        The stack is stored in the form cache when the form is attached to
        a class.

        Raises:
            DuplicateIdError: If an id is used more than once, the form id included.
            BlankNameError: If a property element has no name.
        """
        ids: set[str] = set()
        if not _is_blank(self.id):
            assert self.id is not None
            ids.add(self.id)

        class_stack: dict[str, Any] = {}
        for element in self.class_elements:
            _put_element(class_stack, element, ids)

        properties_stack: dict[str, dict[str, Any]] = {}
        for element in self.property_elements:
            if _is_blank(element.name):
                raise BlankNameError("Property element without name")
            assert element.name is not None
            _put_element(properties_stack.setdefault(element.name, {}), element, ids)

        stack = {"form": self.to_array(), "class": class_stack, "properties": properties_stack}

        if self._attached_type is not None:
            config = self._config if self._config is not None else get_config()
            if config.form_cache is not None:
                config.form_cache.put(self._attached_type, encode_stack(stack))
        return stack


def order_elements(elements: list[Element]) -> list[Element]:
    """Order *elements* by their 1-based positions.

    Elements without a position are appended after the highest occupied
    slot, in encounter order. An element with position ``P`` takes slot
    ``P - 1`` when it is free; otherwise the slots are compacted and the
    element is inserted at index ``P - 1``, shifting later elements.
    """
    slots: dict[int, Element] = {}
    for element in elements:
        if element.position is None:
            slots[max(slots) + 1 if slots else 0] = element
            continue
        index = element.position - 1
        if index not in slots:
            slots[index] = element
            continue
        ordered = [slots[k] for k in sorted(slots)]
        ordered.insert(index, element)
        slots = dict(enumerate(ordered))
    return [slots[k] for k in sorted(slots)]


def parse_form(
    cls: type,
    *,
    config: Config | None = None,
    provider: MetadataProvider | None = None,
    translator: Translator | None = None,
) -> Form | CachedForm:
    """Parse the Form, Element and Option markers of *cls*.

    Args:
        cls: The annotated class.
        config: Caches to use; :func:`~declmeta.config.get_config` when omitted.
        provider: Reflection capability; annotation-based when omitted.
        translator: Translator attached to the form, its elements and options.

    Returns:
        A :class:`CachedForm` when the form cache holds the class, otherwise
        the parsed :class:`Form` with its elements ordered.

    Raises:
        NoFormMarkerError: If the class has no Form marker.
        BlankNameError: If a class-level element has no name.
        MisplacedOptionError: If an option does not follow a select element.
    """
    config = config if config is not None else get_config()
    provider = provider if provider is not None else DEFAULT_PROVIDER
    cache = config.form_cache

    if cache is not None and cache.exists(cls):
        logger.debug("cache_hit", namespace="form", type=cls.__qualname__)
        return CachedForm(cls, config)

    class_markers = provider.class_markers(cls)
    form = next((m for m in class_markers if isinstance(m, Form)), None)
    if form is None:
        raise NoFormMarkerError(f"Class '{cls.__qualname__}' does not have any Form attribute")
    form.attach(cls, config)
    short_name = cls.__name__
    if _is_blank(form.id):
        form.id = short_name

    class_elements: list[Element] = []
    for marker in class_markers:
        if isinstance(marker, Element):
            if _is_blank(marker.name):
                raise BlankNameError("Elements defined in class must have name")
            if marker.id is None:
                marker.id = f"{short_name}_{marker.name}"
            class_elements.append(marker)
        elif isinstance(marker, Option):
            _attach_option(class_elements, marker)

    property_elements: list[Element] = []
    for field_info in provider.fields_of(cls):
        for marker in field_info.markers:
            if isinstance(marker, Element):
                if _is_blank(marker.name):
                    marker.name = field_info.name
                if _is_blank(marker.id):
                    marker.id = f"{short_name}_{marker.name}"
                property_elements.append(marker)
            elif isinstance(marker, Option):
                _attach_option(property_elements, marker)

    form.class_elements = class_elements
    form.property_elements = property_elements
    form.order_elements()
    if translator is not None:
        form.set_translator(translator)

    logger.debug(
        "parsed",
        namespace="form",
        type=cls.__qualname__,
        count=len(class_elements) + len(property_elements),
    )
    return form


# ################
# Implementation
# ################


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


def _attach_option(elements: list[Element], option: Option) -> None:
    if not elements or elements[-1].tag is not Tag.SELECT:
        raise MisplacedOptionError("Option attributes must be placed after a Element with tag select")
    elements[-1].add_option(option)


def _put_element(scope: dict[str, Any], element: Element, ids: set[str]) -> None:
    if _is_blank(element.id):
        position = len(scope)
        while str(position) in scope:
            position += 1
        scope[str(position)] = element.to_array()
        return
    assert element.id is not None
    if element.id in ids or element.id in scope:
        raise DuplicateIdError(f"Element ID {element.id} exists more than once")
    ids.add(element.id)
    scope[element.id] = element.to_array()

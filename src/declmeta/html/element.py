# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Element marker: one form control with its rendering attributes.

Elements are attached to a class with :func:`~declmeta.reflection.markers`
or to a field through ``Annotated`` metadata. Option markers that follow a
select element in the same scope become its options::

    @markers(
        Form(),
        Element(tag=Tag.SELECT, name="country"),
        Option(value="pt", text="Portugal"),
        Option(value="es", text="Spain"),
    )
    class Address: ...
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from declmeta.base import Marker, render_attributes
from declmeta.errors import InvalidPositionError, MissingInputTypeError, MissingTagError, OptionsNotAllowedError
from declmeta.html.enums import Accept, InputType, OnOff, Tag
from declmeta.html.option import Option

# ###############
# Public Interface
# ###############

TRANSLATED_ATTRIBUTES = ("placeholder", "title")


class Element(Marker):
    """A form control.

    Attributes mirror the HTML attributes of the same name. ``position``
    (1-based) places the element within its scope; the ``layout_*`` fields
    are rendering hints for client-side layout engines.
    """

    tag: Tag | None = None
    type: InputType | None = None
    name: str | None = None
    id: str | None = None
    accept: Accept | str | None = None
    autocomplete: OnOff | str | None = OnOff.OFF
    autofocus: bool = False
    checked: bool = False
    dirname: str | None = None
    disabled: bool = False
    form: str | None = None
    max: str | int | float | None = None
    max_length: int | None = Field(default=None, serialization_alias="maxLength")
    min: str | int | float | None = None
    min_length: int | None = Field(default=None, serialization_alias="minLength")
    multiple: bool = False
    pattern: str | None = None
    placeholder: str | None = None
    readonly: bool = False
    required: bool = False
    size: int | None = None
    step: int | float | None = None
    value: str | None = ""
    title: str | None = None
    tabindex: int | None = None
    position: int | None = None
    layout_weight: int | None = Field(default=None, serialization_alias="layoutWeight")
    layout_row_index: int = Field(default=0, serialization_alias="layoutRowIndex")
    layout_tab_index: int | None = Field(default=None, serialization_alias="layoutTabIndex")
    options: list[Option] = Field(default_factory=list)

    @field_validator("position")
    @classmethod
    def _check_position(cls, position: int | None) -> int | None:
        if position is not None and position < 1:
            raise InvalidPositionError(f"Element position must be 1 or greater, got {position}")
        return position

    @model_validator(mode="after")
    def _check_options(self) -> Element:
        if self.options and self.tag is not Tag.SELECT:
            raise OptionsNotAllowedError("Options are only allowed for select tag")
        return self

    def add_option(self, option: Option) -> Element:
        """Append *option*; only select elements accept options."""
        if self.tag is not Tag.SELECT:
            raise OptionsNotAllowedError("Options are only allowed for select tag")
        self.options.append(option)
        return self

    def set_options(self, options: list[Option]) -> Element:
        if self.tag is not Tag.SELECT:
            raise OptionsNotAllowedError("Options are only allowed for select tag")
        self.options = options
        return self

    def to_array(self) -> dict[str, Any]:
        """Serialize to a mapping of the set attributes.

        None and False attributes are left out. Placeholder and title are
        translated, and select elements carry their serialized options.

        Raises:
            MissingTagError: If the element has no tag.
            MissingInputTypeError: If an input element has no type.
        """
        self._check_renderable()
        dumped = self.model_dump(mode="json", by_alias=True, exclude={"options"})
        array: dict[str, Any] = {}
        for key, value in dumped.items():
            if value is None or value is False:
                continue
            if key in TRANSLATED_ATTRIBUTES:
                value = self.translate(value)
            array[key] = value
        if self.tag is Tag.SELECT:
            array["options"] = [option.to_array(self.translator) for option in self.options]
        return array

    def to_string(self) -> str:
        """Render the element as markup.

        Select elements render their options between the opening and the
        closing tag; other elements render a self-closing tag.
        """
        array = self.to_array()
        assert self.tag is not None
        array.pop("tag")
        array.pop("options", None)
        markup = f"<{self.tag.value}{render_attributes(array)}"
        if self.tag is not Tag.SELECT:
            return markup + "/>"
        rendered_options = "".join(option.to_string(self.translator) for option in self.options)
        return f"{markup}>{rendered_options}</select>"

    def __str__(self) -> str:
        return self.to_string()

    def _check_renderable(self) -> None:
        if self.tag is None:
            raise MissingTagError("Element tag must be defined")
        if self.tag is Tag.INPUT and self.type is None:
            raise MissingInputTypeError("Element with tag input must have the type defined")

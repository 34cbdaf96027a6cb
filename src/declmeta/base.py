# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Base contracts shared by all markers: validation settings and translation."""

from __future__ import annotations

import html
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, PrivateAttr

# ###############
# Public Interface
# ###############


@runtime_checkable
class Translator(Protocol):
    """Translates display strings (placeholders, titles, option texts)."""

    def translate(self, key: str) -> str: ...


class Marker(BaseModel):
    """Base class of every declarative marker.

    Markers validate on construction and on every attribute assignment, so a
    broken invariant fails at the point where it is introduced.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    _translator: Translator | None = PrivateAttr(default=None)

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in type(self).model_fields:
            super().__setattr__(name, value)
            return
        # a rejected assignment leaves every field as it was
        previous = dict(self.__dict__)
        previous_fields_set = set(self.model_fields_set)
        try:
            super().__setattr__(name, value)
        except Exception:
            object.__setattr__(self, "__dict__", previous)
            object.__setattr__(self, "__pydantic_fields_set__", previous_fields_set)
            raise

    @property
    def translator(self) -> Translator | None:
        return self._translator

    def set_translator(self, translator: Translator | None) -> None:
        self._translator = translator

    def translate(self, text: str) -> str:
        """Translate *text* through the attached translator, if any."""
        if self._translator is None:
            return text
        return self._translator.translate(text)


def render_attributes(attributes: Mapping[str, Any]) -> str:
    """Render a mapping as markup attributes.

    ``True`` renders as a bare attribute name; other values are escaped and
    quoted. Every rendered attribute is preceded by a single space.
    """
    parts: list[str] = []
    for key, value in attributes.items():
        if value is True:
            parts.append(f" {key}")
        else:
            parts.append(f' {key}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)

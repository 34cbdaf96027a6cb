# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Option marker: one choice of a select element."""

from __future__ import annotations

import html
from typing import Any

from declmeta.base import Marker, Translator

# ###############
# Public Interface
# ###############


class Option(Marker):
    """A select option. ``text`` is translated when serialized."""

    value: str = ""
    text: str = ""
    selected: bool = False

    def to_array(self, fallback: Translator | None = None) -> dict[str, Any]:
        """Serialize to ``{value, text}`` plus ``selected: True`` when selected.

        Args:
            fallback: Translator used when the option has none of its own.
        """
        array: dict[str, Any] = {"value": self.value, "text": self._translated_text(fallback)}
        if self.selected:
            array["selected"] = True
        return array

    def to_string(self, fallback: Translator | None = None) -> str:
        return '<option value="{}"{}>{}</option>'.format(
            html.escape(self.value, quote=True),
            " selected" if self.selected else "",
            html.escape(self._translated_text(fallback), quote=False),
        )

    def __str__(self) -> str:
        return self.to_string()

    def _translated_text(self, fallback: Translator | None) -> str:
        translator = self.translator if self.translator is not None else fallback
        if translator is None:
            return self.text
        return translator.translate(self.text)

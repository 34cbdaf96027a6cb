# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value sanitization stages addressed by integer filter ids.

The built-in engine implements the classic validate/sanitize filters. A
stage receives the value as text and returns the filtered value, or None
when the value is rejected. Applications register additional stages with
:meth:`BuiltinFilterEngine.register`.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Mapping
from enum import IntEnum, IntFlag
from functools import lru_cache
from typing import Any, Protocol
from urllib.parse import urlsplit

from declmeta.errors import UnknownFilterIdError

# ###############
# Public Interface
# ###############


class FilterId(IntEnum):
    """Ids of the built-in filter stages."""

    VALIDATE_INT = 257
    VALIDATE_BOOL = 258
    VALIDATE_FLOAT = 259
    VALIDATE_REGEXP = 272
    VALIDATE_URL = 273
    VALIDATE_EMAIL = 274
    SANITIZE_SPECIAL_CHARS = 515
    UNSAFE_RAW = 516
    DEFAULT = 516
    SANITIZE_EMAIL = 517
    SANITIZE_URL = 518
    SANITIZE_NUMBER_INT = 519
    SANITIZE_NUMBER_FLOAT = 520
    SANITIZE_FULL_SPECIAL_CHARS = 522


class FilterFlag(IntFlag):
    """Option flags understood by the built-in stages."""

    NONE = 0
    ALLOW_FRACTION = 4096
    ALLOW_THOUSAND = 8192
    ALLOW_SCIENTIFIC = 16384
    NULL_ON_FAILURE = 134217728


Stage = Callable[[str, int, Mapping[str, Any]], Any]


class FilterEngine(Protocol):
    """Filter-engine capability consumed by :class:`~declmeta.filter.filter.Filter`."""

    def apply_stage(self, value: Any, filter_id: int, options: int | Mapping[str, Any]) -> Any: ...

    def known_filter_ids(self) -> frozenset[int]: ...


class BuiltinFilterEngine:
    """Filter engine backed by a table of stage functions."""

    def __init__(self) -> None:
        self._stages: dict[int, Stage] = dict(_BUILTIN_STAGES)

    def register(self, filter_id: int, stage: Stage) -> None:
        """Register (or replace) the stage for *filter_id*."""
        self._stages[int(filter_id)] = stage

    def known_filter_ids(self) -> frozenset[int]:
        return frozenset(self._stages)

    def apply_stage(self, value: Any, filter_id: int, options: int | Mapping[str, Any]) -> Any:
        """Apply one stage to *value*.

        Returns the filtered value. A rejected value yields the ``default``
        option when one is given, None when the ``NULL_ON_FAILURE`` flag is
        set, and False otherwise.

        Raises:
            UnknownFilterIdError: If no stage is registered for *filter_id*.
        """
        stage = self._stages.get(int(filter_id))
        if stage is None:
            raise UnknownFilterIdError(f"Filter ID {filter_id} not exist")
        flags, stage_options = split_options(options)
        result = stage(_to_text(value), flags, stage_options)
        if result is None:
            if "default" in stage_options:
                return stage_options["default"]
            if not flags & FilterFlag.NULL_ON_FAILURE:
                return False
        return result


def split_options(options: int | Mapping[str, Any]) -> tuple[int, Mapping[str, Any]]:
    """Return the flags and the per-stage options of a filter options value."""
    if isinstance(options, int):
        return options, {}
    stage_options = options.get("options") or {}
    return int(options.get("flags") or 0), stage_options


@lru_cache
def default_engine() -> BuiltinFilterEngine:
    """Return the process-wide built-in engine, created on first use."""
    return BuiltinFilterEngine()


# ################
# Implementation
# ################

_INT_RE = re.compile(r"[+-]?(0|[1-9][0-9]*)")
_FLOAT_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_FLOAT_THOUSAND_RE = re.compile(r"[+-]?\d{1,3}(,\d{3})*(\.\d*)?([eE][+-]?\d+)?")
_EMAIL_RE = re.compile(
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}"
)
_EMAIL_CHARS = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")
_URL_CHARS = re.compile(r"[^A-Za-z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")
_TRUE_WORDS = frozenset({"1", "true", "on", "yes"})
_FALSE_WORDS = frozenset({"0", "false", "off", "no", ""})


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def _in_range(number: int | float, options: Mapping[str, Any]) -> bool:
    if "min_range" in options and number < options["min_range"]:
        return False
    if "max_range" in options and number > options["max_range"]:
        return False
    return True


def _unsafe_raw(text: str, flags: int, options: Mapping[str, Any]) -> str:
    return text


def _validate_int(text: str, flags: int, options: Mapping[str, Any]) -> int | None:
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return None
    number = int(text)
    return number if _in_range(number, options) else None


def _validate_bool(text: str, flags: int, options: Mapping[str, Any]) -> bool | None:
    word = text.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    return None


def _validate_float(text: str, flags: int, options: Mapping[str, Any]) -> float | None:
    text = text.strip()
    if flags & FilterFlag.ALLOW_THOUSAND and _FLOAT_THOUSAND_RE.fullmatch(text):
        text = text.replace(",", "")
    if not _FLOAT_RE.fullmatch(text):
        return None
    number = float(text)
    return number if _in_range(number, options) else None


def _validate_regexp(text: str, flags: int, options: Mapping[str, Any]) -> str | None:
    pattern = options.get("regexp")
    if not pattern:
        return None
    return text if re.search(pattern, text) else None


def _validate_url(text: str, flags: int, options: Mapping[str, Any]) -> str | None:
    if not text or any(c.isspace() for c in text):
        return None
    try:
        parts = urlsplit(text)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return text


def _validate_email(text: str, flags: int, options: Mapping[str, Any]) -> str | None:
    if len(text) > 320 or not _EMAIL_RE.fullmatch(text):
        return None
    return text


def _sanitize_special_chars(text: str, flags: int, options: Mapping[str, Any]) -> str:
    out: list[str] = []
    for char in text:
        if char in "\"'<>&" or ord(char) < 32:
            out.append(f"&#{ord(char)};")
        else:
            out.append(char)
    return "".join(out)


def _sanitize_full_special_chars(text: str, flags: int, options: Mapping[str, Any]) -> str:
    return html.escape(text, quote=True)


def _sanitize_email(text: str, flags: int, options: Mapping[str, Any]) -> str:
    return _EMAIL_CHARS.sub("", text)


def _sanitize_url(text: str, flags: int, options: Mapping[str, Any]) -> str:
    return _URL_CHARS.sub("", text)


def _sanitize_number_int(text: str, flags: int, options: Mapping[str, Any]) -> str:
    return "".join(c for c in text if c.isascii() and (c.isdigit() or c in "+-"))


def _sanitize_number_float(text: str, flags: int, options: Mapping[str, Any]) -> str:
    allowed = "+-"
    if flags & FilterFlag.ALLOW_FRACTION:
        allowed += "."
    if flags & FilterFlag.ALLOW_THOUSAND:
        allowed += ","
    if flags & FilterFlag.ALLOW_SCIENTIFIC:
        allowed += "eE"
    return "".join(c for c in text if c.isascii() and (c.isdigit() or c in allowed))


_BUILTIN_STAGES: dict[int, Stage] = {
    FilterId.VALIDATE_INT: _validate_int,
    FilterId.VALIDATE_BOOL: _validate_bool,
    FilterId.VALIDATE_FLOAT: _validate_float,
    FilterId.VALIDATE_REGEXP: _validate_regexp,
    FilterId.VALIDATE_URL: _validate_url,
    FilterId.VALIDATE_EMAIL: _validate_email,
    FilterId.SANITIZE_SPECIAL_CHARS: _sanitize_special_chars,
    FilterId.UNSAFE_RAW: _unsafe_raw,
    FilterId.SANITIZE_EMAIL: _sanitize_email,
    FilterId.SANITIZE_URL: _sanitize_url,
    FilterId.SANITIZE_NUMBER_INT: _sanitize_number_int,
    FilterId.SANITIZE_NUMBER_FLOAT: _sanitize_number_float,
    FilterId.SANITIZE_FULL_SPECIAL_CHARS: _sanitize_full_special_chars,
}

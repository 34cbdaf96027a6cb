# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enumerated HTML attribute values used by forms and elements."""

from __future__ import annotations

from enum import Enum

# ###############
# Public Interface
# ###############


class Tag(Enum):
    """Supported form element tags."""

    INPUT = "input"
    TEXT_AREA = "textarea"
    SELECT = "select"


class InputType(Enum):
    """Values of the ``type`` attribute of an input element."""

    BUTTON = "button"
    CHECKBOX = "checkbox"
    COLOR = "color"
    DATE = "date"
    DATETIME_LOCAL = "datetime-local"
    EMAIL = "email"
    FILE = "file"
    HIDDEN = "hidden"
    IMAGE = "image"
    MONTH = "month"
    NUMBER = "number"
    PASSWORD = "password"
    RADIO = "radio"
    RANGE = "range"
    RESET = "reset"
    SEARCH = "search"
    SUBMIT = "submit"
    TEL = "tel"
    TEXT = "text"
    TIME = "time"
    URL = "url"
    WEEK = "week"


class Accept(Enum):
    """Common values of the ``accept`` attribute."""

    AUDIO = "audio/*"
    VIDEO = "video/*"
    IMAGE = "image/*"


class OnOff(Enum):
    ON = "on"
    OFF = "off"


class Enctype(Enum):
    """How form data is encoded when submitted."""

    FORM_URLENCODED = "application/x-www-form-urlencoded"
    MULTIPART = "multipart/form-data"
    TEXT_PLAIN = "text/plain"


class Method(Enum):
    GET = "get"
    POST = "post"


class Relationship(Enum):
    """Values of the form ``rel`` attribute."""

    EXTERNAL = "external"
    HELP = "help"
    LICENSE = "license"
    NEXT = "next"
    NOFOLLOW = "nofollow"
    NO_OPENER = "noopener"
    NO_REFERRER = "noreferrer"
    OPENER = "opener"
    PREV = "prev"
    SEARCH = "search"


class Target(Enum):
    """Where the response to a submitted form is displayed."""

    BLANK = "_blank"
    SELF = "_self"
    PARENT = "_parent"
    TOP = "_top"

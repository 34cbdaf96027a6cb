# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""HTML namespace: form, element and option markers."""

from declmeta.html.element import Element
from declmeta.html.enums import Accept, Enctype, InputType, Method, OnOff, Relationship, Tag, Target
from declmeta.html.form import CachedForm, Form, order_elements, parse_form
from declmeta.html.option import Option

__all__ = [
    "Accept",
    "CachedForm",
    "Element",
    "Enctype",
    "Form",
    "InputType",
    "Method",
    "OnOff",
    "Option",
    "Relationship",
    "Tag",
    "Target",
    "order_elements",
    "parse_form",
]

# Copyright 2026 declmeta Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarative metadata markers for persistence, sanitization and form rendering."""

import logging as _stdlib_logging

from declmeta.base import Marker, Translator
from declmeta.cache import DescriptorCache
from declmeta.config import Config, Namespace, get_config, load_config
from declmeta.logging import get_logger, setup_logging
from declmeta.reflection import AnnotationProvider, MetadataProvider, markers, source_fingerprint

_stdlib_logging.getLogger("declmeta").addHandler(_stdlib_logging.NullHandler())

__all__ = [
    "AnnotationProvider",
    "Config",
    "DescriptorCache",
    "Marker",
    "MetadataProvider",
    "Namespace",
    "Translator",
    "get_config",
    "get_logger",
    "load_config",
    "markers",
    "setup_logging",
    "source_fingerprint",
]

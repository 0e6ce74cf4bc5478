"""
samlui - declarative UI screens compiled from SML documents.

Parses item stores and control trees from the SML line format, checks
their bindings and materializes them through rendering adapters.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import SamlError, SchemaViolation, UnsupportedVariant
from .core.items import Items
from .core.ui_parser import parse_ui

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "Items",
    "SamlError",
    "SchemaViolation",
    "UnsupportedVariant",
    "parse_ui",
]

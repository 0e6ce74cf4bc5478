"""Core samlui functionality: document provider, item model, loaders, control compiler, binding checks."""

from . import ir
from .bindings import Binding, BindingIssue, assert_bindings, check_bindings, collect_bindings
from .errors import (
    DocumentSyntaxError,
    DuplicateName,
    ErrorContext,
    InvalidName,
    ItemPathError,
    ManifestError,
    MissingPath,
    SamlError,
    SchemaViolation,
    UnboundCommand,
    UnsupportedMutation,
    UnsupportedVariant,
    WrongKind,
)
from .items import (
    BoolItem,
    ChangeNotifier,
    CommandItem,
    EnumItem,
    Item,
    ItemChanged,
    ItemGroup,
    ItemKind,
    Items,
    ItemsNode,
    StringItem,
    Subscription,
)
from .items_loader import ItemsLoader, dump_items, load_items, parse_items
from .manifest import ProjectManifest, load_manifest
from .project import Project, load_project
from .sml import SmlAttribute, SmlDocument, SmlElement, parse_document
from .ui_parser import UiParser, parse_control, parse_ui

__all__ = [
    "ir",
    # Errors
    "DocumentSyntaxError",
    "DuplicateName",
    "ErrorContext",
    "InvalidName",
    "ItemPathError",
    "ManifestError",
    "MissingPath",
    "SamlError",
    "SchemaViolation",
    "UnboundCommand",
    "UnsupportedMutation",
    "UnsupportedVariant",
    "WrongKind",
    # Documents
    "SmlAttribute",
    "SmlDocument",
    "SmlElement",
    "parse_document",
    # Items
    "BoolItem",
    "ChangeNotifier",
    "CommandItem",
    "EnumItem",
    "Item",
    "ItemChanged",
    "ItemGroup",
    "ItemKind",
    "Items",
    "ItemsLoader",
    "ItemsNode",
    "StringItem",
    "Subscription",
    "dump_items",
    "load_items",
    "parse_items",
    # Controls
    "UiParser",
    "parse_control",
    "parse_ui",
    # Bindings
    "Binding",
    "BindingIssue",
    "assert_bindings",
    "check_bindings",
    "collect_bindings",
    # Projects
    "Project",
    "ProjectManifest",
    "load_manifest",
    "load_project",
]

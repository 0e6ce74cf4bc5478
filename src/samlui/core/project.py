"""
Project loading: manifest, item store and screens in one step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import ir
from .bindings import BindingIssue, check_bindings
from .items import Items
from .items_loader import parse_items
from .manifest import MANIFEST_NAME, ProjectManifest, load_manifest
from .ui_parser import parse_ui

logger = logging.getLogger(__name__)


@dataclass
class Project:
    """A loaded project: everything compiled, bindings checked."""

    manifest: ProjectManifest
    items: Items
    screens: dict[str, ir.ControlDescriptor] = field(default_factory=dict)
    issues: dict[str, list[BindingIssue]] = field(default_factory=dict)

    @property
    def has_issues(self) -> bool:
        return any(self.issues.values())


def load_project(project_root: Path) -> Project:
    """
    Load ``samlui.toml`` from ``project_root`` and compile every document it names.

    Raises:
        ManifestError: If the manifest is incomplete
        SamlError: If any document fails to parse or compile
        FileNotFoundError: If the manifest or a document is missing
    """
    manifest = load_manifest(project_root / MANIFEST_NAME)

    items_path = manifest.items_path
    if items_path is None:
        logger.info("Project %s declares no items document", manifest.name)
        items = Items()
    else:
        items = parse_items(
            items_path.read_text(encoding="utf-8"),
            source=str(items_path),
            option_separator=manifest.ui.enum_separator,
        )

    project = Project(manifest=manifest, items=items)
    for name, path in manifest.screen_paths().items():
        screen = parse_ui(path.read_text(encoding="utf-8"), source=str(path))
        project.screens[name] = screen
        project.issues[name] = check_bindings(screen, items)
        logger.debug("Compiled screen %s from %s", name, path)

    return project

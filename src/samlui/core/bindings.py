"""
Cross-checks between a compiled control tree and an item store.

Controls reference items only by path, so a screen compiles without the
store it will run against. These helpers list those references and verify
them against a concrete ``Items`` before anything is materialized.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from . import ir
from .errors import ItemPathError, MissingPath, WrongKind
from .items import ItemKind, Items

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Binding:
    """One item reference made by a control."""

    path: str
    expected: ItemKind | None  # None accepts any item kind
    control: ir.ControlKind


@dataclass(frozen=True)
class BindingIssue:
    """A binding that does not resolve as expected."""

    binding: Binding
    problem: str

    def to_error(self) -> ItemPathError:
        if self.problem == "missing":
            return MissingPath(self.describe(), self.binding.path)
        return WrongKind(self.describe(), self.binding.path)

    def describe(self) -> str:
        binding = self.binding
        wanted = binding.expected.label if binding.expected is not None else "an item"
        if self.problem == "missing":
            return f'{binding.control.value} references "{binding.path}" but no such item exists'
        return f'{binding.control.value} references "{binding.path}" which is not {wanted}'


def _control_bindings(control: ir.ControlBase) -> Iterator[Binding]:
    match control:
        case ir.Button(command=str() as path):
            yield Binding(path, ItemKind.COMMAND, ir.ControlKind.BUTTON)
        case ir.TextBox(item=str() as path):
            yield Binding(path, ItemKind.STRING, ir.ControlKind.TEXT_BOX)
        case ir.Label(item=str() as path):
            yield Binding(path, None, ir.ControlKind.LABEL)
        case ir.TabControl():
            for tab in control.tabs:
                if tab.title is not None:
                    yield Binding(tab.title, None, ir.ControlKind.TAB_CONTROL)
        case ir.MenuBar():
            for menu in control.menus:
                if menu.title is not None:
                    yield Binding(menu.title, None, ir.ControlKind.MENU_BAR)
                for entry in menu.entries:
                    match entry:
                        case ir.CommandMenuEntry():
                            yield Binding(entry.command, ItemKind.COMMAND, ir.ControlKind.MENU_BAR)
                        case ir.CheckMenuEntry():
                            yield Binding(entry.bool_item, ItemKind.BOOL, ir.ControlKind.MENU_BAR)
                        case ir.EnumMenuEntry():
                            yield Binding(entry.enum_item, ItemKind.ENUM, ir.ControlKind.MENU_BAR)


def collect_bindings(root: ir.ControlBase) -> list[Binding]:
    """All item references in ``root``, depth first in declaration order."""
    bindings: list[Binding] = []
    for control in ir.iter_controls(root):
        bindings.extend(_control_bindings(control))
    return bindings


def check_bindings(root: ir.ControlBase, items: Items) -> list[BindingIssue]:
    """Return every unresolved or mistyped binding without raising."""
    issues: list[BindingIssue] = []
    for binding in collect_bindings(root):
        node = items.resolve(binding.path)
        if node is None:
            issues.append(BindingIssue(binding, "missing"))
        elif binding.expected is None and node.kind is ItemKind.GROUP:
            issues.append(BindingIssue(binding, "wrong_kind"))
        elif binding.expected is not None and node.kind is not binding.expected:
            issues.append(BindingIssue(binding, "wrong_kind"))
    if issues:
        logger.debug("Found %d binding issue(s)", len(issues))
    return issues


def assert_bindings(root: ir.ControlBase, items: Items) -> None:
    """
    Raise on the first unresolved or mistyped binding.

    Raises:
        MissingPath: If a referenced path does not exist
        WrongKind: If a referenced path holds another kind of node
    """
    issues = check_bindings(root, items)
    if issues:
        raise issues[0].to_error()

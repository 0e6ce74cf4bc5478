"""
Headless reference adapter.

Materializes control descriptors into plain ``HeadlessNode`` trees and wires
them to an item store: buttons and menu commands execute commands, check
entries toggle bools, enum entries select options and text boxes bind
two-way to string items. No layout or styling happens here; the nodes only
record what a platform adapter would create, which makes the binding
contract testable without a display.

Usage:
    renderer = HeadlessRenderer(items)
    surface = HeadlessSurface()
    surface.dock(renderer.instantiate(parse_ui(text)))
    surface.root.find_one("Button").click()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, assert_never

from samlui.core import ir
from samlui.core.items import CommandItem, EnumItem, ItemChanged, ItemKind, Items, StringItem

from .instance import ControlInstance

logger = logging.getLogger(__name__)

DEFAULT_BUTTON_TEXT = "Button"
DEFAULT_TAB_TEXT = "Tab"
DEFAULT_MENU_TEXT = "DropDown"
DEFAULT_LABEL_TEXT = "Label"
DEFAULT_CHECK_BOX_TEXT = "CheckBox"


@dataclass(eq=False)
class HeadlessNode:
    """A materialized visual node without a platform behind it."""

    kind: str
    text: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    children: list[HeadlessNode] = field(default_factory=list)
    on_click: Callable[[], None] | None = field(default=None, repr=False)
    on_input: Callable[[str], None] | None = field(default=None, repr=False)

    def append(self, child: HeadlessNode) -> HeadlessNode:
        self.children.append(child)
        return child

    def click(self) -> None:
        if self.on_click is not None:
            self.on_click()

    def input(self, text: str) -> None:
        """Simulate the user typing ``text`` into an input node."""
        self.properties["value"] = text
        if self.on_input is not None:
            self.on_input(text)

    def walk(self) -> Iterator[HeadlessNode]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, kind: str) -> list[HeadlessNode]:
        return [node for node in self.walk() if node.kind == kind]

    def find_one(self, kind: str) -> HeadlessNode:
        found = self.find(kind)
        if len(found) != 1:
            raise LookupError(f"Expected one {kind} node, found {len(found)}")
        return found[0]

    def find_text(self, text: str) -> HeadlessNode | None:
        for node in self.walk():
            if node.text == text:
                return node
        return None


class HeadlessInstance(ControlInstance[HeadlessNode]):
    """Control instance that materializes into ``HeadlessNode`` trees."""

    def __init__(self, descriptor: ir.ControlDescriptor, renderer: HeadlessRenderer):
        super().__init__(descriptor)
        self.renderer = renderer
        self._tab_buttons: list[HeadlessNode] = []
        self._tab_pages: list[HeadlessNode] = []

    @property
    def items(self) -> Items:
        return self.renderer.items

    def materialize(self) -> HeadlessNode:
        descriptor = self.descriptor
        match descriptor:
            case ir.LinearLayout():
                node = self._linear_layout(descriptor)
            case ir.GridLayout():
                node = self._grid_layout(descriptor)
            case ir.TabControl():
                node = self._tab_control(descriptor)
            case ir.MenuBar():
                node = self._menu_bar(descriptor)
            case ir.Button():
                node = self._button(descriptor)
            case ir.CheckBox():
                node = self._check_box(descriptor)
            case ir.TextBox():
                node = self._text_box(descriptor)
            case ir.Label():
                node = self._label(descriptor)
            case ir.Nothing():
                node = HeadlessNode("Nothing")
            case _:
                assert_never(descriptor)

        if descriptor.supports_margin and getattr(descriptor, "margin", None) is not None:
            node.properties["margin"] = descriptor.margin
        return node

    def detach(self) -> None:
        super().detach()
        self._tab_buttons.clear()
        self._tab_pages.clear()

    def _child(self, descriptor: ir.ControlDescriptor) -> HeadlessNode:
        return self.adopt(self.renderer.instantiate(descriptor))

    def _title_text(self, path: str | None, default: str) -> str:
        """Display text of the item at ``path``, or ``default`` when there is none."""
        if path is None:
            return default
        return self.items.get_item(path).display_text

    # -- layouts ------------------------------------------------------------

    def _linear_layout(self, layout: ir.LinearLayout) -> HeadlessNode:
        node = HeadlessNode("LinearLayout", properties={"direction": layout.direction.value})
        for child in layout.children:
            child_node = node.append(self._child(child.control))
            if child.weight is not None:
                child_node.properties["weight"] = child.weight
        return node

    def _grid_layout(self, layout: ir.GridLayout) -> HeadlessNode:
        node = HeadlessNode("GridLayout")
        for child in layout.children:
            child_node = node.append(self._child(child.control))
            child_node.properties.update(
                column=child.column_index,
                column_span=child.column_span,
                row=child.row_index,
                row_span=child.row_span,
            )
        return node

    def _tab_control(self, tab_control: ir.TabControl) -> HeadlessNode:
        node = HeadlessNode("TabControl")
        header = node.append(HeadlessNode("TabHeader"))
        area = node.append(HeadlessNode("TabArea"))

        for index, tab in enumerate(tab_control.tabs):
            selected = index == 0
            button = header.append(
                HeadlessNode(
                    "TabButton",
                    text=self._title_text(tab.title, DEFAULT_TAB_TEXT),
                    properties={"selected": selected},
                )
            )
            button.on_click = lambda index=index: self.select_tab(index)
            page = area.append(HeadlessNode("TabPage", properties={"visible": selected}))
            if tab.content is not None:
                page.append(self._child(tab.content))
            self._tab_buttons.append(button)
            self._tab_pages.append(page)
        return node

    def select_tab(self, index: int) -> None:
        if not self._tab_buttons:
            raise ValueError(f"{self.descriptor.kind} has no tabs to select")
        if not 0 <= index < len(self._tab_buttons):
            raise IndexError(f"Tab index {index} out of range")
        for position, (button, page) in enumerate(zip(self._tab_buttons, self._tab_pages)):
            button.properties["selected"] = position == index
            page.properties["visible"] = position == index

    # -- menus --------------------------------------------------------------

    def _menu_bar(self, menu_bar: ir.MenuBar) -> HeadlessNode:
        node = HeadlessNode("MenuBar")
        for menu in menu_bar.menus:
            menu_node = node.append(
                HeadlessNode("DropDownMenu", text=self._title_text(menu.title, DEFAULT_MENU_TEXT))
            )
            for entry in menu.entries:
                match entry:
                    case ir.CommandMenuEntry():
                        self._command_entry(menu_node, entry)
                    case ir.CheckMenuEntry():
                        self._check_entry(menu_node, entry)
                    case ir.EnumMenuEntry():
                        self._enum_entries(menu_node, entry)
                    case _:
                        assert_never(entry)
        return node

    def _command_entry(self, menu_node: HeadlessNode, entry: ir.CommandMenuEntry) -> None:
        command = self.items.get_command(entry.command)
        item_node = menu_node.append(HeadlessNode("MenuItem", text=command.display_text))
        item_node.on_click = lambda: self.renderer.execute(command)

    def _check_entry(self, menu_node: HeadlessNode, entry: ir.CheckMenuEntry) -> None:
        bool_item = self.items.get_bool(entry.bool_item)
        item_node = menu_node.append(
            HeadlessNode(
                "MenuItem",
                text=bool_item.display_text,
                properties={"checked": bool_item.value},
            )
        )
        item_node.on_click = bool_item.toggle

        def on_changed(event: ItemChanged) -> None:
            item_node.properties["checked"] = event.new_value

        self.watch(bool_item, on_changed)

    def _enum_entries(self, menu_node: HeadlessNode, entry: ir.EnumMenuEntry) -> None:
        enum_item = self.items.get_enum(entry.enum_item)
        option_nodes: list[HeadlessNode] = []
        for index, option in enumerate(enum_item.options):
            option_node = menu_node.append(
                HeadlessNode(
                    "MenuItem",
                    text=option.display_text,
                    properties={"checked": enum_item.value == index, "option": option.name},
                )
            )
            option_node.on_click = _selector(enum_item, index)
            option_nodes.append(option_node)

        def on_changed(event: ItemChanged) -> None:
            for index, option_node in enumerate(option_nodes):
                option_node.properties["checked"] = event.new_value == index

        self.watch(enum_item, on_changed)

    # -- leaf controls ------------------------------------------------------

    def _button(self, button: ir.Button) -> HeadlessNode:
        if button.command is None:
            return HeadlessNode("Button", text=DEFAULT_BUTTON_TEXT)
        command = self.items.get_command(button.command)
        node = HeadlessNode("Button", text=command.display_text)
        node.on_click = lambda: self.renderer.execute(command)
        return node

    def _check_box(self, check_box: ir.CheckBox) -> HeadlessNode:
        node = HeadlessNode("CheckBox", text=DEFAULT_CHECK_BOX_TEXT, properties={"checked": False})

        def on_click() -> None:
            node.properties["checked"] = not node.properties["checked"]

        node.on_click = on_click
        return node

    def _text_box(self, text_box: ir.TextBox) -> HeadlessNode:
        node = HeadlessNode("TextBox", properties={"multi_line": text_box.multi_line, "value": ""})
        if text_box.item is None:
            return node

        string_item = self.items.get_string(text_box.item)
        node.properties["value"] = string_item.value

        def on_input(text: str) -> None:
            if text != string_item.value:
                string_item.value = text

        def on_changed(event: ItemChanged) -> None:
            if node.properties["value"] != event.new_value:
                node.properties["value"] = event.new_value

        node.on_input = on_input
        self.watch(string_item, on_changed)
        return node

    def _label(self, label: ir.Label) -> HeadlessNode:
        if label.item is None:
            return HeadlessNode("Label", text=DEFAULT_LABEL_TEXT)

        item = self.items.get_item(label.item)
        if item.kind is not ItemKind.STRING:
            return HeadlessNode("Label", text=item.display_text)

        assert isinstance(item, StringItem)
        node = HeadlessNode("Label", text=item.value)

        def on_changed(event: ItemChanged) -> None:
            node.text = event.new_value

        self.watch(item, on_changed)
        return node


def _selector(enum_item: EnumItem, index: int) -> Callable[[], None]:
    def select() -> None:
        enum_item.value = index

    return select


class HeadlessRenderer:
    """Creates headless instances bound to one item store."""

    def __init__(self, items: Items):
        self.items = items

    def instantiate(self, descriptor: ir.ControlDescriptor) -> HeadlessInstance:
        return HeadlessInstance(descriptor, self)

    def render(self, descriptor: ir.ControlDescriptor) -> HeadlessInstance:
        """Instantiate and attach in one step."""
        instance = self.instantiate(descriptor)
        instance.attach()
        return instance

    def execute(self, command: CommandItem) -> None:
        if not command.bound:
            logger.warning("Command %s invoked but not bound", command.name)
        command.execute()


class HeadlessSurface:
    """A window-like host showing at most one attached instance."""

    def __init__(self) -> None:
        self.root: HeadlessNode | None = None
        self._content: HeadlessInstance | None = None

    @property
    def content(self) -> HeadlessInstance | None:
        return self._content

    def dock(self, instance: HeadlessInstance | None) -> None:
        """Replace the shown instance, detaching the previous one."""
        if instance is self._content:
            return
        if self._content is not None:
            self._content.detach()
            self.root = None
        if instance is not None:
            self.root = instance.attach()
        self._content = instance

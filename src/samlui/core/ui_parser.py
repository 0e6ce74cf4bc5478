"""
Control descriptor compiler.

Turns a generic document tree into a typed tree of control descriptors.
Every parse routine asserts the closed schema of its element (allowed
attribute and child element names, child counts) before reading any data,
so a malformed screen fails here, at the offending node, and never renders
a degraded layout. There is no partial-tree recovery.

Usage:
    from samlui.core.ui_parser import parse_ui

    control = parse_ui(text, source="main.sml")
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar, assert_never

from pydantic import BaseModel, ValidationError

from . import ir
from .errors import ErrorContext, UnsupportedVariant
from .sml import SmlDocument, SmlElement

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Elements accepted by every control that opts in to control properties
CONTROL_PROPERTY_ELEMENTS = ("Margin",)

MARGIN_ATTRIBUTES = ("Left", "Top", "Right", "Bottom")

DIRECTION_NAMES = tuple(direction.value for direction in ir.Direction)


class UiParser:
    """Recursive compiler from ``SmlElement`` trees to ``ir.ControlDescriptor`` trees."""

    def parse_control(self, element: SmlElement) -> ir.ControlDescriptor:
        """
        Dispatch on the element name.

        Raises:
            UnsupportedVariant: If the name is not a control element
            SchemaViolation: If the element or a descendant breaks its schema
        """
        try:
            kind = ir.ControlKind(element.name)
        except ValueError:
            raise UnsupportedVariant(
                f'Element "{element.name}" is not supported',
                element.name,
                ErrorContext(source=element.source, line=element.line, element_path=element.path),
            ) from None

        logger.debug("Parsing %s at line %s", kind.value, element.line)

        match kind:
            case ir.ControlKind.LINEAR_LAYOUT:
                return self.parse_linear_layout(element)
            case ir.ControlKind.GRID_LAYOUT:
                return self.parse_grid_layout(element)
            case ir.ControlKind.TAB_CONTROL:
                return self.parse_tab_control(element)
            case ir.ControlKind.MENU_BAR:
                return self.parse_menu_bar(element)
            case ir.ControlKind.BUTTON:
                return self.parse_button(element)
            case ir.ControlKind.CHECK_BOX:
                return self.parse_check_box(element)
            case ir.ControlKind.TEXT_BOX:
                return self.parse_text_box(element)
            case ir.ControlKind.LABEL:
                return self.parse_label(element)
            case ir.ControlKind.NOTHING:
                return self.parse_nothing(element)
            case _:
                assert_never(kind)

    # -- control properties -------------------------------------------------

    def parse_margin(self, element: SmlElement) -> ir.Thickness | None:
        margin_element = element.optional_element("Margin")
        if margin_element is None:
            return None
        margin_element.assure_attribute_names(MARGIN_ATTRIBUTES)
        margin_element.assure_no_elements()

        offsets: dict[str, float] = {}
        for name in MARGIN_ATTRIBUTES:
            attribute = margin_element.optional_attribute(name)
            if attribute is not None:
                offsets[name.lower()] = attribute.as_float()
        return ir.Thickness(**offsets)

    def parse_control_properties(self, element: SmlElement) -> dict[str, ir.Thickness | None]:
        """Keyword arguments shared by every control that supports a margin."""
        return {"margin": self.parse_margin(element)}

    def parse_single_child(self, element: SmlElement) -> ir.ControlDescriptor:
        """Parse the one and only child element of a wrapper like ``Child``."""
        element.assure_element_count(1)
        return self.parse_control(element.elements()[0])

    # -- layouts ------------------------------------------------------------

    def parse_linear_layout(self, element: SmlElement) -> ir.LinearLayout:
        element.assure_attribute_names(["Direction"])
        element.assure_element_names(["Child", *CONTROL_PROPERTY_ELEMENTS])

        direction = ir.Direction.HORIZONTAL
        direction_attribute = element.optional_attribute("Direction")
        if direction_attribute is not None:
            direction = list(ir.Direction)[direction_attribute.as_enum(DIRECTION_NAMES)]

        children: list[ir.LinearLayoutChild] = []
        for child_element in element.elements("Child"):
            child_element.assure_attribute_names(["Weight"])
            control = self.parse_single_child(child_element)

            weight: float | None = None
            weight_attribute = child_element.optional_attribute("Weight")
            if weight_attribute is not None:
                weight = weight_attribute.as_float()
            children.append(ir.LinearLayoutChild(control=control, weight=weight))

        return ir.LinearLayout(
            direction=direction,
            children=tuple(children),
            **self.parse_control_properties(element),
        )

    def parse_grid_layout(self, element: SmlElement) -> ir.GridLayout:
        element.assure_no_attributes()
        element.assure_element_names(["Child"])

        children: list[ir.GridLayoutChild] = []
        for child_element in element.elements("Child"):
            child_element.assure_attribute_names(["Column", "Row"])
            control = self.parse_single_child(child_element)

            column_attribute = child_element.required_attribute("Column")
            row_attribute = child_element.required_attribute("Row")
            column_attribute.assure_value_count_min_max(1, 2)
            row_attribute.assure_value_count_min_max(1, 2)

            column_index = column_attribute.get_int(0)
            column_span = column_attribute.get_int(1) if column_attribute.value_count == 2 else 1
            row_index = row_attribute.get_int(0)
            row_span = row_attribute.get_int(1) if row_attribute.value_count == 2 else 1

            children.append(
                self._build(
                    child_element,
                    ir.GridLayoutChild,
                    control=control,
                    column_index=column_index,
                    column_span=column_span,
                    row_index=row_index,
                    row_span=row_span,
                )
            )

        return ir.GridLayout(children=tuple(children))

    def parse_tab_control(self, element: SmlElement) -> ir.TabControl:
        element.assure_no_attributes()
        element.assure_element_names(["Tab"])

        tabs: list[ir.Tab] = []
        for tab_element in element.elements("Tab"):
            tab_element.assure_attribute_names(["Title"])
            tab_element.assure_element_names(["Content"])

            content: ir.ControlDescriptor | None = None
            content_element = tab_element.optional_element("Content")
            if content_element is not None:
                content_element.assure_no_attributes()
                content = self.parse_single_child(content_element)

            title: str | None = None
            title_attribute = tab_element.optional_attribute("Title")
            if title_attribute is not None:
                title = title_attribute.as_string()

            tabs.append(ir.Tab(title=title, content=content))

        return ir.TabControl(tabs=tuple(tabs))

    # -- menus --------------------------------------------------------------

    def parse_menu_bar(self, element: SmlElement) -> ir.MenuBar:
        element.assure_no_attributes()
        element.assure_element_names(["DropDownMenu"])

        menus: list[ir.DropDownMenu] = []
        for menu_element in element.elements("DropDownMenu"):
            menu_element.assure_attribute_names(["Item", "Command", "CheckItem", "Enum"])
            menu_element.assure_no_elements()

            title: str | None = None
            item_attribute = menu_element.optional_attribute("Item")
            if item_attribute is not None:
                title = item_attribute.as_string()

            # Attribute order is the top-to-bottom entry order
            entries: list[ir.MenuEntry] = []
            for attribute in menu_element.attributes():
                if attribute.has_name("Command"):
                    entries.append(ir.CommandMenuEntry(command=attribute.as_string()))
                elif attribute.has_name("CheckItem"):
                    entries.append(ir.CheckMenuEntry(bool_item=attribute.as_string()))
                elif attribute.has_name("Enum"):
                    entries.append(ir.EnumMenuEntry(enum_item=attribute.as_string()))

            menus.append(ir.DropDownMenu(title=title, entries=tuple(entries)))

        return ir.MenuBar(menus=tuple(menus))

    # -- leaf controls ------------------------------------------------------

    def parse_button(self, element: SmlElement) -> ir.Button:
        element.assure_attribute_names(["Command"])
        element.assure_element_names(CONTROL_PROPERTY_ELEMENTS)

        command: str | None = None
        command_attribute = element.optional_attribute("Command")
        if command_attribute is not None:
            command = command_attribute.as_string()

        return ir.Button(command=command, **self.parse_control_properties(element))

    def parse_check_box(self, element: SmlElement) -> ir.CheckBox:
        element.assure_no_attributes()
        element.assure_element_names(CONTROL_PROPERTY_ELEMENTS)
        return ir.CheckBox(**self.parse_control_properties(element))

    def parse_text_box(self, element: SmlElement) -> ir.TextBox:
        element.assure_attribute_names(["MultiLine", "Item"])
        element.assure_no_elements()

        multi_line = False
        multi_line_attribute = element.optional_attribute("MultiLine")
        if multi_line_attribute is not None:
            multi_line = multi_line_attribute.as_bool()

        item: str | None = None
        item_attribute = element.optional_attribute("Item")
        if item_attribute is not None:
            item = item_attribute.as_string()

        return ir.TextBox(multi_line=multi_line, item=item)

    def parse_label(self, element: SmlElement) -> ir.Label:
        element.assure_no_elements()
        element.assure_attribute_names(["Item"])

        item: str | None = None
        item_attribute = element.optional_attribute("Item")
        if item_attribute is not None:
            item = item_attribute.as_string()

        return ir.Label(item=item)

    def parse_nothing(self, element: SmlElement) -> ir.Nothing:
        element.assure_no_attributes()
        element.assure_no_elements()
        return ir.Nothing()

    # -- helpers ------------------------------------------------------------

    @staticmethod
    def _build(element: SmlElement, model: type[ModelT], **values: Any) -> ModelT:
        """Construct an IR model, reporting field constraint failures at ``element``."""
        try:
            return model(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}" for error in e.errors()
            )
            raise element.schema_violation(f"Invalid {element.name}: {problems}") from None

    @classmethod
    def parse(cls, text: str, source: str | None = None) -> ir.ControlDescriptor:
        """Parse document text whose root element is a control."""
        document = SmlDocument.parse(text, source=source)
        return cls().parse_control(document.root)


def parse_control(element: SmlElement) -> ir.ControlDescriptor:
    """Compile an already parsed element into a control descriptor."""
    return UiParser().parse_control(element)


def parse_ui(text: str, source: str | None = None) -> ir.ControlDescriptor:
    """Compile control document text into a control descriptor."""
    return UiParser.parse(text, source=source)

"""
Control descriptor types for samlui IR.

A compiled screen is an immutable tree of control descriptors. Each variant
carries a ``kind`` tag and only the fields relevant to it; item references
are kept as path strings and resolved later by a rendering adapter.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Kinds
# =============================================================================


class ControlKind(str, Enum):
    """Closed set of control variants; values are the document element names."""

    LINEAR_LAYOUT = "LinearLayout"
    GRID_LAYOUT = "GridLayout"
    TAB_CONTROL = "TabControl"
    MENU_BAR = "MenuBar"
    BUTTON = "Button"
    CHECK_BOX = "CheckBox"
    TEXT_BOX = "TextBox"
    LABEL = "Label"
    NOTHING = "Nothing"


class Direction(str, Enum):
    """Stacking direction of a linear layout; declaration order is the ordinal."""

    HORIZONTAL = "Horizontal"
    VERTICAL = "Vertical"


class Thickness(BaseModel):
    """
    Offsets around a control.

    Example:
        Thickness(left=4, top=2)
        Thickness.uniform(8)
    """

    model_config = ConfigDict(frozen=True)

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> Thickness:
        return cls(left=value, top=value, right=value, bottom=value)


# =============================================================================
# Control base
# =============================================================================


class ControlBase(BaseModel):
    """Shared configuration of all control descriptors."""

    model_config = ConfigDict(frozen=True)

    supports_margin: ClassVar[bool] = False

    def child_controls(self) -> tuple[ControlDescriptor, ...]:
        """Direct child descriptors in declaration order."""
        return ()


class MarginControl(ControlBase):
    """Base for variants that accept a ``Margin`` element."""

    supports_margin: ClassVar[bool] = True

    margin: Thickness | None = Field(default=None, description="Optional outer margin")


# =============================================================================
# Layouts
# =============================================================================


class LinearLayoutChild(BaseModel):
    model_config = ConfigDict(frozen=True)

    control: ControlDescriptor
    weight: float | None = None


class LinearLayout(MarginControl):
    """
    Children stacked in one direction.

    Example:
        LinearLayout(direction=Direction.VERTICAL, children=(LinearLayoutChild(control=Nothing()),))
    """

    kind: Literal["LinearLayout"] = "LinearLayout"
    direction: Direction = Direction.HORIZONTAL
    children: tuple[LinearLayoutChild, ...] = ()

    @property
    def vertical(self) -> bool:
        return self.direction is Direction.VERTICAL

    def child_controls(self) -> tuple[ControlDescriptor, ...]:
        return tuple(child.control for child in self.children)


class GridLayoutChild(BaseModel):
    """A control placed at a zero-based cell, spanning one or more cells."""

    model_config = ConfigDict(frozen=True)

    control: ControlDescriptor
    column_index: int = Field(ge=0)
    column_span: int = Field(default=1, ge=1)
    row_index: int = Field(ge=0)
    row_span: int = Field(default=1, ge=1)


class GridLayout(ControlBase):
    kind: Literal["GridLayout"] = "GridLayout"
    children: tuple[GridLayoutChild, ...] = ()

    def child_controls(self) -> tuple[ControlDescriptor, ...]:
        return tuple(child.control for child in self.children)


class Tab(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str | None = Field(default=None, description="Path of the item shown as the tab title")
    content: ControlDescriptor | None = None


class TabControl(ControlBase):
    kind: Literal["TabControl"] = "TabControl"
    tabs: tuple[Tab, ...] = ()

    def child_controls(self) -> tuple[ControlDescriptor, ...]:
        return tuple(tab.content for tab in self.tabs if tab.content is not None)


# =============================================================================
# Menus
# =============================================================================


class CommandMenuEntry(BaseModel):
    """Runs the command item at ``command``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["command"] = "command"
    command: str


class CheckMenuEntry(BaseModel):
    """Toggles the bool item at ``bool_item``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["check"] = "check"
    bool_item: str


class EnumMenuEntry(BaseModel):
    """Expands to one radio entry per option of the enum item at ``enum_item``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    enum_item: str


MenuEntry = Annotated[
    CommandMenuEntry | CheckMenuEntry | EnumMenuEntry,
    Field(discriminator="kind"),
]


class DropDownMenu(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str | None = Field(default=None, description="Path of the item shown as the menu title")
    entries: tuple[MenuEntry, ...] = ()


class MenuBar(ControlBase):
    kind: Literal["MenuBar"] = "MenuBar"
    menus: tuple[DropDownMenu, ...] = ()


# =============================================================================
# Leaf controls
# =============================================================================


class Button(MarginControl):
    kind: Literal["Button"] = "Button"
    command: str | None = Field(default=None, description="Command item path")


class CheckBox(MarginControl):
    kind: Literal["CheckBox"] = "CheckBox"


class TextBox(ControlBase):
    kind: Literal["TextBox"] = "TextBox"
    multi_line: bool = False
    item: str | None = Field(default=None, description="String item path")


class Label(ControlBase):
    kind: Literal["Label"] = "Label"
    item: str | None = Field(default=None, description="Item path")


class Nothing(ControlBase):
    """Placeholder that renders nothing."""

    kind: Literal["Nothing"] = "Nothing"


# Union type for all control descriptors
ControlDescriptor = Annotated[
    LinearLayout
    | GridLayout
    | TabControl
    | MenuBar
    | Button
    | CheckBox
    | TextBox
    | Label
    | Nothing,
    Field(discriminator="kind"),
]


class ControlTree(BaseModel):
    """Wrapper used to validate or dump a descriptor tree as a whole."""

    model_config = ConfigDict(frozen=True)

    root: ControlDescriptor


# Update forward references
LinearLayoutChild.model_rebuild()
LinearLayout.model_rebuild()
GridLayoutChild.model_rebuild()
GridLayout.model_rebuild()
Tab.model_rebuild()
TabControl.model_rebuild()
ControlTree.model_rebuild()


def iter_controls(root: ControlBase) -> Iterator[ControlBase]:
    """Yield ``root`` and all descendant descriptors, depth first."""
    yield root
    for child in root.child_controls():
        yield from iter_controls(child)

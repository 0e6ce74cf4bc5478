"""
samlui Internal Representation (IR).

Typed, immutable descriptors produced by the control compiler and consumed by
rendering adapters.
"""

from .controls import (
    Button,
    CheckBox,
    CheckMenuEntry,
    CommandMenuEntry,
    ControlBase,
    ControlDescriptor,
    ControlKind,
    ControlTree,
    Direction,
    DropDownMenu,
    EnumMenuEntry,
    GridLayout,
    GridLayoutChild,
    Label,
    LinearLayout,
    LinearLayoutChild,
    MarginControl,
    MenuBar,
    MenuEntry,
    Nothing,
    Tab,
    TabControl,
    TextBox,
    Thickness,
    iter_controls,
)

__all__ = [
    # Kinds
    "ControlKind",
    "Direction",
    # Base types
    "ControlBase",
    "ControlDescriptor",
    "ControlTree",
    "MarginControl",
    "Thickness",
    # Layouts
    "GridLayout",
    "GridLayoutChild",
    "LinearLayout",
    "LinearLayoutChild",
    "Tab",
    "TabControl",
    # Menus
    "CheckMenuEntry",
    "CommandMenuEntry",
    "DropDownMenu",
    "EnumMenuEntry",
    "MenuBar",
    "MenuEntry",
    # Leaf controls
    "Button",
    "CheckBox",
    "Label",
    "Nothing",
    "TextBox",
    # Traversal
    "iter_controls",
]

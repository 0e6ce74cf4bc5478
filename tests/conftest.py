"""Shared pytest fixtures for samlui tests."""

import pytest

from samlui.core import ir
from samlui.core.items import Items
from samlui.core.items_loader import parse_items
from samlui.core.ui_parser import parse_ui

ITEMS_TEXT = """\
Items
    Open Command "Open file"
    Quit Command
    UserName String "User name"
    WordWrap Bool "Word wrap"
    Theme Enum "Theme"
    * Light "Light theme"
    * Dark "Dark theme"
    File Item "File"
    Editor Item "Editor"
    Preview Item "Preview"
    View
        ShowGrid Bool "Show grid" "Draw the layout grid"
    End
End
"""

SCREEN_TEXT = """\
# Main window
LinearLayout
    Direction Vertical
    Child
        MenuBar
            DropDownMenu
                Item File
                Command Open
                CheckItem WordWrap
                Enum Theme
                Command Quit
            End
        End
    End
    Child
        Weight 1
        TabControl
            Tab
                Title Editor
                Content
                    TextBox
                        MultiLine true
                        Item UserName
                    End
                End
            End
            Tab
                Title Preview
                Content
                    Label
                        Item UserName
                    End
                End
            End
        End
    End
    Child
        Button
            Command Open
            Margin
                Left 4
                Top 2
            End
        End
    End
End
"""


@pytest.fixture
def items_text() -> str:
    """Return the sample Items document."""
    return ITEMS_TEXT


@pytest.fixture
def screen_text() -> str:
    """Return the sample screen document."""
    return SCREEN_TEXT


@pytest.fixture
def items() -> Items:
    """Return a freshly loaded sample item store."""
    return parse_items(ITEMS_TEXT, source="items.sml")


@pytest.fixture
def screen() -> ir.ControlDescriptor:
    """Return the compiled sample screen."""
    return parse_ui(SCREEN_TEXT, source="main.sml")

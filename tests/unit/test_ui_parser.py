"""Tests for the control descriptor compiler."""

import pytest

from samlui.core import ir
from samlui.core.errors import SchemaViolation, UnsupportedVariant
from samlui.core.sml import parse_document
from samlui.core.ui_parser import UiParser, parse_control, parse_ui


def _grid_child(column: str | None, row: str | None = "0") -> ir.GridLayoutChild:
    lines = ["GridLayout", "  Child"]
    if column is not None:
        lines.append(f"    Column {column}")
    if row is not None:
        lines.append(f"    Row {row}")
    lines += ["    Nothing", "    End", "  End", "End"]
    grid = parse_ui("\n".join(lines))
    assert isinstance(grid, ir.GridLayout)
    return grid.children[0]


class TestDispatch:
    """Tests for element name dispatch."""

    def test_unsupported_element(self) -> None:
        """Unknown element names raise UnsupportedVariant naming the element."""
        with pytest.raises(UnsupportedVariant, match='"Foo"') as exc_info:
            parse_ui("Foo\nEnd\n", source="main.sml")
        assert exc_info.value.variant == "Foo"
        assert exc_info.value.context.line == 1

    def test_nested_unsupported_element(self) -> None:
        """Unknown nested controls fail the whole parse with their path."""
        text = "LinearLayout\n  Child\n    Slider\n    End\n  End\nEnd\n"
        with pytest.raises(UnsupportedVariant) as exc_info:
            parse_ui(text)
        assert exc_info.value.context.element_path == "LinearLayout/Child/Slider"

    def test_element_names_are_case_sensitive(self) -> None:
        """Control names must match exactly."""
        with pytest.raises(UnsupportedVariant):
            parse_ui("button\nEnd\n")

    def test_parse_control_on_element(self) -> None:
        """parse_control compiles an already parsed element."""
        root = parse_document("Nothing\nEnd\n").root
        assert parse_control(root) == ir.Nothing()
        assert UiParser().parse_control(root).kind == "Nothing"

    def test_sample_screen(self, screen: ir.ControlDescriptor) -> None:
        """The sample screen compiles to the expected shape."""
        assert isinstance(screen, ir.LinearLayout)
        assert screen.vertical
        kinds = [child.control.kind for child in screen.children]
        assert kinds == ["MenuBar", "TabControl", "Button"]
        assert screen.children[1].weight == 1.0


class TestLinearLayout:
    """Tests for LinearLayout."""

    def test_defaults(self) -> None:
        """Direction defaults to Horizontal, weights and margin to None."""
        layout = parse_ui("LinearLayout\n  Child\n    Nothing\n    End\n  End\nEnd\n")
        assert layout.direction is ir.Direction.HORIZONTAL
        assert layout.children[0].weight is None
        assert layout.margin is None

    def test_invalid_direction(self) -> None:
        """Direction only accepts Horizontal or Vertical."""
        with pytest.raises(SchemaViolation, match="must be one of"):
            parse_ui("LinearLayout\n  Direction Diagonal\nEnd\n")

    def test_child_needs_exactly_one_control(self) -> None:
        """Child wraps exactly one control."""
        text = "LinearLayout\n  Child\n    Nothing\n    End\n    Nothing\n    End\n  End\nEnd\n"
        with pytest.raises(SchemaViolation, match="must have 1 child element"):
            parse_ui(text)

    def test_unknown_child_attribute(self) -> None:
        """Child accepts only Weight."""
        text = "LinearLayout\n  Child\n    Span 2\n    Nothing\n    End\n  End\nEnd\n"
        with pytest.raises(SchemaViolation, match='does not support attribute "Span"'):
            parse_ui(text)

    def test_margin(self) -> None:
        """Margin offsets default to zero."""
        layout = parse_ui("LinearLayout\n  Margin\n    Right 3\n  End\nEnd\n")
        assert layout.margin == ir.Thickness(right=3)


class TestGridLayout:
    """Tests for GridLayout cells."""

    def test_column_with_span(self) -> None:
        """Column 2 3 gives index 2 and span 3."""
        child = _grid_child("2 3")
        assert (child.column_index, child.column_span) == (2, 3)

    def test_column_without_span(self) -> None:
        """Column 2 gives index 2 and span 1."""
        child = _grid_child("2", row="1 2")
        assert (child.column_index, child.column_span) == (2, 1)
        assert (child.row_index, child.row_span) == (1, 2)

    def test_missing_column(self) -> None:
        """Column is required."""
        with pytest.raises(SchemaViolation, match='requires attribute "Column"'):
            _grid_child(None)

    def test_missing_row(self) -> None:
        """Row is required."""
        with pytest.raises(SchemaViolation, match='requires attribute "Row"'):
            _grid_child("0", row=None)

    def test_too_many_values(self) -> None:
        """Column takes index and span only."""
        with pytest.raises(SchemaViolation, match="1..2 values"):
            _grid_child("1 2 3")

    def test_negative_index(self) -> None:
        """Indexes must not be negative."""
        with pytest.raises(SchemaViolation, match="Invalid Child"):
            _grid_child("-1")

    def test_zero_span(self) -> None:
        """Spans must be at least one."""
        with pytest.raises(SchemaViolation, match="Invalid Child"):
            _grid_child("0 0")

    def test_no_attributes(self) -> None:
        """GridLayout itself has no attributes."""
        with pytest.raises(SchemaViolation, match="must not have attributes"):
            parse_ui("GridLayout\n  Columns 3\nEnd\n")


class TestTabControl:
    """Tests for TabControl."""

    def test_tab_without_content(self) -> None:
        """A tab without Content has no content."""
        text = (
            "TabControl\n"
            "  Tab\n    Title First\n  End\n"
            "  Tab\n    Content\n      Label\n      End\n    End\n  End\n"
            "End\n"
        )
        tabs = parse_ui(text).tabs
        assert len(tabs) == 2
        assert tabs[0].title == "First" and tabs[0].content is None
        assert tabs[1].title is None and tabs[1].content == ir.Label()

    def test_empty_content(self) -> None:
        """Content must hold exactly one control."""
        with pytest.raises(SchemaViolation, match="must have 1 child element"):
            parse_ui("TabControl\n  Tab\n    Content\n    End\n  End\nEnd\n")

    def test_content_with_attribute(self) -> None:
        """Content takes no attributes."""
        text = "TabControl\n  Tab\n    Content\n      Padding 2\n      Nothing\n      End\n    End\n  End\nEnd\n"
        with pytest.raises(SchemaViolation, match="must not have attributes"):
            parse_ui(text)

    def test_child_controls(self, screen: ir.ControlDescriptor) -> None:
        """child_controls skips tabs without content."""
        tab_control = screen.children[1].control
        assert [c.kind for c in tab_control.child_controls()] == ["TextBox", "Label"]


class TestMenuBar:
    """Tests for MenuBar entries."""

    def test_entries_keep_attribute_order(self, screen: ir.ControlDescriptor) -> None:
        """Entries appear in declaration order with their variant."""
        menu = screen.children[0].control.menus[0]
        assert menu.title == "File"
        assert menu.entries == (
            ir.CommandMenuEntry(command="Open"),
            ir.CheckMenuEntry(bool_item="WordWrap"),
            ir.EnumMenuEntry(enum_item="Theme"),
            ir.CommandMenuEntry(command="Quit"),
        )

    def test_unknown_entry(self) -> None:
        """DropDownMenu accepts only Item, Command, CheckItem and Enum."""
        with pytest.raises(SchemaViolation, match='does not support attribute "Radio"'):
            parse_ui("MenuBar\n  DropDownMenu\n    Radio Mode\n  End\nEnd\n")

    def test_menu_without_title(self) -> None:
        """Item is optional."""
        menu_bar = parse_ui("MenuBar\n  DropDownMenu\n    Command Open\n  End\nEnd\n")
        assert menu_bar.menus[0].title is None


class TestLeafControls:
    """Tests for Button, CheckBox, TextBox, Label and Nothing."""

    def test_button(self, screen: ir.ControlDescriptor) -> None:
        """Button keeps its command path and margin."""
        button = screen.children[2].control
        assert button.command == "Open"
        assert button.margin == ir.Thickness(left=4, top=2)

    def test_button_without_command(self) -> None:
        """Command is optional."""
        assert parse_ui("Button\nEnd\n") == ir.Button()

    def test_margin_rejects_unknown_offsets(self) -> None:
        """Margin allows only Left, Top, Right and Bottom."""
        with pytest.raises(SchemaViolation, match='does not support attribute "Middle"'):
            parse_ui("Button\n  Margin\n    Middle 1\n  End\nEnd\n")

    def test_check_box(self) -> None:
        """CheckBox supports only a margin."""
        assert parse_ui("CheckBox\n  Margin\n    Bottom 1\n  End\nEnd\n").margin == ir.Thickness(bottom=1)
        with pytest.raises(SchemaViolation):
            parse_ui("CheckBox\n  Item Flag\nEnd\n")

    def test_text_box(self, screen: ir.ControlDescriptor) -> None:
        """TextBox reads MultiLine and Item."""
        text_box = screen.children[1].control.tabs[0].content
        assert text_box == ir.TextBox(multi_line=True, item="UserName")
        assert parse_ui("TextBox\nEnd\n").multi_line is False

    def test_text_box_has_no_margin(self) -> None:
        """TextBox takes no child elements."""
        with pytest.raises(SchemaViolation, match="must not have child elements"):
            parse_ui("TextBox\n  Margin\n  End\nEnd\n")

    def test_label_rejects_other_attributes(self) -> None:
        """Label accepts only Item."""
        with pytest.raises(SchemaViolation, match='does not support attribute "Text"') as exc_info:
            parse_ui("LinearLayout\n  Child\n    Label\n      Text Hello\n    End\n  End\nEnd\n")
        assert exc_info.value.context.element_path == "LinearLayout/Child/Label/Text"

    def test_label_rejects_children(self) -> None:
        """Label has no child elements."""
        with pytest.raises(SchemaViolation, match="must not have child elements"):
            parse_ui("Label\n  Nothing\n  End\nEnd\n")

    def test_nothing(self) -> None:
        """Nothing takes no attributes or elements."""
        assert parse_ui("Nothing\nEnd\n") == ir.Nothing()
        with pytest.raises(SchemaViolation):
            parse_ui("Nothing\n  Size 1\nEnd\n")

"""Tests for control descriptor types."""

import pytest
from pydantic import ValidationError

from samlui.core import ir


class TestDescriptors:
    """Tests for the immutable descriptor models."""

    def test_descriptors_are_frozen(self) -> None:
        """Descriptors cannot be modified after construction."""
        button = ir.Button(command="Open")
        with pytest.raises(ValidationError):
            button.command = "Close"

    def test_margin_support(self) -> None:
        """Only LinearLayout, Button and CheckBox carry a margin."""
        supported = {
            kind.value
            for kind, model in [
                (ir.ControlKind.LINEAR_LAYOUT, ir.LinearLayout),
                (ir.ControlKind.GRID_LAYOUT, ir.GridLayout),
                (ir.ControlKind.TAB_CONTROL, ir.TabControl),
                (ir.ControlKind.MENU_BAR, ir.MenuBar),
                (ir.ControlKind.BUTTON, ir.Button),
                (ir.ControlKind.CHECK_BOX, ir.CheckBox),
                (ir.ControlKind.TEXT_BOX, ir.TextBox),
                (ir.ControlKind.LABEL, ir.Label),
                (ir.ControlKind.NOTHING, ir.Nothing),
            ]
            if model.supports_margin
        }
        assert supported == {"LinearLayout", "Button", "CheckBox"}

    def test_uniform_thickness(self) -> None:
        """uniform sets all four offsets."""
        assert ir.Thickness.uniform(2) == ir.Thickness(left=2, top=2, right=2, bottom=2)

    def test_grid_child_constraints(self) -> None:
        """Grid indexes are >= 0 and spans >= 1."""
        with pytest.raises(ValidationError):
            ir.GridLayoutChild(control=ir.Nothing(), column_index=0, row_index=0, row_span=0)
        child = ir.GridLayoutChild(control=ir.Nothing(), column_index=1, row_index=2)
        assert (child.column_span, child.row_span) == (1, 1)


class TestControlTree:
    """Tests for walking and dumping descriptor trees."""

    def test_iter_controls_depth_first(self, screen: ir.ControlDescriptor) -> None:
        """iter_controls yields parents before children in declaration order."""
        kinds = [control.kind for control in ir.iter_controls(screen)]
        assert kinds == ["LinearLayout", "MenuBar", "TabControl", "TextBox", "Label", "Button"]

    def test_dump_and_validate(self, screen: ir.ControlDescriptor) -> None:
        """A dumped tree validates back into an equal tree."""
        tree = ir.ControlTree(root=screen)
        data = tree.model_dump(mode="json")
        assert data["root"]["kind"] == "LinearLayout"
        assert data["root"]["children"][0]["control"]["menus"][0]["entries"][1] == {
            "kind": "check",
            "bool_item": "WordWrap",
        }
        assert ir.ControlTree.model_validate(data) == tree

    def test_json_round_trip(self, screen: ir.ControlDescriptor) -> None:
        """JSON output selects variants by their kind tag."""
        tree = ir.ControlTree(root=screen)
        restored = ir.ControlTree.model_validate_json(tree.model_dump_json())
        assert isinstance(restored.root.children[2].control, ir.Button)

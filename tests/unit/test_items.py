"""Tests for the observable item store."""

import pytest

from samlui.core.errors import DuplicateName, InvalidName, MissingPath, UnboundCommand, WrongKind
from samlui.core.items import (
    BoolItem,
    CommandItem,
    EnumItem,
    ItemChanged,
    ItemGroup,
    ItemKind,
    Items,
    StringItem,
)


class TestItemGroup:
    """Tests for the ordered, case-insensitive group."""

    def test_duplicate_name_differing_by_case(self) -> None:
        """Names that only differ by case collide."""
        group = ItemGroup("Items")
        group.add_command("Foo")
        with pytest.raises(DuplicateName, match='already contains a node with name "foo"') as exc_info:
            group.add_string("foo")
        assert exc_info.value.name == "foo"
        assert len(group) == 1

    def test_lookup_is_case_insensitive(self) -> None:
        """Lookups ignore case but keep the declared name."""
        group = ItemGroup("Items")
        group.add_bool("WordWrap")
        node = group.get("wordwrap")
        assert node.name == "WordWrap"
        assert "WORDWRAP" in group

    def test_declaration_order(self) -> None:
        """Children iterate in insertion order."""
        group = ItemGroup("Items")
        group.add_string("B")
        group.add_group("A")
        group.add_command("C")
        assert [node.name for node in group] == ["B", "A", "C"]
        assert [g.name for g in group.groups()] == ["A"]
        assert [i.name for i in group.items()] == ["B", "C"]

    def test_kind_tags(self) -> None:
        """Groups and items are told apart by their kind tag."""
        group = ItemGroup("Items")
        sub = group.add_group("Sub")
        item = group.add_enum("Mode")
        assert sub.is_group and sub.kind is ItemKind.GROUP
        assert not item.is_group and item.kind is ItemKind.ENUM
        assert group.has_group("sub") and not group.has_item("sub")
        assert group.has_item("mode") and not group.has_group("mode")

    def test_get_item_on_group_is_wrong_kind(self) -> None:
        """Asking a group for an item that is a group fails."""
        group = ItemGroup("Items")
        group.add_group("Sub")
        with pytest.raises(WrongKind):
            group.get_item("Sub")
        assert group.get_item_or_none("Sub") is None

    def test_missing_child(self) -> None:
        """Unknown names raise MissingPath."""
        with pytest.raises(MissingPath, match='has no node with name "Nope"'):
            ItemGroup("Items").get("Nope")

    @pytest.mark.parametrize("name", ["", "two words", "a-b", "a.b", "a:b"])
    def test_invalid_names(self, name: str) -> None:
        """Names must be identifiers."""
        with pytest.raises(InvalidName):
            StringItem(name)


class TestValueItems:
    """Tests for change notification on value items."""

    def test_same_value_does_not_notify(self) -> None:
        """Assigning the current value is a no-op."""
        item = StringItem("Name")
        events: list[ItemChanged] = []
        item.subscribe(events.append)
        item.value = ""
        assert events == []

    def test_new_value_notifies_once_in_registration_order(self) -> None:
        """Every subscriber runs once, in the order it subscribed."""
        item = StringItem("Name")
        calls: list[str] = []
        item.subscribe(lambda event: calls.append("first"))
        item.subscribe(lambda event: calls.append("second"))
        item.value = "Ada"
        assert calls == ["first", "second"]

    def test_event_payload(self) -> None:
        """Events carry the item and both values."""
        item = StringItem("Name")
        events: list[ItemChanged] = []
        item.subscribe(events.append)
        item.value = "Ada"
        item.value = "Grace"
        assert [(e.old_value, e.new_value) for e in events] == [("", "Ada"), ("Ada", "Grace")]
        assert events[0].item is item

    def test_cancel_subscription(self) -> None:
        """Cancelled subscriptions stop receiving events; cancelling twice is fine."""
        item = BoolItem("Flag")
        calls: list[bool] = []
        subscription = item.subscribe(lambda event: calls.append(event.new_value))
        item.value = True
        subscription.cancel()
        subscription.cancel()
        item.value = False
        assert calls == [True]
        assert not subscription.active
        assert len(item.changed) == 0

    def test_removal_is_by_handle(self) -> None:
        """The same callback subscribed twice is removed one handle at a time."""
        item = BoolItem("Flag")
        calls: list[bool] = []
        first = item.subscribe(calls.append)
        item.subscribe(calls.append)
        first.cancel()
        item.toggle()
        assert len(calls) == 1

    def test_cancel_during_notification(self) -> None:
        """A subscriber may cancel a later one while being notified."""
        item = StringItem("Name")
        calls: list[str] = []
        later = None

        def first(event: ItemChanged) -> None:
            calls.append("first")
            later.cancel()

        item.subscribe(first)
        later = item.subscribe(lambda event: calls.append("later"))
        item.value = "x"
        assert calls == ["first"]

    def test_bool_toggle(self) -> None:
        """toggle flips the value and notifies."""
        item = BoolItem("Flag")
        events: list[ItemChanged] = []
        item.subscribe(events.append)
        item.toggle()
        assert item.value is True
        assert len(events) == 1

    def test_value_type_is_checked(self) -> None:
        """String and bool items reject values of another type without notifying."""
        text = StringItem("Name")
        flag = BoolItem("Flag")
        events: list[ItemChanged] = []
        text.subscribe(events.append)
        flag.subscribe(events.append)
        with pytest.raises(TypeError, match='String "Name" cannot hold int'):
            text.value = 5
        with pytest.raises(TypeError, match='Bool "Flag" cannot hold str'):
            flag.value = "yes"
        assert (text.value, flag.value) == ("", False)
        assert events == []


class TestEnumItem:
    """Tests for enumeration items and their options."""

    def test_options_are_qualified(self) -> None:
        """Options are named <enum>:<id> and keep their order."""
        item = EnumItem("Theme")
        item.add_option("Light", "Light theme")
        item.add_option("Dark")
        assert [o.name for o in item.options] == ["Theme:Light", "Theme:Dark"]
        assert [o.display_text for o in item.options] == ["Light theme", "Theme:Dark"]

    def test_option_id_is_plain_name(self) -> None:
        """Option ids may not contain the separator themselves."""
        item = EnumItem("Theme")
        with pytest.raises(InvalidName):
            item.add_option("Light:High")
        assert item.add_option("Light", separator="/").name == "Theme/Light"

    def test_selected_option(self) -> None:
        """The selection index picks an option."""
        item = EnumItem("Theme")
        item.add_option("Light")
        item.add_option("Dark")
        item.value = 1
        assert item.selected_option is item.options[1]

    def test_index_out_of_range(self) -> None:
        """Indexes outside the options are rejected when options exist."""
        item = EnumItem("Theme")
        item.add_option("Light")
        with pytest.raises(ValueError, match="out of range"):
            item.value = 3
        assert item.value == 0

    def test_without_options_any_index(self) -> None:
        """An enum without options accepts any index."""
        item = EnumItem("Mode")
        item.value = 5
        assert item.value == 5
        assert item.selected_option is None


class TestCommandItem:
    """Tests for command items."""

    def test_execute_unbound(self) -> None:
        """Executing an unbound command raises UnboundCommand."""
        with pytest.raises(UnboundCommand, match='Command "Open" is not bound'):
            CommandItem("Open").execute()

    def test_execute_bound(self) -> None:
        """Bound actions run on execute."""
        command = CommandItem("Open")
        calls: list[str] = []
        command.action = lambda: calls.append("open")
        command.execute()
        assert calls == ["open"]


class TestItems:
    """Tests for path based access through the root."""

    def test_typed_getters(self, items: Items) -> None:
        """Each getter returns the node of its kind."""
        assert isinstance(items.get_string("UserName"), StringItem)
        assert isinstance(items.get_bool("WordWrap"), BoolItem)
        assert isinstance(items.get_enum("Theme"), EnumItem)
        assert isinstance(items.get_command("Open"), CommandItem)
        assert items.get_group("View").name == "View"

    def test_dotted_paths(self, items: Items) -> None:
        """Dotted paths walk nested groups, case-insensitively."""
        assert items.get_bool("View.ShowGrid").title == "Show grid"
        assert items.get_bool("view.showgrid").name == "ShowGrid"
        assert items.resolve("UserName.Anything") is None

    def test_missing_path(self, items: Items) -> None:
        """Unknown paths raise MissingPath naming the wanted kind."""
        with pytest.raises(MissingPath, match='Does not contain a string with path "Nope"') as exc_info:
            items.get_string("Nope")
        assert exc_info.value.path == "Nope"

    def test_wrong_kind(self, items: Items) -> None:
        """Paths to another kind raise WrongKind naming what was found."""
        with pytest.raises(WrongKind, match=r"Does not contain an enum with path \"Open\" \(found a command\)"):
            items.get_enum("Open")
        with pytest.raises(WrongKind, match="found a group"):
            items.get_item("View")

    def test_bind_command(self, items: Items) -> None:
        """Binding attaches the action; rebinding replaces it."""
        calls: list[str] = []
        items.bind_command("Open", lambda: calls.append("first"))
        items.bind_command("Open", lambda: calls.append("second"))
        items.get_command("Open").execute()
        assert calls == ["second"]

    def test_bind_command_wrong_kind(self, items: Items) -> None:
        """Only command items can be bound."""
        with pytest.raises(WrongKind):
            items.bind_command("UserName", lambda: None)

    def test_walk(self, items: Items) -> None:
        """walk yields dotted paths depth first."""
        paths = [path for path, _ in items.walk()]
        assert paths == [
            "Open",
            "Quit",
            "UserName",
            "WordWrap",
            "Theme",
            "File",
            "Editor",
            "Preview",
            "View",
            "View.ShowGrid",
        ]

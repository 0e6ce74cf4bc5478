"""
Hierarchical, observable item store.

Items are the named state a screen binds to: strings, bools, enumerations
and commands, arranged in groups. Controls reference items by path string
(``"File.Open"``), never by object, so the store and the screens can be
authored and validated independently.

Every node carries an ``ItemKind`` tag and all typed lookups compare tags.
Value items notify their subscribers synchronously, in registration order,
and only when the assigned value differs from the current one. A subscriber
that assigns the same item again re-enters that check; nothing guards
against the resulting recursion.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from .errors import DuplicateName, InvalidName, MissingPath, UnboundCommand, WrongKind

if TYPE_CHECKING:
    from .sml import SmlElement

logger = logging.getLogger(__name__)

ROOT_GROUP_NAME = "Items"
DEFAULT_OPTION_SEPARATOR = ":"
PATH_SEPARATOR = "."

NAME_PATTERN = re.compile(r"\w[\w\d]*")

T = TypeVar("T")


class ItemKind(str, Enum):
    """Variant tag shared by groups and items."""

    GROUP = "group"
    ITEM = "item"  # Plain item, used for enum options
    STRING = "string"
    BOOL = "bool"
    ENUM = "enum"
    COMMAND = "command"

    @property
    def label(self) -> str:
        """Noun used in lookup error messages."""
        article = "an" if self.value[0] in "aeiou" else "a"
        return f"{article} {self.value}"


def validate_name(name: str, separator: str | None = None) -> str:
    """
    Check that ``name`` is an identifier.

    With a ``separator``, ``name`` is a qualified enum option name and every
    ``separator``-delimited segment must be an identifier instead.

    Raises:
        InvalidName: If the name or any segment is empty or not an identifier
    """
    segments = [name] if separator is None else name.split(separator)
    for segment in segments:
        if not NAME_PATTERN.fullmatch(segment):
            raise InvalidName(f'"{name}" is not a valid name')
    return name


# =============================================================================
# Change notification
# =============================================================================


@dataclass(frozen=True)
class ItemChanged:
    """Payload passed to subscribers after a value item changed."""

    item: Item
    old_value: Any
    new_value: Any


ChangeCallback = Callable[[ItemChanged], None]


class Subscription:
    """Handle returned by ``ChangeNotifier.subscribe``; removal is by handle identity."""

    def __init__(self, notifier: ChangeNotifier, callback: ChangeCallback):
        self._notifier: ChangeNotifier | None = notifier
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._notifier is not None

    def cancel(self) -> None:
        """Stop receiving notifications. Cancelling twice is a no-op."""
        if self._notifier is not None:
            self._notifier.unsubscribe(self)


class ChangeNotifier:
    """Ordered registry of subscriptions owned by one observable item."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        for index, candidate in enumerate(self._subscriptions):
            if candidate is subscription:
                del self._subscriptions[index]
                break
        subscription._notifier = None

    def notify(self, event: ItemChanged) -> None:
        # Snapshot so callbacks may (un)subscribe while being notified
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.callback(event)


# =============================================================================
# Nodes
# =============================================================================


class ItemsNode:
    """Common supertype of items and groups."""

    kind: ClassVar[ItemKind]

    def __init__(self, name: str, separator: str | None = None):
        self.name = validate_name(name, separator)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @property
    def is_group(self) -> bool:
        return self.kind is ItemKind.GROUP


class Item(ItemsNode):
    """A leaf node with an optional display title and hint."""

    kind = ItemKind.ITEM

    def __init__(
        self,
        name: str,
        title: str | None = None,
        hint: str | None = None,
        separator: str | None = None,
    ):
        super().__init__(name, separator)
        self.title = title
        self.hint = hint

    @property
    def display_text(self) -> str:
        return self.title if self.title is not None else self.name


class ValueItem(Item, Generic[T]):
    """An item holding a value and notifying subscribers when it changes."""

    default_value: ClassVar[Any]

    def __init__(self, name: str, title: str | None = None, hint: str | None = None):
        super().__init__(name, title, hint)
        self._value: T = self.default_value
        self.changed = ChangeNotifier()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._check_value(new_value)
        old_value = self._value
        self._value = new_value
        self.changed.notify(ItemChanged(self, old_value, new_value))

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        return self.changed.subscribe(callback)

    def _check_value(self, value: T) -> None:
        pass


class StringItem(ValueItem[str]):
    kind = ItemKind.STRING
    default_value = ""

    def _check_value(self, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f'String "{self.name}" cannot hold {type(value).__name__} value {value!r}')


class BoolItem(ValueItem[bool]):
    kind = ItemKind.BOOL
    default_value = False

    def toggle(self) -> None:
        self.value = not self.value

    def _check_value(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError(f'Bool "{self.name}" cannot hold {type(value).__name__} value {value!r}')


class EnumItem(ValueItem[int]):
    """A selection index over an ordered list of plain option items."""

    kind = ItemKind.ENUM
    default_value = 0

    def __init__(self, name: str, title: str | None = None, hint: str | None = None):
        super().__init__(name, title, hint)
        self.options: list[Item] = []

    def add_option(
        self,
        option_id: str,
        title: str | None = None,
        separator: str = DEFAULT_OPTION_SEPARATOR,
    ) -> Item:
        """Append an option named ``<enum><separator><option_id>``."""
        validate_name(option_id)
        option = Item(f"{self.name}{separator}{option_id}", title, separator=separator)
        self.options.append(option)
        return option

    @property
    def selected_option(self) -> Item | None:
        if 0 <= self.value < len(self.options):
            return self.options[self.value]
        return None

    def _check_value(self, value: int) -> None:
        if self.options and not 0 <= value < len(self.options):
            raise ValueError(
                f'Enum "{self.name}" has {len(self.options)} options, index {value} is out of range'
            )


class CommandItem(Item):
    """An item that runs a bound zero-argument action."""

    kind = ItemKind.COMMAND

    def __init__(self, name: str, title: str | None = None, hint: str | None = None):
        super().__init__(name, title, hint)
        self.action: Callable[[], Any] | None = None

    @property
    def bound(self) -> bool:
        return self.action is not None

    def execute(self) -> None:
        if self.action is None:
            raise UnboundCommand(f'Command "{self.name}" is not bound')
        self.action()


ITEM_TYPES: dict[ItemKind, type[Item]] = {
    ItemKind.ITEM: Item,
    ItemKind.STRING: StringItem,
    ItemKind.BOOL: BoolItem,
    ItemKind.ENUM: EnumItem,
    ItemKind.COMMAND: CommandItem,
}


class ItemGroup(ItemsNode):
    """
    Ordered, case-insensitively keyed container of items and groups.

    The child list (declaration order) and the lookup index are only ever
    mutated together by ``add``.
    """

    kind = ItemKind.GROUP

    def __init__(self, name: str):
        super().__init__(name)
        self._children: list[ItemsNode] = []
        self._lookup: dict[str, ItemsNode] = {}

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[ItemsNode]:
        return iter(list(self._children))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._lookup

    def add(self, node: ItemsNode) -> ItemsNode:
        key = node.name.lower()
        if key in self._lookup:
            raise DuplicateName(
                f'Group "{self.name}" already contains a node with name "{node.name}"', node.name
            )
        self._lookup[key] = node
        self._children.append(node)
        return node

    def add_group(self, name: str) -> ItemGroup:
        group = ItemGroup(name)
        self.add(group)
        return group

    def add_item(self, item: Item) -> Item:
        self.add(item)
        return item

    def add_string(self, name: str, title: str | None = None) -> StringItem:
        item = StringItem(name, title)
        self.add(item)
        return item

    def add_bool(self, name: str, title: str | None = None) -> BoolItem:
        item = BoolItem(name, title)
        self.add(item)
        return item

    def add_enum(self, name: str, title: str | None = None) -> EnumItem:
        item = EnumItem(name, title)
        self.add(item)
        return item

    def add_command(self, name: str, title: str | None = None) -> CommandItem:
        item = CommandItem(name, title)
        self.add(item)
        return item

    def get_or_none(self, name: str) -> ItemsNode | None:
        return self._lookup.get(name.lower())

    def get(self, name: str) -> ItemsNode:
        node = self.get_or_none(name)
        if node is None:
            raise MissingPath(f'Group "{self.name}" has no node with name "{name}"', name)
        return node

    def has_group(self, name: str) -> bool:
        node = self.get_or_none(name)
        return node is not None and node.kind is ItemKind.GROUP

    def has_item(self, name: str) -> bool:
        node = self.get_or_none(name)
        return node is not None and node.kind is not ItemKind.GROUP

    def get_group(self, name: str) -> ItemGroup:
        node = self.get(name)
        if node.kind is not ItemKind.GROUP:
            raise WrongKind(f'Group "{self.name}" has an item with name "{name}" but no group', name)
        assert isinstance(node, ItemGroup)
        return node

    def get_item_or_none(self, name: str) -> Item | None:
        node = self.get_or_none(name)
        if node is None or node.kind is ItemKind.GROUP:
            return None
        assert isinstance(node, Item)
        return node

    def get_item(self, name: str) -> Item:
        node = self.get(name)
        if node.kind is ItemKind.GROUP:
            raise WrongKind(f'Group "{self.name}" has a group with name "{name}" but no item', name)
        assert isinstance(node, Item)
        return node

    def nodes(self) -> list[ItemsNode]:
        return list(self._children)

    def groups(self) -> list[ItemGroup]:
        return [node for node in self._children if isinstance(node, ItemGroup)]

    def items(self) -> list[Item]:
        return [node for node in self._children if isinstance(node, Item)]


# =============================================================================
# Root
# =============================================================================


class Items:
    """Root of an item store with path based, kind checked accessors."""

    def __init__(self) -> None:
        self.root = ItemGroup(ROOT_GROUP_NAME)

    @classmethod
    def parse(cls, text: str, source: str | None = None) -> Items:
        """Parse an ``Items`` document from text."""
        from .items_loader import parse_items

        return parse_items(text, source=source)

    @classmethod
    def load(cls, element: SmlElement) -> Items:
        """Load from an already parsed ``Items`` element."""
        from .items_loader import ItemsLoader

        return ItemsLoader(element).load()

    def resolve(self, path: str) -> ItemsNode | None:
        """Resolve a dotted path through nested groups, or return None."""
        node: ItemsNode = self.root
        for segment in path.split(PATH_SEPARATOR):
            if not isinstance(node, ItemGroup):
                return None
            found = node.get_or_none(segment)
            if found is None:
                return None
            node = found
        return node

    def get_item_or_none(self, path: str) -> Item | None:
        node = self.resolve(path)
        if node is None or node.kind is ItemKind.GROUP:
            return None
        assert isinstance(node, Item)
        return node

    def get_item(self, path: str) -> Item:
        node = self.resolve(path)
        if node is None:
            raise MissingPath(f'Does not contain an item with path "{path}"', path)
        if node.kind is ItemKind.GROUP:
            raise WrongKind(f'Does not contain an item with path "{path}" (found a group)', path)
        assert isinstance(node, Item)
        return node

    def get_group(self, path: str) -> ItemGroup:
        node = self._get_kind(path, ItemKind.GROUP)
        assert isinstance(node, ItemGroup)
        return node

    def get_string(self, path: str) -> StringItem:
        node = self._get_kind(path, ItemKind.STRING)
        assert isinstance(node, StringItem)
        return node

    def get_bool(self, path: str) -> BoolItem:
        node = self._get_kind(path, ItemKind.BOOL)
        assert isinstance(node, BoolItem)
        return node

    def get_enum(self, path: str) -> EnumItem:
        node = self._get_kind(path, ItemKind.ENUM)
        assert isinstance(node, EnumItem)
        return node

    def get_command(self, path: str) -> CommandItem:
        node = self._get_kind(path, ItemKind.COMMAND)
        assert isinstance(node, CommandItem)
        return node

    def bind_command(self, path: str, action: Callable[[], Any]) -> CommandItem:
        """Attach ``action`` to the command at ``path``, replacing any previous one."""
        command = self.get_command(path)
        if command.bound:
            logger.debug("Rebinding command %s", path)
        command.action = action
        return command

    def walk(self) -> Iterator[tuple[str, ItemsNode]]:
        """Yield ``(path, node)`` for every node below the root, depth first."""
        yield from _walk_group(self.root, "")

    def to_document(self) -> str:
        """Serialize back to ``Items`` document text."""
        from .items_loader import dump_items

        return dump_items(self)

    def _get_kind(self, path: str, kind: ItemKind) -> ItemsNode:
        node = self.resolve(path)
        if node is None:
            raise MissingPath(f'Does not contain {kind.label} with path "{path}"', path)
        if node.kind is not kind:
            raise WrongKind(
                f'Does not contain {kind.label} with path "{path}" (found {node.kind.label})', path
            )
        return node


def _walk_group(group: ItemGroup, prefix: str) -> Iterator[tuple[str, ItemsNode]]:
    for node in group.nodes():
        path = f"{prefix}{PATH_SEPARATOR}{node.name}" if prefix else node.name
        yield path, node
        if isinstance(node, ItemGroup):
            yield from _walk_group(node, path)

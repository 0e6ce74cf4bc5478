"""
Loader compiling an ``Items`` document into an item store.

Each attribute declares one item: its name is the item name, value 0 is the
type tag, value 1 (optional) the title and value 2 (optional) the hint:

    Items
        Open Command "Open file"
        UserName String
        Theme Enum "Theme"
        * Light "Light theme"
        * Dark "Dark theme"
        View
            ShowGrid Bool "Show grid"
        End
    End

A ``*`` attribute adds an option to the enum declared just before it.
Nested elements declare groups and are loaded the same way.
"""

from __future__ import annotations

import logging

from .errors import (
    DuplicateName,
    ErrorContext,
    InvalidName,
    UnsupportedVariant,
    make_schema_violation,
)
from .items import (
    DEFAULT_OPTION_SEPARATOR,
    ITEM_TYPES,
    ROOT_GROUP_NAME,
    EnumItem,
    Item,
    ItemGroup,
    ItemKind,
    Items,
    ItemsNode,
    validate_name,
)
from .sml import SmlAttribute, SmlDocument, SmlElement, SmlNode

logger = logging.getLogger(__name__)

OPTION_ATTRIBUTE = "*"

# Type tags, matched exactly
TYPE_TAGS: dict[str, ItemKind] = {
    "Item": ItemKind.ITEM,
    "Command": ItemKind.COMMAND,
    "String": ItemKind.STRING,
    "Bool": ItemKind.BOOL,
    "Enum": ItemKind.ENUM,
}

_TAG_BY_KIND = {kind: tag for tag, kind in TYPE_TAGS.items()}


class ItemsLoader:
    """Walks an ``Items`` element and builds the matching item store."""

    def __init__(self, root_element: SmlElement, option_separator: str = DEFAULT_OPTION_SEPARATOR):
        self.root_element = root_element
        self.option_separator = option_separator
        self._group_count = 0
        self._item_count = 0

    def load(self) -> Items:
        self.root_element.assure_name(ROOT_GROUP_NAME)
        items = Items()
        self._load_element(self.root_element, items.root)
        logger.debug(
            "Loaded %d item(s) in %d group(s) from %s",
            self._item_count,
            self._group_count,
            self.root_element.source or "<text>",
        )
        return items

    def _load_element(self, element: SmlElement, group: ItemGroup) -> None:
        open_enum: EnumItem | None = None

        for node in element.named_nodes():
            if isinstance(node, SmlElement):
                open_enum = None
                child_group = ItemGroup(_located(node, node.name))
                _add_located(group, child_group, node)
                self._group_count += 1
                self._load_element(node, child_group)
                continue

            assert isinstance(node, SmlAttribute)
            if node.name == OPTION_ATTRIBUTE:
                if open_enum is None:
                    raise make_schema_violation(
                        f'Syntax error: "{OPTION_ATTRIBUTE}" must follow an Enum item',
                        line=node.line,
                        element_path=node.path,
                        source=node.source,
                    )
                self._load_option(node, open_enum)
                continue

            open_enum = None
            item = self._create_item(node)
            _add_located(group, item, node)
            self._item_count += 1
            if isinstance(item, EnumItem):
                open_enum = item

    def _create_item(self, attribute: SmlAttribute) -> Item:
        tag = attribute.get_string(0)
        kind = TYPE_TAGS.get(tag)
        if kind is None:
            raise UnsupportedVariant(
                f'Item type "{tag}" is not supported',
                tag,
                _context(attribute),
            )
        attribute.assure_value_count_min_max(1, 3)
        item = ITEM_TYPES[kind](_located(attribute, attribute.name))
        if attribute.value_count > 1:
            item.title = attribute.get_nullable_string(1)
        if attribute.value_count > 2:
            item.hint = attribute.get_nullable_string(2)
        return item

    def _load_option(self, attribute: SmlAttribute, enum_item: EnumItem) -> None:
        attribute.assure_value_count_min_max(1, 2)
        title = attribute.get_nullable_string(1) if attribute.value_count > 1 else None
        option_id = attribute.get_string(0)
        try:
            enum_item.add_option(option_id, title, separator=self.option_separator)
        except InvalidName as e:
            raise InvalidName(e.message, _context(attribute)) from None


def _context(node: SmlNode) -> ErrorContext:
    return ErrorContext(source=node.source, line=node.line, element_path=node.path)


def _located(node: SmlNode, name: str) -> str:
    """Validate ``name`` and report failures at ``node``."""
    try:
        return validate_name(name)
    except InvalidName as e:
        raise InvalidName(e.message, _context(node)) from None


def _add_located(group: ItemGroup, child: ItemsNode, node: SmlNode) -> None:
    try:
        group.add(child)
    except DuplicateName as e:
        raise DuplicateName(e.message, e.name, _context(node)) from None


def load_items(element: SmlElement, option_separator: str = DEFAULT_OPTION_SEPARATOR) -> Items:
    """Load an item store from a parsed ``Items`` element."""
    return ItemsLoader(element, option_separator).load()


def parse_items(
    text: str,
    source: str | None = None,
    option_separator: str = DEFAULT_OPTION_SEPARATOR,
) -> Items:
    """Parse ``Items`` document text into an item store."""
    document = SmlDocument.parse(text, source=source)
    return load_items(document.root, option_separator)


def dump_items(items: Items, option_separator: str = DEFAULT_OPTION_SEPARATOR) -> str:
    """Write an item store back to ``Items`` document text."""
    root = SmlElement(ROOT_GROUP_NAME)
    _dump_group(items.root, root, option_separator)
    return SmlDocument(root).to_string()


def _dump_group(group: ItemGroup, element: SmlElement, option_separator: str) -> None:
    for node in group.nodes():
        if isinstance(node, ItemGroup):
            _dump_group(node, element.add_element(node.name), option_separator)
            continue

        assert isinstance(node, Item)
        values: list[str | None] = [_TAG_BY_KIND[node.kind]]
        if node.hint is not None:
            values += [node.title, node.hint]
        elif node.title is not None:
            values.append(node.title)
        element.add_attribute(node.name, values)

        if isinstance(node, EnumItem):
            prefix = f"{node.name}{option_separator}"
            for option in node.options:
                option_values: list[str | None] = [option.name.removeprefix(prefix)]
                if option.title is not None:
                    option_values.append(option.title)
                element.add_attribute(OPTION_ATTRIBUTE, option_values)

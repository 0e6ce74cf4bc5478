"""
Document tree provider for samlui.

Reads the line oriented markup that screens and item stores are written in
into a generic tree of named elements and multi-valued attributes:

    LinearLayout
        Direction Vertical
        Child
            Label
                Item Greeting
            End
        End
    End

A line with one value opens an element (or closes one when the value is the
end keyword), a line with more values is an attribute. Values are separated
by whitespace, ``"..."`` quotes a value (``""`` is a quote, ``"/"`` a line
break), ``-`` is null and ``#`` starts a comment.

The loaders only use the node/attribute contract below: lookups, typed
coercion and closed-schema assertions. Every assertion failure raises
``SchemaViolation`` pointing at the offending line and element path.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .errors import make_schema_violation, make_syntax_error

DEFAULT_END_KEYWORD = "End"

_WHITESPACE = (" ", "\t", "\r", "\ufeff")


class SmlNode:
    """Common base of elements and attributes."""

    def __init__(self, name: str, line: int | None = None, source: str | None = None):
        self.name = name
        self.line = line
        self.source = source
        self.parent: SmlElement | None = None

    def has_name(self, name: str) -> bool:
        return self.name == name

    def is_element(self) -> bool:
        return False

    def is_attribute(self) -> bool:
        return False

    @property
    def path(self) -> str:
        """Slash separated names from the root down to this node."""
        names = [self.name]
        node = self.parent
        while node is not None:
            names.append(node.name)
            node = node.parent
        return "/".join(reversed(names))

    def schema_violation(self, message: str):
        return make_schema_violation(message, line=self.line, element_path=self.path, source=self.source)


class SmlAttribute(SmlNode):
    """A named attribute holding one or more (possibly null) values."""

    def __init__(
        self,
        name: str,
        values: Sequence[str | None],
        line: int | None = None,
        source: str | None = None,
    ):
        super().__init__(name, line, source)
        if not values:
            raise ValueError(f'Attribute "{name}" needs at least one value')
        self.values: list[str | None] = list(values)

    def __repr__(self) -> str:
        return f"SmlAttribute({self.name!r}, {self.values!r})"

    def is_attribute(self) -> bool:
        return True

    @property
    def value_count(self) -> int:
        return len(self.values)

    # -- assertions ---------------------------------------------------------

    def assure_value_count(self, count: int) -> None:
        if self.value_count != count:
            raise self.schema_violation(
                f'Attribute "{self.name}" must have {count} value(s), got {self.value_count}'
            )

    def assure_value_count_min_max(self, minimum: int, maximum: int | None = None) -> None:
        if self.value_count < minimum or (maximum is not None and self.value_count > maximum):
            expected = f"{minimum}..{maximum}" if maximum is not None else f"at least {minimum}"
            raise self.schema_violation(
                f'Attribute "{self.name}" must have {expected} values, got {self.value_count}'
            )

    # -- typed access -------------------------------------------------------

    def get_nullable_string(self, index: int = 0) -> str | None:
        if index < 0 or index >= self.value_count:
            raise self.schema_violation(f'Attribute "{self.name}" has no value at index {index}')
        return self.values[index]

    def get_string(self, index: int = 0) -> str:
        value = self.get_nullable_string(index)
        if value is None:
            raise self.schema_violation(f'Value {index} of attribute "{self.name}" must not be null')
        return value

    def get_int(self, index: int = 0) -> int:
        value = self.get_string(index)
        try:
            return int(value)
        except ValueError:
            raise self.schema_violation(
                f'Value "{value}" of attribute "{self.name}" is not an integer'
            ) from None

    def get_float(self, index: int = 0) -> float:
        value = self.get_string(index)
        try:
            return float(value)
        except ValueError:
            raise self.schema_violation(
                f'Value "{value}" of attribute "{self.name}" is not a number'
            ) from None

    def get_bool(self, index: int = 0) -> bool:
        value = self.get_string(index)
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise self.schema_violation(f'Value "{value}" of attribute "{self.name}" is not a bool')

    def get_enum(self, names: Sequence[str], index: int = 0) -> int:
        """Return the ordinal of the value within ``names`` (exact match)."""
        value = self.get_string(index)
        for ordinal, name in enumerate(names):
            if value == name:
                return ordinal
        allowed = ", ".join(names)
        raise self.schema_violation(
            f'Value "{value}" of attribute "{self.name}" must be one of: {allowed}'
        )

    def as_string(self) -> str:
        self.assure_value_count(1)
        return self.get_string(0)

    def as_nullable_string(self) -> str | None:
        self.assure_value_count(1)
        return self.get_nullable_string(0)

    def as_int(self) -> int:
        self.assure_value_count(1)
        return self.get_int(0)

    def as_float(self) -> float:
        self.assure_value_count(1)
        return self.get_float(0)

    def as_bool(self) -> bool:
        self.assure_value_count(1)
        return self.get_bool(0)

    def as_enum(self, names: Sequence[str]) -> int:
        self.assure_value_count(1)
        return self.get_enum(names, 0)


class SmlElement(SmlNode):
    """A named element holding attributes and child elements in document order."""

    def __init__(self, name: str, line: int | None = None, source: str | None = None):
        super().__init__(name, line, source)
        self.nodes: list[SmlNode] = []

    def __repr__(self) -> str:
        return f"SmlElement({self.name!r}, nodes={len(self.nodes)})"

    def is_element(self) -> bool:
        return True

    # -- building -----------------------------------------------------------

    def add_node(self, node: SmlNode) -> SmlNode:
        node.parent = self
        self.nodes.append(node)
        return node

    def add_element(self, name: str) -> SmlElement:
        element = SmlElement(name, source=self.source)
        self.add_node(element)
        return element

    def add_attribute(self, name: str, values: Sequence[str | None]) -> SmlAttribute:
        attribute = SmlAttribute(name, values, source=self.source)
        self.add_node(attribute)
        return attribute

    # -- navigation ---------------------------------------------------------

    def named_nodes(self) -> list[SmlNode]:
        return list(self.nodes)

    def attributes(self, name: str | None = None) -> list[SmlAttribute]:
        return [
            node
            for node in self.nodes
            if isinstance(node, SmlAttribute) and (name is None or node.name == name)
        ]

    def elements(self, name: str | None = None) -> list[SmlElement]:
        return [
            node
            for node in self.nodes
            if isinstance(node, SmlElement) and (name is None or node.name == name)
        ]

    def has_attribute(self, name: str) -> bool:
        return any(True for _ in self.attributes(name))

    def has_element(self, name: str) -> bool:
        return any(True for _ in self.elements(name))

    def optional_attribute(self, name: str) -> SmlAttribute | None:
        found = self.attributes(name)
        if not found:
            return None
        if len(found) > 1:
            raise found[1].schema_violation(f'Element "{self.name}" must not repeat attribute "{name}"')
        return found[0]

    def required_attribute(self, name: str) -> SmlAttribute:
        attribute = self.optional_attribute(name)
        if attribute is None:
            raise self.schema_violation(f'Element "{self.name}" requires attribute "{name}"')
        return attribute

    def optional_element(self, name: str) -> SmlElement | None:
        found = self.elements(name)
        if not found:
            return None
        if len(found) > 1:
            raise found[1].schema_violation(f'Element "{self.name}" must not repeat element "{name}"')
        return found[0]

    def required_element(self, name: str) -> SmlElement:
        element = self.optional_element(name)
        if element is None:
            raise self.schema_violation(f'Element "{self.name}" requires element "{name}"')
        return element

    # -- closed schema assertions -------------------------------------------

    def assure_name(self, name: str) -> None:
        if self.name != name:
            raise self.schema_violation(f'Element with name "{name}" expected, found "{self.name}"')

    def assure_attribute_names(self, names: Iterable[str]) -> None:
        allowed = set(names)
        for attribute in self.attributes():
            if attribute.name not in allowed:
                raise attribute.schema_violation(
                    f'Element "{self.name}" does not support attribute "{attribute.name}"'
                )

    def assure_element_names(self, names: Iterable[str]) -> None:
        allowed = set(names)
        for element in self.elements():
            if element.name not in allowed:
                raise element.schema_violation(
                    f'Element "{self.name}" does not support child element "{element.name}"'
                )

    def assure_no_attributes(self) -> None:
        attributes = self.attributes()
        if attributes:
            raise attributes[0].schema_violation(f'Element "{self.name}" must not have attributes')

    def assure_no_elements(self) -> None:
        elements = self.elements()
        if elements:
            raise elements[0].schema_violation(f'Element "{self.name}" must not have child elements')

    def assure_element_count(self, count: int) -> None:
        actual = len(self.elements())
        if actual != count:
            raise self.schema_violation(
                f'Element "{self.name}" must have {count} child element(s), got {actual}'
            )

    def assure_attribute_count(self, count: int) -> None:
        actual = len(self.attributes())
        if actual != count:
            raise self.schema_violation(
                f'Element "{self.name}" must have {count} attribute(s), got {actual}'
            )


class SmlDocument:
    """A parsed document: exactly one root element."""

    def __init__(self, root: SmlElement, end_keyword: str = DEFAULT_END_KEYWORD):
        self.root = root
        self.end_keyword = end_keyword

    @classmethod
    def parse(
        cls,
        text: str,
        source: str | None = None,
        end_keyword: str = DEFAULT_END_KEYWORD,
    ) -> SmlDocument:
        return cls(_DocumentReader(text, source, end_keyword).read(), end_keyword)

    def to_string(self, indent: str = "\t") -> str:
        lines: list[str] = []
        _write_element(self.root, 0, indent, self.end_keyword, lines)
        return "\n".join(lines) + "\n"

    def __iter__(self) -> Iterator[SmlElement]:
        yield self.root


def parse_document(text: str, source: str | None = None) -> SmlDocument:
    """Parse document text with the default end keyword."""
    return SmlDocument.parse(text, source=source)


# =============================================================================
# Reading
# =============================================================================


class _DocumentReader:
    """Splits text into value lines and assembles the element tree."""

    def __init__(self, text: str, source: str | None, end_keyword: str):
        self.text = text
        self.source = source
        self.end_keyword = end_keyword

    def read(self) -> SmlElement:
        stack: list[SmlElement] = []
        root: SmlElement | None = None

        for line_number, line in enumerate(self.text.split("\n"), start=1):
            values = _LineSplitter(line, line_number, self.source).split()
            if not values:
                continue

            name = values[0]
            if name is None:
                raise make_syntax_error("Null value cannot be used as a name", line_number, self.source)

            if len(values) == 1:
                if name == self.end_keyword:
                    if not stack:
                        raise make_syntax_error(
                            f'"{self.end_keyword}" without an open element', line_number, self.source
                        )
                    stack.pop()
                    continue
                if root is not None and not stack:
                    raise make_syntax_error(
                        "Document must have exactly one root element", line_number, self.source
                    )
                element = SmlElement(name, line=line_number, source=self.source)
                if stack:
                    stack[-1].add_node(element)
                else:
                    root = element
                stack.append(element)
                continue

            if not stack:
                raise make_syntax_error(
                    f'Attribute "{name}" outside of the root element', line_number, self.source
                )
            stack[-1].add_node(SmlAttribute(name, values[1:], line=line_number, source=self.source))

        if stack:
            raise make_syntax_error(f'Element "{stack[-1].name}" is not closed', stack[-1].line or 1, self.source)
        if root is None:
            raise make_syntax_error("Document has no root element", 1, self.source)
        return root


class _LineSplitter:
    """Splits a single line into values, honouring quotes, nulls and comments."""

    def __init__(self, line: str, line_number: int, source: str | None):
        self.line = line
        self.line_number = line_number
        self.source = source
        self.pos = 0

    def current_char(self) -> str | None:
        if self.pos >= len(self.line):
            return None
        return self.line[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        pos = self.pos + offset
        if pos >= len(self.line):
            return None
        return self.line[pos]

    def split(self) -> list[str | None]:
        values: list[str | None] = []
        while True:
            current = self.current_char()
            if current is None or current == "#":
                return values
            if current in _WHITESPACE:
                self.pos += 1
            elif current == '"':
                values.append(self.read_string())
            else:
                token = self.read_token()
                values.append(None if token == "-" else token)

    def read_token(self) -> str:
        start = self.pos
        current = self.current_char()
        while current is not None and current not in _WHITESPACE and current not in ('"', "#"):
            self.pos += 1
            current = self.current_char()
        if current == '"':
            raise self._error("Invalid double quote inside a value")
        return self.line[start : self.pos]

    def read_string(self) -> str:
        self.pos += 1  # opening quote
        chars: list[str] = []
        while True:
            current = self.current_char()
            if current is None:
                raise self._error("Unterminated string value")
            if current != '"':
                chars.append(current)
                self.pos += 1
                continue
            following = self.peek_char()
            if following == '"':
                chars.append('"')
                self.pos += 2
            elif following == "/" and self.peek_char(2) == '"':
                chars.append("\n")
                self.pos += 3
            else:
                self.pos += 1  # closing quote
                break

        after = self.current_char()
        if after is not None and after not in _WHITESPACE and after != "#":
            raise self._error("Invalid character after string value")
        return "".join(chars)

    def _error(self, message: str):
        return make_syntax_error(message, self.line_number, self.source)


# =============================================================================
# Writing
# =============================================================================


def serialize_value(value: str | None) -> str:
    """Quote a value when it would not read back as itself."""
    if value is None:
        return "-"
    needs_quotes = (
        value == ""
        or value == "-"
        or any(ch in value for ch in ('"', "#", "\n"))
        or any(ch in _WHITESPACE for ch in value)
    )
    if not needs_quotes:
        return value
    escaped = value.replace('"', '""').replace("\n", '"/"')
    return f'"{escaped}"'


def _write_element(
    element: SmlElement,
    depth: int,
    indent: str,
    end_keyword: str,
    lines: list[str],
) -> None:
    prefix = indent * depth
    lines.append(prefix + serialize_value(element.name))
    for node in element.nodes:
        if isinstance(node, SmlElement):
            _write_element(node, depth + 1, indent, end_keyword, lines)
        elif isinstance(node, SmlAttribute):
            parts = [serialize_value(node.name)] + [serialize_value(v) for v in node.values]
            lines.append(indent * (depth + 1) + " ".join(parts))
    lines.append(prefix + end_keyword)

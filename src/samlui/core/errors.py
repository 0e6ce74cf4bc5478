"""
Error types for samlui document loading, control compilation and item access.

Every error is fatal where it is raised: loaders and compilers never try to
recover a partial tree. Applications catch ``SamlError`` around a single
``parse``/``load`` call and present the failure.
"""

from dataclasses import dataclass
from typing import Optional


class SamlError(Exception):
    """Base exception for all samlui errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context and self.context.format():
            return f"{self.context.format()}\n{self.message}"
        return self.message


class DocumentSyntaxError(SamlError):
    """
    Raised when document text cannot be split into elements and attributes.

    Examples:
    - Unterminated quoted value
    - ``End`` without an open element
    - Element left open at end of input
    - More than one root element
    """

    pass


class SchemaViolation(SamlError):
    """
    Raised when a node does not match the closed schema of its position.

    Examples:
    - Unexpected attribute or child element name
    - Missing required attribute
    - Wrong number of child elements or attribute values
    - Value that cannot be coerced to the requested type
    """

    pass


class UnsupportedVariant(SamlError):
    """
    Raised for an element name or type tag outside a closed set.

    Examples:
    - ``Foo`` where a control element is expected
    - ``Number`` as an item type tag
    """

    def __init__(self, message: str, variant: str, context: Optional["ErrorContext"] = None):
        self.variant = variant
        super().__init__(message, context)


class DuplicateName(SamlError):
    """Raised when a group already holds a node with the same case-insensitive name."""

    def __init__(self, message: str, name: str, context: Optional["ErrorContext"] = None):
        self.name = name
        super().__init__(message, context)


class InvalidName(SamlError):
    """Raised when an item or group name is not a valid identifier."""

    pass


class ItemPathError(SamlError):
    """Base for path lookups in ``Items`` that do not yield the requested kind."""

    def __init__(self, message: str, path: str, context: Optional["ErrorContext"] = None):
        self.path = path
        super().__init__(message, context)


class MissingPath(ItemPathError):
    """Raised when a path does not resolve to any node."""

    pass


class WrongKind(ItemPathError):
    """Raised when a path resolves to a node of another kind."""

    pass


class UnboundCommand(SamlError):
    """Raised when executing a command item with no action attached."""

    pass


class UnsupportedMutation(SamlError):
    """
    Raised on a structural mutation of an already materialized control.

    Attaching an instance that still holds live children is not supported;
    callers must detach first.
    """

    pass


class ManifestError(SamlError):
    """Raised when ``samlui.toml`` is missing required settings."""

    pass


@dataclass
class ErrorContext:
    """
    Where in a document an error occurred.

    Attributes:
        source: Optional document name (usually a file path)
        line: Optional line number (1-indexed)
        element_path: Optional slash-separated element path, e.g. ``LinearLayout/Child``
    """

    source: str | None = None
    line: int | None = None
    element_path: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "main.sml:10 in LinearLayout/Child"
        """
        location = self.source or ""
        if self.line is not None:
            location = f"{location}:{self.line}" if location else f"line {self.line}"
        if self.element_path:
            location = f"{location} in {self.element_path}" if location else self.element_path
        return location


def make_schema_violation(
    message: str,
    line: int | None = None,
    element_path: str | None = None,
    source: str | None = None,
) -> SchemaViolation:
    """
    Helper to create a SchemaViolation with optional context.

    Args:
        message: Error description
        line: Optional line number
        element_path: Optional element path
        source: Optional document name

    Returns:
        SchemaViolation with context if any location is provided
    """
    if line is None and element_path is None and source is None:
        return SchemaViolation(message)
    return SchemaViolation(message, ErrorContext(source=source, line=line, element_path=element_path))


def make_syntax_error(message: str, line: int, source: str | None = None) -> DocumentSyntaxError:
    """Helper to create a DocumentSyntaxError at a given line."""
    return DocumentSyntaxError(message, ErrorContext(source=source, line=line))

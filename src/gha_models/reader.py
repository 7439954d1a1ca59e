"""Cursor and mapping reader for recursive-descent model building.

A ``Cursor`` points at one node of the document tree and knows its path from
the root, its nesting depth, and the per-parse state (settings and collected
warnings). Builders never touch raw nodes' positions or paths themselves:
they read through a cursor, so every error they raise carries full context.

``MappingReader`` wraps a mapping cursor. It resolves key aliases, tracks
which keys were consumed, and applies the unknown-key policy when the builder
calls ``finish()``.

The typed scalar readers at the bottom of this module (``read_text``,
``read_bool``, ``read_value``, ...) are the leaf operations every builder is
composed from.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import NoReturn, TypeVar

from gha_models.config import ParserSettings
from gha_models.exceptions import (
    ConflictingAliasesError,
    MissingRequiredFieldError,
    TooDeeplyNestedError,
    TypeMismatchError,
    UnknownKeyError,
)
from gha_models.expressions import classify
from gha_models.logging import get_logger
from gha_models.results import ParseWarning
from gha_models.tree import (
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
    describe_node,
    node_position,
)
from gha_models.types import DocumentPath, PathElement, SourcePosition
from gha_models.values import (
    ExpressionValue,
    LiteralValue,
    PermissiveValue,
    Scalar,
    permissive_from_scalar,
    scalar_value,
)

__all__ = [
    "ParseState",
    "Cursor",
    "MappingReader",
    "Reader",
    "read_text",
    "read_text_value",
    "read_bool",
    "read_value",
    "read_condition",
    "read_bool_or_expression",
    "read_number_or_expression",
    "read_expression",
    "read_plain",
    "read_mapping",
    "read_sequence",
]

T = TypeVar("T")

Reader = Callable[["Cursor"], T]

logger = get_logger(__name__)


@dataclass(slots=True)
class ParseState:
    """State private to one parse call.

    Attributes:
        settings: Settings in effect for this parse.
        warnings: Warnings collected so far, in encounter order.
    """

    settings: ParserSettings
    warnings: list[ParseWarning] = field(default_factory=list)


class Cursor:
    """A position in the document tree.

    Attributes:
        node: The node under the cursor.
        path: Accessors from the document root to ``node``.
        depth: Nesting depth of ``node`` (the root is 0).
        state: Per-parse state shared by every cursor of one parse call.
    """

    __slots__ = ("node", "path", "depth", "state")

    def __init__(
        self,
        node: Node,
        state: ParseState,
        path: DocumentPath = (),
        depth: int = 0,
    ) -> None:
        self.node = node
        self.state = state
        self.path = path
        self.depth = depth

    @property
    def position(self) -> SourcePosition | None:
        return node_position(self.node)

    @property
    def is_mapping(self) -> bool:
        return isinstance(self.node, MappingNode)

    @property
    def is_sequence(self) -> bool:
        return isinstance(self.node, SequenceNode)

    @property
    def is_scalar(self) -> bool:
        return isinstance(self.node, ScalarNode)

    @property
    def is_null(self) -> bool:
        return isinstance(self.node, ScalarNode) and scalar_value(self.node) is None

    def child(self, element: PathElement, node: Node) -> Cursor:
        """Descend into ``node``, found at ``element`` below this cursor.

        Raises:
            TooDeeplyNestedError: If the child would exceed the depth guard.
        """
        path = (*self.path, element)
        depth = self.depth + 1
        if depth > self.state.settings.max_depth:
            raise TooDeeplyNestedError(
                self.state.settings.max_depth, path, node_position(node)
            )
        return Cursor(node, self.state, path, depth)

    def items(self) -> Iterator[Cursor]:
        """Iterate over the elements of a sequence node, in order."""
        if not isinstance(self.node, SequenceNode):
            self.mismatch("a sequence")
        for index, item in enumerate(self.node.value):
            yield self.child(index, item)

    def mismatch(self, expected: str, *, reason: str | None = None) -> NoReturn:
        """Raise a TypeMismatchError for the node under the cursor."""
        raise TypeMismatchError(
            expected,
            describe_node(self.node),
            self.path,
            self.position,
            reason=reason,
        )

    def warn(self, message: str, *, name: str | None = None) -> None:
        """Record a non-fatal warning for this node and log it.

        Args:
            message: Warning code, also the log event.
            name: The ignored key or event name, if any.
        """
        warning = ParseWarning(message=message, path=self.path, position=self.position)
        self.state.warnings.append(warning)
        logger.warning(
            message, path=warning.location, position=warning.position, name=name
        )


class MappingReader:
    """Field-by-field access to a mapping node.

    Keys are read as their source text. When a key appears more than once the
    last occurrence wins, as with any mapping. Every key a builder reads is
    marked consumed; ``finish()`` reports the rest according to the
    unknown-key policy.

    Example:
        >>> reader = MappingReader(cursor)
        >>> name = reader.optional("name", read_text)
        >>> steps = reader.required("steps", read_steps)
        >>> reader.finish()
    """

    __slots__ = ("cursor", "_entries", "_consumed")

    def __init__(self, cursor: Cursor) -> None:
        if not isinstance(cursor.node, MappingNode):
            cursor.mismatch("a mapping")
        self.cursor = cursor
        self._entries: dict[str, tuple[Node, Node]] = {}
        self._consumed: set[str] = set()
        for key_node, value_node in cursor.node.value:
            if not isinstance(key_node, ScalarNode):
                raise TypeMismatchError(
                    "a scalar key",
                    describe_node(key_node),
                    cursor.path,
                    node_position(key_node),
                )
            self._entries[key_node.value] = (key_node, value_node)

    @property
    def keys(self) -> frozenset[str]:
        """Every key present, including keys with explicit null values."""
        return frozenset(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def ordered_keys(self) -> list[str]:
        return list(self._entries)

    def take(self, key: str, *, aliases: tuple[str, ...] = ()) -> Cursor | None:
        """Consume ``key`` (or one of its aliases) and return a cursor on its value.

        Returns:
            A cursor on the value, or None when neither key nor alias is present.

        Raises:
            ConflictingAliasesError: If the key and an alias are both present,
                or two aliases are.
        """
        present = [name for name in (key, *aliases) if name in self._entries]
        if len(present) > 1:
            key_node, _ = self._entries[present[1]]
            raise ConflictingAliasesError(
                present[0], present[1], self.cursor.path, node_position(key_node)
            )
        self._consumed.update(present)
        if not present:
            return None
        _, value_node = self._entries[present[0]]
        return self.cursor.child(key, value_node)

    def required(
        self, key: str, read: Reader[T], *, aliases: tuple[str, ...] = ()
    ) -> T:
        """Read a required field.

        Raises:
            MissingRequiredFieldError: If neither the key nor an alias is present.
        """
        child = self.take(key, aliases=aliases)
        if child is None:
            raise MissingRequiredFieldError(key, self.cursor.path, self.cursor.position)
        return read(child)

    def optional(
        self, key: str, read: Reader[T], *, aliases: tuple[str, ...] = ()
    ) -> T | None:
        """Read an optional field; None when absent.

        An explicit null is not absence: it is handed to ``read``, which
        rejects it unless null is meaningful for the field.
        """
        child = self.take(key, aliases=aliases)
        if child is None:
            return None
        return read(child)

    def entries(self) -> Iterator[tuple[str, Cursor]]:
        """Consume and iterate over every entry, in source order."""
        for key, (_, value_node) in self._entries.items():
            self._consumed.add(key)
            yield key, self.cursor.child(key, value_node)

    def finish(self) -> None:
        """Apply the unknown-key policy to every key not consumed.

        Raises:
            UnknownKeyError: In strict mode, for the first unconsumed key.
        """
        for key, (key_node, _) in self._entries.items():
            if key in self._consumed:
                continue
            if self.cursor.state.settings.strict:
                raise UnknownKeyError(key, (*self.cursor.path, key), node_position(key_node))
            key_cursor = Cursor(
                key_node, self.cursor.state, (*self.cursor.path, key), self.cursor.depth
            )
            key_cursor.warn("unknown_key_ignored", name=key)


# =============================================================================
# Leaf readers
# =============================================================================


def read_text(cursor: Cursor) -> str:
    """Read a string field.

    Numbers and booleans are accepted and kept as their source text
    (``run: true`` is the command ``"true"``). Null is rejected.
    """
    node = cursor.node
    if not isinstance(node, ScalarNode) or cursor.is_null:
        cursor.mismatch("a string")
    value = scalar_value(node)
    return value if isinstance(value, str) else node.value


def read_text_value(cursor: Cursor) -> PermissiveValue:
    """Read a string field that may carry an expression.

    Like ``read_text``, numbers and booleans keep their source text, so the
    result is either a string literal or an expression.
    """
    text = read_text(cursor)
    kind = classify(text)
    if kind is None:
        return LiteralValue(value=text)
    return ExpressionValue(raw=text, kind=kind)


def read_bool(cursor: Cursor) -> bool:
    """Read a boolean-only field."""
    if not isinstance(cursor.node, ScalarNode):
        cursor.mismatch("a boolean")
    value = scalar_value(cursor.node)
    if not isinstance(value, bool):
        cursor.mismatch("a boolean")
    return value


def read_value(cursor: Cursor) -> PermissiveValue:
    """Read any scalar as a literal or an expression. Null is a literal."""
    if not isinstance(cursor.node, ScalarNode):
        cursor.mismatch("a scalar")
    return permissive_from_scalar(cursor.node)


def read_condition(cursor: Cursor) -> PermissiveValue:
    """Read an ``if``-style field: a boolean literal or an expression."""
    if not isinstance(cursor.node, ScalarNode) or cursor.is_null:
        cursor.mismatch("a boolean or an expression")
    value = permissive_from_scalar(cursor.node, condition=True)
    if isinstance(value, LiteralValue) and not isinstance(value.value, bool):
        cursor.mismatch("a boolean or an expression")
    return value


def read_bool_or_expression(cursor: Cursor) -> PermissiveValue:
    """Read a field that takes a boolean literal or an expression."""
    if not isinstance(cursor.node, ScalarNode):
        cursor.mismatch("a boolean or an expression")
    value = permissive_from_scalar(cursor.node)
    if isinstance(value, LiteralValue) and not isinstance(value.value, bool):
        cursor.mismatch("a boolean or an expression")
    return value


def read_number_or_expression(cursor: Cursor) -> PermissiveValue:
    """Read a field that takes a numeric literal or an expression."""
    if not isinstance(cursor.node, ScalarNode):
        cursor.mismatch("a number or an expression")
    value = permissive_from_scalar(cursor.node)
    if isinstance(value, LiteralValue) and (
        isinstance(value.value, bool) or not isinstance(value.value, (int, float))
    ):
        cursor.mismatch("a number or an expression")
    return value


def read_expression(cursor: Cursor) -> ExpressionValue | None:
    """Return the node as an expression if it is a scalar carrying one."""
    if not isinstance(cursor.node, ScalarNode):
        return None
    value = permissive_from_scalar(cursor.node)
    return value if isinstance(value, ExpressionValue) else None


def read_plain(cursor: Cursor) -> Scalar | list | dict:
    """Read an arbitrary subtree as plain data (dicts, lists, scalars).

    Used for free-form values such as matrix entries. Scalars are typed by
    the implicit-typing rules; expressions stay as their raw strings.
    """
    node = cursor.node
    if isinstance(node, ScalarNode):
        return scalar_value(node)
    if isinstance(node, SequenceNode):
        return [read_plain(item) for item in cursor.items()]
    reader = MappingReader(cursor)
    return {key: read_plain(child) for key, child in reader.entries()}


def read_mapping(read_item: Reader[T]) -> Reader[dict[str, T]]:
    """Build a reader for a mapping of names to items, preserving order.

    An explicit null reads as an empty mapping.
    """

    def read(cursor: Cursor) -> dict[str, T]:
        if cursor.is_null:
            return {}
        reader = MappingReader(cursor)
        return {key: read_item(child) for key, child in reader.entries()}

    return read


def read_sequence(read_item: Reader[T]) -> Reader[tuple[T, ...]]:
    """Build a reader for a sequence of items, preserving order."""

    def read(cursor: Cursor) -> tuple[T, ...]:
        return tuple(read_item(child) for child in cursor.items())

    return read

"""Shorthand normalization.

The workflow format lets authors abbreviate in a few recurring ways:

- a single value standing in for a list (``needs: build``,
  ``branches: main``, ``runs-on: ubuntu-latest``);
- a bare string standing in for a structured object
  (``concurrency: ci``, ``environment: prod``, ``container: node:20``);
- deprecated spellings of a key standing in for the canonical key.

The helpers here expand every abbreviation into the canonical form so the
models only ever hold one shape per field.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from gha_models.constants import KEY_ALIASES
from gha_models.reader import Cursor, MappingReader, Reader

__all__ = [
    "normalize_items",
    "scalar_or_sequence",
    "scalar_or_mapping",
    "aliases_for",
    "resolve_alias",
]

T = TypeVar("T")


def normalize_items(value: T | Sequence[T] | None) -> tuple[T, ...]:
    """Normalize a value-or-list into a tuple. Idempotent.

    Strings are single items, not sequences of characters.

    Examples:
        >>> normalize_items("job-a")
        ('job-a',)
        >>> normalize_items(["job-a", "job-b"])
        ('job-a', 'job-b')
        >>> normalize_items(normalize_items("job-a"))
        ('job-a',)
    """
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return (value,)  # type: ignore[return-value]
    return tuple(value)


def scalar_or_sequence(
    read_item: Reader[T], *, null_as_empty: bool = False
) -> Reader[tuple[T, ...]]:
    """Build a reader accepting one item or a sequence of items.

    A bare scalar becomes a one-element tuple; a sequence keeps its order.

    Args:
        read_item: Reader applied to each item.
        null_as_empty: Treat an explicit null as an empty sequence instead of
            a type mismatch.
    """

    def read(cursor: Cursor) -> tuple[T, ...]:
        if cursor.is_null and null_as_empty:
            return ()
        if cursor.is_sequence:
            return tuple(read_item(child) for child in cursor.items())
        if cursor.is_scalar:
            return (read_item(cursor),)
        cursor.mismatch("a scalar or a sequence")

    return read


def scalar_or_mapping(scalar: Reader[T], mapping: Reader[T]) -> Reader[T]:
    """Build a reader for a field whose bare-scalar form abbreviates a mapping.

    Args:
        scalar: Builds the canonical object from the scalar shorthand.
        mapping: Builds the canonical object from the full mapping form.
    """

    def read(cursor: Cursor) -> T:
        if cursor.is_mapping:
            return mapping(cursor)
        if cursor.is_scalar and not cursor.is_null:
            return scalar(cursor)
        cursor.mismatch("a scalar or a mapping")

    return read


def aliases_for(key: str) -> tuple[str, ...]:
    """Deprecated spellings accepted for ``key``."""
    return KEY_ALIASES.get(key, ())


def resolve_alias(
    reader: MappingReader, canonical: str, aliases: tuple[str, ...] | None = None
) -> Cursor | None:
    """Resolve ``canonical`` against its aliases and consume whichever is present.

    If only an alias is present it is treated as the canonical key (the
    returned cursor's path uses the canonical name).

    Args:
        reader: Mapping to read from.
        canonical: The canonical key.
        aliases: Alias names; defaults to the registered aliases of ``canonical``.

    Returns:
        Cursor on the value, or None when neither spelling is present.

    Raises:
        ConflictingAliasesError: If the canonical key and an alias are both set.
    """
    if aliases is None:
        aliases = aliases_for(canonical)
    return reader.take(canonical, aliases=aliases)

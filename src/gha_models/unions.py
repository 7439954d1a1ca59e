"""Tagged-union resolution by key presence.

Jobs, steps and ``runs`` blocks are each one of several structurally similar
shapes, told apart only by which keys their mapping carries. Each union is
declared as a module-level tuple of ``Variant`` entries, and
``resolve_variant`` picks exactly one of them or fails:

1. A variant *claims* the mapping when all of its ``required`` keys and at
   least one of its ``any_of`` keys are present.
2. More than one claiming variant is an ``AmbiguousShape``; keys of two
   variants never get merged or silently preferred.
3. No claiming variant is an ``UnrecognizedShape``.
4. The single claiming variant matches only if none of its ``forbidden``
   keys are present; otherwise the shape is unrecognized.

Keys with an explicit null value count as present. The chosen variant's
builder then reads the same mapping and rejects the null if the field's type
does not allow it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from gha_models.exceptions import AmbiguousShapeError, UnrecognizedShapeError
from gha_models.logging import get_logger
from gha_models.reader import Cursor, MappingReader

__all__ = [
    "Variant",
    "resolve_variant",
    "resolve_exclusive",
]

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Variant(Generic[T]):
    """One shape of a tagged union.

    Attributes:
        name: Variant name used in diagnostics (e.g. "RunStep").
        build: Builds the model from the mapping once the variant is chosen.
        any_of: Discriminator keys; at least one must be present.
        required: Discriminator keys that must all be present.
        forbidden: Keys that belong exclusively to other shapes.
    """

    name: str
    build: Callable[[MappingReader], T]
    any_of: frozenset[str] = frozenset()
    required: frozenset[str] = frozenset()
    forbidden: frozenset[str] = frozenset()

    def claims(self, keys: frozenset[str]) -> bool:
        if not self.required <= keys:
            return False
        return not self.any_of or bool(self.any_of & keys)

    def conflicts(self, keys: frozenset[str]) -> frozenset[str]:
        return self.forbidden & keys


def resolve_variant(
    cursor: Cursor, what: str, variants: Iterable[Variant[T]]
) -> T:
    """Select the variant a mapping represents and build it.

    Args:
        cursor: Cursor on the mapping node.
        what: Name of the union, for diagnostics (e.g. "step").
        variants: Candidate variants.

    Returns:
        The model built by the single matching variant.

    Raises:
        TypeMismatchError: If the node is not a mapping.
        AmbiguousShapeError: If more than one variant claims the mapping.
        UnrecognizedShapeError: If no variant claims it, or the claiming
            variant's forbidden keys are present.
    """
    reader = MappingReader(cursor)
    keys = reader.keys
    claiming = [variant for variant in variants if variant.claims(keys)]

    if len(claiming) > 1:
        raise AmbiguousShapeError(
            what,
            [variant.name for variant in claiming],
            keys,
            cursor.path,
            cursor.position,
        )
    if not claiming:
        raise UnrecognizedShapeError(what, keys, cursor.path, cursor.position)

    variant = claiming[0]
    conflicts = variant.conflicts(keys)
    if conflicts:
        raise UnrecognizedShapeError(
            what,
            keys,
            cursor.path,
            cursor.position,
            reason=f"{', '.join(sorted(conflicts))} not allowed in {variant.name}",
        )

    logger.debug("variant_resolved", union=what, variant=variant.name)
    return variant.build(reader)


def resolve_exclusive(
    reader: MappingReader, what: str, *keys: str
) -> str | None:
    """Check that at most one of a group of mutually exclusive keys is present.

    Used for include/ignore filter pairs such as ``branches`` and
    ``branches-ignore``.

    Returns:
        The key that is present, or None.

    Raises:
        AmbiguousShapeError: If more than one key of the group is present.
    """
    present = [key for key in keys if key in reader]
    if len(present) > 1:
        cursor = reader.cursor
        raise AmbiguousShapeError(
            what, present, reader.keys, cursor.path, cursor.position
        )
    return present[0] if present else None

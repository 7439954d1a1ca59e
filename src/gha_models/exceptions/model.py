"""Structured deserialization errors.

Every failure produced while resolving a document tree into typed models is a
``ModelError`` carrying:

- ``kind``: one entry of the closed ``ErrorKind`` taxonomy,
- ``path``: the accessors from the document root to the failing node,
- ``position``: the node's source position, when the tree preserved it.

Exception Hierarchy:
    GhaModelsError
    ├── ModelError
    │   ├── TypeMismatchError
    │   ├── MissingRequiredFieldError
    │   ├── ConflictingAliasesError
    │   ├── UnrecognizedShapeError
    │   ├── AmbiguousShapeError
    │   ├── UnknownKeyError
    │   └── TooDeeplyNestedError
    └── DocumentLoadError (YAML text could not be composed into a tree)
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import ClassVar

from gha_models.exceptions.base import GhaModelsError
from gha_models.types import DocumentPath, SourcePosition, format_path

__all__ = [
    "ErrorKind",
    "ModelError",
    "TypeMismatchError",
    "MissingRequiredFieldError",
    "ConflictingAliasesError",
    "UnrecognizedShapeError",
    "AmbiguousShapeError",
    "UnknownKeyError",
    "TooDeeplyNestedError",
    "DocumentLoadError",
]


class ErrorKind(str, Enum):
    """Closed taxonomy of deserialization failures."""

    TYPE_MISMATCH = "TypeMismatch"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    CONFLICTING_ALIASES = "ConflictingAliases"
    UNRECOGNIZED_SHAPE = "UnrecognizedShape"
    AMBIGUOUS_SHAPE = "AmbiguousShape"
    UNKNOWN_KEY = "UnknownKey"
    TOO_DEEPLY_NESTED = "TooDeeplyNested"


class ModelError(GhaModelsError):
    """Base class for every structured deserialization failure.

    Attributes:
        kind: Error kind from the closed taxonomy.
        detail: The failure description without location information.
        path: Accessors from the document root to the failing node.
        position: Source position of the failing node, if known.
    """

    kind: ClassVar[ErrorKind]

    def __init__(
        self,
        detail: str,
        path: DocumentPath = (),
        position: SourcePosition | None = None,
    ) -> None:
        self.detail = detail
        self.path = tuple(path)
        self.position = position
        location = format_path(self.path)
        if position is not None:
            location = f"{location} ({position})"
        super().__init__(f"{detail} at {location}")

    @property
    def location(self) -> str:
        """The failing node's path rendered as ``jobs.test.steps[0]``."""
        return format_path(self.path)


class TypeMismatchError(ModelError):
    """A scalar or node is present but of the wrong kind.

    Attributes:
        expected: Description of the accepted kind(s).
        actual: Description of what was found.
    """

    kind = ErrorKind.TYPE_MISMATCH

    def __init__(
        self,
        expected: str,
        actual: str,
        path: DocumentPath = (),
        position: SourcePosition | None = None,
        *,
        reason: str | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        detail = f"expected {expected}, got {actual}"
        if reason:
            detail = f"{detail} ({reason})"
        super().__init__(detail, path, position)


class MissingRequiredFieldError(ModelError):
    """A required key is absent after alias resolution."""

    kind = ErrorKind.MISSING_REQUIRED_FIELD

    def __init__(
        self,
        field: str,
        path: DocumentPath = (),
        position: SourcePosition | None = None,
        *,
        reason: str | None = None,
    ) -> None:
        self.field = field
        detail = f"missing required field '{field}'"
        if reason:
            detail = f"{detail} ({reason})"
        super().__init__(detail, path, position)


class ConflictingAliasesError(ModelError):
    """A canonical key and one of its deprecated aliases are both present."""

    kind = ErrorKind.CONFLICTING_ALIASES

    def __init__(
        self,
        canonical: str,
        alias: str,
        path: DocumentPath = (),
        position: SourcePosition | None = None,
    ) -> None:
        self.canonical = canonical
        self.alias = alias
        super().__init__(
            f"'{canonical}' and its alias '{alias}' are both set",
            path,
            position,
        )


class UnrecognizedShapeError(ModelError):
    """A mapping matches none of the variants of a tagged union."""

    kind = ErrorKind.UNRECOGNIZED_SHAPE

    def __init__(
        self,
        what: str,
        present_keys: Iterable[str],
        path: DocumentPath = (),
        position: SourcePosition | None = None,
        *,
        reason: str | None = None,
    ) -> None:
        self.what = what
        self.present_keys = frozenset(present_keys)
        keys = ", ".join(sorted(self.present_keys)) or "no keys"
        detail = f"unrecognized {what} shape with keys [{keys}]"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail, path, position)


class AmbiguousShapeError(ModelError):
    """A mapping matches more than one variant of a tagged union."""

    kind = ErrorKind.AMBIGUOUS_SHAPE

    def __init__(
        self,
        what: str,
        candidates: Iterable[str],
        present_keys: Iterable[str],
        path: DocumentPath = (),
        position: SourcePosition | None = None,
    ) -> None:
        self.what = what
        self.candidates = tuple(candidates)
        self.present_keys = frozenset(present_keys)
        super().__init__(
            f"ambiguous {what}: matches {' and '.join(self.candidates)}",
            path,
            position,
        )


class UnknownKeyError(ModelError):
    """A key is not recognized by any field or alias (strict mode)."""

    kind = ErrorKind.UNKNOWN_KEY

    def __init__(
        self,
        key: str,
        path: DocumentPath = (),
        position: SourcePosition | None = None,
    ) -> None:
        self.key = key
        super().__init__(f"unknown key '{key}'", path, position)


class TooDeeplyNestedError(ModelError):
    """The input nests deeper than the configured depth guard."""

    kind = ErrorKind.TOO_DEEPLY_NESTED

    def __init__(
        self,
        limit: int,
        path: DocumentPath = (),
        position: SourcePosition | None = None,
    ) -> None:
        self.limit = limit
        super().__init__(f"document nests deeper than {limit} levels", path, position)


class DocumentLoadError(GhaModelsError):
    """Exception raised when YAML text cannot be composed into a node tree.

    Attributes:
        message: Human-readable error message.
        line_number: Line number where the YAML error occurred (if known).
        parse_error: The underlying error from the YAML library.
    """

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        self.line_number = line_number
        self.parse_error = parse_error
        super().__init__(message)

"""Parse results.

Parse entry points never raise for malformed documents and never return a
partially-built model: they return a ``ParseResult`` holding either the typed
document or the first error found, plus any non-fatal warnings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from gha_models.types import DocumentPath, SourcePosition, format_path

if TYPE_CHECKING:
    from gha_models.exceptions import ModelError

__all__ = ["ParseWarning", "ParseResult"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """Non-fatal finding recorded during a parse.

    Fields:
        message: Event name describing the finding (e.g. "unknown_key_ignored")
        path: Accessors from the document root to the node concerned
        position: Source position of the node, if known
    """

    message: str
    path: DocumentPath
    position: SourcePosition | None = None

    @property
    def location(self) -> str:
        return format_path(self.path)


@dataclass(frozen=True, slots=True)
class ParseResult(Generic[T]):
    """Outcome of parsing one document.

    Exactly one of ``value`` and ``error`` is set.

    Fields:
        value: The fully typed document, if parsing succeeded
        error: The first error found in a depth-first walk, if it failed
        warnings: Warnings recorded before success or failure
    """

    value: T | None = None
    error: ModelError | None = None
    warnings: tuple[ParseWarning, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the document, or raise the parse error.

        Raises:
            ModelError: If parsing failed.
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

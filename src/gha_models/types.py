"""Foundational types shared across the model layer.

This module defines small value types used by the reader, the error surface,
and the models themselves: document paths and source positions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

__all__ = [
    "PathElement",
    "DocumentPath",
    "SourcePosition",
    "format_path",
]

# A single accessor in a document path: a mapping key or a sequence index.
PathElement: TypeAlias = str | int

# Accessors from the document root down to a node.
DocumentPath: TypeAlias = tuple[PathElement, ...]


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """Position of a node in its source document.

    Attributes:
        line: 1-indexed line number.
        column: 1-indexed column number.
    """

    line: int
    column: int

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


def format_path(path: DocumentPath) -> str:
    """Render a document path the way it reads in a workflow file.

    Keys are joined with dots and indices use brackets. Keys that contain
    dots or spaces are quoted so the rendering stays unambiguous.

    Examples:
        >>> format_path(("jobs", "test", "steps", 1, "with"))
        'jobs.test.steps[1].with'
        >>> format_path(())
        '<root>'
    """
    if not path:
        return "<root>"

    parts: list[str] = []
    for element in path:
        if isinstance(element, int):
            parts.append(f"[{element}]")
            continue
        text = element if not any(c in element for c in ". []") else f'"{element}"'
        parts.append(f".{text}" if parts else text)
    return "".join(parts)

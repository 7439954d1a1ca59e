"""Expression inventory.

Walks a parsed document and yields every expression it carries, with the
path at which it appears, for scanners that inspect expressions (template
injection checks, context usage reports) without re-walking the models.

Paths use the document's own keys (``runs-on``, ``if``), so they read the
same as the paths in parse errors.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel

from gha_models.expressions import classify
from gha_models.schema.events import ScheduleEvent, Trigger
from gha_models.schema.job import Matrix
from gha_models.types import DocumentPath, format_path
from gha_models.values import ExpressionValue, LiteralValue

__all__ = ["iter_expressions", "expression_report"]

# Model fields that hold the node's own contents rather than a keyed child.
_TRANSPARENT_FIELDS: dict[type[BaseModel], str] = {
    Trigger: "events",
    Matrix: "dimensions",
    ScheduleEvent: "entries",
}


def _walk(value: Any, path: DocumentPath) -> Iterator[tuple[DocumentPath, ExpressionValue]]:
    if isinstance(value, ExpressionValue):
        yield path, value
    elif isinstance(value, LiteralValue):
        return
    elif isinstance(value, BaseModel):
        transparent = _TRANSPARENT_FIELDS.get(type(value))
        for name, field in type(value).model_fields.items():
            child = getattr(value, name)
            if isinstance(child, str):
                # Plain string fields (shell, main, descriptions) are never evaluated.
                continue
            if name == transparent:
                yield from _walk(child, path)
            else:
                yield from _walk(child, (*path, field.alias or name))
    elif isinstance(value, dict):
        for key, child in value.items():
            yield from _walk(child, (*path, key))
    elif isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            yield from _walk(child, (*path, index))
    elif isinstance(value, str):
        # Free-form data (matrix entries) keeps expressions as raw strings.
        kind = classify(value)
        if kind is not None:
            yield path, ExpressionValue(raw=value, kind=kind)


def iter_expressions(model: BaseModel) -> Iterator[tuple[DocumentPath, ExpressionValue]]:
    """Yield ``(path, expression)`` for every expression in ``model``.

    Expressions are yielded in field order, which follows the document's
    order for every mapping.

    Args:
        model: A parsed document, or any model within one.

    Example:
        >>> for path, expression in iter_expressions(document):
        ...     print(format_path(path), expression.fragments)
    """
    yield from _walk(model, ())


def expression_report(model: BaseModel) -> list[tuple[str, str]]:
    """Rendered ``(path, raw expression)`` pairs, for logs and CLI output."""
    return [(format_path(path), expression.raw) for path, expression in iter_expressions(model)]

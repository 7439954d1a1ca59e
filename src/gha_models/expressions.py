"""Recognition of ``${{ ... }}`` expressions.

The model layer never evaluates expressions. It only needs to know whether a
string carries one, and in which form:

- explicit: the whole (trimmed) value is a single ``${{ <expr> }}``;
- interpolated: one or more ``${{ <expr> }}`` embedded in other text;
- implicit: a condition field (``if``, ``pre-if``, ``post-if``) holding a bare
  expression such as ``success()``, which the runner evaluates without fences.
"""

from __future__ import annotations

import re
from enum import Enum

__all__ = [
    "ExpressionKind",
    "contains_expression",
    "is_explicit",
    "strip_fence",
    "extract_all",
    "classify",
]

_EXPRESSION_PATTERN = re.compile(r"\$\{\{(.*?)\}\}", re.DOTALL)


class ExpressionKind(str, Enum):
    """How an expression appears in its source string."""

    EXPLICIT = "explicit"  # ${{ matrix.python }}
    INTERPOLATED = "interpolated"  # dist/${{ env.name }}.tar.gz
    IMPLICIT = "implicit"  # success() in an if: field


def contains_expression(text: str) -> bool:
    """Return True if ``text`` contains at least one ``${{ ... }}``."""
    return "${{" in text and _EXPRESSION_PATTERN.search(text) is not None


def is_explicit(text: str) -> bool:
    """Return True if the trimmed ``text`` is exactly one fenced expression.

    Examples:
        >>> is_explicit("  ${{ foo }} ")
        True
        >>> is_explicit("${{ a }}-${{ b }}")
        False
    """
    stripped = text.strip()
    match = _EXPRESSION_PATTERN.fullmatch(stripped)
    return match is not None and "}}" not in match.group(1)


def strip_fence(text: str) -> str:
    """Return the inner expression of an explicit expression, trimmed.

    Raises:
        ValueError: If ``text`` is not a single fenced expression.

    Examples:
        >>> strip_fence("${{ matrix.python }}")
        'matrix.python'
    """
    if not is_explicit(text):
        raise ValueError(f"not a fenced expression: {text!r}")
    return text.strip()[3:-2].strip()


def extract_all(text: str) -> list[str]:
    """Return the trimmed bodies of every ``${{ ... }}`` in ``text``, in order.

    Examples:
        >>> extract_all("a ${{ x }} b ${{ y.z }}")
        ['x', 'y.z']
        >>> extract_all("no expressions here")
        []
    """
    if not text:
        return []
    return [match.group(1).strip() for match in _EXPRESSION_PATTERN.finditer(text)]


def classify(text: str, *, condition: bool = False) -> ExpressionKind | None:
    """Classify ``text`` as an expression kind, or None for a plain literal.

    Args:
        text: The scalar's string form.
        condition: True for condition fields, where any string is an
            expression even without fences.
    """
    if contains_expression(text):
        return ExpressionKind.EXPLICIT if is_explicit(text) else ExpressionKind.INTERPOLATED
    if condition:
        return ExpressionKind.IMPLICIT
    return None

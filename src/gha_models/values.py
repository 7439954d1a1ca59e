"""Permissive scalar values.

Most workflow fields accept either a literal of their natural type or a
string carrying an expression. ``PermissiveValue`` models exactly that:

- ``LiteralValue``: a plain scalar (str, int, float, bool, or null), typed by
  the format's implicit-typing rules;
- ``ExpressionValue``: a string containing ``${{ }}`` (or, in condition
  fields, a bare expression), kept verbatim and never evaluated.

Plain scalars are typed with the YAML 1.2 core schema that the workflow
runner uses (``yes``/``on`` stay strings, unlike YAML 1.1). Quoted and block
scalars are always strings; explicit tags such as ``!!str`` are honored.
"""

from __future__ import annotations

import math
import re
from typing import Any, TypeAlias

import yaml
from pydantic import BaseModel, ConfigDict

from gha_models.expressions import ExpressionKind, classify, extract_all, strip_fence
from gha_models.tree import ScalarNode

__all__ = [
    "Scalar",
    "LiteralValue",
    "ExpressionValue",
    "PermissiveValue",
    "is_null_scalar",
    "scalar_value",
    "permissive_from_scalar",
    "render_literal",
    "plain_data",
    "retypes_as_non_string",
]

Scalar: TypeAlias = bool | int | float | str | None

_STR_TAG = "tag:yaml.org,2002:str"
_NULL_TAG = "tag:yaml.org,2002:null"

_NULLS = frozenset({"", "~", "null", "Null", "NULL"})
_TRUES = frozenset({"true", "True", "TRUE"})
_FALSES = frozenset({"false", "False", "FALSE"})
_INT_DEC = re.compile(r"[-+]?[0-9]+")
_INT_OCT = re.compile(r"0o[0-7]+")
_INT_HEX = re.compile(r"0x[0-9a-fA-F]+")
_FLOAT = re.compile(r"[-+]?(\.[0-9]+|[0-9]+(\.[0-9]*)?)([eE][-+]?[0-9]+)?")
_INF = re.compile(r"[-+]?\.(inf|Inf|INF)")
_NAN = re.compile(r"\.(nan|NaN|NAN)")

# Used only to tell an explicit tag apart from the one PyYAML inferred.
_RESOLVER = yaml.resolver.Resolver()


class LiteralValue(BaseModel):
    """A literal scalar value.

    Attributes:
        value: The scalar, typed by the implicit-typing rules.
    """

    model_config = ConfigDict(frozen=True)

    value: Scalar

    def __str__(self) -> str:
        return render_literal(self.value)


class ExpressionValue(BaseModel):
    """A string carrying an unevaluated expression.

    Attributes:
        raw: The source string, verbatim.
        kind: Whether the expression is explicit, interpolated, or implicit.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    kind: ExpressionKind

    @property
    def body(self) -> str:
        """The expression text without ``${{ }}`` fences.

        For interpolated strings there is no single body; the raw text is
        returned and ``fragments`` lists the embedded expressions.
        """
        if self.kind is ExpressionKind.EXPLICIT:
            return strip_fence(self.raw)
        if self.kind is ExpressionKind.IMPLICIT:
            return self.raw.strip()
        return self.raw

    @property
    def fragments(self) -> list[str]:
        """Bodies of every expression in the string, in source order."""
        if self.kind is ExpressionKind.IMPLICIT:
            return [self.raw.strip()]
        return extract_all(self.raw)

    def as_curly(self) -> str:
        """The expression in fenced ``${{ ... }}`` form."""
        if self.kind is ExpressionKind.IMPLICIT:
            return f"${{{{ {self.body} }}}}"
        return self.raw

    def __str__(self) -> str:
        return self.raw


PermissiveValue: TypeAlias = LiteralValue | ExpressionValue


def render_literal(value: Scalar) -> str:
    """Stringify a literal the way the runner does for env and inputs."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_null_scalar(node: ScalarNode) -> bool:
    """Return True if ``node`` is a null by the implicit-typing rules."""
    return scalar_value(node) is None


def _has_explicit_tag(node: ScalarNode) -> bool:
    plain = node.style is None
    inferred = _RESOLVER.resolve(ScalarNode, node.value, (plain, not plain))
    return node.tag != inferred


def _core_schema_value(text: str) -> Scalar:
    if text in _NULLS:
        return None
    if text in _TRUES:
        return True
    if text in _FALSES:
        return False
    if _INT_DEC.fullmatch(text):
        try:
            return int(text, 10)
        except ValueError:
            # Past the interpreter's digit limit; keep the source text.
            return text
    if _INT_OCT.fullmatch(text):
        return int(text[2:], 8)
    if _INT_HEX.fullmatch(text):
        return int(text[2:], 16)
    if _FLOAT.fullmatch(text):
        return float(text)
    if _INF.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    if _NAN.fullmatch(text):
        return math.nan
    return text


def scalar_value(node: ScalarNode) -> Scalar:
    """Type a scalar node by the format's implicit-typing rules.

    Examples:
        >>> from gha_models.tree import compose_document
        >>> scalar_value(compose_document("yes"))
        'yes'
        >>> scalar_value(compose_document("'3.10'"))
        '3.10'
        >>> scalar_value(compose_document("3.10"))
        3.1
    """
    if _has_explicit_tag(node):
        if node.tag == _STR_TAG:
            return node.value
        if node.tag == _NULL_TAG:
            return None
        if node.tag.startswith("tag:yaml.org,2002:"):
            return _core_schema_value(node.value)
        return node.value

    if node.style is not None:
        return node.value
    return _core_schema_value(node.value)


def permissive_from_scalar(
    node: ScalarNode, *, condition: bool = False
) -> LiteralValue | ExpressionValue:
    """Classify a scalar node as a literal or an expression.

    Any string containing ``${{ ... }}`` is an expression regardless of the
    field's declared type. In condition fields every string is an expression.

    Args:
        node: The scalar node.
        condition: True for ``if``-style fields.
    """
    value = scalar_value(node)
    if isinstance(value, str):
        kind = classify(value, condition=condition)
        if kind is not None:
            return ExpressionValue(raw=value, kind=kind)
    return LiteralValue(value=value)


def plain_data(value: Any) -> Any:
    """Convert permissive values nested in plain containers back to plain data."""
    if isinstance(value, LiteralValue):
        return value.value
    if isinstance(value, ExpressionValue):
        return value.raw
    if isinstance(value, dict):
        return {k: plain_data(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain_data(v) for v in value]
    return value


def retypes_as_non_string(text: str) -> bool:
    """Return True if ``text`` written as a plain scalar would not read back as a string.

    Examples:
        >>> retypes_as_non_string("1e3")
        True
        >>> retypes_as_non_string("ubuntu-latest")
        False
    """
    return not isinstance(_core_schema_value(text), str)

"""Adapter over PyYAML's composed node tree.

The model layer consumes the generic node tree PyYAML produces with
``yaml.compose``: ``ScalarNode``, ``SequenceNode`` and ``MappingNode`` with
ordered keys and source marks. Composing (rather than loading) keeps each
scalar's source text and quoting style, which the scalar layer needs to apply
the format's own implicit-typing rules instead of YAML 1.1's.
"""

from __future__ import annotations

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from gha_models.exceptions import DocumentLoadError
from gha_models.types import SourcePosition

__all__ = [
    "Node",
    "MappingNode",
    "ScalarNode",
    "SequenceNode",
    "compose_document",
    "node_position",
    "describe_node",
]


def compose_document(text: str) -> Node:
    """Compose YAML text into a node tree.

    Args:
        text: YAML document text.

    Returns:
        The root node of the single document in ``text``.

    Raises:
        DocumentLoadError: If the text is empty, is not valid YAML, or
            contains more than one document.

    Examples:
        >>> node = compose_document("on: push")
        >>> node.value[0][0].value
        'on'
    """
    if not text or text.isspace():
        raise DocumentLoadError("Empty document")

    try:
        node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        line_number = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line_number = mark.line + 1
        raise DocumentLoadError(
            f"YAML syntax error: {e}",
            line_number=line_number,
            parse_error=e,
        ) from e
    except RecursionError as e:
        raise DocumentLoadError("Document nests too deeply to compose", parse_error=e) from e

    if node is None:
        raise DocumentLoadError("Document contains only comments or directives")
    return node


def node_position(node: Node) -> SourcePosition | None:
    """Return the 1-indexed start position of ``node``, if it has one."""
    mark = getattr(node, "start_mark", None)
    if mark is None:
        return None
    return SourcePosition(line=mark.line + 1, column=mark.column + 1)


def describe_node(node: Node) -> str:
    """Short human-readable description of a node's kind, for error messages."""
    if isinstance(node, MappingNode):
        return "a mapping"
    if isinstance(node, SequenceNode):
        return "a sequence"
    if isinstance(node, ScalarNode):
        if node.style is None and node.value in ("", "~", "null", "Null", "NULL"):
            return "null"
        return f"scalar {node.value!r}"
    return type(node).__name__

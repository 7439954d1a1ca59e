"""Recursive-descent builders from node trees to typed models.

Public entry points:
    parse_workflow / parse_action: node tree -> ParseResult
    load_workflow / load_action: YAML text -> ParseResult
"""

from __future__ import annotations

from gha_models.parser.action import load_action, parse_action
from gha_models.parser.workflow import load_workflow, parse_workflow

__all__ = [
    "parse_workflow",
    "parse_action",
    "load_workflow",
    "load_action",
]

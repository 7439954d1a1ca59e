"""Typed models for GitHub Actions workflows and action manifests.

This package resolves the node tree of a workflow document
(``.github/workflows/*.yml``) or an action manifest (``action.yml``) into
immutable, strongly-typed pydantic models:

- tree.py / values.py / expressions.py: node tree adapter, YAML 1.2 scalar
  typing, and recognition of ``${{ }}`` expressions
- reader.py / shorthand.py / unions.py: cursor-based recursive descent,
  shorthand expansion, and key-presence discrimination of tagged unions
- schema/: the typed models
- parser/: the builders and the ``parse_*`` / ``load_*`` entry points
- writer.py / inventory.py: serialization back to YAML/JSON and an
  expression walk for scanners

Example:
    from gha_models import load_workflow

    result = load_workflow(text)
    if not result.ok:
        print(result.error.kind, result.error.location)
    document = result.unwrap()
    print(document.jobs["test"].strategy.matrix.dimensions["python"])
"""

from __future__ import annotations

from gha_models.config import ParserSettings, UnknownKeyPolicy, load_settings
from gha_models.exceptions import (
    AmbiguousShapeError,
    ConfigError,
    ConflictingAliasesError,
    DocumentLoadError,
    ErrorKind,
    GhaModelsError,
    MissingRequiredFieldError,
    ModelError,
    TooDeeplyNestedError,
    TypeMismatchError,
    UnknownKeyError,
    UnrecognizedShapeError,
)
from gha_models.expressions import ExpressionKind
from gha_models.inventory import iter_expressions
from gha_models.parser import load_action, load_workflow, parse_action, parse_workflow
from gha_models.results import ParseResult, ParseWarning
from gha_models.schema import ActionManifest, WorkflowDocument
from gha_models.tree import compose_document
from gha_models.types import SourcePosition, format_path
from gha_models.values import ExpressionValue, LiteralValue, PermissiveValue
from gha_models.writer import DocumentWriter

__all__ = [
    # Entry points
    "parse_workflow",
    "parse_action",
    "load_workflow",
    "load_action",
    "compose_document",
    # Results
    "ParseResult",
    "ParseWarning",
    # Documents
    "WorkflowDocument",
    "ActionManifest",
    # Values
    "ExpressionKind",
    "ExpressionValue",
    "LiteralValue",
    "PermissiveValue",
    # Settings
    "ParserSettings",
    "UnknownKeyPolicy",
    "load_settings",
    # Errors
    "GhaModelsError",
    "ConfigError",
    "DocumentLoadError",
    "ErrorKind",
    "ModelError",
    "TypeMismatchError",
    "MissingRequiredFieldError",
    "ConflictingAliasesError",
    "UnrecognizedShapeError",
    "AmbiguousShapeError",
    "UnknownKeyError",
    "TooDeeplyNestedError",
    # Paths
    "SourcePosition",
    "format_path",
    # Output
    "DocumentWriter",
    "iter_expressions",
]

"""gha-models exception hierarchy.

All exceptions can be imported from this package:
    from gha_models.exceptions import ModelError, TypeMismatchError
"""

from __future__ import annotations

# Base exception
from gha_models.exceptions.base import GhaModelsError

# Configuration exceptions
from gha_models.exceptions.config import ConfigError

# Deserialization exceptions
from gha_models.exceptions.model import (
    AmbiguousShapeError,
    ConflictingAliasesError,
    DocumentLoadError,
    ErrorKind,
    MissingRequiredFieldError,
    ModelError,
    TooDeeplyNestedError,
    TypeMismatchError,
    UnknownKeyError,
    UnrecognizedShapeError,
)

__all__ = [
    # Base
    "GhaModelsError",
    # Config
    "ConfigError",
    # Deserialization
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

"""Parser configuration defaults and format constants.

This module centralizes the default values and the read-only tables the
parser consults: depth limits, key aliases, and the vocabularies of the
workflow and action formats. Everything here is built once at import time
and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

__all__ = [
    "ParserDefaults",
    "DEFAULTS",
    "KEY_ALIASES",
    "PERMISSION_SCOPES",
    "CALL_INPUT_TYPES",
    "DISPATCH_INPUT_TYPES",
]


@dataclass(frozen=True, slots=True)
class ParserDefaults:
    """Default values for parsing and serialization.

    Attributes:
        Parsing:
            MAX_DEPTH: Maximum nesting depth accepted before failing with
                TooDeeplyNested. Recursive YAML aliases hit this limit too.
            UNKNOWN_KEYS: Default policy for unrecognized keys ("reject" or
                "warn").

        Conditions:
            DEFAULT_HOOK_CONDITION: Condition used for pre/post hooks when
                pre-if/post-if is absent.
            DEFAULT_STEP_CONDITION: Condition used for steps and jobs when
                if is absent.

        Serialization:
            JSON_INDENT: Default indentation for JSON output.
    """

    # Parsing
    MAX_DEPTH: int = 64
    UNKNOWN_KEYS: str = "reject"

    # Conditions
    DEFAULT_HOOK_CONDITION: str = "always()"
    DEFAULT_STEP_CONDITION: str = "success()"

    # Serialization
    JSON_INDENT: int = 2


DEFAULTS = ParserDefaults()

# Canonical key -> accepted deprecated spellings. `true` is what YAML 1.1
# loaders turn an unquoted `on:` key into; documents round-tripped through
# such loaders carry it instead of `on`.
KEY_ALIASES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "on": ("true",),
    }
)

PERMISSION_SCOPES: frozenset[str] = frozenset(
    {
        "actions",
        "attestations",
        "checks",
        "contents",
        "deployments",
        "discussions",
        "id-token",
        "issues",
        "models",
        "packages",
        "pages",
        "pull-requests",
        "repository-projects",
        "security-events",
        "statuses",
    }
)

CALL_INPUT_TYPES: frozenset[str] = frozenset({"boolean", "number", "string"})

DISPATCH_INPUT_TYPES: frozenset[str] = frozenset(
    {"boolean", "choice", "number", "environment", "string"}
)

"""Builders shared by workflow and action parsing.

Every builder takes a ``Cursor`` and returns a model, raising a
``ModelError`` subclass on the first problem it finds. ``run_parse`` wraps a
root builder: it sets up the per-call state and turns the raised error into
a ``ParseResult``.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from gha_models.config import ParserSettings, load_settings
from gha_models.constants import PERMISSION_SCOPES
from gha_models.exceptions import ModelError, TooDeeplyNestedError
from gha_models.logging import get_logger
from gha_models.reader import (
    Cursor,
    MappingReader,
    ParseState,
    Reader,
    read_bool_or_expression,
    read_condition,
    read_expression,
    read_mapping,
    read_number_or_expression,
    read_text,
    read_text_value,
    read_value,
)
from gha_models.results import ParseResult
from gha_models.schema.common import (
    BasePermission,
    Concurrency,
    Defaults,
    Env,
    PermissionLevel,
    Permissions,
    RunDefaults,
    RunStep,
    Step,
    UsesStep,
)
from gha_models.shorthand import scalar_or_mapping
from gha_models.tree import Node
from gha_models.unions import Variant, resolve_variant
from gha_models.uses import read_step_uses

__all__ = [
    "present",
    "read_choice",
    "read_env",
    "read_permissions",
    "read_concurrency",
    "read_defaults",
    "build_run_step",
    "build_uses_step",
    "STEP_VARIANTS",
    "COMPOSITE_STEP_VARIANTS",
    "read_step",
    "read_composite_step",
    "read_steps",
    "run_parse",
]

T = TypeVar("T")

logger = get_logger(__name__)


def present(**values: Any) -> dict[str, Any]:
    """Keyword arguments for a model, without the fields that were absent."""
    return {name: value for name, value in values.items() if value is not None}


def read_choice(choices: frozenset[str], expected: str) -> Reader[str]:
    """Build a reader for a string restricted to ``choices``."""

    def read(cursor: Cursor) -> str:
        text = read_text(cursor)
        if text not in choices:
            cursor.mismatch(expected)
        return text

    return read


def read_env(cursor: Cursor) -> Env:
    """Read an ``env:`` block: a mapping of values or one expression."""
    expression = read_expression(cursor)
    if expression is not None:
        return expression
    if cursor.is_scalar and not cursor.is_null:
        cursor.mismatch("a mapping or an expression")
    return read_mapping(read_value)(cursor)


# =============================================================================
# Permissions
# =============================================================================


def _read_permission_level(cursor: Cursor) -> PermissionLevel:
    text = read_text(cursor)
    try:
        return PermissionLevel(text)
    except ValueError:
        cursor.mismatch("read, write or none")


def read_permissions(cursor: Cursor) -> Permissions:
    """Read a ``permissions:`` block (``read-all``/``write-all`` or per scope)."""
    if cursor.is_scalar and not cursor.is_null:
        text = read_text(cursor)
        try:
            return Permissions(base=BasePermission(text))
        except ValueError:
            cursor.mismatch("read-all, write-all or a mapping of scopes")

    reader = MappingReader(cursor)
    scopes: dict[str, PermissionLevel] = {}
    for scope in reader.ordered_keys():
        if scope in PERMISSION_SCOPES:
            scopes[scope] = reader.required(scope, _read_permission_level)
    reader.finish()
    return Permissions(scopes=scopes)


# =============================================================================
# Concurrency / defaults
# =============================================================================


def _read_concurrency_mapping(cursor: Cursor) -> Concurrency:
    reader = MappingReader(cursor)
    group = reader.required("group", read_text_value)
    cancel = reader.optional("cancel-in-progress", read_bool_or_expression)
    reader.finish()
    return Concurrency(**present(group=group, cancel_in_progress=cancel))


read_concurrency: Reader[Concurrency] = scalar_or_mapping(
    scalar=lambda cursor: Concurrency(group=read_text_value(cursor)),
    mapping=_read_concurrency_mapping,
)


def _read_run_defaults(cursor: Cursor) -> RunDefaults:
    reader = MappingReader(cursor)
    values = present(
        shell=reader.optional("shell", read_text),
        working_directory=reader.optional("working-directory", read_text_value),
    )
    reader.finish()
    return RunDefaults(**values)


def read_defaults(cursor: Cursor) -> Defaults:
    reader = MappingReader(cursor)
    run = reader.optional("run", _read_run_defaults)
    reader.finish()
    return Defaults(**present(run=run))


# =============================================================================
# Steps
# =============================================================================


def _common_step_fields(reader: MappingReader) -> dict[str, Any]:
    return present(
        id=reader.optional("id", read_text),
        if_=reader.optional("if", read_condition),
        name=reader.optional("name", read_text_value),
        env=reader.optional("env", read_env),
        continue_on_error=reader.optional("continue-on-error", read_bool_or_expression),
        timeout_minutes=reader.optional("timeout-minutes", read_number_or_expression),
    )


def build_run_step(reader: MappingReader, *, require_shell: bool = False) -> RunStep:
    """Build a ``run:`` step. Composite actions require an explicit shell."""
    run = reader.required("run", read_text_value)
    if require_shell:
        shell = reader.required("shell", read_text)
    else:
        shell = reader.optional("shell", read_text)
    working_directory = reader.optional("working-directory", read_text_value)
    fields = _common_step_fields(reader)
    reader.finish()
    return RunStep(
        run=run,
        **present(shell=shell, working_directory=working_directory),
        **fields,
    )


def build_uses_step(reader: MappingReader) -> UsesStep:
    uses = reader.required("uses", read_step_uses)
    with_ = reader.optional("with", read_mapping(read_value))
    fields = _common_step_fields(reader)
    reader.finish()
    return UsesStep(uses=uses, **present(with_=with_), **fields)


STEP_VARIANTS: tuple[Variant[Step], ...] = (
    Variant(
        "RunStep",
        build_run_step,
        required=frozenset({"run"}),
        forbidden=frozenset({"with"}),
    ),
    Variant(
        "UsesStep",
        build_uses_step,
        required=frozenset({"uses"}),
        forbidden=frozenset({"shell", "working-directory"}),
    ),
)

# Steps of a composite action: same shapes, but run steps must name a shell.
COMPOSITE_STEP_VARIANTS: tuple[Variant[Step], ...] = (
    Variant(
        "RunStep",
        functools.partial(build_run_step, require_shell=True),
        required=frozenset({"run"}),
        forbidden=frozenset({"with"}),
    ),
    STEP_VARIANTS[1],
)


def read_step(cursor: Cursor) -> Step:
    return resolve_variant(cursor, "step", STEP_VARIANTS)


def read_composite_step(cursor: Cursor) -> Step:
    return resolve_variant(cursor, "step", COMPOSITE_STEP_VARIANTS)


def read_steps(read_item: Reader[Step] = read_step) -> Reader[tuple[Step, ...]]:
    """Build a reader for a non-empty sequence of steps."""

    def read(cursor: Cursor) -> tuple[Step, ...]:
        steps = tuple(read_item(child) for child in cursor.items())
        if not steps:
            cursor.mismatch("a non-empty sequence of steps")
        return steps

    return read


# =============================================================================
# Entry point driver
# =============================================================================


def run_parse(
    tree: Node,
    build: Callable[[Cursor], T],
    document: str,
    settings: ParserSettings | None = None,
) -> ParseResult[T]:
    """Run a root builder over ``tree`` and wrap the outcome.

    Args:
        tree: Root node of the document.
        build: Root builder.
        document: Document kind for log events ("workflow" or "action").
        settings: Parser settings; loaded from the environment when omitted.

    Returns:
        ParseResult with the document, or with the first error found.

    Raises:
        ConfigError: If settings are loaded from an invalid environment.
    """
    if settings is None:
        settings = load_settings()
    state = ParseState(settings=settings)
    log = logger.bind(unknown_keys=settings.unknown_keys.value)
    log.debug(f"{document}_parse_started")

    try:
        value = build(Cursor(tree, state))
    except ModelError as e:
        log.info(
            f"{document}_parse_failed",
            kind=e.kind.value,
            path=e.location,
            position=e.position,
            detail=e.detail,
        )
        return ParseResult(error=e, warnings=tuple(state.warnings))
    except RecursionError:
        error = TooDeeplyNestedError(settings.max_depth)
        log.info(f"{document}_parse_failed", kind=error.kind.value, path=error.location)
        return ParseResult(error=error, warnings=tuple(state.warnings))

    log.debug(f"{document}_parse_completed", warnings=len(state.warnings))
    return ParseResult(value=value, warnings=tuple(state.warnings))

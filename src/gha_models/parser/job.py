"""Builders for jobs and their runner-side settings."""

from __future__ import annotations

from typing import Any, Literal

from gha_models.exceptions import MissingRequiredFieldError
from gha_models.expressions import ExpressionKind
from gha_models.parser.common import (
    present,
    read_concurrency,
    read_defaults,
    read_env,
    read_permissions,
    read_steps,
)
from gha_models.reader import (
    Cursor,
    MappingReader,
    read_bool_or_expression,
    read_condition,
    read_expression,
    read_mapping,
    read_number_or_expression,
    read_plain,
    read_sequence,
    read_text,
    read_text_value,
    read_value,
)
from gha_models.schema.job import (
    Container,
    DeploymentEnvironment,
    DockerCredentials,
    Job,
    Matrix,
    NormalJob,
    ReusableWorkflowCallJob,
    RunsOn,
    Strategy,
)
from gha_models.shorthand import scalar_or_mapping, scalar_or_sequence
from gha_models.unions import Variant, resolve_variant
from gha_models.uses import read_workflow_uses
from gha_models.values import ExpressionValue, PermissiveValue

__all__ = [
    "read_runs_on",
    "read_environment",
    "read_container",
    "read_matrix",
    "read_strategy",
    "JOB_VARIANTS",
    "read_job",
    "read_jobs",
]

_read_labels = scalar_or_sequence(read_text_value)


# =============================================================================
# Runner settings
# =============================================================================


def read_runs_on(cursor: Cursor) -> RunsOn | ExpressionValue:
    """Read ``runs-on``.

    A value that is exactly one expression stays an expression (it may
    produce a label or a list of labels). Any other scalar or sequence is a
    list of labels; the mapping form selects a runner group and/or labels.
    """
    expression = read_expression(cursor)
    if expression is not None and expression.kind is ExpressionKind.EXPLICIT:
        return expression
    if not cursor.is_mapping:
        labels = _read_labels(cursor)
        if not labels:
            cursor.mismatch("a runner label, a list of labels or a mapping")
        return RunsOn(labels=labels)

    reader = MappingReader(cursor)
    group = reader.optional("group", read_text_value)
    labels = reader.optional("labels", _read_labels)
    reader.finish()
    if group is None and not labels:
        raise MissingRequiredFieldError(
            "group",
            cursor.path,
            cursor.position,
            reason="a runs-on mapping needs a group or labels",
        )
    return RunsOn(**present(group=group, labels=labels))


def _read_environment_mapping(cursor: Cursor) -> DeploymentEnvironment:
    reader = MappingReader(cursor)
    name = reader.required("name", read_text_value)
    url = reader.optional("url", read_text_value)
    reader.finish()
    return DeploymentEnvironment(name=name, **present(url=url))


read_environment = scalar_or_mapping(
    scalar=lambda cursor: DeploymentEnvironment(name=read_text_value(cursor)),
    mapping=_read_environment_mapping,
)


def _read_credentials(cursor: Cursor) -> DockerCredentials:
    reader = MappingReader(cursor)
    values = present(
        username=reader.optional("username", read_text_value),
        password=reader.optional("password", read_text_value),
    )
    reader.finish()
    return DockerCredentials(**values)


def _read_container_mapping(cursor: Cursor) -> Container:
    reader = MappingReader(cursor)
    image = reader.required("image", read_text_value)
    values = present(
        credentials=reader.optional("credentials", _read_credentials),
        env=reader.optional("env", read_env),
        ports=reader.optional("ports", read_sequence(read_value)),
        volumes=reader.optional("volumes", read_sequence(read_text_value)),
        options=reader.optional("options", read_text_value),
    )
    reader.finish()
    return Container(image=image, **values)


read_container = scalar_or_mapping(
    scalar=lambda cursor: Container(image=read_text_value(cursor)),
    mapping=_read_container_mapping,
)


# =============================================================================
# Strategy
# =============================================================================


def _read_combinations(cursor: Cursor) -> tuple[dict[str, Any], ...] | ExpressionValue:
    """Read ``include``/``exclude``: a list of mappings or one expression."""
    expression = read_expression(cursor)
    if expression is not None:
        return expression
    combinations = []
    for item in cursor.items():
        if not item.is_mapping:
            item.mismatch("a mapping of matrix values")
        combinations.append(read_plain(item))
    return tuple(combinations)


def _read_dimension(cursor: Cursor) -> tuple[Any, ...] | ExpressionValue:
    expression = read_expression(cursor)
    if expression is not None:
        return expression
    if not cursor.is_sequence:
        cursor.mismatch("a sequence of values or an expression")
    return tuple(read_plain(item) for item in cursor.items())


def read_matrix(cursor: Cursor) -> Matrix | ExpressionValue:
    """Read ``strategy.matrix``: a mapping of dimensions, or one expression.

    Dimension values keep their source order; entries are plain data.
    """
    expression = read_expression(cursor)
    if expression is not None:
        return expression

    reader = MappingReader(cursor)
    dimensions: dict[str, tuple[Any, ...] | ExpressionValue] = {}
    combinations: dict[str, tuple[dict[str, Any], ...] | ExpressionValue] = {}
    for key, child in reader.entries():
        if key in ("include", "exclude"):
            combinations[key] = _read_combinations(child)
        else:
            dimensions[key] = _read_dimension(child)
    return Matrix(dimensions=dimensions, **combinations)


def read_strategy(cursor: Cursor) -> Strategy:
    reader = MappingReader(cursor)
    values = present(
        matrix=reader.optional("matrix", read_matrix),
        fail_fast=reader.optional("fail-fast", read_bool_or_expression),
        max_parallel=reader.optional("max-parallel", read_number_or_expression),
    )
    reader.finish()
    return Strategy(**values)


# =============================================================================
# Job variants
# =============================================================================

# Keys that only make sense when the job has its own runner.
RUNNER_ONLY_KEYS: frozenset[str] = frozenset(
    {
        "container",
        "services",
        "defaults",
        "environment",
        "outputs",
        "env",
        "timeout-minutes",
        "continue-on-error",
    }
)


def _common_job_fields(reader: MappingReader) -> dict[str, Any]:
    return present(
        name=reader.optional("name", read_text_value),
        permissions=reader.optional("permissions", read_permissions),
        needs=reader.optional("needs", scalar_or_sequence(read_text)),
        if_=reader.optional("if", read_condition),
        strategy=reader.optional("strategy", read_strategy),
        concurrency=reader.optional("concurrency", read_concurrency),
    )


def build_normal_job(reader: MappingReader) -> NormalJob:
    fields = _common_job_fields(reader)
    runs_on = reader.required("runs-on", read_runs_on)
    steps = reader.required("steps", read_steps())
    values = present(
        environment=reader.optional("environment", read_environment),
        outputs=reader.optional("outputs", read_mapping(read_value)),
        env=reader.optional("env", read_env),
        defaults=reader.optional("defaults", read_defaults),
        timeout_minutes=reader.optional("timeout-minutes", read_number_or_expression),
        continue_on_error=reader.optional("continue-on-error", read_bool_or_expression),
        container=reader.optional("container", read_container),
        services=reader.optional("services", read_mapping(read_container)),
    )
    reader.finish()
    return NormalJob(runs_on=runs_on, steps=steps, **values, **fields)


def _read_secrets(cursor: Cursor) -> Literal["inherit"] | dict[str, PermissiveValue]:
    if cursor.is_scalar and not cursor.is_null:
        if read_text(cursor) != "inherit":
            cursor.mismatch("inherit or a mapping of secrets")
        return "inherit"
    return read_mapping(read_value)(cursor)


def build_reusable_job(reader: MappingReader) -> ReusableWorkflowCallJob:
    fields = _common_job_fields(reader)
    uses = reader.required("uses", read_workflow_uses)
    values = present(
        with_=reader.optional("with", read_mapping(read_value)),
        secrets=reader.optional("secrets", _read_secrets),
    )
    reader.finish()
    return ReusableWorkflowCallJob(uses=uses, **values, **fields)


JOB_VARIANTS: tuple[Variant[Job], ...] = (
    Variant(
        "NormalJob",
        build_normal_job,
        any_of=frozenset({"runs-on", "steps"}),
        forbidden=frozenset({"with", "secrets"}),
    ),
    Variant(
        "ReusableWorkflowCallJob",
        build_reusable_job,
        any_of=frozenset({"uses"}),
        forbidden=RUNNER_ONLY_KEYS,
    ),
)


def read_job(cursor: Cursor) -> Job:
    return resolve_variant(cursor, "job", JOB_VARIANTS)


def read_jobs(cursor: Cursor) -> dict[str, Job]:
    """Read the ``jobs:`` mapping, preserving job order."""
    if cursor.is_null:
        cursor.mismatch("a mapping of jobs")
    return read_mapping(read_job)(cursor)

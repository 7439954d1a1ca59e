"""Job models.

A job is exactly one of two variants, told apart by key presence:

- ``NormalJob``: runs steps on a runner (``runs-on`` / ``steps``);
- ``ReusableWorkflowCallJob``: calls another workflow (``uses``).
"""

from __future__ import annotations

from typing import Any, Literal, TypeAlias

from pydantic import Field

from gha_models.constants import DEFAULTS
from gha_models.schema.common import (
    Concurrency,
    Defaults,
    Env,
    GhaModel,
    NameList,
    Permissions,
    Step,
    default_condition,
)
from gha_models.uses import LocalUses, RepositoryUses
from gha_models.values import ExpressionValue, PermissiveValue

__all__ = [
    "RunsOn",
    "DeploymentEnvironment",
    "Matrix",
    "Strategy",
    "DockerCredentials",
    "Container",
    "JobBase",
    "NormalJob",
    "ReusableWorkflowCallJob",
    "Job",
]


class RunsOn(GhaModel):
    """Runner selection.

    The scalar and sequence forms set ``labels``; the mapping form may also
    set ``group``. At least one of the two is always present.

    Fields:
        labels: Runner labels, all of which must match
        group: Runner group name
    """

    labels: tuple[PermissiveValue, ...] = ()
    group: PermissiveValue | None = None


class DeploymentEnvironment(GhaModel):
    """The environment a job deploys to. The scalar form sets ``name``."""

    name: PermissiveValue
    url: PermissiveValue | None = None


class Matrix(GhaModel):
    """A ``strategy.matrix`` block.

    Fields:
        dimensions: Each matrix variable, mapped to its values in source
            order, or to an expression producing them
        include: Extra combinations, or an expression producing them
        exclude: Combinations to drop, or an expression producing them
    """

    dimensions: dict[str, tuple[Any, ...] | ExpressionValue] = Field(
        default_factory=dict
    )
    include: tuple[dict[str, Any], ...] | ExpressionValue = ()
    exclude: tuple[dict[str, Any], ...] | ExpressionValue = ()


class Strategy(GhaModel):
    matrix: Matrix | ExpressionValue | None = None
    fail_fast: PermissiveValue | None = Field(None, alias="fail-fast")
    max_parallel: PermissiveValue | None = Field(None, alias="max-parallel")


class DockerCredentials(GhaModel):
    username: PermissiveValue | None = None
    password: PermissiveValue | None = None


class Container(GhaModel):
    """A job container or service container. The scalar form sets ``image``."""

    image: PermissiveValue
    credentials: DockerCredentials | None = None
    env: Env = Field(default_factory=dict)
    ports: tuple[PermissiveValue, ...] = ()
    volumes: tuple[PermissiveValue, ...] = ()
    options: PermissiveValue | None = None


# =============================================================================
# Job variants
# =============================================================================


class JobBase(GhaModel):
    """Fields common to both job variants.

    Fields:
        name: Display name
        permissions: Token permissions for this job
        needs: Ids of jobs that must finish first (not checked for existence)
        if_: Condition (key ``if``)
        strategy: Matrix strategy
        concurrency: Concurrency group for this job
    """

    name: PermissiveValue | None = None
    permissions: Permissions | None = None
    needs: NameList = ()
    if_: PermissiveValue | None = Field(None, alias="if")
    strategy: Strategy | None = None
    concurrency: Concurrency | None = None

    @property
    def condition(self) -> PermissiveValue:
        """The job's condition, with the runner's default when absent."""
        if self.if_ is None:
            return default_condition(DEFAULTS.DEFAULT_STEP_CONDITION)
        return self.if_


class NormalJob(JobBase):
    """A job that runs steps on a runner."""

    runs_on: RunsOn | ExpressionValue = Field(alias="runs-on")
    environment: DeploymentEnvironment | None = None
    outputs: dict[str, PermissiveValue] = Field(default_factory=dict)
    env: Env = Field(default_factory=dict)
    defaults: Defaults | None = None
    steps: tuple[Step, ...]
    timeout_minutes: PermissiveValue | None = Field(None, alias="timeout-minutes")
    continue_on_error: PermissiveValue | None = Field(None, alias="continue-on-error")
    container: Container | None = None
    services: dict[str, Container] = Field(default_factory=dict)

    def step_ids(self) -> list[str]:
        """Ids of the steps that declare one, in order, duplicates included."""
        return [step.id for step in self.steps if step.id is not None]


class ReusableWorkflowCallJob(JobBase):
    """A job that calls a reusable workflow.

    Fields:
        uses: Local or repository reference to the called workflow
        with_: Inputs passed to the workflow (key ``with``)
        secrets: ``"inherit"``, an explicit mapping, or None when absent
    """

    uses: LocalUses | RepositoryUses
    with_: dict[str, PermissiveValue] = Field(default_factory=dict, alias="with")
    secrets: Literal["inherit"] | dict[str, PermissiveValue] | None = None


Job: TypeAlias = NormalJob | ReusableWorkflowCallJob

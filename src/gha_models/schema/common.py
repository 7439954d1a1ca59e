"""Models shared by workflow documents and action manifests.

This module defines:
- GhaModel: Frozen base class for every document model
- Permissions: ``permissions:`` blocks, scalar or per-scope
- Concurrency, Defaults: workflow- and job-level settings
- RunStep / UsesStep: the step union, shared by jobs and composite actions
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, TypeAlias

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from gha_models.constants import DEFAULTS
from gha_models.expressions import ExpressionKind
from gha_models.shorthand import normalize_items
from gha_models.uses import UsesReference
from gha_models.values import ExpressionValue, PermissiveValue

__all__ = [
    # Base
    "GhaModel",
    "NameList",
    "Env",
    # Permissions
    "PermissionLevel",
    "BasePermission",
    "Permissions",
    # Settings
    "Concurrency",
    "RunDefaults",
    "Defaults",
    # Steps
    "StepBase",
    "RunStep",
    "UsesStep",
    "Step",
    "default_condition",
]


class GhaModel(BaseModel):
    """Base class for document models: immutable, populated by field name or key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


# A list of names that also accepts a single bare name.
NameList: TypeAlias = Annotated[tuple[str, ...], BeforeValidator(normalize_items)]

# Environment variables: a mapping, or one expression producing the mapping.
Env: TypeAlias = dict[str, PermissiveValue] | ExpressionValue


def default_condition(expression: str) -> ExpressionValue:
    """The condition the runner applies when a condition field is absent."""
    return ExpressionValue(raw=expression, kind=ExpressionKind.IMPLICIT)


# =============================================================================
# Permissions
# =============================================================================


class PermissionLevel(str, Enum):
    """Access level granted to one permission scope."""

    READ = "read"
    WRITE = "write"
    NONE = "none"


class BasePermission(str, Enum):
    """Scalar ``permissions:`` shorthand covering every scope."""

    READ_ALL = "read-all"
    WRITE_ALL = "write-all"


class Permissions(GhaModel):
    """A ``permissions:`` block.

    Exactly one form is set: ``base`` for the scalar form, or ``scopes``
    for the mapping form (possibly empty, which grants nothing).

    Fields:
        base: ``read-all`` or ``write-all`` (scalar form)
        scopes: Explicit level per scope name (mapping form)
    """

    base: BasePermission | None = None
    scopes: dict[str, PermissionLevel] = Field(default_factory=dict)

    def level_for(self, scope: str) -> PermissionLevel:
        """Effective level of ``scope``; scopes not listed get ``none``."""
        if self.base is BasePermission.READ_ALL:
            return PermissionLevel.READ
        if self.base is BasePermission.WRITE_ALL:
            return PermissionLevel.WRITE
        return self.scopes.get(scope, PermissionLevel.NONE)


# =============================================================================
# Workflow / job settings
# =============================================================================


class Concurrency(GhaModel):
    """A ``concurrency:`` block. The scalar form sets only ``group``."""

    group: PermissiveValue
    cancel_in_progress: PermissiveValue | None = Field(
        None, alias="cancel-in-progress"
    )


class RunDefaults(GhaModel):
    """``defaults.run``: shell and working directory for run steps."""

    shell: str | None = None
    working_directory: PermissiveValue | None = Field(None, alias="working-directory")


class Defaults(GhaModel):
    run: RunDefaults | None = None


# =============================================================================
# Steps
# =============================================================================


class StepBase(GhaModel):
    """Fields common to every step variant.

    Fields:
        id: Step identifier, referenced as ``steps.<id>`` (unique within a job)
        if_: Condition (key ``if``); strings are always expressions
        name: Display name
        env: Step environment variables
        continue_on_error: Boolean or expression (key ``continue-on-error``)
        timeout_minutes: Number or expression (key ``timeout-minutes``)
    """

    id: str | None = None
    if_: PermissiveValue | None = Field(None, alias="if")
    name: PermissiveValue | None = None
    env: Env = Field(default_factory=dict)
    continue_on_error: PermissiveValue | None = Field(None, alias="continue-on-error")
    timeout_minutes: PermissiveValue | None = Field(None, alias="timeout-minutes")

    @property
    def condition(self) -> PermissiveValue:
        """The step's condition, with the runner's default when absent."""
        if self.if_ is None:
            return default_condition(DEFAULTS.DEFAULT_STEP_CONDITION)
        return self.if_


class RunStep(StepBase):
    """A step that runs a shell command (``run:``)."""

    run: PermissiveValue
    shell: str | None = None
    working_directory: PermissiveValue | None = Field(None, alias="working-directory")


class UsesStep(StepBase):
    """A step that invokes an action (``uses:``).

    Fields:
        uses: Parsed action reference
        with_: Action inputs (key ``with``)
    """

    uses: UsesReference
    with_: dict[str, PermissiveValue] = Field(default_factory=dict, alias="with")


Step: TypeAlias = RunStep | UsesStep

"""The action manifest root model (``action.yml``).

The ``runs`` block is a tagged union over how the action executes:

- ``ScriptRuns``: a JavaScript entry point (``main``) with optional hooks;
- ``CompositeRuns``: a sequence of steps (``steps``);
- ``ContainerRuns``: a container image (``image``).
"""

from __future__ import annotations

from typing import Literal, TypeAlias

from pydantic import Field

from gha_models.constants import DEFAULTS
from gha_models.schema.common import Env, GhaModel, Step, default_condition
from gha_models.values import PermissiveValue

__all__ = [
    "ActionInput",
    "ActionOutput",
    "ScriptRuns",
    "CompositeRuns",
    "ContainerRuns",
    "Runs",
    "Branding",
    "ActionManifest",
]


class ActionInput(GhaModel):
    """An action input declaration.

    Fields:
        description: Input description (required)
        required: The ``required`` flag as written, None when absent
        default: Default value, often an expression
        deprecation_message: Warning shown when the input is used (key
            ``deprecationMessage``)
    """

    description: str
    required: bool | None = None
    default: PermissiveValue | None = None
    deprecation_message: str | None = Field(None, alias="deprecationMessage")

    @property
    def is_required(self) -> bool:
        """Effective ``required`` flag; inputs are optional unless stated."""
        return bool(self.required)


class ActionOutput(GhaModel):
    """An action output. ``value`` is set only for composite actions."""

    description: str | None = None
    value: PermissiveValue | None = None


class _HookMixin:
    """Effective hook conditions for runs blocks with ``pre-if``/``post-if``."""

    @property
    def effective_pre_if(self) -> PermissiveValue:
        if self.pre_if is None:
            return default_condition(DEFAULTS.DEFAULT_HOOK_CONDITION)
        return self.pre_if

    @property
    def effective_post_if(self) -> PermissiveValue:
        if self.post_if is None:
            return default_condition(DEFAULTS.DEFAULT_HOOK_CONDITION)
        return self.post_if


class ScriptRuns(_HookMixin, GhaModel):
    """A JavaScript action.

    Fields:
        using: Runtime, e.g. ``node20``
        main: Entry point
        pre, post: Optional hook entry points
        pre_if, post_if: Hook conditions (keys ``pre-if``/``post-if``);
            strings are implicit expressions
    """

    using: str
    main: str
    pre: str | None = None
    pre_if: PermissiveValue | None = Field(None, alias="pre-if")
    post: str | None = None
    post_if: PermissiveValue | None = Field(None, alias="post-if")


class CompositeRuns(GhaModel):
    using: Literal["composite"] = "composite"
    steps: tuple[Step, ...]


class ContainerRuns(_HookMixin, GhaModel):
    """A container action.

    Fields:
        using: Always ``docker``
        image: ``Dockerfile`` path or ``docker://`` image
        env: Environment passed to the container
        entrypoint: Overrides the image entrypoint
        args: Arguments passed to the entrypoint
        pre_entrypoint, post_entrypoint: Hook entry points
        pre_if, post_if: Hook conditions
    """

    using: Literal["docker"] = "docker"
    image: str
    env: Env = Field(default_factory=dict)
    entrypoint: str | None = None
    args: tuple[PermissiveValue, ...] = ()
    pre_entrypoint: str | None = Field(None, alias="pre-entrypoint")
    pre_if: PermissiveValue | None = Field(None, alias="pre-if")
    post_entrypoint: str | None = Field(None, alias="post-entrypoint")
    post_if: PermissiveValue | None = Field(None, alias="post-if")


Runs: TypeAlias = ScriptRuns | CompositeRuns | ContainerRuns


class Branding(GhaModel):
    icon: str | None = None
    color: str | None = None


class ActionManifest(GhaModel):
    """An action manifest.

    Fields:
        name: Action name (required)
        author: Author
        description: Description
        inputs: Input declarations, in source order
        outputs: Output declarations, in source order
        runs: How the action executes (required)
        branding: Marketplace icon and color
    """

    name: str
    author: str | None = None
    description: str | None = None
    inputs: dict[str, ActionInput] = Field(default_factory=dict)
    outputs: dict[str, ActionOutput] = Field(default_factory=dict)
    runs: Runs
    branding: Branding | None = None

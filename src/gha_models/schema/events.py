"""Workflow triggers (``on:``) and their event bodies."""

from __future__ import annotations

from typing import TypeAlias

from pydantic import Field

from gha_models.schema.common import GhaModel, NameList
from gha_models.values import PermissiveValue

__all__ = [
    "KNOWN_EVENTS",
    "PushEvent",
    "PullRequestEvent",
    "CronEntry",
    "ScheduleEvent",
    "WorkflowCallInput",
    "WorkflowCallOutput",
    "WorkflowCallSecret",
    "WorkflowCallEvent",
    "WorkflowDispatchInput",
    "WorkflowDispatchEvent",
    "WorkflowRunEvent",
    "GenericEvent",
    "EventBody",
    "Trigger",
]

# Every event a workflow can be triggered by. `schedule` never appears bare.
KNOWN_EVENTS: frozenset[str] = frozenset(
    {
        "branch_protection_rule",
        "check_run",
        "check_suite",
        "create",
        "delete",
        "deployment",
        "deployment_status",
        "discussion",
        "discussion_comment",
        "fork",
        "gollum",
        "issue_comment",
        "issues",
        "label",
        "merge_group",
        "milestone",
        "page_build",
        "project",
        "project_card",
        "project_column",
        "public",
        "pull_request",
        "pull_request_comment",
        "pull_request_review",
        "pull_request_review_comment",
        "pull_request_target",
        "push",
        "registry_package",
        "release",
        "repository_dispatch",
        "schedule",
        "status",
        "watch",
        "workflow_call",
        "workflow_dispatch",
        "workflow_run",
    }
)


# =============================================================================
# Filtered events
# =============================================================================


class PushEvent(GhaModel):
    """Body of a ``push`` trigger.

    Each filter is None when absent. Include and ignore filters of the same
    kind are mutually exclusive.
    """

    branches: NameList | None = None
    branches_ignore: NameList | None = Field(None, alias="branches-ignore")
    tags: NameList | None = None
    tags_ignore: NameList | None = Field(None, alias="tags-ignore")
    paths: NameList | None = None
    paths_ignore: NameList | None = Field(None, alias="paths-ignore")


class PullRequestEvent(GhaModel):
    """Body of a ``pull_request`` or ``pull_request_target`` trigger."""

    types: NameList = ()
    branches: NameList | None = None
    branches_ignore: NameList | None = Field(None, alias="branches-ignore")
    paths: NameList | None = None
    paths_ignore: NameList | None = Field(None, alias="paths-ignore")


class CronEntry(GhaModel):
    cron: str


class ScheduleEvent(GhaModel):
    """Body of a ``schedule`` trigger: cron entries in source order."""

    entries: tuple[CronEntry, ...]


class WorkflowRunEvent(GhaModel):
    workflows: NameList
    types: NameList = ()
    branches: NameList | None = None
    branches_ignore: NameList | None = Field(None, alias="branches-ignore")


class GenericEvent(GhaModel):
    """Body of any event that only filters on activity ``types``."""

    types: NameList = ()


# =============================================================================
# workflow_call / workflow_dispatch
# =============================================================================


class WorkflowCallInput(GhaModel):
    """An input of a reusable workflow.

    Fields:
        description: Free-form description
        required: Whether callers must pass the input (default False)
        type: One of ``boolean``, ``number``, ``string``
        default: Value used when the caller omits the input
    """

    description: str | None = None
    required: bool = False
    type: str
    default: PermissiveValue | None = None


class WorkflowCallOutput(GhaModel):
    description: str | None = None
    value: PermissiveValue


class WorkflowCallSecret(GhaModel):
    description: str | None = None
    required: bool = False


class WorkflowCallEvent(GhaModel):
    """Body of a ``workflow_call`` trigger.

    A secret declared with an empty body (``username:``) maps to None.
    """

    inputs: dict[str, WorkflowCallInput] = Field(default_factory=dict)
    outputs: dict[str, WorkflowCallOutput] = Field(default_factory=dict)
    secrets: dict[str, WorkflowCallSecret | None] = Field(default_factory=dict)


class WorkflowDispatchInput(GhaModel):
    """An input of a manually dispatched workflow.

    Fields:
        description: Free-form description
        required: Whether the input must be given (default False)
        type: ``boolean``, ``choice``, ``number``, ``environment`` or
            ``string``; None means string
        default: Default value
        options: Choices offered for ``choice`` inputs
    """

    description: str | None = None
    required: bool = False
    type: str | None = None
    default: PermissiveValue | None = None
    options: tuple[str, ...] = ()


class WorkflowDispatchEvent(GhaModel):
    inputs: dict[str, WorkflowDispatchInput] = Field(default_factory=dict)


EventBody: TypeAlias = (
    PushEvent
    | PullRequestEvent
    | ScheduleEvent
    | WorkflowCallEvent
    | WorkflowDispatchEvent
    | WorkflowRunEvent
    | GenericEvent
)


class Trigger(GhaModel):
    """The events that trigger a workflow.

    ``events`` maps each event name, in source order, to its body. A None
    body means the event is present with its default filters (``on: push``
    or ``pull_request:`` with nothing under it); events not in the mapping
    do not trigger the workflow.
    """

    events: dict[str, EventBody | None]

    def __contains__(self, event: str) -> bool:
        return event in self.events

    def body(self, event: str) -> EventBody | None:
        """Body of ``event``, or None if it has none or is not a trigger."""
        return self.events.get(event)

    @property
    def names(self) -> list[str]:
        return list(self.events)

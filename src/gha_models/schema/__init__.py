"""Typed models for workflow documents and action manifests.

All models are frozen pydantic models. Fields whose key is not a valid
Python identifier use snake_case names with the source key as alias
(``runs_on`` for ``runs-on``, ``if_`` for ``if``); models accept either
spelling on construction.
"""

from __future__ import annotations

from gha_models.schema.action import (
    ActionInput,
    ActionManifest,
    ActionOutput,
    Branding,
    CompositeRuns,
    ContainerRuns,
    Runs,
    ScriptRuns,
)
from gha_models.schema.common import (
    BasePermission,
    Concurrency,
    Defaults,
    Env,
    GhaModel,
    PermissionLevel,
    Permissions,
    RunDefaults,
    RunStep,
    Step,
    StepBase,
    UsesStep,
)
from gha_models.schema.events import (
    KNOWN_EVENTS,
    CronEntry,
    EventBody,
    GenericEvent,
    PullRequestEvent,
    PushEvent,
    ScheduleEvent,
    Trigger,
    WorkflowCallEvent,
    WorkflowCallInput,
    WorkflowCallOutput,
    WorkflowCallSecret,
    WorkflowDispatchEvent,
    WorkflowDispatchInput,
    WorkflowRunEvent,
)
from gha_models.schema.job import (
    Container,
    DeploymentEnvironment,
    DockerCredentials,
    Job,
    JobBase,
    Matrix,
    NormalJob,
    ReusableWorkflowCallJob,
    RunsOn,
    Strategy,
)
from gha_models.schema.workflow import WorkflowDocument

__all__ = [
    # Common
    "GhaModel",
    "Env",
    "PermissionLevel",
    "BasePermission",
    "Permissions",
    "Concurrency",
    "RunDefaults",
    "Defaults",
    "StepBase",
    "RunStep",
    "UsesStep",
    "Step",
    # Events
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
    # Jobs
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
    # Workflow
    "WorkflowDocument",
    # Action
    "ActionInput",
    "ActionOutput",
    "ScriptRuns",
    "CompositeRuns",
    "ContainerRuns",
    "Runs",
    "Branding",
    "ActionManifest",
]

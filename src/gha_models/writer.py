"""Document writer for serializing parsed models back to YAML and JSON.

This module provides the DocumentWriter class for converting WorkflowDocument
and ActionManifest models to dict, YAML, and JSON.

Key features:
- Writes the canonical form of every shorthand (``on: push`` becomes a
  mapping with a null ``push`` body)
- Keeps expressions exactly as written (``${{ ... }}`` and bare conditions)
- Omits absent fields and empty defaulted collections
- Quotes strings that would otherwise read back as numbers, booleans or null

Output re-parses to a model equal to the one written.

Usage:
    writer = DocumentWriter()
    yaml_str = writer.to_yaml(document)
    json_str = writer.to_json(document, indent=2)
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from gha_models.constants import DEFAULTS
from gha_models.schema.action import (
    ActionInput,
    ActionManifest,
    CompositeRuns,
    ContainerRuns,
    Runs,
    ScriptRuns,
)
from gha_models.schema.common import (
    Concurrency,
    Defaults,
    Permissions,
    RunStep,
    Step,
    UsesStep,
)
from gha_models.schema.events import (
    EventBody,
    GenericEvent,
    PullRequestEvent,
    PushEvent,
    ScheduleEvent,
    Trigger,
    WorkflowCallEvent,
    WorkflowDispatchEvent,
    WorkflowRunEvent,
)
from gha_models.schema.job import (
    Container,
    Job,
    Matrix,
    NormalJob,
    RunsOn,
    Strategy,
)
from gha_models.schema.workflow import WorkflowDocument
from gha_models.values import (
    ExpressionValue,
    LiteralValue,
    plain_data,
    retypes_as_non_string,
)

__all__ = ["DocumentWriter"]


class _Dumper(yaml.SafeDumper):
    """SafeDumper that keeps strings strings under YAML 1.2 implicit typing."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    style: str | None = None
    if "\n" in data:
        style = "|"
    elif retypes_as_non_string(data):
        style = "'"
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_Dumper.add_representer(str, _represent_str)


def _put(result: dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` unless the field was absent."""
    if value is not None:
        result[key] = plain_data(value)


def _put_collection(result: dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` unless the collection is empty (its default)."""
    if isinstance(value, ExpressionValue) or value:
        result[key] = plain_data(value)


class DocumentWriter:
    """Serializes parsed documents to dict, YAML, and JSON.

    Example:
        >>> document = load_workflow(text).unwrap()
        >>> writer = DocumentWriter()
        >>> print(writer.to_yaml(document))
        on:
          push: null
        jobs:
          ...
    """

    def to_dict(self, document: WorkflowDocument | ActionManifest) -> dict[str, Any]:
        """Convert a document to plain data in canonical key order.

        Raises:
            TypeError: If ``document`` is not a workflow or action manifest.
        """
        if isinstance(document, WorkflowDocument):
            return self._serialize_workflow(document)
        if isinstance(document, ActionManifest):
            return self._serialize_action(document)
        raise TypeError(f"Cannot serialize {type(document).__name__}")

    def to_yaml(self, document: WorkflowDocument | ActionManifest) -> str:
        """Convert a document to a YAML string."""
        data = self.to_dict(document)
        result: str = yaml.dump(
            data,
            Dumper=_Dumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return result

    def to_json(
        self,
        document: WorkflowDocument | ActionManifest,
        indent: int | None = DEFAULTS.JSON_INDENT,
    ) -> str:
        """Convert a document to a JSON string.

        Args:
            document: Document to convert.
            indent: Spaces of indentation; None for compact output.
        """
        return json.dumps(self.to_dict(document), indent=indent, ensure_ascii=False)

    # -------------------------------------------------------------------------
    # Shared pieces
    # -------------------------------------------------------------------------

    def _serialize_permissions(self, permissions: Permissions) -> Any:
        if permissions.base is not None:
            return permissions.base.value
        return {scope: level.value for scope, level in permissions.scopes.items()}

    def _serialize_concurrency(self, concurrency: Concurrency) -> dict[str, Any]:
        result: dict[str, Any] = {"group": plain_data(concurrency.group)}
        _put(result, "cancel-in-progress", concurrency.cancel_in_progress)
        return result

    def _serialize_defaults(self, defaults: Defaults) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if defaults.run is not None:
            run: dict[str, Any] = {}
            _put(run, "shell", defaults.run.shell)
            _put(run, "working-directory", defaults.run.working_directory)
            result["run"] = run
        return result

    def _serialize_step(self, step: Step) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _put(result, "id", step.id)
        _put(result, "name", step.name)
        _put(result, "if", step.if_)

        if isinstance(step, RunStep):
            result["run"] = plain_data(step.run)
            _put(result, "shell", step.shell)
            _put(result, "working-directory", step.working_directory)
        elif isinstance(step, UsesStep):
            result["uses"] = step.uses.raw
            _put_collection(result, "with", step.with_)
        else:  # pragma: no cover - unreachable; the step union is closed
            raise TypeError(f"Unknown step type: {type(step)}")

        _put_collection(result, "env", step.env)
        _put(result, "continue-on-error", step.continue_on_error)
        _put(result, "timeout-minutes", step.timeout_minutes)
        return result

    # -------------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------------

    def _serialize_workflow(self, workflow: WorkflowDocument) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _put(result, "name", workflow.name)
        _put(result, "run-name", workflow.run_name)
        result["on"] = self._serialize_trigger(workflow.on)
        if workflow.permissions is not None:
            result["permissions"] = self._serialize_permissions(workflow.permissions)
        _put_collection(result, "env", workflow.env)
        if workflow.defaults is not None:
            result["defaults"] = self._serialize_defaults(workflow.defaults)
        if workflow.concurrency is not None:
            result["concurrency"] = self._serialize_concurrency(workflow.concurrency)
        result["jobs"] = {
            job_id: self._serialize_job(job) for job_id, job in workflow.jobs.items()
        }
        return result

    def _serialize_trigger(self, trigger: Trigger) -> dict[str, Any]:
        return {
            event: None if body is None else self._serialize_event(body)
            for event, body in trigger.events.items()
        }

    def _serialize_event(self, body: EventBody) -> Any:
        if isinstance(body, ScheduleEvent):
            return [{"cron": entry.cron} for entry in body.entries]

        result: dict[str, Any] = {}
        if isinstance(body, (PullRequestEvent, WorkflowRunEvent, GenericEvent)):
            if isinstance(body, WorkflowRunEvent):
                result["workflows"] = list(body.workflows)
            _put_collection(result, "types", body.types)
        if isinstance(body, (PushEvent, PullRequestEvent, WorkflowRunEvent)):
            _put(result, "branches", body.branches)
            _put(result, "branches-ignore", body.branches_ignore)
        if isinstance(body, PushEvent):
            _put(result, "tags", body.tags)
            _put(result, "tags-ignore", body.tags_ignore)
        if isinstance(body, (PushEvent, PullRequestEvent)):
            _put(result, "paths", body.paths)
            _put(result, "paths-ignore", body.paths_ignore)
        if isinstance(body, WorkflowCallEvent):
            self._serialize_workflow_call(body, result)
        if isinstance(body, WorkflowDispatchEvent):
            self._serialize_workflow_dispatch(body, result)
        return result

    def _serialize_workflow_call(
        self, body: WorkflowCallEvent, result: dict[str, Any]
    ) -> None:
        """Add workflow_call inputs, outputs and secrets to result (in place)."""
        if body.inputs:
            inputs: dict[str, Any] = {}
            for name, call_input in body.inputs.items():
                entry: dict[str, Any] = {}
                _put(entry, "description", call_input.description)
                if call_input.required:
                    entry["required"] = True
                entry["type"] = call_input.type
                _put(entry, "default", call_input.default)
                inputs[name] = entry
            result["inputs"] = inputs
        if body.outputs:
            outputs: dict[str, Any] = {}
            for name, output in body.outputs.items():
                entry = {}
                _put(entry, "description", output.description)
                entry["value"] = plain_data(output.value)
                outputs[name] = entry
            result["outputs"] = outputs
        if body.secrets:
            secrets: dict[str, Any] = {}
            for name, secret in body.secrets.items():
                if secret is None:
                    secrets[name] = None
                    continue
                entry = {}
                _put(entry, "description", secret.description)
                if secret.required:
                    entry["required"] = True
                secrets[name] = entry
            result["secrets"] = secrets

    def _serialize_workflow_dispatch(
        self, body: WorkflowDispatchEvent, result: dict[str, Any]
    ) -> None:
        if not body.inputs:
            return
        inputs: dict[str, Any] = {}
        for name, dispatch_input in body.inputs.items():
            entry: dict[str, Any] = {}
            _put(entry, "description", dispatch_input.description)
            if dispatch_input.required:
                entry["required"] = True
            _put(entry, "type", dispatch_input.type)
            _put(entry, "default", dispatch_input.default)
            _put_collection(entry, "options", dispatch_input.options)
            inputs[name] = entry
        result["inputs"] = inputs

    def _serialize_job(self, job: Job) -> dict[str, Any]:
        result: dict[str, Any] = {}
        _put(result, "name", job.name)
        if job.permissions is not None:
            result["permissions"] = self._serialize_permissions(job.permissions)
        _put_collection(result, "needs", job.needs)
        _put(result, "if", job.if_)

        if isinstance(job, NormalJob):
            self._serialize_normal_job(job, result)
        else:
            result["uses"] = job.uses.raw
            _put_collection(result, "with", job.with_)
            _put(result, "secrets", job.secrets)

        if job.strategy is not None:
            result["strategy"] = self._serialize_strategy(job.strategy)
        if job.concurrency is not None:
            result["concurrency"] = self._serialize_concurrency(job.concurrency)
        return result

    def _serialize_normal_job(self, job: NormalJob, result: dict[str, Any]) -> None:
        """Add NormalJob-specific fields to result dict (modified in place)."""
        result["runs-on"] = self._serialize_runs_on(job.runs_on)
        if job.environment is not None:
            environment: dict[str, Any] = {"name": plain_data(job.environment.name)}
            _put(environment, "url", job.environment.url)
            result["environment"] = environment
        _put_collection(result, "outputs", job.outputs)
        _put_collection(result, "env", job.env)
        if job.defaults is not None:
            result["defaults"] = self._serialize_defaults(job.defaults)
        _put(result, "timeout-minutes", job.timeout_minutes)
        _put(result, "continue-on-error", job.continue_on_error)
        if job.container is not None:
            result["container"] = self._serialize_container(job.container)
        if job.services:
            result["services"] = {
                name: self._serialize_container(service)
                for name, service in job.services.items()
            }
        result["steps"] = [self._serialize_step(step) for step in job.steps]

    def _serialize_runs_on(self, runs_on: RunsOn | ExpressionValue) -> Any:
        if isinstance(runs_on, ExpressionValue):
            return runs_on.raw
        if runs_on.group is None:
            # A lone fenced expression label would read back as a whole-value
            # expression, so it keeps the list form.
            if len(runs_on.labels) == 1 and isinstance(runs_on.labels[0], LiteralValue):
                return runs_on.labels[0].value
            return plain_data(runs_on.labels)
        result: dict[str, Any] = {"group": plain_data(runs_on.group)}
        _put_collection(result, "labels", runs_on.labels)
        return result

    def _serialize_container(self, container: Container) -> dict[str, Any]:
        result: dict[str, Any] = {"image": plain_data(container.image)}
        if container.credentials is not None:
            credentials: dict[str, Any] = {}
            _put(credentials, "username", container.credentials.username)
            _put(credentials, "password", container.credentials.password)
            result["credentials"] = credentials
        _put_collection(result, "env", container.env)
        _put_collection(result, "ports", container.ports)
        _put_collection(result, "volumes", container.volumes)
        _put(result, "options", container.options)
        return result

    def _serialize_strategy(self, strategy: Strategy) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if isinstance(strategy.matrix, Matrix):
            result["matrix"] = self._serialize_matrix(strategy.matrix)
        else:
            _put(result, "matrix", strategy.matrix)
        _put(result, "fail-fast", strategy.fail_fast)
        _put(result, "max-parallel", strategy.max_parallel)
        return result

    def _serialize_matrix(self, matrix: Matrix) -> dict[str, Any]:
        result: dict[str, Any] = {
            name: plain_data(values) for name, values in matrix.dimensions.items()
        }
        _put_collection(result, "include", matrix.include)
        _put_collection(result, "exclude", matrix.exclude)
        return result

    # -------------------------------------------------------------------------
    # Action
    # -------------------------------------------------------------------------

    def _serialize_action(self, action: ActionManifest) -> dict[str, Any]:
        result: dict[str, Any] = {"name": action.name}
        _put(result, "author", action.author)
        _put(result, "description", action.description)
        if action.inputs:
            result["inputs"] = {
                name: self._serialize_action_input(action_input)
                for name, action_input in action.inputs.items()
            }
        if action.outputs:
            outputs: dict[str, Any] = {}
            for name, output in action.outputs.items():
                entry: dict[str, Any] = {}
                _put(entry, "description", output.description)
                _put(entry, "value", output.value)
                outputs[name] = entry
            result["outputs"] = outputs
        result["runs"] = self._serialize_runs(action.runs)
        if action.branding is not None:
            branding: dict[str, Any] = {}
            _put(branding, "icon", action.branding.icon)
            _put(branding, "color", action.branding.color)
            result["branding"] = branding
        return result

    def _serialize_action_input(self, action_input: ActionInput) -> dict[str, Any]:
        result: dict[str, Any] = {"description": action_input.description}
        _put(result, "required", action_input.required)
        _put(result, "default", action_input.default)
        _put(result, "deprecationMessage", action_input.deprecation_message)
        return result

    def _serialize_runs(self, runs: Runs) -> dict[str, Any]:
        result: dict[str, Any] = {"using": runs.using}
        if isinstance(runs, ScriptRuns):
            result["main"] = runs.main
            _put(result, "pre", runs.pre)
            _put(result, "pre-if", runs.pre_if)
            _put(result, "post", runs.post)
            _put(result, "post-if", runs.post_if)
        elif isinstance(runs, CompositeRuns):
            result["steps"] = [self._serialize_step(step) for step in runs.steps]
        elif isinstance(runs, ContainerRuns):
            result["image"] = runs.image
            _put_collection(result, "env", runs.env)
            _put(result, "entrypoint", runs.entrypoint)
            _put_collection(result, "args", runs.args)
            _put(result, "pre-entrypoint", runs.pre_entrypoint)
            _put(result, "pre-if", runs.pre_if)
            _put(result, "post-entrypoint", runs.post_entrypoint)
            _put(result, "post-if", runs.post_if)
        return result

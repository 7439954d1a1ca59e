"""Tests for the ``on:`` block."""

from __future__ import annotations

import textwrap
from collections.abc import Callable

import pytest

from gha_models import load_workflow
from gha_models.config import ParserSettings
from gha_models.exceptions import (
    AmbiguousShapeError,
    MissingRequiredFieldError,
    TypeMismatchError,
    UnknownKeyError,
)
from gha_models.expressions import ExpressionKind
from gha_models.schema import (
    GenericEvent,
    PullRequestEvent,
    PushEvent,
    ScheduleEvent,
    Trigger,
    WorkflowCallEvent,
    WorkflowDispatchEvent,
    WorkflowRunEvent,
)
from gha_models.values import ExpressionValue, LiteralValue


def trigger(on_block: str, settings: ParserSettings):
    """Parse a workflow with the given ``on:`` block and no jobs."""
    text = textwrap.dedent(on_block).strip() + "\njobs: {}\n"
    return load_workflow(text, settings)


# =============================================================================
# Trigger forms
# =============================================================================


class TestTriggerForms:
    """The three trigger forms normalize to one mapping."""

    def test_bare_event(self, strict_settings: ParserSettings) -> None:
        document = trigger("on: push", strict_settings).unwrap()
        assert document.on == Trigger(events={"push": None})

    def test_event_list(self, strict_settings: ParserSettings) -> None:
        document = trigger("on: [push, workflow_dispatch]", strict_settings).unwrap()
        assert document.on.names == ["push", "workflow_dispatch"]

    def test_forms_agree(self, strict_settings: ParserSettings) -> None:
        scalar = trigger("on: push", strict_settings).unwrap()
        listed = trigger("on: [push]", strict_settings).unwrap()
        mapped = trigger("on:\n  push:\n", strict_settings).unwrap()
        assert scalar.on == listed.on == mapped.on

    def test_null_trigger(self, strict_settings: ParserSettings) -> None:
        result = trigger("on:", strict_settings)
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.path == ("on",)

    def test_bare_schedule_is_rejected(self, strict_settings: ParserSettings) -> None:
        result = trigger("on: schedule", strict_settings)
        assert isinstance(result.error, TypeMismatchError)
        assert "cron" in result.error.detail

    def test_schedule_in_list_is_rejected(self, strict_settings: ParserSettings) -> None:
        result = trigger("on: [push, schedule]", strict_settings)
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.path == ("on", 1)

    def test_null_schedule_body_is_rejected(self, strict_settings: ParserSettings) -> None:
        result = trigger("on:\n  schedule:\n", strict_settings)
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.path == ("on", "schedule")

    def test_unknown_bare_event_strict(self, strict_settings: ParserSettings) -> None:
        result = trigger("on: [push, pushh]", strict_settings)
        assert isinstance(result.error, UnknownKeyError)
        assert result.error.key == "pushh"

    def test_unknown_bare_event_lenient(self, lenient_settings: ParserSettings) -> None:
        result = trigger("on: [push, pushh]", lenient_settings)
        assert result.ok
        assert result.unwrap().on.names == ["push"]
        [warning] = result.warnings
        assert warning.message == "unknown_event_ignored"
        assert warning.path == ("on", 1)

    def test_every_unknown_bare_event_warns(self, lenient_settings: ParserSettings) -> None:
        result = trigger("on: [pushh, push, pull_requst]", lenient_settings)
        assert result.error is None
        assert result.unwrap().on.names == ["push"]
        assert [warning.location for warning in result.warnings] == ["on[0]", "on[2]"]

    def test_unknown_mapped_event_lenient(self, lenient_settings: ParserSettings) -> None:
        result = trigger("on:\n  push:\n  pushh:\n", lenient_settings)
        assert result.unwrap().on.names == ["push"]
        assert result.warnings[0].location == "on.pushh"


# =============================================================================
# Event bodies
# =============================================================================


class TestPushAndPullRequest:
    """Tests for push and pull_request filter bodies."""

    def test_push_filters(self, strict_settings: ParserSettings) -> None:
        document = trigger(
            """
            on:
              push:
                branches: main
                tags: ['v*']
                paths-ignore:
                  - docs/**
            """,
            strict_settings,
        ).unwrap()
        assert document.on.body("push") == PushEvent(
            branches=("main",), tags=("v*",), paths_ignore=("docs/**",)
        )

    def test_branches_and_branches_ignore(self, strict_settings: ParserSettings) -> None:
        result = trigger(
            "on:\n  push:\n    branches: [main]\n    branches-ignore: [dev]\n",
            strict_settings,
        )
        assert isinstance(result.error, AmbiguousShapeError)
        assert result.error.candidates == ("branches", "branches-ignore")
        assert result.error.path == ("on", "push")

    def test_pull_request_types(self, strict_settings: ParserSettings) -> None:
        document = trigger(
            "on:\n  pull_request_target:\n    types: [opened, synchronize]\n",
            strict_settings,
        ).unwrap()
        assert document.on.body("pull_request_target") == PullRequestEvent(
            types=("opened", "synchronize")
        )

    def test_unknown_filter_key(self, strict_settings: ParserSettings) -> None:
        result = trigger("on:\n  push:\n    branch: main\n", strict_settings)
        assert isinstance(result.error, UnknownKeyError)
        assert result.error.location == "on.push.branch"


class TestOtherEvents:
    """Tests for schedule, workflow_run and generic bodies."""

    def test_schedule(self, strict_settings: ParserSettings) -> None:
        document = trigger(
            "on:\n  schedule:\n    - cron: '0 0 * * 1'\n    - cron: '30 6 * * *'\n",
            strict_settings,
        ).unwrap()
        body = document.on.body("schedule")
        assert isinstance(body, ScheduleEvent)
        assert [entry.cron for entry in body.entries] == ["0 0 * * 1", "30 6 * * *"]

    def test_schedule_entry_needs_cron(self, strict_settings: ParserSettings) -> None:
        result = trigger("on:\n  schedule:\n    - {}\n", strict_settings)
        assert isinstance(result.error, MissingRequiredFieldError)
        assert result.error.path == ("on", "schedule", 0)

    def test_workflow_run(self, strict_settings: ParserSettings) -> None:
        document = trigger(
            """
            on:
              workflow_run:
                workflows: CI
                types: [completed]
                branches-ignore: [gh-pages]
            """,
            strict_settings,
        ).unwrap()
        assert document.on.body("workflow_run") == WorkflowRunEvent(
            workflows=("CI",), types=("completed",), branches_ignore=("gh-pages",)
        )

    def test_generic_event_types(self, strict_settings: ParserSettings) -> None:
        document = trigger("on:\n  release:\n    types: published\n", strict_settings).unwrap()
        assert document.on.body("release") == GenericEvent(types=("published",))

    def test_generic_event_rejects_filters(self, strict_settings: ParserSettings) -> None:
        result = trigger("on:\n  issues:\n    branches: [main]\n", strict_settings)
        assert isinstance(result.error, UnknownKeyError)


class TestWorkflowCall:
    """Tests for workflow_call bodies."""

    def test_sample(
        self, workflow_text: Callable[[str], str], strict_settings: ParserSettings
    ) -> None:
        text = workflow_text("mhils-workflows-python-deploy")
        document = load_workflow(text, strict_settings).unwrap()
        body = document.on.body("workflow_call")
        assert isinstance(body, WorkflowCallEvent)
        assert list(body.inputs) == [
            "environment",
            "artifact-name",
            "artifact-pattern",
            "artifact-merge-multiple",
            "repository",
        ]
        assert body.inputs["artifact-merge-multiple"].type == "boolean"
        assert body.inputs["environment"].required is False
        assert body.secrets["username"] is None
        password = body.secrets["password"]
        assert password is not None and password.required is True

    def test_inputs_and_outputs(
        self, workflow_text: Callable[[str], str], strict_settings: ParserSettings
    ) -> None:
        text = workflow_text("intel-llvm-sycl-linux-run-tests")
        body = load_workflow(text, strict_settings).unwrap().on.body("workflow_call")
        assert isinstance(body, WorkflowCallEvent)
        assert body.inputs["name"].required is True
        assert body.inputs["image"].required is False
        assert body.inputs["retention-days"].default == LiteralValue(value=1)
        assert body.inputs["skip_run"].default == LiteralValue(value="false")

    def test_output_value(self, strict_settings: ParserSettings) -> None:
        document = trigger(
            """
            on:
              workflow_call:
                outputs:
                  version:
                    description: Released version
                    value: ${{ jobs.release.outputs.version }}
            """,
            strict_settings,
        ).unwrap()
        body = document.on.body("workflow_call")
        assert isinstance(body, WorkflowCallEvent)
        assert body.outputs["version"].value == ExpressionValue(
            raw="${{ jobs.release.outputs.version }}", kind=ExpressionKind.EXPLICIT
        )

    def test_input_type_required(self, strict_settings: ParserSettings) -> None:
        result = trigger(
            "on:\n  workflow_call:\n    inputs:\n      a:\n        required: true\n",
            strict_settings,
        )
        assert isinstance(result.error, MissingRequiredFieldError)
        assert result.error.field == "type"

    def test_input_type_vocabulary(self, strict_settings: ParserSettings) -> None:
        result = trigger(
            "on:\n  workflow_call:\n    inputs:\n      a:\n        type: choice\n",
            strict_settings,
        )
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.path == ("on", "workflow_call", "inputs", "a", "type")


class TestWorkflowDispatch:
    """Tests for workflow_dispatch bodies."""

    def test_choice_options_are_strings(
        self, workflow_text: Callable[[str], str], strict_settings: ParserSettings
    ) -> None:
        text = workflow_text("intel-llvm-sycl-linux-run-tests")
        body = load_workflow(text, strict_settings).unwrap().on.body("workflow_dispatch")
        assert isinstance(body, WorkflowDispatchEvent)
        assert body.inputs["install_igc_driver"].type == "choice"
        assert body.inputs["install_igc_driver"].options == ("false", "true")
        assert body.inputs["env"].type is None
        assert body.inputs["env"].default == LiteralValue(value="{}")

    def test_empty_body(self, strict_settings: ParserSettings) -> None:
        document = trigger("on:\n  workflow_dispatch: {}\n", strict_settings).unwrap()
        assert document.on.body("workflow_dispatch") == WorkflowDispatchEvent()

    @pytest.mark.parametrize("kind", ["boolean", "choice", "number", "environment", "string"])
    def test_input_types(self, kind: str, strict_settings: ParserSettings) -> None:
        document = trigger(
            f"on:\n  workflow_dispatch:\n    inputs:\n      a:\n        type: {kind}\n",
            strict_settings,
        ).unwrap()
        body = document.on.body("workflow_dispatch")
        assert isinstance(body, WorkflowDispatchEvent)
        assert body.inputs["a"].type == kind

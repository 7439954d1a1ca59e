"""Builders for the ``on:`` block.

The trigger accepts three forms, all normalized to an ordered mapping of
event name to body:

- ``on: push``: one bare event;
- ``on: [push, pull_request]``: several bare events;
- ``on: {push: {branches: [main]}, pull_request: }``: events with bodies,
  where an empty body means the event's default filters.
"""

from __future__ import annotations

from functools import partial

from gha_models.constants import CALL_INPUT_TYPES, DISPATCH_INPUT_TYPES
from gha_models.exceptions import UnknownKeyError
from gha_models.parser.common import present, read_choice
from gha_models.reader import (
    Cursor,
    MappingReader,
    Reader,
    read_bool,
    read_mapping,
    read_sequence,
    read_text,
    read_text_value,
    read_value,
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
from gha_models.shorthand import scalar_or_sequence
from gha_models.unions import resolve_exclusive

__all__ = ["read_trigger", "EVENT_READERS"]

_read_names = scalar_or_sequence(read_text)


def _read_filters(
    reader: MappingReader, what: str, include: str, ignore: str
) -> dict[str, tuple[str, ...]]:
    """Read an include/ignore filter pair, at most one of which may be set."""
    key = resolve_exclusive(reader, what, include, ignore)
    if key is None:
        return {}
    field_name = key.replace("-", "_")
    return {field_name: reader.required(key, _read_names)}


# =============================================================================
# Event bodies
# =============================================================================


def read_push(cursor: Cursor) -> PushEvent:
    reader = MappingReader(cursor)
    filters = {
        **_read_filters(reader, "push branch filter", "branches", "branches-ignore"),
        **_read_filters(reader, "push tag filter", "tags", "tags-ignore"),
        **_read_filters(reader, "push path filter", "paths", "paths-ignore"),
    }
    reader.finish()
    return PushEvent(**filters)


def read_pull_request(cursor: Cursor) -> PullRequestEvent:
    reader = MappingReader(cursor)
    types = reader.optional("types", _read_names)
    filters = {
        **_read_filters(reader, "pull request branch filter", "branches", "branches-ignore"),
        **_read_filters(reader, "pull request path filter", "paths", "paths-ignore"),
    }
    reader.finish()
    return PullRequestEvent(**present(types=types), **filters)


def _read_cron(cursor: Cursor) -> CronEntry:
    reader = MappingReader(cursor)
    cron = reader.required("cron", read_text)
    reader.finish()
    return CronEntry(cron=cron)


def read_schedule(cursor: Cursor) -> ScheduleEvent:
    """Read a ``schedule`` body, which must list at least one cron entry."""
    if not cursor.is_sequence:
        cursor.mismatch("a sequence of cron entries")
    return ScheduleEvent(entries=read_sequence(_read_cron)(cursor))


def read_workflow_run(cursor: Cursor) -> WorkflowRunEvent:
    reader = MappingReader(cursor)
    workflows = reader.required("workflows", _read_names)
    types = reader.optional("types", _read_names)
    filters = _read_filters(
        reader, "workflow run branch filter", "branches", "branches-ignore"
    )
    reader.finish()
    return WorkflowRunEvent(workflows=workflows, **present(types=types), **filters)


def read_generic(cursor: Cursor) -> GenericEvent:
    reader = MappingReader(cursor)
    types = reader.optional("types", _read_names)
    reader.finish()
    return GenericEvent(**present(types=types))


# -----------------------------------------------------------------------------
# workflow_call
# -----------------------------------------------------------------------------


def _read_call_input(cursor: Cursor) -> WorkflowCallInput:
    reader = MappingReader(cursor)
    values = present(
        description=reader.optional("description", read_text),
        required=reader.optional("required", read_bool),
        type=reader.required(
            "type", read_choice(CALL_INPUT_TYPES, "boolean, number or string")
        ),
        default=reader.optional("default", read_value),
    )
    reader.finish()
    return WorkflowCallInput(**values)


def _read_call_output(cursor: Cursor) -> WorkflowCallOutput:
    reader = MappingReader(cursor)
    description = reader.optional("description", read_text)
    value = reader.required("value", read_text_value)
    reader.finish()
    return WorkflowCallOutput(value=value, **present(description=description))


def _read_call_secret(cursor: Cursor) -> WorkflowCallSecret | None:
    if cursor.is_null:
        return None
    reader = MappingReader(cursor)
    values = present(
        description=reader.optional("description", read_text),
        required=reader.optional("required", read_bool),
    )
    reader.finish()
    return WorkflowCallSecret(**values)


def read_workflow_call(cursor: Cursor) -> WorkflowCallEvent:
    reader = MappingReader(cursor)
    values = present(
        inputs=reader.optional("inputs", read_mapping(_read_call_input)),
        outputs=reader.optional("outputs", read_mapping(_read_call_output)),
        secrets=reader.optional("secrets", read_mapping(_read_call_secret)),
    )
    reader.finish()
    return WorkflowCallEvent(**values)


# -----------------------------------------------------------------------------
# workflow_dispatch
# -----------------------------------------------------------------------------


def _read_dispatch_input(cursor: Cursor) -> WorkflowDispatchInput:
    reader = MappingReader(cursor)
    values = present(
        description=reader.optional("description", read_text),
        required=reader.optional("required", read_bool),
        type=reader.optional(
            "type",
            read_choice(
                DISPATCH_INPUT_TYPES,
                "boolean, choice, number, environment or string",
            ),
        ),
        default=reader.optional("default", read_value),
        options=reader.optional("options", read_sequence(read_text)),
    )
    reader.finish()
    return WorkflowDispatchInput(**values)


def read_workflow_dispatch(cursor: Cursor) -> WorkflowDispatchEvent:
    reader = MappingReader(cursor)
    inputs = reader.optional("inputs", read_mapping(_read_dispatch_input))
    reader.finish()
    return WorkflowDispatchEvent(**present(inputs=inputs))


# =============================================================================
# Trigger
# =============================================================================

# Body reader per event; events not listed take a GenericEvent body.
EVENT_READERS: dict[str, Reader[EventBody]] = {
    "push": read_push,
    "pull_request": read_pull_request,
    "pull_request_target": read_pull_request,
    "schedule": read_schedule,
    "workflow_call": read_workflow_call,
    "workflow_dispatch": read_workflow_dispatch,
    "workflow_run": read_workflow_run,
}


def _read_body(event: str, cursor: Cursor) -> EventBody | None:
    if cursor.is_null and event != "schedule":
        return None
    return EVENT_READERS.get(event, read_generic)(cursor)


def _check_bare_event(cursor: Cursor, event: str) -> bool:
    """Validate a bare event name; False if it should be skipped."""
    if event == "schedule":
        cursor.mismatch(
            "an event that can appear bare",
            reason="schedule needs a list of cron entries",
        )
    if event in KNOWN_EVENTS:
        return True
    if cursor.state.settings.strict:
        raise UnknownKeyError(event, cursor.path, cursor.position)
    cursor.warn("unknown_event_ignored", name=event)
    return False


def read_trigger(cursor: Cursor) -> Trigger:
    """Read the ``on:`` block into a ``Trigger``."""
    events: dict[str, EventBody | None] = {}

    if cursor.is_mapping:
        reader = MappingReader(cursor)
        for event in reader.ordered_keys():
            if event in KNOWN_EVENTS:
                events[event] = reader.required(event, partial(_read_body, event))
        reader.finish()
        return Trigger(events=events)

    if cursor.is_null or not (cursor.is_scalar or cursor.is_sequence):
        cursor.mismatch("an event name, a list of events or a mapping of events")

    items = list(cursor.items()) if cursor.is_sequence else [cursor]
    for item in items:
        event = read_text(item)
        if _check_bare_event(item, event):
            events[event] = None
    return Trigger(events=events)

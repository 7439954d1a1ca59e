"""Workflow document parsing.

Entry points:
- parse_workflow: Resolve a composed node tree into a WorkflowDocument
- load_workflow: Compose YAML text, then parse it
"""

from __future__ import annotations

from gha_models.config import ParserSettings
from gha_models.exceptions import MissingRequiredFieldError
from gha_models.parser.common import (
    present,
    read_concurrency,
    read_defaults,
    read_env,
    read_permissions,
    run_parse,
)
from gha_models.parser.events import read_trigger
from gha_models.parser.job import read_jobs
from gha_models.reader import Cursor, MappingReader, read_text, read_text_value
from gha_models.results import ParseResult
from gha_models.schema.workflow import WorkflowDocument
from gha_models.shorthand import resolve_alias
from gha_models.tree import Node, compose_document

__all__ = ["build_workflow", "parse_workflow", "load_workflow"]


def build_workflow(cursor: Cursor) -> WorkflowDocument:
    """Build a WorkflowDocument from the document's root mapping."""
    reader = MappingReader(cursor)
    name = reader.optional("name", read_text)
    run_name = reader.optional("run-name", read_text_value)

    on_cursor = resolve_alias(reader, "on")
    if on_cursor is None:
        raise MissingRequiredFieldError("on", cursor.path, cursor.position)
    trigger = read_trigger(on_cursor)

    values = present(
        permissions=reader.optional("permissions", read_permissions),
        env=reader.optional("env", read_env),
        defaults=reader.optional("defaults", read_defaults),
        concurrency=reader.optional("concurrency", read_concurrency),
    )
    jobs = reader.required("jobs", read_jobs)
    reader.finish()
    return WorkflowDocument(
        on=trigger,
        jobs=jobs,
        **present(name=name, run_name=run_name),
        **values,
    )


def parse_workflow(
    tree: Node, settings: ParserSettings | None = None
) -> ParseResult[WorkflowDocument]:
    """Parse a workflow document tree.

    Args:
        tree: Root node composed from the workflow's YAML.
        settings: Parser settings; loaded from ``GHA_MODELS_*`` environment
            variables when omitted.

    Returns:
        ParseResult holding the WorkflowDocument, or the first error found.
        Never a partially built document.

    Raises:
        ConfigError: If ``settings`` is omitted and the environment holds an
            invalid ``GHA_MODELS_*`` value.

    Example:
        >>> result = parse_workflow(compose_document(text))
        >>> if result.ok:
        ...     print(list(result.value.jobs))
    """
    return run_parse(tree, build_workflow, "workflow", settings)


def load_workflow(
    text: str, settings: ParserSettings | None = None
) -> ParseResult[WorkflowDocument]:
    """Compose workflow YAML text and parse it.

    Raises:
        DocumentLoadError: If the text is not a single valid YAML document.
        ConfigError: If ``settings`` is omitted and the environment holds an
            invalid ``GHA_MODELS_*`` value.
    """
    return parse_workflow(compose_document(text), settings)

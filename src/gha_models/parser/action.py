"""Action manifest parsing.

Entry points:
- parse_action: Resolve a composed node tree into an ActionManifest
- load_action: Compose YAML text, then parse it
"""

from __future__ import annotations

from gha_models.config import ParserSettings
from gha_models.exceptions import MissingRequiredFieldError
from gha_models.parser.common import (
    present,
    read_composite_step,
    read_env,
    read_steps,
    run_parse,
)
from gha_models.reader import (
    Cursor,
    MappingReader,
    read_bool,
    read_condition,
    read_mapping,
    read_sequence,
    read_text,
    read_text_value,
    read_value,
)
from gha_models.results import ParseResult
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
from gha_models.tree import Node, compose_document
from gha_models.unions import Variant, resolve_variant

__all__ = [
    "RUNS_VARIANTS",
    "read_runs",
    "build_action",
    "parse_action",
    "load_action",
]


def _read_input(cursor: Cursor) -> ActionInput:
    reader = MappingReader(cursor)
    description = reader.required("description", read_text)
    values = present(
        required=reader.optional("required", read_bool),
        default=reader.optional("default", read_value),
        deprecation_message=reader.optional("deprecationMessage", read_text),
    )
    reader.finish()
    return ActionInput(description=description, **values)


def _read_output(cursor: Cursor) -> ActionOutput:
    reader = MappingReader(cursor)
    values = present(
        description=reader.optional("description", read_text),
        value=reader.optional("value", read_text_value),
    )
    reader.finish()
    return ActionOutput(**values)


def _read_branding(cursor: Cursor) -> Branding:
    reader = MappingReader(cursor)
    values = present(
        icon=reader.optional("icon", read_text),
        color=reader.optional("color", read_text),
    )
    reader.finish()
    return Branding(**values)


# =============================================================================
# runs
# =============================================================================


def _read_using(reader: MappingReader, expected: str | None = None) -> str:
    """Read ``using``; ``expected`` pins it to one runtime."""
    cursor = reader.take("using")
    if cursor is None:
        raise MissingRequiredFieldError(
            "using", reader.cursor.path, reader.cursor.position
        )
    using = read_text(cursor)
    if expected is not None and using != expected:
        cursor.mismatch(repr(expected), reason=f"required for {expected} actions")
    if expected is None and using in ("composite", "docker"):
        cursor.mismatch("a JavaScript runtime", reason="runs block has a main entry")
    return using


def build_script_runs(reader: MappingReader) -> ScriptRuns:
    using = _read_using(reader)
    main = reader.required("main", read_text)
    values = present(
        pre=reader.optional("pre", read_text),
        pre_if=reader.optional("pre-if", read_condition),
        post=reader.optional("post", read_text),
        post_if=reader.optional("post-if", read_condition),
    )
    reader.finish()
    return ScriptRuns(using=using, main=main, **values)


def build_composite_runs(reader: MappingReader) -> CompositeRuns:
    _read_using(reader, "composite")
    steps = reader.required("steps", read_steps(read_composite_step))
    reader.finish()
    return CompositeRuns(steps=steps)


def build_container_runs(reader: MappingReader) -> ContainerRuns:
    _read_using(reader, "docker")
    image = reader.required("image", read_text)
    values = present(
        env=reader.optional("env", read_env),
        entrypoint=reader.optional("entrypoint", read_text),
        args=reader.optional("args", read_sequence(read_text_value)),
        pre_entrypoint=reader.optional("pre-entrypoint", read_text),
        pre_if=reader.optional("pre-if", read_condition),
        post_entrypoint=reader.optional("post-entrypoint", read_text),
        post_if=reader.optional("post-if", read_condition),
    )
    reader.finish()
    return ContainerRuns(image=image, **values)


_CONTAINER_KEYS = frozenset({"entrypoint", "args", "pre-entrypoint", "post-entrypoint"})

RUNS_VARIANTS: tuple[Variant[Runs], ...] = (
    Variant(
        "ScriptRuns",
        build_script_runs,
        any_of=frozenset({"main"}),
        forbidden=_CONTAINER_KEYS | {"env"},
    ),
    Variant(
        "CompositeRuns",
        build_composite_runs,
        any_of=frozenset({"steps"}),
        forbidden=_CONTAINER_KEYS | {"env", "pre", "post", "pre-if", "post-if"},
    ),
    Variant(
        "ContainerRuns",
        build_container_runs,
        any_of=frozenset({"image"}),
        forbidden=frozenset({"pre", "post"}),
    ),
)


def read_runs(cursor: Cursor) -> Runs:
    return resolve_variant(cursor, "runs", RUNS_VARIANTS)


# =============================================================================
# Manifest
# =============================================================================


def build_action(cursor: Cursor) -> ActionManifest:
    """Build an ActionManifest from the document's root mapping."""
    reader = MappingReader(cursor)
    name = reader.required("name", read_text)
    values = present(
        author=reader.optional("author", read_text),
        description=reader.optional("description", read_text),
        inputs=reader.optional("inputs", read_mapping(_read_input)),
        outputs=reader.optional("outputs", read_mapping(_read_output)),
        branding=reader.optional("branding", _read_branding),
    )
    runs = reader.required("runs", read_runs)
    reader.finish()
    return ActionManifest(name=name, runs=runs, **values)


def parse_action(
    tree: Node, settings: ParserSettings | None = None
) -> ParseResult[ActionManifest]:
    """Parse an action manifest tree.

    Args:
        tree: Root node composed from the manifest's YAML.
        settings: Parser settings; loaded from ``GHA_MODELS_*`` environment
            variables when omitted.

    Returns:
        ParseResult holding the ActionManifest, or the first error found.

    Raises:
        ConfigError: If ``settings`` is omitted and the environment holds an
            invalid ``GHA_MODELS_*`` value.
    """
    return run_parse(tree, build_action, "action", settings)


def load_action(
    text: str, settings: ParserSettings | None = None
) -> ParseResult[ActionManifest]:
    """Compose action manifest YAML text and parse it.

    Raises:
        DocumentLoadError: If the text is not a single valid YAML document.
        ConfigError: If ``settings`` is omitted and the environment holds an
            invalid ``GHA_MODELS_*`` value.
    """
    return parse_action(compose_document(text), settings)

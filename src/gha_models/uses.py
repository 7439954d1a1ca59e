"""``uses:`` references.

A ``uses:`` value names the action a step runs or the reusable workflow a
job calls. It takes one of three forms:

- ``./path/to/action``: an action or workflow in the calling repository;
- ``docker://[registry/]image[:tag][@digest]``: a container image;
- ``owner/repo[/subpath]@ref``: an action or workflow in another repository.

References are parsed eagerly so that a malformed one fails the parse with
its path instead of surfacing later in a consumer.
"""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict

from gha_models.expressions import contains_expression
from gha_models.reader import Cursor, read_text

__all__ = [
    "LocalUses",
    "DockerUses",
    "RepositoryUses",
    "UsesReference",
    "parse_uses",
    "read_step_uses",
    "read_workflow_uses",
]

_DOCKER_PREFIX = "docker://"


class LocalUses(BaseModel):
    """A reference into the calling repository (``./...``)."""

    model_config = ConfigDict(frozen=True)

    raw: str
    path: str

    def __str__(self) -> str:
        return self.raw


class DockerUses(BaseModel):
    """A container image reference (``docker://...``).

    Attributes:
        raw: The reference as written.
        registry: Registry host, if the image name starts with one.
        image: Image name without registry, tag or digest.
        tag: Image tag, if given.
        digest: Image digest (``sha256:...``), if given.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    registry: str | None = None
    image: str
    tag: str | None = None
    digest: str | None = None

    def __str__(self) -> str:
        return self.raw


class RepositoryUses(BaseModel):
    """A reference into another repository (``owner/repo[/subpath]@ref``).

    Attributes:
        raw: The reference as written.
        owner: Repository owner.
        repo: Repository name.
        subpath: Path of the action or workflow inside the repository.
        git_ref: Branch, tag or commit SHA after the ``@``.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    owner: str
    repo: str
    subpath: str | None = None
    git_ref: str

    @property
    def is_pinned(self) -> bool:
        """True when the ref is a full 40-character commit SHA."""
        return len(self.git_ref) == 40 and all(
            c in "0123456789abcdef" for c in self.git_ref.lower()
        )

    def __str__(self) -> str:
        return self.raw


UsesReference: TypeAlias = LocalUses | DockerUses | RepositoryUses


def _parse_docker(raw: str) -> DockerUses:
    reference = raw[len(_DOCKER_PREFIX) :]
    name, _, digest = reference.partition("@")

    registry: str | None = None
    first, slash, rest = name.partition("/")
    if slash and ("." in first or ":" in first or first == "localhost"):
        registry, name = first, rest

    tag: str | None = None
    last_slash = name.rfind("/")
    colon = name.rfind(":")
    if colon > last_slash:
        name, tag = name[:colon], name[colon + 1 :]

    if not name or tag == "" or (digest == "" and "@" in reference):
        raise ValueError(f"malformed docker reference: {raw!r}")
    return DockerUses(
        raw=raw, registry=registry, image=name, tag=tag, digest=digest or None
    )


def _parse_repository(raw: str) -> RepositoryUses:
    path, at, git_ref = raw.partition("@")
    if not at or not git_ref:
        raise ValueError(f"repository reference needs an @ref: {raw!r}")
    parts = path.split("/")
    if len(parts) < 2 or not all(parts):
        raise ValueError(f"repository reference needs owner/repo: {raw!r}")
    owner, repo, *rest = parts
    return RepositoryUses(
        raw=raw,
        owner=owner,
        repo=repo,
        subpath="/".join(rest) or None,
        git_ref=git_ref,
    )


def parse_uses(raw: str) -> UsesReference:
    """Parse a ``uses:`` string.

    Raises:
        ValueError: If the reference is malformed or contains an expression.

    Examples:
        >>> parse_uses("actions/checkout@v4").repo
        'checkout'
        >>> parse_uses("docker://alpine:3.19").tag
        '3.19'
    """
    if contains_expression(raw):
        raise ValueError("uses cannot contain expressions")
    if raw.startswith("./"):
        return LocalUses(raw=raw, path=raw)
    if raw.startswith(_DOCKER_PREFIX):
        return _parse_docker(raw)
    return _parse_repository(raw)


def read_step_uses(cursor: Cursor) -> UsesReference:
    """Read the ``uses`` of a step: any reference form."""
    raw = read_text(cursor)
    try:
        return parse_uses(raw)
    except ValueError as e:
        cursor.mismatch("an action reference", reason=str(e))


def read_workflow_uses(cursor: Cursor) -> LocalUses | RepositoryUses:
    """Read the ``uses`` of a reusable-workflow job: local or repository only."""
    reference = read_step_uses(cursor)
    if isinstance(reference, DockerUses):
        cursor.mismatch(
            "a workflow reference", reason="jobs cannot use docker images"
        )
    return reference

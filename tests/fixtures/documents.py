"""Sample document fixtures.

Real-world workflows and action manifests live under ``tests/fixtures/data``.
Each file keeps the upstream URL and license it was taken from in its header
comment.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"
WORKFLOWS_DIR = DATA_DIR / "workflows"
ACTIONS_DIR = DATA_DIR / "actions"

WORKFLOW_SAMPLES: list[Path] = sorted(WORKFLOWS_DIR.glob("*.yml"))
ACTION_SAMPLES: list[Path] = sorted(ACTIONS_DIR.glob("*.yml"))


def read_sample(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@pytest.fixture
def workflow_text() -> Callable[[str], str]:
    """Factory returning the text of a sample workflow by file stem.

    Example:
        >>> def test_ci(workflow_text):
        ...     text = workflow_text("pip-audit-ci")
    """

    def load(stem: str) -> str:
        return read_sample(WORKFLOWS_DIR / f"{stem}.yml")

    return load


@pytest.fixture
def action_text() -> Callable[[str], str]:
    """Factory returning the text of a sample action manifest by file stem."""

    def load(stem: str) -> str:
        return read_sample(ACTIONS_DIR / f"{stem}.yml")

    return load

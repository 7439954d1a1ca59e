"""Shared test fixtures for the gha-models test suite.

Available Fixtures
==================

Sample Documents (from tests/fixtures/documents.py)
---------------------------------------------------

Constants:
    WORKFLOW_SAMPLES: Paths of every sample workflow, sorted by name.
    ACTION_SAMPLES: Paths of every sample action manifest, sorted by name.

Fixtures:
    workflow_text: Factory returning a sample workflow's text by file stem.
    action_text: Factory returning a sample action manifest's text by file stem.

Example:
    >>> def test_ci(workflow_text):
    ...     document = load_workflow(workflow_text("pip-audit-ci")).unwrap()
    ...     assert "test" in document.jobs
"""

from __future__ import annotations

from tests.fixtures.documents import (
    ACTION_SAMPLES,
    WORKFLOW_SAMPLES,
    action_text,
    read_sample,
    workflow_text,
)

__all__ = [
    "ACTION_SAMPLES",
    "WORKFLOW_SAMPLES",
    "action_text",
    "read_sample",
    "workflow_text",
]

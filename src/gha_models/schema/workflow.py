"""The workflow document root model."""

from __future__ import annotations

from pydantic import Field

from gha_models.schema.common import Concurrency, Defaults, Env, GhaModel, Permissions
from gha_models.schema.events import Trigger
from gha_models.schema.job import Job, NormalJob, ReusableWorkflowCallJob
from gha_models.values import PermissiveValue

__all__ = ["WorkflowDocument"]


class WorkflowDocument(GhaModel):
    """A workflow document (``.github/workflows/*.yml``).

    Fields:
        name: Workflow name
        run_name: Name of each run (key ``run-name``)
        on: Triggers (key ``on``; a YAML 1.1 ``true`` key is accepted as alias)
        permissions: Default token permissions, None when absent
        env: Workflow-level environment variables
        defaults: Default settings for run steps
        concurrency: Workflow-level concurrency group
        jobs: Jobs by id, in source order
    """

    name: str | None = None
    run_name: PermissiveValue | None = Field(None, alias="run-name")
    on: Trigger
    permissions: Permissions | None = None
    env: Env = Field(default_factory=dict)
    defaults: Defaults | None = None
    concurrency: Concurrency | None = None
    jobs: dict[str, Job]

    def normal_jobs(self) -> dict[str, NormalJob]:
        return {
            job_id: job for job_id, job in self.jobs.items() if isinstance(job, NormalJob)
        }

    def reusable_jobs(self) -> dict[str, ReusableWorkflowCallJob]:
        return {
            job_id: job
            for job_id, job in self.jobs.items()
            if isinstance(job, ReusableWorkflowCallJob)
        }

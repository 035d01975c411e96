"""Job orchestration utilities for the PROSPECT runtime."""
from __future__ import annotations

from .job import JobContext, JobDefinition, JobReport
from .registry import JobRegistry, register_job, registry
from .runner import JobRunner

__all__ = [
    "JobContext",
    "JobDefinition",
    "JobRegistry",
    "JobReport",
    "JobRunner",
    "register_job",
    "registry",
]

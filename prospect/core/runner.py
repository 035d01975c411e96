"""Sequential job runner for the PROSPECT CLI."""
from __future__ import annotations

import logging
import time
from typing import Iterable, List, Sequence

from .job import JobContext, JobReport
from .registry import JobRegistry

logger = logging.getLogger(__name__)


class JobRunner:
    """Execute registered jobs in order, sharing one context."""

    def __init__(self, registry: JobRegistry) -> None:
        self._registry = registry

    def available(self) -> List[str]:
        return self._registry.names()

    def run(self, jobs: Sequence[str], context: JobContext) -> List[JobReport]:
        """Run each job in *jobs*; results are also kept on ``context.results``."""

        reports: List[JobReport] = []
        for name in jobs:
            definition = self._registry.get(name)
            job_logger = logging.getLogger(definition.module)
            job_logger.info(
                "Starting job '%s' (run_id=%s, profile=%s)",
                definition.name,
                context.run_id,
                context.profile.name,
            )
            started = time.perf_counter()
            try:
                result = definition.callable(context)
            except Exception:
                job_logger.exception("Job '%s' failed", definition.name)
                raise
            elapsed = time.perf_counter() - started
            context.results[definition.name] = result
            reports.append(JobReport(name=definition.name, seconds=elapsed, result=result))
            job_logger.info("Completed job '%s' in %.2fs", definition.name, elapsed)
        return reports

    def resolve(self, requested: Iterable[str] | None) -> List[str]:
        """Validate *requested* job names; ``None`` or empty selects all jobs."""

        names = list(requested or [])
        if not names:
            return self.available()
        unknown = sorted({name for name in names if name not in self._registry})
        if unknown:
            raise ValueError(f"Unknown jobs requested: {', '.join(unknown)}")
        return list(dict.fromkeys(names))

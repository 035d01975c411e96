"""Job registry for the PROSPECT runtime."""
from __future__ import annotations

from typing import Callable, Dict, Iterator, List

from .job import JobCallable, JobDefinition


class JobRegistry:
    """Keeps track of the jobs the CLI can run."""

    def __init__(self) -> None:
        self._jobs: Dict[str, JobDefinition] = {}

    def register(
        self,
        name: str,
        func: JobCallable,
        description: str = "",
        *,
        writes: bool = False,
    ) -> JobCallable:
        """Register *func* under *name* and return it for decorator usage."""

        if name in self._jobs:
            raise ValueError(f"Job '{name}' is already registered")
        self._jobs[name] = JobDefinition(
            name=name,
            callable=func,
            description=description,
            module=func.__module__,
            writes=writes,
        )
        return func

    def get(self, name: str) -> JobDefinition:
        try:
            return self._jobs[name]
        except KeyError as exc:
            raise KeyError(f"Job '{name}' is not registered") from exc

    def __contains__(self, name: str) -> bool:
        return name in self._jobs

    def __iter__(self) -> Iterator[JobDefinition]:
        return iter(list(self._jobs.values()))

    def names(self) -> List[str]:
        """Return job names in registration order."""

        return list(self._jobs)

    def read_only(self) -> List[str]:
        """Return the names of jobs that never write provider data."""

        return [name for name, definition in self._jobs.items() if not definition.writes]

    def clear(self) -> None:
        self._jobs.clear()


registry = JobRegistry()


def register_job(
    name: str,
    description: str = "",
    *,
    writes: bool = False,
) -> Callable[[JobCallable], JobCallable]:
    """Decorator registering a job on the shared registry."""

    def decorator(func: JobCallable) -> JobCallable:
        return registry.register(name, func, description, writes=writes)

    return decorator

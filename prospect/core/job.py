"""Job primitives for the PROSPECT command runtime."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Protocol

from prospect.scoring.config import DEFAULT_CONFIG, ScoringConfig
from prospect.settings import Settings


class JobCallable(Protocol):
    """Callable protocol for a registered job."""

    def __call__(self, context: "JobContext") -> object:
        """Execute the job and return its summary object."""


@dataclass(slots=True)
class JobContext:
    """Context object passed to every job run."""

    settings: Settings
    run_id: str
    timestamp: datetime
    workspace: Path
    profile: ScoringConfig = DEFAULT_CONFIG
    results: Dict[str, object] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class JobDefinition:
    """Metadata about a registered job."""

    name: str
    callable: JobCallable
    description: str
    module: str
    writes: bool = False


@dataclass(slots=True)
class JobReport:
    name: str
    seconds: float
    result: object = None

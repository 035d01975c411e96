"""PROSPECT - Provider Readiness Scoring for Prospective Acquisitions."""
from __future__ import annotations

from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path

from prospect.core import JobContext, JobRunner, registry
from prospect.core.utils import new_run_id
from prospect.scoring.config import DEFAULT_CONFIG, ScoringConfig, load_scoring_profile
from prospect.settings import Settings

__all__ = [
    "__version__",
    "JobContext",
    "JobRunner",
    "Settings",
    "registry",
    "bootstrap",
    "create_default_context",
]


def __getattr__(name: str):  # pragma: no cover - passthrough to package metadata
    if name == "__version__":
        try:
            return metadata.version("prospect")
        except metadata.PackageNotFoundError:
            return "0.0.0"
    raise AttributeError(name)


def bootstrap() -> None:
    """Import job modules so their registrations take effect."""

    from prospect import jobs  # noqa: F401


def create_default_context(
    settings: Settings | None = None,
    profile: ScoringConfig | None = None,
) -> JobContext:
    """Construct a :class:`JobContext` for command-line runs.

    Without an explicit *profile* the one named by ``PROSPECT_SCORING_PROFILE``
    is loaded, falling back to the default profile.
    """

    settings = settings or Settings.load()
    settings.ensure_directories()
    if profile is None:
        profile = (
            load_scoring_profile(settings.scoring_profile)
            if settings.scoring_profile is not None
            else DEFAULT_CONFIG
        )
    timestamp = datetime.now(timezone.utc)
    return JobContext(
        settings=settings,
        run_id=new_run_id(timestamp),
        timestamp=timestamp,
        workspace=Path.cwd(),
        profile=profile,
    )

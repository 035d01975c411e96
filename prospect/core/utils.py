"""Miscellaneous helpers for the PROSPECT runtime."""
from __future__ import annotations

from datetime import datetime, timezone
from importlib import metadata

__all__ = ["new_run_id", "pipeline_version"]


def pipeline_version() -> str:
    """Return the installed PROSPECT version or a placeholder when not installed."""

    try:
        return metadata.version("prospect")
    except metadata.PackageNotFoundError:  # pragma: no cover - fallback path
        return "0.0.0"


def new_run_id(moment: datetime | None = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.strftime("%Y%m%d%H%M%S")

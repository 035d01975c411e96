from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

from prospect.core.job import JobContext
from prospect.data import ProviderSchema, ProviderWriter
from prospect.scoring.models import OwnershipComplexity, ProviderScoreInputs, Tier
from prospect.settings import Settings

ProviderFactory = Callable[..., ProviderScoreInputs]

# Scores from the reference GREEN example: weighted 71.5, adjusted 81.5.
_BASE_PROVIDER = ProviderScoreInputs(
    provider_id="000001",
    name="Evergreen Hospice",
    state="WA",
    adc=45.0,
    quality_score=80.0,
    compliance_score=75.0,
    operational_score=60.0,
    market_score=65.0,
    con_state=True,
    pe_backed=False,
    chain_affiliated=False,
    ownership_complexity=OwnershipComplexity.SIMPLE,
)


@pytest.fixture
def provider_factory() -> ProviderFactory:
    """Return a builder for providers based on the reference GREEN example."""

    def build(provider_id: str = "000001", **overrides: object) -> ProviderScoreInputs:
        return replace(_BASE_PROVIDER, provider_id=provider_id, **overrides)

    return build


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    settings = Settings(
        sqlite_path=tmp_path / "prospect.sqlite",
        output_dir=tmp_path / "artifacts",
        scoring_profile=None,
        rank_pool=500,
        rank_limit=100,
        log_level="INFO",
    )
    settings.ensure_directories()
    return settings


@pytest.fixture
def job_context(settings: Settings, tmp_path: Path) -> JobContext:
    """Create a temporary job context for tests."""

    return JobContext(
        settings=settings,
        run_id="test-run",
        timestamp=datetime(2024, 1, 1, 12, 0, 0),
        workspace=tmp_path,
    )


@pytest.fixture
def provider_db(settings: Settings, provider_factory: ProviderFactory) -> Path:
    """Seed a small provider population.

    Under the default profile the providers classify as:
    000001 GREEN, 000002 YELLOW, 000003 RED, 000004 YELLOW, 000005 YELLOW.
    """

    records = [
        provider_factory("000001", baseline_tier=Tier.GREEN),
        provider_factory("000002", name="Cedar Hospice", compliance_score=40.0),
        provider_factory("000003", name="Summit Hospice", state="NY", adc=150.0),
        provider_factory(
            "000004",
            name="Lone Star Hospice",
            state="TX",
            con_state=False,
            pe_backed=True,
            ownership_complexity=OwnershipComplexity.COMPLEX,
            baseline_tier=Tier.RED,
        ),
        provider_factory(
            "000005",
            name="Harbor Hospice",
            state="NY",
            quality_score=None,
            compliance_score=None,
            operational_score=None,
            market_score=None,
            baseline_overall_score=50.0,
            baseline_tier=Tier.YELLOW,
        ),
    ]
    ProviderSchema(settings.sqlite_path).ensure()
    ProviderWriter(settings.sqlite_path).sync(records)
    return settings.sqlite_path

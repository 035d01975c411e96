from __future__ import annotations

import hashlib
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from prospect.pipeline import run_preview
from prospect.scoring.config import DEFAULT_CONFIG, ScoringConfig, Thresholds
from prospect.scoring.models import Tier, TierCountSnapshot
from prospect.scoring.preview import PreviewEngine, preview


def _population(provider_factory):
    return [
        provider_factory("000001", baseline_tier=Tier.GREEN),
        provider_factory("000002", baseline_tier=Tier.GREEN),
        provider_factory("000003", compliance_score=40.0, baseline_tier=Tier.YELLOW),
        provider_factory("000004"),
    ]


def _digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def test_preview_counts_and_deltas(provider_factory) -> None:
    result = preview(_population(provider_factory), DEFAULT_CONFIG)

    assert result.counts == TierCountSnapshot(green=3, yellow=1, red=0)
    assert result.baseline == TierCountSnapshot(green=2, yellow=1, red=0)
    assert result.delta == TierCountSnapshot(green=1, yellow=0, red=0)
    assert result.counts.total == 4
    assert result.config_name == "Standard Scoring"


def test_preview_against_explicit_baseline(provider_factory) -> None:
    baseline = TierCountSnapshot(green=0, yellow=2, red=5)

    result = preview(_population(provider_factory), DEFAULT_CONFIG, baseline)

    assert result.baseline == baseline
    assert result.delta == TierCountSnapshot(green=3, yellow=-1, red=-5)


def test_stricter_profile_moves_providers_down(provider_factory) -> None:
    strict = ScoringConfig(name="Small Only", thresholds=Thresholds(adc_max=30.0))

    result = PreviewEngine().preview(_population(provider_factory), strict)

    # ADC 45 exceeds 30 but stays within the derived YELLOW limit of 45.
    assert result.counts == TierCountSnapshot(green=0, yellow=4, red=0)
    assert result.delta.green == -2


def test_preview_payload_shape(provider_factory) -> None:
    payload = preview(_population(provider_factory), DEFAULT_CONFIG).to_payload()

    assert payload == {
        "greenCount": 3,
        "yellowCount": 1,
        "redCount": 0,
        "greenDelta": 1,
        "yellowDelta": 0,
        "redDelta": 0,
        "baseline": {"greenCount": 2, "yellowCount": 1, "redCount": 0},
    }


def test_empty_population_is_all_zero() -> None:
    result = preview([], DEFAULT_CONFIG)

    assert result.counts == TierCountSnapshot()
    assert result.delta == TierCountSnapshot()


def test_concurrent_previews_do_not_interfere(provider_factory) -> None:
    population = _population(provider_factory)
    configs = [
        DEFAULT_CONFIG,
        ScoringConfig(name="Small Only", thresholds=Thresholds(adc_max=30.0)),
        ScoringConfig(name="Lenient", thresholds=Thresholds(min_compliance=30.0)),
    ] * 4
    expected = [preview(population, config) for config in configs]

    with ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(lambda config: preview(population, config), configs))

    assert results == expected


def test_preview_on_database_is_read_only(provider_db: Path) -> None:
    before = _digest(provider_db)

    result = run_preview(sqlite_path=provider_db, config=DEFAULT_CONFIG)

    assert result.counts == TierCountSnapshot(green=1, yellow=3, red=1)
    assert result.baseline == TierCountSnapshot(green=1, yellow=1, red=1)
    assert result.delta == TierCountSnapshot(green=0, yellow=2, red=0)
    assert _digest(provider_db) == before

"""Generate a synthetic provider population for local QA and demos."""
from __future__ import annotations

import argparse
import random
from typing import List

from prospect.data import ProviderSchema, ProviderWriter
from prospect.pipeline import run_preview, run_reconciliation
from prospect.scoring import DEFAULT_CONFIG, OwnershipComplexity, ProviderScoreInputs, Tier
from prospect.settings import Settings

STATES = (
    ("WA", True),
    ("NY", True),
    ("NC", True),
    ("KY", True),
    ("TX", False),
    ("CA", False),
    ("FL", False),
    ("OH", False),
)


def _maybe(rng: random.Random, value: float, missing_rate: float) -> float | None:
    return None if rng.random() < missing_rate else round(value, 1)


def _provider(rng: random.Random, index: int, missing_rate: float) -> ProviderScoreInputs:
    state, con_state = rng.choice(STATES)
    pe_backed = rng.random() < 0.2
    revenue = rng.uniform(1_500_000, 25_000_000)
    scores = [rng.gauss(68, 12) for _ in range(4)]
    scores = [min(max(score, 0.0), 100.0) for score in scores]
    overall = sum(scores) / len(scores)
    # Roughly a quarter of the demo population arrives without a tier.
    tier = None if rng.random() < 0.25 else rng.choice(list(Tier))
    return ProviderScoreInputs(
        provider_id=f"{index:06d}",
        name=f"Demo Hospice {index}",
        state=state,
        adc=_maybe(rng, rng.lognormvariate(3.6, 0.6), missing_rate),
        quality_score=_maybe(rng, scores[0], missing_rate),
        compliance_score=_maybe(rng, scores[1], missing_rate),
        operational_score=_maybe(rng, scores[2], missing_rate),
        market_score=_maybe(rng, scores[3], missing_rate),
        con_state=con_state,
        pe_backed=pe_backed,
        chain_affiliated=not pe_backed and rng.random() < 0.25,
        ownership_complexity=rng.choice(list(OwnershipComplexity)),
        net_income=_maybe(rng, revenue * rng.uniform(-0.08, 0.12), missing_rate * 3),
        total_revenue=_maybe(rng, revenue, missing_rate * 2),
        pct_65_plus=_maybe(rng, rng.uniform(11, 28), missing_rate),
        baseline_overall_score=round(overall, 1),
        baseline_tier=tier,
    )


def build_population(size: int, *, seed: int = 7, missing_rate: float = 0.08) -> List[ProviderScoreInputs]:
    rng = random.Random(seed)
    return [_provider(rng, index, missing_rate) for index in range(1, size + 1)]


def seed_demo_data(size: int = 400, seed: int = 7) -> None:
    settings = Settings.load()
    settings.ensure_directories()
    ProviderSchema(settings.sqlite_path).ensure()
    ProviderWriter(settings.sqlite_path).sync(build_population(size, seed=seed))

    summary = run_reconciliation(sqlite_path=settings.sqlite_path)
    preview = run_preview(sqlite_path=settings.sqlite_path, config=DEFAULT_CONFIG)

    print("Demo data seeded:")
    print(f"  Providers written: {size}")
    print(f"  Tiers reconciled: {summary.updated} ({summary.skipped} skipped)")
    print(f"  Persisted distribution: {preview.baseline.as_dict()}")
    print(f"  Default-profile recount: {preview.counts.as_dict()}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--size", type=int, default=400)
    parser.add_argument("--seed", type=int, default=7)
    options = parser.parse_args()
    seed_demo_data(size=options.size, seed=options.seed)

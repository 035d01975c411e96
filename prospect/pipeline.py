from __future__ import annotations

"""Glue between the provider store and the scoring engine."""

import logging
from pathlib import Path

from prospect.data.repository import ProviderRepository
from prospect.data.storage import TierStore
from prospect.scoring.config import DEFAULT_CONFIG, RankingWeights, ScoringConfig
from prospect.scoring.models import PreviewResult, RankingReport, ReconciliationSummary, Tier
from prospect.scoring.preview import PreviewEngine
from prospect.scoring.ranker import CompositeRanker, RankFilters
from prospect.scoring.reconcile import ReconciliationJob

logger = logging.getLogger(__name__)

RANKABLE_TIERS = (Tier.GREEN, Tier.YELLOW)


def run_reconciliation(
    *,
    sqlite_path: Path,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> ReconciliationSummary:
    """Tier every provider that has none, using *config* (the default profile)."""

    repository = ProviderRepository(sqlite_path)
    candidates = repository.fetch(missing_tier=True)
    if not candidates:
        logger.info("Every provider already has a tier; nothing to reconcile.")
    summary = ReconciliationJob(TierStore(sqlite_path), config).run(candidates)
    summary.distribution = repository.baseline_counts()
    return summary


def run_preview(*, sqlite_path: Path, config: ScoringConfig) -> PreviewResult:
    """Recount tiers for the whole population under *config*."""

    repository = ProviderRepository(sqlite_path)
    population = repository.fetch()
    baseline = repository.baseline_counts()
    if not population:
        logger.warning("No providers available at %s; preview is empty.", sqlite_path)
    return PreviewEngine().preview(population, config, baseline)


def run_ranking(
    *,
    sqlite_path: Path,
    weights: RankingWeights,
    filters: RankFilters | None = None,
    limit: int | None = 100,
    pool: int = 500,
) -> RankingReport:
    """Rank the best GREEN/YELLOW providers under *weights*.

    ``total_matched`` counts the providers that passed *filters* before the
    result list was cut to *limit*.
    """

    repository = ProviderRepository(sqlite_path)
    candidates = repository.fetch(tiers=RANKABLE_TIERS, order_by_score=True, limit=pool)
    matched = CompositeRanker(weights).rank(candidates, filters=filters)
    results = matched if limit is None else matched[: max(limit, 0)]
    logger.info(
        "Ranked %d of %d candidate provider(s); returning %d.",
        len(matched),
        len(candidates),
        len(results),
    )
    return RankingReport(results=tuple(results), total_matched=len(matched), weights=weights)


__all__ = ["RANKABLE_TIERS", "run_preview", "run_ranking", "run_reconciliation"]

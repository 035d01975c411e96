"""Provider tier classification and composite ranking."""
from __future__ import annotations

from .classifier import TierClassifier, classify
from .config import (
    DEFAULT_CONFIG,
    MissingDataPolicy,
    Modifiers,
    RankingWeights,
    ScoringConfig,
    Thresholds,
    TierWeights,
    load_scoring_profile,
    ranking_weights_from_mapping,
    scoring_config_from_mapping,
)
from .models import (
    ClassificationResult,
    OwnershipComplexity,
    PreviewResult,
    ProviderScoreInputs,
    RankingReport,
    RankingResult,
    ReconciliationSummary,
    Tier,
    TierAssignment,
    TierCountSnapshot,
)
from .preview import PreviewEngine, preview
from .ranker import CompositeRanker, RankFilters, rank
from .reconcile import ReconciliationJob
from .strategy import ScoringStrategy

__all__ = [
    "ClassificationResult",
    "CompositeRanker",
    "DEFAULT_CONFIG",
    "MissingDataPolicy",
    "Modifiers",
    "OwnershipComplexity",
    "PreviewEngine",
    "PreviewResult",
    "ProviderScoreInputs",
    "RankFilters",
    "RankingReport",
    "RankingResult",
    "RankingWeights",
    "ReconciliationJob",
    "ReconciliationSummary",
    "ScoringConfig",
    "ScoringStrategy",
    "Thresholds",
    "Tier",
    "TierAssignment",
    "TierClassifier",
    "TierCountSnapshot",
    "TierWeights",
    "classify",
    "load_scoring_profile",
    "preview",
    "rank",
    "ranking_weights_from_mapping",
    "scoring_config_from_mapping",
]

from __future__ import annotations

"""Partial-credit composite ranking of providers."""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List

from prospect.errors import ConfigValidationError

from .config import DEFAULT_CONFIG, RankingWeights
from .models import ProviderScoreInputs, RankingResult

IDEAL_ADC_BAND = (20.0, 60.0)
MAX_CREDITED_ADC = 100.0
NEUTRAL_QUALITY = 50.0


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def adc_credit(adc: float | None) -> float:
    low, high = IDEAL_ADC_BAND
    if adc is None or adc <= 0:
        return 0.0
    if low <= adc <= high:
        return 1.0
    if adc < low:
        return 0.5
    if adc <= MAX_CREDITED_ADC:
        return 0.6
    return 0.0


def quality_credit(record: ProviderScoreInputs) -> float:
    score = record.quality_score
    if score is None:
        score = record.compliance_score
    if score is None:
        score = NEUTRAL_QUALITY
    return min(max(score / 100.0, 0.0), 1.0)


def market_credit(record: ProviderScoreInputs) -> float:
    return 1.0 if record.con_state else 0.5


def financial_credit(record: ProviderScoreInputs) -> float:
    if record.net_income is not None and record.net_income > 0:
        return 1.0
    if record.total_revenue is not None:
        return 0.5
    return 0.0


def ownership_credit(record: ProviderScoreInputs) -> float:
    if not record.pe_backed and not record.chain_affiliated:
        return 1.0
    if not record.pe_backed:
        return 0.5
    return 0.0


def demographics_credit(pct_65_plus: float | None) -> float:
    # Missing demographics get the lowest non-zero credit.
    if pct_65_plus is None:
        return 0.3
    if pct_65_plus >= 20:
        return 1.0
    if pct_65_plus >= 15:
        return 0.7
    return 0.3


@dataclass(slots=True, frozen=True)
class RankFilters:
    """Optional post-scoring filters for a rank query."""

    state: str | None = None
    min_score: float | None = None
    con_only: bool = False

    def accepts(self, record: ProviderScoreInputs, result: RankingResult) -> bool:
        if self.state and (record.state or "").upper() != self.state.upper():
            return False
        if self.min_score is not None and result.composite_score < self.min_score:
            return False
        if self.con_only and not record.con_state:
            return False
        return True


class CompositeRanker:
    """Score providers on a 0-100 scale from weighted partial credits."""

    name = "composite"

    def __init__(self, weights: RankingWeights = DEFAULT_CONFIG.ranking_weights) -> None:
        total = weights.total
        if total == 0:
            raise ConfigValidationError("ranking_weights total weight is zero")
        self.weights = weights
        self._total = total

    def evaluate(self, record: ProviderScoreInputs) -> RankingResult:
        return self.score(record)

    def ratios(self, record: ProviderScoreInputs) -> Dict[str, float]:
        """Return the credit ratio in ``[0, 1]`` earned in each category."""

        return {
            "adc": adc_credit(record.adc),
            "quality": quality_credit(record),
            "market": market_credit(record),
            "financial": financial_credit(record),
            "ownership": ownership_credit(record),
            "demographics": demographics_credit(record.pct_65_plus),
        }

    def score(self, record: ProviderScoreInputs) -> RankingResult:
        weights = self.weights.as_dict()
        breakdown = {
            category: ratio * weights[category]
            for category, ratio in self.ratios(record).items()
        }
        composite = round_half_up(100.0 * sum(breakdown.values()) / self._total, 1)
        return RankingResult(
            provider_id=record.provider_id,
            composite_score=composite,
            breakdown=breakdown,
            name=record.name,
            state=record.state,
        )

    def rank(
        self,
        records: Iterable[ProviderScoreInputs],
        filters: RankFilters | None = None,
        limit: int | None = None,
    ) -> List[RankingResult]:
        """Score, filter and order *records*, best first."""

        scored = []
        for record in records:
            result = self.score(record)
            if filters is None or filters.accepts(record, result):
                scored.append(result)
        scored.sort(key=lambda item: (-item.composite_score, item.provider_id))
        if limit is not None:
            scored = scored[: max(limit, 0)]
        return scored


def rank(
    records: Iterable[ProviderScoreInputs],
    weights: RankingWeights = DEFAULT_CONFIG.ranking_weights,
    filters: RankFilters | None = None,
    limit: int | None = None,
) -> List[RankingResult]:
    """Rank *records* under *weights*."""

    return CompositeRanker(weights).rank(records, filters=filters, limit=limit)


__all__ = [
    "CompositeRanker",
    "RankFilters",
    "adc_credit",
    "demographics_credit",
    "financial_credit",
    "market_credit",
    "ownership_credit",
    "quality_credit",
    "rank",
    "round_half_up",
]

from __future__ import annotations

"""Gate-based acquisition tier classification."""

from typing import Iterable, List

from .config import DEFAULT_CONFIG, ScoringConfig
from .models import ClassificationResult, OwnershipComplexity, ProviderScoreInputs, Tier


_CATEGORIES = ("quality", "compliance", "operational", "market")


class TierClassifier:
    """Assign GREEN/YELLOW/RED tiers using the gates of a scoring profile."""

    name = "tier"

    def __init__(self, config: ScoringConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._weights = config.tier_weights.as_dict()
        self._total_weight = config.tier_weights.total
        self._yellow = config.yellow_thresholds()

    def evaluate(self, record: ProviderScoreInputs) -> ClassificationResult:
        return self.classify(record)

    def classify(self, record: ProviderScoreInputs) -> ClassificationResult:
        weighted = self._weighted_score(record)
        delta = self._modifier_delta(record)
        adjusted = None if weighted is None else weighted + delta

        failed = self._failed_green_gates(record, adjusted)
        if not failed:
            tier = Tier.GREEN
        elif self._passes_yellow(record, adjusted):
            tier = Tier.YELLOW
        else:
            tier = Tier.RED

        return ClassificationResult(
            provider_id=record.provider_id,
            tier=tier,
            weighted_score=weighted,
            modifier_delta=delta,
            adjusted_score=adjusted,
            failed_gates=tuple(failed),
        )

    def classify_all(self, records: Iterable[ProviderScoreInputs]) -> List[ClassificationResult]:
        return [self.classify(record) for record in records]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _weighted_score(self, record: ProviderScoreInputs) -> float | None:
        scores = record.category_scores
        if any(value is None for value in scores.values()):
            # Incomplete records keep the score stored alongside them.
            return record.baseline_overall_score
        total = sum(scores[name] * self._weights[name] for name in _CATEGORIES)
        return total / self._total_weight

    def _modifier_delta(self, record: ProviderScoreInputs) -> float:
        modifiers = self.config.modifiers
        delta = 0.0
        if record.con_state:
            delta += modifiers.con_state_bonus
        if record.pe_backed:
            delta -= modifiers.pe_backed_penalty
        if record.chain_affiliated:
            delta -= modifiers.chain_penalty
        if record.ownership_complexity is OwnershipComplexity.COMPLEX:
            delta -= modifiers.ownership_complexity_penalty
        return delta

    def _failed_green_gates(
        self,
        record: ProviderScoreInputs,
        adjusted: float | None,
    ) -> List[str]:
        thresholds = self.config.thresholds
        policy = self.config.missing_data_policy
        failed: List[str] = []
        if not policy.satisfied(record.adc, lambda value: value <= thresholds.adc_max):
            failed.append("adc")
        for category, value in record.category_scores.items():
            minimum = thresholds.minimum_for(category)
            if not policy.satisfied(value, lambda score: score >= minimum):
                failed.append(category)
        if not policy.satisfied(adjusted, lambda score: score >= thresholds.min_overall):
            failed.append("overall")
        return failed

    def _passes_yellow(self, record: ProviderScoreInputs, adjusted: float | None) -> bool:
        policy = self.config.missing_data_policy
        return policy.satisfied(
            record.adc, lambda value: value <= self._yellow.adc_max
        ) and policy.satisfied(adjusted, lambda score: score >= self._yellow.min_overall)


def classify(
    record: ProviderScoreInputs,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> ClassificationResult:
    """Classify *record* under *config*."""

    return TierClassifier(config).classify(record)


__all__ = ["TierClassifier", "classify"]

from __future__ import annotations

"""Dataclasses used across the scoring engine."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .config import RankingWeights


class Tier(str, Enum):
    """Acquisition-readiness bucket."""

    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"

    @classmethod
    def parse(cls, value: object) -> "Tier | None":
        """Return the tier for *value*; blank or unknown values map to ``None``."""

        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if not text:
            return None
        try:
            return cls(text)
        except ValueError:
            return None


class OwnershipComplexity(str, Enum):
    SIMPLE = "Simple"
    MODERATE = "Moderate"
    COMPLEX = "Complex"

    @classmethod
    def parse(cls, value: object) -> "OwnershipComplexity | None":
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().capitalize()
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass(slots=True, frozen=True)
class ProviderScoreInputs:
    """Read-only view of the attributes of one provider used for scoring."""

    provider_id: str
    name: str = ""
    state: str | None = None
    adc: float | None = None
    quality_score: float | None = None
    compliance_score: float | None = None
    operational_score: float | None = None
    market_score: float | None = None
    con_state: bool = False
    pe_backed: bool = False
    chain_affiliated: bool = False
    ownership_complexity: OwnershipComplexity | None = None
    net_income: float | None = None
    total_revenue: float | None = None
    pct_65_plus: float | None = None
    baseline_overall_score: float | None = None
    baseline_tier: Tier | None = None

    @property
    def category_scores(self) -> Dict[str, float | None]:
        return {
            "quality": self.quality_score,
            "compliance": self.compliance_score,
            "operational": self.operational_score,
            "market": self.market_score,
        }


@dataclass(slots=True, frozen=True)
class ClassificationResult:
    """Outcome of running the tier gates against one provider."""

    provider_id: str
    tier: Tier
    weighted_score: float | None
    modifier_delta: float
    adjusted_score: float | None
    failed_gates: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class RankingResult:
    """Composite ranking score with the per-category credit that produced it."""

    provider_id: str
    composite_score: float
    breakdown: Mapping[str, float]
    name: str = ""
    state: str | None = None

    def __post_init__(self) -> None:
        # Read-only view over a private copy.
        object.__setattr__(self, "breakdown", MappingProxyType(dict(self.breakdown)))

    def to_payload(self) -> Dict[str, object]:
        return {
            "id": self.provider_id,
            "name": self.name,
            "state": self.state,
            "compositeScore": self.composite_score,
            "breakdown": dict(self.breakdown),
        }


@dataclass(slots=True, frozen=True)
class RankingReport:
    """One page of ranked providers plus the context needed to read it."""

    results: Tuple[RankingResult, ...]
    total_matched: int
    weights: RankingWeights

    def to_payload(self) -> Dict[str, object]:
        return {
            "providers": [result.to_payload() for result in self.results],
            "weights": self.weights.as_dict(),
            "totalProviders": self.total_matched,
        }


@dataclass(slots=True, frozen=True)
class TierCountSnapshot:
    """Number of providers per tier; subtracting two snapshots yields deltas."""

    green: int = 0
    yellow: int = 0
    red: int = 0

    @classmethod
    def from_tiers(cls, tiers: Iterable[Tier | None]) -> "TierCountSnapshot":
        counts = {Tier.GREEN: 0, Tier.YELLOW: 0, Tier.RED: 0}
        for tier in tiers:
            if tier is not None:
                counts[tier] += 1
        return cls(
            green=counts[Tier.GREEN],
            yellow=counts[Tier.YELLOW],
            red=counts[Tier.RED],
        )

    @property
    def total(self) -> int:
        return self.green + self.yellow + self.red

    def count(self, tier: Tier) -> int:
        return {Tier.GREEN: self.green, Tier.YELLOW: self.yellow, Tier.RED: self.red}[tier]

    def __sub__(self, other: "TierCountSnapshot") -> "TierCountSnapshot":
        if not isinstance(other, TierCountSnapshot):
            return NotImplemented
        return TierCountSnapshot(
            green=self.green - other.green,
            yellow=self.yellow - other.yellow,
            red=self.red - other.red,
        )

    def as_dict(self) -> Dict[str, int]:
        return {
            "greenCount": self.green,
            "yellowCount": self.yellow,
            "redCount": self.red,
        }


@dataclass(slots=True, frozen=True)
class PreviewResult:
    """Tier counts under a hypothetical profile and their change from baseline."""

    counts: TierCountSnapshot
    delta: TierCountSnapshot
    baseline: TierCountSnapshot
    config_name: str = ""

    def to_payload(self) -> Dict[str, object]:
        return {
            "greenCount": self.counts.green,
            "yellowCount": self.counts.yellow,
            "redCount": self.counts.red,
            "greenDelta": self.delta.green,
            "yellowDelta": self.delta.yellow,
            "redDelta": self.delta.red,
            "baseline": self.baseline.as_dict(),
        }


@dataclass(slots=True)
class TierAssignment:
    """Proposed tier for a provider that has none persisted."""

    provider_id: str
    tier: Tier
    classification: ClassificationResult
    applied: bool = False


@dataclass(slots=True)
class ReconciliationSummary:
    """Outcome of a reconciliation pass."""

    candidates: int
    updated: int
    skipped: int
    assigned: TierCountSnapshot
    assignments: List[TierAssignment] = field(default_factory=list)
    distribution: Optional[TierCountSnapshot] = None

    def to_payload(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "candidates": self.candidates,
            "updated": self.updated,
            "skipped": self.skipped,
            "assigned": self.assigned.as_dict(),
        }
        if self.distribution is not None:
            payload["distribution"] = self.distribution.as_dict()
        return payload


__all__ = [
    "ClassificationResult",
    "OwnershipComplexity",
    "PreviewResult",
    "ProviderScoreInputs",
    "RankingReport",
    "RankingResult",
    "ReconciliationSummary",
    "Tier",
    "TierAssignment",
    "TierCountSnapshot",
]

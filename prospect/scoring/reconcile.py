from __future__ import annotations

"""Backfill tiers for providers that have none persisted."""

import logging
from typing import Iterable, List, Protocol

from .classifier import TierClassifier
from .config import DEFAULT_CONFIG, ScoringConfig
from .models import (
    ProviderScoreInputs,
    ReconciliationSummary,
    Tier,
    TierAssignment,
    TierCountSnapshot,
)

logger = logging.getLogger(__name__)


class TierWriter(Protocol):
    def assign_if_unset(self, provider_id: str, tier: Tier) -> bool:
        """Persist *tier* only while the provider still has no tier."""


class ReconciliationJob:
    """Assign default-profile tiers to untiered providers, never overwriting."""

    def __init__(self, store: TierWriter, config: ScoringConfig = DEFAULT_CONFIG) -> None:
        self.store = store
        self.config = config
        self._classifier = TierClassifier(config)

    def propose(self, records: Iterable[ProviderScoreInputs]) -> List[TierAssignment]:
        """Return tier proposals for the records lacking a persisted tier."""

        proposals: List[TierAssignment] = []
        for record in records:
            if record.baseline_tier is not None:
                continue
            result = self._classifier.classify(record)
            proposals.append(
                TierAssignment(
                    provider_id=record.provider_id,
                    tier=result.tier,
                    classification=result,
                )
            )
        return proposals

    def run(self, records: Iterable[ProviderScoreInputs]) -> ReconciliationSummary:
        proposals = self.propose(records)
        applied_tiers: List[Tier] = []
        skipped = 0
        for proposal in proposals:
            if self.store.assign_if_unset(proposal.provider_id, proposal.tier):
                proposal.applied = True
                applied_tiers.append(proposal.tier)
            else:
                skipped += 1
                logger.warning(
                    "Provider %s gained a tier before reconciliation could write %s; skipped.",
                    proposal.provider_id,
                    proposal.tier.value,
                )
        summary = ReconciliationSummary(
            candidates=len(proposals),
            updated=len(applied_tiers),
            skipped=skipped,
            assigned=TierCountSnapshot.from_tiers(applied_tiers),
            assignments=proposals,
        )
        logger.info(
            "Reconciliation with profile '%s': %d candidate(s), %d updated, %d skipped.",
            self.config.name,
            summary.candidates,
            summary.updated,
            summary.skipped,
        )
        return summary


__all__ = ["ReconciliationJob", "TierWriter"]

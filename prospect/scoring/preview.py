from __future__ import annotations

"""What-if tier distribution previews."""

import logging
from typing import Iterable

from .classifier import TierClassifier
from .config import ScoringConfig
from .models import PreviewResult, ProviderScoreInputs, TierCountSnapshot

logger = logging.getLogger(__name__)


class PreviewEngine:
    """Recount tiers for a population under a hypothetical profile.

    Nothing is written and no state is kept between calls, so previews for
    different profiles can run side by side.
    """

    def preview(
        self,
        population: Iterable[ProviderScoreInputs],
        config: ScoringConfig,
        baseline: TierCountSnapshot | None = None,
    ) -> PreviewResult:
        records = tuple(population)
        classifier = TierClassifier(config)
        counts = TierCountSnapshot.from_tiers(
            classifier.classify(record).tier for record in records
        )
        if baseline is None:
            baseline = TierCountSnapshot.from_tiers(record.baseline_tier for record in records)
        logger.debug(
            "Preview '%s' over %d provider(s): %s",
            config.name,
            len(records),
            counts.as_dict(),
        )
        return PreviewResult(
            counts=counts,
            delta=counts - baseline,
            baseline=baseline,
            config_name=config.name,
        )


def preview(
    population: Iterable[ProviderScoreInputs],
    config: ScoringConfig,
    baseline: TierCountSnapshot | None = None,
) -> PreviewResult:
    return PreviewEngine().preview(population, config, baseline)


__all__ = ["PreviewEngine", "preview"]

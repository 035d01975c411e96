from __future__ import annotations

"""Write access to provider records: seeding and guarded tier updates."""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable

from prospect.errors import DataUnavailableError
from prospect.scoring.models import ProviderScoreInputs, Tier

from .repository import MISSING_TIER_CLAUSE
from .schema import PROVIDER_TABLE

logger = logging.getLogger(__name__)


class TierStore:
    """Persist reconciliation tiers without overwriting existing ones."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def assign_if_unset(self, provider_id: str, tier: Tier) -> bool:
        """Write *tier* for *provider_id* only if it still has no tier.

        Returns ``False`` when the guard matched nothing, e.g. because a
        manual edit landed after the record was read.
        """

        try:
            with sqlite3.connect(self.path) as connection:
                cursor = connection.execute(
                    f"""
                    UPDATE {PROVIDER_TABLE}
                       SET classification = ?,
                           classification_updated_at = CURRENT_TIMESTAMP
                     WHERE ccn = ? AND {MISSING_TIER_CLAUSE}
                    """,
                    (Tier(tier).value, provider_id),
                )
                return cursor.rowcount == 1
        except sqlite3.OperationalError as exc:
            raise DataUnavailableError(f"Provider data unavailable at {self.path}: {exc}") from exc


class ProviderWriter:
    """Upsert provider records, used for seeding demo and test databases."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def sync(self, records: Iterable[ProviderScoreInputs]) -> int:
        entries = list(records)
        if not entries:
            logger.warning("No provider records provided; table will remain unchanged.")
            return 0
        with sqlite3.connect(self.path) as connection:
            for record in entries:
                connection.execute(
                    f"""
                    INSERT INTO {PROVIDER_TABLE} (
                        ccn,
                        provider_name,
                        state,
                        estimated_adc,
                        quality_score,
                        compliance_score,
                        operational_score,
                        market_score,
                        overall_score,
                        con_state,
                        pe_backed,
                        chain_affiliated,
                        ownership_complexity,
                        net_income,
                        total_revenue,
                        county_pct_65_plus,
                        classification
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(ccn) DO UPDATE SET
                        provider_name=excluded.provider_name,
                        state=excluded.state,
                        estimated_adc=excluded.estimated_adc,
                        quality_score=excluded.quality_score,
                        compliance_score=excluded.compliance_score,
                        operational_score=excluded.operational_score,
                        market_score=excluded.market_score,
                        overall_score=excluded.overall_score,
                        con_state=excluded.con_state,
                        pe_backed=excluded.pe_backed,
                        chain_affiliated=excluded.chain_affiliated,
                        ownership_complexity=excluded.ownership_complexity,
                        net_income=excluded.net_income,
                        total_revenue=excluded.total_revenue,
                        county_pct_65_plus=excluded.county_pct_65_plus,
                        classification=excluded.classification,
                        updated_at=CURRENT_TIMESTAMP
                    """,
                    (
                        record.provider_id,
                        record.name,
                        record.state,
                        record.adc,
                        record.quality_score,
                        record.compliance_score,
                        record.operational_score,
                        record.market_score,
                        record.baseline_overall_score,
                        int(record.con_state),
                        int(record.pe_backed),
                        int(record.chain_affiliated),
                        record.ownership_complexity.value if record.ownership_complexity else None,
                        record.net_income,
                        record.total_revenue,
                        record.pct_65_plus,
                        record.baseline_tier.value if record.baseline_tier else None,
                    ),
                )
        logger.info("Synchronized %d provider record(s) into %s", len(entries), self.path)
        return len(entries)


__all__ = ["ProviderWriter", "TierStore"]

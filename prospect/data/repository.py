from __future__ import annotations

"""Read-only access to provider records for the scoring engine."""

import logging
import sqlite3
from pathlib import Path
from typing import List, Sequence

from prospect.errors import DataUnavailableError
from prospect.scoring.models import (
    OwnershipComplexity,
    ProviderScoreInputs,
    Tier,
    TierCountSnapshot,
)

from .schema import PROVIDER_TABLE

logger = logging.getLogger(__name__)

_COLUMNS = """
    ccn, provider_name, state, estimated_adc,
    quality_score, compliance_score, operational_score, market_score,
    overall_score, con_state, pe_backed, chain_affiliated,
    ownership_complexity, net_income, total_revenue, county_pct_65_plus,
    classification
"""

MISSING_TIER_CLAUSE = "(classification IS NULL OR TRIM(classification) = '')"


def _row_to_inputs(row: sqlite3.Row) -> ProviderScoreInputs:
    return ProviderScoreInputs(
        provider_id=row["ccn"],
        name=row["provider_name"] or "",
        state=row["state"],
        adc=row["estimated_adc"],
        quality_score=row["quality_score"],
        compliance_score=row["compliance_score"],
        operational_score=row["operational_score"],
        market_score=row["market_score"],
        con_state=bool(row["con_state"]),
        pe_backed=bool(row["pe_backed"]),
        chain_affiliated=bool(row["chain_affiliated"]),
        ownership_complexity=OwnershipComplexity.parse(row["ownership_complexity"]),
        net_income=row["net_income"],
        total_revenue=row["total_revenue"],
        pct_65_plus=row["county_pct_65_plus"],
        baseline_overall_score=row["overall_score"],
        baseline_tier=Tier.parse(row["classification"]),
    )


class ProviderRepository:
    """Batch reads of provider records; the connection is opened read-only."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _connect(self) -> sqlite3.Connection:
        uri = f"{self.path.resolve().as_uri()}?mode=ro"
        connection = sqlite3.connect(uri, uri=True)
        connection.row_factory = sqlite3.Row
        return connection

    def _query(self, query: str, params: Sequence[object] = ()) -> List[sqlite3.Row]:
        try:
            connection = self._connect()
            try:
                return connection.execute(query, tuple(params)).fetchall()
            finally:
                connection.close()
        except sqlite3.OperationalError as exc:
            logger.error("Provider data unavailable at %s: %s", self.path, exc)
            raise DataUnavailableError(f"Provider data unavailable at {self.path}: {exc}") from exc

    def fetch(
        self,
        *,
        state: str | None = None,
        tiers: Sequence[Tier] | None = None,
        missing_tier: bool = False,
        con_only: bool = False,
        order_by_score: bool = False,
        limit: int | None = None,
    ) -> List[ProviderScoreInputs]:
        """Return provider records matching every supplied filter."""

        clauses: List[str] = []
        params: List[object] = []
        if state:
            clauses.append("UPPER(state) = ?")
            params.append(state.upper())
        if tiers:
            placeholders = ",".join("?" for _ in tiers)
            clauses.append(f"UPPER(TRIM(classification)) IN ({placeholders})")
            params.extend(Tier(tier).value for tier in tiers)
        if missing_tier:
            clauses.append(MISSING_TIER_CLAUSE)
        if con_only:
            clauses.append("con_state = 1")

        query = [f"SELECT {_COLUMNS} FROM {PROVIDER_TABLE}"]
        if clauses:
            query.append("WHERE " + " AND ".join(clauses))
        if order_by_score:
            query.append("ORDER BY overall_score DESC, ccn")
        else:
            query.append("ORDER BY ccn")
        if limit is not None:
            query.append("LIMIT ?")
            params.append(int(limit))

        rows = self._query("\n".join(query), params)
        return [_row_to_inputs(row) for row in rows]

    def get(self, provider_id: str) -> ProviderScoreInputs | None:
        rows = self._query(
            f"SELECT {_COLUMNS} FROM {PROVIDER_TABLE} WHERE ccn = ?",
            (provider_id,),
        )
        return _row_to_inputs(rows[0]) if rows else None

    def baseline_counts(self) -> TierCountSnapshot:
        """Return the tier distribution currently persisted."""

        rows = self._query(
            f"""
            SELECT
                SUM(CASE WHEN UPPER(TRIM(classification)) = 'GREEN' THEN 1 ELSE 0 END) AS green_count,
                SUM(CASE WHEN UPPER(TRIM(classification)) = 'YELLOW' THEN 1 ELSE 0 END) AS yellow_count,
                SUM(CASE WHEN UPPER(TRIM(classification)) = 'RED' THEN 1 ELSE 0 END) AS red_count
            FROM {PROVIDER_TABLE}
            """
        )
        row = rows[0]
        return TierCountSnapshot(
            green=int(row["green_count"] or 0),
            yellow=int(row["yellow_count"] or 0),
            red=int(row["red_count"] or 0),
        )

    def missing_tier_count(self) -> int:
        rows = self._query(f"SELECT COUNT(*) FROM {PROVIDER_TABLE} WHERE {MISSING_TIER_CLAUSE}")
        return int(rows[0][0])


__all__ = ["MISSING_TIER_CLAUSE", "ProviderRepository"]

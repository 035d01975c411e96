from __future__ import annotations

"""Provider seed loading from CSV extracts."""

import csv
import logging
from pathlib import Path
from typing import Dict, List

from prospect.scoring.models import OwnershipComplexity, ProviderScoreInputs, Tier

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "t", "yes", "y"}


def _number(row: Dict[str, str], key: str) -> float | None:
    raw = (row.get(key) or "").strip().replace(",", "")
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s value %r for provider %s", key, raw, row.get("ccn"))
        return None


def _flag(row: Dict[str, str], key: str) -> bool:
    return (row.get(key) or "").strip().lower() in _TRUE_VALUES


def load_seed_providers(path: Path) -> List[ProviderScoreInputs]:
    """Load provider records from the CSV at *path*.

    Column names follow the provider table. Blank cells load as missing
    values, never as zero.
    """

    if not path.exists():
        raise FileNotFoundError(f"Provider seed file not found at {path}")
    with path.open("r", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        records = [
            ProviderScoreInputs(
                provider_id=row["ccn"].strip(),
                name=(row.get("provider_name") or "").strip(),
                state=(row.get("state") or "").strip().upper() or None,
                adc=_number(row, "estimated_adc"),
                quality_score=_number(row, "quality_score"),
                compliance_score=_number(row, "compliance_score"),
                operational_score=_number(row, "operational_score"),
                market_score=_number(row, "market_score"),
                con_state=_flag(row, "con_state"),
                pe_backed=_flag(row, "pe_backed"),
                chain_affiliated=_flag(row, "chain_affiliated"),
                ownership_complexity=OwnershipComplexity.parse(row.get("ownership_complexity")),
                net_income=_number(row, "net_income"),
                total_revenue=_number(row, "total_revenue"),
                pct_65_plus=_number(row, "county_pct_65_plus"),
                baseline_overall_score=_number(row, "overall_score"),
                baseline_tier=Tier.parse(row.get("classification")),
            )
            for row in reader
        ]
    return records


__all__ = ["load_seed_providers"]

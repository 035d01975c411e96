"""SQLite schema for the provider table the engine reads."""
from __future__ import annotations

import sqlite3
from pathlib import Path

PROVIDER_TABLE = "hospice_providers"


class ProviderSchema:
    """Ensure the SQLite database contains the provider table."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def ensure(self) -> None:
        with sqlite3.connect(self.path) as connection:
            connection.executescript(
                f"""
                CREATE TABLE IF NOT EXISTS {PROVIDER_TABLE} (
                    ccn TEXT PRIMARY KEY,
                    provider_name TEXT NOT NULL,
                    state TEXT,
                    estimated_adc REAL,
                    quality_score REAL,
                    compliance_score REAL,
                    operational_score REAL,
                    market_score REAL,
                    overall_score REAL,
                    con_state INTEGER NOT NULL DEFAULT 0,
                    pe_backed INTEGER NOT NULL DEFAULT 0,
                    chain_affiliated INTEGER NOT NULL DEFAULT 0,
                    ownership_complexity TEXT,
                    net_income REAL,
                    total_revenue REAL,
                    county_pct_65_plus REAL,
                    classification TEXT,
                    classification_updated_at TEXT,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE INDEX IF NOT EXISTS idx_{PROVIDER_TABLE}_state
                    ON {PROVIDER_TABLE} (state);

                CREATE INDEX IF NOT EXISTS idx_{PROVIDER_TABLE}_classification
                    ON {PROVIDER_TABLE} (classification);
                """
            )


__all__ = ["PROVIDER_TABLE", "ProviderSchema"]

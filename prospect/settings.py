"""Environment-driven configuration for PROSPECT."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    sqlite_path: Path
    output_dir: Path
    scoring_profile: Path | None
    rank_pool: int
    rank_limit: int
    log_level: str

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment variables with sensible defaults."""

        profile = os.getenv("PROSPECT_SCORING_PROFILE")
        return cls(
            sqlite_path=Path(os.getenv("PROSPECT_DB_PATH", "prospect.sqlite")),
            output_dir=Path(os.getenv("PROSPECT_OUTPUT_DIR", "artifacts")),
            scoring_profile=Path(profile) if profile else None,
            rank_pool=int(os.getenv("PROSPECT_RANK_POOL", "500")),
            rank_limit=int(os.getenv("PROSPECT_RANK_LIMIT", "100")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def ensure_directories(self) -> None:
        """Create directories required for the runtime to operate."""

        for path in {self.output_dir, self.sqlite_path.parent}:
            if not path.exists():
                path.mkdir(parents=True, exist_ok=True)

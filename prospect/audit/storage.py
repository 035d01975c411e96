"""Audit trail persistence for scoring decisions."""
from __future__ import annotations

import json
import sqlite3
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from prospect.scoring.models import PreviewResult, ReconciliationSummary

_FIELDS = (
    "run_id",
    "job",
    "provider_id",
    "tier",
    "weighted_score",
    "adjusted_score",
    "status",
    "config_name",
    "pipeline_version",
    "recorded_at",
    "metadata",
)


@dataclass(slots=True)
class AuditRecord:
    """One row of ``audit_trail``."""

    run_id: str
    job: str
    provider_id: Optional[str]
    tier: Optional[str]
    weighted_score: Optional[float]
    adjusted_score: Optional[float]
    status: str
    config_name: str
    pipeline_version: str
    recorded_at: str
    metadata: Dict[str, object]


@dataclass(slots=True)
class ExportedAudit:
    """Summary of generated audit artifacts."""

    records: int
    files: List[Path]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class AuditStore:
    """Read and write the audit trail stored in SQLite."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        with sqlite3.connect(self.path) as connection:
            connection.executescript(
                """
                CREATE TABLE IF NOT EXISTS audit_trail (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    run_id TEXT NOT NULL,
                    job TEXT NOT NULL,
                    provider_id TEXT,
                    tier TEXT,
                    weighted_score REAL,
                    adjusted_score REAL,
                    status TEXT NOT NULL,
                    config_name TEXT NOT NULL,
                    pipeline_version TEXT NOT NULL,
                    recorded_at TEXT NOT NULL,
                    metadata TEXT
                );

                CREATE INDEX IF NOT EXISTS idx_audit_trail_run ON audit_trail (run_id, job);
                """
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def prepare_job(self, run_id: str, job: str) -> None:
        """Remove previous audit entries for *run_id* and *job*."""

        with sqlite3.connect(self.path) as connection:
            connection.execute(
                "DELETE FROM audit_trail WHERE run_id=? AND job=?",
                (run_id, job),
            )

    def record_assignments(
        self,
        run_id: str,
        summary: ReconciliationSummary,
        *,
        config_name: str,
        pipeline_version: str,
    ) -> int:
        """Persist one entry per reconciliation proposal, applied or skipped."""

        recorded_at = _now()
        payloads = [
            (
                run_id,
                "reconcile",
                assignment.provider_id,
                assignment.tier.value,
                assignment.classification.weighted_score,
                assignment.classification.adjusted_score,
                "updated" if assignment.applied else "skipped",
                config_name,
                pipeline_version,
                recorded_at,
                json.dumps(
                    {
                        "modifier_delta": assignment.classification.modifier_delta,
                        "failed_gates": list(assignment.classification.failed_gates),
                    }
                ),
            )
            for assignment in summary.assignments
        ]
        self._bulk_insert(payloads)
        return len(payloads)

    def record_preview(
        self,
        run_id: str,
        result: PreviewResult,
        *,
        pipeline_version: str,
        settings: Mapping[str, object] | None = None,
    ) -> int:
        """Persist a single entry describing a preview run."""

        metadata = {"preview": result.to_payload()}
        if settings is not None:
            metadata["profile"] = dict(settings)
        self._bulk_insert(
            [
                (
                    run_id,
                    "preview",
                    None,
                    None,
                    None,
                    None,
                    "computed",
                    result.config_name,
                    pipeline_version,
                    _now(),
                    json.dumps(metadata),
                )
            ]
        )
        return 1

    def records(
        self,
        *,
        run_id: str | None = None,
        job: str | None = None,
    ) -> List[AuditRecord]:
        """Return audit records filtered by *run_id* and/or *job*."""

        query = [f"SELECT {', '.join(_FIELDS)} FROM audit_trail"]
        clauses: List[str] = []
        params: List[str] = []
        if run_id:
            clauses.append("run_id=?")
            params.append(run_id)
        if job:
            clauses.append("job=?")
            params.append(job)
        if clauses:
            query.append("WHERE " + " AND ".join(clauses))
        query.append("ORDER BY id")

        with sqlite3.connect(self.path) as connection:
            connection.row_factory = sqlite3.Row
            rows = connection.execute("\n".join(query), tuple(params)).fetchall()

        results: List[AuditRecord] = []
        for row in rows:
            metadata_raw = row["metadata"] or "{}"
            try:
                metadata = json.loads(metadata_raw)
            except json.JSONDecodeError:
                metadata = {"raw": metadata_raw}
            values = {name: row[name] for name in _FIELDS if name != "metadata"}
            results.append(AuditRecord(metadata=metadata, **values))
        return results

    def export_records(self, *, run_id: str, output_dir: Path) -> ExportedAudit:
        """Write the audit records for *run_id* to JSON and Excel artifacts."""

        records = self.records(run_id=run_id)
        if not records:
            return ExportedAudit(records=0, files=[])

        output_dir.mkdir(parents=True, exist_ok=True)
        json_path = output_dir / f"audit_trail_{run_id}.json"
        workbook_path = output_dir / f"audit_trail_{run_id}.xlsx"

        rows = [asdict(record) for record in records]
        with json_path.open("w", encoding="utf-8") as handle:
            json.dump(rows, handle, indent=2, ensure_ascii=False)
        self._write_workbook(workbook_path, rows)

        return ExportedAudit(records=len(records), files=[json_path, workbook_path])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _bulk_insert(self, payloads: Sequence[tuple]) -> None:
        if not payloads:
            return
        placeholders = ", ".join("?" for _ in _FIELDS)
        with sqlite3.connect(self.path) as connection:
            connection.executemany(
                f"INSERT INTO audit_trail ({', '.join(_FIELDS)}) VALUES ({placeholders})",
                payloads,
            )

    def _write_workbook(self, path: Path, rows: Sequence[Mapping[str, object]]) -> None:
        workbook = Workbook()
        reconcile_sheet = workbook.active
        reconcile_sheet.title = "Reconciliation"
        self._write_sheet(reconcile_sheet, [row for row in rows if row["job"] == "reconcile"])
        preview_sheet = workbook.create_sheet("Previews")
        self._write_sheet(preview_sheet, [row for row in rows if row["job"] == "preview"])
        workbook.save(path)

    def _write_sheet(self, worksheet, rows: Sequence[Mapping[str, object]]) -> None:
        if not rows:
            worksheet.append(["message"])
            worksheet.append(["No entries recorded"])
            return
        worksheet.append(list(_FIELDS))
        for row in rows:
            worksheet.append(
                [
                    json.dumps(row[name], ensure_ascii=False)
                    if isinstance(row[name], (dict, list))
                    else row[name]
                    for name in _FIELDS
                ]
            )
        for index, _ in enumerate(_FIELDS, start=1):
            worksheet.column_dimensions[get_column_letter(index)].width = 18


__all__ = ["AuditRecord", "AuditStore", "ExportedAudit"]

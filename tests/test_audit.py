from __future__ import annotations

import json
from pathlib import Path

from openpyxl import load_workbook

from prospect.audit import AuditStore
from prospect.pipeline import run_preview, run_reconciliation
from prospect.scoring.config import DEFAULT_CONFIG


def test_reconciliation_assignments_are_audited(provider_db: Path) -> None:
    summary = run_reconciliation(sqlite_path=provider_db)
    store = AuditStore(provider_db)

    recorded = store.record_assignments(
        "run-1",
        summary,
        config_name=DEFAULT_CONFIG.name,
        pipeline_version="0.1.0",
    )

    records = store.records(run_id="run-1", job="reconcile")
    assert recorded == 2
    assert [(item.provider_id, item.tier, item.status) for item in records] == [
        ("000002", "YELLOW", "updated"),
        ("000003", "RED", "updated"),
    ]
    assert records[0].adjusted_score == 71.0
    assert records[0].metadata == {"modifier_delta": 10.0, "failed_gates": ["compliance"]}
    assert records[1].metadata["failed_gates"][0] == "adc"


def test_prepare_job_replaces_previous_entries(provider_db: Path) -> None:
    store = AuditStore(provider_db)
    result = run_preview(sqlite_path=provider_db, config=DEFAULT_CONFIG)

    store.record_preview("run-1", result, pipeline_version="0.1.0")
    store.prepare_job("run-1", "preview")
    store.record_preview(
        "run-1",
        result,
        pipeline_version="0.1.0",
        settings=DEFAULT_CONFIG.to_mapping(),
    )

    records = store.records(run_id="run-1")
    assert len(records) == 1
    assert records[0].status == "computed"
    assert records[0].config_name == "Standard Scoring"
    assert records[0].metadata["preview"]["yellowDelta"] == 2
    assert records[0].metadata["profile"]["name"] == "Standard Scoring"


def test_export_writes_json_and_workbook(provider_db: Path, tmp_path: Path) -> None:
    store = AuditStore(provider_db)
    summary = run_reconciliation(sqlite_path=provider_db)
    store.record_assignments("run-2", summary, config_name="Standard Scoring", pipeline_version="0.1.0")

    exported = store.export_records(run_id="run-2", output_dir=tmp_path / "out")

    assert exported.records == 2
    json_path, workbook_path = exported.files
    rows = json.loads(json_path.read_text(encoding="utf-8"))
    assert {row["provider_id"] for row in rows} == {"000002", "000003"}

    workbook = load_workbook(workbook_path)
    assert workbook.sheetnames == ["Reconciliation", "Previews"]
    reconcile_rows = list(workbook["Reconciliation"].iter_rows(values_only=True))
    assert reconcile_rows[0][:4] == ("run_id", "job", "provider_id", "tier")
    assert len(reconcile_rows) == 3
    assert list(workbook["Previews"].iter_rows(values_only=True)) == [
        ("message",),
        ("No entries recorded",),
    ]


def test_export_without_records_writes_nothing(provider_db: Path, tmp_path: Path) -> None:
    exported = AuditStore(provider_db).export_records(run_id="unknown", output_dir=tmp_path / "out")

    assert exported.records == 0
    assert exported.files == []
    assert not (tmp_path / "out").exists()

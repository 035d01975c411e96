"""Jobs runnable from the PROSPECT command line."""
from __future__ import annotations

import logging

from prospect.audit.storage import AuditStore, ExportedAudit
from prospect.core import JobContext, register_job
from prospect.core.utils import pipeline_version
from prospect.pipeline import run_preview, run_ranking, run_reconciliation
from prospect.scoring.config import DEFAULT_CONFIG
from prospect.scoring.models import PreviewResult, RankingReport, ReconciliationSummary

logger = logging.getLogger(__name__)


@register_job("reconcile", "Assign default-profile tiers to providers without one.", writes=True)
def reconcile(context: JobContext) -> ReconciliationSummary:
    # Reconciliation always uses the system default profile, never a what-if one.
    summary = run_reconciliation(sqlite_path=context.settings.sqlite_path, config=DEFAULT_CONFIG)
    store = AuditStore(context.settings.sqlite_path)
    store.prepare_job(context.run_id, "reconcile")
    recorded = store.record_assignments(
        context.run_id,
        summary,
        config_name=DEFAULT_CONFIG.name,
        pipeline_version=pipeline_version(),
    )
    logger.info("Recorded %d reconciliation audit entries for run %s", recorded, context.run_id)
    return summary


@register_job("preview", "Recount tiers under the active scoring profile.")
def preview(context: JobContext) -> PreviewResult:
    result = run_preview(sqlite_path=context.settings.sqlite_path, config=context.profile)
    logger.info(
        "Preview '%s': %s (delta %s)",
        result.config_name,
        result.counts.as_dict(),
        result.delta.as_dict(),
    )
    store = AuditStore(context.settings.sqlite_path)
    store.prepare_job(context.run_id, "preview")
    store.record_preview(
        context.run_id,
        result,
        pipeline_version=pipeline_version(),
        settings=context.profile.to_mapping(),
    )
    return result


@register_job("rank", "Rank GREEN/YELLOW providers by composite score.")
def rank(context: JobContext) -> RankingReport:
    report = run_ranking(
        sqlite_path=context.settings.sqlite_path,
        weights=context.profile.ranking_weights,
        limit=context.settings.rank_limit,
        pool=context.settings.rank_pool,
    )
    for position, result in enumerate(report.results[:5], start=1):
        logger.info(
            "#%d %s (%s) composite score %.1f",
            position,
            result.name or result.provider_id,
            result.state or "n/a",
            result.composite_score,
        )
    return report


@register_job("audit", "Export the audit trail of this run to JSON and Excel.")
def audit(context: JobContext) -> ExportedAudit:
    store = AuditStore(context.settings.sqlite_path)
    exported = store.export_records(run_id=context.run_id, output_dir=context.settings.output_dir)
    if exported.records == 0:
        logger.warning(
            "No audit records found for run %s; skipping artifact generation.",
            context.run_id,
        )
        return exported
    for artifact in exported.files:
        logger.info("Audit artifact written to %s", artifact)
    return exported

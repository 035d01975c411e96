"""Audit trail of reconciliation assignments and preview runs."""
from __future__ import annotations

from .storage import AuditRecord, AuditStore, ExportedAudit

__all__ = ["AuditRecord", "AuditStore", "ExportedAudit"]

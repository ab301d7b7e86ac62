"""Kernel services (write paths)."""

from inventory_kernel.services.audit_recorder import (
    HISTORY_TABLE,
    AuditRecorder,
    build_audit_recorder,
)

__all__ = ["AuditRecorder", "build_audit_recorder", "HISTORY_TABLE"]

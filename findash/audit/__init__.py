"""Audit logging package."""

from findash.audit.logger import AuditLogger

__all__ = ["AuditLogger"]

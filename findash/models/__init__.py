"""
Data Models Package

This package contains all Pydantic models used in FinDash.
Everything the entity store holds or persists conforms to these schemas.
"""

from findash.models.finance import (
    SOBRA_DESCRIPTION,
    Category,
    CategoryData,
    CategoryIcon,
    Goal,
    GoalData,
    SubItem,
    Theme,
    Transaction,
    TransactionData,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    new_id,
)
from findash.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "SOBRA_DESCRIPTION",
    "Category",
    "CategoryData",
    "CategoryIcon",
    "Goal",
    "GoalData",
    "SubItem",
    "Theme",
    "Transaction",
    "TransactionData",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    "new_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

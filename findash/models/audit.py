"""
Audit Models for FinDash

Every change the entity store makes, and every storage problem it absorbs,
becomes an audit event. This provides:
1. Traceability of edits to the user's data
2. Debugging information when storage goes wrong
3. A recent-activity feed for the dashboard

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Lifecycle
    STORE_LOADED = "store_loaded"
    SEED_DATA_LOADED = "seed_data_loaded"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_DUPLICATED = "transaction_duplicated"
    TRANSACTION_NOT_FOUND = "transaction_not_found"

    # Categories
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"
    CATEGORY_DELETE_BLOCKED = "category_delete_blocked"

    # Goals
    GOAL_ADDED = "goal_added"
    GOAL_UPDATED = "goal_updated"
    GOAL_DELETED = "goal_deleted"
    GOAL_NOT_FOUND = "goal_not_found"

    # Preferences
    THEME_CHANGED = "theme_changed"

    # Forms
    VALIDATION_FAILED = "validation_failed"

    # Storage
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'goal', 'storage')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID (or storage key) of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "Salário", 3200.0)
        event = AuditEventBuilder.storage_write_failed("findash_goals", "disk full")
    """

    @staticmethod
    def store_loaded(
        transactions: int,
        categories: int,
        goals: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            entity_type="store",
            description=(
                f"Loaded {transactions} transactions, {categories} categories, "
                f"{goals} goals"
            ),
            details={
                "transactions": transactions,
                "categories": categories,
                "goals": goals,
            },
        )

    @staticmethod
    def seed_data_loaded(key: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SEED_DATA_LOADED,
            entity_type="storage",
            entity_id=key,
            description=f"No stored data for {key}; using {count} seed records",
            details={"count": count},
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        description: str,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {description}",
            details={"amount": amount},
        )

    @staticmethod
    def transaction_updated(transaction_id: str, description: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated: {description}",
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def transaction_duplicated(
        source_id: str,
        new_id: str,
        new_date: datetime,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DUPLICATED,
            entity_type="transaction",
            entity_id=new_id,
            description=f"Transaction duplicated to {new_date.date().isoformat()}",
            details={"source_id": source_id},
        )

    @staticmethod
    def entity_not_found(entity_type: str, entity_id: str) -> AuditEvent:
        event_type = (
            AuditEventType.TRANSACTION_NOT_FOUND
            if entity_type == "transaction"
            else AuditEventType.GOAL_NOT_FOUND
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"No {entity_type} with id {entity_id}; nothing changed",
        )

    @staticmethod
    def category_added(category_id: str, name: str, type_: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category added: {name}",
            details={"type": type_},
        )

    @staticmethod
    def category_deleted(category_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETED,
            entity_type="category",
            entity_id=category_id,
            description="Category deleted",
        )

    @staticmethod
    def category_delete_blocked(category_id: str, references: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETE_BLOCKED,
            severity=AuditSeverity.WARNING,
            entity_type="category",
            entity_id=category_id,
            description=f"Category still used by {references} transactions",
            details={"references": references},
        )

    @staticmethod
    def goal_changed(
        event_type: AuditEventType,
        goal_id: str,
        name: Optional[str] = None,
    ) -> AuditEvent:
        verb = event_type.value.split("_", 1)[1]
        label = f": {name}" if name else ""
        return AuditEvent(
            event_type=event_type,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Goal {verb}{label}",
        )

    @staticmethod
    def theme_changed(theme: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_CHANGED,
            entity_type="preference",
            entity_id="theme",
            description=f"Theme set to {theme}",
        )

    @staticmethod
    def validation_failed(form: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="form",
            entity_id=form,
            description=f"{form.capitalize()} form rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Could not read {key}; falling back to defaults",
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not persist {key}; in-memory data kept",
            error_message=error_message,
        )

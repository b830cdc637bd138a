"""
Audit Models for Expense Tracker

Every mutation of the expense ledger and every failure the UI swallows is
logged for audit purposes. This provides:
1. Traceability of all edits and deletions
2. Debugging information when things go wrong
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    DUPLICATE_REJECTED = "duplicate_rejected"

    # Reads
    TOTAL_COMPUTED = "total_computed"

    # Background animation
    ANIMATION_STARTED = "animation_started"
    ANIMATION_STOPPED = "animation_stopped"
    ANIMATION_DEGRADED = "animation_degraded"

    # Failures
    UI_ERROR_CAUGHT = "ui_error_caught"
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
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
        description="Type of entity (e.g., 'expense', 'animation', 'ui')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one form submission)"
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

    # Error information (if applicable)
    error_message: Optional[str] = None
    stack_trace: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

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
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_created(expense_id, description, amount, correlation_id)
        event = AuditEventBuilder.ui_error_caught("ExpenseList", error, trace)
    """

    @staticmethod
    def expense_created(
        expense_id: int,
        description: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            entity_type="expense",
            entity_id=str(expense_id),
            correlation_id=correlation_id,
            description=f"Expense added: {description} - {amount}",
            details={
                "description": description,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        expense_id: int,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=str(expense_id),
            correlation_id=correlation_id,
            description=f"Expense {expense_id} updated",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=str(expense_id),
            correlation_id=correlation_id,
            description=f"Expense {expense_id} deleted",
            is_user_action=True,
        )

    @staticmethod
    def duplicate_rejected(
        description: str,
        existing_id: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUPLICATE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_id=str(existing_id),
            correlation_id=correlation_id,
            description=f"Duplicate expense entry rejected: {description}",
            details={
                "existing_id": existing_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def total_computed(
        period: str,
        total: str,
        expense_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TOTAL_COMPUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="query",
            description=f"Total for {period}: {total}",
            details={
                "period": period,
                "total": total,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def animation_started(
        width: float,
        height: float,
        particle_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANIMATION_STARTED,
            severity=AuditSeverity.DEBUG,
            entity_type="animation",
            description=f"Background animation started with {particle_count} particles",
            details={
                "width": width,
                "height": height,
                "particle_count": particle_count,
            },
        )

    @staticmethod
    def animation_stopped(frames_rendered: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANIMATION_STOPPED,
            severity=AuditSeverity.DEBUG,
            entity_type="animation",
            description=f"Background animation stopped after {frames_rendered} frames",
            details={
                "frames_rendered": frames_rendered,
            },
        )

    @staticmethod
    def animation_degraded(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANIMATION_DEGRADED,
            severity=AuditSeverity.WARNING,
            entity_type="animation",
            description="Background animation disabled: no drawing context",
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def ui_error_caught(
        component: str,
        error_message: str,
        stack_trace: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UI_ERROR_CAUGHT,
            severity=AuditSeverity.ERROR,
            entity_type="ui",
            entity_id=component,
            description=f"Error boundary caught an error in {component}",
            error_message=error_message,
            stack_trace=stack_trace,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

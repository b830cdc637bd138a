"""
Audit Logger

DESIGN DECISION: Every mutation of the ledger is logged.
This provides:
1. Complete traceability of edits and deletions
2. Debugging capability
3. User can see history of their interactions

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
- Offers a synchronous local-only path for callers that run inside a
  frame loop or a UI render (the background animation, the error boundary)
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    def log_local(self, event: AuditEvent) -> None:
        """
        Write an event to the structured local log only.

        Safe to call from synchronous code; never touches storage.
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        self.log_local(event)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_expense_created(
        self,
        expense_id: int,
        description: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new expense."""
        event = AuditEventBuilder.expense_created(
            expense_id=expense_id,
            description=description,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_expense_updated(
        self,
        expense_id: int,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an expense edit."""
        event = AuditEventBuilder.expense_updated(
            expense_id=expense_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_expense_deleted(
        self,
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an expense deletion."""
        event = AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_duplicate_rejected(
        self,
        description: str,
        existing_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected duplicate entry."""
        event = AuditEventBuilder.duplicate_rejected(
            description=description,
            existing_id=existing_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage failure."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., submitting the add form).
    Pass it through all subsequent operations.
    """
    return uuid4()

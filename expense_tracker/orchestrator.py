"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. Add (form draft -> duplicate check -> derived fields -> insert)
2. Edit / Delete of an existing expense
3. Totals (period total, today's expenses, description suggestions)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No write without the duplicate check
- Every mutation is audited
- Storage failures are audited, then re-raised for the UI to show
"""

from datetime import date
from typing import Optional
from uuid import UUID

import structlog

from expense_tracker.audit import AuditLogger, create_correlation_id
from expense_tracker.config import get_settings
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import (
    Category,
    DaySummary,
    Expense,
    ExpenseDraft,
    PeriodTotal,
    Supplier,
    TimePeriod,
)
from expense_tracker.queries import ExpenseQueryExecutor, QueryExecutionError
from expense_tracker.services.storage import (
    AuditStorageInterface,
    ExpenseStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsExpenseStorage,
    InMemoryAuditStorage,
    InMemoryExpenseStorage,
    NotFoundError,
    StorageError,
)
from expense_tracker.validation import DuplicateExpenseError, ExpenseValidator


logger = structlog.get_logger(__name__)


class ExpenseFlow:
    """
    Orchestrates every expense screen action.

    Reads go through the query executor; writes go through the validator
    and then storage, with an audit event on each outcome.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        query_executor: Optional[ExpenseQueryExecutor] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseValidator(storage)
        self._queries = query_executor or ExpenseQueryExecutor(storage)
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def storage(self) -> ExpenseStorageInterface:
        return self._storage

    async def add_expense(
        self,
        draft: ExpenseDraft,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Validate and insert a new expense.

        Raises:
            DuplicateExpenseError: If an identical expense exists
            StorageError: If the insert fails
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            prepared = await self._validator.validate_new(draft)
        except DuplicateExpenseError as e:
            await self._audit_logger.log_duplicate_rejected(
                description=draft.description,
                existing_id=e.existing_id,
                correlation_id=correlation_id,
            )
            raise

        try:
            expense = await self._storage.add_expense(prepared)
        except StorageError as e:
            await self._audit_logger.log_storage_error(
                operation="add_expense",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        await self._audit_logger.log_expense_created(
            expense_id=expense.id,
            description=expense.description,
            amount=str(expense.amount),
            correlation_id=correlation_id,
        )
        return expense

    async def update_expense(
        self,
        expense: Expense,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Save an edited expense.

        Raises:
            NotFoundError: If the expense was deleted meanwhile
            StorageError: If the update fails
        """
        correlation_id = correlation_id or create_correlation_id()

        previous = await self._storage.get_expense(expense.id)
        if previous is None:
            raise NotFoundError(f"Expense not found: {expense.id}")

        updated = await self._validator.with_derived_fields(expense)
        changed = [
            name for name in ExpenseDraft.model_fields
            if getattr(previous, name) != getattr(updated, name)
        ]

        try:
            saved = await self._storage.update_expense(updated)
        except StorageError as e:
            await self._audit_logger.log_storage_error(
                operation="update_expense",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        await self._audit_logger.log_expense_updated(
            expense_id=saved.id,
            changed_fields=changed,
            correlation_id=correlation_id,
        )
        return saved

    async def delete_expense(
        self,
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete an expense. Returns False if it was already gone.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            deleted = await self._storage.delete_expense(expense_id)
        except StorageError as e:
            await self._audit_logger.log_storage_error(
                operation="delete_expense",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        if deleted:
            await self._audit_logger.log_expense_deleted(
                expense_id=expense_id,
                correlation_id=correlation_id,
            )
        return deleted

    async def total_for_period(
        self,
        period: TimePeriod,
        today: Optional[date] = None,
    ) -> PeriodTotal:
        try:
            result = await self._queries.total_for_period(period, today)
        except QueryExecutionError as e:
            await self._audit_logger.log_error(
                error_type="query_failed",
                error_message=str(e),
                details={"period": period.value},
            )
            raise

        self._audit_logger.log_local(AuditEventBuilder.total_computed(
            period=period.value,
            total=str(result.total),
            expense_count=result.expense_count,
        ))
        return result

    async def today_summary(self, today: Optional[date] = None) -> DaySummary:
        return await self._queries.today_summary(today)

    async def suggest_descriptions(self, text: str) -> list[str]:
        limit = get_settings().app.description_suggestion_limit
        return await self._queries.suggest_descriptions(text, limit=limit)

    async def list_categories(self) -> list[Category]:
        return await self._storage.list_categories()

    async def list_suppliers(self) -> list[Supplier]:
        return await self._storage.list_suppliers()


def create_app_components(
    use_storage: bool = True,
) -> tuple[ExpenseFlow, AuditLogger, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False to run on in-memory storage.

    Returns:
        (expense_flow, audit_logger, sheets_client)
    """
    sheets_client = None
    expense_storage: ExpenseStorageInterface
    audit_storage: AuditStorageInterface

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            expense_storage = GoogleSheetsExpenseStorage(sheets_client)
            audit_storage = GoogleSheetsAuditStorage(sheets_client)
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            expense_storage = InMemoryExpenseStorage()
            audit_storage = InMemoryAuditStorage()
    else:
        expense_storage = InMemoryExpenseStorage()
        audit_storage = InMemoryAuditStorage()

    audit_logger = AuditLogger(audit_storage)
    expense_flow = ExpenseFlow(
        storage=expense_storage,
        audit_logger=audit_logger,
    )

    return expense_flow, audit_logger, sheets_client

"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the hosted backend without touching business logic
2. Use in-memory storage for testing
3. Add caching layers transparently

The interface is intentionally simple - we're not building a full ORM.
Just the operations the expense screens need.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

from expense_tracker.models.audit import AuditEvent
from expense_tracker.models.expense import (
    Category,
    Expense,
    ExpenseDraft,
    Supplier,
)


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Any storage implementation (Google Sheets, hosted Postgres, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def add_expense(self, draft: ExpenseDraft) -> Expense:
        """
        Insert a new expense.

        Args:
            draft: The expense as submitted by the form

        Returns:
            The stored expense with its backend-assigned id

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def get_expense(self, expense_id: int) -> Optional[Expense]:
        """
        Retrieve an expense by id.

        Returns:
            The expense if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_expense(self, expense: Expense) -> Expense:
        """
        Overwrite an existing expense with new field values.

        Raises:
            NotFoundError: If the expense doesn't exist
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: int) -> bool:
        """
        Delete an expense by id.

        Returns:
            True if a row was deleted, False if it didn't exist
        """
        pass

    @abstractmethod
    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Expense]:
        """
        List expenses with optional date filters, newest first.

        Args:
            date_from: Only expenses on or after this date
            date_to: Only expenses on or before this date
            limit: Maximum number of results (None for all)
            offset: Number of results to skip
        """
        pass

    @abstractmethod
    async def sum_amounts(
        self,
        date_from: Optional[date] = None,
    ) -> tuple[Decimal, int]:
        """
        Sum the amount column of every expense on or after date_from.

        Returns:
            (total, number_of_expenses)
        """
        pass

    @abstractmethod
    async def find_duplicate(self, draft: ExpenseDraft) -> Optional[Expense]:
        """
        Find an existing expense identical to the draft.

        Two entries are identical when date, category, description,
        quantity, unit and amount all match.
        """
        pass

    @abstractmethod
    async def list_descriptions(self, limit: int = 100) -> list[str]:
        """
        Previously used descriptions, sorted ascending, at most `limit`.
        """
        pass

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """All expense categories."""
        pass

    @abstractmethod
    async def list_suppliers(self) -> list[Supplier]:
        """All suppliers."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass

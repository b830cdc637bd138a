"""
In-Memory Storage Implementation

Used when the hosted backend isn't configured, and by the test suite.
Data lives for the lifetime of the process only.
"""

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
from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    ExpenseStorageInterface,
    NotFoundError,
)


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """Dictionary-backed expense storage with auto-incrementing ids."""

    def __init__(
        self,
        categories: Optional[list[Category]] = None,
        suppliers: Optional[list[Supplier]] = None,
    ):
        self._expenses: dict[int, Expense] = {}
        self._next_id = 1
        self._categories = list(categories or [])
        self._suppliers = list(suppliers or [])

    async def add_expense(self, draft: ExpenseDraft) -> Expense:
        expense = Expense.from_draft(draft, self._next_id)
        self._expenses[expense.id] = expense
        self._next_id += 1
        return expense

    async def get_expense(self, expense_id: int) -> Optional[Expense]:
        return self._expenses.get(expense_id)

    async def update_expense(self, expense: Expense) -> Expense:
        if expense.id not in self._expenses:
            raise NotFoundError(f"Expense not found: {expense.id}")
        self._expenses[expense.id] = expense
        return expense

    async def delete_expense(self, expense_id: int) -> bool:
        return self._expenses.pop(expense_id, None) is not None

    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Expense]:
        expenses = [
            e for e in self._expenses.values()
            if (date_from is None or e.date >= date_from)
            and (date_to is None or e.date <= date_to)
        ]
        # Newest first, stable on insertion order within a day
        expenses.sort(key=lambda e: (e.date, e.id), reverse=True)
        if limit is None:
            return expenses[offset:]
        return expenses[offset:offset + limit]

    async def sum_amounts(
        self,
        date_from: Optional[date] = None,
    ) -> tuple[Decimal, int]:
        expenses = await self.list_expenses(date_from=date_from)
        return sum((e.amount for e in expenses), Decimal("0")), len(expenses)

    async def find_duplicate(self, draft: ExpenseDraft) -> Optional[Expense]:
        key = draft.duplicate_key()
        for expense in self._expenses.values():
            if expense.duplicate_key() == key:
                return expense
        return None

    async def list_descriptions(self, limit: int = 100) -> list[str]:
        descriptions = sorted(e.description for e in self._expenses.values())
        return descriptions[:limit]

    async def list_categories(self) -> list[Category]:
        return list(self._categories)

    async def list_suppliers(self) -> list[Supplier]:
        return list(self._suppliers)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return sorted(self._events, key=lambda e: e.timestamp, reverse=True)[:limit]

"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Google Sheets is the hosted backend; the in-memory backend is used when
Sheets isn't configured and in tests.
"""

from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
)
from expense_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryExpenseStorage,
)
from expense_tracker.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsExpenseStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "ExpenseStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryExpenseStorage",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsExpenseStorage",
]

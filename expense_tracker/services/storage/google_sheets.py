"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the hosted backend because:
1. Users can view and fix their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (fine for a personal ledger)
- No transactions and no server-side filtering (we filter in Python)
- Ids are assigned client-side as max(id) + 1

The implementation follows the abstract interface, so the backend can be
swapped without changing business logic.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from expense_tracker.config import get_settings
from expense_tracker.models.audit import AuditEvent, AuditEventType, AuditSeverity
from expense_tracker.models.expense import (
    Category,
    Expense,
    ExpenseDraft,
    Supplier,
)
from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
)


# Column mappings for Expenses sheet
EXPENSE_COLUMNS = [
    "id",
    "date",
    "category_id",
    "description",
    "quantity",
    "unit",
    "amount",
    "supplier_id",
    "note",
    "cost_per_100g",
    "created_at",
]

# Column mappings for Categories / Suppliers sheets
LOOKUP_COLUMNS = ["id", "name"]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int = 1000,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_expenses_sheet(self) -> gspread.Worksheet:
        """Get or create the Expenses worksheet."""
        return self._get_or_create_sheet(
            self._settings.expenses_sheet_name, EXPENSE_COLUMNS
        )

    def get_categories_sheet(self) -> gspread.Worksheet:
        """Get or create the Categories worksheet."""
        return self._get_or_create_sheet(
            self._settings.categories_sheet_name, LOOKUP_COLUMNS, rows=100
        )

    def get_suppliers_sheet(self) -> gspread.Worksheet:
        """Get or create the Suppliers worksheet."""
        return self._get_or_create_sheet(
            self._settings.suppliers_sheet_name, LOOKUP_COLUMNS, rows=100
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


def _safe_get(row: list, index: int, default: str = "") -> str:
    """Read a cell, tolerating short rows and empty cells."""
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsExpenseStorage(ExpenseStorageInterface):
    """
    Google Sheets implementation of expense storage.

    Expenses are stored as rows in a worksheet with one expense per row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _expense_to_row(self, expense: Expense) -> list:
        """Convert an Expense to a spreadsheet row."""
        return [
            str(expense.id),
            expense.date.isoformat(),
            expense.category_id,
            expense.description,
            str(expense.quantity),
            expense.unit,
            str(expense.amount),
            expense.supplier_id or "",
            expense.note or "",
            str(expense.cost_per_100g) if expense.cost_per_100g is not None else "",
            expense.created_at.isoformat(),
        ]

    def _row_to_expense(self, row: list) -> Expense:
        """Convert a spreadsheet row to an Expense."""
        cost = _safe_get(row, 9)
        created = _safe_get(row, 10)
        values = dict(
            id=int(_safe_get(row, 0)),
            date=date.fromisoformat(_safe_get(row, 1)),
            category_id=_safe_get(row, 2),
            description=_safe_get(row, 3),
            quantity=Decimal(_safe_get(row, 4, "0")),
            unit=_safe_get(row, 5),
            amount=Decimal(_safe_get(row, 6, "0")),
            supplier_id=_safe_get(row, 7) or None,
            note=_safe_get(row, 8) or None,
            cost_per_100g=Decimal(cost) if cost else None,
        )
        if created:
            values["created_at"] = datetime.fromisoformat(created)
        return Expense(**values)

    def _read_expenses(self) -> list[Expense]:
        """Read every well-formed expense row (header excluded)."""
        sheet = self._client.get_expenses_sheet()
        expenses = []
        for row in sheet.get_all_values()[1:]:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                expenses.append(self._row_to_expense(row))
            except Exception:
                continue  # Skip malformed rows
        return expenses

    def _find_row_index(self, sheet: gspread.Worksheet, expense_id: int) -> Optional[int]:
        """1-based sheet row of an expense, or None."""
        for idx, row in enumerate(sheet.get_all_values()[1:], start=2):  # Row 1 is header
            if row and row[0] == str(expense_id):
                return idx
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def add_expense(self, draft: ExpenseDraft) -> Expense:
        """Append a new expense row."""
        try:
            existing = self._read_expenses()
            next_id = max((e.id for e in existing), default=0) + 1
            expense = Expense.from_draft(draft, next_id)
            sheet = self._client.get_expenses_sheet()
            sheet.append_row(self._expense_to_row(expense), value_input_option="RAW")
            return expense
        except Exception as e:
            raise StorageError(f"Failed to add expense: {e}")

    async def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Retrieve an expense by id."""
        try:
            for expense in self._read_expenses():
                if expense.id == expense_id:
                    return expense
            return None
        except Exception as e:
            raise StorageError(f"Failed to get expense: {e}")

    async def update_expense(self, expense: Expense) -> Expense:
        """Overwrite an existing expense row."""
        try:
            sheet = self._client.get_expenses_sheet()
            idx = self._find_row_index(sheet, expense.id)
            if idx is None:
                raise NotFoundError(f"Expense not found: {expense.id}")

            new_row = self._expense_to_row(expense)
            for col_idx, value in enumerate(new_row, start=1):
                sheet.update_cell(idx, col_idx, value)
            return expense
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update expense: {e}")

    async def delete_expense(self, expense_id: int) -> bool:
        """Delete an expense row."""
        try:
            sheet = self._client.get_expenses_sheet()
            idx = self._find_row_index(sheet, expense_id)
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete expense: {e}")

    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Expense]:
        """List expenses with optional date filters."""
        try:
            expenses = [
                e for e in self._read_expenses()
                if (date_from is None or e.date >= date_from)
                and (date_to is None or e.date <= date_to)
            ]
            expenses.sort(key=lambda e: (e.date, e.id), reverse=True)
            if limit is None:
                return expenses[offset:]
            return expenses[offset:offset + limit]
        except Exception as e:
            raise StorageError(f"Failed to list expenses: {e}")

    async def sum_amounts(
        self,
        date_from: Optional[date] = None,
    ) -> tuple[Decimal, int]:
        """Sum amounts on or after date_from."""
        expenses = await self.list_expenses(date_from=date_from)
        return sum((e.amount for e in expenses), Decimal("0")), len(expenses)

    async def find_duplicate(self, draft: ExpenseDraft) -> Optional[Expense]:
        """Find an identical existing expense."""
        key = draft.duplicate_key()
        for expense in await self.list_expenses(date_from=draft.date, date_to=draft.date):
            if expense.duplicate_key() == key:
                return expense
        return None

    async def list_descriptions(self, limit: int = 100) -> list[str]:
        """Previously used descriptions, sorted ascending."""
        try:
            return sorted(e.description for e in self._read_expenses())[:limit]
        except Exception as e:
            raise StorageError(f"Failed to list descriptions: {e}")

    def _read_lookup(self, sheet: gspread.Worksheet) -> list[tuple[str, str]]:
        rows = []
        for row in sheet.get_all_values()[1:]:
            if row and _safe_get(row, 0) and _safe_get(row, 1):
                rows.append((_safe_get(row, 0), _safe_get(row, 1)))
        return rows

    async def list_categories(self) -> list[Category]:
        """All categories from the Categories sheet."""
        try:
            sheet = self._client.get_categories_sheet()
            return [Category(id=i, name=n) for i, n in self._read_lookup(sheet)]
        except Exception as e:
            raise StorageError(f"Failed to list categories: {e}")

    async def list_suppliers(self) -> list[Supplier]:
        """All suppliers from the Suppliers sheet."""
        try:
            sheet = self._client.get_suppliers_sheet()
            return [Supplier(id=i, name=n) for i, n in self._read_lookup(sheet)]
        except Exception as e:
            raise StorageError(f"Failed to list suppliers: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            entity_type=_safe_get(row, 4) or None,
            entity_id=_safe_get(row, 5) or None,
            correlation_id=UUID(_safe_get(row, 6)) if _safe_get(row, 6) else None,
            description=_safe_get(row, 7),
            details=json.loads(_safe_get(row, 8)) if _safe_get(row, 8) else {},
            error_message=_safe_get(row, 9) or None,
            is_user_action=_safe_get(row, 10).lower() == "true",
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # AuditLogger.log swallows this so the main flow continues
            raise StorageError(f"Failed to write audit event: {e}")

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]

            events = []
            for row in all_rows:
                if row and row[0]:
                    try:
                        events.append(self._row_to_event(row))
                    except Exception:
                        continue

            # Sort newest first
            events.sort(key=lambda e: e.timestamp, reverse=True)
            return events[:limit]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

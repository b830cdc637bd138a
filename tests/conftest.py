"""
Shared fixtures and fakes.

No real API calls in tests: the render surface records draw calls and the
Google Sheets client is replaced by in-memory worksheets.
"""

import random
from typing import Optional

import pytest

from expense_tracker.animation import (
    DrawingContext,
    ManualFrameScheduler,
    RenderSurface,
    Viewport,
)
from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Category, Supplier
from expense_tracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryExpenseStorage,
)
from expense_tracker.services.storage.google_sheets import (
    AUDIT_COLUMNS,
    EXPENSE_COLUMNS,
    LOOKUP_COLUMNS,
)


class RecordingContext(DrawingContext):
    """Drawing context that appends every call to `ops`."""

    def __init__(self):
        self.ops: list[tuple] = []

    def clear(self) -> None:
        self.ops.append(("clear",))

    def fill_circle(self, x, y, radius, color) -> None:
        self.ops.append(("circle", x, y, radius, color))

    def line(self, x1, y1, x2, y2, color, width=1) -> None:
        self.ops.append(("line", x1, y1, x2, y2, color, width))

    def count(self, kind: str) -> int:
        return sum(1 for op in self.ops if op[0] == kind)


class RecordingSurface(RenderSurface):
    """Resizable surface whose context can be taken away mid-run."""

    def __init__(self, width: int, height: int):
        self._width = width
        self._height = height
        self.context: Optional[RecordingContext] = RecordingContext()
        self.resizes: list[tuple[int, int]] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def set_size(self, width: int, height: int) -> None:
        self._width = width
        self._height = height
        self.resizes.append((width, height))

    def get_context(self) -> Optional[DrawingContext]:
        return self.context


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the storage adapters."""

    def __init__(self, header: list[str], rows: Optional[list[list[str]]] = None):
        self.rows = [list(header)] + [list(r) for r in (rows or [])]

    def get_all_values(self) -> list[list[str]]:
        return [list(r) for r in self.rows]

    def append_row(self, values, value_input_option=None):
        self.rows.append([str(v) for v in values])

    def update_cell(self, row: int, col: int, value):
        target = self.rows[row - 1]
        while len(target) < col:
            target.append("")
        target[col - 1] = str(value)

    def delete_rows(self, index: int):
        del self.rows[index - 1]


class FakeSheetsClient:
    """Stands in for GoogleSheetsClient; no network."""

    def __init__(self):
        self.expenses = FakeWorksheet(EXPENSE_COLUMNS)
        self.categories = FakeWorksheet(LOOKUP_COLUMNS, [["c1", "Ingredient"], ["c2", "Utilities"]])
        self.suppliers = FakeWorksheet(LOOKUP_COLUMNS, [["s1", "Corner Market"]])
        self.audit = FakeWorksheet(AUDIT_COLUMNS)

    def get_expenses_sheet(self):
        return self.expenses

    def get_categories_sheet(self):
        return self.categories

    def get_suppliers_sheet(self):
        return self.suppliers

    def get_audit_sheet(self):
        return self.audit


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def recording_context():
    return RecordingContext()


@pytest.fixture
def surface_factory():
    """Factory that remembers the surface it built."""
    built = []

    def factory(width, height):
        surface = RecordingSurface(width, height)
        built.append(surface)
        return surface

    factory.built = built
    return factory


@pytest.fixture
def viewport():
    return Viewport(1920, 1080)


@pytest.fixture
def categories():
    return [
        Category(id="c1", name="Ingredient"),
        Category(id="c2", name="Utilities"),
    ]


@pytest.fixture
def suppliers():
    return [Supplier(id="s1", name="Corner Market")]


@pytest.fixture
def expense_storage(categories, suppliers):
    return InMemoryExpenseStorage(categories=categories, suppliers=suppliers)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def sheets_client():
    return FakeSheetsClient()

"""
Core Data Models for Expense Tracker

These models define the strict schemas for expense data flowing through
the system. They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging

Field names follow the columns of the hosted `expenses` table so rows can
be passed to and from the backend without renaming.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TimePeriod(str, Enum):
    """
    Periods the total-expenses card can be filtered by.

    Values match the options of the period selector in the UI.
    """
    ALL_TIME = "all-time"
    THIS_YEAR = "this-year"
    THIS_MONTH = "this-month"

    def start_date(self, today: dt.date) -> Optional[dt.date]:
        """First day included in this period, or None for no lower bound."""
        if self is TimePeriod.THIS_YEAR:
            return today.replace(month=1, day=1)
        if self is TimePeriod.THIS_MONTH:
            return today.replace(day=1)
        return None

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


# =============================================================================
# LOOKUP TABLES
# =============================================================================

class Category(BaseModel):
    """Expense category row (e.g. 'Ingredient', 'Utilities')."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)


class Supplier(BaseModel):
    """Supplier row an expense can optionally reference."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)


# =============================================================================
# EXPENSE MODELS
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    An expense as submitted by the add form, before the backend assigns an id.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: dt.date = Field(
        default_factory=dt.date.today,
        description="Day the expense was incurred"
    )
    category_id: str = Field(
        ...,
        min_length=1,
        description="Category this expense belongs to"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What was bought"
    )
    quantity: Decimal = Field(
        ...,
        ge=0,
        description="Quantity purchased"
    )
    unit: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Unit of the quantity (e.g. g, Kg, pcs)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount paid"
    )
    supplier_id: Optional[str] = Field(
        default=None,
        description="Supplier the expense was bought from"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-text note"
    )
    cost_per_100g: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Derived price per 100 g for ingredients"
    )

    @field_validator('supplier_id', 'note', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        """Empty form inputs mean 'not set'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def duplicate_key(self) -> tuple:
        """Fields that identify an exact duplicate entry."""
        return (
            self.date,
            self.category_id,
            self.description,
            self.quantity,
            self.unit,
            self.amount,
        )


class Expense(ExpenseDraft):
    """
    A stored expense line item.

    CRITICAL: Only Expense objects (with a backend id) can be edited or deleted.
    """

    id: int = Field(
        ...,
        ge=1,
        description="Backend-assigned identifier"
    )
    created_at: dt.datetime = Field(
        default_factory=dt.datetime.utcnow,
        description="When the row was inserted"
    )

    @classmethod
    def from_draft(cls, draft: ExpenseDraft, expense_id: int) -> "Expense":
        return cls(id=expense_id, **draft.model_dump())


# =============================================================================
# QUERY RESULT MODELS
# =============================================================================

class PeriodTotal(BaseModel):
    """Sum of expense amounts for one TimePeriod."""

    period: TimePeriod
    start_date: Optional[dt.date] = None
    total: Decimal = Field(default=Decimal("0"), ge=0)
    expense_count: int = Field(default=0, ge=0)
    computed_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)

    @property
    def summary(self) -> str:
        """Count and span of the total, e.g. for a metric tooltip."""
        if self.start_date is None:
            return f"{self.expense_count} expense(s), all time"
        return f"{self.expense_count} expense(s) since {self.start_date:%d %B %Y}"


class DaySummary(BaseModel):
    """Expenses recorded on a single day and their total."""

    day: dt.date
    expenses: list[Expense] = Field(default_factory=list)
    total: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def is_empty(self) -> bool:
        return not self.expenses

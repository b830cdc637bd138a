"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (with in-memory storage)
3. No real API calls in tests (use fakes)
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from expense_tracker.models.expense import (
    Category,
    DaySummary,
    Expense,
    ExpenseDraft,
    PeriodTotal,
    TimePeriod,
)
from expense_tracker.models.animation import Particle
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


def make_draft(**overrides) -> ExpenseDraft:
    values = dict(
        date=date(2024, 3, 15),
        category_id="c1",
        description="Flour",
        quantity=Decimal("2"),
        unit="Kg",
        amount=Decimal("3.50"),
    )
    values.update(overrides)
    return ExpenseDraft(**values)


class TestExpenseModels:
    """Tests for expense-related Pydantic models."""

    def test_draft_creation(self):
        """Test ExpenseDraft model creation."""
        draft = make_draft()
        assert draft.description == "Flour"
        assert draft.amount == Decimal("3.50")
        assert draft.supplier_id is None
        assert draft.cost_per_100g is None

    def test_draft_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        draft = make_draft(description="  Flour  ", unit=" Kg ")
        assert draft.description == "Flour"
        assert draft.unit == "Kg"

    def test_blank_optional_fields_become_none(self):
        """Test empty supplier and note inputs are stored as None."""
        draft = make_draft(supplier_id="", note="   ")
        assert draft.supplier_id is None
        assert draft.note is None

    def test_draft_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            make_draft(amount=Decimal("-1.00"))

    def test_draft_rejects_negative_quantity(self):
        """Test that negative quantities are rejected."""
        with pytest.raises(ValueError):
            make_draft(quantity=Decimal("-1"))

    def test_draft_rejects_three_decimal_amount(self):
        """Test amounts are limited to cents."""
        with pytest.raises(ValueError):
            make_draft(amount=Decimal("1.005"))

    def test_draft_requires_description(self):
        """Test an empty description is rejected."""
        with pytest.raises(ValueError):
            make_draft(description="")

    def test_draft_defaults_to_today(self):
        """Test the date defaults to today."""
        draft = ExpenseDraft(
            category_id="c1",
            description="Tea",
            quantity=Decimal("1"),
            unit="box",
            amount=Decimal("4.00"),
        )
        assert draft.date == date.today()

    def test_duplicate_key_ignores_note_and_supplier(self):
        """Test note and supplier don't distinguish duplicates."""
        first = make_draft(note="from market", supplier_id="s1")
        second = make_draft()
        assert first.duplicate_key() == second.duplicate_key()

    def test_duplicate_key_compares_decimal_values(self):
        """Test 3.5 and 3.50 are the same amount."""
        assert make_draft(amount=Decimal("3.5")).duplicate_key() == make_draft().duplicate_key()

    def test_expense_from_draft(self):
        """Test an Expense keeps every draft field plus its id."""
        expense = Expense.from_draft(make_draft(note="bulk"), 7)
        assert expense.id == 7
        assert expense.note == "bulk"
        assert expense.created_at is not None

    def test_expense_rejects_zero_id(self):
        """Test ids start at 1."""
        with pytest.raises(ValueError):
            Expense.from_draft(make_draft(), 0)

    def test_category_requires_name(self):
        """Test Category needs a non-empty name."""
        with pytest.raises(ValueError):
            Category(id="c1", name="")

    def test_day_summary_is_empty(self):
        """Test is_empty reflects the expense list."""
        assert DaySummary(day=date(2024, 3, 15)).is_empty
        summary = DaySummary(
            day=date(2024, 3, 15),
            expenses=[Expense.from_draft(make_draft(), 1)],
            total=Decimal("3.50"),
        )
        assert not summary.is_empty

    def test_period_total_defaults(self):
        """Test an empty period totals zero."""
        result = PeriodTotal(period=TimePeriod.ALL_TIME)
        assert result.total == Decimal("0")
        assert result.expense_count == 0


class TestTimePeriod:
    """Tests for the period selector enum."""

    def test_values(self):
        """Test the period string values."""
        assert TimePeriod("all-time") is TimePeriod.ALL_TIME
        assert TimePeriod.THIS_YEAR.value == "this-year"
        assert TimePeriod.THIS_MONTH.value == "this-month"

    def test_start_dates(self):
        """Test each period's first day."""
        today = date(2024, 3, 15)
        assert TimePeriod.ALL_TIME.start_date(today) is None
        assert TimePeriod.THIS_YEAR.start_date(today) == date(2024, 1, 1)
        assert TimePeriod.THIS_MONTH.start_date(today) == date(2024, 3, 1)

    def test_labels(self):
        """Test human-readable labels."""
        assert TimePeriod.ALL_TIME.label == "All Time"
        assert TimePeriod.THIS_MONTH.label == "This Month"

    @pytest.mark.parametrize("period,expected", [
        (TimePeriod.ALL_TIME, "3 expense(s), all time"),
        (TimePeriod.THIS_YEAR, "3 expense(s) since 01 January 2024"),
        (TimePeriod.THIS_MONTH, "3 expense(s) since 01 March 2024"),
    ])
    def test_period_total_summary(self, period, expected):
        """Test every period formats a summary, including the open-ended one."""
        result = PeriodTotal(
            period=period,
            start_date=period.start_date(date(2024, 3, 15)),
            total=Decimal("90.00"),
            expense_count=3,
        )
        assert result.summary == expected


class TestParticleModel:
    """Tests for the Particle model."""

    def test_distance(self):
        """Test center-to-center distance."""
        a = Particle(x=0, y=0, dx=1, dy=1, radius=5, color="#6B8E23")
        b = Particle(x=3, y=4, dx=1, dy=1, radius=5, color="#6B8E23")
        assert a.distance_to(b) == 5.0

    def test_rejects_non_positive_radius(self):
        """Test radius must be positive."""
        with pytest.raises(ValueError):
            Particle(x=0, y=0, dx=1, dy=1, radius=0, color="#6B8E23")

    def test_position_is_mutable(self):
        """Test the frame loop can move a particle in place."""
        p = Particle(x=0, y=0, dx=1, dy=1, radius=5, color="#6B8E23")
        p.x += p.dx
        assert p.x == 1


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            description="Expense deleted",
            details={"description": "Flour", "amount": "3.50"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_deleted"
        assert log_dict["details"]["description"] == "Flour"

    def test_audit_event_to_sheets_row(self):
        """Test conversion to sheets row."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            description="Expense updated",
            details={"changed_fields": ["amount"]},
            is_user_action=True,
        )
        row = event.to_sheets_row()
        assert len(row) == 11  # Expected number of columns
        assert row[2] == "expense_updated"  # event_type
        assert row[8] == '{"changed_fields": ["amount"]}'
        assert row[10] == "True"  # is_user_action

    def test_audit_event_builder_expense_created(self):
        """Test AuditEventBuilder.expense_created."""
        correlation_id = uuid4()

        event = AuditEventBuilder.expense_created(
            expense_id=3,
            description="Flour",
            amount="3.50",
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.EXPENSE_CREATED
        assert event.entity_id == "3"
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True

    def test_audit_event_builder_duplicate_rejected(self):
        """Test AuditEventBuilder.duplicate_rejected."""
        event = AuditEventBuilder.duplicate_rejected(description="Flour", existing_id=4)

        assert event.event_type == AuditEventType.DUPLICATE_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["existing_id"] == 4

    def test_audit_event_builder_ui_error(self):
        """Test AuditEventBuilder.ui_error_caught."""
        event = AuditEventBuilder.ui_error_caught("expense_list", "boom", "Traceback...")

        assert event.event_type == AuditEventType.UI_ERROR_CAUGHT
        assert event.severity == AuditSeverity.ERROR
        assert event.entity_id == "expense_list"
        assert event.stack_trace == "Traceback..."


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

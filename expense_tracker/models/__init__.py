"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.animation import (
    AnimationConfig,
    DEFAULT_ALPHA,
    DEFAULT_PALETTE,
    Particle,
    SMALL_VIEWPORT_WIDTH,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from expense_tracker.models.expense import (
    Category,
    DaySummary,
    Expense,
    ExpenseDraft,
    PeriodTotal,
    Supplier,
    TimePeriod,
)

__all__ = [
    # Animation models
    "AnimationConfig",
    "DEFAULT_ALPHA",
    "DEFAULT_PALETTE",
    "Particle",
    "SMALL_VIEWPORT_WIDTH",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Expense models
    "Category",
    "DaySummary",
    "Expense",
    "ExpenseDraft",
    "PeriodTotal",
    "Supplier",
    "TimePeriod",
]

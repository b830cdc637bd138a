"""Validation package."""

from expense_tracker.validation.validator import (
    DuplicateExpenseError,
    ExpenseValidator,
    INGREDIENT_CATEGORY_NAME,
    cost_per_100g,
)

__all__ = [
    "DuplicateExpenseError",
    "ExpenseValidator",
    "INGREDIENT_CATEGORY_NAME",
    "cost_per_100g",
]

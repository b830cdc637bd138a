"""
Pre-Write Validation

Field-level checks (types, required fields, non-negative amounts) are done
by the pydantic models. This module covers the checks that need context:

- DUPLICATE DETECTION: an entry identical to an existing one on date,
  category, description, quantity, unit and amount is rejected.
- DERIVED FIELDS: ingredients get a price per 100 g computed from amount,
  quantity and unit.

IMPORTANT: Validation never silently drops an entry. Duplicates raise.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from expense_tracker.models.expense import Category, ExpenseDraft
from expense_tracker.services.storage import DuplicateError, ExpenseStorageInterface


INGREDIENT_CATEGORY_NAME = "Ingredient"

CENTS = Decimal("0.01")


class DuplicateExpenseError(DuplicateError):
    """An identical expense is already stored."""

    def __init__(self, existing_id: int):
        self.existing_id = existing_id
        super().__init__("Duplicate expense entry")


def cost_per_100g(
    amount: Decimal,
    quantity: Decimal,
    unit: str,
) -> Optional[Decimal]:
    """
    Price per 100 g.

    Quantities in 'Kg' are converted to grams; any other unit is taken
    as grams. Returns None when quantity is not positive.
    """
    if quantity <= 0:
        return None
    grams = quantity * 1000 if unit == "Kg" else quantity
    return (amount / grams * 100).quantize(CENTS, rounding=ROUND_HALF_UP)


class ExpenseValidator:
    """
    Contextual checks run before an expense is written.
    """

    def __init__(self, storage: ExpenseStorageInterface):
        self._storage = storage

    async def is_ingredient(self, category_id: str) -> bool:
        categories: list[Category] = await self._storage.list_categories()
        for category in categories:
            if category.id == category_id:
                return category.name == INGREDIENT_CATEGORY_NAME
        return False

    async def with_derived_fields(self, draft: ExpenseDraft) -> ExpenseDraft:
        """
        Return a copy of the draft with cost_per_100g filled in
        (ingredients) or cleared (everything else).
        """
        cost = None
        if await self.is_ingredient(draft.category_id):
            cost = cost_per_100g(draft.amount, draft.quantity, draft.unit)
        return draft.model_copy(update={"cost_per_100g": cost})

    async def check_duplicate(self, draft: ExpenseDraft) -> None:
        """
        Raises:
            DuplicateExpenseError: If an identical expense exists
        """
        existing = await self._storage.find_duplicate(draft)
        if existing is not None:
            raise DuplicateExpenseError(existing.id)

    async def validate_new(self, draft: ExpenseDraft) -> ExpenseDraft:
        """Run every check for an add; returns the draft ready to store."""
        await self.check_duplicate(draft)
        return await self.with_derived_fields(draft)

"""
Expense Query Engine

DESIGN DECISION: All figures shown on screen are computed here from rows
read through the storage interface. Totals are never cached or estimated;
the UI simply asks again on its refresh interval.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from expense_tracker.models.expense import DaySummary, PeriodTotal, TimePeriod
from expense_tracker.services.storage import ExpenseStorageInterface


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class ExpenseQueryExecutor:
    """
    Read-side queries for the expense screens.

    GUARANTEES:
    - Only returns real data from storage
    - Empty results are zero totals, not errors
    """

    def __init__(self, storage: ExpenseStorageInterface):
        self._storage = storage

    async def total_for_period(
        self,
        period: TimePeriod,
        today: Optional[date] = None,
    ) -> PeriodTotal:
        """
        Sum of amounts for expenses on or after the period's first day.
        """
        today = today or date.today()
        start = period.start_date(today)
        try:
            total, count = await self._storage.sum_amounts(date_from=start)
        except Exception as e:
            raise QueryExecutionError(f"Failed to total {period.value}: {e}") from e

        return PeriodTotal(
            period=period,
            start_date=start,
            total=total,
            expense_count=count,
        )

    async def expenses_on(self, day: date) -> DaySummary:
        """Every expense recorded on `day` and their total."""
        try:
            expenses = await self._storage.list_expenses(date_from=day, date_to=day)
        except Exception as e:
            raise QueryExecutionError(f"Failed to list expenses for {day}: {e}") from e

        return DaySummary(
            day=day,
            expenses=expenses,
            total=sum((e.amount for e in expenses), Decimal("0")),
        )

    async def today_summary(self, today: Optional[date] = None) -> DaySummary:
        return await self.expenses_on(today or date.today())

    async def suggest_descriptions(
        self,
        text: str,
        limit: int = 100,
    ) -> list[str]:
        """
        Previous descriptions containing `text`, case-insensitively.

        Only the first `limit` descriptions (alphabetical) are searched.
        Repeats are collapsed, keeping alphabetical order.
        """
        needle = text.strip().lower()
        descriptions = await self._storage.list_descriptions(limit=limit)

        suggestions = []
        seen = set()
        for description in descriptions:
            if needle in description.lower() and description not in seen:
                suggestions.append(description)
                seen.add(description)
        return suggestions

"""Query execution package."""

from expense_tracker.queries.executor import ExpenseQueryExecutor, QueryExecutionError

__all__ = ["ExpenseQueryExecutor", "QueryExecutionError"]

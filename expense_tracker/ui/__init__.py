"""UI helpers shared by the front end."""

from expense_tracker.ui.error_boundary import (
    ErrorBoundary,
    FALLBACK_MESSAGE,
    FALLBACK_TITLE,
)

__all__ = ["ErrorBoundary", "FALLBACK_MESSAGE", "FALLBACK_TITLE"]

"""
Error Boundary

Wraps a UI render function so that an exception while drawing one part of
the screen shows a friendly fallback instead of a stack trace.

The boundary:
- Logs the error and traceback (structlog) and records an audit event
- Remembers that it has failed until reset() is called
- Renders the fallback instead of re-raising

Usage:

    boundary = ErrorBoundary("expense_list", fallback=show_error_card)

    @boundary
    def render_list():
        ...

    with boundary:
        render_totals()
"""

import functools
import traceback
from typing import Any, Callable, Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder


FALLBACK_TITLE = "Oops! Something went wrong."
FALLBACK_MESSAGE = (
    "We're sorry for the inconvenience. Please try refreshing the page "
    "or contact support if the problem persists."
)


class ErrorBoundary:
    """Catches exceptions from a UI section and renders a fallback."""

    def __init__(
        self,
        component: str = "app",
        fallback: Optional[Callable[[str, str], Any]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Args:
            component: Name used in logs for the wrapped section
            fallback: Called with (title, message) to draw the fallback.
                      If None, nothing is drawn.
            audit_logger: Receives a ui_error_caught event per failure
        """
        self.component = component
        self._fallback = fallback
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)
        self.has_error = False
        self.last_error: Optional[BaseException] = None

    def reset(self) -> None:
        self.has_error = False
        self.last_error = None

    def capture(self, error: Exception) -> None:
        """Record an error and render the fallback."""
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self.has_error = True
        self.last_error = error

        self._logger.error(
            "error_boundary_caught",
            component=self.component,
            error=str(error),
            error_type=type(error).__name__,
            stack_trace=stack,
        )
        if self._audit_logger:
            self._audit_logger.log_local(
                AuditEventBuilder.ui_error_caught(self.component, str(error), stack)
            )
        self.render_fallback()

    def render_fallback(self) -> None:
        if self._fallback is not None:
            self._fallback(FALLBACK_TITLE, FALLBACK_MESSAGE)

    def render(self, render_fn: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Call render_fn unless the boundary already failed.

        Returns render_fn's result, or None if it raised or was skipped.
        """
        if self.has_error:
            self.render_fallback()
            return None
        try:
            return render_fn(*args, **kwargs)
        except Exception as e:
            self.capture(e)
            return None

    def __call__(self, render_fn: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(render_fn)
        def wrapper(*args, **kwargs):
            return self.render(render_fn, *args, **kwargs)
        return wrapper

    def __enter__(self) -> "ErrorBoundary":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None or not isinstance(exc, Exception):
            return False
        self.capture(exc)
        return True

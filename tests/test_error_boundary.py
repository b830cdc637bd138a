"""
Tests for the UI error boundary.
"""

from unittest.mock import MagicMock

import pytest

from expense_tracker.models.audit import AuditEventType
from expense_tracker.ui import ErrorBoundary, FALLBACK_MESSAGE, FALLBACK_TITLE


def explode():
    raise RuntimeError("render failed")


class TestErrorBoundary:
    """Tests for ErrorBoundary."""

    def test_passes_through_result(self):
        """Test a successful render returns its value and shows no fallback."""
        fallback = MagicMock()
        boundary = ErrorBoundary("totals", fallback=fallback)

        assert boundary.render(lambda x: x * 2, 21) == 42
        assert not boundary.has_error
        fallback.assert_not_called()

    def test_catches_and_shows_fallback(self):
        """Test an exception renders the fallback instead of propagating."""
        fallback = MagicMock()
        boundary = ErrorBoundary("totals", fallback=fallback)

        assert boundary.render(explode) is None
        assert boundary.has_error
        assert isinstance(boundary.last_error, RuntimeError)
        fallback.assert_called_once_with(FALLBACK_TITLE, FALLBACK_MESSAGE)

    def test_fallback_text(self):
        """Test the user-facing fallback wording."""
        assert FALLBACK_TITLE == "Oops! Something went wrong."
        assert "refreshing the page" in FALLBACK_MESSAGE

    def test_stays_failed_until_reset(self):
        """Test later renders show the fallback until reset()."""
        fallback = MagicMock()
        render_fn = MagicMock(return_value="ok")
        boundary = ErrorBoundary("totals", fallback=fallback)
        boundary.render(explode)

        assert boundary.render(render_fn) is None
        render_fn.assert_not_called()
        assert fallback.call_count == 2

        boundary.reset()
        assert boundary.render(render_fn) == "ok"
        assert not boundary.has_error

    def test_decorator(self):
        """Test the boundary wraps a function as a decorator."""
        boundary = ErrorBoundary("list")

        @boundary
        def render_list():
            """Draw the list."""
            explode()

        assert render_list() is None
        assert boundary.has_error
        assert render_list.__name__ == "render_list"

    def test_context_manager(self):
        """Test the with-block form suppresses the error."""
        fallback = MagicMock()
        with ErrorBoundary("form", fallback=fallback) as boundary:
            explode()
        assert boundary.has_error
        fallback.assert_called_once()

    def test_context_manager_without_error(self):
        """Test a clean with-block leaves the boundary untouched."""
        with ErrorBoundary("form") as boundary:
            pass
        assert not boundary.has_error

    def test_does_not_swallow_base_exceptions(self):
        """Test KeyboardInterrupt still propagates."""
        with pytest.raises(KeyboardInterrupt):
            with ErrorBoundary("form"):
                raise KeyboardInterrupt

    def test_error_is_audited(self):
        """Test a caught error records a ui_error_caught event with the trace."""
        audit = MagicMock()
        boundary = ErrorBoundary("totals", audit_logger=audit)
        boundary.render(explode)

        event = audit.log_local.call_args.args[0]
        assert event.event_type == AuditEventType.UI_ERROR_CAUGHT
        assert event.entity_id == "totals"
        assert event.error_message == "render failed"
        assert "RuntimeError" in event.stack_trace

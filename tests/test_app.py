"""
Tests for the Streamlit page sections.

Sections are called directly (Streamlit bare mode) with the widgets they
read replaced, so each period choice can be rendered without a browser.
"""

from decimal import Decimal

import pytest
import streamlit as st

from expense_tracker.models.expense import TimePeriod
from expense_tracker.orchestrator import create_app_components

from app import main as app_main


@pytest.fixture
def expense_flow():
    flow, _, _ = create_app_components(use_storage=False)
    return flow


@pytest.fixture
def metrics(monkeypatch):
    shown = []
    monkeypatch.setattr(st, "metric", lambda label, value, help=None, **kwargs: shown.append((label, value, help)))
    return shown


class TestTotalCard:
    """Tests for the running total section."""

    @pytest.mark.parametrize("period", list(TimePeriod))
    def test_renders_every_period(self, monkeypatch, expense_flow, metrics, period):
        """Test the card shows a metric for each period choice."""
        monkeypatch.setattr(st, "radio", lambda *args, **kwargs: period)

        app_main.render_total_card(expense_flow)

        assert len(metrics) == 1
        label, value, help_text = metrics[0]
        assert label == f"Total ({period.label})"
        assert value.endswith("0.00")
        assert help_text.startswith("0 expense(s)")

    def test_default_period_is_all_time(self, monkeypatch, expense_flow, metrics):
        """Test the first radio option, all time, renders without a start date."""
        monkeypatch.setattr(st, "radio", lambda label, options, **kwargs: options[0])

        app_main.render_total_card(expense_flow)

        assert metrics[0][2] == "0 expense(s), all time"


class TestMoney:
    """Tests for amount formatting."""

    def test_two_decimals_and_grouping(self):
        """Test amounts show thousands separators and cents."""
        assert app_main.money(Decimal("1234.5")).endswith("1,234.50")

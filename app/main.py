"""
Streamlit Frontend for Expense Tracker

A single screen to record and review day-to-day expenses:
- Running total for a chosen period (all time, this year, this month)
- Today's expenses, each editable and deletable
- An add form with suggestions from previous descriptions

Every section is wrapped in an ErrorBoundary so that one failing part
shows a friendly message while the rest of the page keeps working.
The page background is the particle field, pre-rendered to a GIF.
"""

import asyncio
import base64
from datetime import date
from decimal import Decimal

import streamlit as st

from expense_tracker.animation import render_gif
from expense_tracker.audit import create_correlation_id
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models.expense import Expense, ExpenseDraft, TimePeriod
from expense_tracker.orchestrator import ExpenseFlow, create_app_components
from expense_tracker.ui import ErrorBoundary
from expense_tracker.validation import INGREDIENT_CATEGORY_NAME, DuplicateExpenseError


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="🧾",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# Background canvas size; the GIF is stretched to cover the page
BACKGROUND_WIDTH = 960
BACKGROUND_HEIGHT = 540

INGREDIENT_UNITS = ["g", "Kg"]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_app_components(use_storage=False)


@st.cache_data
def get_background_gif(width: int, height: int) -> bytes:
    """Pre-render the particle background once per size."""
    return render_gif(width, height, seed=0)


def show_fallback(title: str, message: str):
    st.error(f"**{title}** {message}")


def boundary(component: str) -> ErrorBoundary:
    _, audit_logger, _ = get_components()
    return ErrorBoundary(component, fallback=show_fallback, audit_logger=audit_logger)


def money(amount: Decimal) -> str:
    return f"{get_settings().app.currency_symbol}{amount:,.2f}"


def main():
    """Main application entry point."""
    expense_flow, _, sheets_client = get_components()

    with boundary("background"):
        render_background()

    st.title("🧾 Expense Tracker")
    if sheets_client is None:
        st.caption("Google Sheets is not configured. Entries are kept for this session only.")

    with boundary("total"):
        render_total_card(expense_flow)

    with boundary("today"):
        render_today_expenses(expense_flow)

    with boundary("add_form"):
        render_add_form(expense_flow)

    with boundary("settings"):
        render_settings_status()


def render_background():
    """Show the particle field behind the page content."""
    if not get_settings().animation.enabled:
        return

    gif = get_background_gif(BACKGROUND_WIDTH, BACKGROUND_HEIGHT)
    if not gif:
        return

    encoded = base64.b64encode(gif).decode("ascii")
    st.markdown(f"""
    <style>
        .stApp {{
            background-image: url("data:image/gif;base64,{encoded}");
            background-size: cover;
            background-attachment: fixed;
        }}
    </style>
    """, unsafe_allow_html=True)


def render_total_card(expense_flow: ExpenseFlow):
    """Total spent for the selected period."""
    period = st.radio(
        "Period",
        options=list(TimePeriod),
        format_func=lambda p: p.label,
        horizontal=True,
        label_visibility="collapsed",
    )

    result = run_async(expense_flow.total_for_period(period))
    st.metric(
        label=f"Total ({result.period.label})",
        value=money(result.total),
        help=result.summary,
    )


def render_today_expenses(expense_flow: ExpenseFlow):
    """Today's expenses, each with edit and delete actions."""
    summary = run_async(expense_flow.today_summary())

    st.subheader(f"Today's expenses · {money(summary.total)}")
    if summary.is_empty:
        st.info("No expenses recorded today.")
        return

    for expense in summary.expenses:
        with st.expander(f"{expense.description} · {expense.quantity} {expense.unit} · {money(expense.amount)}"):
            render_edit_form(expense_flow, expense)


def render_edit_form(expense_flow: ExpenseFlow, expense: Expense):
    with st.form(f"edit_{expense.id}"):
        description = st.text_input("Description", value=expense.description)
        col1, col2, col3 = st.columns(3)
        with col1:
            quantity = st.number_input(
                "Quantity", value=float(expense.quantity), min_value=0.0, step=1.0
            )
        with col2:
            unit = st.text_input("Unit", value=expense.unit)
        with col3:
            amount = st.number_input(
                "Amount", value=float(expense.amount), min_value=0.0, step=0.01, format="%.2f"
            )
        note = st.text_area("Note", value=expense.note or "")

        col1, col2 = st.columns(2)
        with col1:
            save = st.form_submit_button("💾 Save", type="primary")
        with col2:
            delete = st.form_submit_button("🗑️ Delete")

    if save:
        try:
            edited = Expense.model_validate({
                **expense.model_dump(),
                "description": description,
                "quantity": Decimal(str(quantity)),
                "unit": unit,
                "amount": Decimal(str(amount)).quantize(Decimal("0.01")),
                "note": note or None,
            })
            run_async(expense_flow.update_expense(edited))
            st.success("Expense updated")
            st.rerun()
        except ValueError as e:
            st.error(f"Please check the values: {e}")

    if delete:
        if run_async(expense_flow.delete_expense(expense.id)):
            st.success("Expense deleted")
        st.rerun()


def render_add_form(expense_flow: ExpenseFlow):
    """Form for a new expense."""
    st.subheader("Add expense")

    categories = run_async(expense_flow.list_categories())
    suppliers = run_async(expense_flow.list_suppliers())

    # Suggestions need to react to typing, so they sit outside the form
    typed = st.text_input("Description", key="description_search")
    description = typed
    if typed:
        suggestions = run_async(expense_flow.suggest_descriptions(typed))
        if suggestions:
            choice = st.selectbox(
                "Previous descriptions",
                options=[typed] + [s for s in suggestions if s != typed],
            )
            description = choice

    if categories:
        category = st.selectbox(
            "Category",
            options=categories,
            format_func=lambda c: c.name,
        )
        category_id = category.id
        is_ingredient = category.name == INGREDIENT_CATEGORY_NAME
    else:
        category_id = st.text_input("Category ID")
        is_ingredient = False

    with st.form("add_expense", clear_on_submit=True):
        expense_date = st.date_input("Date", value=date.today())
        col1, col2, col3 = st.columns(3)
        with col1:
            quantity = st.number_input("Quantity", min_value=0.0, step=1.0)
        with col2:
            if is_ingredient:
                unit = st.selectbox("Unit", options=INGREDIENT_UNITS)
            else:
                unit = st.text_input("Unit")
        with col3:
            amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")

        supplier = st.selectbox(
            "Supplier (optional)",
            options=[None] + suppliers,
            format_func=lambda s: "None" if s is None else s.name,
        )
        note = st.text_area("Note (optional)")

        submitted = st.form_submit_button("➕ Add expense", type="primary")

    if not submitted:
        return

    try:
        draft = ExpenseDraft(
            date=expense_date,
            category_id=category_id,
            description=description,
            quantity=Decimal(str(quantity)),
            unit=unit,
            amount=Decimal(str(amount)).quantize(Decimal("0.01")),
            supplier_id=supplier.id if supplier else None,
            note=note,
        )
    except ValueError as e:
        st.error(f"Please check the values: {e}")
        return

    try:
        expense = run_async(expense_flow.add_expense(draft, correlation_id=create_correlation_id()))
    except DuplicateExpenseError:
        st.warning("This expense already exists. Nothing was added.")
        return

    message = f"Added {expense.description} for {money(expense.amount)}"
    if expense.cost_per_100g is not None:
        message += f" ({money(expense.cost_per_100g)} per 100 g)"
    st.success(message)


def render_settings_status():
    """Connection status, collapsed at the bottom of the page."""
    with st.expander("⚙️ Settings"):
        status = validate_all_settings()
        groups = [
            ("Google Sheets (Storage)", "google_sheets"),
            ("Background animation", "animation"),
            ("Application", "app"),
        ]
        for name, key in groups:
            if status.get(key, False):
                st.success(f"✅ {name} - OK")
            else:
                error = status.get(f"{key}_error", "Not configured")
                st.error(f"❌ {name} - {error}")

        st.markdown(
            "To configure the application, create a `.env` file. "
            "See `.env.example` for the available variables."
        )


if __name__ == "__main__":
    main()

"""Finwise Streamlit app: financial analysis and grocery planner.

Run with ``streamlit run finwise/Home.py`` or ``python run_finwise.py``.
This module only lays out widgets; all computation goes through
:mod:`finwise.analysis` and :mod:`finwise.grocery`.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st

# Add project root to path for imports
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from finwise import config
from finwise.advice import RiskLevel
from finwise.analysis import (
    AnalysisOutcome,
    AnalysisResult,
    AnalysisRunner,
    FinancialInput,
    savings_health,
    validate,
)
from finwise.formatting import (
    escape_dollar_for_markdown,
    format_currency,
    format_percentage,
    parse_amount,
    parse_price,
)
from finwise.grocery import GroceryPlanner
from finwise.storage import GroceryRepository, JsonFileStore
from finwise.visualization import (
    breakdown_frame,
    create_budget_breakdown_chart,
    create_category_spend_chart,
)

PLANNER_STATE_KEY = 'grocery_planner'
RUNNER_STATE_KEY = 'analysis_runner'
RESULT_STATE_KEY = 'analysis_result'
ERRORS_STATE_KEY = 'analysis_errors'
FIGURES_STATE_KEY = 'analysis_figures'


def main() -> None:
    st.set_page_config(page_title="Finwise", page_icon="💵", layout="wide")
    config.configure_logging()
    config.ensure_data_directories()

    st.title("💵 Finwise")
    st.caption("Smart money decisions: budget smarter, save more, and invest wisely.")

    analysis_tab, grocery_tab = st.tabs(["📊 Financial Analysis", "🛒 Grocery Planner"])
    with analysis_tab:
        _render_analysis_tab()
    with grocery_tab:
        _render_grocery_tab()


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------


def _get_planner() -> GroceryPlanner:
    """Return the session's planner, hydrating it from storage on first use."""
    planner = st.session_state.get(PLANNER_STATE_KEY)
    if planner is None:
        planner = GroceryPlanner(GroceryRepository(JsonFileStore()))
        st.session_state[PLANNER_STATE_KEY] = planner
    return planner


def _get_runner() -> AnalysisRunner:
    runner = st.session_state.get(RUNNER_STATE_KEY)
    if runner is None:
        runner = AnalysisRunner()
        st.session_state[RUNNER_STATE_KEY] = runner
    return runner


def _build_input() -> FinancialInput:
    return FinancialInput(
        income=parse_amount(st.session_state.get('income_text')),
        expenses=parse_amount(st.session_state.get('expenses_text')),
        risk_level=st.session_state.get('risk_level', RiskLevel.MEDIUM),
    )


def _run_analysis(financial_input: FinancialInput) -> Optional[AnalysisOutcome]:
    """Run one analysis through the session's runner.

    A rerun triggered by another click interrupts this call, and the
    interrupted run never stores its outcome on the runner.
    """
    runner = _get_runner()

    async def _submit() -> Optional[AnalysisOutcome]:
        runner.submit(financial_input)
        return await runner.wait()

    return asyncio.run(_submit())


def _submit_analysis() -> None:
    financial_input = _build_input()
    errors = validate(financial_input)
    st.session_state[ERRORS_STATE_KEY] = errors
    if errors:
        return
    with st.spinner("Analyzing..."):
        outcome = _run_analysis(financial_input)
    if outcome is None:
        return
    if not outcome.ok:
        st.session_state[ERRORS_STATE_KEY] = outcome.errors
        return
    st.session_state[RESULT_STATE_KEY] = outcome.result
    st.session_state[FIGURES_STATE_KEY] = (financial_input.income, financial_input.expenses)


def _clear_error(field: str) -> None:
    errors = st.session_state.get(ERRORS_STATE_KEY) or {}
    errors.pop(field, None)


def _reset_analysis() -> None:
    for key in (RESULT_STATE_KEY, ERRORS_STATE_KEY, FIGURES_STATE_KEY):
        st.session_state.pop(key, None)
    st.session_state['income_text'] = ""
    st.session_state['expenses_text'] = ""
    st.session_state.pop('risk_level', None)
    runner = st.session_state.get(RUNNER_STATE_KEY)
    if runner is not None:
        runner.reset()


def _add_grocery_item() -> None:
    planner = _get_planner()
    name = st.session_state.get('grocery_new_item', "")
    price = parse_price(st.session_state.get('grocery_new_price'))
    if planner.add_item(name, price) is not None:
        st.session_state['grocery_new_item'] = planner.pending_name
        st.session_state['grocery_new_price'] = planner.pending_price


def _pick_suggestion(name: str) -> None:
    """Fill the item field with a suggestion; the Add button commits it."""
    st.session_state['grocery_new_item'] = name


def _breakdown_table(result: AnalysisResult, income: float) -> pd.DataFrame:
    frame = breakdown_frame(result.budget_breakdown, income).drop(columns=["Color"])
    frame["Percentage"] = frame["Percentage"].map(format_percentage)
    frame["Amount"] = frame["Amount"].map(format_currency)
    return frame


def _grocery_table(planner: GroceryPlanner) -> pd.DataFrame:
    frame = planner.to_frame()[["name", "category", "price", "completed"]]
    frame = frame.rename(columns=str.title)
    frame["Price"] = frame["Price"].map(lambda price: format_currency(price, decimals=2))
    return frame


# ---------------------------------------------------------------------------
# Financial analysis
# ---------------------------------------------------------------------------


def _render_analysis_tab() -> None:
    result = st.session_state.get(RESULT_STATE_KEY)
    if result is not None:
        income, expenses = st.session_state.get(FIGURES_STATE_KEY, (0.0, 0.0))
        _render_results(result, income, expenses)
        return

    st.subheader("Financial Analysis")
    st.caption("Get personalized insights for your finances")
    errors = st.session_state.get(ERRORS_STATE_KEY) or {}

    st.text_input(
        "Monthly Income ($)",
        key='income_text',
        placeholder="5000",
        help="Enter your total monthly income before taxes",
        on_change=_clear_error,
        args=('income',),
    )
    if 'income' in errors:
        st.error(errors['income'])

    st.text_input(
        "Monthly Expenses ($)",
        key='expenses_text',
        placeholder="3500",
        help="Include rent, utilities, food, transportation, and other expenses",
        on_change=_clear_error,
        args=('expenses',),
    )
    if 'expenses' in errors:
        st.error(errors['expenses'])

    st.selectbox(
        "Risk Tolerance",
        options=list(RiskLevel),
        index=list(RiskLevel).index(RiskLevel.MEDIUM),
        format_func=lambda level: level.label,
        key='risk_level',
    )

    if st.button("Analyze My Finances", type="primary", use_container_width=True):
        _submit_analysis()
        st.rerun()


def _render_results(result: AnalysisResult, income: float, expenses: float) -> None:
    st.subheader("🎯 Savings Report")
    health = savings_health(result.savings_percentage)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Monthly Income", format_currency(income))
    col2.metric("Monthly Expenses", format_currency(expenses))
    col3.metric("Savings Amount", format_currency(result.savings))
    col4.metric(
        "Savings Rate",
        format_percentage(result.savings_percentage),
        delta="On track" if health.on_track else "Below 20% target",
        delta_color="normal" if health.on_track else "inverse",
    )

    st.subheader("🥧 Budget Breakdown")
    chart_col, table_col = st.columns([3, 2])
    with chart_col:
        st.plotly_chart(create_budget_breakdown_chart(result.budget_breakdown), use_container_width=True)
    with table_col:
        st.dataframe(_breakdown_table(result, income), hide_index=True, use_container_width=True)

    st.subheader("📈 Investment Advice")
    for advice in result.investment_advice:
        with st.container(border=True):
            st.markdown(f"**{advice.type}** · `{advice.risk_tag} Risk`")
            st.caption(advice.description)

    st.subheader("💡 Pro Tip")
    st.info(result.pro_tip)

    st.button("Start Over", on_click=_reset_analysis)


# ---------------------------------------------------------------------------
# Grocery planner
# ---------------------------------------------------------------------------


def _render_grocery_tab() -> None:
    planner = _get_planner()
    header, total = st.columns([3, 1])
    header.subheader("🛒 Grocery Planner")
    header.caption("Plan your grocery shopping and track your budget")
    total.metric("Total Budget", format_currency(planner.total_budget()))

    name_col, price_col, add_col = st.columns([3, 1, 1])
    name_col.text_input("Item", key='grocery_new_item', placeholder="Add grocery item...")
    price_col.text_input("Price ($)", key='grocery_new_price', placeholder="0")
    add_col.button("➕ Add", on_click=_add_grocery_item, use_container_width=True)

    query = st.session_state.get('grocery_new_item', "")
    if query:
        for suggestion in planner.visible_suggestions(query):
            st.button(
                f"{suggestion.name} ({suggestion.category})",
                key=f"suggest_{suggestion.name}",
                on_click=_pick_suggestion,
                args=(suggestion.name,),
            )

    grouped = planner.group_by_category()
    if not grouped:
        st.caption("No items yet. Start building your grocery list!")
        return

    totals = planner.category_totals()
    for category, items in grouped.items():
        st.markdown(f"#### {category} · {escape_dollar_for_markdown(format_currency(totals[category]))}")
        for item in items:
            check_col, price_col, delete_col = st.columns([4, 1, 1])
            label = f"~~{item.name}~~" if item.completed else item.name
            check_col.checkbox(
                label,
                value=item.completed,
                key=f"done_{item.id}",
                on_change=planner.toggle_item,
                args=(item.id,),
            )
            price_col.write(format_currency(item.price))
            delete_col.button("🗑️", key=f"delete_{item.id}", on_click=planner.delete_item, args=(item.id,))

    summary = planner.summary()
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Items", summary.item_count)
    col2.metric("Completed", summary.completed_count)
    col3.metric("Total Budget", format_currency(summary.total_budget))
    st.plotly_chart(create_category_spend_chart(totals), use_container_width=True)
    with st.expander("📋 Full list"):
        st.dataframe(_grocery_table(planner), hide_index=True, use_container_width=True)


if __name__ == "__main__":
    main()

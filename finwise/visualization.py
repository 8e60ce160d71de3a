"""Plotly visualisation helpers for Finwise.

Each function accepts objects produced by :mod:`finwise.analysis` or
:mod:`finwise.grocery` and returns a ``plotly.graph_objects.Figure`` that
Streamlit can render via ``st.plotly_chart``.  The ``*_frame`` helpers
build the tabular form the charts are drawn from, which the app also
shows directly.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .advice import BudgetAllocation


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def breakdown_frame(allocations: Sequence[BudgetAllocation], income: Optional[float] = None) -> pd.DataFrame:
    """Tabulate budget allocations, with dollar amounts when income is given."""
    rows = []
    for allocation in allocations:
        row = {
            "Category": allocation.label,
            "Percentage": allocation.percentage,
            "Color": allocation.color,
        }
        if income is not None:
            row["Amount"] = allocation.amount_for(income)
        rows.append(row)
    return pd.DataFrame(rows)


def create_budget_breakdown_chart(
    allocations: Sequence[BudgetAllocation],
    title: str | None = None,
) -> go.Figure:
    """Donut chart of the recommended budget split.

    Parameters
    ----------
    allocations : sequence of BudgetAllocation
        Slices to draw, in display order.  Each slice keeps its own colour.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart with a hole in the middle.
    """
    if not allocations:
        return _empty_figure()
    df = breakdown_frame(allocations)
    fig = go.Figure(
        go.Pie(
            labels=df["Category"],
            values=df["Percentage"],
            marker=dict(colors=df["Color"].tolist()),
            hole=0.5,
            sort=False,
            textinfo="label+percent",
        )
    )
    fig.update_layout(title=title or "Budget breakdown")
    return fig


def create_category_spend_chart(totals: Dict[str, float], title: str | None = None) -> go.Figure:
    """Bar chart of planned grocery spend per category."""
    if not totals:
        return _empty_figure()
    df = pd.Series(totals, name="Budget").rename_axis("Category").reset_index()
    fig = px.bar(df, x="Category", y="Budget")
    fig.update_layout(
        title=title or "Grocery budget by category",
        xaxis_title="Category",
        yaxis_title="Budget ($)",
    )
    return fig

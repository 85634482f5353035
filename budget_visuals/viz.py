"""Plotly renderings for the three chart modes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import plotly.graph_objects as go

from . import utils
from .aggregations import ChartMode

EMPTY_MESSAGE = "Belum ada data pengeluaran."

ALLOCATED_COLOR = "#E0E0E0"
USED_COLOR = "#1ABC9C"
TREND_COLOR = "#3498DB"


def _empty_figure(message: str = EMPTY_MESSAGE) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        showarrow=False,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        font=dict(size=14, color="#9CA3AF"),
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=20))
    return fig


def _short_ticks(fig: go.Figure) -> None:
    # SI-prefixed ticks, e.g. 250k.
    fig.update_yaxes(tickformat="~s")


def plot_distribution_treemap(points: Iterable[Mapping[str, object]]) -> go.Figure:
    """Treemap of spend per budget, each tile carrying its palette colour."""

    df = utils.ensure_dataframe(points)
    if df.empty:
        return _empty_figure()

    fig = go.Figure(
        go.Treemap(
            # Budget names may repeat, so tiles are keyed by row.
            ids=[str(index) for index in range(len(df))],
            labels=df["name"],
            parents=[""] * len(df),
            values=df["size"],
            marker=dict(colors=df["fill"], line=dict(color="#fff", width=2)),
            text=[utils.format_short_currency(value) for value in df["size"]],
            customdata=[utils.format_currency(value) for value in df["size"]],
            texttemplate="<b>%{label}</b><br>%{text}",
            hovertemplate="%{label}<br>%{customdata}<extra></extra>",
            textfont=dict(color="#fff"),
            sort=False,
        )
    )
    fig.update_layout(margin=dict(l=0, r=0, t=10, b=0))
    return fig


def plot_budget_comparison(points: Iterable[Mapping[str, object]]) -> go.Figure:
    df = utils.ensure_dataframe(points)
    if df.empty:
        return _empty_figure()

    fig = go.Figure()
    fig.add_bar(
        name="Anggaran",
        x=df["name"],
        y=df["allocated"],
        marker_color=ALLOCATED_COLOR,
        customdata=[utils.format_currency(value) for value in df["allocated"]],
        hovertemplate="%{x}<br>%{customdata}<extra>Anggaran</extra>",
    )
    fig.add_bar(
        name="Terpakai",
        x=df["name"],
        y=df["used"],
        marker_color=USED_COLOR,
        customdata=[utils.format_currency(value) for value in df["used"]],
        hovertemplate="%{x}<br>%{customdata}<extra>Terpakai</extra>",
    )
    fig.update_layout(
        barmode="group",
        margin=dict(l=0, r=0, t=20, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    _short_ticks(fig)
    return fig


def plot_daily_trend(points: Iterable[Mapping[str, object]]) -> go.Figure:
    df = utils.ensure_dataframe(points)
    if df.empty:
        return _empty_figure()

    fig = go.Figure(
        go.Scatter(
            name="Pengeluaran",
            x=df["label"],
            y=df["value"],
            mode="lines",
            line=dict(color=TREND_COLOR, shape="spline", width=2),
            fill="tozeroy",
            fillcolor="rgba(52, 152, 219, 0.35)",
            customdata=[utils.format_currency(value) for value in df["value"]],
            hovertemplate="%{x}<br>%{customdata}<extra></extra>",
        )
    )
    # Categorical axis keeps the series order instead of parsing the labels as dates.
    fig.update_xaxes(type="category")
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=0))
    _short_ticks(fig)
    return fig


def render_chart(mode: ChartMode | str, points: Iterable[Mapping[str, object]]) -> go.Figure:
    """Draw ``points`` with the figure matching ``mode``."""

    chart_mode = ChartMode.parse(mode)
    if chart_mode is ChartMode.DISTRIBUTION:
        return plot_distribution_treemap(points)
    if chart_mode is ChartMode.COMPARISON:
        return plot_budget_comparison(points)
    return plot_daily_trend(points)

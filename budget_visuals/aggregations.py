"""Chart-ready aggregations over the budgeting application state.

Each aggregator is a pure function of the :class:`~budget_visuals.models.AppState`
and returns an ordered list of points. Callers recompute whenever the state or
the archive filter changes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, TypedDict, Union

import pandas as pd

from . import utils
from .models import AppState

PALETTE = (
    "#2C3E50",
    "#1ABC9C",
    "#F1C40F",
    "#E74C3C",
    "#3498DB",
    "#9B59B6",
    "#E67E22",
    "#7F8C8D",
    "#16A085",
    "#2980B9",
)


class ChartMode(str, Enum):
    DISTRIBUTION = "treemap"
    COMPARISON = "bar"
    TREND = "area"

    @classmethod
    def parse(cls, value: "ChartMode | str") -> "ChartMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            try:
                return cls[str(value).upper()]
            except KeyError:
                raise ValueError(f"unknown chart mode: {value!r}") from None


class DistributionPoint(TypedDict):
    name: str
    size: float
    fill: str


class ComparisonPoint(TypedDict):
    name: str
    used: float
    allocated: float


class TrendPoint(TypedDict):
    label: str
    value: float


ChartSeries = Union[list[DistributionPoint], list[ComparisonPoint], list[TrendPoint]]


class ChartPayload(TypedDict):
    treemap: list[DistributionPoint]
    bar: list[ComparisonPoint]
    area: list[TrendPoint]


def _budget_frame(state: AppState, *, include_archived: bool = False) -> pd.DataFrame:
    """One row per budget with its original position and summed history."""

    rows = [
        {
            "position": position,
            "name": budget.name,
            "allocated": float(budget.total_budget),
            "used": budget.used,
            "is_archived": bool(budget.is_archived),
        }
        for position, budget in enumerate(state.budgets)
    ]
    frame = pd.DataFrame(
        rows,
        columns=["position", "name", "allocated", "used", "is_archived"],
    )
    if include_archived or frame.empty:
        return frame
    return frame.loc[~frame["is_archived"]]


def distribution_data(
    state: AppState | Mapping[str, Any],
    *,
    include_archived: bool = False,
) -> list[DistributionPoint]:
    """Total spend per active budget, heaviest first, for the treemap view.

    Colours come from the budget's position in the unfiltered list, so hiding
    an earlier budget does not recolour the ones after it.
    """

    frame = _budget_frame(utils.ensure_state(state), include_archived=include_archived)
    if frame.empty:
        return []

    frame = frame.loc[frame["used"] > 0]
    points: list[DistributionPoint] = [
        {
            "name": str(row.name),
            "size": float(row.used),
            "fill": PALETTE[int(row.position) % len(PALETTE)],
        }
        for row in frame.itertuples(index=False)
    ]
    # list.sort is stable, so equal sizes keep budget order.
    points.sort(key=lambda item: item["size"], reverse=True)
    return points


def comparison_data(
    state: AppState | Mapping[str, Any],
    *,
    include_archived: bool = False,
) -> list[ComparisonPoint]:
    """Allocated vs used per active budget, in budget order."""

    frame = _budget_frame(utils.ensure_state(state), include_archived=include_archived)
    if frame.empty:
        return []

    frame = frame.loc[frame["allocated"] > 0]
    return [
        {
            "name": str(row.name),
            "used": float(row.used),
            "allocated": float(row.allocated),
        }
        for row in frame.itertuples(index=False)
    ]


def _trend_frame(state: AppState, tz: str | None) -> pd.DataFrame:
    # Standalone expenses first, then every budget's history in order.
    records = [
        {"label": utils.day_key(entry.timestamp, tz), "amount": float(entry.amount)}
        for entry in state.daily_expenses
    ]
    for budget in state.budgets:
        records.extend(
            {"label": utils.day_key(entry.timestamp, tz), "amount": float(entry.amount)}
            for entry in budget.history
        )
    return pd.DataFrame(records, columns=["label", "amount"])


def daily_trend_data(
    state: AppState | Mapping[str, Any],
    *,
    tz: str | None = utils.DEFAULT_TIMEZONE,
) -> list[TrendPoint]:
    """Spend per calendar day across daily expenses and all budget histories.

    Days are keyed by day and month only, so the same date in different years
    shares a bucket. Points come out in the order each day was first seen while
    walking the records, not in calendar order.
    """

    frame = _trend_frame(utils.ensure_state(state), tz)
    if frame.empty:
        return []

    totals = frame.groupby("label", sort=False)["amount"].sum()
    return [{"label": str(label), "value": float(value)} for label, value in totals.items()]


def aggregate(
    state: AppState | Mapping[str, Any],
    mode: ChartMode | str,
    *,
    include_archived: bool = False,
    tz: str | None = utils.DEFAULT_TIMEZONE,
) -> ChartSeries:
    """Return the series backing ``mode``."""

    chart_mode = ChartMode.parse(mode)
    if chart_mode is ChartMode.DISTRIBUTION:
        return distribution_data(state, include_archived=include_archived)
    if chart_mode is ChartMode.COMPARISON:
        return comparison_data(state, include_archived=include_archived)
    return daily_trend_data(state, tz=tz)


def build_chart_payload(
    state: AppState | Mapping[str, Any],
    *,
    include_archived: bool = False,
    tz: str | None = utils.DEFAULT_TIMEZONE,
) -> ChartPayload:
    """Compute all three series at once, keyed by mode value."""

    app_state = utils.ensure_state(state)
    return {
        ChartMode.DISTRIBUTION.value: distribution_data(app_state, include_archived=include_archived),
        ChartMode.COMPARISON.value: comparison_data(app_state, include_archived=include_archived),
        ChartMode.TREND.value: daily_trend_data(app_state, tz=tz),
    }  # type: ignore[return-value]

"""Shared utilities for the budget visualisations package."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import pandas as pd

from .models import DEFAULT_TIMEZONE, AppState, to_timestamp

# Short month names for the id-ID locale, as rendered by the budgeting app.
ID_MONTHS_SHORT = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "Mei",
    "Jun",
    "Jul",
    "Agu",
    "Sep",
    "Okt",
    "Nov",
    "Des",
)


def ensure_state(state: AppState | Mapping[str, Any]) -> AppState:
    """Ensure the input payload is normalised to an :class:`AppState`."""

    if isinstance(state, AppState):
        return state

    return AppState.from_dict(state)


def ensure_dataframe(records: Iterable[Mapping] | pd.DataFrame) -> pd.DataFrame:
    """Ensure a series payload is normalised to a :class:`pandas.DataFrame`."""

    if isinstance(records, pd.DataFrame):
        return records.copy()

    return pd.DataFrame(list(records))


def day_key(value: Any, tz: str | None = DEFAULT_TIMEZONE) -> str:
    """Return the year-agnostic day label, e.g. ``"5 Agu"``."""

    ts = to_timestamp(value, tz)
    return f"{ts.day} {ID_MONTHS_SHORT[ts.month - 1]}"


def format_currency(value: float, currency: str = "Rp") -> str:
    """Return a human-readable rupiah string without decimals."""

    amount = round(float(value))
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,}".replace(",", ".")
    return f"{sign}{currency} {grouped}"


def format_short_currency(value: float) -> str:
    """Compact axis/label form: millions as ``Jt``, thousands as ``rb``."""

    amount = float(value)
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.1f} Jt"
    if amount >= 1_000:
        return f"{amount / 1_000:.0f} rb"
    return f"{amount:g}"

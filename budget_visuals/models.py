"""Application state shapes consumed by the chart aggregators."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import pandas as pd

DEFAULT_TIMEZONE = "Asia/Jakarta"


def to_timestamp(value: Any, tz: str | None = DEFAULT_TIMEZONE) -> pd.Timestamp:
    """Normalise an epoch-millisecond, ISO string or datetime into a wall-clock timestamp.

    Numeric values are epoch milliseconds in UTC. Timezone-aware values are
    converted to ``tz`` and returned naive so the calendar day matches what the
    user saw. Naive values are taken as already local.
    """

    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp: {value!r}")

    try:
        if isinstance(value, numbers.Real):
            ts = pd.Timestamp(value, unit="ms", tz="UTC")
        else:
            ts = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid timestamp: {value!r}") from exc

    if ts is pd.NaT:
        raise ValueError(f"invalid timestamp: {value!r}")

    if ts.tzinfo is not None:
        if tz:
            ts = ts.tz_convert(tz)
        ts = ts.tz_localize(None)
    return ts


def _pick(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return default


@dataclass(frozen=True)
class Transaction:
    """A dated spend record, either inside a budget's history or standalone."""

    amount: float
    timestamp: Any

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        if "amount" not in payload:
            raise ValueError("transaction is missing 'amount'")
        if "timestamp" not in payload:
            raise ValueError("transaction is missing 'timestamp'")
        try:
            amount = float(payload["amount"])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"transaction amount is not numeric: {payload['amount']!r}") from exc
        # Parsed once here so a bad upload fails at load, not on the trend chart.
        to_timestamp(payload["timestamp"], tz=None)
        return cls(amount=amount, timestamp=payload["timestamp"])

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount, "timestamp": self.timestamp}


# Daily expenses share the transaction shape but belong to no budget.
GlobalTransaction = Transaction


@dataclass(frozen=True)
class Budget:
    name: str
    total_budget: float
    is_archived: bool = False
    history: tuple[Transaction, ...] = ()

    @property
    def used(self) -> float:
        return float(sum(entry.amount for entry in self.history))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Budget":
        name = payload.get("name")
        if name is None:
            raise ValueError("budget is missing 'name'")
        total = _pick(payload, "totalBudget", "total_budget", default=0)
        try:
            total_budget = float(total)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"budget {name!r} has a non-numeric total: {total!r}") from exc
        history = tuple(Transaction.from_dict(item) for item in payload.get("history") or ())
        return cls(
            name=str(name),
            total_budget=total_budget,
            is_archived=bool(_pick(payload, "isArchived", "is_archived", default=False)),
            history=history,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "totalBudget": self.total_budget,
            "isArchived": self.is_archived,
            "history": [entry.to_dict() for entry in self.history],
        }


@dataclass(frozen=True)
class AppState:
    """Single source of truth handed to every aggregator. Never mutated here."""

    budgets: tuple[Budget, ...] = field(default_factory=tuple)
    daily_expenses: tuple[Transaction, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        budgets: Sequence[Budget] = (),
        daily_expenses: Sequence[Transaction] = (),
    ) -> "AppState":
        return cls(budgets=tuple(budgets), daily_expenses=tuple(daily_expenses))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AppState":
        if not isinstance(payload, Mapping):
            raise ValueError("application state must be a JSON object")
        budgets = tuple(Budget.from_dict(item) for item in payload.get("budgets") or ())
        expenses = _pick(payload, "dailyExpenses", "daily_expenses", default=()) or ()
        return cls(
            budgets=budgets,
            daily_expenses=tuple(Transaction.from_dict(item) for item in expenses),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "budgets": [budget.to_dict() for budget in self.budgets],
            "dailyExpenses": [entry.to_dict() for entry in self.daily_expenses],
        }


__all__ = ["DEFAULT_TIMEZONE", "AppState", "Budget", "GlobalTransaction", "Transaction", "to_timestamp"]

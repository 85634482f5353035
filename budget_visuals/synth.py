"""Deterministic sample budgeting state for demos and tests.

The generator produces a month of rupiah spending spread over a handful of
envelope budgets plus uncategorised daily expenses, with one archived budget
and one budget without an allocation to exercise the chart filters.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path

import numpy as np

from .models import AppState, Budget, Transaction

DEFAULT_SEED = 7
DEFAULT_START = date(2024, 8, 1)
DEFAULT_DAYS = 30

WIB = timezone(timedelta(hours=7))


@dataclass(frozen=True)
class BudgetProfile:
    """Static metadata for a sample budget."""

    name: str
    total_budget: float
    amount_range: tuple[float, float]
    weekly_rate: float
    is_archived: bool = False


PROFILES = (
    BudgetProfile("Makan & Minum", 2_500_000, (15_000, 85_000), 9.0),
    BudgetProfile("Transportasi", 800_000, (10_000, 60_000), 6.0),
    BudgetProfile("Belanja Bulanan", 1_500_000, (120_000, 450_000), 1.0),
    BudgetProfile("Tagihan", 1_200_000, (150_000, 400_000), 0.7),
    BudgetProfile("Hiburan", 500_000, (35_000, 150_000), 1.2),
    BudgetProfile("Kesehatan", 400_000, (25_000, 200_000), 0.4),
    BudgetProfile("Hadiah", 0, (50_000, 250_000), 0.3),
    BudgetProfile("Liburan Lebaran", 3_000_000, (250_000, 900_000), 0.5, is_archived=True),
)

DAILY_EXPENSE_RANGE = (5_000, 40_000)
DAILY_EXPENSE_RATE = 0.8


def _epoch_ms(day: date, rng: np.random.Generator) -> int:
    minutes = int(rng.integers(7 * 60, 22 * 60))
    moment = datetime.combine(day, time(minutes // 60, minutes % 60), tzinfo=WIB)
    return int(moment.timestamp() * 1000)


def _round_rupiah(value: float) -> float:
    # Prices end in whole hundreds.
    return float(round(value / 100) * 100)


def _draw(
    amount_range: tuple[float, float],
    rate_per_day: float,
    *,
    start: date,
    days: int,
    rng: np.random.Generator,
) -> list[Transaction]:
    entries: list[Transaction] = []
    low, high = amount_range
    for offset in range(days):
        current_day = start + timedelta(days=offset)
        lam = rate_per_day * (1.4 if current_day.weekday() >= 5 else 1.0)
        for _ in range(int(rng.poisson(lam))):
            entries.append(
                Transaction(
                    amount=_round_rupiah(rng.uniform(low, high)),
                    timestamp=_epoch_ms(current_day, rng),
                )
            )
    entries.sort(key=lambda entry: entry.timestamp)
    return entries


def generate_sample_state(
    *,
    seed: int | None = DEFAULT_SEED,
    start: date = DEFAULT_START,
    days: int = DEFAULT_DAYS,
) -> AppState:
    """Return a reproducible :class:`AppState` covering ``days`` days from ``start``."""

    if days <= 0:
        raise ValueError("days must be positive")

    rng = np.random.default_rng(seed)
    budgets = [
        Budget(
            name=profile.name,
            total_budget=float(profile.total_budget),
            is_archived=profile.is_archived,
            history=tuple(
                _draw(profile.amount_range, profile.weekly_rate / 7.0, start=start, days=days, rng=rng)
            ),
        )
        for profile in PROFILES
    ]
    daily = _draw(DAILY_EXPENSE_RANGE, DAILY_EXPENSE_RATE, start=start, days=days, rng=rng)
    return AppState.build(budgets=budgets, daily_expenses=daily)


def load_state(path: str | Path) -> AppState:
    """Read an application state export (camelCase JSON)."""

    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return AppState.from_dict(payload)


def write_sample_state(
    output_path: str | Path = Path("data") / "sample_state.json",
    *,
    seed: int | None = DEFAULT_SEED,
) -> Path:
    """Persist a generated sample state as JSON."""

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    state = generate_sample_state(seed=seed)
    path.write_text(json.dumps(state.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def main() -> None:  # pragma: no cover - convenience CLI
    path = write_sample_state()
    print(f"Wrote {path}")


if __name__ == "__main__":  # pragma: no cover - module CLI
    main()

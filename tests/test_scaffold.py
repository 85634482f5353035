"""Regression tests for the sample data, formatting, settings and chart rendering."""

from __future__ import annotations

from datetime import datetime

import plotly.graph_objects as go
import pytest
from budget_visuals import aggregations, config, synth, utils, viz
from budget_visuals.aggregations import ChartMode
from budget_visuals.models import AppState, Budget, Transaction


def test_generate_sample_state_is_deterministic() -> None:
    first = synth.generate_sample_state(seed=123)
    second = synth.generate_sample_state(seed=123)

    assert first == second
    assert len(first.budgets) == len(synth.PROFILES)
    assert first.daily_expenses, "Sample should include standalone daily expenses"
    assert any(budget.is_archived for budget in first.budgets)
    assert any(budget.total_budget == 0 for budget in first.budgets)
    assert all(entry.amount > 0 for budget in first.budgets for entry in budget.history)


def test_sample_state_feeds_all_three_series() -> None:
    payload = aggregations.build_chart_payload(synth.generate_sample_state(seed=4))

    assert payload["treemap"] and payload["bar"] and payload["area"]
    names = {point["name"] for point in payload["bar"]}
    assert "Hadiah" not in names
    assert "Liburan Lebaran" not in names


def test_write_and_load_sample_state(tmp_path) -> None:
    path = synth.write_sample_state(tmp_path / "state.json", seed=9)

    loaded = synth.load_state(path)
    assert loaded == synth.generate_sample_state(seed=9)


def test_load_state_rejects_non_object(tmp_path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        synth.load_state(path)


def test_models_reject_malformed_records() -> None:
    with pytest.raises(ValueError):
        Transaction.from_dict({"timestamp": 0})
    with pytest.raises(ValueError):
        Transaction.from_dict({"amount": "banyak", "timestamp": 0})
    with pytest.raises(ValueError):
        Budget.from_dict({"totalBudget": 10})


def test_state_with_unparseable_timestamp_fails_on_load(tmp_path) -> None:
    with pytest.raises(ValueError, match="kemarin"):
        AppState.from_dict({"dailyExpenses": [{"amount": 1000, "timestamp": "kemarin"}]})
    with pytest.raises(ValueError):
        Budget.from_dict({"name": "Makan", "totalBudget": 10, "history": [{"amount": 5, "timestamp": None}]})

    path = tmp_path / "upload.json"
    path.write_text(
        '{"budgets": [], "dailyExpenses": [{"amount": 1000, "timestamp": "kemarin"}]}',
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        synth.load_state(path)


def test_budget_from_dict_accepts_both_key_styles() -> None:
    camel = Budget.from_dict({"name": "Makan", "totalBudget": 10, "isArchived": True, "history": []})
    snake = Budget.from_dict({"name": "Makan", "total_budget": 10, "is_archived": True})
    assert camel == snake
    assert camel.used == 0


def test_day_key_and_invalid_timestamp() -> None:
    assert utils.day_key(datetime(2024, 5, 1, 23, 59)) == "1 Mei"
    assert utils.day_key("2024-10-17T08:00:00+00:00") == "17 Okt"
    with pytest.raises(ValueError):
        utils.day_key("bukan tanggal")
    with pytest.raises(ValueError):
        utils.day_key(None)


def test_currency_formatting() -> None:
    assert utils.format_currency(1_500_000) == "Rp 1.500.000"
    assert utils.format_currency(-2_500) == "-Rp 2.500"
    assert utils.format_short_currency(2_500_000) == "2.5 Jt"
    assert utils.format_short_currency(25_000) == "25 rb"
    assert utils.format_short_currency(500) == "500"


def test_load_settings_prefers_secrets_over_environment() -> None:
    settings = config.load_settings(
        secrets={"OPENAI_API_KEY": "sk-secret"},
        environ={"OPENAI_API_KEY": "sk-env", "LLM_MODEL": "gpt-4.1-mini", "INSIGHT_TIMEOUT_SECONDS": "12"},
    )

    assert settings.api_key == "sk-secret"
    assert settings.model == "gpt-4.1-mini"
    assert settings.insight_timeout == 12.0
    assert settings.timezone == utils.DEFAULT_TIMEZONE
    assert settings.has_api_key


def test_load_settings_without_key_or_secrets_file() -> None:
    class MissingSecrets:
        def get(self, key):
            raise FileNotFoundError("no secrets.toml")

    settings = config.load_settings(secrets=MissingSecrets(), environ={"INSIGHT_TIMEOUT_SECONDS": "0"})

    assert settings.api_key is None
    assert not settings.has_api_key
    assert settings.model == config.DEFAULT_MODEL
    assert settings.insight_timeout is None


def test_load_settings_rejects_bad_timeout() -> None:
    with pytest.raises(ValueError):
        config.load_settings(environ={"INSIGHT_TIMEOUT_SECONDS": "soon"})


def test_viz_render_chart_returns_figs_for_each_mode() -> None:
    state = synth.generate_sample_state(seed=6)

    for mode in ChartMode:
        figure = viz.render_chart(mode, aggregations.aggregate(state, mode))
        assert isinstance(figure, go.Figure)
        assert figure.data, "Chart should plot at least one trace"


def test_viz_treemap_uses_point_colours() -> None:
    state = AppState.build(
        budgets=[
            Budget(name="A", total_budget=0, history=(Transaction(amount=10.0, timestamp=0),)),
            Budget(name="B", total_budget=0, history=(Transaction(amount=30.0, timestamp=0),)),
        ]
    )
    points = aggregations.distribution_data(state)

    figure = viz.plot_distribution_treemap(points)
    assert list(figure.data[0].labels) == ["B", "A"]
    assert list(figure.data[0].marker.colors) == [aggregations.PALETTE[1], aggregations.PALETTE[0]]


def test_viz_treemap_keeps_budgets_with_duplicate_names_apart() -> None:
    state = AppState.build(
        budgets=[
            Budget(name="Makan", total_budget=0, is_archived=True, history=(Transaction(amount=40.0, timestamp=0),)),
            Budget(name="Makan", total_budget=0, history=(Transaction(amount=20.0, timestamp=0),)),
        ]
    )
    points = aggregations.distribution_data(state, include_archived=True)

    trace = viz.plot_distribution_treemap(points).data[0]
    assert list(trace.labels) == ["Makan", "Makan"]
    assert trace.ids is not None
    assert len(set(trace.ids)) == 2
    assert list(trace.values) == [40.0, 20.0]


def test_viz_comparison_has_allocated_and_used_bars() -> None:
    figure = viz.plot_budget_comparison([{"name": "Makan", "used": 200_000.0, "allocated": 500_000.0}])
    assert [trace.name for trace in figure.data] == ["Anggaran", "Terpakai"]


def test_viz_empty_series_shows_no_data_message() -> None:
    for mode in ChartMode:
        figure = viz.render_chart(mode, [])
        assert isinstance(figure, go.Figure)
        assert not figure.data
        assert figure.layout.annotations[0].text == viz.EMPTY_MESSAGE

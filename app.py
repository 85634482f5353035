"""Streamlit entry point for the budget visualisations view."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Callable

import streamlit as st
from budget_visuals import aggregations, config, insight, synth, viz
from budget_visuals.models import AppState

logger = logging.getLogger(__name__)

MODE_LABELS = {
    aggregations.ChartMode.DISTRIBUTION: "Distribusi",
    aggregations.ChartMode.COMPARISON: "Anggaran",
    aggregations.ChartMode.TREND: "Tren",
}


@st.cache_data(show_spinner=False)
def _load_sample_state(seed: int) -> dict:
    return synth.generate_sample_state(seed=seed).to_dict()


def _load_state(sidebar) -> AppState:
    sidebar.subheader("Data")
    upload = sidebar.file_uploader("Ekspor state (JSON)", type=["json"])
    if upload is not None:
        try:
            return AppState.from_dict(json.load(upload))
        except ValueError as exc:
            logger.warning("Rejected uploaded state: %s", exc)
            sidebar.error(f"File tidak valid: {exc}")
    seed = int(sidebar.number_input("Seed data contoh", min_value=0, value=synth.DEFAULT_SEED, step=1))
    return AppState.from_dict(_load_sample_state(seed))


def _pipeline(settings: config.Settings) -> insight.InsightPipeline:
    if "insight_pipeline" not in st.session_state:
        st.session_state["insight_pipeline"] = insight.InsightPipeline.from_settings(settings)
    return st.session_state["insight_pipeline"]


def _go_back() -> None:
    st.session_state["view"] = "home"


def _render_home() -> None:
    if st.button("Lihat visualisasi data"):
        st.session_state["view"] = "visualizations"
        st.rerun()


def render_visualizations(
    state: AppState,
    pipeline: insight.InsightPipeline,
    on_back: Callable[[], None],
) -> None:
    """Chart mode switch, active chart and the AI analysis panel."""

    header_left, header_right = st.columns([1, 11])
    header_left.button("↩", on_click=on_back, help="Kembali")
    header_right.title("Visualisasi Data")

    modes = list(MODE_LABELS)
    choice = st.radio(
        "Jenis grafik",
        modes,
        index=modes.index(pipeline.mode),
        format_func=MODE_LABELS.get,
        horizontal=True,
        label_visibility="collapsed",
    )
    if choice is not pipeline.mode:
        pipeline.select_mode(choice)

    include_archived = st.sidebar.checkbox("Sertakan anggaran arsip", value=False)
    pipeline.include_archived = include_archived

    series = pipeline.series(state)
    st.plotly_chart(
        viz.render_chart(pipeline.mode, series),
        use_container_width=True,
        config={"displayModeBar": False},
    )

    with st.container(border=True):
        title_col, button_col = st.columns([3, 1])
        title_col.markdown("#### ✨ Analisis AI")
        label = "Menganalisis..." if pipeline.state.is_requesting else "Analisis Grafik"
        if not pipeline.has_capability:
            label = f"{label} 🔒"
        clicked = button_col.button(label, disabled=not pipeline.can_request(), use_container_width=True)

        if clicked:
            with st.spinner("Menganalisis grafik…"):
                asyncio.run(pipeline.request_insight(state))

        result = pipeline.state
        if result.error:
            st.warning(result.error)
        elif result.text:
            st.markdown(result.text)
        elif pipeline.has_capability:
            st.caption("Klik tombol untuk meminta AI membaca grafik ini dan memberikan wawasan.")
        else:
            st.caption("Fitur ini memerlukan API Key.")


def main() -> None:
    """Render the budget visualisations Streamlit application."""

    st.set_page_config(page_title="Visualisasi Anggaran", page_icon="📊", layout="centered")
    logging.basicConfig(level=logging.INFO)

    settings = config.load_settings(st.secrets)
    state = _load_state(st.sidebar)
    pipeline = _pipeline(settings)

    if st.session_state.get("view", "visualizations") == "home":
        _render_home()
        return

    render_visualizations(state, pipeline, on_back=_go_back)


if __name__ == "__main__":
    main()

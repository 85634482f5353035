"""On-demand AI insight over the active chart.

The pipeline owns the chart mode and the insight state so that switching charts
always discards text produced for another chart. It allows one request per mode
selection at a time; results that arrive after the user moved to a different
chart are dropped.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

from openai import OpenAI

from . import aggregations, utils
from .aggregations import ChartMode, ChartSeries
from .config import Settings
from .models import AppState

logger = logging.getLogger(__name__)

Analyzer = Callable[[str], Awaitable[str]]

_PROMPT_TEMPLATES: dict[ChartMode, str] = {
    ChartMode.DISTRIBUTION: (
        "Analisis distribusi pengeluaran ini (Treemap Data): {data}. "
        "Apa kategori yang paling membebani?"
    ),
    ChartMode.COMPARISON: (
        "Analisis perbandingan anggaran vs realisasi ini (Bar Chart Data): {data}. "
        "Mana yang overbudget atau efisien?"
    ),
    ChartMode.TREND: (
        "Analisis tren pengeluaran harian ini (Area Chart Data): {data}. "
        "Apakah ada pola lonjakan?"
    ),
}


class InsightStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"


@dataclass(frozen=True)
class InsightState:
    status: InsightStatus = InsightStatus.IDLE
    text: str = ""
    error: str | None = None
    mode: ChartMode | None = None

    @property
    def is_requesting(self) -> bool:
        return self.status is InsightStatus.REQUESTING

    @classmethod
    def idle(cls, text: str = "", *, error: str | None = None, mode: ChartMode | None = None) -> "InsightState":
        return cls(status=InsightStatus.IDLE, text=text, error=error, mode=mode)

    @classmethod
    def requesting(cls, mode: ChartMode) -> "InsightState":
        return cls(status=InsightStatus.REQUESTING, mode=mode)


def serialize_series(series: ChartSeries) -> str:
    """Compact JSON of a chart series, as embedded in the prompt."""

    return json.dumps(list(series), ensure_ascii=False, separators=(",", ":"))


def build_prompt(mode: ChartMode | str, series: ChartSeries) -> str:
    """Embed the serialized series and the mode's question into one prompt."""

    chart_mode = ChartMode.parse(mode)
    return _PROMPT_TEMPLATES[chart_mode].format(data=serialize_series(series))


class InsightPipeline:
    """Chart mode selector plus the single-flight insight request lifecycle."""

    def __init__(
        self,
        analyzer: Analyzer | None,
        *,
        has_capability: bool,
        mode: ChartMode | str = ChartMode.DISTRIBUTION,
        timeout: float | None = None,
        include_archived: bool = False,
        tz: str | None = utils.DEFAULT_TIMEZONE,
    ) -> None:
        self.analyzer = analyzer
        self.has_capability = bool(has_capability and analyzer is not None)
        self.timeout = timeout
        self.include_archived = include_archived
        self.tz = tz
        self._mode = ChartMode.parse(mode)
        self._state = InsightState.idle()
        self._generation = 0

    @classmethod
    def from_settings(cls, settings: Settings, analyzer: Analyzer | None = None) -> "InsightPipeline":
        if analyzer is None and settings.has_api_key:
            analyzer = openai_analyzer(settings)
        return cls(
            analyzer,
            has_capability=settings.has_api_key,
            timeout=settings.insight_timeout,
            tz=settings.timezone,
        )

    @property
    def mode(self) -> ChartMode:
        return self._mode

    @property
    def state(self) -> InsightState:
        return self._state

    def select_mode(self, mode: ChartMode | str) -> ChartMode:
        """Switch the active chart. Always clears any insight on screen."""

        self._mode = ChartMode.parse(mode)
        self._generation += 1
        self._state = InsightState.idle()
        return self._mode

    def series(self, state: AppState | Mapping[str, Any]) -> ChartSeries:
        return aggregations.aggregate(
            state,
            self._mode,
            include_archived=self.include_archived,
            tz=self.tz,
        )

    def can_request(self) -> bool:
        return self.has_capability and not self._state.is_requesting

    async def request_insight(self, state: AppState | Mapping[str, Any]) -> InsightState:
        """Ask the analyzer about the active chart and return the resulting state."""

        if not self.has_capability:
            logger.debug("Insight request ignored: analysis capability unavailable")
            return self._state
        if self._state.is_requesting:
            logger.debug("Insight request ignored: a request for %s is in flight", self._mode.value)
            return self._state

        mode = self._mode
        generation = self._generation
        self._state = InsightState.requesting(mode)

        try:
            prompt = build_prompt(mode, self.series(state))
            logger.info("Requesting %s insight (%d chars)", mode.value, len(prompt))
            call = self.analyzer(prompt)  # type: ignore[misc]
            if self.timeout:
                text = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                text = await call
        except asyncio.CancelledError:
            if generation == self._generation:
                self._state = InsightState.idle(mode=mode)
            raise
        except Exception as exc:
            if generation != self._generation:
                logger.warning("Discarding failed %s insight: chart changed meanwhile", mode.value)
                return self._state
            reason = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
            logger.warning("Insight request for %s failed: %s", mode.value, reason)
            self._state = InsightState.idle(error=f"Analisis gagal ({reason}).", mode=mode)
            return self._state

        if generation != self._generation:
            logger.warning("Discarding stale %s insight: chart changed meanwhile", mode.value)
            return self._state

        self._state = InsightState.idle((text or "").strip(), mode=mode)
        logger.info("Received %s insight", mode.value)
        return self._state


def openai_analyzer(settings: Settings) -> Analyzer:
    """Build an analyzer that sends the prompt to the OpenAI chat completions API."""

    client = OpenAI(api_key=settings.api_key)

    def _call(prompt: str) -> str:
        resp = client.chat.completions.create(
            model=settings.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.2,
            max_tokens=320,
        )
        return (resp.choices[0].message.content or "").strip() if resp.choices else ""

    async def analyze(prompt: str) -> str:
        return await asyncio.to_thread(_call, prompt)

    return analyze

"""Runtime settings for the insight feature.

The OpenAI key is read from Streamlit secrets when the app passes them in, then
from the environment. The library itself never imports Streamlit.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from .utils import DEFAULT_TIMEZONE

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    insight_timeout: float | None = DEFAULT_TIMEOUT_SECONDS
    timezone: str | None = DEFAULT_TIMEZONE

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


def _secret(secrets: Mapping[str, Any] | None, key: str) -> Any:
    if secrets is None:
        return None
    try:
        return secrets.get(key)
    except Exception:
        # st.secrets raises when no secrets.toml exists at all.
        return None


def _timeout(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"INSIGHT_TIMEOUT_SECONDS must be a number, got {raw!r}") from exc
    return value if value > 0 else None


def load_settings(
    secrets: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from secrets first, then environment variables."""

    env = os.environ if environ is None else environ

    api_key = _secret(secrets, "OPENAI_API_KEY") or env.get("OPENAI_API_KEY")
    model = _secret(secrets, "LLM_MODEL") or env.get("LLM_MODEL") or DEFAULT_MODEL
    timezone = env.get("BUDGET_VISUALS_TIMEZONE", DEFAULT_TIMEZONE) or None

    return Settings(
        api_key=str(api_key).strip() if api_key else None,
        model=str(model),
        insight_timeout=_timeout(env.get("INSIGHT_TIMEOUT_SECONDS")),
        timezone=timezone,
    )

"""Centralised analysis settings loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """All tunables for the flow-insights analytics engine.

    Values are read from environment variables first, then from a *.env* file
    located at the project root.  Every variable lives in a flat namespace
    (``INTERVAL_MINUTES``, ``TRANSITION_DURATION_MS``, ...).

    Core functions never read these directly; they take explicit parameters
    and only the high-level entry points fall back to :func:`get_settings`.
    """

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ───────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ── Aggregation ───────────────────────────────────────────
    interval_minutes: int = Field(5, gt=0)

    # ── Statistics ────────────────────────────────────────────
    # Stability = max(0, 100 - deviation * k).  The two call sites are
    # calibrated differently and are kept apart on purpose.
    daily_stability_scale: float = 3.0  # 5-minute bucket averages within a day
    weekly_stability_scale: float = 10.0  # per-day averages across a week
    outlier_sigma: float = 2.0

    # ── Classification ────────────────────────────────────────
    indicator_threshold: float = 60.0

    # ── Transition animation ──────────────────────────────────
    transition_duration_ms: float = Field(500.0, ge=0.0)

    # ── Timeline grid ─────────────────────────────────────────
    timeline_window_multiplier: float = 1.5
    timeline_min_points: int = 3

    # ── Insights ──────────────────────────────────────────────
    similar_days_top_count: int = 3
    base_water_intake_litres: float = 2.0


@lru_cache
def get_settings() -> Settings:
    """Return a cached :class:`Settings` singleton."""
    return Settings()

"""Configuration settings for the category analytics engine with caching utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    """カテゴリ分析エンジンの設定"""

    model_config = SettingsConfigDict(
        env_file=[".env.test", ".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_dir: Path = Path("logs")
    log_file_name: str = "analytics.log"

    # Environment
    environment: str = "personal"

    # トレンド分析
    trend_emerging_threshold: float = 0.5  # 平均比 +50% で新興
    trend_declining_threshold: float = 0.5  # 平均比 -50% で減少
    trend_min_weeks: int = 2
    trend_max_weeks: int = 8
    trend_stability_epsilon: float = 0.01

    # 多様性
    diversity_trend_band: float = 0.1  # 前週比 ±10% 以内は横ばい
    diversity_dominance_threshold: float = 0.6  # 単一運動カテゴリの占有率
    diversity_max_missing_per_type: int = 3
    diversity_pattern_min_weeks: int = 3
    diversity_pattern_agreement: float = 0.7

    # 嗜好
    preference_stable_threshold: float = 0.7
    preference_cluster_size: int = Field(default=3, ge=1)

    # 予測・相関
    prediction_min_weeks: int = 3
    prediction_max_weeks: int = 12
    prediction_confidence_threshold: float = 0.6
    correlation_min_weeks: int = 3
    correlation_same_type_threshold: float = 0.6
    correlation_cross_type_threshold: float = 0.5
    effectiveness_same_type_threshold: float = 0.5
    effectiveness_cross_type_threshold: float = 0.4
    max_effective_combinations: int = 10
    max_synergy_recommendations: int = 8
    max_habit_stacks: int = 5
    seasonal_recency_half_life_weeks: float = Field(default=26.0, gt=0)

    # 実績
    well_rounded_min_categories: int = 5
    variety_master_min_categories: int = 4
    adventure_seeker_min_new: int = 3
    perfect_balance_tolerance: float = 0.2
    health_optimizer_min_total: int = 10

    # 目標
    consistency_min_presence: int = 3
    consistency_window_weeks: int = 4
    goal_default_duration_days: int = 7

    @property
    def log_file(self) -> Path:
        """ログファイルのパス"""
        return self.log_dir / self.log_file_name


_SETTINGS_LOCK = RLock()
_SETTINGS_CACHE: AnalyticsSettings | None = None


def get_settings(*, refresh: bool = False) -> AnalyticsSettings:
    """Return a cached ``AnalyticsSettings`` instance.

    Parameters
    ----------
    refresh:
        When ``True`` the cached instance is discarded and a new one is created.
    """

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        if refresh or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = AnalyticsSettings()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


@contextmanager
def override_settings(**overrides: Any) -> Iterator[AnalyticsSettings]:
    """Temporarily override the cached settings within a context."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        previous_settings = _SETTINGS_CACHE

    base_settings = previous_settings or AnalyticsSettings()
    patched_settings = base_settings.model_copy(update=overrides)

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = patched_settings

    try:
        yield patched_settings
    finally:
        with _SETTINGS_LOCK:
            _SETTINGS_CACHE = previous_settings

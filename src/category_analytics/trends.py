"""
カテゴリ トレンド・ライフサイクル アナライザー

週ごとの増減、トレンド速度、新興・減少カテゴリ、ライフサイクル段階の検出
"""

from collections.abc import Iterable

import numpy as np

from src.config import AnalyticsSettings, get_settings
from src.utils.error_handler import safe_with_default
from src.utils.mixins import LoggerMixin

from .exceptions import MissingReportError, require
from .models import (
    CategoryEmergenceAnalysis,
    CategoryLifecycle,
    CategoryTrendAnalysis,
    CategoryTrendMetrics,
    CategoryType,
    DecliningCategory,
    EmergingCategory,
    LifecycleStage,
    TrendDirection,
    WeeklyReport,
)
from .series import (
    CATEGORY_TYPES,
    category_names,
    category_series,
    clamp,
    mean,
    population_std,
    recent_history,
    weekly_totals,
)


def compare_direction(current: float, previous: float) -> TrendDirection:
    """厳密比較による方向（許容幅なし）"""
    if current > previous:
        return TrendDirection.UP
    if current < previous:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def change_percentage(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def trend_velocity(totals: list[int]) -> float:
    """(最新 - 最古) / 週の間隔数"""
    if len(totals) < 2:
        return 0.0
    return (totals[-1] - totals[0]) / (len(totals) - 1)


class CategoryTrendAnalyzer(LoggerMixin):
    """カテゴリの週次トレンド分析システム"""

    log_component = "trends"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.emerging_threshold = settings.trend_emerging_threshold
        self.declining_threshold = settings.trend_declining_threshold
        self.min_weeks = settings.trend_min_weeks
        self.max_weeks = settings.trend_max_weeks
        self.stability_epsilon = settings.trend_stability_epsilon

    @safe_with_default(
        "analyze category trends",
        CategoryTrendAnalysis,
        passthrough=(MissingReportError,),
    )
    def analyze_trends(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
        min_history: int = 1,
    ) -> CategoryTrendAnalysis:
        """現在の週と履歴からカテゴリトレンドを分析"""
        current = require(current, "current")
        history_reports = recent_history(history or [], self.max_weeks)

        if len(history_reports) < max(1, min_history):
            self.logger.warning(
                "Insufficient history for trend analysis",
                history_weeks=len(history_reports),
                required=max(1, min_history),
            )
            return CategoryTrendAnalysis(
                weeks_analyzed=len(history_reports),
                analyzed_at=current.generated_at,
            )

        trends: dict[CategoryType, dict[str, CategoryTrendMetrics]] = {}
        for category_type in CATEGORY_TYPES:
            names = category_names([*history_reports, current], category_type)
            trends[category_type] = {
                name: self._category_metrics(
                    name, category_type, current, history_reports
                )
                for name in names
            }

        totals = weekly_totals([*history_reports, current])
        velocity = trend_velocity(totals)
        previous_total = totals[-2]
        current_total = totals[-1]
        if previous_total > 0:
            overall_strength = clamp(
                abs(current_total - previous_total) / previous_total
            )
        else:
            overall_strength = 1.0 if current_total > 0 else 0.0

        analysis = CategoryTrendAnalysis(
            exercise_trends=trends[CategoryType.EXERCISE],
            diet_trends=trends[CategoryType.DIET],
            overall_direction=self._velocity_direction(velocity),
            overall_strength=overall_strength,
            trend_velocity=velocity,
            analysis_confidence=clamp(len(history_reports) / self.max_weeks),
            weeks_analyzed=len(history_reports),
            analyzed_at=current.generated_at,
        )

        self.logger.debug(
            "Category trends analyzed",
            week=current.week_identifier,
            weeks_analyzed=analysis.weeks_analyzed,
            velocity=round(velocity, 3),
            direction=analysis.overall_direction,
        )
        return analysis

    def _velocity_direction(self, velocity: float) -> TrendDirection:
        if velocity > self.stability_epsilon:
            return TrendDirection.UP
        if velocity < -self.stability_epsilon:
            return TrendDirection.DOWN
        return TrendDirection.STABLE

    def _category_metrics(
        self,
        name: str,
        category_type: CategoryType,
        current: WeeklyReport,
        history_reports: list[WeeklyReport],
    ) -> CategoryTrendMetrics:
        history_values = category_series(history_reports, name, category_type)
        current_value = current.stats.count(name, category_type)
        previous_value = history_values[-1]

        return CategoryTrendMetrics(
            category_name=name,
            category_type=category_type,
            current_value=current_value,
            previous_value=previous_value,
            direction=compare_direction(current_value, previous_value),
            change_percentage=change_percentage(current_value, previous_value),
            trend_strength=self._trend_strength([*history_values, current_value]),
            volatility=population_std(history_values),
            momentum=self._momentum([*history_values, current_value]),
            historical_average=mean(history_values),
        )

    @staticmethod
    def _trend_strength(values: list[int]) -> float:
        """増減方向の一貫性（0.0-1.0）"""
        diffs = np.diff(values)
        if diffs.size == 0:
            return 0.0
        ups = int(np.sum(diffs > 0))
        downs = int(np.sum(diffs < 0))
        return clamp(abs(ups - downs) / diffs.size)

    @staticmethod
    def _momentum(values: list[int]) -> float:
        """直近の変化を重く見た加重変化量"""
        if len(values) < 2:
            return 0.0
        latest_change = values[-1] - values[-2]
        if len(values) < 3:
            return float(latest_change)
        return latest_change * 0.7 + (values[-2] - values[-3]) * 0.3

    @safe_with_default(
        "detect emerging categories",
        CategoryEmergenceAnalysis,
        passthrough=(MissingReportError,),
    )
    def detect_emerging(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> CategoryEmergenceAnalysis:
        """新興カテゴリと減少・消失カテゴリを検出"""
        current = require(current, "current")
        history_reports = recent_history(history or [], self.max_weeks)
        if len(history_reports) < self.min_weeks:
            return CategoryEmergenceAnalysis()

        emerging: list[EmergingCategory] = []
        declining: list[DecliningCategory] = []

        for category_type in CATEGORY_TYPES:
            for name in category_names([*history_reports, current], category_type):
                values = category_series(history_reports, name, category_type)
                average = mean(values)
                count = current.stats.count(name, category_type)

                if count > 0 and (
                    average == 0 or count > average * (1 + self.emerging_threshold)
                ):
                    emerging.append(
                        EmergingCategory(
                            category_name=name,
                            category_type=category_type,
                            current_count=count,
                            historical_average=average,
                            emergence_strength=(
                                1.0 if average == 0 else (count - average) / average
                            ),
                            weeks_active=sum(1 for value in values if value > 0) + 1,
                        )
                    )
                elif average > 0 and count < average * (1 - self.declining_threshold):
                    declining.append(
                        DecliningCategory(
                            category_name=name,
                            category_type=category_type,
                            current_count=count,
                            historical_average=average,
                            decline_strength=clamp((average - count) / average),
                            is_disappeared=count == 0,
                        )
                    )

        emerging.sort(key=lambda item: (-item.emergence_strength, item.category_name))
        declining.sort(key=lambda item: (-item.decline_strength, item.category_name))

        data_confidence = clamp(len(history_reports) / self.max_weeks)
        strengths = []
        if emerging:
            strengths.append(
                mean([min(1.0, item.emergence_strength) for item in emerging])
            )
        if declining:
            strengths.append(mean([item.decline_strength for item in declining]))
        confidence = data_confidence * (0.5 + 0.5 * mean(strengths))

        if emerging or declining:
            self.logger.debug(
                "Category emergence detected",
                emerging=[item.category_name for item in emerging],
                declining=[item.category_name for item in declining],
            )
        return CategoryEmergenceAnalysis(
            emerging=emerging, declining=declining, confidence=clamp(confidence)
        )

    @safe_with_default(
        "analyze category lifecycle", dict, passthrough=(MissingReportError,)
    )
    def analyze_lifecycle(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> dict[str, dict[str, CategoryLifecycle]]:
        """カテゴリごとのライフサイクル（種別 → カテゴリ名）"""
        current = require(current, "current")
        reports = [*recent_history(history or []), current]
        total_weeks = len(reports)

        lifecycles: dict[str, dict[str, CategoryLifecycle]] = {}
        for category_type in CATEGORY_TYPES:
            group = lifecycles.setdefault(category_type.value, {})
            for name in category_names(reports, category_type):
                values = category_series(reports, name, category_type)
                active = [i for i, value in enumerate(values) if value > 0]
                current_usage = values[-1]
                peak = max(values)
                ratio = len(active) / total_weeks

                if current_usage == 0 and active:
                    stage = LifecycleStage.DORMANT
                elif ratio < 0.3:
                    stage = LifecycleStage.EXPERIMENTAL
                elif ratio < 0.7:
                    stage = LifecycleStage.DEVELOPING
                elif current_usage >= peak * 0.8:
                    stage = LifecycleStage.MATURE
                else:
                    stage = LifecycleStage.DECLINING

                group[name] = CategoryLifecycle(
                    category_name=name,
                    category_type=category_type,
                    first_seen=reports[active[0]].week_start_date if active else None,
                    last_seen=reports[active[-1]].week_start_date if active else None,
                    active_weeks=len(active),
                    total_weeks=total_weeks,
                    lifecycle_ratio=clamp(ratio),
                    peak_usage=peak,
                    current_usage=current_usage,
                    stage=stage,
                    is_active=current_usage > 0 or len(active) > total_weeks / 2,
                )

        return lifecycles

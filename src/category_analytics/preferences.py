"""
カテゴリ嗜好アナライザー

カテゴリごとの利用強度・継続性と、グループ内の占有率の安定度
"""

from collections.abc import Iterable

from src.config import AnalyticsSettings, get_settings
from src.utils.error_handler import safe_with_default
from src.utils.mixins import LoggerMixin

from .exceptions import MissingReportError
from .models import (
    CategoryPreference,
    CategoryType,
    PreferenceAnalysis,
    PreferenceCluster,
    PreferenceStability,
    WeeklyReport,
)
from .series import (
    CATEGORY_TYPES,
    build_series,
    category_names,
    category_series,
    category_totals,
    clamp,
    coefficient_of_variation,
    mean,
    safe_divide,
)

CLUSTER_NAMES: dict[CategoryType, str] = {
    CategoryType.EXERCISE: "운동 선호",
    CategoryType.DIET: "식단 선호",
}


def share_variation(
    before: dict[str, int], after: dict[str, int]
) -> float:
    """2 週間の占有率の変化量（0.0-1.0）"""
    before_total = sum(before.values())
    after_total = sum(after.values())
    names = set(before) | set(after)
    return clamp(
        sum(
            abs(
                safe_divide(before.get(name, 0), before_total)
                - safe_divide(after.get(name, 0), after_total)
            )
            for name in names
        )
        / 2
    )


class CategoryPreferenceAnalyzer(LoggerMixin):
    """カテゴリの嗜好分析"""

    log_component = "preferences"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.stable_threshold = settings.preference_stable_threshold
        self.cluster_size = settings.preference_cluster_size
        self.cluster_strength = 0.8
        self.cluster_consistency = 0.7

    @safe_with_default(
        "analyze category preferences",
        PreferenceAnalysis,
        passthrough=(MissingReportError,),
    )
    def analyze_preferences(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> PreferenceAnalysis:
        reports = build_series(current, history)
        total_weeks = len(reports)

        preferences: dict[CategoryType, dict[str, CategoryPreference]] = {}
        for category_type in CATEGORY_TYPES:
            group = preferences.setdefault(category_type, {})
            for name in category_names(reports, category_type):
                values = category_series(reports, name, category_type)
                total = sum(values)
                frequency = sum(1 for value in values if value > 0)
                group[name] = CategoryPreference(
                    category_name=name,
                    category_type=category_type,
                    total_count=total,
                    frequency=frequency,
                    current_count=values[-1],
                    historical_average=mean(values[:-1]),
                    intensity=total * frequency / total_weeks,
                    consistency=clamp(1.0 - coefficient_of_variation(values)),
                )

        analysis = PreferenceAnalysis(
            exercise_preferences=preferences[CategoryType.EXERCISE],
            diet_preferences=preferences[CategoryType.DIET],
            stability=self._stability(reports),
            clusters=self._clusters(reports),
            weeks_analyzed=total_weeks,
        )
        self.logger.debug(
            "Preferences analyzed",
            categories=sum(len(group) for group in preferences.values()),
            overall_stability=round(analysis.stability.overall_stability, 3),
        )
        return analysis

    def _group_stability(
        self, reports: list[WeeklyReport], category_type: CategoryType
    ) -> float:
        maps = [report.stats.categories(category_type) for report in reports]
        if len(maps) < 2:
            return 1.0
        variations = [
            share_variation(before, after) for before, after in zip(maps, maps[1:])
        ]
        return clamp(1.0 - mean(variations))

    def _stability(self, reports: list[WeeklyReport]) -> PreferenceStability:
        exercise = self._group_stability(reports, CategoryType.EXERCISE)
        diet = self._group_stability(reports, CategoryType.DIET)
        overall = mean([exercise, diet])
        return PreferenceStability(
            exercise_stability=exercise,
            diet_stability=diet,
            overall_stability=overall,
            stability_trend="stable" if overall >= self.stable_threshold else "fluctuating",
        )

    def _clusters(self, reports: list[WeeklyReport]) -> list[PreferenceCluster]:
        clusters: list[PreferenceCluster] = []
        for category_type in CATEGORY_TYPES:
            totals = {
                name: count
                for name, count in category_totals(reports, category_type).items()
                if count > 0
            }
            if not totals:
                continue
            top = sorted(totals, key=lambda name: (-totals[name], name))
            clusters.append(
                PreferenceCluster(
                    name=CLUSTER_NAMES[category_type],
                    categories=top[: self.cluster_size],
                    strength=self.cluster_strength,
                    consistency=self.cluster_consistency,
                )
            )
        return clusters

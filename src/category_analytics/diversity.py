"""
多様性・バランス スコアラー

シャノンエントロピーによる多様性スコアと、カテゴリ分布のバランス指標
"""

from collections.abc import Iterable, Mapping

import numpy as np

from src.config import AnalyticsSettings, get_settings
from src.utils.error_handler import safe_with_default
from src.utils.mixins import LoggerMixin

from .categories import known_categories
from .exceptions import MissingReportError, require
from .models import (
    CategoryType,
    DiversityAnalysis,
    DiversityPattern,
    DiversityRecommendation,
    OptimalDiversityTargets,
    Priority,
    TrendDirection,
    WeeklyReport,
    WeeklyStats,
)
from .series import clamp, mean, population_std, recent_history


def _positive_counts(counts: Mapping[str, int]) -> list[int]:
    # 並び順に依存しないよう値をソートしておく
    return sorted(count for count in counts.values() if count > 0)


def diversity_score(counts: Mapping[str, int]) -> float:
    """正規化シャノンエントロピー（0.0-1.0）

    合計 0、または 1 カテゴリに集中している場合は 0。
    件数が均等に近づくほど 1 に近づく。
    """
    values = np.array(_positive_counts(counts), dtype=float)
    if values.size < 2:
        return 0.0

    proportions = values / values.sum()
    entropy = float(-np.sum(proportions * np.log2(proportions)))
    return clamp(entropy / np.log2(values.size))


def distribution_balance(counts: Mapping[str, int]) -> float:
    """均等分布との差に基づくバランス（カテゴリ 1 つなら 0.5）"""
    values = _positive_counts(counts)
    if not values:
        return 0.0
    if len(values) == 1:
        return 0.5

    total = sum(values)
    expected = 1.0 / len(values)
    return clamp(mean([1.0 - abs(value / total - expected) for value in values]))


def ratio_balance(stats: WeeklyStats) -> float:
    """運動と食事の比率バランス: 1 - |運動比率 - 食事比率|"""
    total = stats.category_total
    if total == 0:
        return 0.0
    exercise_ratio = stats.exercise_total / total
    diet_ratio = stats.diet_total / total
    return clamp(1.0 - abs(exercise_ratio - diet_ratio))


def overall_balance(stats: WeeklyStats) -> float:
    """運動バランス・食事バランス・比率バランスの平均"""
    if stats.category_total == 0:
        return 0.0
    return clamp(
        mean(
            [
                distribution_balance(stats.exercise_categories),
                distribution_balance(stats.diet_categories),
                ratio_balance(stats),
            ]
        )
    )


def overall_diversity(stats: WeeklyStats) -> float:
    """運動・食事それぞれの多様性の平均"""
    return clamp(
        mean(
            [
                diversity_score(stats.exercise_categories),
                diversity_score(stats.diet_categories),
            ]
        )
    )


class CategoryDiversityScorer(LoggerMixin):
    """週次カテゴリの多様性を評価する"""

    log_component = "diversity"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.trend_band = settings.diversity_trend_band
        self.dominance_threshold = settings.diversity_dominance_threshold
        self.max_missing_per_type = settings.diversity_max_missing_per_type
        self.min_weeks_for_patterns = settings.diversity_pattern_min_weeks
        self.pattern_agreement = settings.diversity_pattern_agreement

    @safe_with_default(
        "analyze category diversity",
        DiversityAnalysis,
        passthrough=(MissingReportError,),
    )
    def analyze(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> DiversityAnalysis:
        """現在の週の多様性分析"""
        current = require(current, "current")
        history_reports = recent_history(history or [])
        stats = current.stats

        exercise = diversity_score(stats.exercise_categories)
        diet = diversity_score(stats.diet_categories)
        overall = overall_diversity(stats)

        previous = (
            overall_diversity(history_reports[-1].stats) if history_reports else None
        )
        series = [overall_diversity(report.stats) for report in history_reports]
        series.append(overall)

        analysis = DiversityAnalysis(
            exercise_diversity=exercise,
            diet_diversity=diet,
            overall_diversity=overall,
            diversity_trend=self._diversity_trend(overall, previous),
            exercise_category_balance=distribution_balance(stats.exercise_categories),
            diet_category_balance=distribution_balance(stats.diet_categories),
            exercise_diet_balance=ratio_balance(stats),
            overall_balance=overall_balance(stats),
            recommendations=self._recommendations(stats),
            patterns=self._detect_patterns(series, len(history_reports)),
            optimal_targets=self._optimal_targets(overall, series),
        )

        self.logger.debug(
            "Diversity analyzed",
            week=current.week_identifier,
            overall_diversity=round(overall, 3),
            history_weeks=len(history_reports),
        )
        return analysis

    def _diversity_trend(self, current: float, previous: float | None) -> TrendDirection:
        if previous is None:
            return TrendDirection.STABLE
        if current > previous * (1 + self.trend_band):
            return TrendDirection.UP
        if current < previous * (1 - self.trend_band):
            return TrendDirection.DOWN
        return TrendDirection.STABLE

    def _recommendations(self, stats: WeeklyStats) -> list[DiversityRecommendation]:
        recommendations: list[DiversityRecommendation] = []

        for category_type in (CategoryType.EXERCISE, CategoryType.DIET):
            present = stats.present_categories(category_type)
            missing = [
                name for name in known_categories(category_type) if name not in present
            ]
            for name in missing[: self.max_missing_per_type]:
                recommendations.append(
                    DiversityRecommendation(
                        recommendation_type="add_category",
                        category_type=category_type,
                        category_name=name,
                        description=f"{name} 카테고리를 시도해 보세요",
                        expected_impact=0.1,
                        priority=Priority.MEDIUM,
                    )
                )

        exercise_total = stats.exercise_total
        if exercise_total > 0:
            dominant, count = max(
                stats.exercise_categories.items(), key=lambda item: (item[1], item[0])
            )
            if count / exercise_total > self.dominance_threshold:
                recommendations.append(
                    DiversityRecommendation(
                        recommendation_type="balance_categories",
                        category_type=CategoryType.EXERCISE,
                        category_name=dominant,
                        description=f"{dominant}에 집중되어 있어요. 다른 운동도 균형 있게 해보세요",
                        expected_impact=0.2,
                        priority=Priority.HIGH,
                    )
                )

        return recommendations

    def _detect_patterns(
        self, series: list[float], history_weeks: int
    ) -> list[DiversityPattern]:
        if history_weeks < self.min_weeks_for_patterns:
            return []

        diffs = np.diff(series)
        steps = len(diffs)
        strength = clamp(population_std(series))
        patterns: list[DiversityPattern] = []

        increasing = int(np.sum(diffs > 0))
        decreasing = int(np.sum(diffs < 0))
        if increasing / steps >= self.pattern_agreement:
            patterns.append(
                DiversityPattern(
                    pattern_type="increasing",
                    strength=strength,
                    description="다양성이 꾸준히 늘고 있어요",
                    weeks=len(series),
                )
            )
        elif decreasing / steps >= self.pattern_agreement:
            patterns.append(
                DiversityPattern(
                    pattern_type="decreasing",
                    strength=strength,
                    description="다양성이 점점 줄고 있어요",
                    weeks=len(series),
                )
            )

        signs = [np.sign(diff) for diff in diffs if diff != 0]
        direction_changes = sum(
            1 for before, after in zip(signs, signs[1:]) if before != after
        )
        if len(series) >= 4 and direction_changes >= 2:
            patterns.append(
                DiversityPattern(
                    pattern_type="cyclical",
                    strength=strength,
                    description="다양성이 주기적으로 오르내리고 있어요",
                    weeks=len(series),
                )
            )

        return patterns

    def _optimal_targets(
        self, current: float, series: list[float]
    ) -> OptimalDiversityTargets:
        best = max(series) if series else current
        return OptimalDiversityTargets(
            short_term_target=clamp(current * 1.1),
            long_term_target=clamp(max(best, current * 1.3)),
            exercise_category_target=4,
            diet_category_target=5,
            target_balance=0.8,
        )

"""
カテゴリ相関エンジン

週ごとの件数のピアソン相関から、効果的な組み合わせ・相乗効果・
習慣スタッキング・バランス最適化の推奨を作る
"""

from collections.abc import Iterable
from itertools import combinations

import numpy as np

from src.config import AnalyticsSettings, get_settings
from src.utils.error_handler import safe_with_default
from src.utils.mixins import LoggerMixin

from .categories import known_categories
from .diversity import diversity_score
from .exceptions import MissingReportError
from .models import (
    PRIORITY_ORDER,
    BalanceOptimization,
    BalanceSuggestion,
    CategoryType,
    CombinationType,
    CorrelationMatrices,
    EffectiveCombination,
    HabitStackingRecommendation,
    OptimizationAnalysis,
    OptimizationOpportunity,
    OptimizationRecommendation,
    Priority,
    SynergyRecommendation,
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
    presence_count,
    safe_divide,
    weekly_totals,
)

CategoryKey = tuple[str, CategoryType]


def pearson(x: list[int] | np.ndarray, y: list[int] | np.ndarray) -> float:
    """ピアソン相関係数（分散 0 なら 0.0）"""
    x_values = np.asarray(x, dtype=float)
    y_values = np.asarray(y, dtype=float)
    if x_values.size < 2 or x_values.size != y_values.size:
        return 0.0
    with np.errstate(invalid="ignore", divide="ignore"):
        correlation = np.corrcoef(x_values, y_values)[0, 1]
    if np.isnan(correlation):
        return 0.0
    return float(np.clip(correlation, -1.0, 1.0))


def _by_type(values: dict[CategoryKey, float]) -> dict[str, dict[str, float]]:
    """(名前, 種別) キーを 種別 → 名前 の入れ子に変換"""
    nested: dict[str, dict[str, float]] = {}
    for (name, category_type), value in values.items():
        nested.setdefault(category_type.value, {})[name] = value
    return nested


def _priority_from_score(score: float) -> Priority:
    if score > 0.8:
        return Priority.CRITICAL
    if score > 0.6:
        return Priority.HIGH
    if score > 0.4:
        return Priority.MEDIUM
    return Priority.LOW


def _priority_sort_key(priority: str, impact: float) -> tuple[int, float]:
    return (-PRIORITY_ORDER[Priority(priority).value], -impact)


def _josa(word: str, with_batchim: str, without_batchim: str) -> str:
    """直前の語の終声に合わせて助詞を選ぶ"""
    last = word.rstrip()[-1:] if word.strip() else ""
    if "가" <= last <= "힣" and (ord(last) - ord("가")) % 28:
        return with_batchim
    return without_batchim


class CategoryCorrelationEngine(LoggerMixin):
    """カテゴリ相関と推奨の生成"""

    log_component = "correlation"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.min_weeks = settings.correlation_min_weeks
        self.max_weeks = settings.prediction_max_weeks
        self.same_type_threshold = settings.correlation_same_type_threshold
        self.cross_type_threshold = settings.correlation_cross_type_threshold
        self.same_type_effectiveness = settings.effectiveness_same_type_threshold
        self.cross_type_effectiveness = settings.effectiveness_cross_type_threshold
        self.max_combinations = settings.max_effective_combinations
        self.max_synergies = settings.max_synergy_recommendations
        self.max_habit_stacks = settings.max_habit_stacks
        self.anchor_presence = 0.6
        self.balance_target = 0.8

    # ------------------------------------------------------------------
    # 相関行列
    # ------------------------------------------------------------------

    def _series(
        self, current: WeeklyReport, history: Iterable[WeeklyReport] | None
    ) -> list[WeeklyReport]:
        return build_series(current, history, self.max_weeks - 1)

    @staticmethod
    def _matrix_categories(
        reports: list[WeeklyReport], category_type: CategoryType
    ) -> list[str]:
        # 既知カテゴリ + 実際に出現したカテゴリ
        observed = category_names(reports, category_type)
        known = known_categories(category_type)
        return known + [name for name in observed if name not in known]

    @safe_with_default(
        "compute category correlations",
        CorrelationMatrices,
        passthrough=(MissingReportError,),
    )
    def correlation_matrices(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> CorrelationMatrices:
        """運動内・食事内・運動×食事の相関行列"""
        reports = self._series(current, history)
        return self._matrices(reports)

    def _matrices(self, reports: list[WeeklyReport]) -> CorrelationMatrices:
        if len(reports) < self.min_weeks:
            self.logger.warning(
                "Insufficient weeks for correlation",
                weeks=len(reports),
                required=self.min_weeks,
            )
            return CorrelationMatrices(weeks_analyzed=len(reports))

        series: dict[CategoryType, dict[str, list[int]]] = {
            category_type: {
                name: category_series(reports, name, category_type)
                for name in self._matrix_categories(reports, category_type)
            }
            for category_type in CATEGORY_TYPES
        }

        def square(values: dict[str, list[int]]) -> dict[str, dict[str, float]]:
            return {
                a: {b: 1.0 if a == b else pearson(values[a], values[b]) for b in values}
                for a in values
            }

        exercise_series = series[CategoryType.EXERCISE]
        diet_series = series[CategoryType.DIET]
        return CorrelationMatrices(
            exercise=square(exercise_series),
            diet=square(diet_series),
            cross={
                a: {b: pearson(exercise_series[a], diet_series[b]) for b in diet_series}
                for a in exercise_series
            },
            weeks_analyzed=len(reports),
        )

    @staticmethod
    def _lookup(
        matrices: CorrelationMatrices, first: CategoryKey, second: CategoryKey
    ) -> float:
        (a, a_type), (b, b_type) = first, second
        if a_type is CategoryType.EXERCISE and b_type is CategoryType.EXERCISE:
            return matrices.exercise.get(a, {}).get(b, 0.0)
        if a_type is CategoryType.DIET and b_type is CategoryType.DIET:
            return matrices.diet.get(a, {}).get(b, 0.0)
        if a_type is CategoryType.EXERCISE:
            return matrices.cross.get(a, {}).get(b, 0.0)
        return matrices.cross.get(b, {}).get(a, 0.0)

    @staticmethod
    def _pairs(matrices: CorrelationMatrices) -> list[tuple[CategoryKey, CategoryKey]]:
        exercise = [(name, CategoryType.EXERCISE) for name in matrices.exercise]
        diet = [(name, CategoryType.DIET) for name in matrices.diet]
        pairs = list(combinations(exercise, 2)) + list(combinations(diet, 2))
        pairs.extend((e, d) for e in exercise for d in diet)
        return pairs

    # ------------------------------------------------------------------
    # 効果的な組み合わせ
    # ------------------------------------------------------------------

    @safe_with_default(
        "find effective combinations", list, passthrough=(MissingReportError,)
    )
    def effective_combinations(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[EffectiveCombination]:
        """相関と同時出現率の高いカテゴリペア（効果の高い順）"""
        reports = self._series(current, history)
        return self._combinations(reports, self._matrices(reports))

    def _combinations(
        self, reports: list[WeeklyReport], matrices: CorrelationMatrices
    ) -> list[EffectiveCombination]:
        if matrices.is_empty:
            return []

        weeks = len(reports)
        results: list[EffectiveCombination] = []
        for first, second in self._pairs(matrices):
            correlation = self._lookup(matrices, first, second)
            cross_type = first[1] is not second[1]
            threshold = self.cross_type_threshold if cross_type else self.same_type_threshold
            if correlation <= threshold:
                continue

            co_occurrence = sum(
                1
                for report in reports
                if report.stats.count(*first) > 0 and report.stats.count(*second) > 0
            )
            consistency = co_occurrence / weeks
            effectiveness = (correlation + consistency) / 2
            minimum = (
                self.cross_type_effectiveness if cross_type else self.same_type_effectiveness
            )
            if effectiveness <= minimum:
                continue

            results.append(
                EffectiveCombination(
                    primary_category=first[0],
                    secondary_category=second[0],
                    primary_type=first[1],
                    secondary_type=second[1],
                    correlation=correlation,
                    consistency=consistency,
                    effectiveness_score=effectiveness,
                    effectiveness_type=self._combination_type(correlation, consistency),
                    benefits=self._benefits(correlation, cross_type),
                )
            )

        results.sort(
            key=lambda item: (
                -item.effectiveness_score,
                item.primary_category,
                item.secondary_category,
            )
        )
        return results[: self.max_combinations]

    @staticmethod
    def _combination_type(correlation: float, consistency: float) -> CombinationType:
        if correlation > 0.8 and consistency > 0.7:
            return CombinationType.HIGH_SYNERGY
        if correlation > 0.6 and consistency > 0.6:
            return CombinationType.BALANCED
        # 相関は中程度でも毎週一緒に出てくる組み合わせ
        if consistency > 0.7:
            return CombinationType.CONSISTENT
        return CombinationType.COMPLEMENTARY

    @staticmethod
    def _benefits(correlation: float, cross_type: bool) -> list[str]:
        benefits: list[str] = []
        if correlation > 0.7:
            benefits.append("높은 시너지 효과")
        if correlation > 0.6:
            benefits.append("상호 보완적 효과")
        if cross_type:
            benefits.extend(["운동과 식단의 균형잡힌 조합", "전체적인 건강 관리 효과"])
        return benefits or ["일관된 활동 패턴"]

    # ------------------------------------------------------------------
    # 相乗効果
    # ------------------------------------------------------------------

    @safe_with_default(
        "build synergy recommendations", list, passthrough=(MissingReportError,)
    )
    def synergy_recommendations(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[SynergyRecommendation]:
        """よく使うカテゴリ A に、あまり使わない相関カテゴリ B を組み合わせる提案"""
        reports = self._series(current, history)
        matrices = self._matrices(reports)
        if matrices.is_empty:
            return []

        combos = {
            (
                (item.primary_category, CategoryType(item.primary_type)),
                (item.secondary_category, CategoryType(item.secondary_type)),
            ): item
            for item in self._combinations(reports, matrices)
        }
        weeks = len(reports)
        totals = self._usage_totals(reports)

        results: list[SynergyRecommendation] = []
        for first, second in self._pairs(matrices):
            correlation = self._lookup(matrices, first, second)
            combo = combos.get((first, second))
            if combo is None and not (
                first[1] is not second[1] and correlation > self.same_type_threshold
            ):
                continue
            if correlation <= 0:
                continue

            # A = 利用が多い方、 B = 利用が少ない方
            if totals.get(first, 0) == totals.get(second, 0):
                continue
            frequent, underused = sorted(
                (first, second), key=lambda key: -totals.get(key, 0)
            )
            frequency = presence_count(reports, *frequent) / weeks
            score = clamp(0.6 * correlation + 0.4 * frequency)
            same_type = frequent[1] is underused[1]

            if same_type:
                description = (
                    f"{frequent[0]}{_josa(frequent[0], '과', '와')} "
                    f"{underused[0]}{_josa(underused[0], '을', '를')} 함께하면 효과가 더 커져요"
                )
            else:
                description = (
                    f"{frequent[0]}{_josa(frequent[0], '과', '와')} "
                    f"{underused[0]}{_josa(underused[0], '은', '는')} 서로 보완해 주는 조합이에요"
                )

            results.append(
                SynergyRecommendation(
                    primary_category=frequent[0],
                    secondary_category=underused[0],
                    primary_type=frequent[1],
                    secondary_type=underused[1],
                    synergy_type="enhance" if same_type else "complement",
                    synergy_score=score,
                    confidence=score,
                    priority=_priority_from_score(score),
                    description=description,
                    benefits=(
                        list(combo.benefits)
                        if combo is not None
                        else ["잠재적 시너지 효과", "균형잡힌 건강 관리"]
                    ),
                )
            )

        results.sort(
            key=lambda item: (
                -item.synergy_score,
                item.primary_category,
                item.secondary_category,
            )
        )
        return results[: self.max_synergies]

    @staticmethod
    def _usage_totals(reports: list[WeeklyReport]) -> dict[CategoryKey, int]:
        totals: dict[CategoryKey, int] = {}
        for category_type in CATEGORY_TYPES:
            for name, count in category_totals(reports, category_type).items():
                totals[(name, category_type)] = count
        return totals

    # ------------------------------------------------------------------
    # 習慣スタッキング
    # ------------------------------------------------------------------

    @safe_with_default(
        "build habit stacking recommendations",
        list,
        passthrough=(MissingReportError,),
    )
    def habit_stacking_recommendations(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[HabitStackingRecommendation]:
        """継続しているアンカー習慣に、相関のある少ない習慣を重ねる提案"""
        reports = self._series(current, history)
        matrices = self._matrices(reports)
        if matrices.is_empty:
            return []

        weeks = len(reports)
        totals = self._usage_totals(reports)
        candidates: dict[
            tuple[CategoryKey, CategoryKey], HabitStackingRecommendation
        ] = {}

        for pair in self._pairs(matrices):
            correlation = self._lookup(matrices, *pair)
            if correlation <= self.cross_type_threshold:
                continue
            for anchor, stacked in (pair, pair[::-1]):
                anchor_presence = presence_count(reports, *anchor) / weeks
                if anchor_presence < self.anchor_presence:
                    continue
                if totals.get(stacked, 0) >= totals.get(anchor, 0):
                    continue

                score = clamp((correlation + anchor_presence) / 2)
                stacked_usage = clamp(totals.get(stacked, 0) / (weeks * 7))
                recommendation = HabitStackingRecommendation(
                    anchor_category=anchor[0],
                    stacked_category=stacked[0],
                    anchor_type=anchor[1],
                    stacked_type=stacked[1],
                    stacking_type=(
                        "sequential" if anchor[1] is stacked[1] else "simultaneous"
                    ),
                    score=score,
                    success_probability=clamp(
                        anchor_presence * 0.7 + stacked_usage * 0.3, 0.2, 0.9
                    ),
                    priority=(
                        Priority.HIGH
                        if score > 0.7
                        else Priority.MEDIUM
                        if score > 0.5
                        else Priority.LOW
                    ),
                    **self._stacking_timing(anchor[1], stacked[1]),
                    frequency="주 3-4회부터 시작",
                    duration="2-3주간 지속하여 습관화",
                )
                key = (anchor, stacked)
                if key not in candidates or candidates[key].score < score:
                    candidates[key] = recommendation

        results = sorted(
            candidates.values(),
            key=lambda item: (-item.score, item.anchor_category, item.stacked_category),
        )
        return results[: self.max_habit_stacks]

    @staticmethod
    def _stacking_timing(anchor: CategoryType, stacked: CategoryType) -> dict[str, str]:
        if anchor is CategoryType.EXERCISE and stacked is CategoryType.DIET:
            return {"timing": "운동 후 30분 이내", "reason": "운동 후 영양 보충이 효과적"}
        if anchor is CategoryType.DIET and stacked is CategoryType.EXERCISE:
            return {"timing": "식사 후 1-2시간 후", "reason": "소화 후 운동이 안전"}
        return {"timing": "연속적으로 또는 같은 시간대에", "reason": "습관 형성에 도움"}

    # ------------------------------------------------------------------
    # バランス最適化
    # ------------------------------------------------------------------

    @safe_with_default(
        "optimize category balance",
        BalanceOptimization,
        passthrough=(MissingReportError,),
    )
    def balance_optimization(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> BalanceOptimization:
        """カテゴリ配分の調整提案"""
        reports = self._series(current, history)
        totals = self._usage_totals(reports)
        grand_total = sum(totals.values())

        group_balances = []
        for category_type in CATEGORY_TYPES:
            counts = [
                count
                for (_, key_type), count in totals.items()
                if key_type is category_type and count > 0
            ]
            group_balances.append(
                clamp(1.0 - coefficient_of_variation(counts)) if counts else 0.0
            )
        exercise_days = sum(report.stats.exercise_days for report in reports)
        diet_days = sum(report.stats.diet_days for report in reports)
        days_balance = (
            1.0 - abs(exercise_days - diet_days) / (exercise_days + diet_days)
            if exercise_days + diet_days
            else 0.0
        )
        current_score = clamp(mean([*group_balances, days_balance]))

        current_ratios: dict[CategoryKey, float] = {
            key: safe_divide(count, grand_total)
            for key, count in totals.items()
            if count > 0
        }

        optimal: dict[CategoryKey, float] = {}
        for combo in self._combinations(reports, self._matrices(reports)):
            for key in (
                (combo.primary_category, CategoryType(combo.primary_type)),
                (combo.secondary_category, CategoryType(combo.secondary_type)),
            ):
                optimal[key] = optimal.get(key, 0.0) + combo.effectiveness_score
        optimal_sum = sum(optimal.values())
        optimal = {key: value / optimal_sum for key, value in optimal.items()}

        suggestions: list[BalanceSuggestion] = []
        if optimal:
            for key in sorted(
                set(optimal) | set(current_ratios),
                key=lambda key: (key[0], key[1].value),
            ):
                name, category_type = key
                recommended = optimal.get(key, 0.0)
                ratio = current_ratios.get(key, 0.0)
                difference = recommended - ratio
                if abs(difference) <= 0.1:
                    continue
                increase = difference > 0
                suggestions.append(
                    BalanceSuggestion(
                        category_name=name,
                        category_type=category_type,
                        suggestion_type="increase" if increase else "decrease",
                        current_ratio=ratio,
                        recommended_ratio=recommended,
                        impact=abs(difference),
                        description=(
                            f"{name} 비중을 {ratio:.0%}에서 {recommended:.0%}로 "
                            + ("늘려 보세요" if increase else "줄여 보세요")
                        ),
                        action_steps=(
                            [f"이번 주에 {name}을(를) 한 번 더 기록해 보세요", "작은 목표부터 시작하세요"]
                            if increase
                            else [f"{name} 대신 다른 카테고리를 시도해 보세요", "주간 계획에 다양성을 더하세요"]
                        ),
                    )
                )

        for category_type in CATEGORY_TYPES:
            used = [
                name
                for (name, key_type), count in totals.items()
                if key_type is category_type and count > 0
            ]
            if len(used) == 1:
                name = used[0]
                ratio = current_ratios[(name, category_type)]
                suggestions.append(
                    BalanceSuggestion(
                        category_name=name,
                        category_type=category_type,
                        suggestion_type="diversify",
                        current_ratio=ratio,
                        recommended_ratio=ratio / 2,
                        impact=ratio / 2,
                        description=f"{name} 외에 다른 카테고리도 함께 해보세요",
                        action_steps=["새로운 카테고리 하나를 골라 보세요"],
                    )
                )

        suggestions.sort(key=lambda item: (-item.impact, item.category_name))

        category_weights: dict[CategoryKey, float] = {}
        for category_type in CATEGORY_TYPES:
            group = {
                name: count
                for (name, key_type), count in totals.items()
                if key_type is category_type and count > 0
            }
            group_total = sum(group.values())
            for name, count in group.items():
                category_weights[(name, category_type)] = safe_divide(count, group_total)

        potential = (1.0 - current_score) * (0.8 if optimal else 0.3) * 0.5

        return BalanceOptimization(
            current_balance_score=current_score,
            target_balance_score=clamp(current_score + potential),
            improvement_potential=clamp(potential),
            current_ratios=_by_type(current_ratios),
            optimal_distribution=_by_type(optimal),
            category_weights=_by_type(category_weights),
            suggestions=suggestions[:5],
            balance_issues=self._balance_issues(current_ratios, totals),
        )

    @staticmethod
    def _balance_issues(
        current_ratios: dict[CategoryKey, float], totals: dict[CategoryKey, int]
    ) -> list[str]:
        issues = sorted(
            f"{name} 카테고리에 과도하게 집중되어 있습니다"
            for (name, _), ratio in current_ratios.items()
            if ratio > 0.5
        )
        labels = {CategoryType.EXERCISE: "운동", CategoryType.DIET: "식단"}
        for category_type in CATEGORY_TYPES:
            known = known_categories(category_type)
            missing = [
                name for name in known if totals.get((name, category_type), 0) == 0
            ]
            if len(missing) > len(known) / 2:
                issues.append(f"{labels[category_type]} 카테고리의 다양성이 부족합니다")
        return issues

    # ------------------------------------------------------------------
    # 最適化の機会
    # ------------------------------------------------------------------

    @safe_with_default(
        "find optimization opportunities",
        OptimizationAnalysis,
        passthrough=(MissingReportError,),
    )
    def optimization_opportunities(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> OptimizationAnalysis:
        """バランスと継続性の改善余地"""
        reports = self._series(current, history)
        opportunities: list[OptimizationOpportunity] = []
        recommendations: list[OptimizationRecommendation] = []

        labels = {CategoryType.EXERCISE: "운동", CategoryType.DIET: "식단"}
        for category_type in CATEGORY_TYPES:
            balance = diversity_score(category_totals(reports, category_type))
            if balance < 0.6:
                opportunities.append(
                    OptimizationOpportunity(
                        opportunity_type=f"{category_type.value}_balance",
                        description=f"{labels[category_type]} 카테고리를 더 고르게 분포시켜 보세요",
                        current_value=balance,
                        target_value=self.balance_target,
                        priority=Priority.HIGH,
                        impact=self.balance_target - balance,
                    )
                )

        consistency = clamp(1.0 - coefficient_of_variation(weekly_totals(reports)))
        if consistency < 0.7:
            opportunities.append(
                OptimizationOpportunity(
                    opportunity_type="improve_consistency",
                    description="주마다 기록량이 들쭉날쭉해요. 꾸준한 리듬을 만들어 보세요",
                    current_value=consistency,
                    target_value=self.balance_target,
                    priority=Priority.MEDIUM,
                    impact=self.balance_target - consistency,
                )
            )
            recommendations.append(
                OptimizationRecommendation(
                    recommendation_type="improve_consistency",
                    description="매주 같은 요일에 기록하는 습관을 만들어 보세요",
                    expected_impact=0.3,
                    priority=Priority.HIGH,
                    action_steps=["기록할 요일을 정하세요", "알림을 설정하세요"],
                )
            )

        usage = self._usage_totals(reports)
        candidates = [
            (name, category_type)
            for category_type in CATEGORY_TYPES
            for name in self._matrix_categories(reports, category_type)
        ]
        least_used = sorted(candidates, key=lambda key: (usage.get(key, 0), key[0]))[:2]
        for name, category_type in least_used:
            recommendations.append(
                OptimizationRecommendation(
                    recommendation_type="try_category",
                    category_name=name,
                    category_type=category_type,
                    description=f"{name} 카테고리를 늘려 보세요",
                    expected_impact=0.2,
                    priority=Priority.MEDIUM,
                    action_steps=[
                        f"이번 주에 {name} 한 번 시도하기",
                        "기존 루틴에 자연스럽게 추가하기",
                    ],
                )
            )

        exercise_days = sum(report.stats.exercise_days for report in reports)
        diet_days = sum(report.stats.diet_days for report in reports)
        if exercise_days > diet_days * 1.5 or diet_days > exercise_days * 1.5:
            lacking = "식단" if exercise_days > diet_days else "운동"
            recommendations.append(
                OptimizationRecommendation(
                    recommendation_type="balance_activity",
                    description=f"{lacking} 기록을 늘려 운동과 식단의 균형을 맞춰 보세요",
                    expected_impact=0.25,
                    priority=Priority.MEDIUM,
                    action_steps=[f"{lacking} 기록 요일을 하루 늘리기"],
                )
            )

        opportunities.sort(key=lambda item: _priority_sort_key(item.priority, item.impact))
        recommendations.sort(
            key=lambda item: _priority_sort_key(item.priority, item.expected_impact)
        )

        balance_gain = min(
            0.5,
            sum(
                item.impact
                for item in opportunities
                if item.opportunity_type.endswith("_balance")
            ),
        )
        consistency_gain = min(
            0.4,
            sum(
                item.impact
                for item in opportunities
                if item.opportunity_type == "improve_consistency"
            ),
        )
        return OptimizationAnalysis(
            opportunities=opportunities,
            recommendations=recommendations,
            expected_outcomes={
                "balance_improvement": balance_gain,
                "consistency_improvement": consistency_gain,
                "overall_improvement": (balance_gain + consistency_gain) / 2,
            },
        )

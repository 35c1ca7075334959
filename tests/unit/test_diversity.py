"""Tests for the diversity and balance scorer"""

import itertools
import math

import pytest

from src.category_analytics.diversity import (
    CategoryDiversityScorer,
    distribution_balance,
    diversity_score,
    overall_balance,
    ratio_balance,
)
from src.category_analytics.exceptions import MissingReportError
from src.category_analytics.models import TrendDirection, WeeklyStats
from src.config import override_settings


class TestDiversityScore:
    """正規化シャノンエントロピー"""

    def test_empty_and_zero_total(self):
        assert diversity_score({}) == 0.0
        assert diversity_score({"근력 운동": 0, "유산소 운동": 0}) == 0.0

    def test_single_category_is_zero(self):
        assert diversity_score({"근력 운동": 7}) == 0.0
        assert diversity_score({"근력 운동": 7, "유산소 운동": 0}) == 0.0

    def test_uniform_distribution_is_one(self):
        counts = {f"category-{i}": 3 for i in range(6)}
        assert diversity_score(counts) == pytest.approx(1.0)

    def test_skewed_distribution(self):
        score = diversity_score({"a": 9, "b": 1})
        expected = -(0.9 * math.log2(0.9) + 0.1 * math.log2(0.1))
        assert score == pytest.approx(expected)
        assert 0.0 < score < 1.0

    @pytest.mark.parametrize(
        "counts",
        [
            {"a": 1, "b": 2, "c": 3},
            {"a": 10, "b": 0, "c": 5, "d": 1},
            {"a": 100, "b": 1},
            {"a": -2, "b": 4},
        ],
    )
    def test_bounds(self, counts):
        assert 0.0 <= diversity_score(counts) <= 1.0
        assert 0.0 <= distribution_balance(counts) <= 1.0

    def test_order_invariance(self):
        items = [("근력 운동", 5), ("유산소 운동", 3), ("스트레칭/요가", 1)]
        scores = {
            diversity_score(dict(permutation))
            for permutation in itertools.permutations(items)
        }
        balances = {
            distribution_balance(dict(permutation))
            for permutation in itertools.permutations(items)
        }
        assert len(scores) == 1
        assert len(balances) == 1

    def test_approaches_one_as_counts_flatten(self):
        skewed = diversity_score({"a": 10, "b": 1, "c": 1})
        flatter = diversity_score({"a": 4, "b": 3, "c": 3})
        assert skewed < flatter < 1.0


class TestBalance:
    """分布バランス"""

    def test_distribution_balance(self):
        assert distribution_balance({}) == 0.0
        assert distribution_balance({"a": 3}) == 0.5
        assert distribution_balance({"a": 2, "b": 2}) == pytest.approx(1.0)
        # a: 0.75 vs 0.5, b: 0.25 vs 0.5
        assert distribution_balance({"a": 3, "b": 1}) == pytest.approx(0.75)

    def test_ratio_balance(self):
        even = WeeklyStats(
            exercise_categories={"근력 운동": 2}, diet_categories={"집밥/도시락": 2}
        )
        only_exercise = WeeklyStats(exercise_categories={"근력 운동": 2})

        assert ratio_balance(even) == pytest.approx(1.0)
        assert ratio_balance(only_exercise) == 0.0
        assert ratio_balance(WeeklyStats()) == 0.0

    def test_overall_balance_averages_three_terms(self):
        stats = WeeklyStats(
            exercise_categories={"근력 운동": 2, "유산소 운동": 2},
            diet_categories={"집밥/도시락": 4},
        )
        # 運動 1.0 、 食事 0.5 （単一）、 比率 1.0
        assert overall_balance(stats) == pytest.approx((1.0 + 0.5 + 1.0) / 3)
        assert overall_balance(WeeklyStats()) == 0.0


class TestCategoryDiversityScorer:
    """週次の多様性分析"""

    def test_analyze_without_history(self, make_report):
        scorer = CategoryDiversityScorer()
        report = make_report(
            0,
            exercise={"근력 운동": 2, "유산소 운동": 2},
            diet={"집밥/도시락": 1, "건강식/샐러드": 1},
        )

        analysis = scorer.analyze(report)

        assert analysis.exercise_diversity == pytest.approx(1.0)
        assert analysis.diet_diversity == pytest.approx(1.0)
        assert analysis.overall_diversity == pytest.approx(1.0)
        assert analysis.diversity_trend == TrendDirection.STABLE
        assert analysis.patterns == []
        assert analysis.optimal_targets is not None
        assert analysis.optimal_targets.short_term_target == pytest.approx(1.0)

    def test_missing_category_recommendations(self, make_report):
        scorer = CategoryDiversityScorer()
        report = make_report(0, exercise={"근력 운동": 5})

        analysis = scorer.analyze(report)
        kinds = [item.recommendation_type for item in analysis.recommendations]

        # 運動・食事それぞれ最大 3 件 + 集中しすぎの警告
        assert kinds.count("add_category") == 6
        assert "balance_categories" in kinds
        balance = next(
            item
            for item in analysis.recommendations
            if item.recommendation_type == "balance_categories"
        )
        assert balance.category_name == "근력 운동"
        assert balance.priority == "high"

    def test_diversity_trend_against_previous_week(self, make_report):
        scorer = CategoryDiversityScorer()
        previous = make_report(0, exercise={"근력 운동": 9, "유산소 운동": 1})
        current = make_report(1, exercise={"근력 운동": 3, "유산소 운동": 3})

        assert scorer.analyze(current, [previous]).diversity_trend == TrendDirection.UP
        assert scorer.analyze(previous, []).diversity_trend == TrendDirection.STABLE

    def test_increasing_pattern(self, make_report):
        scorer = CategoryDiversityScorer()
        history = [
            make_report(0, exercise={"a": 10, "b": 1}),
            make_report(1, exercise={"a": 8, "b": 2}),
            make_report(2, exercise={"a": 6, "b": 3}),
        ]
        current = make_report(3, exercise={"a": 4, "b": 4})

        patterns = scorer.analyze(current, history).patterns

        assert [pattern.pattern_type for pattern in patterns] == ["increasing"]

    def test_thresholds_follow_settings(self, make_report):
        previous = make_report(0, exercise={"근력 운동": 9, "유산소 운동": 1})
        current = make_report(1, exercise={"근력 운동": 3, "유산소 운동": 1})

        with override_settings(
            diversity_trend_band=2.0,
            diversity_dominance_threshold=0.8,
            diversity_max_missing_per_type=1,
        ) as settings:
            analysis = CategoryDiversityScorer(settings).analyze(current, [previous])

        kinds = [item.recommendation_type for item in analysis.recommendations]
        # 占有率 0.75 は 0.8 を超えない
        assert kinds == ["add_category", "add_category"]
        assert analysis.diversity_trend == TrendDirection.STABLE

    def test_missing_current_raises(self):
        with pytest.raises(MissingReportError):
            CategoryDiversityScorer().analyze(None)  # type: ignore[arg-type]

    def test_idempotent(self, make_report):
        scorer = CategoryDiversityScorer()
        history = [make_report(0, exercise={"근력 운동": 1}, diet={"집밥/도시락": 2})]
        current = make_report(1, exercise={"근력 운동": 2, "댄스/무용": 1})

        assert scorer.analyze(current, history) == scorer.analyze(current, history)

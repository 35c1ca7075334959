"""Tests for the category preference analyzer"""

import pytest

from src.category_analytics.exceptions import MissingReportError
from src.category_analytics.preferences import (
    CategoryPreferenceAnalyzer,
    share_variation,
)
from src.config import override_settings


def test_share_variation():
    assert share_variation({}, {}) == 0.0
    assert share_variation({"a": 2, "b": 2}, {"a": 5, "b": 5}) == 0.0
    assert share_variation({"a": 4}, {"b": 4}) == pytest.approx(1.0)


class TestCategoryPreferenceAnalyzer:
    """嗜好の強度と安定度"""

    def test_stable_preferences(self, make_report):
        exercise = {"근력 운동": 2, "유산소 운동": 2}
        history = [make_report(0, exercise=exercise, diet={"집밥/도시락": 2})]
        current = make_report(1, exercise=exercise, diet={"집밥/도시락": 2})

        analysis = CategoryPreferenceAnalyzer().analyze_preferences(current, history)

        strength = analysis.exercise_preferences["근력 운동"]
        assert strength.total_count == 4
        assert strength.frequency == 2
        assert strength.intensity == pytest.approx(4.0)
        assert strength.consistency == pytest.approx(1.0)
        assert strength.historical_average == pytest.approx(2.0)
        assert analysis.weeks_analyzed == 2

        assert analysis.stability.overall_stability == pytest.approx(1.0)
        assert analysis.stability.stability_trend == "stable"

        clusters = {cluster.name: cluster for cluster in analysis.clusters}
        assert clusters["운동 선호"].categories == ["근력 운동", "유산소 운동"]
        assert clusters["식단 선호"].categories == ["집밥/도시락"]

    def test_fluctuating_preferences(self, make_report):
        history = [make_report(0, exercise={"근력 운동": 4})]
        current = make_report(1, exercise={"유산소 운동": 4})

        stability = CategoryPreferenceAnalyzer().analyze_preferences(
            current, history
        ).stability

        assert stability.exercise_stability == pytest.approx(0.0)
        # 食事の記録がない週同士は変化なし
        assert stability.diet_stability == pytest.approx(1.0)
        assert stability.stability_trend == "fluctuating"

    def test_single_week(self, make_report):
        analysis = CategoryPreferenceAnalyzer().analyze_preferences(
            make_report(0, diet={"간식/음료": 3})
        )

        assert analysis.stability.overall_stability == 1.0
        assert analysis.diet_preferences["간식/음료"].historical_average == 0.0
        assert [cluster.name for cluster in analysis.clusters] == ["식단 선호"]

    def test_same_label_in_both_groups(self, make_report):
        history = [make_report(week, exercise={"기타": 5}, diet={"기타": 1}) for week in range(3)]
        current = make_report(3, exercise={"기타": 5}, diet={"기타": 1})

        analysis = CategoryPreferenceAnalyzer().analyze_preferences(current, history)

        assert analysis.exercise_preferences["기타"].total_count == 20
        assert analysis.diet_preferences["기타"].total_count == 4
        assert analysis.preferences_for("diet")["기타"].category_type == "diet"

    def test_thresholds_follow_settings(self, make_report):
        history = [make_report(0, exercise={"근력 운동": 3, "유산소 운동": 1})]
        current = make_report(1, exercise={"근력 운동": 1, "유산소 운동": 3})

        with override_settings(
            preference_stable_threshold=0.8, preference_cluster_size=1
        ) as settings:
            analysis = CategoryPreferenceAnalyzer(settings).analyze_preferences(
                current, history
            )

        # 運動の占有率変化 0.5 → 安定度 (0.5 + 1.0) / 2
        assert analysis.stability.overall_stability == pytest.approx(0.75)
        assert analysis.stability.stability_trend == "fluctuating"
        assert analysis.clusters[0].categories == ["근력 운동"]

    def test_missing_current_raises(self):
        with pytest.raises(MissingReportError):
            CategoryPreferenceAnalyzer().analyze_preferences(None)  # type: ignore[arg-type]

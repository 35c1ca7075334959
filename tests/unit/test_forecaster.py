"""Tests for seasonal forecasting and preference prediction"""

from datetime import date

import pytest

from src.category_analytics.exceptions import MissingReportError
from src.category_analytics.forecaster import (
    PreferencePredictor,
    SeasonalForecaster,
    linear_fit,
    season_for,
)
from src.category_analytics.models import Season


@pytest.mark.parametrize(
    ("day", "season"),
    [
        (date(2024, 1, 15), Season.WINTER),
        (date(2024, 2, 29), Season.WINTER),
        (date(2024, 3, 1), Season.SPRING),
        (date(2024, 7, 20), Season.SUMMER),
        (date(2024, 10, 3), Season.AUTUMN),
        (date(2024, 12, 25), Season.WINTER),
    ],
)
def test_season_for(day, season):
    assert season_for(day) is season


def test_linear_fit_needs_two_points():
    assert linear_fit([0.0], [3]) is None
    model = linear_fit([0.0, 1.0, 2.0], [1, 3, 5])
    assert model.coef_[0] == pytest.approx(2.0)


@pytest.fixture
def winter_to_spring(make_report):
    """2 月の 2 週と 3 月の 2 週"""
    return [
        make_report(start=date(2024, 2, 19), exercise={"유산소 운동": 4}),
        make_report(start=date(2024, 2, 26), exercise={"유산소 운동": 4}),
        make_report(start=date(2024, 3, 4), exercise={"유산소 운동": 2}),
        make_report(start=date(2024, 3, 11), exercise={"유산소 운동": 2}),
    ]


class TestSeasonalForecaster:
    """季節予測"""

    def test_no_same_season_data(self, make_report):
        history = [make_report(week, exercise={"근력 운동": 2}) for week in range(3)]
        current = make_report(3, exercise={"근력 운동": 2})

        forecast = SeasonalForecaster().forecast(current, history, date(2024, 7, 1))

        assert forecast.target_season == Season.SUMMER
        assert forecast.confidence == 0.0
        assert forecast.same_season_weeks == 0
        assert forecast.recommendations == []
        assert forecast.exercise_predictions["근력 운동"].seasonal_factor == 1.0

    def test_trend_extrapolation(self, make_report):
        reports = [make_report(week, exercise={"근력 운동": week + 1}) for week in range(4)]

        forecast = SeasonalForecaster().forecast(
            reports[-1], reports[:-1], date(2024, 4, 15)
        )
        prediction = forecast.exercise_predictions["근력 운동"]

        # 6 週目への外挿、同季節の平均 = 全体平均
        assert prediction.trend_value == pytest.approx(7.0)
        assert prediction.seasonal_factor == pytest.approx(1.0)
        assert prediction.predicted_value == pytest.approx(7.0)
        # 現在の週は同季節の週に数えない
        assert forecast.same_season_weeks == 3
        assert forecast.confidence == pytest.approx(0.6 * 3 / 12 + 0.4 * 0.5 ** (1 / 26))

    def test_recommendations_when_confident(self, make_report):
        reports = [make_report(week, exercise={"근력 운동": 3}) for week in range(9)]

        forecast = SeasonalForecaster().forecast(
            reports[-1], reports[:-1], date(2024, 5, 13)
        )

        assert forecast.confidence > 0.6
        assert forecast.recommendations == [
            "봄에는 근력 운동 활동이 활발할 것으로 예상돼요"
        ]

    def test_seasonal_factor(self, winter_to_spring):
        forecast = SeasonalForecaster().forecast(
            winter_to_spring[-1], winter_to_spring[:-1], date(2024, 12, 2)
        )

        assert forecast.target_season == Season.WINTER
        assert forecast.same_season_weeks == 2
        # 冬の履歴平均 4 ÷ 履歴全体の平均 10/3
        assert forecast.exercise_predictions["유산소 운동"].seasonal_factor == pytest.approx(1.2)
        # 最後の冬の週から 2 週間
        assert forecast.confidence == pytest.approx(
            0.6 * 2 / 12 + 0.4 * 0.5 ** (2 / 26)
        )
        for prediction in forecast.exercise_predictions.values():
            assert prediction.predicted_value >= 0.0

    def test_current_week_is_not_seasonal_history(self, make_report):
        history = [
            make_report(start=date(2024, 2, 5), exercise={"유산소 운동": 2}),
            make_report(start=date(2024, 2, 12), exercise={"유산소 운동": 2}),
            make_report(start=date(2024, 2, 19), exercise={"유산소 운동": 2}),
        ]
        current = make_report(start=date(2024, 3, 4), exercise={"유산소 운동": 2})

        forecast = SeasonalForecaster().forecast(current, history, date(2024, 4, 15))

        assert forecast.target_season == Season.SPRING
        assert forecast.same_season_weeks == 0
        assert forecast.confidence == 0.0
        prediction = forecast.exercise_predictions["유산소 운동"]
        assert prediction.seasonal_factor == 1.0
        assert prediction.predicted_value == pytest.approx(2.0)

    def test_same_label_in_both_groups(self, make_report):
        reports = [
            make_report(week, exercise={"기타": week + 1}, diet={"기타": 2})
            for week in range(4)
        ]

        forecast = SeasonalForecaster().forecast(
            reports[-1], reports[:-1], date(2024, 4, 15)
        )

        assert forecast.predictions_for("exercise")["기타"].predicted_value == pytest.approx(7.0)
        assert forecast.predictions_for("diet")["기타"].predicted_value == pytest.approx(2.0)
        assert forecast.diet_predictions["기타"].category_type == "diet"

    def test_target_date_is_required(self, make_report):
        with pytest.raises(MissingReportError):
            SeasonalForecaster().forecast(make_report(0), [], None)  # type: ignore[arg-type]

    def test_seasonal_patterns(self, winter_to_spring, make_report):
        forecaster = SeasonalForecaster()

        patterns = forecaster.seasonal_patterns(
            winter_to_spring[-1], winter_to_spring[:-1]
        )

        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.monthly_averages == {2: 4.0, 3: 2.0}
        assert pattern.peak_month == 2
        assert pattern.low_month == 3
        assert pattern.seasonal_strength > 0
        assert forecaster.seasonal_patterns(make_report(0, exercise={"근력 운동": 1})) == []


class TestPreferencePredictor:
    """嗜好予測"""

    def test_low_confidence_with_few_weeks(self, make_report):
        history = [make_report(0, exercise={"근력 운동": 2})]
        current = make_report(1, exercise={"근력 운동": 3})

        result = PreferencePredictor().predict_preferences(current, history)

        assert result.exercise_predictions["근력 운동"].confidence == 0.3
        assert result.weeks_ahead == 4

    def test_linear_trend_prediction(self, make_report):
        reports = [make_report(week, exercise={"근력 운동": week + 1}) for week in range(4)]

        result = PreferencePredictor().predict_preferences(reports[-1], reports[:-1])
        prediction = result.exercise_predictions["근력 운동"]

        assert prediction.trend == pytest.approx(1.0)
        assert prediction.predicted_value == pytest.approx(8.0)
        assert prediction.seasonal_adjustment == 0.0
        assert 0.0 <= prediction.confidence <= 1.0
        # 週 1 日だけの記録は十分なデータとみなさない
        assert result.overall_confidence == pytest.approx((4 / 12) / 2)
        assert result.insights[0].insight_type == "warning"

    def test_same_label_in_both_groups(self, make_report):
        reports = [
            make_report(week, exercise={"기타": 5}, diet={"기타": 1}) for week in range(4)
        ]

        result = PreferencePredictor().predict_preferences(reports[-1], reports[:-1])

        assert result.exercise_predictions["기타"].current_value == 5
        assert result.diet_predictions["기타"].current_value == 1
        assert result.predictions_for("diet")["기타"].predicted_value == pytest.approx(1.0)

    def test_activity_suggestions(self, make_report):
        reports = [
            make_report(0, exercise={"근력 운동": 3, "유산소 운동": 1}),
            make_report(1, exercise={"근력 운동": 3, "유산소 운동": 1}),
            make_report(2, exercise={"근력 운동": 1, "유산소 운동": 2}),
            make_report(3, exercise={"유산소 운동": 3, "스트레칭/요가": 1}),
        ]

        suggestions = PreferencePredictor().activity_suggestions(reports[-1], reports[:-1])
        kinds = {item.category_name: item.suggestion_type for item in suggestions}

        assert kinds == {
            "근력 운동": "revive",
            "유산소 운동": "maintain",
            "스트레칭/요가": "explore",
        }

    def test_missing_current_raises(self):
        with pytest.raises(MissingReportError):
            PreferencePredictor().predict_preferences(None)  # type: ignore[arg-type]

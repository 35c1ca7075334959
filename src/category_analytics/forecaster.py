"""
季節予測・嗜好予測

季節の分類、トレンド外挿に季節係数を掛けた予測、カテゴリ嗜好の予測
"""

from collections.abc import Iterable
from datetime import date

import numpy as np
from sklearn.linear_model import LinearRegression

from src.config import AnalyticsSettings, get_settings
from src.utils.error_handler import safe_with_default
from src.utils.mixins import LoggerMixin

from .categories import known_categories
from .exceptions import MissingReportError, require
from .models import (
    SEASON_MONTHS,
    ActivitySuggestion,
    CategoryForecast,
    CategoryType,
    PredictiveInsight,
    PreferencePrediction,
    PreferencePredictionResult,
    Season,
    SeasonalForecast,
    SeasonalPattern,
    WeeklyReport,
)
from .series import (
    CATEGORY_TYPES,
    build_series,
    category_names,
    category_series,
    clamp,
    coefficient_of_variation,
    mean,
    safe_divide,
)


def season_for(day: date) -> Season:
    """月から季節を判定（3-5 春、 6-8 夏、 9-11 秋、 12-2 冬）"""
    for season, months in SEASON_MONTHS.items():
        if day.month in months:
            return season
    raise ValueError(f"Invalid month: {day.month}")


def week_offsets(reports: list[WeeklyReport], origin: date) -> np.ndarray:
    """基準日からの経過週数"""
    return np.array(
        [(report.week_start_date - origin).days / 7 for report in reports], dtype=float
    )


def linear_fit(x: np.ndarray, y: list[int] | np.ndarray) -> LinearRegression | None:
    """線形回帰（2 点未満なら None）"""
    if len(x) < 2:
        return None
    model = LinearRegression()
    model.fit(np.asarray(x, dtype=float).reshape(-1, 1), np.asarray(y, dtype=float))
    return model


class SeasonalForecaster(LoggerMixin):
    """季節を考慮したカテゴリ予測"""

    log_component = "forecast"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.max_weeks = settings.prediction_max_weeks
        self.confidence_threshold = settings.prediction_confidence_threshold
        self.half_life_weeks = settings.seasonal_recency_half_life_weeks
        self.recommendation_min_value = 2.0

    @safe_with_default(
        "forecast seasonal category usage",
        None,
        passthrough=(MissingReportError,),
    )
    def forecast(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None,
        target_date: date,
    ) -> SeasonalForecast:
        """target_date 時点のカテゴリ件数を予測"""
        target_date = require(target_date, "target_date")
        reports = build_series(current, history)
        past = reports[:-1]
        season = season_for(target_date)
        # 同季節の週は履歴からのみ数える（現在の週は含めない）
        same_season = [
            report for report in past if season_for(report.week_start_date) is season
        ]

        confidence = self._confidence(reports, same_season)
        origin = reports[0].week_start_date
        offsets = week_offsets(reports, origin)
        target_offset = (target_date - origin).days / 7

        predictions: dict[CategoryType, dict[str, CategoryForecast]] = {}
        for category_type in CATEGORY_TYPES:
            group = predictions.setdefault(category_type, {})
            for name in category_names(reports, category_type):
                values = category_series(reports, name, category_type)
                model = linear_fit(offsets, values)
                if model is None:
                    trend_value = float(values[-1])
                else:
                    trend_value = float(model.predict([[target_offset]])[0])
                trend_value = max(0.0, trend_value)

                factor = self._seasonal_factor(
                    category_series(past, name, category_type),
                    category_series(same_season, name, category_type),
                )
                group[name] = CategoryForecast(
                    category_name=name,
                    category_type=category_type,
                    trend_value=trend_value,
                    seasonal_factor=factor,
                    predicted_value=trend_value * factor,
                )

        forecast = SeasonalForecast(
            target_date=target_date,
            target_season=season,
            confidence=confidence,
            same_season_weeks=len(same_season),
            exercise_predictions=predictions[CategoryType.EXERCISE],
            diet_predictions=predictions[CategoryType.DIET],
            recommendations=self._recommendations(
                season,
                confidence,
                [item for group in predictions.values() for item in group.values()],
            ),
        )
        self.logger.debug(
            "Seasonal forecast created",
            target_date=target_date.isoformat(),
            season=season.value,
            confidence=round(confidence, 3),
            same_season_weeks=len(same_season),
        )
        return forecast

    def _confidence(
        self, reports: list[WeeklyReport], same_season: list[WeeklyReport]
    ) -> float:
        if not same_season:
            return 0.0
        count_factor = min(len(same_season) / self.max_weeks, 1.0)
        gap_weeks = (
            reports[-1].week_start_date - same_season[-1].week_start_date
        ).days / 7
        recency = 0.5 ** (max(0.0, gap_weeks) / self.half_life_weeks)
        return clamp(0.6 * count_factor + 0.4 * recency)

    @staticmethod
    def _seasonal_factor(past_values: list[int], seasonal_values: list[int]) -> float:
        """同季節の履歴平均 ÷ 全履歴の平均"""
        overall_average = mean(past_values)
        # 同季節のデータが無い、または全体平均が 0 なら補正しない
        if not seasonal_values or overall_average == 0:
            return 1.0
        return mean(seasonal_values) / overall_average

    def _recommendations(
        self,
        season: Season,
        confidence: float,
        predictions: list[CategoryForecast],
    ) -> list[str]:
        if confidence <= self.confidence_threshold:
            return []
        likely = sorted(
            (
                item
                for item in predictions
                if item.predicted_value > self.recommendation_min_value
            ),
            key=lambda item: (-item.predicted_value, item.category_name),
        )
        return [
            f"{season.display_name}에는 {item.category_name} 활동이 활발할 것으로 예상돼요"
            for item in likely
        ]

    @safe_with_default(
        "analyze seasonal patterns", list, passthrough=(MissingReportError,)
    )
    def seasonal_patterns(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[SeasonalPattern]:
        """月別平均からカテゴリの季節パターンを抽出（2 か月分以上必要）"""
        reports = build_series(current, history)
        by_month: dict[int, list[WeeklyReport]] = {}
        for report in reports:
            by_month.setdefault(report.week_start_date.month, []).append(report)
        if len(by_month) < 2:
            return []

        patterns: list[SeasonalPattern] = []
        for category_type in CATEGORY_TYPES:
            for name in category_names(reports, category_type):
                monthly = {
                    month: mean(category_series(month_reports, name, category_type))
                    for month, month_reports in sorted(by_month.items())
                }
                peak = max(monthly, key=lambda month: (monthly[month], -month))
                low = min(monthly, key=lambda month: (monthly[month], month))
                patterns.append(
                    SeasonalPattern(
                        category_name=name,
                        category_type=category_type,
                        monthly_averages=monthly,
                        peak_month=peak,
                        low_month=low,
                        seasonal_strength=coefficient_of_variation(
                            list(monthly.values())
                        ),
                        description=(
                            f"{name}: {peak}월에 가장 활발하고 {low}월에 가장 적어요"
                        ),
                    )
                )

        patterns.sort(key=lambda item: (-item.seasonal_strength, item.category_name))
        return patterns


class PreferencePredictor(LoggerMixin):
    """カテゴリ嗜好の予測と活動提案"""

    log_component = "forecast"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.min_weeks = settings.prediction_min_weeks
        self.max_weeks = settings.prediction_max_weeks
        self.confidence_threshold = settings.prediction_confidence_threshold
        self.strong_preference = 0.7

    @safe_with_default(
        "predict category preferences",
        PreferencePredictionResult,
        passthrough=(MissingReportError,),
    )
    def predict_preferences(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
        weeks_ahead: int = 4,
    ) -> PreferencePredictionResult:
        """weeks_ahead 週後のカテゴリ件数を予測"""
        reports = build_series(current, history, self.max_weeks - 1)
        weeks = len(reports)
        data_factor = min(weeks / self.max_weeks, 1.0)
        offsets = week_offsets(reports, reports[0].week_start_date)

        predictions: dict[CategoryType, dict[str, PreferencePrediction]] = {}
        for category_type in CATEGORY_TYPES:
            group = predictions.setdefault(category_type, {})
            for name in category_names(reports, category_type):
                values = category_series(reports, name, category_type)
                model = linear_fit(offsets, values)
                trend = float(model.coef_[0]) if model is not None else 0.0
                seasonal = self._seasonal_adjustment(values)
                last = values[-1]
                predicted = max(
                    0.0, last + trend * weeks_ahead + seasonal * last * 0.1
                )
                average = mean(values)
                peak = max(values)

                if weeks < self.min_weeks:
                    confidence = 0.3
                else:
                    confidence = (
                        data_factor
                        + clamp(1.0 - coefficient_of_variation(values))
                        + min(abs(trend) / (average + 1), 1.0)
                    ) / 3

                group[name] = PreferencePrediction(
                    category_name=name,
                    category_type=category_type,
                    current_value=last,
                    predicted_value=predicted,
                    confidence=clamp(confidence),
                    trend=trend,
                    seasonal_adjustment=seasonal,
                    preference_strength=(
                        (average / peak + predicted / peak) / 2 if peak else 0.0
                    ),
                )

        sufficient = sum(1 for report in reports if report.stats.has_sufficient_data)
        overall = clamp((data_factor + sufficient / weeks) / 2)

        return PreferencePredictionResult(
            exercise_predictions=predictions[CategoryType.EXERCISE],
            diet_predictions=predictions[CategoryType.DIET],
            overall_confidence=overall,
            weeks_ahead=weeks_ahead,
            insights=self._insights(
                overall,
                [item for group in predictions.values() for item in group.values()],
            ),
        )

    @staticmethod
    def _seasonal_adjustment(values: list[int]) -> float:
        # 直近 4 週とその前の 4 週の比較
        if len(values) < 8:
            return 0.0
        recent = mean(values[-4:])
        earlier = mean(values[-8:-4])
        return safe_divide(recent - earlier, earlier)

    def _insights(
        self, overall: float, predictions: list[PreferencePrediction]
    ) -> list[PredictiveInsight]:
        insights: list[PredictiveInsight] = []
        if overall < self.confidence_threshold:
            insights.append(
                PredictiveInsight(
                    insight_type="warning",
                    title="데이터가 더 필요해요",
                    description="기록이 쌓일수록 예측이 정확해져요",
                    confidence=overall,
                )
            )
        strong = sorted(
            (
                item
                for item in predictions
                if item.preference_strength > self.strong_preference
            ),
            key=lambda item: (-item.preference_strength, item.category_name),
        )
        for item in strong:
            insights.append(
                PredictiveInsight(
                    insight_type="positive",
                    title=f"{item.category_name} 선호가 뚜렷해요",
                    description=f"앞으로도 {item.category_name} 활동이 꾸준할 것으로 보여요",
                    confidence=item.confidence,
                )
            )
        return insights

    @safe_with_default(
        "suggest category activities", list, passthrough=(MissingReportError,)
    )
    def activity_suggestions(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[ActivitySuggestion]:
        """利用頻度と最近の傾向から revive / explore / maintain を提案"""
        reports = build_series(current, history, self.max_weeks - 1)
        weeks = len(reports)
        half = weeks // 2

        suggestions: list[ActivitySuggestion] = []
        for category_type in CATEGORY_TYPES:
            observed = category_names(reports, category_type)
            names = known_categories(category_type) + [
                name for name in observed if name not in known_categories(category_type)
            ]
            for name in names:
                values = category_series(reports, name, category_type)
                frequency = sum(1 for value in values if value > 0) / weeks
                if half:
                    earlier = mean(values[:half])
                    recent = mean(values[half:])
                    usage_trend = safe_divide(recent - earlier, earlier)
                else:
                    usage_trend = 0.0

                suggestion = self._classify(name, category_type, frequency, usage_trend, mean(values))
                if suggestion is not None:
                    suggestions.append(suggestion)

        return suggestions

    @staticmethod
    def _classify(
        name: str,
        category_type: CategoryType,
        frequency: float,
        usage_trend: float,
        average: float,
    ) -> ActivitySuggestion | None:
        if frequency > 0.5 and usage_trend < -0.2:
            kind, description = "revive", f"요즘 {name} 기록이 줄었어요. 다시 시작해 볼까요?"
        elif frequency < 0.3 and average > 0:
            kind, description = "explore", f"{name}을(를) 조금 더 자주 해보세요"
        elif usage_trend > 0.3:
            kind, description = "maintain", f"{name} 기록이 늘고 있어요. 이 흐름을 유지하세요"
        else:
            return None
        return ActivitySuggestion(
            category_name=name,
            category_type=category_type,
            suggestion_type=kind,
            usage_frequency=clamp(frequency),
            usage_trend=usage_trend,
            description=description,
        )

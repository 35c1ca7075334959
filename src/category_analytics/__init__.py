"""
カテゴリ分析エンジン

週次の運動・食事カテゴリ集計から多様性、トレンド、相関、季節予測、
実績、目標を計算する
"""

from .achievements import CategoryAchievementEngine, achievement_points
from .categories import (
    CategoryInfo,
    display_label,
    is_known_category,
    known_categories,
    lookup_category,
)
from .correlation import CategoryCorrelationEngine, pearson
from .diversity import (
    CategoryDiversityScorer,
    distribution_balance,
    diversity_score,
    overall_balance,
    overall_diversity,
    ratio_balance,
)
from .exceptions import CategoryAnalyticsError, MissingReportError
from .forecaster import PreferencePredictor, SeasonalForecaster, season_for
from .goals import CategoryGoalService
from .models import (
    AchievementProgress,
    AchievementRarity,
    AchievementType,
    CategoryAchievement,
    CategoryGoal,
    CategoryTrendAnalysis,
    CategoryType,
    CertificationType,
    GoalDifficulty,
    GoalSummary,
    GoalType,
    ReportStatus,
    Season,
    TrendDirection,
    WeeklyReport,
    WeeklyStats,
)
from .preferences import CategoryPreferenceAnalyzer
from .series import sort_reports
from .trends import CategoryTrendAnalyzer

__all__ = [
    "AchievementProgress",
    "AchievementRarity",
    "AchievementType",
    "CategoryAchievement",
    "CategoryAchievementEngine",
    "CategoryAnalyticsError",
    "CategoryCorrelationEngine",
    "CategoryDiversityScorer",
    "CategoryGoal",
    "CategoryGoalService",
    "CategoryInfo",
    "CategoryPreferenceAnalyzer",
    "CategoryTrendAnalysis",
    "CategoryTrendAnalyzer",
    "CategoryType",
    "CertificationType",
    "GoalDifficulty",
    "GoalSummary",
    "GoalType",
    "MissingReportError",
    "PreferencePredictor",
    "ReportStatus",
    "Season",
    "SeasonalForecaster",
    "TrendDirection",
    "WeeklyReport",
    "WeeklyStats",
    "achievement_points",
    "display_label",
    "distribution_balance",
    "diversity_score",
    "is_known_category",
    "known_categories",
    "lookup_category",
    "overall_balance",
    "overall_diversity",
    "pearson",
    "ratio_balance",
    "season_for",
    "sort_reports",
]

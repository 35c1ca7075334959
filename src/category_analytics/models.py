"""
カテゴリ分析 データモデル

週次レポートと各分析コンポーネントの結果レコード定義
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CategoryType(str, Enum):
    """カテゴリの種類"""

    EXERCISE = "exercise"
    DIET = "diet"


class CertificationType(str, Enum):
    """認証の種類（表示名）"""

    EXERCISE = "운동"
    DIET = "식단"


class ReportStatus(str, Enum):
    """週次レポートの生成状態"""

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class TrendDirection(str, Enum):
    """トレンドの方向"""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class Season(str, Enum):
    """季節"""

    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"

    @property
    def display_name(self) -> str:
        return SEASON_DISPLAY_NAMES[self]

    @property
    def months(self) -> tuple[int, ...]:
        return SEASON_MONTHS[self]


SEASON_DISPLAY_NAMES: dict[Season, str] = {
    Season.SPRING: "봄",
    Season.SUMMER: "여름",
    Season.AUTUMN: "가을",
    Season.WINTER: "겨울",
}

SEASON_MONTHS: dict[Season, tuple[int, ...]] = {
    Season.SPRING: (3, 4, 5),
    Season.SUMMER: (6, 7, 8),
    Season.AUTUMN: (9, 10, 11),
    Season.WINTER: (12, 1, 2),
}


class Priority(str, Enum):
    """推奨の優先度"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


PRIORITY_ORDER: dict[str, int] = {
    Priority.CRITICAL.value: 3,
    Priority.HIGH.value: 2,
    Priority.MEDIUM.value: 1,
    Priority.LOW.value: 0,
}


# ---------------------------------------------------------------------------
# 入力データ
# ---------------------------------------------------------------------------


class WeeklyStats(BaseModel):
    """週次の認証統計"""

    model_config = ConfigDict(frozen=True)

    total_certifications: int = Field(default=0, ge=0, description="認証の総数")
    exercise_days: int = Field(default=0, ge=0, le=7, description="運動した日数")
    diet_days: int = Field(default=0, ge=0, le=7, description="食事記録した日数")
    exercise_categories: dict[str, int] = Field(
        default_factory=dict, description="運動カテゴリ別の回数"
    )
    diet_categories: dict[str, int] = Field(
        default_factory=dict, description="食事カテゴリ別の回数"
    )
    exercise_types: list[str] = Field(default_factory=list, description="運動の種類")
    consistency_score: float = Field(
        default=0.0, ge=0.0, le=1.0, description="曜日ごとの規則性（0.0-1.0）"
    )

    @field_validator("exercise_categories", "diet_categories", mode="before")
    @classmethod
    def _clamp_negative_counts(cls, value: Any) -> dict[str, int]:
        # 負の件数は 0 に丸める
        if value is None:
            return {}
        return {str(name): max(0, int(count)) for name, count in dict(value).items()}

    def categories(self, category_type: CategoryType | str) -> dict[str, int]:
        """種類に対応するカテゴリマップ"""
        if CategoryType(category_type) is CategoryType.EXERCISE:
            return self.exercise_categories
        return self.diet_categories

    def count(self, category_name: str, category_type: CategoryType | str) -> int:
        return self.categories(category_type).get(category_name, 0)

    def present_categories(
        self, category_type: CategoryType | str | None = None
    ) -> set[str]:
        """件数が 1 以上のカテゴリ名"""
        if category_type is None:
            return self.present_categories(
                CategoryType.EXERCISE
            ) | self.present_categories(CategoryType.DIET)
        return {
            name for name, count in self.categories(category_type).items() if count > 0
        }

    @property
    def exercise_total(self) -> int:
        return sum(self.exercise_categories.values())

    @property
    def diet_total(self) -> int:
        return sum(self.diet_categories.values())

    @property
    def category_total(self) -> int:
        return self.exercise_total + self.diet_total

    @property
    def has_sufficient_data(self) -> bool:
        """予測に使えるだけのデータがあるか"""
        return self.exercise_days + self.diet_days >= 3


class AIAnalysis(BaseModel):
    """外部 AI サービスが生成した分析テキスト（解釈しない）"""

    model_config = ConfigDict(frozen=True)

    exercise_insights: str = ""
    diet_insights: str = ""
    overall_assessment: str = ""
    strength_areas: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)


class WeeklyReport(BaseModel):
    """ユーザーごとの週次レポート"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    user_uuid: str
    week_start_date: date
    week_end_date: date
    generated_at: datetime
    stats: WeeklyStats = Field(default_factory=WeeklyStats)
    analysis: AIAnalysis = Field(default_factory=AIAnalysis)
    recommendations: list[str] = Field(default_factory=list)
    status: ReportStatus = ReportStatus.COMPLETED

    @model_validator(mode="before")
    @classmethod
    def _fill_week_bounds(cls, data: Any) -> Any:
        # 週末日と生成日時が無ければ週の開始日から補完する
        if not isinstance(data, dict) or data.get("week_start_date") is None:
            return data
        start = data["week_start_date"]
        if isinstance(start, str):
            start = date.fromisoformat(start)
        elif isinstance(start, datetime):
            start = start.date()
        data = dict(data)
        if data.get("week_end_date") is None:
            data["week_end_date"] = start + timedelta(days=6)
        if data.get("generated_at") is None:
            end = data["week_end_date"]
            if isinstance(end, str):
                end = date.fromisoformat(end)
            data["generated_at"] = datetime.combine(end, time(23, 59))
        return data

    @property
    def week_identifier(self) -> str:
        """ISO 週の識別子（例: 2024-W07）"""
        iso_year, iso_week, _ = self.week_start_date.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"


# ---------------------------------------------------------------------------
# 多様性・バランス
# ---------------------------------------------------------------------------


class DiversityRecommendation(BaseModel):
    """多様性向上の推奨"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    recommendation_type: str = Field(description="add_category / balance_categories")
    category_type: CategoryType
    category_name: str | None = None
    description: str
    expected_impact: float = Field(ge=0.0, le=1.0)
    priority: Priority


class DiversityPattern(BaseModel):
    """多様性スコアの推移パターン"""

    model_config = ConfigDict(frozen=True)

    pattern_type: str = Field(description="increasing / decreasing / cyclical")
    strength: float = Field(ge=0.0, le=1.0)
    description: str
    weeks: int


class OptimalDiversityTargets(BaseModel):
    """多様性の目標値"""

    model_config = ConfigDict(frozen=True)

    short_term_target: float = Field(ge=0.0, le=1.0)
    long_term_target: float = Field(ge=0.0, le=1.0)
    exercise_category_target: int = 4
    diet_category_target: int = 5
    target_balance: float = 0.8


class DiversityAnalysis(BaseModel):
    """1 週間分の多様性分析結果"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    exercise_diversity: float = Field(default=0.0, ge=0.0, le=1.0)
    diet_diversity: float = Field(default=0.0, ge=0.0, le=1.0)
    overall_diversity: float = Field(default=0.0, ge=0.0, le=1.0)
    diversity_trend: TrendDirection = TrendDirection.STABLE
    exercise_category_balance: float = Field(default=0.0, ge=0.0, le=1.0)
    diet_category_balance: float = Field(default=0.0, ge=0.0, le=1.0)
    exercise_diet_balance: float = Field(default=0.0, ge=0.0, le=1.0)
    overall_balance: float = Field(default=0.0, ge=0.0, le=1.0)
    recommendations: list[DiversityRecommendation] = Field(default_factory=list)
    patterns: list[DiversityPattern] = Field(default_factory=list)
    optimal_targets: OptimalDiversityTargets | None = None


# ---------------------------------------------------------------------------
# トレンド・ライフサイクル
# ---------------------------------------------------------------------------


class LifecycleStage(str, Enum):
    """カテゴリのライフサイクル段階"""

    EXPERIMENTAL = "experimental"
    DEVELOPING = "developing"
    MATURE = "mature"
    DECLINING = "declining"
    DORMANT = "dormant"


class CategoryTrendMetrics(BaseModel):
    """カテゴリ単位の週次トレンド"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    current_value: int = Field(ge=0)
    previous_value: int = Field(ge=0)
    direction: TrendDirection
    change_percentage: float
    trend_strength: float = Field(ge=0.0, le=1.0)
    volatility: float = Field(ge=0.0)
    momentum: float
    historical_average: float = Field(ge=0.0)


class CategoryTrendAnalysis(BaseModel):
    """カテゴリトレンド分析の結果"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    exercise_trends: dict[str, CategoryTrendMetrics] = Field(default_factory=dict)
    diet_trends: dict[str, CategoryTrendMetrics] = Field(default_factory=dict)
    overall_direction: TrendDirection = TrendDirection.STABLE
    overall_strength: float = Field(default=0.0, ge=0.0, le=1.0)
    trend_velocity: float = 0.0
    analysis_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    weeks_analyzed: int = Field(default=0, ge=0)
    analyzed_at: datetime | None = None

    def trends_for(self, category_type: CategoryType | str) -> dict[str, CategoryTrendMetrics]:
        if CategoryType(category_type) is CategoryType.EXERCISE:
            return self.exercise_trends
        return self.diet_trends


class EmergingCategory(BaseModel):
    """新たに増えてきたカテゴリ"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    current_count: int
    historical_average: float
    emergence_strength: float = Field(ge=0.0)
    weeks_active: int


class DecliningCategory(BaseModel):
    """減少・消失したカテゴリ"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    current_count: int
    historical_average: float
    decline_strength: float = Field(ge=0.0, le=1.0)
    is_disappeared: bool = False


class CategoryEmergenceAnalysis(BaseModel):
    """新興・減少カテゴリの検出結果"""

    model_config = ConfigDict(frozen=True)

    emerging: list[EmergingCategory] = Field(default_factory=list)
    declining: list[DecliningCategory] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class CategoryLifecycle(BaseModel):
    """カテゴリのライフサイクル"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    first_seen: date | None = None
    last_seen: date | None = None
    active_weeks: int = 0
    total_weeks: int = 0
    lifecycle_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    peak_usage: int = 0
    current_usage: int = 0
    stage: LifecycleStage
    is_active: bool = False


# ---------------------------------------------------------------------------
# 嗜好・相関
# ---------------------------------------------------------------------------


class CategoryPreference(BaseModel):
    """カテゴリごとの嗜好指標"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    total_count: int
    frequency: int = Field(description="活動した週の数")
    current_count: int
    historical_average: float
    intensity: float
    consistency: float = Field(ge=0.0, le=1.0)


class PreferenceStability(BaseModel):
    """嗜好の安定度"""

    model_config = ConfigDict(frozen=True)

    exercise_stability: float = Field(default=1.0, ge=0.0, le=1.0)
    diet_stability: float = Field(default=1.0, ge=0.0, le=1.0)
    overall_stability: float = Field(default=1.0, ge=0.0, le=1.0)
    stability_trend: str = "stable"


class PreferenceCluster(BaseModel):
    """嗜好クラスタ"""

    model_config = ConfigDict(frozen=True)

    name: str
    categories: list[str]
    strength: float
    consistency: float


class PreferenceAnalysis(BaseModel):
    """嗜好分析の結果"""

    model_config = ConfigDict(frozen=True)

    exercise_preferences: dict[str, CategoryPreference] = Field(default_factory=dict)
    diet_preferences: dict[str, CategoryPreference] = Field(default_factory=dict)
    stability: PreferenceStability = Field(default_factory=PreferenceStability)
    clusters: list[PreferenceCluster] = Field(default_factory=list)
    weeks_analyzed: int = 0

    def preferences_for(
        self, category_type: CategoryType | str
    ) -> dict[str, CategoryPreference]:
        if CategoryType(category_type) is CategoryType.EXERCISE:
            return self.exercise_preferences
        return self.diet_preferences


class CorrelationMatrices(BaseModel):
    """カテゴリ間の相関行列"""

    model_config = ConfigDict(frozen=True)

    exercise: dict[str, dict[str, float]] = Field(default_factory=dict)
    diet: dict[str, dict[str, float]] = Field(default_factory=dict)
    cross: dict[str, dict[str, float]] = Field(
        default_factory=dict, description="運動 → 食事"
    )
    weeks_analyzed: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.exercise or self.diet or self.cross)


class CombinationType(str, Enum):
    """組み合わせ効果の種類"""

    HIGH_SYNERGY = "high_synergy"
    BALANCED = "balanced"
    COMPLEMENTARY = "complementary"
    CONSISTENT = "consistent"


class EffectiveCombination(BaseModel):
    """効果的なカテゴリの組み合わせ"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    primary_category: str
    secondary_category: str
    primary_type: CategoryType
    secondary_type: CategoryType
    correlation: float
    consistency: float = Field(ge=0.0, le=1.0)
    effectiveness_score: float
    effectiveness_type: CombinationType
    benefits: list[str] = Field(default_factory=list)

    @property
    def is_cross_type(self) -> bool:
        return self.primary_type != self.secondary_type


class SynergyRecommendation(BaseModel):
    """相乗効果の推奨"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    primary_category: str
    secondary_category: str
    primary_type: CategoryType
    secondary_type: CategoryType
    synergy_type: str = Field(description="enhance / complement")
    synergy_score: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)
    priority: Priority
    description: str
    benefits: list[str] = Field(default_factory=list)


class HabitStackingRecommendation(BaseModel):
    """習慣スタッキングの推奨"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    anchor_category: str
    stacked_category: str
    anchor_type: CategoryType
    stacked_type: CategoryType
    stacking_type: str = Field(description="sequential / simultaneous")
    score: float = Field(ge=0.0, le=1.0)
    success_probability: float = Field(ge=0.0, le=1.0)
    priority: Priority
    timing: str
    reason: str
    frequency: str
    duration: str


class BalanceSuggestion(BaseModel):
    """バランス調整の提案"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    suggestion_type: str = Field(description="increase / decrease / diversify")
    current_ratio: float
    recommended_ratio: float
    impact: float
    description: str
    action_steps: list[str] = Field(default_factory=list)


class BalanceOptimization(BaseModel):
    """バランス最適化の結果"""

    model_config = ConfigDict(frozen=True)

    current_balance_score: float = Field(default=0.0, ge=0.0, le=1.0)
    target_balance_score: float = Field(default=0.0, ge=0.0, le=1.0)
    improvement_potential: float = Field(default=0.0, ge=0.0, le=1.0)
    # カテゴリ種別 (exercise / diet) → カテゴリ名 → 値
    current_ratios: dict[str, dict[str, float]] = Field(default_factory=dict)
    optimal_distribution: dict[str, dict[str, float]] = Field(default_factory=dict)
    category_weights: dict[str, dict[str, float]] = Field(default_factory=dict)
    suggestions: list[BalanceSuggestion] = Field(default_factory=list)
    balance_issues: list[str] = Field(default_factory=list)


class OptimizationOpportunity(BaseModel):
    """改善の余地"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    opportunity_type: str
    description: str
    current_value: float
    target_value: float
    priority: Priority
    impact: float


class OptimizationRecommendation(BaseModel):
    """最適化の推奨"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    recommendation_type: str
    category_name: str | None = None
    category_type: CategoryType | None = None
    description: str
    expected_impact: float
    priority: Priority
    action_steps: list[str] = Field(default_factory=list)


class OptimizationAnalysis(BaseModel):
    """最適化分析の結果"""

    model_config = ConfigDict(frozen=True)

    opportunities: list[OptimizationOpportunity] = Field(default_factory=list)
    recommendations: list[OptimizationRecommendation] = Field(default_factory=list)
    expected_outcomes: dict[str, float] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# 季節予測・嗜好予測
# ---------------------------------------------------------------------------


class CategoryForecast(BaseModel):
    """カテゴリ単位の予測値"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    trend_value: float = Field(ge=0.0, description="トレンド外挿値")
    seasonal_factor: float = Field(ge=0.0)
    predicted_value: float = Field(ge=0.0)


class SeasonalForecast(BaseModel):
    """季節を考慮した予測結果"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    target_date: date
    target_season: Season
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    same_season_weeks: int = 0
    exercise_predictions: dict[str, CategoryForecast] = Field(default_factory=dict)
    diet_predictions: dict[str, CategoryForecast] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)

    def predictions_for(
        self, category_type: CategoryType | str
    ) -> dict[str, CategoryForecast]:
        if CategoryType(category_type) is CategoryType.EXERCISE:
            return self.exercise_predictions
        return self.diet_predictions


class SeasonalPattern(BaseModel):
    """カテゴリの季節パターン"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    monthly_averages: dict[int, float]
    peak_month: int
    low_month: int
    seasonal_strength: float = Field(ge=0.0)
    description: str


class PreferencePrediction(BaseModel):
    """カテゴリ嗜好の予測"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    current_value: int
    predicted_value: float = Field(ge=0.0)
    confidence: float = Field(ge=0.0, le=1.0)
    trend: float
    seasonal_adjustment: float
    preference_strength: float = Field(ge=0.0)


class PredictiveInsight(BaseModel):
    """予測から得られたインサイト"""

    model_config = ConfigDict(frozen=True)

    insight_type: str = Field(description="warning / positive")
    title: str
    description: str
    confidence: float = Field(ge=0.0, le=1.0)


class PreferencePredictionResult(BaseModel):
    """嗜好予測の結果"""

    model_config = ConfigDict(frozen=True)

    exercise_predictions: dict[str, PreferencePrediction] = Field(default_factory=dict)
    diet_predictions: dict[str, PreferencePrediction] = Field(default_factory=dict)
    overall_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    weeks_ahead: int = 4
    insights: list[PredictiveInsight] = Field(default_factory=list)

    def predictions_for(
        self, category_type: CategoryType | str
    ) -> dict[str, PreferencePrediction]:
        if CategoryType(category_type) is CategoryType.EXERCISE:
            return self.exercise_predictions
        return self.diet_predictions


class ActivitySuggestion(BaseModel):
    """活動の提案"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    suggestion_type: str = Field(description="revive / explore / maintain")
    usage_frequency: float = Field(ge=0.0, le=1.0)
    usage_trend: float
    description: str


# ---------------------------------------------------------------------------
# 実績
# ---------------------------------------------------------------------------


class AchievementType(str, Enum):
    """実績の種類"""

    VARIETY = "variety"
    CONSISTENCY = "consistency"
    EXPLORATION = "exploration"
    BALANCE = "balance"


class AchievementRarity(str, Enum):
    """実績のレア度"""

    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class CategoryAchievement(BaseModel):
    """解除された実績"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    rule_id: str
    title: str
    description: str
    type: AchievementType
    rarity: AchievementRarity
    points: int = Field(ge=0)
    is_new: bool = True
    achieved_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class AchievementProgress(BaseModel):
    """未解除実績への進捗"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    rule_id: str
    title: str
    type: AchievementType
    current_value: float
    target_value: float
    progress: float = Field(ge=0.0, le=1.0)


# ---------------------------------------------------------------------------
# 目標
# ---------------------------------------------------------------------------


class GoalType(str, Enum):
    """目標の種類"""

    DIVERSITY = "diversity"
    CONSISTENCY = "consistency"
    EXPLORATION = "exploration"
    BALANCE = "balance"


class GoalDifficulty(str, Enum):
    """目標の難易度"""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def multiplier(self) -> float:
        return DIFFICULTY_MULTIPLIERS[self]


DIFFICULTY_MULTIPLIERS: dict[GoalDifficulty, float] = {
    GoalDifficulty.EASY: 1.0,
    GoalDifficulty.MEDIUM: 1.5,
    GoalDifficulty.HARD: 2.0,
    GoalDifficulty.EXPERT: 3.0,
}


class CategoryGoal(BaseModel):
    """カテゴリ目標"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    title: str
    description: str = ""
    type: GoalType
    difficulty: GoalDifficulty = GoalDifficulty.MEDIUM
    target_value: float = Field(gt=0)
    current_value: float = Field(default=0.0, ge=0.0)
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    is_completed: bool = False
    is_active: bool = True
    created_at: datetime
    expires_at: datetime | None = None
    completed_at: datetime | None = None
    base_points: int = Field(default=10, ge=0)
    target_categories: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def total_points(self) -> int:
        """難易度倍率を掛けた獲得ポイント"""
        return round(self.base_points * GoalDifficulty(self.difficulty).multiplier)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def is_achievable(self, now: datetime) -> bool:
        return self.is_active and not self.is_completed and not self.is_expired(now)


class DiversityTarget(BaseModel):
    """多様性の目標値"""

    model_config = ConfigDict(frozen=True)

    exercise_target: int = 3
    diet_target: int = 3
    total_target: int = 6
    target_diversity_score: float = Field(default=0.7, ge=0.0, le=1.0)
    current_diversity_score: float = Field(default=0.0, ge=0.0, le=1.0)
    category_targets: dict[str, int] = Field(default_factory=dict)
    is_achieved: bool = False


class ConsistencyGoal(BaseModel):
    """カテゴリの継続目標"""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    category_name: str
    category_type: CategoryType
    target_weeks: int
    current_weeks: int
    target_frequency: int
    weekly_frequencies: list[int] = Field(default_factory=list)
    presence_ratio: float = Field(ge=0.0, le=1.0)
    is_achieved: bool = False


class GoalSummary(BaseModel):
    """目標の集計"""

    model_config = ConfigDict(frozen=True)

    total_goals: int = 0
    active_goals: int = 0
    completed_goals: int = 0
    expired_goals: int = 0
    overall_progress: float = Field(default=0.0, ge=0.0, le=1.0)
    total_points_earned: int = 0
    total_points_possible: int = 0
    goals_by_type: dict[str, int] = Field(default_factory=dict)
    goals_by_difficulty: dict[str, int] = Field(default_factory=dict)
    completion_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    success_rate: float = Field(default=0.0, ge=0.0, le=1.0)

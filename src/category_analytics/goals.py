"""
カテゴリ目標 ジェネレーター・進捗トラッカー

現在の成績から適応的に目標を作り、新しい週次レポートで進捗を更新する
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from src.config import AnalyticsSettings, get_settings
from src.utils.error_handler import safe_with_default
from src.utils.mixins import LoggerMixin

from .categories import known_categories
from .exceptions import MissingReportError, require
from .models import (
    CategoryGoal,
    CategoryType,
    ConsistencyGoal,
    DiversityTarget,
    GoalDifficulty,
    GoalSummary,
    GoalType,
    WeeklyReport,
)
from .series import (
    CATEGORY_TYPES,
    category_names,
    category_series,
    clamp,
    mean,
    presence_count,
    recent_history,
)


def difficulty_for_gap(gap: float) -> GoalDifficulty:
    """目標と現在値の差から難易度を決める"""
    if gap <= 1:
        return GoalDifficulty.EASY
    if gap <= 2:
        return GoalDifficulty.MEDIUM
    if gap <= 3:
        return GoalDifficulty.HARD
    return GoalDifficulty.EXPERT


def difficulty_for_weeks(weeks: int) -> GoalDifficulty:
    if weeks <= 2:
        return GoalDifficulty.EASY
    if weeks <= 3:
        return GoalDifficulty.MEDIUM
    if weeks <= 4:
        return GoalDifficulty.HARD
    return GoalDifficulty.EXPERT


def current_streak(values: list[int]) -> int:
    """末尾から数えた連続出現週数"""
    streak = 0
    for value in reversed(values):
        if value <= 0:
            break
        streak += 1
    return streak


def exercise_ratio(report: WeeklyReport) -> float | None:
    total = report.stats.category_total
    if total == 0:
        return None
    return report.stats.exercise_total / total


class CategoryGoalService(LoggerMixin):
    """カテゴリ目標の生成と進捗管理"""

    log_component = "goals"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.duration = timedelta(days=settings.goal_default_duration_days)
        self.consistency_min_presence = settings.consistency_min_presence
        self.consistency_window = settings.consistency_window_weeks
        self.default_history_average = 3.0
        self.balance_band = (0.3, 0.7)

    @staticmethod
    def _prior_history(
        current: WeeklyReport, history: Iterable[WeeklyReport] | None
    ) -> list[WeeklyReport]:
        return [
            report
            for report in recent_history(history or [])
            if report.week_start_date < current.week_start_date
        ]

    @staticmethod
    def _unexplored(
        reports: list[WeeklyReport], category_type: CategoryType
    ) -> list[str]:
        explored: set[str] = set()
        for report in reports:
            explored |= report.stats.present_categories(category_type)
        return [name for name in known_categories(category_type) if name not in explored]

    # ------------------------------------------------------------------
    # 目標生成
    # ------------------------------------------------------------------

    @safe_with_default(
        "generate dynamic goals", list, passthrough=(MissingReportError,)
    )
    def generate_dynamic_goals(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[CategoryGoal]:
        """多様性・継続・探索・バランスの目標を組み合わせて作る"""
        current = require(current, "current")
        history_reports = self._prior_history(current, history)

        goals = [self._diversity_goal(current, history_reports)]
        goals.extend(self._consistency_goals(current, history_reports))

        exploration = self._exploration_goal(current, history_reports)
        if exploration is not None:
            goals.append(exploration)

        balance = self._balance_goal(current)
        if balance is not None:
            goals.append(balance)

        self.logger.debug(
            "Dynamic goals generated",
            week=current.week_identifier,
            goals=[goal.id for goal in goals],
        )
        return goals

    def _diversity_goal(
        self, current: WeeklyReport, history_reports: list[WeeklyReport]
    ) -> CategoryGoal:
        current_count = len(current.stats.present_categories())
        if history_reports:
            average = mean(
                [len(report.stats.present_categories()) for report in history_reports]
            )
        else:
            average = self.default_history_average
        target = max(current_count + 1, round(average + 2))

        return CategoryGoal(
            id=f"diversity_{current.week_identifier}",
            title="카테고리 다양성 늘리기",
            description=f"한 주에 {target}개 카테고리를 기록해 보세요",
            type=GoalType.DIVERSITY,
            difficulty=difficulty_for_gap(target - current_count),
            target_value=target,
            current_value=current_count,
            progress=clamp(current_count / target),
            created_at=current.generated_at,
            expires_at=current.generated_at + self.duration,
            base_points=20,
        )

    def _consistency_goals(
        self, current: WeeklyReport, history_reports: list[WeeklyReport]
    ) -> list[CategoryGoal]:
        if len(history_reports) < 2:
            return []

        reports = [*history_reports, current]
        goals: list[CategoryGoal] = []
        for category_type in CATEGORY_TYPES:
            for name in category_names(history_reports, category_type):
                ratio = presence_count(history_reports, name, category_type) / len(
                    history_reports
                )
                if ratio < 0.5:
                    continue
                streak = current_streak(category_series(reports, name, category_type))
                target_weeks = max(min(4, len(history_reports) + 1), streak + 1)
                goals.append(
                    CategoryGoal(
                        id=f"consistency_{name}_{current.week_identifier}",
                        title=f"{name} 꾸준히 하기",
                        description=f"{name}을(를) {target_weeks}주 연속으로 기록해 보세요",
                        type=GoalType.CONSISTENCY,
                        difficulty=difficulty_for_weeks(target_weeks),
                        target_value=target_weeks,
                        current_value=streak,
                        progress=clamp(streak / target_weeks),
                        created_at=current.generated_at,
                        expires_at=current.generated_at
                        + timedelta(weeks=target_weeks - streak),
                        base_points=15,
                        target_categories=[name],
                        metadata={"category_type": category_type.value},
                    )
                )
        return goals

    def _exploration_goal(
        self, current: WeeklyReport, history_reports: list[WeeklyReport]
    ) -> CategoryGoal | None:
        reports = [*history_reports, current]
        unexplored = [
            name
            for category_type in CATEGORY_TYPES
            for name in self._unexplored(reports, category_type)
        ]
        if not unexplored:
            return None

        target = min(3, len(unexplored))
        return CategoryGoal(
            id=f"exploration_{current.week_identifier}",
            title="새로운 카테고리 탐험",
            description=f"아직 해보지 않은 카테고리 {target}개에 도전해 보세요",
            type=GoalType.EXPLORATION,
            difficulty=difficulty_for_gap(target),
            target_value=target,
            created_at=current.generated_at,
            expires_at=current.generated_at + self.duration,
            base_points=25,
            target_categories=unexplored,
        )

    def _balance_goal(self, current: WeeklyReport) -> CategoryGoal | None:
        ratio = exercise_ratio(current)
        low, high = self.balance_band
        if ratio is None or low <= ratio <= high:
            return None

        lacking = "식단" if ratio > high else "운동"
        return CategoryGoal(
            id=f"balance_{current.week_identifier}",
            title="운동과 식단의 균형",
            description=f"{lacking} 기록을 늘려 운동 비율을 {low:.0%}~{high:.0%}로 맞춰 보세요",
            type=GoalType.BALANCE,
            difficulty=GoalDifficulty.MEDIUM,
            target_value=1,
            created_at=current.generated_at,
            expires_at=current.generated_at + self.duration,
            base_points=30,
            metadata={"exercise_ratio": ratio},
        )

    @safe_with_default(
        "create diversity target", DiversityTarget, passthrough=(MissingReportError,)
    )
    def create_diversity_target(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> DiversityTarget:
        """運動・食事のカテゴリ数目標と多様性スコア目標"""
        current = require(current, "current")
        history_reports = self._prior_history(current, history)
        exercise_now = len(current.stats.present_categories(CategoryType.EXERCISE))
        diet_now = len(current.stats.present_categories(CategoryType.DIET))
        current_score = clamp((exercise_now + diet_now) / 10)

        if not history_reports:
            exercise_target, diet_target, target_score = 3, 3, 0.7
        else:
            targets = []
            for category_type in CATEGORY_TYPES:
                counts = [
                    len(report.stats.present_categories(category_type))
                    for report in history_reports
                ]
                targets.append(min(round(mean(counts) + 1), max(counts) + 1))
            exercise_target, diet_target = targets
            target_score = max(
                min(0.9, 0.5 + 0.05 * (exercise_target + diet_target)),
                current_score + 0.1,
            )

        return DiversityTarget(
            exercise_target=exercise_target,
            diet_target=diet_target,
            total_target=exercise_target + diet_target,
            target_diversity_score=clamp(target_score),
            current_diversity_score=current_score,
            category_targets={
                CategoryType.EXERCISE.value: exercise_target,
                CategoryType.DIET.value: diet_target,
            },
            is_achieved=exercise_now >= exercise_target and diet_now >= diet_target,
        )

    @safe_with_default(
        "create consistency goals", list, passthrough=(MissingReportError,)
    )
    def create_consistency_goals(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
        min_presence: int | None = None,
        window_weeks: int | None = None,
    ) -> list[ConsistencyGoal]:
        """直近 window_weeks 週のうち min_presence 週以上登場したカテゴリの継続目標"""
        current = require(current, "current")
        if min_presence is None:
            min_presence = self.consistency_min_presence
        if window_weeks is None:
            window_weeks = self.consistency_window
        history_reports = self._prior_history(current, history)
        window_history = history_reports[-(window_weeks - 1) :] if window_weeks > 1 else []
        reports = [*window_history, current]

        goals: list[ConsistencyGoal] = []
        for category_type in CATEGORY_TYPES:
            for name in category_names(reports, category_type):
                weekly = category_series(reports, name, category_type)
                present = sum(1 for value in weekly if value > 0)
                if present < min_presence:
                    continue

                ratio = present / len(reports)
                target_weeks = 4 if ratio >= 0.8 else 3
                streak = current_streak(weekly)
                goals.append(
                    ConsistencyGoal(
                        category_name=name,
                        category_type=category_type,
                        target_weeks=target_weeks,
                        current_weeks=streak,
                        target_frequency=max(1, round(mean(weekly))),
                        weekly_frequencies=weekly,
                        presence_ratio=clamp(ratio),
                        is_achieved=streak >= target_weeks,
                    )
                )

        goals.sort(key=lambda goal: (-goal.presence_ratio, goal.category_name))
        return goals

    @safe_with_default(
        "create exploration challenges", list, passthrough=(MissingReportError,)
    )
    def create_exploration_challenges(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[CategoryGoal]:
        """まだ試していないカテゴリへの挑戦（規模に応じて報酬が増える）"""
        current = require(current, "current")
        reports = [*self._prior_history(current, history), current]
        week = current.week_identifier
        now = current.generated_at

        by_type = {
            category_type: self._unexplored(reports, category_type)
            for category_type in CATEGORY_TYPES
        }
        unexplored = by_type[CategoryType.EXERCISE] + by_type[CategoryType.DIET]

        challenges: list[CategoryGoal] = []
        if unexplored:
            target = min(2, len(unexplored))
            challenges.append(
                CategoryGoal(
                    id=f"exploration_weekly_{week}",
                    title="이번 주 탐험 챌린지",
                    description=f"새로운 카테고리 {target}개에 도전해 보세요",
                    type=GoalType.EXPLORATION,
                    difficulty=GoalDifficulty.EASY,
                    target_value=target,
                    created_at=now,
                    expires_at=now + timedelta(days=6),
                    base_points=50,
                    target_categories=unexplored,
                    metadata={"scope": "weekly"},
                )
            )
        if len(unexplored) >= 5:
            target = min(5, len(unexplored))
            challenges.append(
                CategoryGoal(
                    id=f"exploration_monthly_{week}",
                    title="이번 달 탐험 챌린지",
                    description=f"한 달 동안 새로운 카테고리 {target}개를 경험해 보세요",
                    type=GoalType.EXPLORATION,
                    difficulty=GoalDifficulty.HARD,
                    target_value=target,
                    created_at=now,
                    expires_at=now + timedelta(days=30),
                    base_points=150,
                    target_categories=unexplored,
                    metadata={"scope": "monthly"},
                )
            )

        labels = {CategoryType.EXERCISE: "운동", CategoryType.DIET: "식단"}
        for category_type, names in by_type.items():
            if len(names) < 2:
                continue
            target = min(3, len(names))
            challenges.append(
                CategoryGoal(
                    id=f"exploration_{category_type.value}_{week}",
                    title=f"{labels[category_type]} 탐험 챌린지",
                    description=f"새로운 {labels[category_type]} 카테고리 {target}개에 도전해 보세요",
                    type=GoalType.EXPLORATION,
                    difficulty=GoalDifficulty.MEDIUM,
                    target_value=target,
                    created_at=now,
                    expires_at=now + timedelta(days=14),
                    base_points=75,
                    target_categories=names,
                    metadata={"scope": category_type.value},
                )
            )

        return challenges

    # ------------------------------------------------------------------
    # 進捗
    # ------------------------------------------------------------------

    def _goal_value(self, goal: CategoryGoal, report: WeeklyReport) -> float:
        stats = report.stats
        goal_type = GoalType(goal.type)

        if goal_type is GoalType.DIVERSITY:
            return len(stats.present_categories())

        if goal_type is GoalType.CONSISTENCY:
            if not goal.target_categories:
                return 0.0
            name = goal.target_categories[0]
            category_type = goal.metadata.get("category_type")
            if category_type is not None:
                present = stats.count(name, category_type) > 0
            else:
                present = name in stats.present_categories()
            return goal.current_value + 1 if present else 0.0

        if goal_type is GoalType.EXPLORATION:
            present = stats.present_categories()
            return sum(1 for name in goal.target_categories if name in present)

        ratio = exercise_ratio(report)
        low, high = self.balance_band
        return 1.0 if ratio is not None and low <= ratio <= high else 0.0

    def update_goal_progress(
        self,
        goal: CategoryGoal,
        report: WeeklyReport,
        now: datetime | None = None,
    ) -> CategoryGoal:
        """新しいレポートで進捗を再計算した目標を返す（完了済みはそのまま）"""
        goal = require(goal, "goal")
        report = require(report, "report")
        if goal.is_completed:
            return goal

        value = self._goal_value(goal, report)
        progress = clamp(value / goal.target_value)
        completed = progress >= 1.0
        updates: dict = {
            "current_value": value,
            "progress": progress,
            "is_completed": completed,
        }
        if completed:
            updates["completed_at"] = goal.completed_at or now or report.generated_at
            self.logger.info(
                "Category goal completed",
                goal_id=goal.id,
                goal_type=goal.type,
                points=goal.total_points,
            )
        return goal.model_copy(update=updates)

    def get_goal_summary(
        self, goals: Iterable[CategoryGoal], now: datetime | None = None
    ) -> GoalSummary:
        """目標の集計（now が無ければ最新の作成日時を基準にする）"""
        goals = list(goals)
        if not goals:
            return GoalSummary()
        if now is None:
            now = max(goal.created_at for goal in goals)

        completed = [goal for goal in goals if goal.is_completed]
        expired = [
            goal for goal in goals if not goal.is_completed and goal.is_expired(now)
        ]
        expired_ids = {id(goal) for goal in expired}

        by_type: dict[str, int] = {}
        by_difficulty: dict[str, int] = {}
        for goal in goals:
            by_type[goal.type] = by_type.get(goal.type, 0) + 1
            by_difficulty[goal.difficulty] = by_difficulty.get(goal.difficulty, 0) + 1

        finished = len(completed) + len(expired)
        return GoalSummary(
            total_goals=len(goals),
            active_goals=sum(1 for goal in goals if goal.is_achievable(now)),
            completed_goals=len(completed),
            expired_goals=len(expired),
            overall_progress=clamp(mean([goal.progress for goal in goals])),
            total_points_earned=sum(goal.total_points for goal in completed),
            total_points_possible=sum(
                goal.total_points for goal in goals if id(goal) not in expired_ids
            ),
            goals_by_type=by_type,
            goals_by_difficulty=by_difficulty,
            completion_rate=len(completed) / len(goals),
            success_rate=len(completed) / finished if finished else 0.0,
        )

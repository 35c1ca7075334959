"""
カテゴリ実績 ルールエンジン

現在の週（と履歴）に対してルール表を評価し、解除された実績と
未解除実績への進捗を返す。状態は持たないので「既に見た実績」の
管理は呼び出し側で行う。
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import timedelta

from src.config import AnalyticsSettings, get_settings
from src.utils.error_handler import safe_with_default
from src.utils.mixins import LoggerMixin

from .categories import known_categories
from .diversity import overall_balance, overall_diversity
from .exceptions import MissingReportError, require
from .models import (
    AchievementProgress,
    AchievementRarity,
    AchievementType,
    CategoryAchievement,
    CategoryType,
    WeeklyReport,
)
from .series import CATEGORY_TYPES, clamp, mean, presence_count, recent_history


@dataclass
class AchievementContext:
    """ルール評価に使う集計値"""

    current: WeeklyReport
    history: list[WeeklyReport]
    new_categories: list[tuple[str, CategoryType]] = field(default_factory=list)
    presence_weeks: dict[tuple[str, CategoryType], int] = field(default_factory=dict)
    streak_weeks: int = 0
    known_tried_ratio: float = 0.0

    @property
    def stats(self):
        return self.current.stats

    @property
    def distinct_total(self) -> int:
        return len(self.stats.present_categories(CategoryType.EXERCISE)) + len(
            self.stats.present_categories(CategoryType.DIET)
        )


@dataclass(frozen=True)
class AchievementTier:
    """レア度の段階（threshold が None ならルールの目標値）"""

    rarity: AchievementRarity
    points: int
    threshold: float | None = None


@dataclass(frozen=True)
class AchievementRule:
    """実績ルール"""

    rule_id: str
    title: str
    description: str
    type: AchievementType
    measure: Callable[[AchievementContext], tuple[float, float]]
    tiers: tuple[AchievementTier, ...]
    requires_history: bool = False

    def evaluate(
        self, context: AchievementContext
    ) -> tuple[float, float, AchievementTier | None]:
        value, target = self.measure(context)
        if self.requires_history and not context.history:
            return value, target, None
        for tier in sorted(
            self.tiers,
            key=lambda tier: tier.threshold if tier.threshold is not None else target,
            reverse=True,
        ):
            threshold = tier.threshold if tier.threshold is not None else target
            if value >= threshold:
                return value, target, tier
        return value, target, None


class CategoryAchievementEngine(LoggerMixin):
    """カテゴリ利用パターンから実績を判定する"""

    log_component = "achievements"

    def __init__(self, settings: AnalyticsSettings | None = None):
        settings = settings or get_settings()
        self.well_rounded_min = settings.well_rounded_min_categories
        self.variety_min = settings.variety_master_min_categories
        self.adventure_min = settings.adventure_seeker_min_new
        self.balance_tolerance = settings.perfect_balance_tolerance
        self.optimizer_min_total = settings.health_optimizer_min_total
        self.consistent_min_weeks = 3
        self.habit_min_weeks = 4
        self.streak_min_categories = 3
        self.rules = self._build_rules()

    def _build_rules(self) -> list[AchievementRule]:
        known_total = len(known_categories())
        return [
            AchievementRule(
                rule_id="well_rounded_week",
                title="균형잡힌 한 주",
                description=f"한 주에 {self.well_rounded_min}개 이상의 카테고리를 기록했어요",
                type=AchievementType.VARIETY,
                measure=lambda ctx: (ctx.distinct_total, self.well_rounded_min),
                tiers=(
                    AchievementTier(AchievementRarity.RARE, 50, threshold=8),
                    AchievementTier(AchievementRarity.COMMON, 25),
                ),
            ),
            AchievementRule(
                rule_id="exercise_variety_master",
                title="운동 다양성 마스터",
                description=f"{self.variety_min}가지 이상의 운동을 했어요",
                type=AchievementType.VARIETY,
                measure=lambda ctx: (
                    len(ctx.stats.present_categories(CategoryType.EXERCISE)),
                    self.variety_min,
                ),
                tiers=(
                    AchievementTier(AchievementRarity.EPIC, 100, threshold=6),
                    AchievementTier(AchievementRarity.RARE, 50),
                ),
            ),
            AchievementRule(
                rule_id="diet_variety_champion",
                title="식단 다양성 챔피언",
                description=f"{self.variety_min}가지 이상의 식단을 기록했어요",
                type=AchievementType.VARIETY,
                measure=lambda ctx: (
                    len(ctx.stats.present_categories(CategoryType.DIET)),
                    self.variety_min,
                ),
                tiers=(
                    AchievementTier(AchievementRarity.EPIC, 100, threshold=6),
                    AchievementTier(AchievementRarity.RARE, 50),
                ),
            ),
            AchievementRule(
                rule_id="perfect_variety",
                title="완벽한 다양성",
                description="모든 카테고리를 한 주에 기록했어요",
                type=AchievementType.VARIETY,
                measure=lambda ctx: (
                    sum(
                        1
                        for category_type in CATEGORY_TYPES
                        for name in known_categories(category_type)
                        if name in ctx.stats.present_categories(category_type)
                    ),
                    known_total,
                ),
                tiers=(AchievementTier(AchievementRarity.LEGENDARY, 250),),
            ),
            AchievementRule(
                rule_id="consistent_category_champion",
                title="일관성 챔피언",
                description=f"{self.consistent_min_weeks}주 이상 꾸준히 이어온 카테고리가 3개 이상이에요",
                type=AchievementType.CONSISTENCY,
                measure=lambda ctx: (
                    sum(
                        1
                        for weeks in ctx.presence_weeks.values()
                        if weeks >= self.consistent_min_weeks
                    ),
                    3,
                ),
                tiers=(
                    AchievementTier(AchievementRarity.RARE, 50, threshold=5),
                    AchievementTier(AchievementRarity.COMMON, 25),
                ),
                requires_history=True,
            ),
            AchievementRule(
                rule_id="habit_builder",
                title="습관 형성자",
                description=f"한 카테고리를 {self.habit_min_weeks}주 이상 이어왔어요",
                type=AchievementType.CONSISTENCY,
                measure=lambda ctx: (
                    max(ctx.presence_weeks.values(), default=0),
                    self.habit_min_weeks,
                ),
                tiers=(AchievementTier(AchievementRarity.EPIC, 100),),
                requires_history=True,
            ),
            AchievementRule(
                rule_id="consistency_streak",
                title="일관성 연속 기록",
                description=(
                    f"{self.streak_min_categories}개 이상 카테고리를 기록한 주가 연속으로 이어지고 있어요"
                ),
                type=AchievementType.CONSISTENCY,
                measure=lambda ctx: (ctx.streak_weeks, 3),
                tiers=(
                    AchievementTier(AchievementRarity.EPIC, 100, threshold=5),
                    AchievementTier(AchievementRarity.RARE, 50),
                ),
                requires_history=True,
            ),
            AchievementRule(
                rule_id="first_time_explorer",
                title="첫 도전자",
                description="처음으로 새로운 카테고리에 도전했어요",
                type=AchievementType.EXPLORATION,
                measure=lambda ctx: (len(ctx.new_categories), 1),
                tiers=(AchievementTier(AchievementRarity.COMMON, 10),),
                requires_history=True,
            ),
            AchievementRule(
                rule_id="adventure_seeker",
                title="모험가",
                description=f"한 주에 새로운 카테고리 {self.adventure_min}개 이상에 도전했어요",
                type=AchievementType.EXPLORATION,
                measure=lambda ctx: (len(ctx.new_categories), self.adventure_min),
                tiers=(AchievementTier(AchievementRarity.RARE, 50),),
                requires_history=True,
            ),
            AchievementRule(
                rule_id="category_collector",
                title="카테고리 수집가",
                description="대부분의 카테고리를 경험해 봤어요",
                type=AchievementType.EXPLORATION,
                measure=lambda ctx: (ctx.known_tried_ratio, 0.8),
                tiers=(
                    AchievementTier(AchievementRarity.LEGENDARY, 250, threshold=0.95),
                    AchievementTier(AchievementRarity.EPIC, 100),
                ),
            ),
            AchievementRule(
                rule_id="perfect_balance",
                title="완벽한 균형",
                description="모든 카테고리를 고르게 기록했어요",
                type=AchievementType.BALANCE,
                measure=self._balanced_category_measure,
                tiers=(AchievementTier(AchievementRarity.EPIC, 100),),
            ),
            AchievementRule(
                rule_id="harmony_master",
                title="조화의 달인",
                description="높은 다양성과 균형을 함께 달성했어요",
                type=AchievementType.BALANCE,
                measure=lambda ctx: (
                    min(
                        1.0,
                        overall_diversity(ctx.stats) / 0.8,
                        overall_balance(ctx.stats) / 0.6,
                    ),
                    1.0,
                ),
                tiers=(AchievementTier(AchievementRarity.RARE, 50),),
            ),
            AchievementRule(
                rule_id="health_optimizer",
                title="건강 최적화자",
                description="운동과 식단을 알맞은 비율로 충분히 기록했어요",
                type=AchievementType.BALANCE,
                measure=self._health_optimizer_measure,
                tiers=(AchievementTier(AchievementRarity.COMMON, 25),),
            ),
        ]

    def _balanced_category_measure(self, ctx: AchievementContext) -> tuple[float, float]:
        """グループ平均 ±tolerance に収まるカテゴリ数 / 対象カテゴリ数（最低 4）"""
        within = 0
        present = 0
        for category_type in CATEGORY_TYPES:
            counts = [
                count for count in ctx.stats.categories(category_type).values() if count > 0
            ]
            present += len(counts)
            average = mean(counts)
            within += sum(
                1
                for count in counts
                if abs(count - average) <= average * self.balance_tolerance
            )
        return within, max(4, present)

    def _health_optimizer_measure(self, ctx: AchievementContext) -> tuple[float, float]:
        total = ctx.stats.category_total
        exercise_ratio = ctx.stats.exercise_total / total if total else 0.0
        in_band = 1.0 if 0.3 <= exercise_ratio <= 0.7 else 0.0
        volume = min(total / self.optimizer_min_total, 1.0)
        return (in_band + volume) / 2, 1.0

    # ------------------------------------------------------------------

    def _context(
        self, current: WeeklyReport, history: Iterable[WeeklyReport] | None
    ) -> AchievementContext:
        history_reports = [
            report
            for report in recent_history(history or [])
            if report.week_start_date < current.week_start_date
        ]
        reports = [*history_reports, current]

        new_categories: list[tuple[str, CategoryType]] = []
        presence: dict[tuple[str, CategoryType], int] = {}
        tried: set[tuple[str, CategoryType]] = set()
        for category_type in CATEGORY_TYPES:
            seen = set()
            for report in history_reports:
                seen |= report.stats.present_categories(category_type)
            current_names = current.stats.present_categories(category_type)
            new_categories.extend(
                (name, category_type) for name in sorted(current_names - seen)
            )
            for name in sorted(seen | current_names):
                presence[(name, category_type)] = presence_count(
                    reports, name, category_type
                )
            tried |= {
                (name, category_type)
                for name in seen | current_names
                if name in known_categories(category_type)
            }

        return AchievementContext(
            current=current,
            history=history_reports,
            new_categories=new_categories,
            presence_weeks=presence,
            streak_weeks=self._streak(reports),
            known_tried_ratio=len(tried) / len(known_categories()),
        )

    def _streak(self, reports: list[WeeklyReport]) -> int:
        """現在の週から遡って、条件を満たす週が何週連続しているか"""
        streak = 0
        expected_start = None
        for report in reversed(reports):
            if expected_start is not None and (
                expected_start - report.week_start_date > timedelta(days=7)
            ):
                break
            distinct = sum(
                len(report.stats.present_categories(category_type))
                for category_type in CATEGORY_TYPES
            )
            if distinct < self.streak_min_categories:
                break
            streak += 1
            expected_start = report.week_start_date
        return streak

    @safe_with_default(
        "detect category achievements", list, passthrough=(MissingReportError,)
    )
    def detect(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[CategoryAchievement]:
        """解除された実績の一覧（ルール表の順）"""
        current = require(current, "current")
        context = self._context(current, history)
        week = current.week_identifier

        achievements: list[CategoryAchievement] = []
        for rule in self.rules:
            value, target, tier = rule.evaluate(context)
            if tier is None:
                continue

            if rule.rule_id == "first_time_explorer":
                for name, category_type in context.new_categories:
                    achievements.append(
                        CategoryAchievement(
                            id=f"{rule.rule_id}_{name}_{week}",
                            rule_id=rule.rule_id,
                            title=rule.title,
                            description=f"처음으로 {name}에 도전했어요",
                            type=rule.type,
                            rarity=tier.rarity,
                            points=tier.points,
                            achieved_at=current.generated_at,
                            metadata={
                                "category": name,
                                "category_type": category_type.value,
                            },
                        )
                    )
                continue

            achievements.append(
                CategoryAchievement(
                    id=f"{rule.rule_id}_{week}",
                    rule_id=rule.rule_id,
                    title=rule.title,
                    description=rule.description,
                    type=rule.type,
                    rarity=tier.rarity,
                    points=tier.points,
                    achieved_at=current.generated_at,
                    metadata={"value": value, "target": target},
                )
            )

        if achievements:
            self.logger.info(
                "Category achievements unlocked",
                week=week,
                achievements=[item.id for item in achievements],
            )
        return achievements

    @safe_with_default(
        "compute achievement progress", list, passthrough=(MissingReportError,)
    )
    def get_achievement_progress(
        self,
        current: WeeklyReport,
        history: Iterable[WeeklyReport] | None = None,
    ) -> list[AchievementProgress]:
        """未解除の各ルールについて current / target を返す"""
        current = require(current, "current")
        context = self._context(current, history)

        progress: list[AchievementProgress] = []
        for rule in self.rules:
            value, target, tier = rule.evaluate(context)
            if tier is not None:
                continue
            progress.append(
                AchievementProgress(
                    rule_id=rule.rule_id,
                    title=rule.title,
                    type=rule.type,
                    current_value=value,
                    target_value=target,
                    progress=clamp(value / target) if target else 0.0,
                )
            )
        return progress


def achievement_points(achievements: Iterable[CategoryAchievement]) -> int:
    """実績ポイントの合計"""
    return sum(item.points for item in achievements)

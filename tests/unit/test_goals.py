"""Tests for category goal generation and progress tracking"""

from datetime import datetime

import pytest

from src.category_analytics.categories import DIET_CATEGORIES, EXERCISE_CATEGORIES
from src.category_analytics.exceptions import MissingReportError
from src.category_analytics.goals import (
    CategoryGoalService,
    current_streak,
    difficulty_for_gap,
    difficulty_for_weeks,
)
from src.category_analytics.models import (
    CategoryGoal,
    GoalDifficulty,
    GoalSummary,
    GoalType,
)


def test_difficulty_helpers():
    assert difficulty_for_gap(1) == GoalDifficulty.EASY
    assert difficulty_for_gap(2) == GoalDifficulty.MEDIUM
    assert difficulty_for_gap(3) == GoalDifficulty.HARD
    assert difficulty_for_gap(5) == GoalDifficulty.EXPERT
    assert difficulty_for_weeks(4) == GoalDifficulty.HARD


def test_current_streak():
    assert current_streak([]) == 0
    assert current_streak([1, 0, 2, 3]) == 2
    assert current_streak([1, 1, 0]) == 0


class TestDynamicGoals:
    """目標の自動生成"""

    def test_goals_without_history(self, make_report):
        report = make_report(0, exercise={"근력 운동": 3})

        goals = CategoryGoalService().generate_dynamic_goals(report)

        assert [goal.type for goal in goals] == ["diversity", "exploration", "balance"]
        diversity = goals[0]
        # 履歴の平均 3 + 2
        assert diversity.target_value == 5
        assert diversity.created_at == report.generated_at
        assert goals[1].target_value == 3
        assert goals[2].base_points == 30

    def test_consistency_goal_from_history(self, make_report):
        history = [make_report(week, exercise={"근력 운동": 1}) for week in range(2)]
        current = make_report(
            2, exercise={"근력 운동": 1}, diet={"집밥/도시락": 1}
        )

        goals = CategoryGoalService().generate_dynamic_goals(current, history)
        consistency = [goal for goal in goals if goal.type == GoalType.CONSISTENCY]

        assert len(consistency) == 1
        goal = consistency[0]
        assert goal.target_categories == ["근력 운동"]
        assert goal.current_value == 3
        assert goal.target_value == 4
        assert goal.progress == pytest.approx(0.75)
        assert goal.difficulty == GoalDifficulty.HARD

    def test_missing_current_raises(self):
        with pytest.raises(MissingReportError):
            CategoryGoalService().generate_dynamic_goals(None)  # type: ignore[arg-type]


class TestGoalProgress:
    """進捗の更新"""

    def test_diversity_goal_progress(self, make_report):
        service = CategoryGoalService()
        start = make_report(0, exercise={"근력 운동": 1, "유산소 운동": 1}, diet={"집밥/도시락": 1})
        goal = service.generate_dynamic_goals(start)[0]

        assert goal.target_value == 5
        assert goal.progress == pytest.approx(0.6)
        assert not goal.is_completed

        finished = make_report(
            1,
            exercise={"근력 운동": 1, "유산소 운동": 1, "댄스/무용": 1},
            diet={"집밥/도시락": 1, "건강식/샐러드": 1},
        )
        updated = service.update_goal_progress(goal, finished)

        assert updated.progress == 1.0
        assert updated.is_completed
        assert updated.completed_at == finished.generated_at
        assert updated.total_points == goal.total_points
        # 元の目標は変更されない
        assert not goal.is_completed

    def test_explicit_completion_time(self, make_report):
        service = CategoryGoalService()
        goal = service.generate_dynamic_goals(make_report(0, exercise={"근력 운동": 1}))[0]
        now = datetime(2024, 3, 14, 9, 30)

        report = make_report(
            1,
            exercise={"근력 운동": 1, "유산소 운동": 1, "야외 활동": 1},
            diet={"집밥/도시락": 1, "외식/배달": 1},
        )
        updated = service.update_goal_progress(goal, report, now=now)

        assert updated.completed_at == now

    def test_completed_goal_is_unchanged(self, make_report):
        service = CategoryGoalService()
        goal = CategoryGoal(
            id="done",
            title="done",
            type=GoalType.DIVERSITY,
            target_value=2,
            current_value=2,
            progress=1.0,
            is_completed=True,
            created_at=datetime(2024, 3, 1),
            completed_at=datetime(2024, 3, 2),
        )

        assert service.update_goal_progress(goal, make_report(0)) is goal

    def test_consistency_goal_completes_next_week(self, make_report):
        service = CategoryGoalService()
        history = [make_report(week, exercise={"근력 운동": 1}) for week in range(2)]
        current = make_report(2, exercise={"근력 운동": 1})
        goal = next(
            goal
            for goal in service.generate_dynamic_goals(current, history)
            if goal.type == GoalType.CONSISTENCY
        )

        updated = service.update_goal_progress(goal, make_report(3, exercise={"근력 운동": 2}))
        broken = service.update_goal_progress(goal, make_report(3, diet={"간식/음료": 1}))

        assert updated.current_value == 4
        assert updated.is_completed
        assert broken.current_value == 0.0
        assert not broken.is_completed

    def test_balance_goal_progress(self, make_report):
        service = CategoryGoalService()
        goal = service.generate_dynamic_goals(make_report(0, exercise={"근력 운동": 4}))[-1]
        assert goal.type == GoalType.BALANCE

        balanced = make_report(1, exercise={"근력 운동": 2}, diet={"집밥/도시락": 2})

        assert service.update_goal_progress(goal, balanced).is_completed


class TestTargetsAndChallenges:
    """多様性ターゲット・継続目標・探索チャレンジ"""

    def test_default_diversity_target(self, make_report):
        target = CategoryGoalService().create_diversity_target(
            make_report(0, exercise={"근력 운동": 1})
        )

        assert target.exercise_target == 3
        assert target.diet_target == 3
        assert target.total_target == 6
        assert target.target_diversity_score == 0.7
        assert not target.is_achieved

    def test_consistency_goals_window(self, make_report):
        history = [
            make_report(0, diet={"간식/음료": 1}),
            make_report(1, exercise={"근력 운동": 1}, diet={"집밥/도시락": 1, "간식/음료": 1}),
            make_report(2, exercise={"근력 운동": 1, "유산소 운동": 1}, diet={"집밥/도시락": 1}),
            make_report(3, exercise={"근력 운동": 1, "유산소 운동": 1}),
        ]
        current = make_report(4, exercise={"근력 운동": 2}, diet={"집밥/도시락": 1})

        goals = CategoryGoalService().create_consistency_goals(current, history)

        assert [goal.category_name for goal in goals] == ["근력 운동", "집밥/도시락"]
        strength, home = goals
        assert strength.target_weeks == 4
        assert strength.current_weeks == 4
        assert strength.is_achieved
        assert strength.weekly_frequencies == [1, 1, 1, 2]
        assert home.presence_ratio == pytest.approx(0.75)
        assert home.target_weeks == 3
        assert home.current_weeks == 1
        assert not home.is_achieved

    def test_explicit_zero_arguments_are_respected(self, make_report):
        service = CategoryGoalService()
        history = [make_report(week, exercise={"근력 운동": 1}) for week in range(3)]
        current = make_report(3, exercise={"근력 운동": 1})

        # 0 は「未指定」ではない
        assert service.create_consistency_goals(current, history, window_weeks=0) == []
        goals = service.create_consistency_goals(
            make_report(0, diet={"간식/음료": 1}), min_presence=0
        )
        assert [goal.category_name for goal in goals] == ["간식/음료"]

    def test_exploration_challenges(self, make_report):
        challenges = CategoryGoalService().create_exploration_challenges(
            make_report(0, exercise={"근력 운동": 1})
        )
        by_scope = {goal.metadata["scope"]: goal for goal in challenges}

        assert set(by_scope) == {"weekly", "monthly", "exercise", "diet"}
        assert by_scope["weekly"].total_points == 50
        assert by_scope["monthly"].total_points == 300
        assert by_scope["exercise"].target_value == 3
        assert "근력 운동" not in by_scope["exercise"].target_categories

    def test_no_challenges_when_everything_explored(self, make_report):
        report = make_report(
            0,
            exercise={name: 1 for name in EXERCISE_CATEGORIES},
            diet={name: 1 for name in DIET_CATEGORIES},
            exercise_days=6,
            diet_days=6,
        )

        assert CategoryGoalService().create_exploration_challenges(report) == []


class TestGoalSummary:
    """目標の集計"""

    def _goals(self) -> list[CategoryGoal]:
        created = datetime(2024, 3, 10)
        return [
            CategoryGoal(
                id="completed",
                title="completed",
                type=GoalType.DIVERSITY,
                difficulty=GoalDifficulty.MEDIUM,
                target_value=5,
                current_value=5,
                progress=1.0,
                is_completed=True,
                created_at=created,
                completed_at=datetime(2024, 3, 11),
                base_points=20,
            ),
            CategoryGoal(
                id="expired",
                title="expired",
                type=GoalType.EXPLORATION,
                difficulty=GoalDifficulty.EASY,
                target_value=2,
                current_value=1,
                progress=0.5,
                created_at=created,
                expires_at=datetime(2024, 3, 12),
                base_points=10,
            ),
            CategoryGoal(
                id="active",
                title="active",
                type=GoalType.DIVERSITY,
                difficulty=GoalDifficulty.HARD,
                target_value=4,
                created_at=created,
                expires_at=datetime(2024, 3, 20),
                base_points=20,
            ),
        ]

    def test_summary(self):
        summary = CategoryGoalService().get_goal_summary(
            self._goals(), now=datetime(2024, 3, 15)
        )

        assert summary.total_goals == 3
        assert summary.completed_goals == 1
        assert summary.expired_goals == 1
        assert summary.active_goals == 1
        assert summary.overall_progress == pytest.approx(0.5)
        assert summary.total_points_earned == 30
        assert summary.total_points_possible == 70
        assert summary.goals_by_type == {"diversity": 2, "exploration": 1}
        assert summary.goals_by_difficulty == {"medium": 1, "easy": 1, "hard": 1}
        assert summary.completion_rate == pytest.approx(1 / 3)
        assert summary.success_rate == pytest.approx(0.5)

    def test_summary_defaults_to_latest_creation_time(self):
        summary = CategoryGoalService().get_goal_summary(self._goals())

        assert summary.expired_goals == 0
        assert summary.active_goals == 2
        assert summary.success_rate == 1.0

    def test_empty_summary(self):
        assert CategoryGoalService().get_goal_summary([]) == GoalSummary()

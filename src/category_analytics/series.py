"""
週次レポート系列のヘルパー

トレンド分析・予測・相関で共通に使う並べ替えとカテゴリ抽出、
ゼロ除算を避ける小さな統計関数
"""

from collections.abc import Iterable, Sequence

import numpy as np

from .exceptions import require
from .models import CategoryType, WeeklyReport

CATEGORY_TYPES: tuple[CategoryType, CategoryType] = (
    CategoryType.EXERCISE,
    CategoryType.DIET,
)


def sort_reports(reports: Iterable[WeeklyReport | None]) -> list[WeeklyReport]:
    """week_start_date の昇順に並べる（None は除外）"""
    return sorted(
        (report for report in reports if report is not None),
        key=lambda report: report.week_start_date,
    )


def recent_history(
    history: Iterable[WeeklyReport | None], max_weeks: int | None = None
) -> list[WeeklyReport]:
    """直近 max_weeks 週の履歴を昇順で返す"""
    ordered = sort_reports(history)
    if max_weeks is not None and max_weeks >= 0:
        ordered = ordered[len(ordered) - max_weeks :] if max_weeks else []
    return ordered


def build_series(
    current: WeeklyReport | None,
    history: Iterable[WeeklyReport | None] | None,
    max_weeks: int | None = None,
) -> list[WeeklyReport]:
    """履歴（昇順）の末尾に現在の週を付けた系列"""
    current = require(current, "current")
    return [*recent_history(history or [], max_weeks), current]


def category_names(
    reports: Iterable[WeeklyReport], category_type: CategoryType | str
) -> list[str]:
    """系列に出現したカテゴリ名（名前順）"""
    names: set[str] = set()
    for report in reports:
        names.update(report.stats.categories(category_type))
    return sorted(names)


def category_series(
    reports: Iterable[WeeklyReport], name: str, category_type: CategoryType | str
) -> list[int]:
    """カテゴリの週ごとの件数"""
    return [report.stats.count(name, category_type) for report in reports]


def category_totals(
    reports: Iterable[WeeklyReport], category_type: CategoryType | str
) -> dict[str, int]:
    """カテゴリ別の累計件数"""
    totals: dict[str, int] = {}
    for report in reports:
        for name, count in report.stats.categories(category_type).items():
            totals[name] = totals.get(name, 0) + count
    return totals


def weekly_totals(reports: Iterable[WeeklyReport]) -> list[int]:
    """週ごとのカテゴリ件数の合計"""
    return [report.stats.category_total for report in reports]


def presence_count(
    reports: Iterable[WeeklyReport], name: str, category_type: CategoryType | str
) -> int:
    """カテゴリが登場した週の数"""
    return sum(1 for report in reports if report.stats.count(name, category_type) > 0)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    if not denominator:
        return default
    return numerator / denominator


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    if np.isnan(value):
        return lower
    return float(min(upper, max(lower, value)))


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.mean(values))


def population_std(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    return float(np.std(values))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """変動係数（平均 0 なら 0）"""
    average = mean(values)
    if average == 0:
        return 0.0
    return population_std(values) / average

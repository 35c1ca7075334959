"""
共通フィクスチャと収集設定。

- テスト向けの環境変数を毎テスト自動設定（autouse）
- 設定キャッシュを毎テストでクリア
- ルートを `sys.path` に追加して `import src.*` を解決
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from datetime import date, timedelta
from pathlib import Path

import pytest

# プロジェクトルート（このファイルの親の親）をパスに追加
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from src.category_analytics.models import WeeklyReport, WeeklyStats  # noqa: E402
from src.config import clear_settings_cache  # noqa: E402

# 基準の週（月曜日）
BASE_WEEK = date(2024, 3, 4)


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """テスト用の環境変数を毎テストで設定。

    各テスト終了時に `monkeypatch` により自動で復元されます。
    """

    env: dict[str, str] = {
        "ENVIRONMENT": "testing",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "console",
    }

    for k, v in env.items():
        monkeypatch.setenv(k, v)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_report() -> Callable[..., WeeklyReport]:
    """週番号とカテゴリマップから WeeklyReport を作るファクトリ。"""

    def _make(
        week: int = 0,
        exercise: dict[str, int] | None = None,
        diet: dict[str, int] | None = None,
        *,
        start: date | None = None,
        exercise_days: int | None = None,
        diet_days: int | None = None,
    ) -> WeeklyReport:
        exercise = exercise or {}
        diet = diet or {}
        week_start = start or BASE_WEEK + timedelta(weeks=week)
        return WeeklyReport(
            id=f"report-{week_start.isoformat()}",
            user_uuid="user-1",
            week_start_date=week_start,
            stats=WeeklyStats(
                total_certifications=sum(exercise.values()) + sum(diet.values()),
                exercise_days=(
                    min(7, len(exercise)) if exercise_days is None else exercise_days
                ),
                diet_days=min(7, len(diet)) if diet_days is None else diet_days,
                exercise_categories=exercise,
                diet_categories=diet,
            ),
        )

    return _make

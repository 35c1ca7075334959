"""Test configuration module"""

from pathlib import Path

from src.config import get_settings, override_settings


def test_config_import(monkeypatch) -> None:
    """設定が環境変数から正しく構築されることを検証する。"""
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("TREND_EMERGING_THRESHOLD", "0.7")
    monkeypatch.setenv("LOG_DIR", "/tmp/analytics-logs")

    settings = get_settings(refresh=True)

    assert settings.environment == "testing"
    assert settings.trend_emerging_threshold == 0.7
    assert settings.log_file == Path("/tmp/analytics-logs") / "analytics.log"


def test_defaults() -> None:
    """閾値のデフォルト値。"""
    settings = get_settings()

    assert settings.trend_max_weeks == 8
    assert settings.prediction_max_weeks == 12
    assert settings.prediction_confidence_threshold == 0.6
    assert settings.well_rounded_min_categories == 5


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()
    assert get_settings(refresh=True) is get_settings()


def test_override_settings_restores_previous() -> None:
    original = get_settings()

    with override_settings(well_rounded_min_categories=3) as patched:
        assert get_settings() is patched
        assert patched.well_rounded_min_categories == 3

    assert get_settings() is original
    assert get_settings().well_rounded_min_categories == 5

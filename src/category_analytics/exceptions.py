"""カテゴリ分析の例外"""


class CategoryAnalyticsError(Exception):
    """カテゴリ分析の基底例外"""


class MissingReportError(CategoryAnalyticsError, ValueError):
    """必須の入力（現在の週次レポートや目標）が渡されなかった"""

    def __init__(self, argument: str = "current") -> None:
        self.argument = argument
        super().__init__(f"Required argument '{argument}' is missing")


def require(value, argument: str):
    """None なら MissingReportError を送出して値をそのまま返す"""
    if value is None:
        raise MissingReportError(argument)
    return value

from typing import cast

import structlog


class LoggerMixin:
    """分析サービスにロガーを付与する Mixin"""

    # ログの component フィールドに出力する名前（未指定ならクラス名）
    log_component: str | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Get logger instance for this class"""
        name = self.__class__.__name__
        return cast(
            "structlog.stdlib.BoundLogger",
            structlog.get_logger(name).bind(component=self.log_component or name),
        )

"""
hoverstore 的錯誤處理模組。

定義套件的例外階層，以及集中回報錯誤的 ErrorHandler。
"""
import logging
import traceback as tb
from typing import Any, Callable, Dict, List, Optional

from .types import ErrorInfo

logger = logging.getLogger(__name__)


class HoverStoreError(Exception):
    """所有 hoverstore 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            message: 錯誤訊息。
            details: 與錯誤相關的附加資訊。
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        # 記錄建立錯誤時的呼叫堆疊，去掉 __init__ 本身
        self.traceback = "".join(tb.format_stack()[:-1])

    def to_dict(self) -> ErrorInfo:
        """將錯誤轉為可記錄的字典。"""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": dict(self.details),
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        return self.message


class ActionError(HoverStoreError):
    """與 Action 相關的錯誤。"""

    def __init__(self, message: str, action_type: str, **kwargs: Any) -> None:
        details = {"action_type": action_type}
        details.update(kwargs)
        super().__init__(message, details)
        self.action_type = action_type


class ReentrantActionError(ActionError):
    """在另一個 action 執行期間呼叫同一個 Store 的 action。"""

    def __init__(self, action_type: str, store_name: Optional[str] = None) -> None:
        super().__init__(
            "Cannot call action in the middle of an action",
            action_type,
            store=store_name,
        )


class ErrorHandler:
    """集中式錯誤處理器，用於日誌記錄與錯誤回報。"""

    def __init__(self) -> None:
        self.handlers: List[Callable[[HoverStoreError], Any]] = []

    def register_handler(self, handler: Callable[[HoverStoreError], Any]) -> None:
        """註冊一個錯誤回呼，每次 handle 時都會被呼叫。"""
        self.handlers.append(handler)

    def unregister_handler(self, handler: Callable[[HoverStoreError], Any]) -> None:
        """移除先前註冊的錯誤回呼，不存在時忽略。"""
        if handler in self.handlers:
            self.handlers.remove(handler)

    def handle(self, error: HoverStoreError) -> None:
        """
        記錄錯誤並通知所有已註冊的回呼。

        錯誤本身不會在這裡被吞掉，拋出與否由呼叫端決定。

        Args:
            error: 要回報的錯誤。
        """
        logger.error("%s: %s %s", type(error).__name__, error.message, error.details)
        for handler in list(self.handlers):
            handler(error)


# 單例錯誤處理器
global_error_handler = ErrorHandler()

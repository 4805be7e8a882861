"""
hoverstore：極簡的可呼叫狀態容器。

create_store() 由一組 action 建立 Store，compose() 將多個 Store、
設定函數與靜態值組合成新的 Store。
"""
import logging

from .errors import (
    HoverStoreError, ActionError, ReentrantActionError,
    ErrorHandler, global_error_handler
)
from .store import Store, create_store
from .compose import ComposedStore, DefinitionKind, classify, compose
from .config import LoggingConfig, configure_logging

# 函式庫不主動輸出日誌，由應用程式透過 configure_logging 決定
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

# 匯出所有公開 API
__all__ = [
    # Errors
    "HoverStoreError", "ActionError", "ReentrantActionError",
    "ErrorHandler", "global_error_handler",

    # Store
    "Store", "create_store",

    # Compose
    "ComposedStore", "DefinitionKind", "classify", "compose",

    # Config
    "LoggingConfig", "configure_logging",
]

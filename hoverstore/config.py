"""
hoverstore 的日誌設定。

函式庫在匯入時不會安裝任何 handler，需要輸出日誌的應用程式呼叫
configure_logging() 即可。
"""
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "hoverstore"

# configure_logging 安裝的 handler 會帶上這個標記，以便重複設定時替換
_HANDLER_MARK = "_hoverstore_handler"


class LoggingConfig(BaseModel):
    """
    hoverstore 日誌輸出設定。

    屬性:
        level: 日誌等級名稱，例如 "DEBUG"、"WARNING"
        log_to_console: 是否輸出到 stderr
        log_to_file: 是否輸出到檔案
        log_file: 日誌檔案路徑，log_to_file 為 True 時必填
        format: 日誌格式
        date_format: 時間格式
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "WARNING"
    log_to_console: bool = True
    log_to_file: bool = False
    log_file: Optional[str] = None
    format: str = DEFAULT_LOG_FORMAT
    date_format: str = DEFAULT_DATE_FORMAT

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        name = value.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown log level: {value!r}")
        return name

    @model_validator(mode="after")
    def _check_log_file(self) -> "LoggingConfig":
        if self.log_to_file and not self.log_file:
            raise ValueError("log_file is required when log_to_file is enabled")
        return self


def configure_logging(config: Optional[LoggingConfig] = None, **overrides: Any) -> logging.Logger:
    """
    將設定套用到 hoverstore 的套件 logger。

    Args:
        config: 日誌設定，預設使用 LoggingConfig()。
        **overrides: 覆蓋 config 中的個別欄位。

    Returns:
        設定完成的套件 logger。
    """
    if config is None:
        config = LoggingConfig(**overrides)
    elif overrides:
        config = LoggingConfig(**{**config.model_dump(), **overrides})

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(config.level)

    # 移除之前安裝的 handler
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            package_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(config.format, datefmt=config.date_format)
    handlers = []
    if config.log_to_console:
        handlers.append(logging.StreamHandler())
    if config.log_to_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
        package_logger.addHandler(handler)

    return package_logger

"""
hoverstore 測試共用的 pytest fixtures。
"""

import logging

import pytest

from hoverstore import configure_logging, create_store, global_error_handler


def _update(state, value):
    return value


@pytest.fixture
def update_store():
    """提供一個只有 update 動作的 Store。"""
    return create_store({"update": _update})


@pytest.fixture
def make_init_store():
    """建立帶有 init 動作的 Store，init 直接以參數取代狀態。"""
    def factory(name=None):
        return create_store({"init": _update}, name=name)
    return factory


@pytest.fixture(autouse=True)
def reset_error_handlers():
    """避免測試之間共用全域錯誤處理器的回呼。"""
    saved = list(global_error_handler.handlers)
    yield
    global_error_handler.handlers[:] = saved


@pytest.fixture
def reset_logging():
    """測試結束後移除 configure_logging 安裝的 handler。"""
    yield
    configure_logging(log_to_console=False)
    logging.getLogger("hoverstore").setLevel(logging.NOTSET)

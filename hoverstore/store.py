import functools
import inspect
import logging
from typing import Any, Callable, Dict, Generic, Mapping, Optional

from immutables import Map
from reactivex import Subject

from .errors import ReentrantActionError, global_error_handler
from .types import ActionFunction, ActionSource, S, Subscriber, Unsubscribe

logger = logging.getLogger(__name__)


def _collect_actions(source: ActionSource) -> Dict[str, ActionFunction]:
    """
    從動作來源中取出所有可呼叫的成員。

    字典直接取其可呼叫的值；其他物件（實例、子類實例、模組）則走訪
    整個類別階層上的公開成員；模組只取其自身定義的成員。不會寫回 source。

    Args:
        source: 字典、物件實例、類別或模組。

    Returns:
        動作名稱到原始函數的字典。
    """
    if source is None:
        return {}
    if isinstance(source, Mapping):
        return {name: fn for name, fn in source.items() if callable(fn)}
    members = inspect.getmembers(source, callable)
    if inspect.ismodule(source):
        # 模組只取其自身定義的函數，略過從其他模組匯入的名稱
        members = [
            (name, fn) for name, fn in members
            if getattr(fn, "__module__", None) == source.__name__
        ]
    return {name: fn for name, fn in members if not name.startswith("_")}


class Store(Generic[S]):
    """
    狀態容器，保存單一狀態值並在每次 action 後通知訂閱者。

    Store 本身可被呼叫：
        store()            -> 讀取當前狀態
        store(subscriber)  -> 訂閱狀態變更，返回取消訂閱函數
        store.get_state    -> 與 store 為同一個物件
        store.<action>()   -> 執行 action 並返回新狀態
    """

    def __init__(self, source: ActionSource = None, *, name: Optional[str] = None):
        """
        Args:
            source: 動作來源，字典或帶有公開方法的物件。
            name: 用於日誌與 repr 的名稱，可選。
        """
        self._name = name
        # 初始狀態為 None
        self._state: Optional[S] = None
        # 重入保護旗標
        self._in_action = False
        # 訂閱者列表，通知時由 Subject 先取快照再逐一呼叫
        self._state_subject: Subject = Subject()
        self._actions: Map = Map()
        # get_state 與 store 本身是同一個可呼叫物件
        self.get_state = self

        self._expose(
            {key: self._bind_action(key, fn) for key, fn in _collect_actions(source).items()}
        )

    def __call__(self, subscriber: Optional[Subscriber[S]] = None) -> Any:
        """
        讀取狀態或訂閱狀態變更。

        Args:
            subscriber: 可選的訂閱函數，之後每次狀態變更時以新狀態呼叫。

        Returns:
            未提供 subscriber 時返回當前狀態，否則返回取消訂閱函數。
        """
        if subscriber is None:
            return self._state
        return self._subscribe(subscriber)

    def _subscribe(self, subscriber: Subscriber[S]) -> Unsubscribe:
        disposable = self._state_subject.subscribe(on_next=subscriber)
        logger.debug("%r: subscribed %r", self, subscriber)
        # Disposable.dispose 本身即為冪等
        return disposable.dispose

    def _bind_action(self, action_type: str, fn: ActionFunction) -> Callable[..., Any]:
        """將原始動作函數包成綁定到此 Store 的分發函數。"""
        @functools.wraps(fn)
        def action(*args: Any, **kwargs: Any) -> Any:
            return self._dispatch(action_type, fn, *args, **kwargs)

        return action

    def _expose(self, actions: Mapping[str, Callable[..., Any]]) -> None:
        """設定對外公開的 action。Store 的公開屬性只有 get_state，同名的 action 會被遮蔽。"""
        self._actions = Map(actions)
        for key in self._actions:
            if hasattr(type(self), key) or key in self.__dict__:
                logger.warning(
                    "%r: action %r is shadowed by a store attribute", self, key
                )

    def _dispatch(self, action_type: str, fn: ActionFunction, *args: Any, **kwargs: Any) -> Any:
        """
        執行動作函數、更新狀態並同步通知所有訂閱者。

        通知期間重入保護仍然有效，訂閱者內呼叫此 Store 的 action 會失敗。

        Args:
            action_type: 動作名稱，用於日誌與錯誤訊息。
            fn: 接收 (state, *args, **kwargs) 並返回新狀態的函數。

        Returns:
            新的狀態。

        Raises:
            ReentrantActionError: 已有 action 正在執行。
        """
        if self._in_action:
            error = ReentrantActionError(action_type, self._name)
            global_error_handler.handle(error)
            raise error

        self._in_action = True
        try:
            logger.debug("%r: dispatching %s", self, action_type)
            self._state = fn(self._state, *args, **kwargs)
            self._state_subject.on_next(self._state)
        finally:
            self._in_action = False
        return self._state

    def __getattr__(self, name: str) -> Any:
        # 只在一般屬性查找失敗時才會進來
        actions = self.__dict__.get("_actions")
        if actions is not None and name in actions:
            return actions[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self.__dict__.get("_actions", ())))

    def __repr__(self) -> str:
        label = f" {self._name!r}" if self._name else ""
        return f"<{type(self).__name__}{label} actions={sorted(self._actions)}>"


def create_store(source: ActionSource = None, *, name: Optional[str] = None) -> Store:
    """
    創建一個新的 Store 實例。

    Args:
        source: 動作來源，字典、類別實例或模組。
        name: 可選的 Store 名稱。

    Returns:
        Store: 新創建的 Store 實例。
    """
    return Store(source, name=name)

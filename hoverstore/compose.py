"""
由多個 Store、設定函數與靜態值組合出一個新的 Store。

compose() 在建立時走訪一次組合定義，把每個子 Store 的變更接到組合 Store
的重組流程上，並把走訪時遇到的所有 action 以引用方式公開在組合 Store 上。
"""
import functools
import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from immutables import Map

from .store import Store
from .types import Definition, SetState, Transform

logger = logging.getLogger(__name__)

# 子 Store 變更時在組合 Store 上分發的內部動作名稱
REASSEMBLE = "@compose/reassemble"

Resolver = Callable[[], Any]
WriteBack = Optional[Callable[[Any], Any]]


class DefinitionKind(Enum):
    """組合定義節點的種類。"""
    STORE = "store"
    SETUP = "setup"
    LIST = "list"
    TUPLE = "tuple"
    MAPPING = "mapping"
    STATIC = "static"


def classify(value: Any) -> DefinitionKind:
    """
    判斷組合定義節點的種類。

    Store 本身也是可呼叫物件，必須在 SETUP 之前判斷。
    """
    if isinstance(value, Store):
        return DefinitionKind.STORE
    if isinstance(value, list):
        return DefinitionKind.LIST
    if isinstance(value, tuple):
        return DefinitionKind.TUPLE
    if isinstance(value, dict):
        return DefinitionKind.MAPPING
    if callable(value):
        return DefinitionKind.SETUP
    return DefinitionKind.STATIC


class ComposedStore(Store[Any]):
    """
    由組合定義產生的 Store。

    狀態由定義的結構重組而來，再依序套用 transforms。定義中直接列出的
    子 Store 可透過 composed[key] 或 composed.key 取得原物件。
    """

    def __init__(self, definition: Definition, transforms: Iterable[Transform] = (), *, name: Optional[str] = None):
        """
        Args:
            definition: 組合定義，可為單一值、設定函數、Store，或巢狀的 list / tuple / dict。
            transforms: 依序套用在組合結果上的轉換函數。
            name: 可選的 Store 名稱。
        """
        super().__init__(name=name)
        self._transforms = tuple(transforms)
        # 走訪期間子節點的通知只更新槽位，不觸發重組
        self._wired = False
        # 走訪順序中遇到的所有 Store（可重複），用於合併 action
        self._stores: List[Store] = []
        # 已訂閱的子 Store，每個只訂閱一次
        self._subscribed: List[Store] = []

        # 必須在走訪之前取出，走訪時設定函數的槽位可能被寫回
        self._children = Map(self._pass_through(definition))
        self._resolve = self._compile(definition, None)
        self._expose(self._merge_actions())

        self._state = self._assemble()
        self._wired = True
        logger.debug(
            "%r: composed %d store(s) with %d transform(s)",
            self, len(self._subscribed), len(self._transforms),
        )

    def _pass_through(self, definition: Definition) -> Dict[Any, Store]:
        kind = classify(definition)
        if kind in (DefinitionKind.LIST, DefinitionKind.TUPLE):
            entries = enumerate(definition)
        elif kind is DefinitionKind.MAPPING:
            entries = definition.items()
        else:
            return {}
        return {key: value for key, value in entries if isinstance(value, Store)}

    def _compile(self, value: Any, write_back: WriteBack) -> Resolver:
        """
        將定義節點轉為一個返回該節點當前值的函數。

        Args:
            value: 定義節點。
            write_back: 設定函數的值更新時，用來寫回原始容器槽位的函數。

        Returns:
            無參數函數，呼叫時返回此節點當前解析出的值。
        """
        kind = classify(value)

        if kind is DefinitionKind.STORE:
            self._stores.append(value)
            if not any(store is value for store in self._subscribed):
                self._subscribed.append(value)
                value(self._on_child_change)
            # 不帶參數呼叫 Store 即返回其狀態
            return value

        if kind is DefinitionKind.SETUP:
            return self._compile_setup(value, write_back)

        if kind is DefinitionKind.LIST:
            resolvers = [
                self._compile(item, functools.partial(value.__setitem__, index))
                for index, item in enumerate(list(value))
            ]
            return lambda: [resolve() for resolve in resolvers]

        if kind is DefinitionKind.TUPLE:
            # tuple 無法寫回，設定函數的值只存在於組合狀態中
            resolvers = [self._compile(item, None) for item in value]
            if hasattr(value, "_fields"):
                return lambda: type(value)(*(resolve() for resolve in resolvers))
            return lambda: tuple(resolve() for resolve in resolvers)

        if kind is DefinitionKind.MAPPING:
            resolvers = {
                key: self._compile(item, functools.partial(value.__setitem__, key))
                for key, item in list(value.items())
            }
            return lambda: {key: resolve() for key, resolve in resolvers.items()}

        return lambda: value

    def _compile_setup(self, setup: Callable[[SetState], Any], write_back: WriteBack) -> Resolver:
        # 在第一次 set_state 之前，槽位的值為 None
        current = None

        def set_state(value: Any) -> None:
            nonlocal current
            current = value
            if write_back is not None:
                write_back(value)
            self._on_child_change(value)

        setup(set_state)
        return lambda: current

    def _merge_actions(self) -> Dict[str, Callable[..., Any]]:
        """合併走訪到的所有 action，同名時以最後遇到的為準。"""
        merged: Dict[str, Callable[..., Any]] = {}
        for store in self._stores:
            for key, action in store._actions.items():
                if key in merged and merged[key] is not action:
                    logger.debug("%r: action %r overridden by %r", self, key, store)
                merged[key] = action
        if self._transforms:
            merged = {key: self._translate_action(action) for key, action in merged.items()}
        return merged

    def _translate_action(self, action: Callable[..., Any]) -> Callable[..., Any]:
        """包裝子 Store 的 action，使其返回經過轉換後的組合狀態。"""
        @functools.wraps(action)
        def translated(*args: Any, **kwargs: Any) -> Any:
            action(*args, **kwargs)
            return self._state

        return translated

    def _assemble(self) -> Any:
        state = self._resolve()
        for transform in self._transforms:
            state = transform(state)
        return state

    def _reassemble(self, _state: Any) -> Any:
        return self._assemble()

    def _on_child_change(self, _value: Any = None) -> None:
        if self._wired:
            self._dispatch(REASSEMBLE, self._reassemble)

    def __getattr__(self, name: str) -> Any:
        try:
            return super().__getattr__(name)
        except AttributeError:
            children = self.__dict__.get("_children")
            if children is not None and name in children:
                return children[name]
            raise

    def __getitem__(self, key: Any) -> Store:
        try:
            return self._children[key]
        except KeyError:
            raise KeyError(f"{self!r} has no child store at {key!r}") from None

    def __dir__(self):
        names = {key for key in self.__dict__.get("_children", ()) if isinstance(key, str)}
        return sorted(set(super().__dir__()) | names)


def compose(definition: Definition, *transforms: Transform, name: Optional[str] = None) -> ComposedStore:
    """
    將定義組合成一個新的 Store。

    Args:
        definition: 靜態值、設定函數、Store，或任意巢狀的 list / tuple / dict。
        *transforms: 零或多個轉換函數，依序套用在組合結果上。
        name: 可選的 Store 名稱。

    Returns:
        ComposedStore: 組合後的 Store。

    範例:
        >>> counter = create_store({"init": lambda state, value: value})
        >>> app = compose({"counter": counter, "title": "demo"})
        >>> counter.init(1)
        1
        >>> app()
        {'counter': 1, 'title': 'demo'}
    """
    return ComposedStore(definition, transforms, name=name)

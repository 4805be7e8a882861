"""
hoverstore 共用的型別定義模組。

集中定義 TypeVar、回呼函數的 Protocol 與錯誤資訊的 TypedDict，
供 store、compose 與 errors 模組共用。
"""
from typing import Any, Callable, Dict, List, Mapping, TypeVar, Union
from typing_extensions import Protocol, TypedDict

S = TypeVar("S")  # 狀態類型
T = TypeVar("T")  # 轉換後的狀態類型
S_contra = TypeVar("S_contra", contravariant=True)

# 動作函數：接收當前狀態與呼叫者參數，返回下一個狀態
ActionFunction = Callable[..., Any]

# 組合定義：靜態值、設定函數、Store，或巢狀的 list / dict
Definition = Union[Any, List[Any], Dict[Any, Any]]

# 動作來源：字典或任何帶有公開方法的物件
ActionSource = Union[Mapping[str, ActionFunction], Any]


class Subscriber(Protocol[S_contra]):
    """狀態變更時被呼叫的訂閱者。"""

    def __call__(self, state: S_contra) -> Any: ...


class Unsubscribe(Protocol):
    """取消訂閱函數，重複呼叫不會有任何效果。"""

    def __call__(self) -> None: ...


class SetState(Protocol):
    """設定函數收到的回呼，用來寫入其所在槽位的值。"""

    def __call__(self, value: Any) -> None: ...


class SetupFunction(Protocol):
    """位於葉節點的設定函數，在 compose 時被呼叫一次。"""

    def __call__(self, set_state: SetState) -> Any: ...


class Transform(Protocol):
    """組合後狀態的轉換函數。"""

    def __call__(self, state: Any) -> Any: ...


class ErrorInfo(TypedDict):
    """HoverStoreError.to_dict() 的輸出結構。"""

    error_type: str
    message: str
    details: Dict[str, Any]
    traceback: str

import time
from typing import Optional

from pydantic import BaseModel
from hoverstore import create_store


# ====== Model Definition ======
class CounterState(BaseModel):
    count: int = 0
    last_updated: Optional[float] = None


# ====== Actions ======
class CounterActions:
    def reset(self, state, value: int = 0) -> CounterState:
        return CounterState(count=value, last_updated=time.time())

    def increment(self, state: CounterState) -> CounterState:
        return state.model_copy(update={"count": state.count + 1, "last_updated": time.time()})

    def increment_by(self, state: CounterState, amount: int) -> CounterState:
        return state.model_copy(update={"count": state.count + amount, "last_updated": time.time()})

    def decrement(self, state: CounterState) -> CounterState:
        return state.model_copy(update={"count": state.count - 1, "last_updated": time.time()})


# 創建 Store
counter_store = create_store(CounterActions(), name="counter")
counter_store.reset()

# 標籤 Store，直接使用字典定義 actions
label_store = create_store({"rename": lambda state, label: label}, name="label")

from hoverstore import compose, configure_logging
from counter_store import counter_store, label_store

if __name__ == "__main__":
    configure_logging(level="INFO")

    # 組合計數器與標籤，再轉成顯示用的字串
    app = compose(
        {"counter": counter_store, "label": label_store, "unit": "clicks"},
        lambda state: f"{state['label'] or 'counter'}: {state['counter'].count} {state['unit']}",
    )

    # 訂閱狀態變化
    unsubscribe = app(lambda text: print(f"狀態更新: {text}"))

    # 分發 actions，透過組合 Store 轉送
    print("\n==== 開始測試基本操作 ====")
    app.increment()
    app.increment_by(5)
    app.decrement()
    app.rename("visits")
    app.reset(10)

    unsubscribe()

    # 打印最終狀態
    print("\n==== 最終狀態 ====")
    print(app())
    print(counter_store())

"""把回调交给 UI 线程执行。"""
from typing import Any, Callable, Protocol


class Dispatcher(Protocol):
    def call_soon(self, fn: Callable[..., Any], *args: Any) -> None:
        ...


class ImmediateDispatcher:
    """直接在当前线程执行；无界面运行与测试时使用。"""

    def call_soon(self, fn: Callable[..., Any], *args: Any) -> None:
        fn(*args)

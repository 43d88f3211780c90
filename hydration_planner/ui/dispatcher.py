"""Qt 主线程调度：任意线程 emit，回调在主线程的事件循环里执行。"""
from functools import partial
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, Qt, pyqtSignal


class QtDispatcher(QObject):
    """需在主线程创建。"""
    _invoke = pyqtSignal(object)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._invoke.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def call_soon(self, fn: Callable[..., Any], *args: Any) -> None:
        self._invoke.emit(partial(fn, *args))

    def _run(self, call: Callable[[], Any]) -> None:
        call()

"""提醒管理：查看、删除单条、全部清除。"""
from typing import List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from hydration_planner.reminders.models import ReminderRequest
from hydration_planner.reminders.scheduler import ReminderScheduler


class RemindersDialog(QDialog):
    """每次打开、删除后都向通知中心重新查询，不在界面里缓存提醒。"""

    def __init__(self, scheduler: ReminderScheduler, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._scheduler = scheduler
        self._requests: List[ReminderRequest] = []
        self.setup_ui()
        self._reload()

    def setup_ui(self) -> None:
        self.setWindowTitle("提醒")
        self.setMinimumSize(360, 320)
        layout = QVBoxLayout(self)

        self._status = QLabel("加载中...")
        self._status.setWordWrap(True)
        self._status.setStyleSheet("color: gray;")
        layout.addWidget(self._status)

        self._list = QListWidget()
        layout.addWidget(self._list)

        buttons = QHBoxLayout()
        self._btn_delete = QPushButton("删除所选")
        self._btn_delete.clicked.connect(self._delete_selected)
        buttons.addWidget(self._btn_delete)
        self._btn_clear = QPushButton("全部清除")
        self._btn_clear.clicked.connect(self._clear_all)
        buttons.addWidget(self._btn_clear)
        btn_close = QPushButton("关闭")
        btn_close.clicked.connect(self.accept)
        buttons.addWidget(btn_close)
        layout.addLayout(buttons)

    def _reload(self) -> None:
        self._status.setText("加载中...")
        self._scheduler.list_pending().add_done_callback(lambda f: self._show(f.result()))

    def _show(self, requests: List[ReminderRequest]) -> None:
        self._requests = requests
        self._list.clear()
        for request in requests:
            item = QListWidgetItem(f"⏰ 每天 {request.time_label}\n{request.payload_text}")
            item.setData(Qt.ItemDataRole.UserRole, request.id)
            self._list.addItem(item)
        if requests:
            self._status.setText(f"共 {len(requests)} 条提醒")
        else:
            self._status.setText("还没有设置提醒。新增饮水记录时勾选「添加提醒」即可设置。")
        self._btn_delete.setEnabled(bool(requests))
        self._btn_clear.setEnabled(bool(requests))

    def _delete_selected(self) -> None:
        item = self._list.currentItem()
        if item is None:
            return
        self._scheduler.cancel(item.data(Qt.ItemDataRole.UserRole))
        self._reload()

    def _clear_all(self) -> None:
        self._scheduler.cancel_all()
        QMessageBox.information(self, "提醒已清除", "所有提醒都已删除。")
        self._reload()

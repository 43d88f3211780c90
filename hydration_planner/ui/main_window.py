"""主窗口：搜索备注、按日期查看、增删改记录，菜单里导出与提醒管理。"""
from datetime import date
from typing import List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QCalendarWidget,
    QFileDialog,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMenu,
    QMessageBox,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from hydration_planner.config import APP_NAME, EXPORT_FILE_FILTER, WINDOW_HEIGHT, WINDOW_WIDTH
from hydration_planner.entries.models import WaterEntry
from hydration_planner.entries.store import EntryStore
from hydration_planner.export.service import ExportService
from hydration_planner.reminders.scheduler import ReminderScheduler
from hydration_planner.ui.entry_dialog import EntryDialog
from hydration_planner.ui.reminders_dialog import RemindersDialog


def entry_label(entry: WaterEntry) -> str:
    text = f"{entry.amount_label}    {entry.timestamp.strftime('%H:%M')}"
    if entry.note:
        text += f"\n{entry.note}"
    return text


class MainWindow(QWidget):
    """列表只展示 store 当前视图（关键字优先，否则选中日期）。"""

    def __init__(
        self,
        store: EntryStore,
        scheduler: ReminderScheduler,
        export_service: ExportService,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._store = store
        self._scheduler = scheduler
        self._export_service = export_service
        self._visible: List[WaterEntry] = []
        self.setup_ui()
        self._store.subscribe(lambda _entries: self._refresh())
        self._refresh()

    def setup_ui(self) -> None:
        self.setWindowTitle(f"{APP_NAME} - 饮水记录")
        self.resize(WINDOW_WIDTH, WINDOW_HEIGHT)
        layout = QVBoxLayout(self)

        top = QHBoxLayout()
        menu_button = QToolButton()
        menu_button.setText("⋯")
        menu_button.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        menu = QMenu(menu_button)
        menu.addAction("导出", self._on_export)
        menu.addAction("管理提醒", self._on_manage_reminders)
        menu_button.setMenu(menu)
        top.addWidget(menu_button)

        self._search = QLineEdit()
        self._search.setPlaceholderText("搜索备注...")
        self._search.setClearButtonEnabled(True)
        self._search.textChanged.connect(lambda _text: self._refresh())
        top.addWidget(self._search)

        btn_add = QPushButton("＋ 添加")
        btn_add.clicked.connect(self._on_add)
        top.addWidget(btn_add)
        layout.addLayout(top)

        self._calendar = QCalendarWidget()
        self._calendar.selectionChanged.connect(lambda: self._refresh())
        layout.addWidget(self._calendar)

        self._list = QListWidget()
        self._list.itemDoubleClicked.connect(self._on_edit)
        self._list.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self._list.customContextMenuRequested.connect(self._on_list_menu)
        layout.addWidget(self._list)

        btn_delete = QPushButton("删除所选")
        btn_delete.clicked.connect(self._on_delete)
        layout.addWidget(btn_delete)

    def selected_day(self) -> date:
        return self._calendar.selectedDate().toPyDate()

    def _refresh(self) -> None:
        """按当前关键字/日期重新生成列表。"""
        self._visible = self._store.filtered(self._search.text(), self.selected_day())
        self._list.clear()
        for entry in self._visible:
            item = QListWidgetItem(entry_label(entry))
            item.setData(Qt.ItemDataRole.UserRole, entry.id)
            self._list.addItem(item)

    def _current_entry(self) -> Optional[WaterEntry]:
        item = self._list.currentItem()
        if item is None:
            return None
        return self._store.get(item.data(Qt.ItemDataRole.UserRole))

    def _on_add(self) -> None:
        EntryDialog(self._store, self._scheduler, parent=self).exec()

    def _on_edit(self, _item: Optional[QListWidgetItem] = None) -> None:
        entry = self._current_entry()
        if entry is not None:
            EntryDialog(self._store, self._scheduler, entry=entry, parent=self).exec()

    def _on_delete(self) -> None:
        entry = self._current_entry()
        if entry is not None:
            self._store.remove(entry.id)

    def _on_list_menu(self, pos) -> None:
        if self._list.itemAt(pos) is None:
            return
        menu = QMenu(self)
        menu.addAction("编辑", self._on_edit)
        menu.addAction("删除", self._on_delete)
        menu.exec(self._list.mapToGlobal(pos))

    def _on_export(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "导出记录", self._export_service.default_filename, EXPORT_FILE_FILTER
        )
        if not path:
            return
        if self._export_service.export(path):
            QMessageBox.information(self, "导出完成", f"已导出到 {path}")
        else:
            QMessageBox.warning(self, "导出失败", "导出时出了问题，请确认已有记录且目标位置可写。")

    def _on_manage_reminders(self) -> None:
        RemindersDialog(self._scheduler, parent=self).exec()

    def bring_to_front(self) -> None:
        self.showNormal()
        self.raise_()
        self.activateWindow()

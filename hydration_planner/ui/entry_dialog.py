"""新增/编辑饮水记录：时间、饮水量、备注，可顺带设置每日提醒。"""
from datetime import datetime
from typing import Optional

from PyQt6.QtCore import QDateTime, QTime
from PyQt6.QtWidgets import (
    QCheckBox,
    QDateTimeEdit,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QTimeEdit,
    QVBoxLayout,
    QWidget,
)

from hydration_planner.entries.models import WaterEntry, parse_amount
from hydration_planner.entries.store import EntryStore
from hydration_planner.reminders.models import AuthorizationState
from hydration_planner.reminders.scheduler import ReminderScheduler


class EntryDialog(QDialog):
    """entry 为 None 时新增，否则编辑（保留原 ID）。"""

    def __init__(
        self,
        store: EntryStore,
        scheduler: ReminderScheduler,
        entry: Optional[WaterEntry] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._store = store
        self._scheduler = scheduler
        self._entry = entry
        self.setup_ui()
        self._scheduler.check_authorization().add_done_callback(
            lambda f: self._warn_if_not_authorized(f.result())
        )

    @property
    def is_editing(self) -> bool:
        return self._entry is not None

    def setup_ui(self) -> None:
        self.setWindowTitle("编辑" if self.is_editing else "新记录")
        self.setMinimumWidth(340)
        layout = QVBoxLayout(self)

        form = QFormLayout()
        self._date = QDateTimeEdit()
        self._date.setCalendarPopup(True)
        self._date.setDisplayFormat("yyyy-MM-dd HH:mm")
        self._date.setDateTime(self._entry.timestamp if self._entry else QDateTime.currentDateTime())
        form.addRow("日期和时间:", self._date)

        self._amount = QLineEdit()
        self._amount.setPlaceholderText("例如：250")
        if self._entry:
            self._amount.setText(str(int(self._entry.amount_ml)))
        self._amount.textChanged.connect(self._update_save_enabled)
        form.addRow("饮水量 (ml):", self._amount)

        self._note = QPlainTextEdit()
        self._note.setMinimumHeight(80)
        if self._entry:
            self._note.setPlainText(self._entry.note)
        form.addRow("备注:", self._note)

        self._reminder_enabled = QCheckBox("添加提醒")
        self._reminder_time = QTimeEdit(QTime.currentTime())
        self._reminder_time.setDisplayFormat("HH:mm")
        self._reminder_time.setEnabled(False)
        self._reminder_enabled.toggled.connect(self._reminder_time.setEnabled)
        form.addRow(self._reminder_enabled, self._reminder_time)
        layout.addLayout(form)

        buttons = QHBoxLayout()
        btn_cancel = QPushButton("取消")
        btn_cancel.clicked.connect(self.reject)
        buttons.addWidget(btn_cancel)
        self._btn_save = QPushButton("更新" if self.is_editing else "保存")
        self._btn_save.setDefault(True)
        self._btn_save.clicked.connect(self._save)
        buttons.addWidget(self._btn_save)
        layout.addLayout(buttons)
        self._update_save_enabled()

    def _update_save_enabled(self) -> None:
        self._btn_save.setEnabled(bool(self._amount.text().strip()))

    def _warn_if_not_authorized(self, state: AuthorizationState) -> None:
        if state != AuthorizationState.AUTHORIZED:
            QMessageBox.information(
                self,
                "通知权限",
                "提醒功能需要通知权限，请在系统设置中允许本应用发送通知。",
            )

    def _save(self) -> None:
        amount = parse_amount(self._amount.text())
        if amount is None:
            QMessageBox.warning(self, "提示", "请输入有效的饮水量")
            return
        timestamp: datetime = self._date.dateTime().toPyDateTime()
        note = self._note.toPlainText()
        if self._entry:
            entry = WaterEntry(id=self._entry.id, timestamp=timestamp, amount_ml=amount, note=note)
            self._store.update(entry)
        else:
            entry = WaterEntry(timestamp=timestamp, amount_ml=amount, note=note)
            self._store.add(entry)

        if self._reminder_enabled.isChecked():
            reminder_time = self._reminder_time.time().toPyTime()
            parent = self.parentWidget()
            self._scheduler.schedule(reminder_time, amount).add_done_callback(
                lambda f: _show_schedule_result(parent, f.result(), reminder_time, amount)
            )
        self.accept()


def _show_schedule_result(parent: Optional[QWidget], ok: bool, reminder_time, amount: float) -> None:
    if ok:
        QMessageBox.information(
            parent,
            "提醒已添加",
            f"每天 {reminder_time.strftime('%H:%M')} 会提醒你喝 {int(amount)} ml 水。",
        )
    else:
        QMessageBox.warning(parent, "提醒添加失败", "添加提醒时出了问题，请检查通知权限。")

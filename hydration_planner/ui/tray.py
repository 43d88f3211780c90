"""系统托盘：定时从本地通知中心取出到期提醒并展示，菜单提供提醒动作。"""
import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer
from PyQt6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from hydration_planner.config import APP_NAME, REMINDER_POLL_INTERVAL_MS
from hydration_planner.reminders.center import LocalNotificationCenter
from hydration_planner.reminders.models import PresentationOption, ReminderRequest
from hydration_planner.reminders.scheduler import ReminderScheduler

logger = logging.getLogger(__name__)


class ReminderTray(QSystemTrayIcon):
    """托盘图标。最近一条提醒的动作按钮放在右键菜单里。"""

    def __init__(
        self,
        center: LocalNotificationCenter,
        scheduler: ReminderScheduler,
        on_open: Callable[[], None],
        parent: Optional[QObject] = None,
    ):
        icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation)
        super().__init__(icon, parent)
        self._center = center
        self._scheduler = scheduler
        self._on_open = on_open
        self._last: Optional[ReminderRequest] = None
        self._menu = QMenu()
        self._timer = QTimer(self)
        self._timer.timeout.connect(self.check_due)
        self.activated.connect(self._on_activated)
        self.messageClicked.connect(self._open)
        self._rebuild_menu()
        self._update_tooltip()

    def start(self) -> None:
        self.show()
        self._timer.start(REMINDER_POLL_INTERVAL_MS)

    def check_due(self) -> None:
        for request in self._center.collect_due():
            self._present(request)

    def _present(self, request: ReminderRequest) -> None:
        logger.info("Delivering reminder %s", request.id)
        self._last = request
        options = self._scheduler.will_present(request)
        if PresentationOption.BANNER in options:
            self.showMessage(request.content.title, request.content.body)
        if PresentationOption.SOUND in options and request.content.sound:
            QApplication.beep()
        if PresentationOption.BADGE in options:
            self._update_tooltip()
        self._rebuild_menu()

    def _update_tooltip(self) -> None:
        badge = self._center.badge_count
        self.setToolTip(f"{APP_NAME}（{badge} 条未读提醒）" if badge else APP_NAME)

    def _rebuild_menu(self) -> None:
        self._menu.clear()
        self._menu.addAction("打开", lambda: self._open())
        category = self._center.category(self._last.content.category_id) if self._last else None
        if category is not None:
            self._menu.addSeparator()
            for action in category.actions:
                self._menu.addAction(action.title, lambda _checked=False, a=action: self._run_action(a.id, a.foreground))
        self._menu.addSeparator()
        self._menu.addAction("退出", QApplication.quit)
        self.setContextMenu(self._menu)

    def _run_action(self, action_id: str, foreground: bool) -> None:
        if self._last is None:
            return
        self._scheduler.did_receive_action(action_id, self._last)
        if foreground:
            self._open()

    def _open(self) -> None:
        self._center.clear_badge()
        self._update_tooltip()
        self._on_open()

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._open()

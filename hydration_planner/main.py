"""喝水计划入口：创建各组件并交给主窗口与托盘。"""
import logging
import sys

from PyQt6.QtWidgets import QApplication, QMessageBox, QSystemTrayIcon

from hydration_planner import __version__
from hydration_planner.config import APP_NAME, DRINK_ACTION, SNOOZE_ACTION, ensure_dirs
from hydration_planner.entries.plist_file import EntryFile
from hydration_planner.entries.store import EntryStore
from hydration_planner.export.service import ExportService
from hydration_planner.logging_handler import setup_logger
from hydration_planner.reminders.center import LocalNotificationCenter
from hydration_planner.reminders.scheduler import ReminderScheduler
from hydration_planner.ui.dispatcher import QtDispatcher
from hydration_planner.ui.main_window import MainWindow
from hydration_planner.ui.tray import ReminderTray

logger = logging.getLogger(__name__)


def _ask_permission() -> bool:
    answer = QMessageBox.question(
        None,
        "通知权限",
        f"「{APP_NAME}」想在每天设定的时间提醒你喝水，是否允许发送通知？",
    )
    return answer == QMessageBox.StandardButton.Yes


def main() -> None:
    ensure_dirs()
    setup_logger()
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(__version__)
    logger.info("Starting %s %s", APP_NAME, __version__)

    entry_file = EntryFile()
    store = EntryStore(entry_file)
    export_service = ExportService(entry_file)
    center = LocalNotificationCenter(prompt=_ask_permission)
    scheduler = ReminderScheduler(center, QtDispatcher())

    window = MainWindow(store, scheduler, export_service)
    window.setWindowTitle(f"{APP_NAME} {__version__}")

    # 「我喝了」只需打开窗口；「推迟」没有额外效果
    scheduler.on_action(DRINK_ACTION, lambda _request: window.bring_to_front())
    scheduler.on_action(SNOOZE_ACTION, lambda request: logger.info("Snooze chosen for %s", request.id))

    if QSystemTrayIcon.isSystemTrayAvailable():
        tray = ReminderTray(center, scheduler, on_open=window.bring_to_front, parent=app)
        tray.start()
        # 关闭主窗口后托盘继续投递提醒
        app.setQuitOnLastWindowClosed(False)
    else:
        logger.warning("System tray not available, reminders will not be delivered")

    window.show()
    scheduler.request_authorization()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

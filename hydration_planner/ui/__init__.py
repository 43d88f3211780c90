"""主窗口、记录编辑、提醒管理与托盘界面。"""
from hydration_planner.ui.dispatcher import QtDispatcher
from hydration_planner.ui.entry_dialog import EntryDialog
from hydration_planner.ui.main_window import MainWindow
from hydration_planner.ui.reminders_dialog import RemindersDialog
from hydration_planner.ui.tray import ReminderTray

__all__ = [
    "QtDispatcher",
    "EntryDialog",
    "MainWindow",
    "RemindersDialog",
    "ReminderTray",
]

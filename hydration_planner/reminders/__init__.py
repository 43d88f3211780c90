"""喝水提醒：通知授权、每日提醒调度与本地通知中心。"""
from hydration_planner.reminders.center import (
    LocalNotificationCenter,
    NotificationCenter,
    NotificationError,
)
from hydration_planner.reminders.dispatch import Dispatcher, ImmediateDispatcher
from hydration_planner.reminders.models import (
    AuthorizationState,
    CalendarTrigger,
    IntervalTrigger,
    NotificationContent,
    PresentationOption,
    ReminderRequest,
)
from hydration_planner.reminders.scheduler import ReminderScheduler

__all__ = [
    "LocalNotificationCenter",
    "NotificationCenter",
    "NotificationError",
    "Dispatcher",
    "ImmediateDispatcher",
    "AuthorizationState",
    "CalendarTrigger",
    "IntervalTrigger",
    "NotificationContent",
    "PresentationOption",
    "ReminderRequest",
    "ReminderScheduler",
]

"""
喝水提醒调度。

- 所有调度前都重新查询授权状态，不信任缓存
- 同一时间只保留一条每日重复提醒：新提醒注册前清空全部待触发提醒
- 返回的 Future 在 dispatcher（UI 线程）上完成，回调里可以直接更新界面
"""
import logging
import uuid
from concurrent.futures import Future
from datetime import datetime, time
from typing import Callable, Dict, FrozenSet, List, Optional, Union

from hydration_planner.config import (
    DRINK_ACTION,
    REMINDER_BODY,
    REMINDER_CATEGORY,
    REMINDER_ID_PREFIX,
    REMINDER_TITLE,
    SNOOZE_ACTION,
    SNOOZE_MINUTES,
)
from hydration_planner.reminders.center import NotificationCenter
from hydration_planner.reminders.dispatch import Dispatcher, ImmediateDispatcher
from hydration_planner.reminders.models import (
    AuthorizationState,
    CalendarTrigger,
    NotificationAction,
    NotificationCategory,
    NotificationContent,
    PresentationOption,
    ReminderRequest,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[AuthorizationState], None]
ActionHandler = Callable[[ReminderRequest], None]

FOREGROUND_PRESENTATION: FrozenSet[PresentationOption] = frozenset(
    {PresentationOption.BANNER, PresentationOption.SOUND, PresentationOption.BADGE}
)


def water_category() -> NotificationCategory:
    """「我喝了」「推迟 30 分钟」两个动作。"""
    return NotificationCategory(
        id=REMINDER_CATEGORY,
        actions=[
            NotificationAction(id=DRINK_ACTION, title="我喝了", foreground=True),
            NotificationAction(id=SNOOZE_ACTION, title=f"推迟 {SNOOZE_MINUTES} 分钟", foreground=True),
        ],
    )


def build_content(amount_ml: float) -> NotificationContent:
    return NotificationContent(
        title=REMINDER_TITLE,
        body=REMINDER_BODY.format(amount=int(amount_ml)),
        sound=True,
        badge=1,
        category_id=REMINDER_CATEGORY,
    )


def new_reminder_id() -> str:
    return f"{REMINDER_ID_PREFIX}{str(uuid.uuid4()).upper()}"


class ReminderScheduler:
    """通知授权与每日提醒的注册、查询、取消。"""

    def __init__(self, center: NotificationCenter, dispatcher: Optional[Dispatcher] = None):
        self._center = center
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._state = AuthorizationState.NOT_DETERMINED
        self._listeners: List[StateListener] = []
        self._action_handlers: Dict[str, ActionHandler] = {}

    @property
    def authorization_state(self) -> AuthorizationState:
        """最近一次得到的授权状态，仅供界面展示。"""
        return self._state

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _set_state(self, state: AuthorizationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _on_ui(self, source: Future, apply: Callable[[Future], None]) -> None:
        source.add_done_callback(lambda f: self._dispatcher.call_soon(apply, f))

    def request_authorization(self) -> "Future[AuthorizationState]":
        """请求通知权限；授权后注册提醒动作分类。"""
        result: Future = Future()

        def apply(f: Future) -> None:
            error = f.exception()
            if error is not None:
                logger.error("Notification authorization failed: %s", error)
                state = AuthorizationState.DENIED
            elif f.result():
                logger.info("Notification permission granted")
                self._center.set_categories([water_category()])
                state = AuthorizationState.AUTHORIZED
            else:
                logger.info("Notification permission denied")
                state = AuthorizationState.DENIED
            self._set_state(state)
            result.set_result(state)

        self._on_ui(self._center.request_authorization(), apply)
        return result

    def check_authorization(self) -> "Future[AuthorizationState]":
        """向通知中心重新查询授权状态。"""
        result: Future = Future()

        def apply(f: Future) -> None:
            error = f.exception()
            if error is not None:
                logger.error("Cannot query notification authorization: %s", error)
                state = AuthorizationState.NOT_DETERMINED
            else:
                state = AuthorizationState(f.result())
            logger.debug("Notification authorization state: %s", state.value)
            self._set_state(state)
            result.set_result(state)

        self._on_ui(self._center.authorization_state(), apply)
        return result

    def schedule(self, time_of_day: Union[datetime, time], amount_ml: float) -> "Future[bool]":
        """
        在每天 time_of_day 的时、分提醒喝 amount_ml 毫升水。
        未授权时直接返回 False，不会联系通知中心注册；成功注册后之前的提醒全部失效。
        """
        result: Future = Future()

        def on_status(f: Future) -> None:
            status = f.result()
            if status != AuthorizationState.AUTHORIZED:
                logger.warning("Reminder not scheduled, authorization is %s", status.value)
                result.set_result(False)
                return
            try:
                request = ReminderRequest(
                    id=new_reminder_id(),
                    content=build_content(amount_ml),
                    trigger=CalendarTrigger.daily_at(time_of_day),
                )
                self._center.remove_all_pending()
                self._on_ui(self._center.add(request), lambda added: finish(added, request))
            except Exception:
                # 回调里的异常不会传播给调用方，必须在这里结束 result
                logger.exception("Failed to build reminder for %r ml at %s", amount_ml, time_of_day)
                if not result.done():
                    result.set_result(False)

        def finish(f: Future, request: ReminderRequest) -> None:
            error = f.exception()
            if error is not None:
                logger.error("Failed to schedule reminder %s: %s", request.id, error)
                result.set_result(False)
                return
            logger.info("Scheduled daily reminder %s at %s", request.id, request.time_label)
            if logger.isEnabledFor(logging.DEBUG):
                self.list_pending().add_done_callback(lambda p: self._log_pending(p.result()))
            result.set_result(True)

        self.check_authorization().add_done_callback(on_status)
        return result

    def list_pending(self) -> "Future[List[ReminderRequest]]":
        """实时查询通知中心；本地不缓存。"""
        result: Future = Future()

        def apply(f: Future) -> None:
            error = f.exception()
            if error is not None:
                logger.error("Cannot list pending reminders: %s", error)
                result.set_result([])
                return
            result.set_result(list(f.result()))

        self._on_ui(self._center.pending_requests(), apply)
        return result

    def cancel_all(self) -> None:
        self._center.remove_all_pending()
        logger.info("Cancelled all reminders")

    def cancel(self, reminder_id: str) -> None:
        self._center.remove_pending([reminder_id])
        logger.info("Cancelled reminder %s", reminder_id)

    def will_present(self, request: ReminderRequest) -> FrozenSet[PresentationOption]:
        """应用在前台时也完整展示：横幅、声音、角标。"""
        return FOREGROUND_PRESENTATION

    def on_action(self, action_id: str, handler: ActionHandler) -> None:
        self._action_handlers[action_id] = handler

    def did_receive_action(self, action_id: str, request: ReminderRequest) -> None:
        """用户点了通知上的按钮。"""
        logger.info("Notification action %s on reminder %s", action_id, request.id)
        handler = self._action_handlers.get(action_id)
        if handler is None:
            logger.debug("No handler for notification action %s", action_id)
            return
        handler(request)

    def _log_pending(self, requests: List[ReminderRequest]) -> None:
        logger.debug("Pending reminders (%d):", len(requests))
        for index, request in enumerate(requests, start=1):
            logger.debug(
                "  %d. %s kind=%s time=%s repeats=%s title=%r body=%r",
                index,
                request.id,
                request.trigger.kind,
                request.time_label,
                request.repeats,
                request.content.title,
                request.content.body,
            )

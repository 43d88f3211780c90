"""
通知中心：授权、分类、待触发提醒的注册与查询。

NotificationCenter 是系统通知能力的接口，所有可能耗时的调用都返回 Future，
结果由调用方自行切回 UI 线程。LocalNotificationCenter 是进程内实现：
状态保存在 data/notifications/notifications.json，由托盘定时调用 collect_due 投递。
"""
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from hydration_planner.config import NOTIFICATIONS_DIR
from hydration_planner.reminders.models import (
    AuthorizationState,
    NotificationCategory,
    ReminderRequest,
)

logger = logging.getLogger(__name__)

PermissionPrompt = Callable[[], bool]


class NotificationError(Exception):
    """通知中心拒绝或无法完成请求。"""


def completed(value) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


def failed(error: BaseException) -> Future:
    future: Future = Future()
    future.set_exception(error)
    return future


class NotificationCenter(ABC):
    """系统通知能力。提醒的生命周期完全归通知中心所有。"""

    @abstractmethod
    def request_authorization(self) -> "Future[bool]":
        """请求通知权限，结果为是否授权。只会真正询问用户一次。"""

    @abstractmethod
    def authorization_state(self) -> "Future[AuthorizationState]":
        """查询当前授权状态。"""

    @abstractmethod
    def set_categories(self, categories: Iterable[NotificationCategory]) -> None:
        """注册通知动作分类（覆盖之前的）。"""

    @abstractmethod
    def add(self, request: ReminderRequest) -> "Future[None]":
        """注册一条提醒；同 ID 的旧提醒被替换。"""

    @abstractmethod
    def pending_requests(self) -> "Future[List[ReminderRequest]]":
        """列出全部待触发提醒。"""

    @abstractmethod
    def remove_pending(self, ids: Iterable[str]) -> None:
        """按 ID 移除待触发提醒。"""

    @abstractmethod
    def remove_all_pending(self) -> None:
        """移除全部待触发提醒。"""


class CenterState(BaseModel):
    """本地通知中心持久化的内容。"""
    authorization: AuthorizationState = Field(AuthorizationState.NOT_DETERMINED)
    categories: List[NotificationCategory] = Field(default_factory=list)
    pending: List[ReminderRequest] = Field(default_factory=list)
    badge: int = Field(0, ge=0, description="当前角标数")


class LocalNotificationCenter(NotificationCenter):
    """进程内通知中心；同步完成所有调用，返回已完成的 Future。"""
    _filename = "notifications.json"

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        prompt: Optional[PermissionPrompt] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.data_dir = data_dir or NOTIFICATIONS_DIR
        self._prompt = prompt
        self._now = now
        self._state = self._load()
        # 只投递启动之后到期的提醒
        self._last_checked = self._now()

    def _path(self) -> Path:
        return self.data_dir / self._filename

    def _load(self) -> CenterState:
        path = self._path()
        if not path.exists():
            return CenterState()
        try:
            # 按字节交给 pydantic 解析，编码错误同样按校验失败处理
            return CenterState.model_validate_json(path.read_bytes())
        except (OSError, ValidationError, ValueError) as e:
            logger.error("Failed to load notification state from %s: %s", path, e)
            return CenterState()

    def _save(self) -> bool:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(self._path(), "w", encoding="utf-8") as f:
                f.write(self._state.model_dump_json(indent=2))
        except OSError as e:
            logger.error("Failed to save notification state to %s: %s", self._path(), e)
            return False
        return True

    def set_prompt(self, prompt: Optional[PermissionPrompt]) -> None:
        self._prompt = prompt

    def request_authorization(self) -> "Future[bool]":
        if self._state.authorization != AuthorizationState.NOT_DETERMINED:
            return completed(self._state.authorization == AuthorizationState.AUTHORIZED)
        if self._prompt is None:
            return failed(NotificationError("No way to ask the user for notification permission"))
        try:
            granted = bool(self._prompt())
        except RuntimeError as e:
            return failed(NotificationError(f"Permission prompt failed: {e}"))
        self._state.authorization = AuthorizationState.AUTHORIZED if granted else AuthorizationState.DENIED
        self._save()
        return completed(granted)

    def authorization_state(self) -> "Future[AuthorizationState]":
        return completed(self._state.authorization)

    def set_authorization(self, state: AuthorizationState) -> None:
        """用户在设置中修改权限。"""
        self._state.authorization = state
        self._save()

    def categories(self) -> List[NotificationCategory]:
        return list(self._state.categories)

    def set_categories(self, categories: Iterable[NotificationCategory]) -> None:
        self._state.categories = list(categories)
        self._save()

    def category(self, category_id: Optional[str]) -> Optional[NotificationCategory]:
        return next((c for c in self._state.categories if c.id == category_id), None)

    def add(self, request: ReminderRequest) -> "Future[None]":
        if self._state.authorization != AuthorizationState.AUTHORIZED:
            return failed(NotificationError("Notifications are not authorized"))
        pending = [r for r in self._state.pending if r.id != request.id]
        pending.append(request)
        previous = self._state.pending
        self._state.pending = pending
        if not self._save():
            self._state.pending = previous
            return failed(NotificationError(f"Cannot store reminder {request.id}"))
        return completed(None)

    def pending_requests(self) -> "Future[List[ReminderRequest]]":
        return completed([r.model_copy(deep=True) for r in self._state.pending])

    def remove_pending(self, ids: Iterable[str]) -> None:
        ids = set(ids)
        self._state.pending = [r for r in self._state.pending if r.id not in ids]
        self._save()

    def remove_all_pending(self) -> None:
        self._state.pending = []
        self._save()

    @property
    def badge_count(self) -> int:
        return self._state.badge

    def clear_badge(self) -> None:
        self._state.badge = 0
        self._save()

    def collect_due(self, now: Optional[datetime] = None) -> List[ReminderRequest]:
        """返回自上次检查以来到期的提醒；不重复的提醒投递后即移除。"""
        now = now or self._now()
        since = self._last_checked
        self._last_checked = now
        due = []
        keep = []
        for request in self._state.pending:
            fire_at = request.next_trigger_date(since)
            if fire_at is not None and fire_at <= now:
                due.append(request)
                if request.repeats:
                    keep.append(request)
            elif fire_at is not None:
                keep.append(request)
        if due or len(keep) != len(self._state.pending):
            self._state.pending = keep
            self._state.badge += sum(r.content.badge or 0 for r in due)
            self._save()
        return due

"""提醒数据模型：授权状态、通知内容、触发器与待触发请求。"""
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class AuthorizationState(str, Enum):
    """通知授权状态。"""
    NOT_DETERMINED = "not_determined"  # 尚未询问
    AUTHORIZED = "authorized"
    DENIED = "denied"


class PresentationOption(str, Enum):
    """应用在前台时通知的展示方式。"""
    BANNER = "banner"
    SOUND = "sound"
    BADGE = "badge"


class NotificationAction(BaseModel):
    """通知上的一个按钮。"""
    id: str = Field(..., description="动作 ID")
    title: str = Field(..., description="按钮文字")
    foreground: bool = Field(False, description="点击后是否打开应用窗口")


class NotificationCategory(BaseModel):
    """一组通知动作。"""
    id: str = Field(..., description="分类 ID")
    actions: List[NotificationAction] = Field(default_factory=list)


class NotificationContent(BaseModel):
    title: str = Field(..., description="标题")
    body: str = Field(..., description="正文")
    sound: bool = Field(True, description="是否播放提示音")
    badge: Optional[int] = Field(None, description="角标增量")
    category_id: Optional[str] = Field(None, description="动作分类 ID")


class CalendarTrigger(BaseModel):
    """按每天的时、分触发（日期部分不参与）。"""
    kind: Literal["calendar"] = "calendar"
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)
    repeats: bool = Field(True, description="是否每天重复")

    @classmethod
    def daily_at(cls, time_of_day: Union[datetime, time]) -> "CalendarTrigger":
        """取 time_of_day 的时、分，丢弃日期。"""
        return cls(hour=time_of_day.hour, minute=time_of_day.minute, repeats=True)

    def _next_after(self, moment: datetime) -> datetime:
        candidate = moment.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= moment:
            candidate += timedelta(days=1)
        return candidate

    def next_trigger_date(self, after: datetime, registered_at: datetime) -> Optional[datetime]:
        if self.repeats:
            return self._next_after(after)
        first = self._next_after(registered_at)
        return first if first > after else None


class IntervalTrigger(BaseModel):
    """注册后经过固定秒数触发。"""
    kind: Literal["interval"] = "interval"
    interval_seconds: float = Field(..., gt=0)
    repeats: bool = False

    def next_trigger_date(self, after: datetime, registered_at: datetime) -> Optional[datetime]:
        step = timedelta(seconds=self.interval_seconds)
        first = registered_at + step
        if first > after:
            return first
        if not self.repeats:
            return None
        elapsed = after - registered_at
        return registered_at + step * (elapsed // step + 1)


ReminderTrigger = Annotated[Union[CalendarTrigger, IntervalTrigger], Field(discriminator="kind")]


class ReminderRequest(BaseModel):
    """注册到通知中心的一条提醒。"""
    id: str = Field(..., description="提醒 ID")
    content: NotificationContent
    trigger: ReminderTrigger
    registered_at: datetime = Field(default_factory=datetime.now, description="注册时间（本地）")

    @property
    def payload_text(self) -> str:
        return self.content.body

    @property
    def hour(self) -> Optional[int]:
        return self.trigger.hour if self.trigger.kind == "calendar" else None

    @property
    def minute(self) -> Optional[int]:
        return self.trigger.minute if self.trigger.kind == "calendar" else None

    @property
    def repeats(self) -> bool:
        return self.trigger.repeats

    @property
    def time_label(self) -> str:
        """形如 "09:05"；按间隔触发的提醒返回间隔描述。"""
        if self.trigger.kind == "calendar":
            return f"{self.trigger.hour:02d}:{self.trigger.minute:02d}"
        return f"{int(self.trigger.interval_seconds)} 秒后"

    def next_trigger_date(self, after: datetime) -> Optional[datetime]:
        return self.trigger.next_trigger_date(after, self.registered_at)

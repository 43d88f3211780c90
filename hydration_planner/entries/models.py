"""饮水记录数据模型。"""
import math
import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


def to_local_naive(value: datetime) -> datetime:
    """带时区的时间转为本地时区的 naive 时间；naive 时间视为本地时间原样返回。"""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class WaterEntry(BaseModel):
    """一条饮水记录。文件中的键名沿用 date / amount。"""
    id: str = Field(default_factory=_new_id, description="唯一 ID，创建后不变")
    timestamp: datetime = Field(..., alias="date", description="饮水时间（本地时间，精确到秒）")
    amount_ml: float = Field(..., alias="amount", description="饮水量 ml")
    note: str = Field("", description="备注，可为空")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        # plist 的 <date> 不带毫秒
        return to_local_naive(value).replace(microsecond=0)

    @property
    def day(self) -> date:
        return self.timestamp.date()

    @property
    def amount_label(self) -> str:
        return f"{int(self.amount_ml)} ml"

    def matches_keyword(self, keyword: str) -> bool:
        """备注是否包含关键字（不区分大小写）。"""
        return keyword.casefold() in self.note.casefold()


def parse_amount(text: str) -> Optional[float]:
    """把输入的饮水量转为数字；空、非数字或不大于 0 时返回 None。"""
    try:
        value = float(text.strip().replace(",", "."))
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value

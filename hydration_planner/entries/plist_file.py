"""饮水记录文件：XML plist，每次整文件覆盖写。"""
import logging
import plistlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from hydration_planner.config import DATA_DIR, ENTRIES_FILE_NAME
from hydration_planner.entries.models import WaterEntry

logger = logging.getLogger(__name__)


def _to_plist_date(value: datetime) -> datetime:
    # 本地时间 -> UTC naive，与原记录文件一致
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_plist_date(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone().replace(tzinfo=None)


class EntryFile:
    """记录文件的读写。读失败视为「没有数据」，写失败只记日志。"""

    def __init__(self, data_dir: Optional[Path] = None, file_name: str = ENTRIES_FILE_NAME):
        self.data_dir = data_dir or DATA_DIR
        self.file_name = file_name

    @property
    def path(self) -> Path:
        return self.data_dir / self.file_name

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> List[WaterEntry]:
        """读取全部记录；文件不存在或无法解析时返回空列表。"""
        if not self.exists():
            return []
        try:
            with open(self.path, "rb") as f:
                items = plistlib.load(f)
        except Exception as e:
            # plistlib 对损坏内容会抛出各种异常（ExpatError、AttributeError 等），一律视为没有数据
            logger.error("Failed to load entries from %s: %s", self.path, e)
            return []
        if not isinstance(items, list):
            logger.error("Unexpected root object in %s: %s", self.path, type(items).__name__)
            return []

        entries = []
        for item in items:
            if not isinstance(item, dict):
                logger.error("Invalid record in %s, treating file as empty: %r", self.path, item)
                return []
            # 只要有一条记录不合法，整份文件都不采用
            record = dict(item)
            try:
                if isinstance(record.get("date"), datetime):
                    record["date"] = _from_plist_date(record["date"])
                entries.append(WaterEntry.model_validate(record))
            except (ValidationError, ValueError, OverflowError) as e:
                logger.error("Invalid entry %r in %s, treating file as empty: %s", record.get("id"), self.path, e)
                return []
        return entries

    def save(self, entries: Iterable[WaterEntry]) -> bool:
        """整文件覆盖写入。成功返回 True。"""
        items = []
        for entry in entries:
            items.append({
                "id": entry.id,
                "date": _to_plist_date(entry.timestamp),
                "amount": float(entry.amount_ml),
                "note": entry.note,
            })
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "wb") as f:
                plistlib.dump(items, f, fmt=plistlib.FMT_XML, sort_keys=True)
            tmp_path.replace(self.path)
        except (OSError, TypeError, OverflowError) as e:
            logger.error("Failed to save %d entries to %s: %s", len(items), self.path, e, exc_info=True)
            return False
        logger.debug("Saved %d entries to %s", len(items), self.path)
        return True

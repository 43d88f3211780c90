"""饮水记录存储：内存中的完整列表 + 每次修改后整文件写回。"""
import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Union

from hydration_planner.entries.models import WaterEntry, to_local_naive
from hydration_planner.entries.plist_file import EntryFile

logger = logging.getLogger(__name__)

EntriesListener = Callable[[List[WaterEntry]], None]


def _sort_desc(entries: List[WaterEntry]) -> None:
    entries.sort(key=lambda e: e.timestamp, reverse=True)


class EntryStore:
    """
    饮水记录的唯一持有者。
    只应在 UI 线程上调用；写文件是同步的，写失败时内存与磁盘可能暂时不一致，直到下一次成功写入。
    """

    def __init__(self, entry_file: Optional[EntryFile] = None):
        self._file = entry_file or EntryFile()
        self._entries: List[WaterEntry] = []
        self._listeners: List[EntriesListener] = []
        self.reload()

    @property
    def entry_file(self) -> EntryFile:
        return self._file

    def reload(self) -> None:
        """从文件重新加载（启动时调用一次）。"""
        self._entries = self._file.load()
        _sort_desc(self._entries)
        logger.info("Loaded %d entries from %s", len(self._entries), self._file.path)
        self._publish()

    def subscribe(self, listener: EntriesListener) -> Callable[[], None]:
        """订阅列表变化，返回取消订阅函数。"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def list(self) -> List[WaterEntry]:
        """全部记录，按时间倒序。"""
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[WaterEntry]:
        return next((e for e in self._entries if e.id == entry_id), None)

    def add(self, entry: WaterEntry) -> bool:
        """追加一条记录；ID 已存在时忽略并返回 False。"""
        if self.get(entry.id) is not None:
            logger.warning("Entry with id %s already exists, ignoring add", entry.id)
            return False
        self._entries.append(entry)
        _sort_desc(self._entries)
        self._persist()
        logger.info("Added entry %s: %s at %s", entry.id, entry.amount_label, entry.timestamp)
        return True

    def update(self, entry: WaterEntry) -> bool:
        """按 ID 整条替换；找不到时什么也不做。"""
        for index, existing in enumerate(self._entries):
            if existing.id == entry.id:
                self._entries[index] = entry
                _sort_desc(self._entries)
                self._persist()
                logger.info("Updated entry %s", entry.id)
                return True
        logger.debug("Update ignored, no entry with id %s", entry.id)
        return False

    def remove(self, entry_id: str) -> int:
        """删除所有匹配 ID 的记录，返回删除条数。"""
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        removed = before - len(self._entries)
        self._persist()
        if removed:
            logger.info("Removed entry %s", entry_id)
        return removed

    def filter_by_day(self, day: Union[date, datetime]) -> List[WaterEntry]:
        """与 day 同一天（本地日历）的记录，保持列表顺序。"""
        if isinstance(day, datetime):
            day = to_local_naive(day).date()
        return [e for e in self._entries if e.day == day]

    def filter_by_keyword(self, keyword: str) -> List[WaterEntry]:
        """备注包含关键字（不区分大小写）的记录，保持列表顺序。"""
        return [e for e in self._entries if e.matches_keyword(keyword)]

    def filtered(self, keyword: str, day: Union[date, datetime]) -> List[WaterEntry]:
        """当前视图：关键字非空时按关键字过滤，否则按日期过滤，两者不叠加。"""
        if keyword:
            return self.filter_by_keyword(keyword)
        return self.filter_by_day(day)

    def _persist(self) -> None:
        if not self._file.save(self._entries):
            logger.error("Entries not persisted; in-memory list differs from %s", self._file.path)
        self._publish()

    def _publish(self) -> None:
        snapshot = self.list()
        for listener in list(self._listeners):
            listener(snapshot)

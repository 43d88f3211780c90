"""饮水记录：模型、文件与存储。"""
from hydration_planner.entries.models import WaterEntry
from hydration_planner.entries.plist_file import EntryFile
from hydration_planner.entries.store import EntryStore

__all__ = [
    "WaterEntry",
    "EntryFile",
    "EntryStore",
]

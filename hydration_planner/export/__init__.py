"""导出记录文件。"""
from hydration_planner.export.service import ExportService

__all__ = ["ExportService"]

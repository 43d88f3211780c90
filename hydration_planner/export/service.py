"""导出：把记录文件原样复制到用户选择的位置。"""
import logging
import shutil
from pathlib import Path
from typing import Optional, Union

from hydration_planner.config import EXPORT_CONTENT_TYPE, EXPORT_DEFAULT_FILENAME
from hydration_planner.entries.plist_file import EntryFile

logger = logging.getLogger(__name__)


class ExportService:
    """导出记录文件；任何失败都只返回 False。"""
    content_type = EXPORT_CONTENT_TYPE
    default_filename = EXPORT_DEFAULT_FILENAME

    def __init__(self, entry_file: Optional[EntryFile] = None):
        self._file = entry_file or EntryFile()

    @property
    def source_path(self) -> Path:
        return self._file.path

    def export(self, destination: Union[str, Path]) -> bool:
        """复制到 destination，已存在则覆盖。"""
        dest = Path(destination)
        try:
            if not self.source_path.is_file():
                logger.error("Export failed, no entries file at %s", self.source_path)
                return False
            if dest.resolve() == self.source_path.resolve():
                logger.warning("Export destination is the entries file itself: %s", dest)
                return False
            if dest.exists() or dest.is_symlink():
                dest.unlink()
            shutil.copyfile(self.source_path, dest)
        except OSError as e:
            logger.error("Export to %s failed: %s", dest, e)
            return False
        logger.info("Exported entries to %s", dest)
        return True

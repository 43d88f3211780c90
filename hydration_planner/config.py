"""喝水计划全局配置与路径。"""
from pathlib import Path

APP_NAME = "喝水计划"

# 项目根目录（hydration_planner 包所在目录的上一级）
ROOT_DIR = Path(__file__).resolve().parent.parent
# 数据目录：饮水记录、提醒、日志
DATA_DIR = ROOT_DIR / "data"
NOTIFICATIONS_DIR = DATA_DIR / "notifications"  # 本地通知中心（授权状态、待触发提醒）
LOGS_DIR = DATA_DIR / "logs"

# 饮水记录文件（XML plist，整文件覆盖写）
ENTRIES_FILE_NAME = "waterEntries.xml"

# 导出
EXPORT_DEFAULT_FILENAME = "water_intake.xml"
EXPORT_CONTENT_TYPE = "application/xml"
EXPORT_FILE_FILTER = "XML 文件 (*.xml)"

# 提醒
REMINDER_CATEGORY = "WATER_REMINDER"
DRINK_ACTION = "DRINK_ACTION"
SNOOZE_ACTION = "SNOOZE_ACTION"
SNOOZE_MINUTES = 30
REMINDER_ID_PREFIX = "water-reminder-"
REMINDER_TITLE = "喝水时间到！"
REMINDER_BODY = "为了达成目标，别忘了喝 {amount} ml 水。"
REMINDER_POLL_INTERVAL_MS = 15000

# 窗口默认
WINDOW_WIDTH = 420
WINDOW_HEIGHT = 640

# 日志
LOG_LEVEL = "INFO"
LOG_FILE_NAME = "hydration_planner.log"


def ensure_dirs() -> None:
    """确保数据目录存在。"""
    for d in (DATA_DIR, NOTIFICATIONS_DIR, LOGS_DIR):
        d.mkdir(parents=True, exist_ok=True)

"""日志配置：包级 logger 写文件，可选同时输出到控制台。"""
import logging
from pathlib import Path
from typing import Optional, Union

from hydration_planner.config import LOG_FILE_NAME, LOG_LEVEL, LOGS_DIR

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = "hydration_planner",
    log_file: str = LOG_FILE_NAME,
    level: Union[int, str] = LOG_LEVEL,
    console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """配置并返回包级 logger；重复调用不会重复挂 handler。"""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        log_dir = log_dir or LOGS_DIR
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    return logger

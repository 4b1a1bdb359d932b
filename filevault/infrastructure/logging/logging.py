import logging
import sys
from typing import Optional

from filevault.core.config import Settings, get_settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """设置应用程序的日志记录配置。

    根据传入的配置(未传入时使用全局配置)初始化日志记录器。
    """
    settings = settings or get_settings()

    # 1.获取根日志记录器
    root_logger = logging.getLogger()

    # 2.设置日志级别
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    # 3.日志输出格式定义
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # 4.重复调用时避免叠加多个控制台处理器
    for handler in list(root_logger.handlers):
        if getattr(handler, "_filevault_console", False):
            root_logger.removeHandler(handler)

    # 5.创建控制台处理器并设置格式
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler._filevault_console = True

    # 6.将处理器添加到日志记录器
    root_logger.addHandler(console_handler)

    root_logger.info("日志记录器已初始化，日志级别: %s", settings.log_level)

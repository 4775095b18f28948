import logging
import sys

from core.config import get_settings


def setup_logging() -> None:
    """设置进程的日志记录配置，API进程与缩略图worker进程各调用一次"""
    settings = get_settings()

    # 1.获取根日志记录器并设置日志级别
    root_logger = logging.getLogger()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    # 2.重复调用时不再追加处理器，避免日志重复输出
    if any(getattr(h, "_files_manager", False) for h in root_logger.handlers):
        return

    # 3.日志输出格式定义
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # 4.创建控制台处理器并设置格式
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler._files_manager = True

    # 5.将处理器添加到日志记录器
    root_logger.addHandler(console_handler)

    root_logger.info("日志记录器已初始化，日志级别: %s", settings.log_level)

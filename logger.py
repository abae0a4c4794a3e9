# logger.py
import logging
import os
import platform
import threading
import time
from collections import Counter, deque
from functools import wraps
from logging.handlers import RotatingFileHandler
from typing import Optional

from config import LOG_DIR, LOG_FILE, LOG_LEVEL, APP_NAME

# 工作线程也会写日志，格式中带上线程名方便区分
LOG_FORMAT = '%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s'


def _rotating_handler(path: str, max_mb: int, backups: int, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=max_mb * 1024 * 1024, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    return handler


def setup_logger(log_dir=None, log_file=LOG_FILE, level=getattr(logging, LOG_LEVEL), debug=False):
    """
    创建应用日志器：主日志 + 错误日志（均轮转）+ 控制台。
    CRYPTDECK_LOG_DIR 覆盖日志目录，CRYPTDECK_DEBUG=1 打开调试级别。
    """
    log_dir = log_dir or os.getenv("CRYPTDECK_LOG_DIR", LOG_DIR)
    os.makedirs(log_dir, exist_ok=True)
    debug = debug or os.getenv("CRYPTDECK_DEBUG", "0") == "1"
    file_level = logging.DEBUG if debug else level

    app_logger = logging.getLogger(APP_NAME)
    if app_logger.hasHandlers():
        app_logger.handlers.clear()
    app_logger.setLevel(file_level)
    app_logger.propagate = False

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (
        _rotating_handler(os.path.join(log_dir, log_file), 5, 3, file_level),
        _rotating_handler(os.path.join(log_dir, "error.log"), 2, 2, logging.ERROR),
        console,
    ):
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    app_logger.info(f"{APP_NAME} logger initialized (Python {platform.python_version()}, {platform.platform()})")
    return app_logger


logger = setup_logger()


def log_and_display_error(message: str, exception: Optional[Exception] = None) -> str:
    """记录错误并返回可直接显示在状态栏/对话框中的文字"""
    logger.error(message, exc_info=exception is not None)
    return message


class ErrorTracker:
    """
    按类别统计本次会话中的错误与警告。

    类别通常是 ErrorKind 的取值（wrong_secret、write_failed ...），
    另外保留最近若干条消息，退出时写入日志。
    """

    def __init__(self, keep_recent: int = 20):
        self._lock = threading.Lock()
        self.error_types = Counter()
        self.warning_types = Counter()
        self.recent = deque(maxlen=keep_recent)

    @property
    def error_count(self) -> int:
        return sum(self.error_types.values())

    @property
    def warning_count(self) -> int:
        return sum(self.warning_types.values())

    def track_error(self, error_type: str, message: str, exception: Optional[Exception] = None):
        with self._lock:
            self.error_types[error_type] += 1
            self.recent.append(f"[{error_type}] {message}")
        logger.error(f"[{error_type}] {message}", exc_info=exception is not None)

    def track_warning(self, warning_type: str, message: str):
        with self._lock:
            self.warning_types[warning_type] += 1
        logger.warning(f"[{warning_type}] {message}")

    def get_summary(self) -> dict:
        with self._lock:
            return {
                'total_errors': self.error_count,
                'total_warnings': self.warning_count,
                'error_types': dict(self.error_types),
                'warning_types': dict(self.warning_types),
                'recent': list(self.recent),
            }

    def reset(self):
        with self._lock:
            self.error_types.clear()
            self.warning_types.clear()
            self.recent.clear()


# 全局错误追踪器
error_tracker = ErrorTracker()


def track_error(error_type: str, message: str, exception: Optional[Exception] = None):
    error_tracker.track_error(error_type, message, exception)


def track_warning(warning_type: str, message: str):
    error_tracker.track_warning(warning_type, message)


def get_error_summary() -> dict:
    return error_tracker.get_summary()


def reset_error_tracking():
    error_tracker.reset()


def log_error_summary():
    """会话结束时把错误统计写入日志"""
    summary = get_error_summary()
    if not summary['total_errors'] and not summary['total_warnings']:
        logger.info("会话结束：没有错误或警告")
        return
    logger.info(f"会话结束：{summary['total_errors']} 个错误，{summary['total_warnings']} 个警告")
    for kind, count in sorted(summary['error_types'].items()):
        logger.info(f"  {kind}: {count}")


def log_performance(operation: str, context: str = ""):
    """性能日志装饰器：成功时记录调试级耗时，异常时记录错误并继续抛出"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"性能 [{context}]: {operation} 失败，耗时 {time.perf_counter() - start_time:.3f}秒，错误: {e}")
                raise
            logger.debug(f"性能 [{context}]: {operation} 耗时 {time.perf_counter() - start_time:.3f}秒")
            return result
        return wrapper
    return decorator


def log_user_action(action: str, details: str = "", context: str = ""):
    """记录用户操作（调用方负责不传入密码）"""
    logger.info(f"用户操作 [{context}]: {action}" + (f" - {details}" if details else ""))


def log_system_event(event: str, details: str = "", context: str = ""):
    logger.info(f"系统事件 [{context}]: {event}" + (f" - {details}" if details else ""))

"""
统一日志配置模块

提供结构化日志、文件轮转、耗时记录等功能。
stdio 传输层的 stdout 用于传输消息帧，因此默认输出到 stderr。
"""

import os
import sys
import logging
import orjson
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional, TextIO
from pathlib import Path
from functools import wraps
import time


def _default_log_dir() -> Optional[Path]:
    """日志目录：仅在设置 AZUKI_LOG_DIR 时写文件"""
    value = os.getenv("AZUKI_LOG_DIR")
    return Path(value) if value else None


class JsonFormatter(logging.Formatter):
    """JSON 格式日志（便于日志分析工具解析）"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if hasattr(record, 'request_id'):
            log_data['request_id'] = record.request_id
        if hasattr(record, 'duration_ms'):
            log_data['duration_ms'] = record.duration_ms

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return orjson.dumps(log_data).decode('utf-8')


class ColorFormatter(logging.Formatter):
    """彩色控制台输出"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '')
        # 复制一份，避免颜色码污染其他 handler
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    name: str = 'azuki',
    level: str = 'INFO',
    stream: Optional[TextIO] = None,
    log_dir: Optional[Path] = None,
    json_format: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    配置日志系统

    Args:
        name: 日志器名称
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: 控制台输出流，默认 stderr
        log_dir: 日志文件目录，为 None 时读取 AZUKI_LOG_DIR，仍为空则不写文件
        json_format: 是否使用 JSON 格式
        max_bytes: 单个日志文件最大大小
        backup_count: 保留的日志文件数量

    Returns:
        配置好的 Logger 实例
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    detailed_format = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'
    simple_format = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'

    stream = stream or sys.stderr
    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(logging.DEBUG)
    if json_format:
        console_handler.setFormatter(JsonFormatter())
    elif hasattr(stream, 'isatty') and stream.isatty():
        console_handler.setFormatter(ColorFormatter(simple_format))
    else:
        console_handler.setFormatter(logging.Formatter(simple_format))
    logger.addHandler(console_handler)

    log_dir = log_dir or _default_log_dir()
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_dir / f'{name}.log',
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(detailed_format))
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            log_dir / f'{name}_error.log',
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(detailed_format))
        logger.addHandler(error_handler)

    return logger


def get_logger(name: str = 'azuki') -> logging.Logger:
    """获取已配置的 logger（如果未配置则自动配置）"""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logging(name, level=os.getenv('AZUKI_LOG_LEVEL', 'INFO'))
    return logger


LOGGER_NAMES = ('azuki.api', 'azuki.engine', 'azuki.server')


def set_log_level(level: str, names=LOGGER_NAMES) -> None:
    """统一调整各模块日志器的级别"""
    value = getattr(logging, level.upper(), logging.INFO)
    for name in names:
        get_logger(name).setLevel(value)


def log_execution_time(logger: Optional[logging.Logger] = None):
    """装饰器：记录函数执行时间"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            nonlocal logger
            if logger is None:
                logger = get_logger()

            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                logger.debug(f"{func.__name__} 执行完成, 耗时: {elapsed:.2f}ms")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                logger.error(f"{func.__name__} 执行失败, 耗时: {elapsed:.2f}ms, 错误: {e}")
                raise
        return wrapper
    return decorator


def get_api_logger() -> logging.Logger:
    """获取 API 日志器"""
    return get_logger('azuki.api')


def get_engine_logger() -> logging.Logger:
    """获取引擎日志器"""
    return get_logger('azuki.engine')


def get_server_logger() -> logging.Logger:
    """获取 stdio 服务日志器"""
    return get_logger('azuki.server')

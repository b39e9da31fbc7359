"""
统一日志配置模块

控制台彩色输出、文件轮转、JSON 格式以及耗时记录
"""

import inspect
import os
import sys
import logging
import orjson
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional
from pathlib import Path
from functools import wraps
import time


# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent.parent
LOG_DIR = Path(os.getenv('HSKIME_LOG_DIR', str(PROJECT_ROOT / 'logs')))


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
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '')
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def setup_logging(
    name: str = 'hskime',
    level: str = None,
    log_to_file: bool = None,
    log_to_console: bool = True,
    json_format: bool = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    配置日志系统

    Args:
        name: 日志器名称
        level: 日志级别，默认读 LOG_LEVEL
        log_to_file: 是否写入文件，默认读 HSKIME_LOG_TO_FILE
        log_to_console: 是否输出到控制台
        json_format: 是否使用 JSON 格式，默认读 HSKIME_LOG_JSON
        max_bytes: 单个日志文件最大大小
        backup_count: 保留的日志文件数量

    Returns:
        配置好的 Logger 实例
    """
    level = level or os.getenv('LOG_LEVEL', 'INFO')
    if log_to_file is None:
        log_to_file = _env_flag('HSKIME_LOG_TO_FILE', False)
    if json_format is None:
        json_format = _env_flag('HSKIME_LOG_JSON', False)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # 清除已有 handlers（避免重复添加）
    logger.handlers.clear()

    detailed_format = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'
    simple_format = '%(asctime)s | %(levelname)-8s | %(message)s'

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)

        if json_format:
            console_handler.setFormatter(JsonFormatter())
        elif sys.stdout.isatty():
            console_handler.setFormatter(ColorFormatter(simple_format))
        else:
            console_handler.setFormatter(logging.Formatter(simple_format))

        logger.addHandler(console_handler)

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            LOG_DIR / f'{name}.log',
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        if json_format:
            file_handler.setFormatter(JsonFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(detailed_format))
        logger.addHandler(file_handler)

        # 错误日志单独文件
        error_handler = RotatingFileHandler(
            LOG_DIR / f'{name}_error.log',
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(detailed_format))
        logger.addHandler(error_handler)

    return logger


def get_logger(name: str = 'hskime') -> logging.Logger:
    """获取已配置的 logger（如果未配置则自动配置）"""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logging(name)
    return logger


def log_execution_time(logger: Optional[logging.Logger] = None):
    """装饰器：记录函数执行时间（支持协程函数）"""
    def decorator(func):
        def _log(elapsed, error=None):
            target = logger or get_logger()
            if error is None:
                target.debug(f"{func.__name__} 执行完成, 耗时: {elapsed:.2f}ms")
            else:
                target.error(f"{func.__name__} 执行失败, 耗时: {elapsed:.2f}ms, 错误: {error}")

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _log((time.perf_counter() - start) * 1000, e)
                    raise
                _log((time.perf_counter() - start) * 1000)
                return result
            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log((time.perf_counter() - start) * 1000, e)
                raise
            _log((time.perf_counter() - start) * 1000)
            return result
        return wrapper
    return decorator


# 预配置的日志器
api_logger = None
engine_logger = None


def get_api_logger() -> logging.Logger:
    """获取 API 日志器"""
    global api_logger
    if api_logger is None:
        api_logger = setup_logging('hskime.api')
    return api_logger


def get_engine_logger() -> logging.Logger:
    """获取引擎日志器"""
    global engine_logger
    if engine_logger is None:
        engine_logger = setup_logging('hskime.engine')
    return engine_logger


def set_log_level(level: str):
    """按配置统一调整引擎和 API 日志级别"""
    value = getattr(logging, level.upper(), logging.INFO)
    for logger in (get_engine_logger(), get_api_logger()):
        logger.setLevel(value)

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .errors import ConfigError

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DATA_DIR = PROJECT_ROOT / 'data'
DEFAULT_LEVELS = (1, 2, 3, 4, 5, 6)


@dataclass
class DictionaryConfig:
    """词典服务配置"""
    # 数据来源：data_url 非空时走 HTTP，否则读本地目录
    data_dir: str = str(DEFAULT_DATA_DIR)
    data_url: Optional[str] = None
    file_pattern: str = "hsk{level}.json"
    levels: Tuple[int, ...] = field(default_factory=lambda: DEFAULT_LEVELS)

    # 加载超时（秒），None 表示不限
    load_timeout: Optional[float] = None

    # 返回数量
    suggestion_limit: int = 10
    search_limit: int = 50

    # 联想结果缓存容量，0 表示关闭
    cache_size: int = 512

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "DictionaryConfig":
        """从环境变量读取配置"""
        env = os.environ if environ is None else environ
        config = cls()

        config.data_dir = env.get("HSKIME_DATA_DIR", config.data_dir)
        config.data_url = env.get("HSKIME_DATA_URL") or None
        config.file_pattern = env.get("HSKIME_FILE_PATTERN", config.file_pattern)

        if env.get("HSKIME_LEVELS"):
            config.levels = _parse_levels(env["HSKIME_LEVELS"])
        if env.get("HSKIME_LOAD_TIMEOUT"):
            config.load_timeout = _parse_number("HSKIME_LOAD_TIMEOUT", env["HSKIME_LOAD_TIMEOUT"], float)

        config.suggestion_limit = _parse_number(
            "HSKIME_SUGGESTION_LIMIT", env.get("HSKIME_SUGGESTION_LIMIT", config.suggestion_limit), int
        )
        config.search_limit = _parse_number(
            "HSKIME_SEARCH_LIMIT", env.get("HSKIME_SEARCH_LIMIT", config.search_limit), int
        )
        config.cache_size = _parse_number(
            "HSKIME_CACHE_SIZE", env.get("HSKIME_CACHE_SIZE", config.cache_size), int
        )
        config.log_level = env.get("LOG_LEVEL", config.log_level).upper()
        return config


def _parse_number(name, value, kind):
    try:
        number = kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} 不是合法数字: {value!r}") from None
    if number < 0:
        raise ConfigError(f"{name} 不能为负数: {value!r}")
    return number


def _parse_levels(value: str) -> Tuple[int, ...]:
    """解析 "1,2,3" 形式的等级列表"""
    levels = []
    for part in value.split(','):
        part = part.strip()
        if not part:
            continue
        levels.append(_parse_number("HSKIME_LEVELS", part, int))
    if not levels:
        raise ConfigError(f"HSKIME_LEVELS 为空: {value!r}")
    return tuple(levels)

"""
异常定义
"""


class HskImeError(Exception):
    """hskime 基础异常"""


class ConfigError(HskImeError):
    """配置项无效"""


class LevelSourceError(HskImeError):
    """某个 HSK 等级的词表获取或解析失败"""

    def __init__(self, level: int, reason: str):
        self.level = level
        self.reason = reason
        super().__init__(f"HSK{level} 词表加载失败: {reason}")

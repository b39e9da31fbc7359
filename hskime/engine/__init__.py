from .config import DictionaryConfig
from .errors import HskImeError, ConfigError, LevelSourceError
from .models import DictionaryEntry, SearchResult, MatchType, LoadState, PinyinToken, SuggestionResult
from .text import normalize_pinyin, normalize_text, is_shorthand_query, matches_shorthand
from .cursor import TextBuffer, get_pinyin_at_cursor, insert_hanzi_at_cursor
from .sources import LevelSource, FileLevelSource, HttpLevelSource, create_source
from .loader import DictionaryLoader, build_table
from .matcher import search_hanzi_by_pinyin, search_dictionary, score_entry
from .dictionary import DictionaryService, get_dict_service, reset_dict_service
from .suggest import fetch_hanzi_suggestions
from .logging import setup_logging, set_log_level, get_logger, get_api_logger, get_engine_logger


def create_service(config: DictionaryConfig = None) -> DictionaryService:
    """
    创建字典服务

    Args:
        config: 词典配置（可选，默认从环境变量读取）

    Returns:
        DictionaryService 实例
    """
    config = config or DictionaryConfig.from_env()
    set_log_level(config.log_level)
    return DictionaryService(config=config)


__all__ = [
    # 配置
    'DictionaryConfig',
    'HskImeError',
    'ConfigError',
    'LevelSourceError',
    # 数据模型
    'DictionaryEntry',
    'SearchResult',
    'MatchType',
    'LoadState',
    'PinyinToken',
    'SuggestionResult',
    # 文本
    'normalize_pinyin',
    'normalize_text',
    'is_shorthand_query',
    'matches_shorthand',
    'TextBuffer',
    'get_pinyin_at_cursor',
    'insert_hanzi_at_cursor',
    # 加载
    'LevelSource',
    'FileLevelSource',
    'HttpLevelSource',
    'create_source',
    'DictionaryLoader',
    'build_table',
    # 查询
    'search_hanzi_by_pinyin',
    'search_dictionary',
    'score_entry',
    'DictionaryService',
    'create_service',
    'get_dict_service',
    'reset_dict_service',
    'fetch_hanzi_suggestions',
    # 日志
    'setup_logging',
    'set_log_level',
    'get_logger',
    'get_api_logger',
    'get_engine_logger',
]

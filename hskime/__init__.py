"""
hskime - HSK 拼音输入助手

输入拼音，从 HSK 1-6 级词表联想汉字；附带词典搜索
"""

__version__ = "0.1.0"

from hskime.engine import (
    DictionaryConfig,
    DictionaryService,
    DictionaryLoader,
    DictionaryEntry,
    SearchResult,
    SuggestionResult,
    MatchType,
    LoadState,
    TextBuffer,
    create_service,
    get_dict_service,
    fetch_hanzi_suggestions,
    get_pinyin_at_cursor,
    insert_hanzi_at_cursor,
    normalize_pinyin,
    normalize_text,
)

__all__ = [
    "__version__",
    # 服务
    "DictionaryConfig",
    "DictionaryService",
    "DictionaryLoader",
    "create_service",
    "get_dict_service",
    "fetch_hanzi_suggestions",
    # 数据模型
    "DictionaryEntry",
    "SearchResult",
    "SuggestionResult",
    "MatchType",
    "LoadState",
    # 文本
    "TextBuffer",
    "get_pinyin_at_cursor",
    "insert_hanzi_at_cursor",
    "normalize_pinyin",
    "normalize_text",
]

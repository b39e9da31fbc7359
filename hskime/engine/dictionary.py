"""
字典服务模块

组合加载器、匹配器与联想缓存，对外提供拼音联想和词典搜索
"""

import dataclasses
from typing import Dict, List, Optional

from .cache import LRUCache
from .config import DictionaryConfig
from .loader import DictionaryLoader
from .logging import get_engine_logger, log_execution_time, set_log_level
from .matcher import search_dictionary, search_hanzi_by_pinyin
from .models import LoadState, SearchResult
from .sources import create_source
from .text import normalize_pinyin

logger = get_engine_logger()


class DictionaryService:
    """字典服务主类"""

    def __init__(self, loader: DictionaryLoader = None, config: DictionaryConfig = None):
        self.config = config or DictionaryConfig()
        self.loader = loader or DictionaryLoader(
            create_source(self.config),
            levels=self.config.levels,
            timeout=self.config.load_timeout,
        )
        self.cache = LRUCache(self.config.cache_size)

        # 统计
        self.stats = {'suggest': 0, 'search': 0}

    @property
    def state(self) -> LoadState:
        return self.loader.state

    async def ensure_loaded(self) -> LoadState:
        return await self.loader.ensure_loaded()

    async def search_hanzi_by_pinyin(self, query: str) -> List[SearchResult]:
        """拼音 → 汉字联想；词典不可用时返回空列表"""
        self.stats['suggest'] += 1
        await self.loader.ensure_loaded()
        table = self.loader.table
        if table is None:
            return []

        key = normalize_pinyin(query)
        cached = self.cache.get(key)
        if cached is not None:
            return [dataclasses.replace(r) for r in cached]

        results = search_hanzi_by_pinyin(table, query, limit=self.config.suggestion_limit)
        self.cache.put(key, results)
        logger.debug(f"拼音联想: '{query}' -> {[r.word for r in results[:3]]}")
        return [dataclasses.replace(r) for r in results]

    @log_execution_time(logger)
    async def search_dictionary(self, query: str) -> List[SearchResult]:
        """词典搜索；词典不可用时返回空列表"""
        self.stats['search'] += 1
        await self.loader.ensure_loaded()
        table = self.loader.table
        if table is None:
            return []
        return search_dictionary(table, query, limit=self.config.search_limit)

    def get_stats(self) -> Dict:
        """获取统计"""
        table = self.loader.table
        return {
            'state': self.loader.state.value,
            'entries': len(table) if table is not None else 0,
            'load_attempts': self.loader.fetch_count,
            'last_error': self.loader.last_error,
            'suggest_requests': self.stats['suggest'],
            'search_requests': self.stats['search'],
            'cache_size': len(self.cache),
            'cache_hit_rate': round(self.cache.hit_rate, 3),
        }


# 全局单例
_dict_service: Optional[DictionaryService] = None


def get_dict_service(config: DictionaryConfig = None) -> DictionaryService:
    """获取字典服务单例"""
    global _dict_service
    if _dict_service is None:
        config = config or DictionaryConfig.from_env()
        set_log_level(config.log_level)
        _dict_service = DictionaryService(config=config)
    return _dict_service


def reset_dict_service():
    """丢弃单例（测试用）"""
    global _dict_service
    _dict_service = None

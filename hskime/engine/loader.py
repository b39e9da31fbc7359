"""
词典加载器

并发拉取各等级词表并合并为一张以汉字词为键的表。
同一时刻只有一次加载在进行，失败后下次调用重新加载。
"""

import asyncio
import time
from typing import Dict, Iterable, List, Optional

from .config import DEFAULT_LEVELS
from .logging import get_engine_logger, log_execution_time
from .models import DictionaryEntry, LoadState
from .sources import LevelSource

logger = get_engine_logger()

DictionaryTable = Dict[str, DictionaryEntry]


def build_table(level_batches: Iterable[List[dict]]) -> DictionaryTable:
    """按等级顺序合并词条，后加载的同名词覆盖先加载的"""
    table: DictionaryTable = {}
    for entries in level_batches:
        for raw in entries:
            entry = DictionaryEntry.from_hsk(raw)
            table[entry.word] = entry
    return table


class DictionaryLoader:
    """
    词典加载器

    状态: UNLOADED → LOADING → LOADED / FAILED，FAILED 时可再次加载。
    加载成功后词典表常驻内存，不再刷新。
    """

    def __init__(
        self,
        source: LevelSource,
        levels: Iterable[int] = DEFAULT_LEVELS,
        timeout: Optional[float] = None,
    ):
        self.source = source
        self.levels = tuple(levels)
        self.timeout = timeout

        self._table: Optional[DictionaryTable] = None
        self._pending: Optional[asyncio.Task] = None
        self._state = LoadState.UNLOADED

        # 诊断信息
        self.last_error: Optional[str] = None
        self.fetch_count = 0

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def table(self) -> Optional[DictionaryTable]:
        return self._table

    @property
    def is_loaded(self) -> bool:
        return self._table is not None

    async def ensure_loaded(self) -> LoadState:
        """
        确保词典已加载

        已加载直接返回；加载中则等待同一个任务；否则发起新的加载。
        加载失败不抛异常，调用方通过 table 为 None 判断。
        """
        if self._table is not None:
            return self._state

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load())

        # 调用方被取消时不影响共享的加载任务
        await asyncio.shield(self._pending)
        return self._state

    async def _load(self):
        self._state = LoadState.LOADING
        self.fetch_count += 1
        start = time.perf_counter()

        try:
            table = await self._fetch_all()
            self._table = table
            self._state = LoadState.LOADED
            self.last_error = None
            elapsed = (time.perf_counter() - start) * 1000
            logger.info(f"HSK 词典加载完成: {len(table)} 词条, 等级 {list(self.levels)}, 耗时 {elapsed:.2f}ms")
        except Exception as e:
            self._state = LoadState.FAILED
            self.last_error = f"{type(e).__name__}: {e}"
            logger.error(f"HSK 词典加载失败，下次查询时重试: {self.last_error}")
        finally:
            self._pending = None

    @log_execution_time(logger)
    async def _fetch_all(self) -> DictionaryTable:
        """并发拉取所有等级，任一失败则整体失败"""
        batches = await asyncio.wait_for(
            asyncio.gather(*(self.source.fetch(level) for level in self.levels)),
            timeout=self.timeout,
        )
        return build_table(batches)

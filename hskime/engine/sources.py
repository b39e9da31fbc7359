"""
HSK 词表来源

每个来源按等级返回原始词条列表，本地目录和 HTTP 两种实现。
"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import httpx
import orjson

from .config import DictionaryConfig
from .errors import LevelSourceError


class LevelSource(ABC):
    """词表来源抽象基类"""

    @abstractmethod
    async def fetch(self, level: int) -> List[dict]:
        """获取某一等级的原始词条列表"""
        pass

    async def aclose(self):
        """释放来源持有的资源"""
        pass


class FileLevelSource(LevelSource):
    """从本地目录读取 hsk{level}.json"""

    def __init__(self, data_dir, pattern: str = "hsk{level}.json"):
        self.data_dir = Path(data_dir)
        self.pattern = pattern

    def path_for(self, level: int) -> Path:
        return self.data_dir / self.pattern.format(level=level)

    def _read(self, level: int) -> List[dict]:
        path = self.path_for(level)
        try:
            with open(path, 'rb') as f:
                data = orjson.loads(f.read())
        except (OSError, orjson.JSONDecodeError) as e:
            raise LevelSourceError(level, f"{path}: {e}") from e
        if not isinstance(data, list):
            raise LevelSourceError(level, f"{path}: 顶层不是数组")
        return data

    async def fetch(self, level: int) -> List[dict]:
        return await asyncio.to_thread(self._read, level)


class HttpLevelSource(LevelSource):
    """从 HTTP 地址获取 <base_url>/hsk{level}.json"""

    def __init__(
        self,
        base_url: str,
        pattern: str = "hsk{level}.json",
        timeout: Optional[float] = 30.0,
        client: httpx.AsyncClient = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.pattern = pattern
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    def url_for(self, level: int) -> str:
        return f"{self.base_url}/{self.pattern.format(level=level)}"

    async def fetch(self, level: int) -> List[dict]:
        url = self.url_for(level)
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            data = orjson.loads(resp.content)
        except (httpx.HTTPError, orjson.JSONDecodeError) as e:
            raise LevelSourceError(level, f"{url}: {e}") from e
        if not isinstance(data, list):
            raise LevelSourceError(level, f"{url}: 顶层不是数组")
        return data

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()


def create_source(config: DictionaryConfig) -> LevelSource:
    """按配置选择来源：配置了 data_url 用 HTTP，否则读本地目录"""
    if config.data_url:
        return HttpLevelSource(config.data_url, config.file_pattern)
    return FileLevelSource(config.data_dir, config.file_pattern)

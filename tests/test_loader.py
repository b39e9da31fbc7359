"""
词典加载器测试
"""

import asyncio

import httpx
import orjson
import pytest

from hskime.engine.errors import LevelSourceError
from hskime.engine.loader import DictionaryLoader, build_table
from hskime.engine.models import DictionaryEntry, LoadState
from hskime.engine.sources import FileLevelSource, HttpLevelSource, LevelSource, create_source
from hskime.engine.config import DictionaryConfig

from conftest import HSK_LEVELS, FakeSource, hsk_entry


class TestBuildTable:
    """词条合并"""

    def test_entry_shape(self, table):
        """原始词条转换为 DictionaryEntry"""
        entry = table["你好"]
        assert entry == DictionaryEntry(
            word="你好",
            pinyin="nǐ hǎo",
            meaning=("hello",),
            example="你好！ (nǐ hǎo!) - Hello!",
        )

    def test_missing_example(self, table):
        """没有例句时 example 为 None"""
        assert table["女儿"].example is None

    def test_later_level_overwrites(self, table):
        """高等级覆盖同名词条"""
        assert table["好"].meaning == ("good; well",)
        # 覆盖后保留原有位置
        assert list(table)[:3] == ["你", "好", "你好"]
        assert len(table) == 14

    def test_traditional_when_present(self):
        """读取繁体字段"""
        raw = hsk_entry("爱", "ài", "love")
        raw["word"]["traditional"] = "愛"
        table = build_table([[raw]])
        assert table["爱"].traditional == "愛"


class TestDictionaryLoader:
    """加载状态与单次加载"""

    def test_initial_state(self, loader):
        """初始为未加载"""
        assert loader.state == LoadState.UNLOADED
        assert loader.table is None
        assert not loader.is_loaded

    def test_load(self, loader, source):
        """加载全部等级"""
        state = asyncio.run(loader.ensure_loaded())
        assert state == LoadState.LOADED
        assert loader.is_loaded
        assert len(loader.table) == 14
        assert sorted(source.calls) == [1, 2, 3, 4, 5, 6]

    def test_no_refetch_after_load(self, loader, source):
        """加载后不再拉取"""
        async def run():
            await loader.ensure_loaded()
            await loader.ensure_loaded()

        asyncio.run(run())
        assert len(source.calls) == 6
        assert loader.fetch_count == 1

    def test_single_flight(self):
        """并发调用共享同一次加载"""
        source = FakeSource(delay=0.01)
        loader = DictionaryLoader(source)

        async def run():
            return await asyncio.gather(*(loader.ensure_loaded() for _ in range(5)))

        states = asyncio.run(run())
        assert states == [LoadState.LOADED] * 5
        assert loader.fetch_count == 1
        assert len(source.calls) == 6

    def test_failure_then_retry(self):
        """失败后可重试"""
        source = FakeSource(fail_levels={3})
        loader = DictionaryLoader(source)

        state = asyncio.run(loader.ensure_loaded())
        assert state == LoadState.FAILED
        assert loader.table is None
        assert "ConnectionError" in loader.last_error

        source.fail_levels.clear()
        state = asyncio.run(loader.ensure_loaded())
        assert state == LoadState.LOADED
        assert loader.table is not None
        assert loader.last_error is None
        assert loader.fetch_count == 2

    def test_concurrent_callers_share_failure(self):
        """并发调用共享失败结果"""
        source = FakeSource(fail_levels={1}, delay=0.01)
        loader = DictionaryLoader(source)

        async def run():
            return await asyncio.gather(*(loader.ensure_loaded() for _ in range(3)))

        assert asyncio.run(run()) == [LoadState.FAILED] * 3
        assert loader.fetch_count == 1

    def test_timeout(self):
        """加载超时视为失败"""
        loader = DictionaryLoader(FakeSource(delay=1.0), timeout=0.01)
        assert asyncio.run(loader.ensure_loaded()) == LoadState.FAILED
        assert "TimeoutError" in loader.last_error

    def test_malformed_entry(self):
        """词条格式错误视为失败"""
        loader = DictionaryLoader(FakeSource(levels={1: [{"word": {}}]}))
        assert asyncio.run(loader.ensure_loaded()) == LoadState.FAILED
        assert loader.table is None

    def test_custom_levels(self):
        """只加载指定等级"""
        source = FakeSource()
        loader = DictionaryLoader(source, levels=(1, 2))
        asyncio.run(loader.ensure_loaded())
        assert sorted(source.calls) == [1, 2]
        assert "好吃" in loader.table
        assert "难过" not in loader.table


def write_levels(data_dir, levels):
    for level, entries in levels.items():
        (data_dir / f"hsk{level}.json").write_bytes(orjson.dumps(entries))


class TestFileLevelSource:
    """本地目录来源"""

    def test_load_from_directory(self, tmp_path):
        """从目录加载词表"""
        write_levels(tmp_path, HSK_LEVELS)
        loader = DictionaryLoader(FileLevelSource(tmp_path))
        assert asyncio.run(loader.ensure_loaded()) == LoadState.LOADED
        assert loader.table["牛奶"].meaning == ("milk",)

    def test_missing_file(self, tmp_path):
        """文件不存在报错"""
        source = FileLevelSource(tmp_path)
        with pytest.raises(LevelSourceError) as exc_info:
            asyncio.run(source.fetch(1))
        assert exc_info.value.level == 1

    def test_invalid_json(self, tmp_path):
        """JSON 格式错误报错"""
        (tmp_path / "hsk1.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(LevelSourceError):
            asyncio.run(FileLevelSource(tmp_path).fetch(1))

    def test_not_a_list(self, tmp_path):
        """顶层不是数组报错"""
        (tmp_path / "hsk1.json").write_bytes(orjson.dumps({"word": "x"}))
        with pytest.raises(LevelSourceError):
            asyncio.run(FileLevelSource(tmp_path).fetch(1))

    def test_missing_level_fails_load(self, tmp_path):
        """缺少某一等级时整体失败"""
        write_levels(tmp_path, {1: HSK_LEVELS[1]})
        loader = DictionaryLoader(FileLevelSource(tmp_path))
        assert asyncio.run(loader.ensure_loaded()) == LoadState.FAILED
        assert "LevelSourceError" in loader.last_error


class TestHttpLevelSource:
    """HTTP 来源"""

    @staticmethod
    def make_client(missing=()):
        def handler(request):
            name = request.url.path.rsplit("/", 1)[-1]
            level = int(name[len("hsk"):-len(".json")])
            if level in missing:
                return httpx.Response(404)
            return httpx.Response(200, content=orjson.dumps(HSK_LEVELS[level]))

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    def test_url_for(self):
        """拼接等级 URL"""
        source = HttpLevelSource("http://example.test/data/", client=self.make_client())
        assert source.url_for(3) == "http://example.test/data/hsk3.json"

    def test_load_over_http(self):
        """通过 HTTP 加载词表"""
        source = HttpLevelSource("http://example.test/data", client=self.make_client())
        loader = DictionaryLoader(source)
        assert asyncio.run(loader.ensure_loaded()) == LoadState.LOADED
        assert len(loader.table) == 14

    def test_http_error(self):
        """HTTP 错误码报错"""
        source = HttpLevelSource("http://example.test/data", client=self.make_client(missing={4}))
        with pytest.raises(LevelSourceError) as exc_info:
            asyncio.run(source.fetch(4))
        assert exc_info.value.level == 4


class TestCreateSource:
    """来源选择"""

    def test_file_by_default(self, tmp_path):
        """默认使用本地目录"""
        source = create_source(DictionaryConfig(data_dir=str(tmp_path)))
        assert isinstance(source, FileLevelSource)
        assert source.path_for(2) == tmp_path / "hsk2.json"

    def test_http_when_url_set(self):
        """配置 URL 时使用 HTTP"""
        source = create_source(DictionaryConfig(data_url="http://example.test"))
        assert isinstance(source, HttpLevelSource)
        asyncio.run(source.aclose())

    def test_base_is_abstract(self):
        """未实现 fetch 的来源不能实例化"""
        with pytest.raises(TypeError):
            LevelSource()

        class NoFetch(LevelSource):
            pass

        with pytest.raises(TypeError):
            NoFetch()
        assert isinstance(FakeSource(), LevelSource)

"""
测试公共夹具：内存词表来源与示例 HSK 数据
"""

import asyncio

import pytest

from hskime.engine import DictionaryConfig, DictionaryLoader, DictionaryService, LevelSource
from hskime.engine.loader import build_table


def hsk_entry(hanzi, pinyin, meaning, example=None, index=1):
    entry = {
        'id': f'{hanzi}-{index}',
        'index': index,
        'word': {'hanzi': hanzi, 'pinyin': pinyin},
        'meaning': meaning,
        'example': example,
    }
    return entry


HSK_LEVELS = {
    1: [
        hsk_entry('你', 'nǐ', 'you', {'hanzi': '你好吗？', 'pinyin': 'nǐ hǎo ma?', 'meaning': 'How are you?'}),
        hsk_entry('好', 'hǎo', 'good', index=2),
        hsk_entry('你好', 'nǐ hǎo', 'hello', {'hanzi': '你好！', 'pinyin': 'nǐ hǎo!', 'meaning': 'Hello!'}, index=3),
        hsk_entry('女儿', 'nǚ ér', 'daughter', index=4),
        hsk_entry('绿', 'lǜ', 'green', index=5),
        hsk_entry('中国', 'Zhōngguó', 'China', index=6),
        hsk_entry('什么', 'shénme', 'what', index=7),
    ],
    2: [
        hsk_entry('你们', 'nǐ men', 'you (plural)', index=1),
        hsk_entry('牛奶', 'niú nǎi', 'milk', {'hanzi': '我喝牛奶。', 'pinyin': 'wǒ hē niú nǎi.', 'meaning': 'I drink milk.'}, index=2),
        hsk_entry('好吃', 'hǎo chī', 'delicious, tasty', index=3),
    ],
    3: [
        hsk_entry('年轻人', 'nián qīng rén', 'young people', index=1),
        hsk_entry('难过', 'nán guò', 'sad; sorrowful', index=2),
    ],
    4: [
        hsk_entry('好处', 'hǎo chù', 'benefit; advantage', index=1),
    ],
    5: [
        hsk_entry('宁愿', 'nìng yuàn', 'would rather', index=1),
    ],
    6: [
        # 覆盖 1 级的同名词条
        hsk_entry('好', 'hǎo', 'good; well', index=1),
    ],
}


class FakeSource(LevelSource):
    """内存词表来源，记录拉取次数，可设置失败"""

    def __init__(self, levels=None, fail_levels=(), delay: float = 0.0):
        self.levels = HSK_LEVELS if levels is None else levels
        self.fail_levels = set(fail_levels)
        self.delay = delay
        self.calls = []
        self.closed = False

    async def fetch(self, level):
        self.calls.append(level)
        if self.delay:
            await asyncio.sleep(self.delay)
        if level in self.fail_levels:
            raise ConnectionError(f"hsk{level}.json unreachable")
        return self.levels.get(level, [])

    async def aclose(self):
        self.closed = True


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def loader(source):
    return DictionaryLoader(source)


@pytest.fixture
def service(loader):
    return DictionaryService(loader=loader, config=DictionaryConfig())


@pytest.fixture
def table():
    return build_table(HSK_LEVELS[level] for level in sorted(HSK_LEVELS))

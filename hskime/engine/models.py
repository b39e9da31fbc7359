"""
数据模型

词条在加载后不可变；查询结果是词条的浅拷贝，附带本次查询计算出的字段。
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class MatchType(str, Enum):
    """拼音联想的匹配类型（优先级从高到低）"""
    EXACT = "exact"
    PARTIAL = "partial"
    SHORTHAND = "shorthand"


class LoadState(str, Enum):
    """词典加载状态"""
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class DictionaryEntry:
    """词典词条，以汉字词为唯一键"""
    word: str
    pinyin: str
    meaning: Tuple[str, ...] = ()
    example: Optional[str] = None
    traditional: Optional[str] = None

    @classmethod
    def from_hsk(cls, raw: dict) -> "DictionaryEntry":
        """
        从 HSK 词表条目构建

        条目结构: {id, index, word: {hanzi, pinyin}, meaning, example: {hanzi, pinyin, meaning}}
        """
        word = raw['word']
        example = raw.get('example')
        example_str = None
        if example:
            example_str = f"{example['hanzi']} ({example['pinyin']}) - {example['meaning']}"

        return cls(
            word=word['hanzi'],
            pinyin=word['pinyin'],
            meaning=(raw['meaning'],),
            example=example_str,
            traditional=word.get('traditional'),
        )


@dataclass
class SearchResult:
    """查询结果"""
    word: str
    pinyin: str
    meaning: Tuple[str, ...] = ()
    example: Optional[str] = None
    traditional: Optional[str] = None
    # 词典搜索评分（越高越好）
    score: Optional[int] = None
    # 拼音联想
    match_type: Optional[MatchType] = None
    is_shorthand: bool = False
    syllable_count: int = 0

    @classmethod
    def from_entry(cls, entry: DictionaryEntry, **fields) -> "SearchResult":
        return cls(
            word=entry.word,
            pinyin=entry.pinyin,
            meaning=entry.meaning,
            example=entry.example,
            traditional=entry.traditional,
            **fields,
        )

    def to_dict(self) -> Dict:
        """转为前端使用的 JSON 结构"""
        data = asdict(self)
        data['meaning'] = list(self.meaning)
        data['matchType'] = self.match_type.value if self.match_type else None
        data['isShorthand'] = data.pop('is_shorthand')
        data['syllableCount'] = data.pop('syllable_count')
        del data['match_type']
        return data


@dataclass(frozen=True)
class PinyinToken:
    """光标前正在输入的拼音"""
    text: str
    start_pos: int


@dataclass
class SuggestionResult:
    """联想结果；出错时 results 为空，error 记录原因"""
    results: List[SearchResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[SearchResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, index):
        return self.results[index]

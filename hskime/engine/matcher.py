"""
匹配与排序

两种查询:
- search_hanzi_by_pinyin: 拼音 → 汉字联想，按 完全 / 前缀 / 简拼 三档返回
- search_dictionary: 自由文本词典搜索，按分档评分排序
"""

import re
from typing import Dict, List, Optional

from .models import DictionaryEntry, MatchType, SearchResult
from .text import (
    is_shorthand_query,
    matches_shorthand,
    normalize_pinyin,
    normalize_text,
    split_syllables,
)

SUGGESTION_LIMIT = 10
SEARCH_LIMIT = 50

# 释义分词（整词匹配用）
TOKEN_SPLIT = re.compile(r'[\s,.;:()!]+')

# 词典搜索分档，高档优先，只取命中的最高一档
SCORE_KEY_EXACT = 1000
SCORE_KEY_CONTAINS = 950
SCORE_MEANING_EXACT = 900
SCORE_MEANING_WORD = 850
SCORE_MEANING_CONTAINS = 800
SCORE_PINYIN_EXACT = 750
SCORE_PINYIN_CONTAINS = 700
SCORE_EXAMPLE_CONTAINS = 600


def classify_pinyin(syllables: List[str], normalized_pinyin: str, query: str,
                    shorthand: bool) -> Optional[MatchType]:
    """
    判断词条属于哪一档，不匹配返回 None

    整串比较同时接受去掉空格的连写形式（nihao 对 ni hao）。
    """
    compact = ''.join(syllables)
    if normalized_pinyin == query or compact == query or query in syllables:
        return MatchType.EXACT
    if (normalized_pinyin.startswith(query) or compact.startswith(query)
            or any(s.startswith(query) for s in syllables)):
        return MatchType.PARTIAL
    if shorthand and matches_shorthand(syllables, query):
        return MatchType.SHORTHAND
    return None


def search_hanzi_by_pinyin(
    table: Dict[str, DictionaryEntry],
    query: str,
    limit: int = SUGGESTION_LIMIT,
) -> List[SearchResult]:
    """
    拼音 → 汉字联想

    Args:
        table: 词典表
        query: 用户输入的拼音（可带声调）
        limit: 返回数量

    Returns:
        完全匹配在前，其次前缀匹配，最后简拼匹配；每档内音节少的在前
    """
    normalized_query = normalize_pinyin(query)
    if not normalized_query:
        return []

    shorthand = is_shorthand_query(normalized_query)
    buckets: Dict[MatchType, List[SearchResult]] = {t: [] for t in MatchType}

    for entry in table.values():
        syllables = split_syllables(entry.pinyin or "")
        normalized_pinyin = ' '.join(syllables)

        match_type = classify_pinyin(syllables, normalized_pinyin, normalized_query, shorthand)
        if match_type is None:
            continue

        buckets[match_type].append(SearchResult.from_entry(
            entry,
            match_type=match_type,
            is_shorthand=match_type is MatchType.SHORTHAND,
            syllable_count=len(syllables),
        ))

    results = []
    for match_type in MatchType:
        # sort 是稳定的，同音节数保持词典顺序
        results.extend(sorted(buckets[match_type], key=lambda r: r.syllable_count))
    return results[:limit]


def _contains(field: str, q: str, nq: str) -> bool:
    return q in field or nq in normalize_text(field)


def score_entry(entry: DictionaryEntry, query: str) -> Optional[int]:
    """
    计算单个词条的搜索评分，不匹配返回 None

    query 为原始输入；汉字比较用原文，其余字段用小写及去变音后的形式。
    """
    q = query.lower().strip()
    nq = normalize_text(q)
    if not nq:
        return None

    key = entry.word
    if key == query:
        return SCORE_KEY_EXACT
    trad = (entry.traditional or "").lower()
    if query in key or query in trad:
        return SCORE_KEY_CONTAINS

    meanings = " ".join(entry.meaning).lower()
    norm_meanings = normalize_text(meanings)
    if meanings == q or norm_meanings == nq:
        return SCORE_MEANING_EXACT
    if q in meanings or nq in norm_meanings:
        words = TOKEN_SPLIT.split(meanings)
        norm_words = TOKEN_SPLIT.split(norm_meanings)
        if q in words or nq in norm_words:
            return SCORE_MEANING_WORD
        return SCORE_MEANING_CONTAINS

    pinyin = (entry.pinyin or "").lower()
    if pinyin == q or normalize_text(pinyin) == nq:
        return SCORE_PINYIN_EXACT
    if _contains(pinyin, q, nq):
        return SCORE_PINYIN_CONTAINS

    if _contains((entry.example or "").lower(), q, nq):
        return SCORE_EXAMPLE_CONTAINS
    return None


def search_dictionary(
    table: Dict[str, DictionaryEntry],
    query: str,
    limit: int = SEARCH_LIMIT,
) -> List[SearchResult]:
    """
    自由文本词典搜索（汉字 / 繁体 / 释义 / 拼音 / 例句）

    Returns:
        按评分降序，同分时词长短的在前
    """
    # 只剩变音符号的输入标准化后为空，空串会命中所有释义
    if not query or not query.strip() or not normalize_text(query):
        return []

    results = []
    for entry in table.values():
        score = score_entry(entry, query)
        if score is None:
            continue
        results.append(SearchResult.from_entry(entry, score=score))

    results.sort(key=lambda r: (-r.score, len(r.word)))
    return results[:limit]

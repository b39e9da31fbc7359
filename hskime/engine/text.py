"""
文本规范化

拼音去声调、ü 统一为 v，以及自由文本的去变音符号处理。
"""

import re
import unicodedata
from typing import List, Optional

# ü 及其四个声调统一写作 v
U_UMLAUT = str.maketrans({c: 'v' for c in '\u00fc\u01d6\u01d8\u01da\u01dc'})

# 组合变音符号 U+0300–U+036F
COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")

SHORTHAND_PATTERN = re.compile(r'^[a-z]+$')


def strip_diacritics(text: str) -> str:
    """NFD 分解后去掉组合变音符号"""
    return COMBINING_MARKS.sub('', unicodedata.normalize('NFD', text))


def normalize_pinyin(text: str) -> str:
    """
    拼音标准化为无调形式

    nǐ hǎo → ni hao，lǜ / lü / lv → lv
    """
    # 先换 ü，否则 NFD 会把 ü 拆成 u + 分音符
    text = unicodedata.normalize('NFC', text.lower()).translate(U_UMLAUT)
    return strip_diacritics(text).strip()


def normalize_text(text: Optional[str]) -> str:
    """自由文本标准化（释义、例句检索用）"""
    if not text:
        return ""
    text = strip_diacritics(text).replace('đ', 'd').replace('Đ', 'd')
    return text.lower().strip()


def is_shorthand_query(normalized: str) -> bool:
    """是否为首字母简拼（如 nh → ni hao）"""
    return len(normalized) >= 2 and SHORTHAND_PATTERN.match(normalized) is not None


def split_syllables(pinyin: str) -> List[str]:
    """标准化并按空白切分音节"""
    return normalize_pinyin(pinyin).split()


def shorthand_of(syllables: List[str]) -> str:
    """已切分音节的首字母串"""
    return ''.join(s[0] for s in syllables)


def matches_shorthand(syllables: List[str], shorthand: str) -> bool:
    return shorthand_of(syllables).startswith(shorthand)

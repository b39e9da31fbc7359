"""
光标处文本处理

取出光标前正在输入的拼音，并在选词后用汉字替换它。
只处理纯文本；非文本或空内容时返回 None / 原样返回。
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .models import PinyinToken

# 光标前结尾的拼音字母（遇到空格、标点、汉字即停止）
TRAILING_PINYIN = re.compile(r'[a-zA-ZüÜvV]+$')


def _clamp(pos: int, text: str) -> int:
    return max(0, min(pos, len(text)))


def get_pinyin_at_cursor(text: Optional[str], cursor_pos: int) -> Optional[PinyinToken]:
    """
    提取光标前的拼音

    Args:
        text: 文本内容
        cursor_pos: 光标位置

    Returns:
        PinyinToken(text, start_pos)，没有拼音时返回 None
    """
    if not isinstance(text, str) or not text:
        return None

    text_before = text[:_clamp(cursor_pos, text)]
    match = TRAILING_PINYIN.search(text_before)
    if match is None:
        return None
    return PinyinToken(text=match.group(0), start_pos=match.start())


def insert_hanzi_at_cursor(
    text: Optional[str],
    cursor_pos: int,
    pinyin_start_pos: int,
    hanzi: str,
) -> Tuple[Optional[str], int]:
    """
    用汉字替换 [pinyin_start_pos, cursor_pos) 区间的拼音

    Returns:
        (新文本, 新光标位置)；非文本或空内容时原样返回
    """
    if not isinstance(text, str) or not text:
        return text, cursor_pos

    text_before = text[:_clamp(pinyin_start_pos, text)]
    text_after = text[_clamp(cursor_pos, text):]
    return text_before + hanzi + text_after, pinyin_start_pos + len(hanzi)


@dataclass(frozen=True)
class TextBuffer:
    """带光标的文本"""
    text: str
    cursor: int

    def pinyin_at_cursor(self) -> Optional[PinyinToken]:
        return get_pinyin_at_cursor(self.text, self.cursor)

    def insert_hanzi(self, pinyin_start_pos: int, hanzi: str) -> "TextBuffer":
        text, cursor = insert_hanzi_at_cursor(self.text, self.cursor, pinyin_start_pos, hanzi)
        return TextBuffer(text=text, cursor=cursor)

"""
汉字联想入口

查询出错时不向上抛出，返回空结果并记录错误，保证输入流程不被打断。
"""

from .dictionary import DictionaryService, get_dict_service
from .logging import get_engine_logger
from .models import SuggestionResult

logger = get_engine_logger()


async def fetch_hanzi_suggestions(pinyin: str, service: DictionaryService = None) -> SuggestionResult:
    """
    获取拼音对应的汉字候选

    Args:
        pinyin: 光标前的拼音
        service: 字典服务，默认使用全局单例

    Returns:
        SuggestionResult；出错时 results 为空，error 为错误描述
    """
    service = service or get_dict_service()
    try:
        results = await service.search_hanzi_by_pinyin(pinyin)
    except Exception as e:
        logger.error(f"获取汉字联想失败: pinyin='{pinyin}', error={e}", exc_info=True)
        return SuggestionResult(results=[], error=f"{type(e).__name__}: {e}")
    return SuggestionResult(results=results)

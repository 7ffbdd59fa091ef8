"""结果解码模块.

提供 ES 搜索响应的解码功能.
"""

from elasticquery.result.decoder import ResultDecoder, decode_generic
from elasticquery.result.models import Hit, Hits, Result

__all__ = [
    "ResultDecoder",
    "decode_generic",
    "Result",
    "Hits",
    "Hit",
]

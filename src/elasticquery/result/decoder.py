"""
ES 搜索响应解码器.

把响应体解码为 Result[T]（类型化路径）或 dict（泛型路径）。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from elasticquery.core.encoding import loads
from elasticquery.exceptions import DecodeError
from elasticquery.result.models import Hit, Hits, Result
from elasticquery.typing import JSONObject

# 模块级别日志记录器
logger = logging.getLogger(__name__)

T = TypeVar("T")


def decode_generic(body: bytes) -> JSONObject:
    """
    把响应体反序列化为无类型的 JSON 对象.

    Args:
        body: 响应体

    Returns:
        JSON 对象

    Raises:
        DecodeError: 响应体不是 JSON 对象
    """
    data = loads(body)
    if not isinstance(data, dict):
        raise DecodeError(f"响应体不是 JSON 对象: {type(data).__name__}")
    return data


class ResultDecoder(Generic[T]):
    """
    类型化响应解码器.

    使用 pydantic TypeAdapter 校验每个命中的 _source，
    支持 dataclass、pydantic 模型、TypedDict 以及内置类型。

    使用示例:
        decoder = ResultDecoder(Product)
        result = decoder.decode(response_body)
        products = result.sources()
    """

    def __init__(self, decode_to: type[T]) -> None:
        """
        初始化解码器.

        Args:
            decode_to: 单个文档的类型（注意是元素类型，不是 list[T]）
        """
        self._decode_to = decode_to
        self._adapter: TypeAdapter[T] = TypeAdapter(decode_to)

    def decode(self, body: bytes) -> Result[T]:
        """
        解码响应体.

        Args:
            body: 响应体

        Returns:
            Result[T]

        Raises:
            DecodeError: 响应结构不符或文档校验失败
        """
        return self.decode_dict(decode_generic(body))

    def decode_dict(self, response: Mapping[str, Any]) -> Result[T]:
        """解码已经反序列化的响应字典."""
        hits_info = response.get("hits")
        if not isinstance(hits_info, Mapping):
            raise DecodeError("响应缺少 hits 对象")

        raw_hits = hits_info.get("hits")
        if not isinstance(raw_hits, list):
            raise DecodeError("响应缺少 hits.hits 数组")

        hits = [self._decode_hit(position, raw) for position, raw in enumerate(raw_hits)]

        return Result(
            hits=Hits(
                hits=hits,
                total=self._get_total(hits_info.get("total")),
                max_score=hits_info.get("max_score"),
            ),
            took=response.get("took"),
            timed_out=bool(response.get("timed_out", False)),
        )

    def _decode_hit(self, position: int, raw: Any) -> Hit[T]:
        if not isinstance(raw, Mapping) or "_source" not in raw:
            raise DecodeError(f"第 {position} 个命中缺少 _source")

        try:
            source = self._adapter.validate_python(raw["_source"])
        except ValidationError as e:
            logger.error(
                f"第 {position} 个命中无法解码为 {self._type_name}: {e.error_count()} 个错误"
            )
            raise DecodeError(
                f"第 {position} 个命中无法解码为 {self._type_name}: {e}"
            ) from e

        return Hit(
            source=source,
            id=raw.get("_id"),
            index=raw.get("_index"),
            score=raw.get("_score"),
        )

    @staticmethod
    def _get_total(total_info: Any) -> int | None:
        # 兼容 ES 6.x（整数）和 7.x+（{"value": n, "relation": "eq"}）
        if isinstance(total_info, Mapping):
            return total_info.get("value")
        return total_info

    @property
    def _type_name(self) -> str:
        return getattr(self._decode_to, "__name__", repr(self._decode_to))

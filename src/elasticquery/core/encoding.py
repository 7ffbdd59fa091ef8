"""JSON 线格式编解码模块.

统一使用 elasticsearch 客户端自带的 JsonSerializer：
紧凑分隔符、UTF-8 输出，并支持 date / Decimal / UUID 等常见类型。
"""

from __future__ import annotations

import json
from typing import Any

from elasticsearch.exceptions import SerializationError
from elasticsearch.serializer import JsonSerializer

from elasticquery.exceptions import DecodeError, SerializeError


class StrictJsonSerializer(JsonSerializer):
    """不允许 NaN / Infinity 的 JsonSerializer，它们不是合法的 JSON."""

    def dumps(self, data: Any) -> bytes:
        if isinstance(data, (str, bytes)):
            return super().dumps(data)
        try:
            return json.dumps(
                data,
                default=self.default,
                ensure_ascii=False,
                separators=(",", ":"),
                allow_nan=False,
            ).encode("utf-8", "surrogatepass")
        except (ValueError, UnicodeError, TypeError) as e:
            raise SerializationError(f"无法序列化为 JSON: {data!r}") from e


_serializer = StrictJsonSerializer()


def dumps(value: Any) -> bytes:
    """序列化为 JSON 字节串.

    提供 to_dict() 的对象（查询原语、QueryContainer、elasticsearch.dsl 的
    Search / Q 等）会先转换为字典。

    Args:
        value: 待序列化的值

    Returns:
        UTF-8 编码的紧凑 JSON

    Raises:
        SerializeError: 值中包含无法序列化的对象
    """
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    if isinstance(value, (str, bytes)):
        # JsonSerializer 会原样透传 str/bytes，这里要求显式的 JSON 结构
        raise SerializeError(f"不支持直接序列化 {type(value).__name__}，请传入字典")
    try:
        return _serializer.dumps(value)
    except (SerializationError, TypeError, ValueError) as e:
        raise SerializeError(f"无法序列化为 JSON: {e}") from e


def dumps_str(value: Any) -> str:
    """序列化为 JSON 字符串."""
    return dumps(value).decode("utf-8")


def loads(data: bytes) -> Any:
    """反序列化 JSON 字节串.

    Args:
        data: 响应体

    Returns:
        解析后的 JSON 值

    Raises:
        DecodeError: 响应体为空或不是合法 JSON
    """
    if not data:
        raise DecodeError("响应体为空")
    try:
        return _serializer.loads(data)
    except (SerializationError, ValueError) as e:
        raise DecodeError(f"响应体不是合法的 JSON: {e}") from e

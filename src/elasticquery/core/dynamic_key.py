"""动态键编码模块.

ES DSL 中大量对象的键不是固定的 schema 成员，而是运行时决定的字符串，
例如 ``{"title": "spaghetti"}`` 中的字段名 ``title``，
以及 ``{"match_phrase": {...}}`` 中原语自身的判别键。

DynamicKeyMap 把这种“单键对象”显式建模，而不是拼装临时字典。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from elasticquery.exceptions import InvalidKeyError


@dataclass(frozen=True)
class DynamicKeyMap:
    """以运行时字符串为唯一键的 JSON 对象.

    Attributes:
        key: 键名，必须为非空字符串
        value: 任意可序列化的值；若值本身是 DynamicKeyMap 或提供 to_dict()，
            会在 to_dict() 时递归展开

    Raises:
        InvalidKeyError: 当 key 为空或不是字符串时抛出

    Examples:
        >>> DynamicKeyMap("title", "spaghetti").to_dict()
        {'title': 'spaghetti'}
        >>> DynamicKeyMap("range", DynamicKeyMap("in_stock", {"gte": 1})).to_dict()
        {'range': {'in_stock': {'gte': 1}}}
    """

    key: str
    value: Any

    def __post_init__(self) -> None:
        """校验键名."""
        if not isinstance(self.key, str) or not self.key:
            raise InvalidKeyError(f"动态键必须为非空字符串，当前值: {self.key!r}")

    def to_dict(self) -> dict[str, Any]:
        """转换为单键字典."""
        value = self.value
        if hasattr(value, "to_dict"):
            value = value.to_dict()
        return {self.key: value}


def dynamic_key(key: str, value: Any) -> dict[str, Any]:
    """便捷函数：构建 ``{key: value}``.

    Args:
        key: 运行时键名
        value: 键对应的值

    Returns:
        单键字典
    """
    return DynamicKeyMap(key, value).to_dict()

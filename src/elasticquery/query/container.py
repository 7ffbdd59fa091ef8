"""查询包装模块.

Query 负责把单个原语包裹在它的判别键下，
QueryContainer 再把 Query 放进请求体外层的 "query" 键。

    primitive            -> {"title": "spaghetti"}
    Query(primitive)     -> {"match_phrase": {"title": "spaghetti"}}
    QueryContainer(...)  -> {"query": {"match_phrase": {"title": "spaghetti"}}}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from elasticsearch.dsl import Q

from elasticquery.core.constants import QueryType
from elasticquery.core.dynamic_key import DynamicKeyMap
from elasticquery.core.encoding import dumps_str
from elasticquery.exceptions import ConstructionError
from elasticquery.query.primitives import QueryElement

ElementT = TypeVar("ElementT", bound=QueryElement)


@dataclass(frozen=True)
class Query(Generic[ElementT]):
    """用判别键标记一个查询原语.

    Attributes:
        element: 被包裹的原语，必须属于封闭的原语集合

    Raises:
        ConstructionError: element 不是查询原语时抛出

    Examples:
        >>> Query(MatchAll()).to_json()
        '{"match_all":{}}'
    """

    element: ElementT

    def __post_init__(self) -> None:
        """校验被包裹的原语."""
        if not isinstance(self.element, QueryElement):
            raise ConstructionError(
                f"Query 只能包裹查询原语，当前类型: {type(self.element).__name__}"
            )
        if not isinstance(getattr(self.element, "query_type", None), QueryType):
            raise ConstructionError(
                f"{type(self.element).__name__} 未声明判别键 query_type"
            )

    @property
    def discriminator(self) -> str:
        return self.element.query_type.value

    def to_dict(self) -> dict[str, Any]:
        return DynamicKeyMap(self.discriminator, self.element).to_dict()

    def to_json(self) -> str:
        return dumps_str(self.to_dict())

    def to_q(self) -> Q:
        """转换为 elasticsearch.dsl 的 Q 对象，便于与 Search 组合使用."""
        return Q(self.to_dict())


def as_query(value: Query | QueryElement) -> Query:
    """原语自动包裹为 Query，已是 Query 的原样返回."""
    if isinstance(value, Query):
        return value
    return Query(value)


@dataclass(frozen=True)
class QueryContainer(Generic[ElementT]):
    """请求体信封.

    Attributes:
        query: 查询，可以是 Query 或直接传入原语；为 None 时编码为 {}
        size: 返回文档数量（可选）
        from_: 起始偏移（可选，对应 DSL 中的 "from"）

    Raises:
        ConstructionError: size / from_ 为负数时抛出

    Examples:
        >>> QueryContainer().to_json()
        '{}'
        >>> QueryContainer(Query(Exists("tags"))).to_json()
        '{"query":{"exists":{"field":"tags"}}}'
    """

    query: Query[ElementT] | ElementT | None = None
    size: int | None = None
    from_: int | None = None

    def __post_init__(self) -> None:
        """校验参数并统一为 Query."""
        if self.query is not None:
            object.__setattr__(self, "query", as_query(self.query))
        for name, value in (("size", self.size), ("from", self.from_)):
            if value is not None and value < 0:
                raise ConstructionError(f"{name} 必须 >= 0，当前值: {value}")

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.query is not None:
            result["query"] = self.query.to_dict()
        if self.size is not None:
            result["size"] = self.size
        if self.from_ is not None:
            result["from"] = self.from_
        return result

    def to_json(self) -> str:
        return dumps_str(self.to_dict())

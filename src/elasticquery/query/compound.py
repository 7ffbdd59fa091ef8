"""复合查询模块."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from elasticquery.core.constants import BOOL_CLAUSES, QueryType
from elasticquery.query.container import Query, as_query
from elasticquery.query.primitives import QueryElement

# 子句元素：原语或已包裹的 Query
Clause = Union[QueryElement, Query]


def _normalize(clauses: Iterable[Clause] | None) -> tuple[Query, ...] | None:
    """统一为 Query 元组；空列表视为未设置."""
    if clauses is None:
        return None
    normalized = tuple(as_query(clause) for clause in clauses)
    return normalized or None


@dataclass(frozen=True)
class BoolQuery(QueryElement):
    """Bool 复合查询.

    由 must / should / must_not / filter 四组有序子查询组成，可以递归嵌套。
    未设置（或为空）的子句不会出现在输出中，而不是输出空数组。
    子句内的顺序保持不变。

    Attributes:
        must: 必须匹配，参与评分
        should: 应当匹配
        must_not: 必须不匹配
        filter: 必须匹配，不参与评分
        minimum_should_match: should 子句最少匹配数，整数或百分比字符串
        boost: 权重

    Examples:
        >>> BoolQuery(
        ...     must=[MatchPhrase("title", "pasta")],
        ...     filter=[Range("price", lte=10)],
        ... ).to_dict()
        {'must': [{'match_phrase': {'title': 'pasta'}}], 'filter': [{'range': {'price': {'lte': 10}}}]}
    """

    query_type: ClassVar[QueryType] = QueryType.BOOL

    must: tuple[Query, ...] | None = None
    should: tuple[Query, ...] | None = None
    must_not: tuple[Query, ...] | None = None
    filter: tuple[Query, ...] | None = None  # noqa: A003
    minimum_should_match: int | str | None = None
    boost: float | None = None

    def __post_init__(self) -> None:
        for name in BOOL_CLAUSES:
            object.__setattr__(self, name, _normalize(getattr(self, name)))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name in BOOL_CLAUSES:
            clauses = getattr(self, name)
            if clauses:
                result[name] = [clause.to_dict() for clause in clauses]
        if self.minimum_should_match is not None:
            result["minimum_should_match"] = self.minimum_should_match
        if self.boost is not None:
            result["boost"] = self.boost
        return result

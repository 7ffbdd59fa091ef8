"""查询构建模块.

主要组件:
    - 查询原语: MatchPhrase, Match, MultiMatch, QueryString, Term, Terms,
      Fuzzy, Prefix, Exists, MatchAll, MatchNone, Range
    - BoolQuery: 复合查询
    - Query / QueryContainer: 判别键包装与请求体信封

使用示例:
    from elasticquery.query import BoolQuery, MatchPhrase, Query, QueryContainer, Range

    container = QueryContainer(
        Query(
            BoolQuery(
                must=[MatchPhrase("title", "puttanesca spaghetti")],
                filter=[Range("in_stock", gte=1)],
            )
        )
    )
    body = container.to_json()
"""

from elasticquery.query.compound import BoolQuery
from elasticquery.query.container import Query, QueryContainer, as_query
from elasticquery.query.primitives import (
    Exists,
    Fuzzy,
    Match,
    MatchAll,
    MatchNone,
    MatchPhrase,
    MultiMatch,
    NumericBound,
    Prefix,
    QueryElement,
    QueryString,
    Range,
    RangeBound,
    Term,
    Terms,
    TextualBound,
)

__all__ = [
    # 包装
    "Query",
    "QueryContainer",
    "as_query",
    # 原语
    "QueryElement",
    "Exists",
    "Fuzzy",
    "Match",
    "MatchAll",
    "MatchNone",
    "MatchPhrase",
    "MultiMatch",
    "Prefix",
    "QueryString",
    "Range",
    "RangeBound",
    "NumericBound",
    "TextualBound",
    "Term",
    "Terms",
    # 复合查询
    "BoolQuery",
]

"""elasticquery - Typed Elasticsearch Query Construction and Response Decoding.

用强类型的查询原语构建 ES 搜索请求，编码为 JSON 查询 DSL，
通过 HTTP 提交到 _search 接口，并把响应解码为类型化的 Result[T] 或无类型字典。

主要功能:
    - 查询原语: MatchPhrase, Match, MultiMatch, Fuzzy, Prefix, Range, Term, Terms, Exists ...
    - BoolQuery: 复合查询，可递归嵌套
    - Query / QueryContainer: 判别键包装与请求体信封
    - SearchClient: 搜索客户端

使用示例:
    from elasticquery import MatchPhrase, Query, QueryContainer, SearchClient

    container = QueryContainer(Query(MatchPhrase("title", "puttanesca spaghetti")))
    result = await client.search("recipes", container, Recipe)
    recipes = result.sources()
"""

__version__ = "0.1.0"

# 导出客户端
from elasticquery.client import (
    ClientConfig,
    HttpTransport,
    HttpxTransport,
    RequestError,
    SearchClient,
    TransportResponse,
)

# 导出核心组件
from elasticquery.core import DynamicKeyMap, MatchOperator, MultiMatchType, QueryType

# 导出异常
from elasticquery.exceptions import (
    ConstructionError,
    DecodeError,
    ElasticQueryError,
    InvalidEnumValueError,
    InvalidKeyError,
    InvalidRangeBoundError,
    MixedRangeBoundsError,
    QueryStringParseError,
    SerializeError,
)

# 导出查询构建
from elasticquery.query import (
    BoolQuery,
    Exists,
    Fuzzy,
    Match,
    MatchAll,
    MatchNone,
    MatchPhrase,
    MultiMatch,
    Prefix,
    Query,
    QueryContainer,
    QueryString,
    Range,
    Term,
    Terms,
)

# 导出结果
from elasticquery.result import Hit, Hits, Result, ResultDecoder

__all__ = [
    # 版本
    "__version__",
    # 客户端
    "SearchClient",
    "ClientConfig",
    "HttpTransport",
    "HttpxTransport",
    "TransportResponse",
    # 枚举与核心组件
    "QueryType",
    "MultiMatchType",
    "MatchOperator",
    "DynamicKeyMap",
    # 查询
    "Query",
    "QueryContainer",
    "BoolQuery",
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
    "Term",
    "Terms",
    # 结果
    "Result",
    "Hits",
    "Hit",
    "ResultDecoder",
    # 异常
    "ElasticQueryError",
    "ConstructionError",
    "InvalidKeyError",
    "InvalidEnumValueError",
    "MixedRangeBoundsError",
    "InvalidRangeBoundError",
    "QueryStringParseError",
    "SerializeError",
    "DecodeError",
    "RequestError",
]

"""elasticquery 常量与枚举定义模块."""

from enum import Enum


class QueryType(str, Enum):
    """查询原语的判别键（即 ES DSL 中包裹原语的固定键名）."""

    BOOL = "bool"
    EXISTS = "exists"
    FUZZY = "fuzzy"
    MATCH = "match"
    MATCH_ALL = "match_all"
    MATCH_NONE = "match_none"
    MATCH_PHRASE = "match_phrase"
    MULTI_MATCH = "multi_match"
    PREFIX = "prefix"
    QUERY_STRING = "query_string"
    RANGE = "range"
    TERM = "term"
    TERMS = "terms"


class MultiMatchType(str, Enum):
    """multi_match 查询的执行类型."""

    BEST_FIELDS = "best_fields"
    MOST_FIELDS = "most_fields"
    CROSS_FIELDS = "cross_fields"
    PHRASE = "phrase"
    PHRASE_PREFIX = "phrase_prefix"


class MatchOperator(str, Enum):
    """match / multi_match / query_string 的词项组合方式."""

    AND = "and"
    OR = "or"


# Bool 查询子句的输出顺序
BOOL_CLAUSES = ("must", "should", "must_not", "filter")

# 默认文档类型
DEFAULT_DOC_TYPE = "_doc"

# 请求头
JSON_CONTENT_TYPE = "application/json"

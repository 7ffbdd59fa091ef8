"""核心模块导出."""

from elasticquery.core.constants import (
    BOOL_CLAUSES,
    DEFAULT_DOC_TYPE,
    MatchOperator,
    MultiMatchType,
    QueryType,
)
from elasticquery.core.dynamic_key import DynamicKeyMap, dynamic_key
from elasticquery.core.encoding import dumps, dumps_str, loads

__all__ = [
    "QueryType",
    "MultiMatchType",
    "MatchOperator",
    "BOOL_CLAUSES",
    "DEFAULT_DOC_TYPE",
    "DynamicKeyMap",
    "dynamic_key",
    "dumps",
    "dumps_str",
    "loads",
]

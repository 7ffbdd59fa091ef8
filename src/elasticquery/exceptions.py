"""elasticquery 异常定义模块."""


class ElasticQueryError(Exception):
    """elasticquery 基础异常类."""

    pass


class ConstructionError(ElasticQueryError):
    """查询原语构建失败.

    所有构建期校验失败的基类，在任何网络 I/O 之前抛出。
    """

    pass


class InvalidKeyError(ConstructionError):
    """动态键（字段名或判别键）为空或不是字符串."""

    pass


class InvalidEnumValueError(ConstructionError):
    """枚举参数取值不在允许的封闭集合内（如 multi_match 的 type）."""

    pass


class MixedRangeBoundsError(ConstructionError):
    """同一个 Range 中同时出现数值边界与文本边界."""

    pass


class InvalidRangeBoundError(ConstructionError):
    """Range 边界值类型非法（既不是数值也不是字符串，或 format 与数值边界同用）."""

    pass


class QueryStringParseError(ConstructionError):
    """Query String 语法解析失败."""

    pass


class SerializeError(ElasticQueryError):
    """请求体无法序列化为 JSON.

    对于内置的查询原语不应出现，主要针对原始字典查询中混入的不可序列化对象。
    """

    pass


class DecodeError(ElasticQueryError):
    """响应体存在但不符合预期的 JSON 结构."""

    pass

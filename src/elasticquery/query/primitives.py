"""查询原语模块.

每个原语都是不可变的值对象，知道两件事:
    - 自身的字段级载荷（to_dict()）
    - ES 期望的判别键（query_type，类级常量，调用方不可修改）

包裹判别键的工作由 Query 完成，见 elasticquery.query.container。
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, TypeVar, Union

from luqum.exceptions import ParseError
from luqum.parser import lexer, parser

from elasticquery.core.constants import MatchOperator, MultiMatchType, QueryType
from elasticquery.core.dynamic_key import DynamicKeyMap
from elasticquery.core.encoding import dumps_str
from elasticquery.exceptions import (
    ConstructionError,
    InvalidEnumValueError,
    InvalidKeyError,
    InvalidRangeBoundError,
    MixedRangeBoundsError,
    QueryStringParseError,
)

E = TypeVar("E", bound=Enum)

# Terms / Term 允许的值类型
TermValue = Union[str, int, float, bool]


def _coerce_enum(enum_cls: type[E], value: E | str | None, name: str) -> E | None:
    """把字符串转换为枚举成员，未知取值抛出 InvalidEnumValueError."""
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidEnumValueError(
            f"{name} 取值非法: {value!r}，可选值: {allowed}"
        ) from None


def _check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f"字段名必须为非空字符串，当前值: {key!r}")


def _compact(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """按顺序构建字典，跳过值为 None 的项（可选字段省略而不是输出 null）."""
    return {k: v for k, v in pairs if v is not None}


class QueryElement(ABC):
    """查询原语基类.

    子类必须声明 query_type 并实现 to_dict()。
    """

    query_type: ClassVar[QueryType]

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """返回不含判别键的字段级载荷."""

    def to_json(self) -> str:
        """独立编码为紧凑 JSON 字符串（不含判别键）."""
        return dumps_str(self.to_dict())


# ============================================================
# 全文检索类
# ============================================================


@dataclass(frozen=True)
class MatchPhrase(QueryElement):
    """短语匹配.

    Examples:
        >>> MatchPhrase("title", "puttanesca spaghetti").to_json()
        '{"title":"puttanesca spaghetti"}'
    """

    query_type: ClassVar[QueryType] = QueryType.MATCH_PHRASE

    key: str
    value: str

    def __post_init__(self) -> None:
        _check_key(self.key)

    def to_dict(self) -> dict[str, Any]:
        return DynamicKeyMap(self.key, self.value).to_dict()


@dataclass(frozen=True)
class Match(QueryElement):
    """标准全文匹配.

    Attributes:
        key: 字段名
        value: 查询文本
        operator: 词项组合方式（and / or）
        fuzziness: 模糊度，整数或 "AUTO"
        boost: 权重
    """

    query_type: ClassVar[QueryType] = QueryType.MATCH

    key: str
    value: str
    operator: MatchOperator | str | None = None
    fuzziness: int | str | None = None
    boost: float | None = None

    def __post_init__(self) -> None:
        _check_key(self.key)
        object.__setattr__(
            self, "operator", _coerce_enum(MatchOperator, self.operator, "operator")
        )

    def to_dict(self) -> dict[str, Any]:
        inner = _compact(
            [
                ("query", self.value),
                ("operator", self.operator.value if self.operator else None),
                ("fuzziness", self.fuzziness),
                ("boost", self.boost),
            ]
        )
        return DynamicKeyMap(self.key, inner).to_dict()


@dataclass(frozen=True)
class MultiMatch(QueryElement):
    """多字段匹配.

    载荷使用固定键，没有动态键；type 只能取 MultiMatchType 中的值。

    Examples:
        >>> MultiMatch(
        ...     "pasta", ["title", "description"],
        ...     type=MultiMatchType.CROSS_FIELDS, tie_breaker=0.3,
        ... ).to_json()
        '{"fields":["title","description"],"query":"pasta","type":"cross_fields","tie_breaker":0.3}'
    """

    query_type: ClassVar[QueryType] = QueryType.MULTI_MATCH

    value: str
    fields: tuple[str, ...]
    type: MultiMatchType | str | None = None  # noqa: A003
    tie_breaker: float | None = None
    operator: MatchOperator | str | None = None
    boost: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        if not self.fields:
            raise ConstructionError("multi_match 至少需要一个字段")
        for name in self.fields:
            _check_key(name)
        object.__setattr__(self, "type", _coerce_enum(MultiMatchType, self.type, "type"))
        object.__setattr__(
            self, "operator", _coerce_enum(MatchOperator, self.operator, "operator")
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            [
                ("fields", list(self.fields)),
                ("query", self.value),
                ("type", self.type.value if self.type else None),
                ("tie_breaker", self.tie_breaker),
                ("operator", self.operator.value if self.operator else None),
                ("boost", self.boost),
            ]
        )


@dataclass(frozen=True)
class QueryString(QueryElement):
    """Lucene 语法的 query_string 查询.

    构建时使用 luqum 校验语法，语法错误在发送请求前即失败。
    """

    query_type: ClassVar[QueryType] = QueryType.QUERY_STRING

    query: str
    default_field: str | None = None
    default_operator: MatchOperator | str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.query, str) or not self.query.strip():
            raise QueryStringParseError("Query String 不能为空")
        try:
            parser.parse(self.query, lexer=lexer)
        except ParseError as e:
            raise QueryStringParseError(f"Failed to parse query string: {e}") from e
        if self.default_field is not None:
            _check_key(self.default_field)
        object.__setattr__(
            self,
            "default_operator",
            _coerce_enum(MatchOperator, self.default_operator, "default_operator"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            [
                ("query", self.query),
                ("default_field", self.default_field),
                (
                    "default_operator",
                    # ES 文档中 default_operator 使用大写
                    self.default_operator.value.upper()
                    if self.default_operator
                    else None,
                ),
            ]
        )


# ============================================================
# 词项类
# ============================================================


@dataclass(frozen=True)
class Term(QueryElement):
    """精确词项匹配."""

    query_type: ClassVar[QueryType] = QueryType.TERM

    key: str
    value: TermValue
    boost: float | None = None

    def __post_init__(self) -> None:
        _check_key(self.key)

    def to_dict(self) -> dict[str, Any]:
        inner = _compact([("value", self.value), ("boost", self.boost)])
        return DynamicKeyMap(self.key, inner).to_dict()


@dataclass(frozen=True)
class Terms(QueryElement):
    """多值精确匹配.

    Examples:
        >>> Terms("tags.keyword", ["Soup", "Cake"]).to_json()
        '{"tags.keyword":["Soup","Cake"]}'
    """

    query_type: ClassVar[QueryType] = QueryType.TERMS

    key: str
    values: tuple[TermValue, ...]

    def __post_init__(self) -> None:
        _check_key(self.key)
        object.__setattr__(self, "values", tuple(self.values))

    def to_dict(self) -> dict[str, Any]:
        return DynamicKeyMap(self.key, list(self.values)).to_dict()


@dataclass(frozen=True)
class Fuzzy(QueryElement):
    """模糊匹配.

    可选参数未设置时不会输出（而不是输出 null）。
    """

    query_type: ClassVar[QueryType] = QueryType.FUZZY

    key: str
    value: str
    fuzziness: int | str | None = None
    prefix_length: int | None = None
    max_expansions: int | None = None
    transpositions: bool | None = None
    boost: float | None = None

    def __post_init__(self) -> None:
        _check_key(self.key)

    def to_dict(self) -> dict[str, Any]:
        inner = _compact(
            [
                ("value", self.value),
                ("fuzziness", self.fuzziness),
                ("prefix_length", self.prefix_length),
                ("max_expansions", self.max_expansions),
                ("transpositions", self.transpositions),
                ("boost", self.boost),
            ]
        )
        return DynamicKeyMap(self.key, inner).to_dict()


@dataclass(frozen=True)
class Prefix(QueryElement):
    """前缀匹配."""

    query_type: ClassVar[QueryType] = QueryType.PREFIX

    key: str
    value: str
    boost: float | None = None

    def __post_init__(self) -> None:
        _check_key(self.key)

    def to_dict(self) -> dict[str, Any]:
        inner = _compact([("value", self.value), ("boost", self.boost)])
        return DynamicKeyMap(self.key, inner).to_dict()


@dataclass(frozen=True)
class Exists(QueryElement):
    """字段存在性查询.

    注意载荷的键是固定的 "field"，字段名是值而不是键。

    Examples:
        >>> Exists("tags").to_json()
        '{"field":"tags"}'
    """

    query_type: ClassVar[QueryType] = QueryType.EXISTS

    field: str

    def __post_init__(self) -> None:
        _check_key(self.field)

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field}


@dataclass(frozen=True)
class MatchAll(QueryElement):
    """匹配全部文档."""

    query_type: ClassVar[QueryType] = QueryType.MATCH_ALL

    boost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact([("boost", self.boost)])


@dataclass(frozen=True)
class MatchNone(QueryElement):
    """不匹配任何文档."""

    query_type: ClassVar[QueryType] = QueryType.MATCH_NONE

    def to_dict(self) -> dict[str, Any]:
        return {}


# ============================================================
# 范围查询
# ============================================================


@dataclass(frozen=True)
class NumericBound:
    """数值边界（有限的 int 或 float，不接受 bool）."""

    value: int | float

    def __post_init__(self) -> None:
        # bool 是 int 的子类，但不是合法的数值边界
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InvalidRangeBoundError(
                f"数值边界必须是 int 或 float，当前值: {self.value!r}"
            )
        if isinstance(self.value, float) and not math.isfinite(self.value):
            raise InvalidRangeBoundError(f"数值边界必须是有限值，当前值: {self.value!r}")


@dataclass(frozen=True)
class TextualBound:
    """文本边界（日期字符串、日期数学表达式、关键字等）."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidRangeBoundError(
                f"文本边界必须是字符串，当前类型: {type(self.value).__name__}"
            )


RangeBound = Union[NumericBound, TextualBound]

_BOUND_NAMES = ("gte", "gt", "lte", "lt")


def _to_bound(name: str, value: Any) -> RangeBound | None:
    if value is None or isinstance(value, (NumericBound, TextualBound)):
        return value
    if isinstance(value, bool):
        raise InvalidRangeBoundError(f"{name} 不能是布尔值: {value!r}")
    if isinstance(value, (int, float)):
        return NumericBound(value)
    if isinstance(value, str):
        return TextualBound(value)
    raise InvalidRangeBoundError(
        f"{name} 必须是数值或字符串，当前类型: {type(value).__name__}"
    )


@dataclass(frozen=True)
class Range(QueryElement):
    """范围查询.

    同一个实例中的边界要么全部是数值，要么全部是文本；format 与 time_zone
    只能与文本边界一起使用。推荐使用 Range.numeric() / Range.textual()
    两个互斥的入口，直接构造时会根据取值推断类型。

    Examples:
        >>> Range("in_stock", gte=1, lte=5).to_json()
        '{"in_stock":{"gte":1,"lte":5}}'
        >>> Range.textual("created", gte="01-01-2010", lte="31-12-2010",
        ...               format="dd-MM-yyyy").to_json()
        '{"created":{"gte":"01-01-2010","lte":"31-12-2010","format":"dd-MM-yyyy"}}'
    """

    query_type: ClassVar[QueryType] = QueryType.RANGE

    key: str
    gte: RangeBound | int | float | str | None = None
    gt: RangeBound | int | float | str | None = None
    lte: RangeBound | int | float | str | None = None
    lt: RangeBound | int | float | str | None = None
    boost: float | None = None
    format: str | None = None  # noqa: A003
    time_zone: str | None = None

    def __post_init__(self) -> None:
        _check_key(self.key)
        bounds = []
        for name in _BOUND_NAMES:
            bound = _to_bound(name, getattr(self, name))
            object.__setattr__(self, name, bound)
            if bound is not None:
                bounds.append(bound)

        kinds = {type(bound) for bound in bounds}
        if len(kinds) > 1:
            raise MixedRangeBoundsError(
                f"字段 {self.key} 的范围边界不能混用数值与文本"
            )
        if NumericBound in kinds and (self.format or self.time_zone):
            raise InvalidRangeBoundError("format / time_zone 只能用于文本边界")

    @classmethod
    def numeric(
        cls,
        key: str,
        gte: int | float | None = None,
        gt: int | float | None = None,
        lte: int | float | None = None,
        lt: int | float | None = None,
        boost: float | None = None,
    ) -> Range:
        """数值范围入口."""
        return cls(
            key,
            gte=None if gte is None else NumericBound(gte),
            gt=None if gt is None else NumericBound(gt),
            lte=None if lte is None else NumericBound(lte),
            lt=None if lt is None else NumericBound(lt),
            boost=boost,
        )

    @classmethod
    def textual(
        cls,
        key: str,
        gte: str | None = None,
        gt: str | None = None,
        lte: str | None = None,
        lt: str | None = None,
        boost: float | None = None,
        format: str | None = None,  # noqa: A002
        time_zone: str | None = None,
    ) -> Range:
        """文本范围入口（通常用于日期）."""
        return cls(
            key,
            gte=None if gte is None else TextualBound(gte),
            gt=None if gt is None else TextualBound(gt),
            lte=None if lte is None else TextualBound(lte),
            lt=None if lt is None else TextualBound(lt),
            boost=boost,
            format=format,
            time_zone=time_zone,
        )

    @property
    def is_numeric(self) -> bool:
        return any(
            isinstance(getattr(self, name), NumericBound) for name in _BOUND_NAMES
        )

    def to_dict(self) -> dict[str, Any]:
        pairs: list[tuple[str, Any]] = []
        for name in _BOUND_NAMES:
            bound = getattr(self, name)
            pairs.append((name, bound.value if bound is not None else None))
        pairs += [
            ("boost", self.boost),
            ("format", self.format),
            ("time_zone", self.time_zone),
        ]
        return DynamicKeyMap(self.key, _compact(pairs)).to_dict()

"""
搜索结果数据类型定义.

Result 镜像 ES 响应结构：result.hits.hits 是命中列表，
每个命中的 source 是一个 T（而不是 list[T]）。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Hit(Generic[T]):
    """
    单个命中.

    Attributes:
        source: 解码后的文档（对应响应中的 _source）
        id: 文档 ID（_id）
        index: 索引名（_index）
        score: 相关性得分（_score）
    """

    source: T
    id: str | None = None  # noqa: A003
    index: str | None = None
    score: float | None = None


@dataclass(frozen=True)
class Hits(Generic[T]):
    """
    命中集合.

    Attributes:
        hits: 按排名排列的命中列表
        total: 总命中数，兼容 6.x 的整数与 7.x+ 的 {"value": n} 两种格式
        max_score: 最高得分
    """

    hits: list[Hit[T]] = field(default_factory=list)
    total: int | None = None
    max_score: float | None = None


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    解码后的搜索响应.

    示例:
        result: Result[Product] = await client.search("product", container, Product)

        for product in result.sources():
            print(product.name)
    """

    hits: Hits[T] = field(default_factory=Hits)
    took: int | None = None
    timed_out: bool = False

    def sources(self) -> list[T]:
        """按命中顺序返回所有文档."""
        return [hit.source for hit in self.hits.hits]

    def __len__(self) -> int:
        return len(self.hits.hits)

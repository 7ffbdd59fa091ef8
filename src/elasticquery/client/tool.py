"""搜索客户端核心模块.

提供 SearchClient 类：持有目标服务地址和注入的 HTTP 传输，
构建请求（类型化查询或原始字典）、发送，并把响应映射为
Result[T] 或无类型字典。

使用示例:
    from elasticquery.client import ClientConfig, SearchClient
    from elasticquery.query import Fuzzy, Query, QueryContainer

    async with SearchClient.from_config(ClientConfig(server_url="http://localhost:9200")) as client:
        container = QueryContainer(Query(Fuzzy("name", "bolster", transpositions=True)))
        result = await client.search("product", container, Product)
        products = result.sources()
"""

from __future__ import annotations

import collections.abc
import logging
import typing
from collections.abc import Mapping
from typing import Any, TypeVar, Union
from urllib.parse import quote

from pydantic import PydanticSchemaGenerationError

from elasticquery.core.constants import DEFAULT_DOC_TYPE, JSON_CONTENT_TYPE
from elasticquery.core.encoding import dumps
from elasticquery.exceptions import SerializeError
from elasticquery.query.container import Query, QueryContainer
from elasticquery.query.primitives import QueryElement
from elasticquery.result.decoder import ResultDecoder, decode_generic
from elasticquery.result.models import Result
from elasticquery.typing import JSONObject, RawQuery

from .exceptions import (
    ClientConfigError,
    InvalidDecodeTargetError,
    InvalidEndpointError,
    RequestError,
)
from .models import ClientConfig
from .transport import HttpTransport, HttpxTransport, TransportResponse

# 模块级别日志记录器
logger = logging.getLogger(__name__)

T = TypeVar("T")

# 类型化查询或原始查询（字典，或提供 to_dict() 的对象，如 elasticsearch.dsl.Search）
SearchQuery = Union[QueryContainer, Query, QueryElement, RawQuery]

# 不允许作为解码目标的容器类型
_CONTAINER_TYPES = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Iterable,
)


class SearchClient:
    """ES 搜索客户端.

    每次调用只发出一个 HTTP 请求，不重试、不缓存；
    只有 HTTP 200 视为成功，其它状态码统一抛出 RequestError。

    Attributes:
        server_url: 目标服务地址
        default_type: 默认文档类型

    Examples:
        >>> client = SearchClient("http://localhost:9200", transport=HttpxTransport())
        >>> client.endpoint("product")
        'http://localhost:9200/product/_doc/_search'
    """

    def __init__(
        self,
        server_url: str,
        transport: HttpTransport,
        default_type: str = DEFAULT_DOC_TYPE,
    ) -> None:
        """初始化搜索客户端.

        Args:
            server_url: ES 服务地址
            transport: 注入的 HTTP 传输实现
            default_type: 默认文档类型，默认 "_doc"

        Raises:
            ClientConfigError: server_url 或 default_type 为空时抛出
        """
        if not server_url:
            raise ClientConfigError("server_url 不能为空，请提供 ES 服务地址")
        if not default_type:
            raise ClientConfigError("default_type 不能为空")
        self.server_url = server_url.rstrip("/")
        self.default_type = default_type
        self._transport = transport
        self._owns_transport = False

    @classmethod
    def from_config(cls, config: ClientConfig) -> SearchClient:
        """根据配置创建客户端，使用默认的 httpx 传输.

        Args:
            config: 客户端配置

        Returns:
            SearchClient 实例，关闭时会一并关闭内部创建的传输
        """
        client = cls(
            config.server_url,
            transport=HttpxTransport.from_config(config),
            default_type=config.default_type,
        )
        client._owns_transport = True
        return client

    # ============================================================
    # 搜索
    # ============================================================

    async def search(
        self,
        index: str,
        query: SearchQuery,
        decode_to: type[T],
        doc_type: str | None = None,
    ) -> Result[T]:
        """提交查询并把响应解码为 Result[T].

        注意：虽然通常期待得到一组结果（例如多个 Product），decode_to 也应该传
        Product 而不是 list[Product]，因为每个命中的 source 是单个文档。

        Args:
            index: 要搜索的索引
            query: QueryContainer（类型化路径）；也可以直接传 Query 或原语，
                或者在查询过于复杂时传入原始字典 / elasticsearch.dsl.Search
            decode_to: 单个文档的类型
            doc_type: 文档类型，默认使用 default_type

        Returns:
            解码后的 Result[T]

        Raises:
            InvalidDecodeTargetError: decode_to 是容器类型或无法生成校验模型
            InvalidEndpointError: index 或 doc_type 为空
            SerializeError: 查询无法序列化
            RequestError: 服务端返回非 200
            DecodeError: 响应不符合 Result[T] 的结构
        """
        decoder = self._build_decoder(decode_to)
        response = await self._post_search(index, query, doc_type)
        return decoder.decode(response.body)

    async def search_generic(
        self,
        index: str,
        query: SearchQuery,
        doc_type: str | None = None,
    ) -> JSONObject:
        """提交查询并返回无类型的响应字典.

        适用于结果结构无法静态确定的查询。

        Args:
            index: 要搜索的索引
            query: 同 search()
            doc_type: 文档类型，默认使用 default_type

        Returns:
            响应 JSON 对象

        Raises:
            InvalidEndpointError: index 或 doc_type 为空
            SerializeError: 查询无法序列化
            RequestError: 服务端返回非 200
            DecodeError: 响应体不是 JSON 对象
        """
        response = await self._post_search(index, query, doc_type)
        return decode_generic(response.body)

    # ============================================================
    # 请求构建
    # ============================================================

    def endpoint(self, index: str, doc_type: str | None = None) -> str:
        """构建 {server}/{index}/{type}/_search 地址.

        Args:
            index: 索引名，支持逗号分隔的多个索引与通配符
            doc_type: 文档类型，默认使用 default_type

        Returns:
            完整的请求地址

        Raises:
            InvalidEndpointError: index 或 doc_type 为空
        """
        doc_type = doc_type if doc_type is not None else self.default_type
        if not index:
            raise InvalidEndpointError("index 不能为空")
        if not doc_type:
            raise InvalidEndpointError("doc_type 不能为空")
        path = "/".join(quote(part, safe=",*") for part in (index, doc_type))
        return f"{self.server_url}/{path}/_search"

    def prepare_body(self, query: SearchQuery) -> bytes:
        """把查询编码为请求体.

        Query 或原语会先包装成 QueryContainer；其它对象需是字典或提供 to_dict()。

        Raises:
            SerializeError: 查询不是 JSON 对象或包含无法序列化的值
        """
        if isinstance(query, (Query, QueryElement)):
            query = QueryContainer(query)
        payload = query.to_dict() if hasattr(query, "to_dict") else query
        if not isinstance(payload, Mapping):
            raise SerializeError(
                f"查询必须是 JSON 对象，当前类型: {type(payload).__name__}"
            )
        return dumps(dict(payload))

    async def _post_search(
        self, index: str, query: SearchQuery, doc_type: str | None
    ) -> TransportResponse:
        url = self.endpoint(index, doc_type)
        body = self.prepare_body(query)
        headers = {"Content-Type": JSON_CONTENT_TYPE}

        logger.debug(f"发送搜索请求: {url}, 请求体 {len(body)} 字节")
        response = await self._transport.post(url, body, headers)

        if response.status != 200:
            logger.warning(f"搜索请求失败: {url}, HTTP 状态码: {response.status}")
            raise RequestError(response.status, response.body)
        return response

    @staticmethod
    def _build_decoder(decode_to: type[T]) -> ResultDecoder[T]:
        origin = typing.get_origin(decode_to) or decode_to
        if isinstance(origin, type) and origin in _CONTAINER_TYPES:
            raise InvalidDecodeTargetError(
                f"decode_to 应为单个文档类型而不是容器类型: {decode_to!r}"
            )
        try:
            return ResultDecoder(decode_to)
        except PydanticSchemaGenerationError as e:
            raise InvalidDecodeTargetError(
                f"无法为 decode_to 生成校验模型: {decode_to!r}"
            ) from e

    # ============================================================
    # 生命周期管理
    # ============================================================

    async def __aenter__(self) -> SearchClient:
        """异步上下文管理器入口."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """异步上下文管理器退出，关闭内部创建的传输."""
        await self.aclose()

    async def aclose(self) -> None:
        """关闭客户端.

        只关闭 from_config() 内部创建的传输，注入的传输由调用方管理。
        """
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

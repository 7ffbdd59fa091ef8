"""SearchClient 单元测试.

覆盖请求构建（地址、请求头、请求体）、类型化与泛型解码、
原始字典回退路径、错误映射以及生命周期管理。
"""

import asyncio
import json
from dataclasses import dataclass
from unittest.mock import AsyncMock

import httpx
import pytest
from elasticsearch.dsl import Search

from elasticquery.client import (
    ClientConfig,
    ClientConfigError,
    HttpxTransport,
    InvalidDecodeTargetError,
    InvalidEndpointError,
    RequestError,
    SearchClient,
    TransportResponse,
)
from elasticquery.exceptions import DecodeError, SerializeError
from elasticquery.query import (
    BoolQuery,
    Exists,
    MatchPhrase,
    Query,
    QueryContainer,
    Range,
)
from elasticquery.result import Result

SERVER = "http://localhost:9200"


@dataclass
class Product:
    name: str
    in_stock: int


def hits_body(*sources: dict) -> bytes:
    """构造只包含命中的响应体."""
    return json.dumps(
        {"hits": {"hits": [{"_source": source} for source in sources]}}
    ).encode()


@pytest.fixture
def transport() -> AsyncMock:
    """返回 200 且带一个命中的传输."""
    mock = AsyncMock()
    mock.post.return_value = TransportResponse(
        status=200, body=hits_body({"name": "bolster", "in_stock": 3})
    )
    return mock


@pytest.fixture
def client(transport) -> SearchClient:
    return SearchClient(SERVER, transport=transport)


@pytest.fixture
def container() -> QueryContainer:
    return QueryContainer(Query(MatchPhrase("name", "bolster")))


# ============================================================
# 请求构建
# ============================================================


class TestEndpoint:
    """endpoint 方法测试."""

    def test_default_type(self, client) -> None:
        """测试默认文档类型 _doc."""
        assert client.endpoint("product") == f"{SERVER}/product/_doc/_search"

    def test_custom_type(self, client) -> None:
        """测试自定义文档类型."""
        assert client.endpoint("product", "item") == f"{SERVER}/product/item/_search"

    def test_trailing_slash(self, transport) -> None:
        """测试服务地址末尾的斜杠."""
        client = SearchClient(SERVER + "/", transport=transport)
        assert client.endpoint("product") == f"{SERVER}/product/_doc/_search"

    def test_client_default_type(self, transport) -> None:
        """测试客户端级别的默认文档类型."""
        client = SearchClient(SERVER, transport=transport, default_type="recipe")
        assert client.endpoint("food") == f"{SERVER}/food/recipe/_search"

    def test_multi_index_and_wildcard(self, client) -> None:
        """测试多索引与通配符不被转义."""
        assert client.endpoint("logs-*,metrics") == f"{SERVER}/logs-*,metrics/_doc/_search"

    def test_path_component_escaped(self, client) -> None:
        """测试路径分量被转义."""
        assert client.endpoint("a/b") == f"{SERVER}/a%2Fb/_doc/_search"

    def test_empty_index(self, client) -> None:
        """测试空索引."""
        with pytest.raises(InvalidEndpointError, match="index"):
            client.endpoint("")

    def test_empty_type(self, client) -> None:
        """测试空文档类型."""
        with pytest.raises(InvalidEndpointError, match="doc_type"):
            client.endpoint("product", "")


class TestInit:
    """SearchClient 初始化测试."""

    def test_empty_server_url(self, transport) -> None:
        """测试空服务地址."""
        with pytest.raises(ClientConfigError):
            SearchClient("", transport=transport)

    def test_from_config(self) -> None:
        """测试从配置创建."""
        client = SearchClient.from_config(
            ClientConfig(server_url=SERVER, default_type="item")
        )
        assert client.server_url == SERVER
        assert client.default_type == "item"
        assert isinstance(client._transport, HttpxTransport)


class TestPrepareBody:
    """prepare_body 方法测试."""

    def test_container(self, client, container) -> None:
        """测试类型化查询."""
        assert client.prepare_body(container) == container.to_json().encode()

    def test_empty_container(self, client) -> None:
        """测试空信封."""
        assert client.prepare_body(QueryContainer()) == b"{}"

    def test_bare_query_wrapped(self, client) -> None:
        """测试 Query 与原语会被包装进信封."""
        expected = b'{"query":{"exists":{"field":"tags"}}}'
        assert client.prepare_body(Query(Exists("tags"))) == expected
        assert client.prepare_body(Exists("tags")) == expected

    def test_raw_dict(self, client) -> None:
        """测试原始字典."""
        body = client.prepare_body({"query": {"match": {"country_description": "Japan"}}})
        assert body == b'{"query":{"match":{"country_description":"Japan"}}}'

    def test_dsl_search(self, client) -> None:
        """测试 elasticsearch.dsl.Search 对象."""
        search = Search().query("match", title="pasta")
        assert json.loads(client.prepare_body(search)) == search.to_dict()

    def test_unserializable_raw_value(self, client) -> None:
        """测试原始字典中包含无法序列化的值."""
        with pytest.raises(SerializeError):
            client.prepare_body({"query": {"term": {"x": object()}}})

    def test_non_object_raw_query(self, client) -> None:
        """测试原始查询不是对象."""
        with pytest.raises(SerializeError, match="JSON 对象"):
            client.prepare_body([{"match_all": {}}])  # type: ignore[arg-type]

    def test_non_finite_raw_value(self, client) -> None:
        """测试原始字典中的 NaN 抛出 SerializeError 而不是生成非法 JSON."""
        with pytest.raises(SerializeError):
            client.prepare_body({"query": {"range": {"x": {"gte": float("nan")}}}})


# ============================================================
# 类型化搜索
# ============================================================


class TestSearch:
    """search 方法测试."""

    @pytest.mark.asyncio
    async def test_request(self, client, transport, container) -> None:
        """测试发出的请求."""
        await client.search("product", container, Product)

        transport.post.assert_awaited_once_with(
            f"{SERVER}/product/_doc/_search",
            b'{"query":{"match_phrase":{"name":"bolster"}}}',
            {"Content-Type": "application/json"},
        )

    @pytest.mark.asyncio
    async def test_one_hit(self, client, container) -> None:
        """测试 200 且一个命中时返回一个文档."""
        result = await client.search("product", container, Product)

        assert isinstance(result, Result)
        assert len(result.hits.hits) == 1
        assert result.hits.hits[0].source == Product("bolster", 3)
        assert result.sources() == [Product("bolster", 3)]

    @pytest.mark.asyncio
    async def test_custom_doc_type(self, client, transport, container) -> None:
        """测试指定文档类型."""
        await client.search("product", container, Product, doc_type="item")
        assert transport.post.await_args.args[0] == f"{SERVER}/product/item/_search"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [201, 400, 404, 500])
    async def test_non_200_raises_request_error(self, client, transport, container, status) -> None:
        """测试非 200 状态码抛出 RequestError，而不是返回部分结果."""
        transport.post.return_value = TransportResponse(
            status=status, body=hits_body({"name": "bolster", "in_stock": 3})
        )
        with pytest.raises(RequestError) as exc_info:
            await client.search("product", container, Product)

        assert exc_info.value.status == status

    @pytest.mark.asyncio
    async def test_request_error_keeps_body(self, client, transport, container) -> None:
        """测试 RequestError 保留响应体."""
        error_body = b'{"error": {"type": "index_not_found_exception"}, "status": 404}'
        transport.post.return_value = TransportResponse(status=404, body=error_body)

        with pytest.raises(RequestError) as exc_info:
            await client.search("missing", container, Product)

        assert exc_info.value.body == error_body
        assert "404" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_decode_error(self, client, transport, container) -> None:
        """测试响应结构不符时抛出 DecodeError."""
        transport.post.return_value = TransportResponse(
            status=200, body=hits_body({"title": "wrong shape"})
        )
        with pytest.raises(DecodeError):
            await client.search("product", container, Product)

    @pytest.mark.asyncio
    async def test_decode_error_on_invalid_json(self, client, transport, container) -> None:
        """测试响应体不是 JSON."""
        transport.post.return_value = TransportResponse(status=200, body=b"oops")
        with pytest.raises(DecodeError):
            await client.search("product", container, Product)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", [list[Product], tuple, set, list])
    async def test_container_decode_target_rejected(self, client, transport, container, target) -> None:
        """测试传入容器类型作为解码目标时在发送请求前失败."""
        with pytest.raises(InvalidDecodeTargetError):
            await client.search("product", container, target)

        transport.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_decode_target_rejected(self, client, transport, container) -> None:
        """测试无法生成校验模型的解码目标在发送请求前失败."""

        class Opaque:
            def __init__(self, handle) -> None:
                self.handle = handle

        with pytest.raises(InvalidDecodeTargetError):
            await client.search("product", container, Opaque)

        transport.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_construction_error_before_io(self, client, transport) -> None:
        """测试序列化失败时不会发送请求."""
        with pytest.raises(SerializeError):
            await client.search("product", {"query": object()}, Product)

        transport.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_raw_dict_query(self, client, transport) -> None:
        """测试原始字典查询解码为 Result."""
        query = {"query": {"fuzzy": {"name": {"value": "bolster", "fuzziness": "auto"}}}}
        result = await client.search("product", query, Product)

        assert result.sources() == [Product("bolster", 3)]
        assert json.loads(transport.post.await_args.args[1]) == query

    @pytest.mark.asyncio
    async def test_bool_query(self, client, transport) -> None:
        """测试嵌套 Bool 查询的请求体."""
        container = QueryContainer(
            Query(
                BoolQuery(
                    must=[MatchPhrase("name", "bolster")],
                    filter=[Range("in_stock", gte=1)],
                )
            )
        )
        await client.search("product", container, Product)

        assert transport.post.await_args.args[1] == (
            b'{"query":{"bool":{"must":[{"match_phrase":{"name":"bolster"}}],'
            b'"filter":[{"range":{"in_stock":{"gte":1}}}]}}}'
        )

    @pytest.mark.asyncio
    async def test_one_request_per_call(self, client, transport, container) -> None:
        """测试每次调用只发出一个请求."""
        await client.search("product", container, Product)
        await client.search("product", container, Product)

        assert transport.post.await_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_calls(self, transport) -> None:
        """测试并发调用互不干扰."""

        async def post(url, body, headers):
            name = "fast" if "fast" in url else "slow"
            if name == "slow":
                await asyncio.sleep(0.01)
            return TransportResponse(status=200, body=hits_body({"name": name, "in_stock": 1}))

        transport.post.side_effect = post
        client = SearchClient(SERVER, transport=transport)
        query = QueryContainer()

        slow, fast = await asyncio.gather(
            client.search("slow", query, Product),
            client.search("fast", query, Product),
        )

        assert slow.sources() == [Product("slow", 1)]
        assert fast.sources() == [Product("fast", 1)]


# ============================================================
# 泛型搜索
# ============================================================


class TestSearchGeneric:
    """search_generic 方法测试."""

    @pytest.mark.asyncio
    async def test_returns_dict(self, client, container) -> None:
        """测试返回无类型字典."""
        data = await client.search_generic("product", container)

        assert data == {"hits": {"hits": [{"_source": {"name": "bolster", "in_stock": 3}}]}}

    @pytest.mark.asyncio
    async def test_raw_dict(self, client, transport) -> None:
        """测试原始字典查询."""
        await client.search_generic("country", {"query": {"match": {"code": "JP"}}})

        transport.post.assert_awaited_once_with(
            f"{SERVER}/country/_doc/_search",
            b'{"query":{"match":{"code":"JP"}}}',
            {"Content-Type": "application/json"},
        )

    @pytest.mark.asyncio
    async def test_non_200(self, client, transport, container) -> None:
        """测试非 200."""
        transport.post.return_value = TransportResponse(status=500, body=b"")
        with pytest.raises(RequestError) as exc_info:
            await client.search_generic("product", container)

        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_non_object_body(self, client, transport, container) -> None:
        """测试响应体不是对象."""
        transport.post.return_value = TransportResponse(status=200, body=b"[1, 2]")
        with pytest.raises(DecodeError):
            await client.search_generic("product", container)


# ============================================================
# 端到端（httpx.MockTransport）
# ============================================================


class TestEndToEnd:
    """基于 httpx.MockTransport 的端到端测试."""

    @pytest.mark.asyncio
    async def test_match_phrase_search(self) -> None:
        """测试 MatchPhrase 查询得到一个解码后的文档."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "took": 2,
                    "timed_out": False,
                    "hits": {
                        "total": {"value": 1, "relation": "eq"},
                        "max_score": 0.8,
                        "hits": [
                            {
                                "_index": "product",
                                "_id": "42",
                                "_score": 0.8,
                                "_source": {"name": "bolster", "in_stock": 3},
                            }
                        ],
                    },
                },
            )

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = SearchClient(SERVER, transport=HttpxTransport(http_client))
        container = QueryContainer(Query(MatchPhrase("name", "bolster")))

        result = await client.search("product", container, Product)

        assert result.sources() == [Product("bolster", 3)]
        assert result.hits.hits[0].id == "42"
        assert result.hits.total == 1
        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert str(requests[0].url) == f"{SERVER}/product/_doc/_search"
        assert requests[0].headers["content-type"] == "application/json"
        assert requests[0].content == b'{"query":{"match_phrase":{"name":"bolster"}}}'
        await http_client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 500])
    async def test_error_status(self, status) -> None:
        """测试 404 / 500 抛出 RequestError."""
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(status, json={}))
        )
        client = SearchClient(SERVER, transport=HttpxTransport(http_client))

        with pytest.raises(RequestError) as exc_info:
            await client.search("product", QueryContainer(), Product)

        assert exc_info.value.status == status
        await http_client.aclose()


class TestLifecycle:
    """生命周期管理测试."""

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_transport(self) -> None:
        """测试 from_config 创建的传输在退出时关闭."""
        async with SearchClient.from_config(ClientConfig(server_url=SERVER)) as client:
            transport = client._transport

        assert transport._client.is_closed is True

    @pytest.mark.asyncio
    async def test_injected_transport_not_closed(self, transport) -> None:
        """测试注入的传输不会被关闭."""
        async with SearchClient(SERVER, transport=transport):
            pass

        transport.aclose.assert_not_awaited()

"""搜索客户端模块 - 构建请求、发送到 ES 的 _search 接口并解码响应.

主要组件:
    - SearchClient: 搜索客户端
    - ClientConfig: 客户端配置模型
    - HttpTransport / HttpxTransport: 传输协议与基于 httpx 的默认实现

使用示例:
    from elasticquery.client import ClientConfig, SearchClient

    client = SearchClient.from_config(ClientConfig(server_url="http://localhost:9200"))
    raw = await client.search_generic("product", {"query": {"match_all": {}}})
"""

from .exceptions import (
    ClientConfigError,
    InvalidDecodeTargetError,
    InvalidEndpointError,
    RequestError,
    SearchClientError,
)
from .models import ClientConfig
from .tool import SearchClient
from .transport import HttpTransport, HttpxTransport, TransportResponse, build_async_client

__all__ = [
    # 客户端
    "SearchClient",
    # 模型
    "ClientConfig",
    # 传输
    "HttpTransport",
    "HttpxTransport",
    "TransportResponse",
    "build_async_client",
    # 异常
    "SearchClientError",
    "ClientConfigError",
    "InvalidEndpointError",
    "InvalidDecodeTargetError",
    "RequestError",
]

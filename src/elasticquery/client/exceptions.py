"""搜索客户端异常定义模块."""

from ..exceptions import ElasticQueryError


class SearchClientError(ElasticQueryError):
    """搜索客户端基础异常类.

    所有客户端相关异常的基类，继承自 ElasticQueryError。
    """

    pass


class ClientConfigError(SearchClientError):
    """客户端配置校验异常.

    当配置参数不合法时抛出，例如 server_url 为空、request_timeout 小于 0 等。
    """

    pass


class InvalidEndpointError(SearchClientError):
    """请求地址无法构建，例如 index 或 type 为空."""

    pass


class InvalidDecodeTargetError(SearchClientError):
    """解码目标类型非法.

    Result 中每个命中的 source 是单个文档，调用方应传入元素类型（如 Product），
    而不是容器类型（如 list[Product]）。
    """

    pass


class RequestError(SearchClientError):
    """服务端返回非 200 状态码.

    Attributes:
        status: HTTP 状态码
        body: 原始响应体，便于排查
    """

    def __init__(self, status: int, body: bytes = b"") -> None:
        self.status = status
        self.body = body
        super().__init__(f"搜索请求失败，HTTP 状态码: {status}")

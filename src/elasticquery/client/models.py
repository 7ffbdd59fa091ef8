"""搜索客户端配置模型定义模块."""

from dataclasses import dataclass, field
from urllib.parse import urlsplit

from elasticquery.core.constants import DEFAULT_DOC_TYPE

from .exceptions import ClientConfigError


@dataclass
class ClientConfig:
    """客户端配置模型.

    定义目标服务地址以及默认 HTTP 传输层的参数。
    连接池、重试与认证由传输层负责，不在此配置。

    Attributes:
        server_url: ES 服务地址（必需），如 "http://localhost:9200"
        default_type: 默认文档类型，默认 "_doc"
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        verify_certs: 是否验证 SSL 证书，默认 True
        headers: 附加到每个请求的额外请求头

    Raises:
        ClientConfigError: 当参数不合法时抛出

    Examples:
        >>> config = ClientConfig(server_url="http://localhost:9200", request_timeout=10)
    """

    server_url: str = ""
    default_type: str = DEFAULT_DOC_TYPE
    request_timeout: float = 30
    verify_certs: bool = True
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """校验客户端配置参数合法性."""
        if not self.server_url:
            raise ClientConfigError("server_url 不能为空，请提供 ES 服务地址")
        parts = urlsplit(self.server_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ClientConfigError(
                f"server_url 必须是 http(s) 地址，当前值: {self.server_url}"
            )
        if not self.default_type:
            raise ClientConfigError("default_type 不能为空")
        if self.request_timeout < 0:
            raise ClientConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )

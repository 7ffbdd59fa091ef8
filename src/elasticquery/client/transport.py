"""HTTP 传输层模块.

SearchClient 只依赖 HttpTransport 协议："发送 JSON 字节，返回状态码与响应体"。
连接池、重试、认证、超时等都属于传输层，由注入的实现负责。

默认实现 HttpxTransport 基于 httpx.AsyncClient。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from .models import ClientConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """传输层返回的原始响应.

    Attributes:
        status: HTTP 状态码
        body: 响应体字节
        headers: 响应头
    """

    status: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)


class HttpTransport(Protocol):
    """HTTP 传输协议."""

    async def post(
        self, url: str, body: bytes, headers: Mapping[str, str]
    ) -> TransportResponse:
        """发送 POST 请求."""
        ...


def build_async_client(config: ClientConfig) -> httpx.AsyncClient:
    """根据客户端配置创建 httpx.AsyncClient.

    Args:
        config: 客户端配置

    Returns:
        httpx.AsyncClient 实例
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.request_timeout),
        verify=config.verify_certs,
        headers=dict(config.headers),
    )


class HttpxTransport:
    """基于 httpx.AsyncClient 的传输实现.

    传入的 client 由调用方管理生命周期；未传入时自行创建，并在 aclose() 时关闭。

    Examples:
        >>> transport = HttpxTransport(httpx.AsyncClient())
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    @classmethod
    def from_config(cls, config: ClientConfig) -> HttpxTransport:
        """根据配置创建传输实例（自行管理 client 生命周期）."""
        transport = cls(build_async_client(config))
        transport._owns_client = True
        return transport

    async def post(
        self, url: str, body: bytes, headers: Mapping[str, str]
    ) -> TransportResponse:
        response = await self._client.post(url, content=body, headers=dict(headers))
        logger.debug(f"POST {url} -> {response.status_code}")
        return TransportResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        """关闭自行创建的 client."""
        if self._owns_client:
            await self._client.aclose()

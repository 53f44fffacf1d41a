"""
Base Service Client for Remote Service Communication

所有远程服务客户端的基类，统一处理 HTTP 客户端管理
"""

import httpx
import logging
from typing import Optional, Dict, Any
from abc import ABC

logger = logging.getLogger(__name__)


class BaseServiceClient(ABC):
    """
    远程服务客户端基类

    自动处理：
    1. HTTP 客户端管理
    2. 默认 headers
    3. 可选超时控制

    使用示例：
        class SharingAuthorityClient(BaseServiceClient):
            service_name = "sharing_authority"

            async def fetch_roster(self, url: str, body: dict):
                response = await self.post(url, json=body)
                return response.json()
    """

    # 子类需要定义这些
    service_name: str = None  # 例如 "sharing_authority"

    def __init__(
        self,
        base_url: str = "",
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        初始化服务客户端

        Args:
            base_url: 服务基础URL（为空时每个请求使用完整URL）
            timeout: 请求超时时间（秒），None 使用 httpx 默认值
            headers: 额外的默认 headers
            client: 预先构造的 HTTP 客户端（测试注入）
        """
        if not self.service_name:
            raise ValueError(f"{self.__class__.__name__} must define 'service_name'")

        self.base_url = base_url.rstrip('/')

        default_headers = self._build_default_headers()
        if headers:
            default_headers.update(headers)

        if client is not None:
            self.client = client
        elif timeout is not None:
            self.client = httpx.AsyncClient(timeout=timeout, headers=default_headers)
        else:
            self.client = httpx.AsyncClient(headers=default_headers)

        logger.debug(f"Initialized {self.service_name} client: {self.base_url or '(full urls)'}")

    def _build_default_headers(self) -> Dict[str, str]:
        """
        构建默认请求headers

        Returns:
            Headers 字典
        """
        return {
            "Content-Type": "application/json",
            "User-Agent": f"album-service-client/{self.service_name}",
        }

    async def close(self):
        """关闭HTTP客户端"""
        await self.client.aclose()
        logger.debug(f"Closed {self.service_name} client")

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器退出"""
        await self.close()

    # ========================================
    # HTTP 方法封装
    # ========================================

    async def post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """POST 请求"""
        url = f"{self.base_url}{path}"
        response = await self.client.post(url, json=json, headers=headers)
        return response


__all__ = ["BaseServiceClient"]

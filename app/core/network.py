"""
网络模拟模块

数据全部存放在本地，API 调用通过这里注入人为延迟和随机失败，
模拟真实网络环境。失败判定可替换为自定义钩子，便于测试。
"""
import asyncio
import random
from typing import Callable, Optional

from fastapi import Request
from loguru import logger

from .config import Settings
from .exceptions import NetworkException


class NetworkSimulator:
    """
    网络延迟与故障注入器

    - 读操作：仅延迟
    - 写操作：延迟后按 failure_rate 概率抛出 NetworkException
    """

    def __init__(
        self,
        min_delay_ms: int = 200,
        max_delay_ms: int = 1200,
        failure_rate: float = 0.05,
        *,
        rng: Optional[random.Random] = None,
        should_fail: Optional[Callable[[], bool]] = None,
    ):
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()
        self._should_fail = should_fail

    @classmethod
    def from_settings(cls, settings: Settings) -> "NetworkSimulator":
        return cls(
            min_delay_ms=settings.network_min_delay_ms,
            max_delay_ms=settings.network_max_delay_ms,
            failure_rate=settings.network_failure_rate,
        )

    async def delay(self) -> None:
        """模拟网络延迟"""
        if self.max_delay_ms <= 0:
            return
        delay_ms = self._rng.uniform(self.min_delay_ms, self.max_delay_ms)
        await asyncio.sleep(delay_ms / 1000)

    def maybe_fail(self, operation: str = "write") -> None:
        """按失败率或自定义钩子决定是否抛出网络错误"""
        if self._should_fail is not None:
            failed = self._should_fail()
        else:
            failed = self._rng.random() < self.failure_rate
        if failed:
            logger.warning(f"模拟网络故障: {operation}")
            raise NetworkException()

    async def read(self) -> None:
        """读操作"""
        await self.delay()

    async def write(self, operation: str = "write") -> None:
        """写操作"""
        await self.delay()
        self.maybe_fail(operation)


def get_network(request: Request) -> NetworkSimulator:
    """
    网络模拟器依赖注入

    实例由 create_app 创建并挂载到 app.state.network
    """
    return request.app.state.network

"""延迟与单次请求超时的时钟抽象。

Live 客户端（超时 + 退避）与模拟客户端（模拟延迟）都不直接调用 asyncio 的计时原语，
而是通过 Scheduler，测试中可以换成只记录时长的假实现。
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Protocol, TypeVar


T = TypeVar("T")


class Scheduler(Protocol):
    async def sleep(self, seconds: float) -> None:
        ...

    async def run_with_timeout(self, awaitable: Awaitable[T], seconds: float) -> T:
        """等待 awaitable；超过期限则取消它并抛出 asyncio.TimeoutError。"""

        ...


class AsyncioScheduler:
    """基于当前事件循环的默认实现。"""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def run_with_timeout(self, awaitable: Awaitable[T], seconds: float) -> T:
        return await asyncio.wait_for(awaitable, timeout=seconds)

"""Live 模式 Provider：通过 HTTP 调用推理后端。

本模块负责：

1. 接收统一的 OutboundMessage，构造 POST {API_BASE_URL}{CHAT_ENDPOINT} 请求。
2. 每次尝试都在 TIMEOUT_MS 内完成，超时即取消本次请求。
3. 非 2xx、网络异常、响应体无法解析都视为可重试失败，
   按 2^(MAX_RETRIES - retries_remaining) 秒退避后重试。
4. 重试耗尽后抛出 ExhaustedRetriesError，不吞掉错误。
5. 成功时把响应 JSON 原样解析为 InboundReply。
"""

import asyncio
from typing import Optional

import httpx

from chat_core.config.settings import settings
from chat_core.domain.exceptions import (
    ExhaustedRetriesError,
    NetworkError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)
from chat_core.domain.models import InboundReply, OutboundMessage
from chat_core.infrastructure.logging.logger import logger
from chat_core.infrastructure.scheduling import AsyncioScheduler, Scheduler
from chat_core.providers.retry import RetryContext, backoff_delay_ms


class LiveChatClient:
    """推理后端 HTTP 客户端。

    - name: Provider 名称（供日志/调试使用）。
    - send: 对外统一调用入口，返回 InboundReply。
    """

    name = "live"

    def __init__(
        self,
        cfg=settings,
        scheduler: Optional[Scheduler] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        # Settings 里包含 base_url、endpoint、重试次数、超时等配置
        self._settings = cfg
        self._scheduler = scheduler or AsyncioScheduler()
        # transport 为空时使用 httpx 默认网络传输
        self._transport = transport

    @property
    def url(self) -> str:
        return self._settings.chat_url

    async def send(self, message: OutboundMessage) -> InboundReply:
        """发送一条消息，失败时按指数退避重试。"""

        max_retries = max(int(self._settings.max_retries), 0)
        ctx = RetryContext(
            url=self.url,
            options={
                "json": message.to_payload(),
                "headers": {"Content-Type": "application/json"},
            },
            retries_remaining=max_retries,
        )
        while True:
            attempt = max_retries - ctx.retries_remaining + 1
            try:
                reply = await self._attempt(ctx)
            except NetworkError as exc:
                if ctx.retries_remaining <= 0:
                    logger.error(
                        "Chat request failed, retries exhausted",
                        extra={"extra": {
                            "url": ctx.url,
                            "attempts": attempt,
                            "code": exc.code,
                            "conversation_id": message.conversation_id,
                        }},
                    )
                    raise ExhaustedRetriesError(attempts=attempt, last_error=exc, url=ctx.url) from exc
                delay_ms = backoff_delay_ms(max_retries, ctx.retries_remaining)
                logger.warning(
                    f"Retrying chat request, attempts left: {ctx.retries_remaining - 1}",
                    extra={"extra": {
                        "url": ctx.url,
                        "attempt": attempt,
                        "code": exc.code,
                        "backoff_ms": delay_ms,
                    }},
                )
                await self._scheduler.sleep(delay_ms / 1000)
                ctx.retries_remaining -= 1
                continue
            logger.info(
                "Chat reply received",
                extra={"extra": {"attempt": attempt, "conversation_id": message.conversation_id}},
            )
            return reply

    async def _attempt(self, ctx: RetryContext) -> InboundReply:
        """执行一次请求；所有失败都转换为 NetworkError 子类。"""

        timeout_s = self._settings.timeout_ms / 1000
        try:
            async with httpx.AsyncClient(
                timeout=timeout_s, trust_env=False, transport=self._transport
            ) as client:
                resp = await self._scheduler.run_with_timeout(
                    client.post(ctx.url, **ctx.options),
                    timeout_s,
                )
        except asyncio.TimeoutError:
            # 超时后请求已被取消，交给上层重试
            raise RequestTimeoutError(
                code="TIMEOUT",
                message=f"No response within {self._settings.timeout_ms} ms",
                http_status=504,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(code="TIMEOUT", message=str(e), http_status=504)
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接被拒绝等
            raise TransportError(code="NETWORK_ERROR", message=str(e), http_status=503)
        if not resp.is_success:
            raise TransportError(
                code="HTTP_ERROR",
                message=f"HTTP error! status: {resp.status_code}",
                http_status=resp.status_code,
            )
        try:
            return InboundReply.from_payload(resp.json())
        except ValueError as e:
            raise TransportError(code="INVALID_RESPONSE", message=f"Invalid JSON body: {e}", http_status=502)
        except ValidationError as e:
            raise TransportError(code="INVALID_RESPONSE", message=e.message, http_status=502)

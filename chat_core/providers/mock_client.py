"""模拟模式 Provider：不访问网络，按关键词返回预置回复。

对调用方而言与 LiveChatClient 行为一致（同样是 async，同样返回 InboundReply），
区别只在于延迟是随机模拟的、且永远不会失败。
"""

import random
from typing import Optional, Sequence

from chat_core.config.settings import settings
from chat_core.domain.models import InboundReply, OutboundMessage
from chat_core.infrastructure.logging.logger import logger
from chat_core.infrastructure.scheduling import AsyncioScheduler, Scheduler
from chat_core.providers.registry import DEFAULT_REPLY, DEFAULT_TRIGGERS, ReplyTrigger, find_trigger


MOCK_CONFIDENCE = 0.99


class SimulatedChatClient:
    name = "mock"

    def __init__(
        self,
        cfg=settings,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        triggers: Sequence[ReplyTrigger] = DEFAULT_TRIGGERS,
        default_reply: str = DEFAULT_REPLY,
    ):
        self._settings = cfg
        self._scheduler = scheduler or AsyncioScheduler()
        self._rng = rng or random.Random()
        self._triggers = tuple(triggers)
        self._default_reply = default_reply

    def latency_ms(self) -> float:
        """在 [min, max) 区间内取一个模拟网络延迟。"""

        low = self._settings.mock_min_latency_ms
        high = self._settings.mock_max_latency_ms
        return low + self._rng.random() * (high - low)

    async def send(self, message: OutboundMessage) -> InboundReply:
        delay_ms = self.latency_ms()
        await self._scheduler.sleep(delay_ms / 1000)
        trigger = find_trigger(message.message, self._triggers)
        logger.debug(
            "Simulated reply selected",
            extra={"extra": {
                "trigger": trigger.name if trigger else "default",
                "latency_ms": round(delay_ms),
            }},
        )
        return InboundReply(
            reply=trigger.reply if trigger else self._default_reply,
            conversation_id=message.conversation_id,
            confidence=MOCK_CONFIDENCE,
        )

"""Response Provider 入口：在 Live 与模拟模式之间做单点切换。"""

from typing import Optional

from chat_core.config.settings import settings
from chat_core.domain.conversation import StateManager
from chat_core.domain.models import InboundReply, OutboundMessage
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.base import ProviderClient


class ChatService:
    """把用户文本包装成 OutboundMessage 并交给当前模式的客户端。

    USE_MOCK 在每次调用时读取，一次调用内不会混用两种模式。
    """

    def __init__(
        self,
        state: StateManager,
        live: ProviderClient,
        simulated: ProviderClient,
        cfg=settings,
    ):
        self._state = state
        self._live = live
        self._simulated = simulated
        self._settings = cfg

    def build_message(self, user_text: str, client_timestamp: Optional[str] = None) -> OutboundMessage:
        if client_timestamp is None:
            return OutboundMessage(message=user_text, conversation_id=self._state.conversation_id)
        return OutboundMessage(
            message=user_text,
            conversation_id=self._state.conversation_id,
            client_timestamp=client_timestamp,
        )

    def select_client(self) -> ProviderClient:
        return self._simulated if self._settings.use_mock else self._live

    async def respond(self, user_text: str) -> InboundReply:
        message = self.build_message(user_text)
        client = self.select_client()
        logger.info(
            "Sending chat message",
            extra={"extra": {"provider": client.name, "conversation_id": message.conversation_id}},
        )
        return await client.send(message)

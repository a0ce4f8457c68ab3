"""Response Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护模拟模式的关键词触发表 (registry)。
- 提供 Live HTTP 客户端 (http_client) 与模拟客户端 (mock_client)。
- 重试上下文与退避计算 (retry)。
- 按 USE_MOCK 在两者之间切换的 ChatService (service)。
"""

from typing import Optional

from chat_core.config.settings import settings
from chat_core.domain.conversation import StateManager
from chat_core.infrastructure.scheduling import Scheduler
from chat_core.providers.http_client import LiveChatClient
from chat_core.providers.mock_client import SimulatedChatClient
from chat_core.providers.service import ChatService


def create_chat_service(
    state: StateManager,
    cfg=None,
    scheduler: Optional[Scheduler] = None,
) -> ChatService:
    """根据配置创建 ChatService，Live 与模拟客户端共用同一个 scheduler。"""

    cfg = cfg or settings
    return ChatService(
        state=state,
        live=LiveChatClient(cfg, scheduler=scheduler),
        simulated=SimulatedChatClient(cfg, scheduler=scheduler),
        cfg=cfg,
    )

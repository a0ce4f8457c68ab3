"""对外 API 服务模块。

提供组装 Widget 的简化函数接口供上层应用调用。
每次 build_widget 都会生成新的会话 ID 与唯一的 StateManager，
不使用模块级单例。
"""

from dataclasses import dataclass
from typing import Callable, Optional

from chat_core.config.settings import settings
from chat_core.domain.conversation import StateManager
from chat_core.infrastructure.logging.logger import logger
from chat_core.infrastructure.scheduling import Scheduler
from chat_core.providers import create_chat_service
from chat_core.widget.controller import ChatController
from chat_core.widget.render import ChatRenderer, TranscriptRenderer


@dataclass
class ChatWidget:
    state: StateManager
    controller: ChatController
    renderer: ChatRenderer


def build_widget(
    renderer_factory: Optional[Callable[[StateManager], ChatRenderer]] = None,
    cfg=None,
    scheduler: Optional[Scheduler] = None,
    conversation_id: Optional[str] = None,
) -> ChatWidget:
    """组装一个 Widget 实例。

    Args:
        renderer_factory: 接收 StateManager 并返回渲染器；默认使用 TranscriptRenderer。
        cfg: 配置对象（可选，默认使用全局 settings）。
        scheduler: 延迟/超时调度器（可选，测试中可注入假实现）。
        conversation_id: 指定会话 ID（可选，默认随机生成）。

    Returns:
        包含 state、controller、renderer 的 ChatWidget
    """
    cfg = cfg or settings
    state = StateManager(conversation_id=conversation_id)
    renderer = (renderer_factory or TranscriptRenderer)(state)
    state.bind(renderer)
    service = create_chat_service(state, cfg=cfg, scheduler=scheduler)
    controller = ChatController(state=state, service=service, renderer=renderer)
    logger.info(
        "Chat widget initialized",
        extra={"extra": {"conversation_id": state.conversation_id, "use_mock": bool(cfg.use_mock)}},
    )
    return ChatWidget(state=state, controller=controller, renderer=renderer)

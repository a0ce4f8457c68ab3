"""渲染协作者。

Controller 只依赖 ChatRenderer 协议；真实的 DOM / GUI 实现在核心之外。
TranscriptRenderer 是一个内存实现，用于示例脚本和测试：它记录消息流，
并在每次 update_ui_state() 时根据当前状态计算输入框与“正在输入”提示的开关。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Sequence

from chat_core.domain.conversation import StateManager
from chat_core.domain.models import Sender


class ChatRenderer(Protocol):
    def render_message(self, text: str, sender: Sender) -> None:
        ...

    def render_quick_prompts(self, prompts: Sequence[str]) -> None:
        ...

    def remove_quick_prompts(self) -> None:
        ...

    def update_ui_state(self) -> None:
        ...


@dataclass
class RenderedMessage:
    text: str
    sender: Sender


class TranscriptRenderer:
    """记录 Controller 渲染的全部内容。"""

    def __init__(self, state: StateManager):
        self._state = state
        self.messages: List[RenderedMessage] = []
        self.quick_prompts: List[str] = []
        self.input_enabled = True
        self.typing_indicator = False
        self.ui_updates = 0

    def render_message(self, text: str, sender: Sender) -> None:
        self.messages.append(RenderedMessage(text=text, sender=sender))

    def render_quick_prompts(self, prompts: Sequence[str]) -> None:
        self.quick_prompts = list(prompts)

    def remove_quick_prompts(self) -> None:
        self.quick_prompts = []

    def update_ui_state(self) -> None:
        is_loading = self._state.status == "loading"
        self.typing_indicator = is_loading
        self.input_enabled = not is_loading
        self.ui_updates += 1

    def by_sender(self, sender: Sender) -> List[str]:
        return [m.text for m in self.messages if m.sender == sender]

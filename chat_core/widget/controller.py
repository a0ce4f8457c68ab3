"""会话 Controller。

状态机：idle --submit--> loading --(success | failure)--> idle。

- 空白输入或已在 loading 时的提交被静默忽略（不排队、不报错），
  这是保证同一时刻最多一个在途请求的唯一机制。
- 用户消息在发起请求前就渲染（乐观渲染），快捷提示在首个请求发出前移除。
- 任何网络失败都只渲染一条通用系统消息，然后回到 idle，用户可以立即重试。
"""

from typing import Callable, Optional, Sequence

from chat_core.domain.conversation import StateManager
from chat_core.domain.exceptions import BusinessError
from chat_core.domain.models import InboundReply
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.base import ResponseProvider
from chat_core.utils import sanitize_html
from chat_core.widget.events import QuickPrompt, Submit, Toggle, WidgetEvent
from chat_core.widget.render import ChatRenderer


GREETING = (
    "Hi! I'm Le, Henrique's AI assistant. I'm connected to his knowledge base. "
    "What would you like to know about his system architectures, production metrics, "
    "or tech stack?"
)

QUICK_PROMPTS = (
    "Como você escala sistemas?",
    "Fale da arquitetura na Omni Saúde",
    "Qual o seu foco em GenAI?",
)

SYSTEM_ERROR_MESSAGE = (
    "Oops. Ocorreu um erro ao comunicar com o servidor de inferência. "
    "A conexão deve ser restaurada em breve."
)


class ChatController:
    """唯一允许在用户操作后修改会话状态的组件。"""

    def __init__(
        self,
        state: StateManager,
        service: ResponseProvider,
        renderer: ChatRenderer,
        sanitizer: Callable[[str], str] = sanitize_html,
        greeting: str = GREETING,
        quick_prompts: Sequence[str] = QUICK_PROMPTS,
    ):
        self._state = state
        self._service = service
        self._renderer = renderer
        self._sanitize = sanitizer
        self._greeting = greeting
        self._quick_prompts = tuple(quick_prompts)
        self._prompts_visible = False

    @property
    def state(self) -> StateManager:
        return self._state

    def init(self) -> None:
        """首次打开时渲染欢迎语与快捷提示，重复调用无效果。"""

        if self._state.is_initialized:
            return
        self._renderer.render_message(self._greeting, "bot")
        if self._quick_prompts:
            self._renderer.render_quick_prompts(list(self._quick_prompts))
            self._prompts_visible = True
        self._state.mark_initialized()

    def toggle(self) -> bool:
        is_open = not self._state.is_open
        self._state.set_open(is_open)
        if is_open:
            self.init()
        return is_open

    async def submit(self, text: Optional[str]) -> Optional[InboundReply]:
        cleaned = (text or "").strip()
        if not cleaned or self._state.status == "loading":
            return None

        safe_text = self._sanitize(cleaned)
        self._renderer.render_message(safe_text, "user")
        if self._prompts_visible:
            self._renderer.remove_quick_prompts()
            self._prompts_visible = False

        self._state.set_status("loading")
        try:
            reply = await self._service.respond(safe_text)
            self._renderer.render_message(reply.reply, "bot")
            return reply
        except BusinessError as e:
            logger.error(
                f"Chat failed: {e}",
                extra={"extra": {
                    "conversation_id": self._state.conversation_id,
                    "code": e.code,
                }},
            )
            self._renderer.render_message(SYSTEM_ERROR_MESSAGE, "system")
            return None
        except Exception:
            # 非预期错误同样只展示通用提示，不影响宿主页面
            logger.exception(
                "Unexpected chat failure",
                extra={"extra": {"conversation_id": self._state.conversation_id}},
            )
            self._renderer.render_message(SYSTEM_ERROR_MESSAGE, "system")
            return None
        finally:
            self._state.set_status("idle")

    async def quick_prompt(self, text: str) -> Optional[InboundReply]:
        return await self.submit(text)

    async def dispatch(self, event: WidgetEvent):
        if isinstance(event, Submit):
            return await self.submit(event.text)
        if isinstance(event, QuickPrompt):
            return await self.quick_prompt(event.text)
        if isinstance(event, Toggle):
            return self.toggle()
        raise TypeError(f"Unsupported widget event: {event!r}")

from dataclasses import dataclass, replace
from typing import Optional, Protocol

from chat_core.domain.exceptions import ValidationError
from chat_core.domain.models import STATUSES, Status
from chat_core.infrastructure.logging.logger import logger
from chat_core.utils import generate_uuid


@dataclass
class ConversationState:
    conversation_id: str
    status: Status = "idle"
    is_open: bool = False
    is_initialized: bool = False


class StateListener(Protocol):
    def update_ui_state(self) -> None:
        ...


class StateManager:
    """会话状态的唯一持有者。

    每个 Widget 生命周期内只构造一次，并显式传给 Controller 与渲染层。
    status 只能通过 set_status 修改，修改后同步通知 listener，
    保证渲染层在状态切换完成后不会读到旧值。
    """

    def __init__(self, conversation_id: Optional[str] = None, listener: Optional[StateListener] = None):
        self._state = ConversationState(conversation_id=conversation_id or generate_uuid())
        self._listener = listener

    def bind(self, listener: StateListener) -> None:
        self._listener = listener

    @property
    def state(self) -> ConversationState:
        """当前状态快照（副本），修改它不会影响内部状态。"""

        return replace(self._state)

    @property
    def conversation_id(self) -> str:
        return self._state.conversation_id

    @property
    def status(self) -> Status:
        return self._state.status

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def is_initialized(self) -> bool:
        return self._state.is_initialized

    def set_status(self, new_status: Status) -> None:
        if new_status not in STATUSES:
            raise ValidationError(code="INVALID_STATUS", message=f"Unknown status: {new_status!r}")
        previous = self._state.status
        self._state.status = new_status
        logger.debug(
            "Status changed",
            extra={"extra": {"from": previous, "to": new_status, "conversation_id": self.conversation_id}},
        )
        if self._listener is not None:
            self._listener.update_ui_state()

    def set_open(self, is_open: bool) -> None:
        self._state.is_open = is_open

    def mark_initialized(self) -> None:
        self._state.is_initialized = True

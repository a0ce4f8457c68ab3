"""统一的消息与状态数据模型。

本模块定义 Controller 与 Response Provider 之间按值传递的数据结构：

- OutboundMessage: 发往推理后端（或模拟器）的一条用户消息。
- InboundReply: 从后端解析出的回复，创建后不再修改。

两者都是不可变值对象，不存在共享的可变所有权。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Mapping

from chat_core.domain.exceptions import ValidationError


# 会话网络状态（与前端 StateManager 的 status 字段对应）
Status = Literal["idle", "loading", "error", "connected"]
STATUSES = ("idle", "loading", "error", "connected")

# 渲染消息的发送方
Sender = Literal["user", "bot", "system"]

# 出站消息 metadata.role 固定值
SENDER_ROLE = "recruiter"


def utc_timestamp() -> str:
    """返回 ISO-8601 格式的当前 UTC 时间，例如 2024-01-01T12:00:00.000Z。"""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class OutboundMessage:
    """一次发送的消息体。

    - message: 已经过 sanitize 的非空文本。
    - conversation_id: 客户端持有的会话 ID（对所有出站 metadata 具有权威性）。
    - client_timestamp: 发送时刻的 ISO-8601 时间戳。
    """

    message: str
    conversation_id: str
    client_timestamp: str = field(default_factory=utc_timestamp)
    role: str = SENDER_ROLE

    def __post_init__(self) -> None:
        if not self.message or not self.message.strip():
            raise ValidationError(code="EMPTY_MESSAGE", message="message must not be empty")

    def to_payload(self) -> Dict[str, Any]:
        """转换为后端约定的 JSON 请求体。"""

        return {
            "message": self.message,
            "conversation_id": self.conversation_id,
            "metadata": {
                "role": self.role,
                "client_timestamp": self.client_timestamp,
            },
        }


@dataclass(frozen=True)
class InboundReply:
    """后端（或模拟器）返回的回复。

    conversation_id 为服务端回传的值，原样保留，调用方不做对账。
    """

    reply: str
    conversation_id: str
    confidence: float

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "InboundReply":
        """解析成功响应体；字段缺失或类型不符时抛出 ValidationError。"""

        if not isinstance(data, Mapping):
            raise ValidationError(code="INVALID_RESPONSE", message="response body is not an object")
        reply = data.get("reply")
        conversation_id = data.get("conversation_id")
        confidence = data.get("confidence", 0.0)
        if not isinstance(reply, str) or not isinstance(conversation_id, str):
            raise ValidationError(code="INVALID_RESPONSE", message="reply/conversation_id missing")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            raise ValidationError(code="INVALID_RESPONSE", message="confidence is not a number")
        if not 0.0 <= float(confidence) <= 1.0:
            raise ValidationError(code="INVALID_RESPONSE", message=f"confidence out of range: {confidence}")
        return cls(reply=reply, conversation_id=conversation_id, confidence=float(confidence))

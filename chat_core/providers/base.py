"""Provider 抽象接口。

Controller 不直接依赖 HTTP 客户端或模拟器，而是依赖此协议：

- ProviderClient: 把 OutboundMessage 送出并返回 InboundReply（Live / Mock 各一个实现）。
- ResponseProvider: Controller 看到的入口，只接收已清洗的用户文本。

这样两种模式在接口边界上没有任何差别。
"""

from typing import Protocol

from chat_core.domain.models import InboundReply, OutboundMessage


class ProviderClient(Protocol):
    """单一模式的客户端协议。

    - name: Provider 名称，用于日志。
    - send(message): 执行一次（可能包含重试的）调用，返回 InboundReply。
    """

    name: str

    async def send(self, message: OutboundMessage) -> InboundReply:
        ...


class ResponseProvider(Protocol):
    async def respond(self, user_text: str) -> InboundReply:
        ...

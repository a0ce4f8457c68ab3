"""领域层模型与协议。

包含：
- models: OutboundMessage / InboundReply 值对象与状态枚举。
- conversation: 会话状态 ConversationState 及其唯一写入口 StateManager。
- exceptions: 业务异常类型定义。
"""

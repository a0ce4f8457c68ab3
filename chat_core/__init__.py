"""Chat Core 顶层包。

该包提供作品集网站聊天 Widget 的核心实现，
包括配置加载、会话状态机、带超时与指数退避重试的 HTTP Provider、
模拟回复 Provider，以及与渲染层解耦的会话 Controller。
"""

from chat_core.api.service import ChatWidget, build_widget

__all__ = ["ChatWidget", "build_widget"]

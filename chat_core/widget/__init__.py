"""会话 Controller、UI 事件与渲染协作者协议。"""

"""聊天 Widget 核心的最小控制台示例（默认使用模拟模式）。"""

import asyncio

from chat_core import build_widget


async def main() -> None:
    widget = build_widget()
    widget.controller.toggle()
    await widget.controller.quick_prompt("Como você escala sistemas?")
    await widget.controller.submit("E a arquitetura?")
    for m in widget.renderer.messages:
        print(f"[{m.sender}] {m.text}")


if __name__ == "__main__":
    asyncio.run(main())

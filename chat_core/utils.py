"""ID 生成与输入清洗工具。"""

import html
import random
from typing import Optional
from uuid import uuid4


_UUID_TEMPLATE = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"


def generate_uuid() -> str:
    """生成 v4 UUID 字符串。

    优先使用 uuid4（底层为 os.urandom）；当系统没有强随机源时
    （os.urandom 抛出 NotImplementedError），退回伪随机实现。
    """

    try:
        return str(uuid4())
    except NotImplementedError:
        return pseudo_random_uuid()


def pseudo_random_uuid(rng: Optional[random.Random] = None) -> str:
    """用伪随机数填充 v4 模板，y 位固定为 RFC-4122 variant (8, 9, a, b)。"""

    rng = rng or random.Random()
    chars = []
    for c in _UUID_TEMPLATE:
        if c == "x":
            chars.append(format(rng.randrange(16), "x"))
        elif c == "y":
            chars.append(format(rng.randrange(16) & 0x3 | 0x8, "x"))
        else:
            chars.append(c)
    return "".join(chars)


def sanitize_html(raw: str) -> str:
    """转义 &、<、>，保证文本在渲染层只会作为纯文本出现。"""

    return html.escape(raw, quote=False)

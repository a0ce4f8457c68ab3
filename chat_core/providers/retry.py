"""重试上下文与指数退避计算。

退避时长只取决于 (max_retries, retries_remaining)，
与网络调用解耦，便于单独验证延迟序列 1s, 2s, 4s, ...
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class RetryContext:
    """一次出站调用的重试状态，成功或耗尽后即丢弃。"""

    url: str
    options: Dict[str, Any] = field(default_factory=dict)
    retries_remaining: int = 0

    def __post_init__(self) -> None:
        if self.retries_remaining < 0:
            self.retries_remaining = 0


def backoff_delay_ms(max_retries: int, retries_remaining: int) -> int:
    """失败后、下一次尝试前的等待时长（毫秒）。"""

    return (2 ** (max_retries - retries_remaining)) * 1000


def backoff_schedule_ms(max_retries: int) -> List[int]:
    """在全部失败的情况下，依次产生的等待时长列表。"""

    return [backoff_delay_ms(max_retries, remaining) for remaining in range(max_retries, 0, -1)]

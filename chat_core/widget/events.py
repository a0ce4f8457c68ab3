"""ChatController.dispatch 消费的 UI 事件。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Submit:
    text: str


@dataclass(frozen=True)
class QuickPrompt:
    text: str


@dataclass(frozen=True)
class Toggle:
    pass


WidgetEvent = Union[Submit, QuickPrompt, Toggle]

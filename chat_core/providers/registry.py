"""模拟模式的关键词触发表。

模拟回复按“有序、首个命中即返回”的规则选择：
把用户消息转成小写后，依次检查每个触发器的关键词是否作为子串出现。
文案本身只是演示内容，可以随时替换；分发规则保持不变。"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class ReplyTrigger:
    """一条触发规则：任一关键词命中即返回 reply。"""

    name: str
    keywords: Tuple[str, ...]
    reply: str

    def matches(self, lowered_text: str) -> bool:
        return any(k in lowered_text for k in self.keywords)


DEFAULT_REPLY = (
    "A arquitetura está preparada para me conectar ao backend via REST em breve. "
    "Por enquanto, posso adiantar que Henrique é especialista em projetar sistemas LLM "
    "auditáveis, especialmente usando LangGraph e Pydantic."
)

DEFAULT_TRIGGERS: Tuple[ReplyTrigger, ...] = (
    ReplyTrigger(
        name="scale",
        keywords=("escala", "scale"),
        reply=(
            "Sobre escala: Na Omni Saúde, o sistema lida com +60.000 conversas por mês. "
            "Henrique utilizou FastAPI e Async I/O para garantir alta concorrência sem "
            "bloqueio de thread, suportando picos de tráfego com latência mínima."
        ),
    ),
    ReplyTrigger(
        name="architecture",
        keywords=("arquitetura", "architecture"),
        reply=(
            "A principal filosofia arquitetural do Henrique é 'Determinismo sobre "
            "Probabilidade'. Ele não faz apenas chamadas à API da OpenAI; ele constrói "
            "guardrails estritos usando Domain-Driven Design e validações tipadas para "
            "garantir outputs seguros."
        ),
    ),
    ReplyTrigger(
        name="omni",
        keywords=("omni",),
        reply=(
            "Na Omni Saúde, o grande impacto foi aumentar a resolução autônoma de tickets "
            "de 55% para 88%, reduzindo drasticamente a carga da equipe humana. Tudo isso "
            "com um fluxo Human-in-the-Loop em um ambiente altamente regulado."
        ),
    ),
)


def find_trigger(text: str, triggers: Sequence[ReplyTrigger] = DEFAULT_TRIGGERS) -> Optional[ReplyTrigger]:
    """返回第一个命中的触发器，无命中时返回 None。"""

    lowered = text.lower()
    for trigger in triggers:
        if trigger.matches(lowered):
            return trigger
    return None


"""统一的对话与结果数据模型。

本模块定义了在各个 Provider 之间共享的标准数据结构：

- ChatTurn: 一条经过校验的对话消息（system/user/assistant）。
- NormalizedRequest: 历史窗口裁剪、过滤之后的请求。
- ProviderReply: 任意 Provider（含规则兜底）产出的统一回复。

所有对象都是按请求创建、用完即弃的不可变值。
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple


# 消息角色类型（与 OpenAI / Ollama 的 role 字段对应）
Role = Literal["system", "user", "assistant"]

ROLES: Tuple[str, ...] = ("system", "user", "assistant")


@dataclass(frozen=True)
class ChatTurn:
    """一条对话消息。

    - role: 消息角色。
    - content: 已去除首尾空白的非空文本。
    """

    role: Role
    content: str


@dataclass(frozen=True)
class NormalizedRequest:
    """归一化后的请求。

    - turns: 按时间顺序排列（最新在最后）的历史消息，
      若有新消息，则已作为最后一条 user 消息追加。
    - new_message: 去除空白后的新消息，为空时为 None。
    """

    turns: Tuple[ChatTurn, ...] = field(default_factory=tuple)
    new_message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.turns and not self.new_message

    @property
    def last_user_text(self) -> str:
        """最近一条 user 消息文本，供规则兜底匹配使用。"""

        if self.new_message:
            return self.new_message
        for turn in reversed(self.turns):
            if turn.role == "user":
                return turn.content
        return ""


@dataclass(frozen=True)
class ProviderReply:
    """一次回复的最终结果。

    - text: 非空回复文本。
    - provider: 实际作答的档位名（"ollama" / "gemini" / "openai" / "rules"）。
    - model: 模型名。
    - fallback: 是否为规则兜底生成的固定回答。
    """

    text: str
    provider: str
    model: str
    fallback: bool = False

    def to_payload(self) -> dict:
        payload = {"message": self.text, "provider": self.provider, "model": self.model}
        if self.fallback:
            payload["fallback"] = True
        return payload

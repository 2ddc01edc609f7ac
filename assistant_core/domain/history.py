"""调用方历史消息的归一化。

调用方传来的 messages 是任意 JSON，这里只做过滤不做拒绝：
- 只保留最近 window 条（默认 12，最旧的先丢弃）；
- role 不区分大小写，只接受 system/user/assistant；
- 文本可来自 text 或 content 字段，去空白后为空则丢弃；
- 调用方提供的 system 消息一律丢弃，系统提示词由各 Provider 自行注入。
"""

from typing import Any, Iterable, List, Optional, Sequence

from assistant_core.domain.models import ROLES, ChatTurn, NormalizedRequest

DEFAULT_HISTORY_WINDOW = 12


def to_role(raw: Any) -> Optional[str]:
    role = str(raw or "").strip().lower()
    return role if role in ROLES else None


def _entry_text(entry: Any) -> str:
    if not isinstance(entry, dict):
        return ""
    text = entry.get("text")
    if not isinstance(text, str):
        text = entry.get("content")
    if not isinstance(text, str):
        return ""
    return text.strip()


def normalize_history(
    history: Optional[Sequence[Any]],
    message: Any = None,
    window: int = DEFAULT_HISTORY_WINDOW,
) -> NormalizedRequest:
    """把原始历史与新消息转换为 NormalizedRequest。"""

    entries = list(history) if isinstance(history, (list, tuple)) else []
    kept = entries[-window:] if window > 0 else []

    turns: List[ChatTurn] = []
    for entry in kept:
        role = to_role(entry.get("role") if isinstance(entry, dict) else None)
        content = _entry_text(entry)
        if not role or not content:
            continue
        if role == "system":
            continue
        turns.append(ChatTurn(role=role, content=content))

    new_message = message.strip() if isinstance(message, str) else ""
    if new_message:
        turns.append(ChatTurn(role="user", content=new_message))

    return NormalizedRequest(turns=tuple(turns), new_message=new_message or None)


def flatten_transcript(instruction: str, turns: Iterable[ChatTurn]) -> str:
    """拼接为纯文本对话记录，每行 "Role: text"，系统提示词在第一行。"""

    lines = [f"System: {instruction}"]
    for turn in turns:
        label = "Assistant" if turn.role == "assistant" else "User"
        lines.append(f"{label}: {turn.content}")
    return "\n".join(lines)

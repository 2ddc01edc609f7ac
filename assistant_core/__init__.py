"""Assistant Core 顶层包。

该包提供 NexaBuild 站内助手的聊天代理实现，
包括配置加载、历史消息归一化、多 Provider 适配、
档位选择编排、规则兜底以及 HTTP 接入层。
"""

from assistant_core.api.service import run_ai_chat

__all__ = ["run_ai_chat"]

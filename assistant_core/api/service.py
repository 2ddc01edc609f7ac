"""对外 API 服务模块。

提供简化的函数接口供上层应用调用。
"""

from typing import Any, Dict, Optional

from assistant_core.agents.chat_orchestrator import ChatOrchestrator, OrchestratorConfig
from assistant_core.config.settings import settings
from assistant_core.providers.registry import load_provider_configs


_orchestrator: Optional[ChatOrchestrator] = None


def build_orchestrator(cfg=settings) -> ChatOrchestrator:
    """按给定配置构造编排器，档位配置在此一次性冻结。"""

    return ChatOrchestrator(
        OrchestratorConfig(
            provider_configs=load_provider_configs(cfg),
            history_window=cfg.history_window,
        )
    )


def get_default_orchestrator() -> ChatOrchestrator:
    """获取默认的编排器实例（单例）。"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator(settings)
    return _orchestrator


async def run_ai_chat(
    message: Any = None,
    messages: Any = None,
    orchestrator: Optional[ChatOrchestrator] = None,
) -> Dict[str, Any]:
    """运行一次聊天请求。

    Args:
        message: 用户新消息（可选）
        messages: 历史消息列表，每项形如 {"role", "text"|"content"}（可选）
        orchestrator: 指定编排器（可选，默认使用单例）

    Returns:
        {"message", "provider", "model"}，规则兜底时额外带 "fallback": True

    Raises:
        ConfigurationError / UpstreamError，见 domain.exceptions
    """
    orch = orchestrator or get_default_orchestrator()
    reply = await orch.reply(message, messages)
    return reply.to_payload()

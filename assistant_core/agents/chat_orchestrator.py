"""聊天编排核心模块。

每个请求只做一次档位选择：
1. 按 PROVIDER_REGISTRY 的顺序，取第一个已配置的档位并调用；
2. 该档位的结果（成功或 UpstreamError）即最终结果，不会降级到下一个档位；
3. 一个档位都没有配置时，走规则兜底，且永不失败。

档位选择只看启动时冻结的 ProviderConfig，不看运行时的失败情况。
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from assistant_core.domain.exceptions import BusinessError, ConfigurationError
from assistant_core.domain.history import DEFAULT_HISTORY_WINDOW, normalize_history
from assistant_core.domain.models import NormalizedRequest, ProviderReply
from assistant_core.fallback import RULE_MODEL, RULE_PROVIDER, answer
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.prompts import load_system_prompt
from assistant_core.providers.base import ProviderClient, ProviderConfig
from assistant_core.providers.registry import get_descriptor


@dataclass
class OrchestratorConfig:
    provider_configs: Tuple[ProviderConfig, ...] = ()
    history_window: int = DEFAULT_HISTORY_WINDOW
    instruction: Optional[str] = None  # 为空时从 prompts 目录加载


class ChatOrchestrator:
    def __init__(
        self,
        config: Optional[OrchestratorConfig] = None,
        client_factory: Optional[Callable[[str], ProviderClient]] = None,
    ):
        self._config = config or OrchestratorConfig()
        self._client_factory = client_factory or (lambda name: get_descriptor(name).client_factory())
        self._instruction = self._config.instruction or load_system_prompt()

    @property
    def selected(self) -> Optional[ProviderConfig]:
        """本进程生效的档位配置；None 表示走规则兜底。"""

        configs = self._config.provider_configs
        return configs[0] if configs else None

    @property
    def selected_name(self) -> str:
        selected = self.selected
        return selected.kind if selected else RULE_PROVIDER

    async def reply(self, message: Any = None, history: Optional[Sequence[Any]] = None) -> ProviderReply:
        """处理一次聊天请求。

        Args:
            message: 新消息（非字符串视为缺省）。
            history: 原始历史消息列表（非列表视为缺省）。

        Raises:
            ConfigurationError: 选中的托管档位缺少密钥。
            UpstreamError: 选中的档位调用失败。
        """
        request = normalize_history(history, message, window=self._config.history_window)
        return await self.reply_normalized(request)

    async def reply_normalized(self, request: NormalizedRequest) -> ProviderReply:
        selected = self.selected
        logger.info(
            "chat.tier_selected",
            extra={"extra": {"provider": self.selected_name, "turns": len(request.turns)}},
        )
        if selected is None:
            reply = ProviderReply(
                text=answer(request.last_user_text),
                provider=RULE_PROVIDER,
                model=RULE_MODEL,
                fallback=True,
            )
        else:
            client = self._client_factory(selected.kind)
            try:
                reply = await client.generate(self._instruction, request.turns, selected)
            except BusinessError as e:
                event = "chat.config_error" if isinstance(e, ConfigurationError) else "chat.upstream_error"
                logger.error(
                    event,
                    extra={"extra": {"provider": selected.kind, "code": e.code, "error": e.message}},
                )
                raise
        logger.info(
            "chat.reply",
            extra={"extra": {"provider": reply.provider, "model": reply.model, "fallback": reply.fallback}},
        )
        return reply

    def describe(self) -> Dict[str, Any]:
        selected = self.selected
        return {
            "provider": self.selected_name,
            "model": selected.model if selected else RULE_MODEL,
        }
